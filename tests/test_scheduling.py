from __future__ import annotations

import asyncio

import pytest

from citypulse.application.scheduling import Debouncer, IntervalPoller


class _Recorder:
    def __init__(self, delay: float = 0.0) -> None:
        self.calls: list[float] = []
        self.delay = delay

    async def __call__(self) -> None:
        self.calls.append(asyncio.get_running_loop().time())
        if self.delay:
            await asyncio.sleep(self.delay)


@pytest.mark.asyncio
async def test_debouncer_collapses_burst_into_one_trailing_call() -> None:
    recorder = _Recorder()
    debouncer = Debouncer(0.1, recorder)
    loop = asyncio.get_running_loop()

    for _ in range(3):
        debouncer.trigger()
        last_trigger = loop.time()
        await asyncio.sleep(0.02)

    await asyncio.sleep(0.2)

    assert len(recorder.calls) == 1
    assert recorder.calls[0] - last_trigger >= 0.09
    await debouncer.aclose()


@pytest.mark.asyncio
async def test_debouncer_separate_bursts_fire_separately() -> None:
    recorder = _Recorder()
    debouncer = Debouncer(0.05, recorder)

    debouncer.trigger()
    await asyncio.sleep(0.12)
    debouncer.trigger()
    await asyncio.sleep(0.12)

    assert len(recorder.calls) == 2
    await debouncer.aclose()


@pytest.mark.asyncio
async def test_debouncer_cancel_drops_pending_call() -> None:
    recorder = _Recorder()
    debouncer = Debouncer(0.05, recorder)

    debouncer.trigger()
    assert debouncer.pending is True
    debouncer.cancel()
    await asyncio.sleep(0.1)

    assert recorder.calls == []
    assert debouncer.pending is False


@pytest.mark.asyncio
async def test_trigger_during_running_action_does_not_cancel_it() -> None:
    recorder = _Recorder(delay=0.1)
    completed: list[bool] = []

    async def _action() -> None:
        await recorder()
        completed.append(True)

    debouncer = Debouncer(0.02, _action)
    debouncer.trigger()
    await asyncio.sleep(0.05)  # action 실행 중
    debouncer.trigger()
    await asyncio.sleep(0.15)

    assert len(recorder.calls) == 2
    assert len(completed) == 2
    await debouncer.aclose()


@pytest.mark.asyncio
async def test_debouncer_aclose_prevents_late_calls() -> None:
    recorder = _Recorder()
    debouncer = Debouncer(0.05, recorder)

    debouncer.trigger()
    await debouncer.aclose()
    await asyncio.sleep(0.1)

    assert recorder.calls == []


def test_non_positive_intervals_are_rejected() -> None:
    async def _noop() -> None:
        return None

    with pytest.raises(ValueError):
        Debouncer(0, _noop)
    with pytest.raises(ValueError):
        IntervalPoller(-1, _noop)


@pytest.mark.asyncio
async def test_poller_runs_repeatedly_until_closed() -> None:
    recorder = _Recorder()
    poller = IntervalPoller(0.03, recorder)

    poller.start()
    poller.start()  # 중복 시작은 무시
    await asyncio.sleep(0.16)
    await poller.aclose()
    count = len(recorder.calls)
    await asyncio.sleep(0.1)

    assert count >= 3
    assert len(recorder.calls) == count
    assert poller.running is False


@pytest.mark.asyncio
async def test_poller_survives_failing_action() -> None:
    calls: list[int] = []

    async def _flaky() -> None:
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("first poll fails")

    poller = IntervalPoller(0.02, _flaky)
    poller.start()
    await asyncio.sleep(0.1)
    await poller.aclose()

    assert len(calls) >= 2


@pytest.mark.asyncio
async def test_poller_can_restart_after_close() -> None:
    recorder = _Recorder()
    poller = IntervalPoller(0.02, recorder)

    poller.start()
    await poller.aclose()
    poller.start()
    await asyncio.sleep(0.05)
    await poller.aclose()

    assert len(recorder.calls) >= 1
