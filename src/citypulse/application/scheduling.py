"""SyncController가 소유하는 예약 작업 핸들 (디바운스, 주기 폴링)

각 핸들은 자신이 만든 asyncio.Task를 모두 추적하고, cancel()/aclose()로
한 번에 정리합니다. 정리 이후에는 어떤 콜백도 실행되지 않습니다.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable, Iterable

from citypulse.common.logger import PipelineLogger

logger = PipelineLogger.get_logger("scheduling", "sync")

AsyncAction = Callable[[], Awaitable[None]]


async def cancel_tasks(tasks: Iterable[asyncio.Task]) -> None:
    """태스크를 취소하고 종료를 기다립니다. 현재 실행 중인 태스크 자신은 건너뜁니다."""
    current = asyncio.current_task()
    pending = [task for task in tasks if task is not current and not task.done()]

    for task in pending:
        task.cancel()

    for task in pending:
        with contextlib.suppress(asyncio.CancelledError):
            await task


class Debouncer:
    """Trailing-edge 디바운스

    trigger()가 delay 안에 여러 번 호출되면 마지막 호출만 남고 이전 타이머는
    취소됩니다. 대기가 끝난 뒤 실행 중인 action은 새 trigger로 취소되지 않습니다.
    """

    def __init__(self, delay: float, action: AsyncAction, *, name: str = "debounce") -> None:
        if delay <= 0:
            raise ValueError(f"debounce delay must be positive: {delay}")
        self.delay = delay
        self.name = name
        self._action = action
        self._timer: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._firing: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> bool:
        """대기 중인 타이머 여부"""
        return self._timer is not None and self._timer not in self._firing and not self._timer.done()

    def trigger(self) -> None:
        """타이머를 (재)시작합니다. 대기 중인 이전 타이머는 취소됩니다."""
        if self.pending:
            self._timer.cancel()  # type: ignore[union-attr]

        task = asyncio.create_task(self._run(), name=self.name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._timer = task

    async def _run(self) -> None:
        await asyncio.sleep(self.delay)

        task = asyncio.current_task()
        if task is not None:
            self._firing.add(task)
        try:
            await self._action()
        except Exception as e:
            logger.error(f"{self.name}: 디바운스 작업 실패 - {e}", exc_info=True)
        finally:
            if task is not None:
                self._firing.discard(task)

    def cancel(self) -> None:
        """대기 중인 타이머만 취소합니다 (실행 중인 action은 유지)."""
        if self.pending:
            self._timer.cancel()  # type: ignore[union-attr]
        self._timer = None

    async def aclose(self) -> None:
        """대기/실행 중인 모든 태스크를 취소하고 종료를 기다립니다."""
        self._timer = None
        await cancel_tasks(list(self._tasks))


class IntervalPoller:
    """고정 주기 폴링 루프

    start() 후 interval마다 action을 실행합니다 (첫 실행도 interval 이후).
    action 예외는 로깅만 하고 루프는 계속됩니다.
    """

    def __init__(self, interval: float, action: AsyncAction, *, name: str = "poller") -> None:
        if interval <= 0:
            raise ValueError(f"poll interval must be positive: {interval}")
        self.interval = interval
        self.name = name
        self._action = action
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name=self.name)
        logger.info(f"{self.name}: 폴링 시작 (interval={self.interval:.3f}s)")

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self._action()
            except Exception as e:
                logger.error(f"{self.name}: 폴링 작업 실패 - {e}", exc_info=True)

    async def aclose(self) -> None:
        """루프를 취소하고 종료를 기다립니다. 이후 start()로 다시 시작할 수 있습니다."""
        task, self._task = self._task, None
        if task is None:
            return
        await cancel_tasks([task])
        logger.info(f"{self.name}: 폴링 중단")
