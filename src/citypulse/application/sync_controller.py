"""라이브 스냅샷 동기화 컨트롤러

상태 전이:
    IDLE → LOADING   start(): 전체 스냅샷 조회
    LOADING → LIVE   조회 성공: 스냅샷 저장, loading=False, 알림 스트림 구독
    LOADING → DEGRADED  조회 실패: 내장 폴백 데이터 표시, 주기 폴링 시작
    LIVE → DEGRADED  스트림 오류/종료: 스트림을 닫고 주기 폴링으로 전환
    any → LOADING    retry(): 수동 재시도
    any → STOPPED    shutdown()

DEGRADED는 정상 상태입니다. 스트림 재구독은 자동으로 하지 않으며
(푸시 실패는 재시도가 아니라 폴링으로 영구 전환), retry()로만 다시 시도합니다.

동시 조회(예: 폴링과 디바운스가 겹친 경우)는 막지 않습니다. 먼저 끝난 결과를
나중에 끝난 결과가 덮어쓰며(last-write-wins), 지표 데이터는 결국 일관되므로
이 경쟁은 허용합니다.

전이(_load/_degrade)는 리스너 통지를 await하는 동안 retry()/shutdown()이
끼어들 수 있습니다. 전이 세대(_epoch)가 바뀌면 진행 중인 전이는 폴링 시작이나
스트림 구독 없이 즉시 중단합니다.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping
from dataclasses import replace
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Protocol

from citypulse.application.fallback import FALLBACK_SNAPSHOT
from citypulse.application.scheduling import Debouncer, IntervalPoller
from citypulse.common.events import (
    EventBus,
    FetchFailedEvent,
    PushChannelClosedEvent,
    StateChangedEvent,
)
from citypulse.common.exceptions import PushChannelError, SnapshotFetchError
from citypulse.common.logger import PipelineLogger
from citypulse.core.aggregate.aggregator import aggregate
from citypulse.core.dto.internal.dashboard import DashboardState, DashboardView
from citypulse.core.dto.internal.live import LiveEvent
from citypulse.core.projection import build_view
from citypulse.core.types import RawSnapshot, SyncPhase, ViewMode

logger = PipelineLogger.get_logger("sync_controller", "sync")

ViewCallback = Callable[[DashboardView], Awaitable[None] | None]


class SnapshotFetcher(Protocol):
    async def fetch_all(self) -> Mapping[str, str]: ...


class LiveEventSource(Protocol):
    def events(self) -> AsyncIterator[LiveEvent]: ...

    async def close(self) -> None: ...


class SyncController:
    """DashboardState의 유일한 소유자

    책임:
    - 최초 로드 및 폴백 데이터 대체
    - 변경 알림 스트림 구독 + 디바운스 재조회
    - 스트림 실패 시 주기 폴링
    - 구독자(프레젠테이션)에게 뷰 모델 통지
    """

    def __init__(
        self,
        client: SnapshotFetcher,
        channel: LiveEventSource,
        *,
        debounce_ms: int = 1000,
        poll_interval_ms: int = 10_000,
        fallback_snapshot: RawSnapshot = FALLBACK_SNAPSHOT,
        view_mode: ViewMode | str = ViewMode.GRID,
        event_bus: EventBus | None = None,
    ) -> None:
        self._client = client
        self._channel = channel
        self._fallback: RawSnapshot = MappingProxyType(dict(fallback_snapshot))
        self._bus = event_bus or EventBus()

        self._debouncer = Debouncer(
            debounce_ms / 1000, self.refresh, name="snapshot-debounce"
        )
        self._poller = IntervalPoller(
            poll_interval_ms / 1000, self.refresh, name="snapshot-poller"
        )
        self._listener_task: asyncio.Task[None] | None = None

        self._snapshot: RawSnapshot = MappingProxyType({})
        self._state = DashboardState(view_mode=ViewMode(view_mode))
        self._closed = False
        # 전이 세대: 소스 정리/재로드 때마다 증가. await 이후 값이 바뀌었으면
        # 다른 전이(retry/shutdown)가 끼어든 것이므로 진행 중인 전이는 중단
        self._epoch = 0

    # ------------------------------------------------------------------
    # 조회 API
    # ------------------------------------------------------------------
    @property
    def state(self) -> DashboardState:
        return self._state

    @property
    def phase(self) -> SyncPhase:
        return self._state.phase

    @property
    def snapshot(self) -> RawSnapshot:
        return self._snapshot

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def is_polling(self) -> bool:
        return self._poller.running

    @property
    def is_subscribed(self) -> bool:
        return self._listener_task is not None and not self._listener_task.done()

    def view(self) -> DashboardView:
        return build_view(self._state)

    def subscribe(self, callback: ViewCallback) -> Callable[[], None]:
        """상태가 바뀔 때마다 DashboardView를 받을 콜백을 등록합니다.

        Returns:
            구독 해제 함수
        """

        def _on_state_changed(event: StateChangedEvent) -> Any:
            return callback(event.view)

        _on_state_changed.__name__ = getattr(callback, "__name__", "view_callback")
        return self._bus.on(StateChangedEvent, _on_state_changed)

    # ------------------------------------------------------------------
    # 라이프사이클
    # ------------------------------------------------------------------
    async def start(self) -> None:
        """IDLE → LOADING. 최초 스냅샷을 조회합니다."""
        if self._closed:
            raise RuntimeError("SyncController is already shut down")
        if self._state.phase is not SyncPhase.IDLE:
            logger.warning(f"이미 시작된 컨트롤러입니다 (phase={self._state.phase})")
            return
        await self._load()

    async def retry(self) -> None:
        """수동 재시도: 현재 상태와 무관하게 LOADING 경로로 재진입합니다."""
        if self._closed:
            logger.warning("종료된 컨트롤러에 대한 재시도 요청 무시")
            return
        logger.info(f"수동 재시도 요청 (phase={self._state.phase})")
        await self._stop_sources()
        await self._load()

    async def shutdown(self) -> None:
        """스트림을 닫고 모든 예약 작업을 취소합니다. 이후 콜백은 실행되지 않습니다."""
        if self._closed:
            return
        self._closed = True
        await self._stop_sources()
        self._state = replace(self._state, phase=SyncPhase.STOPPED)
        logger.info("동기화 컨트롤러 종료 완료")

    async def set_view_mode(self, mode: ViewMode | str) -> None:
        view_mode = ViewMode(mode)
        if view_mode is self._state.view_mode:
            return
        self._state = replace(self._state, view_mode=view_mode)
        await self._publish()

    async def toggle_view_mode(self) -> None:
        next_mode = ViewMode.LIST if self._state.view_mode is ViewMode.GRID else ViewMode.GRID
        await self.set_view_mode(next_mode)

    # ------------------------------------------------------------------
    # 조회/반영
    # ------------------------------------------------------------------
    async def refresh(self) -> None:
        """전체 스냅샷 재조회 (디바운스/폴링 공용).

        실패 시 마지막으로 성공한 상태를 유지합니다.
        """
        if self._closed:
            return
        epoch = self._epoch

        try:
            snapshot = await self._client.fetch_all()
        except SnapshotFetchError as e:
            if self._superseded(epoch):
                return
            logger.warning(f"스냅샷 재조회 실패, 기존 상태 유지 - {e}", phase=self._state.phase)
            await self._bus.emit(FetchFailedEvent(exc=e, phase=self._state.phase, initial=False))
            return

        if self._superseded(epoch):
            return
        await self._apply_snapshot(snapshot, phase=self._state.phase, is_fallback=False)

    def _superseded(self, epoch: int) -> bool:
        """종료되었거나 epoch 이후 다른 전이가 시작되었는지 여부"""
        return self._closed or self._epoch != epoch

    async def _load(self) -> None:
        self._epoch += 1
        epoch = self._epoch
        self._state = replace(self._state, loading=True, phase=SyncPhase.LOADING)
        await self._publish()
        if self._superseded(epoch):
            return

        try:
            snapshot = await self._client.fetch_all()
        except SnapshotFetchError as e:
            if self._superseded(epoch):
                return
            logger.warning(f"최초 스냅샷 조회 실패, 폴백 데이터 사용 - {e}")
            await self._bus.emit(FetchFailedEvent(exc=e, phase=SyncPhase.LOADING, initial=True))
            if self._superseded(epoch):
                return
            await self._apply_snapshot(self._fallback, phase=SyncPhase.DEGRADED, is_fallback=True)
            if self._superseded(epoch):
                return
            self._poller.start()
            return

        if self._superseded(epoch):
            return
        await self._apply_snapshot(snapshot, phase=SyncPhase.LIVE, is_fallback=False)
        if self._superseded(epoch):
            return
        self._open_channel()

    async def _apply_snapshot(
        self, snapshot: Mapping[str, str], *, phase: SyncPhase, is_fallback: bool
    ) -> None:
        """스냅샷 통째 교체 → 집계 → 상태 교체 → 통지"""
        self._snapshot = MappingProxyType(dict(snapshot))
        cities = aggregate(self._snapshot)
        self._state = replace(
            self._state,
            loading=False,
            cities=MappingProxyType(cities),
            phase=phase,
            is_fallback=is_fallback,
            updated_at=datetime.now(timezone.utc),
        )
        logger.debug(
            f"스냅샷 반영: cities={len(cities)}, keys={len(self._snapshot)}",
            phase=phase,
            is_fallback=is_fallback,
        )
        await self._publish()

    async def _publish(self) -> None:
        if self._closed:
            return
        await self._bus.emit(StateChangedEvent(view=self.view()))

    # ------------------------------------------------------------------
    # 알림 스트림
    # ------------------------------------------------------------------
    def _open_channel(self) -> None:
        if self._closed or self.is_subscribed:
            return
        self._listener_task = asyncio.create_task(self._listen(), name="live-channel-listener")

    async def _listen(self) -> None:
        try:
            async for event in self._channel.events():
                if not event.triggers_refresh:
                    logger.debug(f"재조회 대상이 아닌 이벤트 무시: {event.event}")
                    continue
                self._debouncer.trigger()
        except PushChannelError as e:
            logger.warning(f"변경 알림 스트림 실패, 폴링으로 전환 - {e}")
            await self._degrade(e)
        except Exception as e:
            logger.error(f"변경 알림 스트림 처리 중 예기치 않은 오류 - {e}", exc_info=True)
            await self._degrade(e)

    async def _degrade(self, exc: Exception) -> None:
        """LIVE → DEGRADED. 스트림은 다시 열지 않습니다."""
        if self._closed:
            return
        epoch = self._epoch
        self._listener_task = None
        await self._channel.close()
        if self._superseded(epoch):
            return
        self._debouncer.cancel()

        self._state = replace(self._state, phase=SyncPhase.DEGRADED)
        await self._bus.emit(PushChannelClosedEvent(exc=exc))
        if self._superseded(epoch):
            return
        self._poller.start()
        await self._publish()

    async def _stop_sources(self) -> None:
        """스트림 리스너, 디바운스, 폴링을 모두 정리합니다."""
        self._epoch += 1
        listener, self._listener_task = self._listener_task, None
        if listener is not None and listener is not asyncio.current_task() and not listener.done():
            listener.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await listener

        await self._channel.close()
        await self._debouncer.aclose()
        await self._poller.aclose()
