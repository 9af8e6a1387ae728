"""이벤트 정의 및 Event Bus (옵저버 패턴)

SyncController가 상태 변경/실패를 발행하고, 프레젠테이션 레이어가 구독합니다.
이벤트는 순수 데이터 객체이며, 버스는 컨트롤러 인스턴스마다 하나씩 소유합니다.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from citypulse.common.logger import PipelineLogger
from citypulse.core.dto.internal.dashboard import DashboardView
from citypulse.core.types import SyncPhase

logger = PipelineLogger.get_logger("event_bus", "common")


@dataclass(frozen=True, slots=True)
class StateChangedEvent:
    """대시보드 상태 교체 이벤트 (새 뷰 모델 포함)"""

    view: DashboardView
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True, slots=True)
class FetchFailedEvent:
    """스냅샷 조회 실패 이벤트

    initial=True이면 최초 로드 실패로 폴백 데이터가 대신 표시됩니다.
    """

    exc: Exception
    phase: SyncPhase
    initial: bool
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True, slots=True)
class PushChannelClosedEvent:
    """변경 알림 스트림 종료 이벤트 (이후 폴링으로 전환)"""

    exc: Exception
    timestamp: datetime = field(default_factory=datetime.now)


class EventBus:
    """타입 기반 이벤트 버스

    특징:
    - 동기/비동기 핸들러 모두 지원
    - 핸들러 예외는 로깅 후 무시 (다른 핸들러와 발행자에 영향 없음)
    - on()이 반환하는 콜러블로 구독 해제
    """

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], Any]]] = {}

    async def emit(self, event: Any) -> None:
        """이벤트 발행 (등록 순서대로 실행)

        Args:
            event: 발행할 이벤트 객체
        """
        event_type = type(event)
        # 핸들러 안에서 구독 해제해도 순회가 깨지지 않도록 복사본 사용
        handlers = list(self._handlers.get(event_type, []))

        for handler in handlers:
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(
                    f"Event handler failed: {e}",
                    exc_info=True,
                    extra={
                        "event_type": event_type.__name__,
                        "handler": getattr(handler, "__name__", repr(handler)),
                    },
                )

    def on(self, event_type: type, handler: Callable[[Any], Any]) -> Callable[[], None]:
        """핸들러 등록

        Args:
            event_type: 이벤트 타입 (클래스)
            handler: 핸들러 함수 (def 또는 async def)

        Returns:
            호출하면 해당 핸들러를 해제하는 함수
        """
        self._handlers.setdefault(event_type, []).append(handler)

        def _unsubscribe() -> None:
            self.off(event_type, handler)

        return _unsubscribe

    def off(self, event_type: type, handler: Callable[[Any], Any]) -> None:
        """핸들러 해제 (등록되지 않은 핸들러는 무시)"""
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def handler_count(self, event_type: type) -> int:
        return len(self._handlers.get(event_type, []))

    def clear(self) -> None:
        """모든 핸들러 제거"""
        self._handlers.clear()


__all__ = [
    "EventBus",
    "FetchFailedEvent",
    "PushChannelClosedEvent",
    "StateChangedEvent",
]
