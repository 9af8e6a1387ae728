"""애플리케이션 진입점 (DI Container 기반)

City Pulse 라이브 지표 대시보드 엔진
- 최초 스냅샷 로드 (실패 시 내장 샘플 데이터)
- 변경 알림 스트림 기반 재조회 (디바운스)
- 스트림 실패 시 주기 폴링
- 콘솔 소비자가 갱신된 뷰 모델을 출력

Usage:
    python main.py
    BACKEND_BASE_URL=http://dashboard-api:3000 python main.py
"""

import asyncio
import signal

from citypulse.application.sync_controller import SyncController
from citypulse.common.events import FetchFailedEvent, PushChannelClosedEvent
from citypulse.common.logger import PipelineLogger
from citypulse.config.containers import ApplicationContainer
from citypulse.config.settings import app_settings, backend_settings
from citypulse.core.dto.internal.dashboard import DashboardView

logger = PipelineLogger.get_logger("main", "app")


def render_view(view: DashboardView) -> list[str]:
    """뷰 모델을 콘솔 출력 라인으로 변환합니다."""
    state = view.state
    summary = view.summary
    demo = " [DEMO DATA]" if state.is_fallback else ""
    lines = [
        f"[{state.phase}] {state.view_mode} view - "
        f"cities={summary.city_count} metrics={summary.metric_count}{demo}"
    ]
    if view.status_message:
        lines.append(view.status_message)
        return lines

    for group in state.cities.values():
        lines.append(group.title)
        for metric in group.metrics:
            unit = f" {metric.unit}" if metric.unit else ""
            lines.append(
                f"  {metric.display_name}: {metric.raw_value}{unit} ({metric.severity_color})"
            )
    return lines


class Application:
    """애플리케이션 메인 클래스

    책임:
    - DI Container 관리
    - 콘솔 소비자 및 실패 이벤트 리스너 등록
    - SyncController 실행
    - Graceful Shutdown
    """

    def __init__(self) -> None:
        self.container = ApplicationContainer()
        self.controller: SyncController | None = None
        self._stop_event = asyncio.Event()

    def _on_view(self, view: DashboardView) -> None:
        for line in render_view(view):
            logger.info(line)

    def _on_fetch_failed(self, event: FetchFailedEvent) -> None:
        if event.initial:
            logger.warning("백엔드에 연결할 수 없어 샘플 데이터를 표시합니다")

    def _on_push_closed(self, event: PushChannelClosedEvent) -> None:
        logger.warning(f"실시간 알림이 중단되어 폴링 모드로 동작합니다: {event.exc}")

    async def initialize(self) -> None:
        """Resource 초기화 후 컨트롤러를 가져와 소비자를 등록합니다."""
        logger.info(
            f"City Pulse 대시보드 엔진 시작 (env={app_settings.environment}, "
            f"backend={backend_settings.base_url})"
        )
        await self.container.init_resources()

        self.controller = await self.container.sync_controller()
        self.controller.subscribe(self._on_view)
        self.controller.event_bus.on(FetchFailedEvent, self._on_fetch_failed)
        self.controller.event_bus.on(PushChannelClosedEvent, self._on_push_closed)
        logger.info("✅ SyncController 준비 완료")

    def request_stop(self) -> None:
        self._stop_event.set()

    async def run(self) -> None:
        """최초 로드 후 종료 요청까지 대기합니다."""
        if self.controller is None:
            raise RuntimeError("initialize() must be called first")
        await self.controller.start()
        await self._stop_event.wait()

    async def shutdown(self) -> None:
        """Graceful Shutdown

        Flow:
        1. 컨트롤러 정리 (스트림, 디바운스, 폴링)
        2. Resource 정리 (HTTP 세션)
        """
        logger.info("정리 작업 시작...")
        if self.controller is not None:
            await self.controller.shutdown()
        await self.container.shutdown_resources()
        logger.info("✅ 프로그램 종료 완료")


async def main() -> None:
    """메인 실행 함수"""
    app = Application()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, app.request_stop)
        except NotImplementedError:
            # Windows 이벤트 루프는 시그널 핸들러를 지원하지 않음
            pass

    try:
        await app.initialize()
        await app.run()
    finally:
        await app.shutdown()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n프로그램이 종료되었습니다.")
