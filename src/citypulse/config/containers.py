"""
Dependency Injection Containers

아키텍처:
- InfrastructureContainer: HTTP 세션, 스냅샷 클라이언트, 알림 스트림 + Settings 주입
- ApplicationContainer: 최상위 컨테이너 (EventBus, SyncController)

주요 패턴:
- Resource Provider: aiohttp 세션 async init/shutdown 자동 관리
- Object Provider: settings.py 싱글톤 주입
- Singleton: 엔진 수명 동안 하나만 존재하는 컨트롤러

사용 예시:
    container = ApplicationContainer()
    await container.init_resources()
    controller = await container.sync_controller()
    ...
    await container.shutdown_resources()
"""

from dependency_injector import containers, providers

from citypulse.application.fallback import FALLBACK_SNAPSHOT
from citypulse.application.sync_controller import SyncController
from citypulse.common.events import EventBus
from citypulse.config.init_infra import init_http_session
from citypulse.config.settings import backend_settings, sync_settings
from citypulse.infra.http.live_channel import LiveChannel
from citypulse.infra.http.snapshot_client import SnapshotClient


# ========================================
# 1. Infrastructure Container (인프라 레이어)
# ========================================
class InfrastructureContainer(containers.DeclarativeContainer):
    """인프라 컨테이너

    - 백엔드 접속 컴포넌트 관리
    - HTTP 세션은 Resource로 라이프사이클 관리 (두 클라이언트가 공유)
    """

    backend_config = providers.Object(backend_settings)

    http_session = providers.Resource(
        init_http_session,
        connect_timeout=backend_config.provided.connect_timeout,
    )

    snapshot_client = providers.Singleton(
        SnapshotClient,
        base_url=backend_config.provided.base_url,
        snapshot_path=backend_config.provided.snapshot_path,
        timeout=backend_config.provided.request_timeout,
        session=http_session,
    )

    live_channel = providers.Singleton(
        LiveChannel,
        base_url=backend_config.provided.base_url,
        live_path=backend_config.provided.live_path,
        connect_timeout=backend_config.provided.connect_timeout,
        session=http_session,
    )


# ========================================
# 2. Application Container (최상위)
# ========================================
class ApplicationContainer(containers.DeclarativeContainer):
    """최상위 애플리케이션 컨테이너

    SyncController는 DashboardState의 유일한 소유자이므로 Singleton입니다.
    fallback_snapshot은 코드에서 override할 수 있습니다.
    """

    sync_config = providers.Object(sync_settings)
    fallback_snapshot = providers.Object(FALLBACK_SNAPSHOT)

    infra = providers.Container(InfrastructureContainer)

    event_bus = providers.Singleton(EventBus)

    sync_controller = providers.Singleton(
        SyncController,
        client=infra.snapshot_client,
        channel=infra.live_channel,
        debounce_ms=sync_config.provided.debounce_ms,
        poll_interval_ms=sync_config.provided.poll_interval_ms,
        fallback_snapshot=fallback_snapshot,
        view_mode=sync_config.provided.default_view_mode,
        event_bus=event_bus,
    )
