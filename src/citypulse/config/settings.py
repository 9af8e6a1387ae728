"""통합 Settings 모듈 - 환경변수 기반

이 모듈의 역할:
    1. 코드에 합리적인 기본값 제공
    2. 환경변수로 오버라이드 (우선순위 높음)
    3. 타입 안전성 보장 (Pydantic 자동 검증)

설정 우선순위:
    1. 환경변수 (최우선) - export BACKEND_BASE_URL=...
    2. .env 파일 - config/.env
    3. 코드 기본값 (settings.py 내부)

사용 예시:
    # 개발 환경 (기본값 사용, 백엔드 http://localhost:3000)
    python main.py

    # 다른 백엔드 + 빠른 폴링
    export BACKEND_BASE_URL=http://dashboard-api:3000
    export SYNC_POLL_INTERVAL_MS=5000
    python main.py
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# 설정 파일 경로
config_dir = Path(__file__).parent


def env_settings(prefix: str) -> SettingsConfigDict:
    """환경변수 + .env 통합 설정

    Args:
        prefix: 환경변수 접두사 (예: BACKEND_, SYNC_)

    Returns:
        Pydantic 설정 딕셔너리
    """
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=config_dir / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class AppSettings(BaseSettings):
    """애플리케이션 일반 설정

    환경변수 오버라이드:
        APP_ENVIRONMENT: 실행 환경 (dev, prod, test) (기본: dev)
        APP_DEBUG: 디버그 모드 (기본: false)
    """

    environment: str = "dev"
    debug: bool = False

    model_config = env_settings("APP_")


class BackendSettings(BaseSettings):
    """백엔드 접속 설정

    환경변수 오버라이드:
        BACKEND_BASE_URL: 백엔드 주소 (기본: http://localhost:3000)
        BACKEND_SNAPSHOT_PATH: 전체 스냅샷 경로 (기본: /data/all)
        BACKEND_LIVE_PATH: 변경 알림 스트림 경로 (기본: /data/live)
        BACKEND_REQUEST_TIMEOUT: 스냅샷 요청 타임아웃 (기본: 5초)
        BACKEND_CONNECT_TIMEOUT: 스트림 연결 타임아웃 (기본: 10초)
    """

    base_url: str = "http://localhost:3000"
    snapshot_path: str = "/data/all"
    live_path: str = "/data/live"
    request_timeout: float = Field(default=5.0, gt=0)
    connect_timeout: float = Field(default=10.0, gt=0)

    model_config = env_settings("BACKEND_")

    @property
    def snapshot_url(self) -> str:
        return join_url(self.base_url, self.snapshot_path)

    @property
    def live_url(self) -> str:
        return join_url(self.base_url, self.live_path)


class SyncSettings(BaseSettings):
    """동기화 정책 설정 (모든 타이밍 설정은 밀리초 단위)

    환경변수 오버라이드:
        SYNC_DEBOUNCE_MS: 알림 디바운스 구간 (기본: 1000ms)
        SYNC_POLL_INTERVAL_MS: 폴백 폴링 주기 (기본: 10000ms)
        SYNC_DEFAULT_VIEW_MODE: 초기 보기 모드 grid | list (기본: grid)
    """

    debounce_ms: int = Field(default=1000, gt=0)
    poll_interval_ms: int = Field(default=10_000, gt=0)
    default_view_mode: Literal["grid", "list"] = "grid"

    model_config = env_settings("SYNC_")


class LogSettings(BaseSettings):
    """로깅 설정

    환경변수 오버라이드:
        LOG_LEVEL: 로그 레벨 (기본: INFO)
        LOG_TO_FILE: 파일 로깅 여부 (기본: false)
        LOG_DIR: 로그 디렉토리 (기본: logs)
    """

    level: str = "INFO"
    to_file: bool = False
    dir: str = "logs"

    model_config = env_settings("LOG_")


def join_url(base_url: str, path: str) -> str:
    """base_url과 path를 슬래시 하나로 연결합니다."""
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


# ========================================
# 설정 인스턴스 (싱글톤)
# ========================================

app_settings = AppSettings()
backend_settings = BackendSettings()
sync_settings = SyncSettings()
log_settings = LogSettings()
