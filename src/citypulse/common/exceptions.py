"""대시보드 엔진 예외 정의 모듈.

광범위한 Exception 사용을 지양하고, 경계(HTTP, 스트림)에서 발생하는
하위 예외를 아래 두 가지 도메인 예외로 변환해 상위 레이어에 전달합니다.
"""

from __future__ import annotations

import asyncio
from typing import Final

import aiohttp
import orjson
from pydantic import ValidationError


class DashboardError(Exception):
    """대시보드 엔진 공통 베이스 예외"""


class SnapshotFetchError(DashboardError):
    """전체 스냅샷 조회 실패 (네트워크, 비 2xx 응답, 잘못된 본문)"""

    def __init__(self, message: str, *, status: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.url = url


class PushChannelError(DashboardError):
    """변경 알림 스트림 실패 (연결 실패, 전송 오류, 스트림 종료)"""

    def __init__(self, message: str, *, status: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.url = url


# HTTP/네트워크 계층 예외 (스냅샷, 스트림 공통)
TRANSPORT_EXCEPTIONS: Final[tuple[type[BaseException], ...]] = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    ConnectionError,
    OSError,
)

# 본문 역직렬화/검증 예외
PAYLOAD_EXCEPTIONS: Final[tuple[type[BaseException], ...]] = (
    orjson.JSONDecodeError,
    ValidationError,
    UnicodeDecodeError,
)

# 스냅샷 조회 시 SnapshotFetchError로 변환할 예외 전체
FETCH_EXCEPTIONS: Final[tuple[type[BaseException], ...]] = (
    *TRANSPORT_EXCEPTIONS,
    *PAYLOAD_EXCEPTIONS,
)


__all__ = [
    "DashboardError",
    "SnapshotFetchError",
    "PushChannelError",
    "TRANSPORT_EXCEPTIONS",
    "PAYLOAD_EXCEPTIONS",
    "FETCH_EXCEPTIONS",
]
