"""대시보드 공통 타입 정의 모듈."""

from collections.abc import Mapping
from enum import StrEnum
from typing import Final, TypeAlias

# "<namespace>:<metric>:<city>" → 원본 문자열 값
RawSnapshot: TypeAlias = Mapping[str, str]

# 레지스트리에 없는 지표에 쓰는 아이콘 토큰
DEFAULT_ICON: Final[str] = "generic"


class SeverityColor(StrEnum):
    """지표 값의 심각도 밴드 (표시 색상 결정)"""

    NOMINAL = "nominal"
    WARNING = "warning"
    CRITICAL = "critical"
    INFO = "info"
    CAUTION = "caution"
    NEUTRAL = "neutral"

    @property
    def hex(self) -> str:
        """프레젠테이션 레이어용 기본 색상 코드"""
        return _SEVERITY_PALETTE[self]


_SEVERITY_PALETTE: Final[dict[SeverityColor, str]] = {
    SeverityColor.NOMINAL: "#22c55e",
    SeverityColor.WARNING: "#f59e0b",
    SeverityColor.CRITICAL: "#ef4444",
    SeverityColor.INFO: "#3b82f6",
    SeverityColor.CAUTION: "#eab308",
    SeverityColor.NEUTRAL: "#6b7280",
}


class ViewMode(StrEnum):
    """카드(grid) / 목록(list) 보기 모드"""

    GRID = "grid"
    LIST = "list"


class SyncPhase(StrEnum):
    """동기화 컨트롤러 상태

    IDLE → LOADING → LIVE ⇄ DEGRADED, shutdown 이후 STOPPED
    """

    IDLE = "idle"
    LOADING = "loading"
    LIVE = "live"
    DEGRADED = "degraded"
    STOPPED = "stopped"
