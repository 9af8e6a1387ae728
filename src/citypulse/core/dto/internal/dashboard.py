from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

from citypulse.core.types import SeverityColor, SyncPhase, ViewMode


@dataclass(slots=True, frozen=True, eq=True, kw_only=True)
class MetricKeyParts:
    """파싱된 지표 키 (namespace:metric:city)"""

    namespace: str
    metric_name: str
    city_name: str


@dataclass(slots=True, frozen=True, eq=True, kw_only=True)
class MetricClassification:
    """레지스트리 조회 결과 (단위, 아이콘)"""

    unit: str
    icon: str


@dataclass(slots=True, frozen=True, eq=True, kw_only=True)
class ClassifiedMetric:
    """분류가 끝난 단일 지표 (집계 때마다 새로 계산, 캐시하지 않음)"""

    metric_name: str
    display_name: str
    raw_value: str
    unit: str
    icon: str
    severity_color: SeverityColor


@dataclass(slots=True, frozen=True, eq=True, kw_only=True)
class CityGroup:
    """도시별 지표 묶음. metrics 순서는 스냅샷 순회 시 최초 등장 순서입니다."""

    city_name: str
    metrics: tuple[ClassifiedMetric, ...] = ()

    @property
    def title(self) -> str:
        """카드 헤더 텍스트 (도시명 대문자)"""
        return self.city_name.upper()

    @property
    def metric_count(self) -> int:
        return len(self.metrics)


def _empty_cities() -> Mapping[str, CityGroup]:
    return MappingProxyType({})


@dataclass(slots=True, frozen=True, eq=True, kw_only=True)
class DashboardState:
    """대시보드 상태 스냅샷

    SyncController만 새 인스턴스로 교체하며, 소비자에게는 읽기 전용으로 전달됩니다.
    is_fallback=True이면 내장 샘플 데이터(데모 모드)를 표시 중입니다.
    """

    loading: bool = True
    cities: Mapping[str, CityGroup] = field(default_factory=_empty_cities)
    view_mode: ViewMode = ViewMode.GRID
    phase: SyncPhase = SyncPhase.IDLE
    is_fallback: bool = False
    updated_at: datetime | None = None


@dataclass(slots=True, frozen=True, eq=True, kw_only=True)
class DashboardSummary:
    """상태에서 파생한 요약 값"""

    city_count: int
    metric_count: int
    is_empty: bool


@dataclass(slots=True, frozen=True, eq=True, kw_only=True)
class DashboardView:
    """구독자에게 전달되는 렌더링용 뷰 모델"""

    state: DashboardState
    summary: DashboardSummary
    status_message: str | None = None
