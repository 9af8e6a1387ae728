from __future__ import annotations

from typing import Final

from citypulse.core.dto.internal.dashboard import (
    DashboardState,
    DashboardSummary,
    DashboardView,
)

LOADING_MESSAGE: Final[str] = "Loading..."
EMPTY_MESSAGE: Final[str] = "No data available. Waiting for backend ingestion."


def project(state: DashboardState) -> DashboardSummary:
    """상태에서 도시 수, 지표 수, 빈 상태 여부를 계산합니다.

    is_empty는 loading과 무관합니다 (로드 완료 + 빈 스냅샷도 정상 표시 상태).
    """
    return DashboardSummary(
        city_count=len(state.cities),
        metric_count=sum(group.metric_count for group in state.cities.values()),
        is_empty=not state.cities,
    )


def status_message(state: DashboardState, summary: DashboardSummary) -> str | None:
    """로딩/빈 상태 안내 문구. 표시할 데이터가 있으면 None."""
    if state.loading and summary.is_empty:
        return LOADING_MESSAGE
    if summary.is_empty:
        return EMPTY_MESSAGE
    return None


def build_view(state: DashboardState) -> DashboardView:
    summary = project(state)
    return DashboardView(
        state=state,
        summary=summary,
        status_message=status_message(state, summary),
    )
