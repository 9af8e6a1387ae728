from __future__ import annotations

from citypulse.core.dto.internal.dashboard import DashboardState
from citypulse.core.projection import (
    EMPTY_MESSAGE,
    LOADING_MESSAGE,
    build_view,
    project,
    status_message,
)
from tests.factory_builders import build_multi_city_snapshot, build_state


def test_project_single_city_example() -> None:
    summary = project(build_state())

    assert summary.city_count == 1
    assert summary.metric_count == 2
    assert summary.is_empty is False


def test_project_counts_metrics_across_cities() -> None:
    summary = project(build_state(build_multi_city_snapshot()))

    assert summary.city_count == 3
    assert summary.metric_count == 5


def test_initial_state_is_loading_and_empty() -> None:
    state = DashboardState()
    summary = project(state)

    assert state.loading is True
    assert summary.is_empty is True
    assert status_message(state, summary) == LOADING_MESSAGE


def test_loaded_empty_snapshot_is_not_loading() -> None:
    state = build_state({})
    view = build_view(state)

    assert view.state.loading is False
    assert view.summary.is_empty is True
    assert view.summary.metric_count == 0
    assert view.status_message == EMPTY_MESSAGE


def test_loading_with_previous_data_shows_no_message() -> None:
    view = build_view(build_state(loading=True))
    assert view.status_message is None
    assert view.summary.is_empty is False
