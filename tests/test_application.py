from __future__ import annotations

from collections.abc import AsyncIterator, Mapping

import pytest
from dependency_injector import providers

from citypulse.application.sync_controller import SyncController
from citypulse.config.containers import ApplicationContainer
from citypulse.core.dto.internal.live import LiveEvent
from citypulse.core.projection import EMPTY_MESSAGE, build_view
from citypulse.core.types import SyncPhase, ViewMode
from main import Application, render_view
from tests.factory_builders import build_snapshot, build_state


class _FakeClient:
    async def fetch_all(self) -> Mapping[str, str]:
        return build_snapshot()


class _FakeChannel:
    async def events(self) -> AsyncIterator[LiveEvent]:
        if False:  # pragma: no cover
            yield LiveEvent()

    async def close(self) -> None:
        return None


def test_container_builds_singleton_controller() -> None:
    container = ApplicationContainer()
    container.infra.snapshot_client.override(providers.Object(_FakeClient()))
    container.infra.live_channel.override(providers.Object(_FakeChannel()))

    controller = container.sync_controller()

    assert isinstance(controller, SyncController)
    assert controller is container.sync_controller()
    assert controller.event_bus is container.event_bus()
    assert controller.phase is SyncPhase.IDLE
    assert controller.state.view_mode is ViewMode.GRID


def test_render_view_lists_cities_and_metrics() -> None:
    lines = render_view(build_view(build_state()))

    assert lines[0] == "[live] grid view - cities=1 metrics=2"
    assert lines[1] == "NEWYORK"
    assert lines[2] == "  Temperature: 22.5 °C (warning)"
    assert lines[3] == "  Humidity: 65 % (nominal)"


def test_render_view_marks_demo_data_and_empty_state() -> None:
    demo_lines = render_view(build_view(build_state(is_fallback=True)))
    assert demo_lines[0].endswith("[DEMO DATA]")

    empty_lines = render_view(build_view(build_state({})))
    assert empty_lines == ["[live] grid view - cities=0 metrics=0", EMPTY_MESSAGE]


@pytest.mark.asyncio
async def test_run_without_initialize_raises() -> None:
    app = Application()

    with pytest.raises(RuntimeError, match="initialize"):
        await app.run()
