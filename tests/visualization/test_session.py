# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import pytest

from popglobe.config import Settings
from popglobe.data.cache import DatasetCache
from popglobe.errors import ControlError, DatasetLoadError, SessionStateError
from popglobe.visualization.interaction import DragMove, DragStart, Zoom
from popglobe.visualization.session import RenderSession


def test_use_before_init_raises(cache, settings) -> None:
    s = RenderSession(cache, settings)
    with pytest.raises(SessionStateError):
        s.state()
    with pytest.raises(SessionStateError):
        s.scene()
    with pytest.raises(SessionStateError):
        s.set_year(2020)
    with pytest.raises(SessionStateError):
        s.dispatch(DragStart())


def test_init_twice_and_use_after_dispose(cache, settings) -> None:
    s = RenderSession(cache, settings)
    s.init(800, 600)
    with pytest.raises(SessionStateError):
        s.init(800, 600)
    s.dispose()
    s.dispose()
    assert s.scheduler.pending() == 0
    with pytest.raises(SessionStateError):
        s.advance(16)
    with pytest.raises(SessionStateError):
        s.init(800, 600)


def test_init_defaults_to_latest_year_and_loads_once(cache, settings) -> None:
    s = RenderSession(cache, settings)
    scene = s.init(960, 720)
    s.set_year(2021)
    s.set_metric("density")
    s.toggle_view()
    assert scene.year == 2023
    assert cache.load_count == 1
    s.dispose()


def test_control_validation(session) -> None:
    with pytest.raises(ControlError):
        session.set_year(1999)
    with pytest.raises(ControlError):
        session.set_metric("happiness")
    assert session.state()["metric"] == "population"


def test_init_rejects_year_outside_range(cache, settings) -> None:
    s = RenderSession(cache, settings)
    with pytest.raises(ControlError):
        s.init(960, 720, year=1950)
    assert not s.active


def test_missing_dataset_propagates_load_error(tmp_path) -> None:
    cache = DatasetCache.from_paths(tmp_path / "none.geojson", tmp_path / "none.csv")
    s = RenderSession(cache, Settings())
    with pytest.raises(DatasetLoadError):
        s.init(960, 720)
    assert not s.active


def test_from_settings_requires_paths() -> None:
    with pytest.raises(ControlError):
        RenderSession.from_settings(Settings())


def test_reconfigure_keeps_rotation_and_explicit_zoom(session) -> None:
    session.dispatch(DragStart())
    session.dispatch(DragMove(20, 0))
    session.dispatch(Zoom(1.5))
    rotation = session.controller.state.rotation
    zoom_scale = session.controller.state.zoom_scale

    scene = session.reconfigure(1200, 900)

    assert scene.width == 1200
    assert session.orchestrator.projector.center == (600, 450)
    assert session.orchestrator.projector.scale == pytest.approx(zoom_scale)
    assert session.controller.state.rotation == rotation


def test_reconfigure_without_zoom_uses_new_radius(session) -> None:
    session.reconfigure(height=1400)
    assert session.orchestrator.projector.scale == pytest.approx(1400 / 2.8)
    assert session.state()["width"] == 960


def test_state_snapshot(session) -> None:
    state = session.state()
    assert state["year"] == 2023
    assert (state["min_year"], state["max_year"]) == (2020, 2023)
    assert state["mode"] == "3d"
    assert state["auto_rotating"] is True
    assert state["playing"] is False
    assert state["detail"] is None
