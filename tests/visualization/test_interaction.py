# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import pytest

from popglobe.errors import ControlError
from popglobe.visualization.interaction import (
    DEFAULT_ROTATION,
    ZOOM_SENSITIVITY,
    DragEnd,
    DragMove,
    DragStart,
    EventKind,
    Hover,
    InteractionController,
    ResizeSettled,
    Viewport,
    Zoom,
    make_event,
)
from popglobe.visualization.projection import MODE_GLOBE, MODE_MAP, GeoProjector
from popglobe.visualization.timer import Scheduler


def _controller(mode: str = MODE_GLOBE, scale: float = 200.0):
    sched = Scheduler()
    ctrl = InteractionController(sched, mode=mode)
    proj = GeoProjector(mode, scale, ctrl.state.rotation, (480, 360))
    ctrl.attach(proj)
    return sched, ctrl, proj


def test_drag_start_cancels_auto_rotate_synchronously() -> None:
    sched, ctrl, _ = _controller()
    assert ctrl.start_auto_rotate()
    handle = ctrl.timer.handle
    ctrl.dispatch(DragStart())
    assert not ctrl.auto_rotating
    assert handle is not None and not handle.active
    sched.advance(200)
    assert ctrl.state.rotation == DEFAULT_ROTATION


def test_drag_moves_rotation_scaled_by_sensitivity() -> None:
    _, ctrl, proj = _controller(scale=200)
    frames: list[int] = []
    ctrl.on_frame = lambda: frames.append(1)
    ctrl.dispatch(DragStart())
    ctrl.dispatch(DragMove(10, 0))
    assert ctrl.state.rotation == pytest.approx((3.0, -25.0))
    ctrl.dispatch(DragMove(0, 10))
    assert ctrl.state.rotation == pytest.approx((3.0, -28.0))
    assert proj.rotation == pytest.approx(ctrl.state.rotation)
    assert len(frames) == 2


def test_drag_end_resumes_auto_rotate() -> None:
    _, ctrl, _ = _controller()
    ctrl.dispatch(DragStart())
    ctrl.dispatch(DragEnd())
    assert not ctrl.dragging
    assert ctrl.auto_rotating


def test_auto_rotate_tick_decrements_yaw() -> None:
    sched, ctrl, _ = _controller(scale=200)
    ctrl.start_auto_rotate()
    sched.advance(16)
    assert ctrl.state.rotation == pytest.approx((-0.3, -25.0))
    sched.advance(16 * 9)
    assert ctrl.state.rotation[0] == pytest.approx(-3.0)


def test_drag_is_ignored_on_the_flat_map() -> None:
    sched, ctrl, _ = _controller(mode=MODE_MAP)
    assert not ctrl.start_auto_rotate()
    ctrl.dispatch(DragStart())
    ctrl.dispatch(DragMove(50, 50))
    assert not ctrl.dragging
    assert ctrl.state.rotation == DEFAULT_ROTATION


def test_detail_mode_blocks_rotation_and_hover() -> None:
    _, ctrl, proj = _controller()
    seen: list[str] = []
    ctrl.on(EventKind.HOVER, lambda ev: seen.append(ev.feature_id))
    ctrl.start_auto_rotate()
    ctrl.set_detail(True)
    assert not ctrl.auto_rotating
    ctrl.attach(proj)
    assert not ctrl.start_auto_rotate()
    assert ctrl.dispatch(Hover("AAA")) is None
    assert seen == []


def test_zoom_below_floor_is_clamped() -> None:
    _, ctrl, proj = _controller(scale=200)
    assert ctrl.dispatch(Zoom(0.2)) == pytest.approx(200 * ZOOM_SENSITIVITY)
    assert ctrl.state.zoom_scale == pytest.approx(100)
    assert ctrl.zoom_factor == ZOOM_SENSITIVITY
    assert ctrl.dispatch(Zoom(ZOOM_SENSITIVITY)) == pytest.approx(100)
    ctrl.dispatch(Zoom(2))
    assert proj.scale == pytest.approx(400)


def test_overflowing_zoom_is_rejected_without_changing_state() -> None:
    _, ctrl, proj = _controller(scale=200)
    ctrl.dispatch(Zoom(2))
    with pytest.raises(ControlError):
        ctrl.dispatch(Zoom(1e308))
    assert ctrl.zoom_factor == 2
    assert ctrl.state.zoom_scale == pytest.approx(400)
    assert proj.scale == pytest.approx(400)


def test_zoom_during_drag_keeps_dragging() -> None:
    _, ctrl, _ = _controller()
    ctrl.dispatch(DragStart())
    ctrl.dispatch(Zoom(1.5))
    assert ctrl.dragging
    assert not ctrl.auto_rotating


def test_mode_switch_resets_zoom_and_stops_timer() -> None:
    _, ctrl, _ = _controller()
    ctrl.dispatch(Zoom(2))
    ctrl.start_auto_rotate()
    ctrl.set_mode(MODE_MAP)
    assert ctrl.state.zoom_scale is None
    assert not ctrl.auto_rotating
    assert ctrl.projector is None
    with pytest.raises(ControlError):
        ctrl.set_mode("4d")


def test_resize_cancels_timer_before_forwarding_and_keeps_zoom() -> None:
    _, ctrl, _ = _controller()
    ctrl.dispatch(Zoom(2))
    ctrl.start_auto_rotate()
    observed: list[bool] = []
    ctrl.on(EventKind.RESIZE_SETTLED, lambda ev: observed.append(ctrl.auto_rotating))
    ctrl.dispatch(ResizeSettled(1200, 900))
    assert observed == [False]
    assert ctrl.state.zoom_scale == pytest.approx(400)


def test_make_event_builds_typed_events() -> None:
    event = make_event("drag-move", dx="3", dy=1)
    assert event == DragMove(3.0, 1.0)
    assert make_event(EventKind.HOVER, feature_id="AAA") == Hover("AAA")
    with pytest.raises(ControlError):
        make_event("teleport")
    with pytest.raises(ControlError):
        make_event("zoom", q=1)
    with pytest.raises(ControlError):
        make_event("zoom")
    with pytest.raises(ControlError):
        make_event("zoom", k="lots")
    with pytest.raises(ControlError):
        make_event("resize-settled", width=0, height=10)


def test_viewport_radius_and_center() -> None:
    vp = Viewport(960, 720)
    assert vp.radius == pytest.approx(720 / 2.8)
    assert vp.center == (480, 360)
    assert Viewport(960, 720, detail=True).radius == pytest.approx(240)
    with pytest.raises(ControlError):
        Viewport(0, 100)
