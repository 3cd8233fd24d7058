# SPDX-License-Identifier: Apache-2.0
"""Interaction state machine: drag, zoom and auto-rotation of the projection.

All gestures arrive as typed events through :meth:`InteractionController.dispatch`.
Rotation has exactly one driver at a time: an active drag or the auto-rotate
timer. ``DragStart`` cancels the timer before any drag movement is applied and
``DragEnd`` restarts it. Zoom only touches the scale and may interleave with
either driver.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Callable, ClassVar, Union

from popglobe.errors import ControlError

from .projection import MODE_GLOBE, MODES, GeoProjector
from .timer import CancellableTimer, Scheduler

LOGGER = logging.getLogger(__name__)

ROTATION_SENSITIVITY = 60.0
ZOOM_SENSITIVITY = 0.5
DEFAULT_ROTATION = (0.0, -25.0)
AUTO_ROTATE_STEP = 1.0
DEFAULT_FRAME_MS = 16


class EventKind(str, Enum):
    HOVER = "hover"
    UNHOVER = "unhover"
    CLICK = "click"
    DRAG_START = "drag-start"
    DRAG_MOVE = "drag-move"
    DRAG_END = "drag-end"
    ZOOM = "zoom"
    RESIZE_SETTLED = "resize-settled"


@dataclass(frozen=True, slots=True)
class Hover:
    feature_id: str
    kind: ClassVar[EventKind] = EventKind.HOVER


@dataclass(frozen=True, slots=True)
class Unhover:
    feature_id: str | None = None
    kind: ClassVar[EventKind] = EventKind.UNHOVER


@dataclass(frozen=True, slots=True)
class Click:
    feature_id: str
    kind: ClassVar[EventKind] = EventKind.CLICK


@dataclass(frozen=True, slots=True)
class DragStart:
    x: float = 0.0
    y: float = 0.0
    kind: ClassVar[EventKind] = EventKind.DRAG_START


@dataclass(frozen=True, slots=True)
class DragMove:
    dx: float
    dy: float
    kind: ClassVar[EventKind] = EventKind.DRAG_MOVE


@dataclass(frozen=True, slots=True)
class DragEnd:
    kind: ClassVar[EventKind] = EventKind.DRAG_END


@dataclass(frozen=True, slots=True)
class Zoom:
    """Zoom gesture with the gesture's cumulative transform factor ``k``."""

    k: float
    kind: ClassVar[EventKind] = EventKind.ZOOM


@dataclass(frozen=True, slots=True)
class ResizeSettled:
    width: float
    height: float
    kind: ClassVar[EventKind] = EventKind.RESIZE_SETTLED

    def __post_init__(self) -> None:
        if not (self.width > 0 and self.height > 0):
            raise ControlError(f"Resize must be positive; got {self.width}x{self.height}")


InteractionEvent = Union[Hover, Unhover, Click, DragStart, DragMove, DragEnd, Zoom, ResizeSettled]

EVENT_TYPES: dict[EventKind, type] = {
    cls.kind: cls
    for cls in (Hover, Unhover, Click, DragStart, DragMove, DragEnd, Zoom, ResizeSettled)
}


def make_event(kind: str | EventKind, **payload: Any) -> InteractionEvent:
    """Build a typed event from its kind name and field values.

    Unknown kinds or missing/unknown fields raise :class:`ControlError`.
    """
    try:
        cls = EVENT_TYPES[EventKind(kind)]
    except ValueError as exc:
        raise ControlError(f"Unknown interaction event '{kind}'") from exc
    names = {f.name for f in fields(cls)}
    extra = set(payload) - names
    if extra:
        raise ControlError(f"Unexpected fields for {cls.kind.value}: {sorted(extra)}")
    payload = dict(payload)
    for f in fields(cls):
        if f.name in payload and f.type == "float":
            try:
                payload[f.name] = float(payload[f.name])
            except (TypeError, ValueError) as exc:
                raise ControlError(f"{cls.kind.value}.{f.name} must be a number") from exc
    try:
        return cls(**payload)
    except TypeError as exc:
        raise ControlError(f"Invalid {cls.kind.value} event: {exc}") from exc


@dataclass(frozen=True, slots=True)
class Viewport:
    """Display surface size; radius shrinks while a detail view is open."""

    width: float
    height: float
    detail: bool = False

    def __post_init__(self) -> None:
        if not (self.width > 0 and self.height > 0):
            raise ControlError(f"Viewport must be positive; got {self.width}x{self.height}")

    @property
    def radius(self) -> float:
        if self.detail:
            return min(self.width, self.height) / 3
        return self.height / 2.8

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)


@dataclass
class ProjectionState:
    mode: str = MODE_GLOBE
    rotation: tuple[float, float] = DEFAULT_ROTATION
    zoom_scale: float | None = None
    center: tuple[float, float] = (0.0, 0.0)


Handler = Callable[[Any], Any]


class InteractionController:
    """Sole owner of :class:`ProjectionState`; applies gestures to the projector."""

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        mode: str = MODE_GLOBE,
        rotation: tuple[float, float] = DEFAULT_ROTATION,
        frame_ms: float = DEFAULT_FRAME_MS,
    ) -> None:
        if mode not in MODES:
            raise ControlError(f"Unknown view mode '{mode}'")
        self.state = ProjectionState(mode=mode, rotation=tuple(rotation))  # type: ignore[arg-type]
        self.frame_ms = frame_ms
        self._timer = CancellableTimer(scheduler, name="auto-rotate")
        self._projector: GeoProjector | None = None
        self._base_scale: float | None = None
        self._zoom_k = 1.0
        self.dragging = False
        self.detail_active = False
        self.on_frame: Callable[[], None] | None = None
        self._handlers: dict[EventKind, Handler] = {}
        self._dispatch: dict[type, Callable[[Any], Any]] = {
            Hover: self._forward_unless_detail,
            Unhover: self._forward_unless_detail,
            Click: self._forward,
            DragStart: self._drag_start,
            DragMove: self._drag_move,
            DragEnd: self._drag_end,
            Zoom: self._zoom,
            ResizeSettled: self._resize,
        }

    # ----------------------------------------------------------------- wiring

    def on(self, kind: EventKind, handler: Handler) -> None:
        """Register the collaborator for forwarded events (hover, click, resize)."""
        self._handlers[kind] = handler

    def attach(self, projector: GeoProjector) -> None:
        """Adopt the projector of a fresh render pass; the zoom gesture restarts."""
        self._projector = projector
        self._base_scale = projector.scale
        self._zoom_k = 1.0
        self.state.center = projector.center

    def detach(self) -> None:
        self._projector = None
        self._base_scale = None

    @property
    def projector(self) -> GeoProjector | None:
        return self._projector

    @property
    def timer(self) -> CancellableTimer:
        return self._timer

    @property
    def auto_rotating(self) -> bool:
        return self._timer.active

    @property
    def zoom_factor(self) -> float:
        """Current (clamped) zoom gesture factor."""
        return self._zoom_k

    # --------------------------------------------------------------- dispatch

    def dispatch(self, event: InteractionEvent) -> Any:
        try:
            handler = self._dispatch[type(event)]
        except KeyError as exc:
            raise ControlError(f"Unsupported event type: {type(event).__name__}") from exc
        return handler(event)

    def _forward(self, event: InteractionEvent) -> Any:
        handler = self._handlers.get(event.kind)
        return handler(event) if handler is not None else None

    def _forward_unless_detail(self, event: InteractionEvent) -> Any:
        if self.detail_active:
            return None
        return self._forward(event)

    # --------------------------------------------------------------- rotation

    def _rotatable(self) -> bool:
        return (
            self.state.mode == MODE_GLOBE
            and not self.detail_active
            and self._projector is not None
        )

    def _commit_rotation(self, yaw: float, pitch: float) -> None:
        rotation = (math.fmod(yaw, 360.0), math.fmod(pitch, 360.0))
        self.state.rotation = rotation
        if self._projector is not None:
            self._projector.rotation = rotation
        self._frame()

    def _frame(self) -> None:
        if self.on_frame is not None:
            self.on_frame()

    def _sensitivity(self) -> float:
        scale = self._projector.scale if self._projector is not None else 1.0
        return ROTATION_SENSITIVITY / scale

    def _drag_start(self, event: DragStart) -> None:
        if not self._rotatable():
            return None
        self.stop_auto_rotate()
        self.dragging = True
        return None

    def _drag_move(self, event: DragMove) -> None:
        if not self.dragging or not self._rotatable():
            return None
        factor = self._sensitivity()
        yaw, pitch = self.state.rotation
        self._commit_rotation(yaw + event.dx * factor, pitch - event.dy * factor)
        return None

    def _drag_end(self, event: DragEnd) -> None:
        if not self.dragging:
            return None
        self.dragging = False
        self._commit_rotation(*self.state.rotation)
        self.start_auto_rotate()
        return None

    def start_auto_rotate(self) -> bool:
        """(Re)start the auto-rotate timer when rotation is currently allowed."""
        if not self._rotatable() or self.dragging:
            return False
        self._timer.start(self._auto_rotate_tick, self.frame_ms)
        return True

    def stop_auto_rotate(self) -> bool:
        return self._timer.cancel()

    def _auto_rotate_tick(self, elapsed: float) -> None:
        if not self._rotatable():
            self.stop_auto_rotate()
            return
        yaw, pitch = self.state.rotation
        self._commit_rotation(yaw - AUTO_ROTATE_STEP * self._sensitivity(), pitch)

    # ------------------------------------------------------------------- zoom

    def _zoom(self, event: Zoom) -> float | None:
        k = float(event.k)
        if not math.isfinite(k):
            raise ControlError(f"Zoom factor must be finite; got {event.k}")
        if self._projector is None or self._base_scale is None:
            return None
        # the stored gesture factor is clamped too
        zoom_k = max(k, ZOOM_SENSITIVITY)
        new_scale = self._base_scale * zoom_k
        if not math.isfinite(new_scale):
            raise ControlError(f"Zoom factor {event.k} overflows the projection scale")
        self._zoom_k = zoom_k
        self._projector.scale = new_scale
        self.state.zoom_scale = new_scale
        self._frame()
        return new_scale

    # ------------------------------------------------------ structural resets

    def set_mode(self, mode: str) -> None:
        """Switch projection mode: timer stopped, zoom back to the mode default."""
        if mode not in MODES:
            raise ControlError(f"Unknown view mode '{mode}'")
        self._reset_for_rebuild()
        self.state.mode = mode
        LOGGER.debug("view mode -> %s", mode)

    def set_detail(self, active: bool) -> None:
        self._reset_for_rebuild()
        self.detail_active = bool(active)

    def _reset_for_rebuild(self) -> None:
        self.stop_auto_rotate()
        self.dragging = False
        self.state.zoom_scale = None
        self.detach()

    def _resize(self, event: ResizeSettled) -> Any:
        # timer stops before the projector is dropped
        self.stop_auto_rotate()
        self.dragging = False
        self.detach()
        return self._forward(event)

    def dispose(self) -> None:
        self.stop_auto_rotate()
        self.dragging = False
        self.detach()
        self.on_frame = None
        self._handlers.clear()
