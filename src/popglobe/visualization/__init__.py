# SPDX-License-Identifier: Apache-2.0
from .colormap import COLOR_HOVER, COLOR_NO_DATA, ColorMapper, ColorScale
from .interaction import (
    DEFAULT_ROTATION,
    ROTATION_SENSITIVITY,
    ZOOM_SENSITIVITY,
    Click,
    DragEnd,
    DragMove,
    DragStart,
    EventKind,
    Hover,
    InteractionController,
    ProjectionState,
    ResizeSettled,
    Unhover,
    Viewport,
    Zoom,
    make_event,
)
from .orchestrator import CountryDetail, RenderOrchestrator, TooltipPayload
from .playback import YearPlayback
from .projection import MODE_GLOBE, MODE_MAP, GeoProjector, PathDescriptor
from .scene import FeatureShape, Legend, Scene
from .session import RenderSession
from .timer import CancellableTimer, Scheduler

__all__ = [
    "COLOR_HOVER",
    "COLOR_NO_DATA",
    "DEFAULT_ROTATION",
    "MODE_GLOBE",
    "MODE_MAP",
    "ROTATION_SENSITIVITY",
    "ZOOM_SENSITIVITY",
    "CancellableTimer",
    "Click",
    "ColorMapper",
    "ColorScale",
    "CountryDetail",
    "DragEnd",
    "DragMove",
    "DragStart",
    "EventKind",
    "FeatureShape",
    "GeoProjector",
    "Hover",
    "InteractionController",
    "Legend",
    "PathDescriptor",
    "ProjectionState",
    "RenderOrchestrator",
    "RenderSession",
    "ResizeSettled",
    "Scene",
    "Scheduler",
    "TooltipPayload",
    "Unhover",
    "Viewport",
    "YearPlayback",
    "Zoom",
    "make_event",
]
