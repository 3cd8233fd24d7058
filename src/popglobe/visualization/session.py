# SPDX-License-Identifier: Apache-2.0
"""Render session: the lifecycle owner of one interactive globe view.

A session wires the dataset cache, the cooperative scheduler, the
interaction controller, the render orchestrator and year playback together,
and exposes the control surface (year, metric, view, playback, detail).
"""

from __future__ import annotations

import logging
from typing import Any

from popglobe.config import Settings
from popglobe.data.cache import DatasetCache
from popglobe.data.demographics import validate_metric
from popglobe.errors import ControlError, SessionStateError

from .colormap import ColorMapper
from .interaction import (
    InteractionController,
    InteractionEvent,
    ResizeSettled,
    Viewport,
)
from .orchestrator import (
    DEFAULT_METRIC,
    CountryDetail,
    DetailCallback,
    RenderOrchestrator,
    TooltipPayload,
)
from .playback import YearPlayback
from .scene import Scene
from .timer import Scheduler

LOGGER = logging.getLogger(__name__)


class RenderSession:
    def __init__(
        self,
        cache: DatasetCache,
        settings: Settings | None = None,
        *,
        scheduler: Scheduler | None = None,
        metric: str = DEFAULT_METRIC,
        on_detail: DetailCallback | None = None,
    ) -> None:
        self.cache = cache
        self.settings = settings or Settings()
        self.scheduler = scheduler or Scheduler()
        self._initial_metric = validate_metric(metric)
        self._on_detail = on_detail
        self.controller: InteractionController | None = None
        self.orchestrator: RenderOrchestrator | None = None
        self.playback: YearPlayback | None = None
        self._disposed = False

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> RenderSession:
        if settings.geojson_path is None or settings.csv_path is None:
            raise ControlError("Both a GeoJSON path and a demographic CSV path are required")
        cache = DatasetCache.from_paths(settings.geojson_path, settings.csv_path)
        return cls(cache, settings, **kwargs)

    # -------------------------------------------------------------- lifecycle

    @property
    def active(self) -> bool:
        return self.orchestrator is not None and not self._disposed

    def _require(self) -> RenderOrchestrator:
        if self._disposed:
            raise SessionStateError("Session has been disposed")
        if self.orchestrator is None:
            raise SessionStateError("Session not initialised; call init() first")
        return self.orchestrator

    def init(self, width: float, height: float, *, year: int | None = None) -> Scene:
        """Load datasets and produce the first render.

        ``DatasetLoadError`` propagates and leaves the session uninitialised.
        """
        if self._disposed:
            raise SessionStateError("Session has been disposed")
        if self.orchestrator is not None:
            raise SessionStateError("Session already initialised")
        viewport = Viewport(width, height)
        datasets = self.cache.load()
        min_year, max_year = datasets.years
        if year is not None and not min_year <= year <= max_year:
            raise ControlError(f"Year {year} outside dataset range {min_year}-{max_year}")

        controller = InteractionController(self.scheduler, frame_ms=self.settings.frame_ms)
        orchestrator = RenderOrchestrator(
            self.cache,
            controller,
            viewport,
            color_mapper=ColorMapper(self.settings.color_scale),
            flag_base=self.settings.flag_path,
            metric=self._initial_metric,
            year=year if year is not None else max_year,
            on_detail=self._on_detail,
        )
        playback = YearPlayback(
            self.scheduler,
            get_year=lambda: int(orchestrator.year),  # type: ignore[arg-type]
            set_year=self._store_year,
            max_year=max_year,
            on_change=orchestrator.update_data,
            interval_ms=self.settings.playback_ms,
        )
        self.controller, self.orchestrator, self.playback = controller, orchestrator, playback
        scene = orchestrator.render()
        LOGGER.info(
            "Session ready: %sx%s, year %s, metric %s",
            width,
            height,
            orchestrator.year,
            orchestrator.metric,
        )
        return scene

    def reconfigure(self, width: float | None = None, height: float | None = None) -> Scene:
        """Apply a settled resize; missing dimensions keep their current value."""
        orchestrator = self._require()
        viewport = orchestrator.viewport
        event = ResizeSettled(
            width=viewport.width if width is None else width,
            height=viewport.height if height is None else height,
        )
        return self.dispatch(event) or orchestrator.scene()

    def dispose(self) -> None:
        if self._disposed:
            return
        if self.playback is not None:
            self.playback.pause()
        if self.controller is not None:
            self.controller.dispose()
        self._disposed = True
        self.orchestrator = None
        LOGGER.debug("Session disposed")

    # -------------------------------------------------------- control surface

    @property
    def year_range(self) -> tuple[int, int]:
        self._require()
        return self.cache.load().years

    def _store_year(self, year: int) -> None:
        self._require().year = year

    def set_year(self, year: int) -> Scene:
        orchestrator = self._require()
        min_year, max_year = self.year_range
        if not min_year <= year <= max_year:
            raise ControlError(f"Year {year} outside dataset range {min_year}-{max_year}")
        orchestrator.year = int(year)
        return orchestrator.update_data()

    def set_metric(self, metric: str) -> Scene:
        orchestrator = self._require()
        orchestrator.metric = metric
        return orchestrator.update_data()

    def toggle_view(self) -> Scene:
        return self._require().toggle_view()

    def play(self) -> bool:
        self._require()
        return self.playback.play()  # type: ignore[union-attr]

    def pause(self) -> bool:
        self._require()
        return self.playback.pause()  # type: ignore[union-attr]

    def reset(self) -> Scene:
        orchestrator = self._require()
        self.playback.reset()  # type: ignore[union-attr]
        return orchestrator.scene()

    def close_detail(self) -> Scene:
        return self._require().close_detail()

    def dispatch(self, event: InteractionEvent) -> Any:
        self._require()
        return self.controller.dispatch(event)  # type: ignore[union-attr]

    def advance(self, ms: float) -> int:
        """Advance the session clock, firing rotation and playback ticks."""
        self._require()
        return self.scheduler.advance(ms)

    def scene(self) -> Scene:
        return self._require().scene()

    def tooltip(self, feature_id: str) -> TooltipPayload | None:
        """Tooltip content for ``feature_id`` without changing hover state."""
        return self._require().tooltip(feature_id)

    # ----------------------------------------------------------------- state

    @property
    def detail(self) -> CountryDetail | None:
        return self._require().detail

    def state(self) -> dict[str, Any]:
        orchestrator = self._require()
        controller, playback = self.controller, self.playback
        if controller is None or playback is None:
            raise SessionStateError("Session not initialised; call init() first")
        min_year, max_year = self.year_range
        return {
            "year": orchestrator.year,
            "min_year": min_year,
            "max_year": max_year,
            "metric": orchestrator.metric,
            "mode": controller.state.mode,
            "rotation": list(controller.state.rotation),
            "zoom_scale": controller.state.zoom_scale,
            "auto_rotating": controller.auto_rotating,
            "dragging": controller.dragging,
            "playing": playback.playing,
            "detail": orchestrator.detail.code if orchestrator.detail else None,
            "hovered": orchestrator.hovered,
            "width": orchestrator.viewport.width,
            "height": orchestrator.viewport.height,
            "clock_ms": self.scheduler.now,
        }


