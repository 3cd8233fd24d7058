# SPDX-License-Identifier: Apache-2.0
"""Render pipeline: datasets -> metrics -> colour scale -> projected scene.

:class:`RenderOrchestrator` owns the current year/metric, the viewport and
the per-pass :class:`GeoProjector`. Full passes (:meth:`render`) rebuild the
projection; data passes (:meth:`update_data`) only repaint fills. Hover and
click events are forwarded here by the :class:`InteractionController`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from popglobe.config import DEFAULT_FLAG_PATH
from popglobe.data.cache import DatasetCache, Datasets
from popglobe.data.demographics import (
    CountrySeries,
    MetricSet,
    build_country_metrics,
    country_series,
    validate_metric,
)
from popglobe.data.geo import GeoFeature
from popglobe.errors import SessionStateError
from popglobe.utils.serialize import to_obj

from .colormap import COLOR_HOVER, ColorMapper, ColorScale
from .interaction import (
    Click,
    EventKind,
    Hover,
    InteractionController,
    ResizeSettled,
    Unhover,
    Viewport,
)
from .projection import MODE_GLOBE, MODE_MAP, GeoProjector, PathDescriptor
from .scene import FeatureShape, Legend, Scene

LOGGER = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
DEFAULT_METRIC = "population"

DetailCallback = Callable[[str, str], Any]


def flag_path(base: str, code: str) -> str:
    """Flag image location for ``code`` under ``base`` (``./img/flags/USA.png``)."""
    if base and not base.endswith("/"):
        base += "/"
    return f"{base}{code}.png"


@dataclass(frozen=True, slots=True)
class TooltipPayload:
    name: str
    code: str
    rank: str
    population: str
    density: str
    sex_ratio: str
    median_age: str
    flag: str

    def to_dict(self) -> dict[str, str]:
        return to_obj(self)


@dataclass(frozen=True, slots=True)
class CountryDetail:
    """Payload for the detail view: multi-year series plus latest summary."""

    code: str
    name: str
    flag: str
    series: CountrySeries
    summary: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return to_obj(self)


class RenderOrchestrator:
    def __init__(
        self,
        cache: DatasetCache,
        controller: InteractionController,
        viewport: Viewport,
        *,
        color_mapper: ColorMapper | None = None,
        flag_base: str = DEFAULT_FLAG_PATH,
        metric: str = DEFAULT_METRIC,
        year: int | None = None,
        on_detail: DetailCallback | None = None,
    ) -> None:
        self.cache = cache
        self.controller = controller
        self.viewport = viewport
        self.color_mapper = color_mapper or ColorMapper()
        self.flag_base = flag_base
        self._metric = validate_metric(metric)
        self.year = year
        self.on_detail = on_detail
        self.detail: CountryDetail | None = None
        self.frames = 0
        self._datasets: Datasets | None = None
        self._metrics: MetricSet | None = None
        self._scale: ColorScale | None = None
        self._projector: GeoProjector | None = None
        self._features: tuple[GeoFeature, ...] = ()
        self._by_id: dict[str, GeoFeature] = {}
        self._paths: dict[str, PathDescriptor] = {}
        self._paths_dirty = True
        self._fills: dict[str, str] = {}
        self._hovered: str | None = None

        controller.on_frame = self.repaint
        controller.on(EventKind.HOVER, self.hover)
        controller.on(EventKind.UNHOVER, self.unhover)
        controller.on(EventKind.CLICK, self.click)
        controller.on(EventKind.RESIZE_SETTLED, self.resize)

    # ------------------------------------------------------------- properties

    @property
    def metric(self) -> str:
        return self._metric

    @metric.setter
    def metric(self, value: str) -> None:
        self._metric = validate_metric(value)

    @property
    def mode(self) -> str:
        return self.controller.state.mode

    @property
    def metrics(self) -> MetricSet | None:
        return self._metrics

    @property
    def color_scale(self) -> ColorScale | None:
        return self._scale

    @property
    def projector(self) -> GeoProjector | None:
        return self._projector

    @property
    def hovered(self) -> str | None:
        return self._hovered

    @property
    def datasets(self) -> Datasets:
        if self._datasets is None:
            self._datasets = self.cache.load()
            self._features = self._datasets.features
            self._by_id = {}
            for feature in self._features:
                self._by_id.setdefault(feature.id, feature)
            if self.year is None:
                self.year = self._datasets.years[1]
        return self._datasets

    # ----------------------------------------------------------------- passes

    def render(self, mode: str | None = None) -> Scene:
        """Full pass: rebuild data, projection and paths, then resume rotation."""
        if mode is not None:
            self.controller.set_mode(mode)
        self._rebuild_data()

        state = self.controller.state
        scale = state.zoom_scale or GeoProjector.default_scale(
            state.mode, self.viewport.radius
        )
        projector = GeoProjector.configure(
            state.mode, scale, state.rotation, self.viewport.center
        )
        self._projector = projector
        self._paths_dirty = True
        self.controller.attach(projector)
        self.controller.start_auto_rotate()
        LOGGER.debug(
            "render mode=%s year=%s metric=%s scale=%.2f",
            state.mode,
            self.year,
            self._metric,
            scale,
        )
        return self.scene()

    def update_data(self) -> Scene:
        """Data pass for year/metric changes; projection and paths stay as-is."""
        if self._projector is None:
            return self.render()
        self._rebuild_data()
        self.controller.start_auto_rotate()
        return self.scene()

    def repaint(self) -> None:
        """Mark paths stale after an interaction frame; recomputed on demand."""
        self.frames += 1
        self._paths_dirty = True

    def toggle_view(self) -> Scene:
        target = MODE_MAP if self.mode == MODE_GLOBE else MODE_GLOBE
        return self.render(mode=target)

    def _rebuild_data(self) -> None:
        datasets = self.datasets
        self._metrics = build_country_metrics(datasets.rows, int(self.year))  # type: ignore[arg-type]
        self._scale = self.color_mapper.build(self._metric, self._metrics.values(self._metric))
        self._fills = {f.id: self._data_fill(f.id) for f in self._features}
        self._hovered = None
        if self._scale.degenerate:
            LOGGER.warning(
                "No %s data for %s; every country drawn as no-data", self._metric, self.year
            )

    def _data_fill(self, feature_id: str) -> str:
        if self._scale is None or self._metrics is None:
            raise SessionStateError("No data built yet; call render() first")
        return self._scale(self._metrics.value_of(feature_id, self._metric))

    def _ensure_paths(self) -> None:
        if not self._paths_dirty or self._projector is None:
            return
        self._paths = {f.id: self._projector.path_for(f) for f in self._features}
        self._paths_dirty = False

    def scene(self) -> Scene:
        if self._projector is None or self._scale is None:
            raise SessionStateError("Nothing rendered yet; call render() first")
        self._ensure_paths()
        scale = self._scale
        ticks = tuple(scale.ticks())
        legend = Legend(
            metric=self._metric,
            domain=scale.extent,
            ticks=ticks,
            labels=tuple(scale.tick_labels()),
            colors=scale.colors,
            gradient=scale.gradient(),
        )
        features = tuple(
            FeatureShape(
                id=f.id,
                name=f.name,
                d=self._paths[f.id].to_svg(),
                fill=self._fills[f.id],
            )
            for f in self._features
            if self._by_id.get(f.id) is f
        )
        return Scene(
            width=self.viewport.width,
            height=self.viewport.height,
            mode=self.mode,
            year=int(self.year),  # type: ignore[arg-type]
            metric=self._metric,
            rotation=self._projector.rotation,
            scale=self._projector.scale,
            outline=self._projector.outline(),
            features=features,
            legend=legend,
            hovered=self._hovered,
            detail=self.detail.code if self.detail else None,
        )

    # ------------------------------------------------------------ hover/click

    def tooltip(self, feature_id: str) -> TooltipPayload | None:
        feature = self._by_id.get(feature_id)
        if feature is None:
            return None
        entry = self._metrics.get(feature_id) if self._metrics is not None else None
        if entry is None:
            return TooltipPayload(
                name=feature.name,
                code=feature.id,
                rank=NOT_AVAILABLE,
                population=NOT_AVAILABLE,
                density=NOT_AVAILABLE,
                sex_ratio=NOT_AVAILABLE,
                median_age=NOT_AVAILABLE,
                flag=flag_path(self.flag_base, feature.id),
            )
        return TooltipPayload(
            name=feature.name,
            code=feature.id,
            rank=str(entry.rank),
            population=entry.population or NOT_AVAILABLE,
            density=f"{entry.population_density} per km²"
            if entry.population_density
            else NOT_AVAILABLE,
            sex_ratio=entry.sex_ratio or NOT_AVAILABLE,
            median_age=f"{entry.median_age} years" if entry.median_age else NOT_AVAILABLE,
            flag=flag_path(self.flag_base, feature.id),
        )

    def hover(self, event: Hover) -> TooltipPayload | None:
        if event.feature_id not in self._fills:
            LOGGER.debug("hover on unknown feature %s", event.feature_id)
            return None
        if self._hovered is not None and self._hovered != event.feature_id:
            self._fills[self._hovered] = self._data_fill(self._hovered)
        self._hovered = event.feature_id
        self._fills[event.feature_id] = COLOR_HOVER
        return self.tooltip(event.feature_id)

    def unhover(self, event: Unhover) -> None:
        target = event.feature_id or self._hovered
        if target is None or target != self._hovered:
            return None
        self._fills[target] = self._data_fill(target)
        self._hovered = None
        return None

    def click(self, event: Click) -> CountryDetail | None:
        feature = self._by_id.get(event.feature_id)
        if feature is None:
            LOGGER.debug("click on unknown feature %s", event.feature_id)
            return None
        series = country_series(self.datasets.rows, feature.id)
        if not series.points:
            LOGGER.warning("No demographic series for %s (%s)", feature.name, feature.id)
        detail = CountryDetail(
            code=feature.id,
            name=feature.name,
            flag=flag_path(self.flag_base, feature.id),
            series=series,
            summary=series.summary(),
        )
        self.detail = detail
        self.controller.set_detail(True)
        self.viewport = replace(self.viewport, detail=True)
        if self.on_detail is not None:
            self.on_detail(feature.id, feature.name)
        self.render()
        return detail

    def close_detail(self) -> Scene:
        if self.detail is None:
            return self.scene()
        self.detail = None
        self.controller.set_detail(False)
        self.viewport = replace(self.viewport, detail=False)
        return self.render()

    def resize(self, event: ResizeSettled) -> Scene:
        self.viewport = Viewport(event.width, event.height, detail=self.detail is not None)
        return self.render()
