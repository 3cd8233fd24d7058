# SPDX-License-Identifier: Apache-2.0
"""Choropleth colour scales shared by the map fill, the legend and tooltips."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np
from matplotlib.colors import to_hex, to_rgb

from popglobe.config import COLOR_SCALE_TYPES
from popglobe.data.demographics import validate_metric

COLOR_RANGES: dict[str, tuple[str, ...]] = {
    "population": ("#ffffff", "#5c1010"),
    "density": ("#ffffff", "#1e5c8b"),
    # low (more female) to high (more male)
    "sex-ratio": ("#8b1e5c", "#ffffff", "#1e5c8b"),
    # young to old
    "median-age": ("#5c8b1e", "#ffffff", "#8b5c1e"),
}
COLOR_NO_DATA = "#b2b2b2"
COLOR_HOVER = "#d3d3d3"

SEX_RATIO_PARITY = 100.0

_SI_PREFIXES = ("y", "z", "a", "f", "p", "n", "µ", "m", "", "k", "M", "G", "T", "P", "E", "Z", "Y")


def _is_data(value: float | None) -> bool:
    if value is None:
        return False
    try:
        value = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value > 0


@dataclass(frozen=True)
class ColorScale:
    """Immutable ``value -> "#rrggbb"`` mapping.

    ``domain`` has two stops for sequential scales and three for diverging
    ones. A diverging centre may lie outside ``[min, max]``: it still maps to
    the middle colour and each side interpolates towards it. An empty domain
    marks a degenerate scale that only ever returns :data:`COLOR_NO_DATA`.
    """

    metric: str
    domain: tuple[float, ...]
    colors: tuple[str, ...]
    kind: str = "sequential"
    transform: str = "linear"
    _rgb: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.domain and len(self.domain) != len(self.colors):
            raise ValueError("domain and colors must have the same number of stops")
        object.__setattr__(self, "_rgb", np.array([to_rgb(c) for c in self.colors]))

    @property
    def degenerate(self) -> bool:
        return not self.domain

    @property
    def extent(self) -> tuple[float, float] | None:
        if self.degenerate:
            return None
        return self.domain[0], self.domain[-1]

    def _position(self, value: float, lo: float, hi: float) -> float:
        if hi == lo:
            return 0.5
        if self.transform == "log":
            value, lo, hi = math.log(value), math.log(lo), math.log(hi)
        return min(1.0, max(0.0, (value - lo) / (hi - lo)))

    def __call__(self, value: float | None) -> str:
        if self.degenerate or not _is_data(value):
            return COLOR_NO_DATA
        value = float(value)  # type: ignore[arg-type]
        if self.kind == "diverging":
            return self._diverging(value)
        stops = self.domain
        if value < stops[0]:
            return self.colors[0]
        if value > stops[-1]:
            return self.colors[-1]
        segment = next(i for i in range(len(stops) - 1) if value <= stops[i + 1])
        t = self._position(value, stops[segment], stops[segment + 1])
        rgb = self._rgb[segment] + (self._rgb[segment + 1] - self._rgb[segment]) * t
        return to_hex(rgb)

    def _diverging(self, value: float) -> str:
        lo, center, hi = self.domain
        if value == center:
            return self.colors[1]
        if value < center:
            if value <= lo:
                return self.colors[0]
            segment, t = 0, (value - lo) / (center - lo)
        else:
            if value >= hi:
                return self.colors[2]
            segment, t = 1, (value - center) / (hi - center)
        rgb = self._rgb[segment] + (self._rgb[segment + 1] - self._rgb[segment]) * t
        return to_hex(rgb)

    def ticks(self, count: int = 5) -> list[float]:
        """Evenly stepped "nice" tick values covering the domain extent."""
        extent = self.extent
        if extent is None:
            return []
        lo, hi = extent
        if hi == lo:
            return [lo]
        step = _tick_step(lo, hi, count)
        first = math.ceil(lo / step)
        last = math.floor(hi / step)
        return [float(v) for v in np.arange(first, last + 1) * step]

    def tick_labels(self, count: int = 5) -> list[str]:
        return [format_tick(self.metric, v) for v in self.ticks(count)]

    def gradient(self) -> str:
        """CSS gradient matching the legend bar for this scale."""
        return f"linear-gradient(to right, {', '.join(self.colors)})"


def _tick_step(lo: float, hi: float, count: int) -> float:
    raw = (hi - lo) / max(count, 1)
    power = 10 ** math.floor(math.log10(raw))
    error = raw / power
    if error >= math.sqrt(50):
        power *= 10
    elif error >= math.sqrt(10):
        power *= 5
    elif error >= math.sqrt(2):
        power *= 2
    return power


def format_si(value: float, precision: int = 2) -> str:
    """Format with ``precision`` significant digits and an SI prefix (``1.4G``)."""
    if value == 0:
        return f"{0:.{max(precision - 1, 0)}f}"
    sign = "-" if value < 0 else ""
    mantissa_text, exp_text = f"{abs(value):.{precision - 1}e}".split("e")
    exponent = int(exp_text)
    index = max(-8, min(8, math.floor(exponent / 3)))
    shift = exponent - 3 * index
    scaled = float(mantissa_text) * 10**shift
    decimals = max(0, precision - 1 - shift)
    return f"{sign}{scaled:.{decimals}f}{_SI_PREFIXES[index + 8]}"


def format_tick(metric: str, value: float) -> str:
    if metric == "sex-ratio":
        return f"{value:.1f}"
    if metric == "median-age":
        return f"{value:.0f}y"
    if metric == "density":
        return f"{value:.0f}"
    return format_si(value, 2)


class ColorMapper:
    """Builds :class:`ColorScale` instances from the current metric values."""

    def __init__(self, scale_type: str = "linear") -> None:
        if scale_type not in COLOR_SCALE_TYPES:
            raise ValueError(f"scale_type must be linear or log; got {scale_type!r}")
        self.scale_type = scale_type

    def build(self, metric: str, values: Iterable[float | None]) -> ColorScale:
        validate_metric(metric)
        colors = COLOR_RANGES[metric]
        positive = [float(v) for v in values if _is_data(v)]
        if not positive:
            return ColorScale(metric=metric, domain=(), colors=colors)
        lo, hi = min(positive), max(positive)
        if metric == "sex-ratio":
            return ColorScale(
                metric, (lo, SEX_RATIO_PARITY, hi), colors, kind="diverging"
            )
        if metric == "median-age":
            return ColorScale(metric, (lo, (lo + hi) / 2, hi), colors, kind="diverging")
        transform = "log" if metric == "population" and self.scale_type == "log" else "linear"
        return ColorScale(metric, (lo, hi), colors, transform=transform)
