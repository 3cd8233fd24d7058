# SPDX-License-Identifier: Apache-2.0
"""Immutable render output: country shapes, outline and legend as SVG or JSON."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from xml.sax.saxutils import escape, quoteattr

from popglobe.utils.serialize import to_obj

from .projection import fmt_number

OCEAN_FILL = "#eaf2fb"
OUTLINE_STROKE = "#7a8793"
COUNTRY_STROKE = "#ffffff"
LEGEND_HEIGHT = 12


@dataclass(frozen=True, slots=True)
class FeatureShape:
    id: str
    name: str
    d: str
    fill: str


@dataclass(frozen=True, slots=True)
class Legend:
    metric: str
    domain: tuple[float, float] | None
    ticks: tuple[float, ...]
    labels: tuple[str, ...]
    colors: tuple[str, ...]
    gradient: str


@dataclass(frozen=True, slots=True)
class Scene:
    """Snapshot of one render pass in screen coordinates."""

    width: float
    height: float
    mode: str
    year: int
    metric: str
    rotation: tuple[float, float]
    scale: float
    outline: tuple[float, float, float] | None
    features: tuple[FeatureShape, ...]
    legend: Legend
    hovered: str | None = None
    detail: str | None = None

    def feature(self, feature_id: str) -> FeatureShape | None:
        return next((f for f in self.features if f.id == feature_id), None)

    def to_dict(self) -> dict[str, Any]:
        return to_obj(self)

    def to_svg(self) -> str:
        w, h = fmt_number(self.width), fmt_number(self.height)
        lines = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" '
            f'viewBox="0 0 {w} {h}" data-mode="{self.mode}" '
            f'data-year="{self.year}" data-metric="{self.metric}">',
            _legend_defs(self.legend),
        ]
        if self.outline is not None:
            cx, cy, r = self.outline
            lines.append(
                f'<circle class="globe" cx="{fmt_number(cx)}" cy="{fmt_number(cy)}" r="{fmt_number(r)}" '
                f'fill="{OCEAN_FILL}" stroke="{OUTLINE_STROKE}"/>'
            )
        lines.append('<g class="countries">')
        for shape in self.features:
            if not shape.d:
                continue
            lines.append(
                f"<path id={quoteattr(shape.id)} class=\"country\" d=\"{shape.d}\" "
                f'fill="{shape.fill}" stroke="{COUNTRY_STROKE}" stroke-width="0.5">'
                f"<title>{escape(shape.name)}</title></path>"
            )
        lines.append("</g>")
        lines.extend(_legend_body(self.legend, self.width, self.height))
        lines.append("</svg>")
        return "\n".join(lines) + "\n"


def _legend_defs(legend: Legend) -> str:
    stops = []
    n = len(legend.colors)
    for index, color in enumerate(legend.colors):
        offset = 0 if n == 1 else round(100 * index / (n - 1))
        stops.append(f'<stop offset="{offset}%" stop-color="{color}"/>')
    return (
        '<defs><linearGradient id="legend-gradient" x1="0%" x2="100%">'
        + "".join(stops)
        + "</linearGradient></defs>"
    )


def _legend_body(legend: Legend, width: float, height: float) -> list[str]:
    if legend.domain is None:
        return []
    bar_w = min(300.0, width * 0.6)
    x0 = (width - bar_w) / 2
    y0 = height - 40
    lo, hi = legend.domain
    out = [
        f'<g class="legend" transform="translate({fmt_number(x0)},{fmt_number(y0)})">',
        f'<rect width="{fmt_number(bar_w)}" height="{LEGEND_HEIGHT}" fill="url(#legend-gradient)"/>',
    ]
    for tick, label in zip(legend.ticks, legend.labels):
        x = 0.0 if hi == lo else bar_w * (tick - lo) / (hi - lo)
        out.append(
            f'<text x="{fmt_number(x)}" y="{LEGEND_HEIGHT + 12}" font-size="10" '
            f'text-anchor="middle">{escape(label)}</text>'
        )
    out.append("</g>")
    return out
