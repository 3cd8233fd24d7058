# SPDX-License-Identifier: Apache-2.0
"""CLI handlers for rendering globe bundles and inspecting country series."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from popglobe.config import COLOR_SCALE_TYPES, Settings
from popglobe.data.demographics import (
    METRICS,
    country_series,
    load_demographic_csv,
)
from popglobe.errors import PopglobeError
from popglobe.utils.cli_helpers import add_verbosity_args, apply_verbosity
from popglobe.utils.io_utils import open_text_output
from popglobe.utils.serialize import to_obj
from popglobe.visualization.interaction import Zoom
from popglobe.visualization.projection import MODE_MAP, MODES
from popglobe.visualization.renderers import available, create
from popglobe.visualization.session import RenderSession

LOGGER = logging.getLogger(__name__)


def _renderer_options(ns: Any) -> dict[str, Any]:
    options: dict[str, Any] = {}
    if ns.title:
        options["title"] = ns.title
    if ns.start_year is not None:
        options["start_year"] = ns.start_year
    if ns.end_year is not None:
        options["end_year"] = ns.end_year
    return options


def handle_render(ns: Any) -> int:
    """Handle ``popglobe render``."""
    apply_verbosity(ns)

    renderer_slugs = sorted(r.slug for r in available())
    if ns.target not in renderer_slugs:
        raise SystemExit(
            f"Unknown renderer '{ns.target}'. Available: {', '.join(renderer_slugs)}"
        )

    try:
        settings = Settings.from_env(
            geojson_path=ns.geojson,
            csv_path=ns.csv,
            flag_path=ns.flag_path,
            color_scale=ns.color_scale,
        )
        session = RenderSession.from_settings(settings, metric=ns.metric)
        session.init(ns.width, ns.height, year=ns.year)
    except PopglobeError as exc:
        LOGGER.error("%s", exc)
        return 2

    try:
        if ns.view == MODE_MAP:
            session.toggle_view()
        if ns.zoom is not None:
            session.dispatch(Zoom(ns.zoom))
        if ns.advance:
            session.advance(ns.advance)
        renderer = create(ns.target, session, **_renderer_options(ns))
        bundle = renderer.build(output_dir=Path(ns.output))
    except PopglobeError as exc:
        LOGGER.error("%s", exc)
        return 2
    finally:
        session.dispose()

    LOGGER.info("Generated globe bundle at %s", bundle.index_html)
    if bundle.assets:
        LOGGER.debug(
            "Bundle assets: %s",
            ", ".join(str(path.relative_to(bundle.output_dir)) for path in bundle.assets),
        )
    return 0


def handle_detail(ns: Any) -> int:
    """Handle ``popglobe detail``: dump one country's series as JSON."""
    apply_verbosity(ns)
    settings = Settings.from_env(csv_path=ns.csv)
    if settings.csv_path is None:
        LOGGER.error("A demographic CSV is required (--csv or POPGLOBE_CSV_PATH)")
        return 2
    try:
        rows = load_demographic_csv(settings.csv_path)
    except PopglobeError as exc:
        LOGGER.error("%s", exc)
        return 2
    code = ns.code.strip().upper()
    series = country_series(rows, code)
    if not series.points:
        LOGGER.warning("No Country/Area rows for %s", code)
    payload = {
        "code": code,
        "points": to_obj(series.points),
        "summary": series.summary(),
    }
    with open_text_output(ns.output) as fh:
        fh.write(json.dumps(payload, indent=2 if ns.pretty else None) + "\n")
    return 0 if series.points else 1


def handle_renderers(ns: Any) -> int:
    apply_verbosity(ns)
    for renderer in sorted(available(), key=lambda r: r.slug):
        print(f"{renderer.slug}\t{renderer.description}")
    return 0


def register_cli(subparsers: Any) -> None:
    """Register ``render``, ``detail`` and ``renderers`` subcommands."""
    render = subparsers.add_parser(
        "render", help="Render the globe or map into a static bundle"
    )
    render.add_argument("--geojson", help="Country boundary GeoJSON file")
    render.add_argument("--csv", help="Demographic CSV file")
    render.add_argument("--output", "-o", required=True, help="Bundle output directory")
    render.add_argument("--target", default="svg-globe", help="Bundle renderer slug")
    render.add_argument("--year", type=int, help="Dataset year (default: latest)")
    render.add_argument("--metric", choices=METRICS, default="population")
    render.add_argument("--view", choices=MODES, default=MODES[0])
    render.add_argument("--width", type=float, default=960)
    render.add_argument("--height", type=float, default=720)
    render.add_argument("--zoom", type=float, help="Zoom gesture factor")
    render.add_argument(
        "--advance", type=float, default=0, help="Milliseconds of auto-rotation first"
    )
    render.add_argument("--color-scale", choices=COLOR_SCALE_TYPES)
    render.add_argument("--flag-path", help="Base path for flag images")
    render.add_argument("--title", help="Page title")
    render.add_argument("--start-year", type=int, help="First frame (svg-frames)")
    render.add_argument("--end-year", type=int, help="Last frame (svg-frames)")
    add_verbosity_args(render)
    render.set_defaults(func=handle_render)

    detail = subparsers.add_parser(
        "detail", help="Print a country's multi-year statistics as JSON"
    )
    detail.add_argument("code", help="ISO3 country code")
    detail.add_argument("--csv", help="Demographic CSV file")
    detail.add_argument("--output", "-o", default="-", help="Output path or '-'")
    detail.add_argument("--pretty", action="store_true", help="Indent the JSON")
    add_verbosity_args(detail)
    detail.set_defaults(func=handle_detail)

    renderers = subparsers.add_parser("renderers", help="List bundle renderers")
    add_verbosity_args(renderers)
    renderers.set_defaults(func=handle_renderers)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="popglobe", description="Interactive world demographics globe"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    register_cli(subparsers)
    return parser
