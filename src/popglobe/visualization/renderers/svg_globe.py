# SPDX-License-Identifier: Apache-2.0
"""Static SVG globe bundle: the current scene plus hover tooltips."""

from __future__ import annotations

import html
import json
import logging
from pathlib import Path
from textwrap import dedent

from .base import SceneBundle, SceneRenderer
from .registry import register

LOGGER = logging.getLogger(__name__)

_PAGE_STYLE = (
    "body { margin: 0; font-family: system-ui, sans-serif; background: #f7f9fb; }\n"
    "#popglobe-tooltip { position: absolute; display: none; pointer-events: none;"
    " background: #fff; border: 1px solid #ccc; border-radius: 4px; padding: 8px;"
    " font-size: 12px; }\n"
    "path.country:hover { fill: #d3d3d3; }"
)

_TOOLTIP_SCRIPT = dedent(
    """
    (function () {
      const tips = window.POPGLOBE_TOOLTIPS || {};
      const box = document.getElementById("popglobe-tooltip");
      document.querySelectorAll("path.country").forEach(function (el) {
        el.addEventListener("mousemove", function (ev) {
          const t = tips[el.id];
          if (!t) { return; }
          box.innerHTML = "<strong>" + t.name + "</strong><br>Rank: " + t.rank +
            "<br>Population: " + t.population + "<br>Density: " + t.density +
            "<br>Sex ratio: " + t.sex_ratio + "<br>Median age: " + t.median_age;
          box.style.left = (ev.pageX + 12) + "px";
          box.style.top = (ev.pageY + 12) + "px";
          box.style.display = "block";
        });
        el.addEventListener("mouseleave", function () { box.style.display = "none"; });
      });
    })();
    """
).strip()


@register
class SvgGlobeRenderer(SceneRenderer):
    slug = "svg-globe"
    description = "Single-scene SVG bundle with legend and hover tooltips."

    def build(self, *, output_dir: Path) -> SceneBundle:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        scene = self.session.scene()
        svg = scene.to_svg()
        tooltips = {
            shape.id: tip.to_dict()
            for shape in scene.features
            if (tip := self.session.tooltip(shape.id)) is not None
        }

        svg_path = output_dir / "globe.svg"
        scene_path = output_dir / "scene.json"
        config_path = output_dir / "config.json"
        index_html = output_dir / "index.html"

        svg_path.write_text(svg, encoding="utf-8")
        scene_path.write_text(json.dumps(scene.to_dict(), indent=2) + "\n", encoding="utf-8")
        config = self._config()
        config_path.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")
        index_html.write_text(self._render_index_html(config, svg, tooltips), encoding="utf-8")

        LOGGER.debug("svg-globe: %d shapes written to %s", len(scene.features), svg_path)
        return SceneBundle(
            output_dir=output_dir,
            index_html=index_html,
            assets=(svg_path, scene_path, config_path),
        )

    def _render_index_html(
        self, config: dict[str, object], svg: str, tooltips: dict[str, dict]
    ) -> str:
        title = html.escape(str(self._options.get("title") or "popglobe"))
        return (
            "<!DOCTYPE html>\n"
            '<html lang="en">\n<head>\n<meta charset="utf-8" />\n'
            f"<title>{title} {config['metric']} {config['year']}</title>\n"
            f"<style>\n{_PAGE_STYLE}\n</style>\n</head>\n<body>\n"
            f"{svg}"
            '<div id="popglobe-tooltip"></div>\n'
            f"<script>\nwindow.POPGLOBE_CONFIG = {json.dumps(config)};\n"
            f"window.POPGLOBE_TOOLTIPS = {json.dumps(tooltips)};\n</script>\n"
            f"<script>\n{_TOOLTIP_SCRIPT}\n</script>\n"
            "</body>\n</html>\n"
        )
