# SPDX-License-Identifier: Apache-2.0
"""Year-by-year SVG frames with a slider page, one frame per dataset year."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from popglobe.errors import ControlError

from .base import SceneBundle, SceneRenderer
from .registry import register

LOGGER = logging.getLogger(__name__)


@register
class SvgFramesRenderer(SceneRenderer):
    slug = "svg-frames"
    description = "One SVG per year between start_year and end_year with a slider."

    def _year_span(self) -> tuple[int, int]:
        min_year, max_year = self.session.year_range
        start = int(self._options.get("start_year") or min_year)
        end = int(self._options.get("end_year") or max_year)
        if start > end:
            raise ControlError(f"start_year {start} is after end_year {end}")
        return start, end

    def build(self, *, output_dir: Path) -> SceneBundle:
        output_dir = Path(output_dir)
        frames_dir = output_dir / "frames"
        frames_dir.mkdir(parents=True, exist_ok=True)

        start, end = self._year_span()
        original_year = self.session.state()["year"]
        frames: list[dict[str, object]] = []
        written: list[Path] = []
        try:
            for year in range(start, end + 1):
                scene = self.session.set_year(year)
                path = frames_dir / f"{year}.svg"
                path.write_text(scene.to_svg(), encoding="utf-8")
                written.append(path)
                frames.append({"year": year, "path": f"frames/{path.name}"})
        finally:
            self.session.set_year(original_year)

        config = {**self._config(), "frames": frames}
        config_path = output_dir / "config.json"
        config_path.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")
        index_html = output_dir / "index.html"
        index_html.write_text(self._render_index_html(config, frames), encoding="utf-8")
        LOGGER.info("svg-frames: %d frames (%d-%d)", len(frames), start, end)
        return SceneBundle(
            output_dir=output_dir,
            index_html=index_html,
            assets=(config_path, *written),
        )

    def _render_index_html(
        self, config: dict[str, object], frames: list[dict[str, object]]
    ) -> str:
        last = len(frames) - 1
        return (
            "<!DOCTYPE html>\n"
            '<html lang="en">\n<head>\n<meta charset="utf-8" />\n'
            f"<title>popglobe {config['metric']}</title>\n</head>\n<body>\n"
            f'<img id="frame" src="{frames[last]["path"]}" alt="globe" />\n'
            f'<input id="year" type="range" min="0" max="{last}" value="{last}" />\n'
            f'<span id="label">{frames[last]["year"]}</span>\n'
            f"<script>\nconst FRAMES = {json.dumps(frames)};\n"
            'document.getElementById("year").addEventListener("input", function (ev) {\n'
            "  const f = FRAMES[Number(ev.target.value)];\n"
            '  document.getElementById("frame").src = f.path;\n'
            '  document.getElementById("label").textContent = f.year;\n'
            "});\n</script>\n</body>\n</html>\n"
        )
