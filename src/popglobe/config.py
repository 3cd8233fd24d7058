# SPDX-License-Identifier: Apache-2.0
"""Runtime settings resolved from ``POPGLOBE_*`` environment variables."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from popglobe.utils.env import env, env_int, env_path

DEFAULT_FLAG_PATH = "./img/flags/"
DEFAULT_FRAME_MS = 16
DEFAULT_PLAYBACK_MS = 500
COLOR_SCALE_TYPES = ("linear", "log")


@dataclass(frozen=True, slots=True)
class Settings:
    geojson_path: Path | None = None
    csv_path: Path | None = None
    flag_path: str = DEFAULT_FLAG_PATH
    color_scale: str = "linear"
    frame_ms: int = DEFAULT_FRAME_MS
    playback_ms: int = DEFAULT_PLAYBACK_MS

    def __post_init__(self) -> None:
        if self.color_scale not in COLOR_SCALE_TYPES:
            raise ValueError(
                f"color_scale must be one of {', '.join(COLOR_SCALE_TYPES)}; "
                f"got {self.color_scale!r}"
            )
        if self.frame_ms <= 0 or self.playback_ms <= 0:
            raise ValueError("timer intervals must be positive")

    @classmethod
    def from_env(cls, **overrides: object) -> Settings:
        """Build settings from the environment; explicit ``overrides`` win."""
        geojson = env("GEOJSON_PATH")
        csv_path = env("CSV_PATH")
        values: dict[str, object] = {
            "geojson_path": env_path("GEOJSON_PATH", geojson) if geojson else None,
            "csv_path": env_path("CSV_PATH", csv_path) if csv_path else None,
            "flag_path": env("FLAG_PATH", DEFAULT_FLAG_PATH),
            "color_scale": (env("COLOR_SCALE", "linear") or "linear").lower(),
            "frame_ms": env_int("FRAME_MS", DEFAULT_FRAME_MS),
            "playback_ms": env_int("PLAYBACK_MS", DEFAULT_PLAYBACK_MS),
        }
        for key, value in overrides.items():
            if value is None:
                continue
            if key in {"geojson_path", "csv_path"}:
                value = Path(str(value)).expanduser()
            values[key] = value
        return cls(**values)  # type: ignore[arg-type]
