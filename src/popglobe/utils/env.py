# SPDX-License-Identifier: Apache-2.0
"""Environment helpers for ``POPGLOBE_*`` configuration keys.

All helpers take the bare key (``"FRAME_MS"``) and read ``POPGLOBE_FRAME_MS``.
Empty values are treated as unset.
"""

from __future__ import annotations

import os
from pathlib import Path

PREFIX = "POPGLOBE_"


def env(key: str, default: str | None = None) -> str | None:
    """Return the raw value of ``POPGLOBE_<key>`` or ``default``."""
    value = os.environ.get(f"{PREFIX}{key}")
    if value is None or value.strip() == "":
        return default
    return value.strip()


def env_int(key: str, default: int) -> int:
    value = env(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def env_path(key: str, default: str | Path) -> Path:
    value = env(key)
    return Path(value).expanduser() if value is not None else Path(default)
