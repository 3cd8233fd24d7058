# SPDX-License-Identifier: Apache-2.0
"""Scene bundle renderer registry and built-in renderers."""

from __future__ import annotations

from . import svg_frames as _svg_frames  # noqa: F401
from . import svg_globe as _svg_globe  # noqa: F401
from .base import SceneBundle, SceneRenderer
from .registry import available, create, get, register

__all__ = [
    "SceneBundle",
    "SceneRenderer",
    "available",
    "create",
    "get",
    "register",
]
