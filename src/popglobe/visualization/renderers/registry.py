# SPDX-License-Identifier: Apache-2.0
"""Registry for scene bundle renderers."""

from __future__ import annotations

from typing import Any, Iterable, TypeVar

from .base import SceneRenderer

_RendererT = TypeVar("_RendererT", bound=SceneRenderer)

_REGISTRY: dict[str, type[SceneRenderer]] = {}


def register(renderer_cls: type[_RendererT]) -> type[_RendererT]:
    """Register ``renderer_cls`` keyed by its ``slug`` attribute."""

    if not issubclass(renderer_cls, SceneRenderer):
        raise TypeError("renderer must inherit SceneRenderer")
    slug = renderer_cls.slug
    if not slug:
        raise ValueError("renderer slug must be non-empty")
    if slug in _REGISTRY:
        raise ValueError(f"renderer slug already registered: {slug}")
    _REGISTRY[slug] = renderer_cls
    return renderer_cls


def get(slug: str) -> type[SceneRenderer]:
    try:
        return _REGISTRY[slug]
    except KeyError as exc:
        raise KeyError(f"unknown renderer slug: {slug}") from exc


def create(slug: str, session: Any, **options: Any) -> SceneRenderer:
    """Instantiate the renderer registered under ``slug`` for ``session``."""

    return get(slug)(session, **options)


def available() -> Iterable[type[SceneRenderer]]:
    return _REGISTRY.values()
