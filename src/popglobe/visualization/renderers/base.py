# SPDX-License-Identifier: Apache-2.0
"""Base interfaces for scene bundle renderers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from popglobe.visualization.session import RenderSession


@dataclass(slots=True)
class SceneBundle:
    """Output artifacts written by a renderer for one session."""

    output_dir: Path
    index_html: Path
    assets: Sequence[Path] = field(default_factory=tuple)


class SceneRenderer(ABC):
    """Contract for renderers that turn a live session into a static bundle.

    The session must already be initialised; renderers may drive its
    controls (year, metric, view) while building.
    """

    slug: str = "scene"
    description: str = ""

    def __init__(self, session: RenderSession, **options: Any) -> None:
        self.session = session
        self._options: dict[str, Any] = dict(options)

    def configure(self, **options: Any) -> None:
        self._options.update(options)

    @abstractmethod
    def build(self, *, output_dir: Path) -> SceneBundle:
        """Write the bundle inside ``output_dir``."""

    def _config(self) -> dict[str, Any]:
        state = self.session.state()
        return {
            "renderer": self.slug,
            "width": state["width"],
            "height": state["height"],
            "year": state["year"],
            "years": [state["min_year"], state["max_year"]],
            "metric": state["metric"],
            "mode": state["mode"],
            "rotation": state["rotation"],
            **{k: v for k, v in self._options.items() if v is not None},
        }
