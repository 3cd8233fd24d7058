# SPDX-License-Identifier: Apache-2.0
"""Holder for the single render session served by the HTTP API."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from popglobe.config import Settings
from popglobe.data.cache import DatasetCache
from popglobe.errors import ControlError, SessionStateError
from popglobe.visualization.projection import MODE_MAP
from popglobe.visualization.session import RenderSession

LOGGER = logging.getLogger(__name__)

CacheFactory = Callable[[], DatasetCache]


class SessionHolder:
    """Owns at most one :class:`RenderSession`; datasets are loaded once.

    Request handlers run in a thread pool, so every access goes through
    :attr:`lock`.
    """

    def __init__(self, settings: Settings, cache_factory: CacheFactory | None = None) -> None:
        self.settings = settings
        self._cache_factory = cache_factory
        self._cache: DatasetCache | None = None
        self.session: RenderSession | None = None
        self.lock = threading.RLock()

    def cache(self) -> DatasetCache:
        if self._cache is None:
            if self._cache_factory is not None:
                self._cache = self._cache_factory()
            elif self.settings.geojson_path and self.settings.csv_path:
                self._cache = DatasetCache.from_paths(
                    self.settings.geojson_path, self.settings.csv_path
                )
            else:
                raise ControlError(
                    "Dataset paths not configured; set POPGLOBE_GEOJSON_PATH "
                    "and POPGLOBE_CSV_PATH"
                )
        return self._cache

    def create(
        self,
        width: float,
        height: float,
        *,
        year: int | None = None,
        metric: str = "population",
        view: str = "3d",
    ) -> RenderSession:
        session = RenderSession(self.cache(), self.settings, metric=metric)
        session.init(width, height, year=year)
        if view == MODE_MAP:
            session.toggle_view()
        self.dispose()
        self.session = session
        return session

    def require(self) -> RenderSession:
        if self.session is None:
            raise SessionStateError("No active session; create one with POST /v1/session")
        return self.session

    def dispose(self) -> bool:
        if self.session is None:
            return False
        self.session.dispose()
        self.session = None
        LOGGER.debug("API session disposed")
        return True
