# SPDX-License-Identifier: Apache-2.0
"""Year-by-year animation driven by its own timer."""

from __future__ import annotations

import logging
from typing import Callable

from popglobe.config import DEFAULT_PLAYBACK_MS

from .timer import CancellableTimer, Scheduler

LOGGER = logging.getLogger(__name__)


class YearPlayback:
    """Steps the year forward every ``interval_ms`` until ``max_year``.

    ``get_year``/``set_year`` read and write the year owned elsewhere;
    ``on_change`` runs after every step (normally a data-only repaint).
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        get_year: Callable[[], int],
        set_year: Callable[[int], None],
        max_year: int,
        on_change: Callable[[], object],
        interval_ms: float = DEFAULT_PLAYBACK_MS,
    ) -> None:
        self._timer = CancellableTimer(scheduler, name="playback")
        self._get_year = get_year
        self._set_year = set_year
        self.max_year = max_year
        self._on_change = on_change
        self.interval_ms = interval_ms

    @property
    def playing(self) -> bool:
        return self._timer.active

    @property
    def timer(self) -> CancellableTimer:
        return self._timer

    def play(self) -> bool:
        if self.playing:
            return False
        self._timer.start(self._tick, self.interval_ms)
        LOGGER.info("Playback started at %s", self._get_year())
        return True

    def pause(self) -> bool:
        stopped = self._timer.cancel()
        if stopped:
            LOGGER.info("Playback paused at %s", self._get_year())
        return stopped

    def reset(self) -> None:
        self.pause()
        self._set_year(self.max_year)
        self._on_change()

    def _tick(self, elapsed: float) -> None:
        year = self._get_year()
        if year < self.max_year:
            self._set_year(year + 1)
            self._on_change()
            return
        self._timer.cancel()
        LOGGER.info("Playback finished at %s", year)
