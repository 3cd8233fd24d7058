# SPDX-License-Identifier: Apache-2.0
"""Cooperative millisecond clock and single-handle repeating timers.

Everything runs on the caller's thread: :meth:`Scheduler.advance` moves the
clock forward and fires due callbacks in due-time order. Callbacks may start
or cancel timers; a cancelled handle never fires again, even when it was
already due in the same ``advance`` call.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable

LOGGER = logging.getLogger(__name__)

TimerCallback = Callable[[float], None]


@dataclass(eq=False)
class TimerHandle:
    """A scheduled repeating callback; ``elapsed`` is passed to each call."""

    callback: TimerCallback
    interval_ms: float
    started_at: float
    name: str = ""
    active: bool = True
    ticks: int = 0
    next_due: float = field(default=0.0)


class Scheduler:
    """Deterministic event-loop clock driven by :meth:`advance`."""

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: list[tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def call_every(
        self, interval_ms: float, callback: TimerCallback, *, name: str = ""
    ) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        handle = TimerHandle(
            callback=callback,
            interval_ms=float(interval_ms),
            started_at=self._now,
            name=name,
            next_due=self._now + interval_ms,
        )
        heapq.heappush(self._queue, (handle.next_due, next(self._seq), handle))
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is not None:
            handle.active = False

    def pending(self) -> int:
        """Number of live handles still queued."""
        return sum(1 for _, _, h in self._queue if h.active)

    def advance(self, ms: float) -> int:
        """Move the clock forward by ``ms`` and fire due callbacks; return fire count."""
        if ms < 0:
            raise ValueError("cannot advance the clock backwards")
        target = self._now + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self._now = due
            handle.ticks += 1
            handle.next_due = due + handle.interval_ms
            heapq.heappush(self._queue, (handle.next_due, next(self._seq), handle))
            handle.callback(due - handle.started_at)
            fired += 1
        self._now = target
        self._queue = [entry for entry in self._queue if entry[2].active]
        heapq.heapify(self._queue)
        return fired


class CancellableTimer:
    """Owns at most one live :class:`TimerHandle` on a :class:`Scheduler`.

    :meth:`start` always cancels the previous handle before scheduling the
    new one, so two callbacks of the same timer can never both be live.
    """

    def __init__(self, scheduler: Scheduler, name: str = "timer") -> None:
        self._scheduler = scheduler
        self.name = name
        self._handle: TimerHandle | None = None

    @property
    def active(self) -> bool:
        return self._handle is not None and self._handle.active

    @property
    def handle(self) -> TimerHandle | None:
        return self._handle

    @property
    def ticks(self) -> int:
        """Ticks fired by the current (or most recent) handle."""
        return self._handle.ticks if self._handle is not None else 0

    def start(self, callback: TimerCallback, interval_ms: float) -> TimerHandle:
        self.cancel()
        self._handle = self._scheduler.call_every(interval_ms, callback, name=self.name)
        LOGGER.debug("%s started (every %sms)", self.name, interval_ms)
        return self._handle

    def cancel(self, handle: TimerHandle | None = None) -> bool:
        """Cancel ``handle`` (or the current one); return True if something stopped.

        A stale ``handle`` that is no longer the current one is cancelled
        without touching the current handle.
        """
        if handle is not None and handle is not self._handle:
            was_active = handle.active
            self._scheduler.cancel(handle)
            return was_active
        if self._handle is None or not self._handle.active:
            return False
        self._scheduler.cancel(self._handle)
        LOGGER.debug("%s stopped after %d ticks", self.name, self._handle.ticks)
        return True
