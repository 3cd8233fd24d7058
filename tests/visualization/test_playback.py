# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from popglobe.visualization.playback import YearPlayback
from popglobe.visualization.session import RenderSession
from popglobe.visualization.timer import Scheduler


def test_playback_runs_to_the_last_year_then_stops(cache, settings) -> None:
    s = RenderSession(cache, settings)
    s.init(960, 720, year=2020)
    try:
        assert s.play()
        seen = []
        for _ in range(3):
            s.advance(500)
            seen.append(s.scene().year)
        assert seen == [2021, 2022, 2023]
        assert s.playback.playing

        s.advance(500)
        assert not s.playback.playing
        assert s.scene().year == 2023

        s.advance(5000)
        assert s.scene().year == 2023
    finally:
        s.dispose()


def test_pause_and_reset(cache, settings) -> None:
    s = RenderSession(cache, settings)
    s.init(960, 720, year=2020)
    try:
        s.play()
        assert s.play() is False
        s.advance(500)
        assert s.pause() is True
        s.advance(2000)
        assert s.state()["year"] == 2021

        s.play()
        scene = s.reset()
        assert scene.year == 2023
        assert not s.playback.playing
    finally:
        s.dispose()


def test_year_playback_unit_callbacks() -> None:
    sched = Scheduler()
    year = {"value": 1999}
    changes: list[int] = []
    playback = YearPlayback(
        sched,
        get_year=lambda: year["value"],
        set_year=lambda y: year.__setitem__("value", y),
        max_year=2001,
        on_change=lambda: changes.append(year["value"]),
        interval_ms=100,
    )
    playback.play()
    sched.advance(1000)
    assert changes == [2000, 2001]
    assert not playback.playing
    assert playback.timer.ticks == 3
