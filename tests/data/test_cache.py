# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import pytest
from helpers import country_row, square_feature

from popglobe.data.cache import DatasetCache
from popglobe.errors import DatasetLoadError


def test_loads_once_and_reuses(cache) -> None:
    first = cache.load()
    second = cache.load()
    assert first is second
    assert cache.load_count == 1
    assert cache.loaded
    assert first.years == (2020, 2023)
    assert len(first.features) == 4


def test_failure_is_not_cached() -> None:
    calls = {"n": 0}

    def flaky_rows():
        calls["n"] += 1
        if calls["n"] == 1:
            raise OSError("disk went away")
        return [country_row("AAA", 2020, "1")]

    cache = DatasetCache(lambda: [square_feature("AAA", 0, 0)], flaky_rows)
    with pytest.raises(DatasetLoadError, match="disk went away"):
        cache.load()
    assert not cache.loaded
    assert cache.load().years == (2020, 2020)
    assert calls["n"] == 2


def test_rows_without_countries_fail() -> None:
    cache = DatasetCache.from_memory(
        [square_feature("AAA", 0, 0)],
        [country_row("WLD", 2020, "1", row_type="World")],
    )
    with pytest.raises(DatasetLoadError, match="Country/Area"):
        cache.load()


def test_missing_files(tmp_path, csv_path) -> None:
    cache = DatasetCache.from_paths(tmp_path / "none.geojson", csv_path)
    with pytest.raises(DatasetLoadError):
        cache.load()
    assert cache.load_count == 0
