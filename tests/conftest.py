# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from pathlib import Path

import pytest
from helpers import sample_path

from popglobe.config import Settings
from popglobe.data.cache import DatasetCache
from popglobe.visualization.session import RenderSession


@pytest.fixture(autouse=True)
def _clean_popglobe_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer POPGLOBE_* variables from leaking into tests."""
    import os

    for key in list(os.environ):
        if key.startswith("POPGLOBE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def geojson_path() -> Path:
    return sample_path("world.geojson")


@pytest.fixture
def csv_path() -> Path:
    return sample_path("demographics.csv")


@pytest.fixture
def settings(geojson_path: Path, csv_path: Path) -> Settings:
    return Settings(geojson_path=geojson_path, csv_path=csv_path)


@pytest.fixture
def cache(geojson_path: Path, csv_path: Path) -> DatasetCache:
    return DatasetCache.from_paths(geojson_path, csv_path)


@pytest.fixture
def session(cache: DatasetCache, settings: Settings):
    s = RenderSession(cache, settings)
    s.init(960, 720)
    yield s
    s.dispose()
