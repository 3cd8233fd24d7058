# SPDX-License-Identifier: Apache-2.0
"""Load-once cache for the boundary and demographic datasets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from popglobe.errors import DatasetLoadError

from .demographics import Row, load_demographic_csv, year_range
from .geo import GeoFeature, load_geojson

LOGGER = logging.getLogger(__name__)

GeoLoader = Callable[[], Sequence[GeoFeature]]
RowsLoader = Callable[[], Sequence[Row]]


@dataclass(frozen=True, slots=True)
class Datasets:
    features: tuple[GeoFeature, ...]
    rows: tuple[Row, ...]
    years: tuple[int, int]


class DatasetCache:
    """Memoizes the two dataset loads; later calls return the cached value.

    Both datasets must load before anything is returned: a failure in either
    loader propagates as :class:`DatasetLoadError` and nothing is cached, so a
    later call retries.
    """

    def __init__(self, geo_loader: GeoLoader, rows_loader: RowsLoader) -> None:
        self._geo_loader = geo_loader
        self._rows_loader = rows_loader
        self._datasets: Datasets | None = None
        self.load_count = 0

    @classmethod
    def from_paths(cls, geojson_path: str | Path, csv_path: str | Path) -> DatasetCache:
        return cls(
            lambda: load_geojson(geojson_path),
            lambda: load_demographic_csv(csv_path),
        )

    @classmethod
    def from_memory(
        cls, features: Sequence[GeoFeature], rows: Sequence[Row]
    ) -> DatasetCache:
        return cls(lambda: tuple(features), lambda: tuple(rows))

    @property
    def loaded(self) -> bool:
        return self._datasets is not None

    def load(self) -> Datasets:
        if self._datasets is not None:
            return self._datasets
        try:
            features = tuple(self._geo_loader())
            rows = tuple(self._rows_loader())
        except DatasetLoadError:
            raise
        except Exception as exc:
            raise DatasetLoadError(f"Dataset load failed: {exc}") from exc
        years = year_range(rows)
        if years is None:
            raise DatasetLoadError("Demographic dataset has no Country/Area rows")
        self.load_count += 1
        self._datasets = Datasets(features=features, rows=rows, years=years)
        LOGGER.debug(
            "Datasets cached: %d features, %d rows, years %d-%d",
            len(features),
            len(rows),
            *years,
        )
        return self._datasets
