# SPDX-License-Identifier: Apache-2.0
from .cache import DatasetCache, Datasets
from .demographics import (
    METRICS,
    CountryMetric,
    CountrySeries,
    MetricSet,
    build_country_metrics,
    country_series,
    format_population,
    load_demographic_csv,
    year_range,
)
from .geo import GeoFeature, features_from_geojson, load_geojson

__all__ = [
    "METRICS",
    "CountryMetric",
    "CountrySeries",
    "DatasetCache",
    "Datasets",
    "GeoFeature",
    "MetricSet",
    "build_country_metrics",
    "country_series",
    "features_from_geojson",
    "format_population",
    "load_demographic_csv",
    "load_geojson",
    "year_range",
]
