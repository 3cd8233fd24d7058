# SPDX-License-Identifier: Apache-2.0
"""World demographic rows: parsing, per-year country metrics and time series.

Raw rows are kept exactly as read from the CSV (string cells). Everything
derived from them (:class:`MetricSet`, :class:`CountrySeries`) is rebuilt as
a fresh immutable value on every year or metric change.
"""

from __future__ import annotations

import csv
import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator, Literal, Mapping, Sequence

from popglobe.errors import ControlError, DatasetLoadError

LOGGER = logging.getLogger(__name__)

COL_TYPE = "Type"
COL_YEAR = "Year"
COL_NAME = "Region, subregion, country or area *"
COL_CODE = "ISO3 Alpha-code"
COL_POPULATION = "Total Population, as of 1 July (thousands)"
COL_SEX_RATIO = "Population Sex Ratio, as of 1 July (males per 100 females)"
COL_DENSITY = "Population Density, as of 1 July (persons per square km)"
COL_MEDIAN_AGE = "Median Age, as of 1 July (years)"

REQUIRED_COLUMNS = (
    COL_TYPE,
    COL_YEAR,
    COL_NAME,
    COL_CODE,
    COL_POPULATION,
    COL_SEX_RATIO,
    COL_DENSITY,
    COL_MEDIAN_AGE,
)

COUNTRY_TYPE = "Country/Area"

SEX_RATIO_DEFAULT = 100.0
DENSITY_DEFAULT = 0.0
MEDIAN_AGE_DEFAULT = 0.0

MetricName = Literal["population", "density", "sex-ratio", "median-age"]
METRICS: tuple[str, ...] = ("population", "density", "sex-ratio", "median-age")

# Numeric attribute of CountryMetric backing each metric
METRIC_FIELDS: dict[str, str] = {
    "population": "population_number",
    "density": "population_density_number",
    "sex-ratio": "sex_ratio_number",
    "median-age": "median_age_number",
}

_NON_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_FLOAT = re.compile(r"\d+(?:\.\d*)?|\.\d+")

Row = Mapping[str, str]


def validate_metric(metric: str) -> str:
    if metric not in METRIC_FIELDS:
        raise ControlError(
            f"Unknown metric '{metric}'. Expected one of: {', '.join(METRICS)}"
        )
    return metric


def _strip(text: Any) -> str:
    return _NON_NUMERIC.sub("", "" if text is None else str(text))


def parse_number(text: Any, default: float) -> float:
    """Parse the leading number of ``text`` after stripping punctuation.

    Returns ``default`` when nothing parses or the parsed value is zero.
    """
    match = _LEADING_FLOAT.match(_strip(text))
    if not match:
        return default
    value = float(match.group())
    return value if value else default


def parse_population(text: Any) -> float:
    """Return the head count for a "thousands" cell; 0 when unparseable."""
    stripped = _strip(text)
    if not stripped:
        return 0.0
    try:
        return float(stripped) * 1000
    except ValueError:
        return 0.0


def parse_year(text: Any) -> int | None:
    try:
        value = float(str(text).strip())
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or not value.is_integer():
        return None
    return int(value)


def format_population(num: float) -> str:
    """Human readable head count, e.g. ``"1.43 billion"``."""
    if num >= 1_000_000_000:
        return f"{num / 1_000_000_000:.2f} billion"
    if num >= 1_000_000:
        return f"{num / 1_000_000:.2f} million"
    if num >= 1_000:
        return f"{num / 1_000:.2f} thousand"
    return str(int(num)) if float(num).is_integer() else str(num)


@dataclass(frozen=True, slots=True)
class CountryMetric:
    """Statistics of one country for one year, with display strings."""

    code: str
    country: str
    year: int
    rank: int
    population_number: float
    population: str
    population_density_number: float
    population_density: str
    sex_ratio_number: float
    sex_ratio: str
    median_age_number: float
    median_age: str

    def value(self, metric: str) -> float:
        return getattr(self, METRIC_FIELDS[validate_metric(metric)])


@dataclass(frozen=True)
class MetricSet:
    """Ranked country metrics for one year, indexed by country code."""

    year: int
    entries: tuple[CountryMetric, ...] = ()
    _index: dict[str, CountryMetric] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        index: dict[str, CountryMetric] = {}
        for entry in self.entries:
            index.setdefault(entry.code, entry)
        object.__setattr__(self, "_index", index)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CountryMetric]:
        return iter(self.entries)

    def get(self, code: str | None) -> CountryMetric | None:
        if not code:
            return None
        return self._index.get(code)

    def value_of(self, code: str | None, metric: str) -> float | None:
        entry = self.get(code)
        return entry.value(metric) if entry is not None else None

    def values(self, metric: str) -> list[float]:
        validate_metric(metric)
        return [entry.value(metric) for entry in self.entries]


def _is_country_row(row: Row) -> bool:
    return (row.get(COL_TYPE) or "").strip() == COUNTRY_TYPE


def build_country_metrics(rows: Iterable[Row], year: int) -> MetricSet:
    """Derive the ranked :class:`MetricSet` for ``year`` from raw rows.

    Only ``Country/Area`` rows of the requested year with a country code and a
    positive population are kept. Ranks are assigned once, densely from 1, in
    order of descending population.
    """
    candidates: list[dict[str, Any]] = []
    for row in rows:
        if not _is_country_row(row) or parse_year(row.get(COL_YEAR)) != year:
            continue
        code = (row.get(COL_CODE) or "").strip()
        population = parse_population(row.get(COL_POPULATION))
        if not code or not population > 0:
            continue
        candidates.append(
            {
                "code": code,
                "country": (row.get(COL_NAME) or "").strip(),
                "year": year,
                "population_number": population,
                "population": format_population(population),
                "population_density_number": parse_number(
                    row.get(COL_DENSITY), DENSITY_DEFAULT
                ),
                "population_density": (row.get(COL_DENSITY) or "").strip(),
                "sex_ratio_number": parse_number(
                    row.get(COL_SEX_RATIO), SEX_RATIO_DEFAULT
                ),
                "sex_ratio": (row.get(COL_SEX_RATIO) or "").strip(),
                "median_age_number": parse_number(
                    row.get(COL_MEDIAN_AGE), MEDIAN_AGE_DEFAULT
                ),
                "median_age": (row.get(COL_MEDIAN_AGE) or "").strip(),
            }
        )
    # sorted() is stable: equal populations keep file order
    candidates.sort(key=lambda c: c["population_number"], reverse=True)
    entries = tuple(
        CountryMetric(rank=index, **values)
        for index, values in enumerate(candidates, start=1)
    )
    return MetricSet(year=year, entries=entries)


def year_range(rows: Iterable[Row]) -> tuple[int, int] | None:
    """Return ``(min_year, max_year)`` over country rows, or None when empty."""
    years = [
        y
        for y in (parse_year(row.get(COL_YEAR)) for row in rows if _is_country_row(row))
        if y is not None
    ]
    if not years:
        return None
    return min(years), max(years)


@dataclass(frozen=True, slots=True)
class SeriesPoint:
    year: int
    population: float
    density: float
    sex_ratio: float
    median_age: float


@dataclass(frozen=True, slots=True)
class CountrySeries:
    """Multi-year statistics of one country, sorted by year."""

    code: str
    points: tuple[SeriesPoint, ...] = ()

    @property
    def latest(self) -> SeriesPoint | None:
        return self.points[-1] if self.points else None

    def summary(self) -> dict[str, str]:
        """Display strings for the most recent year (empty when no data)."""
        last = self.latest
        if last is None:
            return {}
        return {
            "population": format_population(last.population),
            "density": f"{last.density:.1f} per km²",
            "sex_ratio": f"{last.sex_ratio:.1f}",
            "median_age": f"{last.median_age:.1f} years",
        }


def country_series(rows: Iterable[Row], code: str) -> CountrySeries:
    """Collect every year of ``Country/Area`` data for ``code``."""
    points = []
    for row in rows:
        if not _is_country_row(row) or (row.get(COL_CODE) or "").strip() != code:
            continue
        year = parse_year(row.get(COL_YEAR))
        if year is None:
            continue
        points.append(
            SeriesPoint(
                year=year,
                population=parse_population(row.get(COL_POPULATION)),
                density=parse_number(row.get(COL_DENSITY), DENSITY_DEFAULT),
                sex_ratio=parse_number(row.get(COL_SEX_RATIO), SEX_RATIO_DEFAULT),
                median_age=parse_number(row.get(COL_MEDIAN_AGE), MEDIAN_AGE_DEFAULT),
            )
        )
    points.sort(key=lambda p: p.year)
    return CountrySeries(code=code, points=tuple(points))


def rows_from_records(records: Sequence[Mapping[str, Any]]) -> list[dict[str, str]]:
    """Normalize in-memory records to string cells like a CSV read would."""
    return [
        {str(k): "" if v is None else str(v) for k, v in record.items()}
        for record in records
    ]


def load_demographic_csv(path: str | Path) -> list[dict[str, str]]:
    """Read the demographic CSV into raw string rows.

    Raises :class:`DatasetLoadError` when the file is missing, unreadable or
    lacks one of :data:`REQUIRED_COLUMNS`.
    """
    path = Path(path)
    try:
        with path.open(newline="", encoding="utf-8-sig") as fh:
            reader = csv.DictReader(fh)
            header = [h.strip() for h in (reader.fieldnames or [])]
            missing = [c for c in REQUIRED_COLUMNS if c not in header]
            if missing:
                raise DatasetLoadError(
                    f"Demographic CSV {path} is missing columns: {', '.join(missing)}"
                )
            rows = [
                {(k or "").strip(): (v or "") for k, v in row.items() if k is not None}
                for row in reader
            ]
    except FileNotFoundError as exc:
        raise DatasetLoadError(f"Demographic CSV not found: {path}") from exc
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise DatasetLoadError(f"Could not read demographic CSV {path}: {exc}") from exc
    LOGGER.info("Loaded %d demographic rows from %s", len(rows), path)
    return rows
