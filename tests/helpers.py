# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

from pathlib import Path


def project_root(start: Path | None = None) -> Path:
    """Return the repository root by walking up to find pyproject.toml."""
    here = (start or Path(__file__)).resolve()
    for anc in [here, *here.parents]:
        if (anc / "pyproject.toml").exists():
            return anc
    return here.parents[-1] if here.parents else here


def sample_path(name: str) -> Path:
    """Path of a file under ``samples/`` at the repository root."""
    return project_root() / "samples" / name


def country_row(
    code: str,
    year: int,
    population: str,
    *,
    name: str | None = None,
    row_type: str = "Country/Area",
    sex_ratio: str = "100",
    density: str = "10",
    median_age: str = "30",
) -> dict[str, str]:
    """One raw demographic CSV row keyed by the real column headers."""
    return {
        "Type": row_type,
        "Year": str(year),
        "Region, subregion, country or area *": name or code,
        "ISO3 Alpha-code": code,
        "Total Population, as of 1 July (thousands)": population,
        "Population Sex Ratio, as of 1 July (males per 100 females)": sex_ratio,
        "Population Density, as of 1 July (persons per square km)": density,
        "Median Age, as of 1 July (years)": median_age,
    }


def square_feature(code: str, lon: float, lat: float, size: float = 10.0):
    """GeoFeature with one square ring whose lower-left corner is ``(lon, lat)``."""
    from popglobe.data.geo import GeoFeature

    ring = (
        (lon, lat),
        (lon + size, lat),
        (lon + size, lat + size),
        (lon, lat + size),
        (lon, lat),
    )
    return GeoFeature(id=code, name=code.title(), polygons=((ring,),))
