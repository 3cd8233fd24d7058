# SPDX-License-Identifier: Apache-2.0
"""Country boundary features loaded from GeoJSON."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator

from popglobe.errors import DatasetLoadError

LOGGER = logging.getLogger(__name__)

Ring = tuple[tuple[float, float], ...]
Polygon = tuple[Ring, ...]

_ID_PROPERTIES = ("iso3", "ISO_A3", "ADM0_A3")
_NAME_PROPERTIES = ("name", "NAME")


@dataclass(frozen=True, slots=True)
class GeoFeature:
    """Immutable country boundary: identifier, display name and polygons.

    ``polygons`` holds one entry per polygon; each polygon is a tuple of rings
    (exterior first, then holes) of ``(lon, lat)`` pairs in degrees.
    """

    id: str
    name: str
    polygons: tuple[Polygon, ...]

    def rings(self) -> Iterator[Ring]:
        for polygon in self.polygons:
            yield from polygon


def _coord_pair(coord: Iterable[Any]) -> tuple[float, float]:
    seq = list(coord)
    if len(seq) < 2:
        raise ValueError("Coordinate must have at least two values")
    return float(seq[0]), float(seq[1])


def _ring(coords: Iterable[Any]) -> Ring:
    points = []
    for coord in coords or []:
        try:
            points.append(_coord_pair(coord))
        except (TypeError, ValueError):
            continue
    return tuple(points)


def _iter_polygons(geometry: dict[str, Any]) -> Iterator[Polygon]:
    gtype = geometry.get("type")
    if gtype == "Polygon":
        rings = tuple(r for r in map(_ring, geometry.get("coordinates") or []) if r)
        if rings:
            yield rings
    elif gtype == "MultiPolygon":
        for polygon in geometry.get("coordinates") or []:
            rings = tuple(r for r in map(_ring, polygon or []) if r)
            if rings:
                yield rings
    elif gtype == "GeometryCollection":
        for geom in geometry.get("geometries") or []:
            yield from _iter_polygons(geom or {})


def _feature_id(feature: dict[str, Any]) -> str | None:
    properties = feature.get("properties") or {}
    candidates = [feature.get("id"), *(properties.get(k) for k in _ID_PROPERTIES)]
    for value in candidates:
        if value is None:
            continue
        text = str(value).strip()
        if text and text != "-99":
            return text
    return None


def _feature_name(feature: dict[str, Any], fallback: str) -> str:
    properties = feature.get("properties") or {}
    for key in _NAME_PROPERTIES:
        value = properties.get(key)
        if value:
            return str(value).strip()
    return fallback


def features_from_geojson(data: dict[str, Any]) -> tuple[GeoFeature, ...]:
    """Build :class:`GeoFeature` records from a parsed FeatureCollection.

    Features without an identifier or without polygon geometry are skipped.
    """
    if not isinstance(data, dict) or not isinstance(data.get("features"), list):
        raise DatasetLoadError("GeoJSON must be a FeatureCollection with 'features'")
    out: list[GeoFeature] = []
    skipped = 0
    for feature in data["features"]:
        if not isinstance(feature, dict):
            skipped += 1
            continue
        fid = _feature_id(feature)
        polygons = tuple(_iter_polygons(feature.get("geometry") or {}))
        if not fid or not polygons:
            skipped += 1
            continue
        out.append(GeoFeature(id=fid, name=_feature_name(feature, fid), polygons=polygons))
    if skipped:
        LOGGER.debug("Skipped %d GeoJSON features without id or polygons", skipped)
    return tuple(out)


def load_geojson(path: str | Path) -> tuple[GeoFeature, ...]:
    """Read a GeoJSON file and return its country features."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise DatasetLoadError(f"GeoJSON file not found: {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise DatasetLoadError(f"Could not read GeoJSON {path}: {exc}") from exc
    features = features_from_geojson(data)
    LOGGER.info("Loaded %d boundary features from %s", len(features), path)
    return features
