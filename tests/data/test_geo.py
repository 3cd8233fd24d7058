# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import json

import pytest

from popglobe.data.geo import features_from_geojson, load_geojson
from popglobe.errors import DatasetLoadError


def _feature(geometry, fid=None, **properties):
    feature = {"type": "Feature", "properties": properties, "geometry": geometry}
    if fid is not None:
        feature["id"] = fid
    return feature


SQUARE = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]}


def test_identifier_fallbacks_and_names() -> None:
    features = features_from_geojson(
        {
            "type": "FeatureCollection",
            "features": [
                _feature(SQUARE, "AAA", name="Alphaland"),
                _feature(SQUARE, ISO_A3="BBB", NAME="Betastan"),
                _feature(SQUARE, "-99", ADM0_A3="CCC"),
                _feature(SQUARE),
                _feature({"type": "Point", "coordinates": [0, 0]}, "PNT"),
                "not a feature",
            ],
        }
    )
    assert [(f.id, f.name) for f in features] == [
        ("AAA", "Alphaland"),
        ("BBB", "Betastan"),
        ("CCC", "CCC"),
    ]


def test_multipolygon_and_collection_geometry() -> None:
    multi = {
        "type": "MultiPolygon",
        "coordinates": [SQUARE["coordinates"], SQUARE["coordinates"]],
    }
    collection = {"type": "GeometryCollection", "geometries": [SQUARE, multi]}
    (a, b) = features_from_geojson(
        {"features": [_feature(multi, "MUL"), _feature(collection, "COL")]}
    )
    assert len(a.polygons) == 2
    assert len(b.polygons) == 3
    assert len(list(a.rings())) == 2


def test_bad_coordinates_are_dropped() -> None:
    geometry = {"type": "Polygon", "coordinates": [[[0, 0], [1], ["x", 2], [1, 1, 5]]]}
    (feature,) = features_from_geojson({"features": [_feature(geometry, "BAD")]})
    assert feature.polygons == (((0.0, 0.0), (1.0, 1.0)),)


def test_not_a_feature_collection() -> None:
    with pytest.raises(DatasetLoadError):
        features_from_geojson({"type": "Feature"})


def test_load_sample_geojson(geojson_path) -> None:
    features = load_geojson(geojson_path)
    assert [f.id for f in features] == ["AAA", "BBB", "FJI", "NOD"]


def test_load_errors(tmp_path) -> None:
    with pytest.raises(DatasetLoadError, match="not found"):
        load_geojson(tmp_path / "nope.geojson")
    broken = tmp_path / "broken.geojson"
    broken.write_text("{", encoding="utf-8")
    with pytest.raises(DatasetLoadError):
        load_geojson(broken)
    listing = tmp_path / "list.geojson"
    listing.write_text(json.dumps([1, 2]), encoding="utf-8")
    with pytest.raises(DatasetLoadError):
        load_geojson(listing)
