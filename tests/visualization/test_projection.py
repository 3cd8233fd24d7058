# SPDX-License-Identifier: Apache-2.0
from __future__ import annotations

import math

import numpy as np
import pytest
from helpers import square_feature

from popglobe.data.geo import GeoFeature
from popglobe.visualization.projection import (
    MODE_GLOBE,
    MODE_MAP,
    GeoProjector,
    SubPath,
    fmt_number,
)


def test_view_center_projects_to_screen_center_and_antipode_is_hidden() -> None:
    proj = GeoProjector.configure(MODE_GLOBE, 200, (30, -25), (480, 360))
    center = proj.project(-30, 25)
    assert center == pytest.approx((480, 360), abs=1e-9)
    assert proj.project(150, -25) is None


@pytest.mark.parametrize("lon,lat", [(0, 0), (10, 20), (-45, 60), (120, -30)])
def test_visible_point_antipode_is_hidden(lon: float, lat: float) -> None:
    proj = GeoProjector(MODE_GLOBE, 100, (-lon, -lat))
    assert proj.project(lon, lat) is not None
    assert proj.project(lon + 180, -lat) is None


def test_yaw_is_periodic_in_360_degrees() -> None:
    coords = [(0, 0), (12.5, 40), (-100, -10), (179, 5)]
    a = GeoProjector(MODE_GLOBE, 150, (17, -25), (0, 0))
    b = GeoProjector(MODE_GLOBE, 150, (17 + 360, -25), (0, 0))
    xy_a, vis_a = a.project_many(coords)
    xy_b, vis_b = b.project_many(coords)
    assert np.array_equal(vis_a, vis_b)
    assert np.allclose(xy_a, xy_b)


def test_invert_round_trips_a_visible_point() -> None:
    proj = GeoProjector(MODE_GLOBE, 250, (-5, -25), (400, 300))
    xy = proj.project(10, 20)
    assert xy is not None
    assert proj.invert(*xy) == pytest.approx((10, 20), abs=1e-6)


def test_invert_outside_globe_is_none() -> None:
    proj = GeoProjector(MODE_GLOBE, 100, (0, 0), (0, 0))
    assert proj.invert(250, 0) is None


def test_equirectangular_ignores_rotation() -> None:
    plain = GeoProjector(MODE_MAP, 100, (0, 0), (0, 0))
    rotated = GeoProjector(MODE_MAP, 100, (45, 10), (0, 0))
    assert plain.project(180, 0) == pytest.approx((100 * math.pi, 0))
    assert rotated.project(90, 45) == plain.project(90, 45)
    assert plain.invert(100 * math.pi / 2, 0) == pytest.approx((90, 0))


def test_default_scale_for_map_is_eighty_percent_of_radius() -> None:
    assert GeoProjector.default_scale(MODE_MAP, 200) == pytest.approx(160)
    assert GeoProjector.default_scale(MODE_GLOBE, 200) == 200


def test_invalid_parameters_raise() -> None:
    with pytest.raises(ValueError):
        GeoProjector("4d", 100)
    with pytest.raises(ValueError):
        GeoProjector(MODE_GLOBE, 0)
    proj = GeoProjector(MODE_GLOBE, 100)
    with pytest.raises(ValueError):
        proj.scale = -3


def test_outline_only_for_globe() -> None:
    assert GeoProjector(MODE_GLOBE, 120, center=(10, 20)).outline() == (10, 20, 120)
    assert GeoProjector(MODE_MAP, 120).outline() is None


def test_subpath_svg_formatting() -> None:
    assert SubPath(((1.0, 2.5), (3.456, 4.0))).to_svg() == "M1,2.5L3.46,4Z"
    assert SubPath(((0.0, -0.001),), closed=False).to_svg() == "M0,0"
    assert fmt_number(-0.004) == "0"


def test_map_path_for_square_is_one_closed_subpath() -> None:
    proj = GeoProjector(MODE_MAP, 100, center=(0, 0))
    path = proj.path_for(square_feature("AAA", 0, 0))
    assert len(path.subpaths) == 1
    assert len(path.subpaths[0].points) == 4
    d = path.to_svg()
    assert d.startswith("M0,0L")
    assert d.endswith("Z")


def test_map_splits_rings_at_the_antimeridian() -> None:
    ring = ((175, -20), (-175, -20), (-175, -15), (175, -15), (175, -20))
    feature = GeoFeature(id="FJI", name="Fiji", polygons=((ring,),))
    scale = 100
    proj = GeoProjector(MODE_MAP, scale, center=(0, 0))
    path = proj.path_for(feature)
    assert len(path.subpaths) == 2
    max_width = scale * math.radians(10) + 1e-6
    for sub in path.subpaths:
        xs = [x for x, _ in sub.points]
        assert max(xs) - min(xs) <= max_width
    sides = sorted(sub.points[0][0] > 0 for sub in path.subpaths)
    assert sides == [False, True]


def test_map_closes_polar_rings_along_the_pole() -> None:
    lons = (-170, -90, 0, 90, 170, -170)
    ring = tuple((lon, -80.0) for lon in lons)
    feature = GeoFeature(id="ATA", name="Antarctica", polygons=((ring,),))
    scale = 100
    path = GeoProjector(MODE_MAP, scale, center=(0, 0)).path_for(feature)

    assert len(path.subpaths) == 1
    points = path.subpaths[0].points
    xs = [x for x, _ in points]
    ys = [y for _, y in points]
    assert min(xs) == pytest.approx(-scale * math.pi)
    assert max(xs) == pytest.approx(scale * math.pi)
    assert max(ys) == pytest.approx(scale * math.pi / 2)
    assert len({round(y, 6) for y in ys}) == 2
    assert points[-2] == pytest.approx((scale * math.pi, scale * math.pi / 2))
    assert points[-1] == pytest.approx((-scale * math.pi, scale * math.pi / 2))


def test_globe_clips_rings_to_the_horizon() -> None:
    proj = GeoProjector(MODE_GLOBE, 100, (0, 0), (0, 0))
    straddling = square_feature("HZN", 80, -5, size=20)
    path = proj.path_for(straddling)
    assert len(path.subpaths) == 1
    for x, y in path.subpaths[0].points:
        assert math.hypot(x, y) <= 100 + 1e-6


def test_globe_drops_rings_on_the_far_side() -> None:
    proj = GeoProjector(MODE_GLOBE, 100, (0, 0), (0, 0))
    assert proj.path_for(square_feature("FAR", 150, 0)).is_empty
    assert not proj.path_for(square_feature("NEAR", -5, -5)).is_empty


def test_path_commands_expose_move_line_and_close() -> None:
    proj = GeoProjector(MODE_GLOBE, 100, (0, 0), (0, 0))
    commands = proj.path_for(square_feature("NEAR", -5, -5)).commands()
    assert commands[0][0] == "M"
    assert {c[0] for c in commands[1:-1]} == {"L"}
    assert commands[-1] == ("Z",)
