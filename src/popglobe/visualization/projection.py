# SPDX-License-Identifier: Apache-2.0
"""Switchable cartographic projection: orthographic globe or equirectangular map.

The orthographic rotation follows the d3-geo convention: ``rotation = (yaw,
pitch)`` in degrees, yaw applied about the polar axis first, then pitch. A
point is visible when it lies on the front hemisphere of the rotated sphere;
hidden points project to ``None`` and are cut out of ring paths.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

import numpy as np

from popglobe.data.geo import GeoFeature

MODE_GLOBE = "3d"
MODE_MAP = "2d"
MODES = (MODE_GLOBE, MODE_MAP)

# 2D map default scale relative to the globe radius
EQUIRECTANGULAR_SCALE_FACTOR = 0.8

_VISIBLE_EPS = 1e-12
_HORIZON_STEP = math.radians(5.0)


def fmt_number(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


@dataclass(frozen=True, slots=True)
class SubPath:
    """One move-to followed by line-tos; ``closed`` appends a close command."""

    points: tuple[tuple[float, float], ...]
    closed: bool = True

    def commands(self) -> Iterator[tuple[str, float, float]]:
        for index, (x, y) in enumerate(self.points):
            yield ("M" if index == 0 else "L", x, y)

    def to_svg(self) -> str:
        parts = [f"{cmd}{fmt_number(x)},{fmt_number(y)}" for cmd, x, y in self.commands()]
        if self.closed:
            parts.append("Z")
        return "".join(parts)


@dataclass(frozen=True, slots=True)
class PathDescriptor:
    """Screen-space path of a feature: one or more sub-paths per ring."""

    subpaths: tuple[SubPath, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.subpaths

    def commands(self) -> list[tuple[str, float, float] | tuple[str]]:
        out: list[tuple[str, float, float] | tuple[str]] = []
        for sub in self.subpaths:
            out.extend(sub.commands())
            if sub.closed:
                out.append(("Z",))
        return out

    def to_svg(self) -> str:
        return "".join(sub.to_svg() for sub in self.subpaths)


def _open_ring(ring: Sequence[tuple[float, float]]) -> np.ndarray:
    pts = np.asarray(ring, dtype=float).reshape(-1, 2)
    if len(pts) > 1 and np.allclose(pts[0], pts[-1]):
        pts = pts[:-1]
    return pts


class GeoProjector:
    """Projection parameters plus forward/inverse transforms and path building."""

    def __init__(
        self,
        mode: str,
        scale: float,
        rotation: Sequence[float] = (0.0, 0.0),
        center: Sequence[float] = (0.0, 0.0),
    ) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown projection mode '{mode}'; expected 3d or 2d")
        self._mode = mode
        self.scale = scale
        self.rotation = rotation
        self.center = center

    @classmethod
    def configure(
        cls,
        mode: str,
        scale: float,
        rotation: Sequence[float] = (0.0, 0.0),
        center: Sequence[float] = (0.0, 0.0),
    ) -> GeoProjector:
        return cls(mode, scale, rotation, center)

    @staticmethod
    def default_scale(mode: str, radius: float) -> float:
        """Scale used when no explicit zoom is set for ``mode``."""
        if mode == MODE_MAP:
            return radius * EQUIRECTANGULAR_SCALE_FACTOR
        return radius

    # ------------------------------------------------------------------ params

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def scale(self) -> float:
        return self._scale

    @scale.setter
    def scale(self, value: float) -> None:
        value = float(value)
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"Projection scale must be positive; got {value}")
        self._scale = value

    @property
    def rotation(self) -> tuple[float, float]:
        return self._rotation

    @rotation.setter
    def rotation(self, value: Sequence[float]) -> None:
        yaw, pitch = (float(v) for v in tuple(value)[:2])
        self._rotation = (yaw, pitch)

    @property
    def center(self) -> tuple[float, float]:
        return self._center

    @center.setter
    def center(self, value: Sequence[float]) -> None:
        cx, cy = (float(v) for v in tuple(value)[:2])
        self._center = (cx, cy)

    # -------------------------------------------------------------- transforms

    def _rotated_cartesian(self, lonlat: np.ndarray) -> np.ndarray:
        """Unit vectors of ``lonlat`` (degrees) after applying the rotation."""
        yaw, pitch = np.radians(self._rotation)
        lam = np.radians(lonlat[:, 0]) + yaw
        lam = (lam + np.pi) % (2 * np.pi) - np.pi
        phi = np.radians(lonlat[:, 1])
        cos_phi = np.cos(phi)
        x = np.cos(lam) * cos_phi
        y = np.sin(lam) * cos_phi
        z = np.sin(phi)
        cos_p, sin_p = np.cos(pitch), np.sin(pitch)
        return np.column_stack((x * cos_p - z * sin_p, y, z * cos_p + x * sin_p))

    def _cartesian_to_screen(self, cart: np.ndarray) -> np.ndarray:
        cx, cy = self._center
        return np.column_stack(
            (cx + self._scale * cart[:, 1], cy - self._scale * cart[:, 2])
        )

    def project_many(self, coords: Iterable[Sequence[float]]) -> tuple[np.ndarray, np.ndarray]:
        """Project ``(lon, lat)`` pairs; return screen points and a visibility mask.

        Hidden points (orthographic back hemisphere) keep their would-be
        coordinates in the array but are ``False`` in the mask.
        """
        lonlat = np.asarray(list(coords), dtype=float).reshape(-1, 2)
        if self._mode == MODE_GLOBE:
            cart = self._rotated_cartesian(lonlat)
            return self._cartesian_to_screen(cart), cart[:, 0] > _VISIBLE_EPS
        cx, cy = self._center
        xy = np.column_stack(
            (
                cx + self._scale * np.radians(lonlat[:, 0]),
                cy - self._scale * np.radians(lonlat[:, 1]),
            )
        )
        return xy, np.ones(len(lonlat), dtype=bool)

    def project(self, lon: float, lat: float) -> tuple[float, float] | None:
        xy, visible = self.project_many([(lon, lat)])
        if not visible[0]:
            return None
        return float(xy[0, 0]), float(xy[0, 1])

    def invert(self, x: float, y: float) -> tuple[float, float] | None:
        """Screen point back to ``(lon, lat)``; None off the globe or map."""
        cx, cy = self._center
        px = (x - cx) / self._scale
        py = (cy - y) / self._scale
        if self._mode == MODE_MAP:
            if abs(px) > math.pi or abs(py) > math.pi / 2:
                return None
            return math.degrees(px), math.degrees(py)
        rho = math.hypot(px, py)
        if rho > 1.0:
            return None
        # point on the front hemisphere of the rotated sphere
        xr = math.sqrt(max(0.0, 1.0 - rho * rho))
        yr, zr = px, py
        yaw, pitch = (math.radians(v) for v in self._rotation)
        cos_p, sin_p = math.cos(pitch), math.sin(pitch)
        x0 = xr * cos_p + zr * sin_p
        z0 = zr * cos_p - xr * sin_p
        lam = math.atan2(yr, x0) - yaw
        lam = (lam + math.pi) % (2 * math.pi) - math.pi
        phi = math.asin(max(-1.0, min(1.0, z0)))
        return math.degrees(lam), math.degrees(phi)

    def outline(self) -> tuple[float, float, float] | None:
        """Globe outline circle ``(cx, cy, r)`` in 3d mode, None for the map."""
        if self._mode != MODE_GLOBE:
            return None
        return (*self._center, self._scale)

    # ------------------------------------------------------------------- paths

    def path_for(self, feature: GeoFeature) -> PathDescriptor:
        subpaths: list[SubPath] = []
        for ring in feature.rings():
            pts = _open_ring(ring)
            if len(pts) < 2:
                continue
            if self._mode == MODE_GLOBE:
                subpaths.extend(self._globe_ring(pts))
            else:
                subpaths.extend(self._map_ring(pts))
        return PathDescriptor(tuple(subpaths))

    def _globe_ring(self, pts: np.ndarray) -> list[SubPath]:
        cart = self._rotated_cartesian(pts)
        visible = cart[:, 0] > _VISIBLE_EPS
        screen = self._cartesian_to_screen(cart)
        if visible.all():
            return [SubPath(tuple(map(tuple, screen.tolist())))]
        if not visible.any():
            return []

        n = len(pts)
        start = int(np.flatnonzero(~visible)[0])
        runs: list[list[np.ndarray]] = []
        run: list[np.ndarray] | None = None
        for step in range(n):
            i = (start + step) % n
            j = (i + 1) % n
            if visible[i] and run is not None:
                run.append(cart[i])
            if visible[i] != visible[j]:
                a, b = cart[i], cart[j]
                t = a[0] / (a[0] - b[0])
                crossing = a + t * (b - a)
                crossing[0] = 0.0
                norm = np.linalg.norm(crossing)
                if norm > 0:
                    crossing = crossing / norm
                if visible[i]:
                    if run is not None:
                        run.append(crossing)
                        runs.append(run)
                    run = None
                else:
                    run = [crossing]
        if not runs:
            return []

        stitched: list[np.ndarray] = []
        for index, current in enumerate(runs):
            stitched.extend(current)
            following = runs[(index + 1) % len(runs)]
            stitched.extend(_horizon_arc(current[-1], following[0]))
        points = self._cartesian_to_screen(np.asarray(stitched))
        return [SubPath(tuple(map(tuple, points.tolist())))]

    def _map_ring(self, pts: np.ndarray) -> list[SubPath]:
        lons, lats = pts[:, 0], pts[:, 1]
        n = len(pts)
        jumps = np.abs(np.diff(np.append(lons, lons[0]))) > 180.0
        if not jumps.any():
            xy, _ = self.project_many(pts)
            return [SubPath(tuple(map(tuple, xy.tolist())))]

        start = (int(np.flatnonzero(jumps)[0]) + 1) % n
        pieces: list[list[tuple[float, float]]] = []
        piece: list[tuple[float, float]] = []
        for step in range(n):
            i = (start + step) % n
            j = (i + 1) % n
            piece.append((lons[i], lats[i]))
            if jumps[i]:
                edge = math.copysign(180.0, lons[i])
                lon_j = lons[j] + (360.0 if lons[j] < lons[i] else -360.0)
                span = lon_j - lons[i]
                t = (edge - lons[i]) / span if span else 0.0
                lat_c = lats[i] + t * (lats[j] - lats[i])
                piece.append((edge, lat_c))
                pieces.append(piece)
                piece = [(-edge, lat_c)]
        # the walk ends on the first jump; its entry point opens the first piece
        pieces[0] = piece + pieces[0]
        if int(jumps.sum()) % 2:
            # an odd crossing count encloses a pole: close along the map edge
            pole = math.copysign(90.0, float(lats.mean()))
            first = pieces[0]
            first.extend([(first[-1][0], pole), (first[0][0], pole)])
        out = []
        for chunk in pieces:
            if len(chunk) < 2:
                continue
            xy, _ = self.project_many(chunk)
            out.append(SubPath(tuple(map(tuple, xy.tolist()))))
        return out


def _horizon_arc(a: np.ndarray, b: np.ndarray) -> list[np.ndarray]:
    """Points along the horizon circle strictly between ``a`` and ``b``."""
    ta = math.atan2(a[2], a[1])
    tb = math.atan2(b[2], b[1])
    delta = (tb - ta + math.pi) % (2 * math.pi) - math.pi
    steps = int(abs(delta) // _HORIZON_STEP)
    return [
        np.array(
            (0.0, math.cos(ta + delta * k / (steps + 1)), math.sin(ta + delta * k / (steps + 1)))
        )
        for k in range(1, steps + 1)
    ]
