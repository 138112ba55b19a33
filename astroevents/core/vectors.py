"""Rectangular and spherical coordinate helpers.

Vectors are plain tuples of three (position) or six (position and velocity)
floats.  Helpers that only make sense for positions look at the first three
components and ignore the rest.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from .angles import normalize_radians
from .errors import VectorLengthError

__all__ = [
    "Matrix3",
    "SphericalPosition",
    "Vector",
    "angular_separation",
    "apply_matrix",
    "apply_matrix_transposed",
    "cross",
    "dot",
    "norm",
    "rotate_x",
    "rotate_z",
    "spherical_to_rectangular",
    "rectangular_to_spherical",
    "truncate3",
]

Vector = tuple[float, ...]
Matrix3 = tuple[
    tuple[float, float, float],
    tuple[float, float, float],
    tuple[float, float, float],
]


@dataclass(frozen=True, slots=True)
class SphericalPosition:
    """Spherical coordinates: longitude (or RA), latitude (or Dec) and radius."""

    lon: float
    lat: float
    radius: float = 1.0

    def to_rectangular(self) -> Vector:
        return spherical_to_rectangular(self.lon, self.lat, self.radius)

    @classmethod
    def from_rectangular(cls, v: Sequence[float]) -> "SphericalPosition":
        lon, lat, radius = rectangular_to_spherical(v)
        return cls(lon=lon, lat=lat, radius=radius)


def truncate3(v: Sequence[float]) -> Vector:
    """Return the position part of ``v``."""

    if len(v) < 3:
        raise VectorLengthError(f"expected at least 3 components, got {len(v)}")
    return (float(v[0]), float(v[1]), float(v[2]))


def spherical_to_rectangular(lon: float, lat: float, radius: float = 1.0) -> Vector:
    cos_lat = math.cos(lat)
    return (
        radius * cos_lat * math.cos(lon),
        radius * cos_lat * math.sin(lon),
        radius * math.sin(lat),
    )


def rectangular_to_spherical(v: Sequence[float]) -> tuple[float, float, float]:
    """Return ``(lon, lat, radius)`` with ``lon`` in ``[0, 2π)``."""

    x, y, z = truncate3(v)
    radius = math.sqrt(x * x + y * y + z * z)
    if radius == 0.0:
        return 0.0, 0.0, 0.0
    lon = normalize_radians(math.atan2(y, x))
    lat = math.asin(max(-1.0, min(1.0, z / radius)))
    return lon, lat, radius


def _require3(v: Sequence[float], name: str) -> None:
    if len(v) != 3:
        raise VectorLengthError(f"{name} must have exactly 3 components, got {len(v)}")


def cross(a: Sequence[float], b: Sequence[float]) -> Vector:
    _require3(a, "a")
    _require3(b, "b")
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    if len(a) != len(b):
        raise VectorLengthError(f"length mismatch: {len(a)} != {len(b)}")
    return sum(x * y for x, y in zip(a, b))


def norm(v: Sequence[float]) -> float:
    x, y, z = truncate3(v)
    return math.sqrt(x * x + y * y + z * z)


def rotate_x(v: Sequence[float], angle: float) -> Vector:
    """Rotate the coordinate frame of ``v`` by ``angle`` about the x axis.

    A positive ``angle`` maps ecliptic coordinates to equatorial ones when it
    equals the obliquity.
    """

    x, y, z = truncate3(v)
    c, s = math.cos(angle), math.sin(angle)
    return (x, c * y - s * z, s * y + c * z)


def rotate_z(v: Sequence[float], angle: float) -> Vector:
    """Rotate the coordinate frame of ``v`` by ``angle`` about the z axis."""

    x, y, z = truncate3(v)
    c, s = math.cos(angle), math.sin(angle)
    return (c * x - s * y, s * x + c * y, z)


def apply_matrix(m: Matrix3, v: Sequence[float]) -> Vector:
    x, y, z = truncate3(v)
    return tuple(row[0] * x + row[1] * y + row[2] * z for row in m)


def apply_matrix_transposed(m: Matrix3, v: Sequence[float]) -> Vector:
    x, y, z = truncate3(v)
    return tuple(m[0][i] * x + m[1][i] * y + m[2][i] * z for i in range(3))


def angular_separation(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    """Angle between two directions given in spherical coordinates (radians)."""

    a = spherical_to_rectangular(lon1, lat1)
    b = spherical_to_rectangular(lon2, lat2)
    return math.atan2(norm(cross(a, b)), dot(a, b))
