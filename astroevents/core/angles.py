"""Angular utilities shared by the reduction and event layers.

All internal angles are radians.  Degrees only appear at the edges of the
package (observer coordinates, tabulated longitudes), so the helpers here
cover both units.  The normalisers guarantee a half-open range: a value that
lands exactly on a full turn is reported as ``0`` rather than ``360``/``2π``
so equality checks near the boundary behave.
"""

from __future__ import annotations

import math
from typing import Final

from ..constants import ARCSEC_TO_RAD, PI_OVER_TWO, RAD_TO_DEG, TWO_PI

__all__ = [
    "EPSILON_DEG",
    "normalize_degrees",
    "normalize_radians",
    "parse_dms",
    "parse_hms",
    "quadrant",
    "radians_to_dms",
    "radians_to_hms",
    "signed_delta_radians",
]


EPSILON_DEG: Final[float] = 1e-9
_INV_TWO_PI: Final[float] = 1.0 / TWO_PI


def normalize_degrees(angle: float) -> float:
    """Return ``angle`` normalised to the ``[0, 360)`` interval.

    Inputs within one revolution of the canonical range take a direct
    branch; anything further out is reduced with ``floor``.  Values within
    ``1e-9`` of ``360`` are coerced to ``0``.
    """

    d = float(angle)
    if -360.0 <= d < 0.0:
        d += 360.0
    elif 360.0 <= d < 720.0:
        d -= 360.0
    elif not 0.0 <= d < 360.0:
        d -= 360.0 * math.floor(d / 360.0)
        if d < 0.0:
            d += 360.0
    if d >= 360.0 - EPSILON_DEG:
        return 0.0
    return d


def normalize_radians(angle: float) -> float:
    """Return ``angle`` normalised to the ``[0, 2π)`` interval.

    When ``angle`` is an exact multiple of a full turn the result is exactly
    ``0``; rounding never produces ``2π``.
    """

    r = float(angle)
    if 0.0 <= r < TWO_PI:
        return r
    turns = r * _INV_TWO_PI
    if turns.is_integer():
        return 0.0
    r = math.fmod(r, TWO_PI)
    if r < 0.0:
        r += TWO_PI
    if r >= TWO_PI:
        return 0.0
    return r


def signed_delta_radians(angle: float) -> float:
    """Return ``angle`` wrapped to ``[-π, π)``."""

    wrapped = normalize_radians(angle)
    if wrapped >= math.pi:
        return wrapped - TWO_PI
    return wrapped


def quadrant(angle: float) -> int:
    """Return the quadrant index ``0..3`` of ``angle`` (radians)."""

    return min(3, int(normalize_radians(angle) / PI_OVER_TWO))


def parse_dms(
    degrees: float, minutes: float = 0.0, seconds: float = 0.0, *, negative: bool = False
) -> float:
    """Convert sexagesimal degrees to radians.

    ``negative`` carries the sign separately so ``-0° 30'`` can be expressed.
    A negative ``degrees`` value also flips the sign of the whole angle.
    """

    total = abs(degrees) * 3600.0 + abs(minutes) * 60.0 + abs(seconds)
    if negative or degrees < 0.0:
        total = -total
    return total * ARCSEC_TO_RAD


def parse_hms(hours: float, minutes: float = 0.0, seconds: float = 0.0) -> float:
    """Convert hours, minutes and seconds of time to radians."""

    return (hours * 3600.0 + minutes * 60.0 + seconds) * 15.0 * ARCSEC_TO_RAD


def radians_to_dms(angle: float) -> tuple[int, int, int, float]:
    """Return ``(sign, degrees, minutes, seconds)`` for ``angle``."""

    sign = -1 if angle < 0.0 else 1
    total = abs(angle) * RAD_TO_DEG * 3600.0
    deg, rem = divmod(total, 3600.0)
    minutes, seconds = divmod(rem, 60.0)
    return sign, int(deg), int(minutes), seconds


def radians_to_hms(angle: float) -> tuple[int, int, float]:
    """Return ``(hours, minutes, seconds)`` of time for ``angle`` in ``[0, 2π)``."""

    total = normalize_radians(angle) * RAD_TO_DEG * 240.0
    hours, rem = divmod(total, 3600.0)
    minutes, seconds = divmod(rem, 60.0)
    return int(hours), int(minutes), seconds
