"""Transits of Jupiter's Great Red Spot across the central meridian."""

from __future__ import annotations

import bisect
import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from ..constants import DEG_TO_RAD, J2000, RAD_TO_DEG, SECONDS_PER_DAY, TWO_PI
from ..core.angles import normalize_radians
from ..core.errors import InvalidConfigurationError
from ..core.time import calendar_to_jd
from .results import Found, NotFound

__all__ = ["GRSLongitudeTable", "central_meridian_system_ii", "next_grs_transit"]

LOG = logging.getLogger(__name__)

# Approximate System II rotation period in hours.
_ROTATION_HOURS = 9.9


@dataclass(frozen=True)
class GRSLongitudeTable:
    """Observed System II longitudes of the Great Red Spot.

    ``records`` are ``(jd, lon_deg)`` pairs.  Between records the longitude
    is interpolated linearly; outside the table it is extrapolated from the
    two nearest records.
    """

    records: tuple[tuple[float, float], ...]

    def __post_init__(self) -> None:
        if not self.records:
            raise InvalidConfigurationError("GRS longitude table is empty")
        ordered = tuple(sorted((float(jd), float(lon)) for jd, lon in self.records))
        object.__setattr__(self, "records", ordered)

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[str]]) -> "GRSLongitudeTable":
        """Build a table from ``(YYYY-MM-DD, lon_deg)`` text rows."""

        records = []
        for date, lon in rows:
            year, month, day = (int(part) for part in date.strip().split("-"))
            records.append((calendar_to_jd(year, month, float(day)), float(lon)))
        return cls(tuple(records))

    def longitude_deg(self, jd: float) -> float:
        records = self.records
        if len(records) == 1:
            return records[0][1]
        times = [r[0] for r in records]
        i = bisect.bisect_right(times, jd)
        i = min(max(i, 1), len(records) - 1)
        (t0, l0), (t1, l1) = records[i - 1], records[i]
        if t1 == t0:
            return l1
        return l0 + (l1 - l0) * (jd - t0) / (t1 - t0)

    def longitude(self, jd: float) -> float:
        return self.longitude_deg(jd) * DEG_TO_RAD


def central_meridian_system_ii(jd: float) -> float:
    """Low-accuracy System II longitude of Jupiter's central meridian (Meeus ch. 43).

    Good to a few tenths of a degree; the phase correction is not applied.
    Returns radians in ``[0, 2π)``.
    """

    d = jd - J2000
    v = (172.74 + 0.00111588 * d) * DEG_TO_RAD
    m = (357.529 + 0.9856003 * d) * DEG_TO_RAD
    n = (20.020 + 0.0830853 * d + 0.329 * math.sin(v)) * DEG_TO_RAD
    j = 66.115 + 0.9025179 * d - 0.329 * math.sin(v)
    a = 1.915 * math.sin(m) + 0.020 * math.sin(2.0 * m)
    b = 5.555 * math.sin(n) + 0.168 * math.sin(2.0 * n)
    k = (j + a - b) * DEG_TO_RAD
    r_earth = 1.00014 - 0.01671 * math.cos(m) - 0.00014 * math.cos(2.0 * m)
    r_jup = 5.20872 - 0.25208 * math.cos(n) - 0.00611 * math.cos(2.0 * n)
    delta = math.sqrt(r_jup**2 + r_earth**2 - 2.0 * r_jup * r_earth * math.cos(k))
    psi = math.asin(r_earth / delta * math.sin(k)) * RAD_TO_DEG
    omega2 = 187.23 + 870.1869088 * (d - delta / 173.0) + psi - b
    return normalize_radians(omega2 * DEG_TO_RAD)


def next_grs_transit(
    jd: float,
    table: GRSLongitudeTable,
    *,
    central_meridian: Optional[Callable[[float], float]] = None,
    max_iter: int = 200,
) -> Found | NotFound:
    """First instant at or after ``jd`` (TT) when the GRS crosses the central meridian.

    The remaining angle to the spot is turned into a time with the 9.9 h
    rotation period and a quarter of it is taken per iteration; once the
    correction drops below a second the rest is applied in one go.
    The GRS longitude is read from ``table`` once, at ``jd``; its drift
    over the following rotation (well under a degree) is not followed.
    ``central_meridian`` overrides :func:`central_meridian_system_ii`.
    """

    cm = central_meridian or central_meridian_system_ii
    grs = table.longitude(jd)
    precision = 1.0 / SECONDS_PER_DAY
    t = jd
    for iteration in range(1, max_iter + 1):
        remaining = normalize_radians(grs - cm(t))
        dt = remaining * _ROTATION_HOURS / (24.0 * TWO_PI)
        t += 0.25 * dt
        if dt < precision:
            t += 0.75 * dt
            LOG.debug("grs transit converged", extra={"jd": t, "iterations": iteration})
            return Found(t, {"grs_longitude_deg": grs * RAD_TO_DEG})
    LOG.debug("grs transit did not converge", extra={"jd": jd, "max_iter": max_iter})
    return NotFound(f"GRS transit did not converge in {max_iter} iterations")
