"""Meteor shower maxima from the solar longitude of their peak."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..config.settings import SearchCfg
from ..constants import DEG_TO_RAD, J2000
from ..core.errors import InvalidConfigurationError
from ..core.time import calendar_to_jd
from ..core.vectors import rectangular_to_spherical, spherical_to_rectangular
from ..providers import EphemerisProvider
from ..reduction.methods import ReductionConfig
from ..reduction.precession import precess_from_j2000, precess_pos_vel_ecliptic
from .results import Found, MeteorShowerDetails, NotFound
from .seasons import solar_longitude_time

__all__ = ["MeteorShowerRecord", "meteor_showers"]

LOG = logging.getLogger(__name__)

_MONTHS = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")


def _month_day(text: str) -> tuple[int, int]:
    parts = text.split()
    if len(parts) != 2 or parts[0][:3].lower() not in _MONTHS:
        raise InvalidConfigurationError(f"expected a date like 'Aug 12', got {text!r}")
    return _MONTHS.index(parts[0][:3].lower()) + 1, int(parts[1])


@dataclass(frozen=True, slots=True)
class MeteorShowerRecord:
    """One shower of a meteor shower table.

    ``solar_longitude_deg`` is the J2000 ecliptic longitude of the Sun at the
    maximum; the radiant is J2000 equatorial.  ``peak``, ``start`` and ``end``
    are nominal ``(month, day)`` dates; an activity window may straddle the
    new year.
    """

    name: str
    solar_longitude_deg: float
    radiant_ra_deg: float
    radiant_dec_deg: float
    peak: tuple[int, int]
    start: tuple[int, int]
    end: tuple[int, int]
    zhr: Optional[float] = None

    @classmethod
    def from_row(cls, row: Sequence[str]) -> "MeteorShowerRecord":
        """Build a record from ``(name, "Jul 17-Aug 24", "Aug 12", lon, ra, dec[, zhr])``."""

        if len(row) < 6:
            raise InvalidConfigurationError(f"meteor shower row needs 6 fields, got {len(row)}")
        first, _, last = row[1].partition("-")
        zhr = row[6].strip() if len(row) > 6 else ""
        return cls(
            name=row[0].strip(),
            solar_longitude_deg=float(row[3]),
            radiant_ra_deg=float(row[4]),
            radiant_dec_deg=float(row[5]),
            peak=_month_day(row[2]),
            start=_month_day(first),
            end=_month_day(last),
            zhr=float(zhr) if zhr else None,
        )


def _solar_longitude_of_date(lon_deg: float, jd: float, config: ReductionConfig) -> float:
    v = spherical_to_rectangular(lon_deg * DEG_TO_RAD, 0.0)
    lon, _, _ = rectangular_to_spherical(precess_pos_vel_ecliptic(J2000, jd, v, config))
    return lon


def _activity_window(year: int, record: MeteorShowerRecord) -> tuple[float, float]:
    """Days from the nominal start to the peak and from the peak to the end."""

    peak = calendar_to_jd(year, record.peak[0], float(record.peak[1]))
    start = calendar_to_jd(year, record.start[0], float(record.start[1]))
    end = calendar_to_jd(year, record.end[0], float(record.end[1]))
    if start > peak:
        start = calendar_to_jd(year - 1, record.start[0], float(record.start[1]))
    if end < peak:
        end = calendar_to_jd(year + 1, record.end[0], float(record.end[1]))
    return peak - start, end - peak


def meteor_showers(
    year: int,
    records: Iterable[MeteorShowerRecord],
    provider: EphemerisProvider,
    *,
    config: ReductionConfig | None = None,
    settings: SearchCfg | None = None,
) -> list[Found | NotFound]:
    """Return the maximum (TT) of every shower in ``records`` for ``year``.

    The peak solar longitude is precessed from J2000 to the start of the year
    and the Sun is followed from the nominal peak date until it reaches that
    longitude.  The activity window keeps the table's distances from the
    nominal peak.  Results keep the order of ``records``.
    """

    config = config or ReductionConfig()
    jd0 = calendar_to_jd(year, 1, 1.0)
    results: list[Found | NotFound] = []
    for record in records:
        target = _solar_longitude_of_date(record.solar_longitude_deg, jd0, config)
        guess = calendar_to_jd(year, record.peak[0], float(record.peak[1]))
        jd = solar_longitude_time(target, guess, provider, settings=settings)
        if jd is None:
            LOG.debug("meteor shower maximum did not converge", extra={"shower": record.name, "year": year})
            results.append(NotFound(f"{record.name} {year} maximum did not converge"))
            continue
        radiant = precess_from_j2000(
            jd0,
            spherical_to_rectangular(record.radiant_ra_deg * DEG_TO_RAD, record.radiant_dec_deg * DEG_TO_RAD),
            config,
        )
        ra, dec, _ = rectangular_to_spherical(radiant)
        before, after = _activity_window(year, record)
        details = MeteorShowerDetails(
            name=record.name,
            radiant_ra=ra,
            radiant_dec=dec,
            zhr=record.zhr,
            start_jd=jd - before,
            end_jd=jd + after,
        )
        results.append(Found(jd, details))
    return results
