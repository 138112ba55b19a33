"""Equinoxes and solstices from the apparent solar longitude (Meeus ch. 27)."""

from __future__ import annotations

import logging
import math
from enum import Enum

from ..config.settings import SearchCfg
from ..constants import SECONDS_PER_DAY
from ..core.time import calendar_to_jd
from ..providers import Body, EphemerisProvider
from .results import Found, NotFound

__all__ = ["Season", "equinox_solstice", "solar_longitude_time"]

LOG = logging.getLogger(__name__)


class Season(str, Enum):
    MARCH_EQUINOX = "march_equinox"
    JUNE_SOLSTICE = "june_solstice"
    SEPTEMBER_EQUINOX = "september_equinox"
    DECEMBER_SOLSTICE = "december_solstice"


# (starting month, target apparent longitude of the Sun in radians)
_SEASONS = {
    Season.MARCH_EQUINOX: (3, 0.0),
    Season.JUNE_SOLSTICE: (6, 0.5 * math.pi),
    Season.SEPTEMBER_EQUINOX: (9, math.pi),
    Season.DECEMBER_SOLSTICE: (12, -0.5 * math.pi),
}


def solar_longitude_time(
    target: float,
    jd: float,
    provider: EphemerisProvider,
    *,
    precision_seconds: float | None = None,
    max_iter: int = 50,
    settings: SearchCfg | None = None,
) -> float | None:
    """Return the instant (TT) near ``jd`` when the Sun's apparent longitude is ``target``.

    The date is corrected by ``58.13 sin(target - longitude)`` days until the
    correction is below ``precision_seconds``, by default
    ``SearchCfg.equinox_precision_seconds``.  ``jd`` must lie within a
    quarter year of the answer.  ``None`` means no convergence.
    """

    if precision_seconds is None:
        precision_seconds = (settings or SearchCfg()).equinox_precision_seconds
    precision = precision_seconds / SECONDS_PER_DAY
    for iteration in range(1, max_iter + 1):
        lon = provider.position(jd, Body.SUN).ecliptic_lon
        delta = 58.13 * math.sin(target - lon)
        jd += delta
        if abs(delta) <= precision:
            LOG.debug("solar longitude converged", extra={"target": target, "iterations": iteration})
            return jd
    return None


def equinox_solstice(
    year: int,
    season: Season | str,
    provider: EphemerisProvider,
    *,
    precision_seconds: float | None = None,
    max_iter: int = 50,
    settings: SearchCfg | None = None,
) -> Found | NotFound:
    """Return the instant (TT) the Sun reaches the longitude of ``season``.

    The search starts on the first day of the season's month.
    """

    season = Season(season)
    month, target = _SEASONS[season]
    jd = solar_longitude_time(
        target,
        calendar_to_jd(year, month, 1.0),
        provider,
        precision_seconds=precision_seconds,
        max_iter=max_iter,
        settings=settings,
    )
    if jd is None:
        LOG.debug("season did not converge", extra={"season": season.value, "year": year})
        return NotFound(f"{season.value} {year} did not converge in {max_iter} iterations")
    return Found(jd, {"season": season.value, "year": year})
