"""Swiss Ephemeris adapter.

``swisseph`` is imported on first use so the rest of the package works
without it.  When the module cannot be loaded a :class:`ProviderError`
explains how to install it.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import math
from typing import Any

from ..constants import ARCSEC_TO_RAD, AU_KM, DEG_TO_RAD
from ..core.angles import normalize_radians
from ..core.errors import InvalidBodyError, InvalidConfigurationError, ProviderError
from ..core.time import Epoch, TimeScale
from ..reduction.methods import ReductionMethod
from . import MOON_RADIUS_KM, SEMIDIAMETERS_ARCSEC, Body, BodyState, Observer

__all__ = ["SwissProvider", "has_swe", "load_swe", "reset_swe"]

LOG = logging.getLogger(__name__)

_swe_mod: Any | None = None

_SWE_BODY_NAMES = {
    Body.SUN: "SUN",
    Body.MOON: "MOON",
    Body.MERCURY: "MERCURY",
    Body.VENUS: "VENUS",
    Body.MARS: "MARS",
    Body.JUPITER: "JUPITER",
    Body.SATURN: "SATURN",
    Body.URANUS: "URANUS",
    Body.NEPTUNE: "NEPTUNE",
}


def load_swe() -> Any:
    """Import and cache the ``swisseph`` module."""

    global _swe_mod
    if _swe_mod is None:
        try:
            _swe_mod = importlib.import_module("swisseph")
        except ImportError as exc:
            raise ProviderError(
                "Swiss Ephemeris not available. Install pyswisseph (package: 'pyswisseph') "
                "and set SE_EPHE_PATH to your ephemeris data directory."
            ) from exc
    return _swe_mod


def reset_swe() -> None:
    """For tests: force a reload of swisseph on next use."""

    global _swe_mod
    _swe_mod = None


def has_swe() -> bool:
    """Return ``True`` if pyswisseph is importable."""

    if _swe_mod is not None:
        return True
    return importlib.util.find_spec("swisseph") is not None


class SwissProvider:
    """Ephemeris, nutation, sidereal-time and ΔT provider on pyswisseph.

    Julian Days passed to :meth:`position` and :meth:`nutation` are TT;
    :meth:`apparent_sidereal_time` takes UT.  Without ephemeris files the
    Moshier analytic theory built into the library is used.
    """

    def __init__(self, ephemeris_path: str | None = None) -> None:
        self._swe = load_swe()
        self._flags = self._swe.FLG_MOSEPH
        if ephemeris_path:
            self._swe.set_ephe_path(str(ephemeris_path))
            self._flags = self._swe.FLG_SWIEPH
            LOG.debug("swiss ephemeris path set", extra={"path": str(ephemeris_path)})

    def _calc(self, jd: float, index: int, flags: int) -> tuple[float, ...]:
        try:
            xx, ret_flag = self._swe.calc(jd, index, flags)
        except Exception as exc:  # pyswisseph raises its own error type
            raise ProviderError(f"Swiss ephemeris failed for body index {index} at JD {jd}: {exc}") from exc
        if ret_flag < 0:
            raise ProviderError(f"Swiss ephemeris returned error code {ret_flag}")
        return tuple(xx)

    def _index(self, body: Body) -> int:
        name = _SWE_BODY_NAMES.get(body)
        if name is None:
            raise InvalidBodyError(f"Swiss ephemeris provider cannot compute {body.value}")
        return getattr(self._swe, name)

    def position(self, jd: float, body: Body, observer: Observer | None = None) -> BodyState:
        body = Body(body)
        swe = self._swe
        if body in (Body.EARTH, Body.EARTH_MOON_BARYCENTER):
            sun = self._calc(jd, swe.SUN, self._flags | swe.FLG_TRUEPOS)
            return BodyState(ra=0.0, dec=0.0, distance=0.0, distance_from_sun=float(sun[2]))
        index = self._index(body)
        ecl = self._calc(jd, index, self._flags)
        equ = self._calc(jd, index, self._flags | swe.FLG_EQUATORIAL)
        distance = float(ecl[2])
        if body is Body.SUN:
            from_sun = 0.0
            radius = SEMIDIAMETERS_ARCSEC["sun"] / distance * ARCSEC_TO_RAD
        else:
            from_sun = float(self._calc(jd, index, self._flags | swe.FLG_HELCTR)[2])
            if body is Body.MOON:
                radius = math.asin(MOON_RADIUS_KM / (distance * AU_KM))
            else:
                radius = SEMIDIAMETERS_ARCSEC[body.value] / distance * ARCSEC_TO_RAD
        return BodyState(
            ra=normalize_radians(equ[0] * DEG_TO_RAD),
            dec=equ[1] * DEG_TO_RAD,
            distance=distance,
            angular_radius=radius,
            distance_from_sun=from_sun,
            ecliptic_lon=normalize_radians(ecl[0] * DEG_TO_RAD),
            ecliptic_lat=ecl[1] * DEG_TO_RAD,
        )

    def nutation(self, jd: float, method: ReductionMethod) -> tuple[float, float]:
        xx = self._calc(jd, self._swe.ECL_NUT, 0)
        return xx[2] * DEG_TO_RAD, xx[3] * DEG_TO_RAD

    def apparent_sidereal_time(self, jd: float, observer: Observer) -> float:
        gast_hours = self._swe.sidtime(jd)
        return normalize_radians(gast_hours * 15.0 * DEG_TO_RAD + observer.longitude)

    def delta_t_days(self, jd_ut: float) -> float:
        return float(self._swe.deltat(jd_ut))

    def convert(self, epoch: Epoch, to_scale: TimeScale, observer: Observer | None = None) -> Epoch:
        to_scale = TimeScale(to_scale)
        if epoch.scale is to_scale:
            return epoch
        if TimeScale.LOCAL in (epoch.scale, to_scale) and observer is None:
            raise InvalidConfigurationError("LOCAL time scale requires an observer")
        if epoch.scale in (TimeScale.TT, TimeScale.TDB):
            # deltat takes UT; one fixed-point pass is enough at the millisecond level
            ut = epoch.jd - self.delta_t_days(epoch.jd)
            ut = epoch.jd - self.delta_t_days(ut)
        elif epoch.scale is TimeScale.LOCAL:
            ut = epoch.jd - observer.longitude_deg / 360.0
        else:
            ut = epoch.jd
        if to_scale in (TimeScale.TT, TimeScale.TDB):
            return Epoch(ut + self.delta_t_days(ut), to_scale)
        if to_scale is TimeScale.LOCAL:
            return Epoch(ut + observer.longitude_deg / 360.0, to_scale)
        return Epoch(ut, to_scale)
