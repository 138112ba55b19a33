from __future__ import annotations

import importlib.util
import math
import warnings

import pytest

from astroevents.constants import ARCSEC_TO_RAD, DEG_TO_RAD, J2000
from astroevents.core.angles import normalize_radians
from astroevents.core.errors import InvalidBodyError
from astroevents.providers import Body, BodyState, Observer

if importlib.util.find_spec("swisseph") is None:
    warnings.warn(
        "pyswisseph not installed; Swiss ephemeris tests will be skipped.",
        RuntimeWarning,
        stacklevel=1,
    )


class LowPrecisionSun:
    """Apparent Sun from the low-accuracy series of Meeus ch. 25 (about 0.01 deg)."""

    def position(self, jd: float, body: Body, observer: Observer | None = None) -> BodyState:
        if Body(body) is not Body.SUN:
            raise InvalidBodyError(f"test provider only knows the Sun, not {body}")
        t = (jd - J2000) / 36525.0
        l0 = 280.46646 + 36000.76983 * t + 0.0003032 * t * t
        m = (357.52911 + 35999.05029 * t - 0.0001537 * t * t) * DEG_TO_RAD
        e = 0.016708634 - 0.000042037 * t
        c = (
            (1.914602 - 0.004817 * t - 0.000014 * t * t) * math.sin(m)
            + (0.019993 - 0.000101 * t) * math.sin(2.0 * m)
            + 0.000289 * math.sin(3.0 * m)
        )
        nu = m + c * DEG_TO_RAD
        radius = 1.000001018 * (1.0 - e * e) / (1.0 + e * math.cos(nu))
        omega = (125.04 - 1934.136 * t) * DEG_TO_RAD
        lam = (l0 + c - 0.00569 - 0.00478 * math.sin(omega)) * DEG_TO_RAD
        eps = (23.439291 - 0.0130042 * t + 0.00256 * math.cos(omega)) * DEG_TO_RAD
        ra = normalize_radians(math.atan2(math.cos(eps) * math.sin(lam), math.cos(lam)))
        dec = math.asin(math.sin(eps) * math.sin(lam))
        return BodyState(
            ra=ra,
            dec=dec,
            distance=radius,
            angular_radius=959.63 / radius * ARCSEC_TO_RAD,
            ecliptic_lon=normalize_radians(lam),
        )


SATURN_LON_J2000_DEG = 40.0
SATURN_RATE_DEG_PER_DAY = 360.0 / 10759.22


class LinearSaturn:
    """Saturn moving uniformly along the ecliptic."""

    def position(self, jd: float, body: Body, observer: Observer | None = None) -> BodyState:
        if Body(body) is not Body.SATURN:
            raise InvalidBodyError(f"test provider only knows Saturn, not {body}")
        lon = (SATURN_LON_J2000_DEG + SATURN_RATE_DEG_PER_DAY * (jd - J2000)) * DEG_TO_RAD
        return BodyState(
            ra=normalize_radians(lon),
            dec=0.0,
            distance=9.5,
            distance_from_sun=9.5,
            ecliptic_lon=normalize_radians(lon),
            ecliptic_lat=0.0,
        )


@pytest.fixture
def sun_provider() -> LowPrecisionSun:
    return LowPrecisionSun()


@pytest.fixture
def saturn_provider() -> LinearSaturn:
    return LinearSaturn()


@pytest.fixture
def meeus_provider():
    pytest.importorskip("pymeeus")
    from astroevents.providers.meeus import MeeusProvider

    return MeeusProvider()
