"""Physical and calendrical constants shared by the reduction and event layers."""

from __future__ import annotations

import math
from typing import Final

__all__ = [
    "ARCSEC_TO_RAD",
    "AU_KM",
    "B1950",
    "DAYS_PER_JULIAN_CENTURY",
    "DAYS_PER_JULIAN_YEAR",
    "DEG_TO_RAD",
    "J2000",
    "MOON_SECULAR_ACCELERATION",
    "MOON_SECULAR_ACCELERATION_DE200",
    "RAD_TO_ARCSEC",
    "RAD_TO_DAY",
    "RAD_TO_DEG",
    "RAD_TO_HOUR",
    "SECONDS_PER_DAY",
    "SIDEREAL_DAY_LENGTH",
    "SPEED_OF_LIGHT_KMS",
    "TROPICAL_YEAR",
    "TWO_PI",
    "PI_OVER_TWO",
]

J2000: Final[float] = 2451545.0
B1950: Final[float] = 2433282.42345905
DAYS_PER_JULIAN_CENTURY: Final[float] = 36525.0
DAYS_PER_JULIAN_YEAR: Final[float] = 365.25
TROPICAL_YEAR: Final[float] = 365.242198781
SECONDS_PER_DAY: Final[float] = 86_400.0

AU_KM: Final[float] = 149597870.691
SPEED_OF_LIGHT_KMS: Final[float] = 299792.458

# Ratio of the mean solar day to the sidereal day.
SIDEREAL_DAY_LENGTH: Final[float] = 1.00273781191135448

TWO_PI: Final[float] = 2.0 * math.pi
PI_OVER_TWO: Final[float] = 0.5 * math.pi
DEG_TO_RAD: Final[float] = math.pi / 180.0
RAD_TO_DEG: Final[float] = 180.0 / math.pi
RAD_TO_ARCSEC: Final[float] = 3600.0 * RAD_TO_DEG
ARCSEC_TO_RAD: Final[float] = 1.0 / RAD_TO_ARCSEC
RAD_TO_HOUR: Final[float] = 12.0 / math.pi
RAD_TO_DAY: Final[float] = RAD_TO_HOUR / 24.0

# Tidal acceleration of the Moon in arcsec/century^2 (ELP2000 and DE200 values).
MOON_SECULAR_ACCELERATION: Final[float] = -25.858
MOON_SECULAR_ACCELERATION_DE200: Final[float] = -23.8946
