"""Julian Day bookkeeping and calendar helpers.

Every computation in astroevents runs on Julian Days.  :class:`Epoch` tags a
Julian Day with the time scale it is expressed in so arithmetic between
values on different scales fails loudly instead of silently mixing UT and TT.
Conversion between scales is the job of a
:class:`~astroevents.providers.TimeScaleConverter`.
"""

from __future__ import annotations

import datetime as _dt
import math
from dataclasses import dataclass
from enum import Enum
from typing import Final

from ..constants import (
    DAYS_PER_JULIAN_CENTURY,
    J2000,
    MOON_SECULAR_ACCELERATION,
    MOON_SECULAR_ACCELERATION_DE200,
    SECONDS_PER_DAY,
)
from .errors import TimeScaleMismatchError

__all__ = [
    "Epoch",
    "TimeScale",
    "calendar_to_jd",
    "days_in_month",
    "ensure_utc",
    "fractional_year",
    "jd_to_calendar",
    "julian_day",
    "midnight_jd",
    "secular_acceleration_correction",
    "to_centuries",
]

# First day of the Gregorian calendar (1582 October 15, 0h).
GREGORIAN_START_JD: Final[float] = 2299160.5
# Reference epoch of the DE200 lunar tidal acceleration fit (1955.0).
_SECULAR_EPOCH_JD: Final[float] = 2435109.0


class TimeScale(str, Enum):
    """Time scales a Julian Day may be expressed in."""

    TT = "TT"
    TDB = "TDB"
    UTC = "UTC"
    UT1 = "UT1"
    LOCAL = "LOCAL"


@dataclass(frozen=True, slots=True)
class Epoch:
    """A Julian Day tagged with its time scale."""

    jd: float
    scale: TimeScale = TimeScale.TT

    def _require_same_scale(self, other: "Epoch") -> None:
        if self.scale != other.scale:
            raise TimeScaleMismatchError(
                f"cannot combine epochs on {self.scale.value} and {other.scale.value}; "
                "convert one of them first"
            )

    def __add__(self, days: float) -> "Epoch":
        if isinstance(days, Epoch):
            return NotImplemented
        return Epoch(self.jd + float(days), self.scale)

    def __sub__(self, other: "Epoch | float") -> "Epoch | float":
        if isinstance(other, Epoch):
            self._require_same_scale(other)
            return self.jd - other.jd
        return Epoch(self.jd - float(other), self.scale)

    def __lt__(self, other: "Epoch") -> bool:
        self._require_same_scale(other)
        return self.jd < other.jd

    def __le__(self, other: "Epoch") -> bool:
        self._require_same_scale(other)
        return self.jd <= other.jd

    def __gt__(self, other: "Epoch") -> bool:
        self._require_same_scale(other)
        return self.jd > other.jd

    def __ge__(self, other: "Epoch") -> bool:
        self._require_same_scale(other)
        return self.jd >= other.jd

    def centuries(self) -> float:
        """Julian centuries elapsed since J2000 on this epoch's scale."""

        return to_centuries(self.jd)


def to_centuries(jd: float) -> float:
    """Return Julian centuries from J2000 for ``jd``."""

    return (jd - J2000) / DAYS_PER_JULIAN_CENTURY


def midnight_jd(jd: float) -> float:
    """Return the Julian Day of the preceding 0h."""

    return math.floor(jd - 0.5) + 0.5


def ensure_utc(moment: _dt.datetime) -> _dt.datetime:
    """Return ``moment`` converted to UTC, treating naive values as UTC."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=_dt.timezone.utc)
    return moment.astimezone(_dt.timezone.utc)


def calendar_to_jd(year: int, month: int, day: float) -> float:
    """Return the Julian Day for a calendar date (Meeus ch. 7).

    Dates before 1582 October 15 are read on the Julian calendar.
    """

    y, m = year, month
    if m <= 2:
        y -= 1
        m += 12
    jd = math.floor(365.25 * (y + 4716)) + math.floor(30.6001 * (m + 1)) + day - 1524.5
    if jd >= GREGORIAN_START_JD:
        a = math.floor(y / 100)
        jd += 2 - a + math.floor(a / 4)
    return jd


def julian_day(moment: _dt.datetime) -> float:
    """Return the Julian Day for ``moment`` (UTC)."""

    moment = ensure_utc(moment)
    frac = (
        moment.hour + moment.minute / 60.0 + (moment.second + moment.microsecond / 1e6) / 3600.0
    ) / 24.0
    return calendar_to_jd(moment.year, moment.month, moment.day + frac)


def jd_to_calendar(jd: float) -> tuple[int, int, float]:
    """Return ``(year, month, day)`` with a fractional day for ``jd``."""

    shifted = jd + 0.5
    z = math.floor(shifted)
    f = shifted - z
    if z < 2299161:
        a = z
    else:
        alpha = math.floor((z - 1867216.25) / 36524.25)
        a = z + 1 + alpha - math.floor(alpha / 4)
    b = a + 1524
    c = math.floor((b - 122.1) / 365.25)
    d = math.floor(365.25 * c)
    e = math.floor((b - d) / 30.6001)
    day = b - d - math.floor(30.6001 * e) + f
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715
    return int(year), int(month), day


def _is_leap(year: int) -> bool:
    if year > 1582:
        return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0
    return year % 4 == 0


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in ``month`` of ``year``."""

    if month == 2:
        return 29 if _is_leap(year) else 28
    if month in (4, 6, 9, 11):
        return 30
    return 31


def fractional_year(jd: float) -> float:
    """Return the year with a fractional part used to seed cycle indices."""

    year, month, day = jd_to_calendar(jd)
    return year + (month - 1 + day / (days_in_month(year, month) + 1.0)) / 12.0


def secular_acceleration_correction(jde: float) -> float:
    """Correct a lunar-theory event time for the DE200 tidal acceleration.

    Lunar event series are fitted with a tidal acceleration of -25.858"/cy²;
    this shifts the instant to the DE200 value of -23.8946"/cy².
    """

    cent = (jde - _SECULAR_EPOCH_JD) / DAYS_PER_JULIAN_CENTURY
    delta_seconds = 0.91072 * (MOON_SECULAR_ACCELERATION - MOON_SECULAR_ACCELERATION_DE200) * cent**2
    return jde - delta_seconds / SECONDS_PER_DAY
