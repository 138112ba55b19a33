"""Result variants returned by the event searches.

A search either finds an instant (:class:`Found`) or reports why it did not.
Rise/set adds two geometric outcomes, :class:`Circumpolar` and
:class:`AlwaysBelowHorizon`.  Every variant carries a ``found`` flag so
callers can branch without ``isinstance`` checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final, Union

from ..constants import DEG_TO_RAD

__all__ = [
    "ASTRONOMICAL",
    "AlwaysBelowHorizon",
    "CIVIL",
    "Circumpolar",
    "EventResult",
    "Found",
    "HORIZON",
    "HORIZON_34ARCMIN",
    "LunarEclipseDetails",
    "MeteorShowerDetails",
    "NAUTICAL",
    "NoRiseSetTransit",
    "NotFound",
    "RiseSetTransit",
    "SolarEclipseDetails",
    "Twilight",
    "TwilightDefinition",
]


@dataclass(frozen=True, slots=True)
class Found:
    jd: float
    details: Any = None
    found: bool = field(default=True, init=False)


@dataclass(frozen=True, slots=True)
class NotFound:
    reason: str = ""
    found: bool = field(default=False, init=False)


@dataclass(frozen=True, slots=True)
class Circumpolar:
    """The body stays above the requested elevation all day."""

    found: bool = field(default=False, init=False)


@dataclass(frozen=True, slots=True)
class AlwaysBelowHorizon:
    """The body never reaches the requested elevation."""

    found: bool = field(default=False, init=False)


@dataclass(frozen=True, slots=True)
class NoRiseSetTransit:
    reason: str = ""
    found: bool = field(default=False, init=False)


EventResult = Union[Found, NotFound, Circumpolar, AlwaysBelowHorizon, NoRiseSetTransit]


@dataclass(frozen=True, slots=True)
class LunarEclipseDetails:
    kind: str
    magnitude_umbral: float
    magnitude_penumbral: float
    semi_duration_partial_min: float
    semi_duration_total_min: float
    semi_duration_penumbral_min: float
    gamma: float


@dataclass(frozen=True, slots=True)
class SolarEclipseDetails:
    kind: str
    magnitude: float | None
    central: bool
    gamma: float
    u: float


@dataclass(frozen=True, slots=True)
class MeteorShowerDetails:
    """Maximum of a meteor shower; the radiant is referred to the mean equinox of the year."""

    name: str
    radiant_ra: float
    radiant_dec: float
    zhr: float | None
    start_jd: float
    end_jd: float


@dataclass(frozen=True, slots=True)
class RiseSetTransit:
    """Rise, set and transit of one body for one observer."""

    rise: EventResult
    set: EventResult
    transit: EventResult
    transit_elevation: float | None = None


class Twilight(str, Enum):
    ASTRONOMICAL = "astronomical"
    NAUTICAL = "nautical"
    CIVIL = "civil"
    HORIZON = "horizon"
    HORIZON_34ARCMIN = "horizon_34arcmin"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class TwilightDefinition:
    """Elevation a body must reach for a rise or set event.

    ``elevation`` (radians) only applies to :attr:`Twilight.CUSTOM`; the
    presets derive their elevation from the twilight kind.
    """

    kind: Twilight
    elevation: float = 0.0
    consider_angular_radius: bool = True

    @classmethod
    def custom(cls, elevation: float, consider_angular_radius: bool = True) -> "TwilightDefinition":
        return cls(Twilight.CUSTOM, float(elevation), consider_angular_radius)


ASTRONOMICAL: Final = TwilightDefinition(Twilight.ASTRONOMICAL, -18.0 * DEG_TO_RAD, False)
NAUTICAL: Final = TwilightDefinition(Twilight.NAUTICAL, -12.0 * DEG_TO_RAD, False)
CIVIL: Final = TwilightDefinition(Twilight.CIVIL, -6.0 * DEG_TO_RAD, False)
HORIZON: Final = TwilightDefinition(Twilight.HORIZON)
HORIZON_34ARCMIN: Final = TwilightDefinition(Twilight.HORIZON_34ARCMIN)
