"""Interfaces the event searches use to reach ephemeris backends.

The search layer never evaluates planetary theories itself.  It asks an
:class:`EphemerisProvider` for apparent geocentric positions of date, a
:class:`SiderealTimeProvider` for the local apparent sidereal time and a
:class:`NutationProvider` for the nutation angles.  Concrete adapters live in
:mod:`astroevents.providers.meeus` (pymeeus), :mod:`astroevents.providers.swiss`
(pyswisseph) and :mod:`astroevents.providers.sidereal`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from ..constants import DEG_TO_RAD
from ..core.errors import InvalidBodyError
from ..core.time import Epoch, TimeScale, to_centuries
from ..core.vectors import rectangular_to_spherical, rotate_x, spherical_to_rectangular
from ..reduction.frames import Frame
from ..reduction.methods import ReductionConfig, ReductionMethod
from ..reduction.obliquity import mean_obliquity
from ..reduction.precession import precess
from ..reduction.stars import StarRecord, transform_star

__all__ = [
    "Body",
    "BodyState",
    "EphemerisProvider",
    "NutationProvider",
    "MOON_RADIUS_KM",
    "Observer",
    "SEMIDIAMETERS_ARCSEC",
    "SiderealTimeProvider",
    "StaticStarProvider",
    "TimeScaleConverter",
]

LOG = logging.getLogger(__name__)

# Equatorial semidiameters at 1 AU (Meeus ch. 55).
SEMIDIAMETERS_ARCSEC: dict[str, float] = {
    "sun": 959.63,
    "mercury": 3.36,
    "venus": 8.41,
    "mars": 4.68,
    "jupiter": 98.44,
    "saturn": 82.73,
    "uranus": 35.02,
    "neptune": 33.50,
}
MOON_RADIUS_KM = 1737.4


class Body(str, Enum):
    """Bodies understood by the event searches."""

    SUN = "sun"
    MOON = "moon"
    MERCURY = "mercury"
    VENUS = "venus"
    EARTH = "earth"
    EARTH_MOON_BARYCENTER = "earth_moon_barycenter"
    MARS = "mars"
    JUPITER = "jupiter"
    SATURN = "saturn"
    URANUS = "uranus"
    NEPTUNE = "neptune"
    STAR = "star"


@dataclass(frozen=True, slots=True)
class Observer:
    """Geographic location of an observer on a rotating mother body.

    Latitude and longitude are degrees (east positive), elevation is metres
    above the reference ellipsoid of ``mother_body``.
    """

    latitude_deg: float
    longitude_deg: float
    elevation_m: float = 0.0
    mother_body: Body = Body.EARTH
    rotation_ratio: float = 1.0
    equatorial_radius_km: float = 6378.1366
    polar_radius_km: float = 6356.7519

    @property
    def latitude(self) -> float:
        return self.latitude_deg * DEG_TO_RAD

    @property
    def longitude(self) -> float:
        return self.longitude_deg * DEG_TO_RAD

    @property
    def on_earth(self) -> bool:
        return self.mother_body is Body.EARTH


@dataclass(frozen=True, slots=True)
class BodyState:
    """Apparent geocentric state of a body for an instant.

    Angles are radians, distances AU.  ``static`` marks targets whose
    position does not change over a day (stars), which lets rise/set skip
    its convergence loop.
    """

    ra: float
    dec: float
    distance: float
    angular_radius: float = 0.0
    distance_from_sun: float = 0.0
    ecliptic_lon: float = 0.0
    ecliptic_lat: float = 0.0
    static: bool = False


@runtime_checkable
class EphemerisProvider(Protocol):
    def position(self, jd: float, body: Body, observer: Observer | None = None) -> BodyState:
        """Return the apparent geocentric position of ``body`` at ``jd`` (TT)."""


@runtime_checkable
class NutationProvider(Protocol):
    def nutation(self, jd: float, method: ReductionMethod) -> tuple[float, float]:
        """Return ``(dpsi, deps)`` in radians."""


@runtime_checkable
class SiderealTimeProvider(Protocol):
    def apparent_sidereal_time(self, jd: float, observer: Observer) -> float:
        """Return the local apparent sidereal time in radians."""


@runtime_checkable
class TimeScaleConverter(Protocol):
    def convert(self, epoch: Epoch, to_scale: TimeScale, observer: Observer | None = None) -> Epoch:
        """Return ``epoch`` expressed on ``to_scale``."""


class StaticStarProvider:
    """Ephemeris provider for a single catalogue star.

    The star is propagated with its proper motion to the requested date,
    referred to the mean equinox of date and reported with ``static=True``.
    Any body other than :attr:`Body.STAR` is rejected.
    """

    def __init__(self, star: StarRecord, config: ReductionConfig | None = None) -> None:
        self.star = star
        self.config = config or ReductionConfig()

    def position(self, jd: float, body: Body = Body.STAR, observer: Observer | None = None) -> BodyState:
        if Body(body) is not Body.STAR:
            raise InvalidBodyError(f"StaticStarProvider only serves Body.STAR, not {body}")
        if self.star.pm_ra == 0.0 and self.star.pm_dec == 0.0 and self.star.frame is Frame.FK5:
            vec = spherical_to_rectangular(self.star.ra, self.star.dec)
            ra, dec, _ = rectangular_to_spherical(precess(self.star.equinox_jd, jd, vec, self.config))
        else:
            moved = transform_star(self.star, Frame.FK5, jd, jd, self.config)
            ra, dec = moved.ra, moved.dec
        eps = mean_obliquity(to_centuries(jd), self.config)
        lon, lat, _ = rectangular_to_spherical(rotate_x(spherical_to_rectangular(ra, dec), -eps))
        return BodyState(
            ra=ra,
            dec=dec,
            distance=math.inf,
            ecliptic_lon=lon,
            ecliptic_lat=lat,
            static=True,
        )
