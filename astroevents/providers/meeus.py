"""Low-precision ephemeris, nutation and ΔT built on PyMeeus.

PyMeeus evaluates the VSOP87 and ELP theories in pure Python, which is
enough for event timing at the minute level.  Positions are apparent
geocentric coordinates of date on the TT scale.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable

from ..constants import ARCSEC_TO_RAD, AU_KM, DEG_TO_RAD, SECONDS_PER_DAY
from ..core.angles import normalize_radians
from ..core.errors import InvalidBodyError, InvalidConfigurationError, ProviderError
from ..core.time import Epoch as EventEpoch
from ..core.time import TimeScale, jd_to_calendar
from ..core.vectors import rectangular_to_spherical, spherical_to_rectangular
from ..reduction.methods import ReductionMethod
from . import MOON_RADIUS_KM, SEMIDIAMETERS_ARCSEC, Body, BodyState, Observer

try:  # pragma: no cover - exercised when the optional dependency is absent
    from pymeeus import Coordinates as _Coordinates
    from pymeeus.Angle import Angle
    from pymeeus.Earth import Earth as _Earth
    from pymeeus.Epoch import Epoch
    from pymeeus.Jupiter import Jupiter as _Jupiter
    from pymeeus.Mars import Mars as _Mars
    from pymeeus.Mercury import Mercury as _Mercury
    from pymeeus.Moon import Moon as _Moon
    from pymeeus.Neptune import Neptune as _Neptune
    from pymeeus.Saturn import Saturn as _Saturn
    from pymeeus.Sun import Sun as _Sun
    from pymeeus.Uranus import Uranus as _Uranus
    from pymeeus.Venus import Venus as _Venus

    _PYMEEUS_AVAILABLE = True
except ImportError:
    _PYMEEUS_AVAILABLE = False

__all__ = ["DeltaTConverter", "MeeusProvider"]

LOG = logging.getLogger(__name__)

if not _PYMEEUS_AVAILABLE:
    LOG.info("pymeeus not installed", extra={"err_code": "PYMEEUS_IMPORT"})


def _require_pymeeus() -> None:
    if not _PYMEEUS_AVAILABLE:
        raise ProviderError("PyMeeus is not available. Install it with 'pip install pymeeus'.")


def _planet_classes() -> dict[Body, Any]:
    return {
        Body.MERCURY: _Mercury,
        Body.VENUS: _Venus,
        Body.MARS: _Mars,
        Body.JUPITER: _Jupiter,
        Body.SATURN: _Saturn,
        Body.URANUS: _Uranus,
        Body.NEPTUNE: _Neptune,
    }


def _rad(angle: Any) -> float:
    return float(angle) * DEG_TO_RAD


class MeeusProvider:
    """Ephemeris and nutation provider backed by PyMeeus.

    Nutation is always the IAU 1980 series PyMeeus implements; the
    ``method`` argument is accepted for interface compatibility.
    """

    def __init__(self) -> None:
        _require_pymeeus()
        self._planets = _planet_classes()

    def _heliocentric_xyz(self, epoch: Any, cls: Any) -> tuple[float, float, float]:
        lon, lat, radius = cls.geometric_heliocentric_position(epoch)
        return spherical_to_rectangular(_rad(lon), _rad(lat), float(radius))

    def _ecliptic_from_equatorial(self, ra: float, dec: float, epoch: Any) -> tuple[float, float]:
        eps = _Coordinates.true_obliquity(epoch)
        lon, lat = _Coordinates.equatorial2ecliptical(
            Angle(ra / DEG_TO_RAD), Angle(dec / DEG_TO_RAD), eps
        )
        return normalize_radians(_rad(lon)), _rad(lat)

    def _equatorial_from_ecliptic(self, lon: float, lat: float, epoch: Any) -> tuple[float, float]:
        eps = _Coordinates.true_obliquity(epoch)
        ra, dec = _Coordinates.ecliptical2equatorial(
            Angle(lon / DEG_TO_RAD), Angle(lat / DEG_TO_RAD), eps
        )
        return normalize_radians(_rad(ra)), _rad(dec)

    def _sun(self, epoch: Any) -> BodyState:
        lon, lat, radius = _Sun.apparent_geocentric_position(epoch)
        lon_r, lat_r, r_au = normalize_radians(_rad(lon)), _rad(lat), float(radius)
        ra, dec = self._equatorial_from_ecliptic(lon_r, lat_r, epoch)
        return BodyState(
            ra=ra,
            dec=dec,
            distance=r_au,
            angular_radius=SEMIDIAMETERS_ARCSEC["sun"] / r_au * ARCSEC_TO_RAD,
            distance_from_sun=0.0,
            ecliptic_lon=lon_r,
            ecliptic_lat=lat_r,
        )

    def _moon(self, epoch: Any) -> BodyState:
        lon, lat, dist_km, _parallax = _Moon.geocentric_ecliptical_pos(epoch)
        lon_r, lat_r = normalize_radians(_rad(lon)), _rad(lat)
        ra, dec = self._equatorial_from_ecliptic(lon_r, lat_r, epoch)
        distance = float(dist_km) / AU_KM
        earth = self._heliocentric_xyz(epoch, _Earth)
        moon = spherical_to_rectangular(lon_r, lat_r, distance)
        _, _, from_sun = rectangular_to_spherical(tuple(earth[i] + moon[i] for i in range(3)))
        return BodyState(
            ra=ra,
            dec=dec,
            distance=distance,
            angular_radius=math.asin(MOON_RADIUS_KM / float(dist_km)),
            distance_from_sun=from_sun,
            ecliptic_lon=lon_r,
            ecliptic_lat=lat_r,
        )

    def _earth(self, epoch: Any) -> BodyState:
        _, _, radius = _Earth.geometric_heliocentric_position(epoch)
        return BodyState(ra=0.0, dec=0.0, distance=0.0, distance_from_sun=float(radius))

    def _planet(self, epoch: Any, body: Body) -> BodyState:
        cls = self._planets[body]
        ra, dec, _elongation = cls.geocentric_position(epoch)
        ra_r, dec_r = normalize_radians(_rad(ra)), _rad(dec)
        planet = self._heliocentric_xyz(epoch, cls)
        earth = self._heliocentric_xyz(epoch, _Earth)
        _, _, from_sun = rectangular_to_spherical(planet)
        _, _, distance = rectangular_to_spherical(tuple(planet[i] - earth[i] for i in range(3)))
        lon, lat = self._ecliptic_from_equatorial(ra_r, dec_r, epoch)
        return BodyState(
            ra=ra_r,
            dec=dec_r,
            distance=distance,
            angular_radius=SEMIDIAMETERS_ARCSEC[body.value] / distance * ARCSEC_TO_RAD,
            distance_from_sun=from_sun,
            ecliptic_lon=lon,
            ecliptic_lat=lat,
        )

    def position(self, jd: float, body: Body, observer: Observer | None = None) -> BodyState:
        body = Body(body)
        epoch = Epoch(jd)
        if body is Body.SUN:
            return self._sun(epoch)
        if body is Body.MOON:
            return self._moon(epoch)
        if body in (Body.EARTH, Body.EARTH_MOON_BARYCENTER):
            return self._earth(epoch)
        if body in self._planets:
            return self._planet(epoch, body)
        raise InvalidBodyError(f"PyMeeus provider cannot compute {body.value}")

    def nutation(self, jd: float, method: ReductionMethod) -> tuple[float, float]:
        epoch = Epoch(jd)
        dpsi = _Coordinates.nutation_longitude(epoch)
        deps = _Coordinates.nutation_obliquity(epoch)
        return _rad(dpsi), _rad(deps)


_TERRESTRIAL = (TimeScale.TT, TimeScale.TDB)
_UNIVERSAL = (TimeScale.UTC, TimeScale.UT1)


class DeltaTConverter:
    """Time-scale conversion using the PyMeeus ΔT table.

    TT and TDB are treated as identical, as are UTC and UT1.  LOCAL is local
    mean time and needs an observer for its longitude.
    """

    def __init__(self, delta_t: Callable[[int, int], float] | None = None) -> None:
        if delta_t is None:
            _require_pymeeus()
            delta_t = Epoch.tt2ut
        self._delta_t = delta_t

    def delta_t_seconds(self, jd: float) -> float:
        year, month, _ = jd_to_calendar(jd)
        return float(self._delta_t(year, month))

    def _to_ut(self, epoch: EventEpoch, observer: Observer | None) -> float:
        if epoch.scale in _UNIVERSAL:
            return epoch.jd
        if epoch.scale in _TERRESTRIAL:
            return epoch.jd - self.delta_t_seconds(epoch.jd) / SECONDS_PER_DAY
        return epoch.jd - self._local_offset(observer)

    @staticmethod
    def _local_offset(observer: Observer | None) -> float:
        if observer is None:
            raise InvalidConfigurationError("LOCAL time scale requires an observer")
        return observer.longitude_deg / 360.0

    def convert(
        self, epoch: EventEpoch, to_scale: TimeScale, observer: Observer | None = None
    ) -> EventEpoch:
        to_scale = TimeScale(to_scale)
        if epoch.scale is to_scale:
            return epoch
        ut = self._to_ut(epoch, observer)
        if to_scale in _UNIVERSAL:
            return EventEpoch(ut, to_scale)
        if to_scale in _TERRESTRIAL:
            return EventEpoch(ut + self.delta_t_seconds(ut) / SECONDS_PER_DAY, to_scale)
        return EventEpoch(ut + self._local_offset(observer), to_scale)
