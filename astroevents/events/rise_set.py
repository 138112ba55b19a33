"""Rise, set and transit times for an observer on a rotating body.

For a fixed position the events follow from the hour angle at which the body
reaches the twilight elevation ``h0``::

    cos H = (sin h0 - sin φ sin δ) / (cos φ cos δ)

A moving body is re-evaluated at each new event estimate until successive
estimates agree to ``SearchCfg.rise_set_precision_seconds``.  The sidereal
time is always that of the query instant; only the position is updated.

Julian Days are UT.  Positions are requested from the provider at the same
Julian Day.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Final, Union

from ..config.settings import SearchCfg
from ..constants import DEG_TO_RAD, RAD_TO_DAY, SECONDS_PER_DAY, SIDEREAL_DAY_LENGTH, TWO_PI
from ..core.angles import normalize_radians
from ..core.errors import InvalidConfigurationError
from ..core.time import midnight_jd
from ..providers import Body, BodyState, EphemerisProvider, Observer, SiderealTimeProvider
from ..providers.sidereal import MeanSiderealTime
from .results import (
    HORIZON,
    AlwaysBelowHorizon,
    Circumpolar,
    EventResult,
    Found,
    NoRiseSetTransit,
    RiseSetTransit,
    Twilight,
    TwilightDefinition,
)
from .search import SearchMode

__all__ = ["horizon_depression", "hour_angle", "rise_set_transit", "twilight_elevation"]

LOG = logging.getLogger(__name__)

HourAngle = Union[float, Circumpolar, AlwaysBelowHorizon]

_TWILIGHT_ELEVATION: Final = {
    Twilight.ASTRONOMICAL: -18.0 * DEG_TO_RAD,
    Twilight.NAUTICAL: -12.0 * DEG_TO_RAD,
    Twilight.CIVIL: -6.0 * DEG_TO_RAD,
}
# Refraction at the horizon (Astronomical Almanac 1986) and the customary 34'.
_HORIZON_REFRACTION: Final = 32.67 / 60.0 * DEG_TO_RAD
_HORIZON_REFRACTION_34: Final = 34.0 / 60.0 * DEG_TO_RAD


def hour_angle(latitude: float, declination: float, h0: float) -> HourAngle:
    """Hour angle (radians) at which a body of ``declination`` reaches elevation ``h0``."""

    numerator = math.sin(h0) - math.sin(latitude) * math.sin(declination)
    denominator = math.cos(latitude) * math.cos(declination)
    if denominator == 0.0:
        return AlwaysBelowHorizon() if numerator > 0.0 else Circumpolar()
    cos_h = numerator / denominator
    if cos_h > 1.0:
        return AlwaysBelowHorizon()
    if cos_h < -1.0:
        return Circumpolar()
    return math.acos(cos_h)


def horizon_depression(observer: Observer) -> float:
    """Dip of the horizon for an elevated observer (radians)."""

    if observer.elevation_m <= 0.0:
        return 0.0
    ratio = observer.polar_radius_km / observer.equatorial_radius_km * 0.5
    rho = observer.equatorial_radius_km * (1.0 - ratio + ratio * math.cos(2.0 * observer.latitude))
    return math.acos(math.sqrt(rho / (rho + observer.elevation_m / 1000.0)))


def twilight_elevation(
    twilight: TwilightDefinition, angular_radius: float, observer: Observer
) -> float:
    """Geometric elevation of the body's centre at the event (radians)."""

    kind = twilight.kind
    if kind in _TWILIGHT_ELEVATION:
        return _TWILIGHT_ELEVATION[kind]
    if kind is Twilight.HORIZON:
        h0 = -angular_radius - horizon_depression(observer)
        return h0 - _HORIZON_REFRACTION if observer.on_earth else h0
    if kind is Twilight.HORIZON_34ARCMIN:
        return -angular_radius - _HORIZON_REFRACTION_34 if observer.on_earth else -angular_radius
    h0 = twilight.elevation
    if twilight.consider_angular_radius:
        h0 -= angular_radius
    return h0


class _Solver:
    """Shared state of one rise/set/transit computation."""

    def __init__(
        self,
        jd: float,
        observer: Observer,
        body: Body,
        provider: EphemerisProvider,
        twilight: TwilightDefinition,
        mode: SearchMode,
        lst: float,
        cfg: SearchCfg,
    ) -> None:
        self.jd = jd
        self.observer = observer
        self.body = body
        self.provider = provider
        self.twilight = twilight
        self.mode = mode
        self.lst = lst
        self.precision = cfg.rise_set_precision_seconds / SECONDS_PER_DAY
        self.max_iter = cfg.rise_set_max_iter
        scale = RAD_TO_DAY / SIDEREAL_DAY_LENGTH
        if not observer.on_earth:
            scale /= observer.rotation_ratio
        self.days_per_radian = scale
        self.local_offset = observer.longitude_deg / 360.0

    def position(self, jd: float) -> BodyState:
        return self.provider.position(jd, self.body, self.observer)

    def hour_angle(self, state: BodyState) -> HourAngle:
        h0 = twilight_elevation(self.twilight, state.angular_radius, self.observer)
        return hour_angle(self.observer.latitude, state.dec, h0)

    def event_time(self, angle: float) -> float:
        """Instant the local sidereal time reaches ``angle``, picked by mode."""

        ahead = self.days_per_radian * normalize_radians(angle - self.lst)
        behind = ahead - self.days_per_radian * TWO_PI
        if self.mode is SearchMode.PREVIOUS:
            offset = behind
        elif self.mode is SearchMode.CLOSEST:
            offset = behind if abs(behind) < abs(ahead) else ahead
        elif self.mode is SearchMode.CURRENT:
            local = self.jd + self.local_offset
            today = midnight_jd(local)
            offset = ahead
            if midnight_jd(local + behind) == today and abs(today - (local + behind)) < abs(
                today - (local + ahead)
            ):
                offset = behind
        else:
            offset = ahead
        return self.jd + offset

    def on_query_day(self, event_jd: float) -> bool:
        return midnight_jd(event_jd + self.local_offset) == midnight_jd(self.jd + self.local_offset)

    def solve(
        self,
        angle_of: Callable[[BodyState, HourAngle], float],
        needs_hour_angle: bool,
        retry_from: float | None = None,
    ) -> tuple[EventResult, BodyState]:
        state = self.position(self.jd)
        last: float | None = None
        retried = False
        for iteration in range(1, self.max_iter + 1):
            h = self.hour_angle(state) if needs_hour_angle else 0.0
            if not isinstance(h, float):
                if iteration == 1 or state.static:
                    return h, state
                if retried or retry_from is None:
                    LOG.debug("event vanished during iteration", extra={"body": self.body.value})
                    return NoRiseSetTransit("body became circumpolar or never rises"), state
                retried = True
                last = None
                state = self.position(retry_from)
                continue
            event_jd = self.event_time(angle_of(state, h))
            if state.static or (last is not None and abs(event_jd - last) <= self.precision):
                if self.mode is SearchMode.CURRENT and not self.on_query_day(event_jd):
                    return NoRiseSetTransit("event falls on another day"), state
                LOG.debug(
                    "rise/set event converged",
                    extra={"body": self.body.value, "iterations": iteration, "jd": event_jd},
                )
                return Found(event_jd), state
            last = event_jd
            state = self.position(event_jd)
        LOG.debug("rise/set event did not converge", extra={"body": self.body.value, "jd": self.jd})
        return NoRiseSetTransit(f"no convergence in {self.max_iter} iterations"), state


def rise_set_transit(
    jd: float,
    observer: Observer,
    body: Body | str,
    provider: EphemerisProvider,
    *,
    twilight: TwilightDefinition = HORIZON,
    mode: SearchMode = SearchMode.NEXT,
    sidereal: SiderealTimeProvider | None = None,
    settings: SearchCfg | None = None,
) -> RiseSetTransit:
    """Rise, set and transit of ``body`` for ``observer`` around ``jd`` (UT).

    ``mode`` selects the next, previous, closest or current-day events; each
    of the three results is a :class:`Found` or one of the reasons it does
    not exist (:class:`Circumpolar`, :class:`AlwaysBelowHorizon`,
    :class:`NoRiseSetTransit`).  ``sidereal`` defaults to the provider when
    it serves sidereal time, else to :class:`MeanSiderealTime`.
    """

    body = Body(body)
    mode = SearchMode(mode)
    if not isinstance(twilight, TwilightDefinition):
        raise InvalidConfigurationError(f"expected a TwilightDefinition, got {twilight!r}")
    cfg = settings or SearchCfg()
    if sidereal is None:
        sidereal = provider if isinstance(provider, SiderealTimeProvider) else MeanSiderealTime()
    lst = sidereal.apparent_sidereal_time(jd, observer)
    solver = _Solver(jd, observer, body, provider, twilight, mode, lst, cfg)

    transit, state = solver.solve(lambda s, h: s.ra, needs_hour_angle=False)
    elevation = None
    if isinstance(transit, Found):
        lat = observer.latitude
        elevation = math.asin(
            math.sin(state.dec) * math.sin(lat) + math.cos(state.dec) * math.cos(lat)
        )
    retry_from = transit.jd if isinstance(transit, Found) else None
    rise, _ = solver.solve(lambda s, h: s.ra - h, needs_hour_angle=True, retry_from=retry_from)
    set_, _ = solver.solve(lambda s, h: s.ra + h, needs_hour_angle=True, retry_from=retry_from)
    return RiseSetTransit(rise=rise, set=set_, transit=transit, transit_elevation=elevation)
