"""Saturn ring-plane crossings and maximum ring opening."""

from __future__ import annotations

import logging
import math

from ..config.settings import SearchCfg
from ..constants import DEG_TO_RAD, RAD_TO_DEG
from ..core.errors import InvalidConfigurationError
from ..core.time import to_centuries
from ..providers import Body, EphemerisProvider
from .results import Found, NotFound
from .search import SearchMode, require_cycle_mode, step_refine_extremum, step_refine_sign_change

__all__ = ["ring_tilt", "saturn_ring_edge_on", "saturn_ring_maximum_aperture"]

LOG = logging.getLogger(__name__)

_COARSE_STEP_DAYS = 365.0


def ring_tilt(jd: float, provider: EphemerisProvider) -> float:
    """Saturnicentric latitude B of the Earth referred to the ring plane (radians).

    Meeus ch. 45, from the geocentric ecliptic position of Saturn of date.
    """

    t = to_centuries(jd)
    incl = (28.075216 - 0.012998 * t + 0.000004 * t * t) * DEG_TO_RAD
    node = (169.508470 + 1.394681 * t + 0.000412 * t * t) * DEG_TO_RAD
    saturn = provider.position(jd, Body.SATURN)
    lon, lat = saturn.ecliptic_lon, saturn.ecliptic_lat
    sin_b = math.sin(incl) * math.cos(lat) * math.sin(lon - node) - math.cos(incl) * math.sin(lat)
    return math.asin(max(-1.0, min(1.0, sin_b)))


def _initial_step(
    jd: float, mode: SearchMode, provider: EphemerisProvider | None, *, toward_smaller: bool
) -> float:
    if provider is None:
        raise InvalidConfigurationError("Saturn ring searches require an ephemeris provider")
    step = _COARSE_STEP_DAYS
    if mode is SearchMode.PREVIOUS:
        return -step
    if mode is SearchMode.CLOSEST:
        before = abs(ring_tilt(jd - step, provider))
        after = abs(ring_tilt(jd + step, provider))
        if (before < after) if toward_smaller else (before > after):
            return -step
    return step


def saturn_ring_edge_on(
    jd: float,
    mode: SearchMode = SearchMode.NEXT,
    provider: EphemerisProvider | None = None,
    *,
    settings: SearchCfg | None = None,
) -> Found | NotFound:
    """Instant the Earth crosses Saturn's ring plane (B = 0), to a minute."""

    mode = require_cycle_mode(mode)
    cfg = settings or SearchCfg()
    precision = cfg.refine_precision_minutes / 1440.0
    step = _initial_step(jd, mode, provider, toward_smaller=True)
    t = step_refine_sign_change(
        lambda x: ring_tilt(x, provider), jd, step, precision, max_steps=cfg.max_refine_steps
    )
    if t is None:
        return NotFound("no ring-plane crossing located")
    LOG.debug("saturn edge-on", extra={"jd": t, "mode": mode.value})
    return Found(t)


def saturn_ring_maximum_aperture(
    jd: float,
    mode: SearchMode = SearchMode.NEXT,
    provider: EphemerisProvider | None = None,
    *,
    settings: SearchCfg | None = None,
) -> Found | NotFound:
    """Instant of maximum |B|; details carry ``ring_tilt_deg`` (signed)."""

    mode = require_cycle_mode(mode)
    cfg = settings or SearchCfg()
    precision = cfg.refine_precision_minutes / 1440.0
    step = _initial_step(jd, mode, provider, toward_smaller=False)
    opening = lambda x: abs(ring_tilt(x, provider))  # noqa: E731

    start = jd
    if opening(jd + step) < opening(jd):
        # closing in the search direction: pass the next crossing first
        edge_mode = SearchMode.NEXT if step > 0 else SearchMode.PREVIOUS
        edge = saturn_ring_edge_on(jd, edge_mode, provider, settings=cfg)
        if not isinstance(edge, Found):
            return NotFound("no ring-plane crossing before the maximum")
        start = edge.jd + step
    t = step_refine_extremum(opening, start, step, precision, max_steps=cfg.max_refine_steps)
    if t is None:
        return NotFound("maximum ring aperture did not converge")
    tilt = ring_tilt(t, provider)
    LOG.debug("saturn maximum aperture", extra={"jd": t, "tilt_deg": tilt * RAD_TO_DEG})
    return Found(t, {"ring_tilt_deg": tilt * RAD_TO_DEG})
