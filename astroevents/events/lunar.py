"""Lunar phases and eclipses (Meeus, Astronomical Algorithms ch. 49 and 54).

Each lunation is numbered by ``k``: integer values are new moons counted
from 2000 January 6, ``k + 0.25`` first quarters, ``k + 0.5`` full moons
and ``k + 0.75`` last quarters.  The mean phase is corrected with the
periodic terms of the Sun and Moon anomalies and the 14 planetary
arguments; accuracy is better than a minute for the present era.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Final, Optional

from ..config.settings import SearchCfg
from ..constants import DEG_TO_RAD
from ..core.time import secular_acceleration_correction
from .results import Found, LunarEclipseDetails, NotFound, SolarEclipseDetails
from .search import CycleSeries, SearchMode, find_cycle_event, require_cycle_mode

__all__ = [
    "MoonPhase",
    "lunar_eclipse",
    "mean_phase_jde",
    "moon_phase",
    "phase_jde",
    "solar_eclipse",
]

LOG = logging.getLogger(__name__)

LUNATIONS_PER_YEAR: Final[float] = 12.3685


class MoonPhase(str, Enum):
    NEW = "new"
    FIRST_QUARTER = "first_quarter"
    FULL = "full"
    LAST_QUARTER = "last_quarter"

    @property
    def delta(self) -> float:
        return _PHASE_DELTA[self]


_PHASE_DELTA = {
    MoonPhase.NEW: 0.0,
    MoonPhase.FIRST_QUARTER: 0.25,
    MoonPhase.FULL: 0.5,
    MoonPhase.LAST_QUARTER: 0.75,
}

# (A-term constant, rate per lunation, sine amplitude in days)
_PLANETARY_ARGUMENTS: Final = (
    (299.77, 0.107408, 0.000325),
    (251.88, 0.016321, 0.000165),
    (251.83, 26.651886, 0.000164),
    (349.42, 36.412478, 0.000126),
    (84.66, 18.206239, 0.000110),
    (141.74, 53.303771, 0.000062),
    (207.14, 2.453732, 0.000060),
    (154.84, 7.306860, 0.000056),
    (34.52, 27.261239, 0.000047),
    (207.19, 0.121824, 0.000042),
    (291.34, 1.844379, 0.000040),
    (161.72, 24.198154, 0.000037),
    (239.56, 25.513099, 0.000035),
    (331.55, 3.592518, 0.000023),
)


@dataclass(frozen=True, slots=True)
class _Arguments:
    """Fundamental arguments for lunation ``k`` (radians)."""

    k: float
    t: float
    e: float
    m: float
    mp: float
    f: float
    omega: float

    @property
    def f1(self) -> float:
        return self.f - 0.02665 * math.sin(self.omega) * DEG_TO_RAD

    @property
    def a1(self) -> float:
        return (299.77 + 0.107408 * self.k - 0.009173 * self.t * self.t) * DEG_TO_RAD


def _arguments(k: float) -> _Arguments:
    t = k / 1236.85
    t2, t3, t4 = t * t, t**3, t**4
    m = 2.5534 + 29.10535669 * k - 0.0000218 * t2 - 0.00000011 * t3
    mp = 201.5643 + 385.81693528 * k + 0.0107438 * t2 + 0.00001239 * t3 - 0.000000058 * t4
    f = 160.7108 + 390.67050274 * k - 0.0016341 * t2 - 0.00000227 * t3 + 0.000000011 * t4
    omega = 124.7746 - 1.5637558 * k + 0.002069 * t2 + 0.00000215 * t3
    e = 1.0 - 0.002516 * t - 0.0000074 * t2
    return _Arguments(
        k=k,
        t=t,
        e=e,
        m=m * DEG_TO_RAD,
        mp=mp * DEG_TO_RAD,
        f=f * DEG_TO_RAD,
        omega=omega * DEG_TO_RAD,
    )


def mean_phase_jde(k: float) -> float:
    """Return the JDE of the mean phase ``k``."""

    t = k / 1236.85
    return (
        2451550.09765
        + 29.530588853 * k
        + 0.0001337 * t * t
        - 0.000000150 * t**3
        + 0.00000000073 * t**4
    )


def _planetary_terms(a: _Arguments) -> float:
    total = 0.000325 * math.sin(a.a1)
    for constant, rate, amplitude in _PLANETARY_ARGUMENTS[1:]:
        total += amplitude * math.sin((constant + rate * a.k) * DEG_TO_RAD)
    return total


def _new_moon_terms(a: _Arguments) -> float:
    e, m, mp, f, o = a.e, a.m, a.mp, a.f, a.omega
    s = math.sin
    return (
        -0.40720 * s(mp)
        + 0.17241 * e * s(m)
        + 0.01608 * s(2 * mp)
        + 0.01039 * s(2 * f)
        + 0.00739 * e * s(mp - m)
        - 0.00514 * e * s(mp + m)
        + 0.00208 * e * e * s(2 * m)
        - 0.00111 * s(mp - 2 * f)
        - 0.00057 * s(mp + 2 * f)
        + 0.00056 * e * s(2 * mp + m)
        - 0.00042 * s(3 * mp)
        + 0.00042 * e * s(m + 2 * f)
        + 0.00038 * e * s(m - 2 * f)
        - 0.00024 * e * s(2 * mp - m)
        - 0.00007 * s(mp + 2 * m)
        - 0.00017 * s(o)
        + 0.00004 * (s(2 * mp - 2 * f) + s(3 * m))
        + 0.00003 * (s(mp + m - 2 * f) + s(2 * mp + 2 * f) - s(mp + m + 2 * f) + s(mp - m + 2 * f))
        + 0.00002 * (-s(mp - m - 2 * f) - s(3 * mp + m) + s(4 * mp))
    )


def _full_moon_terms(a: _Arguments) -> float:
    e, m, mp, f, o = a.e, a.m, a.mp, a.f, a.omega
    s = math.sin
    return (
        -0.40614 * s(mp)
        + 0.17302 * e * s(m)
        + 0.01614 * s(2 * mp)
        + 0.01043 * s(2 * f)
        + 0.00734 * e * s(mp - m)
        - 0.00515 * e * s(mp + m)
        + 0.00209 * e * e * s(2 * m)
        - 0.00111 * s(mp - 2 * f)
        - 0.00057 * s(mp + 2 * f)
        + 0.00056 * e * s(2 * mp + m)
        - 0.00042 * s(3 * mp)
        + 0.00042 * e * s(m + 2 * f)
        + 0.00038 * e * s(m - 2 * f)
        - 0.00024 * e * s(2 * mp - m)
        - 0.00007 * e * s(mp + 2 * m)
        - 0.00017 * s(o)
    )


def _quarter_terms(a: _Arguments) -> float:
    e, m, mp, f, o = a.e, a.m, a.mp, a.f, a.omega
    s = math.sin
    return (
        -0.62801 * s(mp)
        + 0.17172 * e * s(m)
        + 0.00862 * s(2 * mp)
        + 0.00804 * s(2 * f)
        + 0.00454 * e * s(mp - m)
        - 0.01183 * e * s(mp + m)
        + 0.00204 * e * e * s(2 * m)
        - 0.00180 * s(mp - 2 * f)
        - 0.00070 * s(mp + 2 * f)
        - 0.00040 * s(3 * mp)
        - 0.00034 * e * s(2 * mp - m)
        + 0.00032 * e * s(m + 2 * f)
        + 0.00032 * e * s(m - 2 * f)
        - 0.00028 * e * e * s(mp + 2 * m)
        + 0.00027 * e * s(2 * mp + m)
        - 0.00017 * s(o)
        - 0.00005 * s(mp - m - 2 * f)
        + 0.00004 * s(2 * mp + 2 * f)
        - 0.00004 * s(mp + m + 2 * f)
        + 0.00004 * s(mp - 2 * m)
        + 0.00003 * s(mp + m - 2 * f)
        + 0.00003 * s(3 * m)
        + 0.00002 * s(2 * mp - 2 * f)
        + 0.00002 * s(mp - m + 2 * f)
        - 0.00002 * s(3 * mp + m)
    )


def _quarter_w(a: _Arguments) -> float:
    e, m, mp, f = a.e, a.m, a.mp, a.f
    return (
        0.00306
        - 0.00038 * e * math.cos(m)
        + 0.00026 * math.cos(mp)
        - 0.00002 * math.cos(mp - m)
        + 0.00002 * math.cos(mp + m)
        + 0.00002 * math.cos(2 * f)
    )


def phase_jde(k: float, phase: MoonPhase) -> float:
    """Return the corrected JDE of lunation ``k`` for ``phase``.

    ``k`` must already carry the fractional part of the phase.
    """

    a = _arguments(k)
    if phase is MoonPhase.NEW:
        correction = _new_moon_terms(a)
    elif phase is MoonPhase.FULL:
        correction = _full_moon_terms(a)
    elif phase is MoonPhase.FIRST_QUARTER:
        correction = _quarter_terms(a) + _quarter_w(a)
    else:
        correction = _quarter_terms(a) - _quarter_w(a)
    return mean_phase_jde(k) + correction + _planetary_terms(a)


def _phase_series(phase: MoonPhase) -> CycleSeries:
    return CycleSeries(
        rate=LUNATIONS_PER_YEAR, epoch=2000.0, estimate=mean_phase_jde, delta=phase.delta
    )


def moon_phase(
    jd: float, phase: MoonPhase | str = MoonPhase.FULL, mode: SearchMode = SearchMode.NEXT
) -> Found | NotFound:
    """Find the lunar ``phase`` selected by ``mode`` relative to ``jd`` (TT).

    Returns :class:`Found` with the lunation index ``k`` as details.  The
    instant carries the same secular-acceleration correction as the eclipse
    times.
    """

    phase = MoonPhase(phase)
    located = find_cycle_event(
        _phase_series(phase),
        jd,
        SearchMode(mode),
        lambda k: secular_acceleration_correction(phase_jde(k, phase)),
    )
    if located is None:
        return NotFound(f"no {phase.value} moon located")
    k, jde = located
    LOG.debug("moon phase", extra={"phase": phase.value, "k": k, "jde": jde})
    return Found(jde, {"k": k})


# -------------------- Eclipses --------------------


def _eclipse_terms(a: _Arguments, *, solar: bool) -> float:
    e, m, mp, f1, o = a.e, a.m, a.mp, a.f1, a.omega
    s = math.sin
    first, second = (-0.4075, 0.1721) if solar else (-0.4065, 0.1727)
    return (
        first * s(mp)
        + second * e * s(m)
        + 0.0161 * s(2 * mp)
        - 0.0097 * s(2 * f1)
        + 0.0073 * e * s(mp - m)
        - 0.0050 * e * s(mp + m)
        + 0.0021 * e * s(2 * m)
        - 0.0023 * s(mp - 2 * f1)
        + 0.0012 * s(mp + 2 * f1)
        + 0.0006 * e * s(2 * mp + m)
        - 0.0004 * s(3 * mp)
        - 0.0003 * e * s(m + 2 * f1)
        + 0.0003 * s(a.a1)
        - 0.0002 * e * s(m - 2 * f1)
        - 0.0002 * e * s(2 * mp - m)
        - 0.0002 * s(o)
    )


def _gamma_u(a: _Arguments) -> tuple[float, float]:
    e, m, mp, f1 = a.e, a.m, a.mp, a.f1
    p = (
        -0.0392 * math.sin(mp)
        + 0.2070 * e * math.sin(m)
        + 0.0024 * e * math.sin(2 * m)
        + 0.0116 * math.sin(2 * mp)
        - 0.0073 * e * math.sin(mp + m)
        + 0.0067 * e * math.sin(mp - m)
        + 0.0118 * math.sin(2 * f1)
    )
    q = (
        5.2207
        - 0.3299 * math.cos(mp)
        - 0.0048 * e * math.cos(m)
        + 0.0020 * e * math.cos(2 * m)
        - 0.0060 * e * math.cos(mp + m)
        + 0.0041 * e * math.cos(mp - m)
    )
    gamma = (p * math.cos(f1) + q * math.sin(f1)) * (1.0 - 0.0048 * abs(math.cos(f1)))
    u = (
        0.0059
        + 0.0046 * e * math.cos(m)
        - 0.0182 * math.cos(mp)
        + 0.0004 * math.cos(2 * mp)
        - 0.0005 * math.cos(m + mp)
    )
    return gamma, u


def _semi_duration(x: float, gamma: float, n: float) -> float:
    if x <= abs(gamma):
        return 0.0
    return 60.0 * math.sqrt(x * x - gamma * gamma) / n


def _lunar_details(a: _Arguments) -> Optional[LunarEclipseDetails]:
    gamma, u = _gamma_u(a)
    g = abs(gamma)
    mag_penumbral = (1.5573 + u - g) / 0.545
    mag_umbral = (1.0128 - u - g) / 0.545
    if mag_penumbral <= 0.0 and mag_umbral <= 0.0:
        return None
    if mag_umbral < 0.0:
        kind = "penumbral"
    elif mag_umbral < 1.0:
        kind = "partial"
    else:
        kind = "total"
    n = 0.5458 + 0.04 * math.cos(a.mp)
    umbral = kind != "penumbral"
    return LunarEclipseDetails(
        kind=kind,
        magnitude_umbral=mag_umbral,
        magnitude_penumbral=mag_penumbral,
        semi_duration_partial_min=_semi_duration(1.0128 - u, gamma, n) if umbral else 0.0,
        semi_duration_total_min=_semi_duration(0.4678 - u, gamma, n) if umbral else 0.0,
        semi_duration_penumbral_min=_semi_duration(1.5573 + u, gamma, n),
        gamma=gamma,
    )


def _solar_details(a: _Arguments) -> Optional[SolarEclipseDetails]:
    gamma, u = _gamma_u(a)
    g = abs(gamma)
    if g >= 1.5433 + u:
        return None
    if g < 0.9972 + abs(u):
        if u < 0.0:
            kind = "total"
        elif u > 0.0047:
            kind = "annular"
        elif u < 0.00464 * math.sqrt(1.0 - gamma * gamma):
            kind = "hybrid"
        else:
            kind = "annular"
        return SolarEclipseDetails(kind=kind, magnitude=None, central=g < 0.9972, gamma=gamma, u=u)
    magnitude = (1.5433 + u - g) / (0.5461 + 2.0 * u)
    return SolarEclipseDetails(kind="partial", magnitude=magnitude, central=False, gamma=gamma, u=u)


def _eclipse_search(jd: float, mode: SearchMode, *, solar: bool, max_cycles: int) -> Found | NotFound:
    delta = 0.0 if solar else 0.5
    series = CycleSeries(rate=LUNATIONS_PER_YEAR, epoch=2000.0, estimate=mean_phase_jde, delta=delta)
    step = -1.0 if mode is SearchMode.PREVIOUS else 1.0
    # one lunation behind the seed: corrections can move an event across jd
    k = series.seed(jd, mode) - step
    for _ in range(max_cycles + 1):
        a = _arguments(k)
        details = _solar_details(a) if solar else _lunar_details(a)
        if details is not None:
            jde = mean_phase_jde(k) + _eclipse_terms(a, solar=solar)
            jde = secular_acceleration_correction(jde)
            if (mode is SearchMode.NEXT and jde > jd) or (mode is SearchMode.PREVIOUS and jde < jd):
                LOG.debug("eclipse found", extra={"k": k, "jde": jde, "kind": details.kind})
                return Found(jde, details)
        k += step
    label = "solar" if solar else "lunar"
    LOG.debug("%s eclipse search exhausted", label, extra={"jd": jd, "max_cycles": max_cycles})
    return NotFound(f"no {label} eclipse within {max_cycles} lunations")


def _eclipse(jd: float, mode: SearchMode, *, solar: bool, max_cycles: int) -> Found | NotFound:
    mode = require_cycle_mode(mode)
    if mode is not SearchMode.CLOSEST:
        return _eclipse_search(jd, mode, solar=solar, max_cycles=max_cycles)
    after = _eclipse_search(jd, SearchMode.NEXT, solar=solar, max_cycles=max_cycles)
    before = _eclipse_search(jd, SearchMode.PREVIOUS, solar=solar, max_cycles=max_cycles)
    hits = [r for r in (after, before) if isinstance(r, Found)]
    if not hits:
        return after
    return min(hits, key=lambda r: abs(r.jd - jd))


def lunar_eclipse(
    jd: float,
    mode: SearchMode = SearchMode.NEXT,
    *,
    max_cycles: Optional[int] = None,
    settings: SearchCfg | None = None,
) -> Found | NotFound:
    """Find a lunar eclipse relative to ``jd`` (TT).

    Details are a :class:`LunarEclipseDetails` with the kind (penumbral,
    partial or total), umbral and penumbral magnitudes and semi-durations
    in minutes.
    """

    cycles = max_cycles or (settings or SearchCfg()).eclipse_max_cycles
    return _eclipse(jd, mode, solar=False, max_cycles=cycles)


def solar_eclipse(
    jd: float,
    mode: SearchMode = SearchMode.NEXT,
    *,
    max_cycles: Optional[int] = None,
    settings: SearchCfg | None = None,
) -> Found | NotFound:
    """Find a solar eclipse relative to ``jd`` (TT).

    Details are a :class:`SolarEclipseDetails`.  ``magnitude`` is only
    defined for partial eclipses and is ``None`` otherwise.
    """

    cycles = max_cycles or (settings or SearchCfg()).eclipse_max_cycles
    return _eclipse(jd, mode, solar=True, max_cycles=cycles)
