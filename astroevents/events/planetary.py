"""Planetary apsides, conjunctions, oppositions and elongations.

The closed-form series of Meeus (Astronomical Algorithms ch. 36 and 38) give
event times good to a few hours.  :func:`planetary_event` uses them as seeds
and climbs the provider's distance or elongation curve to the true extremum,
within a minute.  :func:`transit_over_sun` walks inferior conjunctions of
Mercury or Venus looking for one where the planet crosses the solar disk.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Final, Optional

from ..config.settings import SearchCfg
from ..constants import DEG_TO_RAD, RAD_TO_DEG
from ..core.errors import InvalidBodyError, InvalidConfigurationError
from ..core.time import to_centuries
from ..core.vectors import angular_separation
from ..providers import Body, EphemerisProvider
from .lunar import MoonPhase, moon_phase
from .results import Found, NotFound
from .search import (
    CycleSeries,
    SearchMode,
    find_cycle_event,
    require_cycle_mode,
    select_by_mode,
    step_refine_extremum,
)

__all__ = [
    "PlanetaryEvent",
    "conjunction",
    "greatest_elongation",
    "opposition",
    "perihelion_aphelion",
    "planetary_event",
    "transit_over_sun",
]

LOG = logging.getLogger(__name__)


class PlanetaryEvent(str, Enum):
    PERIHELION = "perihelion"
    APHELION = "aphelion"
    MAXIMUM_DISTANCE = "maximum_distance"
    MINIMUM_DISTANCE = "minimum_distance"
    MAXIMUM_ELONGATION = "maximum_elongation"
    MINIMUM_ELONGATION = "minimum_elongation"


Coefficients = tuple[float, float, float]

# -------------------- Perihelion and aphelion (Meeus ch. 38) --------------------

# (orbits per year, epoch year, JDE polynomial in k)
_APSIS_SERIES: Final[dict[Body, tuple[float, float, Coefficients]]] = {
    Body.MERCURY: (4.15201, 2000.12, (2451590.257, 87.96934963, 0.0)),
    Body.VENUS: (1.62549, 2000.53, (2451738.233, 224.7008188, -0.0000000327)),
    Body.EARTH: (0.99997, 2000.01, (2451547.507, 365.2596358, 0.0000000156)),
    Body.EARTH_MOON_BARYCENTER: (0.99997, 2000.01, (2451547.507, 365.2596358, 0.0000000156)),
    Body.MARS: (0.53166, 2001.78, (2452195.026, 686.9957857, -0.0000001187)),
    Body.JUPITER: (0.08430, 2011.20, (2455636.936, 4332.897065, 0.0001367)),
    Body.SATURN: (0.03393, 2003.52, (2452830.12, 10764.21676, 0.000827)),
    Body.URANUS: (0.01190, 2051.1, (2470213.5, 30694.8767, -0.00541)),
    Body.NEPTUNE: (0.00607, 2047.5, (2468895.1, 60190.33, 0.03429)),
}

# Moon perturbation arguments for the Earth (degrees, degrees per orbit).
_EARTH_APSIS_ARGUMENTS: Final = (
    (328.41, 132.788585),
    (316.13, 584.903153),
    (346.20, 450.380738),
    (136.95, 659.306737),
    (249.52, 329.653368),
)
_EARTH_PERIHELION_AMPLITUDES: Final = (1.278, -0.055, -0.091, -0.056, -0.045)
_EARTH_APHELION_AMPLITUDES: Final = (-1.352, 0.061, 0.062, 0.029, 0.031)


def _poly(c: Coefficients, x: float) -> float:
    return c[0] + x * (c[1] + x * c[2])


def _earth_apsis_correction(k: float, aphelion: bool) -> float:
    amplitudes = _EARTH_APHELION_AMPLITUDES if aphelion else _EARTH_PERIHELION_AMPLITUDES
    return sum(
        amp * math.sin((a0 + a1 * k) * DEG_TO_RAD)
        for amp, (a0, a1) in zip(amplitudes, _EARTH_APSIS_ARGUMENTS)
    )


def perihelion_aphelion(
    jd: float,
    body: Body | str,
    event: PlanetaryEvent | str = PlanetaryEvent.PERIHELION,
    mode: SearchMode = SearchMode.NEXT,
) -> Found | NotFound:
    """Find the perihelion or aphelion of ``body`` relative to ``jd`` (TT).

    Valid for Mercury through Neptune.  The Earth gets the lunar perturbation
    terms; the Earth-Moon barycenter uses the bare series.  Details hold the
    orbit index ``k``.
    """

    body = Body(body)
    event = PlanetaryEvent(event)
    if event not in (PlanetaryEvent.PERIHELION, PlanetaryEvent.APHELION):
        raise InvalidConfigurationError(f"{event.value} is not an apsis")
    try:
        rate, epoch, coeffs = _APSIS_SERIES[body]
    except KeyError:
        raise InvalidBodyError(f"no apsis series for {body.value}") from None
    aphelion = event is PlanetaryEvent.APHELION
    series = CycleSeries(
        rate=rate,
        epoch=epoch,
        estimate=lambda k: _poly(coeffs, k),
        delta=0.5 if aphelion else 0.0,
    )
    if body is Body.EARTH:
        corrected = lambda k: _poly(coeffs, k) + _earth_apsis_correction(k, aphelion)  # noqa: E731
    else:
        corrected = series.estimate
    located = find_cycle_event(series, jd, SearchMode(mode), corrected)
    if located is None:
        return NotFound(f"no {event.value} of {body.value} located")
    k, jde = located
    LOG.debug("apsis", extra={"body": body.value, "event": event.value, "k": k})
    return Found(jde, {"k": k})


# -------------------- Conjunctions and oppositions (Meeus ch. 36) --------------------


@dataclass(frozen=True, slots=True)
class _SynodicSeries:
    """Mean synodic event ``A + kB`` and its periodic correction.

    ``harmonics`` lists the constant, then sine and cosine coefficients of
    M, 2M, 3M... in that order; every coefficient is a polynomial in T.
    ``extra`` adds terms in the long-period arguments a..g.
    """

    a: float
    b: float
    m0: float
    m1: float
    harmonics: tuple[Coefficients, ...]
    extra: tuple[tuple[str, str, Coefficients], ...] = ()

    def mean(self, k: float) -> float:
        return self.a + k * self.b

    def cycle(self) -> CycleSeries:
        # kapprox = (365.2425 y + 1721060 - A) / B expressed as a yearly rate
        return CycleSeries(
            rate=365.2425 / self.b,
            epoch=(self.a - 1721060.0) / 365.2425,
            estimate=self.mean,
        )


def _long_period_arguments(t: float) -> dict[str, float]:
    return {
        "a": (82.74 + 40.76 * t) * DEG_TO_RAD,
        "b": (29.86 + 1181.36 * t) * DEG_TO_RAD,
        "c": (14.13 + 590.68 * t) * DEG_TO_RAD,
        "d": (220.02 + 1262.87 * t) * DEG_TO_RAD,
        "e": (207.83 + 8.51 * t) * DEG_TO_RAD,
        "f": (108.84 + 419.96 * t) * DEG_TO_RAD,
        "g": (276.74 + 209.98 * t) * DEG_TO_RAD,
    }


def _periodic_sum(
    harmonics: tuple[Coefficients, ...],
    extra: tuple[tuple[str, str, Coefficients], ...],
    m: float,
    t: float,
) -> float:
    total = _poly(harmonics[0], t)
    for i, coeffs in enumerate(harmonics[1:]):
        n = i // 2 + 1
        trig = math.sin if i % 2 == 0 else math.cos
        total += _poly(coeffs, t) * trig(n * m)
    if extra:
        args = _long_period_arguments(t)
        for func, name, coeffs in extra:
            trig = math.sin if func == "sin" else math.cos
            total += _poly(coeffs, t) * trig(args[name])
    return total


def _mean_anomaly_and_t(series: _SynodicSeries, k: float) -> tuple[float, float]:
    return (series.m0 + k * series.m1) * DEG_TO_RAD, to_centuries(series.mean(k))


def _corrected(series: _SynodicSeries) -> Callable[[float], float]:
    def jde(k: float) -> float:
        m, t = _mean_anomaly_and_t(series, k)
        return series.mean(k) + _periodic_sum(series.harmonics, series.extra, m, t)

    return jde


_JUPITER_EXTRA: Final = (
    ("sin", "a", (0.0, 0.0144, -0.00008)),
    ("cos", "a", (0.3642, -0.0019, -0.00029)),
)
_SATURN_EXTRA: Final = (
    ("sin", "a", (0.0, -0.0337, 0.00018)),
    ("cos", "a", (-0.8510, 0.0044, 0.00068)),
    ("sin", "b", (0.0, -0.0064, 0.00004)),
    ("cos", "b", (0.2397, -0.0012, -0.00008)),
    ("sin", "c", (0.0, -0.0010, 0.0)),
    ("cos", "c", (0.1245, 0.0006, 0.0)),
    ("sin", "d", (0.0, 0.0024, -0.00003)),
    ("cos", "d", (0.0477, -0.0005, -0.00006)),
)
_URANUS_EXTRA: Final = (
    ("cos", "e", (0.8850, 0.0, 0.0)),
    ("cos", "f", (0.2153, 0.0, 0.0)),
)
_NEPTUNE_EXTRA: Final = (
    ("cos", "e", (-0.5964, 0.0, 0.0)),
    ("cos", "g", (0.0728, 0.0, 0.0)),
)

_INFERIOR_CONJUNCTIONS: Final[dict[Body, _SynodicSeries]] = {
    Body.MERCURY: _SynodicSeries(
        2451612.023, 115.8774771, 63.5867, 114.2088742,
        (
            (0.0545, 0.0002, 0.0),
            (-6.2008, 0.0074, 0.00003), (-3.2750, -0.0197, 0.00001),
            (0.4737, -0.0052, -0.00001), (0.8111, 0.0033, -0.00002),
            (0.0037, 0.0018, 0.0), (-0.1768, 0.0, 0.00001),
            (-0.0211, -0.0004, 0.0), (0.0326, -0.0003, 0.0),
            (0.0083, 0.0001, 0.0), (-0.0040, 0.0001, 0.0),
        ),
    ),
    Body.VENUS: _SynodicSeries(
        2451996.706, 583.921361, 82.7311, 215.513058,
        (
            (-0.0096, 0.0002, -0.00001),
            (2.0009, -0.0033, -0.00001), (0.5980, -0.0104, 0.00001),
            (0.0967, -0.0018, -0.00003), (0.0913, 0.0009, -0.00002),
            (0.0046, -0.0002, 0.0), (0.0079, 0.0001, 0.0),
        ),
    ),
}

_SUPERIOR_CONJUNCTIONS: Final[dict[Body, _SynodicSeries]] = {
    Body.MERCURY: _SynodicSeries(
        2451554.084, 115.8774771, 6.4822, 114.2088742,
        (
            (-0.0545, -0.0002, 0.0),
            (7.3894, -0.0100, -0.00003), (3.2200, 0.0197, -0.00001),
            (0.8383, -0.0064, -0.00001), (0.9666, 0.0039, -0.00003),
            (0.0770, -0.0026, 0.0), (0.2758, 0.0002, -0.00002),
            (-0.0128, -0.0008, 0.0), (0.0734, -0.0004, -0.00001),
            (-0.0122, -0.0002, 0.0), (0.0173, -0.0002, 0.0),
        ),
    ),
    Body.VENUS: _SynodicSeries(
        2451704.746, 583.921361, 154.9745, 215.513058,
        (
            (0.0099, -0.0002, -0.00001),
            (4.1991, -0.0121, -0.00003), (-0.6095, 0.0102, -0.00002),
            (0.2500, -0.0028, -0.00003), (0.0063, 0.0025, -0.00002),
            (0.0232, -0.0005, -0.00001), (0.0031, 0.0004, 0.0),
        ),
    ),
}

# Conjunctions of the outer planets with the Sun.
_OUTER_CONJUNCTIONS: Final[dict[Body, _SynodicSeries]] = {
    Body.MARS: _SynodicSeries(
        2451707.414, 779.936104, 157.6047, 48.705244,
        (
            (0.3102, -0.0001, 0.00001),
            (9.7273, -0.0156, 0.00001), (-18.3195, -0.0467, 0.00009),
            (-1.6488, -0.0133, 0.00001), (-2.6117, -0.0020, 0.00004),
            (-0.6827, -0.0026, 0.00001), (0.0281, 0.0035, 0.00001),
            (-0.0823, 0.0006, 0.00001), (0.1584, 0.0013, 0.0),
            (0.0270, 0.0005, 0.0), (0.0433, 0.0, 0.0),
        ),
    ),
    Body.JUPITER: _SynodicSeries(
        2451671.186, 398.884046, 121.8980, 33.140229,
        (
            (0.1027, 0.0002, -0.00009),
            (-2.2637, 0.0163, -0.00003), (-6.1540, -0.0210, 0.00008),
            (-0.2021, -0.0017, 0.00001), (0.1310, -0.0008, 0.0),
            (0.0086, 0.0, 0.0), (0.0087, 0.0002, 0.0),
        ),
        _JUPITER_EXTRA,
    ),
    Body.SATURN: _SynodicSeries(
        2451681.124, 378.091904, 131.6934, 12.647487,
        (
            (0.0172, -0.0006, 0.00023),
            (-8.5885, 0.0411, 0.00020), (-1.1470, 0.0352, -0.00011),
            (0.3331, -0.0034, -0.00001), (0.1145, -0.0045, 0.00002),
            (-0.0169, 0.0002, 0.0), (-0.0109, 0.0004, 0.0),
        ),
        _SATURN_EXTRA,
    ),
    Body.URANUS: _SynodicSeries(
        2451579.489, 369.656035, 31.5219, 4.333093,
        (
            (-0.0859, 0.0003, 0.0),
            (-3.8179, -0.0148, 0.00003), (5.1228, -0.0105, -0.00002),
            (-0.0803, 0.0011, 0.0), (-0.1905, -0.0006, 0.0),
            (0.0088, 0.0001, 0.0), (0.0, 0.0, 0.0),
        ),
        _URANUS_EXTRA,
    ),
    Body.NEPTUNE: _SynodicSeries(
        2451569.379, 367.486703, 21.5569, 2.194998,
        (
            (0.0168, 0.0, 0.0),
            (-2.5606, 0.0088, 0.00002), (-0.8611, -0.0037, 0.00002),
            (0.0118, -0.0004, 0.00001), (0.0307, -0.0003, 0.0),
        ),
        _NEPTUNE_EXTRA,
    ),
}

_OPPOSITIONS: Final[dict[Body, _SynodicSeries]] = {
    Body.MARS: _SynodicSeries(
        2452097.382, 779.936104, 181.9573, 48.705244,
        (
            (-0.3088, 0.0, 0.00002),
            (-17.6965, 0.0363, 0.00005), (18.3131, 0.0467, -0.00006),
            (-0.2162, -0.0198, 0.00001), (-4.5028, -0.0019, 0.00007),
            (0.8987, 0.0058, -0.00002), (0.7666, -0.0050, -0.00003),
            (-0.3636, -0.0001, 0.00002), (0.0402, 0.0032, 0.0),
            (0.0737, -0.0008, 0.0), (-0.0980, -0.0011, 0.0),
        ),
    ),
    Body.JUPITER: _SynodicSeries(
        2451870.628, 398.884046, 318.4681, 33.140229,
        (
            (-0.1029, 0.0, -0.00009),
            (-1.9658, -0.0056, 0.00007), (6.1537, 0.0210, -0.00006),
            (-0.2081, -0.0013, 0.0), (-0.1116, -0.0010, 0.0),
            (0.0074, 0.0001, 0.0), (-0.0097, -0.0001, 0.0),
        ),
        _JUPITER_EXTRA,
    ),
    Body.SATURN: _SynodicSeries(
        2451870.170, 378.091904, 318.0172, 12.647487,
        (
            (-0.0209, 0.0006, 0.00023),
            (4.5795, -0.0312, -0.00017), (1.1462, -0.0351, 0.00011),
            (0.0985, -0.0015, 0.0), (0.0733, -0.0031, 0.00001),
            (0.0025, -0.0001, 0.0), (0.0050, -0.0002, 0.0),
        ),
        _SATURN_EXTRA,
    ),
    Body.URANUS: _SynodicSeries(
        2451764.317, 369.656035, 213.6884, 4.333093,
        (
            (0.0844, -0.0006, 0.0),
            (-0.1048, 0.0246, 0.0), (-5.1221, 0.0104, 0.00003),
            (-0.1428, 0.0005, 0.0), (-0.0148, -0.0013, 0.0),
            (0.0, 0.0, 0.0), (0.0055, 0.0, 0.0),
        ),
        _URANUS_EXTRA,
    ),
    Body.NEPTUNE: _SynodicSeries(
        2451753.122, 367.486703, 202.6544, 2.194998,
        (
            (-0.0140, 0.0, 0.00001),
            (-1.3486, 0.0010, 0.00001), (0.8597, 0.0037, 0.0),
            (-0.0082, -0.0002, 0.00001), (0.0037, -0.0003, 0.0),
        ),
        _NEPTUNE_EXTRA,
    ),
}

# Greatest elongations: (time offset from the mean inferior conjunction, elongation in degrees)
_ELONGATIONS: Final[dict[Body, dict[str, tuple[tuple[Coefficients, ...], tuple[Coefficients, ...]]]]] = {
    Body.MERCURY: {
        "east": (
            (
                (-21.6101, 0.0002, 0.0),
                (-1.9803, -0.0060, 0.00001), (1.4151, -0.0072, -0.00001),
                (0.5528, -0.0005, -0.00001), (0.2905, 0.0034, 0.00001),
                (-0.1121, -0.0001, 0.00001), (-0.0098, -0.0015, 0.0),
                (0.0192, 0.0, 0.0), (0.0111, 0.0004, 0.0),
                (-0.0061, 0.0, 0.0), (-0.0032, -0.0001, 0.0),
            ),
            (
                (22.4697, 0.0, 0.0),
                (-4.2666, 0.0054, 0.00002), (-1.8537, -0.0137, 0.0),
                (0.3598, 0.0008, -0.00001), (-0.0680, 0.0026, 0.0),
                (-0.0524, -0.0003, 0.0), (0.0052, -0.0006, 0.0),
                (0.0107, 0.0, 0.0001), (-0.0013, 0.0001, 0.0),
                (-0.0021, 0.0, 0.0), (-0.0003, 0.0, 0.0),
            ),
        ),
        "west": (
            (
                (21.6249, -0.0002, 0.0),
                (0.1306, 0.0065, 0.0), (-2.7661, -0.0011, 0.00001),
                (0.2438, -0.0024, -0.00001), (0.5767, 0.0023, 0.0),
                (0.1041, 0.0, 0.0), (-0.0184, 0.0007, 0.0),
                (-0.0051, -0.0001, 0.0), (0.0048, 0.0001, 0.0),
                (0.0026, 0.0, 0.0), (0.0037, 0.0, 0.0),
            ),
            (
                (22.4143, -0.0001, 0.0),
                (4.3651, -0.0048, -0.00002), (2.3787, 0.0121, -0.00001),
                (0.2674, 0.0022, 0.0), (-0.3873, 0.0008, 0.00001),
                (-0.0369, -0.0001, 0.0), (0.0017, -0.0001, 0.0),
                (0.0059, 0.0, 0.0), (0.0061, 0.0, 0.0001),
                (0.0007, 0.0, 0.0), (-0.0011, 0.0, 0.0),
            ),
        ),
    },
    Body.VENUS: {
        "east": (
            (
                (-70.7600, 0.0002, -0.00001),
                (1.0282, -0.0010, -0.00001), (0.2761, -0.0060, 0.0),
                (-0.0438, -0.0023, 0.00002), (0.1660, -0.0037, -0.00004),
                (0.0036, 0.0001, 0.0), (-0.0011, 0.0, 0.00001),
            ),
            (
                (46.3173, 0.0001, 0.0),
                (0.6916, -0.0024, 0.0), (0.6676, -0.0045, 0.0),
                (0.0309, -0.0002, 0.0), (0.0036, -0.0001, 0.0),
            ),
        ),
        "west": (
            (
                (70.7462, 0.0, -0.00001),
                (1.1218, -0.0025, -0.00001), (0.4538, -0.0056, 0.0),
                (0.1320, 0.0020, -0.00003), (-0.0702, 0.0022, 0.00004),
                (0.0062, -0.0001, 0.0), (0.0015, 0.0, -0.00001),
            ),
            (
                (46.3245, 0.0, 0.0),
                (-0.5366, -0.0003, 0.00001), (0.3097, 0.0016, -0.00001),
                (-0.0163, 0.0, 0.0), (-0.0075, 0.0001, 0.0),
            ),
        ),
    },
}

_INFERIOR_PLANETS: Final = (Body.MERCURY, Body.VENUS)


def _locate(series: _SynodicSeries, jd: float, mode: SearchMode, corrected=None):
    return find_cycle_event(series.cycle(), jd, mode, corrected or _corrected(series))


def conjunction(
    jd: float,
    body: Body | str,
    mode: SearchMode = SearchMode.NEXT,
    *,
    kind: Optional[str] = None,
) -> Found | NotFound:
    """Conjunction of ``body`` with the Sun relative to ``jd`` (TT).

    For Mercury and Venus ``kind`` selects ``"inferior"`` or ``"superior"``
    conjunctions; ``None`` takes whichever of the two ``mode`` selects.
    Outer planets only have superior conjunctions.  Details carry ``k`` and
    ``kind``.
    """

    body = Body(body)
    mode = require_cycle_mode(mode)
    if kind is not None and kind not in ("inferior", "superior"):
        raise InvalidConfigurationError(f"unknown conjunction kind {kind!r}")
    if body in _INFERIOR_PLANETS:
        tables = {
            "inferior": _INFERIOR_CONJUNCTIONS[body],
            "superior": _SUPERIOR_CONJUNCTIONS[body],
        }
    elif body in _OUTER_CONJUNCTIONS:
        if kind == "inferior":
            raise InvalidBodyError(f"{body.value} has no inferior conjunctions")
        tables = {"superior": _OUTER_CONJUNCTIONS[body]}
    else:
        raise InvalidBodyError(f"no conjunction series for {body.value}")
    if kind is not None:
        tables = {kind: tables[kind]}

    candidates = []
    for name, series in tables.items():
        located = _locate(series, jd, mode)
        if located is not None:
            k, jde = located
            candidates.append((jde, (name, k)))
    best = select_by_mode(jd, candidates, mode)
    if best is None:
        return NotFound(f"no conjunction of {body.value} located")
    jde, (name, k) = best
    LOG.debug("conjunction", extra={"body": body.value, "kind": name, "k": k})
    return Found(jde, {"k": k, "kind": name})


def opposition(
    jd: float, body: Body | str, mode: SearchMode = SearchMode.NEXT
) -> Found | NotFound:
    """Opposition of an outer planet (Mars through Neptune)."""

    body = Body(body)
    mode = require_cycle_mode(mode)
    series = _OPPOSITIONS.get(body)
    if series is None:
        raise InvalidBodyError(f"{body.value} has no oppositions")
    located = _locate(series, jd, mode)
    if located is None:
        return NotFound(f"no opposition of {body.value} located")
    k, jde = located
    LOG.debug("opposition", extra={"body": body.value, "k": k})
    return Found(jde, {"k": k})


def greatest_elongation(
    jd: float,
    body: Body | str,
    mode: SearchMode = SearchMode.NEXT,
    *,
    side: Optional[str] = None,
) -> Found | NotFound:
    """Greatest eastern or western elongation of Mercury or Venus.

    ``side`` is ``"east"``, ``"west"`` or ``None`` for whichever ``mode``
    selects.  Details carry ``k``, ``side`` and ``elongation_deg``.
    """

    body = Body(body)
    mode = require_cycle_mode(mode)
    if body not in _ELONGATIONS:
        raise InvalidBodyError(f"{body.value} has no greatest elongations")
    if side is not None and side not in ("east", "west"):
        raise InvalidConfigurationError(f"unknown elongation side {side!r}")
    sides = (side,) if side else ("east", "west")
    series = _INFERIOR_CONJUNCTIONS[body]

    candidates = []
    for name in sides:
        offset, _ = _ELONGATIONS[body][name]

        def corrected(k: float, offset=offset) -> float:
            m, t = _mean_anomaly_and_t(series, k)
            return series.mean(k) + _periodic_sum(offset, (), m, t)

        located = _locate(series, jd, mode, corrected)
        if located is not None:
            k, jde = located
            candidates.append((jde, (name, k)))
    best = select_by_mode(jd, candidates, mode)
    if best is None:
        return NotFound(f"no greatest elongation of {body.value} located")
    jde, (name, k) = best
    m, t = _mean_anomaly_and_t(series, k)
    elongation = _periodic_sum(_ELONGATIONS[body][name][1], (), m, t)
    return Found(jde, {"k": k, "side": name, "elongation_deg": elongation})


# -------------------- Lunar perigee and apogee (Meeus ch. 50, mean) --------------------


def _mean_lunar_apsis(k: float) -> float:
    t = k / 1325.55
    return (
        2451534.6698
        + 27.55454989 * k
        - 0.0006691 * t**2
        - 0.000001098 * t**3
        + 0.0000000052 * t**4
    )


def _lunar_apsis_seed(jd: float, event: PlanetaryEvent, mode: SearchMode) -> Found | NotFound:
    series = CycleSeries(
        rate=13.2555,
        epoch=1999.97,
        estimate=_mean_lunar_apsis,
        delta=0.5 if event is PlanetaryEvent.MAXIMUM_DISTANCE else 0.0,
    )
    located = find_cycle_event(series, jd, mode, _mean_lunar_apsis)
    if located is None:
        return NotFound("no lunar apsis located")
    k, jde = located
    return Found(jde, {"k": k})


# -------------------- Refinement against an ephemeris --------------------

_COARSE_STEP_DAYS: Final[dict[Body, float]] = {
    Body.MOON: 0.5,
    Body.URANUS: 35.0,
    Body.NEPTUNE: 40.0,
}
_FINE_STEP_DAYS: Final = 0.5 / 24.0

_MAXIMA = (
    PlanetaryEvent.APHELION,
    PlanetaryEvent.MAXIMUM_DISTANCE,
    PlanetaryEvent.MAXIMUM_ELONGATION,
)


def _elongation(provider: EphemerisProvider, body: Body, jd: float) -> float:
    target = provider.position(jd, body)
    sun = provider.position(jd, Body.SUN)
    return angular_separation(target.ra, target.dec, sun.ra, sun.dec)


def _seed(
    jd: float, body: Body, event: PlanetaryEvent, mode: SearchMode
) -> tuple[Found | NotFound, Body, str]:
    """Return the analytic seed, the body to measure and the measured quantity."""

    if event in (PlanetaryEvent.PERIHELION, PlanetaryEvent.APHELION):
        if body is Body.SUN:
            raise InvalidBodyError("the Sun has no heliocentric apsides")
        seed = perihelion_aphelion(jd, body, event, mode)
        if body in (Body.EARTH, Body.EARTH_MOON_BARYCENTER):
            return seed, Body.SUN, "distance"
        return seed, body, "distance_from_sun"

    if body is Body.SUN:
        if event in (PlanetaryEvent.MINIMUM_DISTANCE, PlanetaryEvent.MAXIMUM_DISTANCE):
            apsis = (
                PlanetaryEvent.PERIHELION
                if event is PlanetaryEvent.MINIMUM_DISTANCE
                else PlanetaryEvent.APHELION
            )
            return perihelion_aphelion(jd, Body.EARTH, apsis, mode), Body.SUN, "distance"
        raise InvalidBodyError("elongation of the Sun is undefined")

    if body is Body.MOON:
        if event in (PlanetaryEvent.MINIMUM_DISTANCE, PlanetaryEvent.MAXIMUM_DISTANCE):
            return _lunar_apsis_seed(jd, event, mode), body, "distance"
        raise InvalidConfigurationError(f"{event.value} of the Moon is a lunar phase")

    if body in (Body.EARTH, Body.EARTH_MOON_BARYCENTER, Body.STAR):
        raise InvalidBodyError(f"{event.value} is undefined for {body.value}")

    inferior = body in _INFERIOR_PLANETS
    if event is PlanetaryEvent.MINIMUM_ELONGATION:
        return conjunction(jd, body, mode), body, "elongation"
    if event is PlanetaryEvent.MAXIMUM_ELONGATION:
        seed = greatest_elongation(jd, body, mode) if inferior else opposition(jd, body, mode)
        return seed, body, "elongation"
    if event is PlanetaryEvent.MINIMUM_DISTANCE:
        seed = conjunction(jd, body, mode, kind="inferior") if inferior else opposition(jd, body, mode)
        return seed, body, "distance"
    seed = conjunction(jd, body, mode, kind="superior")
    return seed, body, "distance"


def _refine(
    seed_jd: float,
    body: Body,
    quantity: str,
    maximum: bool,
    provider: EphemerisProvider,
    cfg: SearchCfg,
) -> Optional[tuple[float, float]]:
    if quantity == "elongation":
        measure = lambda t: _elongation(provider, body, t)  # noqa: E731
    else:
        measure = lambda t: getattr(provider.position(t, body), quantity)  # noqa: E731
    sign = 1.0 if maximum else -1.0
    objective = lambda t: sign * measure(t)  # noqa: E731

    precision = cfg.refine_precision_minutes / 1440.0
    step = _COARSE_STEP_DAYS.get(body, _FINE_STEP_DAYS)
    if objective(seed_jd + precision) < objective(seed_jd):
        step = -step
    t = step_refine_extremum(objective, seed_jd, step, precision, max_steps=cfg.max_refine_steps)
    if t is None:
        return None
    return t, measure(t)


def planetary_event(
    jd: float,
    body: Body | str,
    event: PlanetaryEvent | str,
    mode: SearchMode = SearchMode.NEXT,
    provider: EphemerisProvider | None = None,
    *,
    settings: SearchCfg | None = None,
) -> Found | NotFound:
    """Find an apsis, distance or elongation extremum and refine it with ``provider``.

    The analytic series supplies a seed that is then walked to the extremum
    of the provider's heliocentric distance, geocentric distance or solar
    elongation, to ``SearchCfg.refine_precision_minutes``.  For the Moon the
    elongation extrema are the full and new moons.

    Details always contain the measured quantity, ``distance_au`` or
    ``elongation_deg``, plus ``kind`` for conjunctions or ``side`` for
    greatest elongations when the seed provides one.
    """

    body = Body(body)
    event = PlanetaryEvent(event)
    mode = require_cycle_mode(mode)
    if body is Body.MOON and event is PlanetaryEvent.MAXIMUM_ELONGATION:
        return moon_phase(jd, MoonPhase.FULL, mode)
    if body is Body.MOON and event is PlanetaryEvent.MINIMUM_ELONGATION:
        return moon_phase(jd, MoonPhase.NEW, mode)
    if provider is None:
        raise InvalidConfigurationError("planetary_event requires an ephemeris provider")
    cfg = settings or SearchCfg()

    seed, target, quantity = _seed(jd, body, event, mode)
    if not isinstance(seed, Found):
        return seed
    refined = _refine(seed.jd, target, quantity, event in _MAXIMA, provider, cfg)
    if refined is None:
        LOG.debug("refinement failed", extra={"body": body.value, "event": event.value, "seed": seed.jd})
        return NotFound(f"{event.value} of {body.value} did not converge")
    t, value = refined
    details = {k: v for k, v in seed.details.items() if k in ("kind", "side")}
    if quantity == "elongation":
        details["elongation_deg"] = value * RAD_TO_DEG
    else:
        details["distance_au"] = value
    LOG.debug(
        "planetary event refined",
        extra={"body": body.value, "event": event.value, "seed": seed.jd, "jd": t},
    )
    return Found(t, details)


# -------------------- Transits over the solar disk --------------------

_TRANSIT_STEP_DAYS: Final = {Body.MERCURY: 30.0, Body.VENUS: 200.0}


def transit_over_sun(
    jd: float,
    body: Body | str,
    provider: EphemerisProvider,
    *,
    jd_limit: float,
    settings: SearchCfg | None = None,
) -> Found | NotFound:
    """Next (or previous, when ``jd_limit < jd``) transit of Mercury or Venus.

    Inferior conjunctions are refined to minimum elongation one after the
    other; the first one with the planet inside the solar disk and nearer
    than the Sun is returned with its minimum separation in
    ``elongation_deg``.  :class:`NotFound` once ``jd_limit`` is crossed.
    """

    body = Body(body)
    if body not in _TRANSIT_STEP_DAYS:
        raise InvalidBodyError(f"only Mercury and Venus transit the Sun, not {body.value}")
    cfg = settings or SearchCfg()
    forward = jd_limit >= jd
    mode = SearchMode.NEXT if forward else SearchMode.PREVIOUS
    step = _TRANSIT_STEP_DAYS[body] if forward else -_TRANSIT_STEP_DAYS[body]

    def before_limit(t: float) -> bool:
        return t <= jd_limit if forward else t >= jd_limit

    t = jd
    checked = 0
    while before_limit(t):
        seed = conjunction(t, body, mode, kind="inferior")
        if not isinstance(seed, Found) or not before_limit(seed.jd):
            break
        refined = _refine(seed.jd, body, "elongation", False, provider, cfg)
        checked += 1
        if refined is not None:
            when, separation = refined
            sun = provider.position(when, Body.SUN)
            planet = provider.position(when, body)
            if separation < sun.angular_radius and planet.distance < sun.distance and before_limit(when):
                LOG.debug("transit found", extra={"body": body.value, "jd": when, "checked": checked})
                return Found(when, {"elongation_deg": separation * RAD_TO_DEG})
        t = seed.jd + step
    LOG.debug("no transit before limit", extra={"body": body.value, "checked": checked})
    return NotFound(f"no transit of {body.value} before JD {jd_limit}")
