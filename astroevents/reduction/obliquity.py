"""Mean and true obliquity of the ecliptic.

Two model families are available:

* polynomials in ``u = T/100`` (T in Julian centuries from J2000), one
  coefficient table per reduction method and valid within ±100 centuries;
* the Vondrák et al. (2011) long-term series, valid within ±2000
  centuries.

Outside ±100 centuries the polynomial tables diverge quickly, so the
Vondrák series is used regardless of the configured method and a range
warning is recorded.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Final

from ..constants import ARCSEC_TO_RAD, DAYS_PER_JULIAN_CENTURY, J2000, TWO_PI
from ..core.diagnostics import WarningLog, emit_range_warning
from .methods import ReductionConfig, ReductionMethod

if TYPE_CHECKING:
    from ..providers import NutationProvider

__all__ = [
    "POLYNOMIAL_VALIDITY_CENTURIES",
    "VONDRAK_VALIDITY_CENTURIES",
    "mean_obliquity",
    "mean_obliquity_arcsec",
    "true_obliquity",
    "vondrak_obliquity_arcsec",
]

LOG = logging.getLogger(__name__)

POLYNOMIAL_VALIDITY_CENTURIES: Final[float] = 100.0
VONDRAK_VALIDITY_CENTURIES: Final[float] = 2000.0

# (epsilon at J2000 in arcsec, coefficients of u^1..u^10 scaled by 100)
_CAPITAINE = (
    84381.406,
    (-468367.69, -183.1, 200340.0, -5760.0, -43400.0, 0.0, 0.0, 0.0, 0.0, 0.0),
)
_SIMON = (
    84381.412,
    (-468092.7, -152.0, 199890.0, -5138.0, -24967.0, -3905.0, 712.0, 2787.0, 579.0, 245.0),
)
_WILLIAMS = (
    84381.406173,
    (-468339.6, -175.0, 199890.0, -5138.0, -24967.0, -3905.0, 712.0, 2787.0, 579.0, 245.0),
)
_LASKAR = (
    84381.448,
    (-468093.0, -155.0, 199925.0, -5138.0, -24967.0, -3905.0, 712.0, 2787.0, 579.0, 245.0),
)
_IAU1976 = (
    84381.448,
    (-468150.0, -590.0, 181300.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0),
)

_POLYNOMIALS: Final[dict[ReductionMethod, tuple[float, tuple[float, ...]]]] = {
    ReductionMethod.IAU2000: _CAPITAINE,
    ReductionMethod.IAU2006: _CAPITAINE,
    ReductionMethod.IAU2009: _CAPITAINE,
    ReductionMethod.SIMON1994: _SIMON,
    ReductionMethod.WILLIAMS1994: _WILLIAMS,
    ReductionMethod.JPL_DE4XX: _WILLIAMS,
    ReductionMethod.LASKAR1986: _LASKAR,
    ReductionMethod.IAU1976: _IAU1976,
}

_VONDRAK_POLY: Final = (84028.206305, 0.3624445, -0.00004039, -110e-9)
# (period in centuries, cosine amplitude, sine amplitude), arcsec
_VONDRAK_PERIODIC: Final = (
    (409.90, 753.872780, -1704.720302),
    (396.15, -247.805823, -862.308358),
    (537.22, 379.471484, 447.832178),
    (402.90, -53.880558, -889.571909),
    (417.15, -90.109153, 190.402846),
    (288.92, -353.600190, -56.564991),
    (4043.00, -63.115353, -296.222622),
    (306.00, -28.248187, -75.859952),
    (277.00, 17.703387, 67.473503),
    (203.00, 38.911307, 3.014055),
)


def vondrak_obliquity_arcsec(t_centuries: float) -> float:
    """Vondrák et al. (2011) mean obliquity in arcseconds."""

    w = TWO_PI * t_centuries
    total = 0.0
    for period, c, s in _VONDRAK_PERIODIC:
        a = w / period
        total += math.cos(a) * c + math.sin(a) * s
    power = 1.0
    for coeff in _VONDRAK_POLY:
        total += coeff * power
        power *= t_centuries
    return total


def _polynomial_arcsec(t_centuries: float, method: ReductionMethod) -> float:
    start, coeffs = _POLYNOMIALS[method]
    u = t_centuries / 100.0
    value = start
    power = 1.0
    for coeff in coeffs:
        power *= u
        value += power * coeff / 100.0
    return value


def mean_obliquity_arcsec(
    t_centuries: float,
    config: ReductionConfig | None = None,
    *,
    warnings: WarningLog | None = None,
) -> float:
    """Mean obliquity in arcseconds; see :func:`mean_obliquity`."""

    config = config or ReductionConfig()
    magnitude = abs(t_centuries)
    if magnitude > POLYNOMIAL_VALIDITY_CENTURIES:
        emit_range_warning(
            __name__,
            "Date is too far from J2000, obliquity forced to Vondrák et al. 2011 model.",
            t_centuries,
            warnings,
        )
        if magnitude > VONDRAK_VALIDITY_CENTURIES:
            emit_range_warning(
                __name__,
                "Date is too far from J2000, Vondrák et al. 2011 obliquity is probably incorrect.",
                t_centuries,
                warnings,
            )
        return vondrak_obliquity_arcsec(t_centuries)
    if config.uses_vondrak:
        return vondrak_obliquity_arcsec(t_centuries)
    return _polynomial_arcsec(t_centuries, config.method)


def mean_obliquity(
    t_centuries: float,
    config: ReductionConfig | None = None,
    *,
    warnings: WarningLog | None = None,
) -> float:
    """Return the mean obliquity of the ecliptic in radians.

    Parameters
    ----------
    t_centuries:
        Julian centuries from J2000 in TT.
    config:
        Reduction method and Vondrák flag; defaults to IAU2006 polynomial.
    warnings:
        Optional collector receiving range warnings.
    """

    return mean_obliquity_arcsec(t_centuries, config, warnings=warnings) * ARCSEC_TO_RAD


def true_obliquity(
    t_centuries: float,
    config: ReductionConfig | None,
    nutation: "NutationProvider",
    *,
    warnings: WarningLog | None = None,
) -> float:
    """Return mean obliquity plus the nutation in obliquity, in radians."""

    config = config or ReductionConfig()
    jd = J2000 + t_centuries * DAYS_PER_JULIAN_CENTURY
    _, deps = nutation.nutation(jd, config.method)
    return mean_obliquity(t_centuries, config, warnings=warnings) + deps
