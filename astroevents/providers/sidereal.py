"""Greenwich and local sidereal time (Meeus ch. 12)."""

from __future__ import annotations

import logging
import math

from ..constants import DEG_TO_RAD, J2000
from ..core.angles import normalize_degrees, normalize_radians
from ..core.time import to_centuries
from ..reduction.methods import ReductionConfig
from ..reduction.obliquity import mean_obliquity
from . import NutationProvider, Observer

__all__ = ["MeanSiderealTime", "greenwich_mean_sidereal_time"]

LOG = logging.getLogger(__name__)


def greenwich_mean_sidereal_time(jd: float) -> float:
    """Return GMST in radians for a Julian Day on the UT scale (Meeus 12.4)."""

    t = to_centuries(jd)
    degrees = (
        280.46061837
        + 360.98564736629 * (jd - J2000)
        + 0.000387933 * t * t
        - t**3 / 38710000.0
    )
    return normalize_degrees(degrees) * DEG_TO_RAD


class MeanSiderealTime:
    """Sidereal time provider built from GMST.

    With a nutation provider the equation of the equinoxes is added, giving
    apparent sidereal time; without one the mean value is returned.
    """

    def __init__(
        self,
        nutation: NutationProvider | None = None,
        config: ReductionConfig | None = None,
    ) -> None:
        self.nutation = nutation
        self.config = config or ReductionConfig()

    def equation_of_equinoxes(self, jd: float) -> float:
        if self.nutation is None:
            return 0.0
        dpsi, deps = self.nutation.nutation(jd, self.config.method)
        eps = mean_obliquity(to_centuries(jd), self.config) + deps
        return dpsi * math.cos(eps)

    def apparent_sidereal_time(self, jd: float, observer: Observer) -> float:
        gmst = greenwich_mean_sidereal_time(jd)
        return normalize_radians(gmst + self.equation_of_equinoxes(jd) + observer.longitude)
