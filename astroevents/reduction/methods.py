"""Reduction methods selecting the obliquity and precession models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..core.errors import UnsupportedMethodError

__all__ = ["IAU_CLOSED_FORM", "ReductionConfig", "ReductionMethod", "VONDRAK_CAPABLE"]


class ReductionMethod(str, Enum):
    """Published models for precession and obliquity."""

    IAU1976 = "IAU1976"
    SIMON1994 = "SIMON1994"
    WILLIAMS1994 = "WILLIAMS1994"
    LASKAR1986 = "LASKAR1986"
    JPL_DE4XX = "JPL_DE4XX"
    IAU2000 = "IAU2000"
    IAU2006 = "IAU2006"
    IAU2009 = "IAU2009"


VONDRAK_CAPABLE = frozenset({ReductionMethod.IAU2006, ReductionMethod.IAU2009})
IAU_CLOSED_FORM = frozenset(
    {ReductionMethod.IAU2000, ReductionMethod.IAU2006, ReductionMethod.IAU2009}
)


@dataclass(frozen=True, slots=True)
class ReductionConfig:
    """A reduction method plus the optional Vondrák 2011 long-term flag."""

    method: ReductionMethod = ReductionMethod.IAU2006
    vondrak: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.method, ReductionMethod):
            object.__setattr__(self, "method", ReductionMethod(str(self.method).upper()))
        if self.vondrak and self.method not in VONDRAK_CAPABLE:
            raise UnsupportedMethodError(
                f"Vondrák 2011 series is only available with IAU2006/IAU2009, not {self.method.value}"
            )

    @property
    def uses_vondrak(self) -> bool:
        return self.vondrak and self.method in VONDRAK_CAPABLE
