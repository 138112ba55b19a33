"""Core value types and numeric helpers shared across astroevents."""

from __future__ import annotations

from .angles import normalize_degrees, normalize_radians, quadrant
from .diagnostics import RangeWarning, WarningLog
from .errors import (
    EpochPivotError,
    InvalidBodyError,
    InvalidConfigurationError,
    ProviderError,
    TimeScaleMismatchError,
    UnsupportedMethodError,
    VectorLengthError,
)
from .time import Epoch, TimeScale

__all__ = [
    "Epoch",
    "EpochPivotError",
    "InvalidBodyError",
    "InvalidConfigurationError",
    "ProviderError",
    "RangeWarning",
    "TimeScale",
    "TimeScaleMismatchError",
    "UnsupportedMethodError",
    "VectorLengthError",
    "WarningLog",
    "normalize_degrees",
    "normalize_radians",
    "quadrant",
]
