"""Exception taxonomy for astroevents.

Invalid inputs abort the current call with a :class:`ValueError` subclass.
Backends that cannot be loaded raise :class:`ProviderError`.  Expected
"nothing happens" outcomes (no eclipse, circumpolar body) are never raised;
they are returned as result variants from :mod:`astroevents.events.results`.
"""

from __future__ import annotations

__all__ = [
    "EpochPivotError",
    "InvalidBodyError",
    "InvalidConfigurationError",
    "ProviderError",
    "TimeScaleMismatchError",
    "UnsupportedMethodError",
    "VectorLengthError",
]


class InvalidConfigurationError(ValueError):
    """Raised when a call combines options that cannot be evaluated."""


class UnsupportedMethodError(InvalidConfigurationError):
    """Raised when a reduction method or search mode is not valid for an operation."""


class EpochPivotError(InvalidConfigurationError):
    """Raised when a closed-form precession is requested between two non-J2000 epochs."""


class InvalidBodyError(InvalidConfigurationError):
    """Raised when a body-specific event is requested for an unsupported body."""


class VectorLengthError(InvalidConfigurationError):
    """Raised when a vector helper receives the wrong number of components."""


class TimeScaleMismatchError(ValueError):
    """Raised when two epochs on different time scales are combined."""


class ProviderError(RuntimeError):
    """Raised when an ephemeris backend is unavailable or fails."""
