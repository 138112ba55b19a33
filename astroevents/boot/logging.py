"""Logging setup for scripts and notebooks driving astroevents."""

from __future__ import annotations

import logging
import os
from typing import Any

from ..config.settings import LoggingCfg, Settings

__all__ = ["RANGE_WARNING_LOGGER", "SEARCH_LOGGER", "configure_logging"]

RANGE_WARNING_LOGGER = "astroevents.core.diagnostics"
SEARCH_LOGGER = "astroevents.events"

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _coerce_level(value: str | int | None) -> int:
    """Return a logging level from a level name or number; INFO otherwise."""

    if value is None:
        return logging.INFO
    if isinstance(value, int):
        return value
    candidate = value.strip()
    if not candidate:
        return logging.INFO
    if candidate.isdigit():
        return int(candidate)
    resolved = logging.getLevelName(candidate.upper())
    if isinstance(resolved, int):
        return resolved
    return logging.INFO


def configure_logging(
    settings: Settings | None = None, *, level: str | int | None = None, **kwargs: Any
) -> int:
    """Configure the root logger for astroevents and return its level.

    The level comes from ``level``, then ``ASTROEVENTS_LOG_LEVEL``, then
    ``settings.logging.level``.  With ``range_warnings`` off, models
    evaluated outside their validated span stop logging; :class:`WarningLog`
    collectors still receive them.  ``search_diagnostics`` turns on the
    convergence and seeding messages of the event searches.  Remaining
    ``kwargs`` go to :func:`logging.basicConfig`.
    """

    cfg = settings.logging if settings is not None else LoggingCfg()
    if level is None:
        level = os.environ.get("ASTROEVENTS_LOG_LEVEL") or cfg.level
    effective_level = _coerce_level(level)
    logging.basicConfig(
        level=effective_level,
        format=kwargs.pop("format", _DEFAULT_FORMAT),
        datefmt=kwargs.pop("datefmt", _DEFAULT_DATEFMT),
        force=kwargs.pop("force", True),
        **kwargs,
    )
    logging.getLogger(RANGE_WARNING_LOGGER).setLevel(logging.NOTSET if cfg.range_warnings else logging.ERROR)
    logging.getLogger(SEARCH_LOGGER).setLevel(logging.DEBUG if cfg.search_diagnostics else logging.NOTSET)
    return effective_level
