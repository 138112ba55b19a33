"""astroevents package bootstrap and curated public API surface."""

from __future__ import annotations

import logging
from importlib import import_module
from importlib.metadata import PackageNotFoundError, version as _get_version
from typing import Any

LOG = logging.getLogger(__name__)

try:
    __version__ = _get_version("astroevents")
except PackageNotFoundError:  # pragma: no cover - metadata missing when run from a checkout
    __version__ = "0.0.0"


def get_version() -> str:
    """Return the resolved astroevents package version."""

    return __version__


_LAZY_EXPORTS: dict[str, tuple[str, str]] = {
    "Epoch": ("astroevents.core.time", "Epoch"),
    "TimeScale": ("astroevents.core.time", "TimeScale"),
    "WarningLog": ("astroevents.core.diagnostics", "WarningLog"),
    "ReductionConfig": ("astroevents.reduction.methods", "ReductionConfig"),
    "ReductionMethod": ("astroevents.reduction.methods", "ReductionMethod"),
    "Frame": ("astroevents.reduction.frames", "Frame"),
    "mean_obliquity": ("astroevents.reduction.obliquity", "mean_obliquity"),
    "true_obliquity": ("astroevents.reduction.obliquity", "true_obliquity"),
    "precess": ("astroevents.reduction.precession", "precess"),
    "SearchMode": ("astroevents.events.search", "SearchMode"),
    "moon_phase": ("astroevents.events.lunar", "moon_phase"),
    "lunar_eclipse": ("astroevents.events.lunar", "lunar_eclipse"),
    "solar_eclipse": ("astroevents.events.lunar", "solar_eclipse"),
    "equinox_solstice": ("astroevents.events.seasons", "equinox_solstice"),
    "meteor_showers": ("astroevents.events.meteors", "meteor_showers"),
    "planetary_event": ("astroevents.events.planetary", "planetary_event"),
    "transit_over_sun": ("astroevents.events.planetary", "transit_over_sun"),
    "saturn_ring_edge_on": ("astroevents.events.saturn", "saturn_ring_edge_on"),
    "next_grs_transit": ("astroevents.events.jupiter", "next_grs_transit"),
    "rise_set_transit": ("astroevents.events.rise_set", "rise_set_transit"),
    "Body": ("astroevents.providers", "Body"),
    "Observer": ("astroevents.providers", "Observer"),
    "Settings": ("astroevents.config.settings", "Settings"),
    "load_settings": ("astroevents.config.settings", "load_settings"),
    "configure_logging": ("astroevents.boot.logging", "configure_logging"),
}

__all__ = ["LOG", "__version__", "get_version", *sorted(_LAZY_EXPORTS)]


def __getattr__(name: str) -> Any:
    target = _LAZY_EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module 'astroevents' has no attribute {name!r}")
    module_name, attr_name = target
    value = getattr(import_module(module_name), attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(set(globals()) | set(_LAZY_EXPORTS))
