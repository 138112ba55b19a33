"""Configuration helpers exposed at :mod:`astroevents.config`."""

from __future__ import annotations

from .settings import (
    ObserverCfg,
    ProviderCfg,
    ReductionCfg,
    SearchCfg,
    Settings,
    config_path,
    default_settings,
    ensure_default_config,
    get_config_home,
    load_settings,
    save_settings,
)

__all__ = [
    "ObserverCfg",
    "ProviderCfg",
    "ReductionCfg",
    "SearchCfg",
    "Settings",
    "config_path",
    "default_settings",
    "ensure_default_config",
    "get_config_home",
    "load_settings",
    "save_settings",
]
