"""Configuration models and helpers for astroevents settings."""

from __future__ import annotations

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from ..core.errors import UnsupportedMethodError
from ..providers import Observer
from ..reduction.methods import VONDRAK_CAPABLE, ReductionConfig, ReductionMethod

__all__ = [
    "CONFIG_FILENAME",
    "CURRENT_SETTINGS_SCHEMA_VERSION",
    "LoggingCfg",
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

LOG = logging.getLogger(__name__)

CURRENT_SETTINGS_SCHEMA_VERSION = 1
CONFIG_FILENAME = "config.yaml"

# -------------------- Settings Schema --------------------


class ReductionCfg(BaseModel):
    """Precession/obliquity model selection."""

    method: Literal[
        "IAU1976",
        "SIMON1994",
        "WILLIAMS1994",
        "LASKAR1986",
        "JPL_DE4XX",
        "IAU2000",
        "IAU2006",
        "IAU2009",
    ] = "IAU2006"
    vondrak: bool = False

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: object) -> str:
        return str(value).strip().upper()

    @model_validator(mode="after")
    def _check_vondrak(self) -> "ReductionCfg":
        if self.vondrak and ReductionMethod(self.method) not in VONDRAK_CAPABLE:
            raise UnsupportedMethodError(
                f"vondrak requires IAU2006 or IAU2009, not {self.method}"
            )
        return self

    def to_config(self) -> ReductionConfig:
        return ReductionConfig(ReductionMethod(self.method), self.vondrak)


class SearchCfg(BaseModel):
    """Iteration limits and precisions of the event searches."""

    rise_set_precision_seconds: float = 0.5
    rise_set_max_iter: int = 20
    eclipse_max_cycles: int = 48
    refine_precision_minutes: float = 1.0
    equinox_precision_seconds: float = 0.1
    max_refine_steps: int = 500

    @field_validator("rise_set_precision_seconds", "equinox_precision_seconds", mode="before")
    @classmethod
    def _cap_seconds(cls, value: float) -> float:
        return max(0.001, min(60.0, float(value)))

    @field_validator("refine_precision_minutes", mode="before")
    @classmethod
    def _cap_minutes(cls, value: float) -> float:
        return max(0.01, min(60.0, float(value)))

    @field_validator("rise_set_max_iter", mode="before")
    @classmethod
    def _cap_rise_set_iter(cls, value: int) -> int:
        return max(1, min(200, int(value)))

    @field_validator("eclipse_max_cycles", mode="before")
    @classmethod
    def _cap_eclipse_cycles(cls, value: int) -> int:
        return max(1, min(1000, int(value)))

    @field_validator("max_refine_steps", mode="before")
    @classmethod
    def _cap_refine_steps(cls, value: int) -> int:
        return max(10, min(100_000, int(value)))


class ObserverCfg(BaseModel):
    """Default observing site (degrees, metres)."""

    latitude_deg: float = 0.0
    longitude_deg: float = 0.0
    elevation_m: float = 0.0

    @field_validator("latitude_deg", mode="before")
    @classmethod
    def _cap_latitude(cls, value: float) -> float:
        return max(-90.0, min(90.0, float(value)))

    def to_observer(self) -> Observer:
        return Observer(self.latitude_deg, self.longitude_deg, self.elevation_m)


class LoggingCfg(BaseModel):
    """Log levels applied by :func:`astroevents.boot.logging.configure_logging`."""

    level: str = "INFO"
    range_warnings: bool = True
    search_diagnostics: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> str:
        return str(value).strip().upper() or "INFO"


class ProviderCfg(BaseModel):
    """Ephemeris backend selection."""

    name: Literal["meeus", "swiss"] = "meeus"
    ephemeris_path: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _lower_name(cls, value: object) -> str:
        return str(value).strip().lower()

    def build(self):
        """Instantiate the configured provider."""

        if self.name == "swiss":
            from ..providers.swiss import SwissProvider

            return SwissProvider(self.ephemeris_path)
        from ..providers.meeus import MeeusProvider

        return MeeusProvider()


class Settings(BaseModel):
    """Top-level settings model persisted on disk."""

    schema_version: int = Field(
        default=CURRENT_SETTINGS_SCHEMA_VERSION,
        ge=1,
        description="Version marker for persisted configuration payloads.",
    )
    reduction: ReductionCfg = Field(default_factory=ReductionCfg)
    search: SearchCfg = Field(default_factory=SearchCfg)
    observer: ObserverCfg = Field(default_factory=ObserverCfg)
    provider: ProviderCfg = Field(default_factory=ProviderCfg)
    logging: LoggingCfg = Field(default_factory=LoggingCfg)


# -------------------- Persistence --------------------


def get_config_home() -> Path:
    """Return the directory where settings should be stored."""

    return Path(os.environ.get("ASTROEVENTS_HOME", str(Path.home() / ".astroevents")))


def config_path() -> Path:
    """Return the full path to the configuration file, creating directories as needed."""

    home = get_config_home()
    home.mkdir(parents=True, exist_ok=True)
    return home / CONFIG_FILENAME


def default_settings() -> Settings:
    return Settings()


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Persist the given settings to disk as YAML."""

    target_path = Path(path) if path else config_path()
    target_path.parent.mkdir(parents=True, exist_ok=True)
    data = settings.model_dump()
    with target_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False, allow_unicode=True)
    LOG.debug("settings saved", extra={"path": str(target_path)})
    return target_path


def _coerce_schema_version(raw: object) -> int:
    """Return a normalised schema version value with sane bounds."""

    try:
        value = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1
    return max(1, value)


def _upgrade_settings_payload(
    data: dict[str, object], *, schema_version: int
) -> tuple[dict[str, object], bool]:
    """Apply in-place upgrades required for older settings payloads."""

    upgraded = deepcopy(data)
    version = max(1, schema_version)
    changed = False

    if version < CURRENT_SETTINGS_SCHEMA_VERSION:
        version = CURRENT_SETTINGS_SCHEMA_VERSION
        changed = True

    if upgraded.get("schema_version") != version:
        upgraded["schema_version"] = version
        changed = True

    return upgraded, changed


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from disk, creating defaults if missing."""

    source_path = Path(path) if path else config_path()
    if not source_path.exists():
        settings = default_settings()
        save_settings(settings, source_path)
        return settings
    with source_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        LOG.warning("ignoring malformed settings file", extra={"path": str(source_path)})
        raw = {}
    schema_version = _coerce_schema_version(raw.get("schema_version"))
    data, upgraded = _upgrade_settings_payload(raw, schema_version=schema_version)
    settings = Settings(**data)
    if upgraded:
        LOG.info(
            "settings upgraded",
            extra={"path": str(source_path), "from_version": schema_version},
        )
        save_settings(settings, source_path)
    return settings


def ensure_default_config() -> Path:
    """Ensure a configuration file exists on disk and return its path."""

    target = config_path()
    if not target.exists():
        save_settings(default_settings(), target)
    return target
