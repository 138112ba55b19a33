from __future__ import annotations

import importlib.util

import pytest
import yaml
from pydantic import ValidationError

from astroevents.config.settings import (
    CURRENT_SETTINGS_SCHEMA_VERSION,
    LoggingCfg,
    ObserverCfg,
    ProviderCfg,
    ReductionCfg,
    SearchCfg,
    Settings,
    config_path,
    ensure_default_config,
    load_settings,
    save_settings,
)
from astroevents.reduction.methods import ReductionMethod


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("ASTROEVENTS_HOME", str(tmp_path))
    return tmp_path


def test_defaults_written_on_first_load(tmp_path):
    settings = load_settings()
    assert settings == Settings()
    assert (tmp_path / "config.yaml").exists()
    assert config_path() == tmp_path / "config.yaml"


def test_save_and_load_round_trip(tmp_path):
    settings = Settings(
        reduction=ReductionCfg(method="WILLIAMS1994"),
        observer=ObserverCfg(latitude_deg=40.0, longitude_deg=-75.0, elevation_m=20.0),
    )
    path = save_settings(settings, tmp_path / "custom.yaml")
    assert load_settings(path) == settings


def test_missing_schema_version_is_written_back(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"search": {"eclipse_max_cycles": 12}}), encoding="utf-8")
    settings = load_settings(path)
    assert settings.search.eclipse_max_cycles == 12
    assert settings.schema_version == CURRENT_SETTINGS_SCHEMA_VERSION == 1
    stored = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert stored["schema_version"] == CURRENT_SETTINGS_SCHEMA_VERSION


def test_unknown_sections_are_not_migrated(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump({"schema_version": "junk", "limits": {"eclipse_max_cycles": 12}}),
        encoding="utf-8",
    )
    settings = load_settings(path)
    assert settings.search == SearchCfg()
    assert settings.schema_version == CURRENT_SETTINGS_SCHEMA_VERSION


def test_logging_cfg_normalises_level():
    assert LoggingCfg(level=" debug ").level == "DEBUG"
    assert LoggingCfg(level="").level == "INFO"
    assert Settings().logging == LoggingCfg()


def test_malformed_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    assert load_settings(path).search == SearchCfg()


def test_ensure_default_config(tmp_path):
    target = ensure_default_config()
    assert target.exists()
    target.write_text(yaml.safe_dump({"schema_version": 1, "observer": {"latitude_deg": 10.0}}), encoding="utf-8")
    assert ensure_default_config() == target
    assert load_settings().observer.latitude_deg == 10.0


def test_reduction_cfg_validation():
    assert ReductionCfg(method="iau1976").method == "IAU1976"
    with pytest.raises(ValidationError):
        ReductionCfg(method="IAU1976", vondrak=True)
    with pytest.raises(ValidationError):
        ReductionCfg(method="BESSEL")
    config = ReductionCfg(method="iau2009", vondrak=True).to_config()
    assert config.method is ReductionMethod.IAU2009
    assert config.vondrak


@pytest.mark.parametrize(
    ("field", "value", "expected"),
    [
        ("equinox_precision_seconds", 0.0, 0.001),
        ("equinox_precision_seconds", 3600.0, 60.0),
        ("rise_set_precision_seconds", 120.0, 60.0),
        ("refine_precision_minutes", 0.0, 0.01),
        ("rise_set_max_iter", 0, 1),
        ("eclipse_max_cycles", 5000, 1000),
        ("max_refine_steps", 1, 10),
    ],
)
def test_search_limits_are_clamped(field: str, value: float, expected: float) -> None:
    assert getattr(SearchCfg(**{field: value}), field) == expected


def test_observer_latitude_clamped():
    cfg = ObserverCfg(latitude_deg=95.0, longitude_deg=-75.0)
    assert cfg.latitude_deg == 90.0
    observer = cfg.to_observer()
    assert observer.latitude_deg == 90.0
    assert observer.longitude_deg == -75.0


def test_provider_cfg_normalises_name():
    assert ProviderCfg(name="MEEUS").name == "meeus"
    with pytest.raises(ValidationError):
        ProviderCfg(name="jpl")


@pytest.mark.skipif(importlib.util.find_spec("pymeeus") is None, reason="pymeeus not installed")
def test_provider_cfg_builds_meeus_provider():
    from astroevents.providers.meeus import MeeusProvider

    assert isinstance(ProviderCfg().build(), MeeusProvider)
