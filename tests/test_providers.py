from __future__ import annotations

import sys

import pytest

from astroevents.constants import ARCSEC_TO_RAD, AU_KM, J2000, RAD_TO_DEG
from astroevents.core.errors import InvalidBodyError, InvalidConfigurationError, ProviderError
from astroevents.core.time import Epoch, TimeScale
from astroevents.providers import Body, Observer
from astroevents.providers import swiss
from astroevents.providers.meeus import DeltaTConverter
from astroevents.reduction.methods import ReductionMethod


def test_delta_t_converter_with_fixed_table():
    converter = DeltaTConverter(delta_t=lambda year, month: 64.0)
    ut = converter.convert(Epoch(J2000, TimeScale.TT), TimeScale.UT1)
    assert ut.scale is TimeScale.UT1
    assert ut.jd == pytest.approx(J2000 - 64.0 / 86400.0, abs=1e-9)
    back = converter.convert(ut, TimeScale.TT)
    assert back.jd == pytest.approx(J2000, abs=1e-9)
    assert converter.convert(ut, TimeScale.UTC).jd == ut.jd


def test_delta_t_converter_local_time():
    converter = DeltaTConverter(delta_t=lambda year, month: 0.0)
    site = Observer(40.0, -90.0)
    local = converter.convert(Epoch(J2000, TimeScale.UT1), TimeScale.LOCAL, site)
    assert local.jd == pytest.approx(J2000 - 0.25)
    with pytest.raises(InvalidConfigurationError):
        converter.convert(Epoch(J2000, TimeScale.UT1), TimeScale.LOCAL)


def test_meeus_sun_1992_october_13(meeus_provider):
    state = meeus_provider.position(2448908.5, Body.SUN)
    assert state.ra * RAD_TO_DEG == pytest.approx(198.378, abs=0.01)
    assert state.dec * RAD_TO_DEG == pytest.approx(-7.784, abs=0.01)
    assert state.distance == pytest.approx(0.99760, abs=1e-4)
    assert state.distance_from_sun == 0.0
    assert state.angular_radius / ARCSEC_TO_RAD == pytest.approx(959.63 / 0.9976, abs=0.5)


def test_meeus_moon_1992_april_12(meeus_provider):
    state = meeus_provider.position(2448724.5, Body.MOON)
    assert state.ecliptic_lon * RAD_TO_DEG == pytest.approx(133.16, abs=0.01)
    assert state.distance * AU_KM == pytest.approx(368409.7, abs=1.0)
    assert state.distance_from_sun == pytest.approx(1.0, abs=0.02)


def test_meeus_venus_1992_december_20(meeus_provider):
    state = meeus_provider.position(2448976.5, "venus")
    assert state.ra * RAD_TO_DEG == pytest.approx(316.17273, abs=0.01)
    assert state.dec * RAD_TO_DEG == pytest.approx(-18.88801, abs=0.01)
    assert state.distance == pytest.approx(0.910845, abs=5e-4)
    assert 0.71 < state.distance_from_sun < 0.73


def test_meeus_earth_and_unknown_body(meeus_provider):
    earth = meeus_provider.position(J2000, Body.EARTH)
    assert earth.distance_from_sun == pytest.approx(0.98333, abs=1e-4)
    with pytest.raises(InvalidBodyError):
        meeus_provider.position(J2000, Body.STAR)


def test_meeus_nutation_1987_april_10(meeus_provider):
    dpsi, deps = meeus_provider.nutation(2446895.5, ReductionMethod.IAU1976)
    assert dpsi / ARCSEC_TO_RAD == pytest.approx(-3.788, abs=0.01)
    assert deps / ARCSEC_TO_RAD == pytest.approx(9.443, abs=0.01)


def test_meeus_delta_t_table():
    pytest.importorskip("pymeeus")
    converter = DeltaTConverter()
    assert converter.delta_t_seconds(J2000) == pytest.approx(63.8, abs=1.0)


@pytest.fixture
def swiss_provider():
    pytest.importorskip("swisseph")
    swiss.reset_swe()
    yield swiss.SwissProvider()
    swiss.reset_swe()


def test_swiss_sun_and_earth(swiss_provider):
    sun = swiss_provider.position(J2000, Body.SUN)
    assert sun.distance == pytest.approx(0.98333, abs=1e-4)
    assert sun.ecliptic_lon * RAD_TO_DEG == pytest.approx(280.37, abs=0.02)
    earth = swiss_provider.position(J2000, Body.EARTH)
    assert earth.distance_from_sun == pytest.approx(sun.distance, abs=1e-4)
    assert swiss.has_swe()


def test_swiss_sidereal_time_and_delta_t(swiss_provider):
    last = swiss_provider.apparent_sidereal_time(J2000, Observer(0.0, 0.0))
    assert last * RAD_TO_DEG == pytest.approx(280.46, abs=0.01)
    tt = swiss_provider.convert(Epoch(J2000, TimeScale.UT1), TimeScale.TT)
    assert (tt.jd - J2000) * 86400.0 == pytest.approx(63.8, abs=1.0)
    back = swiss_provider.convert(tt, TimeScale.UT1)
    assert back.jd == pytest.approx(J2000, abs=1e-8)


def test_swiss_rejects_unsupported_body(swiss_provider):
    with pytest.raises(InvalidBodyError):
        swiss_provider.position(J2000, Body.STAR)


def test_swiss_load_failure(monkeypatch):
    swiss.reset_swe()
    monkeypatch.setitem(sys.modules, "swisseph", None)
    try:
        with pytest.raises(ProviderError, match="pyswisseph"):
            swiss.load_swe()
    finally:
        swiss.reset_swe()
