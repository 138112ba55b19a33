from __future__ import annotations

import pytest

from astroevents.core.errors import UnsupportedMethodError
from astroevents.core.time import secular_acceleration_correction
from astroevents.events.lunar import (
    MoonPhase,
    lunar_eclipse,
    mean_phase_jde,
    moon_phase,
    phase_jde,
    solar_eclipse,
)
from astroevents.events.results import Found, LunarEclipseDetails, NotFound, SolarEclipseDetails
from astroevents.events.search import SearchMode


def test_mean_phase_at_reference_lunation():
    assert mean_phase_jde(0.0) == pytest.approx(2451550.09766, abs=1e-5)


def test_new_moon_1977_february():
    result = moon_phase(2443190.0, MoonPhase.NEW, SearchMode.NEXT)
    assert isinstance(result, Found)
    assert result.details["k"] == -283.0
    assert result.jd == pytest.approx(2443192.65118, abs=1e-4)


def test_first_quarter_uses_fractional_lunation():
    result = moon_phase(2451550.0, "first_quarter")
    assert result.found
    assert result.details["k"] == pytest.approx(0.25)
    assert result.jd == secular_acceleration_correction(phase_jde(0.25, MoonPhase.FIRST_QUARTER))


def test_new_moon_near_year_1000_gets_secular_correction():
    result = moon_phase(2086308.0, MoonPhase.NEW, SearchMode.NEXT)
    k = result.details["k"]
    uncorrected = phase_jde(k, MoonPhase.NEW)
    assert result.jd == secular_acceleration_correction(uncorrected)
    cent = (uncorrected - 2435109.0) / 36525.0
    shift_seconds = (result.jd - uncorrected) * 86400.0
    assert shift_seconds == pytest.approx(0.91072 * 1.9634 * cent**2, rel=1e-3)
    assert 150.0 < shift_seconds < 175.0


def test_new_moon_after_mean_time_is_not_skipped():
    # first lunation whose true new moon trails the mean one by over 0.2 d
    k = next(k for k in range(200) if phase_jde(float(k), MoonPhase.NEW) - mean_phase_jde(float(k)) > 0.2)
    jd = 0.5 * (mean_phase_jde(float(k)) + phase_jde(float(k), MoonPhase.NEW))
    after = moon_phase(jd, MoonPhase.NEW, SearchMode.NEXT)
    before = moon_phase(jd, MoonPhase.NEW, SearchMode.PREVIOUS)
    assert after.details["k"] == float(k)
    assert before.details["k"] == float(k - 1)
    assert before.jd < jd < after.jd
    assert moon_phase(jd, MoonPhase.NEW, SearchMode.CLOSEST).jd in (after.jd, before.jd)


def test_full_moon_modes():
    after = moon_phase(2451550.0, MoonPhase.FULL, SearchMode.NEXT)
    assert after.jd == pytest.approx(2451564.697, abs=0.01)
    before = moon_phase(2451550.0, MoonPhase.FULL, SearchMode.PREVIOUS)
    assert before.jd < 2451550.0
    assert after.jd - before.jd == pytest.approx(29.53, abs=0.4)
    closest = moon_phase(2451560.0, MoonPhase.FULL, SearchMode.CLOSEST)
    assert closest.jd == after.jd


def test_moon_phase_rejects_current_mode():
    with pytest.raises(UnsupportedMethodError):
        moon_phase(2451550.0, MoonPhase.NEW, SearchMode.CURRENT)


def test_total_lunar_eclipse_january_2000():
    result = lunar_eclipse(2451550.0, SearchMode.NEXT)
    assert isinstance(result, Found)
    details = result.details
    assert isinstance(details, LunarEclipseDetails)
    assert details.kind == "total"
    assert 1.0 < details.magnitude_umbral < 1.5
    assert details.magnitude_penumbral > details.magnitude_umbral
    assert result.jd == pytest.approx(2451564.697, abs=0.01)
    assert details.semi_duration_penumbral_min > details.semi_duration_partial_min > details.semi_duration_total_min > 0.0


def test_previous_lunar_eclipse_is_partial_july_1999():
    result = lunar_eclipse(2451564.0, SearchMode.PREVIOUS)
    assert result.found
    assert result.details.kind == "partial"
    assert result.details.semi_duration_total_min == 0.0
    assert result.jd == pytest.approx(2451387.98, abs=0.05)


def test_closest_lunar_eclipse():
    result = lunar_eclipse(2451570.0, SearchMode.CLOSEST)
    assert result.jd == pytest.approx(2451564.697, abs=0.01)


def test_partial_solar_eclipse_february_2000():
    result = solar_eclipse(2451550.0, SearchMode.NEXT)
    details = result.details
    assert isinstance(details, SolarEclipseDetails)
    assert details.kind == "partial"
    assert not details.central
    assert 0.4 < details.magnitude < 0.7
    assert result.jd == pytest.approx(2451580.035, abs=0.05)


def test_partial_solar_eclipse_may_1993():
    result = solar_eclipse(2449100.0, SearchMode.NEXT)
    assert result.details.kind == "partial"
    assert result.details.magnitude == pytest.approx(0.740, abs=0.003)
    assert result.details.gamma == pytest.approx(1.1348, abs=0.001)
    assert result.jd == pytest.approx(2449129.098, abs=0.001)


def test_central_solar_eclipse_has_no_magnitude():
    # 1999 August 11 total eclipse
    result = solar_eclipse(2451390.0, SearchMode.NEXT)
    assert result.details.kind == "total"
    assert result.details.central
    assert result.details.magnitude is None
    assert result.jd == pytest.approx(2451401.96, abs=0.05)


def test_eclipse_search_cap():
    result = solar_eclipse(2451581.0, SearchMode.NEXT, max_cycles=1)
    assert isinstance(result, NotFound)
    assert not result.found
    assert "1 lunations" in result.reason


def test_eclipses_reject_current_mode():
    with pytest.raises(UnsupportedMethodError):
        solar_eclipse(2451550.0, SearchMode.CURRENT)
    with pytest.raises(UnsupportedMethodError):
        lunar_eclipse(2451550.0, SearchMode.CURRENT)
