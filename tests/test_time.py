from __future__ import annotations

import datetime as dt

import pytest

from astroevents.constants import J2000, SECONDS_PER_DAY
from astroevents.core.errors import InvalidConfigurationError, TimeScaleMismatchError
from astroevents.core.time import (
    Epoch,
    TimeScale,
    calendar_to_jd,
    days_in_month,
    fractional_year,
    jd_to_calendar,
    julian_day,
    midnight_jd,
    secular_acceleration_correction,
    to_centuries,
)
from astroevents.providers import Observer
from astroevents.providers.meeus import DeltaTConverter


@pytest.mark.parametrize(
    ("year", "month", "day", "expected"),
    [
        (2000, 1, 1.5, 2451545.0),
        (1957, 10, 4.81, 2436116.31),
        (1987, 1, 27.0, 2446822.5),
        (333, 1, 27.5, 1842713.0),
        (1582, 10, 15.0, 2299160.5),
    ],
)
def test_calendar_to_jd(year: int, month: int, day: float, expected: float) -> None:
    assert calendar_to_jd(year, month, day) == pytest.approx(expected, abs=1e-9)


def test_jd_to_calendar_inverts_calendar_to_jd():
    year, month, day = jd_to_calendar(2436116.31)
    assert (year, month) == (1957, 10)
    assert day == pytest.approx(4.81, abs=1e-6)
    year, month, day = jd_to_calendar(1842713.0)
    assert (year, month) == (333, 1)
    assert day == pytest.approx(27.5, abs=1e-9)


def test_julian_day_handles_timezones():
    utc_noon = dt.datetime(2000, 1, 1, 12, tzinfo=dt.timezone.utc)
    plus_two = dt.datetime(2000, 1, 1, 14, tzinfo=dt.timezone(dt.timedelta(hours=2)))
    naive = dt.datetime(2000, 1, 1, 12)
    assert julian_day(utc_noon) == pytest.approx(J2000)
    assert julian_day(plus_two) == pytest.approx(J2000)
    assert julian_day(naive) == pytest.approx(J2000)


def test_midnight_and_centuries():
    assert midnight_jd(J2000) == 2451544.5
    assert midnight_jd(2451544.5) == 2451544.5
    assert to_centuries(J2000 + 36525.0) == pytest.approx(1.0)


def test_days_in_month_and_fractional_year():
    assert days_in_month(2000, 2) == 29
    assert days_in_month(1900, 2) == 28
    assert days_in_month(1500, 2) == 29
    assert days_in_month(2023, 4) == 30
    assert fractional_year(J2000) == pytest.approx(2000.0 + 1.5 / 32.0 / 12.0)


def test_secular_acceleration_correction_vanishes_at_reference_epoch():
    assert secular_acceleration_correction(2435109.0) == 2435109.0
    shifted = secular_acceleration_correction(J2000)
    assert 0.0 < shifted - J2000 < 1.0 / SECONDS_PER_DAY


def test_epoch_arithmetic_and_scale_guard():
    a = Epoch(J2000, TimeScale.TT)
    b = a + 1.5
    assert b.jd == J2000 + 1.5 and b.scale is TimeScale.TT
    assert b - a == pytest.approx(1.5)
    assert (b - 0.5).jd == J2000 + 1.0
    assert a < b and b >= a
    with pytest.raises(TimeScaleMismatchError):
        _ = a < Epoch(J2000, TimeScale.UTC)
    with pytest.raises(TimeScaleMismatchError):
        _ = a - Epoch(J2000, TimeScale.UT1)
    assert a.centuries() == 0.0


def test_delta_t_converter_with_fixed_delta_t():
    converter = DeltaTConverter(lambda year, month: 64.0)
    tt = Epoch(J2000, TimeScale.TT)
    utc = converter.convert(tt, TimeScale.UTC)
    assert utc.scale is TimeScale.UTC
    assert utc.jd == pytest.approx(J2000 - 64.0 / SECONDS_PER_DAY)
    back = converter.convert(utc, TimeScale.TT)
    assert back.jd == pytest.approx(J2000)
    assert converter.convert(tt, TimeScale.TT) is tt


def test_local_time_scale_needs_observer():
    converter = DeltaTConverter(lambda year, month: 0.0)
    utc = Epoch(J2000, TimeScale.UTC)
    local = converter.convert(utc, TimeScale.LOCAL, Observer(10.0, 90.0))
    assert local.jd == pytest.approx(J2000 + 0.25)
    assert converter.convert(local, TimeScale.UTC, Observer(10.0, 90.0)).jd == pytest.approx(J2000)
    with pytest.raises(InvalidConfigurationError):
        converter.convert(utc, TimeScale.LOCAL)


def test_delta_t_from_pymeeus():
    pytest.importorskip("pymeeus")
    converter = DeltaTConverter()
    assert 60.0 < converter.delta_t_seconds(J2000) < 70.0
