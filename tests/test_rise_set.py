from __future__ import annotations

import math

import pytest

hypothesis = pytest.importorskip("hypothesis")
given = hypothesis.given
st = hypothesis.strategies

from astroevents.constants import ARCSEC_TO_RAD, DEG_TO_RAD, J2000
from astroevents.core.angles import signed_delta_radians
from astroevents.core.errors import InvalidConfigurationError
from astroevents.core.time import midnight_jd
from astroevents.events.results import (
    ASTRONOMICAL,
    CIVIL,
    HORIZON,
    HORIZON_34ARCMIN,
    NAUTICAL,
    AlwaysBelowHorizon,
    Circumpolar,
    Found,
    TwilightDefinition,
)
from astroevents.events.rise_set import horizon_depression, hour_angle, rise_set_transit, twilight_elevation
from astroevents.events.search import SearchMode
from astroevents.providers import Body, Observer, StaticStarProvider
from astroevents.providers.sidereal import greenwich_mean_sidereal_time
from astroevents.reduction.stars import StarRecord

EQUATOR = Observer(0.0, 0.0)
PHILADELPHIA = Observer(40.0, -75.0)


def _altitude(observer: Observer, ra: float, dec: float, jd: float) -> float:
    ha = greenwich_mean_sidereal_time(jd) + observer.longitude - ra
    lat = observer.latitude
    return math.asin(math.sin(lat) * math.sin(dec) + math.cos(lat) * math.cos(dec) * math.cos(ha))


def test_hour_angle_on_equator():
    assert hour_angle(0.0, 0.0, 0.0) == pytest.approx(math.pi / 2)


def test_hour_angle_special_cases():
    assert isinstance(hour_angle(80.0 * DEG_TO_RAD, 60.0 * DEG_TO_RAD, 0.0), Circumpolar)
    assert isinstance(hour_angle(80.0 * DEG_TO_RAD, -60.0 * DEG_TO_RAD, 0.0), AlwaysBelowHorizon)
    assert isinstance(hour_angle(math.pi / 2, 0.1, 0.0), (Circumpolar, AlwaysBelowHorizon))


@given(
    st.floats(-1.3, 1.3, allow_nan=False),
    st.floats(-1.3, 1.3, allow_nan=False),
    st.floats(-0.1, 0.1, allow_nan=False),
)
def test_hour_angle_satisfies_altitude_equation(lat: float, dec: float, h0: float) -> None:
    h = hour_angle(lat, dec, h0)
    if isinstance(h, float):
        assert 0.0 <= h <= math.pi
        altitude = math.sin(lat) * math.sin(dec) + math.cos(lat) * math.cos(dec) * math.cos(h)
        assert altitude == pytest.approx(math.sin(h0), abs=1e-9)


def test_horizon_depression():
    assert horizon_depression(EQUATOR) == 0.0
    high = Observer(0.0, 0.0, elevation_m=1000.0)
    expected = math.acos(math.sqrt(6378.1366 / 6379.1366))
    assert horizon_depression(high) == pytest.approx(expected, rel=1e-9)
    assert horizon_depression(high) == pytest.approx(0.01252, abs=1e-5)


def test_twilight_elevations():
    radius = 16.0 / 60.0 * DEG_TO_RAD
    assert twilight_elevation(ASTRONOMICAL, radius, EQUATOR) == pytest.approx(-18.0 * DEG_TO_RAD)
    assert twilight_elevation(NAUTICAL, radius, EQUATOR) == pytest.approx(-12.0 * DEG_TO_RAD)
    assert twilight_elevation(CIVIL, radius, EQUATOR) == pytest.approx(-6.0 * DEG_TO_RAD)
    assert twilight_elevation(HORIZON, radius, EQUATOR) == pytest.approx(-(16.0 + 32.67) / 60.0 * DEG_TO_RAD)
    assert twilight_elevation(HORIZON_34ARCMIN, radius, EQUATOR) == pytest.approx(-50.0 / 60.0 * DEG_TO_RAD)
    custom = TwilightDefinition.custom(1.0 * DEG_TO_RAD)
    assert twilight_elevation(custom, radius, EQUATOR) == pytest.approx(1.0 * DEG_TO_RAD - radius)
    bare = TwilightDefinition.custom(1.0 * DEG_TO_RAD, consider_angular_radius=False)
    assert twilight_elevation(bare, radius, EQUATOR) == pytest.approx(1.0 * DEG_TO_RAD)


def test_horizon_without_refraction_off_earth():
    mars_site = Observer(0.0, 0.0, mother_body=Body.MARS)
    assert twilight_elevation(HORIZON, 0.001, mars_site) == pytest.approx(-0.001)


def test_static_star_on_equator():
    provider = StaticStarProvider(StarRecord(0.0, 0.0))
    result = rise_set_transit(J2000, EQUATOR, Body.STAR, provider, twilight=TwilightDefinition.custom(0.0))
    assert isinstance(result.transit, Found)
    assert result.transit.jd > J2000
    assert abs(signed_delta_radians(greenwich_mean_sidereal_time(result.transit.jd))) < 3e-6
    assert result.transit_elevation == pytest.approx(math.pi / 2)
    rise_lst = greenwich_mean_sidereal_time(result.rise.jd)
    assert abs(signed_delta_radians(rise_lst + math.pi / 2)) < 3e-6
    set_lst = greenwich_mean_sidereal_time(result.set.jd)
    assert abs(signed_delta_radians(set_lst - math.pi / 2)) < 3e-6


def test_circumpolar_and_never_rising_stars():
    north = Observer(80.0, 0.0)
    polar = StaticStarProvider(StarRecord(0.0, 60.0 * DEG_TO_RAD))
    result = rise_set_transit(J2000, north, Body.STAR, polar)
    assert isinstance(result.rise, Circumpolar)
    assert isinstance(result.set, Circumpolar)
    assert isinstance(result.transit, Found)
    assert result.transit_elevation == pytest.approx(70.0 * DEG_TO_RAD, abs=1e-3)

    southern = StaticStarProvider(StarRecord(0.0, -60.0 * DEG_TO_RAD))
    hidden = rise_set_transit(J2000, north, Body.STAR, southern)
    assert isinstance(hidden.rise, AlwaysBelowHorizon)
    assert not hidden.set.found


def test_sunrise_altitude_matches_horizon_definition(sun_provider):
    jd = 2451624.0
    result = rise_set_transit(jd, PHILADELPHIA, Body.SUN, sun_provider)
    assert isinstance(result.rise, Found)
    assert jd < result.rise.jd < jd + 1.0
    state = sun_provider.position(result.rise.jd, Body.SUN)
    h0 = -state.angular_radius - 32.67 / 60.0 * DEG_TO_RAD
    assert _altitude(PHILADELPHIA, state.ra, state.dec, result.rise.jd) == pytest.approx(h0, abs=2e-4)
    sunset = sun_provider.position(result.set.jd, Body.SUN)
    assert _altitude(PHILADELPHIA, sunset.ra, sunset.dec, result.set.jd) == pytest.approx(h0, abs=2e-4)
    # near the equinox the day lasts about twelve hours
    day = (result.set.jd - result.rise.jd) % 1.0
    assert day == pytest.approx(0.505, abs=0.01)


def test_current_day_events(sun_provider):
    local_noon = 2451624.2083
    result = rise_set_transit(local_noon, PHILADELPHIA, Body.SUN, sun_provider, mode=SearchMode.CURRENT)
    day = midnight_jd(local_noon - 75.0 / 360.0)
    for event in (result.rise, result.transit, result.set):
        assert isinstance(event, Found)
        assert midnight_jd(event.jd - 75.0 / 360.0) == day
    assert result.rise.jd < result.transit.jd < result.set.jd


def test_previous_and_closest_modes(sun_provider):
    jd = 2451624.0
    previous = rise_set_transit(jd, PHILADELPHIA, Body.SUN, sun_provider, mode=SearchMode.PREVIOUS)
    for event in (previous.rise, previous.transit, previous.set):
        assert event.found and event.jd < jd
    closest = rise_set_transit(jd, PHILADELPHIA, Body.SUN, sun_provider, mode=SearchMode.CLOSEST)
    for event in (closest.rise, closest.transit, closest.set):
        assert abs(event.jd - jd) <= 0.51


def test_twilight_ends_after_sunset(sun_provider):
    jd = 2451624.0
    sunset = rise_set_transit(jd, PHILADELPHIA, Body.SUN, sun_provider).set
    dusk = rise_set_transit(jd, PHILADELPHIA, Body.SUN, sun_provider, twilight=CIVIL).set
    assert 0.0 < dusk.jd - sunset.jd < 1.0 / 24.0


def test_invalid_twilight_rejected(sun_provider):
    with pytest.raises(InvalidConfigurationError):
        rise_set_transit(J2000, EQUATOR, Body.SUN, sun_provider, twilight="civil")


def test_sun_semidiameter_from_test_provider(sun_provider):
    state = sun_provider.position(J2000, Body.SUN)
    assert state.angular_radius / ARCSEC_TO_RAD == pytest.approx(975.9, abs=1.0)
