from __future__ import annotations

import math

import pytest

from astroevents.constants import ARCSEC_TO_RAD, B1950, DEG_TO_RAD, J2000, TROPICAL_YEAR
from astroevents.core.errors import InvalidBodyError, InvalidConfigurationError
from astroevents.core.vectors import rectangular_to_spherical, spherical_to_rectangular
from astroevents.providers import Body, StaticStarProvider
from astroevents.reduction.frames import Frame
from astroevents.reduction.precession import precess
from astroevents.reduction.stars import (
    StarRecord,
    fk4_b1950_to_fk5_j2000,
    fk4_bxxxx_to_fk5_jxxxx,
    fk4_to_fk5,
    fk5_j2000_to_fk4_b1950,
    fk5_jxxxx_to_fk4_bxxxx,
    fk5_to_fk4,
    transform_star,
)

MAS_PER_YEAR = ARCSEC_TO_RAD / 1000.0
JD_2050 = J2000 + 50.0 * 365.25

NEARBY = StarRecord(
    ra=1.0,
    dec=0.5,
    pm_ra=150.0 * MAS_PER_YEAR,
    pm_dec=-80.0 * MAS_PER_YEAR,
    parallax_mas=120.0,
    radial_velocity_kms=-25.0,
    frame=Frame.FK4,
    equinox_jd=B1950,
    name="nearby",
)


def test_distance_unknown_flag():
    assert StarRecord(0.0, 0.0).distance_unknown
    assert not NEARBY.distance_unknown


def test_fk4_fk5_round_trip_for_star_with_space_motion():
    fk5 = fk4_to_fk5(NEARBY)
    assert fk5.frame is Frame.FK5
    assert fk5.equinox_jd == J2000
    assert fk5.name == "nearby"
    back = fk5_to_fk4(fk5)
    assert back.frame is Frame.FK4
    assert back.ra == pytest.approx(NEARBY.ra, abs=1e-6)
    assert back.dec == pytest.approx(NEARBY.dec, abs=1e-6)
    assert back.pm_ra == pytest.approx(NEARBY.pm_ra, abs=1e-10)
    assert back.pm_dec == pytest.approx(NEARBY.pm_dec, abs=1e-10)
    assert back.parallax_mas == pytest.approx(NEARBY.parallax_mas, rel=1e-6)
    assert back.radial_velocity_kms == pytest.approx(NEARBY.radial_velocity_kms, abs=0.01)


def test_conversions_reject_wrong_frame():
    with pytest.raises(InvalidConfigurationError):
        fk4_to_fk5(StarRecord(0.0, 0.0, frame=Frame.FK5))
    with pytest.raises(InvalidConfigurationError):
        fk5_to_fk4(StarRecord(0.0, 0.0, frame=Frame.FK4, equinox_jd=B1950))


def test_unknown_distance_star_has_no_proper_motion_after_conversion():
    star = StarRecord(2.0, -0.3, frame=Frame.FK4, equinox_jd=B1950)
    fk5 = fk4_to_fk5(star)
    assert fk5.pm_ra == 0.0
    assert fk5.pm_dec == 0.0
    assert fk5.parallax_mas == 0.0
    assert fk5_to_fk4(fk5).pm_ra == 0.0


def test_static_vector_helpers_keep_radius():
    v = spherical_to_rectangular(0.0, 0.0, 4.0)
    fk5 = fk4_b1950_to_fk5_j2000(v)
    ra, _, radius = rectangular_to_spherical(fk5)
    assert radius == pytest.approx(4.0)
    assert 0.63 * DEG_TO_RAD < ra < 0.65 * DEG_TO_RAD
    back = fk5_j2000_to_fk4_b1950(fk5)
    assert back == pytest.approx(v, abs=2e-5)


def test_equinox_aware_fk_conversions_pivot_through_standard_equinoxes():
    v = spherical_to_rectangular(1.2, 0.2)
    fk5 = fk4_bxxxx_to_fk5_jxxxx(v, J2000, B1950)
    assert fk5 == pytest.approx(fk4_b1950_to_fk5_j2000(v), abs=1e-12)
    fk4 = fk5_jxxxx_to_fk4_bxxxx(fk5, J2000, B1950)
    assert fk4 == pytest.approx(fk5_j2000_to_fk4_b1950(fk5), abs=1e-12)


def test_non_b1950_fk4_equinox_is_accepted():
    star = StarRecord(1.2, 0.2, frame=Frame.FK4, equinox_jd=B1950 - 25.0 * 365.2422)
    fk5 = fk4_to_fk5(star)
    at_b1950 = fk4_to_fk5(StarRecord(1.2, 0.2, frame=Frame.FK4, equinox_jd=B1950))
    # a quarter century of precession separates the two inputs
    assert abs(fk5.ra - at_b1950.ra) > 1e-4


def test_transform_star_identity():
    star = StarRecord(1.0, 0.3, pm_ra=1e-8)
    assert transform_star(star, Frame.FK5, J2000, J2000) is star


def test_transform_star_applies_proper_motion():
    star = StarRecord(0.0, 0.0, pm_dec=ARCSEC_TO_RAD)
    moved = transform_star(star, Frame.FK5, J2000 + 36525.0, J2000)
    assert moved.dec / ARCSEC_TO_RAD == pytest.approx(100.0, abs=1e-3)
    assert moved.pm_dec == pytest.approx(ARCSEC_TO_RAD, rel=1e-6)
    assert moved.equinox_jd == J2000


def test_transform_star_static_star_does_not_move_with_epoch():
    star = StarRecord(2.0, -0.4)
    moved = transform_star(star, Frame.FK5, JD_2050, J2000)
    assert moved.ra == pytest.approx(star.ra, abs=1e-14)
    assert moved.dec == pytest.approx(star.dec, abs=1e-14)


def test_transform_star_new_equinox_matches_precession():
    star = StarRecord(2.0, -0.4)
    moved = transform_star(star, Frame.FK5, J2000, JD_2050)
    expected = precess(J2000, JD_2050, spherical_to_rectangular(2.0, -0.4))
    ra, dec, _ = rectangular_to_spherical(expected)
    assert moved.ra == pytest.approx(ra, abs=1e-12)
    assert moved.dec == pytest.approx(dec, abs=1e-12)
    assert moved.equinox_jd == JD_2050


def test_transform_star_to_fk4_b1950():
    star = fk4_to_fk5(NEARBY)
    fk4 = transform_star(star, Frame.FK4, J2000, B1950)
    assert fk4.frame is Frame.FK4
    assert fk4.equinox_jd == B1950
    assert fk4.ra == pytest.approx(NEARBY.ra, abs=1e-6)



def test_transform_star_to_fk4_other_equinox_links_at_j2000():
    b1975 = B1950 + 25.0 * TROPICAL_YEAR
    star = StarRecord(2.0, -0.4)
    fk4 = transform_star(star, Frame.FK4, J2000, b1975)
    expected = fk5_jxxxx_to_fk4_bxxxx(spherical_to_rectangular(2.0, -0.4), J2000, b1975)
    ra, dec, _ = rectangular_to_spherical(expected)
    assert fk4.frame is Frame.FK4
    assert fk4.equinox_jd == b1975
    assert fk4.ra == pytest.approx(ra, abs=1e-12)
    assert fk4.dec == pytest.approx(dec, abs=1e-12)
    at_b1950 = transform_star(star, Frame.FK4, J2000, B1950)
    # a quarter century of precession, not a second frame link
    assert 0.2 < abs(fk4.ra - at_b1950.ra) / DEG_TO_RAD < 0.5


def test_static_star_provider():
    star = StarRecord(1.0, 0.3, name="fixed")
    provider = StaticStarProvider(star)
    state = provider.position(J2000, Body.STAR)
    assert state.static
    assert math.isinf(state.distance)
    assert state.ra == pytest.approx(1.0, abs=1e-14)
    assert state.dec == pytest.approx(0.3, abs=1e-14)
    later = provider.position(JD_2050)
    assert later.ra > state.ra
    with pytest.raises(InvalidBodyError):
        provider.position(J2000, Body.SUN)
