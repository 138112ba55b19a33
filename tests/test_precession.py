from __future__ import annotations

import math

import pytest

from astroevents.constants import ARCSEC_TO_RAD, B1950, DEG_TO_RAD, J2000, RAD_TO_DEG
from astroevents.core.diagnostics import WarningLog
from astroevents.core.errors import EpochPivotError, UnsupportedMethodError
from astroevents.core.vectors import norm, rectangular_to_spherical, spherical_to_rectangular
from astroevents.reduction.methods import ReductionConfig, ReductionMethod
from astroevents.reduction.precession import (
    classical_precession_angles,
    iau_precession_angles,
    precess,
    precess_direct,
    precess_elementary,
    precess_from_j2000,
    precess_pos_vel_ecliptic,
    precess_pos_vel_equatorial,
    precess_to_j2000,
    precession_angles,
    precession_iau1976,
    precession_matrix,
    precession_newcomb,
)

# theta Persei at J2000 with proper motion applied to 2028 Nov 13.19 TD
THETA_PERSEI = spherical_to_rectangular(41.054063 * DEG_TO_RAD, 49.227750 * DEG_TO_RAD)
JD_2028 = 2462088.69

ALL_METHODS = list(ReductionMethod)


def _separation(a, b) -> float:
    ua = tuple(c / norm(a) for c in a)
    ub = tuple(c / norm(b) for c in b)
    dot = sum(x * y for x, y in zip(ua, ub))
    return math.acos(max(-1.0, min(1.0, dot)))


def test_lieske_precession_reproduces_reference_position():
    ra, dec, _ = rectangular_to_spherical(precession_iau1976(J2000, JD_2028, THETA_PERSEI))
    assert ra * RAD_TO_DEG == pytest.approx(41.547214, abs=2e-5)
    assert dec * RAD_TO_DEG == pytest.approx(49.348483, abs=2e-5)


def test_iau1976_config_uses_lieske_matrix():
    direct = precession_iau1976(J2000, JD_2028, THETA_PERSEI)
    via_config = precess(J2000, JD_2028, THETA_PERSEI, ReductionConfig(ReductionMethod.IAU1976))
    assert via_config == pytest.approx(direct, abs=1e-14)


@pytest.mark.parametrize("t_centuries", [-0.5, -0.1, 0.3, 0.5])
def test_elementary_iau1976_agrees_with_lieske(t_centuries: float) -> None:
    jd = J2000 + t_centuries * 36525.0
    lieske = precession_iau1976(J2000, jd, THETA_PERSEI)
    elementary = precess_elementary(J2000, jd, THETA_PERSEI)
    assert _separation(lieske, elementary) < 1.0 * ARCSEC_TO_RAD


@pytest.mark.parametrize(
    "method",
    [m for m in ALL_METHODS if m is not ReductionMethod.IAU1976],
)
def test_models_agree_with_iau2006_over_a_few_decades(method: ReductionMethod) -> None:
    reference = precess_from_j2000(JD_2028, THETA_PERSEI, ReductionConfig(ReductionMethod.IAU2006))
    other = precess_from_j2000(JD_2028, THETA_PERSEI, ReductionConfig(method))
    assert _separation(reference, other) < 1.0 * ARCSEC_TO_RAD


@pytest.mark.parametrize("method", ALL_METHODS)
def test_round_trip_through_j2000_is_identity(method: ReductionMethod) -> None:
    config = ReductionConfig(method)
    moved = precess_from_j2000(JD_2028, THETA_PERSEI, config)
    back = precess_to_j2000(JD_2028, moved, config)
    assert back == pytest.approx(THETA_PERSEI, abs=1e-12)
    assert norm(moved) == pytest.approx(1.0, abs=1e-12)


def test_vondrak_round_trip_far_from_j2000():
    config = ReductionConfig(ReductionMethod.IAU2006, vondrak=True)
    jd = J2000 - 500.0 * 36525.0
    moved = precess_from_j2000(jd, THETA_PERSEI, config)
    assert precess_to_j2000(jd, moved, config) == pytest.approx(THETA_PERSEI, abs=1e-10)


def test_precess_between_two_non_j2000_equinoxes():
    config = ReductionConfig()
    direct = precess(B1950, JD_2028, THETA_PERSEI, config)
    stepwise = precess_from_j2000(JD_2028, precess_to_j2000(B1950, THETA_PERSEI, config), config)
    assert direct == pytest.approx(stepwise, abs=1e-15)
    assert precess(JD_2028, JD_2028, THETA_PERSEI) == THETA_PERSEI


def test_direct_precession_requires_j2000_pivot():
    with pytest.raises(EpochPivotError):
        precess_direct(B1950, JD_2028, THETA_PERSEI)
    with pytest.raises(EpochPivotError):
        precession_iau1976(B1950, JD_2028, THETA_PERSEI)


def test_precession_matrix_is_orthonormal():
    for method in ALL_METHODS:
        m = precession_matrix(JD_2028, ReductionConfig(method))
        for i in range(3):
            for j in range(3):
                value = sum(m[i][k] * m[j][k] for k in range(3))
                assert value == pytest.approx(1.0 if i == j else 0.0, abs=1e-12)


def test_precession_matrix_matches_vector_route():
    config = ReductionConfig(ReductionMethod.SIMON1994)
    m = precession_matrix(JD_2028, config)
    by_matrix = tuple(sum(m[i][k] * THETA_PERSEI[k] for k in range(3)) for i in range(3))
    assert by_matrix == pytest.approx(precess_from_j2000(JD_2028, THETA_PERSEI, config), abs=1e-14)


def test_iau_angles_at_j2000():
    psi, omega, chi, eps0 = iau_precession_angles(False, J2000, ReductionConfig())
    assert psi == 0.0
    assert chi == 0.0
    assert omega == pytest.approx(84381.406 * ARCSEC_TO_RAD)
    assert eps0 == pytest.approx(84381.406 * ARCSEC_TO_RAD)


def test_iau_angles_reverse_sign_of_time():
    config = ReductionConfig(ReductionMethod.IAU2006)
    forward = iau_precession_angles(False, JD_2028, config)
    backward = iau_precession_angles(True, JD_2028, config)
    assert forward[0] > 0.0 > backward[0]


def test_angle_families_are_method_specific():
    with pytest.raises(UnsupportedMethodError):
        iau_precession_angles(False, JD_2028, ReductionConfig(ReductionMethod.LASKAR1986))
    with pytest.raises(UnsupportedMethodError):
        classical_precession_angles(False, JD_2028, ReductionConfig(ReductionMethod.IAU2000))
    assert len(precession_angles(False, JD_2028, ReductionConfig(ReductionMethod.IAU2009))) == 4
    assert len(precession_angles(False, JD_2028, ReductionConfig(ReductionMethod.WILLIAMS1994))) == 3


def test_general_precession_rate():
    pa, _, _ = classical_precession_angles(False, J2000 + 36525.0, ReductionConfig(ReductionMethod.WILLIAMS1994))
    assert pa / ARCSEC_TO_RAD == pytest.approx(5029.875, abs=0.01)


def test_classical_z_flips_when_going_to_j2000():
    config = ReductionConfig(ReductionMethod.LASKAR1986)
    _, w1, z1 = classical_precession_angles(False, JD_2028, config)
    _, w2, z2 = classical_precession_angles(True, JD_2028, config)
    assert w1 == w2
    assert z1 == -z2


def test_range_warning_far_from_j2000():
    warnings = WarningLog()
    precess_from_j2000(J2000 + 150.0 * 36525.0, THETA_PERSEI, warnings=warnings)
    assert len(warnings) >= 1
    assert "extrapolated" in warnings.messages()[0]


def test_pos_vel_precession_keeps_six_components():
    vel = (1e-6, -2e-6, 3e-7)
    moved = precess_pos_vel_equatorial(J2000, JD_2028, THETA_PERSEI + vel)
    assert len(moved) == 6
    assert norm(moved[3:]) == pytest.approx(norm(vel), rel=1e-9)
    ecliptic = precess_pos_vel_ecliptic(J2000, JD_2028, THETA_PERSEI + vel)
    assert len(ecliptic) == 6
    assert norm(ecliptic[:3]) == pytest.approx(1.0, abs=1e-12)


def test_newcomb_precession_preserves_radius_and_inverts():
    v = spherical_to_rectangular(1.0, 0.4, 3.0)
    moved = precession_newcomb(B1950, J2000, v)
    assert norm(moved) == pytest.approx(3.0)
    back = precession_newcomb(J2000, B1950, moved)
    assert _separation(back, v) < 1e-7
    ra, _, _ = rectangular_to_spherical(moved)
    # about 0.7 degrees of general precession over half a century
    assert 0.3 * DEG_TO_RAD < ra - 1.0 < 1.2 * DEG_TO_RAD
