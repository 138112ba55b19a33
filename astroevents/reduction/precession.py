"""Precession of rectangular equatorial vectors between equinoxes.

Every routine here is a pure function of its arguments.  The closed-form
models (IAU 2000, IAU 2006/2009, Vondrák 2011 and Lieske's IAU 1976
angles) are defined relative to J2000, so they only go *from* or *to*
J2000.  :func:`precess` pivots through J2000 to connect two arbitrary
equinoxes.

The classical models (Williams 1994, JPL DE4xx, Simon 1994, Laskar 1986)
describe the motion of the ecliptic instead; they are applied as five
elementary rotations (:func:`precess_elementary`).  The same route also
accepts IAU 1976 tables so the Lieske matrix can be cross-checked.

Rotation matrices built by :func:`precession_matrix` map J2000 to the
equinox of date.  Going the other way uses the transpose, which keeps
``precess_from_j2000(jd, precess_to_j2000(jd, v))`` the identity.
"""

from __future__ import annotations

import logging
import math
from typing import Final, Sequence

from ..constants import (
    ARCSEC_TO_RAD,
    B1950,
    DAYS_PER_JULIAN_CENTURY,
    J2000,
    TROPICAL_YEAR,
)
from ..core.angles import normalize_radians
from ..core.diagnostics import WarningLog, emit_range_warning
from ..core.errors import EpochPivotError, UnsupportedMethodError
from ..core.time import to_centuries
from ..core.vectors import (
    Matrix3,
    Vector,
    apply_matrix,
    apply_matrix_transposed,
    rectangular_to_spherical,
    rotate_x,
    spherical_to_rectangular,
    truncate3,
)
from .methods import IAU_CLOSED_FORM, ReductionConfig, ReductionMethod
from .obliquity import (
    POLYNOMIAL_VALIDITY_CENTURIES,
    VONDRAK_VALIDITY_CENTURIES,
    mean_obliquity,
)

__all__ = [
    "classical_precession_angles",
    "ecliptic_to_equatorial",
    "equatorial_to_ecliptic",
    "iau_precession_angles",
    "precess",
    "precess_direct",
    "precess_elementary",
    "precess_from_j2000",
    "precess_pos_vel_ecliptic",
    "precess_pos_vel_equatorial",
    "precess_to_j2000",
    "precession_angles",
    "precession_iau1976",
    "precession_matrix",
    "precession_newcomb",
]

LOG = logging.getLogger(__name__)

# -------------------- Classical ecliptic tables --------------------
# Horner order (highest power first), T in thousands of Julian years.
# pA in arcsec (multiplied by T afterwards), W and z in radians.

_PA_WILLIAMS = (-8.66e-10, -4.759e-8, 2.424e-7, 1.3095e-5, 1.7451e-4, -1.8055e-3, -0.235316, 0.076, 110.5407, 50287.70000)
_PA_JPL = (-8.66e-10, -4.759e-8, 2.424e-7, 1.3095e-5, 1.7451e-4, -1.8055e-3, -0.235316, 0.076, 110.5414, 50287.91959)
_PA_SIMON = (-8.66e-10, -4.759e-8, 2.424e-7, 1.3095e-5, 1.7451e-4, -1.8055e-3, -0.235316, 0.07732, 111.2022, 50288.200)
_PA_LASKAR = (-8.66e-10, -4.759e-8, 2.424e-7, 1.3095e-5, 1.7451e-4, -1.8055e-3, -0.235316, 0.07732, 111.1971, 50290.966)
_PA_IAU1976 = (0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, -0.006, 111.113, 50290.966)

_W_WILLIAMS = (6.6402e-16, -2.69151e-15, -1.547021e-12, 7.521313e-12, 1.9e-10, -3.54e-9, -1.8103e-7, 1.26e-7, 7.436169e-5, -0.04207794833, 3.052115282424)
_W_SIMON = (6.6402e-16, -2.69151e-15, -1.547021e-12, 7.521313e-12, 1.9e-10, -3.54e-9, -1.8103e-7, 2.579e-8, 7.4379679e-5, -0.0420782900, 3.0521126906)
_W_LASKAR = (6.6402e-16, -2.69151e-15, -1.547021e-12, 7.521313e-12, 6.3190131e-10, -3.48388152e-9, -1.813065896e-7, 2.75036225e-8, 7.4394531426e-5, -0.042078604317, 3.052112654975)

_Z_WILLIAMS = (1.2147e-16, 7.3759e-17, -8.26287e-14, 2.503410e-13, 2.4650839e-11, -5.4000441e-11, 1.32115526e-9, -6.012e-7, -1.62442e-5, 0.00227850649, 0.0)
_Z_SIMON = (1.2147e-16, 7.3759e-17, -8.26287e-14, 2.503410e-13, 2.4650839e-11, -5.4000441e-11, 1.32115526e-9, -5.99908e-7, -1.624383e-5, 0.002278492868, 0.0)
_Z_LASKAR = (1.2147e-16, 7.3759e-17, -8.26287e-14, 2.503410e-13, 2.4650839e-11, -5.4000441e-11, 1.32115526e-9, -5.998737027e-7, -1.6242797091e-5, 0.002278495537, 0.0)

_CLASSICAL_TABLES: Final[dict[ReductionMethod, tuple[tuple[float, ...], tuple[float, ...], tuple[float, ...]]]] = {
    ReductionMethod.WILLIAMS1994: (_PA_WILLIAMS, _W_WILLIAMS, _Z_WILLIAMS),
    ReductionMethod.JPL_DE4XX: (_PA_JPL, _W_WILLIAMS, _Z_WILLIAMS),
    ReductionMethod.SIMON1994: (_PA_SIMON, _W_SIMON, _Z_SIMON),
    ReductionMethod.LASKAR1986: (_PA_LASKAR, _W_LASKAR, _Z_LASKAR),
    ReductionMethod.IAU1976: (_PA_IAU1976, _W_LASKAR, _Z_LASKAR),
}

# -------------------- Vondrák et al. 2011 --------------------

_VONDRAK_POLY: Final = (
    (8473.343527, 5042.7980307, -0.00740913, 289e-9),
    (84283.175915, -0.4436568, 0.00000146, 151e-9),
    (-19.657270, 0.0790159, 0.00001472, -61e-9),
)
# (period, C_psi, C_omega, S_psi, S_omega)
_VONDRAK_PSI_OMEGA: Final = (
    (402.90, -22206.325946, 1267.727824, -3243.236469, -8571.476251),
    (256.75, 12236.649447, 1702.324248, -3969.723769, 5309.796459),
    (292.00, -1589.008343, -2970.553839, 7099.207893, -610.393953),
    (537.22, 2482.103195, 693.790312, -1903.696711, 923.201931),
    (241.45, 150.322920, -14.724451, 146.435014, 3.759055),
    (375.22, -13.632066, -516.649401, 1300.630106, -40.691114),
    (157.87, 389.437420, -356.794454, 1727.498039, 80.437484),
    (274.20, 2031.433792, -129.552058, 299.854055, 807.300668),
    (203.00, 363.748303, 256.129314, -1217.125982, 83.712326),
    (440.00, -896.747562, 190.266114, -471.367487, -368.654854),
    (170.72, -926.995700, 95.103991, -441.682145, -191.881064),
    (713.37, 37.070667, -332.907067, -86.169171, -4.263770),
    (313.00, -597.682468, 131.337633, -308.320429, -270.353691),
    (128.38, 66.282812, 82.731919, -422.815629, 11.602861),
)
# (period, C_chi, S_chi)
_VONDRAK_CHI: Final = (
    (402.90, -13765.924050, -2206.967126),
    (256.75, 13511.858383, -4186.752711),
    (292.00, -1455.229106, 6737.949677),
    (537.22, 1054.394467, -856.922846),
    (375.22, -112.300144, 957.149088),
    (157.87, 202.769908, 1709.440735),
    (274.20, 1936.050095, 154.425505),
    (202.00, 327.517465, -1049.071786),
    (440.00, -655.484214, -243.520976),
    (170.72, -891.898637, -406.539008),
    (315.00, -494.780332, -301.504189),
    (136.32, 585.492621, 41.348740),
    (128.38, -333.322021, -446.656435),
    (490.00, 110.512834, 142.525186),
)

_EPS0_IAU2000_ARCSEC: Final[float] = 84381.448
_EPS0_IAU2006_ARCSEC: Final[float] = 84381.406


def _horner(coeffs: Sequence[float], x: float) -> float:
    value = coeffs[0]
    for coeff in coeffs[1:]:
        value = value * x + coeff
    return value


def _check_range(t: float, config: ReductionConfig, warnings: WarningLog | None) -> None:
    limit = VONDRAK_VALIDITY_CENTURIES if config.uses_vondrak else POLYNOMIAL_VALIDITY_CENTURIES
    if abs(t) > limit:
        emit_range_warning(
            __name__,
            f"Date is too far from J2000 for {config.method.value} precession; result is extrapolated.",
            t,
            warnings,
        )


# -------------------- Angle accessors --------------------


def _iau2000_angles(t: float, t0: float) -> tuple[float, float, float, float]:
    psi = ((-0.001147 * t - 1.07259) * t + 5038.7784) * t - 0.29965 * t0
    omega = (-0.007726 * t + 0.05127) * t * t + _EPS0_IAU2000_ARCSEC - 0.02524 * t0
    chi = ((-0.001125 * t - 2.38064) * t + 10.5526) * t
    return (
        psi * ARCSEC_TO_RAD,
        omega * ARCSEC_TO_RAD,
        chi * ARCSEC_TO_RAD,
        _EPS0_IAU2000_ARCSEC * ARCSEC_TO_RAD,
    )


def _iau2006_angles(t: float) -> tuple[float, float, float, float]:
    psi = ((((-0.0000000951 * t + 0.000132851) * t - 0.00114045) * t - 1.0790069) * t + 5038.481507) * t
    omega = (
        (((0.0000003337 * t - 0.000000467) * t - 0.00772503) * t + 0.0512623) * t - 0.025754
    ) * t + _EPS0_IAU2006_ARCSEC
    chi = ((((-0.0000000560 * t + 0.000170663) * t - 0.00121197) * t - 2.3814292) * t + 10.556403) * t
    return (
        psi * ARCSEC_TO_RAD,
        omega * ARCSEC_TO_RAD,
        chi * ARCSEC_TO_RAD,
        _EPS0_IAU2006_ARCSEC * ARCSEC_TO_RAD,
    )


def _vondrak_angles(t: float) -> tuple[float, float, float, float]:
    w = 2.0 * math.pi * t
    psi = omega = chi = 0.0
    for period, c_psi, c_omega, s_psi, s_omega in _VONDRAK_PSI_OMEGA:
        a = w / period
        c, s = math.cos(a), math.sin(a)
        psi += c * c_psi + s * s_psi
        omega += c * c_omega + s * s_omega
    for period, c_chi, s_chi in _VONDRAK_CHI:
        a = w / period
        chi += math.cos(a) * c_chi + math.sin(a) * s_chi
    power = 1.0
    for j in range(4):
        psi += _VONDRAK_POLY[0][j] * power
        omega += _VONDRAK_POLY[1][j] * power
        chi += _VONDRAK_POLY[2][j] * power
        power *= t
    return (
        psi * ARCSEC_TO_RAD,
        omega * ARCSEC_TO_RAD,
        chi * ARCSEC_TO_RAD,
        _EPS0_IAU2006_ARCSEC * ARCSEC_TO_RAD,
    )


def iau_precession_angles(
    to_j2000: bool, jd: float, config: ReductionConfig
) -> tuple[float, float, float, float]:
    """Return ``(psi_A, omega_A, chi_A, eps_0)`` in radians for the IAU models.

    ``to_j2000`` reverses the sign of the time argument.  For IAU 2000 the
    precession-rate corrections only apply on the ``J2000 -> jd`` side, so
    the two directions are not exact inverses of each other; use
    :func:`precess_to_j2000` when a reversible transform is needed.

    Raises
    ------
    UnsupportedMethodError
        For classical methods, which use :func:`classical_precession_angles`.
    """

    if config.method not in IAU_CLOSED_FORM:
        raise UnsupportedMethodError(
            f"{config.method.value} has no equatorial precession angles; "
            "use classical_precession_angles instead"
        )
    t = to_centuries(jd)
    if to_j2000:
        t = -t
    if config.method is ReductionMethod.IAU2000:
        t0 = 0.0 if to_j2000 else to_centuries(jd)
        return _iau2000_angles(t, t0)
    if config.uses_vondrak:
        psi, omega, chi, eps0 = _vondrak_angles(t)
        return (
            normalize_radians(psi),
            normalize_radians(omega),
            normalize_radians(chi),
            eps0,
        )
    return _iau2006_angles(t)


def classical_precession_angles(
    to_j2000: bool, jd: float, config: ReductionConfig
) -> tuple[float, float, float]:
    """Return ``(pA, W, z)`` in radians for the ecliptic-based models.

    ``pA`` is the general precession in longitude, ``W`` the node of the
    moving ecliptic on the J2000 ecliptic and ``z`` its inclination.
    ``z`` flips sign when ``to_j2000`` is true.
    """

    tables = _CLASSICAL_TABLES.get(config.method)
    if tables is None:
        raise UnsupportedMethodError(
            f"{config.method.value} has no ecliptic precession tables; "
            "use iau_precession_angles instead"
        )
    pa_table, w_table, z_table = tables
    t = to_centuries(jd) / 10.0
    pa = _horner(pa_table, t) * ARCSEC_TO_RAD * t
    w = _horner(w_table, t)
    z = _horner(z_table, t)
    if to_j2000:
        z = -z
    return pa, w, z


def precession_angles(
    to_j2000: bool, jd: float, config: ReductionConfig | None = None
) -> tuple[float, ...]:
    """Return the precession angles the configured method is built on.

    Four equatorial angles for IAU 2000/2006/2009, three ecliptic angles
    for the classical methods (IAU 1976 included).
    """

    config = config or ReductionConfig()
    if config.method in IAU_CLOSED_FORM:
        return iau_precession_angles(to_j2000, jd, config)
    return classical_precession_angles(to_j2000, jd, config)


# -------------------- Closed-form matrices --------------------


def _equatorial_matrix(psi: float, omega: float, chi: float, eps0: float) -> Matrix3:
    # R3(chi_A) R1(-omega_A) R3(-psi_A) R1(eps_0)
    sa, ca = math.sin(eps0), math.cos(eps0)
    sb, cb = math.sin(-psi), math.cos(-psi)
    sc, cc = math.sin(-omega), math.cos(-omega)
    sd, cd = math.sin(chi), math.cos(chi)
    xx = cd * cb - sb * sd * cc
    yx = cd * sb * ca + sd * cc * cb * ca - sa * sd * sc
    zx = cd * sb * sa + sd * cc * cb * sa + ca * sd * sc
    xy = -sd * cb - sb * cd * cc
    yy = -sd * sb * ca + cd * cc * cb * ca - sa * cd * sc
    zy = -sd * sb * sa + cd * cc * cb * sa + ca * cd * sc
    xz = sb * sc
    yz = -sc * cb * ca - sa * cc
    zz = -sc * cb * sa + cc * ca
    return ((xx, yx, zx), (xy, yy, zy), (xz, yz, zz))


def _lieske_matrix(t: float) -> Matrix3:
    zeta = (2306.2181 * t + 0.30188 * t * t + 0.017998 * t**3) * ARCSEC_TO_RAD
    z = (2306.2181 * t + 1.09468 * t * t + 0.018203 * t**3) * ARCSEC_TO_RAD
    theta = (2004.3109 * t - 0.42665 * t * t - 0.041833 * t**3) * ARCSEC_TO_RAD
    sinth, costh = math.sin(theta), math.cos(theta)
    sin_zeta, cos_zeta = math.sin(zeta), math.cos(zeta)
    sinz, cosz = math.sin(z), math.cos(z)
    a = cos_zeta * costh
    b = sin_zeta * costh
    return (
        (a * cosz - sin_zeta * sinz, -(b * cosz + cos_zeta * sinz), -sinth * cosz),
        (a * sinz + sin_zeta * cosz, -(b * sinz - cos_zeta * cosz), -sinth * sinz),
        (cos_zeta * sinth, -sin_zeta * sinth, costh),
    )


def _closed_form_matrix(jd: float, config: ReductionConfig) -> Matrix3:
    t = to_centuries(jd)
    method = config.method
    if method is ReductionMethod.IAU2000:
        return _equatorial_matrix(*_iau2000_angles(t, t))
    if method in IAU_CLOSED_FORM:
        angles = _vondrak_angles(t) if config.uses_vondrak else _iau2006_angles(t)
        return _equatorial_matrix(*angles)
    if method is ReductionMethod.IAU1976:
        return _lieske_matrix(t)
    raise UnsupportedMethodError(f"{method.value} has no closed-form precession matrix")


def precession_matrix(jd: float, config: ReductionConfig | None = None) -> Matrix3:
    """Return the rotation matrix taking J2000 vectors to the mean equinox of ``jd``.

    Classical methods are supported by sampling the elementary rotation
    route on the unit vectors.
    """

    config = config or ReductionConfig()
    if jd == J2000:
        return ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))
    if config.method in IAU_CLOSED_FORM or config.method is ReductionMethod.IAU1976:
        return _closed_form_matrix(jd, config)
    columns = [
        _elementary_from_j2000(jd, basis, config, None)
        for basis in ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))
    ]
    return tuple(tuple(columns[j][i] for j in range(3)) for i in range(3))  # type: ignore[return-value]


# -------------------- Elementary rotations --------------------


def _frame_rotate_x(v: Vector, angle: float) -> Vector:
    c, s = math.cos(angle), math.sin(angle)
    return (v[0], c * v[1] + s * v[2], -s * v[1] + c * v[2])


def _frame_rotate_z(v: Vector, angle: float) -> Vector:
    c, s = math.cos(angle), math.sin(angle)
    return (c * v[0] + s * v[1], -s * v[0] + c * v[1], v[2])


def _elementary_config(config: ReductionConfig) -> ReductionConfig:
    if config.method not in _CLASSICAL_TABLES:
        raise UnsupportedMethodError(
            f"{config.method.value} cannot be applied as elementary ecliptic rotations"
        )
    return config


def _elementary_from_j2000(
    jd: float, v: Sequence[float], config: ReductionConfig, warnings: WarningLog | None
) -> Vector:
    pa, w, z = classical_precession_angles(False, jd, config)
    x = _frame_rotate_x(truncate3(v), mean_obliquity(0.0, config, warnings=warnings))
    x = _frame_rotate_z(x, w)
    x = _frame_rotate_x(x, z)
    x = _frame_rotate_z(x, -w - pa)
    return _frame_rotate_x(x, -mean_obliquity(to_centuries(jd), config, warnings=warnings))


def _elementary_to_j2000(
    jd: float, v: Sequence[float], config: ReductionConfig, warnings: WarningLog | None
) -> Vector:
    pa, w, z = classical_precession_angles(True, jd, config)
    x = _frame_rotate_x(truncate3(v), mean_obliquity(to_centuries(jd), config, warnings=warnings))
    x = _frame_rotate_z(x, w + pa)
    x = _frame_rotate_x(x, z)
    x = _frame_rotate_z(x, -w)
    return _frame_rotate_x(x, -mean_obliquity(0.0, config, warnings=warnings))


def precess_elementary(
    jd_from: float,
    jd_to: float,
    v: Sequence[float],
    config: ReductionConfig | None = None,
    *,
    warnings: WarningLog | None = None,
) -> Vector:
    """Precess ``v`` with the five-rotation ecliptic route.

    Any classical method is accepted, including IAU 1976.  Two non-J2000
    equinoxes are connected through J2000.
    """

    config = _elementary_config(config or ReductionConfig(ReductionMethod.IAU1976))
    vec = truncate3(v)
    if jd_from == jd_to:
        return vec
    if jd_from != J2000:
        vec = _elementary_to_j2000(jd_from, vec, config, warnings)
    if jd_to != J2000:
        vec = _elementary_from_j2000(jd_to, vec, config, warnings)
    return vec


# -------------------- Public precession API --------------------


def precess_direct(
    jd_from: float,
    jd_to: float,
    v: Sequence[float],
    config: ReductionConfig | None = None,
    *,
    warnings: WarningLog | None = None,
) -> Vector:
    """Precess between J2000 and another equinox.

    Raises
    ------
    EpochPivotError
        If neither ``jd_from`` nor ``jd_to`` is J2000.
    """

    config = config or ReductionConfig()
    if jd_from != J2000 and jd_to != J2000:
        raise EpochPivotError("Precession must be from or to J2000 epoch.")
    vec = truncate3(v)
    if jd_from == jd_to:
        return vec
    other = jd_to if jd_from == J2000 else jd_from
    _check_range(to_centuries(other), config, warnings)
    if config.method in IAU_CLOSED_FORM or config.method is ReductionMethod.IAU1976:
        matrix = _closed_form_matrix(other, config)
        if jd_from == J2000:
            return apply_matrix(matrix, vec)
        return apply_matrix_transposed(matrix, vec)
    if jd_from == J2000:
        return _elementary_from_j2000(jd_to, vec, config, warnings)
    return _elementary_to_j2000(jd_from, vec, config, warnings)


def precess_from_j2000(
    jd: float,
    v: Sequence[float],
    config: ReductionConfig | None = None,
    *,
    warnings: WarningLog | None = None,
) -> Vector:
    """Precess a J2000 equatorial vector to the mean equinox of ``jd``."""

    return precess_direct(J2000, jd, v, config, warnings=warnings)


def precess_to_j2000(
    jd: float,
    v: Sequence[float],
    config: ReductionConfig | None = None,
    *,
    warnings: WarningLog | None = None,
) -> Vector:
    """Precess an equatorial vector referred to ``jd`` back to J2000."""

    return precess_direct(jd, J2000, v, config, warnings=warnings)


def precess(
    jd_from: float,
    jd_to: float,
    v: Sequence[float],
    config: ReductionConfig | None = None,
    *,
    warnings: WarningLog | None = None,
) -> Vector:
    """Precess ``v`` from the equinox ``jd_from`` to ``jd_to`` through J2000."""

    if jd_from == jd_to:
        return truncate3(v)
    at_j2000 = precess_to_j2000(jd_from, v, config, warnings=warnings)
    return precess_from_j2000(jd_to, at_j2000, config, warnings=warnings)


def _split6(v: Sequence[float]) -> tuple[Vector, Vector]:
    pos = truncate3(v)
    vel = (float(v[3]), float(v[4]), float(v[5])) if len(v) >= 6 else (0.0, 0.0, 0.0)
    return pos, vel


def precess_pos_vel_equatorial(
    jd_from: float,
    jd_to: float,
    v: Sequence[float],
    config: ReductionConfig | None = None,
    *,
    warnings: WarningLog | None = None,
) -> Vector:
    """Precess an equatorial position and velocity; returns six components."""

    pos, vel = _split6(v)
    pos = precess(jd_from, jd_to, pos, config, warnings=warnings)
    if len(v) >= 6:
        vel = precess(jd_from, jd_to, vel, config, warnings=warnings)
    return pos + vel


def precess_pos_vel_ecliptic(
    jd_from: float,
    jd_to: float,
    v: Sequence[float],
    config: ReductionConfig | None = None,
    *,
    warnings: WarningLog | None = None,
) -> Vector:
    """Precess an ecliptic position and velocity from ``jd_from`` to ``jd_to``."""

    config = config or ReductionConfig()
    eps_from = mean_obliquity(to_centuries(jd_from), config, warnings=warnings)
    eq = ecliptic_to_equatorial(v, eps_from)
    eq = precess_pos_vel_equatorial(jd_from, jd_to, eq, config, warnings=warnings)
    eps_to = mean_obliquity(to_centuries(jd_to), config, warnings=warnings)
    return equatorial_to_ecliptic(eq, eps_to)


def ecliptic_to_equatorial(v: Sequence[float], obliquity: float) -> Vector:
    """Rotate ecliptic coordinates (3 or 6 components) to the equator."""

    pos, vel = _split6(v)
    out = rotate_x(pos, obliquity)
    if len(v) >= 6:
        out += rotate_x(vel, obliquity)
    return out


def equatorial_to_ecliptic(v: Sequence[float], obliquity: float) -> Vector:
    """Rotate equatorial coordinates (3 or 6 components) to the ecliptic."""

    return ecliptic_to_equatorial(v, -obliquity)


# -------------------- Legacy closed forms --------------------


def precession_iau1976(jd_from: float, jd_to: float, v: Sequence[float]) -> Vector:
    """Lieske (1977) precession between J2000 and another equinox."""

    if jd_from != J2000 and jd_to != J2000:
        raise EpochPivotError("Precession must be from or to J2000 epoch.")
    vec = truncate3(v)
    if jd_from == jd_to:
        return vec
    other = jd_to if jd_from == J2000 else jd_from
    matrix = _lieske_matrix(to_centuries(other))
    if jd_from == J2000:
        return apply_matrix(matrix, vec)
    return apply_matrix_transposed(matrix, vec)


def precession_newcomb(jd_from: float, jd_to: float, v: Sequence[float]) -> Vector:
    """Newcomb precession used for B1950-era FK4 catalogues.

    Time arguments are tropical millennia from B1950.  The radius of ``v`` is
    preserved.
    """

    t1 = (jd_from - B1950) / (1000.0 * TROPICAL_YEAR)
    t2 = (jd_to - B1950) / (1000.0 * TROPICAL_YEAR)
    tau = t2 - t1

    zeta1 = 23035.545 + 139.720 * t1 + 0.060 * t1 * t1
    zeta2 = 30.240 - 0.270 * t1
    z2 = 109.480 + 0.390 * t1
    theta1 = 20051.12 - 85.29 * t1 - 0.37 * t1 * t1
    theta2 = -42.65 - 0.37 * t1

    zeta = (zeta1 * tau + zeta2 * tau * tau + 17.995 * tau**3) * ARCSEC_TO_RAD
    z = (zeta1 * tau + z2 * tau * tau + 18.325 * tau**3) * ARCSEC_TO_RAD
    theta = (theta1 * tau + theta2 * tau * tau - 41.80 * tau**3) * ARCSEC_TO_RAD

    ra, dec, radius = rectangular_to_spherical(v)
    cos_dec, sin_dec = math.cos(dec), math.sin(dec)
    a = ra + zeta
    term1 = math.sin(a) * cos_dec
    term2 = math.cos(a) * math.cos(theta) * cos_dec - math.sin(theta) * sin_dec
    term3 = math.cos(a) * math.sin(theta) * cos_dec + math.cos(theta) * sin_dec
    alpha = math.atan2(term1, term2) + z
    delta = math.asin(max(-1.0, min(1.0, term3)))
    return spherical_to_rectangular(alpha, delta, radius)
