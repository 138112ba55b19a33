"""Reference frame conversions for equatorial vectors.

The supported frames form a chain::

    FK4 (B1950) <-> FK5 (J2000) <-> ICRF <-> dynamical J2000

FK4 <-> FK5 uses the 6x6 matrix of Standish (1982) acting on position and
space motion, together with the E-terms of aberration that FK4 positions
carry.  The remaining links are small constant frame-bias rotations.
Conversions between non-adjacent frames walk the chain one link at a time.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Final, Sequence

from ..constants import (
    ARCSEC_TO_RAD,
    B1950,
    DAYS_PER_JULIAN_CENTURY,
    J2000,
    RAD_TO_ARCSEC,
)
from ..core.vectors import Matrix3, Vector, apply_matrix, apply_matrix_transposed, truncate3

__all__ = [
    "E_TERMS",
    "E_TERMS_RATE",
    "FK4_TO_FK5",
    "FK5_TO_FK4",
    "Frame",
    "fk4_to_fk5_space_motion",
    "fk5_to_fk4_space_motion",
    "frame_bias_matrix",
    "to_output_frame",
]

LOG = logging.getLogger(__name__)


class Frame(str, Enum):
    """Celestial reference frames."""

    FK4 = "FK4"
    FK5 = "FK5"
    ICRF = "ICRF"
    DYNAMICAL_J2000 = "DYNAMICAL_J2000"

    @property
    def reference_epoch(self) -> float:
        return B1950 if self is Frame.FK4 else J2000


_CHAIN: Final[tuple[Frame, ...]] = (Frame.FK4, Frame.FK5, Frame.ICRF, Frame.DYNAMICAL_J2000)

# E-terms of aberration (radians) and their rate (arcsec per tropical century).
E_TERMS: Final[Vector] = (-1.62557e-6, -3.1919e-7, -1.3843e-7)
E_TERMS_RATE: Final[Vector] = (1.245e-3, -1.580e-3, -6.59e-4)

FK4_TO_FK5: Final[tuple[tuple[float, ...], ...]] = (
    (0.9999256782, -0.0111820611, -4.8579477e-3, 2.42395018e-6, -2.710663e-8, -1.177656e-8),
    (0.0111820610, 0.9999374784, -2.71765e-5, 2.710663e-8, 2.42397878e-6, -6.587e-11),
    (4.8579479e-3, -2.71474e-5, 0.9999881997, 1.177656e-8, -6.582e-11, 2.42410173e-6),
    (-5.51e-4, -0.238565, 0.435739, 0.99994704, -0.01118251, -4.85767e-3),
    (0.238514, -2.667e-3, -8.541e-3, 0.01118251, 0.99995883, -2.718e-5),
    (-0.435623, 0.012254, 2.117e-3, 4.85767e-3, -2.714e-5, 1.00000956),
)

FK5_TO_FK4: Final[tuple[tuple[float, ...], ...]] = (
    (0.999925679464461, 0.011181482851459, 0.004859003846486, -0.000002423898397, -0.000000027105446, -0.000000011777421),
    (-0.011181482771564, 0.999937484931120, -0.000027177091951, 0.000000027105446, -0.000002423927023, 0.000000000065853),
    (-0.004859004003576, -0.000027155783797, 0.999988194635765, 0.000000011777421, 0.000000000065848, -0.000002424049950),
    (-0.000550383713599, 0.238509389858923, -0.435613424180734, 0.999904317129668, 0.011181454040714, 0.004858518649158),
    (-0.238559418959058, -0.002667814477651, 0.012253699727072, -0.011181454113760, 0.999916129088180, -0.000027170347867),
    (0.435729962168090, -0.008540856009088, 0.002116430447234, -0.004858518484394, -0.000027159935551, 0.999966838499726),
)

# (xi_0, eta_0, d_alpha_0) in radians
_FK5_ICRF_BIAS: Final = (9.1e-3 * ARCSEC_TO_RAD, -19.9e-3 * ARCSEC_TO_RAD, -22.9e-3 * ARCSEC_TO_RAD)
_ICRF_DYNAMICAL_BIAS: Final = (-0.0166170 * ARCSEC_TO_RAD, -0.0068192 * ARCSEC_TO_RAD, -0.01460 * ARCSEC_TO_RAD)


def frame_bias_matrix(xi0: float, eta0: float, da0: float) -> Matrix3:
    """Return the bias rotation taking ICRF vectors to the biased frame."""

    return (
        (1.0 - 0.5 * (da0 * da0 + xi0 * xi0), da0, -xi0),
        (-da0, 1.0 - 0.5 * (da0 * da0 + eta0 * eta0), -eta0),
        (xi0, eta0, 1.0 - 0.5 * (eta0 * eta0 + xi0 * xi0)),
    )


_FK5_BIAS_MATRIX: Final[Matrix3] = frame_bias_matrix(*_FK5_ICRF_BIAS)
_DYNAMICAL_BIAS_MATRIX: Final[Matrix3] = frame_bias_matrix(*_ICRF_DYNAMICAL_BIAS)


def _apply6(matrix: tuple[tuple[float, ...], ...], r: Sequence[float]) -> Vector:
    return tuple(sum(row[j] * r[j] for j in range(6)) for row in matrix)


def fk4_to_fk5_space_motion(x: Sequence[float], m: Sequence[float]) -> tuple[Vector, Vector]:
    """Convert an FK4 unit vector and space motion to FK5 J2000.

    ``x`` is the B1950 unit position and ``m`` its motion in arcsec per
    century.  E-terms are removed before the 6x6 matrix is applied.  The
    returned position is not renormalised; its length carries the parallax
    scale factor.
    """

    a = sum(E_TERMS[i] * x[i] for i in range(3))
    b = sum(E_TERMS_RATE[i] * x[i] for i in range(3))
    r = [x[i] - E_TERMS[i] + a * x[i] for i in range(3)]
    r += [m[i] - E_TERMS_RATE[i] + b * x[i] for i in range(3)]
    out = _apply6(FK4_TO_FK5, r)
    return out[:3], out[3:]


def fk5_to_fk4_space_motion(x: Sequence[float], m: Sequence[float]) -> tuple[Vector, Vector]:
    """Inverse of :func:`fk4_to_fk5_space_motion`, adding the E-terms back."""

    out = _apply6(FK5_TO_FK4, list(x[:3]) + list(m[:3]))
    pos, vel = list(out[:3]), list(out[3:])
    a = -sum(E_TERMS[i] * pos[i] for i in range(3))
    b = -sum(E_TERMS_RATE[i] * pos[i] for i in range(3))
    for i in range(3):
        pos[i] = pos[i] + E_TERMS[i] + a * pos[i]
        vel[i] = vel[i] + E_TERMS_RATE[i] + b * pos[i]
    return tuple(pos), tuple(vel)


def _unit(v: Vector) -> tuple[Vector, float]:
    radius = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    if radius == 0.0:
        return v, 0.0
    return (v[0] / radius, v[1] / radius, v[2] / radius), radius


def _upper_left(matrix: tuple[tuple[float, ...], ...]) -> Matrix3:
    return tuple(tuple(row[:3]) for row in matrix[:3])  # type: ignore[return-value]


def _fk4_to_fk5_position(v: Vector) -> Vector:
    x, radius = _unit(v)
    if radius == 0.0:
        return v
    pos, vel = fk4_to_fk5_space_motion(x, (0.0, 0.0, 0.0))
    # A static FK4 direction acquires a fictitious FK5 motion; remove the
    # drift it would accumulate between B1950 and J2000.
    centuries = (J2000 - B1950) / DAYS_PER_JULIAN_CENTURY
    pos = tuple(pos[i] - vel[i] * centuries / RAD_TO_ARCSEC for i in range(3))
    unit, _ = _unit(pos)
    return tuple(radius * c for c in unit)


def _fk5_to_fk4_position(v: Vector) -> Vector:
    x, radius = _unit(v)
    if radius == 0.0:
        return v
    pos, _ = fk5_to_fk4_space_motion(x, (0.0, 0.0, 0.0))
    unit, _ = _unit(pos)
    return tuple(radius * c for c in unit)


def _step(v: Vector, vel: Vector | None, source: Frame, target: Frame) -> tuple[Vector, Vector | None]:
    if (source, target) == (Frame.FK4, Frame.FK5):
        if vel is not None:
            vel = apply_matrix(_upper_left(FK4_TO_FK5), vel)
        return _fk4_to_fk5_position(v), vel
    if (source, target) == (Frame.FK5, Frame.FK4):
        if vel is not None:
            vel = apply_matrix(_upper_left(FK5_TO_FK4), vel)
        return _fk5_to_fk4_position(v), vel
    if (source, target) == (Frame.FK5, Frame.ICRF):
        apply = apply_matrix_transposed
        matrix = _FK5_BIAS_MATRIX
    elif (source, target) == (Frame.ICRF, Frame.FK5):
        apply = apply_matrix
        matrix = _FK5_BIAS_MATRIX
    elif (source, target) == (Frame.ICRF, Frame.DYNAMICAL_J2000):
        apply = apply_matrix
        matrix = _DYNAMICAL_BIAS_MATRIX
    else:
        apply = apply_matrix_transposed
        matrix = _DYNAMICAL_BIAS_MATRIX
    return apply(matrix, v), (apply(matrix, vel) if vel is not None else None)


def to_output_frame(v: Sequence[float], from_frame: Frame, to_frame: Frame) -> Vector:
    """Convert a 3- or 6-component equatorial vector between frames.

    Positions keep their length.  For six-component input the velocity is
    rotated with the same link matrices (the position block of the 6x6
    matrix on the FK4 link).
    """

    from_frame, to_frame = Frame(from_frame), Frame(to_frame)
    pos = truncate3(v)
    vel: Vector | None = tuple(float(c) for c in v[3:6]) if len(v) >= 6 else None
    if from_frame is to_frame:
        return pos + vel if vel is not None else pos
    start, end = _CHAIN.index(from_frame), _CHAIN.index(to_frame)
    direction = 1 if end > start else -1
    for index in range(start, end, direction):
        pos, vel = _step(pos, vel, _CHAIN[index], _CHAIN[index + direction])
    return pos + vel if vel is not None else pos
