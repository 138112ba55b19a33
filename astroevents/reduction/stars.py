"""Catalogue star records and FK4/FK5 conversions.

A :class:`StarRecord` carries position, proper motion, parallax and radial
velocity referred to a frame and equinox.  Conversions build the space
motion vector, push it through :mod:`astroevents.reduction.frames` and
rebuild the catalogue quantities from the result.

Stars without a parallax have an unknown distance.  The FK4/FK5 matrix
gives such stars a fictitious proper motion; it is discarded, and on the
way to FK5 the position drift it implies is removed as well.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Final, Sequence

from ..constants import (
    ARCSEC_TO_RAD,
    AU_KM,
    B1950,
    DAYS_PER_JULIAN_CENTURY,
    J2000,
    RAD_TO_ARCSEC,
    SECONDS_PER_DAY,
    SPEED_OF_LIGHT_KMS,
)
from ..core.angles import normalize_radians
from ..core.errors import InvalidConfigurationError
from ..core.vectors import (
    Vector,
    rectangular_to_spherical,
    rotate_x,
    spherical_to_rectangular,
)
from .frames import Frame, fk4_to_fk5_space_motion, fk5_to_fk4_space_motion, to_output_frame
from .methods import ReductionConfig, ReductionMethod
from .obliquity import mean_obliquity
from .precession import precess, precess_pos_vel_equatorial

__all__ = [
    "StarRecord",
    "fk4_b1950_to_fk5_j2000",
    "fk4_bxxxx_to_fk5_jxxxx",
    "fk4_to_fk5",
    "fk5_j2000_to_fk4_b1950",
    "fk5_jxxxx_to_fk4_bxxxx",
    "fk5_to_fk4",
    "transform_star",
]

LOG = logging.getLogger(__name__)

# AU per century for 1 km/s, divided by 100.
_KMS_TO_AU_CENTURY: Final[float] = SECONDS_PER_DAY * DAYS_PER_JULIAN_CENTURY * 0.01 / AU_KM
# Newcomb vs IAU 1976 precession constant difference, 1.13"/century.
_FK4_EQUINOX_RATE: Final[float] = 0.07555 * 15.0 * ARCSEC_TO_RAD / DAYS_PER_JULIAN_CENTURY
_IAU1976: Final[ReductionConfig] = ReductionConfig(ReductionMethod.IAU1976)


@dataclass(frozen=True, slots=True)
class StarRecord:
    """A catalogue entry.

    Attributes
    ----------
    ra, dec:
        Position in radians.
    pm_ra, pm_dec:
        Proper motion in radians per Julian year.  ``pm_ra`` is the rate of
        right ascension itself, not multiplied by ``cos(dec)``.
    parallax_mas:
        Parallax in milliarcseconds; ``0`` when the distance is unknown.
    radial_velocity_kms:
        Radial velocity in km/s, positive when receding.
    frame, equinox_jd:
        Reference frame and equinox of the position.
    """

    ra: float
    dec: float
    pm_ra: float = 0.0
    pm_dec: float = 0.0
    parallax_mas: float = 0.0
    radial_velocity_kms: float = 0.0
    frame: Frame = Frame.FK5
    equinox_jd: float = J2000
    name: str = ""

    @property
    def distance_unknown(self) -> bool:
        return self.parallax_mas <= 0.0


@dataclass(frozen=True, slots=True)
class _SpaceMotion:
    position: Vector
    motion: Vector
    relativistic: float


def _space_motion(star: StarRecord) -> _SpaceMotion:
    x = spherical_to_rectangular(star.ra, star.dec, 1.0)
    rel = 1.0 / (1.0 - star.radial_velocity_kms / SPEED_OF_LIGHT_KMS)
    sin_dec, cos_dec = math.sin(star.dec), math.cos(star.dec)
    sin_ra, cos_ra = math.sin(star.ra), math.cos(star.ra)
    vpi = _KMS_TO_AU_CENTURY * star.radial_velocity_kms * star.parallax_mas * 0.001 / RAD_TO_ARCSEC
    m = (
        -star.pm_ra * cos_dec * sin_ra - star.pm_dec * sin_dec * cos_ra + vpi * x[0],
        star.pm_ra * cos_dec * cos_ra - star.pm_dec * sin_dec * sin_ra + vpi * x[1],
        star.pm_dec * cos_dec + vpi * x[2],
    )
    scale = 100.0 * RAD_TO_ARCSEC * rel
    return _SpaceMotion(x, tuple(c * scale for c in m), rel)


def _rebuild(
    star: StarRecord,
    pos: Sequence[float],
    vel: Sequence[float],
    rel: float,
    frame: Frame,
    equinox: float,
) -> StarRecord:
    x, y, z = pos
    vx, vy, vz = vel
    b = x * x + y * y
    c = b + z * z
    a = math.sqrt(c)
    pm_ra = 0.01 * (x * vy - y * vx) / (RAD_TO_ARCSEC * b * rel)
    pm_dec = 0.01 * (vz * b - z * (x * vx + y * vy)) / (RAD_TO_ARCSEC * c * math.sqrt(b) * rel)
    rv = star.radial_velocity_kms
    if not star.distance_unknown:
        radial = x * vx + y * vy + z * vz
        rv = radial / (rel * _KMS_TO_AU_CENTURY * 100.0 * a * star.parallax_mas * 0.001)
    return replace(
        star,
        ra=normalize_radians(math.atan2(y, x)),
        dec=math.asin(max(-1.0, min(1.0, z / a))),
        pm_ra=pm_ra,
        pm_dec=pm_dec,
        parallax_mas=star.parallax_mas * a,
        radial_velocity_kms=rv,
        frame=frame,
        equinox_jd=equinox,
    )


def _fk4_equinox_shift(v: Sequence[float], shift: float) -> Vector:
    eps = mean_obliquity((B1950 - J2000) / DAYS_PER_JULIAN_CENTURY, _IAU1976)
    lon, lat, radius = rectangular_to_spherical(rotate_x(v, -eps))
    return rotate_x(spherical_to_rectangular(lon + shift, lat, radius), eps)


def fk4_to_fk5(star: StarRecord) -> StarRecord:
    """Convert an FK4 star to FK5, equinox and epoch J2000.

    An FK4 equinox other than B1950 is first corrected for the Newcomb
    precession constant and precessed to B1950 with IAU 1976.
    """

    if star.frame is not Frame.FK4:
        raise InvalidConfigurationError(f"star frame is {star.frame.value}, expected FK4")
    if star.equinox_jd != B1950:
        shift = (star.equinox_jd - B1950) * _FK4_EQUINOX_RATE
        v = spherical_to_rectangular(star.ra, star.dec, 1.0)
        v = _fk4_equinox_shift(v, shift)
        v = precess(star.equinox_jd, B1950, v, _IAU1976)
        ra, dec, _ = rectangular_to_spherical(v)
        star = replace(star, ra=ra, dec=dec, equinox_jd=B1950)

    motion = _space_motion(star)
    pos, vel = fk4_to_fk5_space_motion(motion.position, motion.motion)
    out = _rebuild(star, pos, vel, motion.relativistic, Frame.FK5, J2000)
    if star.distance_unknown:
        years = 100.0 * (J2000 - B1950) / DAYS_PER_JULIAN_CENTURY
        out = replace(
            out,
            ra=normalize_radians(out.ra - out.pm_ra * years),
            dec=out.dec - out.pm_dec * years,
            pm_ra=0.0,
            pm_dec=0.0,
        )
    return out


def fk5_to_fk4(star: StarRecord, config: ReductionConfig | None = None) -> StarRecord:
    """Convert an FK5 star to FK4, equinox and epoch B1950.

    A non-J2000 equinox is precessed to J2000 first with ``config``.
    """

    if star.frame is not Frame.FK5:
        raise InvalidConfigurationError(f"star frame is {star.frame.value}, expected FK5")
    if star.equinox_jd != J2000:
        v = spherical_to_rectangular(star.ra, star.dec, 1.0)
        ra, dec, _ = rectangular_to_spherical(precess(star.equinox_jd, J2000, v, config))
        star = replace(star, ra=ra, dec=dec, equinox_jd=J2000)

    motion = _space_motion(star)
    pos, vel = fk5_to_fk4_space_motion(motion.position, motion.motion)
    out = _rebuild(star, pos, vel, motion.relativistic, Frame.FK4, B1950)
    if star.distance_unknown:
        out = replace(out, pm_ra=0.0, pm_dec=0.0)
    return out


def _static_vector_transform(v: Sequence[float], star: StarRecord, convert) -> Vector:
    _, _, radius = rectangular_to_spherical(v)
    out = convert(star)
    return spherical_to_rectangular(out.ra, out.dec, radius)


def fk4_b1950_to_fk5_j2000(v: Sequence[float]) -> Vector:
    """Convert a static FK4 B1950 direction vector to FK5 J2000."""

    ra, dec, _ = rectangular_to_spherical(v)
    star = StarRecord(ra, dec, frame=Frame.FK4, equinox_jd=B1950)
    return _static_vector_transform(v, star, fk4_to_fk5)


def fk5_j2000_to_fk4_b1950(v: Sequence[float]) -> Vector:
    """Convert a static FK5 J2000 direction vector to FK4 B1950."""

    ra, dec, _ = rectangular_to_spherical(v)
    star = StarRecord(ra, dec, frame=Frame.FK5, equinox_jd=J2000)
    return _static_vector_transform(v, star, fk5_to_fk4)


def fk5_jxxxx_to_fk4_bxxxx(
    v: Sequence[float], jd_fk5: float, jd_fk4: float, config: ReductionConfig | None = None
) -> Vector:
    """Convert an FK5 vector of equinox ``jd_fk5`` to FK4 of equinox ``jd_fk4``."""

    config = config or ReductionConfig()
    eq = fk5_j2000_to_fk4_b1950(precess(jd_fk5, J2000, v, config))
    if jd_fk4 != B1950:
        eq = _fk4_equinox_shift(eq, -(jd_fk4 - B1950) * _FK4_EQUINOX_RATE)
    return precess(B1950, jd_fk4, eq, config)


def fk4_bxxxx_to_fk5_jxxxx(
    v: Sequence[float], jd_fk5: float, jd_fk4: float, config: ReductionConfig | None = None
) -> Vector:
    """Convert an FK4 vector of equinox ``jd_fk4`` to FK5 of equinox ``jd_fk5``."""

    config = config or ReductionConfig()
    ra, dec, radius = rectangular_to_spherical(v)
    star = fk4_to_fk5(StarRecord(ra, dec, frame=Frame.FK4, equinox_jd=jd_fk4))
    eq = spherical_to_rectangular(star.ra, star.dec, radius)
    return precess(J2000, jd_fk5, eq, config)


def _to_fk4(star: StarRecord, equinox: float, config: ReductionConfig) -> StarRecord:
    out = fk5_to_fk4(star, _IAU1976)
    if equinox == B1950:
        return out
    shift = -(equinox - B1950) * _FK4_EQUINOX_RATE
    v = _fk4_equinox_shift(spherical_to_rectangular(out.ra, out.dec), shift)
    ra, dec, _ = rectangular_to_spherical(precess(B1950, equinox, v, config))
    return replace(out, ra=ra, dec=dec, equinox_jd=equinox)


def transform_star(
    star: StarRecord,
    out_frame: Frame,
    output_epoch: float,
    output_equinox: float,
    config: ReductionConfig | None = None,
) -> StarRecord:
    """Propagate ``star`` to ``output_epoch`` and refer it to a new frame and equinox.

    FK4 input is moved to FK5 J2000 first.  FK4 output is produced from FK5
    J2000 at the end: the link gives B1950, and any other FK4 equinox is
    reached by precessing from B1950 with ``config``.  Proper motions then
    stay on the B1950 axes.  Proper motion is applied linearly together
    with the radial component of the space motion.
    """

    config = config or ReductionConfig()
    source_equinox = star.equinox_jd
    static = star.distance_unknown and star.pm_ra == 0.0 and star.pm_dec == 0.0
    if star.frame is Frame.FK4:
        star = fk4_to_fk5(star)
    fk4_equinox = output_equinox if out_frame is Frame.FK4 else None
    if fk4_equinox is not None:
        out_frame, output_equinox = Frame.FK5, J2000
    if star.frame is out_frame and star.equinox_jd == output_equinox and output_epoch == star.equinox_jd:
        return _to_fk4(star, fk4_equinox, config) if fk4_equinox is not None else star

    motion = _space_motion(star)
    elapsed = (output_epoch - star.equinox_jd) / (DAYS_PER_JULIAN_CENTURY * RAD_TO_ARCSEC)
    r = tuple(motion.position[i] + motion.motion[i] * elapsed for i in range(3)) + motion.motion
    if star.equinox_jd != output_equinox:
        r = precess_pos_vel_equatorial(star.equinox_jd, output_equinox, r, config)
    r = to_output_frame(r, star.frame, out_frame)
    out = _rebuild(star, r[:3], r[3:6], motion.relativistic, out_frame, output_equinox)
    if static:
        years = 100.0 * (output_epoch - source_equinox) / DAYS_PER_JULIAN_CENTURY
        out = replace(
            out,
            ra=normalize_radians(out.ra - out.pm_ra * years),
            dec=out.dec - out.pm_dec * years,
            pm_ra=0.0,
            pm_dec=0.0,
        )
    if fk4_equinox is not None:
        out = _to_fk4(out, fk4_equinox, config)
    return out
