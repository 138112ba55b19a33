"""Obliquity, precession and reference-frame reductions."""

from __future__ import annotations

from .frames import Frame, to_output_frame
from .methods import ReductionConfig, ReductionMethod
from .obliquity import mean_obliquity, true_obliquity
from .precession import (
    precess,
    precess_from_j2000,
    precess_to_j2000,
    precession_angles,
    precession_iau1976,
    precession_newcomb,
)
from .stars import StarRecord, fk4_to_fk5, fk5_to_fk4

__all__ = [
    "Frame",
    "ReductionConfig",
    "ReductionMethod",
    "StarRecord",
    "fk4_to_fk5",
    "fk5_to_fk4",
    "mean_obliquity",
    "precess",
    "precess_from_j2000",
    "precess_to_j2000",
    "precession_angles",
    "precession_iau1976",
    "precession_newcomb",
    "to_output_frame",
    "true_obliquity",
]
