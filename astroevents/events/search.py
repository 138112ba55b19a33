"""Search mechanics shared by the event modules.

Periodic events (lunar phases, perihelia, conjunctions) are indexed by a
cycle number ``k``.  A linear approximation in the fractional year gives a
first ``k``; it is rounded according to the :class:`SearchMode` and then
checked against its neighbours, because the periodic corrections can move
an event across the query instant.

Events without a closed-form series are found by stepping a function of
time: :func:`step_refine_sign_change` brackets a zero crossing and refines
it with :func:`refine_root`, :func:`step_refine_extremum` climbs to a
maximum by reversing with a quartered step.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Tuple, TypeVar

from ..constants import SECONDS_PER_DAY
from ..core.errors import UnsupportedMethodError
from ..core.time import fractional_year

__all__ = [
    "CycleSeries",
    "RefineResult",
    "SearchMode",
    "bracket_root",
    "find_cycle_event",
    "fix_cycle_index",
    "refine_root",
    "require_cycle_mode",
    "round_cycle_index",
    "select_by_mode",
    "step_refine_extremum",
    "step_refine_sign_change",
]

LOG = logging.getLogger(__name__)

T = TypeVar("T")


class SearchMode(str, Enum):
    """Which occurrence relative to the query instant to return."""

    NEXT = "next"
    PREVIOUS = "previous"
    CLOSEST = "closest"
    CURRENT = "current"


def require_cycle_mode(mode: SearchMode) -> SearchMode:
    """Validate ``mode`` for a cycle search; CURRENT only applies to rise/set."""

    mode = SearchMode(mode)
    if mode is SearchMode.CURRENT:
        raise UnsupportedMethodError("SearchMode.CURRENT is only valid for rise/set/transit")
    return mode


def round_cycle_index(k_approx: float, delta: float, mode: SearchMode) -> float:
    """Round an approximate cycle index to an event of phase ``delta``."""

    k = delta + math.floor(k_approx)
    if mode is SearchMode.NEXT and k < k_approx:
        k += 1
    elif mode is SearchMode.PREVIOUS and k > k_approx:
        k -= 1
    elif mode is SearchMode.CLOSEST and delta == 0 and k < k_approx - 0.5:
        k += 1
    return k


def fix_cycle_index(
    k: float, jd: float, estimate: Callable[[float], float], mode: SearchMode
) -> float:
    """Compare ``k`` with ``k - 1`` and ``k + 1`` and keep the one ``mode`` asks for."""

    jde = estimate(k)
    if jde > jd and mode is SearchMode.PREVIOUS:
        return k - 1
    if jde < jd and mode is SearchMode.NEXT:
        return k + 1
    if jde > jd:
        jde_prev = estimate(k - 1)
        if (jde_prev > jd and mode is SearchMode.NEXT) or (
            mode is SearchMode.CLOSEST and abs(jde_prev - jd) < abs(jde - jd)
        ):
            return k - 1
    elif jde < jd:
        jde_next = estimate(k + 1)
        if (jde_next < jd and mode is SearchMode.PREVIOUS) or (
            mode is SearchMode.CLOSEST and abs(jde_next - jd) < abs(jde - jd)
        ):
            return k + 1
    return k


@dataclass(frozen=True, slots=True)
class CycleSeries:
    """A periodic event series ``k -> JDE``.

    ``rate`` is cycles per year counted from the year ``epoch``; ``delta``
    is the fractional cycle of the event (0.5 for aphelion, 0.25 for the
    first quarter).
    """

    rate: float
    epoch: float
    estimate: Callable[[float], float]
    delta: float = 0.0

    def k_approx(self, jd: float) -> float:
        return (fractional_year(jd) - self.epoch) * self.rate

    def seed(self, jd: float, mode: SearchMode) -> float:
        k = round_cycle_index(self.k_approx(jd), self.delta, mode)
        return fix_cycle_index(k, jd, self.estimate, mode)


def select_by_mode(
    jd: float, candidates: Iterable[Tuple[float, T]], mode: SearchMode
) -> Optional[Tuple[float, T]]:
    """Pick the candidate ``(jd, payload)`` that ``mode`` asks for.

    NEXT only accepts instants after ``jd``, PREVIOUS only before it, and
    CLOSEST the nearest of all.  ``None`` is returned when nothing
    qualifies.
    """

    pool = list(candidates)
    if mode is SearchMode.NEXT:
        pool = [c for c in pool if c[0] > jd]
        return min(pool, key=lambda c: c[0]) if pool else None
    if mode is SearchMode.PREVIOUS:
        pool = [c for c in pool if c[0] < jd]
        return max(pool, key=lambda c: c[0]) if pool else None
    return min(pool, key=lambda c: abs(c[0] - jd)) if pool else None


def _settle(
    k: float, jd: float, mode: SearchMode, corrected: Callable[[float], float], max_steps: int
) -> Optional[float]:
    """Move ``k`` until ``corrected(k)`` is the first event on the side ``mode`` asks for."""

    after = mode is SearchMode.NEXT
    for _ in range(max_steps):
        jde = corrected(k)
        if after and jde <= jd:
            k += 1
        elif not after and jde >= jd:
            k -= 1
        elif after and corrected(k - 1) > jd:
            k -= 1
        elif not after and corrected(k + 1) < jd:
            k += 1
        else:
            return k
    LOG.debug("cycle search did not settle", extra={"k": k, "jd": jd, "mode": mode.value})
    return None


def find_cycle_event(
    series: CycleSeries,
    jd: float,
    mode: SearchMode,
    corrected: Callable[[float], float],
    *,
    max_steps: int = 8,
) -> Optional[Tuple[float, float]]:
    """Return ``(k, jde)`` of the event ``mode`` selects, using corrected times.

    The seed comes from the mean series.  Periodic terms can move an event
    across ``jd``, so the index is then walked on corrected times in both
    directions until NEXT is the first event after ``jd`` and PREVIOUS the
    last one before it.  CLOSEST is the nearer of those two, or an event
    falling exactly on ``jd``.
    """

    mode = require_cycle_mode(mode)
    if mode is SearchMode.CLOSEST:
        following = find_cycle_event(series, jd, SearchMode.NEXT, corrected, max_steps=max_steps)
        preceding = find_cycle_event(series, jd, SearchMode.PREVIOUS, corrected, max_steps=max_steps)
        if following is None or preceding is None:
            return None
        candidates = [(following[1], following[0]), (preceding[1], preceding[0])]
        if preceding[0] + 1 != following[0]:
            candidates.append((corrected(preceding[0] + 1), preceding[0] + 1))
        jde, k = select_by_mode(jd, candidates, mode)
        return k, jde
    k = series.seed(jd, mode)
    LOG.debug("cycle seed", extra={"k": k, "jd": jd, "mode": mode.value})
    settled = _settle(k, jd, mode, corrected, max_steps)
    if settled is None:
        return None
    return settled, corrected(settled)


# -------------------- Root refinement --------------------


@dataclass(frozen=True, slots=True)
class RefineResult:
    """Result metadata returned by :func:`refine_root`.

    Attributes
    ----------
    t_exact_jd:
        Julian Day of the refined root estimate.
    iterations:
        Number of iterations executed.
    method:
        Algorithm used (``"secant+bisection"``).
    achieved_tol_sec:
        Width of the final bracket in seconds.
    status:
        ``"ok"``, ``"max_iter"`` or ``"bad_bracket"``.
    """

    t_exact_jd: float
    iterations: int
    method: str
    achieved_tol_sec: float
    status: str


def bracket_root(f: Callable[[float], float], t0_jd: float, t1_jd: float) -> Tuple[float, float]:
    """Return a bracket ``(t_lo, t_hi)`` ensuring opposite signs.

    Raises
    ------
    ValueError
        If ``f`` has the same sign at both endpoints and neither is a root.
    """

    f0 = f(t0_jd)
    if f0 == 0.0:
        return (t0_jd, t0_jd)
    f1 = f(t1_jd)
    if f1 == 0.0:
        return (t1_jd, t1_jd)
    if f0 * f1 > 0.0:
        raise ValueError("bad_bracket: function has same sign at bracket ends")
    return (t0_jd, t1_jd)


def refine_root(
    f: Callable[[float], float],
    t_lo_jd: float,
    t_hi_jd: float,
    *,
    tol_seconds: float = 1.0,
    max_iter: int = 64,
) -> RefineResult:
    """Refine a root of ``f`` within ``[t_lo_jd, t_hi_jd]`` by secant with bisection fallback."""

    try:
        t_lo, t_hi = bracket_root(f, t_lo_jd, t_hi_jd)
    except ValueError:
        return RefineResult(
            t_exact_jd=0.5 * (t_lo_jd + t_hi_jd),
            iterations=0,
            method="none",
            achieved_tol_sec=abs(t_hi_jd - t_lo_jd) * SECONDS_PER_DAY,
            status="bad_bracket",
        )
    if t_lo == t_hi:
        return RefineResult(t_lo, 0, "secant+bisection", 0.0, "ok")

    tol_days = max(tol_seconds, 0.0) / SECONDS_PER_DAY
    f_lo = f(t_lo)
    f_hi = f(t_hi)
    iterations = 0
    for iterations in range(1, max_iter + 1):
        denom = f_hi - f_lo
        t_sec = t_hi - f_hi * (t_hi - t_lo) / denom if denom != 0.0 else 0.5 * (t_lo + t_hi)
        if not (min(t_lo, t_hi) <= t_sec <= max(t_lo, t_hi)):
            t_sec = 0.5 * (t_lo + t_hi)
        f_sec = f(t_sec)
        if f_sec == 0.0:
            return RefineResult(t_sec, iterations, "secant+bisection", 0.0, "ok")
        if f_lo * f_sec <= 0.0:
            t_hi, f_hi = t_sec, f_sec
        else:
            t_lo, f_lo = t_sec, f_sec
        # secant steps can stall on one side; bisect to keep the bracket shrinking
        mid = 0.5 * (t_lo + t_hi)
        f_mid = f(mid)
        if f_mid == 0.0:
            return RefineResult(mid, iterations, "secant+bisection", 0.0, "ok")
        if f_lo * f_mid <= 0.0:
            t_hi, f_hi = mid, f_mid
        else:
            t_lo, f_lo = mid, f_mid
        if abs(t_hi - t_lo) <= tol_days:
            return RefineResult(
                0.5 * (t_lo + t_hi),
                iterations,
                "secant+bisection",
                abs(t_hi - t_lo) * SECONDS_PER_DAY,
                "ok",
            )
    return RefineResult(
        0.5 * (t_lo + t_hi),
        iterations,
        "secant+bisection",
        abs(t_hi - t_lo) * SECONDS_PER_DAY,
        "max_iter",
    )


def _sign(value: float) -> int:
    return (value > 0.0) - (value < 0.0)


def step_refine_sign_change(
    f: Callable[[float], float],
    jd: float,
    step: float,
    precision: float,
    *,
    max_steps: int = 500,
) -> Optional[float]:
    """Step from ``jd`` by ``step`` days until ``f`` changes sign, then refine.

    The sign of ``step`` sets the direction.  ``precision`` is in days.
    Returns ``None`` if no change is met within ``max_steps`` steps or the
    refinement does not converge.
    """

    t = jd
    start = _sign(f(t))
    for _ in range(max_steps):
        value = f(t + step)
        if _sign(value) != start:
            break
        t += step
    else:
        LOG.debug("no sign change within step cap", extra={"jd": jd, "step": step})
        return None
    lo, hi = sorted((t, t + step))
    result = refine_root(f, lo, hi, tol_seconds=precision * SECONDS_PER_DAY, max_iter=max_steps)
    if result.status != "ok":
        LOG.debug("sign-change refinement failed", extra={"status": result.status, "jd": jd})
        return None
    return result.t_exact_jd


def step_refine_extremum(
    f: Callable[[float], float],
    jd: float,
    step: float,
    precision: float,
    *,
    max_steps: int = 500,
) -> Optional[float]:
    """Climb to a local maximum of ``f`` starting at ``jd``.

    Steps of ``step`` days are taken while ``f`` grows; when it stops
    growing the direction reverses with a quarter of the step.  Stops when
    ``|step| <= precision``.  Minimise by passing a negated function.
    """

    t = jd
    value = f(t)
    steps = 0
    while abs(step) > precision:
        candidate = f(t + step)
        while candidate > value:
            t += step
            value = candidate
            steps += 1
            if steps > max_steps:
                LOG.debug("extremum search exceeded step cap", extra={"jd": jd})
                return None
            candidate = f(t + step)
        step = -step / 4.0
    return t
