"""
Root-finding for lunar phases.

Locates the simulated epoch at which a phase function reaches a goal
angle:
- scan a symmetric window in uniform steps for brackets of the wrapped error
- refine the bracket nearest the window center by bisection
- polish with a few Newton steps on a forward-difference derivative

A window with no bracket is a quiet miss (None), not an error.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from eclipse_sim.core.constants import (
    MS_PER_S,
    PHASE_BISECT_ITER,
    PHASE_NEWTON_ITER,
    PHASE_SEARCH_STEPS,
)

logger = logging.getLogger(__name__)

PhaseFn = Callable[[float], float]


def wrap_deg(d: float) -> float:
    """Wrap an angle in degrees to (-180, 180]."""
    return 180.0 - ((180.0 - d) % 360.0)


def _bracket_candidates(times: List[float], errs: List[float]) -> List[Tuple[float, float]]:
    """
    All (a, b) scan intervals containing a root. Exact zeros give a == b.
    A sign flip across a ±180 wraparound is a discontinuity, not a root.
    """
    out: List[Tuple[float, float]] = []
    for i in range(len(times) - 1):
        fa, fb = errs[i], errs[i + 1]
        if fa == 0.0:
            out.append((times[i], times[i]))
        elif (fa < 0.0) != (fb < 0.0) and abs(fb - fa) < 180.0:
            out.append((times[i], times[i + 1]))
    if errs and errs[-1] == 0.0:
        out.append((times[-1], times[-1]))
    return out


def find_time_for_phase(
    phase_deg_at: PhaseFn,
    goal_deg: float,
    center_ms: float,
    search_window_s: float,
    steps: int = PHASE_SEARCH_STEPS,
    bisect_iter: int = PHASE_BISECT_ITER,
    newton_iter: int = PHASE_NEWTON_ITER,
    bisect_tol_deg: float = 0.2,
    newton_tol_deg: float = 0.05,
    newton_h_s: float = 60.0,
    min_slope_deg_s: float = 1e-9,
) -> Optional[float]:
    """
    Find the epoch (ms) nearest `center_ms` where phase_deg_at(t) == goal_deg.

    Args:
        phase_deg_at: deterministic phase function of simulated epoch (ms), degrees
        goal_deg: target phase angle (degrees)
        center_ms: center of the search window
        search_window_s: full width of the window in simulated seconds
        steps: number of uniform scan intervals
        bisect_iter: bisection cap; stops early once |err| < bisect_tol_deg
        newton_iter: Newton cap; stops early once |err| < newton_tol_deg or
            the slope magnitude drops below min_slope_deg_s
        newton_h_s: forward-difference step for the derivative (seconds)

    Returns:
        Refined epoch in ms, or None if the window holds no occurrence.
    """
    if steps < 1:
        raise ValueError("steps must be >= 1.")
    if search_window_s <= 0:
        raise ValueError("search_window_s must be positive.")

    def err(t: float) -> float:
        return wrap_deg(phase_deg_at(t) - goal_deg)

    half_ms = 0.5 * search_window_s * MS_PER_S
    t0 = center_ms - half_ms
    t1 = center_ms + half_ms

    times = [t0 + (i / steps) * (t1 - t0) for i in range(steps + 1)]
    errs = [err(t) for t in times]

    candidates = _bracket_candidates(times, errs)
    if not candidates:
        logger.debug("No bracket for goal %.1f deg in +/-%.0f s window", goal_deg, 0.5 * search_window_s)
        return None

    a, b = min(candidates, key=lambda ab: abs(0.5 * (ab[0] + ab[1]) - center_ms))
    logger.debug("Bracket for goal %.1f deg: [%.0f, %.0f] ms (%d candidates)", goal_deg, a, b, len(candidates))

    if a == b:
        return a

    fa = err(a)
    for _ in range(bisect_iter):
        m = 0.5 * (a + b)
        fm = err(m)
        if abs(fm) < bisect_tol_deg:
            a = b = m
            break
        if fa * fm <= 0.0:
            b = m
        else:
            a = m
            fa = fm
    t = 0.5 * (a + b)

    # Newton polish (derivative in deg/s); a step must reduce |err|
    f = err(t)
    for _ in range(newton_iter):
        if abs(f) < newton_tol_deg:
            break
        fp = (err(t + newton_h_s * MS_PER_S) - f) / newton_h_s
        if abs(fp) < min_slope_deg_s:
            break
        t_new = t + (-f / fp) * MS_PER_S
        f_new = err(t_new)
        if abs(f_new) >= abs(f):
            logger.debug("Newton step rejected at t=%.0f ms (|err| %.4f -> %.4f)", t, abs(f), abs(f_new))
            break
        t, f = t_new, f_new

    return t
