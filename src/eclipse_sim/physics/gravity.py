# Two-body Kepler problem helpers

from __future__ import annotations

import math

from eclipse_sim.core.constants import TWO_PI


def wrap_to_pi(angle_rad: float) -> float:
    """Wrap angle to (-π, π]."""
    return math.pi - ((math.pi - angle_rad) % TWO_PI)


def solve_keplers_equation(M_rad: float, e: float, tol: float = 1e-12, max_iter: int = 8) -> float:
    """
    Solve Kepler's equation for elliptic orbits:
        M = E - e sin(E)
    using a bounded number of Newton-Raphson steps.

    The mean anomaly is first normalized into (-π, π]. The iteration stops
    early once a Newton step is smaller than `tol`; otherwise all `max_iter`
    steps are taken and the last estimate is returned. There is no failure
    path: a poorly converged E is still a usable position for the simulation.

    Args:
        M_rad: Mean anomaly (rad), any real value
        e: eccentricity (0 <= e < 1)
        tol: step-size convergence tolerance
        max_iter: iteration cap

    Returns:
        E_rad: Eccentric anomaly (rad), consistent with the normalized M
    """
    M = wrap_to_pi(M_rad)

    if e < 0.8:
        E = M
    else:
        # High e: start at ±π, on the same side as M
        E = math.copysign(math.pi, M)

    for _ in range(max_iter):
        f = E - e * math.sin(E) - M
        fp = 1.0 - e * math.cos(E)
        dE = f / fp
        E -= dE
        if abs(dE) < tol:
            break

    return E


def kepler_residual(E_rad: float, M_rad: float, e: float) -> float:
    """E - e sin(E) - wrap(M); zero for an exact solution."""
    return E_rad - e * math.sin(E_rad) - wrap_to_pi(M_rad)
