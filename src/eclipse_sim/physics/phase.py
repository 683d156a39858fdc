"""
Lunar phase geometry.

The phase angle is measured at the Moon between the directions away from
the Sun and away from the Earth:
- 0   -> full moon (Sun behind the Earth as seen from the Moon)
- 180 -> new moon (Moon between Sun and Earth)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional

from eclipse_sim.core.constants import PHASE_EPS_DEG
from eclipse_sim.core.frames import Vector3, angle_between, cross, dot, scale, sub

PHASE_GOALS_DEG: Dict[str, float] = {
    "new": 180.0,
    "full": 0.0,
    "quarter": 90.0,
}


@dataclass(frozen=True)
class PhaseMetrics:
    phase_angle: float  # rad, [0, π]
    illuminated_fraction: float  # 0 = new, 1 = full


def phase_metrics(sun: Vector3, earth: Vector3, moon: Vector3) -> PhaseMetrics:
    v_sm = sub(moon, sun)
    v_em = sub(moon, earth)
    phi = angle_between(v_sm, v_em)
    k = (1.0 + math.cos(phi)) / 2.0
    return PhaseMetrics(phase_angle=phi, illuminated_fraction=k)


def signed_phase_angle(sun: Vector3, earth: Vector3, moon: Vector3, pole: Vector3) -> float:
    """
    Phase angle in (-π, π] measured in the plane normal to `pole` (the lunar
    orbit pole), signed by the sense of rotation about it.

    With an inclined orbit the true phase angle bottoms out above 0 at full
    moon; the in-plane angle still passes smoothly through 0 there and wraps
    at ±π at new moon, so both become sign changes of a wrapped error.
    """
    a = sub(moon, sun)
    b = sub(moon, earth)
    a_p = sub(a, scale(pole, dot(a, pole)))
    b_p = sub(b, scale(pole, dot(b, pole)))
    phi = math.atan2(dot(cross(a_p, b_p), pole), dot(a_p, b_p))
    if phi == -math.pi:
        return math.pi
    return phi


def phase_name_from_angle(phi_rad: float, eps_deg: float = PHASE_EPS_DEG) -> Optional[str]:
    """
    Quantize a phase angle to "new", "full" or "quarter".

    Returns None between the bands. First and last quarter share a name.
    """
    d = math.degrees(phi_rad)
    if abs(d - 180.0) < eps_deg:
        return "new"
    if abs(d - 0.0) < eps_deg:
        return "full"
    if abs(d - 90.0) < eps_deg:
        return "quarter"
    return None
