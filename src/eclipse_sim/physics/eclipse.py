"""
Solar and lunar eclipse detection for the Sun-Earth-Moon system.

Detection runs in two stages:
- a cheap alignment filter on the angle between the relevant
  body-to-body directions
- the finite-source shadow cone test from `shadow.cone_shadow_hit`

Solar is checked first, so it wins if both configurations line up.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from eclipse_sim.core.constants import ALIGN_THRESH_DEG, ANTUMBRA_DEPTH, PENUMBRA_SCALE
from eclipse_sim.core.frames import Vector3, angle_between, sub
from eclipse_sim.physics.shadow import ShadowHit, cone_shadow_hit

SOLAR = "solar"
LUNAR = "lunar"


@dataclass(frozen=True)
class EclipseHit:
    type: str  # "solar" | "lunar"
    subtype: str  # "umbra" | "penumbra" | "antumbra"
    eclipse_class: str  # "total" | "partial" | "annular"
    shadow: ShadowHit

    @property
    def latch_key(self) -> str:
        return f"{self.type}:{self.subtype}"


def alignment_angles(sun: Vector3, earth: Vector3, moon: Vector3) -> Tuple[float, float]:
    """
    (solar, lunar) misalignment angles in radians.

    solar: Sun->Moon direction vs Moon->Earth direction (0 at new moon syzygy)
    lunar: Sun->Earth direction vs Earth->Moon direction (0 at full moon syzygy)
    """
    a_solar = angle_between(sub(moon, sun), sub(earth, moon))
    a_lunar = angle_between(sub(earth, sun), sub(moon, earth))
    return a_solar, a_lunar


def classify(eclipse_type: str, subtype: str) -> str:
    if subtype == "umbra":
        return "total"
    if eclipse_type == SOLAR and subtype == "antumbra":
        return "annular"
    return "partial"


def detect_eclipse(
    sun: Vector3,
    earth: Vector3,
    moon: Vector3,
    sun_radius: float,
    earth_radius: float,
    moon_radius: float,
    align_thresh_deg_solar: float = ALIGN_THRESH_DEG,
    align_thresh_deg_lunar: float = ALIGN_THRESH_DEG,
    penumbra_scale: float = PENUMBRA_SCALE,
    antumbra_depth: float = ANTUMBRA_DEPTH,
) -> Optional[EclipseHit]:
    """
    Return the eclipse in progress for the given positions, or None.
    """
    a_solar, a_lunar = alignment_angles(sun, earth, moon)

    if math.degrees(a_solar) < align_thresh_deg_solar:
        # Moon shadows Earth
        hit = cone_shadow_hit(
            light=sun, apex=moon, occluder_radius=moon_radius,
            target=earth, target_radius=earth_radius,
            sun_radius=sun_radius, penumbra_scale=penumbra_scale,
            antumbra_depth=antumbra_depth,
        )
        if hit.hit:
            return EclipseHit(SOLAR, hit.subtype, classify(SOLAR, hit.subtype), hit)

    if math.degrees(a_lunar) < align_thresh_deg_lunar:
        # Earth shadows Moon
        hit = cone_shadow_hit(
            light=sun, apex=earth, occluder_radius=earth_radius,
            target=moon, target_radius=moon_radius,
            sun_radius=sun_radius, penumbra_scale=penumbra_scale,
            antumbra_depth=antumbra_depth,
        )
        if hit.hit:
            return EclipseHit(LUNAR, hit.subtype, classify(LUNAR, hit.subtype), hit)

    return None
