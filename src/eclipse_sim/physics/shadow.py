"""
Shadow cones cast by a spherical occluder lit by a finite spherical Sun.

Geometry (all along the axis that runs from the light through the
occluder's center and onward, away from the light):
- apex: occluder center, where proj = 0
- umbra: converges from the occluder radius at proj = 0 to a point at
  proj = Lu = D * r / (R - r)
- beyond Lu the umbra is gone and a widening antumbra/penumbra cone remains

The same primitive serves both eclipse directions; only the choice of
occluder and target changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from eclipse_sim.core.constants import ANTUMBRA_DEPTH
from eclipse_sim.core.frames import Vector3, add, distance, dot, normalize, scale, sub


@dataclass(frozen=True)
class ShadowHit:
    hit: bool
    subtype: Optional[str] = None  # "umbra", "penumbra", "antumbra"
    d_perp: Optional[float] = None  # target center to axis
    proj: Optional[float] = None  # apex to target along axis
    r_umbra: Optional[float] = None
    r_pen: Optional[float] = None


MISS = ShadowHit(hit=False)


def cone_shadow_hit(
    light: Vector3,
    apex: Vector3,
    occluder_radius: float,
    target: Vector3,
    target_radius: float,
    sun_radius: float,
    penumbra_scale: float = 1.0,
    antumbra_depth: float = ANTUMBRA_DEPTH,
) -> ShadowHit:
    """
    Test whether `target` lies in the shadow of the occluder at `apex`.

    Args:
        light: light source (Sun) center
        apex: occluder center
        occluder_radius: r
        target: center of the body that may be shadowed
        target_radius: radius of that body
        sun_radius: R, radius of the light source
        penumbra_scale: >1 widens the penumbra allowance against jitter
        antumbra_depth: fraction of the target radius the target must sit
            inside the widening cone to count as antumbra

    Returns:
        ShadowHit; `hit` is False when the target is clear of every cone.
    """
    axis = normalize(sub(apex, light))
    D = distance(light, apex)

    proj = dot(sub(target, apex), axis)
    closest = add(apex, scale(axis, proj))
    d_perp = distance(target, closest)

    R = sun_radius
    r = occluder_radius
    if R <= r:
        # No converging umbra; only a linearly widening penumbra
        r_pen_only = proj * (R / (D + 1e-9)) if proj >= 0 else 0.0
        if d_perp <= r_pen_only + target_radius * penumbra_scale:
            return ShadowHit(True, "penumbra", d_perp, proj, 0.0, r_pen_only)
        return MISS

    Lu = (D * r) / (R - r)

    if 0.0 <= proj <= Lu:
        r_umbra = (Lu - proj) * (r / Lu)
        r_pen = r_umbra
    elif proj > Lu:
        r_umbra = 0.0
        r_pen = (proj - Lu) * (R / max(1e-6, D - Lu))
    else:
        # Target on the lit side of the occluder
        r_umbra = 0.0
        r_pen = 0.0

    if r_umbra > 0.0 and d_perp <= r_umbra + target_radius:
        return ShadowHit(True, "umbra", d_perp, proj, r_umbra, r_pen)

    if d_perp <= r_pen + target_radius * penumbra_scale:
        deep = d_perp <= max(1e-6, r_pen - target_radius * antumbra_depth)
        subtype = "antumbra" if (proj > Lu and deep) else "penumbra"
        return ShadowHit(True, subtype, d_perp, proj, r_umbra, r_pen)

    return MISS
