from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from eclipse_sim.core.constants import MS_PER_S, TWO_PI
from eclipse_sim.core.frames import Vector3, rotate_zxz
from eclipse_sim.physics.gravity import solve_keplers_equation


@dataclass(frozen=True)
class OrbitalElements:
    """
    Keplerian elements of a body on a fixed ellipse around its primary.

    Units:
        a: semi-major axis (scene distance units)
        e: eccentricity (0<=e<1)
        inc_rad: inclination in radians
        raan_rad: longitude of ascending node in radians
        argp_rad: argument of periapsis in radians
        M0_rad: mean anomaly at the reference epoch in radians
        radius: body radius (scene distance units)
        period_s: orbital period in seconds
        n_rad_s: mean motion in rad/s; takes precedence over period_s
    """
    a: float
    e: float
    inc_rad: float = 0.0
    raan_rad: float = 0.0
    argp_rad: float = 0.0
    M0_rad: float = 0.0
    radius: float = 1.0
    period_s: Optional[float] = None
    n_rad_s: Optional[float] = None

    def __post_init__(self):
        if not (math.isfinite(self.a) and self.a > 0):
            raise ValueError(f"Semi-major axis must be positive. Got: {self.a}")
        if not (0.0 <= self.e < 1.0):
            raise ValueError(f"Elliptic orbits only (0 <= e < 1). Got: {self.e}")
        if not (0.0 <= self.inc_rad <= math.pi):
            raise ValueError(f"Inclination must be in range [0, π] radians. Got: {self.inc_rad}")
        if not math.isfinite(self.raan_rad):
            raise ValueError(f"RAAN must be finite. Got: {self.raan_rad}")
        if not math.isfinite(self.argp_rad):
            raise ValueError(f"Argument of periapsis must be finite. Got: {self.argp_rad}")
        if not math.isfinite(self.M0_rad):
            raise ValueError(f"Mean anomaly must be finite. Got: {self.M0_rad}")
        if not (math.isfinite(self.radius) and self.radius > 0):
            raise ValueError(f"Body radius must be positive. Got: {self.radius}")
        if self.n_rad_s is None and self.period_s is None:
            raise ValueError("Either period_s or n_rad_s must be given.")
        if self.n_rad_s is not None and not (math.isfinite(self.n_rad_s) and self.n_rad_s > 0):
            raise ValueError(f"Mean motion must be positive. Got: {self.n_rad_s}")
        if self.period_s is not None and not (math.isfinite(self.period_s) and self.period_s > 0):
            raise ValueError(f"Period must be positive. Got: {self.period_s}")

    @property
    def mean_motion(self) -> float:
        """n in rad/s (2π/period when not given explicitly)."""
        if self.n_rad_s is not None:
            return self.n_rad_s
        return TWO_PI / self.period_s

    @property
    def period(self) -> float:
        """Orbital period in seconds, always 2π/n."""
        return TWO_PI / self.mean_motion


def perifocal_position(elements: OrbitalElements, E_rad: float) -> Vector3:
    """Position in the orbital plane (PQW) for eccentric anomaly E."""
    a = elements.a
    e = elements.e
    x = a * (math.cos(E_rad) - e)
    y = a * math.sqrt(1.0 - e * e) * math.sin(E_rad)
    return (x, y, 0.0)


def position_at(t_ms: float, ref_ms: float, elements: OrbitalElements) -> Vector3:
    """
    Position relative to the primary at simulated epoch t_ms.

    Pure and deterministic: the root-finder probes it at arbitrary times.
    """
    dt_s = (t_ms - ref_ms) / MS_PER_S
    M = elements.M0_rad + elements.mean_motion * dt_s
    E = solve_keplers_equation(M, elements.e)
    r_pqw = perifocal_position(elements, E)
    return rotate_zxz(r_pqw, elements.argp_rad, elements.inc_rad, elements.raan_rad)


def orbit_pole(elements: OrbitalElements) -> Vector3:
    """Unit normal of the orbital plane (direction of angular momentum)."""
    return rotate_zxz((0.0, 0.0, 1.0), elements.argp_rad, elements.inc_rad, elements.raan_rad)


def sample_positions(elements: OrbitalElements, times_ms: Iterable[float], ref_ms: float = 0.0) -> List[Tuple[float, Vector3]]:
    """
    Evaluate an orbit across a list of epochs.
    Returns list of (t_ms, r).
    """
    out: List[Tuple[float, Vector3]] = []
    for t in times_ms:
        out.append((t, position_at(t, ref_ms, elements)))
    return out
