from __future__ import annotations

import math
import time
from dataclasses import dataclass, field, replace
from typing import Optional

from eclipse_sim.core import constants as C
from eclipse_sim.core.frames import ORIGIN, Vector3
from eclipse_sim.physics.orbit import OrbitalElements


def default_earth_elements() -> OrbitalElements:
    """Heliocentric Earth orbit on the scene scale."""
    return OrbitalElements(
        a=10.0,
        e=0.0167,
        inc_rad=math.radians(0.41),
        raan_rad=0.0,
        argp_rad=0.0,
        M0_rad=0.0,
        radius=C.EARTH_RADIUS,
        period_s=C.EARTH_PERIOD_S,
    )


def default_moon_elements() -> OrbitalElements:
    """Geocentric Moon orbit on the scene scale."""
    return OrbitalElements(
        a=2.5,
        e=0.0549,
        inc_rad=math.radians(5.145),
        raan_rad=0.0,
        argp_rad=0.0,
        M0_rad=0.0,
        radius=C.MOON_RADIUS,
        period_s=C.MOON_PERIOD_S,
    )


@dataclass(frozen=True)
class SunConfig:
    position: Vector3 = ORIGIN
    radius: float = C.SUN_RADIUS

    def __post_init__(self):
        if len(self.position) != 3 or not all(math.isfinite(x) for x in self.position):
            raise ValueError(f"Sun position must be a finite 3D vector. Got: {self.position}")
        if not (math.isfinite(self.radius) and self.radius > 0):
            raise ValueError(f"Sun radius must be positive. Got: {self.radius}")


@dataclass(frozen=True)
class TimeConfig:
    """
    start_epoch_ms: reference epoch (ms since 1970-01-01T00:00Z) at which the
        mean anomalies M0 apply; None means "now" at finalization
    time_scale: simulated seconds per real second
    """
    start_epoch_ms: Optional[float] = None
    time_scale: float = C.DEFAULT_TIME_SCALE

    def __post_init__(self):
        if self.start_epoch_ms is not None and not math.isfinite(self.start_epoch_ms):
            raise ValueError(f"Start epoch must be finite. Got: {self.start_epoch_ms}")
        if not math.isfinite(self.time_scale):
            raise ValueError(f"Time scale must be finite. Got: {self.time_scale}")
        if self.time_scale < 0:
            raise ValueError(f"Time scale must be non-negative. Got: {self.time_scale}")


@dataclass(frozen=True)
class DetectionConfig:
    align_thresh_deg_solar: float = C.ALIGN_THRESH_DEG
    align_thresh_deg_lunar: float = C.ALIGN_THRESH_DEG
    penumbra_scale: float = C.PENUMBRA_SCALE
    eclipse_cooldown_sim_s: float = C.ECLIPSE_COOLDOWN_SIM_S
    antumbra_depth: float = C.ANTUMBRA_DEPTH
    phase_eps_deg: float = C.PHASE_EPS_DEG

    def __post_init__(self):
        if not (0.0 < self.align_thresh_deg_solar <= 180.0):
            raise ValueError(f"Solar alignment threshold must be in range (0, 180] degrees. Got: {self.align_thresh_deg_solar}")
        if not (0.0 < self.align_thresh_deg_lunar <= 180.0):
            raise ValueError(f"Lunar alignment threshold must be in range (0, 180] degrees. Got: {self.align_thresh_deg_lunar}")
        if not (math.isfinite(self.penumbra_scale) and self.penumbra_scale > 0):
            raise ValueError(f"Penumbra scale must be positive. Got: {self.penumbra_scale}")
        if not (math.isfinite(self.eclipse_cooldown_sim_s) and self.eclipse_cooldown_sim_s >= 0):
            raise ValueError(f"Eclipse cooldown must be non-negative. Got: {self.eclipse_cooldown_sim_s}")
        if not (0.0 <= self.antumbra_depth <= 1.0):
            raise ValueError(f"Antumbra depth must be in range [0, 1]. Got: {self.antumbra_depth}")
        if not (0.0 < self.phase_eps_deg < 45.0):
            raise ValueError(f"Phase band must be in range (0, 45) degrees. Got: {self.phase_eps_deg}")


@dataclass(frozen=True)
class PhaseSearchConfig:
    window_s: float = C.PHASE_SEARCH_WINDOW_S
    steps: int = C.PHASE_SEARCH_STEPS
    bisect_iter: int = C.PHASE_BISECT_ITER
    newton_iter: int = C.PHASE_NEWTON_ITER

    def __post_init__(self):
        if not (math.isfinite(self.window_s) and self.window_s > 0):
            raise ValueError(f"Search window must be positive. Got: {self.window_s}")
        if self.steps < 1:
            raise ValueError(f"Scan steps must be >= 1. Got: {self.steps}")
        if self.bisect_iter < 0 or self.newton_iter < 0:
            raise ValueError("Iteration counts must be non-negative.")


@dataclass(frozen=True)
class SimulationConfig:
    """
    Everything the controller needs, fixed at construction.
    Earth elements are heliocentric; Moon elements are relative to Earth.
    """
    earth: OrbitalElements = field(default_factory=default_earth_elements)
    moon: OrbitalElements = field(default_factory=default_moon_elements)
    sun: SunConfig = field(default_factory=SunConfig)
    time: TimeConfig = field(default_factory=TimeConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    search: PhaseSearchConfig = field(default_factory=PhaseSearchConfig)

    def finalize(self) -> "SimulationConfig":
        """Resolve a missing start epoch to the current wall-clock time."""
        if self.time.start_epoch_ms is not None:
            return self
        now_ms = time.time() * C.MS_PER_S
        return replace(self, time=replace(self.time, start_epoch_ms=now_ms))
