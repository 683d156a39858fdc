from __future__ import annotations

import math

TWO_PI: float = 2.0 * math.pi

MS_PER_S: float = 1000.0
SECONDS_PER_DAY: float = 86400.0

# Scene-scale radii (distance units, not km)
SUN_RADIUS: float = 3.0
EARTH_RADIUS: float = 1.0
MOON_RADIUS: float = 0.27

# Orbital periods in seconds
EARTH_PERIOD_S: float = 365.0 * SECONDS_PER_DAY
MOON_PERIOD_S: float = 27.321661 * SECONDS_PER_DAY

# 1 real second = 24 simulated seconds by default
DEFAULT_TIME_SCALE: float = 24.0

# Eclipse detection defaults
ALIGN_THRESH_DEG: float = 1.8
PENUMBRA_SCALE: float = 1.02
ECLIPSE_COOLDOWN_SIM_S: float = 6.0 * 3600.0
ANTUMBRA_DEPTH: float = 0.4

# Named-phase band half-width (deg)
PHASE_EPS_DEG: float = 8.0

# Phase root-finding defaults
PHASE_SEARCH_WINDOW_S: float = 30.0 * SECONDS_PER_DAY
PHASE_SEARCH_STEPS: int = 96
PHASE_BISECT_ITER: int = 10
PHASE_NEWTON_ITER: int = 2
