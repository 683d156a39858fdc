from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from eclipse_sim.simulation.controller import SimulationController
from eclipse_sim.simulation.events import (
    EclipseEvent,
    ListenerBase,
    PhaseChangeEvent,
    Positions,
    PositionsEvent,
)

logger = logging.getLogger(__name__)


@dataclass
class SimulationLog(ListenerBase):
    """
    In-memory record of controller output.
    Attach it as a listener; nothing is written to disk.
    """
    # (t_ms, positions) per tick
    positions: List[Tuple[float, Positions]] = field(default_factory=list)
    phase_changes: List[PhaseChangeEvent] = field(default_factory=list)
    eclipses: List[EclipseEvent] = field(default_factory=list)

    def on_positions(self, event: PositionsEvent) -> None:
        self.positions.append((event.t_ms, event.positions))

    def on_phase_change(self, event: PhaseChangeEvent) -> None:
        self.phase_changes.append(event)

    def on_eclipse_event(self, event: EclipseEvent) -> None:
        self.eclipses.append(event)

    def times_ms(self) -> List[float]:
        return [t for (t, _p) in self.positions]


@dataclass
class Engine:
    """
    Fixed-step driver: ticks a controller at a constant real-time step.
    Deterministic replay: same config + dt + duration => same log.
    """
    dt_real_s: float

    def run(self, controller: SimulationController, duration_real_s: float) -> SimulationLog:
        if self.dt_real_s <= 0:
            raise ValueError("dt_real_s must be positive.")
        if duration_real_s < 0:
            raise ValueError("duration_real_s must be >= 0.")

        log = SimulationLog()
        controller.add_listener(log)
        try:
            # inclusive end if it lands exactly; otherwise last tick < end
            n_ticks = int(duration_real_s / self.dt_real_s + 1e-9)
            for _ in range(n_ticks):
                controller.tick(self.dt_real_s)
        finally:
            controller.remove_listener(log)

        logger.debug(
            "Engine run: %d ticks, %d phase changes, %d eclipses",
            len(log.positions), len(log.phase_changes), len(log.eclipses),
        )
        return log
