from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Union

from eclipse_sim.core.frames import Vector3


@dataclass(frozen=True)
class Positions:
    sun: Vector3
    earth: Vector3
    moon: Vector3


@dataclass(frozen=True)
class PositionsEvent:
    positions: Positions
    t_ms: float


@dataclass(frozen=True)
class PhaseChangeEvent:
    phase: str  # "new" | "full" | "quarter"
    t_ms: float
    phase_angle: float  # rad
    illuminated_fraction: float


@dataclass(frozen=True)
class EclipseEvent:
    type: str  # "solar" | "lunar"
    subtype: str  # "umbra" | "penumbra" | "antumbra"
    eclipse_class: str  # "total" | "partial" | "annular"
    t_ms: float


SimulationEvent = Union[PositionsEvent, PhaseChangeEvent, EclipseEvent]


class SimulationListener(Protocol):
    """
    Observer interface for controller output.
    Events are immutable snapshots; keep them, don't expect them to update.
    """

    def on_positions(self, event: PositionsEvent) -> None:
        ...

    def on_phase_change(self, event: PhaseChangeEvent) -> None:
        ...

    def on_eclipse_event(self, event: EclipseEvent) -> None:
        ...


class ListenerBase:
    """No-op implementation; subclass and override what you need."""

    def on_positions(self, event: PositionsEvent) -> None:
        pass

    def on_phase_change(self, event: PhaseChangeEvent) -> None:
        pass

    def on_eclipse_event(self, event: EclipseEvent) -> None:
        pass


def dispatch(listener: SimulationListener, event: SimulationEvent) -> None:
    if isinstance(event, PositionsEvent):
        listener.on_positions(event)
    elif isinstance(event, PhaseChangeEvent):
        listener.on_phase_change(event)
    elif isinstance(event, EclipseEvent):
        listener.on_eclipse_event(event)
    else:
        raise TypeError(f"Unknown event type: {type(event).__name__}")
