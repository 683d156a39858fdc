"""
Simulation clock and controller for the Sun-Earth-Moon system.

Owns simulated time and play/pause state, evaluates positions, phase and
eclipses on every tick, and pushes immutable events to registered
listeners. All state changes go through the controller's methods.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union

from eclipse_sim.analysis.phase_search import find_time_for_phase
from eclipse_sim.core.constants import MS_PER_S
from eclipse_sim.core.frames import add
from eclipse_sim.physics.eclipse import detect_eclipse
from eclipse_sim.physics.orbit import orbit_pole, position_at
from eclipse_sim.physics.phase import (
    PHASE_GOALS_DEG,
    phase_metrics,
    phase_name_from_angle,
    signed_phase_angle,
)
from eclipse_sim.simulation.config import SimulationConfig
from eclipse_sim.simulation.events import (
    EclipseEvent,
    PhaseChangeEvent,
    Positions,
    PositionsEvent,
    SimulationEvent,
    SimulationListener,
    dispatch,
)

logger = logging.getLogger(__name__)

SimTime = Union[int, float, str, datetime]


@dataclass
class SimulationState:
    """Mutable session state. Only SimulationController writes to it."""
    now_ms: float
    time_scale: float
    playing: bool = True
    current_phase: Optional[str] = None
    illuminated_fraction: Optional[float] = None
    last_phase_key: Optional[str] = None
    last_eclipse: Optional[EclipseEvent] = None
    eclipse_latch: Optional[str] = None
    cooldown_until_s: float = -math.inf


@dataclass(frozen=True)
class SimulationSnapshot:
    now_ms: float
    time_scale: float
    is_playing: bool
    current_phase: Optional[str]
    illuminated_fraction: Optional[float]
    last_eclipse: Optional[EclipseEvent]
    eclipse_latch: Optional[str]
    cooldown_until_s: float


def parse_sim_time(value: SimTime) -> float:
    """
    Convert epoch ms, a datetime or an ISO-8601 string to epoch ms.
    Naive datetimes are taken as UTC.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a simulation time: {value!r}")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError(f"Simulation time must be finite. Got: {value}")
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Unparseable date string: {value!r}") from None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp() * MS_PER_S
    raise ValueError(f"Not a simulation time: {value!r}")


class SimulationController:
    """
    Deterministic Sun-Earth-Moon simulator driven by external ticks.

    States: playing / paused. `tick` advances time only while playing.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        listeners: Optional[Iterable[SimulationListener]] = None,
    ):
        self.config = (config or SimulationConfig()).finalize()
        self._listeners: List[SimulationListener] = list(listeners or [])
        self._moon_pole = orbit_pole(self.config.moon)
        self._state = SimulationState(
            now_ms=self.config.time.start_epoch_ms,
            time_scale=self.config.time.time_scale,
        )

    # ---- Listeners ----

    def add_listener(self, listener: SimulationListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SimulationListener) -> None:
        # by identity; dataclass listeners may compare equal
        for i, registered in enumerate(self._listeners):
            if registered is listener:
                del self._listeners[i]
                return
        raise ValueError("Listener is not registered.")

    def _emit(self, event: SimulationEvent) -> None:
        for listener in list(self._listeners):
            dispatch(listener, event)

    # ---- Main loop ----

    def tick(self, dt_real_s: float) -> List[SimulationEvent]:
        """
        Advance simulated time by dt_real_s * time_scale and evaluate.

        Returns the events emitted during this tick, in emission order
        (phase change, eclipse, positions). Paused: no-op, returns [].
        """
        st = self._state
        if not st.playing:
            return []
        if not (math.isfinite(dt_real_s) and dt_real_s >= 0):
            raise ValueError(f"dt_real_s must be finite and non-negative. Got: {dt_real_s}")

        st.now_ms += dt_real_s * st.time_scale * MS_PER_S
        positions = self.positions_at(st.now_ms)
        events: List[SimulationEvent] = []

        phase_event = self._update_phase(positions)
        if phase_event is not None:
            events.append(phase_event)

        eclipse_event = self._detect_eclipse(positions)
        if eclipse_event is not None:
            events.append(eclipse_event)

        events.append(PositionsEvent(positions=positions, t_ms=st.now_ms))

        for event in events:
            self._emit(event)
        return events

    def _update_phase(self, positions: Positions) -> Optional[PhaseChangeEvent]:
        st = self._state
        metrics = phase_metrics(positions.sun, positions.earth, positions.moon)
        key = phase_name_from_angle(metrics.phase_angle, self.config.detection.phase_eps_deg)
        st.illuminated_fraction = metrics.illuminated_fraction

        if key is None or key == st.last_phase_key:
            if st.current_phase is None:
                st.current_phase = key
            return None

        st.last_phase_key = key
        st.current_phase = key
        logger.info("Phase change: %s at t=%.0f ms (k=%.3f)", key, st.now_ms, metrics.illuminated_fraction)
        return PhaseChangeEvent(
            phase=key,
            t_ms=st.now_ms,
            phase_angle=metrics.phase_angle,
            illuminated_fraction=metrics.illuminated_fraction,
        )

    def _detect_eclipse(self, positions: Positions) -> Optional[EclipseEvent]:
        st = self._state
        now_s = st.now_ms / MS_PER_S
        if now_s < st.cooldown_until_s:
            return None

        det = self.config.detection
        hit = detect_eclipse(
            positions.sun,
            positions.earth,
            positions.moon,
            sun_radius=self.config.sun.radius,
            earth_radius=self.config.earth.radius,
            moon_radius=self.config.moon.radius,
            align_thresh_deg_solar=det.align_thresh_deg_solar,
            align_thresh_deg_lunar=det.align_thresh_deg_lunar,
            penumbra_scale=det.penumbra_scale,
            antumbra_depth=det.antumbra_depth,
        )
        if hit is None:
            return None

        st.cooldown_until_s = now_s + det.eclipse_cooldown_sim_s
        st.eclipse_latch = hit.latch_key
        event = EclipseEvent(
            type=hit.type,
            subtype=hit.subtype,
            eclipse_class=hit.eclipse_class,
            t_ms=st.now_ms,
        )
        st.last_eclipse = event
        logger.info("Eclipse detected: %s %s (%s) at t=%.0f ms", hit.type, hit.eclipse_class, hit.subtype, st.now_ms)
        return event

    # ---- Public controls ----

    def play(self) -> None:
        self._state.playing = True

    def pause(self) -> None:
        self._state.playing = False

    def toggle(self) -> None:
        self._state.playing = not self._state.playing

    def is_playing(self) -> bool:
        return self._state.playing

    def set_time_scale(self, scale: float) -> None:
        if not math.isfinite(scale):
            raise ValueError(f"Time scale must be finite. Got: {scale}")
        if scale < 0:
            raise ValueError(f"Time scale must be non-negative. Got: {scale}")
        self._state.time_scale = float(scale)

    def set_sim_time(self, value: SimTime) -> None:
        """Jump to an absolute epoch (ms, datetime or ISO-8601 string)."""
        self._jump_to(parse_sim_time(value))

    def get_sim_time(self) -> float:
        return self._state.now_ms

    def get_positions(self) -> Positions:
        return self.positions_at(self._state.now_ms)

    def get_state(self) -> SimulationSnapshot:
        st = self._state
        return SimulationSnapshot(
            now_ms=st.now_ms,
            time_scale=st.time_scale,
            is_playing=st.playing,
            current_phase=st.current_phase,
            illuminated_fraction=st.illuminated_fraction,
            last_eclipse=st.last_eclipse,
            eclipse_latch=st.eclipse_latch,
            cooldown_until_s=st.cooldown_until_s,
        )

    # ---- Phase jumps ----

    def jump_to_phase(self, name: str, search_window_s: Optional[float] = None) -> Optional[float]:
        """
        Move `now` to the nearest epoch where the Moon shows phase `name`.

        name: "new", "full" or "quarter" (either quarter).
        Returns the new epoch in ms, or None when the search window holds no
        occurrence; in that case nothing changes.
        """
        if name not in PHASE_GOALS_DEG:
            raise ValueError(f"Unknown phase {name!r}; expected one of {sorted(PHASE_GOALS_DEG)}")

        search = self.config.search
        # new/full sit at the ends of [0, 180]; only the signed angle crosses them
        phase_fn = self.phase_degrees_at if name == "quarter" else self.signed_phase_degrees_at
        t = find_time_for_phase(
            phase_fn,
            PHASE_GOALS_DEG[name],
            center_ms=self._state.now_ms,
            search_window_s=search_window_s if search_window_s is not None else search.window_s,
            steps=search.steps,
            bisect_iter=search.bisect_iter,
            newton_iter=search.newton_iter,
        )
        if t is None or not math.isfinite(t):
            logger.warning("No %s phase found within the search window around t=%.0f ms", name, self._state.now_ms)
            return None

        self._jump_to(t)
        st = self._state
        st.last_phase_key = name
        st.current_phase = name
        logger.info("Jumped to %s at t=%.0f ms", name, t)
        return t

    def jump_to_new_moon(self) -> Optional[float]:
        return self.jump_to_phase("new")

    def jump_to_full_moon(self) -> Optional[float]:
        return self.jump_to_phase("full")

    # ---- Geometry queries ----

    def positions_at(self, t_ms: float) -> Positions:
        """Sun, Earth and Moon at epoch t_ms. Pure, no state change."""
        ref = self.config.time.start_epoch_ms
        sun = self.config.sun.position
        earth = add(sun, position_at(t_ms, ref, self.config.earth))
        moon = add(earth, position_at(t_ms, ref, self.config.moon))
        return Positions(sun=sun, earth=earth, moon=moon)

    def phase_degrees_at(self, t_ms: float) -> float:
        p = self.positions_at(t_ms)
        return math.degrees(phase_metrics(p.sun, p.earth, p.moon).phase_angle)

    def signed_phase_degrees_at(self, t_ms: float) -> float:
        p = self.positions_at(t_ms)
        return math.degrees(signed_phase_angle(p.sun, p.earth, p.moon, self._moon_pole))

    def _jump_to(self, t_ms: float) -> None:
        st = self._state
        st.now_ms = t_ms
        st.cooldown_until_s = -math.inf
        st.eclipse_latch = None
        p = self.positions_at(t_ms)
        st.illuminated_fraction = phase_metrics(p.sun, p.earth, p.moon).illuminated_fraction
