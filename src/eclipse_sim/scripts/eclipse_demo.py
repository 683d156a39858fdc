import logging
from datetime import datetime, timezone

from eclipse_sim.simulation.config import SimulationConfig, TimeConfig
from eclipse_sim.simulation.controller import SimulationController
from eclipse_sim.simulation.engine import Engine


def fmt(t_ms):
    return datetime.fromtimestamp(t_ms / 1000.0, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# 1 real second = 1 simulated hour; 10-minute simulated steps
config = SimulationConfig(time=TimeConfig(start_epoch_ms=0.0, time_scale=3600.0))
controller = SimulationController(config)

engine = Engine(dt_real_s=1.0 / 6.0)
log = engine.run(controller, duration_real_s=365.0 * 24.0)

print(f"Ticks: {len(log.positions)}")
print(f"Phase changes: {len(log.phase_changes)}")
print(f"Eclipses: {len(log.eclipses)}")
for ev in log.eclipses:
    print(f"  {fmt(ev.t_ms)}  {ev.type:5s} {ev.eclipse_class:8s} ({ev.subtype})")

for name in ("full", "new"):
    t = controller.jump_to_phase(name)
    if t is None:
        print(f"No {name} moon within the search window")
        continue
    print(f"Next {name} moon: {fmt(t)}  phase angle = {controller.phase_degrees_at(t):.3f} deg")
