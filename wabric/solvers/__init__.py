"""Time integration for mesh relaxation."""

from wabric.solvers.base import NumericDivergence, SimulationStateError, advance_vertices
from wabric.solvers.integrator import Integrator, Status, TickListener

__all__ = [
    "NumericDivergence",
    "SimulationStateError",
    "advance_vertices",
    "Integrator",
    "Status",
    "TickListener",
]
