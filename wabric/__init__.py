"""wabric: force-directed relaxation of knit fabric meshes in JAX."""

__version__ = "0.1.0"

# Core classes
from wabric.config.params import MeshConfig
from wabric.core.topology import Topology, build_topology
from wabric.core.state import MeshState
from wabric.solvers.integrator import Integrator
from wabric.simulation.simulation import Simulation

# Errors
from wabric.input_validation import (
    ValidationError,
    InvalidDimension,
    InvalidCoefficient,
    InvalidTarget,
)
from wabric.solvers.base import NumericDivergence, SimulationStateError

# Drag targets
from wabric.interaction.targets import VertexTarget, LinkTarget, FaceTarget

# Submodules for qualified imports
from wabric import config
from wabric import core
from wabric import forces
from wabric import solvers
from wabric import interaction
from wabric import diagnostics

__all__ = [
    # Core classes
    "MeshConfig",
    "Topology",
    "build_topology",
    "MeshState",
    "Integrator",
    "Simulation",
    # Errors
    "ValidationError",
    "InvalidDimension",
    "InvalidCoefficient",
    "InvalidTarget",
    "NumericDivergence",
    "SimulationStateError",
    # Drag targets
    "VertexTarget",
    "LinkTarget",
    "FaceTarget",
    # Submodules
    "config",
    "core",
    "forces",
    "solvers",
    "interaction",
    "diagnostics",
]
