"""Simulation facade for host applications."""
from wabric.simulation.simulation import Simulation
from wabric.config.params import MeshConfig
from wabric.core.state import MeshState
from wabric.core.topology import Topology

__all__ = ["Simulation", "MeshConfig", "MeshState", "Topology"]
