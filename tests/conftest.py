"""Pytest fixtures for mesh and invariant testing."""
import pytest
import jax
import jax.numpy as jnp
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tests.invariants import Invariant, InvariantResult
from wabric.config.params import MeshConfig
from wabric.core.topology import build_topology
from wabric.solvers.integrator import Integrator
from wabric.simulation.simulation import Simulation


@pytest.fixture
def invariant_checker():
    """Returns a function that checks all invariants and collects failures."""
    def check_all(
        invariants: list[Invariant],
        state_before,
        state_after,
        step: int
    ) -> tuple[list[InvariantResult], list[tuple[int, InvariantResult]]]:
        results = [inv.check(state_before, state_after) for inv in invariants]
        failures = [(step, r) for r in results if not r.passed]
        return results, failures
    return check_all


@pytest.fixture
def small_config():
    """4x3 mesh with every term on and no unfold burst."""
    return MeshConfig(width=4, height=3, unfold_ticks=0)


@pytest.fixture
def stretch_only_config():
    """3x3 mesh held by stretch links only, seeded compressed."""
    return MeshConfig(
        width=3,
        height=3,
        edge_length=20.0,
        iterations=5,
        enable_shear=False,
        enable_strut=False,
        enable_charge=False,
        enable_collision=False,
        unfold_ticks=0,
        initial_spacing=15.0,
    )


@pytest.fixture
def started_integrator(small_config):
    """Integrator running on the small_config mesh."""
    integrator = Integrator()
    integrator.start(build_topology(small_config.width, small_config.height), small_config)
    return integrator


@pytest.fixture
def simulation(small_config):
    """Started Simulation on the small_config mesh."""
    sim = Simulation(config=small_config)
    sim.start()
    return sim
