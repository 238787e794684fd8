"""Tests for MeshState and the initial layouts."""
import pytest
import jax
import jax.numpy as jnp
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from wabric.config.params import MeshConfig
from wabric.core.layout import grid_layout, initial_positions, phyllotaxis_layout
from wabric.core.state import MeshState
from wabric.core.topology import build_topology


class TestMeshState:
    """Tests for the MeshState container."""

    def test_at_rest(self):
        state = MeshState.at_rest(jnp.ones((6, 2)))
        assert state.n_vertices == 6
        assert jnp.allclose(state.velocities, 0.0)
        assert not bool(jnp.any(state.fixed))
        assert not bool(jnp.any(state.pinned))
        assert state.alpha == 1.0
        assert state.alpha_target == 0.0
        assert state.tick == 0

    def test_replace_is_immutable(self):
        state = MeshState.at_rest(jnp.zeros((4, 2)))
        new_state = state.replace(alpha=0.5, tick=3)
        assert new_state.alpha == 0.5
        assert new_state.tick == 3
        assert state.alpha == 1.0

    def test_free_is_complement_of_fixed(self):
        state = MeshState.at_rest(jnp.zeros((3, 2)))
        state = state.replace(fixed=jnp.array([True, False, False]))
        assert state.free.tolist() == [False, True, True]

    def test_state_is_jax_pytree(self):
        """MeshState should survive pytree flatten/unflatten."""
        state = MeshState.at_rest(jnp.arange(8.0).reshape(4, 2), alpha=0.25)
        leaves, treedef = jax.tree_util.tree_flatten(state)
        reconstructed = jax.tree_util.tree_unflatten(treedef, leaves)
        assert jnp.allclose(reconstructed.positions, state.positions)
        assert reconstructed.alpha == 0.25

    def test_state_jit_compatible(self):
        """JIT-compiled functions should accept and return MeshState."""
        state = MeshState.at_rest(jnp.zeros((4, 2)))

        @jax.jit
        def shift(s):
            return s.replace(positions=s.positions + 1.0)

        shifted = shift(state)
        assert jnp.allclose(shifted.positions, 1.0)


class TestLayout:
    """Initial vertex placement."""

    def test_grid_centred_on_viewport(self):
        topo = build_topology(4, 2)
        positions = grid_layout(topo, 20.0, (480.0, 300.0))
        assert jnp.allclose(jnp.mean(positions, axis=0), jnp.array([480.0, 300.0]))
        assert jnp.allclose(positions[1] - positions[0], jnp.array([20.0, 0.0]))
        assert jnp.allclose(positions[5] - positions[0], jnp.array([0.0, 20.0]))

    def test_initial_spacing_defaults_to_edge_length(self):
        config = MeshConfig(width=2, height=2, edge_length=12.0)
        positions = initial_positions(build_topology(2, 2), config)
        assert jnp.allclose(positions[1] - positions[0], jnp.array([12.0, 0.0]))

    def test_initial_spacing_override(self):
        config = MeshConfig(width=2, height=2, edge_length=12.0, initial_spacing=5.0)
        positions = initial_positions(build_topology(2, 2), config)
        assert jnp.allclose(positions[1] - positions[0], jnp.array([5.0, 0.0]))

    def test_phyllotaxis_distinct_points(self):
        positions = phyllotaxis_layout(50, (0.0, 0.0))
        assert positions.shape == (50, 2)
        diffs = positions[:, None, :] - positions[None, :, :]
        dist = jnp.sqrt(jnp.sum(diffs**2, axis=-1)) + jnp.eye(50) * 1e9
        assert float(jnp.min(dist)) > 1.0

    def test_phyllotaxis_first_radius(self):
        positions = phyllotaxis_layout(3, (10.0, 10.0))
        r0 = float(jnp.linalg.norm(positions[0] - jnp.array([10.0, 10.0])))
        assert r0 == pytest.approx(10.0 * 0.5 ** 0.5, rel=1e-5)
