"""Simulation state container."""

from dataclasses import dataclass
import jax
import jax.numpy as jnp
from jax import Array


@dataclass(frozen=True)
class MeshState:
    """Per-vertex arrays and cooling scalars at a single tick.

    A vertex with ``fixed[i]`` set is held at ``fixed_positions[i]`` every
    step. ``pinned`` marks the fixes the user asked to keep; a drag-fix is a
    fixed vertex that is not pinned.
    """

    positions: Array        # (n_vertices, 2)
    velocities: Array       # (n_vertices, 2)
    fixed_positions: Array  # (n_vertices, 2), meaningful where fixed
    fixed: Array            # (n_vertices,) bool
    pinned: Array           # (n_vertices,) bool

    alpha: float
    alpha_target: float
    tick: int

    @property
    def n_vertices(self) -> int:
        return self.positions.shape[0]

    @property
    def free(self) -> Array:
        """Mask of vertices the integrator may move."""
        return ~self.fixed

    @classmethod
    def at_rest(cls, positions: Array, alpha: float = 1.0) -> "MeshState":
        """Create a state with zero velocity and no fixed vertices."""
        positions = jnp.asarray(positions, dtype=jnp.float32)
        n = positions.shape[0]
        return cls(
            positions=positions,
            velocities=jnp.zeros((n, 2), dtype=jnp.float32),
            fixed_positions=jnp.zeros((n, 2), dtype=jnp.float32),
            fixed=jnp.zeros(n, dtype=bool),
            pinned=jnp.zeros(n, dtype=bool),
            alpha=alpha,
            alpha_target=0.0,
            tick=0,
        )

    def replace(self, **kwargs) -> "MeshState":
        """Return new MeshState with specified fields replaced."""
        from dataclasses import replace as dc_replace
        return dc_replace(self, **kwargs)


# Register MeshState as a JAX pytree for JIT compatibility
def _state_flatten(state):
    children = (state.positions, state.velocities, state.fixed_positions,
                state.fixed, state.pinned, state.alpha, state.alpha_target,
                state.tick)
    aux_data = None
    return children, aux_data


def _state_unflatten(aux_data, children):
    positions, velocities, fixed_positions, fixed, pinned, alpha, alpha_target, tick = children
    return MeshState(positions=positions, velocities=velocities,
                     fixed_positions=fixed_positions, fixed=fixed, pinned=pinned,
                     alpha=alpha, alpha_target=alpha_target, tick=tick)


jax.tree_util.register_pytree_node(MeshState, _state_flatten, _state_unflatten)
