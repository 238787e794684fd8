"""Integrator errors, divergence records and the per-vertex update kernel."""

from dataclasses import dataclass
from typing import Tuple

import jax
import jax.numpy as jnp
from jax import Array


class SimulationStateError(RuntimeError):
    """Raised when an operation is not valid in the integrator's current status."""
    pass


@dataclass(frozen=True)
class NumericDivergence:
    """A tick in which some vertices produced NaN or infinite values.

    The listed vertices were put back at their start-of-tick positions with
    zero velocity and held fixed for the following tick.
    """

    tick: int
    vertex_ids: Tuple[int, ...]

    def __str__(self) -> str:
        return f"non-finite position at tick {self.tick} for vertices {list(self.vertex_ids)}"


@jax.jit
def advance_vertices(
    positions: Array,
    velocities: Array,
    fixed: Array,
    fixed_positions: Array,
    offset: Array,
    velocity_decay: float,
    max_speed: float,
) -> Tuple[Array, Array, Array]:
    """Damp velocities and move every free vertex; snap fixed ones.

    Free vertices: ``v <- v * velocity_decay`` (clamped to ``max_speed``),
    ``x <- x + v + offset``. Fixed vertices: ``x <- fixed_position``,
    ``v <- 0``. Any vertex whose new position or velocity is not finite is
    returned to ``positions`` with zero velocity.

    Returns:
        (positions, velocities, diverged) where diverged is an (n,) bool mask
    """
    v = velocities * velocity_decay
    speed = jnp.sqrt(jnp.sum(v * v, axis=-1))
    too_fast = speed > max_speed
    v = jnp.where(too_fast[:, None], v * (max_speed / jnp.where(too_fast, speed, 1.0))[:, None], v)

    new_x = positions + v + offset
    new_x = jnp.where(fixed[:, None], fixed_positions, new_x)
    v = jnp.where(fixed[:, None], 0.0, v)

    finite = jnp.all(jnp.isfinite(new_x), axis=-1) & jnp.all(jnp.isfinite(v), axis=-1)
    diverged = ~finite
    new_x = jnp.where(diverged[:, None], positions, new_x)
    v = jnp.where(diverged[:, None], 0.0, v)
    return new_x, v, diverged
