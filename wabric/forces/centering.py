"""Global centering of the free vertices."""

from dataclasses import dataclass

import jax
import jax.numpy as jnp
from jax import Array


@jax.jit
def centering_offset(positions: Array, free: Array, center: Array, strength: float) -> Array:
    """Translation that moves the centroid of the free vertices toward ``center``.

    Non-finite positions are left out. Returns a (2,) offset; zero when no
    vertex is free.
    """
    counted = free & jnp.all(jnp.isfinite(positions), axis=-1)
    count = jnp.sum(counted.astype(positions.dtype))
    total = jnp.sum(jnp.where(counted[:, None], positions, 0.0), axis=0)
    centroid = total / jnp.maximum(count, 1.0)
    offset = (center - centroid) * strength
    return jnp.where(count > 0, offset, jnp.zeros_like(offset))


@dataclass(frozen=True)
class CenteringForce:
    """Pulls the free vertices' centroid toward the viewport centre.

    Unlike the velocity terms this shifts positions directly, like d3's
    forceCenter; the integrator adds the offset to every free vertex.
    """

    center: tuple
    strength: float = 1.0

    @property
    def name(self) -> str:
        return "center"

    def offset(self, positions: Array, free: Array) -> Array:
        return centering_offset(
            positions, free, jnp.asarray(self.center, dtype=positions.dtype), self.strength
        )
