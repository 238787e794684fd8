"""Minimum-separation constraint between vertices."""

from dataclasses import dataclass

import jax
import jax.numpy as jnp
import numpy as np
from jax import Array

from wabric.forces.base import ForceTerm
from wabric.forces.neighbors import neighbor_pairs, pad_pairs


@jax.jit
def collision_velocities(
    positions: Array,
    velocities: Array,
    pair_i: Array,
    pair_j: Array,
    mask: Array,
    separation: float,
    strength: float,
) -> Array:
    """Push overlapping pairs apart along the line between their predicted positions.

    A pair whose predicted distance ``l`` is below ``separation`` gets a
    velocity change of ``(separation - l) * strength``, half to each vertex
    (equal radii). Coincident pairs and padding are skipped.
    """
    predicted = positions + velocities
    delta = predicted[pair_i] - predicted[pair_j]
    length = jnp.sqrt(jnp.sum(delta * delta, axis=-1))
    active = mask & (length > 0) & (length < separation)
    safe = jnp.where(active, length, 1.0)
    scale = jnp.where(active, (separation - length) / safe * strength, 0.0)
    push = 0.5 * delta * scale[:, None]

    v = velocities.at[pair_i].add(push)
    v = v.at[pair_j].add(-push)
    return v


@dataclass(frozen=True)
class CollisionForce(ForceTerm):
    """Keeps vertices at least ``2 * radius`` apart.

    Not scaled by alpha, matching d3's forceCollide; one pass per tick.

    Attributes:
        radius: Disc radius of each vertex
        strength: Fraction of the overlap resolved per tick
    """

    radius: float
    strength: float = 1.0

    @property
    def name(self) -> str:
        return "collision"

    @property
    def separation(self) -> float:
        return 2.0 * self.radius

    def apply(self, positions: Array, velocities: Array, alpha: float) -> Array:
        # Pairs are found on predicted positions, as the kernel tests them
        predicted = np.asarray(positions + velocities)
        i, j = neighbor_pairs(predicted, self.separation)
        if i.size == 0:
            return velocities
        pi, pj, mask = pad_pairs(i, j)
        return collision_velocities(
            positions,
            velocities,
            jnp.asarray(pi),
            jnp.asarray(pj),
            jnp.asarray(mask),
            self.separation,
            self.strength,
        )
