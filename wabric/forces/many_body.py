"""Pairwise inverse-distance repulsion (charge and the transient unfold term)."""

from dataclasses import dataclass

import jax
import jax.numpy as jnp
import numpy as np
from jax import Array

from wabric import constants as C
from wabric.forces.base import ForceTerm
from wabric.forces.neighbors import neighbor_pairs, pad_pairs


@jax.jit
def many_body_velocities(
    positions: Array,
    velocities: Array,
    pair_i: Array,
    pair_j: Array,
    mask: Array,
    strength: float,
    distance_min2: float,
) -> Array:
    """Apply ``v_i += (x_j - x_i) * strength / d²`` to both ends of each pair.

    ``d²`` is floored as d3 does: below ``distance_min2`` it becomes
    ``sqrt(distance_min2 * d²)``. Coincident pairs and padding are skipped.

    Args:
        positions: (n, 2) start-of-tick positions
        velocities: (n, 2)
        pair_i, pair_j: (p,) pair indices
        mask: (p,) False on padding
        strength: Strength already multiplied by alpha (negative repels)
        distance_min2: Squared minimum distance
    """
    delta = positions[pair_j] - positions[pair_i]
    d2 = jnp.sum(delta * delta, axis=-1)
    d2 = jnp.where(d2 < distance_min2, jnp.sqrt(distance_min2 * d2), d2)
    active = mask & (d2 > 0)
    weight = jnp.where(active, strength / jnp.where(active, d2, 1.0), 0.0)
    push = delta * weight[:, None]

    v = velocities.at[pair_i].add(push)
    v = v.at[pair_j].add(-push)
    return v


@dataclass(frozen=True)
class ManyBodyForce(ForceTerm):
    """Inverse-distance repulsion between every pair closer than ``distance_max``.

    Attributes:
        label: Term name ("charge" or "unfold")
        strength: Negative repels; the effective strength is strength * alpha
        distance_max: Pairs at or beyond this distance are ignored
        distance_min: Distances below this are softened
    """

    label: str
    strength: float
    distance_max: float
    distance_min: float = C.CHARGE_DISTANCE_MIN

    @property
    def name(self) -> str:
        return self.label

    def apply(self, positions: Array, velocities: Array, alpha: float) -> Array:
        if self.strength == 0 or self.distance_max <= 0:
            return velocities
        i, j = neighbor_pairs(np.asarray(positions), self.distance_max)
        if i.size == 0:
            return velocities
        pi, pj, mask = pad_pairs(i, j)
        return many_body_velocities(
            positions,
            velocities,
            jnp.asarray(pi),
            jnp.asarray(pj),
            jnp.asarray(mask),
            self.strength * alpha,
            self.distance_min ** 2,
        )
