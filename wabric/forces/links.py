"""Spring terms for the stretch, shear and strut link families."""

from dataclasses import dataclass
from functools import partial

import jax
import jax.numpy as jnp
from jax import Array, lax

from wabric.forces.base import ForceTerm


@partial(jax.jit, static_argnames=("iterations",))
def relax_links(
    positions: Array,
    velocities: Array,
    links: Array,
    bias: Array,
    inv_degree: Array,
    distance: float,
    gain: float,
    iterations: int,
) -> Array:
    """Run ``iterations`` Jacobi passes of the d3-style link correction.

    Each pass looks at predicted positions ``x + v``. A link whose predicted
    length is ``l`` asks for a velocity change of ``(l - distance) * gain``
    along its direction, shared between the endpoints by ``bias`` (the
    target takes ``bias``, the source the rest). Corrections from all links
    of the family are summed per vertex and divided by the vertex's degree
    in the family, which keeps a pass stable for any gain <= 1.

    Args:
        positions: (n, 2) start-of-tick positions
        velocities: (n, 2) current velocities
        links: (m, 2) source/target ids
        bias: (m,) share of each correction given to the target
        inv_degree: (n,) 1/degree, zero for vertices with no link of this family
        distance: Rest distance
        gain: Stiffness scaled by alpha, clipped to 1
        iterations: Number of passes

    Returns:
        (n, 2) velocities after the passes
    """
    source = links[:, 0]
    target = links[:, 1]
    n = positions.shape[0]

    def one_pass(_, v):
        predicted = positions + v
        delta = predicted[target] - predicted[source]
        length = jnp.sqrt(jnp.sum(delta * delta, axis=-1))
        # Coincident or non-finite endpoints have no direction: no force
        usable = (length > 0) & jnp.isfinite(length)
        safe = jnp.where(usable, length, 1.0)
        scale = (length - distance) / safe * gain
        correction = jnp.where(usable[:, None], delta * scale[:, None], 0.0)

        dv = jnp.zeros((n, 2), dtype=v.dtype)
        dv = dv.at[target].add(-correction * bias[:, None])
        dv = dv.at[source].add(correction * (1.0 - bias)[:, None])
        return v + dv * inv_degree[:, None]

    return lax.fori_loop(0, iterations, one_pass, velocities)


def link_bias(links: Array, degree: Array) -> Array:
    """d3 bias: the endpoint with fewer links moves more.

    ``bias = deg(source) / (deg(source) + deg(target))`` is the target's share.
    """
    deg_source = degree[links[:, 0]]
    deg_target = degree[links[:, 1]]
    return deg_source / (deg_source + deg_target)


@dataclass(frozen=True, eq=False)
class LinkForce(ForceTerm):
    """Pulls the endpoints of every link in one family toward a rest distance.

    Attributes:
        kind: Link family name
        links: (m, 2) link array from the topology
        degree: (n,) number of links of this family per vertex
        distance: Rest distance
        stiffness: Spring strength; the per-pass gain is min(alpha*stiffness, 1)
        iterations: Relaxation passes per tick
    """

    kind: str
    links: Array
    degree: Array
    distance: float
    stiffness: float
    iterations: int = 1

    @property
    def name(self) -> str:
        return self.kind

    def apply(self, positions: Array, velocities: Array, alpha: float) -> Array:
        if self.links.shape[0] == 0:
            return velocities
        gain = jnp.minimum(alpha * self.stiffness, 1.0)
        inv_degree = jnp.where(self.degree > 0, 1.0 / jnp.maximum(self.degree, 1.0), 0.0)
        return relax_links(
            positions,
            velocities,
            self.links,
            link_bias(self.links, self.degree),
            inv_degree,
            self.distance,
            gain,
            iterations=self.iterations,
        )
