"""Initial vertex placement."""

import jax.numpy as jnp
from jax import Array

from wabric import constants as C
from wabric.config.params import MeshConfig
from wabric.core.topology import Topology


def grid_layout(topology: Topology, spacing: float, center: tuple) -> Array:
    """Undeformed grid with the given spacing, centred on ``center``."""
    coords = topology.grid_coordinates() * spacing
    extent = jnp.array([topology.width, topology.height], dtype=jnp.float32) * spacing
    origin = jnp.asarray(center, dtype=jnp.float32) - 0.5 * extent
    return coords + origin


def phyllotaxis_layout(n_vertices: int, center: tuple) -> Array:
    """Sunflower spiral d3-force uses for nodes created without a position.

    Node i sits at radius ``INITIAL_RADIUS * sqrt(0.5 + i)`` and angle
    ``i * INITIAL_ANGLE`` around the centre.
    """
    i = jnp.arange(n_vertices, dtype=jnp.float32)
    radius = C.INITIAL_RADIUS * jnp.sqrt(0.5 + i)
    angle = i * C.INITIAL_ANGLE
    offsets = jnp.stack([radius * jnp.cos(angle), radius * jnp.sin(angle)], axis=-1)
    return offsets + jnp.asarray(center, dtype=jnp.float32)


def initial_positions(topology: Topology, config: MeshConfig) -> Array:
    """Seed positions for a freshly built topology."""
    if config.initial_layout == "grid":
        spacing = config.initial_spacing or config.edge_length
        return grid_layout(topology, spacing, config.center)
    elif config.initial_layout == "phyllotaxis":
        return phyllotaxis_layout(topology.n_vertices, config.center)
    raise ValueError(f"Unknown initial layout: {config.initial_layout}")
