"""Core mesh data: topology, state and initial layout."""

from wabric.core.topology import (
    Face,
    Link,
    LinkKind,
    LINK_KINDS,
    Topology,
    build_topology,
)
from wabric.core.state import MeshState
from wabric.core.layout import grid_layout, phyllotaxis_layout, initial_positions

__all__ = [
    "Face",
    "Link",
    "LinkKind",
    "LINK_KINDS",
    "Topology",
    "build_topology",
    "MeshState",
    "grid_layout",
    "phyllotaxis_layout",
    "initial_positions",
]
