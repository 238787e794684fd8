"""Interactive pinning and dragging."""

from wabric.interaction.targets import (
    DragTarget,
    VertexTarget,
    LinkTarget,
    FaceTarget,
    resolve_vertices,
)
from wabric.interaction.controller import InteractionController

__all__ = [
    "DragTarget",
    "VertexTarget",
    "LinkTarget",
    "FaceTarget",
    "resolve_vertices",
    "InteractionController",
]
