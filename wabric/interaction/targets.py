"""What a drag can grab: a vertex, a link or a face."""

from dataclasses import dataclass
from typing import Tuple, Union

from wabric.core.topology import LinkKind, Topology
from wabric.input_validation import InvalidTarget, validate_vertex_id


@dataclass(frozen=True)
class VertexTarget:
    vertex_id: int


@dataclass(frozen=True)
class LinkTarget:
    kind: LinkKind
    link_id: int


@dataclass(frozen=True)
class FaceTarget:
    face_id: int


DragTarget = Union[VertexTarget, LinkTarget, FaceTarget]


def resolve_vertices(target: DragTarget, topology: Topology) -> Tuple[int, ...]:
    """Vertex ids a drag on ``target`` moves: 1, 2 or 4 of them.

    Raises:
        InvalidTarget: If the target does not exist in ``topology``
    """
    if isinstance(target, VertexTarget):
        return (validate_vertex_id(target.vertex_id, topology.n_vertices),)
    elif isinstance(target, LinkTarget):
        link = topology.link(target.kind, target.link_id)
        return (link.source, link.target)
    elif isinstance(target, FaceTarget):
        return topology.face(target.face_id).vertices
    raise InvalidTarget(f"Not a drag target: {target!r}")
