"""Knit-mesh topology: vertices, quad faces and the three link families."""

from dataclasses import dataclass
from functools import cached_property
from typing import Dict, Iterator, List, Literal, Tuple

import jax.numpy as jnp
import numpy as np
from jax import Array

from wabric.input_validation import InvalidTarget, validate_dimension

LinkKind = Literal["stretch", "shear", "strut"]
LINK_KINDS: Tuple[LinkKind, ...] = ("stretch", "shear", "strut")


@dataclass(frozen=True)
class Link:
    """A single link between two vertices."""

    source: int
    target: int
    kind: LinkKind


@dataclass(frozen=True)
class Face:
    """A quad face; vertices run (x,y), (x+1,y), (x+1,y+1), (x,y+1)."""

    index: int
    vertices: Tuple[int, int, int, int]


@dataclass(frozen=True, eq=False)
class Topology:
    """Immutable mesh connectivity for one (width, height) pair.

    Vertices are implicit: there are (width+1)*(height+1) of them, numbered
    row-major so that ``index_of(x, y) == y*(width+1) + x``.

    Attributes:
        width: Number of cells along a course (row)
        height: Number of cells along a wale (column)
        faces: Face corner ids, shape (width*height, 4)
        stretch_links: (source, target) pairs, shape (n_stretch, 2)
        shear_links: (source, target) pairs, shape (n_shear, 2)
        strut_links: (source, target) pairs, shape (n_strut, 2)
        shear_faces: Face id each shear link crosses, shape (n_shear,)
    """

    width: int
    height: int
    faces: Array
    stretch_links: Array
    shear_links: Array
    strut_links: Array
    shear_faces: Array

    @property
    def vertices_w(self) -> int:
        return self.width + 1

    @property
    def vertices_h(self) -> int:
        return self.height + 1

    @property
    def n_vertices(self) -> int:
        return self.vertices_w * self.vertices_h

    @property
    def n_faces(self) -> int:
        return self.faces.shape[0]

    def index_of(self, x: int, y: int) -> int:
        """Vertex id at grid column x, row y."""
        if not (0 <= x <= self.width and 0 <= y <= self.height):
            raise InvalidTarget(f"Grid point ({x}, {y}) outside {self.width}x{self.height} mesh")
        return y * self.vertices_w + x

    def links(self, kind: LinkKind) -> Array:
        """Link array for one family."""
        if kind == "stretch":
            return self.stretch_links
        elif kind == "shear":
            return self.shear_links
        elif kind == "strut":
            return self.strut_links
        raise ValueError(f"Unknown link kind: {kind}")

    def link(self, kind: LinkKind, link_id: int) -> Link:
        links = self.links(kind)
        if not 0 <= link_id < links.shape[0]:
            raise InvalidTarget(f"{kind} link {link_id} out of range ({links.shape[0]} links)")
        source, target = (int(v) for v in links[link_id])
        return Link(source=source, target=target, kind=kind)

    def shear_face(self, link_id: int) -> int:
        """Face whose diagonal the given shear link is."""
        self.link("shear", link_id)
        return int(self.shear_faces[link_id])

    def face(self, face_id: int) -> Face:
        if not 0 <= face_id < self.n_faces:
            raise InvalidTarget(f"face {face_id} out of range ({self.n_faces} faces)")
        return Face(index=face_id, vertices=tuple(int(v) for v in self.faces[face_id]))

    def iter_links(self, kind: LinkKind) -> Iterator[Link]:
        for source, target in np.asarray(self.links(kind)).tolist():
            yield Link(source=source, target=target, kind=kind)

    def link_counts(self) -> Dict[str, int]:
        return {kind: int(self.links(kind).shape[0]) for kind in LINK_KINDS}

    @cached_property
    def _degrees(self) -> Dict[str, Array]:
        degrees = {}
        for kind in LINK_KINDS:
            links = np.asarray(self.links(kind)).reshape(-1, 2)
            counts = np.bincount(links.ravel(), minlength=self.n_vertices)
            degrees[kind] = jnp.asarray(counts, dtype=jnp.float32)
        return degrees

    def degree(self, kind: LinkKind) -> Array:
        """Number of links of one family touching each vertex, shape (n_vertices,)."""
        return self._degrees[kind]

    def grid_coordinates(self) -> Array:
        """Undeformed (column, row) coordinates of every vertex, shape (n_vertices, 2)."""
        xs, ys = jnp.meshgrid(
            jnp.arange(self.vertices_w, dtype=jnp.float32),
            jnp.arange(self.vertices_h, dtype=jnp.float32),
        )
        return jnp.stack([xs.ravel(), ys.ravel()], axis=-1)

    def equals(self, other: "Topology") -> bool:
        """Structural equality (same dimensions, faces and links in the same order)."""
        if not isinstance(other, Topology):
            return False
        if (self.width, self.height) != (other.width, other.height):
            return False
        pairs = [(self.faces, other.faces)] + [
            (self.links(kind), other.links(kind)) for kind in LINK_KINDS
        ] + [(self.shear_faces, other.shear_faces)]
        return all(
            a.shape == b.shape and bool(jnp.array_equal(a, b)) for a, b in pairs
        )


def build_topology(width: int, height: int) -> Topology:
    """Lay out the knit grid for a width x height swatch.

    Links are enumerated vertex by vertex in row-major order; for each
    vertex the course stretch link comes first, then the two shear
    diagonals of the cell to its lower left, the horizontal strut centred
    on its left neighbour, the wale stretch link and finally the vertical
    strut centred on the vertex above. The order is part of the output
    contract so identical inputs give identical arrays.

    Args:
        width: Cells per course, must be a positive integer
        height: Cells per wale, must be a positive integer

    Returns:
        Topology with (width+1)*(height+1) vertices

    Raises:
        InvalidDimension: If width or height is not a positive integer
    """
    width = validate_dimension(width, "width")
    height = validate_dimension(height, "height")
    verts_w = width + 1
    verts_h = height + 1

    def index_at(x: int, y: int) -> int:
        return y * verts_w + x

    faces: List[Tuple[int, int, int, int]] = []
    for y in range(height):
        for x in range(width):
            faces.append((
                index_at(x, y),
                index_at(x + 1, y),
                index_at(x + 1, y + 1),
                index_at(x, y + 1),
            ))

    stretch: List[Tuple[int, int]] = []
    shear: List[Tuple[int, int]] = []
    shear_faces: List[int] = []
    strut: List[Tuple[int, int]] = []

    for y in range(verts_h):
        for x in range(verts_w):
            if x > 0:
                # course stretch link to the left neighbour
                stretch.append((index_at(x - 1, y), index_at(x, y)))

                if y < verts_h - 1:
                    shear.append((index_at(x - 1, y), index_at(x, y + 1)))
                    shear.append((index_at(x, y), index_at(x - 1, y + 1)))
                    shear_faces.extend([y * width + x - 1] * 2)

                if x < verts_w - 1:
                    strut.append((index_at(x - 1, y), index_at(x + 1, y)))

            if y > 0:
                # wale stretch link to the vertex above
                stretch.append((index_at(x, y - 1), index_at(x, y)))

                if y < verts_h - 1:
                    strut.append((index_at(x, y - 1), index_at(x, y + 1)))

    def as_links(pairs: List[Tuple[int, int]]) -> Array:
        return jnp.asarray(np.asarray(pairs, dtype=np.int32).reshape(-1, 2))

    return Topology(
        width=width,
        height=height,
        faces=jnp.asarray(np.asarray(faces, dtype=np.int32).reshape(-1, 4)),
        stretch_links=as_links(stretch),
        shear_links=as_links(shear),
        shear_faces=jnp.asarray(np.asarray(shear_faces, dtype=np.int32)),
        strut_links=as_links(strut),
    )
