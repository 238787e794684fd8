"""Tests for knit-mesh topology construction."""
import pytest
import jax.numpy as jnp
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from wabric.core.topology import LINK_KINDS, Link, build_topology
from wabric.input_validation import InvalidDimension, InvalidTarget


class TestCounts:
    """Element counts follow the closed-form formulas."""

    @pytest.mark.parametrize("width,height", [(1, 1), (2, 1), (1, 4), (3, 5), (30, 30)])
    def test_counts_match_formulas(self, width, height):
        topo = build_topology(width, height)
        counts = topo.link_counts()

        assert topo.n_vertices == (width + 1) * (height + 1)
        assert topo.n_faces == width * height
        assert counts["stretch"] == width * (height + 1) + height * (width + 1)
        assert counts["shear"] == 2 * width * height
        assert counts["strut"] == (width - 1) * (height + 1) + (height - 1) * (width + 1)

    def test_two_by_one(self):
        """2x1 swatch: 6 vertices, 2 faces, 7 stretch, 4 shear, 2 strut."""
        topo = build_topology(2, 1)

        assert topo.n_vertices == 6
        assert topo.n_faces == 2
        assert topo.link_counts() == {"stretch": 7, "shear": 4, "strut": 2}

    def test_single_cell_has_no_struts(self):
        topo = build_topology(1, 1)
        assert topo.strut_links.shape == (0, 2)
        assert jnp.all(topo.degree("strut") == 0)


class TestStructure:
    """Connectivity and enumeration order."""

    def test_build_is_deterministic(self):
        a = build_topology(4, 3)
        b = build_topology(4, 3)
        assert a.equals(b)

    def test_different_sizes_not_equal(self):
        assert not build_topology(4, 3).equals(build_topology(3, 4))

    def test_face_corner_order(self):
        """Faces list (x,y), (x+1,y), (x+1,y+1), (x,y+1)."""
        topo = build_topology(3, 2)
        face = topo.face(4)  # x=1, y=1
        assert face.vertices == (
            topo.index_of(1, 1),
            topo.index_of(2, 1),
            topo.index_of(2, 2),
            topo.index_of(1, 2),
        )

    def test_first_links_in_enumeration_order(self):
        topo = build_topology(2, 1)
        # Vertex (1,0): course stretch to (0,0), then both shear diagonals
        assert topo.link("stretch", 0) == Link(source=0, target=1, kind="stretch")
        assert topo.link("shear", 0) == Link(source=0, target=4, kind="shear")
        assert topo.link("shear", 1) == Link(source=1, target=3, kind="shear")
        assert topo.link("strut", 0) == Link(source=0, target=2, kind="strut")

    def test_stretch_links_join_grid_neighbours(self):
        topo = build_topology(3, 3)
        coords = topo.grid_coordinates()
        links = topo.stretch_links
        step = jnp.abs(coords[links[:, 1]] - coords[links[:, 0]]).sum(axis=-1)
        assert jnp.all(step == 1.0)

    def test_strut_links_skip_one_vertex(self):
        topo = build_topology(3, 3)
        coords = topo.grid_coordinates()
        links = topo.strut_links
        step = jnp.abs(coords[links[:, 1]] - coords[links[:, 0]]).sum(axis=-1)
        assert jnp.all(step == 2.0)

    def test_link_ids_in_range(self):
        topo = build_topology(5, 4)
        for kind in LINK_KINDS:
            links = topo.links(kind)
            assert int(links.min()) >= 0
            assert int(links.max()) < topo.n_vertices
            assert jnp.all(links[:, 0] != links[:, 1])

    def test_degree_sums_to_twice_link_count(self):
        topo = build_topology(4, 3)
        for kind in LINK_KINDS:
            assert float(topo.degree(kind).sum()) == 2 * topo.links(kind).shape[0]

    def test_iter_links_matches_array(self):
        topo = build_topology(2, 2)
        listed = [(l.source, l.target) for l in topo.iter_links("shear")]
        assert listed == [tuple(int(v) for v in row) for row in topo.shear_links]

    def test_shear_links_are_face_diagonals(self):
        topo = build_topology(3, 2)
        assert topo.shear_faces.shape == (topo.shear_links.shape[0],)
        for link_id, (source, target) in enumerate(topo.shear_links.tolist()):
            corners = topo.face(topo.shear_face(link_id)).vertices
            assert source in corners and target in corners
            # opposite corners of the quad
            assert abs(corners.index(source) - corners.index(target)) == 2

    def test_two_shear_links_per_face(self):
        topo = build_topology(4, 3)
        counts = jnp.bincount(topo.shear_faces, length=topo.n_faces)
        assert bool(jnp.all(counts == 2))


class TestErrors:
    """Invalid inputs are rejected."""

    @pytest.mark.parametrize("width,height", [(0, 3), (3, 0), (-1, 2), (2.5, 2), (True, 2)])
    def test_invalid_dimension(self, width, height):
        with pytest.raises(InvalidDimension):
            build_topology(width, height)

    def test_out_of_range_lookups(self):
        topo = build_topology(2, 2)
        with pytest.raises(InvalidTarget):
            topo.face(4)
        with pytest.raises(InvalidTarget):
            topo.link("stretch", 12)
        with pytest.raises(InvalidTarget):
            topo.index_of(3, 0)
        with pytest.raises(InvalidTarget):
            topo.shear_face(16)

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            build_topology(2, 2).links("weft")
