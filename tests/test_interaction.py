"""Tests for pinning and dragging."""
import pytest
import jax.numpy as jnp
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from wabric.core.topology import build_topology
from wabric.input_validation import InvalidTarget
from wabric.interaction.controller import InteractionController
from wabric.interaction.targets import FaceTarget, LinkTarget, VertexTarget, resolve_vertices
from wabric.solvers.base import SimulationStateError


@pytest.fixture
def controller(started_integrator):
    return InteractionController(started_integrator)


class TestResolveVertices:
    """Drag targets map to 1, 2 or 4 vertices."""

    def test_vertex(self):
        assert resolve_vertices(VertexTarget(3), build_topology(2, 2)) == (3,)

    def test_link(self):
        topo = build_topology(2, 2)
        assert resolve_vertices(LinkTarget("strut", 0), topo) == (0, 2)

    def test_face(self):
        topo = build_topology(4, 3)
        assert resolve_vertices(FaceTarget(0), topo) == (0, 1, 6, 5)

    @pytest.mark.parametrize("target", [
        VertexTarget(9),
        LinkTarget("shear", 8),
        FaceTarget(4),
        "vertex 0",
    ])
    def test_invalid(self, target):
        with pytest.raises(InvalidTarget):
            resolve_vertices(target, build_topology(2, 2))


class TestPin:
    """Pins hold vertices until unpinned."""

    def test_pinned_vertex_unchanged_by_tick(self, controller):
        integrator = controller.integrator
        position = integrator.state.positions[6]
        controller.pin(6)
        integrator.run(10)
        assert jnp.array_equal(integrator.state.positions[6], position)
        assert bool(integrator.state.pinned[6])

    def test_unpin_resumes_motion(self, controller):
        integrator = controller.integrator
        controller.pin(6)
        integrator.run(5)
        held = integrator.state.positions[6]
        controller.unpin(6)
        integrator.run(5)
        assert not bool(integrator.state.fixed[6])
        assert not jnp.allclose(integrator.state.positions[6], held)

    def test_pin_out_of_range(self, controller):
        with pytest.raises(InvalidTarget):
            controller.pin(20)


class TestDrag:
    """Drag gestures."""

    def test_face_drag_holds_and_moves_vertices(self, controller):
        integrator = controller.integrator
        ids = controller.begin_drag(FaceTarget(0))
        assert ids == (0, 1, 6, 5)
        assert controller.is_dragging
        start = integrator.state.positions[jnp.array(ids)]

        controller.drag_by(15.0, -10.0)
        integrator.tick()
        moved = integrator.state.positions[jnp.array(ids)]
        assert jnp.allclose(moved, start + jnp.array([15.0, -10.0]))

    def test_face_drag_reheats_to_half(self, controller):
        integrator = controller.integrator
        integrator.run(400)
        assert integrator.status == "settled"
        controller.begin_drag(FaceTarget(1))
        assert integrator.status == "running"
        assert integrator.state.alpha == pytest.approx(0.5)
        assert integrator.state.alpha_target == pytest.approx(0.5)
        assert integrator.center_strength == 0.0

    def test_vertex_drag_alpha_target(self, controller):
        controller.begin_drag(VertexTarget(2))
        assert controller.integrator.state.alpha_target == pytest.approx(0.3)

    def test_release_frees_vertices(self, controller, small_config):
        integrator = controller.integrator
        ids = controller.begin_drag(FaceTarget(0))
        controller.drag_by(30.0, 0.0)
        integrator.run(3)
        controller.end_drag()

        assert not controller.is_dragging
        assert not bool(jnp.any(integrator.state.fixed[jnp.array(ids)]))
        assert integrator.state.alpha_target == 0.0
        assert integrator.center_strength == pytest.approx(
            small_config.center_strength * small_config.interaction_center_ratio
        )

        released = integrator.state.positions[jnp.array(ids)]
        integrator.run(3)
        assert not jnp.allclose(integrator.state.positions[jnp.array(ids)], released)

    def test_pin_survives_drag(self, controller):
        integrator = controller.integrator
        controller.pin(0)
        controller.begin_drag(VertexTarget(0))
        controller.drag_by(-20.0, 0.0)
        integrator.tick()
        dragged = integrator.state.positions[0]
        controller.end_drag()
        integrator.run(5)

        assert bool(integrator.state.fixed[0])
        assert bool(integrator.state.pinned[0])
        assert jnp.array_equal(integrator.state.positions[0], dragged)

    def test_unpin_during_drag_keeps_vertex_held(self, controller):
        integrator = controller.integrator
        controller.pin(0)
        controller.begin_drag(VertexTarget(0))
        controller.unpin(0)
        assert bool(integrator.state.fixed[0])
        controller.end_drag()
        assert not bool(integrator.state.fixed[0])

    def test_new_drag_ends_previous(self, controller):
        integrator = controller.integrator
        controller.begin_drag(VertexTarget(1))
        controller.begin_drag(VertexTarget(2))
        assert controller.dragging == (2,)
        assert not bool(integrator.state.fixed[1])

    def test_drag_without_begin(self, controller):
        with pytest.raises(SimulationStateError):
            controller.drag_by(1.0, 1.0)
        with pytest.raises(SimulationStateError):
            controller.end_drag()
