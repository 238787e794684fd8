"""Pin and drag commands translated into fixed-position overrides."""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from wabric import constants as C
from wabric.interaction.targets import DragTarget, FaceTarget, resolve_vertices
from wabric.solvers.base import SimulationStateError
from wabric.solvers.integrator import Integrator

log = logging.getLogger(__name__)


@dataclass
class InteractionController:
    """Turns pin/unpin and drag gestures into integrator requests.

    The controller never touches the state arrays; it only calls the
    integrator's fix/release/pin API.

    Attributes:
        integrator: The integrator owning the mesh state
        dragging: Vertex ids held by the current drag (empty when idle)
        target: What the current drag grabbed
    """

    integrator: Integrator
    dragging: Tuple[int, ...] = ()
    target: Optional[DragTarget] = None

    @property
    def is_dragging(self) -> bool:
        return self.target is not None

    def pin(self, vertex_id: int) -> None:
        """Hold a vertex where it is until unpinned, surviving drag release."""
        state = self.integrator.state
        already_fixed = state is not None and 0 <= vertex_id < state.n_vertices \
            and bool(state.fixed[vertex_id])
        if not already_fixed:
            self.integrator.fix([vertex_id])
        self.integrator.set_pinned([vertex_id], True)

    def unpin(self, vertex_id: int) -> None:
        """Clear a pin; the vertex stays held only while it is being dragged."""
        self.integrator.set_pinned([vertex_id], False)
        if vertex_id not in self.dragging:
            self.integrator.release([vertex_id])

    def begin_drag(self, target: DragTarget) -> Tuple[int, ...]:
        """Grab a vertex, link or face at its current position.

        Centering is switched off for the duration of the drag and the
        integrator is reheated (alpha target 0.5 for faces, 0.3 otherwise).

        Returns:
            The vertex ids now following the drag
        """
        if self.is_dragging:
            self.end_drag()
        ids = resolve_vertices(target, self.integrator.topology)
        self.integrator.fix(list(ids))
        self.dragging = ids
        self.target = target

        self.integrator.set_center_strength(0.0)
        alpha_target = C.FACE_DRAG_ALPHA_TARGET if isinstance(target, FaceTarget) \
            else C.DRAG_ALPHA_TARGET
        self.integrator.reheat(alpha_target=alpha_target, floor=alpha_target)
        log.debug(f"Drag started on {target} ({len(ids)} vertices)")
        return ids

    def drag_by(self, dx: float, dy: float) -> None:
        """Move every dragged vertex by (dx, dy)."""
        if not self.is_dragging:
            raise SimulationStateError("drag_by called without an active drag")
        self.integrator.translate_fixed(list(self.dragging), (dx, dy))

    def end_drag(self) -> None:
        """Release the dragged vertices that are not pinned and let the mesh cool."""
        if not self.is_dragging:
            raise SimulationStateError("end_drag called without an active drag")
        pinned = self.integrator.state.pinned
        loose = [v for v in self.dragging if not bool(pinned[v])]
        if loose:
            self.integrator.release(loose)
        self.integrator.set_alpha_target(0.0)
        config = self.integrator.config
        self.integrator.set_center_strength(
            config.center_strength * config.interaction_center_ratio
        )
        log.debug(f"Drag ended on {self.target}, released {len(loose)} vertices")
        self.dragging = ()
        self.target = None

    def reset(self) -> None:
        """Forget any drag in progress (used when the topology is rebuilt)."""
        self.dragging = ()
        self.target = None
