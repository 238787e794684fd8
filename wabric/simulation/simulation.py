"""Host-facing simulation object: topology, integrator, interaction and an intent queue."""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, List, Mapping, Optional, Tuple

from jax import Array

from wabric.config.params import MeshConfig, TOPOLOGY_FIELDS
from wabric.core.state import MeshState
from wabric.core.topology import LinkKind, Topology, build_topology
from wabric.forces.model import FORCE_TERMS
from wabric.interaction.controller import InteractionController
from wabric.interaction.targets import DragTarget, resolve_vertices
from wabric.input_validation import ValidationError, validate_vertex_id
from wabric.solvers.base import NumericDivergence, SimulationStateError
from wabric.solvers.integrator import Integrator, Status, TickListener

log = logging.getLogger(__name__)

Intent = Callable[[], None]


@dataclass
class Simulation:
    """Knit-mesh simulation driven by an external frame loop.

    Commands (configuration changes, pins, drags, reheats) are validated
    when they are submitted, so errors reach the caller straight away, and
    then queued. The queue is drained in submission order right before the
    next tick, or by ``apply_pending()``; a tick never sees half of a
    command.

    Example::

        sim = Simulation(MeshConfig(width=10, height=10))
        sim.start()
        while sim.status == "running":
            sim.tick()
    """

    config: MeshConfig = field(default_factory=MeshConfig)
    integrator: Integrator = field(default_factory=Integrator)
    topology: Optional[Topology] = None

    controller: InteractionController = field(init=False)
    _pending: Deque[Intent] = field(default_factory=deque, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _drag_open: bool = field(default=False, init=False, repr=False)
    # Topology of the latest submitted resize, not yet applied
    _next_topology: Optional[Topology] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.controller = InteractionController(self.integrator)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "Simulation":
        """Create Simulation from a configuration dictionary."""
        section = config.get("mesh", config)
        options = {k: v for k, v in section.items() if k != "name"}
        return cls(config=MeshConfig.from_dict(options))

    @classmethod
    def from_yaml(cls, path: str) -> "Simulation":
        """Create Simulation from YAML config file."""
        from wabric.config.loader import load_mesh_config
        return cls(config=load_mesh_config(path))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def build_topology(self) -> Topology:
        """Build the topology for the current width and height."""
        self.topology = build_topology(self.config.width, self.config.height)
        return self.topology

    def start(self) -> MeshState:
        """(Re)build the topology and restart from the initial layout."""
        with self._lock:
            self._pending.clear()
            self._drag_open = False
            self._next_topology = None
            self._restart(self.build_topology(), self.config)
            return self.integrator.state

    def stop(self) -> None:
        """Stop immediately; pending commands are discarded."""
        with self._lock:
            self._pending.clear()
            self._drag_open = False
            self._next_topology = None
            self.controller.reset()
            self.integrator.stop()

    def tick(self) -> MeshState:
        """Apply pending commands, then advance one step."""
        with self._lock:
            self._drain()
            return self.integrator.tick()

    def run(self, max_ticks: int) -> MeshState:
        """Tick until settled or ``max_ticks`` ticks have run."""
        for _ in range(max_ticks):
            if self.status != "running" and not self._pending:
                break
            self.tick()
        return self.integrator.state

    def apply_pending(self) -> None:
        """Apply queued commands without stepping."""
        with self._lock:
            self._drain()

    def _drain(self) -> None:
        while self._pending:
            intent = self._pending.popleft()
            try:
                intent()
            except (ValidationError, SimulationStateError) as e:
                log.error(f"Queued command dropped: {e}")

    def _restart(self, topology: Topology, config: MeshConfig) -> None:
        self.controller.reset()
        self.integrator.stop()
        self.topology = topology
        self.integrator.start(topology, config)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_config(self, config: Optional[MeshConfig] = None, **changes) -> MeshConfig:
        """Submit a new configuration.

        Either pass a full MeshConfig or keyword changes to the latest
        submitted one. Invalid values raise immediately and leave the
        previous configuration in place. A width/height change rebuilds the
        mesh from scratch; any other change keeps positions and reheats.
        While stopped the configuration is only stored for the next
        ``start()``.

        Returns:
            The accepted configuration
        """
        base = config if config is not None else self.config
        new_config = base.replace(**changes) if changes else base
        rebuild = bool(new_config.changed_fields(self.config) & TOPOLOGY_FIELDS)
        self.config = new_config

        if self.integrator.status == "idle":
            log.debug("Config stored while stopped")
            return new_config

        if rebuild:
            topology = build_topology(new_config.width, new_config.height)
            self._next_topology = topology
            self._drag_open = False

            def apply():
                log.info(f"Rebuilding mesh at {new_config.width}x{new_config.height}")
                self._restart(topology, new_config)
                if self._next_topology is topology:
                    self._next_topology = None
        else:
            def apply():
                self.integrator.set_config(new_config)
                self.integrator.reheat()

        self._pending.append(apply)
        return new_config

    def set_force_term(self, name: str, enabled: bool) -> None:
        """Switch one named term on or off and reheat."""
        if name not in FORCE_TERMS:
            raise ValueError(f"Unknown force term: {name}")
        flag = f"enable_{name}"
        if hasattr(self.config, flag):
            self.config = self.config.replace(**{flag: bool(enabled)})
        if self.integrator.status == "idle":
            return

        def apply():
            self.integrator.set_force_term(name, enabled)
            self.integrator.reheat()

        self._pending.append(apply)

    def reheat(self, alpha_target: Optional[float] = None) -> None:
        self._require_started("reheat")
        self._pending.append(lambda: self.integrator.reheat(alpha_target))

    def pin(self, vertex_id: int) -> None:
        self._check_vertex(vertex_id)
        self._pending.append(lambda: self.controller.pin(vertex_id))

    def unpin(self, vertex_id: int) -> None:
        self._check_vertex(vertex_id)
        self._pending.append(lambda: self.controller.unpin(vertex_id))

    def begin_drag(self, target: DragTarget) -> Tuple[int, ...]:
        """Submit the start of a drag; returns the vertex ids it will hold."""
        ids = resolve_vertices(target, self._submission_topology())
        self._drag_open = True
        self._pending.append(lambda: self.controller.begin_drag(target))
        return ids

    def drag_by(self, dx: float, dy: float) -> None:
        if not self._drag_open:
            raise SimulationStateError("drag_by called without an active drag")
        self._pending.append(lambda: self.controller.drag_by(dx, dy))

    def end_drag(self) -> None:
        if not self._drag_open:
            raise SimulationStateError("end_drag called without an active drag")
        self._drag_open = False
        self._pending.append(self.controller.end_drag)

    def add_listener(self, listener: TickListener) -> None:
        """Call ``listener(state)`` after every tick."""
        self.integrator.add_listener(listener)

    def _check_vertex(self, vertex_id: int) -> None:
        validate_vertex_id(vertex_id, self._submission_topology().n_vertices)

    def _submission_topology(self) -> Topology:
        """Topology the next queued command will run against."""
        self._require_started("submit a mesh command")
        if self._next_topology is not None:
            return self._next_topology
        return self._require_topology()

    def _require_started(self, operation: str) -> None:
        if self.integrator.status == "idle":
            raise SimulationStateError(f"Cannot {operation}: simulation is not started")

    def _require_topology(self) -> Topology:
        if self.topology is None:
            raise SimulationStateError("No topology: call start() first")
        return self.topology

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> Optional[MeshState]:
        return self.integrator.state

    @property
    def status(self) -> Status:
        return self.integrator.status

    @property
    def alpha(self) -> float:
        return self.integrator.state.alpha if self.integrator.state is not None else 0.0

    @property
    def positions(self) -> Array:
        return self._require_state().positions

    @property
    def velocities(self) -> Array:
        return self._require_state().velocities

    @property
    def pinned(self) -> Array:
        return self._require_state().pinned

    @property
    def fixed(self) -> Array:
        return self._require_state().fixed

    @property
    def faces(self) -> Array:
        return self._require_topology().faces

    def links(self, kind: LinkKind) -> Array:
        return self._require_topology().links(kind)

    @property
    def divergences(self) -> List[NumericDivergence]:
        return list(self.integrator.divergences)

    @property
    def pending(self) -> int:
        """Number of queued commands."""
        return len(self._pending)

    def _require_state(self) -> MeshState:
        if self.integrator.state is None:
            raise SimulationStateError("Simulation has not been started")
        return self.integrator.state
