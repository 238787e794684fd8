"""Velocity-damped integrator with d3-style cooling."""

import logging
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Literal, Optional, Sequence

import jax.numpy as jnp
import numpy as np
from jax import Array

from wabric import constants as C
from wabric.config.params import MeshConfig
from wabric.core.layout import initial_positions
from wabric.core.state import MeshState
from wabric.core.topology import Topology
from wabric.forces.model import FORCE_TERMS, ForceModel
from wabric.input_validation import InvalidCoefficient, validate_vertex_id
from wabric.solvers.base import NumericDivergence, SimulationStateError, advance_vertices

log = logging.getLogger(__name__)

Status = Literal["idle", "running", "settled"]
TickListener = Callable[[MeshState], None]


@dataclass
class Integrator:
    """Owns the mesh state and advances it one tick at a time.

    Status moves ``idle -> running`` on ``start``, ``running -> settled``
    once alpha cools to ``alpha_min``, back to ``running`` on ``reheat`` and
    to ``idle`` on ``stop``. Nothing runs in the background: the host calls
    ``tick()`` once per frame.

    Attributes:
        topology: Current mesh connectivity (None while idle)
        config: Configuration the force terms are built from
        state: Current MeshState (None while idle)
        status: "idle", "running" or "settled"
        active: Names of the force terms applied each tick
        center_strength: Current centering strength
        unfold_remaining: Ticks left before the unfold term is dropped
        divergences: NumericDivergence records, oldest first
    """

    topology: Optional[Topology] = None
    config: Optional[MeshConfig] = None
    state: Optional[MeshState] = None
    status: Status = "idle"
    active: FrozenSet[str] = frozenset()
    center_strength: float = 0.0
    unfold_remaining: int = 0
    divergences: List[NumericDivergence] = field(default_factory=list)

    _held: Optional[Array] = field(default=None, init=False, repr=False)
    _listeners: List[TickListener] = field(default_factory=list, init=False, repr=False)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, topology: Topology, config: MeshConfig) -> MeshState:
        """Seed a fresh layout over ``topology`` and start running.

        Positions come from the configured initial layout, velocities are
        zero, alpha is 1, centering is at full strength and the unfold term
        is armed for ``config.unfold_ticks`` ticks.
        """
        if (topology.width, topology.height) != (config.width, config.height):
            raise SimulationStateError(
                f"Topology {topology.width}x{topology.height} does not match "
                f"config {config.width}x{config.height}"
            )
        self.topology = topology
        self.config = config
        self.state = MeshState.at_rest(initial_positions(topology, config), alpha=C.ALPHA_START)
        self.center_strength = config.center_strength
        self.unfold_remaining = config.unfold_ticks
        active = set(config.enabled_terms) | {"center"}
        if self.unfold_remaining > 0:
            active.add("unfold")
        self.active = frozenset(active)
        self.divergences = []
        self._held = None
        self.status = "running"
        log.info(
            f"Started {topology.width}x{topology.height} mesh: "
            f"{topology.n_vertices} vertices, terms={sorted(self.active)}"
        )
        return self.state

    def stop(self) -> None:
        """Drop the topology and state; the integrator becomes idle."""
        if self.status != "idle":
            log.info("Integrator stopped")
        self.topology = None
        self.state = None
        self.status = "idle"
        self.active = frozenset()
        self.unfold_remaining = 0
        self._held = None

    def reheat(self, alpha_target: Optional[float] = None,
               floor: float = C.REHEAT_ALPHA) -> None:
        """Resume stepping after a parameter change or the start of a drag.

        Sets the alpha target when given and raises alpha to at least
        ``floor``.
        """
        self._require_started("reheat")
        if alpha_target is not None:
            self.set_alpha_target(alpha_target)
        if self.state.alpha < floor:
            self.state = self.state.replace(alpha=float(floor))
        self.status = "running"

    def add_listener(self, listener: TickListener) -> None:
        """Call ``listener(state)`` after every completed tick."""
        self._listeners.append(listener)

    def remove_listener(self, listener: TickListener) -> None:
        self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def tick(self) -> MeshState:
        """Advance the mesh by one step.

        Raises:
            SimulationStateError: If no topology has been started

        Returns:
            The new state (unchanged when settled)
        """
        self._require_started("tick")
        if self.status == "settled":
            return self.state

        state = self.state
        model = ForceModel(self.config)

        fixed = state.fixed
        fixed_positions = state.fixed_positions
        if self._held is not None:
            fixed = fixed | self._held
            fixed_positions = jnp.where(self._held[:, None], state.positions, fixed_positions)
            self._held = None

        positions = state.positions
        velocities = state.velocities
        for term in model.terms(self.topology, self.active):
            velocities = term.apply(positions, velocities, state.alpha)

        offset = jnp.zeros(2, dtype=positions.dtype)
        if "center" in self.active and self.center_strength > 0:
            offset = model.centering(self.center_strength).offset(positions, ~fixed)

        new_positions, new_velocities, diverged = advance_vertices(
            positions,
            velocities,
            fixed,
            fixed_positions,
            offset,
            self.config.velocity_decay,
            self.config.max_speed,
        )
        self._record_divergence(diverged, state.tick)

        alpha = state.alpha + (state.alpha_target - state.alpha) * self.config.alpha_decay
        self.state = state.replace(
            positions=new_positions,
            velocities=new_velocities,
            alpha=float(alpha),
            tick=state.tick + 1,
        )

        if "unfold" in self.active:
            self.unfold_remaining -= 1
            if self.unfold_remaining <= 0:
                self.unfold_remaining = 0
                self.active = self.active - {"unfold"}
                log.debug(f"Unfold term expired at tick {self.state.tick}")

        if self.state.alpha <= self.config.alpha_min:
            self.status = "settled"
            log.debug(f"Settled at tick {self.state.tick} (alpha={self.state.alpha:.2e})")

        for listener in self._listeners:
            listener(self.state)
        return self.state

    def run(self, max_ticks: int) -> MeshState:
        """Tick until settled or ``max_ticks`` ticks have run."""
        for _ in range(max_ticks):
            if self.status != "running":
                break
            self.tick()
        return self.state

    def _record_divergence(self, diverged: Array, tick: int) -> None:
        mask = np.asarray(diverged)
        if not mask.any():
            return
        ids = tuple(int(i) for i in np.flatnonzero(mask))
        event = NumericDivergence(tick=tick, vertex_ids=ids)
        self.divergences.append(event)
        self._held = jnp.asarray(mask)
        log.warning(f"Numeric divergence: {event}; vertices held for one tick")

    # ------------------------------------------------------------------
    # Live configuration
    # ------------------------------------------------------------------

    def set_force_term(self, name: str, enabled: bool) -> None:
        """Switch a named force term on or off from the next tick."""
        if name not in FORCE_TERMS:
            raise ValueError(f"Unknown force term: {name}")
        if enabled:
            self.active = self.active | {name}
        else:
            self.active = self.active - {name}
        if name == "unfold":
            self.unfold_remaining = self.config.unfold_ticks if enabled and self.config else 0

    def set_alpha_target(self, value: float) -> None:
        if not 0.0 <= value <= 1.0:
            raise InvalidCoefficient(f"alpha_target must be in [0, 1], got {value}")
        self._require_started("set_alpha_target")
        self.state = self.state.replace(alpha_target=float(value))

    def set_center_strength(self, value: float) -> None:
        if not (0 <= value < float("inf")):
            raise InvalidCoefficient(f"center strength must be non-negative, got {value}")
        self.center_strength = float(value)

    def set_config(self, config: MeshConfig) -> None:
        """Swap force coefficients without touching positions.

        Enable flags replace the link/charge/collision entries of the active
        set; ``center`` and ``unfold`` keep their current status.
        """
        self._require_started("set_config")
        if (config.width, config.height) != (self.topology.width, self.topology.height):
            raise SimulationStateError("Changing width or height requires start() with a new topology")
        kept = self.active & {"center", "unfold"}
        self.active = frozenset(config.enabled_terms | kept)
        self.config = config
        log.debug(f"Config updated, terms={sorted(self.active)}")

    # ------------------------------------------------------------------
    # Fixed positions (driven by the interaction controller)
    # ------------------------------------------------------------------

    def fix(self, vertex_ids: Sequence[int], positions: Optional[Array] = None) -> None:
        """Hold vertices at ``positions`` (default: where they are now)."""
        ids = self._ids(vertex_ids)
        state = self.state
        if positions is None:
            positions = state.positions[ids]
        positions = jnp.asarray(positions, dtype=state.positions.dtype).reshape(-1, 2)
        if not bool(jnp.all(jnp.isfinite(positions))):
            raise InvalidCoefficient("fixed positions must be finite")
        self.state = state.replace(
            fixed=state.fixed.at[ids].set(True),
            fixed_positions=state.fixed_positions.at[ids].set(positions),
            velocities=state.velocities.at[ids].set(0.0),
        )

    def release(self, vertex_ids: Sequence[int]) -> None:
        """Let vertices move freely again."""
        ids = self._ids(vertex_ids)
        self.state = self.state.replace(fixed=self.state.fixed.at[ids].set(False))

    def set_pinned(self, vertex_ids: Sequence[int], pinned: bool) -> None:
        ids = self._ids(vertex_ids)
        self.state = self.state.replace(pinned=self.state.pinned.at[ids].set(bool(pinned)))

    def translate_fixed(self, vertex_ids: Sequence[int], delta: Sequence[float]) -> None:
        """Move the fixed positions of vertices by ``delta``."""
        ids = self._ids(vertex_ids)
        delta = jnp.asarray(delta, dtype=self.state.positions.dtype).reshape(2)
        if not bool(jnp.all(jnp.isfinite(delta))):
            raise InvalidCoefficient("drag delta must be finite")
        self.state = self.state.replace(
            fixed_positions=self.state.fixed_positions.at[ids].add(delta)
        )

    def _ids(self, vertex_ids: Sequence[int]) -> Array:
        self._require_started("update fixed vertices")
        n = self.topology.n_vertices
        return jnp.asarray([validate_vertex_id(v, n) for v in vertex_ids], dtype=jnp.int32)

    def _require_started(self, operation: str) -> None:
        if self.status == "idle" or self.state is None:
            raise SimulationStateError(f"Cannot {operation}: no mesh has been started")
