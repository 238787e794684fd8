"""Diagnostic probes for measuring mesh quantities."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import jax.numpy as jnp

from wabric.core.state import MeshState
from wabric.core.topology import LinkKind, Topology


class Probe(ABC):
    """Base class for diagnostic probes."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the diagnostic quantity."""
        pass

    @abstractmethod
    def measure(self, state: MeshState, topology: Topology) -> float:
        """Measure the diagnostic quantity from current state."""
        pass


@dataclass
class LinkStrainProbe(Probe):
    """Measures how far one link family is from its rest distance.

    The strain of a link is ``|l - rest| / rest``; ``statistic`` picks the
    maximum or the mean over the family. A family with no links reads 0.
    """

    kind: LinkKind = "stretch"
    rest_distance: float = 20.0
    statistic: str = "max"  # "max" or "mean"

    @property
    def name(self) -> str:
        return f"strain_{self.kind}_{self.statistic}"

    def measure(self, state: MeshState, topology: Topology) -> float:
        links = topology.links(self.kind)
        if links.shape[0] == 0:
            return 0.0
        delta = state.positions[links[:, 1]] - state.positions[links[:, 0]]
        length = jnp.sqrt(jnp.sum(delta**2, axis=-1))
        strain = jnp.abs(length - self.rest_distance) / self.rest_distance

        if self.statistic == "max":
            return float(jnp.max(strain))
        elif self.statistic == "mean":
            return float(jnp.mean(strain))
        raise ValueError(f"Unknown statistic: {self.statistic}")


@dataclass
class KineticEnergyProbe(Probe):
    """Sum of 0.5 |v|^2 over the free vertices (unit mass)."""

    @property
    def name(self) -> str:
        return "kinetic_energy"

    def measure(self, state: MeshState, topology: Topology) -> float:
        v_sq = jnp.sum(state.velocities**2, axis=-1)
        return float(0.5 * jnp.sum(jnp.where(state.free, v_sq, 0.0)))


@dataclass
class AlphaProbe(Probe):
    """Current cooling parameter."""

    @property
    def name(self) -> str:
        return "alpha"

    def measure(self, state: MeshState, topology: Topology) -> float:
        return float(state.alpha)


@dataclass
class CentroidProbe(Probe):
    """One coordinate of the centroid of all vertices."""

    axis: str = "x"  # "x" or "y"

    @property
    def name(self) -> str:
        return f"centroid_{self.axis}"

    def measure(self, state: MeshState, topology: Topology) -> float:
        if self.axis not in ("x", "y"):
            raise ValueError(f"Unknown axis: {self.axis}")
        column = 0 if self.axis == "x" else 1
        return float(jnp.mean(state.positions[:, column]))


class DiagnosticSet:
    """Collection of probes with tick history tracking."""

    def __init__(self, probes: Optional[List[Probe]] = None):
        self.probes = probes or []
        self.history: Dict[str, List[float]] = {p.name: [] for p in self.probes}
        self.ticks: List[int] = []

    def add_probe(self, probe: Probe) -> None:
        """Add a probe to the diagnostic set."""
        self.probes.append(probe)
        self.history[probe.name] = []

    def measure_all(self, state: MeshState, topology: Topology) -> Dict[str, float]:
        """Measure all probes and record in history."""
        self.ticks.append(int(state.tick))
        results = {}
        for probe in self.probes:
            value = probe.measure(state, topology)
            results[probe.name] = value
            self.history[probe.name].append(value)
        return results

    def get_history(self) -> Dict[str, Any]:
        """Get full tick history as dictionary."""
        return {
            "tick": self.ticks,
            **self.history
        }

    @classmethod
    def default_set(cls, edge_length: float = 20.0) -> "DiagnosticSet":
        """Create a default set of common diagnostics."""
        return cls(probes=[
            AlphaProbe(),
            KineticEnergyProbe(),
            LinkStrainProbe(kind="stretch", rest_distance=edge_length),
            CentroidProbe(axis="x"),
            CentroidProbe(axis="y"),
        ])
