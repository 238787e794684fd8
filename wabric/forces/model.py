"""Force model: turns the current configuration into force terms."""

import math
from dataclasses import dataclass
from typing import AbstractSet, List, Sequence

from wabric import constants as C
from wabric.config.params import MeshConfig
from wabric.core.topology import LinkKind, Topology
from wabric.forces.base import ForceTerm
from wabric.forces.centering import CenteringForce
from wabric.forces.collision import CollisionForce
from wabric.forces.links import LinkForce
from wabric.forces.many_body import ManyBodyForce

# Every term the integrator can switch on or off
FORCE_TERMS = ("stretch", "shear", "strut", "charge", "collision", "center", "unfold")
LINK_TERMS = ("strut", "shear", "stretch")

# Application order within a tick; collision goes last because it reacts
# to the velocities the other terms produced
TERM_ORDER = ("strut", "shear", "stretch", "charge", "unfold", "collision")


@dataclass(frozen=True)
class ForceModel:
    """Stateless mapping from a MeshConfig to rest distances, stiffnesses and terms.

    Terms are rebuilt on every call, so a configuration change takes effect
    on the next tick without invalidating anything.
    """

    config: MeshConfig

    def rest_distance(self, kind: LinkKind) -> float:
        """Rest distance for a link family."""
        edge = self.config.edge_length
        if kind == "stretch":
            return edge
        elif kind == "shear":
            return self.config.shear_ratio * edge * math.sqrt(2.0)
        elif kind == "strut":
            return 2.0 * edge
        raise ValueError(f"Unknown link kind: {kind}")

    def stiffness(self, kind: LinkKind) -> float:
        """Spring stiffness for a link family."""
        if kind == "stretch":
            return self.config.k_stretch
        elif kind == "shear":
            return self.config.k_shear
        elif kind == "strut":
            return self.config.k_strut
        raise ValueError(f"Unknown link kind: {kind}")

    def link_force(self, kind: LinkKind, source: Sequence[float], target: Sequence[float]) -> float:
        """Signed force magnitude along one link.

        Positive pulls the endpoints together (link longer than rest),
        negative pushes them apart. Coincident endpoints give zero.
        """
        dx = float(target[0]) - float(source[0])
        dy = float(target[1]) - float(source[1])
        length = math.hypot(dx, dy)
        if length == 0.0 or not math.isfinite(length):
            return 0.0
        return self.stiffness(kind) * (length - self.rest_distance(kind))

    def link_term(self, topology: Topology, kind: LinkKind) -> LinkForce:
        return LinkForce(
            kind=kind,
            links=topology.links(kind),
            degree=topology.degree(kind),
            distance=self.rest_distance(kind),
            stiffness=self.stiffness(kind),
            iterations=self.config.iterations,
        )

    def charge_term(self) -> ManyBodyForce:
        return ManyBodyForce(
            label="charge",
            strength=self.config.charge_strength,
            distance_max=self.config.max_charge_distance,
        )

    def unfold_term(self) -> ManyBodyForce:
        return ManyBodyForce(
            label="unfold",
            strength=self.config.unfold_strength,
            distance_max=C.UNFOLD_DISTANCE_RATIO * self.config.edge_length,
        )

    def collision_term(self) -> CollisionForce:
        return CollisionForce(radius=self.config.vertex_radius)

    def centering(self, strength: float) -> CenteringForce:
        return CenteringForce(center=self.config.center, strength=strength)

    def terms(self, topology: Topology, active: AbstractSet[str]) -> List[ForceTerm]:
        """Velocity terms for the active names, in application order.

        ``center`` is not a velocity term; see ``centering``.
        """
        unknown = set(active) - set(FORCE_TERMS)
        if unknown:
            raise ValueError(f"Unknown force terms: {sorted(unknown)}")

        terms: List[ForceTerm] = []
        for name in TERM_ORDER:
            if name not in active:
                continue
            if name in LINK_TERMS:
                terms.append(self.link_term(topology, name))
            elif name == "charge":
                terms.append(self.charge_term())
            elif name == "unfold":
                terms.append(self.unfold_term())
            elif name == "collision":
                terms.append(self.collision_term())
        return terms
