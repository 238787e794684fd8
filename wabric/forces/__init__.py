"""Force terms acting on mesh vertices."""

from wabric.forces.base import ForceTerm
from wabric.forces.links import LinkForce, relax_links, link_bias
from wabric.forces.many_body import ManyBodyForce, many_body_velocities
from wabric.forces.collision import CollisionForce, collision_velocities
from wabric.forces.centering import CenteringForce, centering_offset
from wabric.forces.neighbors import neighbor_pairs, pad_pairs
from wabric.forces.model import ForceModel, FORCE_TERMS, LINK_TERMS, TERM_ORDER

__all__ = [
    "ForceTerm",
    "LinkForce",
    "relax_links",
    "link_bias",
    "ManyBodyForce",
    "many_body_velocities",
    "CollisionForce",
    "collision_velocities",
    "CenteringForce",
    "centering_offset",
    "neighbor_pairs",
    "pad_pairs",
    "ForceModel",
    "FORCE_TERMS",
    "LINK_TERMS",
    "TERM_ORDER",
]
