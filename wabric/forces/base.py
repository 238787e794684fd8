"""Abstract base class for force terms."""

from abc import ABC, abstractmethod
from jax import Array


class ForceTerm(ABC):
    """A named contribution to vertex velocities for one tick.

    Terms read the start-of-tick positions and return updated velocities;
    they never move a vertex themselves, so the order in which vertices are
    visited cannot change the result.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the term (stretch, shear, strut, charge, collision, unfold)."""
        pass

    @abstractmethod
    def apply(self, positions: Array, velocities: Array, alpha: float) -> Array:
        """Return velocities after adding this term's contribution.

        Args:
            positions: Start-of-tick positions, shape (n, 2)
            velocities: Velocities accumulated so far this tick, shape (n, 2)
            alpha: Current cooling factor

        Returns:
            New velocities, shape (n, 2)
        """
        pass
