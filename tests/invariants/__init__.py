"""Per-tick invariants over a mesh: compare the MeshState before and after one tick."""
from dataclasses import dataclass
from abc import ABC, abstractmethod

from wabric.core.state import MeshState


@dataclass
class InvariantResult:
    """Outcome of checking one invariant across one tick.

    ``value`` is the worst offence seen over all vertices (a count of bad
    vertices or a largest deviation), compared against ``tolerance``.
    """
    passed: bool
    name: str
    value: float
    tolerance: float
    message: str


class Invariant(ABC):
    """A property every tick of the relaxation must preserve."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Label used in failure messages."""
        pass

    @abstractmethod
    def check(self, state_before: MeshState, state_after: MeshState) -> InvariantResult:
        """Compare the mesh at the start of a tick with the mesh after it."""
        pass


def format_failures(failures: list[tuple[int, InvariantResult]]) -> str:
    """One line per (tick, result) pair, for an assertion message."""
    return "\n".join(
        f"tick {tick}: {r.name} broken ({r.message}; "
        f"value {r.value:.2e}, tolerance {r.tolerance:.2e})"
        for tick, r in failures
    )
