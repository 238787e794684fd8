"""CLI progress reporting for simulations."""

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, TextIO


@dataclass
class ProgressReporter:
    """Reports relaxation progress to stderr.

    Produces output like:
        [wabric] alpha=0.0412 -> 0.001 | tick 240 | strain_stretch_max=0.031

    Attributes:
        alpha_min: Alpha at which the mesh settles, shown as the goal
        output_interval: Only report every N calls (default 1 = every call)
        enabled: If False, report() does nothing
        stream: Output stream (default stderr)
    """

    alpha_min: float
    output_interval: int = 1
    enabled: bool = True
    stream: TextIO = field(default_factory=lambda: sys.stderr)

    _call_count: int = field(default=0, init=False, repr=False)

    def report(
        self,
        alpha: float,
        tick: int,
        diagnostics: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Report current relaxation progress.

        Args:
            alpha: Current cooling parameter
            tick: Ticks completed
            diagnostics: Optional dict of diagnostic values to display
        """
        if not self.enabled:
            return

        self._call_count += 1
        if self._call_count % self.output_interval != 0:
            return

        parts = [
            "[wabric]",
            f"alpha={alpha:.4f} -> {self.alpha_min:.3g}",
            f"| tick {tick}",
        ]

        if diagnostics:
            for name, value in diagnostics.items():
                if isinstance(value, float):
                    parts.append(f"| {name}={value:.3g}")
                else:
                    parts.append(f"| {name}={value}")

        line = " ".join(parts)

        # Carriage return for in-place update
        self.stream.write(f"\r{line}")
        self.stream.flush()

    def finish(self) -> None:
        """Print final newline after progress reporting completes."""
        if self.enabled:
            self.stream.write("\n")
            self.stream.flush()
