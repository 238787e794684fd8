"""Diagnostics and progress output for mesh simulations."""

from wabric.diagnostics.probes import (
    Probe,
    LinkStrainProbe,
    KineticEnergyProbe,
    AlphaProbe,
    CentroidProbe,
    DiagnosticSet,
)
from wabric.diagnostics.progress import ProgressReporter

__all__ = [
    "Probe",
    "LinkStrainProbe",
    "KineticEnergyProbe",
    "AlphaProbe",
    "CentroidProbe",
    "DiagnosticSet",
    "ProgressReporter",
]
