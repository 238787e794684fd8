"""Preset simulation configurations as factory functions."""
from wabric.simulation.presets.knit_swatch import create_knit_swatch

__all__ = ["create_knit_swatch"]
