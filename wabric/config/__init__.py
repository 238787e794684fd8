"""Configuration loading and management for wabric."""

from wabric.config.params import MeshConfig, PARAM_ALIASES, TOPOLOGY_FIELDS
from wabric.config.loader import (
    load_config,
    save_config,
    load_mesh_config,
    save_mesh_config,
)

__all__ = [
    "MeshConfig",
    "PARAM_ALIASES",
    "TOPOLOGY_FIELDS",
    "load_config",
    "save_config",
    "load_mesh_config",
    "save_mesh_config",
]
