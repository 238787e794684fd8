"""Configuration loading and validation."""

from pathlib import Path
from typing import Union
import yaml

from wabric.config.params import MeshConfig
from wabric.input_validation import InvalidCoefficient


def load_config(path: Union[str, Path]) -> dict:
    """Load configuration from YAML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        config = yaml.safe_load(f)

    return config or {}


def save_config(config: dict, path: Union[str, Path]) -> None:
    """Save configuration to YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def load_mesh_config(path: Union[str, Path]) -> MeshConfig:
    """Load a validated MeshConfig from YAML.

    The file may be a flat mapping of options or keep them under a ``mesh:``
    section next to other (ignored) sections such as ``name``.
    """
    config = load_config(path)
    if not isinstance(config, dict):
        raise InvalidCoefficient(f"{path}: expected a mapping at top level")
    section = config.get("mesh", config)
    if section is not config:
        if not isinstance(section, dict):
            raise InvalidCoefficient(f"{path}: 'mesh' section must be a mapping")
        return MeshConfig.from_dict(section)
    return MeshConfig.from_dict({k: v for k, v in config.items() if k != "name"})


def save_mesh_config(config: MeshConfig, path: Union[str, Path], name: str = None) -> None:
    """Save a MeshConfig under a ``mesh:`` section."""
    document = {}
    if name is not None:
        document["name"] = name
    document["mesh"] = config.to_dict()
    save_config(document, path)
