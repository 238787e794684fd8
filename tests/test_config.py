"""Tests for MeshConfig, input validation and YAML loading."""
import math
import pytest
import yaml
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from wabric import constants as C
from wabric.config.loader import load_config, load_mesh_config, save_mesh_config
from wabric.config.params import MeshConfig
from wabric.input_validation import (
    InvalidCoefficient,
    InvalidDimension,
    InvalidTarget,
    ValidationError,
    validate_non_negative,
    validate_vertex_id,
)


class TestMeshConfigDefaults:
    """Defaults match the swatch editor."""

    def test_defaults(self):
        config = MeshConfig()
        assert (config.width, config.height) == (30, 30)
        assert config.k_stretch == 2.5
        assert config.k_shear == 0.5
        assert config.k_strut == 2.5
        assert config.charge_strength == -100.0
        assert config.max_charge_distance == 100.0
        assert config.vertex_radius == 3.0
        assert config.velocity_decay == 0.6

    def test_alpha_decay_settles_in_300_ticks(self):
        config = MeshConfig()
        assert math.isclose((1.0 - config.alpha_decay) ** 300, config.alpha_min, rel_tol=1e-9)

    def test_center_is_viewport_middle(self):
        config = MeshConfig(viewport_width=800.0, viewport_height=400.0)
        assert config.center == (400.0, 200.0)

    def test_enabled_terms(self):
        config = MeshConfig(enable_shear=False, enable_charge=False)
        assert config.enabled_terms == frozenset({"stretch", "strut", "collision"})


class TestMeshConfigValidation:
    """Invalid values raise and never produce a config."""

    @pytest.mark.parametrize("field,value", [
        ("width", 0),
        ("height", -3),
        ("width", 2.0),
    ])
    def test_invalid_dimension(self, field, value):
        with pytest.raises(InvalidDimension):
            MeshConfig(**{field: value})

    @pytest.mark.parametrize("field,value", [
        ("k_stretch", -1.0),
        ("k_shear", float("nan")),
        ("charge_strength", 5.0),
        ("max_charge_distance", -1.0),
        ("vertex_radius", 1.0),
        ("iterations", 0),
        ("iterations", C.MAX_ITERATIONS + 1),
        ("alpha_min", 1.5),
        ("velocity_decay", -0.1),
        ("enable_charge", "yes"),
        ("initial_layout", "random"),
        ("unfold_ticks", -1),
        ("edge_length", 0.0),
        ("k_stretch", math.inf),
        ("k_shear", math.inf),
        ("k_strut", math.inf),
        ("center_strength", math.inf),
    ])
    def test_invalid_coefficient(self, field, value):
        with pytest.raises(InvalidCoefficient):
            MeshConfig(**{field: value})

    def test_infinite_charge_distance_allowed(self):
        config = MeshConfig(max_charge_distance=float("inf"))
        assert math.isinf(config.max_charge_distance)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            MeshConfig(width=0)
        assert issubclass(InvalidTarget, ValidationError)


class TestMeshConfigChanges:
    """replace, changed_fields and dict conversion."""

    def test_replace_accepts_editor_names(self):
        config = MeshConfig().replace(K_STRETCH=1.0, enableCharge=False)
        assert config.k_stretch == 1.0
        assert config.enable_charge is False

    def test_replace_rejects_unknown_option(self):
        with pytest.raises(InvalidCoefficient):
            MeshConfig().replace(stiffness=3.0)

    def test_invalid_replace_keeps_original(self):
        config = MeshConfig()
        with pytest.raises(InvalidCoefficient):
            config.replace(k_shear=-1.0)
        assert config.k_shear == C.K_SHEAR

    def test_changed_fields(self):
        a = MeshConfig()
        b = a.replace(width=10, k_strut=1.0)
        assert b.changed_fields(a) == frozenset({"width", "k_strut"})

    def test_from_dict_coerces_strings(self):
        config = MeshConfig.from_dict({"alphaMin": "1e-4", "width": "12", "edge_length": 15})
        assert config.alpha_min == pytest.approx(1e-4)
        assert config.width == 12
        assert isinstance(config.edge_length, float)

    def test_from_dict_bad_string(self):
        with pytest.raises(InvalidCoefficient):
            MeshConfig.from_dict({"k_stretch": "stiff"})

    def test_to_dict_round_trip(self):
        config = MeshConfig(width=7, enable_strut=False)
        assert MeshConfig.from_dict(config.to_dict()) == config


class TestValidators:
    """Standalone validators."""

    def test_vertex_id(self):
        assert validate_vertex_id(3, 4) == 3
        with pytest.raises(InvalidTarget):
            validate_vertex_id(4, 4)
        with pytest.raises(InvalidTarget):
            validate_vertex_id(-1, 4)
        with pytest.raises(InvalidTarget):
            validate_vertex_id(1.0, 4)

    def test_non_negative(self):
        assert validate_non_negative(0, "x") == 0.0
        with pytest.raises(InvalidCoefficient):
            validate_non_negative("1", "x")
        with pytest.raises(InvalidCoefficient):
            validate_non_negative(math.inf, "x")
        assert math.isinf(validate_non_negative(math.inf, "x", allow_infinite=True))


class TestLoader:
    """YAML loading and saving."""

    def test_load_mesh_section(self, tmp_path):
        path = tmp_path / "mesh.yaml"
        path.write_text(yaml.dump({
            "name": "test",
            "mesh": {"width": 6, "height": 4, "K_SHEAR": 0.25},
        }))
        config = load_mesh_config(path)
        assert (config.width, config.height) == (6, 4)
        assert config.k_shear == 0.25

    def test_load_flat_mapping(self, tmp_path):
        path = tmp_path / "flat.yaml"
        path.write_text("name: flat\nwidth: 5\nheight: 5\nenable_collision: false\n")
        config = load_mesh_config(path)
        assert config.width == 5
        assert config.enable_collision is False

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == {}
        assert load_mesh_config(path) == MeshConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_unknown_option_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("mesh:\n  width: 5\n  gravity: 9.8\n")
        with pytest.raises(InvalidCoefficient):
            load_mesh_config(path)

    def test_save_then_load(self, tmp_path):
        config = MeshConfig(width=9, height=2, initial_layout="phyllotaxis")
        path = tmp_path / "out" / "saved.yaml"
        save_mesh_config(config, path, name="saved")

        assert load_config(path)["name"] == "saved"
        assert load_mesh_config(path) == config

    def test_shipped_examples_load(self):
        examples = Path(__file__).parent.parent / "examples"
        paths = sorted(examples.glob("*.yaml"))
        assert paths
        for path in paths:
            assert isinstance(load_mesh_config(path), MeshConfig)
