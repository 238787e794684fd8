"""Mesh and solver parameters."""

from dataclasses import dataclass, fields, replace as dc_replace
from typing import Any, Dict, Literal, Mapping, Optional

from wabric import constants as C
from wabric.input_validation import (
    InvalidCoefficient,
    validate_dimension,
    validate_iterations,
    validate_non_negative,
    validate_non_positive,
    validate_positive,
    validate_range,
)

# camelCase and upper-case names used by the swatch editor UI
PARAM_ALIASES: Dict[str, str] = {
    "K_STRETCH": "k_stretch",
    "K_SHEAR": "k_shear",
    "K_STRUT": "k_strut",
    "enableStretch": "enable_stretch",
    "enableShear": "enable_shear",
    "enableStrut": "enable_strut",
    "enableCharge": "enable_charge",
    "enableCollision": "enable_collision",
    "chargeStrength": "charge_strength",
    "maxChargeDistance": "max_charge_distance",
    "vertexRadius": "vertex_radius",
    "alphaMin": "alpha_min",
    "alphaDecay": "alpha_decay",
    "velocityDecay": "velocity_decay",
}

# Fields whose change needs a new topology
TOPOLOGY_FIELDS = frozenset({"width", "height"})


@dataclass(frozen=True)
class MeshConfig:
    """Complete configuration for one knit-mesh simulation.

    Every field has a default; validation runs on construction so an invalid
    value never replaces a valid configuration.

    Attributes:
        width, height: Grid cells along courses and wales
        edge_length: Rest length of a stretch link
        iterations: Link relaxation passes per tick (1-15)
        enable_*: Per-term toggles
        k_stretch, k_shear, k_strut: Link stiffness per family
        shear_ratio: Shear rest distance as a fraction of the cell diagonal
        charge_strength: Many-body strength (negative repels)
        max_charge_distance: Repulsion cutoff distance
        vertex_radius: Collision radius, vertices stay 2 * radius apart
        viewport_width, viewport_height: Centering target is the viewport centre
        alpha_min, alpha_decay, velocity_decay: Cooling schedule
        center_strength: Centering strength before any interaction
        interaction_center_ratio: Centering scale once a drag has happened
        unfold_strength, unfold_ticks: Transient repulsion after a rebuild
        initial_layout: "grid" or "phyllotaxis"
        initial_spacing: Grid spacing of the seed layout (defaults to edge_length)
        max_speed: Velocity magnitude clamp per tick
    """

    width: int = C.DEFAULT_WIDTH
    height: int = C.DEFAULT_HEIGHT
    edge_length: float = C.DEFAULT_EDGE_LENGTH
    iterations: int = 3

    enable_stretch: bool = True
    enable_shear: bool = True
    enable_strut: bool = True
    enable_charge: bool = True
    enable_collision: bool = True

    k_stretch: float = C.K_STRETCH
    k_shear: float = C.K_SHEAR
    k_strut: float = C.K_STRUT
    shear_ratio: float = C.SHEAR_RATIO

    charge_strength: float = C.CHARGE_STRENGTH
    max_charge_distance: float = C.MAX_CHARGE_DISTANCE
    vertex_radius: float = C.VERTEX_RADIUS

    viewport_width: float = C.VIEWPORT_WIDTH
    viewport_height: float = C.VIEWPORT_HEIGHT

    alpha_min: float = C.ALPHA_MIN
    alpha_decay: float = C.ALPHA_DECAY
    velocity_decay: float = C.VELOCITY_DECAY

    center_strength: float = 1.0
    interaction_center_ratio: float = C.INTERACTION_CENTER_RATIO

    unfold_strength: float = C.UNFOLD_STRENGTH
    unfold_ticks: int = C.UNFOLD_TICKS

    initial_layout: Literal["grid", "phyllotaxis"] = "grid"
    initial_spacing: Optional[float] = None
    max_speed: float = C.MAX_SPEED

    def __post_init__(self):
        validate_dimension(self.width, "width")
        validate_dimension(self.height, "height")
        validate_positive(self.edge_length, "edge_length")
        validate_iterations(self.iterations, C.MAX_ITERATIONS)

        for name in ("enable_stretch", "enable_shear", "enable_strut",
                     "enable_charge", "enable_collision"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidCoefficient(
                    f"{name} must be a bool, got {getattr(self, name)!r}"
                )

        validate_non_negative(self.k_stretch, "k_stretch")
        validate_non_negative(self.k_shear, "k_shear")
        validate_non_negative(self.k_strut, "k_strut")
        validate_positive(self.shear_ratio, "shear_ratio")

        validate_non_positive(self.charge_strength, "charge_strength")
        validate_non_negative(self.max_charge_distance, "max_charge_distance",
                              allow_infinite=True)
        radius = validate_positive(self.vertex_radius, "vertex_radius")
        if radius < C.MIN_VERTEX_RADIUS:
            raise InvalidCoefficient(
                f"vertex_radius must be at least {C.MIN_VERTEX_RADIUS}, got {radius}"
            )

        validate_positive(self.viewport_width, "viewport_width")
        validate_positive(self.viewport_height, "viewport_height")

        validate_range(self.alpha_min, 0.0, 1.0, "alpha_min")
        validate_range(self.alpha_decay, 0.0, 1.0, "alpha_decay")
        validate_range(self.velocity_decay, 0.0, 1.0, "velocity_decay")

        validate_non_negative(self.center_strength, "center_strength")
        validate_range(self.interaction_center_ratio, 0.0, 1.0,
                       "interaction_center_ratio")

        validate_non_positive(self.unfold_strength, "unfold_strength")
        if isinstance(self.unfold_ticks, bool) or not isinstance(self.unfold_ticks, int) \
                or self.unfold_ticks < 0:
            raise InvalidCoefficient(
                f"unfold_ticks must be a non-negative integer, got {self.unfold_ticks!r}"
            )

        if self.initial_layout not in ("grid", "phyllotaxis"):
            raise InvalidCoefficient(f"Unknown initial_layout: {self.initial_layout}")
        if self.initial_spacing is not None:
            validate_positive(self.initial_spacing, "initial_spacing")
        validate_positive(self.max_speed, "max_speed")

    @property
    def center(self) -> tuple[float, float]:
        """Viewport centre the mesh is pulled toward."""
        return (0.5 * self.viewport_width, 0.5 * self.viewport_height)

    @property
    def enabled_terms(self) -> frozenset:
        """Names of the force terms switched on by the enable flags."""
        flags = {
            "stretch": self.enable_stretch,
            "shear": self.enable_shear,
            "strut": self.enable_strut,
            "charge": self.enable_charge,
            "collision": self.enable_collision,
        }
        return frozenset(name for name, on in flags.items() if on)

    def replace(self, **kwargs) -> "MeshConfig":
        """Return new config with specified fields replaced (validated)."""
        return dc_replace(self, **_normalize_keys(kwargs))

    def changed_fields(self, other: "MeshConfig") -> frozenset:
        """Names of fields that differ between self and other."""
        return frozenset(
            f.name for f in fields(self)
            if getattr(self, f.name) != getattr(other, f.name)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "MeshConfig":
        """Create MeshConfig from a mapping of field names or editor aliases.

        YAML may load numbers in scientific notation as strings, so numeric
        fields are coerced from their declared defaults' types.
        """
        kwargs = _normalize_keys(dict(config))
        defaults = cls()
        for name, value in list(kwargs.items()):
            default = getattr(defaults, name)
            if isinstance(value, str) and isinstance(default, (int, float)) \
                    and not isinstance(default, bool):
                try:
                    kwargs[name] = type(default)(value)
                except ValueError as e:
                    raise InvalidCoefficient(f"{name}: cannot parse {value!r}") from e
            elif isinstance(default, float) and isinstance(value, int) \
                    and not isinstance(value, bool):
                kwargs[name] = float(value)
        return cls(**kwargs)


def _normalize_keys(config: Dict[str, Any]) -> Dict[str, Any]:
    valid = {f.name for f in fields(MeshConfig)}
    normalized = {}
    for key, value in config.items():
        name = PARAM_ALIASES.get(key, key)
        if name not in valid:
            raise InvalidCoefficient(f"Unknown configuration option: {key}")
        normalized[name] = value
    return normalized
