"""Knit swatch preset with the swatch editor's defaults."""
from wabric.config.params import MeshConfig
from wabric.simulation.simulation import Simulation


def create_knit_swatch(
    width: int = 30,
    height: int = 30,
    edge_length: float = 20.0,
    iterations: int = 3,
    **overrides,
) -> Simulation:
    """Create and start a knit swatch simulation.

    Stretch, shear, strut, charge and collision terms are all enabled with
    the stiffnesses the swatch editor shipped with (K_STRETCH = K_STRUT =
    2.5, K_SHEAR = 0.5, charge -100 within 100 px).

    Args:
        width: Stitches per course
        height: Courses
        edge_length: Rest length of a stretch link [px]
        iterations: Link relaxation passes per tick
        **overrides: Any other MeshConfig field (editor parameter names accepted)

    Returns:
        Started Simulation ready to tick
    """
    config = MeshConfig.from_dict(dict(
        width=width,
        height=height,
        edge_length=edge_length,
        iterations=iterations,
        **overrides,
    ))
    simulation = Simulation(config=config)
    simulation.start()
    return simulation
