"""Default coefficients for knit-mesh relaxation.

Cooling constants follow the d3-force defaults the layout was tuned against;
force coefficients are the defaults of the swatch editor.
"""

from typing import Final

# Grid
DEFAULT_WIDTH: Final[int] = 30
DEFAULT_HEIGHT: Final[int] = 30
DEFAULT_EDGE_LENGTH: Final[float] = 20.0  # Rest length of a stretch link [px]
MAX_ITERATIONS: Final[int] = 15  # Upper bound on link relaxation passes per tick

# Link stiffness
K_STRETCH: Final[float] = 2.5
K_SHEAR: Final[float] = 0.5
K_STRUT: Final[float] = 2.5
SHEAR_RATIO: Final[float] = 0.5

# Many-body repulsion
CHARGE_STRENGTH: Final[float] = -100.0
MAX_CHARGE_DISTANCE: Final[float] = 100.0
CHARGE_DISTANCE_MIN: Final[float] = 1.0  # d3 distanceMin, caps 1/d blow-up

# Collision
VERTEX_RADIUS: Final[float] = 3.0
MIN_VERTEX_RADIUS: Final[float] = 2.0

# Cooling schedule
ALPHA_START: Final[float] = 1.0
ALPHA_MIN: Final[float] = 0.001
ALPHA_DECAY: Final[float] = 1.0 - ALPHA_MIN ** (1.0 / 300.0)  # ~300 ticks to settle
VELOCITY_DECAY: Final[float] = 0.6  # Fraction of velocity kept per tick
REHEAT_ALPHA: Final[float] = 0.4  # Alpha floor after a live parameter change

# Interaction
DRAG_ALPHA_TARGET: Final[float] = 0.3  # Vertex and link drags
FACE_DRAG_ALPHA_TARGET: Final[float] = 0.5
INTERACTION_CENTER_RATIO: Final[float] = 1.0 / 20.0

# Transient unfold repulsion
UNFOLD_STRENGTH: Final[float] = -300.0
UNFOLD_DISTANCE_RATIO: Final[float] = 5.0  # Cutoff in edge lengths
UNFOLD_TICKS: Final[int] = 18  # ~300 ms at 60 frames per second

# Viewport the mesh is centred in
VIEWPORT_WIDTH: Final[float] = 960.0
VIEWPORT_HEIGHT: Final[float] = 600.0

MAX_SPEED: Final[float] = 1000.0  # Per-vertex speed clamp [px/tick]

# d3 phyllotaxis seeding
INITIAL_RADIUS: Final[float] = 10.0
INITIAL_ANGLE: Final[float] = 3.883222077450933  # pi * (3 - sqrt(5))
