"""
Global constants for the tile raycaster
"""

# Screen settings
SCREEN_WIDTH = 960
SCREEN_HEIGHT = 600
FPS = 60

# World settings
CELL_SIZE = 64.0  # World units per grid cell (both axes)

# Cell codes
EMPTY_CELL = 0
DEFAULT_MATERIAL = 1  # Used for boundary hits and codes without a texture
VOID_MATERIAL = 0

# Hit sides (see renderer3d.raycaster.HitSide)
X_BOUNDARY = 0  # Crossed a vertical grid line (x = const)
Y_BOUNDARY = 1  # Crossed a horizontal grid line (y = const)

# Ray casting
FOV_DEGREES = 60.0
NUM_RAYS = 320
STRATEGY_DDA = "dda"
STRATEGY_MARCH = "march"
STRATEGIES = (STRATEGY_DDA, STRATEGY_MARCH)
DEFAULT_STRATEGY = STRATEGY_DDA
MAX_DRAW_DISTANCE = 16 * CELL_SIZE  # Fixed-step marching only
MARCH_STEPS = 512

# Projection
WALL_SCALE = CELL_SIZE  # K: a wall one cell away fills the screen height
SIDE_SHADE = 0.7  # Applied to X-boundary hits; Y-boundary hits are full bright
MIN_DISTANCE = 1e-3  # Near clamp for perpendicular distance
VOID_HEIGHT = 0.0
VOID_SHADE = 0.0

# Player settings (world units / degrees per second)
PLAYER_MOVE_SPEED = 3.0 * CELL_SIZE
PLAYER_STRAFE_SPEED = 2.5 * CELL_SIZE
PLAYER_TURN_SPEED = 120.0

# Minimap
MINIMAP_SIZE = 180
