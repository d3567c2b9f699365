# vigil/settings.py
from __future__ import annotations

# Window / render (debug view only)
SCREEN_WIDTH: int = 1280
SCREEN_HEIGHT: int = 720
SCREEN_SIZE: tuple[int, int] = (SCREEN_WIDTH, SCREEN_HEIGHT)
WINDOW_TITLE: str = "Vigil - spatial memory + FOV scan"
PIXELS_PER_UNIT: float = 8.0
CAMERA_PAN_SPEED: float = 320.0       # px/sec

# Render loop timestep
FIXED_DT: float = 1.0 / 60.0
MAX_STEPS: int = 5
DT_CLAMP: float = 0.25
FRAME_SLEEP: float = 1.0 / 120.0

# Grid (world units, XZ plane)
CELL_SIZE: float = 5.0
GRID_WIDTH: int = 20
GRID_HEIGHT: int = 20
GRID_SAMPLE_HEIGHT: float = 0.0
NAV_SAMPLE_TOLERANCE: float = 0.7    # fraction of CELL_SIZE

# Chunk defaults
NEVER: float = float("-inf")
INTEREST_UNSET: float = -1.0

# Close-range FOV
CLOSE_VIEW_DISTANCE: float = 4.0
CLOSE_VIEW_ANGLE: float = 190.0      # full cone, degrees

# Far-range FOV
FAR_VIEW_DISTANCE: float = 10.0
FAR_VIEW_ANGLE: float = 60.0

# Scanning
SCAN_INTERVAL: float = 0.2           # seconds, real time
EYE_HEIGHT: float = 0.5

# Physics layers (bit index); masks are 1 << layer
OBSTACLE_LAYER: int = 1
TARGET_LAYER: int = 2
OBSTACLE_MASK: int = 1 << OBSTACLE_LAYER

# Intruder anchors (height above feet)
STANDING_ANCHOR_HEIGHT: float = 1.6
CROUCHED_ANCHOR_HEIGHT: float = 0.8
INTRUDER_MOVE_SPEED: float = 6.0     # units/sec
INTRUDER_SNEAK_MULT: float = 0.5

# Sentry demo movement
SENTRY_MOVE_SPEED: float = 3.0       # units/sec
SENTRY_TURN_SPEED: float = 180.0     # degrees/sec
SENTRY_ARRIVE_RADIUS: float = 0.5

# Debug view
DEBUG_DRAW: bool = True
DEBUG_MAX_AGE: float = 30.0          # seconds until fully stale
BG_COLOR: tuple[int, int, int] = (15, 15, 20)
GRID_COLOR: tuple[int, int, int] = (45, 45, 60)
SENTRY_COLOR: tuple[int, int, int] = (220, 220, 40)
INTRUDER_COLOR: tuple[int, int, int] = (220, 60, 60)
INTRUDER_SNEAK_COLOR: tuple[int, int, int] = (140, 40, 40)
VISITED_FRESH_RGB: tuple[int, int, int] = (0, 255, 0)
VISITED_STALE_RGB: tuple[int, int, int] = (255, 0, 0)
SEEN_FRESH_RGB: tuple[int, int, int] = (0, 0, 255)
SEEN_STALE_RGB: tuple[int, int, int] = (255, 255, 0)
VISITED_ALPHA: int = 110
TARGET_SEEN_RGB: tuple[int, int, int] = (255, 0, 255)
CLOSE_CONE_RGBA: tuple[int, int, int, int] = (255, 255, 0, 80)
FAR_CONE_RGBA: tuple[int, int, int, int] = (0, 255, 255, 64)
LOS_CLEAR_RGBA: tuple[int, int, int, int] = (0, 255, 0, 180)
LOS_BLOCKED_RGBA: tuple[int, int, int, int] = (255, 60, 60, 180)
OBSTACLE_RGBA: tuple[int, int, int, int] = (160, 40, 40, 160)
OBSTACLE_BORDER_RGB: tuple[int, int, int] = (220, 80, 80)
CONE_SEGMENTS: int = 30

# HUD
HUD_BG_RGBA: tuple[int, int, int, int] = (0, 0, 0, 150)
HUD_TEXT_RGB: tuple[int, int, int] = (240, 240, 240)
HUD_FONT_SIZE: int = 20

# Demo obstacles
OBSTACLE_SIZE: float = 2.0
OBSTACLE_HEIGHT: float = 3.0

# Logging
LOG_LEVEL: str = "INFO"
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
