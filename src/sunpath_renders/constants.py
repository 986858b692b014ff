"""
Configuration constants for the Sun Path Renderer.
"""

# Default Camera (south-facing, level, wide)
DEFAULT_CENTER_AZIMUTH = 180.0
DEFAULT_CENTER_ALTITUDE = 0.0
DEFAULT_FOV = 110.0

# Stable field-of-view range for the perspective projection
FOV_MIN = 60.0
FOV_MAX = 130.0

# Projection limits
MIN_VISIBLE_ALTITUDE = -6.0
MAX_VISIBLE_ALTITUDE = 95.0
CAMERA_PLANE_EPSILON = 0.01

# Canvas
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
HORIZON_FRACTION = 0.8 # Horizon pinned at 80% of canvas height

# Camera Controller
FOLLOW_SUN_MIN_DELTA = 0.1
# (solar altitude, camera pitch) breakpoints
AUTO_TILT_CURVE = [
    (-20.0, -10.0),
    (0.0, -5.0),
    (15.0, 5.0),
    (45.0, 25.0),
    (90.0, 50.0),
]
AUTO_TILT_MIN = -10.0
AUTO_TILT_MAX = 50.0
# (solar altitude, fov) breakpoints
AUTO_FOV_CURVE = [
    (0.0, 130.0),
    (30.0, 110.0),
    (60.0, 85.0),
    (90.0, 68.0),
]
AUTO_FOV_MIN = 68.0
AUTO_FOV_MAX = 130.0

# Sun Path
PATH_STEP_HOURS = 0.25
PATH_JUMP_FRACTION = 0.25 # Break segment when a step exceeds width / 4
PATH_DASH = (5, 5)
PATH_COLOR = (255, 255, 255, 102)
PATH_WIDTH = 2
SUNRISE_MARKER_COLOR = (255, 107, 53, 255)
SUNSET_MARKER_COLOR = (255, 78, 80, 255)
MARKER_RADIUS = 8

# Sun Disc
SUN_BASE_RADIUS = 30.0
SUN_CORE_COLOR = (255, 215, 0, 255)      # Gold
SUN_LIMB_COLOR = (255, 248, 220, 255)    # Cornsilk
SUN_INNER_RATIO = 0.7
SUN_GLOW_RATIO = 2.5
SUN_HAZE_ALTITUDE = 30.0 # Glow grows below this altitude

# Sky overlays
GLOW_COLOR = (255, 240, 200)
GLOW_RADIUS_FRACTION = 0.6
GROUND_COLORS = {
    'beforeDawn': ['#1c2233', '#0b0e17'],
    'sunrise': ['#5a4a3a', '#2a2018'],
    'daytime': ['#4f6b3a', '#2c3d20'],
    'sunset': ['#5a3a30', '#2a1a14'],
    'night': ['#12141c', '#05060a'],
}
HORIZON_LINE_COLOR = (255, 255, 255, 128)

# Mountains: (x_ratio, height px, width px)
MOUNTAINS = [
    (0.04, 55.0, 170.0),
    (0.17, 85.0, 230.0),
    (0.31, 48.0, 150.0),
    (0.46, 105.0, 260.0),
    (0.62, 66.0, 190.0),
    (0.78, 92.0, 240.0),
    (0.93, 58.0, 180.0),
]
MOUNTAIN_COLORS = {
    'beforeDawn': (24, 28, 44, 255),
    'sunrise': (74, 52, 60, 255),
    'daytime': (70, 92, 110, 255),
    'sunset': (70, 44, 52, 255),
    'night': (14, 16, 26, 255),
}

# Labels
CARDINAL_NAMES = [('N', 0.0), ('E', 90.0), ('S', 180.0), ('W', 270.0)]
LABEL_FONT_SIZE = 18
LABEL_FILL = (255, 255, 255, 230)
LABEL_STROKE = (0, 0, 0, 160)
ALTITUDE_SCALE_STEP = 15
ALTITUDE_SCALE_MAX = 75
ALTITUDE_SCALE_COLOR = (255, 255, 255, 60)
