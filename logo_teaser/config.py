"""
Default constants for the logo teaser.

Values are the tuning of the production teaser; project files
(.teaser.json, see project_config.py) override them per deployment.
Time values are in milliseconds unless the name says otherwise.
"""

import math

# ---------------------------------------------------------------------------
# Camera / framing
# ---------------------------------------------------------------------------

CAMERA_FOV_DEG = 35.0
CAMERA_INITIAL_NEAR = 0.1
CAMERA_INITIAL_FAR = 500.0

FIT_MARGIN = 1.18

# Smallest bounding-box extent used by the fit; guards zero-volume assets
MIN_FIT_EXTENT = 1e-6

# Camera distance used when the box is below MIN_FIT_EXTENT
DEGENERATE_FIT_DISTANCE = 5.0

# near = d / CLIP_RATIO, far = d * CLIP_RATIO
CLIP_RATIO = 100.0

# ---------------------------------------------------------------------------
# Rig
# ---------------------------------------------------------------------------

# Rotation that makes the asset face the viewer, corrective flip included.
BASE_ORIENTATION = (math.pi / 2, math.pi, 0.0)

# ---------------------------------------------------------------------------
# Pointer follow (ACTIVE mode)
# ---------------------------------------------------------------------------

# Up/down (rig X) is weighted stronger than left/right (rig Y)
FOLLOW_STRENGTH_PITCH = 0.95
FOLLOW_STRENGTH_YAW = 0.55
PITCH_LIMIT = 1.05

SMOOTHING = 0.06

# ---------------------------------------------------------------------------
# Idle wiggle
# ---------------------------------------------------------------------------

IDLE_TIMEOUT_MS = 900.0

# Frequencies in rad/s, amplitudes in rad
IDLE_PITCH_AMPLITUDE = 0.06
IDLE_PITCH_FREQUENCY = 0.50
IDLE_YAW_AMPLITUDE = 0.18
IDLE_YAW_FREQUENCY = 0.65

# Decorative roll, driven by wall clock: rad/ms
ROLL_AMPLITUDE = 0.02
ROLL_FREQUENCY = 0.00032

# ---------------------------------------------------------------------------
# Device tilt
# ---------------------------------------------------------------------------

TILT_RANGE_DEG = 30.0
TILT_NEUTRAL_BETA_DEG = 45.0

# ---------------------------------------------------------------------------
# Host / output
# ---------------------------------------------------------------------------

MOUNT_DIRNAME = "three-mount"
DEFAULT_VIEWPORT = (1280, 720)
DEFAULT_FPS = 60.0
BACKGROUND_COLOR = "#000000"
WIREFRAME_COLOR = "#ffffff"

# Key light
LIGHT_COLOR = "#ffffff"
LIGHT_INTENSITY = 1.2
LIGHT_POSITION = (5.0, 5.0, 5.0)
