"""Fixed constants: frustum outcode bits, tolerances, defaults and command step sizes."""

import math

# Outcode bits, one per canonical view volume plane
LEFT = 32  # binary 100000
RIGHT = 16  # binary 010000
BOTTOM = 8  # binary 001000
TOP = 4  # binary 000100
FAR = 2  # binary 000010
NEAR = 1  # binary 000001

# Order in which violated planes are clipped away (highest bit first)
CLIP_PLANE_ORDER = (LEFT, RIGHT, BOTTOM, TOP, FAR, NEAR)
MAX_CLIP_ITERATIONS = 6  # one per plane

# Boundary-touching points count as inside within this tolerance
FLOAT_EPSILON = 1e-6
# Magnitudes / homogeneous w below this are treated as zero
ZERO_TOLERANCE = 1e-12

TWO_PI = 2.0 * math.pi
MS_PER_SECOND = 1000.0

# Defaults (configuration)
DEFAULT_WIDTH = 500
DEFAULT_HEIGHT = 500
DEFAULT_FPS = 30.0

# Camera command step sizes: world units per move, radians per pan
CAMERA_MOVE_STEP = 1.0
CAMERA_PAN_STEP = 0.1

# Default tessellation for parametric primitives
DEFAULT_SIDES = 12
DEFAULT_SLICES = 12
DEFAULT_STACKS = 8
