# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They define the
look and the physics of the drifting particle field: how many particles
exist, how they are spawned, how the pointer pushes them and how they are
painted. Anything a user may reasonably want to tweak per run (window
size, frame rate, seed, logging) lives in `config.json` instead.
"""

# --- Particle population ---
PARTICLE_COUNT = 250

# Spawn ranges. Each value is `base + uniform(0, 1) * span`.
SIZE_BASE = 1.0
SIZE_SPAN = 1.5
ALPHA_BASE = 0.2
ALPHA_SPAN = 0.4
# Sideways jitter is symmetric around zero: (u - 0.5) * SPAWN_VX_SCALE.
SPAWN_VX_SCALE = 0.1
# Upward bias: SPAWN_VY_BASE - u * SPAWN_VY_SPAN, always negative.
SPAWN_VY_BASE = -0.05
SPAWN_VY_SPAN = 0.1

# --- Pointer force field ---
POINTER_RADIUS = 140.0
POINTER_RADIUS_SQ = POINTER_RADIUS * POINTER_RADIUS
POINTER_STRENGTH = 0.15

# --- Per-tick physics ---
DAMPING = 0.98
DRIFT = -0.002

# --- Paint settings (applied once, not per tick) ---
# RGBA with alpha in 0..1, in the manner of a CSS rgba() colour.
PARTICLE_COLOR = (255, 255, 255, 0.6)
BLUR_AMOUNT = 2.0
BLUR_COLOR = (255, 255, 255, 0.3)

# --- Host defaults ---
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a resizable window of DEFAULT_WINDOW_SIZE.
FULLSCREEN = False
DEFAULT_WINDOW_SIZE = (1280, 800)
FPS = 60
BACKGROUND_COLOR = (30, 64, 175) # Primary blue
# Fraction of the viewport height covered by the effect band.
HEIGHT_FRACTION = 0.6
# Where the band sits in the window: "top" or "bottom".
ANCHOR = "bottom"

# Event names understood by the lifecycle controller.
EVENT_RESIZE = "resize"
EVENT_POINTER_MOVE = "pointermove"
EVENT_POINTER_LEAVE = "pointerleave"
