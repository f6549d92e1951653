# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They are the fixed
numbers of the plexus model (damping, spawn ranges, color lightness) and of
the rendering framework, as opposed to the live-tunable parameters which
live in `parameters.py` and `config.json`.
"""
import math

# --- Particle spawn ranges ---
SPAWN_SPEED_MIN = 0.2          # Pixels per frame
SPAWN_SPEED_MAX = 0.7          # Exclusive upper bound
SPAWN_SIZE_MIN = 1.0           # Radius in pixels
SPAWN_SIZE_MAX = 3.0
FULL_TURN = 2 * math.pi
# Falling-regime respawns appear this far above the top edge.
RESPAWN_Y = -20.0
# How far past the bottom edge a particle may drift before boundary handling runs.
BOUNDARY_MARGIN = 20.0

# --- Motion model ---
NEUTRAL_SPEED = 50.0           # speed / NEUTRAL_SPEED is the flow multiplier
GRAVITY_SCALE = 0.2            # (gravity / 50) * GRAVITY_SCALE per frame
GRAVITY_DAMPING = 0.95         # Applied to gravity velocity every frame
FALLING_GRAVITY_THRESHOLD = 10.0  # gravity above this switches to the falling regime
WIGGLE_FREQUENCY = 0.002       # Radians per frame of the lateral oscillation

# --- Population ---
BASELINE_PARTICLES = 20
PARTICLES_PER_FULL_DENSITY = 150

# --- Rendering ---
BACKGROUND_COLOR = (0, 0, 0)
# RGBA with alpha in [0, 1]. Lower alpha gives longer trails.
TRAIL_FADE_RGBA = (0, 0, 0, 0.2)
PARTICLE_SATURATION = 70       # Percent
PARTICLE_LIGHTNESS = 60
PARTICLE_HUE_PER_PIXEL = 0.1   # Hue offset per logical pixel of x
LINK_SATURATION = 80
LINK_LIGHTNESS = 50
LINK_WIDTH = 0.5               # Logical pixels
RANGE_TO_PIXELS = 3.0          # UI "range" is multiplied by this for the link distance

# --- Application framework ---
TITLE = "Geoflux"
DEFAULT_WINDOW_SIZE = (1280, 720)
DEFAULT_FPS = 60
EXPORT_PREFIX = "geoflux-art"
HUD_BACKGROUND_RGBA = (20, 20, 20, 170)
HUD_TEXT_COLOR = (220, 220, 220)
HUD_SELECTED_COLOR = (0, 255, 255)
