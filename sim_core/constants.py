#!/usr/bin/env python3
"""
Shared constants for the Solar System viewer.

Scene units are arbitrary "world units"; the sun has radius 4 and Neptune
orbits at 56. Angles are radians unless stated otherwise. Colors are 24-bit
RGB integers (0xRRGGBB) so they read the same as the planet table.
"""
import math

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
FPS = 60
SAFE_COORD_LIMIT = 30000

# Perspective camera
CAMERA_FOV_DEG = 75.0
CAMERA_NEAR = 0.1
CAMERA_FAR = 1000.0

# Spherical camera rig
DEFAULT_CAMERA_RADIUS = 80.0
DEFAULT_CAMERA_THETA = 0.0
DEFAULT_CAMERA_PHI = math.pi / 2
MIN_CAMERA_RADIUS = 20.0
MAX_CAMERA_RADIUS = 200.0
MIN_CAMERA_PHI = 0.1
MAX_CAMERA_PHI = math.pi - 0.1
ORBIT_SENSITIVITY = 0.01  # radians per pixel of drag
ZOOM_SENSITIVITY = 0.01  # world units per unit of wheel deltaY
WHEEL_DELTA_PER_NOTCH = 100.0  # browser-equivalent deltaY of one wheel notch

# Speed multiplier slider range
MIN_SPEED_MULTIPLIER = 0.0
MAX_SPEED_MULTIPLIER = 5.0

# Sun
SUN_RADIUS = 4.0
SUN_GLOW_RADIUS = 5.0
SUN_COLOR = 0xFFFF00
SUN_GLOW_OPACITY = 0.1
SUN_SPIN_PER_STEP = 0.005

# Planets and orbit guides
PLANET_OPACITY = 0.9
ORBIT_SEGMENTS = 100  # sampled points = segments + 1, closed loop
ORBIT_COLOR = 0x333333
ORBIT_OPACITY = 0.3

# Starfield
STAR_COUNT = 1000
STARFIELD_SIZE = 500.0  # side of the cube centred at the origin
STAR_COLOR = 0xFFFFFF
STAR_POINT_SIZE = 0.5
STAR_OPACITY = 0.8
STARFIELD_DRIFT_PER_STEP = 0.0001

# Lights
AMBIENT_LIGHT_COLOR = 0x404040
SUN_LIGHT_COLOR = 0xFFFFFF
SUN_LIGHT_INTENSITY = 1.0
SUN_LIGHT_RANGE = 200.0
SUN_LIGHT_DECAY = 1.0
FILL_LIGHT_COLOR = 0xFFFFFF
FILL_LIGHT_INTENSITY = 0.5
FILL_LIGHT_POSITION = (10.0, 10.0, 10.0)

# Themes: (clear color, ambient intensity)
DARK_THEME = (0x000000, 0.4)
LIGHT_THEME = (0x1A1A2E, 0.6)

# HUD
HUD_TEXT_COLOR = (200, 200, 200)
HOVER_RING_COLOR = (255, 255, 0)
INFO_PANEL_COLOR = (20, 24, 40)
INFO_PANEL_BORDER = (90, 110, 160)


def hex_to_rgb(color: int):
    """Split a 0xRRGGBB integer into an (r, g, b) tuple."""
    return ((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF)
