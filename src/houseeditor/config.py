"""
Configuration for the wall editor core.

Tolerances, defaults and scales shared by geometry, snapping and serialization.
"""

# Geometry tolerances
EPSILON = 1e-4  # Tolerance for point-on-line checks
ANGLE_TOLERANCE = 1  # Degrees a wall angle may drift from its centerline

# Serialization
NUMBER_SCALE = 100_000_000  # Fixed-point scale for stored coordinates

# Wall defaults (metres)
DEFAULT_WALL_WIDTH = 0.4
DEFAULT_WALL_HEIGHT = 2.4
MIN_WALL_LENGTH = 0.5  # Shortest wall the drawing tool may commit

# Snapping
SNAP_DISTANCE = 0.3  # Search radius around the pointer
GRID_STEP = 0.1  # Grid and continuation rounding step
MAX_EXTENT = 30.0  # Placements further from the origin are rejected
SNAP_ANGLES = (0, 90, 180, 270)

# Alignment guides
ALIGNMENT_MIN_DISTANCE = 0.5  # Ignore crossings this close to a wall end
ALIGNMENT_KEY_DIGITS = 3  # Rounding used to key the alignment cache

# Capsule polygonisation
CAPSULE_ARC_SEGMENTS = 8
