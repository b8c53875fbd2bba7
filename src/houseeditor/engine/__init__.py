"""Engine module for wall editing.

This module provides the edit log, the wall command handlers, the editing API
and the collision and placement checks built on top of them.
"""

from .api import create_wall, destroy_wall, draw_wall, move_wall, split_wall
from .edit_log import EditLog
from .validators import PlacementResult, validate_placement

__all__ = [
    "EditLog",
    "PlacementResult",
    "create_wall",
    "destroy_wall",
    "draw_wall",
    "move_wall",
    "split_wall",
    "validate_placement",
]
