"""House Editor - parametric walls with an undoable, journaled edit history."""

__version__ = "0.1.0"

from .core.model import Level, Wall, World
from .geom.primitives import Point

__all__ = ["Level", "Point", "Wall", "World"]
