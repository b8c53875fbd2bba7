"""Geometry for the floor plane.

This module provides points, lines and angle helpers, the line intersection
primitive, and the planar shapes used for wall outlines and collisions.
"""

from .polygon import BoundingRect, Capsule, EdgeHit, ParallelLines, Polygon
from .primitives import (
    AngleDirection,
    Intersection,
    Line,
    Point,
    angle_difference,
    intersect_lines,
    line_to_angle,
)

__all__ = [
    "AngleDirection",
    "BoundingRect",
    "Capsule",
    "EdgeHit",
    "Intersection",
    "Line",
    "ParallelLines",
    "Point",
    "Polygon",
    "angle_difference",
    "intersect_lines",
    "line_to_angle",
]
