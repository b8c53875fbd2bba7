"""Geometric primitives for the floor plane.

Points are three dimensional (x, height, z) but walls live on a horizontal
floor plane, so every planar calculation here works on the (x, z) pair and
carries the height along unchanged.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from ..config import ANGLE_TOLERANCE
from ..errors import require

# Exact unit vectors for the axis angles so axis-aligned walls stay exact.
_AXIS_UNITS = {0: (1.0, 0.0), 90: (0.0, 1.0), 180: (-1.0, 0.0), 270: (0.0, -1.0)}


@dataclass(frozen=True)
class Point:
    """A position in the scene.

    Attributes:
        x: Horizontal coordinate.
        y: Height coordinate; constant within one level.
        z: Horizontal coordinate, perpendicular to x.
    """

    x: float
    y: float
    z: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y, self.z - other.z)

    def scaled(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor, self.z * factor)

    def with_y(self, y: float) -> Point:
        return Point(self.x, y, self.z)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def distance_to(self, other: Point) -> float:
        return (self - other).length()

    def lerp(self, other: Point, u: float) -> Point:
        return Point(
            self.x + (other.x - self.x) * u,
            self.y + (other.y - self.y) * u,
            self.z + (other.z - self.z) * u,
        )

    def planar(self) -> tuple[float, float]:
        """The (x, z) coordinates of the point on the floor plane."""
        return (self.x, self.z)


@dataclass(frozen=True)
class Line:
    """A directed segment from ``start`` to ``end``."""

    start: Point
    end: Point

    def delta(self) -> Point:
        return self.end - self.start

    def length(self) -> float:
        return self.delta().length()

    def at(self, u: float) -> Point:
        """Point at parametric position ``u`` (0 = start, 1 = end)."""
        return self.start.lerp(self.end, u)

    def translated(self, offset: Point) -> Line:
        return Line(self.start + offset, self.end + offset)

    def closest_point_parameter(self, point: Point, clamp: bool = True) -> float:
        delta = self.delta()
        length_sq = delta.x * delta.x + delta.y * delta.y + delta.z * delta.z
        if length_sq == 0:
            return 0.0
        diff = point - self.start
        u = (diff.x * delta.x + diff.y * delta.y + diff.z * delta.z) / length_sq
        if clamp:
            u = min(1.0, max(0.0, u))
        return u

    def closest_point(self, point: Point, clamp: bool = True) -> Point:
        """Closest point on the line (or on the segment when ``clamp``) to ``point``."""
        return self.at(self.closest_point_parameter(point, clamp))


@dataclass(frozen=True)
class AngleDirection:
    """A unit direction on the floor plane tagged with its integer angle.

    Attributes:
        angle: Whole degrees in [0, 360), measured from +x towards +z.
        x: x component of the unit vector.
        z: z component of the unit vector.
    """

    angle: int
    x: float
    z: float

    @classmethod
    def of(cls, angle: int) -> AngleDirection:
        require(angle == round(angle) and 0 <= angle < 360, "bad angle", angle)
        angle = int(angle)
        if angle in _AXIS_UNITS:
            x, z = _AXIS_UNITS[angle]
        else:
            radians = math.radians(angle)
            x, z = math.cos(radians), math.sin(radians)
        return cls(angle, x, z)

    def vector(self, length: float = 1.0) -> Point:
        return Point(self.x * length, 0.0, self.z * length)

    @property
    def axis(self) -> int:
        """The angle folded onto [0, 180), equal for parallel directions."""
        return self.angle % 180


@dataclass(frozen=True)
class Intersection:
    """Result of intersecting two lines on the floor plane.

    Attributes:
        point: The intersection point; its height is interpolated along line A.
        u_a: Parametric position along line A.
        u_b: Parametric position along line B.
        in_a: Whether ``u_a`` lies within [0, 1].
        in_b: Whether ``u_b`` lies within [0, 1].
    """

    point: Point
    u_a: float
    u_b: float
    in_a: bool
    in_b: bool


def normalize_angle(angle: float) -> int:
    """Round ``angle`` to whole degrees in [0, 360)."""
    return int(math.floor(angle + 0.5)) % 360


def line_to_angle(start: Point, end: Point) -> int:
    """Whole-degree direction of ``end - start`` on the floor plane."""
    angle = normalize_angle(math.degrees(math.atan2(end.z - start.z, end.x - start.x)))
    require(0 <= angle < 360, "bad angle", start, end, angle)
    return angle


def angle_difference(a: int, b: int) -> int:
    """Smallest absolute difference between two angles in degrees."""
    diff = abs(a - b) % 360
    return min(diff, 360 - diff)


def is_angle(angle) -> bool:
    """Whether ``angle`` is a whole number of degrees in [0, 360)."""
    return isinstance(angle, int) and not isinstance(angle, bool) and 0 <= angle < 360


def check_angle(angle: int, start: Point, end: Point) -> int:
    """Return ``angle`` after checking it matches the direction of start to end."""
    require(is_angle(angle), "bad angle", angle, start, end)
    actual = line_to_angle(start, end)
    require(
        angle_difference(angle, actual) <= ANGLE_TOLERANCE,
        "angle too far",
        angle,
        actual,
        start,
        end,
    )
    return angle


def intersect_lines(
    start_a: Point,
    end_a: Point,
    start_b: Point,
    end_b: Point,
    infinite_lines: bool = True,
) -> Union[Intersection, bool, None]:
    """Intersect line A with line B on the floor plane.

    Line intercept math after Paul Bourke.

    Args:
        start_a: Start of line A.
        end_a: End of line A.
        start_b: Start of line B.
        end_b: End of line B.
        infinite_lines: When False, crossings outside either segment are rejected.

    Returns:
        ``None`` if either line has zero length (or, for bounded segments, the
        crossing lies outside them), ``False`` if the lines are parallel,
        otherwise an Intersection.
    """
    x1, y1, x2, y2 = start_a.x, start_a.z, end_a.x, end_a.z
    x3, y3, x4, y4 = start_b.x, start_b.z, end_b.x, end_b.z
    if (x1 == x2 and y1 == y2) or (x3 == x4 and y3 == y4):
        return None
    denominator = (y4 - y3) * (x2 - x1) - (x4 - x3) * (y2 - y1)
    if denominator == 0:
        return False
    u_a = ((x4 - x3) * (y1 - y3) - (y4 - y3) * (x1 - x3)) / denominator
    u_b = ((x2 - x1) * (y1 - y3) - (y2 - y1) * (x1 - x3)) / denominator
    if not infinite_lines and (u_a < 0 or u_a > 1 or u_b < 0 or u_b > 1):
        return None
    point = Point(
        x1 + u_a * (x2 - x1),
        start_a.y + u_a * (end_a.y - start_a.y),
        y1 + u_a * (y2 - y1),
    )
    return Intersection(
        point=point,
        u_a=u_a,
        u_b=u_b,
        in_a=0 <= u_a <= 1,
        in_b=0 <= u_b <= 1,
    )


def segment_distance(a: Line, b: Line) -> float:
    """Shortest distance between two segments on the floor plane."""
    hit = intersect_lines(a.start, a.end, b.start, b.end, infinite_lines=False)
    if isinstance(hit, Intersection):
        return 0.0
    flat_a = Line(a.start.with_y(0.0), a.end.with_y(0.0))
    flat_b = Line(b.start.with_y(0.0), b.end.with_y(0.0))
    candidates = [
        flat_b.closest_point(flat_a.start).distance_to(flat_a.start),
        flat_b.closest_point(flat_a.end).distance_to(flat_a.end),
        flat_a.closest_point(flat_b.start).distance_to(flat_b.start),
        flat_a.closest_point(flat_b.end).distance_to(flat_b.end),
    ]
    return min(candidates)


def point_on_segment(point: Point, line: Line, epsilon: float) -> bool:
    return line.closest_point(point).distance_to(point) <= epsilon
