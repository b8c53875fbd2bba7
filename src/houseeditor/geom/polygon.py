"""Planar shapes used for wall outlines and collision tests.

This module provides bounding rectangles, the pair of face lines offset from
a wall's centerline, capsules for coarse proximity checks and closed polygons
with an exact edge-crossing intersection test.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry import box

from ..config import CAPSULE_ARC_SEGMENTS
from ..errors import require
from .primitives import AngleDirection, Line, Point, check_angle, line_to_angle, segment_distance

Vertex = Tuple[float, float]


@dataclass(frozen=True)
class BoundingRect:
    """Axis-aligned rectangle on the floor plane (x against z)."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_vertices(cls, vertices: Iterable[Vertex]) -> BoundingRect:
        xs: List[float] = []
        ys: List[float] = []
        for x, y in vertices:
            xs.append(x)
            ys.append(y)
        require(len(xs) > 0, "bounding rect needs at least one vertex")
        return cls(min(xs), min(ys), max(xs), max(ys))

    def intersects(self, other: BoundingRect) -> bool:
        """Whether the projections overlap on both axes (touching counts)."""
        return not (
            self.min_x > other.max_x
            or self.max_x < other.min_x
            or self.min_y > other.max_y
            or self.max_y < other.min_y
        )

    def to_shapely(self) -> ShapelyPolygon:
        return box(self.min_x, self.min_y, self.max_x, self.max_y)


class ParallelLines:
    """A centerline with its two face lines offset by half the width.

    The left line is the centerline moved against the direction ``angle + 90``
    and the right line is moved along it.
    """

    def __init__(self, start: Point, end: Point, width: float, angle: Optional[int] = None) -> None:
        require(isinstance(width, (int, float)) and width >= 0, "bad width", width)
        self.width = width
        self.set(start, end, angle)

    def set(self, start: Point, end: Point, angle: Optional[int] = None) -> None:
        self.start = start
        self.end = end
        if angle is None:
            self.angle = line_to_angle(start, end)
        else:
            self.angle = check_angle(angle, start, end)
        offset = AngleDirection.of((self.angle + 90) % 360).vector(self.width / 2)
        self.line = Line(start, end)
        self.left_line = self.line.translated(offset.scaled(-1))
        self.right_line = self.line.translated(offset)


class Capsule(ParallelLines):
    """A circle of ``radius`` swept along a centerline segment."""

    def __init__(self, start: Point, end: Point, radius: float, angle: Optional[int] = None) -> None:
        super().__init__(start, end, radius * 2, angle)
        self.radius = radius

    def intersects(self, other: Capsule) -> bool:
        """Whether the two capsules overlap, by closest points between centerlines."""
        return self.radius + other.radius - segment_distance(self.line, other.line) > 0

    def to_polygon(self, segments: int = CAPSULE_ARC_SEGMENTS) -> Polygon:
        """Approximate the capsule outline with ``segments`` steps per cap."""
        base = math.radians(self.angle)
        polygon = Polygon()
        for centre, start_angle in ((self.end, base - math.pi / 2), (self.start, base + math.pi / 2)):
            for i in range(segments + 1):
                theta = start_angle + math.pi * i / segments
                polygon.line_to(
                    centre.x + self.radius * math.cos(theta),
                    centre.z + self.radius * math.sin(theta),
                )
        polygon.close_path()
        return polygon

    def bounding_rect(self) -> BoundingRect:
        r = self.radius
        return BoundingRect(
            min(self.start.x, self.end.x) - r,
            min(self.start.z, self.end.z) - r,
            max(self.start.x, self.end.x) + r,
            max(self.start.z, self.end.z) + r,
        )


@dataclass(frozen=True)
class EdgeHit:
    """One crossing between an edge of polygon A and an edge of polygon B.

    Attributes:
        edge_a: Index of the edge in polygon A (edge i runs from vertex i to i + 1).
        edge_b: Index of the edge in polygon B.
        segment_a: The crossing edge of polygon A.
        segment_b: The crossing edge of polygon B.
        u_a: Parametric position of the crossing along ``segment_a``.
        u_b: Parametric position of the crossing along ``segment_b``.
    """

    edge_a: int
    edge_b: int
    segment_a: Tuple[Vertex, Vertex]
    segment_b: Tuple[Vertex, Vertex]
    u_a: float
    u_b: float

    @property
    def point(self) -> Vertex:
        (x1, y1), (x2, y2) = self.segment_a
        return (x1 + self.u_a * (x2 - x1), y1 + self.u_a * (y2 - y1))


HitListener = Callable[[EdgeHit], None]


class Polygon:
    """A closed outline on the floor plane.

    Vertices are (x, z) pairs. Closing the path repeats the first vertex as the
    last one so edges can be walked without modular arithmetic.
    """

    def __init__(self) -> None:
        self.vertices: List[Vertex] = []
        self.closed = False

    @classmethod
    def from_vertices(cls, vertices: Sequence[Vertex]) -> Polygon:
        polygon = cls()
        for x, y in vertices:
            polygon.line_to(x, y)
        polygon.close_path()
        return polygon

    def move_to(self, x, y: Optional[float] = None) -> None:
        require(not self.vertices, "move_to on a started polygon", self.vertices)
        self.line_to(x, y)

    def line_to(self, x, y: Optional[float] = None) -> None:
        """Append a vertex given as a Point or as planar coordinates."""
        require(not self.closed, "line_to on a closed polygon")
        if isinstance(x, Point):
            require(y is None, "line_to(Point) takes no second coordinate", y)
            self.vertices.append((x.x, x.z))
        else:
            require(x is not None and y is not None, "line_to needs two coordinates", x, y)
            self.vertices.append((float(x), float(y)))

    def close_path(self) -> None:
        require(not self.closed, "polygon already closed", self.vertices)
        require(len(self.vertices) > 1, "polygon needs at least two vertices", self.vertices)
        self.vertices.append(self.vertices[0])
        self.closed = True

    def edges(self) -> List[Tuple[Vertex, Vertex]]:
        return list(zip(self.vertices, self.vertices[1:]))

    def bounding_rect(self) -> BoundingRect:
        return BoundingRect.from_vertices(self.vertices)

    def to_shapely(self) -> ShapelyPolygon:
        require(self.closed, "polygon is not closed", self.vertices)
        return ShapelyPolygon(self.vertices[:-1])

    @property
    def area(self) -> float:
        return self.to_shapely().area

    def intersects(self, other: Polygon, hit_listener: Optional[HitListener] = None) -> bool:
        """Exact edge-pair crossing test.

        Every edge of this polygon is tested against every edge of ``other``
        as bounded segments; parallel edges never cross. Without a listener
        the first crossing returns immediately. With a listener every crossing
        is reported to it and the result says whether there was any.
        """
        require(self is not other, "polygon tested against itself")
        found = False
        vertices_a, vertices_b = self.vertices, other.vertices
        x1, y1 = vertices_a[0]
        for i in range(1, len(vertices_a)):
            x2, y2 = vertices_a[i]
            x3, y3 = vertices_b[0]
            for j in range(1, len(vertices_b)):
                x4, y4 = vertices_b[j]
                d = (y4 - y3) * (x2 - x1) - (x4 - x3) * (y2 - y1)
                if d != 0:
                    u_a = ((x4 - x3) * (y1 - y3) - (y4 - y3) * (x1 - x3)) / d
                    u_b = ((x2 - x1) * (y1 - y3) - (y2 - y1) * (x1 - x3)) / d
                    if 0 <= u_a <= 1 and 0 <= u_b <= 1:
                        if hit_listener is None:
                            return True
                        hit_listener(
                            EdgeHit(
                                edge_a=i - 1,
                                edge_b=j - 1,
                                segment_a=((x1, y1), (x2, y2)),
                                segment_b=((x3, y3), (x4, y4)),
                                u_a=u_a,
                                u_b=u_b,
                            )
                        )
                        found = True
                x3, y3 = x4, y4
            x1, y1 = x2, y2
        return found

    def is_convex(self) -> bool:
        sign = 0
        edges = self.edges()
        for (p0, p1), (q0, q1) in zip(edges, edges[1:] + edges[:1]):
            cross = (p1[0] - p0[0]) * (q1[1] - q0[1]) - (p1[1] - p0[1]) * (q1[0] - q0[0])
            if cross == 0:
                continue
            if sign == 0:
                sign = 1 if cross > 0 else -1
            elif (cross > 0) != (sign > 0):
                return False
        return True

    def intersects_convex(self, other: Polygon) -> bool:
        """Separating-axis test; both polygons must be convex."""
        for polygon in (self, other):
            for (x1, y1), (x2, y2) in polygon.edges():
                axis = (y1 - y2, x2 - x1)
                if axis == (0, 0):
                    continue
                min_a, max_a = _project(self.vertices, axis)
                min_b, max_b = _project(other.vertices, axis)
                if max_a < min_b or max_b < min_a:
                    return False
        return True

    def __repr__(self) -> str:
        return f"Polygon({self.vertices!r})"


def _project(vertices: Sequence[Vertex], axis: Vertex) -> Tuple[float, float]:
    dots = [x * axis[0] + y * axis[1] for x, y in vertices]
    return min(dots), max(dots)
