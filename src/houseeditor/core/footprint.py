"""Wall footprint resolution.

A wall's footprint is the outline of its cross-section on the floor plane.
Its two face lines are cut where they meet the faces of other walls sharing
an endpoint, giving mitred corners. Corners no neighbour constrains keep the
plain offset endpoint.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from ..geom.polygon import BoundingRect, ParallelLines, Polygon
from ..geom.primitives import Intersection, Line, Point, intersect_lines

CORNER_NAMES = ("left_start", "left_end", "right_start", "right_end")


@dataclass(frozen=True)
class Corner:
    """A resolved corner: its position along the face line and, if mitred, the point."""

    u: float
    point: Optional[Point] = None


Comparator = Callable[[float, float], bool]


def _greater(current: float, candidate: float) -> bool:
    return current < candidate


def _lesser(current: float, candidate: float) -> bool:
    return current > candidate


def _parallel(cond: bool, corner: Optional[Corner], u: float, cmp: Comparator) -> Optional[Corner]:
    if cond and (corner is None or cmp(corner.u, u)):
        return Corner(u)
    return corner


def _intersect(
    cond: bool,
    corner: Optional[Corner],
    line_a: Line,
    line_b: Line,
    cmp: Comparator,
) -> Optional[Corner]:
    if not cond:
        return corner
    hit = intersect_lines(line_a.start, line_a.end, line_b.start, line_b.end)
    if isinstance(hit, Intersection) and (corner is None or cmp(corner.u, hit.u_a)):
        return Corner(hit.u_a, hit.point)
    return corner


@dataclass(frozen=True)
class WallFootprint:
    """The resolved outline of a wall.

    Attributes:
        owner: Id of the owning wall, or None for a speculative preview wall.
        left_line: Face line offset to the left of the centerline.
        right_line: Face line offset to the right of the centerline.
        corners: Mitred corner points by name; None where unconstrained.
        polygon: Closed hexagon start, left start, left end, end, right end, right start.
        bounding_rect: Axis-aligned bounds of ``polygon``.
    """

    owner: Optional[str]
    left_line: Line
    right_line: Line
    corners: Dict[str, Optional[Point]]
    polygon: Polygon
    bounding_rect: BoundingRect

    @property
    def area(self) -> float:
        return self.polygon.area

    def to_shapely(self):
        return self.polygon.to_shapely()


def resolve_footprint(
    lines: ParallelLines,
    neighbours: Iterable[ParallelLines],
    owner: Optional[str] = None,
) -> WallFootprint:
    """Compute the mitred footprint of a wall.

    Args:
        lines: Centerline and face lines of the wall being resolved.
        neighbours: Face lines of every other wall on the level.
        owner: Id of the wall, if any.

    Returns:
        The WallFootprint, its polygon closed.
    """
    left_start: Optional[Corner] = None
    right_start: Optional[Corner] = None
    left_end: Optional[Corner] = None
    right_end: Optional[Corner] = None
    for other in neighbours:
        if other is lines:
            continue
        start_start = other.start == lines.start
        start_end = not start_start and other.end == lines.start
        end_start = other.start == lines.end
        end_end = not end_start and other.end == lines.end
        if not (start_start or start_end or end_start or end_end):
            continue
        if other.angle % 180 == lines.angle % 180:
            # continues in the same or the opposite direction
            left_start = _parallel(start_start or start_end, left_start, 0.0, _greater)
            right_start = _parallel(start_start or start_end, right_start, 0.0, _greater)
            left_end = _parallel(end_start or end_end, left_end, 1.0, _lesser)
            right_end = _parallel(end_start or end_end, right_end, 1.0, _lesser)
        else:
            left_start = _intersect(start_start, left_start, lines.left_line, other.right_line, _greater)
            left_start = _intersect(start_end, left_start, lines.left_line, other.left_line, _greater)
            right_start = _intersect(start_start, right_start, lines.right_line, other.left_line, _greater)
            right_start = _intersect(start_end, right_start, lines.right_line, other.right_line, _greater)
            left_end = _intersect(end_start, left_end, lines.left_line, other.left_line, _lesser)
            left_end = _intersect(end_end, left_end, lines.left_line, other.right_line, _lesser)
            right_end = _intersect(end_start, right_end, lines.right_line, other.right_line, _lesser)
            right_end = _intersect(end_end, right_end, lines.right_line, other.left_line, _lesser)

    def corner_point(corner: Optional[Corner], default: Point) -> Point:
        if corner is not None and corner.point is not None:
            return corner.point
        return default

    polygon = Polygon()
    polygon.move_to(lines.start)
    polygon.line_to(corner_point(left_start, lines.left_line.start))
    polygon.line_to(corner_point(left_end, lines.left_line.end))
    polygon.line_to(lines.end)
    polygon.line_to(corner_point(right_end, lines.right_line.end))
    polygon.line_to(corner_point(right_start, lines.right_line.start))
    polygon.close_path()

    corners = {
        name: corner.point if corner is not None else None
        for name, corner in zip(CORNER_NAMES, (left_start, left_end, right_start, right_end))
    }
    return WallFootprint(
        owner=owner,
        left_line=lines.left_line,
        right_line=lines.right_line,
        corners=corners,
        polygon=polygon,
        bounding_rect=polygon.bounding_rect(),
    )


def speculative_footprint(
    start: Point,
    end: Point,
    width: float,
    angle: Optional[int] = None,
    neighbours: Iterable[ParallelLines] = (),
) -> WallFootprint:
    """Footprint of a wall that does not exist yet, e.g. a placement preview."""
    return resolve_footprint(ParallelLines(start, end, width, angle), neighbours)
