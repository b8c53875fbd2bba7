"""Snap directions, alignment guides and snap points.

This module derives the canonical directions new walls are constrained to,
the crossings of alignment guides through existing wall ends, and the ranked
snap candidates the drawing tool offers around the pointer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import (
    ALIGNMENT_KEY_DIGITS,
    ALIGNMENT_MIN_DISTANCE,
    EPSILON,
    GRID_STEP,
    SNAP_ANGLES,
    SNAP_DISTANCE,
)
from ..geom.primitives import AngleDirection, Intersection, Line, Point, angle_difference, intersect_lines

LOGGER = logging.getLogger(__name__)

# Candidates closer than this to the best one are offered together.
_SAME_POINT_DISTANCE = 0.001


def snap_angles(wall_angles: Iterable[int]) -> List[int]:
    """Canonical placement angles: the axes plus every wall angle and its right angles.

    A wall angle one degree away from an existing snap angle is kept but
    logged, since it usually means a wall was drawn slightly off.
    """
    angles = list(SNAP_ANGLES)
    for angle in wall_angles:
        duplicate = False
        for existing in angles:
            if existing == angle:
                duplicate = True
                break
            if angle_difference(existing, angle) == 1:
                LOGGER.warning("angle %d is very close to %d", angle, existing)
        if not duplicate:
            angles.extend([angle, (angle + 90) % 360, (angle + 180) % 360, (angle + 270) % 360])
    return angles


def snap_directions(wall_angles: Iterable[int]) -> List[AngleDirection]:
    return [AngleDirection.of(angle) for angle in snap_angles(wall_angles)]


@dataclass(frozen=True)
class AlignmentIntersection:
    """Crossing of alignment guides drawn through the ends of two walls.

    Attributes:
        point: Where the guides cross.
        wall_a: Id of the first wall.
        end_a: Which end of ``wall_a`` the guide starts at ("start" or "end").
        direction_a: Direction of the guide through ``wall_a``.
        wall_b: Id of the second wall.
        end_b: Which end of ``wall_b`` the guide starts at.
        direction_b: Direction of the guide through ``wall_b``.
        distance: Combined distance from both wall ends to ``point``.
    """

    point: Point
    wall_a: str
    end_a: str
    direction_a: AngleDirection
    wall_b: str
    end_b: str
    direction_b: AngleDirection
    distance: float


def _wall_ends(wall) -> Tuple[Tuple[str, Point], Tuple[str, Point]]:
    return (("start", wall.start), ("end", wall.end))


def _adjacent(wall_a, wall_b) -> bool:
    return bool({wall_a.start, wall_a.end} & {wall_b.start, wall_b.end})


def alignment_key(point: Point) -> Tuple[float, float]:
    return (round(point.x, ALIGNMENT_KEY_DIGITS), round(point.z, ALIGNMENT_KEY_DIGITS))


def alignment_intersections(
    walls: Sequence,
    directions: Sequence[AngleDirection],
    min_distance: float = ALIGNMENT_MIN_DISTANCE,
) -> Dict[Tuple[float, float], AlignmentIntersection]:
    """Find where guides through the ends of non-adjacent walls cross.

    Guides are infinite lines through each wall end along each snap axis.
    Crossings closer than ``min_distance`` to any end of either wall are
    skipped. For each rounded position only the crossing with the lowest
    combined distance is kept.

    Args:
        walls: Walls of one level.
        directions: Snap directions of that level.
        min_distance: Minimum distance from the walls' own endpoints.

    Returns:
        Mapping of rounded (x, z) to the best AlignmentIntersection there.
    """
    axes: Dict[int, AngleDirection] = {}
    for direction in directions:
        axes.setdefault(direction.axis, direction)
    guide_directions = list(axes.values())

    found: Dict[Tuple[float, float], AlignmentIntersection] = {}
    for i, wall_a in enumerate(walls):
        for wall_b in walls[i + 1:]:
            if _adjacent(wall_a, wall_b):
                continue
            endpoints = (wall_a.start, wall_a.end, wall_b.start, wall_b.end)
            for end_a, point_a in _wall_ends(wall_a):
                for end_b, point_b in _wall_ends(wall_b):
                    for direction_a in guide_directions:
                        for direction_b in guide_directions:
                            if direction_a.axis == direction_b.axis:
                                continue
                            hit = intersect_lines(
                                point_a,
                                point_a + direction_a.vector(),
                                point_b,
                                point_b + direction_b.vector(),
                            )
                            if not isinstance(hit, Intersection):
                                continue
                            if min(hit.point.distance_to(p) for p in endpoints) <= min_distance:
                                continue
                            distance = hit.point.distance_to(point_a) + hit.point.distance_to(point_b)
                            key = alignment_key(hit.point)
                            existing = found.get(key)
                            if existing is None or distance < existing.distance:
                                found[key] = AlignmentIntersection(
                                    point=hit.point,
                                    wall_a=wall_a.id,
                                    end_a=end_a,
                                    direction_a=direction_a,
                                    wall_b=wall_b.id,
                                    end_b=end_b,
                                    direction_b=direction_b,
                                    distance=distance,
                                )
    return found


@dataclass(frozen=True)
class SnapGuides:
    """Cached placement guides of one level."""

    directions: List[AngleDirection]
    alignments: Dict[Tuple[float, float], AlignmentIntersection]

    @property
    def angles(self) -> List[int]:
        return [direction.angle for direction in self.directions]


def compute_guides(walls: Sequence) -> SnapGuides:
    directions = snap_directions(wall.angle for wall in walls)
    return SnapGuides(directions=directions, alignments=alignment_intersections(walls, directions))


@dataclass(frozen=True)
class SnapCandidate:
    """A point the pointer may snap to.

    Attributes:
        point: The snapped position.
        distance: Distance from the (continuation-projected) pointer.
        type: One of wall_start, wall_end, wall_align_start, wall_align_end,
            continuation or snap_to_grid.
        wall_id: The wall the snap refers to, if any.
        angle: The snap direction involved, if any.
    """

    point: Point
    distance: float
    type: str
    wall_id: Optional[str] = None
    angle: Optional[int] = None


@dataclass
class _Alignment:
    point: Point
    distance: float
    start: Point
    end: Point
    wall_id: str
    type: str
    direction: AngleDirection
    has_intersection: bool = False


def _ray_closest(origin: Point, direction: AngleDirection, point: Point) -> Point:
    """Closest point to ``point`` on the ray from ``origin`` along ``direction``."""
    ray = Line(origin, origin + direction.vector())
    u = max(0.0, ray.closest_point_parameter(point, clamp=False))
    return ray.at(u)


def _grid(value: float) -> float:
    return round(round(value / GRID_STEP) * GRID_STEP, 10)


def find_snap_points(
    walls: Sequence,
    directions: Sequence[AngleDirection],
    point: Point,
    max_distance: float = SNAP_DISTANCE,
    start: Optional[Point] = None,
) -> List[SnapCandidate]:
    """Rank the snap candidates around ``point``.

    When ``start`` is given the end of a new wall is being placed: the point
    is first moved onto the nearest snap direction from ``start`` and every
    candidate must stay on that continuation.

    Args:
        walls: Walls of the active level.
        directions: Snap directions of that level.
        point: The pointer position on the floor plane.
        max_distance: Search radius.
        start: Start point of the wall being drawn, if any.

    Returns:
        Candidates in the order found; wall ends first, then alignments,
        otherwise a single continuation or grid candidate.
    """
    candidates: List[SnapCandidate] = []
    continuation: Optional[Tuple[Line, AngleDirection, Point]] = None

    def on_continuation(candidate: Point) -> bool:
        line = continuation[0]
        return line.closest_point(candidate, clamp=False).distance_to(candidate) <= EPSILON

    def is_candidate(candidate: Point, distance: float) -> bool:
        return (
            distance < max_distance
            and (
                not candidates
                or distance < candidates[-1].distance
                or candidate == candidates[-1].point
            )
            and (continuation is None or on_continuation(candidate))
        )

    if start is not None and point != start:
        best_distance = None
        for direction in directions:
            projected = _ray_closest(start, direction, point)
            distance = projected.distance_to(point)
            if projected != start and (best_distance is None or distance < best_distance):
                continuation = (Line(start, start + direction.vector()), direction, projected)
                best_distance = distance
        if continuation is not None:
            point = continuation[2]

    alignments: List[_Alignment] = []
    for wall in walls:
        for suffix, end in _wall_ends(wall):
            distance = end.distance_to(point)
            if is_candidate(end, distance):
                candidates.append(SnapCandidate(end, distance, "wall_" + suffix, wall.id))
            if candidates:
                continue
            for direction in directions:
                projected = _ray_closest(end, direction, point)
                distance = projected.distance_to(point)
                if distance < max_distance and projected != end:
                    alignments.append(
                        _Alignment(
                            point=projected,
                            distance=distance,
                            start=end,
                            end=end + direction.vector(),
                            wall_id=wall.id,
                            type="wall_align_" + suffix,
                            direction=direction,
                        )
                    )

    if not candidates and alignments:
        for i, alignment_a in enumerate(alignments):
            for alignment_b in alignments[:i]:
                hit = intersect_lines(alignment_a.start, alignment_a.end, alignment_b.start, alignment_b.end)
                if not isinstance(hit, Intersection):
                    continue
                distance = hit.point.distance_to(point)
                if is_candidate(hit.point, distance):
                    for alignment in (alignment_a, alignment_b):
                        candidates.append(
                            SnapCandidate(
                                hit.point,
                                distance,
                                alignment.type,
                                alignment.wall_id,
                                alignment.direction.angle,
                            )
                        )
                        alignment.has_intersection = True
        for alignment in alignments:
            if not alignment.has_intersection and is_candidate(alignment.point, alignment.distance):
                candidates.append(
                    SnapCandidate(
                        alignment.point,
                        alignment.distance,
                        alignment.type,
                        alignment.wall_id,
                        alignment.direction.angle,
                    )
                )

    if not candidates:
        if continuation is not None:
            line, direction, projected = continuation
            length = _grid(projected.distance_to(line.start))
            snapped = line.start + direction.vector(length)
            candidates.append(
                SnapCandidate(snapped, snapped.distance_to(point), "continuation", angle=direction.angle)
            )
        else:
            snapped = Point(_grid(point.x), point.y, _grid(point.z))
            candidates.append(SnapCandidate(snapped, snapped.distance_to(point), "snap_to_grid"))
    return candidates


def best_snaps(candidates: Iterable[SnapCandidate]) -> List[SnapCandidate]:
    """Reduce candidates to the closest one plus any at practically the same point."""
    snaps: List[SnapCandidate] = []
    for candidate in candidates:
        if not snaps or candidate.distance < snaps[0].distance:
            snaps = [candidate]
        elif candidate.point.distance_to(snaps[0].point) <= _SAME_POINT_DISTANCE:
            snaps.append(candidate)
    return snaps
