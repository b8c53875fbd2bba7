"""Placement validity checks.

A rejected placement is not an error: the checks here return a
PlacementResult the drawing tool uses to withhold a commit, and never raise
or log for an invalid placement.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from ..config import ANGLE_TOLERANCE, DEFAULT_WALL_WIDTH, MAX_EXTENT, MIN_WALL_LENGTH
from ..core.footprint import speculative_footprint
from ..core.snaps import SnapCandidate
from ..core.topology import joined_walls
from ..geom.primitives import Point, angle_difference, is_angle, line_to_angle
from .collision import find_collisions

TOO_SHORT = "too_short"
OUT_OF_BOUNDS = "out_of_bounds"
ANGLE_MISMATCH = "angle_mismatch"
COLLISION = "collision"
NO_SNAP = "no_snap"


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of a placement check.

    Attributes:
        ok: Whether the placement may be committed.
        reason: Why it may not, one of the module's reason constants.
        collisions: Ids of the walls the placement would overlap.
    """

    ok: bool
    reason: Optional[str] = None
    collisions: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.ok


VALID = PlacementResult(True)


def _folds_back(shared: Point, start: Point, end: Point, wall) -> bool:
    """Whether a collinear joined wall runs back over the placement from ``shared``."""
    if angle_difference(line_to_angle(start, end) % 180, wall.angle % 180) > ANGLE_TOLERANCE:
        return False
    far = end if shared == start else start
    other_far = wall.end if shared == wall.start else wall.start
    ax, az = far.x - shared.x, far.z - shared.z
    bx, bz = other_far.x - shared.x, other_far.z - shared.z
    return ax * bx + az * bz > 0


def validate_placement(
    level,
    start: Point,
    end: Point,
    width: float = DEFAULT_WALL_WIDTH,
    angle: Optional[int] = None,
    ignore: Iterable[str] = (),
) -> PlacementResult:
    """Check whether a wall from ``start`` to ``end`` may be placed on ``level``.

    Walls joined to the placement at either end are not counted as collisions
    unless they run back over it along the same line.

    Args:
        level: The level the wall would stand on.
        start: Start of the centerline.
        end: End of the centerline.
        width: Wall width.
        angle: Requested angle; derived from the points when None.
        ignore: Wall ids to leave out, e.g. the wall being moved.

    Returns:
        VALID, or a failed PlacementResult with its reason.
    """
    if start.distance_to(end) < MIN_WALL_LENGTH:
        return PlacementResult(False, TOO_SHORT)
    if any(abs(c) > MAX_EXTENT for c in (start.x, start.z, end.x, end.z)):
        return PlacementResult(False, OUT_OF_BOUNDS)
    if angle is not None and (
        not is_angle(angle) or angle_difference(angle, line_to_angle(start, end)) > ANGLE_TOLERANCE
    ):
        return PlacementResult(False, ANGLE_MISMATCH)

    ignored = set(ignore)
    neighbours = [wall.lines for wall in level.walls.values() if wall.id not in ignored]
    footprint = speculative_footprint(start, end, width, angle, neighbours)
    joined = joined_walls(level, start, end) - ignored

    collisions = set(find_collisions(level, footprint, ignore=ignored | joined))
    for wall_id in joined:
        wall = level.walls[wall_id]
        shared = start if start in (wall.start, wall.end) else end
        if _folds_back(shared, start, end, wall):
            collisions.add(wall_id)
    if collisions:
        return PlacementResult(False, COLLISION, tuple(sorted(collisions)))
    return VALID


def validate_snap(candidates: Sequence[SnapCandidate]) -> PlacementResult:
    """A placement needs at least one snap candidate."""
    if not candidates:
        return PlacementResult(False, NO_SNAP)
    return VALID
