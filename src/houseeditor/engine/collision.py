"""Collision tests between wall footprints.

Footprints are first compared by bounding rectangle, then by the exact
edge-crossing test of their polygons. Capsules give a coarse proximity check
that does not need resolved footprints. Level-wide queries index the walls'
bounding rectangles in a shapely STRtree.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from shapely.strtree import STRtree

from ..core.footprint import WallFootprint
from ..core.topology import joined_walls
from ..geom.polygon import HitListener


def footprints_intersect(
    a: WallFootprint,
    b: WallFootprint,
    hit_listener: Optional[HitListener] = None,
) -> bool:
    """Whether two footprints overlap.

    Args:
        a: First footprint.
        b: Second footprint.
        hit_listener: Called with every crossing edge pair; when given, all
            crossings are collected instead of stopping at the first one.

    Returns:
        True if any edge of ``a`` crosses or touches an edge of ``b``.
    """
    if not a.bounding_rect.intersects(b.bounding_rect):
        return False
    return a.polygon.intersects(b.polygon, hit_listener)


def footprints_intersect_convex(a: WallFootprint, b: WallFootprint) -> bool:
    """Separating-axis variant, for footprints known to be convex."""
    if not a.bounding_rect.intersects(b.bounding_rect):
        return False
    return a.polygon.intersects_convex(b.polygon)


def capsules_intersect(wall_a, wall_b) -> bool:
    """Coarse check: do the capsules around the two centerlines overlap?"""
    capsule_a = wall_a.capsule()
    capsule_b = wall_b.capsule()
    if not capsule_a.bounding_rect().intersects(capsule_b.bounding_rect()):
        return False
    return capsule_a.intersects(capsule_b)


def find_collisions(level, footprint: WallFootprint, ignore: Iterable[str] = ()) -> List[str]:
    """Ids of the walls on ``level`` whose footprints overlap ``footprint``.

    Args:
        level: The level to search.
        footprint: Footprint to test, typically a speculative one.
        ignore: Wall ids to leave out, e.g. walls joined to the candidate.

    Returns:
        Sorted list of colliding wall ids.
    """
    ignored = set(ignore)
    walls = [wall for wall in level.walls.values() if wall.id not in ignored]
    if not walls:
        return []
    tree = STRtree([wall.footprint.bounding_rect.to_shapely() for wall in walls])
    hits = []
    for index in tree.query(footprint.bounding_rect.to_shapely()):
        wall = walls[int(index)]
        if footprints_intersect(footprint, wall.footprint):
            hits.append(wall.id)
    return sorted(hits)


def colliding_pairs(level) -> List[Tuple[str, str]]:
    """Pairs of walls on ``level`` that overlap without being joined at an end."""
    walls = sorted(level.walls.values(), key=lambda wall: wall.id)
    pairs = []
    for i, wall in enumerate(walls):
        joined = joined_walls(level, wall.start, wall.end)
        for other in walls[i + 1:]:
            if other.id in joined:
                continue
            if footprints_intersect(wall.footprint, other.footprint):
                pairs.append((wall.id, other.id))
    return pairs
