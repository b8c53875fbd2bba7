"""High-level editing API.

Functions here build commands from the current world state and submit them
through the registered handlers. They must be called inside an open
transaction, except ``draw_wall`` which opens and closes its own.
"""

from __future__ import annotations

from typing import Optional

from ..config import DEFAULT_WALL_HEIGHT, DEFAULT_WALL_WIDTH
from ..core.model import Level, Wall, World
from ..geom.primitives import Point
from .commands import CreateWall, DestroyWall, MoveWall, SplitWall
from .validators import PlacementResult, validate_placement


def create_wall(
    world: World,
    start: Point,
    end: Point,
    width: float = DEFAULT_WALL_WIDTH,
    height: float = DEFAULT_WALL_HEIGHT,
    angle: Optional[int] = None,
    level: Optional[Level] = None,
) -> Wall:
    """Create a wall with a freshly allocated id.

    Args:
        world: The world to edit.
        start: Start of the centerline.
        end: End of the centerline.
        width: Wall width.
        height: Wall height.
        angle: Wall angle; derived from the points when None.
        level: Level to place the wall on; the active level by default.

    Returns:
        The new wall.
    """
    level = level if level is not None else world.active_level
    command = CreateWall(
        id=world.ids.allocate(Wall.prefix),
        level=level.id,
        start=start,
        end=end,
        angle=angle,
        width=width,
        height=height,
    )
    return world.commands.create_wall.add(command)


def split_wall(world: World, wall_id: str, at: Point) -> Wall:
    """Split a wall at ``at``; returns the new wall running from ``at`` to the old end."""
    command = SplitWall(id=wall_id, new_id=world.ids.allocate(Wall.prefix), at=at)
    return world.commands.split_wall.add(command)


def destroy_wall(world: World, wall_id: str) -> None:
    wall = world.wall(wall_id)
    command = DestroyWall(
        id=wall.id,
        level=wall.level.id,
        start=wall.start,
        end=wall.end,
        angle=wall.angle,
        width=wall.width,
        height=wall.height,
    )
    world.commands.destroy_wall.add(command)


def move_wall(world: World, wall_id: str, start: Point, end: Point, angle: Optional[int] = None) -> Wall:
    """Move both ends of a wall; repeated moves in one transaction merge."""
    wall = world.wall(wall_id)
    command = MoveWall(
        id=wall.id,
        start=start,
        end=end,
        angle=angle,
        from_start=wall.start,
        from_end=wall.end,
        from_angle=wall.angle,
    )
    return world.commands.move_wall.add(command)


def draw_wall(
    world: World,
    start: Point,
    end: Point,
    width: float = DEFAULT_WALL_WIDTH,
    height: float = DEFAULT_WALL_HEIGHT,
    angle: Optional[int] = None,
) -> PlacementResult:
    """Validate a placement on the active level and commit it as one transaction.

    Returns:
        The placement result; the wall is only created when it is valid.
    """
    result = validate_placement(world.active_level, start, end, width, angle)
    if result:
        with world.edit_log.transaction("draw wall"):
            create_wall(world, start, end, width, height, angle)
        world.flush()
    return result
