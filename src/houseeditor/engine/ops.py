"""Command handlers for walls.

Each handler applies one command type to the world and knows how to revert
it. Handlers are created once per World by ``register_wall_commands`` and
registered with its edit log; changes are only ever made through them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.model import Wall
from ..errors import require
from ..geom.primitives import line_to_angle
from .commands import Command, CreateWall, DestroyWall, MoveWall, SplitWall
from .edit_log import CommandHandler, MergeableHandler


class CreateWallHandler(CommandHandler):
    """Creates a wall; undo destroys it again."""

    command_type = CreateWall

    def execute(self, command: CreateWall) -> Wall:
        level = self.world.level(command.level)
        return Wall(
            level,
            command.id,
            command.start,
            command.end,
            command.angle,
            command.width,
            command.height,
        )

    def undo(self, command: CreateWall) -> None:
        self.world.wall(command.id).destroy()


class SplitWallHandler(CommandHandler):
    """Cuts a wall in two at a point on its centerline.

    The original wall keeps its id and runs from its start to the split point;
    the new wall runs from the split point to the original end. Undo removes
    the new wall and stretches the original back over the whole length.
    """

    command_type = SplitWall

    def execute(self, command: SplitWall) -> Wall:
        return self.world.wall(command.id).split(command.at, command.new_id)

    def undo(self, command: SplitWall) -> None:
        wall = self.world.wall(command.id)
        new_wall = self.world.wall(command.new_id)
        end = new_wall.end
        new_wall.destroy()
        wall.set(wall.start, end)


class DestroyWallHandler(CommandHandler):
    """Removes a wall; the command keeps everything needed to recreate it."""

    command_type = DestroyWall

    def execute(self, command: DestroyWall) -> None:
        wall = self.world.wall(command.id)
        require(
            wall.state() == (command.id, command.level, command.start, command.end,
                             command.angle, command.width, command.height),
            "destroy command does not match the wall",
            command,
            wall.state(),
        )
        wall.destroy()

    def undo(self, command: DestroyWall) -> None:
        Wall(
            self.world.level(command.level),
            command.id,
            command.start,
            command.end,
            command.angle,
            command.width,
            command.height,
        )


class MoveWallHandler(MergeableHandler):
    """Moves both ends of a wall.

    Consecutive moves of the same wall in one transaction are merged, so a
    drag becomes a single undo step back to where the drag started.
    """

    command_type = MoveWall

    def execute(self, command: MoveWall) -> Wall:
        wall = self.world.wall(command.id)
        angle = command.angle
        if angle is None:
            angle = line_to_angle(command.start, command.end)
        wall.set(command.start, command.end, angle)
        return wall

    def undo(self, command: MoveWall) -> None:
        self.world.wall(command.id).set(command.from_start, command.from_end, command.from_angle)

    def merge(self, previous: Command, command: Command) -> Optional[Tuple[CommandHandler, Command]]:
        if not isinstance(previous, MoveWall) or not isinstance(command, MoveWall):
            return None
        if previous.id != command.id:
            return None
        merged = MoveWall(
            id=command.id,
            start=command.start,
            end=command.end,
            angle=command.angle,
            from_start=previous.from_start,
            from_end=previous.from_end,
            from_angle=previous.from_angle,
        )
        return self, merged


@dataclass(frozen=True)
class WallCommands:
    """The wall handlers registered with one world."""

    create_wall: CreateWallHandler
    split_wall: SplitWallHandler
    destroy_wall: DestroyWallHandler
    move_wall: MoveWallHandler


def register_wall_commands(world) -> WallCommands:
    """Create the wall handlers for ``world`` and register them with its edit log."""
    return WallCommands(
        create_wall=CreateWallHandler(world),
        split_wall=SplitWallHandler(world),
        destroy_wall=DestroyWallHandler(world),
        move_wall=MoveWallHandler(world),
    )
