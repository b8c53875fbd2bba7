"""Core entities of the editor: components, walls, levels and the world.

The World owns every entity in a single store keyed by id. Levels group the
components standing on one floor and keep the derived snap guides and the set
of components whose geometry must be rebuilt. Walls are only created and
changed through commands submitted to the world's edit log.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from ..config import DEFAULT_WALL_HEIGHT, DEFAULT_WALL_WIDTH, EPSILON, SNAP_DISTANCE
from ..errors import InvariantError, require
from ..geom.polygon import Capsule, ParallelLines
from ..geom.primitives import Line, Point, point_on_segment
from .footprint import WallFootprint, resolve_footprint
from .ids import EntityId, IdAllocator, parse_id
from .snaps import SnapCandidate, SnapGuides, compute_guides, find_snap_points

LOGGER = logging.getLogger(__name__)


class Component:
    """Something placed on a level, identified by a world-unique id."""

    prefix = "Component"

    def __init__(self, level: Level, component_id: str) -> None:
        prefix, _ = parse_id(component_id)
        require(prefix == self.prefix, "id has the wrong prefix", component_id, self.prefix)
        self.id = EntityId(component_id)
        self.level = level
        self.world = level.world
        self.destroyed = False
        self.world.add_component(self)
        level.add_component(self)

    def destroy(self) -> None:
        require(not self.destroyed, "component destroyed twice", self.id)
        self.destroyed = True
        self.world.remove_component(self)
        self.level.remove_component(self)

    def rebuild(self) -> None:
        """Recompute derived geometry; called by the level's flush."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id})"


class Wall(Component):
    """A straight wall between two points on a level's floor.

    ``angle`` is the whole-degree direction from start to end. It is given at
    creation or derived from the centerline, and after every change it must
    stay within one degree of the direction of the centerline.
    """

    prefix = "Wall"

    def __init__(
        self,
        level: Level,
        wall_id: str,
        start: Point,
        end: Point,
        angle: Optional[int] = None,
        width: float = DEFAULT_WALL_WIDTH,
        height: float = DEFAULT_WALL_HEIGHT,
    ) -> None:
        require(width > 0, "wall width must be positive", width)
        require(height > 0, "wall height must be positive", height)
        self.width = width
        self.height = height
        self.angle: Optional[int] = angle
        self.start: Optional[Point] = None
        self.end: Optional[Point] = None
        self.lines: Optional[ParallelLines] = None
        self._footprint: Optional[WallFootprint] = None
        super().__init__(level, wall_id)
        try:
            self.set(start, end, angle)
        except InvariantError:
            Component.destroy(self)
            raise

    def set(self, start: Point, end: Point, angle: Optional[int] = None) -> None:
        """Move the wall's centerline and request a rebuild of it and its neighbours.

        Args:
            start: New start point, on the level's floor.
            end: New end point, on the level's floor.
            angle: New angle; by default the current angle is kept and checked.

        Raises:
            InvariantError: If the points leave the floor, coincide, or the
                angle is more than one degree off the centerline.
        """
        require(
            start.y == self.level.y and end.y == self.level.y,
            "wall must lie on its level's floor",
            start,
            end,
            self.level.y,
        )
        require(start != end, "wall has zero length", self.id, start)
        if angle is None:
            angle = self.angle
        lines = ParallelLines(start, end, self.width, angle)
        old_start, old_end = self.start, self.end
        self.start = start
        self.end = end
        self.angle = lines.angle
        self.lines = lines
        self.level.update_walls(start, end, old_start, old_end)

    @property
    def line(self) -> Line:
        return self.lines.line

    @property
    def left_line(self) -> Line:
        return self.lines.left_line

    @property
    def right_line(self) -> Line:
        return self.lines.right_line

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    def capsule(self) -> Capsule:
        return Capsule(self.start, self.end, self.width / 2, self.angle)

    @property
    def footprint(self) -> WallFootprint:
        """The resolved footprint, rebuilt on access while the wall is dirty."""
        if self._footprint is None or self.level.is_dirty(self.id):
            self.rebuild()
        return self._footprint

    def rebuild(self) -> None:
        neighbours = [wall.lines for wall in self.level.walls.values() if wall is not self]
        self._footprint = resolve_footprint(self.lines, neighbours, owner=self.id)

    def split(self, at: Point, new_id: str) -> Wall:
        """Cut the wall at ``at``: this wall keeps start to ``at`` and a new wall runs on to the end."""
        require(point_on_segment(at, self.line, EPSILON), "split point is not on the wall", self.id, at)
        require(at != self.start and at != self.end, "split point is a wall end", self.id, at)
        end = self.end
        self.set(self.start, at)
        return Wall(self.level, new_id, at, end, self.angle, self.width, self.height)

    def destroy(self) -> None:
        super().destroy()
        self.level.update_walls(self.start, self.end)

    def state(self) -> Tuple:
        return (self.id, self.level.id, self.start, self.end, self.angle, self.width, self.height)


class Level:
    """One floor of the world.

    Keeps the components standing on it, the cached snap guides, and the set
    of components waiting for a rebuild. Geometry changes only mark components
    dirty; ``flush`` rebuilds them in one pass, when the caller decides.
    """

    prefix = "Level"

    def __init__(self, world: World, level_id: str, y: float) -> None:
        self.world = world
        self.id = EntityId(level_id)
        self.y = y
        self.components: Dict[str, Component] = {}
        self.walls: Dict[str, Wall] = {}
        self._needing_rebuild: Dict[str, Component] = {}
        self._flushing = False
        self._guides: Optional[SnapGuides] = None

    def add_component(self, component: Component) -> None:
        require(component.id not in self.components, "component added twice", component.id)
        self.components[component.id] = component
        if isinstance(component, Wall):
            self.walls[component.id] = component

    def get_component(self, component_id: str) -> Optional[Component]:
        return self.components.get(component_id)

    def remove_component(self, component: Component) -> None:
        self.components.pop(component.id, None)
        self.walls.pop(component.id, None)

    @property
    def guides(self) -> SnapGuides:
        """Snap directions and alignment intersections for the current walls."""
        if self._guides is None:
            self._guides = compute_guides(list(self.walls.values()))
        return self._guides

    @property
    def snap_directions(self):
        return self.guides.directions

    @property
    def alignment_intersections(self):
        return self.guides.alignments

    def snap_points(
        self,
        point: Point,
        start: Optional[Point] = None,
        max_distance: float = SNAP_DISTANCE,
    ) -> List[SnapCandidate]:
        """Ranked snap candidates around ``point`` on this level."""
        return find_snap_points(list(self.walls.values()), self.snap_directions, point, max_distance, start)

    def update_walls(self, *ends: Optional[Point]) -> None:
        """Note that wall geometry changed at ``ends``.

        Drops the cached guides and marks every wall touching one of the
        given points as needing a rebuild.
        """
        self._guides = None
        points = {end for end in ends if end is not None}
        if not points:
            return
        for wall in self.walls.values():
            if wall.start in points or wall.end in points:
                self.mark_dirty(wall.id)

    def mark_dirty(self, component_id: str) -> None:
        require(not self._flushing, "rebuild requested during flush", component_id)
        component = self.components.get(component_id)
        require(component is not None, "unknown component", component_id)
        self._needing_rebuild[component_id] = component

    def is_dirty(self, component_id: str) -> bool:
        return component_id in self._needing_rebuild

    @property
    def needs_flush(self) -> bool:
        return bool(self._needing_rebuild)

    def flush(self) -> int:
        """Rebuild every dirty component once.

        Returns:
            The number of components rebuilt.
        """
        require(not self._flushing, "flush is not reentrant", self.id)
        self._flushing = True
        try:
            pending = list(self._needing_rebuild.values())
            self._needing_rebuild = {}
            count = 0
            for component in pending:
                if not component.destroyed:
                    component.rebuild()
                    count += 1
        finally:
            self._flushing = False
        if count:
            LOGGER.debug("level %s rebuilt %d components", self.id, count)
        return count

    def walls_at(self, point: Point) -> List[Wall]:
        return [wall for wall in self.walls.values() if wall.start == point or wall.end == point]

    def __repr__(self) -> str:
        return f"Level({self.id}, y={self.y})"


class World:
    """Owner of all levels, components, the id allocator and the edit log."""

    def __init__(self, ids: Optional[IdAllocator] = None, floor_height: float = 0.0) -> None:
        from ..engine.edit_log import EditLog
        from ..engine.ops import register_wall_commands

        self.ids = ids if ids is not None else IdAllocator()
        self.components: Dict[str, Component] = {}
        self.levels: Dict[str, Level] = {}
        self.edit_log = EditLog()
        self.active_level = self.add_level(floor_height)
        self.commands = register_wall_commands(self)

    def add_level(self, y: float) -> Level:
        level = Level(self, self.ids.allocate(Level.prefix), y)
        self.levels[level.id] = level
        return level

    def level(self, level_id: str) -> Level:
        require(level_id in self.levels, "unknown level", level_id)
        return self.levels[level_id]

    def add_component(self, component: Component) -> None:
        require(component.id not in self.components, "duplicate id", component.id)
        self.ids.observe(component.id)
        self.components[component.id] = component

    def get_component(self, component_id: str) -> Optional[Component]:
        return self.components.get(component_id)

    def remove_component(self, component: Component) -> None:
        self.components.pop(component.id, None)

    def wall(self, wall_id: str) -> Wall:
        component = self.components.get(wall_id)
        if not isinstance(component, Wall):
            raise InvariantError("not a wall", wall_id)
        return component

    def walls(self) -> Iterator[Wall]:
        for level in self.levels.values():
            yield from level.walls.values()

    def flush(self) -> int:
        """Rebuild dirty components on every level; the display loop calls this once per tick."""
        return sum(level.flush() for level in self.levels.values())

    def state(self) -> Tuple:
        """Externally observable wall state, independent of creation order."""
        return tuple(sorted((wall.state() for wall in self.walls()), key=lambda s: parse_id(s[0])[1]))
