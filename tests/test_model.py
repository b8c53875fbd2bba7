"""Tests for core/model.py and the wall handlers: walls, levels, ids."""
import pytest

from houseeditor.core.ids import IdAllocator, parse_id
from houseeditor.core.model import Wall, World
from houseeditor.engine.api import create_wall, destroy_wall, split_wall
from houseeditor.errors import InvariantError
from houseeditor.geom.primitives import angle_difference, line_to_angle

from conftest import P, build


class TestIds:
    def test_parse(self):
        assert parse_id("Wall_12") == ("Wall", 12)
        with pytest.raises(InvariantError):
            parse_id("Wall-12")

    def test_allocate_and_observe(self):
        ids = IdAllocator()
        assert ids.allocate("Wall") == "Wall_0"
        ids.observe("Wall_9")
        assert ids.allocate("Wall") == "Wall_10"
        ids.observe("Wall_3")
        assert ids.next_number == 11

    def test_world_ids(self, world):
        assert world.active_level.id == "Level_0"
        (wall,) = build(world, ((0, 0), (4, 0)))
        assert wall.id == "Wall_1"

    def test_wall_lookup(self, world):
        with pytest.raises(InvariantError):
            world.wall("Level_0")
        with pytest.raises(InvariantError):
            world.wall("Wall_99")


class TestWall:
    def test_angle_from_points(self, world):
        (wall,) = build(world, ((0, 0), (3, 3)))
        assert wall.angle == 45
        assert wall.length == pytest.approx(4.2426406)

    def test_set_keeps_angle_within_tolerance(self, world):
        (wall,) = build(world, ((0, 0), (4, 0)))
        wall.set(P(0, 0), P(4, 0.05))
        assert wall.angle == 0
        assert angle_difference(wall.angle, line_to_angle(wall.start, wall.end)) <= 1

    def test_set_rejects_drift(self, world):
        (wall,) = build(world, ((0, 0), (4, 0)))
        with pytest.raises(InvariantError):
            wall.set(P(0, 0), P(4, 1))
        assert wall.end == P(4, 0)

    def test_set_rejects_zero_length(self, world):
        (wall,) = build(world, ((0, 0), (4, 0)))
        with pytest.raises(InvariantError):
            wall.set(P(1, 1), P(1, 1))

    def test_must_stay_on_floor(self, world):
        (wall,) = build(world, ((0, 0), (4, 0)))
        with pytest.raises(InvariantError):
            wall.set(P(0, 0), P(4, 0).with_y(1.0))

    def test_failed_construction_leaves_nothing(self, world, level):
        with pytest.raises(InvariantError):
            Wall(level, "Wall_5", P(0, 0), P(4, 0), angle=90)
        assert world.get_component("Wall_5") is None
        assert level.walls == {}

    @pytest.mark.parametrize("angle", [360, -1])
    def test_angle_out_of_range(self, world, level, angle):
        with pytest.raises(InvariantError):
            Wall(level, "Wall_5", P(0, 0), P(4, 0), angle=angle)
        assert level.walls == {}

    def test_wrong_prefix(self, level):
        with pytest.raises(InvariantError):
            Wall(level, "Door_1", P(0, 0), P(4, 0))


class TestLevel:
    def test_changes_mark_touching_walls_dirty(self, world, level, corner):
        w1, w2 = corner
        (w3,) = build(world, ((10, 0), (12, 0)))
        assert not level.needs_flush
        w2.set(P(4, 0), P(4, 5))
        assert level.is_dirty(w1.id) and level.is_dirty(w2.id)
        assert not level.is_dirty(w3.id)
        assert level.flush() == 2
        assert not level.needs_flush

    def test_destroyed_walls_skipped_by_flush(self, world, level, corner):
        w1, w2 = corner
        w1.set(P(0, 1), P(4, 1))
        w1.destroy()
        assert level.flush() == 1

    def test_walls_at(self, level, corner):
        assert {wall.id for wall in level.walls_at(P(4, 0))} == {wall.id for wall in corner}

    def test_second_level(self, world):
        upper = world.add_level(3.0)
        assert upper.id == "Level_1"
        with world.edit_log.transaction("upper"):
            wall = create_wall(world, P(0, 0).with_y(3.0), P(4, 0).with_y(3.0), level=upper)
        assert wall.level is upper
        assert upper.walls == {wall.id: wall}
        assert world.active_level.walls == {}


class TestSplit:
    def test_split_at_midpoint(self, world):
        (wall,) = build(world, ((0, 0), (4, 0)))
        with world.edit_log.transaction("split"):
            new_wall = split_wall(world, wall.id, P(2, 0))
        assert (wall.start, wall.end) == (P(0, 0), P(2, 0))
        assert (new_wall.start, new_wall.end) == (P(2, 0), P(4, 0))
        assert new_wall.angle == wall.angle == 0
        assert (new_wall.width, new_wall.height) == (wall.width, wall.height)

    def test_undo_split_is_one_step(self, world):
        (wall,) = build(world, ((0, 0), (4, 0)))
        before = world.state()
        with world.edit_log.transaction("split"):
            new_wall = split_wall(world, wall.id, P(2, 0))
        world.edit_log.undo()
        assert world.get_component(new_wall.id) is None
        assert world.state() == before
        world.edit_log.redo()
        assert world.wall(new_wall.id).start == P(2, 0)

    def test_split_point_must_be_on_wall(self, world):
        (wall,) = build(world, ((0, 0), (4, 0)))
        with pytest.raises(InvariantError):
            with world.edit_log.transaction("split"):
                split_wall(world, wall.id, P(2, 1))
        with pytest.raises(InvariantError):
            with world.edit_log.transaction("split"):
                split_wall(world, wall.id, P(4, 0))
        assert (wall.start, wall.end) == (P(0, 0), P(4, 0))

    def test_split_keeps_mitres(self, world):
        w1, w2 = build(world, ((0, 0), (4, 0)), ((4, 0), (4, 4)))
        with world.edit_log.transaction("split"):
            new_wall = split_wall(world, w1.id, P(2, 0))
        world.flush()
        corner = new_wall.footprint.corners["left_end"]
        assert (corner.x, corner.z) == (pytest.approx(4.2), pytest.approx(-0.2))
        assert w1.footprint.polygon.vertices[2] == (2.0, -0.2)


class TestDestroy:
    def test_destroy_and_undo(self, world):
        w1, w2 = build(world, ((0, 0), (4, 0)), ((4, 0), (4, 4)))
        before = world.state()
        with world.edit_log.transaction("destroy"):
            destroy_wall(world, w2.id)
        world.flush()
        assert world.get_component(w2.id) is None
        assert w1.footprint.corners["left_end"] is None

        world.edit_log.undo()
        world.flush()
        assert world.state() == before
        assert w1.footprint.corners["left_end"] == P(4.2, -0.2)

    def test_destroy_unknown_wall(self, world):
        with pytest.raises(InvariantError):
            with world.edit_log.transaction("destroy"):
                destroy_wall(world, "Wall_42")


def test_state_is_independent_of_creation_order():
    a, b = World(), World()
    build(a, ((0, 0), (4, 0)))
    build(a, ((4, 0), (4, 4)))
    build(b, ((0, 0), (4, 0)), ((4, 0), (4, 4)))
    assert a.state() == b.state()
