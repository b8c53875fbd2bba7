"""Tests for engine/validators.py and draw_wall: placement validity."""
import pytest

from houseeditor.engine.api import draw_wall, split_wall
from houseeditor.engine.validators import (
    ANGLE_MISMATCH,
    COLLISION,
    OUT_OF_BOUNDS,
    TOO_SHORT,
    validate_placement,
)

from conftest import P, build


@pytest.fixture
def wall(world):
    (wall,) = build(world, ((0, 0), (4, 0)))
    return wall


class TestValidatePlacement:
    def test_free_placement(self, level):
        assert validate_placement(level, P(0, 0), P(4, 0)).ok

    def test_too_short(self, level):
        result = validate_placement(level, P(0, 0), P(0.3, 0))
        assert not result
        assert result.reason == TOO_SHORT

    def test_out_of_bounds(self, level):
        assert validate_placement(level, P(29, 0), P(31, 0)).reason == OUT_OF_BOUNDS

    def test_angle_mismatch(self, level):
        assert validate_placement(level, P(0, 0), P(4, 0), angle=90).reason == ANGLE_MISMATCH
        assert validate_placement(level, P(0, 0), P(4, 0), angle=359).ok

    @pytest.mark.parametrize("angle", [360, -1])
    def test_angle_out_of_range(self, level, angle):
        assert validate_placement(level, P(0, 0), P(4, 0), angle=angle).reason == ANGLE_MISMATCH

    def test_crossing_wall(self, level, wall):
        result = validate_placement(level, P(2, -2), P(2, 2))
        assert result.reason == COLLISION
        assert result.collisions == (wall.id,)

    def test_sees_wall_restored_by_undo(self, world, level, wall):
        with world.edit_log.transaction("split"):
            split_wall(world, wall.id, P(2, 0))
        world.flush()
        world.edit_log.undo()
        assert wall.end == P(4, 0)
        result = validate_placement(level, P(3, -2), P(3, 2))
        assert result.reason == COLLISION
        assert result.collisions == (wall.id,)

    def test_corner_is_allowed(self, level, wall):
        assert validate_placement(level, P(4, 0), P(4, 4)).ok

    def test_continuation_is_allowed(self, level, wall):
        assert validate_placement(level, P(4, 0), P(8, 0)).ok

    def test_folding_back_is_a_collision(self, level, wall):
        result = validate_placement(level, P(4, 0), P(2, 0))
        assert result.reason == COLLISION
        assert result.collisions == (wall.id,)

    def test_duplicate_is_a_collision(self, level, wall):
        assert validate_placement(level, P(0, 0), P(4, 0)).reason == COLLISION

    def test_ignore_the_wall_being_moved(self, level, wall):
        assert validate_placement(level, P(0, 0.1), P(4, 0.1), ignore=[wall.id]).ok
        assert not validate_placement(level, P(0, 0.1), P(4, 0.1))

    def test_near_parallel_wall(self, level, wall):
        assert validate_placement(level, P(0, 0.5), P(4, 0.5)).ok
        assert validate_placement(level, P(0, 0.3), P(4, 0.3)).reason == COLLISION


class TestDrawWall:
    def test_valid_draw_commits(self, world):
        result = draw_wall(world, P(0, 0), P(4, 0))
        assert result.ok
        assert len(list(world.walls())) == 1
        assert world.edit_log.can_undo()
        assert not world.active_level.needs_flush

    def test_invalid_draw_leaves_world_alone(self, world, wall):
        result = draw_wall(world, P(2, -2), P(2, 2))
        assert not result
        assert list(world.walls()) == [wall]
        assert [name for name, _ in world.edit_log.transactions()] == ["build"]

    def test_out_of_range_angle_is_not_drawn(self, world):
        result = draw_wall(world, P(0, 0), P(4, 0), angle=360)
        assert result.reason == ANGLE_MISMATCH
        assert list(world.walls()) == []
