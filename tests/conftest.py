"""Shared test fixtures for the wall editor tests."""
import pytest

from houseeditor.core.model import World
from houseeditor.engine.api import create_wall
from houseeditor.geom.primitives import Point


def P(x, z):
    """Point on the ground floor."""
    return Point(float(x), 0.0, float(z))


def build(world, *segments, width=0.4):
    """Create one wall per (start, end) pair in a single transaction and flush."""
    with world.edit_log.transaction("build"):
        walls = [create_wall(world, P(*start), P(*end), width=width) for start, end in segments]
    world.flush()
    return walls


@pytest.fixture
def world():
    """An empty world with its ground level."""
    return World()


@pytest.fixture
def level(world):
    return world.active_level


@pytest.fixture
def corner(world):
    """Two walls meeting at a right angle at (4, 0)."""
    return build(world, ((0, 0), (4, 0)), ((4, 0), (4, 4)))
