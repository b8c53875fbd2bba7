"""Tests for io/journal.py: saving and replaying edit history."""
import json

import pytest

from houseeditor.core.model import World
from houseeditor.engine.api import create_wall, move_wall, split_wall
from houseeditor.errors import SerializationError, UnknownCommand
from houseeditor.io.journal import dump_journal, load_journal, load_world, replay, save_journal

from conftest import P, build


@pytest.fixture
def edited(world):
    w1, w2 = build(world, ((0, 0), (4, 0)), ((4, 0), (4, 4)))
    with world.edit_log.transaction("split"):
        split_wall(world, w1.id, P(2, 0))
    with world.edit_log.transaction("drag"):
        move_wall(world, w2.id, P(4, 0), P(4, 5))
        move_wall(world, w2.id, P(4, 0), P(4, 6))
    world.flush()
    return world


class TestDump:
    def test_format(self, edited):
        data = dump_journal(edited)
        assert data["version"] == 1
        assert [t["name"] for t in data["transactions"]] == ["build", "split", "drag"]
        assert [c["type"] for c in data["transactions"][0]["commands"]] == ["CreateWall", "CreateWall"]
        assert data["transactions"][1]["commands"][0]["newId"] == "Wall_3"
        assert len(data["transactions"][2]["commands"]) == 1

    def test_undone_transactions_are_left_out(self, edited):
        edited.edit_log.undo()
        assert [t["name"] for t in dump_journal(edited)["transactions"]] == ["build", "split"]

    def test_open_transaction_is_left_out(self, edited):
        edited.edit_log.begin("preview")
        create_wall(edited, P(10, 0), P(12, 0))
        assert len(dump_journal(edited)["transactions"]) == 3


class TestReplay:
    def test_round_trip_through_file(self, edited, tmp_path):
        path = tmp_path / "plan.json"
        save_journal(edited, path)
        loaded = load_world(path)
        assert loaded.state() == edited.state()
        for wall in loaded.walls():
            original = edited.wall(wall.id)
            assert wall.footprint.polygon.vertices == original.footprint.polygon.vertices

    def test_replay_is_undoable(self, edited):
        world = replay(World(), dump_journal(edited))
        world.edit_log.undo()
        assert world.wall("Wall_2").end == P(4, 4)
        world.edit_log.undo()
        assert world.get_component("Wall_3") is None

    def test_new_ids_follow_replayed_ones(self, edited):
        world = replay(World(), dump_journal(edited))
        with world.edit_log.transaction("more"):
            wall = create_wall(world, P(10, 0), P(12, 0))
        assert wall.id == "Wall_4"

    def test_failed_transaction_rolls_back(self):
        data = {
            "version": 1,
            "transactions": [
                {"name": "bad", "commands": [{"type": "PaintWall", "id": "Wall_1"}]},
            ],
        }
        world = World()
        with pytest.raises(UnknownCommand):
            replay(world, data)
        assert not world.edit_log.in_transaction
        assert world.edit_log.log == []


class TestLoad:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_journal(tmp_path / "missing.json")

    def test_bad_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(json.JSONDecodeError):
            load_journal(path)

    def test_unsupported_version(self, tmp_path):
        path = tmp_path / "v2.json"
        path.write_text(json.dumps({"version": 2, "transactions": []}))
        with pytest.raises(SerializationError):
            load_journal(path)
