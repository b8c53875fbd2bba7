"""Reading and writing edit journals."""

from .journal import dump_journal, load_journal, load_world, replay, save_journal

__all__ = ["dump_journal", "load_journal", "load_world", "replay", "save_journal"]
