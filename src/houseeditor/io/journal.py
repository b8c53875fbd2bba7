"""Journal files: the committed edit history as JSON.

A journal lists committed transactions in order, each with the command
records it applied. Replaying a journal into a fresh world rebuilds the same
walls with the same ids.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from ..core.model import World
from ..errors import SerializationError, require
from ..engine.commands import decode_command, encode_command

LOGGER = logging.getLogger(__name__)

JOURNAL_VERSION = 1


def dump_journal(world: World) -> Dict[str, Any]:
    """Committed history of ``world`` as a JSON-compatible dict."""
    return {
        "version": JOURNAL_VERSION,
        "transactions": [
            {"name": name, "commands": [encode_command(command) for command in commands]}
            for name, commands in world.edit_log.transactions()
        ],
    }


def save_journal(world: World, path: Union[str, Path]) -> None:
    """Write the committed history of ``world`` to ``path``."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(dump_journal(world), f, indent=2, sort_keys=True)


def load_journal(path: Union[str, Path]) -> Dict[str, Any]:
    """Read and check a journal file.

    Args:
        path: Path to the journal.

    Returns:
        The journal data.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If it is not valid JSON.
        SerializationError: If it is not a journal of a supported version.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    require(isinstance(data, dict), "journal must be an object", path, error=SerializationError)
    require(
        data.get("version") == JOURNAL_VERSION,
        "unsupported journal version",
        data.get("version"),
        error=SerializationError,
    )
    require(isinstance(data.get("transactions"), list), "journal has no transactions", path,
            error=SerializationError)
    return data


def replay(world: World, data: Dict[str, Any]) -> World:
    """Apply every transaction of a journal to ``world`` through its edit log.

    Each transaction is committed on its own, so the replayed history can be
    undone step by step. A transaction that fails is rolled back and the
    error propagates.
    """
    edit_log = world.edit_log
    for transaction in data["transactions"]:
        require(
            isinstance(transaction, dict) and isinstance(transaction.get("commands"), list),
            "bad journal transaction",
            transaction,
            error=SerializationError,
        )
        with edit_log.transaction(transaction.get("name") or "replay"):
            for record in transaction["commands"]:
                command = decode_command(record)
                edit_log.handler_for(command).add(command)
    rebuilt = world.flush()
    LOGGER.debug("replayed %d transactions, rebuilt %d walls", len(data["transactions"]), rebuilt)
    return world


def load_world(path: Union[str, Path]) -> World:
    """Build a fresh world from the journal at ``path``."""
    return replay(World(), load_journal(path))
