"""Transactional edit log with undo and redo.

Every change to the world is a Command applied by a registered
CommandHandler inside a transaction. The log keeps the applied actions and
the markers delimiting transactions; a cursor separates committed history
from the redoable tail. Starting a new transaction after an undo discards
that tail, so history is linear.
"""

from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Tuple, Type, Union

from ..errors import InvariantError, TransactionError, UnknownCommand, require
from .commands import Command, check_round_trip, command_name

LOGGER = logging.getLogger(__name__)


class CommandHandler(ABC):
    """Applies and reverts one type of command.

    Subclasses set ``command_type`` and implement ``execute`` and ``undo``.
    A handler registers itself with the world's edit log on construction.
    """

    command_type: ClassVar[Type[Command]]

    def __init__(self, world) -> None:
        self.world = world
        world.edit_log.register(self)

    @property
    def name(self) -> str:
        return self.command_type.__name__

    def add(self, command: Command) -> Any:
        """Submit ``command`` through the edit log; returns the execute result."""
        return self.world.edit_log.add(self, command)

    @abstractmethod
    def execute(self, command: Command) -> Any:
        ...

    @abstractmethod
    def undo(self, command: Command) -> None:
        ...


class MergeableHandler(CommandHandler):
    """A handler whose commands can be coalesced with the previous one."""

    @abstractmethod
    def merge(self, previous: Command, command: Command) -> Optional[Tuple[CommandHandler, Command]]:
        """Merge ``command`` into ``previous``.

        Returns:
            The handler and command replacing ``previous``, or None if the
            two cannot be merged.
        """


class Action:
    """A command bound to the handler that applies it."""

    __slots__ = ("handler", "command", "json")

    def __init__(self, handler: CommandHandler, command: Command) -> None:
        require(isinstance(handler, CommandHandler), "not a CommandHandler", handler)
        require(
            isinstance(command, handler.command_type),
            "command does not match its handler",
            command,
            handler.name,
        )
        self.handler = handler
        self.command = command
        self.json = check_round_trip(command)

    def execute(self) -> Any:
        return self.handler.execute(self.command)

    def undo(self) -> None:
        self.handler.undo(self.command)

    def __repr__(self) -> str:
        return f"Action({self.json})"


class TransactionMarker:
    """Start of a transaction in the log."""

    __slots__ = ("name", "id")

    def __init__(self, name: str, marker_id: int) -> None:
        self.name = name
        self.id = marker_id

    def __repr__(self) -> str:
        return f"TransactionMarker({self.name!r}, {self.id})"


Entry = Union[Action, TransactionMarker]


class EditLog:
    """Ordered actions and transaction markers with an undo cursor.

    ``length`` counts the entries that are currently applied; entries past it
    are the redoable tail.
    """

    def __init__(self) -> None:
        self.log: List[Entry] = []
        self.length = 0
        self._handlers: Dict[str, CommandHandler] = {}
        self._marker_ids = itertools.count(1)
        self._open: Optional[TransactionMarker] = None
        self._rolled_back: Optional[int] = None

    # ------------------------------------------------------------------ #
    # Handlers
    # ------------------------------------------------------------------ #
    def register(self, handler: CommandHandler) -> None:
        require(isinstance(handler, CommandHandler), "not a CommandHandler", handler)
        require(handler.name not in self._handlers, "handler registered twice", handler.name)
        self._handlers[handler.name] = handler

    def handler(self, name: str) -> CommandHandler:
        if name not in self._handlers:
            raise UnknownCommand("no handler registered", name)
        return self._handlers[name]

    def handler_for(self, command: Command) -> CommandHandler:
        return self.handler(command_name(command))

    # ------------------------------------------------------------------ #
    # Transactions
    # ------------------------------------------------------------------ #
    @property
    def in_transaction(self) -> bool:
        return self._open is not None

    def begin(self, name: str) -> int:
        """Open a transaction, discarding any redoable tail.

        Returns:
            The transaction id to pass to ``commit`` or ``rollback``.
        """
        require(isinstance(name, str) and bool(name), "transaction needs a name", name, error=TransactionError)
        require(not self.in_transaction, "begin in open transaction", name, self._open, error=TransactionError)
        del self.log[self.length:]
        marker = TransactionMarker(name, next(self._marker_ids))
        self.log.append(marker)
        self.length += 1
        self._open = marker
        self._rolled_back = None
        LOGGER.debug("begin %s (%d)", name, marker.id)
        return marker.id

    def add(self, handler: CommandHandler, command: Command) -> Any:
        """Apply ``command`` with ``handler`` inside the open transaction.

        If the previous entry's handler can merge, the command is first offered
        to it; a successful merge runs the merged command and replaces that
        entry instead of appending.

        Returns:
            Whatever the handler's ``execute`` returns.
        """
        require(isinstance(handler, CommandHandler), "not a CommandHandler", handler)
        if self._handlers.get(handler.name) is not handler:
            raise UnknownCommand("handler is not registered", handler.name)
        require(self.in_transaction, "add outside a transaction", handler.name, command, error=TransactionError)
        previous = self.log[self.length - 1]
        if isinstance(previous, Action) and isinstance(previous.handler, MergeableHandler):
            merged = previous.handler.merge(previous.command, command)
            if merged is not None:
                merged_handler, merged_command = merged
                if self._handlers.get(merged_handler.name) is not merged_handler:
                    raise UnknownCommand("merged handler is not registered", merged_handler.name)
                action = Action(merged_handler, merged_command)
                result = action.execute()
                self.log[self.length - 1] = action
                LOGGER.debug("merged %s", action.json)
                return result
        action = Action(handler, command)
        # a command that fails to apply is not recorded
        result = action.execute()
        self.log.append(action)
        self.length += 1
        return result

    def commit(self, transaction_id: int) -> None:
        require(self.in_transaction, "commit outside a transaction", transaction_id, error=TransactionError)
        require(
            self.length == len(self.log),
            "internal error: cursor is not at the end of the log",
            self.length,
            len(self.log),
            error=TransactionError,
        )
        require(
            self._open.id == transaction_id,
            "commit of the wrong transaction",
            transaction_id,
            self._open,
            error=TransactionError,
        )
        LOGGER.debug("commit %s (%d)", self._open.name, transaction_id)
        self._open = None

    def rollback(self, transaction_id: int) -> None:
        """Undo and discard the open transaction.

        Rolling back a transaction that was just rolled back does nothing.
        """
        if not self.in_transaction:
            require(
                transaction_id == self._rolled_back,
                "rollback outside a transaction",
                transaction_id,
                error=TransactionError,
            )
            return
        require(
            self._open.id == transaction_id,
            "rollback of the wrong transaction",
            transaction_id,
            self._open,
            error=TransactionError,
        )
        while True:
            self.length -= 1
            entry = self.log[self.length]
            if isinstance(entry, TransactionMarker):
                break
            entry.undo()
        del self.log[self.length:]
        LOGGER.debug("rollback %s (%d)", self._open.name, transaction_id)
        self._open = None
        self._rolled_back = transaction_id

    @contextmanager
    def transaction(self, name: str) -> Iterator[int]:
        """Run a block in a transaction; commit on success, roll back on error."""
        transaction_id = self.begin(name)
        try:
            yield transaction_id
        except BaseException:
            if self.in_transaction:
                self.rollback(transaction_id)
            raise
        self.commit(transaction_id)

    # ------------------------------------------------------------------ #
    # Undo / redo
    # ------------------------------------------------------------------ #
    def can_undo(self) -> bool:
        return not self.in_transaction and self.length > 0

    def undo(self) -> None:
        """Revert the last committed transaction, newest action first."""
        require(not self.in_transaction, "undo in open transaction", error=TransactionError)
        require(self.length > 0, "nothing to undo", error=TransactionError)
        while True:
            self.length -= 1
            entry = self.log[self.length]
            if isinstance(entry, TransactionMarker):
                LOGGER.debug("undo %s (%d)", entry.name, entry.id)
                break
            entry.undo()

    def can_redo(self) -> bool:
        return not self.in_transaction and self.length < len(self.log)

    def redo(self) -> None:
        """Re-apply the next undone transaction."""
        require(not self.in_transaction, "redo in open transaction", error=TransactionError)
        require(self.length < len(self.log), "nothing to redo", error=TransactionError)
        marker = self.log[self.length]
        if not isinstance(marker, TransactionMarker):
            raise InvariantError("redo does not start at a transaction marker", marker)
        LOGGER.debug("redo %s (%d)", marker.name, marker.id)
        self.length += 1
        while self.length < len(self.log) and not isinstance(self.log[self.length], TransactionMarker):
            self.log[self.length].execute()
            self.length += 1

    # ------------------------------------------------------------------ #
    # History
    # ------------------------------------------------------------------ #
    def transactions(self) -> List[Tuple[str, List[Command]]]:
        """Committed history as (transaction name, commands) pairs, oldest first."""
        end = self.length
        if self.in_transaction:
            end = self.log.index(self._open)
        history: List[Tuple[str, List[Command]]] = []
        for entry in self.log[:end]:
            if isinstance(entry, TransactionMarker):
                history.append((entry.name, []))
            else:
                history[-1][1].append(entry.command)
        return history
