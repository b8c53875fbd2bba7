"""Exceptions raised by the wall editor core.

Invariant violations are programmer errors: they abort the current operation
and propagate to the caller. Placement problems are not errors and are
reported as plain return values instead.
"""

from __future__ import annotations

from typing import Any


class InvariantError(AssertionError):
    """Raised when a core invariant or precondition is violated."""

    def __init__(self, message: str, *details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message}: " + ", ".join(repr(d) for d in self.details)


class TransactionError(InvariantError):
    """Raised when the edit log's transaction discipline is broken."""


class SerializationError(InvariantError):
    """Raised when a command does not survive a serialization round-trip."""


class UnknownCommand(InvariantError):
    """Raised for command types with no registered handler."""


def require(condition: bool, message: str, *details: Any, error: type = InvariantError) -> None:
    """Raise ``error`` unless ``condition`` holds.

    Args:
        condition: The invariant to check.
        message: Description of the failed check.
        *details: Offending values, kept on the exception for debugging.
        error: The InvariantError subclass to raise.

    Raises:
        InvariantError: If ``condition`` is false.
    """
    if not condition:
        raise error(message, *details)
