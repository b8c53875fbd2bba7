"""Identity allocation for world entities.

Ids look like ``Wall_12``: a type prefix and a number from one sequence per
world. Numbers are never handed out twice, even after the entity is undone,
so a replayed edit log always refers to the same entities.
"""

from __future__ import annotations

import re
from typing import NewType, Tuple

from ..errors import require

EntityId = NewType("EntityId", str)

_ID_PATTERN = re.compile(r"^([A-Za-z][A-Za-z0-9]*)_(\d+)$")


def parse_id(entity_id: str) -> Tuple[str, int]:
    """Split an id into its prefix and sequence number.

    Raises:
        InvariantError: If the id is malformed.
    """
    match = _ID_PATTERN.match(entity_id) if isinstance(entity_id, str) else None
    require(match is not None, "malformed id", entity_id)
    return match.group(1), int(match.group(2))


class IdAllocator:
    """Hands out unique ids for one world."""

    def __init__(self, next_number: int = 0) -> None:
        self._next = next_number

    def allocate(self, prefix: str) -> EntityId:
        entity_id = EntityId(f"{prefix}_{self._next}")
        parse_id(entity_id)
        self._next += 1
        return entity_id

    def observe(self, entity_id: str) -> EntityId:
        """Record an id created elsewhere (e.g. during replay) so it is never reissued."""
        _, number = parse_id(entity_id)
        self._next = max(self._next, number + 1)
        return EntityId(entity_id)

    @property
    def next_number(self) -> int:
        return self._next
