"""Commands: the serializable records stored in the edit log.

Commands are plain data. Each type is a frozen dataclass with typed fields,
encoded to and decoded from JSON-like records through ``encode_command`` and
``decode_command``. Coordinates and sizes are stored as fixed-point integers
so that a stored record reloads to exactly the same value.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Type

from ..config import NUMBER_SCALE
from ..errors import SerializationError, UnknownCommand, require
from ..geom.primitives import Point, is_angle


class Serialize:
    """Fixed-point conversion of numbers and points."""

    number_scale = NUMBER_SCALE

    @classmethod
    def to_number(cls, value: float) -> int:
        require(
            isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value),
            "expected a finite number",
            value,
            error=SerializationError,
        )
        return int(round(value * cls.number_scale))

    @classmethod
    def from_number(cls, value: int) -> float:
        require(
            isinstance(value, int) and not isinstance(value, bool),
            "expected a fixed-point integer",
            value,
            error=SerializationError,
        )
        return value / cls.number_scale

    @classmethod
    def from_point(cls, point: Point) -> Dict[str, int]:
        require(isinstance(point, Point), "expected a Point", point, error=SerializationError)
        return {"x": cls.to_number(point.x), "y": cls.to_number(point.y), "z": cls.to_number(point.z)}

    @classmethod
    def to_point(cls, obj: Dict[str, int]) -> Point:
        require(isinstance(obj, dict), "expected a point record", obj, error=SerializationError)
        return Point(cls.from_number(obj["x"]), cls.from_number(obj["y"]), cls.from_number(obj["z"]))

    @classmethod
    def quantize(cls, value: float) -> float:
        return cls.from_number(cls.to_number(value))

    @classmethod
    def quantize_point(cls, point: Point) -> Point:
        return cls.to_point(cls.from_point(point))


# Field codecs
POINT = "point"
NUMBER = "number"
ANGLE = "angle"
PLAIN = "plain"


def _field(codec: str, key: Optional[str] = None, **kwargs: Any):
    return field(metadata={"codec": codec, "key": key}, **kwargs)


@dataclass(frozen=True)
class Command:
    """Base of all command records.

    Points and numbers are snapped to the fixed-point grid on construction,
    so a command compares equal to its own decoded record. Angles must be
    whole degrees in [0, 360).
    """

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            codec = f.metadata.get("codec")
            if value is None:
                continue
            if codec == POINT and isinstance(value, Point):
                object.__setattr__(self, f.name, Serialize.quantize_point(value))
            elif codec == NUMBER and isinstance(value, (int, float)) and not isinstance(value, bool):
                object.__setattr__(self, f.name, Serialize.quantize(value))
            elif codec == ANGLE:
                require(is_angle(value), "bad angle", type(self).__name__, f.name, value, error=SerializationError)


@dataclass(frozen=True)
class CreateWall(Command):
    id: str = _field(PLAIN)
    level: str = _field(PLAIN)
    start: Point = _field(POINT)
    end: Point = _field(POINT)
    angle: Optional[int] = _field(ANGLE)
    width: float = _field(NUMBER)
    height: float = _field(NUMBER)


@dataclass(frozen=True)
class SplitWall(Command):
    id: str = _field(PLAIN)
    new_id: str = _field(PLAIN, key="newId")
    at: Point = _field(POINT)


@dataclass(frozen=True)
class DestroyWall(Command):
    id: str = _field(PLAIN)
    level: str = _field(PLAIN)
    start: Point = _field(POINT)
    end: Point = _field(POINT)
    angle: int = _field(ANGLE)
    width: float = _field(NUMBER)
    height: float = _field(NUMBER)


@dataclass(frozen=True)
class MoveWall(Command):
    id: str = _field(PLAIN)
    start: Point = _field(POINT)
    end: Point = _field(POINT)
    angle: Optional[int] = _field(ANGLE)
    from_start: Point = _field(POINT, key="fromStart")
    from_end: Point = _field(POINT, key="fromEnd")
    from_angle: int = _field(ANGLE, key="fromAngle")


COMMAND_TYPES: Dict[str, Type[Command]] = {
    cls.__name__: cls for cls in (CreateWall, SplitWall, DestroyWall, MoveWall)
}


def command_name(command: Command) -> str:
    return type(command).__name__


def encode_command(command: Command) -> Dict[str, Any]:
    """Encode a command as a JSON-compatible record with a ``type`` key.

    Raises:
        UnknownCommand: If the command type is not one of COMMAND_TYPES.
        SerializationError: If a field holds a value its codec cannot store.
    """
    name = command_name(command)
    if COMMAND_TYPES.get(name) is not type(command):
        raise UnknownCommand("unknown command type", name)
    record: Dict[str, Any] = {"type": name}
    for f in fields(command):
        value = getattr(command, f.name)
        key = f.metadata.get("key") or f.name
        codec = f.metadata.get("codec")
        if value is None:
            record[key] = None
        elif codec == POINT:
            record[key] = Serialize.from_point(value)
        elif codec == NUMBER:
            record[key] = Serialize.to_number(value)
        else:
            require(
                isinstance(value, (str, int)) and not isinstance(value, bool),
                "field is not plain data",
                name,
                f.name,
                value,
                error=SerializationError,
            )
            record[key] = value
    return record


def decode_command(record: Dict[str, Any]) -> Command:
    """Decode a record produced by ``encode_command``.

    Raises:
        UnknownCommand: If the record's type is not known.
        SerializationError: If keys are missing, unexpected or malformed.
    """
    require(isinstance(record, dict), "command record must be an object", record, error=SerializationError)
    name = record.get("type")
    if name not in COMMAND_TYPES:
        raise UnknownCommand("unknown command type", name)
    cls = COMMAND_TYPES[name]
    expected = {(f.metadata.get("key") or f.name): f for f in fields(cls)}
    extra = set(record) - set(expected) - {"type"}
    missing = set(expected) - set(record)
    require(not extra and not missing, "bad command record", name, sorted(extra), sorted(missing),
            error=SerializationError)
    kwargs: Dict[str, Any] = {}
    for key, f in expected.items():
        value = record[key]
        codec = f.metadata.get("codec")
        try:
            if value is None:
                kwargs[f.name] = None
            elif codec == POINT:
                kwargs[f.name] = Serialize.to_point(value)
            elif codec == NUMBER:
                kwargs[f.name] = Serialize.from_number(value)
            else:
                kwargs[f.name] = value
        except KeyError as exc:
            raise SerializationError("bad command field", name, key, value) from exc
    return cls(**kwargs)


def check_round_trip(command: Command) -> str:
    """Serialize ``command`` and check it reloads to an identical value.

    Returns:
        The canonical JSON text of the command.

    Raises:
        SerializationError: If the command does not round-trip.
    """
    text = json.dumps(encode_command(command), sort_keys=True)
    reloaded = json.loads(text)
    require(
        json.dumps(reloaded, sort_keys=True) == text and decode_command(reloaded) == command,
        "command didn't round-trip",
        command,
        text,
        error=SerializationError,
    )
    return text
