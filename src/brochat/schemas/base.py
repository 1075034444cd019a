"""
Base Schema Class

This module provides the base class for every wire schema with common
serialization and deserialization methods, plus the field readers used
by subclasses to decode JSON dictionaries strictly.

Decoding ignores unknown keys so newer servers can add fields, but a
missing key or a value of the wrong type raises (KeyError, TypeError or
ValueError). Callers turn those into protocol errors.
"""

import json
import re
from dataclasses import fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Type, TypeVar

T = TypeVar("T", bound="Schema")
E = TypeVar("E", bound=Enum)

_TIMESTAMP = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?P<frac>\.\d+)?"
    r"(?P<tz>Z|z|[+-]\d{2}:\d{2})$"
)


def format_timestamp(value: datetime) -> str:
    """
    Format a datetime as an RFC 3339 string.

    Naive datetimes are taken to be UTC. UTC is written with a "Z" suffix.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def parse_timestamp(text: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into an aware datetime.

    Fractional seconds beyond microsecond precision are truncated.

    Raises:
        ValueError: If text is not an RFC 3339 timestamp
    """
    if not isinstance(text, str):
        raise TypeError(f"expected timestamp string, got {type(text).__name__}")
    match = _TIMESTAMP.match(text)
    if not match:
        raise ValueError(f"invalid timestamp: {text!r}")

    frac = match.group("frac") or ""
    if frac:
        frac = "." + frac[1:7].ljust(6, "0")
    tz = match.group("tz")
    if tz in ("Z", "z"):
        tz = "+00:00"
    return datetime.fromisoformat(match.group("base") + frac + tz)


def _encode_value(value: Any) -> Any:
    if isinstance(value, Schema):
        return value.to_dict()
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_encode_value(item) for item in value]
    return value


def get_str(data: Dict[str, Any], key: str) -> str:
    """Read a required string field."""
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"field {key!r} must be a string")
    return value


def get_int(data: Dict[str, Any], key: str) -> int:
    """Read a required integer field (booleans are rejected)."""
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"field {key!r} must be an integer")
    return value


def get_bool(data: Dict[str, Any], key: str) -> bool:
    """Read a required boolean field."""
    value = data[key]
    if not isinstance(value, bool):
        raise TypeError(f"field {key!r} must be a boolean")
    return value


def get_list(data: Dict[str, Any], key: str) -> List[Any]:
    """Read a list field. JSON null is read as an empty list."""
    value = data[key]
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"field {key!r} must be a list")
    return value


def get_timestamp(data: Dict[str, Any], key: str) -> datetime:
    """Read a required RFC 3339 timestamp field."""
    return parse_timestamp(data[key])


def get_enum(data: Dict[str, Any], key: str, enum_cls: Type[E], reader=get_str):
    """
    Read an enum field.

    Values this client does not know are returned raw so that data from a
    newer server is preserved.
    """
    value = reader(data, key)
    try:
        return enum_cls(value)
    except ValueError:
        return value


class Schema:
    """
    Base class for wire schemas.

    Subclasses are dataclasses. Serialization walks the dataclass fields;
    deserialization is done by _from_data, which subclasses override when
    fields need conversion or type checks.
    """

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Nested schemas, datetimes and enums are converted to their JSON
        representations.
        """
        return {f.name: _encode_value(getattr(self, f.name)) for f in fields(self)}

    def to_json(self) -> str:
        """
        Convert to JSON string.

        Raises:
            TypeError: If a field holds a value JSON cannot represent
        """
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """
        Create instance from dictionary.

        Args:
            data: Decoded JSON object

        Raises:
            TypeError: If data is not a JSON object or a field has the
                       wrong type
            KeyError: If a required field is missing
            ValueError: If a field value is invalid
        """
        if not isinstance(data, dict):
            raise TypeError(
                f"{cls.__name__} expects a JSON object, got {type(data).__name__}"
            )
        return cls._from_data(data)

    @classmethod
    def from_json(cls: Type[T], json_str: str) -> T:
        """Create instance from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def list_from_json(cls: Type[T], json_str: str) -> List[T]:
        """Create a list of instances from a JSON array."""
        data = json.loads(json_str)
        if data is None:
            return []
        if not isinstance(data, list):
            raise TypeError(f"expected a JSON array of {cls.__name__}")
        return [cls.from_dict(item) for item in data]

    @classmethod
    def _from_data(cls: Type[T], data: Dict[str, Any]) -> T:
        """
        Create instance from data dictionary.

        Should be overridden by subclasses for custom deserialization.
        """
        return cls(**{f.name: data[f.name] for f in fields(cls)})
