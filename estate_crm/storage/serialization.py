"""Serialization between entities and portable JSON text.

Values go out through ``serialize_value`` (enums become their values,
datetimes become ISO-8601 strings) and come back through ``loads``, which
revives every string shaped like an ISO-8601 timestamp into a ``datetime``.
``from_dict`` then rebuilds typed dataclasses from the revived mappings.
"""

import json
import logging
import re
import types
from dataclasses import fields, is_dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any, Iterable, Mapping, TypeVar, Union, get_args, get_origin, get_type_hints

logger = logging.getLogger(__name__)

T = TypeVar("T")

ISO_TIMESTAMP = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{1,6})?(Z|[+-]\d{2}:?\d{2})?$"
)
ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization.

    Walks ``dataclasses.fields()`` instead of ``asdict()`` so nested
    records are serialized in a single pass without a deep copy.
    """
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif is_dataclass(value) and not isinstance(value, type):
        return dataclass_to_dict(value)
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple, set, frozenset)):
        return [serialize_value(v) for v in value]
    return value


def dumps(value: Any, pretty: bool = False) -> str:
    """Serialize ``value`` to JSON text."""
    return json.dumps(
        serialize_value(value),
        indent=2 if pretty else None,
        ensure_ascii=False,
    )


def loads(text: str, revive: bool = True) -> Any:
    """Parse JSON text, reviving ISO-8601 timestamps into datetimes.

    With ``revive=False`` strings are left as stored; ``from_dict`` still
    parses the ones whose field is annotated as a datetime.

    Raises
    ------
    ValueError
        If the text is not valid JSON.
    """
    value = json.loads(text)
    return revive_dates(value) if revive else value


def revive_dates(value: Any) -> Any:
    """Recursively convert timestamp-shaped strings into datetimes."""
    if isinstance(value, str):
        if ISO_TIMESTAMP.match(value):
            return parse_datetime(value)
        return value
    elif isinstance(value, dict):
        return {k: revive_dates(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [revive_dates(v) for v in value]
    return value


def parse_datetime(text: str) -> datetime:
    """Parse an ISO-8601 date or timestamp string.

    A trailing ``Z`` is accepted as UTC. Date-only strings become midnight.
    """
    text = text.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    if ISO_DATE.match(text):
        return datetime.combine(date.fromisoformat(text), time())
    return datetime.fromisoformat(text)


def to_datetime(value: Any) -> datetime | None:
    """Normalize a date-like value into a naive datetime.

    Accepts ``datetime``, ``date`` and ISO-8601 strings. Aware datetimes are
    converted to UTC before dropping the offset so every result compares
    against every other.

    Raises
    ------
    ValueError
        If a string cannot be parsed.
    TypeError
        If the value is not date-like.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = parse_datetime(value)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    raise TypeError(f"Expected a date-like value, got {type(value).__name__}")


@lru_cache(maxsize=None)
def _type_hints(cls: type) -> dict[str, Any]:
    return get_type_hints(cls)


def from_dict(cls: type[T], data: Mapping[str, Any]) -> T:
    """Build a dataclass instance from a mapping.

    Unknown keys are ignored, missing keys fall back to field defaults and
    values are coerced to the annotated field types (enums, datetimes,
    nested dataclasses, lists of them).

    Raises
    ------
    TypeError
        If a required field is missing.
    ValueError
        If a value cannot be coerced (for example an unknown enum value).
    """
    if isinstance(data, cls):
        return data
    hints = _type_hints(cls)
    kwargs = {}
    for f in fields(cls):
        if not f.init or f.name not in data:
            continue
        kwargs[f.name] = coerce_value(hints[f.name], data[f.name])
    return cls(**kwargs)


def from_records(cls: type[T], records: Iterable[Any]) -> list[T]:
    """Build dataclasses from records, skipping the ones that cannot be built."""
    result = []
    for index, record in enumerate(records):
        try:
            result.append(from_dict(cls, record))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping %s record #%d: %s", cls.__name__, index, e)
    return result


def coerce_value(tp: Any, value: Any) -> Any:
    """Coerce a decoded JSON value to the annotated type ``tp``."""
    if value is None:
        return None

    # NewType identifiers wrap a plain supertype
    while hasattr(tp, "__supertype__"):
        tp = tp.__supertype__

    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        options = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(options) == 1:
            return coerce_value(options[0], value)
        return value

    if origin in (list, set, frozenset, tuple):
        args = get_args(tp)
        item_type = args[0] if args else Any
        items = [coerce_value(item_type, v) for v in value]
        return items if origin is list else origin(items)

    if origin is dict:
        return dict(value)

    if isinstance(tp, type):
        if is_dataclass(tp):
            return value if isinstance(value, tp) else from_dict(tp, value)
        if issubclass(tp, Enum):
            return tp(value)
        if tp is datetime:
            return to_datetime(value)
        if tp is bool:
            if isinstance(value, str):
                return value.strip().lower() in ("1", "true", "yes")
            return bool(value)
        if tp is int:
            return int(float(value)) if isinstance(value, str) else int(value)
        if tp is float:
            return float(value)
        if tp is str:
            return value.isoformat() if isinstance(value, datetime) else str(value)

    return value
