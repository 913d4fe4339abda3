"""Sort comparator selector for list views.

Each sort option maps to a key function and a direction. Sorting always
returns a new list and is stable: records with equal keys keep their
input order, in both directions.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Iterable, TypeVar

from estate_crm.storage.serialization import to_datetime

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PropertySortOption(str, Enum):
    DATE_CREATED_ASC = "date_created_asc"
    DATE_CREATED_DESC = "date_created_desc"
    TYPE = "type"
    PRICE_LOW_HIGH = "price_low_high"
    PRICE_HIGH_LOW = "price_high_low"
    SURFACE = "surface"


class ClientSortOption(str, Enum):
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    DATE_CREATED_ASC = "date_created_asc"
    DATE_CREATED_DESC = "date_created_desc"
    LAST_INTERACTION = "last_interaction"
    ROLE = "role"
    STATUS = "status"


class UserSortOption(str, Enum):
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    DATE_CREATED_ASC = "date_created_asc"
    DATE_CREATED_DESC = "date_created_desc"
    LAST_LOGIN = "last_login"
    ROLE = "role"


class VisitSortOption(str, Enum):
    UPCOMING = "upcoming"  # Soonest first
    PAST = "past"  # Most recent first


def timestamp(value: Any) -> datetime:
    """Normalize a date-like value for comparison; missing or bad dates sort lowest."""
    try:
        normalized = to_datetime(value)
    except (TypeError, ValueError):
        logger.debug("Unparseable date %r sorts as lowest", value)
        return datetime.min
    return normalized if normalized is not None else datetime.min


def enum_text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def last_interaction(client: Any) -> datetime:
    """Latest interaction date; clients without interactions sort lowest."""
    return max((timestamp(i.date) for i in client.interactions), default=datetime.min)


def _created(record: Any) -> datetime:
    return timestamp(record.created_at)


def _name(record: Any) -> str:
    return record.name.casefold()


SortKey = tuple[Callable[[Any], Any], bool]  # (key, descending)

PROPERTY_SORT_KEYS: dict[PropertySortOption, SortKey] = {
    PropertySortOption.DATE_CREATED_ASC: (_created, False),
    PropertySortOption.DATE_CREATED_DESC: (_created, True),
    PropertySortOption.TYPE: (lambda p: enum_text(p.property_type), False),
    PropertySortOption.PRICE_LOW_HIGH: (lambda p: p.price, False),
    PropertySortOption.PRICE_HIGH_LOW: (lambda p: p.price, True),
    PropertySortOption.SURFACE: (lambda p: p.surface, True),
}

CLIENT_SORT_KEYS: dict[ClientSortOption, SortKey] = {
    ClientSortOption.NAME_ASC: (_name, False),
    ClientSortOption.NAME_DESC: (_name, True),
    ClientSortOption.DATE_CREATED_ASC: (_created, False),
    ClientSortOption.DATE_CREATED_DESC: (_created, True),
    ClientSortOption.LAST_INTERACTION: (last_interaction, True),
    ClientSortOption.ROLE: (lambda c: enum_text(c.role), False),
    ClientSortOption.STATUS: (lambda c: enum_text(c.status), False),
}

USER_SORT_KEYS: dict[UserSortOption, SortKey] = {
    UserSortOption.NAME_ASC: (_name, False),
    UserSortOption.NAME_DESC: (_name, True),
    UserSortOption.DATE_CREATED_ASC: (_created, False),
    UserSortOption.DATE_CREATED_DESC: (_created, True),
    UserSortOption.LAST_LOGIN: (lambda u: timestamp(u.last_login), True),
    UserSortOption.ROLE: (lambda u: enum_text(u.role), False),
}

VISIT_SORT_KEYS: dict[VisitSortOption, SortKey] = {
    VisitSortOption.UPCOMING: (lambda v: timestamp(v.scheduled_date), False),
    VisitSortOption.PAST: (lambda v: timestamp(v.scheduled_date), True),
}

# Options of different views share string values, so look up by option class
_SORT_TABLES: dict[type, dict[Any, SortKey]] = {
    PropertySortOption: PROPERTY_SORT_KEYS,
    ClientSortOption: CLIENT_SORT_KEYS,
    UserSortOption: USER_SORT_KEYS,
    VisitSortOption: VISIT_SORT_KEYS,
}


def sort_key(option: Enum) -> SortKey | None:
    """Return ``(key, descending)`` for a sort option, or None if it has none."""
    table = _SORT_TABLES.get(type(option))
    if table is None:
        return None
    return table.get(option)


def sort_records(records: Iterable[T], option: Enum | None) -> list[T]:
    """Return a new list sorted by ``option``.

    An unknown or missing option leaves the input order unchanged.
    """
    items = list(records)
    selected = sort_key(option) if option is not None else None
    if selected is None:
        if option is not None:
            logger.debug("No sort key for %r, keeping input order", option)
        return items
    key, descending = selected
    # list.sort keeps equal elements in input order even with reverse=True
    items.sort(key=key, reverse=descending)
    return items
