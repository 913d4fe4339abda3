"""Filter predicate evaluator for list views.

A view describes its filters as a *schema*: a mapping from criterion name
to a ``Criterion`` that knows which record fields it reads. User input is a
plain mapping of criterion name to value. ``filter_records`` ANDs every
non-empty criterion together; empty values and names missing from the
schema are ignored, so half-filled search forms never raise.

Text criteria match case-insensitively as substrings. When a field holds a
list (tags, features, locations) a record matches if any element contains
the text. Result order is the input order.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Mapping, TypeVar

from estate_crm.models import (
    Client,
    MaintenanceRequest,
    NeedsRequest,
    Property,
    PropertyVisit,
    RentalDocument,
    RentalPayment,
    User,
    WhatsAppCampaign,
)
from estate_crm.models.base import ClientId, PropertyId
from estate_crm.query.sorting import timestamp
from estate_crm.storage.serialization import to_datetime

logger = logging.getLogger(__name__)

T = TypeVar("T")

Accessor = str | Callable[[Any], Any]
Predicate = Callable[[Any], bool]
SELECT_ALL = "all"
ClientResolver = Callable[[ClientId | None], Client | None]
PropertyResolver = Callable[[PropertyId | None], Property | None]


def read_field(record: Any, accessor: Accessor) -> Any:
    """Read a field by attribute name or accessor function."""
    if callable(accessor):
        return accessor(record)
    return getattr(record, accessor, None)


def is_unset(value: Any) -> bool:
    """True for values that impose no constraint."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset)):
        return not value
    return False


def is_select_all(value: Any) -> bool:
    """True for the ``"all"`` choice of a select box."""
    return isinstance(value, str) and value.strip().casefold() == SELECT_ALL


def day_start(value: Any) -> datetime | None:
    """Midnight of a date-like value, or None when unset or unparseable."""
    if is_unset(value):
        return None
    try:
        parsed = to_datetime(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring unparseable date %r", value)
        return None
    return parsed.replace(hour=0, minute=0, second=0, microsecond=0)


def plain(value: Any) -> Any:
    """Enum members compare by their value."""
    return value.value if isinstance(value, Enum) else value


def text_contains(field_value: Any, needle: str) -> bool:
    """Case-insensitive substring test; lists match through any element."""
    if field_value is None:
        return False
    if isinstance(field_value, (list, tuple, set, frozenset)):
        return any(text_contains(item, needle) for item in field_value)
    return needle in str(plain(field_value)).casefold()


def wanted_set(values: Iterable[Any]) -> frozenset | None:
    """Plain values of a multi-select, or None when they cannot be hashed."""
    try:
        return frozenset(plain(v) for v in values)
    except TypeError:
        logger.debug("Ignoring unhashable selection %r", values)
        return None


def is_member(value: Any, wanted: frozenset) -> bool:
    try:
        return value in wanted
    except TypeError:
        return False


def parse_number(value: Any) -> float | None:
    """Parse a numeric bound, returning None when it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip().replace(",", "."))
    except ValueError:
        return None


class Criterion(ABC):
    """A named filter constraint over one or more record fields."""

    def is_active(self, value: Any) -> bool:
        """True when ``value`` constrains the result at all."""
        return not is_unset(value)

    @abstractmethod
    def predicate(self, value: Any) -> Predicate | None:
        """Build the predicate for a user value, or None if it imposes nothing."""


class TextSearch(Criterion):
    """Substring match on any of several fields."""

    def __init__(self, *fields: Accessor) -> None:
        self.fields = fields

    def predicate(self, value: Any) -> Predicate | None:
        needle = str(plain(value)).strip().casefold()
        if not needle:
            return None
        fields = self.fields
        return lambda record: any(text_contains(read_field(record, f), needle) for f in fields)


@dataclass(frozen=True)
class Equals(Criterion):
    """Exact match on an enumerated field. A collection value means any-of.

    The select default ``"all"`` imposes nothing.
    """

    field: Accessor

    def is_active(self, value: Any) -> bool:
        return super().is_active(value) and not is_select_all(value)

    def predicate(self, value: Any) -> Predicate | None:
        if isinstance(value, (list, tuple, set, frozenset)):
            wanted = wanted_set(value)
            if wanted is None:
                return None
            return lambda record: is_member(plain(read_field(record, self.field)), wanted)
        wanted_value = plain(value)
        return lambda record: plain(read_field(record, self.field)) == wanted_value


@dataclass(frozen=True)
class Includes(Criterion):
    """The record's collection field contains the value exactly.

    A collection value means any-of: one shared element is enough.
    """

    field: Accessor

    def predicate(self, value: Any) -> Predicate | None:
        items = value if isinstance(value, (list, tuple, set, frozenset)) else [value]
        wanted = wanted_set(items)
        if wanted is None:
            return None

        def matches(record: Any) -> bool:
            return any(is_member(plain(v), wanted) for v in (read_field(record, self.field) or ()))

        return matches


@dataclass(frozen=True)
class Bound(Criterion):
    """Inclusive lower (``side="min"``) or upper (``side="max"``) numeric bound.

    ``missing`` stands in for records whose field is None; with the
    default None such records never satisfy a bound.
    """

    field: Accessor
    side: str = "min"
    missing: float | None = None

    def predicate(self, value: Any) -> Predicate | None:
        limit = parse_number(value)
        if limit is None:
            logger.debug("Ignoring non-numeric bound %r", value)
            return None

        def matches(record: Any) -> bool:
            actual = read_field(record, self.field)
            if actual is None:
                actual = self.missing
            if actual is None:
                return False
            return actual >= limit if self.side == "min" else actual <= limit

        return matches


@dataclass(frozen=True)
class Range(Criterion):
    """Inclusive ``(low, high)`` range; either side may be None."""

    field: Accessor
    missing: float | None = None

    def predicate(self, value: Any) -> Predicate | None:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            logger.debug("Ignoring malformed range %r", value)
            return None
        checks = []
        for side, bound in zip(("min", "max"), value):
            if is_unset(bound):
                continue
            check = Bound(self.field, side, self.missing).predicate(bound)
            if check is not None:
                checks.append(check)
        if not checks:
            return None
        return lambda record: all(check(record) for check in checks)


@dataclass(frozen=True)
class DateRange(Criterion):
    """Inclusive ``(start, end)`` range of calendar days on a date field.

    ``start`` counts from midnight and ``end`` through the last instant of
    its day. Either side may be None; unparseable sides are ignored.
    """

    field: Accessor

    def predicate(self, value: Any) -> Predicate | None:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            logger.debug("Ignoring malformed date range %r", value)
            return None
        start, end = day_start(value[0]), day_start(value[1])
        if start is None and end is None:
            return None
        end_exclusive = end + timedelta(days=1) if end is not None else None

        def matches(record: Any) -> bool:
            when = read_field(record, self.field)
            if when is None:
                return False
            when = timestamp(when)
            if start is not None and when < start:
                return False
            return end_exclusive is None or when < end_exclusive

        return matches


@dataclass(frozen=True)
class TimeView(Criterion):
    """``"upcoming"`` keeps records dated after ``now``, ``"past"`` those before."""

    field: Accessor
    now: datetime

    def is_active(self, value: Any) -> bool:
        return super().is_active(value) and not is_select_all(value)

    def predicate(self, value: Any) -> Predicate | None:
        view = str(plain(value)).strip().casefold()
        now = self.now
        if view == "upcoming":
            return lambda record: timestamp(read_field(record, self.field)) > now
        if view == "past":
            return lambda record: timestamp(read_field(record, self.field)) < now
        logger.debug("Ignoring unknown view %r", value)
        return None


@dataclass(frozen=True)
class Where(Criterion):
    """Escape hatch: ``test(record, value)`` decides."""

    test: Callable[[Any, Any], bool]

    def predicate(self, value: Any) -> Predicate | None:
        return lambda record: self.test(record, value)


def build_predicates(criteria: Mapping[str, Any], schema: Mapping[str, Criterion]) -> list[Predicate]:
    """Turn user criteria into predicates, skipping empty and unknown ones."""
    predicates = []
    for name, value in criteria.items():
        criterion = schema.get(name)
        if criterion is None:
            logger.debug("Ignoring unknown criterion %r", name)
            continue
        if not criterion.is_active(value):
            continue
        predicate = criterion.predicate(value)
        if predicate is not None:
            predicates.append(predicate)
    return predicates


def filter_records(
    records: Iterable[T],
    criteria: Mapping[str, Any],
    schema: Mapping[str, Criterion],
) -> list[T]:
    """Return the records satisfying every active criterion, in input order."""
    predicates = build_predicates(criteria, schema)
    return [record for record in records if all(p(record) for p in predicates)]


def active_criteria_count(criteria: Mapping[str, Any], schema: Mapping[str, Criterion]) -> int:
    """Number of criteria that actually constrain the result (for filter badges)."""
    return sum(1 for name, value in criteria.items() if name in schema and schema[name].is_active(value))


# View schemas

def _resolved(resolver: Callable[[Any], Any] | None, ref: Callable[[Any], Any], attr: str) -> Accessor:
    """Accessor reading ``attr`` on the entity a weak reference points at."""

    def read(record: Any) -> Any:
        if resolver is None:
            return None
        target = resolver(ref(record))
        return getattr(target, attr, None) if target is not None else None

    return read


def property_schema(resolve_client: ClientResolver | None = None) -> dict[str, Criterion]:
    return {
        "search": TextSearch("title", "location", "property_code", "description"),
        "status": Equals("status"),
        "type": Equals("property_type"),
        "condition": Equals("condition"),
        "transaction_type": Equals("transaction_type"),
        "location": TextSearch("location"),
        "owner": TextSearch(_resolved(resolve_client, lambda p: p.owner_id, "name")),
        "feature": TextSearch("features"),
        "min_price": Bound("price", "min"),
        "max_price": Bound("price", "max"),
        "min_surface": Bound("surface", "min"),
        "max_surface": Bound("surface", "max"),
        "min_rooms": Bound("rooms", "min", missing=0),
        "max_rooms": Bound("rooms", "max", missing=0),
    }


CLIENT_SCHEMA: dict[str, Criterion] = {
    "search": TextSearch("name", "email", "phone", "address"),
    "role": Equals("role"),
    "status": Equals("status"),
    "tag": TextSearch("tags"),
    "source": TextSearch("source"),
    "assigned_agent": TextSearch("assigned_agent"),
    "min_budget": Bound("budget", "min"),
    "max_budget": Bound("budget", "max"),
}

NEEDS_REQUEST_SCHEMA: dict[str, Criterion] = {
    "search": TextSearch(
        "client_name",
        "client_email",
        "client_phone",
        lambda r: r.needs.notes,
        lambda r: r.needs.locations,
    ),
    "status": Equals("status"),
    "urgency": Equals(lambda r: r.needs.urgency),
    "property_type": Includes(lambda r: r.needs.property_types),
    "location": TextSearch(lambda r: r.needs.locations),
}


def maintenance_schema(
    resolve_property: PropertyResolver | None = None,
    resolve_client: ClientResolver | None = None,
) -> dict[str, Criterion]:
    property_title = _resolved(resolve_property, lambda r: r.property_id, "title")
    property_location = _resolved(resolve_property, lambda r: r.property_id, "location")
    tenant_name = _resolved(resolve_client, lambda r: r.tenant_id, "name")
    return {
        "search": TextSearch("title", "description", "assigned_to", property_title, property_location, tenant_name),
        "status": Equals("status"),
        "priority": Equals("priority"),
        "category": Equals("category"),
        "property": TextSearch(property_title, property_location),
        "provider": TextSearch("assigned_to"),
    }


def visit_schema(
    resolve_property: PropertyResolver | None = None,
    resolve_client: ClientResolver | None = None,
    now: datetime | None = None,
) -> dict[str, Criterion]:
    client_name = _resolved(resolve_client, lambda v: v.client_id, "name")
    property_title = _resolved(resolve_property, lambda v: v.property_id, "title")
    property_location = _resolved(resolve_property, lambda v: v.property_id, "location")
    return {
        "search": TextSearch(client_name, property_title, property_location, "notes"),
        "status": Equals("status"),
        "type": Equals("visit_type"),
        "client": TextSearch(client_name),
        "property": TextSearch(property_title, property_location),
        "view": TimeView("scheduled_date", now or datetime.now()),
        "date_range": DateRange("scheduled_date"),
    }


PAYMENT_SCHEMA: dict[str, Criterion] = {
    "search": TextSearch("receipt_number", "notes"),
    "status": Equals("status"),
    "method": Equals("payment_method"),
    "contract": Equals("contract_id"),
    "min_amount": Bound("amount", "min"),
    "max_amount": Bound("amount", "max"),
}

DOCUMENT_SCHEMA: dict[str, Criterion] = {
    "search": TextSearch("name"),
    "type": Equals("document_type"),
    "contract": Equals("contract_id"),
}

USER_SCHEMA: dict[str, Criterion] = {
    "search": TextSearch("name", "email", "phone"),
    "role": Equals("role"),
    "is_active": Equals("is_active"),
}

CAMPAIGN_SCHEMA: dict[str, Criterion] = {
    "search": TextSearch("name", lambda c: c.content.message),
    "status": Equals("status"),
    "type": Equals("campaign_type"),
    "audience": Equals("target_audience"),
}


# Per-view entry points

def filter_properties(
    properties: Iterable[Property],
    criteria: Mapping[str, Any],
    resolve_client: ClientResolver | None = None,
) -> list[Property]:
    return filter_records(properties, criteria, property_schema(resolve_client))


def filter_clients(clients: Iterable[Client], criteria: Mapping[str, Any]) -> list[Client]:
    return filter_records(clients, criteria, CLIENT_SCHEMA)


def filter_needs_requests(requests: Iterable[NeedsRequest], criteria: Mapping[str, Any]) -> list[NeedsRequest]:
    return filter_records(requests, criteria, NEEDS_REQUEST_SCHEMA)


def filter_maintenance(
    requests: Iterable[MaintenanceRequest],
    criteria: Mapping[str, Any],
    resolve_property: PropertyResolver | None = None,
    resolve_client: ClientResolver | None = None,
) -> list[MaintenanceRequest]:
    return filter_records(requests, criteria, maintenance_schema(resolve_property, resolve_client))


def filter_visits(
    visits: Iterable[PropertyVisit],
    criteria: Mapping[str, Any],
    resolve_property: PropertyResolver | None = None,
    resolve_client: ClientResolver | None = None,
    now: datetime | None = None,
) -> list[PropertyVisit]:
    return filter_records(visits, criteria, visit_schema(resolve_property, resolve_client, now))


def filter_payments(payments: Iterable[RentalPayment], criteria: Mapping[str, Any]) -> list[RentalPayment]:
    return filter_records(payments, criteria, PAYMENT_SCHEMA)


def filter_documents(documents: Iterable[RentalDocument], criteria: Mapping[str, Any]) -> list[RentalDocument]:
    return filter_records(documents, criteria, DOCUMENT_SCHEMA)


def filter_users(users: Iterable[User], criteria: Mapping[str, Any]) -> list[User]:
    return filter_records(users, criteria, USER_SCHEMA)


def filter_campaigns(campaigns: Iterable[WhatsAppCampaign], criteria: Mapping[str, Any]) -> list[WhatsAppCampaign]:
    return filter_records(campaigns, criteria, CAMPAIGN_SCHEMA)
