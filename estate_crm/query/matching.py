"""Requirement-to-inventory matcher.

A property matches a client's needs when it passes every check:

1. type is one of the wanted types (no wanted types means any type);
2. price within ``[min_price, max_price]``;
3. surface within ``[min_surface, max_surface]``;
4. location overlaps a wanted location, either string containing the
   other, case-insensitively (no wanted locations means no match);
5. when features are wanted, at least one of them is a substring of one
   of the property's features.

The empty-types / empty-locations asymmetry is long-standing behaviour and
is kept as is.
"""

import logging
from enum import Enum
from typing import Any, Iterable

from estate_crm.models import Client, ClientNeeds, NeedsRequest, Property
from estate_crm.models.base import NeedsId
from estate_crm.models.enums import NeedsRequestStatus

logger = logging.getLogger(__name__)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def type_matches(need: ClientNeeds, prop: Property) -> bool:
    if not need.property_types:
        return True
    return _plain(prop.property_type) in {_plain(t) for t in need.property_types}


def price_matches(need: ClientNeeds, prop: Property) -> bool:
    return need.min_price <= prop.price <= need.max_price


def surface_matches(need: ClientNeeds, prop: Property) -> bool:
    return need.min_surface <= prop.surface <= need.max_surface


def location_matches(need: ClientNeeds, prop: Property) -> bool:
    location = prop.location.casefold()
    return any(
        wanted.casefold() in location or location in wanted.casefold()
        for wanted in need.locations
    )


def features_match(need: ClientNeeds, prop: Property) -> bool:
    if not need.features:
        return True
    owned = [feature.casefold() for feature in prop.features]
    return any(
        wanted.casefold() in feature
        for wanted in need.features
        for feature in owned
    )


def matches_need(need: ClientNeeds, prop: Property) -> bool:
    """True when ``prop`` satisfies every check for ``need``."""
    return (
        type_matches(need, prop)
        and price_matches(need, prop)
        and surface_matches(need, prop)
        and location_matches(need, prop)
        and features_match(need, prop)
    )


def match_properties(need: ClientNeeds, inventory: Iterable[Property]) -> list[Property]:
    """Return the properties matching ``need``, in inventory order."""
    return [prop for prop in inventory if matches_need(need, prop)]


def needs_requests(
    clients: Iterable[Client],
    statuses: dict[NeedsId, NeedsRequestStatus] | None = None,
) -> list[NeedsRequest]:
    """Project every client carrying needs into a ``NeedsRequest``.

    Parameters
    ----------
    clients : Iterable[Client]
        Clients to project; those without needs are skipped.
    statuses : dict[NeedsId, NeedsRequestStatus] | None
        Known request statuses; requests not listed are active.
    """
    statuses = statuses or {}
    return [
        NeedsRequest(
            needs=client.needs,
            client_id=client.client_id,
            client_name=client.name,
            client_email=client.email,
            client_phone=client.phone,
            status=statuses.get(client.needs.needs_id, NeedsRequestStatus.ACTIVE),
            created_at=client.created_at,
            updated_at=client.updated_at,
        )
        for client in clients
        if client.needs is not None
    ]


def match_requests(
    requests: Iterable[NeedsRequest],
    inventory: Iterable[Property],
) -> dict[NeedsId, list[Property]]:
    """Map each request's needs id to its matching properties."""
    inventory = list(inventory)
    matches = {request.needs_id: match_properties(request.needs, inventory) for request in requests}
    logger.debug(
        "Matched %d requests against %d properties (%d with results)",
        len(matches),
        len(inventory),
        sum(1 for found in matches.values() if found),
    )
    return matches
