"""WhatsApp sharing: message bodies, click-to-chat links and campaign audiences."""

import logging
import re
from typing import Iterable
from urllib.parse import quote

from estate_crm.exceptions import ValidationError
from estate_crm.models import Client, ContactList, Property
from estate_crm.models.enums import ClientRole, TargetAudience
from estate_crm.query.filters import Bound, Criterion, Equals, Where, filter_records, text_contains

logger = logging.getLogger(__name__)

WHATSAPP_URL = "https://wa.me/"
CURRENCY = "MAD"

AUDIENCE_ROLES = {
    TargetAudience.BUYERS: ClientRole.BUYER,
    TargetAudience.TENANTS: ClientRole.TENANT,
    TargetAudience.OWNERS: ClientRole.OWNER,
}


def format_price(amount: float) -> str:
    return f"{CURRENCY} {amount:,.0f}"


def format_surface(surface: float) -> str:
    return f"{surface:g} m²"


def property_message(prop: Property) -> str:
    """Listing announcement shared with a client or a broadcast list."""
    return (
        f"🏡 {prop.title}\n\n"
        f"💰 {format_price(prop.price)}\n"
        f"📍 {prop.location}\n"
        f"📐 {format_surface(prop.surface)}\n\n"
        f"{prop.description}\n\n"
        "Interested? Contact us for more details!"
    )


def needs_match_message(client_name: str, match_count: int) -> str:
    return (
        f"Hi {client_name}, we have found {match_count} properties that match "
        "your requirements. Would you like to see them?"
    )


def phone_digits(phone: str | None) -> str:
    """Strip everything but digits, as wa.me expects."""
    return re.sub(r"\D", "", phone or "")


def whatsapp_link(phone: str | None, message: str) -> str:
    """Click-to-chat URL; without a usable phone the user picks the chat."""
    digits = phone_digits(phone)
    return f"{WHATSAPP_URL}{digits}?text={quote(message, safe='')}"


def _any_text(accessor):
    def test(client: Client, needles: Iterable[str]) -> bool:
        value = accessor(client)
        return any(text_contains(value, needle.strip().casefold()) for needle in needles if needle.strip())

    return test


# Contact list fields -> client constraints; list-valued fields mean any-of
AUDIENCE_SCHEMA: dict[str, Criterion] = {
    "roles": Equals("role"),
    "statuses": Equals("status"),
    "locations": Where(_any_text(lambda c: c.address)),
    "tags": Where(_any_text(lambda c: c.tags)),
    "min_budget": Bound("budget", "min"),
    "max_budget": Bound("budget", "max"),
}


def contact_list_criteria(contact_list: ContactList) -> dict:
    return {
        "roles": contact_list.roles,
        "statuses": contact_list.statuses,
        "locations": contact_list.locations,
        "tags": contact_list.tags,
        "min_budget": contact_list.min_budget,
        "max_budget": contact_list.max_budget,
    }


def resolve_audience(
    clients: Iterable[Client],
    audience: TargetAudience,
    contact_list: ContactList | None = None,
) -> list[Client]:
    """Return the clients a campaign targets, in input order.

    Raises
    ------
    ValidationError
        If a custom audience is requested without a contact list.
    """
    clients = list(clients)
    if audience == TargetAudience.ALL:
        return clients
    if audience == TargetAudience.CUSTOM:
        if contact_list is None:
            raise ValidationError("A custom audience needs a contact list")
        recipients = filter_records(clients, contact_list_criteria(contact_list), AUDIENCE_SCHEMA)
        logger.debug("Contact list %s resolved to %d clients", contact_list.list_id, len(recipients))
        return recipients
    role = AUDIENCE_ROLES[TargetAudience(audience)]
    return [client for client in clients if client.role == role]
