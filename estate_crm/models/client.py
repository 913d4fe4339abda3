"""Client, interaction and needs models."""

from dataclasses import dataclass, field
from datetime import datetime

from estate_crm.models.base import ClientId, InteractionId, NeedsId, PropertyId
from estate_crm.models.enums import (
    ClientRole,
    ClientStatus,
    ContactMethod,
    InteractionOutcome,
    InteractionType,
    NeedsRequestStatus,
    PropertyType,
    UrgencyLevel,
)

# Roles allowed to carry a needs record
NEEDS_ROLES = frozenset({ClientRole.BUYER, ClientRole.TENANT})


@dataclass
class Interaction:
    """A contact event with a client. Appended to ``Client.interactions`` only."""

    interaction_id: InteractionId
    interaction_type: InteractionType
    date: datetime
    notes: str = ""
    outcome: InteractionOutcome | None = None
    follow_up_date: datetime | None = None
    duration: int | None = None  # Minutes
    location: str | None = None
    attachments: list[str] = field(default_factory=list)


@dataclass
class ClientNeeds:
    """What a buyer or tenant is looking for.

    ``min_* <= max_*`` is expected but only checked by ``validate_needs``.
    """

    needs_id: NeedsId
    property_types: list[PropertyType] = field(default_factory=list)
    min_surface: float = 0
    max_surface: float = 0
    min_price: float = 0
    max_price: float = 0
    locations: list[str] = field(default_factory=list)
    features: list[str] = field(default_factory=list)
    notes: str = ""
    urgency: UrgencyLevel = UrgencyLevel.MEDIUM
    timeline: str | None = None


@dataclass
class Client:
    """Agency client: tenant, owner or buyer."""

    client_id: ClientId
    name: str
    email: str
    phone: str
    role: ClientRole
    status: ClientStatus
    secondary_phone: str | None = None
    address: str | None = None
    tags: list[str] = field(default_factory=list)
    interactions: list[Interaction] = field(default_factory=list)
    needs: ClientNeeds | None = None
    properties: list[PropertyId] = field(default_factory=list)
    budget: float | None = None
    preferred_contact_method: ContactMethod = ContactMethod.PHONE
    notes: str | None = None
    source: str | None = None  # How they found the agency
    assigned_agent: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def last_interaction_at(self) -> datetime | None:
        """Most recent interaction date, or None when there are none."""
        if not self.interactions:
            return None
        return max(interaction.date for interaction in self.interactions)


@dataclass
class NeedsRequest:
    """A client's needs projected for the needs-tracking view."""

    needs: ClientNeeds
    client_id: ClientId
    client_name: str
    client_email: str
    client_phone: str
    status: NeedsRequestStatus = NeedsRequestStatus.ACTIVE
    matched_properties: list[PropertyId] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def needs_id(self) -> NeedsId:
        return self.needs.needs_id
