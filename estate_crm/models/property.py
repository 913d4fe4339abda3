"""Property listing model."""

from dataclasses import dataclass, field
from datetime import datetime

from estate_crm.models.base import ClientId, PropertyId
from estate_crm.models.enums import (
    PropertyCondition,
    PropertyStatus,
    PropertyType,
    TransactionType,
)


@dataclass
class Property:
    """Real estate listing managed by the agency."""

    property_id: PropertyId
    property_code: str  # Reference shown to clients, entered by the agent
    title: str
    property_type: PropertyType
    condition: PropertyCondition
    transaction_type: TransactionType
    status: PropertyStatus
    surface: float  # Square meters
    price: float
    location: str
    description: str = ""
    features: list[str] = field(default_factory=list)
    photos: list[str] = field(default_factory=list)
    videos: list[str] = field(default_factory=list)
    rooms: int | None = None
    owner_id: ClientId | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
