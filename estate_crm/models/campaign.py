"""WhatsApp marketing campaign models."""

from dataclasses import dataclass, field
from datetime import datetime

from estate_crm.models.base import CampaignId, ContactListId, PropertyId
from estate_crm.models.enums import (
    CampaignStatus,
    CampaignType,
    ClientRole,
    ClientStatus,
    TargetAudience,
)


@dataclass
class CampaignContent:
    """Message body and attachments of a campaign."""

    message: str
    property_ids: list[PropertyId] = field(default_factory=list)
    media_urls: list[str] = field(default_factory=list)
    include_contact: bool = True
    include_website: bool = False


@dataclass
class WhatsAppCampaign:
    """Bulk WhatsApp send with its delivery counters."""

    campaign_id: CampaignId
    name: str
    campaign_type: CampaignType
    status: CampaignStatus
    target_audience: TargetAudience
    content: CampaignContent
    recipient_count: int = 0
    sent_count: int = 0
    delivered_count: int = 0
    read_count: int = 0
    response_count: int = 0
    contact_list_id: ContactListId | None = None
    created_at: datetime | None = None
    scheduled_date: datetime | None = None
    sent_date: datetime | None = None
    updated_at: datetime | None = None

    @property
    def response_rate(self) -> float:
        """Responses as a percentage of recipients."""
        if self.recipient_count <= 0:
            return 0.0
        return self.response_count / self.recipient_count * 100


@dataclass
class ContactList:
    """Saved audience definition for custom campaigns."""

    list_id: ContactListId
    name: str
    description: str = ""
    roles: list[ClientRole] = field(default_factory=list)
    statuses: list[ClientStatus] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)
    min_budget: float | None = None
    max_budget: float | None = None
    tags: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
