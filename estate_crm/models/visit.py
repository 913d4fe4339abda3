"""Property visit model."""

from dataclasses import dataclass
from datetime import datetime

from estate_crm.models.base import ClientId, PropertyId, UserId, VisitId
from estate_crm.models.enums import VisitOutcome, VisitStatus, VisitType


@dataclass
class PropertyVisit:
    """Scheduled viewing of a property by a client."""

    visit_id: VisitId
    property_id: PropertyId
    client_id: ClientId
    scheduled_date: datetime
    duration: int  # Minutes
    status: VisitStatus
    visit_type: VisitType
    agent_id: UserId | None = None
    notes: str | None = None
    outcome: VisitOutcome | None = None
    reminder_sent: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
