"""Maintenance request model."""

from dataclasses import dataclass, field
from datetime import datetime

from estate_crm.models.base import ClientId, ContractId, MaintenanceRequestId, PropertyId
from estate_crm.models.enums import (
    MaintenanceCategory,
    MaintenancePriority,
    MaintenanceStatus,
)


@dataclass
class MaintenanceRequest:
    """Repair or upkeep job on a property."""

    request_id: MaintenanceRequestId
    property_id: PropertyId
    title: str
    description: str
    category: MaintenanceCategory
    priority: MaintenancePriority
    status: MaintenanceStatus
    reported_date: datetime
    contract_id: ContractId | None = None
    tenant_id: ClientId | None = None
    scheduled_date: datetime | None = None
    completed_date: datetime | None = None
    cost: float | None = None
    assigned_to: str | None = None
    photos: list[str] = field(default_factory=list)
    notes: str | None = None
