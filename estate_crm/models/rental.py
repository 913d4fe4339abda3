"""Rental management models: contracts, payments, alerts, documents."""

from dataclasses import dataclass, field
from datetime import datetime

from estate_crm.models.base import (
    AlertId,
    ClientId,
    ContractId,
    DocumentId,
    PaymentId,
    PropertyId,
)
from estate_crm.models.enums import (
    AlertPriority,
    AlertType,
    DocumentType,
    PaymentMethod,
    PaymentStatus,
    RentalStatus,
)


@dataclass
class RentalDocument:
    """File attached to a rental contract."""

    document_id: DocumentId
    contract_id: ContractId
    document_type: DocumentType
    name: str
    url: str
    upload_date: datetime
    size: int  # Bytes


@dataclass
class RentalContract:
    """Lease linking a property, its tenant and its owner."""

    contract_id: ContractId
    property_id: PropertyId
    tenant_id: ClientId
    owner_id: ClientId
    start_date: datetime
    end_date: datetime
    monthly_rent: float
    deposit: float
    status: RentalStatus
    payment_day: int  # Day of month when rent is due
    contract_terms: str = ""
    special_conditions: str | None = None
    documents: list[RentalDocument] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class RentalPayment:
    """A rent installment due on a contract."""

    payment_id: PaymentId
    contract_id: ContractId
    amount: float
    due_date: datetime
    status: PaymentStatus
    paid_date: datetime | None = None
    payment_method: PaymentMethod | None = None
    receipt_number: str | None = None
    notes: str | None = None
    late_fee: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class RentalAlert:
    """Reminder raised on a contract (payment due, lease expiring, ...)."""

    alert_id: AlertId
    alert_type: AlertType
    contract_id: ContractId
    message: str
    priority: AlertPriority
    is_read: bool = False
    created_at: datetime | None = None
    due_date: datetime | None = None
