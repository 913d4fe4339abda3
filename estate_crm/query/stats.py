"""Derived statistics for dashboards and list headers.

Every function is pure. Group counts always add up to the size of the
collection, and percentages over an empty collection are 0 rather than
a division error.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from enum import Enum
from typing import Any, Callable, Hashable, Iterable, Sequence

from estate_crm.models import (
    Client,
    MaintenanceRequest,
    NeedsRequest,
    Property,
    PropertyVisit,
    RentalAlert,
    RentalContract,
    RentalPayment,
    WhatsAppCampaign,
)
from estate_crm.models.enums import (
    CampaignStatus,
    ClientStatus,
    MaintenancePriority,
    MaintenanceStatus,
    NeedsRequestStatus,
    PaymentStatus,
    PropertyStatus,
    RentalStatus,
    UrgencyLevel,
    VisitStatus,
)
from estate_crm.query.filters import Accessor, read_field
from estate_crm.query.sorting import timestamp

OVERDUE_STATUSES = frozenset({PaymentStatus.LATE, PaymentStatus.OVERDUE})
URGENT_PRIORITIES = frozenset({MaintenancePriority.EMERGENCY, MaintenancePriority.HIGH})
PENDING_VISIT_STATUSES = frozenset({VisitStatus.SCHEDULED, VisitStatus.CONFIRMED})


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def count_by(
    records: Iterable[Any],
    key: Accessor,
    categories: Sequence[Hashable] | None = None,
) -> dict[Any, int]:
    """Count records per group.

    Parameters
    ----------
    records : Iterable[Any]
        Collection to group.
    key : Accessor
        Field name or function giving each record's group.
    categories : Sequence[Hashable] | None
        Groups to always report (with 0 when empty), in this order. Record
        values equal to a category's enum value are counted under it.
    """
    counts: dict[Any, int] = {category: 0 for category in categories or ()}
    by_value = {_plain(category): category for category in counts}
    for record in records:
        group = read_field(record, key)
        group = by_value.get(_plain(group), group)
        counts[group] = counts.get(group, 0) + 1
    return counts


def sum_by(
    records: Iterable[Any],
    value: Accessor,
    where: Callable[[Any], bool] | None = None,
) -> float:
    """Sum a numeric field, treating None as 0."""
    return sum(
        read_field(record, value) or 0
        for record in records
        if where is None or where(record)
    )


def percentages(
    records: Iterable[Any],
    key: Accessor,
    categories: Sequence[Hashable] | None = None,
) -> dict[Any, float]:
    """Share of records per group, as percentages of the total."""
    counts = count_by(records, key, categories)
    total = sum(counts.values())
    if total == 0:
        return {group: 0.0 for group in counts}
    return {group: count / total * 100 for group, count in counts.items()}


def portfolio_status(properties: Iterable[Property]) -> dict[PropertyStatus, float]:
    """Percentage of properties per status, every status listed."""
    return percentages(properties, "status", list(PropertyStatus))


@dataclass(frozen=True)
class DashboardMetrics:
    active_listings: int
    active_rentals: int
    new_clients: int
    pending_tasks: int


def dashboard_metrics(
    properties: Iterable[Property],
    clients: Iterable[Client],
    contracts: Iterable[RentalContract],
    payments: Iterable[RentalPayment],
    maintenance: Iterable[MaintenanceRequest],
    now: datetime | None = None,
    new_client_days: int = 30,
) -> DashboardMetrics:
    """Headline counters of the dashboard.

    Pending tasks are late/overdue payments, newly reported maintenance
    requests and prospects waiting for follow-up.
    """
    now = now or datetime.now()
    clients = list(clients)
    cutoff = now - timedelta(days=new_client_days)
    return DashboardMetrics(
        active_listings=sum(1 for p in properties if p.status == PropertyStatus.AVAILABLE),
        active_rentals=sum(1 for c in contracts if c.status == RentalStatus.ACTIVE),
        new_clients=sum(1 for c in clients if c.created_at is not None and timestamp(c.created_at) >= cutoff),
        pending_tasks=(
            sum(1 for p in payments if p.status in OVERDUE_STATUSES)
            + sum(1 for m in maintenance if m.status == MaintenanceStatus.REPORTED)
            + sum(1 for c in clients if c.status == ClientStatus.PROSPECT)
        ),
    )


@dataclass(frozen=True)
class DashboardAlert:
    kind: str  # overdue_payments, urgent_maintenance, expiring_contracts
    count: int
    message: str


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count > 1 else ''}"


def dashboard_alerts(
    payments: Iterable[RentalPayment],
    maintenance: Iterable[MaintenanceRequest],
    contracts: Iterable[RentalContract],
    now: datetime | None = None,
    expiry_days: int = 30,
) -> list[DashboardAlert]:
    """Attention items: overdue payments, urgent reported repairs, expiring leases."""
    now = now or datetime.now()
    alerts = []

    overdue = sum(1 for p in payments if p.status in OVERDUE_STATUSES)
    if overdue:
        alerts.append(DashboardAlert("overdue_payments", overdue, f"{_plural(overdue, 'payment')} overdue"))

    urgent = sum(
        1 for m in maintenance
        if m.status == MaintenanceStatus.REPORTED and m.priority in URGENT_PRIORITIES
    )
    if urgent:
        alerts.append(DashboardAlert(
            "urgent_maintenance", urgent, f"{_plural(urgent, 'urgent maintenance request')}"
        ))

    expiring = 0
    for contract in contracts:
        days_left = (timestamp(contract.end_date) - now).days
        if 0 < days_left <= expiry_days:
            expiring += 1
    if expiring:
        alerts.append(DashboardAlert(
            "expiring_contracts", expiring, f"{_plural(expiring, 'contract')} expiring within {expiry_days} days"
        ))

    return alerts


@dataclass(frozen=True)
class FinancialOverview:
    total_rent_collected: float
    pending_rent: float
    maintenance_costs: float

    @property
    def net_income(self) -> float:
        return self.total_rent_collected - self.maintenance_costs


def financial_overview(
    payments: Iterable[RentalPayment],
    maintenance: Iterable[MaintenanceRequest],
) -> FinancialOverview:
    payments = list(payments)
    return FinancialOverview(
        total_rent_collected=sum_by(payments, "amount", lambda p: p.status == PaymentStatus.PAID),
        pending_rent=sum_by(payments, "amount", lambda p: p.status == PaymentStatus.PENDING),
        maintenance_costs=sum_by(maintenance, "cost"),
    )


@dataclass(frozen=True)
class RentalStats:
    active_contracts: int
    pending_contracts: int
    total_rent: float
    paid_payments: int
    pending_payments: int
    overdue_payments: int
    unread_alerts: int


def rental_stats(
    contracts: Iterable[RentalContract],
    payments: Iterable[RentalPayment],
    alerts: Iterable[RentalAlert],
) -> RentalStats:
    contracts = list(contracts)
    payment_counts = count_by(payments, "status", list(PaymentStatus))
    return RentalStats(
        active_contracts=sum(1 for c in contracts if c.status == RentalStatus.ACTIVE),
        pending_contracts=sum(1 for c in contracts if c.status == RentalStatus.PENDING),
        total_rent=sum_by(contracts, "monthly_rent", lambda c: c.status == RentalStatus.ACTIVE),
        paid_payments=payment_counts[PaymentStatus.PAID],
        pending_payments=payment_counts[PaymentStatus.PENDING],
        overdue_payments=payment_counts[PaymentStatus.LATE] + payment_counts[PaymentStatus.OVERDUE],
        unread_alerts=sum(1 for a in alerts if not a.is_read),
    )


@dataclass(frozen=True)
class MaintenanceStats:
    total: int
    reported: int
    in_progress: int
    completed: int
    emergency: int
    total_cost: float


def maintenance_stats(requests: Iterable[MaintenanceRequest]) -> MaintenanceStats:
    requests = list(requests)
    by_status = count_by(requests, "status", list(MaintenanceStatus))
    return MaintenanceStats(
        total=len(requests),
        reported=by_status[MaintenanceStatus.REPORTED],
        in_progress=by_status[MaintenanceStatus.IN_PROGRESS],
        completed=by_status[MaintenanceStatus.COMPLETED],
        emergency=sum(1 for r in requests if r.priority == MaintenancePriority.EMERGENCY),
        total_cost=sum_by(requests, "cost"),
    )


@dataclass(frozen=True)
class VisitStats:
    upcoming: int
    today: int
    this_week: int
    completed: int
    pending: int


def week_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Sunday 00:00 to the following Saturday 23:59:59.999999 around ``now``."""
    days_since_sunday = (now.weekday() + 1) % 7
    start = datetime.combine(now.date() - timedelta(days=days_since_sunday), time())
    end = start + timedelta(days=7) - timedelta(microseconds=1)
    return start, end


def visit_stats(visits: Iterable[PropertyVisit], now: datetime | None = None) -> VisitStats:
    """Calendar header counters relative to ``now``."""
    now = now or datetime.now()
    week_start, week_end = week_bounds(now)
    upcoming = today = this_week = completed = pending = 0
    for visit in visits:
        when = timestamp(visit.scheduled_date)
        is_upcoming = when > now
        upcoming += is_upcoming
        today += when.date() == now.date()
        this_week += is_upcoming and week_start <= when <= week_end
        completed += visit.status == VisitStatus.COMPLETED
        pending += visit.status in PENDING_VISIT_STATUSES
    return VisitStats(upcoming, today, this_week, completed, pending)


@dataclass(frozen=True)
class NeedsStats:
    total: int
    active: int
    matched: int
    archived: int
    urgent: int
    high: int


def needs_stats(requests: Iterable[NeedsRequest]) -> NeedsStats:
    requests = list(requests)
    by_status = count_by(requests, "status", list(NeedsRequestStatus))
    by_urgency = count_by(requests, lambda r: r.needs.urgency, list(UrgencyLevel))
    return NeedsStats(
        total=len(requests),
        active=by_status[NeedsRequestStatus.ACTIVE],
        matched=by_status[NeedsRequestStatus.MATCHED],
        archived=by_status[NeedsRequestStatus.ARCHIVED],
        urgent=by_urgency[UrgencyLevel.URGENT],
        high=by_urgency[UrgencyLevel.HIGH],
    )


@dataclass(frozen=True)
class CampaignStats:
    total: int
    sent: int
    scheduled: int
    total_recipients: int
    total_responses: int
    avg_response_rate: float


def campaign_stats(campaigns: Iterable[WhatsAppCampaign]) -> CampaignStats:
    campaigns = list(campaigns)
    recipients = sum(c.recipient_count for c in campaigns)
    responses = sum(c.response_count for c in campaigns)
    return CampaignStats(
        total=len(campaigns),
        sent=sum(1 for c in campaigns if c.status == CampaignStatus.SENT),
        scheduled=sum(1 for c in campaigns if c.status == CampaignStatus.SCHEDULED),
        total_recipients=recipients,
        total_responses=responses,
        avg_response_rate=responses / recipients * 100 if recipients > 0 else 0.0,
    )
