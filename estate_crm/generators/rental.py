"""Rental contract generator with payments, alerts and documents."""

import random
from datetime import datetime, time, timedelta

from estate_crm.generators.base import BaseGenerator
from estate_crm.models import (
    Property,
    RentalAlert,
    RentalContract,
    RentalDocument,
    RentalPayment,
)
from estate_crm.models.base import AlertId, ClientId, ContractId, DocumentId, PaymentId
from estate_crm.models.enums import (
    AlertPriority,
    AlertType,
    DocumentType,
    PaymentMethod,
    PaymentStatus,
    RentalStatus,
)


def add_months(value: datetime, months: int, day: int | None = None) -> datetime:
    """Shift ``value`` by whole months, clamping the day to the month length."""
    month_index = value.month - 1 + months
    year, month = value.year + month_index // 12, month_index % 12 + 1
    next_month = datetime(year + month // 12, month % 12 + 1, 1)
    last_day = (next_month - timedelta(days=1)).day
    return value.replace(year=year, month=month, day=min(day or value.day, last_day))


class RentalGenerator(BaseGenerator):
    """Generate leases and everything attached to them."""

    LEASE_MONTHS = [12, 12, 12, 24, 36]

    def generate_contract(self, prop: Property, tenant_id: ClientId, owner_id: ClientId) -> RentalContract:
        """Generate a lease on ``prop``; most leases are running today."""
        months = random.choice(self.LEASE_MONTHS)
        start = datetime.combine(
            (self.now - timedelta(days=random.randint(-30, months * 30))).date(), time()
        )
        end = add_months(start, months)
        if start > self.now:
            status = RentalStatus.PENDING
        elif end < self.now:
            status = random.choice([RentalStatus.EXPIRED, RentalStatus.RENEWED])
        else:
            status = random.choices([RentalStatus.ACTIVE, RentalStatus.TERMINATED], weights=[0.92, 0.08], k=1)[0]

        contract_id = ContractId(self.uuid())
        created_at = start - timedelta(days=random.randint(3, 20))
        return RentalContract(
            contract_id=contract_id,
            property_id=prop.property_id,
            tenant_id=tenant_id,
            owner_id=owner_id,
            start_date=start,
            end_date=end,
            monthly_rent=prop.price,
            deposit=prop.price * 2,
            status=status,
            payment_day=random.choice([1, 1, 1, 5, 10]),
            contract_terms=self.fake.paragraph(nb_sentences=2),
            documents=[self.generate_document(contract_id, DocumentType.CONTRACT, created_at)],
            created_at=created_at,
            updated_at=created_at,
        )

    def generate_payments(self, contract: RentalContract, count: int) -> list[RentalPayment]:
        """The latest ``count`` monthly installments, up to next month's.

        Past installments are mostly paid; unpaid ones become late after
        the due date and overdue after 30 days.
        """
        start, end = contract.start_date, contract.end_date
        lease_months = (end.year - start.year) * 12 + end.month - start.month
        elapsed = min((self.now.year - start.year) * 12 + self.now.month - start.month, lease_months - 1)
        first = max(0, elapsed - count + 2)
        payments = []
        for month in range(first, first + count):
            due = add_months(start, month, contract.payment_day)
            if due < start:
                continue
            if due > self.now + timedelta(days=31) or due > contract.end_date:
                break
            payments.append(self._payment(contract, due))
        return payments

    def generate_alerts(self, contract: RentalContract, payments: list[RentalPayment]) -> list[RentalAlert]:
        alerts = []
        for payment in payments:
            if payment.status in (PaymentStatus.LATE, PaymentStatus.OVERDUE):
                alerts.append(self._alert(
                    contract,
                    AlertType.PAYMENT_OVERDUE,
                    f"Rent of {payment.amount:,.0f} MAD due {payment.due_date:%Y-%m-%d} is unpaid",
                    AlertPriority.URGENT if payment.status == PaymentStatus.OVERDUE else AlertPriority.HIGH,
                    payment.due_date,
                ))
            elif payment.status == PaymentStatus.PENDING:
                alerts.append(self._alert(
                    contract,
                    AlertType.PAYMENT_DUE,
                    f"Rent of {payment.amount:,.0f} MAD due {payment.due_date:%Y-%m-%d}",
                    AlertPriority.MEDIUM,
                    payment.due_date,
                ))
        days_left = (contract.end_date - self.now).days
        if contract.status == RentalStatus.ACTIVE and 0 < days_left <= 60:
            alerts.append(self._alert(
                contract,
                AlertType.CONTRACT_EXPIRING,
                f"Lease ends in {days_left} days",
                AlertPriority.HIGH if days_left <= 30 else AlertPriority.MEDIUM,
                contract.end_date,
            ))
        return alerts

    def generate_document(
        self,
        contract_id: ContractId,
        document_type: DocumentType | None = None,
        uploaded: datetime | None = None,
    ) -> RentalDocument:
        document_type = document_type or random.choice(list(DocumentType))
        document_id = DocumentId(self.uuid())
        return RentalDocument(
            document_id=document_id,
            contract_id=contract_id,
            document_type=document_type,
            name=f"{document_type.value.replace('_', ' ').title()}.pdf",
            url=f"/uploads/documents/{document_id}.pdf",
            upload_date=uploaded or self.days_ago(0, 365),
            size=random.randint(40_000, 4_000_000),
        )

    def _payment(self, contract: RentalContract, due: datetime) -> RentalPayment:
        overdue_days = (self.now - due).days
        paid_date = None
        method = None
        receipt = None
        late_fee = None
        if overdue_days < 0:
            status = PaymentStatus.PENDING
        elif random.random() < 0.85:
            status = PaymentStatus.PAID
            paid_date = due + timedelta(days=random.choice([-2, 0, 0, 1, 3, 8]))
            method = random.choice(list(PaymentMethod))
            receipt = self.fake.bothify("REC-######")
        elif overdue_days > 30:
            status = PaymentStatus.OVERDUE
            late_fee = round(contract.monthly_rent * 0.05, 2)
        else:
            status = PaymentStatus.LATE
        return RentalPayment(
            payment_id=PaymentId(self.uuid()),
            contract_id=contract.contract_id,
            amount=contract.monthly_rent,
            due_date=due,
            status=status,
            paid_date=paid_date,
            payment_method=method,
            receipt_number=receipt,
            late_fee=late_fee,
            created_at=due - timedelta(days=7),
            updated_at=paid_date or due - timedelta(days=7),
        )

    def _alert(
        self,
        contract: RentalContract,
        alert_type: AlertType,
        message: str,
        priority: AlertPriority,
        due_date: datetime,
    ) -> RentalAlert:
        return RentalAlert(
            alert_id=AlertId(self.uuid()),
            alert_type=alert_type,
            contract_id=contract.contract_id,
            message=message,
            priority=priority,
            is_read=random.random() < 0.3,
            created_at=min(self.now, due_date),
            due_date=due_date,
        )
