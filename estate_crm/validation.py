"""Domain rules checked before an entity is saved.

Each function raises ``ValidationError`` on the first broken rule and
returns None otherwise.
"""

from estate_crm.exceptions import ValidationError
from estate_crm.models import (
    NEEDS_ROLES,
    Client,
    ClientNeeds,
    Property,
    PropertyVisit,
    RentalContract,
)
from estate_crm.storage.serialization import to_datetime


def _require(value: str | None, label: str) -> None:
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} is required")


def _non_negative(value: float | None, label: str) -> None:
    if value is not None and value < 0:
        raise ValidationError(f"{label} must not be negative, got {value}")


def validate_property(prop: Property) -> None:
    """Validate that a listing has a title, a location and sane figures."""
    _require(prop.title, "Property title")
    _require(prop.location, "Property location")
    _non_negative(prop.surface, "Surface")
    _non_negative(prop.price, "Price")
    if prop.rooms is not None and prop.rooms < 0:
        raise ValidationError(f"Rooms must not be negative, got {prop.rooms}")


def validate_needs(needs: ClientNeeds) -> None:
    """Validate that the price and surface ranges are ordered."""
    for label, low, high in (
        ("price", needs.min_price, needs.max_price),
        ("surface", needs.min_surface, needs.max_surface),
    ):
        _non_negative(low, f"Minimum {label}")
        if low > high:
            raise ValidationError(f"Minimum {label} {low} exceeds maximum {high}")


def validate_client(client: Client) -> None:
    """Validate contact details, and needs for buyers and tenants only."""
    _require(client.name, "Client name")
    _require(client.phone, "Client phone")
    _non_negative(client.budget, "Budget")
    if client.needs is not None:
        if client.role not in NEEDS_ROLES:
            raise ValidationError(f"A {client.role.value} client cannot have needs")
        validate_needs(client.needs)


def validate_contract(contract: RentalContract) -> None:
    """Validate lease dates, rent figures and payment day."""
    start = to_datetime(contract.start_date)
    end = to_datetime(contract.end_date)
    if start is None or end is None:
        raise ValidationError("Contract start and end dates are required")
    if start >= end:
        raise ValidationError("End date must be after start date")
    if not 1 <= contract.payment_day <= 31:
        raise ValidationError(f"Payment day must be between 1 and 31, got {contract.payment_day}")
    _non_negative(contract.monthly_rent, "Monthly rent")
    _non_negative(contract.deposit, "Deposit")


def validate_visit(visit: PropertyVisit) -> None:
    if visit.duration <= 0:
        raise ValidationError(f"Visit duration must be positive, got {visit.duration}")
