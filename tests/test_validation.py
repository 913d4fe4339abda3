"""Tests for entity validation rules."""

from datetime import datetime

import pytest

from estate_crm.exceptions import ValidationError
from estate_crm.models import PropertyVisit, RentalContract
from estate_crm.models.base import ClientId, ContractId, PropertyId, VisitId
from estate_crm.models.enums import ClientRole, RentalStatus, VisitStatus, VisitType
from estate_crm.validation import (
    validate_client,
    validate_contract,
    validate_needs,
    validate_property,
    validate_visit,
)
from tests.factories import make_client, make_needs, make_property


def _contract(**overrides) -> RentalContract:
    values = dict(
        contract_id=ContractId("ct-001"),
        property_id=PropertyId("prop-003"),
        tenant_id=ClientId("cli-002"),
        owner_id=ClientId("cli-003"),
        start_date=datetime(2024, 1, 1),
        end_date=datetime(2025, 1, 1),
        monthly_rent=8_000,
        deposit=16_000,
        status=RentalStatus.ACTIVE,
        payment_day=5,
    )
    values.update(overrides)
    return RentalContract(**values)


class TestValidateProperty:
    """Tests for validate_property."""

    def test_valid(self) -> None:
        validate_property(make_property())

    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"title": "  "}, "title is required"),
            ({"location": ""}, "location is required"),
            ({"price": -1}, "Price"),
            ({"surface": -10}, "Surface"),
            ({"rooms": -2}, "Rooms"),
        ],
    )
    def test_invalid(self, overrides: dict, message: str) -> None:
        with pytest.raises(ValidationError, match=message):
            validate_property(make_property(**overrides))


class TestValidateNeeds:
    """Tests for validate_needs."""

    def test_valid(self) -> None:
        validate_needs(make_needs())

    def test_equal_bounds_allowed(self) -> None:
        validate_needs(make_needs(min_price=1_000_000, max_price=1_000_000))

    def test_inverted_price_range(self) -> None:
        with pytest.raises(ValidationError, match="Minimum price"):
            validate_needs(make_needs(min_price=3_000_000, max_price=2_000_000))

    def test_inverted_surface_range(self) -> None:
        with pytest.raises(ValidationError, match="Minimum surface"):
            validate_needs(make_needs(min_surface=200, max_surface=100))

    def test_negative_minimum(self) -> None:
        with pytest.raises(ValidationError, match="negative"):
            validate_needs(make_needs(min_surface=-5))


class TestValidateClient:
    """Tests for validate_client."""

    def test_valid_buyer_with_needs(self) -> None:
        validate_client(make_client(needs=make_needs()))

    def test_missing_phone(self) -> None:
        with pytest.raises(ValidationError, match="phone"):
            validate_client(make_client(phone=""))

    def test_owner_with_needs(self) -> None:
        with pytest.raises(ValidationError, match="owner"):
            validate_client(make_client(role=ClientRole.OWNER, needs=make_needs()))

    def test_needs_are_checked(self) -> None:
        with pytest.raises(ValidationError):
            validate_client(make_client(needs=make_needs(min_price=5, max_price=1)))


class TestValidateContract:
    """Tests for validate_contract."""

    def test_valid(self) -> None:
        validate_contract(_contract())

    def test_end_before_start(self) -> None:
        with pytest.raises(ValidationError, match="End date"):
            validate_contract(_contract(end_date=datetime(2023, 12, 1)))

    def test_same_day(self) -> None:
        with pytest.raises(ValidationError):
            validate_contract(_contract(end_date=datetime(2024, 1, 1)))

    def test_string_dates_are_compared_as_dates(self) -> None:
        validate_contract(_contract(start_date="2024-01-01", end_date="2024-12-31T00:00:00Z"))

    @pytest.mark.parametrize("day", [0, 32])
    def test_payment_day_range(self, day: int) -> None:
        with pytest.raises(ValidationError, match="Payment day"):
            validate_contract(_contract(payment_day=day))

    def test_negative_rent(self) -> None:
        with pytest.raises(ValidationError, match="Monthly rent"):
            validate_contract(_contract(monthly_rent=-100))


class TestValidateVisit:
    """Tests for validate_visit."""

    def test_zero_duration(self) -> None:
        visit = PropertyVisit(
            visit_id=VisitId("vis-1"),
            property_id=PropertyId("prop-001"),
            client_id=ClientId("cli-001"),
            scheduled_date=datetime(2024, 6, 14, 10, 0),
            duration=0,
            status=VisitStatus.SCHEDULED,
            visit_type=VisitType.FIRST_VIEWING,
        )

        with pytest.raises(ValidationError, match="duration"):
            validate_visit(visit)
