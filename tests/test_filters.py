"""Tests for the filter predicate evaluator."""

from datetime import datetime

import pytest

from estate_crm.models import Client, NeedsRequest, Property, PropertyVisit
from estate_crm.models.base import ClientId, PropertyId, VisitId
from estate_crm.models.enums import (
    ClientRole,
    NeedsRequestStatus,
    PropertyStatus,
    PropertyType,
    UrgencyLevel,
    VisitStatus,
    VisitType,
)
from estate_crm.query import filter_clients, filter_needs_requests, filter_properties, filter_visits
from estate_crm.query.filters import (
    CLIENT_SCHEMA,
    Bound,
    Equals,
    Range,
    TextSearch,
    active_criteria_count,
    filter_records,
    parse_number,
    property_schema,
)
from estate_crm.query.sorting import VisitSortOption
from estate_crm.store import CrmDataStore
from tests.factories import make_client, make_needs


class TestSearch:
    """Case-insensitive substring search."""

    def test_search_by_name_fragment(self) -> None:
        clients = [
            make_client("cli-001", name="Fatima El Amrani", email="fatima@example.com"),
            make_client("cli-002", name="Youssef Idrissi", email="youssef@example.com"),
        ]

        result = filter_clients(clients, {"search": "amr"})

        assert [c.name for c in result] == ["Fatima El Amrani"]

    def test_search_matches_any_field(self, clients: list[Client]) -> None:
        assert [c.client_id for c in filter_clients(clients, {"search": "AGDAL"})] == ["cli-002"]
        assert [c.client_id for c in filter_clients(clients, {"search": "0661"})] == ["cli-002"]

    def test_search_within_list_field(self, properties: list[Property]) -> None:
        result = filter_properties(properties, {"feature": "pool"})

        assert [p.property_id for p in result] == ["prop-002"]

    def test_blank_search_is_ignored(self, clients: list[Client]) -> None:
        assert filter_clients(clients, {"search": "   "}) == clients


class TestCriteria:
    """Equality, bounds and combination of criteria."""

    def test_enum_criterion_accepts_value_or_member(self, properties: list[Property]) -> None:
        by_value = filter_properties(properties, {"type": "villa"})
        by_member = filter_properties(properties, {"type": PropertyType.VILLA})

        assert by_value == by_member
        assert [p.property_id for p in by_value] == ["prop-002"]

    def test_any_of_values(self, clients: list[Client]) -> None:
        result = filter_clients(clients, {"role": [ClientRole.BUYER, ClientRole.OWNER]})

        assert [c.client_id for c in result] == ["cli-001", "cli-003"]

    def test_criteria_are_anded(self, properties: list[Property]) -> None:
        result = filter_properties(properties, {"location": "casablanca", "status": PropertyStatus.AVAILABLE})

        assert [p.property_id for p in result] == ["prop-001"]

    def test_price_bounds_inclusive(self, properties: list[Property]) -> None:
        result = filter_properties(properties, {"min_price": 1_500_000, "max_price": "6500000"})

        assert [p.property_id for p in result] == ["prop-001", "prop-002"]

    def test_missing_rooms_count_as_zero(self, properties: list[Property]) -> None:
        assert [p.property_id for p in filter_properties(properties, {"max_rooms": 0})] == ["prop-003"]
        assert "prop-003" not in [p.property_id for p in filter_properties(properties, {"min_rooms": 1})]

    def test_non_numeric_bound_is_ignored(self, properties: list[Property]) -> None:
        assert filter_properties(properties, {"min_price": "cheap"}) == properties

    def test_unknown_criterion_is_ignored(self, clients: list[Client]) -> None:
        assert filter_clients(clients, {"favourite_colour": "blue"}) == clients

    def test_bound_skips_missing_values(self, clients: list[Client]) -> None:
        result = filter_clients(clients, {"min_budget": 0})

        assert [c.client_id for c in result] == ["cli-001", "cli-002"]

    def test_range(self, properties: list[Property]) -> None:
        schema = {"surface": Range("surface")}

        assert [p.property_id for p in filter_records(properties, {"surface": (90, 100)}, schema)] == [
            "prop-001",
            "prop-003",
        ]
        assert filter_records(properties, {"surface": (None, None)}, schema) == properties

    def test_owner_name_through_resolver(self, crm: CrmDataStore) -> None:
        result = filter_properties(crm.properties.all(), {"owner": "tazi"}, resolve_client=crm.resolve_client)

        assert [p.property_id for p in result] == ["prop-002"]

    def test_select_all_is_ignored(self, properties: list[Property]) -> None:
        assert filter_properties(properties, {"type": "all", "status": "All"}) == properties
        assert active_criteria_count({"type": "all", "search": "all"}, property_schema()) == 1

    def test_unhashable_selection_is_ignored(self, clients: list[Client]) -> None:
        assert filter_clients(clients, {"status": [{"x": 1}]}) == clients


class TestFilterInvariants:
    """Properties that hold for every criteria set."""

    CRITERIA = [
        {},
        {"search": "a"},
        {"role": "tenant"},
        {"status": "active", "search": "example"},
        {"min_budget": 5000},
    ]

    @pytest.mark.parametrize("criteria", CRITERIA)
    def test_idempotent(self, clients: list[Client], criteria: dict) -> None:
        once = filter_clients(clients, criteria)

        assert filter_clients(once, criteria) == once

    @pytest.mark.parametrize("criteria", CRITERIA)
    def test_result_is_ordered_subset(self, clients: list[Client], criteria: dict) -> None:
        result = filter_clients(clients, criteria)
        positions = [clients.index(c) for c in result]

        assert positions == sorted(positions)

    def test_adding_criteria_never_grows_result(self, clients: list[Client]) -> None:
        broad = filter_clients(clients, {"search": "example"})
        narrow = filter_clients(clients, {"search": "example", "role": "buyer"})

        assert set(c.client_id for c in narrow) <= set(c.client_id for c in broad)

    def test_empty_input(self) -> None:
        assert filter_clients([], {"search": "x"}) == []


def _needs_requests() -> list[NeedsRequest]:
    return [
        NeedsRequest(
            needs=make_needs("needs-001", urgency=UrgencyLevel.HIGH),
            client_id=ClientId("cli-001"),
            client_name="Amina Benali",
            client_email="amina@example.com",
            client_phone="0600000000",
        ),
        NeedsRequest(
            needs=make_needs("needs-002", property_types=[PropertyType.VILLA], locations=["Marrakech"]),
            client_id=ClientId("cli-002"),
            client_name="Karim Amrani",
            client_email="karim@example.com",
            client_phone="0611111111",
            status=NeedsRequestStatus.MATCHED,
        ),
    ]


def _visit(visit_id: str, scheduled_date: datetime) -> PropertyVisit:
    return PropertyVisit(
        visit_id=VisitId(visit_id),
        property_id=PropertyId("prop-001"),
        client_id=ClientId("cli-001"),
        scheduled_date=scheduled_date,
        duration=30,
        status=VisitStatus.SCHEDULED,
        visit_type=VisitType.FIRST_VIEWING,
    )


class TestOtherViews:
    """Schemas for needs requests and visits."""

    def test_needs_requests_by_urgency_and_type(self) -> None:
        requests = _needs_requests()

        assert [r.needs_id for r in filter_needs_requests(requests, {"urgency": "high"})] == ["needs-001"]
        assert [r.needs_id for r in filter_needs_requests(requests, {"property_type": "villa"})] == ["needs-002"]
        assert [r.needs_id for r in filter_needs_requests(requests, {"search": "marrakech"})] == ["needs-002"]
        assert [r.needs_id for r in filter_needs_requests(requests, {"status": "matched"})] == ["needs-002"]

    def test_needs_requests_multi_select_type(self) -> None:
        requests = _needs_requests()

        both = filter_needs_requests(requests, {"property_type": ["apartment", PropertyType.VILLA]})
        villas = filter_needs_requests(requests, {"property_type": ("villa", "land")})

        assert [r.needs_id for r in both] == ["needs-001", "needs-002"]
        assert [r.needs_id for r in villas] == ["needs-002"]

    def test_visit_view_upcoming_and_past(self) -> None:
        now = datetime(2024, 6, 12, 12, 0)
        visits = [
            _visit("vis-past", datetime(2024, 6, 10, 9, 0)),
            _visit("vis-now", now),
            _visit("vis-next", datetime(2024, 6, 14, 10, 0)),
        ]

        upcoming = filter_visits(visits, {"view": "upcoming"}, now=now)
        past = filter_visits(visits, {"view": VisitSortOption.PAST}, now=now)

        assert [v.visit_id for v in upcoming] == ["vis-next"]
        assert [v.visit_id for v in past] == ["vis-past"]
        assert filter_visits(visits, {"view": "all"}, now=now) == visits

    def test_visit_date_range_covers_whole_days(self) -> None:
        visits = [
            _visit("vis-before", datetime(2024, 6, 9, 23, 59)),
            _visit("vis-first", datetime(2024, 6, 10, 0, 0)),
            _visit("vis-last", datetime(2024, 6, 15, 23, 59, 59)),
            _visit("vis-after", datetime(2024, 6, 16, 0, 0)),
        ]

        result = filter_visits(visits, {"date_range": ("2024-06-10", datetime(2024, 6, 15, 8, 30))})

        assert [v.visit_id for v in result] == ["vis-first", "vis-last"]

    def test_visit_date_range_open_end_and_garbage(self) -> None:
        visits = [_visit("vis-1", datetime(2024, 6, 9, 10, 0)), _visit("vis-2", datetime(2024, 6, 20, 10, 0))]

        open_end = filter_visits(visits, {"date_range": ("2024-06-10", None)})

        assert [v.visit_id for v in open_end] == ["vis-2"]
        assert filter_visits(visits, {"date_range": ("soon", "later")}) == visits

    def test_visits_by_client_name(self, crm: CrmDataStore) -> None:
        visit = PropertyVisit(
            visit_id=VisitId("vis-1"),
            property_id=PropertyId("prop-002"),
            client_id=ClientId("cli-002"),
            scheduled_date=datetime(2024, 6, 14, 10, 0),
            duration=30,
            status=VisitStatus.SCHEDULED,
            visit_type=VisitType.FIRST_VIEWING,
        )

        by_client = filter_visits(
            [visit], {"client": "karim"}, resolve_property=crm.resolve_property, resolve_client=crm.resolve_client
        )
        by_property = filter_visits([visit], {"property": "souissi"}, resolve_property=crm.resolve_property)

        assert by_client == [visit]
        assert by_property == [visit]

    def test_dangling_reference_does_not_match(self) -> None:
        visit = PropertyVisit(
            visit_id=VisitId("vis-1"),
            property_id=PropertyId("prop-404"),
            client_id=ClientId("cli-404"),
            scheduled_date=datetime(2024, 6, 14, 10, 0),
            duration=30,
            status=VisitStatus.SCHEDULED,
            visit_type=VisitType.FIRST_VIEWING,
        )

        assert filter_visits([visit], {"client": "karim"}, resolve_client=lambda _id: None) == []


class TestHelpers:
    """Tests for building blocks."""

    def test_parse_number(self) -> None:
        assert parse_number("1,5") == 1.5
        assert parse_number(3) == 3.0
        assert parse_number(True) is None
        assert parse_number("abc") is None

    def test_active_criteria_count(self) -> None:
        criteria = {"search": "", "role": "buyer", "min_budget": 1000, "unknown": "x", "tag": []}

        assert active_criteria_count(criteria, CLIENT_SCHEMA) == 2

    def test_custom_schema(self) -> None:
        schema = {"q": TextSearch("name"), "role": Equals("role"), "min": Bound("budget")}
        clients = [make_client("cli-001", budget=100), make_client("cli-002", budget=50)]

        assert [c.client_id for c in filter_records(clients, {"q": "amina", "min": 60}, schema)] == ["cli-001"]
