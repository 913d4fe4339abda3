"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest

from estate_crm.models import Client, Property
from estate_crm.models.base import ClientId
from estate_crm.models.enums import ClientRole, ClientStatus, PropertyStatus, PropertyType, TransactionType
from estate_crm.storage import KeyValueStore, MemoryBackend, StorageKey
from estate_crm.store import CrmDataStore
from tests.factories import make_client, make_needs, make_property


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def now() -> datetime:
    """Fixed reference time (a Wednesday)."""
    return datetime(2024, 6, 12, 12, 0)


@pytest.fixture
def properties() -> list[Property]:
    """Small inventory across cities, types and prices."""
    return [
        make_property("prop-001"),
        make_property(
            "prop-002",
            title="Villa with pool",
            property_type=PropertyType.VILLA,
            surface=400,
            price=6_500_000,
            location="Rabat, Souissi",
            features=["swimming pool", "garden"],
            rooms=6,
            owner_id=ClientId("cli-003"),
            created_at=datetime(2024, 3, 5, 9, 0),
        ),
        make_property(
            "prop-003",
            title="Office in Maarif",
            property_type=PropertyType.OFFICE,
            transaction_type=TransactionType.RENTAL,
            status=PropertyStatus.RENTED,
            surface=90,
            price=12_000,
            location="Casablanca, Maarif",
            features=[],
            rooms=None,
            created_at=datetime(2023, 11, 20, 9, 0),
        ),
    ]


@pytest.fixture
def clients() -> list[Client]:
    return [
        make_client("cli-001", needs=make_needs(), budget=2_000_000),
        make_client(
            "cli-002",
            name="Karim Amrani",
            email="karim@example.com",
            phone="0661-223344",
            role=ClientRole.TENANT,
            status=ClientStatus.PROSPECT,
            tags=["expat"],
            address="12 Rue Ibn Sina, Rabat, Agdal",
            budget=9_000,
        ),
        make_client(
            "cli-003",
            name="Youssef Tazi",
            email="youssef@example.com",
            phone="0662-998877",
            role=ClientRole.OWNER,
            created_at=datetime(2023, 12, 1, 10, 0),
        ),
    ]


@pytest.fixture
def memory_store() -> KeyValueStore:
    return KeyValueStore(MemoryBackend())


@pytest.fixture
def crm(memory_store: KeyValueStore, properties: list[Property], clients: list[Client], now: datetime) -> CrmDataStore:
    """CRM store seeded with the sample properties and clients."""
    return CrmDataStore(
        memory_store,
        seed={StorageKey.PROPERTIES: properties, StorageKey.CLIENTS: clients},
        clock=lambda: now,
    )
