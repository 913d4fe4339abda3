"""Tests for the remote snapshot source."""

from datetime import datetime
from typing import Any

import httpx
import pytest

from estate_crm.config import RemoteConfig
from estate_crm.exceptions import ConfigurationError, RemoteFetchError
from estate_crm.models.enums import AlertType, InteractionType, PropertyType
from estate_crm.remote import RemoteSnapshotSource, normalize_client, rename_row
from estate_crm.storage import StorageKey
from estate_crm.store import CrmDataStore

PROPERTY_ROW = {
    "id": "7f1c2a",
    "property_id": "PROP-0042",
    "title": "Apartment in Gauthier",
    "type": "apartment",
    "condition_status": "renovated",
    "transaction_type": "sale",
    "status": "available",
    "surface": "120.50",
    "price": "1850000.00",
    "location": "Casablanca, Gauthier",
    "features": ["elevator"],
    "rooms": 4,
    "owner_id": None,
    "created_at": "2024-05-02T08:30:00.000Z",
}

CLIENT_ROW = {
    "id": "c-100",
    "name": "Salma Idrissi",
    "email": "salma@example.com",
    "phone": "+212 6 55 44 33 22",
    "role": "buyer",
    "status": "active",
    "interactions": [
        {"id": "i-1", "type": "call", "date": "2024-05-03T10:00:00Z", "notes": "First call"},
    ],
    "needs": {
        "id": "n-1",
        "property_types": ["apartment"],
        "min_price": "1000000",
        "max_price": "2000000",
        "min_surface": 80,
        "max_surface": 140,
        "locations": ["Casablanca"],
    },
}


def _source(routes: dict[str, Any]) -> RemoteSnapshotSource:
    """Source whose transport answers from ``routes`` (path -> body or status code)."""

    def handler(request: httpx.Request) -> httpx.Response:
        answer = routes.get(request.url.path, 404)
        if isinstance(answer, int):
            return httpx.Response(answer, json={"error": "nope"})
        if isinstance(answer, str):
            return httpx.Response(200, text=answer)
        return httpx.Response(200, json=answer)

    client = httpx.Client(base_url="http://crm.test/api", transport=httpx.MockTransport(handler))
    return RemoteSnapshotSource("http://crm.test/api", client=client)


class TestRenames:
    """Tests for API row renaming."""

    def test_rename_swaps_do_not_clash(self) -> None:
        row = rename_row({"id": "uuid", "property_id": "PROP-1"}, {"id": "property_id", "property_id": "property_code"})

        assert row == {"property_id": "uuid", "property_code": "PROP-1"}

    def test_normalize_client_nested_rows(self) -> None:
        row = normalize_client(rename_row(CLIENT_ROW, {"id": "client_id"}))

        assert row["interactions"][0]["interaction_id"] == "i-1"
        assert row["interactions"][0]["interaction_type"] == "call"
        assert row["needs"]["needs_id"] == "n-1"

    def test_normalize_client_without_needs(self) -> None:
        row = normalize_client({"client_id": "c-1", "interactions": None})

        assert row["interactions"] == []
        assert "needs" not in row

    def test_normalize_client_drops_malformed_nested_rows(self) -> None:
        row = normalize_client({"client_id": "c-1", "interactions": ["oops", {"id": "i-1"}], "needs": "soon"})

        assert row["interactions"] == [{"interaction_id": "i-1"}]
        assert "needs" not in row

    def test_normalize_client_interactions_not_a_list(self) -> None:
        assert normalize_client({"client_id": "c-1", "interactions": "oops"})["interactions"] == []


class TestRemoteSnapshotSource:
    """Tests for fetching collections over HTTP."""

    def test_fetch_properties(self) -> None:
        with _source({"/api/properties": [PROPERTY_ROW]}) as source:
            (prop,) = source.fetch(StorageKey.PROPERTIES)

        assert prop.property_id == "7f1c2a"
        assert prop.property_code == "PROP-0042"
        assert prop.property_type is PropertyType.APARTMENT
        assert prop.price == 1_850_000.0
        assert prop.surface == 120.5
        assert prop.created_at == datetime(2024, 5, 2, 8, 30)

    def test_fetch_clients_with_nested_records(self) -> None:
        (client,) = _source({"/api/clients": [CLIENT_ROW]}).fetch(StorageKey.CLIENTS)

        assert client.client_id == "c-100"
        assert client.interactions[0].interaction_type is InteractionType.CALL
        assert client.last_interaction_at == datetime(2024, 5, 3, 10, 0)
        assert client.needs.max_price == 2_000_000

    def test_fetch_alerts(self) -> None:
        row = {
            "id": "a-1",
            "type": "payment_overdue",
            "contract_id": "ct-1",
            "message": "Rent overdue",
            "priority": "high",
            "is_read": False,
        }

        (alert,) = _source({"/api/rental/alerts": [row]}).fetch(StorageKey.RENTAL_ALERTS)

        assert alert.alert_type is AlertType.PAYMENT_OVERDUE

    def test_bad_rows_are_skipped(self) -> None:
        rows = [PROPERTY_ROW, dict(PROPERTY_ROW, id="bad", type="castle"), "junk"]

        result = _source({"/api/properties": rows}).fetch(StorageKey.PROPERTIES)

        assert [p.property_id for p in result] == ["7f1c2a"]

    def test_http_error(self) -> None:
        with pytest.raises(RemoteFetchError, match="/properties"):
            _source({"/api/properties": 500}).fetch(StorageKey.PROPERTIES)

    def test_invalid_json(self) -> None:
        with pytest.raises(RemoteFetchError, match="invalid JSON"):
            _source({"/api/clients": "<html>"}).fetch(StorageKey.CLIENTS)

    def test_non_list_body(self) -> None:
        with pytest.raises(RemoteFetchError, match="expected a list"):
            _source({"/api/clients": {"clients": []}}).fetch_rows(StorageKey.CLIENTS)

    def test_collection_without_endpoint(self) -> None:
        with pytest.raises(RemoteFetchError, match="No endpoint"):
            _source({}).fetch_rows(StorageKey.WHATSAPP_CAMPAIGNS)

    def test_supported_keys(self) -> None:
        assert StorageKey.CONTACT_LISTS not in RemoteSnapshotSource.supported_keys
        assert StorageKey.PROPERTIES in RemoteSnapshotSource.supported_keys

    def test_bearer_token_header(self) -> None:
        source = RemoteSnapshotSource("http://crm.test/api/", token="secret")

        assert source.base_url == "http://crm.test/api"
        assert source._client.headers["Authorization"] == "Bearer secret"
        source.close()

    def test_paged_endpoint_is_walked_to_the_end(self) -> None:
        rows = [dict(PROPERTY_ROW, id=f"p-{n:03d}", property_id=f"PROP-{n:04d}") for n in range(120)]
        seen: list[dict[str, str]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            params = dict(request.url.params)
            seen.append(params)
            limit, offset = int(params["limit"]), int(params["offset"])
            return httpx.Response(200, json=rows[offset : offset + limit])

        client = httpx.Client(base_url="http://crm.test/api", transport=httpx.MockTransport(handler))
        source = RemoteSnapshotSource("http://crm.test/api", client=client)

        result = source.fetch(StorageKey.PROPERTIES)

        assert [p.property_id for p in result] == [row["id"] for row in rows]
        assert [s["offset"] for s in seen] == ["0", "50", "100"]
        assert all(s["limit"] == "50" for s in seen)

    def test_full_last_page_asks_once_more(self) -> None:
        rows = [dict(PROPERTY_ROW, id=f"p-{n}") for n in range(4)]
        offsets: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            offset = int(request.url.params["offset"])
            offsets.append(offset)
            return httpx.Response(200, json=rows[offset : offset + 2])

        client = httpx.Client(base_url="http://crm.test/api", transport=httpx.MockTransport(handler))
        source = RemoteSnapshotSource("http://crm.test/api", client=client, page_size=2)

        assert len(source.fetch_rows(StorageKey.PROPERTIES)) == 4
        assert offsets == [0, 2, 4]

    def test_failing_later_page_fails_the_fetch(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params["offset"] == "0":
                return httpx.Response(200, json=[PROPERTY_ROW, PROPERTY_ROW])
            return httpx.Response(502)

        client = httpx.Client(base_url="http://crm.test/api", transport=httpx.MockTransport(handler))
        source = RemoteSnapshotSource("http://crm.test/api", client=client, page_size=2)

        with pytest.raises(RemoteFetchError):
            source.fetch_rows(StorageKey.PROPERTIES)

    def test_users_endpoint_is_not_paged(self) -> None:
        queries: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            queries.append(request.url.query.decode())
            return httpx.Response(200, json=[])

        client = httpx.Client(base_url="http://crm.test/api", transport=httpx.MockTransport(handler))

        assert RemoteSnapshotSource("http://crm.test/api", client=client).fetch_rows(StorageKey.USERS) == []
        assert queries == [""]

    def test_from_config_requires_url(self) -> None:
        with pytest.raises(ConfigurationError):
            RemoteSnapshotSource.from_config(RemoteConfig())


class TestRefreshThroughApi:
    """End-to-end refresh of a CRM store from a mocked API."""

    def test_refresh_keeps_local_on_failure(self, crm: CrmDataStore) -> None:
        routes = {
            "/api/properties": [PROPERTY_ROW],
            "/api/clients": 503,
            "/api/auth/users": [],
        }

        refreshed = crm.refresh_from_remote(_source(routes))

        assert refreshed == {"crm_properties": 1}
        assert [p.property_id for p in crm.properties] == ["7f1c2a"]
        assert len(crm.clients) == 3

    def test_malformed_client_rows_do_not_abort_refresh(self, crm: CrmDataStore) -> None:
        odd_client = dict(CLIENT_ROW, id="c-200", interactions=["oops"], needs="soon")
        routes = {
            "/api/clients": [odd_client, CLIENT_ROW],
            "/api/properties": [PROPERTY_ROW],
        }

        refreshed = crm.refresh_from_remote(_source(routes))

        assert refreshed == {"crm_properties": 1, "crm_clients": 2}
        odd = crm.clients.get("c-200")
        assert odd.interactions == []
        assert odd.needs is None
        assert crm.clients.get("c-100").needs.max_price == 2_000_000
