"""Remote snapshot source backed by the CRM REST API."""

import logging
from typing import Any, Mapping

import httpx

from estate_crm.config import RemoteConfig
from estate_crm.exceptions import ConfigurationError, RemoteFetchError
from estate_crm.storage.serialization import from_records
from estate_crm.storage.store import StorageKey
from estate_crm.store.crm import COLLECTIONS

logger = logging.getLogger(__name__)

ENDPOINTS: dict[StorageKey, str] = {
    StorageKey.PROPERTIES: "/properties",
    StorageKey.CLIENTS: "/clients",
    StorageKey.USERS: "/auth/users",
    StorageKey.RENTAL_CONTRACTS: "/rental/contracts",
    StorageKey.RENTAL_PAYMENTS: "/rental/payments",
    StorageKey.RENTAL_ALERTS: "/rental/alerts",
    StorageKey.MAINTENANCE_REQUESTS: "/maintenance",
    StorageKey.PROPERTY_VISITS: "/calendar",
    StorageKey.DOCUMENTS: "/documents",
}

# API column -> model field, per collection
ROW_RENAMES: dict[StorageKey, dict[str, str]] = {
    StorageKey.PROPERTIES: {
        "id": "property_id",
        "property_id": "property_code",
        "type": "property_type",
        "condition_status": "condition",
    },
    StorageKey.CLIENTS: {"id": "client_id"},
    StorageKey.USERS: {"id": "user_id"},
    StorageKey.RENTAL_CONTRACTS: {"id": "contract_id"},
    StorageKey.RENTAL_PAYMENTS: {"id": "payment_id"},
    StorageKey.RENTAL_ALERTS: {"id": "alert_id", "type": "alert_type"},
    StorageKey.MAINTENANCE_REQUESTS: {"id": "request_id"},
    StorageKey.PROPERTY_VISITS: {"id": "visit_id", "type": "visit_type"},
    StorageKey.DOCUMENTS: {
        "id": "document_id",
        "type": "document_type",
        "file_path": "url",
        "file_size": "size",
        "created_at": "upload_date",
    },
}

# List endpoints that page with limit/offset; the others return everything
PAGED_KEYS = frozenset(ENDPOINTS) - {StorageKey.USERS}
PAGE_SIZE = 50

INTERACTION_RENAMES = {"id": "interaction_id", "type": "interaction_type"}
NEEDS_RENAMES = {"id": "needs_id"}


def rename_row(row: Mapping[str, Any], renames: Mapping[str, str]) -> dict[str, Any]:
    """Return ``row`` with its columns renamed to model fields.

    Renames are applied against the original columns, so swaps such as
    ``id -> property_id`` and ``property_id -> property_code`` do not clash.
    """
    return {renames.get(column, column): value for column, value in row.items()}


def normalize_client(row: dict[str, Any]) -> dict[str, Any]:
    """Rename the nested interaction and needs rows of a client.

    Interactions that are not objects are dropped, and so are needs that
    are not an object.
    """
    interactions = row.get("interactions")
    if not isinstance(interactions, list):
        interactions = []
    row["interactions"] = [rename_row(i, INTERACTION_RENAMES) for i in interactions if isinstance(i, Mapping)]
    needs = row.pop("needs", None)
    if isinstance(needs, Mapping) and needs:
        row["needs"] = rename_row(needs, NEEDS_RENAMES)
    elif needs:
        logger.warning("Dropping malformed needs of client %s", row.get("client_id"))
    return row


class RemoteSnapshotSource:
    """Fetch whole collections from the CRM API.

    Each GET returns a JSON array of snake_case rows. Rows are renamed to
    model fields and built with ``from_records``; rows that cannot be
    built are skipped.

    Parameters
    ----------
    base_url : str
        API root including its prefix, e.g. ``http://localhost:3001/api``.
    token : str | None
        Bearer token sent with every request.
    timeout : float
        Per-request timeout in seconds.
    client : httpx.Client | None
        Pre-built client; mostly for tests with ``httpx.MockTransport``.
    page_size : int
        ``limit`` sent to paged list endpoints.
    """

    supported_keys: tuple[StorageKey, ...] = tuple(ENDPOINTS)

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        if page_size < 1:
            raise ConfigurationError(f"page_size must be positive, got {page_size}")
        self.page_size = page_size
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(base_url=self.base_url, headers=headers, timeout=timeout)

    @classmethod
    def from_config(cls, config: RemoteConfig) -> "RemoteSnapshotSource":
        if not config.enabled:
            raise ConfigurationError("Remote source requires CRM_API_URL")
        return cls(config.base_url, token=config.token, timeout=config.timeout)

    def _get_list(self, path: str, params: dict[str, int] | None = None) -> list[Any]:
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
            rows = response.json()
        except httpx.HTTPError as e:
            raise RemoteFetchError(f"GET {path} failed: {e}") from e
        except ValueError as e:
            raise RemoteFetchError(f"GET {path} returned invalid JSON: {e}") from e
        if not isinstance(rows, list):
            raise RemoteFetchError(f"GET {path} returned {type(rows).__name__}, expected a list")
        return rows

    def fetch_rows(self, key: StorageKey) -> list[dict[str, Any]]:
        """GET the raw rows of one collection.

        Paged endpoints are walked with ``limit``/``offset`` until a page
        comes back short, so the result is the whole collection.

        Raises
        ------
        RemoteFetchError
            On transport errors, non-2xx responses or a non-list body on
            any page.
        """
        path = ENDPOINTS.get(key)
        if path is None:
            raise RemoteFetchError(f"No endpoint for {key.value}")
        if key not in PAGED_KEYS:
            return self._get_list(path)

        rows: list[Any] = []
        while True:
            page = self._get_list(path, {"limit": self.page_size, "offset": len(rows)})
            rows.extend(page)
            if len(page) < self.page_size:
                break
        logger.debug("GET %s returned %d rows", path, len(rows))
        return rows

    def fetch(self, key: StorageKey) -> list[Any]:
        """Fetch one collection as model instances."""
        rows = self.fetch_rows(key)
        renames = ROW_RENAMES.get(key, {})
        records = [rename_row(row, renames) for row in rows if isinstance(row, Mapping)]
        if key == StorageKey.CLIENTS:
            records = [normalize_client(row) for row in records]
        entity_type, _ = COLLECTIONS[key]
        models = from_records(entity_type, records)
        logger.debug("Fetched %d/%d %s rows", len(models), len(rows), key.value)
        return models

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RemoteSnapshotSource":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
