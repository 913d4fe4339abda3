"""Persistent key-value store adapter.

``KeyValueStore`` never lets a storage failure escape: ``load`` falls back
to the caller's default and ``save`` only logs. The application always
starts with a usable in-memory state.
"""

import logging
from enum import Enum
from typing import Any, TypeVar

from estate_crm.config import CrmConfig
from estate_crm.exceptions import StorageError
from estate_crm.storage.backends import (
    JsonFileBackend,
    KeyValueBackend,
    MemoryBackend,
    PostgresBackend,
)
from estate_crm.storage.serialization import dumps, from_records, loads

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StorageKey(str, Enum):
    """Named collections persisted by the CRM."""

    PROPERTIES = "crm_properties"
    CLIENTS = "crm_clients"
    USERS = "crm_users"
    RENTAL_CONTRACTS = "crm_rental_contracts"
    RENTAL_PAYMENTS = "crm_rental_payments"
    RENTAL_ALERTS = "crm_rental_alerts"
    MAINTENANCE_REQUESTS = "crm_maintenance_requests"
    PROPERTY_VISITS = "crm_property_visits"
    DOCUMENTS = "crm_documents"
    WHATSAPP_CAMPAIGNS = "crm_whatsapp_campaigns"
    CONTACT_LISTS = "crm_contact_lists"


class KeyValueStore:
    """Load and save serialized values against a backend."""

    def __init__(self, backend: KeyValueBackend, pretty: bool = False) -> None:
        self.backend = backend
        self.pretty = pretty

    def load(self, key: str, default: T, entity_type: type | None = None) -> T:
        """Load the value stored under ``key``.

        Parameters
        ----------
        key : str
            Storage key (``StorageKey`` members are accepted).
        default : T
            Returned when the key is missing, the backend fails or the
            stored text is corrupt.
        entity_type : type | None
            Dataclass to rebuild list elements into. Elements that cannot
            be rebuilt are skipped.

        Returns
        -------
        T
            The stored value or ``default``.
        """
        key = _key_name(key)
        try:
            text = self.backend.get_item(key)
        except StorageError as e:
            logger.error("Error loading %s from storage: %s", key, e)
            return default

        if text is None:
            return default

        try:
            value = loads(text, revive=entity_type is None)
        except ValueError as e:
            logger.error("Corrupt data under %s, using default: %s", key, e)
            return default

        if entity_type is not None:
            if not isinstance(value, list):
                logger.error("Expected a list under %s, got %s", key, type(value).__name__)
                return default
            return from_records(entity_type, value)  # type: ignore[return-value]
        return value

    def save(self, key: str, value: Any) -> None:
        """Serialize ``value`` and write it under ``key``. Failures are logged."""
        key = _key_name(key)
        try:
            text = dumps(value, pretty=self.pretty)
        except (TypeError, ValueError) as e:
            logger.error("Cannot serialize %s: %s", key, e)
            return
        try:
            self.backend.set_item(key, text)
        except StorageError as e:
            logger.error("Error saving %s to storage: %s", key, e, extra={"collection": key})
            return
        logger.debug("Saved %s (%d bytes)", key, len(text))

    def remove(self, key: str) -> None:
        key = _key_name(key)
        try:
            self.backend.remove_item(key)
        except StorageError as e:
            logger.error("Error removing %s from storage: %s", key, e)


def _key_name(key: str) -> str:
    return key.value if isinstance(key, StorageKey) else key


def create_backend(config: CrmConfig) -> KeyValueBackend:
    """Build the backend selected by ``config.storage.backend``.

    Raises
    ------
    StorageError
        If the backend cannot be opened.
    """
    backend = config.storage.backend
    if backend == "memory":
        return MemoryBackend()
    if backend == "postgres":
        return PostgresBackend(config.postgres.connection_string, table=config.postgres.table)
    return JsonFileBackend(config.storage.data_dir)


def open_store(config: CrmConfig) -> KeyValueStore:
    """Open the configured store, falling back to memory if it is unavailable."""
    try:
        backend = create_backend(config)
    except StorageError as e:
        logger.error("Storage backend %s unavailable, using memory: %s", config.storage.backend, e)
        backend = MemoryBackend()
    return KeyValueStore(backend, pretty=config.storage.pretty_json)
