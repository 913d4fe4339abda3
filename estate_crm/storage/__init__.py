"""Local persistence: backends, serialization and the store adapter."""

from estate_crm.storage.backends import JsonFileBackend, MemoryBackend, PostgresBackend
from estate_crm.storage.store import KeyValueStore, StorageKey, create_backend, open_store

__all__ = [
    "JsonFileBackend",
    "KeyValueStore",
    "MemoryBackend",
    "PostgresBackend",
    "StorageKey",
    "create_backend",
    "open_store",
]
