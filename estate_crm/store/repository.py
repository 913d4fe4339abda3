"""Owned in-memory collection mirrored to the key-value store."""

import logging
from dataclasses import fields, replace
from datetime import datetime
from typing import Callable, Generic, Iterable, Iterator, TypeVar

from estate_crm.storage.store import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Repository(Generic[T]):
    """One named collection: loaded once, saved after every mutation.

    Parameters
    ----------
    store : KeyValueStore
        Persistence adapter.
    key : str
        Storage key of the collection.
    entity_type : type[T]
        Dataclass of the stored records.
    id_field : str
        Name of the identity field on ``entity_type``.
    seed : Iterable[T] | None
        Records used (and persisted) when nothing is stored yet.
    clock : Callable[[], datetime]
        Source of mutation timestamps.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        entity_type: type[T],
        id_field: str,
        seed: Iterable[T] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.key = key
        self.entity_type = entity_type
        self.id_field = id_field
        self.clock = clock
        self._field_names = {f.name for f in fields(entity_type)}
        self._items: dict[str, T] = {}

        loaded = store.load(key, None, entity_type=entity_type)
        if loaded is None:
            self._set_items(seed or [])
            if self._items:
                self._persist()
        else:
            self._set_items(loaded)
        logger.debug("Loaded %d records for %s", len(self._items), key)

    def _set_items(self, records: Iterable[T]) -> None:
        self._items = {getattr(record, self.id_field): record for record in records}

    def _persist(self) -> None:
        self.store.save(self.key, list(self._items.values()))

    def _stamp(self, entity: T) -> T:
        now = self.clock()
        changes = {}
        if "created_at" in self._field_names and getattr(entity, "created_at") is None:
            changes["created_at"] = now
        if "updated_at" in self._field_names:
            changes["updated_at"] = now
        return replace(entity, **changes) if changes else entity

    def all(self) -> list[T]:
        """Return a snapshot of every record, in insertion order."""
        return list(self._items.values())

    def get(self, entity_id: str | None) -> T | None:
        """Return the record with ``entity_id`` or None."""
        if entity_id is None:
            return None
        return self._items.get(entity_id)

    def upsert(self, entity: T) -> T:
        """Insert or replace a record, stamping its timestamps.

        Returns
        -------
        T
            The stored record (with timestamps applied).
        """
        stamped = self._stamp(entity)
        self._items[getattr(stamped, self.id_field)] = stamped
        self._persist()
        return stamped

    def delete(self, entity_id: str) -> bool:
        """Remove a record. Returns False if it was not present."""
        if entity_id not in self._items:
            return False
        del self._items[entity_id]
        self._persist()
        return True

    def replace_all(self, records: Iterable[T]) -> None:
        """Swap the whole collection, e.g. for a fresher remote snapshot."""
        self._set_items(records)
        self._persist()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._items
