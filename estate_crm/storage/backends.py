"""Key-value backends holding serialized collections.

Backends store opaque text under a string key and raise ``StorageError``
when the underlying medium cannot be read or written. Interpreting the text
is the job of ``KeyValueStore``.
"""

import logging
import re
from pathlib import Path
from typing import Protocol

from estate_crm.exceptions import StorageError

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")
_SAFE_TABLE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class KeyValueBackend(Protocol):
    """Minimal interface every storage backend implements."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, text: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class MemoryBackend:
    """Process-local backend, mostly for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, text: str) -> None:
        self._items[key] = text

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._items)


class JsonFileBackend:
    """Store each key as ``<key>.json`` inside a directory."""

    def __init__(self, data_dir: str | Path) -> None:
        """Initialize JSON file backend.

        Parameters
        ----------
        data_dir : str | Path
            Directory holding one JSON file per storage key. Created if
            missing.
        """
        self.data_dir = Path(data_dir)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create data directory {self.data_dir}: {e}") from e

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key {key!r}")
        return self.data_dir / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def set_item(self, key: str, text: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(text, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot remove {key}: {e}") from e

    def keys(self) -> list[str]:
        return sorted(p.stem for p in self.data_dir.glob("*.json"))


class PostgresBackend:
    """Store each key as one row of a two-column PostgreSQL table."""

    def __init__(self, conninfo: str, table: str = "crm_storage") -> None:
        """Connect and make sure the storage table exists.

        Parameters
        ----------
        conninfo : str
            libpq connection string.
        table : str
            Table name; must be a plain SQL identifier.
        """
        import psycopg

        if not _SAFE_TABLE.match(table):
            raise StorageError(f"Invalid table name {table!r}")
        self.table = table
        self._psycopg = psycopg
        try:
            self.conn = psycopg.connect(conninfo)
            with self.conn.cursor() as cur:
                cur.execute(
                    f"CREATE TABLE IF NOT EXISTS {table} ("
                    "key TEXT PRIMARY KEY, "
                    "value TEXT NOT NULL, "
                    "updated_at TIMESTAMPTZ NOT NULL DEFAULT now())"
                )
            self.conn.commit()
        except psycopg.Error as e:
            raise StorageError(f"Cannot open PostgreSQL storage: {e}") from e
        logger.info("PostgreSQL storage ready (table %s)", table)

    def get_item(self, key: str) -> str | None:
        try:
            with self.conn.cursor() as cur:
                cur.execute(f"SELECT value FROM {self.table} WHERE key = %s", (key,))  # noqa: S608
                row = cur.fetchone()
        except self._psycopg.Error as e:
            raise StorageError(f"Cannot read {key}: {e}") from e
        return row[0] if row else None

    def set_item(self, key: str, text: str) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    f"INSERT INTO {self.table} (key, value) VALUES (%s, %s) "  # noqa: S608
                    "ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value, updated_at = now()",
                    (key, text),
                )
            self.conn.commit()
        except self._psycopg.Error as e:
            self.conn.rollback()
            raise StorageError(f"Cannot write {key}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute(f"DELETE FROM {self.table} WHERE key = %s", (key,))  # noqa: S608
            self.conn.commit()
        except self._psycopg.Error as e:
            self.conn.rollback()
            raise StorageError(f"Cannot remove {key}: {e}") from e

    def keys(self) -> list[str]:
        try:
            with self.conn.cursor() as cur:
                cur.execute(f"SELECT key FROM {self.table} ORDER BY key")  # noqa: S608
                return [row[0] for row in cur.fetchall()]
        except self._psycopg.Error as e:
            raise StorageError(f"Cannot list keys: {e}") from e

    def close(self) -> None:
        self.conn.close()
