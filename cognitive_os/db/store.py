"""
Key-Value Store

Small storage interface used by the rating engine and performance tracker.
Values are JSON-serialisable documents; implementations are swappable
without touching engine logic.
"""

from typing import Any, Optional
import json
import logging

from sqlalchemy.exc import SQLAlchemyError

from .models import KeyValueRecord
from .session import DatabaseSession

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a persistence read or write fails."""


class KeyValueStore:
    """Storage interface: get/set/remove by key."""

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def keys(self, prefix: str = "") -> list[str]:
        raise NotImplementedError


def _encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise StorageError(f"Cannot encode value for '{key}': {e}") from e


def _decode(key: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as e:
        raise StorageError(f"Corrupt value stored under '{key}': {e}") from e


class MemoryStore(KeyValueStore):
    """
    In-process store.

    Values are kept encoded so callers never share mutable state
    with the store, matching the behaviour of persistent backends.
    """

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return None
        return _decode(key, raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = _encode(key, value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SqlStore(KeyValueStore):
    """
    Store backed by the kv_records table.

    Wraps SQLAlchemy errors in StorageError so callers handle a
    single failure type.
    """

    def __init__(self, db: DatabaseSession):
        self.db = db

    def get(self, key: str) -> Optional[Any]:
        try:
            with self.db.get_session() as session:
                record = session.get(KeyValueRecord, key)
                raw = record.value if record else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read '{key}': {e}") from e
        if raw is None:
            return None
        return _decode(key, raw)

    def set(self, key: str, value: Any) -> None:
        raw = _encode(key, value)
        try:
            with self.db.get_session() as session:
                record = session.get(KeyValueRecord, key)
                if record:
                    record.value = raw
                else:
                    session.add(KeyValueRecord(key=key, value=raw))
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write '{key}': {e}") from e

    def remove(self, key: str) -> None:
        try:
            with self.db.get_session() as session:
                record = session.get(KeyValueRecord, key)
                if record:
                    session.delete(record)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to remove '{key}': {e}") from e

    def keys(self, prefix: str = "") -> list[str]:
        try:
            with self.db.get_session() as session:
                rows = (
                    session.query(KeyValueRecord.key)
                    .filter(KeyValueRecord.key.startswith(prefix, autoescape=True))
                    .order_by(KeyValueRecord.key)
                    .all()
                )
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list keys under '{prefix}': {e}") from e
        return [row[0] for row in rows]
