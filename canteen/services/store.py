"""Key-value storage port.

The application keeps its whole state as a handful of named JSON values. Two
backends implement the port: ``MemoryStore`` (tests, ``memory://``) and
``SqlStore`` (one ``kv_entries`` row per key). Both hand out fresh copies so a
caller can never mutate stored state by reference.
"""
from __future__ import annotations
import json
import logging
import threading
from typing import Any, Optional, Protocol

from sqlalchemy import create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from canteen.errors import StorageUnavailable
from canteen.models.kv import Base, KeyValueEntry

logger = logging.getLogger(__name__)

MEMORY_URL = 'memory://'


class KeyValueStore(Protocol):
    lock: Any

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """In-process store; values are kept JSON encoded like browser storage."""

    def __init__(self, quota_bytes: Optional[int] = None):
        self._data: dict[str, str] = {}
        self.quota_bytes = quota_bytes
        self.lock = threading.RLock()

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        if self.quota_bytes is not None:
            used = sum(len(v) for k, v in self._data.items() if k != key)
            if used + len(encoded) > self.quota_bytes:
                logger.warning('storage quota exceeded writing %s (%d bytes)', key, len(encoded))
                raise StorageUnavailable('Storage quota exceeded', key=key)
        self._data[key] = encoded

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return sorted(self._data)


class SqlStore:
    def __init__(self, url: str, create_tables: bool = True):
        if url.endswith(':memory:'):
            # a single shared connection keeps the in-memory database alive
            self.engine = create_engine(
                url,
                future=True,
                connect_args={'check_same_thread': False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(url, future=True)
        self.Session = sessionmaker(bind=self.engine, expire_on_commit=False, autoflush=False)
        self.lock = threading.RLock()
        if create_tables:
            Base.metadata.create_all(self.engine, checkfirst=True)

    def get(self, key: str, default: Any = None) -> Any:
        try:
            with self.Session() as session:
                row = session.get(KeyValueEntry, key)
                return default if row is None else row.value
        except SQLAlchemyError as e:
            logger.error('storage read failed for %s: %s', key, e)
            raise StorageUnavailable(key=key) from e

    def set(self, key: str, value: Any) -> None:
        try:
            with self.Session() as session, session.begin():
                row = session.get(KeyValueEntry, key)
                if row is None:
                    session.add(KeyValueEntry(key=key, value=value))
                else:
                    row.value = value
        except SQLAlchemyError as e:
            logger.error('storage write failed for %s: %s', key, e)
            raise StorageUnavailable(key=key) from e

    def remove(self, key: str) -> None:
        try:
            with self.Session() as session, session.begin():
                row = session.get(KeyValueEntry, key)
                if row is not None:
                    session.delete(row)
        except SQLAlchemyError as e:
            logger.error('storage delete failed for %s: %s', key, e)
            raise StorageUnavailable(key=key) from e

    def keys(self):
        try:
            with self.Session() as session:
                return list(session.execute(select(KeyValueEntry.key).order_by(KeyValueEntry.key)).scalars())
        except SQLAlchemyError as e:
            raise StorageUnavailable() from e


def open_store(url: Optional[str]) -> KeyValueStore:
    if not url or url == MEMORY_URL:
        return MemoryStore()
    return SqlStore(url)


__all__ = ['KeyValueStore', 'MemoryStore', 'SqlStore', 'open_store', 'MEMORY_URL']
