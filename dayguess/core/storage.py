"""
Key-value storage port for persisted game state.

The state machines only ever need ``get(key)`` and ``set(key, value)``.
``set`` reports failure by returning False and never raises.
"""

import logging
import threading
from typing import Dict, Optional, Protocol

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from dayguess.core.database import create_all_tables, describe_url, init_engine, kv_slots

logger = logging.getLogger("dayguess")


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> bool:
        ...


class InMemoryStorage:
    """Process-local storage. Lost on restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        with self._lock:
            self._data[key] = value
        return True

    def keys(self):
        with self._lock:
            return list(self._data)


class SqlStorage:
    """
    One row per slot in the ``kv_slots`` table.

    Each write touches only its own row, so one player's writes never
    disturb another player's slots.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, autoflush=False)

    @classmethod
    def from_url(cls, database_url: str) -> "SqlStorage":
        engine = init_engine(database_url)
        create_all_tables(engine)
        return cls(engine)

    def get(self, key: str) -> Optional[str]:
        with self._session_factory() as session:
            return session.execute(
                select(kv_slots.c.value).where(kv_slots.c.key == key)
            ).scalar_one_or_none()

    def set(self, key: str, value: str) -> bool:
        session = self._session_factory()
        try:
            result = session.execute(
                update(kv_slots).where(kv_slots.c.key == key).values(value=value)
            )
            if result.rowcount == 0:
                session.execute(insert(kv_slots).values(key=key, value=value))
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"[storage] write failed: {e}", extra={"event_type": "storage.write_failed", "key": key})
            return False
        finally:
            session.close()
        return True

    def keys(self):
        with self._session_factory() as session:
            return list(session.execute(select(kv_slots.c.key)).scalars())


def build_storage(settings_obj) -> KeyValueStorage:
    """Database-backed storage when DATABASE_URL is set, memory otherwise."""
    url = getattr(settings_obj, "DATABASE_URL", None)
    if not url:
        logger.info("[storage] DATABASE_URL not set, game state is kept in memory")
        return InMemoryStorage()
    logger.info(f"[storage] using database {describe_url(url)}")
    return SqlStorage.from_url(url)


class NamespacedStorage:
    """Prefix every key with ``<namespace>:`` on top of another storage."""

    def __init__(self, inner: KeyValueStorage, namespace: str):
        self._inner = inner
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Optional[str]:
        return self._inner.get(self._key(key))

    def set(self, key: str, value: str) -> bool:
        return self._inner.set(self._key(key), value)
