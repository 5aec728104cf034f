"""
Database configuration for persisted game state.

All state lives in one key/value table; the game stores are schema-free JSON
records keyed by ``<player>:<slot>``. Any SQLAlchemy URL works, ``sqlite:///``
included.
"""
from typing import Optional

from sqlalchemy import Column, DateTime, MetaData, String, Table, Text, create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import func

metadata = MetaData()

# Connection pooling for server databases
POOL_SIZE = 10
MAX_OVERFLOW = 20
POOL_TIMEOUT = 30
POOL_RECYCLE = 3600

kv_slots = Table(
    "kv_slots",
    metadata,
    Column("key", String(200), primary_key=True),
    Column("value", Text, nullable=False),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()),
)


def init_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url`` with pooling suited to its dialect."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # one shared connection, or every session sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    return create_engine(
        url,
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_timeout=POOL_TIMEOUT,
        pool_recycle=POOL_RECYCLE,
        pool_pre_ping=True,
    )


def create_all_tables(engine: Engine) -> None:
    """Idempotent: existing tables are left alone."""
    metadata.create_all(bind=engine)


def drop_all_tables(engine: Engine) -> None:
    """Destructive. Tests only."""
    metadata.drop_all(bind=engine)


def describe_url(database_url: Optional[str]) -> str:
    """URL with the password masked, for logs."""
    if not database_url:
        return "<memory>"
    return make_url(database_url).render_as_string(hide_password=True)
