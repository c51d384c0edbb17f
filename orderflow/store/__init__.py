"""
Store — the record store protocol and two adapters.

    from orderflow import store

    mem = store.MemoryStore()
    session_factory, engine = await store.create_database(url)
    sql = store.SQLAlchemyStore(session_factory)
"""

from orderflow.store._protocol import Tables, RecordStore, matches
from orderflow.store._memory import MemoryStore
from orderflow.store._sqlalchemy import (
    Base,
    RecordRow,
    create_database,
    SQLAlchemyStore,
)

__all__ = (
    "Tables",
    "RecordStore",
    "matches",
    "MemoryStore",
    "Base",
    "RecordRow",
    "create_database",
    "SQLAlchemyStore",
)
