"""
SQLAlchemy record store.

Every table lives in one ``records`` table as a JSON document with a
version counter. Conditional writes read ``(body, version)``, check the
expected fields in Python, then issue

    UPDATE records SET body = :merged, version = version + 1
    WHERE table_name = :table AND id = :id AND version = :seen

A rowcount of 0 means another writer got in between; the read is retried a
bounded number of times before reporting WRITE_CONFLICT.

Usage:
    session_factory, engine = await create_database("sqlite+aiosqlite:///orders.db")
    store = SQLAlchemyStore(session_factory)
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime
from typing import Any, cast

from sqlalchemy import JSON, DateTime, Integer, String, delete, select
from sqlalchemy import update as update_stmt
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from orderflow._errors import Errors, PersistenceError
from orderflow._types import Error, Ok, Record, Result
from orderflow.store._protocol import matches


logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Schema
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


class RecordRow(Base):
    __tablename__ = "records"

    table_name: Mapped[str] = mapped_column(String(64), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    body: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


async def create_database(
    url: str = "sqlite+aiosqlite:///:memory:",
) -> tuple[async_sessionmaker[AsyncSession], AsyncEngine]:
    """Create the schema and return (session_factory, engine)."""
    engine = create_async_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    return async_sessionmaker(engine, expire_on_commit=False), engine


# ═══════════════════════════════════════════════════════════════════════════════
# Store
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        cas_attempts: int = 3,
    ) -> None:
        self._session_factory = session_factory
        self._attempts = cas_attempts

    @staticmethod
    def _key(table: str, record_id: str) -> Any:
        return (RecordRow.table_name == table) & (RecordRow.id == record_id)

    async def list_all(self, table: str) -> Result[list[Record], PersistenceError]:
        try:
            async with self._session_factory() as session:
                stmt = (
                    select(RecordRow.body)
                    .where(RecordRow.table_name == table)
                    .order_by(RecordRow.created_at, RecordRow.id)
                )
                result = await session.execute(stmt)
                return Ok([dict(body) for body in result.scalars()])
        except Exception as e:
            return Error(Errors.store(f"Failed to list {table}: {e}", e))

    async def get(self, table: str, record_id: str) -> Result[Record | None, PersistenceError]:
        try:
            async with self._session_factory() as session:
                stmt = select(RecordRow.body).where(self._key(table, record_id))
                body = (await session.execute(stmt)).scalar_one_or_none()
                return Ok(dict(body) if body is not None else None)
        except Exception as e:
            return Error(Errors.store(f"Failed to get {table}/{record_id}: {e}", e))

    async def insert(self, table: str, record: Record) -> Result[Record, PersistenceError]:
        body = dict(record)
        record_id = str(body.setdefault("id", uuid.uuid4().hex))
        now = datetime.now()
        try:
            async with self._session_factory() as session:
                session.add(
                    RecordRow(
                        table_name=table,
                        id=record_id,
                        version=1,
                        body=body,
                        created_at=now,
                        updated_at=now,
                    )
                )
                await session.commit()
                return Ok(body)
        except IntegrityError as e:
            return Error(Errors.store(f"Duplicate id {table}/{record_id}", e))
        except Exception as e:
            return Error(Errors.store(f"Failed to insert into {table}: {e}", e))

    async def update(
        self, table: str, record_id: str, patch: Mapping[str, Any]
    ) -> Result[Record | None, PersistenceError]:
        return await self.update_if(table, record_id, {}, patch)

    async def update_if(
        self,
        table: str,
        record_id: str,
        expected: Mapping[str, Any],
        patch: Mapping[str, Any],
    ) -> Result[Record | None, PersistenceError]:
        try:
            for attempt in range(1, self._attempts + 1):
                async with self._session_factory() as session:
                    stmt = select(RecordRow.body, RecordRow.version).where(
                        self._key(table, record_id)
                    )
                    row = (await session.execute(stmt)).one_or_none()
                    if row is None:
                        return Ok(None)
                    body, version = row
                    if not matches(body, expected):
                        return Ok(None)

                    merged = {**body, **patch, "id": record_id}
                    write = (
                        update_stmt(RecordRow)
                        .where(self._key(table, record_id), RecordRow.version == version)
                        .values(body=merged, version=version + 1, updated_at=datetime.now())
                        .execution_options(synchronize_session=False)
                    )
                    cursor = cast(CursorResult[Any], await session.execute(write))
                    await session.commit()

                    if cursor.rowcount == 1:
                        return Ok(merged)

                logger.warning(
                    "version race on %s/%s (attempt %d/%d)",
                    table, record_id, attempt, self._attempts,
                )
            return Error(Errors.write_conflict(table, record_id))
        except Exception as e:
            return Error(Errors.store(f"Failed to update {table}/{record_id}: {e}", e))

    async def delete(self, table: str, record_id: str) -> Result[bool, PersistenceError]:
        try:
            async with self._session_factory() as session:
                stmt = (
                    delete(RecordRow)
                    .where(self._key(table, record_id))
                    .execution_options(synchronize_session=False)
                )
                cursor = cast(CursorResult[Any], await session.execute(stmt))
                await session.commit()
                return Ok(cursor.rowcount > 0)
        except Exception as e:
            return Error(Errors.store(f"Failed to delete {table}/{record_id}: {e}", e))


__all__ = ("Base", "RecordRow", "create_database", "SQLAlchemyStore")
