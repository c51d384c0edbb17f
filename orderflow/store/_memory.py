"""
In-memory record store.

One asyncio lock serializes every write, which is what makes ``update_if``
atomic. Records are deep-copied in and out so callers never share state.
"""

from __future__ import annotations

import asyncio
import copy
import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from orderflow._errors import Errors, PersistenceError
from orderflow._types import Error, Ok, Record, Result
from orderflow.store._protocol import matches


class MemoryStore:
    """
    Example:
        store = MemoryStore({"products": [{"id": "p1", "name": "Açaí 500ml", ...}]})
    """

    def __init__(self, tables: Mapping[str, Iterable[Record]] | None = None) -> None:
        self._tables: dict[str, dict[str, Record]] = {}
        self._lock = asyncio.Lock()
        for table, records in (tables or {}).items():
            rows = self._tables.setdefault(table, {})
            for record in records:
                record = copy.deepcopy(dict(record))
                record.setdefault("id", uuid.uuid4().hex)
                rows[str(record["id"])] = record

    async def list_all(self, table: str) -> Result[list[Record], PersistenceError]:
        return Ok([copy.deepcopy(r) for r in self._tables.get(table, {}).values()])

    async def get(self, table: str, record_id: str) -> Result[Record | None, PersistenceError]:
        record = self._tables.get(table, {}).get(record_id)
        return Ok(copy.deepcopy(record) if record is not None else None)

    async def insert(self, table: str, record: Record) -> Result[Record, PersistenceError]:
        async with self._lock:
            stored = copy.deepcopy(dict(record))
            record_id = str(stored.setdefault("id", uuid.uuid4().hex))
            rows = self._tables.setdefault(table, {})
            if record_id in rows:
                return Error(Errors.store(f"Duplicate id {table}/{record_id}"))
            rows[record_id] = stored
            return Ok(copy.deepcopy(stored))

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
        async with self._lock:
            record = self._tables.get(table, {}).get(record_id)
            if record is None or not matches(record, expected):
                return Ok(None)
            record.update(copy.deepcopy(dict(patch)))
            record["id"] = record_id
            return Ok(copy.deepcopy(record))

    async def delete(self, table: str, record_id: str) -> Result[bool, PersistenceError]:
        async with self._lock:
            return Ok(self._tables.get(table, {}).pop(record_id, None) is not None)


__all__ = ("MemoryStore",)
