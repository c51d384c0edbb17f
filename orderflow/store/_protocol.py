"""
Record store — the external persistence boundary.

All methods return Result; adapters never raise for store failures.
``update_if`` is the compare-and-swap every contended write goes through.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from orderflow._errors import PersistenceError
from orderflow._types import Record, Result


class Tables:
    """Table names used by the engine."""

    SETTINGS = "settings"
    PRODUCTS = "products"
    ADDON_CATEGORIES = "addon_categories"
    COUPONS = "coupons"
    CUSTOMERS = "customers"
    ORDERS = "orders"
    DRIVERS = "delivery_drivers"
    DRIVER_PAYMENTS = "driver_payments"


class RecordStore(Protocol):
    """
    Example — any backend works as long as ``update_if`` is atomic:

        class RestStore:
            async def update_if(self, table, record_id, expected, patch):
                # PATCH /table?id=eq.<id>&<field>=eq.<value> — 0 rows = lost race
                ...
    """

    async def list_all(self, table: str) -> Result[list[Record], PersistenceError]:
        """Every record of a table, oldest first."""
        ...

    async def get(self, table: str, record_id: str) -> Result[Record | None, PersistenceError]:
        ...

    async def insert(self, table: str, record: Record) -> Result[Record, PersistenceError]:
        """Insert; generates ``id`` when missing. Duplicate ids fail."""
        ...

    async def update(
        self, table: str, record_id: str, patch: Mapping[str, Any]
    ) -> Result[Record | None, PersistenceError]:
        """Merge ``patch`` into the record. ``Ok(None)`` if it does not exist."""
        ...

    async def update_if(
        self,
        table: str,
        record_id: str,
        expected: Mapping[str, Any],
        patch: Mapping[str, Any],
    ) -> Result[Record | None, PersistenceError]:
        """
        Atomically merge ``patch`` only if every ``expected`` field still holds.

        Returns the updated record, or ``Ok(None)`` when the record is gone or
        a precondition failed (a missing field compares equal to ``None``).
        """
        ...

    async def delete(self, table: str, record_id: str) -> Result[bool, PersistenceError]:
        """Returns Ok(True) if the record existed."""
        ...


def matches(record: Mapping[str, Any], expected: Mapping[str, Any]) -> bool:
    return all(record.get(key) == value for key, value in expected.items())


__all__ = ("Tables", "RecordStore", "matches")
