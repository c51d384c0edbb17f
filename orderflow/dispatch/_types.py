"""
Dispatch types — drivers and their payouts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from orderflow._types import Money, Record, money


class DriverStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"
    BLOCKED = "blocked"


@dataclass(frozen=True, slots=True)
class DeliveryDriver:
    id: str
    name: str
    status: DriverStatus = DriverStatus.PENDING
    whatsapp: str = ""

    @property
    def is_approved(self) -> bool:
        return self.status is DriverStatus.APPROVED

    @classmethod
    def from_record(cls, record: Record) -> DeliveryDriver:
        return cls(
            id=str(record["id"]),
            name=record["name"],
            status=DriverStatus(record.get("status", DriverStatus.PENDING.value)),
            whatsapp=record.get("whatsapp") or "",
        )

    def to_record(self) -> Record:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "whatsapp": self.whatsapp,
        }


@dataclass(frozen=True, slots=True)
class DriverPayment:
    id: str
    driver_id: str
    amount: Money
    payment_date: datetime

    @classmethod
    def from_record(cls, record: Record) -> DriverPayment:
        return cls(
            id=str(record["id"]),
            driver_id=str(record["driver_id"]),
            amount=money(record["amount"]),
            payment_date=datetime.fromisoformat(record["payment_date"]),
        )


__all__ = ("DriverStatus", "DeliveryDriver", "DriverPayment")
