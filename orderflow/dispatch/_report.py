"""
Driver earnings — deliveries in a period and the outstanding balance.

A driver earns the delivery fee of every order they delivered; the balance
is what they earned minus what the shop already paid them.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum

from orderflow._types import ZERO, Money
from orderflow.dispatch._types import DriverPayment
from orderflow.orders import Order, OrderStatus


DELIVERED = frozenset({OrderStatus.DELIVERED, OrderStatus.PAID_AND_DELIVERED})


class Period(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def period_range(period: Period, now: datetime) -> tuple[datetime, datetime]:
    """Start of the period (weeks start on Sunday) up to ``now``."""
    today = datetime.combine(now.date(), time.min)
    match period:
        case Period.DAY:
            start = today
        case Period.WEEK:
            start = today - timedelta(days=(now.weekday() + 1) % 7)
        case Period.MONTH:
            start = today.replace(day=1)
    return start, now


def custom_range(first: date, last: date) -> tuple[datetime, datetime]:
    """Whole days from ``first`` through ``last``."""
    return datetime.combine(first, time.min), datetime.combine(last, time.max)


@dataclass(frozen=True, slots=True)
class DeliveryStats:
    count: int
    total_fee: Money


@dataclass(frozen=True, slots=True)
class DriverBalance:
    total_fees: Money
    total_paid: Money

    @property
    def balance(self) -> Money:
        return self.total_fees - self.total_paid


def _delivered_by(orders: Iterable[Order], driver_id: str) -> list[Order]:
    return [o for o in orders if o.assigned_driver_id == driver_id and o.status in DELIVERED]


def delivery_stats(
    orders: Iterable[Order],
    driver_id: str,
    start: datetime,
    end: datetime,
) -> DeliveryStats:
    delivered = [o for o in _delivered_by(orders, driver_id) if start <= o.date <= end]
    return DeliveryStats(len(delivered), sum((o.delivery_fee for o in delivered), ZERO))


def driver_balance(
    orders: Iterable[Order],
    payments: Iterable[DriverPayment],
    driver_id: str,
) -> DriverBalance:
    return DriverBalance(
        total_fees=sum((o.delivery_fee for o in _delivered_by(orders, driver_id)), ZERO),
        total_paid=sum((p.amount for p in payments if p.driver_id == driver_id), ZERO),
    )


__all__ = (
    "DELIVERED",
    "Period",
    "period_range",
    "custom_range",
    "DeliveryStats",
    "DriverBalance",
    "delivery_stats",
    "driver_balance",
)
