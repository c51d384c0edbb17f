"""
Dispatch — drivers, the open delivery pool, claims and payouts.

    from orderflow import dispatch

    broker = dispatch.DriverAssignmentBroker(store)
    await broker.claim(order_id, driver_id)   # exactly one racing driver wins
    await broker.driver_queue(driver_id)
"""

from orderflow.dispatch._types import DriverStatus, DeliveryDriver, DriverPayment
from orderflow.dispatch._queue import (
    POOL_STATUSES,
    ASSIGNED_STATUSES,
    is_available,
    is_visible_to,
    priority,
    available_orders,
    driver_queue,
)
from orderflow.dispatch._roster import DriverRoster
from orderflow.dispatch._broker import DRIVER_STATUSES, DriverAssignmentBroker
from orderflow.dispatch._report import (
    DELIVERED,
    Period,
    period_range,
    custom_range,
    DeliveryStats,
    DriverBalance,
    delivery_stats,
    driver_balance,
)
from orderflow.dispatch._poller import NewDeliveryTracker, OrderPoller

__all__ = (
    "DriverStatus",
    "DeliveryDriver",
    "DriverPayment",
    "POOL_STATUSES",
    "ASSIGNED_STATUSES",
    "is_available",
    "is_visible_to",
    "priority",
    "available_orders",
    "driver_queue",
    "DriverRoster",
    "DRIVER_STATUSES",
    "DriverAssignmentBroker",
    "DELIVERED",
    "Period",
    "period_range",
    "custom_range",
    "DeliveryStats",
    "DriverBalance",
    "delivery_stats",
    "driver_balance",
    "NewDeliveryTracker",
    "OrderPoller",
)
