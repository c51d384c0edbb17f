"""
Orders — snapshot, lifecycle, staff desk.

    from orderflow import orders

    desk = orders.OrderDesk(store)
    await desk.update(orders.OrderUpdate(order_id, status=orders.OrderStatus.PREPARING))
"""

from orderflow.orders._types import OrderStatus, DeliveryOption, PaymentMethod, Order
from orderflow.orders._lifecycle import (
    FINAL,
    CLOSED,
    KANBAN_COLUMNS,
    OrderLifecycle,
    active_orders,
    kanban,
    scheduled_orders,
    total_sales,
)
from orderflow.orders._desk import (
    Keep,
    KEEP,
    OrderUpdate,
    load_order,
    load_orders,
    write_order,
    OrderDesk,
)

__all__ = (
    "OrderStatus",
    "DeliveryOption",
    "PaymentMethod",
    "Order",
    "FINAL",
    "CLOSED",
    "KANBAN_COLUMNS",
    "OrderLifecycle",
    "active_orders",
    "kanban",
    "scheduled_orders",
    "total_sales",
    "Keep",
    "KEEP",
    "OrderUpdate",
    "load_order",
    "load_orders",
    "write_order",
    "OrderDesk",
)
