"""
Driver visibility and queue order.

An order is in the open pool when it is a broadcast delivery with no driver
in Em Preparo or Aguardando Retirada. A claimed order stays in its driver's
queue through Saiu para Entrega.

Queue rank, highest first, oldest first within a rank:

    4  Aguardando Retirada
    3  Em Preparo, unassigned
    2  Saiu para Entrega
    1  Em Preparo, assigned
    0  anything else
"""

from __future__ import annotations

from collections.abc import Iterable

from orderflow.orders import DeliveryOption, Order, OrderStatus


POOL_STATUSES = frozenset({OrderStatus.PREPARING, OrderStatus.AWAITING_PICKUP})
ASSIGNED_STATUSES = POOL_STATUSES | {OrderStatus.OUT_FOR_DELIVERY}


def is_available(order: Order) -> bool:
    return (
        order.is_delivery_broadcasted
        and order.assigned_driver_id is None
        and order.delivery_option is DeliveryOption.DELIVERY
        and order.status in POOL_STATUSES
    )


def is_visible_to(order: Order, driver_id: str) -> bool:
    if is_available(order):
        return True
    return order.assigned_driver_id == driver_id and order.status in ASSIGNED_STATUSES


def priority(order: Order) -> int:
    match order.status:
        case OrderStatus.AWAITING_PICKUP:
            return 4
        case OrderStatus.PREPARING if order.assigned_driver_id is None:
            return 3
        case OrderStatus.OUT_FOR_DELIVERY:
            return 2
        case OrderStatus.PREPARING:
            return 1
        case _:
            return 0


def available_orders(orders: Iterable[Order]) -> list[Order]:
    return sorted((o for o in orders if is_available(o)), key=lambda o: o.date)


def driver_queue(orders: Iterable[Order], driver_id: str) -> list[Order]:
    visible = [o for o in orders if is_visible_to(o, driver_id)]
    visible.sort(key=lambda o: o.date)
    visible.sort(key=priority, reverse=True)
    return visible


__all__ = (
    "POOL_STATUSES",
    "ASSIGNED_STATUSES",
    "is_available",
    "is_visible_to",
    "priority",
    "available_orders",
    "driver_queue",
)
