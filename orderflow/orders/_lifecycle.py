"""
OrderLifecycle — status rules.

    Agendado ─┐
    Recebido ─┴→ Em Preparo → Aguardando Retirada → Saiu para Entrega → Entregue → Pago e Entregue
          (any non-terminal) → Cancelado

The arrows are the kanban order staff follow; the engine does not force it.
Any status may be set on an open order. Cancelado and Pago e Entregue are
final. Entregue only moves on to Pago e Entregue (settling a credit sale).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from orderflow._errors import Errors, ValidationError
from orderflow._types import ZERO, Error, Money, Ok, Result
from orderflow.orders._types import DeliveryOption, Order, OrderStatus


FINAL = frozenset({OrderStatus.CANCELLED, OrderStatus.PAID_AND_DELIVERED})
CLOSED = FINAL | {OrderStatus.DELIVERED}

KANBAN_COLUMNS = (
    OrderStatus.RECEIVED,
    OrderStatus.PREPARING,
    OrderStatus.AWAITING_PICKUP,
    OrderStatus.OUT_FOR_DELIVERY,
)


class OrderLifecycle:
    @staticmethod
    def initial_status(
        option: DeliveryOption,
        scheduled_time: datetime | None,
        now: datetime,
    ) -> OrderStatus:
        if option is DeliveryOption.COUNTER:
            return OrderStatus.DELIVERED
        if scheduled_time is not None and scheduled_time > now:
            return OrderStatus.SCHEDULED
        return OrderStatus.RECEIVED

    @staticmethod
    def is_closed(status: OrderStatus) -> bool:
        return status in CLOSED

    @staticmethod
    def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
        if current is target:
            return True
        if current in FINAL:
            return False
        if current is OrderStatus.DELIVERED:
            return target is OrderStatus.PAID_AND_DELIVERED
        return True

    @classmethod
    def transition(cls, order: Order, target: OrderStatus) -> Result[OrderStatus, ValidationError]:
        if not cls.can_transition(order.status, target):
            return Error(Errors.closed_order(order.id, order.status.value))
        return Ok(target)


# ═══════════════════════════════════════════════════════════════════════════════
# Projections
# ═══════════════════════════════════════════════════════════════════════════════


def active_orders(orders: Iterable[Order]) -> list[Order]:
    """Orders still in the kitchen/delivery flow, oldest first."""
    return sorted((o for o in orders if o.status not in CLOSED), key=lambda o: o.date)


def kanban(orders: Iterable[Order]) -> dict[OrderStatus, list[Order]]:
    columns: dict[OrderStatus, list[Order]] = {status: [] for status in KANBAN_COLUMNS}
    for order in sorted(orders, key=lambda o: o.date):
        if order.status in columns:
            columns[order.status].append(order)
    return columns


def scheduled_orders(orders: Iterable[Order]) -> list[Order]:
    return sorted(
        (o for o in orders if o.status is OrderStatus.SCHEDULED),
        key=lambda o: (o.scheduled_time or o.date, o.date),
    )


def total_sales(orders: Iterable[Order]) -> Money:
    """Sum of totals, cancelled orders excluded."""
    return sum((o.total for o in orders if o.status is not OrderStatus.CANCELLED), ZERO)


__all__ = (
    "FINAL",
    "CLOSED",
    "KANBAN_COLUMNS",
    "OrderLifecycle",
    "active_orders",
    "kanban",
    "scheduled_orders",
    "total_sales",
)
