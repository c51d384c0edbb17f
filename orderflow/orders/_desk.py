"""
OrderDesk — staff-side reads and writes on stored orders.

Status and assignment changes go out as one conditional write: the record
is only patched if its status (and, when the assignment changes, its
driver) is still what was read. A lost race surfaces as
ASSIGNMENT_CHANGED so the caller refreshes instead of overwriting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Any

from orderflow._errors import Errors, OrderflowError
from orderflow._types import Error, Ok, Record, Result
from orderflow.orders._lifecycle import OrderLifecycle, active_orders, kanban, scheduled_orders
from orderflow.orders._types import DeliveryOption, Order, OrderStatus
from orderflow.store import RecordStore, Tables


logger = logging.getLogger(__name__)


class Keep(Enum):
    """Marker for "leave this field as it is" in ``OrderUpdate``."""

    KEEP = auto()


KEEP = Keep.KEEP


@dataclass(frozen=True, slots=True)
class OrderUpdate:
    """
    One combined status/assignment change.

    ``driver_id=None`` clears the assignment; ``KEEP`` leaves it alone. The
    stored driver name always comes from the roster, so ``driver_name`` is
    replaced before the write.
    """

    order_id: str
    status: OrderStatus | None = None
    driver_id: str | None | Keep = KEEP
    driver_name: str | None | Keep = KEEP
    broadcast: bool | None = None

    @property
    def touches_assignment(self) -> bool:
        return (
            self.driver_id is not KEEP
            or self.driver_name is not KEEP
            or self.broadcast is not None
        )

    def patch(self) -> Record:
        patch: Record = {}
        if self.status is not None:
            patch["status"] = self.status.value
        if self.driver_id is not KEEP:
            patch["assigned_driver_id"] = self.driver_id
            if self.driver_id is None and self.driver_name is KEEP:
                patch["assigned_driver_name"] = None
        if self.driver_name is not KEEP:
            patch["assigned_driver_name"] = self.driver_name
        if self.broadcast is not None:
            patch["is_delivery_broadcasted"] = self.broadcast
        return patch


async def load_order(store: RecordStore, order_id: str) -> Result[Order, OrderflowError]:
    match await store.get(Tables.ORDERS, order_id):
        case Ok(None):
            return Error(Errors.unknown("order", order_id))
        case Ok(record):
            return Ok(Order.from_record(record))
        case Error(e):
            return Error(e)


async def load_orders(store: RecordStore) -> Result[list[Order], OrderflowError]:
    match await store.list_all(Tables.ORDERS):
        case Ok(records):
            return Ok([Order.from_record(r) for r in records])
        case Error(e):
            return Error(e)


async def write_order(
    store: RecordStore,
    order: Order,
    expected: Record,
    patch: Record,
) -> Result[Order, OrderflowError]:
    """Conditional patch of a loaded order; ASSIGNMENT_CHANGED on a lost race."""
    match await store.update_if(Tables.ORDERS, order.id, expected, patch):
        case Ok(None):
            logger.warning("order %s changed underneath %s", order.id, sorted(patch))
            return Error(Errors.assignment_changed(order.id))
        case Ok(record):
            return Ok(Order.from_record(record))
        case Error(e):
            return Error(e)


class OrderDesk:
    """
    Example:
        desk = OrderDesk(store)
        await desk.update(OrderUpdate("o-1", status=OrderStatus.PREPARING, broadcast=True))
    """

    __slots__ = ("_store",)

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def get(self, order_id: str) -> Result[Order, OrderflowError]:
        return await load_order(self._store, order_id)

    async def orders(self) -> Result[list[Order], OrderflowError]:
        return await load_orders(self._store)

    async def update(self, update: OrderUpdate) -> Result[Order, OrderflowError]:
        match await load_order(self._store, update.order_id):
            case Ok(order):
                pass
            case Error(e):
                return Error(e)

        if update.status is not None:
            match OrderLifecycle.transition(order, update.status):
                case Error(e):
                    return Error(e)
                case Ok(_):
                    pass
        if update.touches_assignment and OrderLifecycle.is_closed(order.status):
            return Error(Errors.closed_order(order.id, order.status.value))

        match update.driver_id:
            case str(driver_id):
                match await self._approved_driver(order, driver_id):
                    case Ok(name):
                        update = replace(update, driver_name=name)
                    case Error(e):
                        return Error(e)
            case None:
                update = replace(update, driver_name=None)
            case _:
                update = replace(update, driver_name=KEEP)

        patch = update.patch()
        if not patch:
            return Ok(order)

        expected: dict[str, Any] = {"status": order.status.value}
        if update.touches_assignment:
            expected["assigned_driver_id"] = order.assigned_driver_id

        result = await write_order(self._store, order, expected, patch)
        if isinstance(result, Ok):
            logger.info("order %s updated: %s", order.id, patch)
        return result

    async def _approved_driver(self, order: Order, driver_id: str) -> Result[str, OrderflowError]:
        """Roster name of ``driver_id`` if it may take ``order``."""
        from orderflow.dispatch import DriverRoster  # dispatch imports orders

        if order.delivery_option is not DeliveryOption.DELIVERY:
            return Error(Errors.order_not_available(order.id))
        match await DriverRoster(self._store).approved(driver_id):
            case Ok(driver):
                return Ok(driver.name)
            case Error(e):
                return Error(e)

    async def set_status(self, order_id: str, status: OrderStatus) -> Result[Order, OrderflowError]:
        return await self.update(OrderUpdate(order_id, status=status))

    async def cancel(self, order_id: str) -> Result[Order, OrderflowError]:
        return await self.set_status(order_id, OrderStatus.CANCELLED)

    # ═══════════════════════════════════════════════════════════════════════════
    # Projections
    # ═══════════════════════════════════════════════════════════════════════════

    async def active_orders(self) -> Result[list[Order], OrderflowError]:
        match await self.orders():
            case Ok(orders):
                return Ok(active_orders(orders))
            case Error(e):
                return Error(e)

    async def kanban(self) -> Result[dict[OrderStatus, list[Order]], OrderflowError]:
        match await self.orders():
            case Ok(orders):
                return Ok(kanban(orders))
            case Error(e):
                return Error(e)

    async def scheduled_orders(self) -> Result[list[Order], OrderflowError]:
        match await self.orders():
            case Ok(orders):
                return Ok(scheduled_orders(orders))
            case Error(e):
                return Error(e)


__all__ = (
    "Keep",
    "KEEP",
    "OrderUpdate",
    "load_order",
    "load_orders",
    "write_order",
    "OrderDesk",
)
