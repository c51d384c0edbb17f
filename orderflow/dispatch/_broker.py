"""
DriverAssignmentBroker — who delivers which order.

Drivers claim orders from the open pool; staff broadcast, assign directly
or unassign. Every assignment write is a compare-and-swap at the store:

    claim     expects assigned_driver_id = null, is_delivery_broadcasted = true
    assign /
    broadcast /
    unassign  expect the assignment the staff member was looking at
    advance   expects the order still belongs to the driver

Each write also expects the status that was read, so a cancel in between
fails it. Exactly one of several racing writers wins and the rest get a
distinguishable error (ALREADY_CLAIMED / ASSIGNMENT_CHANGED) to refresh on.
"""

from __future__ import annotations

import logging

from orderflow._errors import Errors, OrderflowError
from orderflow._types import Error, Ok, Result
from orderflow.dispatch._queue import available_orders, driver_queue, is_available
from orderflow.dispatch._roster import DriverRoster
from orderflow.orders import (
    DeliveryOption,
    Order,
    OrderLifecycle,
    OrderStatus,
    load_order,
    load_orders,
    write_order,
)
from orderflow.store import RecordStore, Tables


logger = logging.getLogger(__name__)

DRIVER_STATUSES = frozenset({OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED})


class DriverAssignmentBroker:
    """
    Example:
        broker = DriverAssignmentBroker(store)
        match await broker.claim(order_id, driver_id):
            case Ok(order):
                ...
            case Error(e) if e.code == "ALREADY_CLAIMED":
                refresh()
    """

    __slots__ = ("_store", "_roster")

    def __init__(self, store: RecordStore) -> None:
        self._store = store
        self._roster = DriverRoster(store)

    # ═══════════════════════════════════════════════════════════════════════════
    # Views
    # ═══════════════════════════════════════════════════════════════════════════

    async def available_orders(self) -> Result[list[Order], OrderflowError]:
        match await load_orders(self._store):
            case Ok(orders):
                return Ok(available_orders(orders))
            case Error(e):
                return Error(e)

    async def driver_queue(self, driver_id: str) -> Result[list[Order], OrderflowError]:
        match await load_orders(self._store):
            case Ok(orders):
                return Ok(driver_queue(orders, driver_id))
            case Error(e):
                return Error(e)

    # ═══════════════════════════════════════════════════════════════════════════
    # Driver actions
    # ═══════════════════════════════════════════════════════════════════════════

    async def claim(self, order_id: str, driver_id: str) -> Result[Order, OrderflowError]:
        match await self._roster.approved(driver_id):
            case Ok(driver):
                pass
            case Error(e):
                return Error(e)

        match await load_order(self._store, order_id):
            case Ok(order):
                pass
            case Error(e):
                return Error(e)
        if order.assigned_driver_id is not None:
            return Error(Errors.already_claimed(order_id))
        if not is_available(order):
            return Error(Errors.order_not_available(order_id))

        updated = await self._store.update_if(
            Tables.ORDERS,
            order_id,
            {
                "assigned_driver_id": None,
                "is_delivery_broadcasted": True,
                "status": order.status.value,
            },
            {
                "assigned_driver_id": driver.id,
                "assigned_driver_name": driver.name,
                "is_delivery_broadcasted": True,
            },
        )
        match updated:
            case Ok(None):
                logger.info("claim of %s by %s lost the race", order_id, driver.name)
                return await self._lost_claim(order_id)
            case Ok(record):
                logger.info("order %s claimed by %s", order_id, driver.name)
                return Ok(Order.from_record(record))
            case Error(e):
                return Error(e)

    async def _lost_claim(self, order_id: str) -> Result[Order, OrderflowError]:
        match await load_order(self._store, order_id):
            case Ok(current) if current.assigned_driver_id is not None:
                return Error(Errors.already_claimed(order_id))
            case Ok(_):
                return Error(Errors.order_not_available(order_id))
            case Error(e):
                return Error(e)

    async def advance(
        self, order_id: str, driver_id: str, status: OrderStatus
    ) -> Result[Order, OrderflowError]:
        """Driver marks their order out for delivery or delivered."""
        if status not in DRIVER_STATUSES:
            return Error(Errors.invalid_status(status.value))
        match await load_order(self._store, order_id):
            case Ok(order):
                pass
            case Error(e):
                return Error(e)
        if order.assigned_driver_id != driver_id:
            return Error(Errors.not_assigned_to(order_id, driver_id))
        match OrderLifecycle.transition(order, status):
            case Error(e):
                return Error(e)
            case Ok(_):
                pass

        result = await write_order(
            self._store,
            order,
            {"assigned_driver_id": driver_id, "status": order.status.value},
            {"status": status.value},
        )
        if isinstance(result, Ok):
            logger.info("order %s -> %s by driver %s", order_id, status.value, driver_id)
        return result

    # ═══════════════════════════════════════════════════════════════════════════
    # Staff actions
    # ═══════════════════════════════════════════════════════════════════════════

    def _check_staff_target(self, order: Order) -> OrderflowError | None:
        if order.delivery_option is not DeliveryOption.DELIVERY:
            return Errors.order_not_available(order.id)
        if OrderLifecycle.is_closed(order.status):
            return Errors.closed_order(order.id, order.status.value)
        return None

    async def broadcast(self, order: Order) -> Result[Order, OrderflowError]:
        """Open ``order`` to every approved driver."""
        if (problem := self._check_staff_target(order)) is not None:
            return Error(problem)
        return await write_order(
            self._store,
            order,
            {"assigned_driver_id": order.assigned_driver_id, "status": order.status.value},
            {
                "assigned_driver_id": None,
                "assigned_driver_name": None,
                "is_delivery_broadcasted": True,
            },
        )

    async def assign(self, order: Order, driver_id: str) -> Result[Order, OrderflowError]:
        """Hand ``order`` straight to one driver."""
        if (problem := self._check_staff_target(order)) is not None:
            return Error(problem)
        match await self._roster.approved(driver_id):
            case Ok(driver):
                pass
            case Error(e):
                return Error(e)
        result = await write_order(
            self._store,
            order,
            {"assigned_driver_id": order.assigned_driver_id, "status": order.status.value},
            {
                "assigned_driver_id": driver.id,
                "assigned_driver_name": driver.name,
                "is_delivery_broadcasted": True,
            },
        )
        if isinstance(result, Ok):
            logger.info("order %s assigned to %s", order.id, driver.name)
        return result

    async def unassign(self, order: Order) -> Result[Order, OrderflowError]:
        """Clear driver and broadcast flag. Status is left as it is."""
        if OrderLifecycle.is_closed(order.status):
            return Error(Errors.closed_order(order.id, order.status.value))
        return await write_order(
            self._store,
            order,
            {"assigned_driver_id": order.assigned_driver_id, "status": order.status.value},
            {
                "assigned_driver_id": None,
                "assigned_driver_name": None,
                "is_delivery_broadcasted": False,
            },
        )


__all__ = ("DRIVER_STATUSES", "DriverAssignmentBroker")
