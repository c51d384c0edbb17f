"""
ClientSession — what one storefront client remembers between visits.

Passed explicitly into checkout and tracking; the engine keeps no
module-level session state.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from orderflow._types import Record
from orderflow.orders import DeliveryOption, Order


@dataclass(slots=True)
class ClientSession:
    tracked_order_id: str | None = None
    order_ids: list[str] = field(default_factory=list)
    last_address: str | None = None
    last_neighborhood: str | None = None
    has_spun_wheel: bool = False

    def record_order(self, order: Order) -> None:
        self.tracked_order_id = order.id
        if order.id not in self.order_ids:
            self.order_ids.append(order.id)
        if order.delivery_option is DeliveryOption.DELIVERY:
            self.last_address = order.delivery_address
            self.last_neighborhood = order.neighborhood

    def history(self, orders: Iterable[Order]) -> list[Order]:
        """This client's orders, newest first."""
        mine = set(self.order_ids)
        return sorted((o for o in orders if o.id in mine), key=lambda o: o.date, reverse=True)

    def tracked(self, orders: Iterable[Order]) -> Order | None:
        for order in orders:
            if order.id == self.tracked_order_id:
                return order
        return None

    def to_record(self) -> Record:
        return {
            "tracked_order_id": self.tracked_order_id,
            "order_ids": list(self.order_ids),
            "last_address": self.last_address,
            "last_neighborhood": self.last_neighborhood,
            "has_spun_wheel": self.has_spun_wheel,
        }

    @classmethod
    def from_record(cls, record: Record) -> ClientSession:
        return cls(
            tracked_order_id=record.get("tracked_order_id"),
            order_ids=list(record.get("order_ids") or ()),
            last_address=record.get("last_address"),
            last_neighborhood=record.get("last_neighborhood"),
            has_spun_wheel=bool(record.get("has_spun_wheel", False)),
        )


__all__ = ("ClientSession",)
