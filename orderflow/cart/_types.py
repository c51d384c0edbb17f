"""
Cart line item.
"""

from __future__ import annotations

from dataclasses import dataclass

from orderflow._types import Money, Record, money
from orderflow.catalog import Addon, ProductSize


@dataclass(slots=True)
class CartItem:
    """
    One cart line.

    ``quantity`` and ``total_price`` change in place on increment/decrement;
    everything else is fixed when the line is added.
    """

    product_id: str
    product_name: str
    size: ProductSize
    addons: tuple[Addon, ...]
    quantity: int
    total_price: Money
    notes: str | None = None

    @property
    def unit_price(self) -> Money:
        return self.total_price / self.quantity

    def to_record(self) -> Record:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "size": {
                "name": self.size.name,
                "price": str(self.size.price),
                "is_available": self.size.is_available,
            },
            "addons": [
                {"id": a.id, "name": a.name, "price": str(a.price), "is_available": a.is_available}
                for a in self.addons
            ],
            "quantity": self.quantity,
            "total_price": str(self.total_price),
            "notes": self.notes,
        }

    @classmethod
    def from_record(cls, record: Record) -> CartItem:
        size = record["size"]
        return cls(
            product_id=str(record["product_id"]),
            product_name=record["product_name"],
            size=ProductSize(size["name"], money(size.get("price")), size.get("is_available", True)),
            addons=tuple(
                Addon(str(a["id"]), a["name"], money(a.get("price")), a.get("is_available", True))
                for a in record.get("addons") or ()
            ),
            quantity=int(record["quantity"]),
            total_price=money(record["total_price"]),
            notes=record.get("notes"),
        )


__all__ = ("CartItem",)
