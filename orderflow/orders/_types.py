"""
Order snapshot and its enums.

An order is written once at checkout. Afterwards only ``status`` and the
driver-assignment fields change, always through the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from orderflow._types import Money, Record, ZERO, money
from orderflow.cart import CartItem


class OrderStatus(Enum):
    SCHEDULED = "Agendado"
    RECEIVED = "Recebido"
    PREPARING = "Em Preparo"
    AWAITING_PICKUP = "Aguardando Retirada"
    OUT_FOR_DELIVERY = "Saiu para Entrega"
    DELIVERED = "Entregue"
    PAID_AND_DELIVERED = "Pago e Entregue"
    CANCELLED = "Cancelado"


class DeliveryOption(Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"
    COUNTER = "counter"


class PaymentMethod(Enum):
    PIX_MACHINE = "pix-machine"
    CARD = "card"
    CASH = "cash"
    PIX_ONLINE = "pix-online"
    CREDIT = "credit"


@dataclass(frozen=True, slots=True)
class Order:
    id: str
    date: datetime
    customer_name: str
    items: tuple[CartItem, ...]
    subtotal: Money
    delivery_fee: Money
    total: Money
    payment_method: PaymentMethod
    delivery_option: DeliveryOption
    status: OrderStatus
    discount_amount: Money = ZERO
    shipping_discount_amount: Money = ZERO
    loyalty_discount_amount: Money = ZERO
    loyalty_shipping_discount_amount: Money = ZERO
    customer_id: str | None = None
    delivery_address: str | None = None
    neighborhood: str | None = None
    change_for: Money | None = None
    coupon_code: str | None = None
    scheduled_time: datetime | None = None
    assigned_driver_id: str | None = None
    assigned_driver_name: str | None = None
    is_delivery_broadcasted: bool = False

    # ═══════════════════════════════════════════════════════════════════════════
    # Record mapping
    # ═══════════════════════════════════════════════════════════════════════════

    def to_record(self) -> Record:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "customer_id": self.customer_id,
            "customer_name": self.customer_name,
            "items": [item.to_record() for item in self.items],
            "subtotal": str(self.subtotal),
            "delivery_fee": str(self.delivery_fee),
            "discount_amount": str(self.discount_amount),
            "shipping_discount_amount": str(self.shipping_discount_amount),
            "loyalty_discount_amount": str(self.loyalty_discount_amount),
            "loyalty_shipping_discount_amount": str(self.loyalty_shipping_discount_amount),
            "total": str(self.total),
            "payment_method": self.payment_method.value,
            "change_for": None if self.change_for is None else str(self.change_for),
            "delivery_option": self.delivery_option.value,
            "delivery_address": self.delivery_address,
            "neighborhood": self.neighborhood,
            "coupon_code": self.coupon_code,
            "status": self.status.value,
            "scheduled_time": self.scheduled_time.isoformat() if self.scheduled_time else None,
            "assigned_driver_id": self.assigned_driver_id,
            "assigned_driver_name": self.assigned_driver_name,
            "is_delivery_broadcasted": self.is_delivery_broadcasted,
        }

    @classmethod
    def from_record(cls, record: Record) -> Order:
        def opt_money(key: str) -> Money | None:
            value: Any = record.get(key)
            return None if value is None else money(value)

        scheduled = record.get("scheduled_time")
        return cls(
            id=str(record["id"]),
            date=datetime.fromisoformat(record["date"]),
            customer_id=record.get("customer_id"),
            customer_name=record.get("customer_name") or "",
            items=tuple(CartItem.from_record(i) for i in record.get("items") or ()),
            subtotal=money(record.get("subtotal")),
            delivery_fee=money(record.get("delivery_fee")),
            discount_amount=money(record.get("discount_amount")),
            shipping_discount_amount=money(record.get("shipping_discount_amount")),
            loyalty_discount_amount=money(record.get("loyalty_discount_amount")),
            loyalty_shipping_discount_amount=money(record.get("loyalty_shipping_discount_amount")),
            total=money(record.get("total")),
            payment_method=PaymentMethod(record["payment_method"]),
            change_for=opt_money("change_for"),
            delivery_option=DeliveryOption(record["delivery_option"]),
            delivery_address=record.get("delivery_address"),
            neighborhood=record.get("neighborhood"),
            coupon_code=record.get("coupon_code"),
            status=OrderStatus(record["status"]),
            scheduled_time=datetime.fromisoformat(scheduled) if scheduled else None,
            assigned_driver_id=record.get("assigned_driver_id"),
            assigned_driver_name=record.get("assigned_driver_name"),
            is_delivery_broadcasted=bool(record.get("is_delivery_broadcasted", False)),
        )


__all__ = ("OrderStatus", "DeliveryOption", "PaymentMethod", "Order")
