"""
Wire models — pydantic in/out types for the HTTP surface.

``*In`` models convert with ``to_domain()``, ``*Out`` models with
``from_domain()``. Money goes over the wire as decimal strings, times as
ISO-8601.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator

from orderflow.cart import CartItem
from orderflow.checkout import CheckoutLine, CheckoutRequest, Quote
from orderflow.orders import KEEP, DeliveryOption, Order, OrderStatus, OrderUpdate, PaymentMethod


# ═══════════════════════════════════════════════════════════════════════════════
# Requests
# ═══════════════════════════════════════════════════════════════════════════════


class CheckoutLineIn(BaseModel):
    product_id: str
    size: str | None = None
    addons: list[str] = []
    quantity: int = 1
    notes: str | None = None

    def to_domain(self) -> CheckoutLine:
        return CheckoutLine(
            product_id=self.product_id,
            size=self.size,
            addons=frozenset(self.addons),
            quantity=self.quantity,
            notes=self.notes,
        )


class CheckoutIn(BaseModel):
    items: list[CheckoutLineIn]
    customer_name: str
    payment_method: PaymentMethod
    delivery_option: DeliveryOption
    customer_id: str | None = None
    delivery_address: str | None = None
    neighborhood: str | None = None
    change_for: Decimal | None = None
    scheduled_time: datetime | None = None
    coupon_code: str | None = None
    loyalty_redeem: bool = False

    @field_validator("scheduled_time")
    @classmethod
    def _shop_local(cls, value: datetime | None) -> datetime | None:
        """Engine times are naive shop-local; offsets are converted on the way in."""
        if value is not None and value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value

    def to_domain(self) -> CheckoutRequest:
        return CheckoutRequest(
            items=tuple(line.to_domain() for line in self.items),
            customer_name=self.customer_name,
            payment_method=self.payment_method,
            delivery_option=self.delivery_option,
            customer_id=self.customer_id,
            delivery_address=self.delivery_address,
            neighborhood=self.neighborhood,
            change_for=self.change_for,
            scheduled_time=self.scheduled_time,
            coupon_code=self.coupon_code or None,
            loyalty_redeem=self.loyalty_redeem,
        )


class OrderUpdateIn(BaseModel):
    """Fields left out are kept; ``driver_id: null`` clears the driver."""

    status: OrderStatus | None = None
    driver_id: str | None = None
    driver_name: str | None = None
    broadcast: bool | None = None

    def to_domain(self, order_id: str) -> OrderUpdate:
        given = self.model_fields_set
        return OrderUpdate(
            order_id=order_id,
            status=self.status,
            driver_id=self.driver_id if "driver_id" in given else KEEP,
            driver_name=self.driver_name if "driver_name" in given else KEEP,
            broadcast=self.broadcast,
        )


class ClaimIn(BaseModel):
    driver_id: str


# ═══════════════════════════════════════════════════════════════════════════════
# Responses
# ═══════════════════════════════════════════════════════════════════════════════


class CartItemOut(BaseModel):
    product_id: str
    product_name: str
    size: str
    addons: list[str]
    quantity: int
    total_price: str
    notes: str | None = None

    @classmethod
    def from_domain(cls, item: CartItem) -> CartItemOut:
        return cls(
            product_id=item.product_id,
            product_name=item.product_name,
            size=item.size.name,
            addons=[a.name for a in item.addons],
            quantity=item.quantity,
            total_price=str(item.total_price),
            notes=item.notes,
        )


class OrderOut(BaseModel):
    id: str
    date: str
    customer_name: str
    items: list[CartItemOut]
    subtotal: str
    delivery_fee: str
    discount_amount: str
    shipping_discount_amount: str
    loyalty_discount_amount: str
    loyalty_shipping_discount_amount: str
    total: str
    payment_method: str
    delivery_option: str
    delivery_address: str | None = None
    neighborhood: str | None = None
    coupon_code: str | None = None
    status: str
    scheduled_time: str | None = None
    assigned_driver_id: str | None = None
    assigned_driver_name: str | None = None
    is_delivery_broadcasted: bool

    @classmethod
    def from_domain(cls, order: Order) -> OrderOut:
        return cls(
            id=order.id,
            date=order.date.isoformat(),
            customer_name=order.customer_name,
            items=[CartItemOut.from_domain(i) for i in order.items],
            subtotal=str(order.subtotal),
            delivery_fee=str(order.delivery_fee),
            discount_amount=str(order.discount_amount),
            shipping_discount_amount=str(order.shipping_discount_amount),
            loyalty_discount_amount=str(order.loyalty_discount_amount),
            loyalty_shipping_discount_amount=str(order.loyalty_shipping_discount_amount),
            total=str(order.total),
            payment_method=order.payment_method.value,
            delivery_option=order.delivery_option.value,
            delivery_address=order.delivery_address,
            neighborhood=order.neighborhood,
            coupon_code=order.coupon_code,
            status=order.status.value,
            scheduled_time=order.scheduled_time.isoformat() if order.scheduled_time else None,
            assigned_driver_id=order.assigned_driver_id,
            assigned_driver_name=order.assigned_driver_name,
            is_delivery_broadcasted=order.is_delivery_broadcasted,
        )


class QuoteOut(BaseModel):
    subtotal: str
    delivery_fee: str
    discount_amount: str
    shipping_discount_amount: str
    loyalty_discount_amount: str
    loyalty_shipping_discount_amount: str
    total: str
    item_count: int
    coupon_code: str | None = None
    remaining_points: int | None = None

    @classmethod
    def from_domain(cls, quote: Quote) -> QuoteOut:
        b = quote.breakdown
        return cls(
            subtotal=str(b.subtotal),
            delivery_fee=str(b.delivery_fee),
            discount_amount=str(b.discount_amount),
            shipping_discount_amount=str(b.shipping_discount_amount),
            loyalty_discount_amount=str(b.loyalty_discount_amount),
            loyalty_shipping_discount_amount=str(b.loyalty_shipping_discount_amount),
            total=str(b.total),
            item_count=quote.item_count,
            coupon_code=quote.coupon_code,
            remaining_points=quote.remaining_points,
        )


class SlotsOut(BaseModel):
    is_open: bool
    message: str
    slots: list[str]


class ErrorOut(BaseModel):
    code: str
    message: str


__all__ = (
    "CheckoutLineIn",
    "CheckoutIn",
    "OrderUpdateIn",
    "ClaimIn",
    "CartItemOut",
    "OrderOut",
    "QuoteOut",
    "SlotsOut",
    "ErrorOut",
)
