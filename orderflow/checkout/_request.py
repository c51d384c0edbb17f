"""
Checkout input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from orderflow._config import EngineConfig
from orderflow._types import Money
from orderflow.checkout._session import ClientSession
from orderflow.orders import DeliveryOption, PaymentMethod
from orderflow.store import RecordStore


@dataclass(frozen=True, slots=True)
class CheckoutLine:
    product_id: str
    size: str | None = None
    addons: frozenset[str] = frozenset()
    quantity: int = 1
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class CheckoutRequest:
    """
    Everything the customer (or the PDV operator) submitted.

    Prices are never taken from here: lines are re-priced from the catalog.
    """

    items: tuple[CheckoutLine, ...]
    customer_name: str
    payment_method: PaymentMethod
    delivery_option: DeliveryOption
    customer_id: str | None = None
    delivery_address: str | None = None
    neighborhood: str | None = None
    change_for: Money | None = None
    scheduled_time: datetime | None = None
    coupon_code: str | None = None
    loyalty_redeem: bool = False


@dataclass(slots=True)
class CheckoutContext:
    """Collaborators for one checkout run."""

    store: RecordStore
    config: EngineConfig = field(default_factory=EngineConfig)
    session: ClientSession | None = None


__all__ = ("CheckoutLine", "CheckoutRequest", "CheckoutContext")
