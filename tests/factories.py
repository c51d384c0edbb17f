"""Seed records and builders shared by the tests."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from orderflow import OrderflowError
from orderflow._types import Error, Ok, Result
from orderflow.checkout import CheckoutLine, CheckoutRequest
from orderflow.orders import DeliveryOption, Order, OrderStatus, PaymentMethod
from orderflow.store import Tables


# Wednesday, inside the 14:00-22:00 window
NOW = datetime(2026, 10, 14, 18, 0)
SUNDAY = datetime(2026, 10, 18, 18, 0)


PRODUCTS: list[dict[str, Any]] = [
    {
        "id": "burger",
        "name": "X-Burger",
        "price_type": "sized",
        "sizes": [
            {"name": "Pequeno", "price": "20.00"},
            {"name": "Grande", "price": "25.00"},
        ],
        "addon_categories": ["extras", "sauce"],
        "order": 1,
    },
    {"id": "soda", "name": "Refrigerante", "price_type": "fixed", "price": "5.00", "order": 2},
    {
        "id": "acai",
        "name": "Açaí",
        "sizes": [
            {"name": "300ml", "price": "12.00", "is_available": False},
            {"name": "500ml", "price": "16.00"},
        ],
        "order": 3,
    },
    {"id": "pie", "name": "Torta", "price_type": "fixed", "price": "8.00", "is_available": False},
]

ADDON_CATEGORIES: list[dict[str, Any]] = [
    {
        "id": "extras",
        "name": "Extras",
        "max_selection": 2,
        "addons": [
            {"id": "bacon", "name": "Bacon", "price": "4.00", "order": 1},
            {"id": "cheese", "name": "Queijo", "price": "3.00", "order": 2},
            {"id": "egg", "name": "Ovo", "price": "2.00", "is_available": False, "order": 3},
        ],
    },
    {
        "id": "sauce",
        "name": "Molho",
        "required": True,
        "addons": [
            {"id": "rules", "__selection_rules__": True, "min": 1, "max": 1},
            {"id": "ketchup", "name": "Ketchup", "price": "0"},
            {"id": "mustard", "name": "Mostarda", "price": "0"},
        ],
    },
]

COUPONS: list[dict[str, Any]] = [
    {
        "id": "c10",
        "code": "PROMO10",
        "discount_type": "fixed",
        "discount_value": "10",
        "minimum_order_value": "20",
    },
    {"id": "pct", "code": "DEZ", "discount_type": "percentage", "discount_value": "10"},
    {"id": "ship", "code": "FRETEGRATIS", "discount_type": "free_shipping", "discount_value": "0"},
    {
        "id": "old",
        "code": "VELHO",
        "discount_type": "fixed",
        "discount_value": "5",
        "expires_at": "2026-01-01T00:00:00",
    },
]

SETTINGS: dict[str, Any] = {
    "id": "main",
    "name": "Lanchonete Central",
    "delivery": {
        "type": "neighborhood",
        "fixed_fee": "5.00",
        "neighborhoods": [
            {"name": "Centro", "fee": "3.00"},
            {"name": "BairroX", "fee": "7.00"},
        ],
    },
    "loyalty_program": {
        "enabled": True,
        "points_per_real": 1,
        "points_for_reward": 100,
        "reward_type": "fixed",
        "reward_value": "10",
    },
}

CUSTOMERS: list[dict[str, Any]] = [
    {"id": "ana", "name": "Ana", "loyalty_points": 120, "used_coupons": ["DEZ"]},
    {"id": "bruno", "name": "Bruno", "loyalty_points": 80, "used_coupons": []},
]

DRIVERS: list[dict[str, Any]] = [
    {"id": "d1", "name": "Carlos", "status": "approved", "whatsapp": "11999990001"},
    {"id": "d2", "name": "Diego", "status": "approved", "whatsapp": "11999990002"},
    {"id": "d3", "name": "Eva", "status": "pending", "whatsapp": "11999990003"},
]


def seed() -> dict[str, list[dict[str, Any]]]:
    return {
        Tables.SETTINGS: [SETTINGS],
        Tables.PRODUCTS: PRODUCTS,
        Tables.ADDON_CATEGORIES: ADDON_CATEGORIES,
        Tables.COUPONS: COUPONS,
        Tables.CUSTOMERS: CUSTOMERS,
        Tables.DRIVERS: DRIVERS,
    }


def make_order(
    order_id: str,
    *,
    status: OrderStatus = OrderStatus.PREPARING,
    minute: int = 0,
    driver: str | None = None,
    broadcast: bool = True,
    option: DeliveryOption = DeliveryOption.DELIVERY,
    fee: str = "5.00",
) -> Order:
    return Order(
        id=order_id,
        date=NOW.replace(minute=minute),
        customer_name="Cliente",
        items=(),
        subtotal=Decimal("30.00"),
        delivery_fee=Decimal(fee),
        total=Decimal("30.00") + Decimal(fee),
        payment_method=PaymentMethod.CASH,
        delivery_option=option,
        status=status,
        delivery_address="Rua A, 10" if option is DeliveryOption.DELIVERY else None,
        neighborhood="Centro" if option is DeliveryOption.DELIVERY else None,
        assigned_driver_id=driver,
        assigned_driver_name=None if driver is None else f"driver {driver}",
        is_delivery_broadcasted=broadcast,
    )


def burger_line(quantity: int = 2) -> CheckoutLine:
    return CheckoutLine("burger", size="Grande", addons=frozenset({"ketchup"}), quantity=quantity)


def delivery_request(**overrides: Any) -> CheckoutRequest:
    fields: dict[str, Any] = {
        "items": (burger_line(),),
        "customer_name": "Ana",
        "payment_method": PaymentMethod.PIX_ONLINE,
        "delivery_option": DeliveryOption.DELIVERY,
        "delivery_address": "Rua das Flores, 42",
        "neighborhood": "BairroX",
    }
    fields.update(overrides)
    return CheckoutRequest(**fields)


def ok[T](result: Result[T, Any]) -> T:
    match result:
        case Ok(value):
            return value
        case Error(e):
            raise AssertionError(f"expected Ok, got {e!r}")


def err(result: Result[Any, OrderflowError]) -> OrderflowError:
    match result:
        case Ok(value):
            raise AssertionError(f"expected Error, got Ok({value!r})")
        case Error(e):
            return e
