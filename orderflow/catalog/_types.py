"""
Catalog types — products, sizes, addons, coupons.

Owned by the catalog store; the engine only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from orderflow._types import Money, ZERO


SINGLE_SIZE_NAME = "Único"


class PricingMode(Enum):
    FIXED = "fixed"
    SIZED = "sized"


class DiscountType(Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"
    FREE_SHIPPING = "free_shipping"


# ═══════════════════════════════════════════════════════════════════════════════
# Products
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ProductSize:
    name: str
    price: Money
    is_available: bool = True


@dataclass(frozen=True, slots=True)
class Product:
    id: str
    name: str
    pricing_mode: PricingMode = PricingMode.SIZED
    price: Money = ZERO
    sizes: tuple[ProductSize, ...] = ()
    addon_category_ids: tuple[str, ...] = ()
    is_available: bool = True
    category_id: str | None = None

    @property
    def sellable_sizes(self) -> tuple[ProductSize, ...]:
        """
        Sizes a customer may pick.

        A fixed-price product sells as one synthetic size carrying its price.
        """
        if self.pricing_mode is PricingMode.FIXED:
            return (ProductSize(SINGLE_SIZE_NAME, self.price),)
        return self.sizes

    def size(self, name: str) -> ProductSize | None:
        for size in self.sellable_sizes:
            if size.name == name:
                return size
        return None

    def default_size(self) -> ProductSize | None:
        """First available size, what the storefront preselects."""
        for size in self.sellable_sizes:
            if size.is_available:
                return size
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# Addons
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Addon:
    id: str
    name: str
    price: Money = ZERO
    is_available: bool = True


@dataclass(frozen=True, slots=True)
class AddonCategory:
    id: str
    name: str
    addons: tuple[Addon, ...] = ()
    required: bool = False
    min_selection: int = 0
    max_selection: int = 0  # 0 = unlimited

    def addon(self, addon_id: str) -> Addon | None:
        for addon in self.addons:
            if addon.id == addon_id:
                return addon
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# Coupons
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Coupon:
    id: str
    code: str
    discount_type: DiscountType
    discount_value: Money = ZERO
    minimum_order_value: Money | None = None
    description: str = ""
    expires_at: datetime | None = field(default=None)

    def matches(self, code: str) -> bool:
        return self.code.strip().casefold() == code.strip().casefold()

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now >= self.expires_at

    def meets_minimum(self, subtotal: Money) -> bool:
        return self.minimum_order_value is None or subtotal >= self.minimum_order_value


__all__ = (
    "SINGLE_SIZE_NAME",
    "PricingMode",
    "DiscountType",
    "ProductSize",
    "Product",
    "Addon",
    "AddonCategory",
    "Coupon",
)
