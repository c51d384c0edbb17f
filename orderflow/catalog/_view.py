"""
CatalogView — read-only projection of catalog records.

Built once per request from the raw store rows; lookups are by id and
coupon codes match case-insensitively.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from orderflow._types import Record, money
from orderflow.catalog._types import (
    Addon,
    AddonCategory,
    Coupon,
    DiscountType,
    PricingMode,
    Product,
    ProductSize,
)


RULES_MARKER = "__selection_rules__"


# ═══════════════════════════════════════════════════════════════════════════════
# Record Parsing
# ═══════════════════════════════════════════════════════════════════════════════


def _by_order(rows: Iterable[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    return sorted(rows, key=lambda r: r.get("order") or 0)


def product_from_record(record: Record) -> Product:
    sizes = tuple(
        ProductSize(
            name=s["name"],
            price=money(s.get("price")),
            is_available=s.get("is_available", True),
        )
        for s in record.get("sizes") or ()
    )
    mode = record.get("price_type")
    if mode is None:
        pricing_mode = PricingMode.SIZED if sizes else PricingMode.FIXED
    else:
        pricing_mode = PricingMode(mode)
    return Product(
        id=str(record["id"]),
        name=record["name"],
        pricing_mode=pricing_mode,
        price=money(record.get("price")),
        sizes=sizes,
        addon_category_ids=tuple(str(c) for c in record.get("addon_categories") or ()),
        is_available=record.get("is_available", True),
        category_id=record.get("category_id"),
    )


def addon_category_from_record(record: Record) -> AddonCategory:
    """
    Parse an addon category.

    Selection rules may live in explicit ``min_selection``/``max_selection``
    fields or in a pseudo-addon flagged with ``__selection_rules__``.
    """
    rows = list(record.get("addons") or ())
    rules = next((r for r in rows if r.get(RULES_MARKER)), None) or {}
    addons = tuple(
        Addon(
            id=str(a["id"]),
            name=a["name"],
            price=money(a.get("price")),
            is_available=a.get("is_available", True),
        )
        for a in _by_order(r for r in rows if not r.get(RULES_MARKER))
    )
    min_selection = record.get("min_selection")
    max_selection = record.get("max_selection")
    return AddonCategory(
        id=str(record["id"]),
        name=record["name"],
        addons=addons,
        required=bool(record.get("required", False)),
        min_selection=int(min_selection if min_selection is not None else rules.get("min") or 0),
        max_selection=int(max_selection if max_selection is not None else rules.get("max") or 0),
    )


def coupon_from_record(record: Record) -> Coupon:
    minimum = record.get("minimum_order_value")
    expires_at = record.get("expires_at")
    return Coupon(
        id=str(record["id"]),
        code=record["code"],
        discount_type=DiscountType(record["discount_type"]),
        discount_value=money(record.get("discount_value")),
        minimum_order_value=None if minimum is None else money(minimum),
        description=record.get("description") or "",
        expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
    )


def coupon_to_record(coupon: Coupon) -> Record:
    return {
        "id": coupon.id,
        "code": coupon.code,
        "description": coupon.description,
        "discount_type": coupon.discount_type.value,
        "discount_value": str(coupon.discount_value),
        "minimum_order_value": (
            None if coupon.minimum_order_value is None else str(coupon.minimum_order_value)
        ),
        "expires_at": coupon.expires_at.isoformat() if coupon.expires_at else None,
    }


# ═══════════════════════════════════════════════════════════════════════════════
# CatalogView
# ═══════════════════════════════════════════════════════════════════════════════


class CatalogView:
    __slots__ = ("_products", "_categories", "_coupons")

    def __init__(
        self,
        products: Iterable[Product] = (),
        categories: Iterable[AddonCategory] = (),
        coupons: Iterable[Coupon] = (),
    ) -> None:
        self._products = {p.id: p for p in products}
        self._categories = {c.id: c for c in categories}
        self._coupons = tuple(coupons)

    @classmethod
    def from_records(
        cls,
        products: Iterable[Record] = (),
        categories: Iterable[Record] = (),
        coupons: Iterable[Record] = (),
    ) -> CatalogView:
        return cls(
            (product_from_record(r) for r in _by_order(products)),
            (addon_category_from_record(r) for r in _by_order(categories)),
            (coupon_from_record(r) for r in coupons),
        )

    @property
    def products(self) -> tuple[Product, ...]:
        return tuple(self._products.values())

    @property
    def coupons(self) -> tuple[Coupon, ...]:
        return self._coupons

    def product(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def category(self, category_id: str) -> AddonCategory | None:
        return self._categories.get(category_id)

    def categories_for(self, product: Product) -> tuple[AddonCategory, ...]:
        """Addon categories attached to a product, in the product's order."""
        return tuple(
            self._categories[cid]
            for cid in product.addon_category_ids
            if cid in self._categories
        )

    def coupon(self, code: str) -> Coupon | None:
        for coupon in self._coupons:
            if coupon.matches(code):
                return coupon
        return None

    def with_coupon(self, coupon: Coupon) -> CatalogView:
        """Copy that also knows ``coupon`` (e.g. a freshly won prize)."""
        return CatalogView(
            self._products.values(),
            self._categories.values(),
            (*self._coupons, coupon),
        )


__all__ = (
    "CatalogView",
    "product_from_record",
    "addon_category_from_record",
    "coupon_from_record",
    "coupon_to_record",
)
