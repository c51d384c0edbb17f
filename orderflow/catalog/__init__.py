"""
Catalog — read-only view over products, addon categories and coupons.

    from orderflow import catalog

    view = catalog.CatalogView.from_records(products, categories, coupons)
    view.coupon("promo10")  # case-insensitive
"""

from orderflow.catalog._types import (
    SINGLE_SIZE_NAME,
    PricingMode,
    DiscountType,
    ProductSize,
    Product,
    Addon,
    AddonCategory,
    Coupon,
)
from orderflow.catalog._view import (
    CatalogView,
    product_from_record,
    addon_category_from_record,
    coupon_from_record,
    coupon_to_record,
)

__all__ = (
    "SINGLE_SIZE_NAME",
    "PricingMode",
    "DiscountType",
    "ProductSize",
    "Product",
    "Addon",
    "AddonCategory",
    "Coupon",
    "CatalogView",
    "product_from_record",
    "addon_category_from_record",
    "coupon_from_record",
    "coupon_to_record",
)
