"""
Pricing — delivery fees, discounts, totals, prize coupons.

    total = subtotal + fee − discount − shipping_discount
                     − loyalty_discount − loyalty_shipping_discount
    total = max(0, total)
"""

from orderflow.pricing._totals import compute_total, PriceBreakdown
from orderflow.pricing._delivery import DeliveryFeeResolver
from orderflow.pricing._discount import (
    LoyaltyReward,
    coupon_discount,
    coupon_shipping_discount,
    loyalty_discount,
    loyalty_shipping_discount,
    price,
    DiscountEngine,
)
from orderflow.pricing._prize import Prize, PrizeDraw, PrizeSelector

__all__ = (
    "compute_total",
    "PriceBreakdown",
    "DeliveryFeeResolver",
    "LoyaltyReward",
    "coupon_discount",
    "coupon_shipping_discount",
    "loyalty_discount",
    "loyalty_shipping_discount",
    "price",
    "DiscountEngine",
    "Prize",
    "PrizeDraw",
    "PrizeSelector",
)
