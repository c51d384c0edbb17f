"""
Price breakdown and the total formula.
"""

from __future__ import annotations

from dataclasses import dataclass

from orderflow._types import ZERO, Money


def compute_total(
    subtotal: Money,
    delivery_fee: Money,
    discount_amount: Money = ZERO,
    shipping_discount_amount: Money = ZERO,
    loyalty_discount_amount: Money = ZERO,
    loyalty_shipping_discount_amount: Money = ZERO,
) -> Money:
    total = (
        subtotal
        + delivery_fee
        - discount_amount
        - shipping_discount_amount
        - loyalty_discount_amount
        - loyalty_shipping_discount_amount
    )
    return max(ZERO, total)


@dataclass(frozen=True, slots=True)
class PriceBreakdown:
    subtotal: Money
    delivery_fee: Money
    discount_amount: Money = ZERO
    shipping_discount_amount: Money = ZERO
    loyalty_discount_amount: Money = ZERO
    loyalty_shipping_discount_amount: Money = ZERO

    @property
    def total(self) -> Money:
        return compute_total(
            self.subtotal,
            self.delivery_fee,
            self.discount_amount,
            self.shipping_discount_amount,
            self.loyalty_discount_amount,
            self.loyalty_shipping_discount_amount,
        )

    @property
    def total_discount(self) -> Money:
        return (
            self.discount_amount
            + self.shipping_discount_amount
            + self.loyalty_discount_amount
            + self.loyalty_shipping_discount_amount
        )


__all__ = ("compute_total", "PriceBreakdown")
