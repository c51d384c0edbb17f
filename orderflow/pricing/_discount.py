"""
DiscountEngine — one active discount source per checkout.

A coupon and a loyalty reward never stack: activating either clears the
other. Amounts are derived on demand from the current subtotal and fee.

    engine = DiscountEngine(view, settings.loyalty, customer)
    engine.apply_coupon("PROMO10", cart.subtotal)
    engine.breakdown(cart.subtotal, fee).total
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from orderflow._errors import EligibilityError, Errors, ValidationError
from orderflow._types import ZERO, Clock, Error, Money, Ok, Result, system_clock
from orderflow.catalog import CatalogView, Coupon, DiscountType
from orderflow.loyalty import Customer, LoyaltyLedger, LoyaltyProgram, RewardType
from orderflow.pricing._totals import PriceBreakdown


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoyaltyReward:
    reward_type: RewardType
    value: Money
    points_cost: int

    @classmethod
    def from_program(cls, program: LoyaltyProgram) -> LoyaltyReward:
        return cls(program.reward_type, program.reward_value, program.points_for_reward)


# ═══════════════════════════════════════════════════════════════════════════════
# Amounts
# ═══════════════════════════════════════════════════════════════════════════════


def coupon_discount(coupon: Coupon | None, subtotal: Money) -> Money:
    if coupon is None or subtotal <= 0 or not coupon.meets_minimum(subtotal):
        return ZERO
    match coupon.discount_type:
        case DiscountType.FIXED:
            return min(coupon.discount_value, subtotal)
        case DiscountType.PERCENTAGE:
            return subtotal * coupon.discount_value / 100
        case DiscountType.FREE_SHIPPING:
            return ZERO


def coupon_shipping_discount(coupon: Coupon | None, subtotal: Money, fee: Money) -> Money:
    if coupon is None or coupon.discount_type is not DiscountType.FREE_SHIPPING:
        return ZERO
    if subtotal <= 0 or not coupon.meets_minimum(subtotal):
        return ZERO
    return fee


def loyalty_discount(reward: LoyaltyReward | None, subtotal: Money) -> Money:
    if reward is None or reward.reward_type is not RewardType.FIXED or subtotal <= 0:
        return ZERO
    return min(reward.value, subtotal)


def loyalty_shipping_discount(reward: LoyaltyReward | None, fee: Money) -> Money:
    if reward is None or reward.reward_type is not RewardType.FREE_SHIPPING:
        return ZERO
    return fee


def price(
    subtotal: Money,
    fee: Money,
    coupon: Coupon | None = None,
    reward: LoyaltyReward | None = None,
) -> PriceBreakdown:
    return PriceBreakdown(
        subtotal=subtotal,
        delivery_fee=fee,
        discount_amount=coupon_discount(coupon, subtotal),
        shipping_discount_amount=coupon_shipping_discount(coupon, subtotal, fee),
        loyalty_discount_amount=loyalty_discount(reward, subtotal),
        loyalty_shipping_discount_amount=loyalty_shipping_discount(reward, fee),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Engine
# ═══════════════════════════════════════════════════════════════════════════════


class DiscountEngine:
    __slots__ = ("_catalog", "_program", "_customer", "_clock", "_coupon", "_reward")

    def __init__(
        self,
        catalog: CatalogView,
        program: LoyaltyProgram,
        customer: Customer | None = None,
        *,
        clock: Clock = system_clock,
    ) -> None:
        self._catalog = catalog
        self._program = program
        self._customer = customer
        self._clock = clock
        self._coupon: Coupon | None = None
        self._reward: LoyaltyReward | None = None

    @property
    def active_coupon(self) -> Coupon | None:
        return self._coupon

    @property
    def active_reward(self) -> LoyaltyReward | None:
        return self._reward

    def apply_coupon(self, code: str, subtotal: Money) -> Result[Coupon, ValidationError]:
        """Activate a coupon. On error the current state is left untouched."""
        coupon = self._catalog.coupon(code)
        if coupon is None or coupon.is_expired(self._clock()):
            return Error(Errors.invalid_coupon(code))
        if self._customer is not None and self._customer.has_used(coupon.code):
            return Error(Errors.coupon_already_used(coupon.code))
        minimum = coupon.minimum_order_value
        if minimum is not None and subtotal < minimum:
            return Error(Errors.minimum_order_not_met(minimum))

        self._reward = None
        self._coupon = coupon
        logger.debug("coupon %s active", coupon.code)
        return Ok(coupon)

    def remove_coupon(self) -> None:
        self._coupon = None

    def apply_loyalty_reward(self) -> Result[LoyaltyReward, EligibilityError]:
        balance = self._customer.loyalty_points if self._customer is not None else 0
        match LoyaltyLedger.check(balance, self._program):
            case Error(e):
                return Error(e)
            case Ok(_):
                pass

        self._coupon = None
        self._reward = LoyaltyReward.from_program(self._program)
        return Ok(self._reward)

    def remove_loyalty_reward(self) -> None:
        self._reward = None

    def remaining_points(self) -> int:
        """Balance left once the active reward (if any) is paid for."""
        balance = self._customer.loyalty_points if self._customer is not None else 0
        if self._reward is None:
            return balance
        return balance - self._reward.points_cost

    def breakdown(self, subtotal: Money, fee: Money) -> PriceBreakdown:
        return price(subtotal, fee, self._coupon, self._reward)


__all__ = (
    "LoyaltyReward",
    "coupon_discount",
    "coupon_shipping_discount",
    "loyalty_discount",
    "loyalty_shipping_discount",
    "price",
    "DiscountEngine",
)
