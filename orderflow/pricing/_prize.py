"""
PrizeSelector — the storefront prize wheel.

A spin picks one prize uniformly and mints a short-lived coupon for it. The
coupon is an ordinary ``Coupon``: once stored it flows through the same
``DiscountEngine`` as any other code, and single use comes from the
customer's used-coupon set.
"""

from __future__ import annotations

import random
import secrets
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from orderflow._types import Money
from orderflow.catalog import Coupon, DiscountType


@dataclass(frozen=True, slots=True)
class Prize:
    label: str
    discount_type: DiscountType
    discount_value: Money
    minimum_order_value: Money | None = None


@dataclass(frozen=True, slots=True)
class PrizeDraw:
    index: int
    prize: Prize
    coupon: Coupon


class PrizeSelector:
    __slots__ = ("_prizes", "_rng")

    def __init__(
        self,
        prizes: Sequence[Prize],
        *,
        rng: random.Random | None = None,
    ) -> None:
        if not prizes:
            raise ValueError("prize wheel needs at least one prize")
        self._prizes = tuple(prizes)
        self._rng = rng or random.SystemRandom()

    @property
    def prizes(self) -> tuple[Prize, ...]:
        return self._prizes

    def spin(self, now: datetime, ttl: timedelta = timedelta(hours=1)) -> PrizeDraw:
        """Pick a prize and mint its coupon, valid until ``now + ttl``."""
        index = self._rng.randrange(len(self._prizes))
        prize = self._prizes[index]
        code = f"PREMIO-{secrets.token_hex(3).upper()}"
        coupon = Coupon(
            id=code.lower(),
            code=code,
            discount_type=prize.discount_type,
            discount_value=prize.discount_value,
            minimum_order_value=prize.minimum_order_value,
            description=prize.label,
            expires_at=now + ttl,
        )
        return PrizeDraw(index, prize, coupon)


__all__ = ("Prize", "PrizeDraw", "PrizeSelector")
