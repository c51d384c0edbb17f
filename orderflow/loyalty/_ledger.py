"""
LoyaltyLedger — points earned and spent per order.

Points are earned on the order subtotal (discounts never reduce them) and a
reward costs ``points_for_reward``. Redemption is checked against the balance
read at finalize time, so a balance spent elsewhere since the reward was
applied is caught before anything is written.
"""

from __future__ import annotations

import math

from orderflow._errors import EligibilityError, Errors
from orderflow._types import Error, Money, Ok, Result
from orderflow.loyalty._types import LoyaltyProgram


class LoyaltyLedger:
    @staticmethod
    def earn(subtotal: Money, program: LoyaltyProgram) -> int:
        if not program.enabled or program.points_per_real <= 0 or subtotal <= 0:
            return 0
        return math.floor(subtotal * program.points_per_real)

    @staticmethod
    def check(balance: int, program: LoyaltyProgram) -> Result[None, EligibilityError]:
        if not program.enabled:
            return Error(Errors.loyalty_disabled())
        if balance < program.points_for_reward:
            return Error(Errors.insufficient_points(balance, program.points_for_reward))
        return Ok(None)

    @classmethod
    def redeem(cls, balance: int, program: LoyaltyProgram) -> Result[int, EligibilityError]:
        """Balance after spending one reward."""
        match cls.check(balance, program):
            case Ok(_):
                return Ok(balance - program.points_for_reward)
            case Error(e):
                return Error(e)

    @classmethod
    def settle(
        cls,
        balance: int,
        subtotal: Money,
        program: LoyaltyProgram,
        *,
        redeem: bool,
    ) -> Result[int, EligibilityError]:
        """
        Balance after one finalized order: redeem first, then earn.

        Redemption is checked against the pre-order balance.
        """
        if redeem:
            match cls.redeem(balance, program):
                case Ok(remaining):
                    balance = remaining
                case Error(e):
                    return Error(e)
        return Ok(balance + cls.earn(subtotal, program))


__all__ = ("LoyaltyLedger",)
