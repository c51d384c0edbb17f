"""
Loyalty types — program settings and the customer's balance.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum

from orderflow._types import Money, Record, ZERO, money


class RewardType(Enum):
    FIXED = "fixed"
    FREE_SHIPPING = "free_shipping"


@dataclass(frozen=True, slots=True)
class LoyaltyProgram:
    enabled: bool = False
    points_per_real: Decimal = Decimal("1")
    points_for_reward: int = 100
    reward_type: RewardType = RewardType.FIXED
    reward_value: Money = ZERO

    @classmethod
    def from_record(
        cls, record: Record, default: LoyaltyProgram | None = None
    ) -> LoyaltyProgram:
        """Missing keys fall back to ``default``."""
        default = default or cls()
        return cls(
            enabled=bool(record.get("enabled", default.enabled)),
            points_per_real=money(record.get("points_per_real", default.points_per_real)),
            points_for_reward=int(record.get("points_for_reward", default.points_for_reward)),
            reward_type=RewardType(record.get("reward_type", default.reward_type.value)),
            reward_value=money(record.get("reward_value", default.reward_value)),
        )


@dataclass(frozen=True, slots=True)
class Customer:
    id: str
    name: str = ""
    loyalty_points: int = 0
    used_coupons: frozenset[str] = field(default_factory=frozenset)

    def has_used(self, code: str) -> bool:
        wanted = code.strip().casefold()
        return any(used.strip().casefold() == wanted for used in self.used_coupons)

    def with_points(self, points: int) -> Customer:
        return replace(self, loyalty_points=points)

    def with_used_coupon(self, code: str) -> Customer:
        return replace(self, used_coupons=self.used_coupons | {code})

    @classmethod
    def from_record(cls, record: Record) -> Customer:
        return cls(
            id=str(record["id"]),
            name=record.get("name") or "",
            loyalty_points=int(record.get("loyalty_points") or 0),
            used_coupons=frozenset(record.get("used_coupons") or ()),
        )

    def to_record(self) -> Record:
        return {
            "id": self.id,
            "name": self.name,
            "loyalty_points": self.loyalty_points,
            "used_coupons": sorted(self.used_coupons),
        }


__all__ = ("RewardType", "LoyaltyProgram", "Customer")
