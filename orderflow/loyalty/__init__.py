"""
Loyalty — points program, customer balance, ledger.
"""

from orderflow.loyalty._types import RewardType, LoyaltyProgram, Customer
from orderflow.loyalty._ledger import LoyaltyLedger

__all__ = (
    "RewardType",
    "LoyaltyProgram",
    "Customer",
    "LoyaltyLedger",
)
