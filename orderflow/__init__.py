"""
orderflow — order and pricing engine for a food ordering storefront.

    from orderflow import cart as K       # Cart lines and addon rules
    from orderflow import pricing as P    # Fees, discounts, totals
    from orderflow import checkout        # Cart -> stored order
    from orderflow import dispatch as D   # Driver claims and queues
"""

from orderflow import catalog
from orderflow import cart
from orderflow import shop
from orderflow import loyalty
from orderflow import pricing
from orderflow import orders
from orderflow import schedule
from orderflow import store
from orderflow import dispatch
from orderflow import checkout
from orderflow._config import EngineConfig, UnmatchedNeighborhood
from orderflow._errors import (
    OrderflowError,
    ValidationError,
    EligibilityError,
    PersistenceError,
    Errors,
)
from orderflow._types import (
    Money,
    ZERO,
    money,
    format_money,
    Record,
    Clock,
    system_clock,
)

__version__ = "0.1.0"

__all__ = (
    "catalog",
    "cart",
    "shop",
    "loyalty",
    "pricing",
    "orders",
    "schedule",
    "store",
    "dispatch",
    "checkout",
    "EngineConfig",
    "UnmatchedNeighborhood",
    "OrderflowError",
    "ValidationError",
    "EligibilityError",
    "PersistenceError",
    "Errors",
    "Money",
    "ZERO",
    "money",
    "format_money",
    "Record",
    "Clock",
    "system_clock",
)
