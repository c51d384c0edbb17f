"""
Core types for orderflow.

Re-exports from kungfu + money/time aliases shared by every package.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

# Re-export from kungfu
from kungfu import Result, Ok, Error, Option, Some, Nothing, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Money = Decimal
"""Amount in the shop's currency. Never rounded inside the engine."""

ZERO: Money = Decimal("0")
CENT = Decimal("0.01")


def money(value: object) -> Money:
    """
    Parse a monetary value.

    Accepts Decimal, int, str, or float (floats go through ``str`` so
    ``5.1`` stays ``5.1`` rather than its binary expansion).
    """
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    if isinstance(value, float):
        value = repr(value)
    try:
        return Decimal(str(value).strip() or "0")
    except InvalidOperation as e:
        raise ValueError(f"not a monetary value: {value!r}") from e


def format_money(value: Money) -> str:
    """Two-decimal display string. Presentation boundary only."""
    return str(value.quantize(CENT, rounding=ROUND_HALF_UP))


# ═══════════════════════════════════════════════════════════════════════════════
# Records & Time
# ═══════════════════════════════════════════════════════════════════════════════

type Record = dict[str, Any]
"""A row of the external record store: plain JSON-compatible mapping."""

type Clock = Callable[[], datetime]
"""Source of "now". Injected so schedules and order dates are testable."""


def system_clock() -> datetime:
    return datetime.now()


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "Option",
    "Some",
    "Nothing",
    "LazyCoroResult",
    # Money
    "Money",
    "ZERO",
    "money",
    "format_money",
    # Records & time
    "Record",
    "Clock",
    "system_clock",
)
