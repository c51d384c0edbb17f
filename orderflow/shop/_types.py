"""
Shop settings — delivery, loyalty, opening hours.

One settings record per shop. Anything missing from the stored record falls
back to ``DEFAULT_SETTINGS`` (section by section, key by key).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from enum import Enum

from orderflow._types import Money, Record, ZERO, money
from orderflow.loyalty import LoyaltyProgram, RewardType


logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
"""Indexed like ``date.weekday()``."""


class DeliveryType(Enum):
    FIXED = "fixed"
    NEIGHBORHOOD = "neighborhood"


@dataclass(frozen=True, slots=True)
class NeighborhoodFee:
    name: str
    fee: Money


@dataclass(frozen=True, slots=True)
class DeliverySettings:
    type: DeliveryType = DeliveryType.FIXED
    fixed_fee: Money = ZERO
    neighborhoods: tuple[NeighborhoodFee, ...] = ()


@dataclass(frozen=True, slots=True)
class DayHours:
    """Opening window for one weekday. ``None`` times mean not configured."""

    is_open: bool = False
    start: time | None = None
    end: time | None = None

    @property
    def span(self) -> tuple[time, time] | None:
        """``(start, end)`` when the day is open and both times are set."""
        if self.is_open and self.start is not None and self.end is not None:
            return self.start, self.end
        return None

    @property
    def is_configured(self) -> bool:
        return self.span is not None


@dataclass(frozen=True, slots=True)
class ShopSettings:
    name: str = ""
    delivery: DeliverySettings = field(default_factory=DeliverySettings)
    loyalty: LoyaltyProgram = field(default_factory=LoyaltyProgram)
    opening_hours: tuple[DayHours, ...] = tuple(DayHours() for _ in WEEKDAYS)
    is_temporarily_closed: bool = False
    temporary_closure_message: str = ""

    def hours_for(self, day: date) -> DayHours:
        return self.opening_hours[day.weekday()]


_WEEKDAY_HOURS = DayHours(True, time(14, 0), time(22, 0))

DEFAULT_SETTINGS = ShopSettings(
    delivery=DeliverySettings(DeliveryType.FIXED, Decimal("5.00")),
    loyalty=LoyaltyProgram(
        enabled=True,
        points_per_real=Decimal("1"),
        points_for_reward=100,
        reward_type=RewardType.FIXED,
        reward_value=Decimal("10"),
    ),
    opening_hours=(*(_WEEKDAY_HOURS for _ in range(6)), DayHours(False, time(14, 0), time(22, 0))),
    temporary_closure_message="Estamos fechados para manutenção. Voltamos logo!",
)


# ═══════════════════════════════════════════════════════════════════════════════
# Record Parsing
# ═══════════════════════════════════════════════════════════════════════════════


def parse_clock(value: str | None) -> time | None:
    """``"HH:MM"`` to ``time``; malformed values read as not configured."""
    if not value or ":" not in value:
        return None
    hours, _, minutes = value.partition(":")
    try:
        return time(int(hours), int(minutes[:2]))
    except ValueError:
        logger.warning("ignoring malformed opening time %r", value)
        return None


def _day_from_record(record: Record, default: DayHours) -> DayHours:
    start = record.get("start")
    end = record.get("end")
    return DayHours(
        is_open=bool(record.get("is_open", default.is_open)),
        start=parse_clock(start) if start is not None else default.start,
        end=parse_clock(end) if end is not None else default.end,
    )


def _delivery_from_record(record: Record, default: DeliverySettings) -> DeliverySettings:
    neighborhoods = record.get("neighborhoods")
    return DeliverySettings(
        type=DeliveryType(record.get("type", default.type.value)),
        fixed_fee=money(record.get("fixed_fee", default.fixed_fee)),
        neighborhoods=(
            default.neighborhoods
            if neighborhoods is None
            else tuple(NeighborhoodFee(n["name"], money(n.get("fee"))) for n in neighborhoods)
        ),
    )


def settings_from_record(
    record: Record | None,
    default: ShopSettings = DEFAULT_SETTINGS,
) -> ShopSettings:
    if not record:
        return default
    hours = record.get("opening_hours") or {}
    return ShopSettings(
        name=record.get("name", default.name),
        delivery=_delivery_from_record(record.get("delivery") or {}, default.delivery),
        loyalty=LoyaltyProgram.from_record(record.get("loyalty_program") or {}, default.loyalty),
        opening_hours=tuple(
            _day_from_record(hours[day], default.opening_hours[i]) if day in hours
            else default.opening_hours[i]
            for i, day in enumerate(WEEKDAYS)
        ),
        is_temporarily_closed=bool(
            record.get("is_temporarily_closed", default.is_temporarily_closed)
        ),
        temporary_closure_message=(
            record.get("temporary_closure_message") or default.temporary_closure_message
        ),
    )


__all__ = (
    "WEEKDAYS",
    "DeliveryType",
    "NeighborhoodFee",
    "DeliverySettings",
    "DayHours",
    "ShopSettings",
    "DEFAULT_SETTINGS",
    "parse_clock",
    "settings_from_record",
)
