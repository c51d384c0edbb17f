"""
Shop status — is the shop taking orders right now.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from orderflow.shop import DayHours, ShopSettings


@dataclass(frozen=True, slots=True)
class ShopStatus:
    is_open: bool
    hours_today: DayHours | None
    is_temporarily_closed: bool = False
    message: str = ""


def shop_status(settings: ShopSettings, now: datetime) -> ShopStatus:
    if settings.is_temporarily_closed:
        return ShopStatus(
            is_open=False,
            hours_today=None,
            is_temporarily_closed=True,
            message=settings.temporary_closure_message or "Temporarily closed",
        )
    hours = settings.hours_for(now.date())
    span = hours.span
    if span is None:
        return ShopStatus(is_open=False, hours_today=hours)
    start, end = span
    current = now.time().replace(second=0, microsecond=0)
    return ShopStatus(is_open=start <= current < end, hours_today=hours)


__all__ = ("ShopStatus", "shop_status")
