"""
ScheduleSlotGenerator — time slots for scheduled orders.

    first = ceil_to_step(max(opening, now + lead))
    slots = first, first + step, ... <= closing

Slots are recomputed on every call; nothing is cached between calls.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from orderflow._config import EngineConfig
from orderflow.schedule._status import ShopStatus
from orderflow.shop import DayHours


def ceil_to_step(moment: datetime, step: timedelta) -> datetime:
    """Round up to the next multiple of ``step`` since midnight."""
    midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    elapsed = moment - midnight
    remainder = elapsed % step
    if not remainder:
        return moment
    return moment + (step - remainder)


class ScheduleSlotGenerator:
    __slots__ = ("_lead", "_step")

    def __init__(self, config: EngineConfig | None = None) -> None:
        config = config or EngineConfig()
        self._lead = config.slot_lead
        self._step = config.slot_step

    def slot_times(self, hours: DayHours, now: datetime) -> list[datetime]:
        span = hours.span
        if span is None:
            return []
        opening = datetime.combine(now.date(), span[0])
        closing = datetime.combine(now.date(), span[1])

        current = ceil_to_step(max(opening, now + self._lead), self._step)
        slots: list[datetime] = []
        while current <= closing:
            slots.append(current)
            current += self._step
        return slots

    def slots(self, hours: DayHours, now: datetime) -> list[str]:
        """``"HH:MM"`` labels for today's remaining slots."""
        return [slot.strftime("%H:%M") for slot in self.slot_times(hours, now)]

    def for_status(self, status: ShopStatus, now: datetime) -> list[str]:
        """Slots offered to customers: none while temporarily closed."""
        if status.hours_today is None:
            return []
        return self.slots(status.hours_today, now)


__all__ = ("ScheduleSlotGenerator", "ceil_to_step")
