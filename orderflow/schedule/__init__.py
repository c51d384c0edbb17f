"""
Schedule — opening status and time slots for scheduled orders.

    from orderflow import schedule

    gen = schedule.ScheduleSlotGenerator()
    gen.slots(settings.hours_for(today), now)  # ["18:15", "18:30", ...]
"""

from orderflow.schedule._slots import ScheduleSlotGenerator, ceil_to_step
from orderflow.schedule._status import ShopStatus, shop_status

__all__ = (
    "ScheduleSlotGenerator",
    "ceil_to_step",
    "ShopStatus",
    "shop_status",
)
