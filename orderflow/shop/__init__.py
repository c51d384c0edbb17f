"""
Shop — settings record with defaults.
"""

from orderflow.shop._types import (
    WEEKDAYS,
    DeliveryType,
    NeighborhoodFee,
    DeliverySettings,
    DayHours,
    ShopSettings,
    DEFAULT_SETTINGS,
    parse_clock,
    settings_from_record,
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
