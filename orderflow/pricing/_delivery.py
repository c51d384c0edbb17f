"""
DeliveryFeeResolver — fee for a delivery choice.

    pickup / counter      → 0
    fixed                 → fixed_fee
    neighborhood (match)  → that neighborhood's fee
    neighborhood (none)   → per ``UnmatchedNeighborhood`` (FREE = 0)
"""

from __future__ import annotations

import logging

from orderflow._config import UnmatchedNeighborhood
from orderflow._errors import Errors, ValidationError
from orderflow._types import ZERO, Error, Money, Ok, Result
from orderflow.orders import DeliveryOption
from orderflow.shop import DeliverySettings, DeliveryType


logger = logging.getLogger(__name__)


def _same_name(a: str, b: str) -> bool:
    return a.strip().casefold() == b.strip().casefold()


class DeliveryFeeResolver:
    __slots__ = ("_unmatched",)

    def __init__(self, unmatched: UnmatchedNeighborhood = UnmatchedNeighborhood.FREE) -> None:
        self._unmatched = unmatched

    def resolve(
        self,
        settings: DeliverySettings,
        option: DeliveryOption,
        neighborhood: str | None = None,
    ) -> Result[Money, ValidationError]:
        if option is not DeliveryOption.DELIVERY:
            return Ok(ZERO)
        if settings.type is DeliveryType.FIXED:
            return Ok(settings.fixed_fee)

        if neighborhood:
            for entry in settings.neighborhoods:
                if _same_name(entry.name, neighborhood):
                    return Ok(entry.fee)

        if self._unmatched is UnmatchedNeighborhood.REJECT:
            return Error(Errors.unmatched_neighborhood(neighborhood))
        logger.info("no delivery fee configured for neighborhood %r, charging 0", neighborhood)
        return Ok(ZERO)


__all__ = ("DeliveryFeeResolver",)
