"""
Engine configuration.

    config = (
        EngineConfig()
        .with_slots(lead=timedelta(minutes=45))
        .with_unmatched_neighborhood(UnmatchedNeighborhood.REJECT)
    )

Immutable: each ``with_*`` returns a new config.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import timedelta
from enum import Enum, auto

from orderflow._types import Clock, system_clock


class UnmatchedNeighborhood(Enum):
    """
    Delivery fee for a neighborhood missing from the fee table.

    FREE:   fee is 0 (historic storefront behavior, the default)
    REJECT: checkout fails with UNKNOWN_NEIGHBORHOOD
    """

    FREE = auto()
    REJECT = auto()


@dataclass(frozen=True, slots=True)
class EngineConfig:
    slot_lead: timedelta = timedelta(minutes=30)
    slot_step: timedelta = timedelta(minutes=15)
    poll_interval: timedelta = timedelta(seconds=10)
    unmatched_neighborhood: UnmatchedNeighborhood = UnmatchedNeighborhood.FREE
    cas_attempts: int = 3
    enforce_opening_hours: bool = True
    prize_ttl: timedelta = timedelta(hours=1)
    clock: Clock = field(default=system_clock, compare=False)

    def with_slots(
        self,
        *,
        lead: timedelta | None = None,
        step: timedelta | None = None,
    ) -> EngineConfig:
        if step is not None and step <= timedelta(0):
            raise ValueError("slot step must be positive")
        return replace(
            self,
            slot_lead=self.slot_lead if lead is None else lead,
            slot_step=self.slot_step if step is None else step,
        )

    def with_poll_interval(self, *, seconds: float) -> EngineConfig:
        if seconds <= 0:
            raise ValueError("poll interval must be positive")
        return replace(self, poll_interval=timedelta(seconds=seconds))

    def with_unmatched_neighborhood(self, policy: UnmatchedNeighborhood) -> EngineConfig:
        return replace(self, unmatched_neighborhood=policy)

    def with_cas_attempts(self, attempts: int) -> EngineConfig:
        if attempts < 1:
            raise ValueError("cas_attempts must be >= 1")
        return replace(self, cas_attempts=attempts)

    def with_opening_hours(self, enforce: bool) -> EngineConfig:
        return replace(self, enforce_opening_hours=enforce)

    def with_prize_ttl(self, ttl: timedelta) -> EngineConfig:
        return replace(self, prize_ttl=ttl)

    def with_clock(self, clock: Clock) -> EngineConfig:
        return replace(self, clock=clock)


__all__ = ("EngineConfig", "UnmatchedNeighborhood")
