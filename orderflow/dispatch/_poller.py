"""
OrderPoller — periodic re-fetch for the driver and kitchen screens.

Ticks are scheduled on a fixed grid. A tick that overruns does not queue
the ones it missed: the next tick runs at once and the grid jumps forward.
A failed fetch or a failing callback is logged and the loop carries on.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from datetime import timedelta

from orderflow._errors import OrderflowError
from orderflow._types import Error, Ok, Result
from orderflow.dispatch._queue import available_orders
from orderflow.orders import Order


logger = logging.getLogger(__name__)

type Fetch = Callable[[], Awaitable[Result[list[Order], OrderflowError]]]
type OnOrders = Callable[[list[Order]], Awaitable[None] | None]


class NewDeliveryTracker:
    """
    Which open-pool orders appeared since the last look.

    The first observation only records what is there.
    """

    __slots__ = ("_known",)

    def __init__(self) -> None:
        self._known: set[str] | None = None

    def observe(self, orders: Iterable[Order]) -> list[Order]:
        pool = available_orders(orders)
        ids = {o.id for o in pool}
        if self._known is None:
            fresh: list[Order] = []
        else:
            fresh = [o for o in pool if o.id not in self._known]
        self._known = ids
        return fresh


class OrderPoller:
    def __init__(
        self,
        fetch: Fetch,
        on_orders: OnOrders,
        *,
        interval: timedelta = timedelta(seconds=10),
        monotonic: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval <= timedelta(0):
            raise ValueError("poll interval must be positive")
        self._fetch = fetch
        self._on_orders = on_orders
        self._interval = interval.total_seconds()
        self._monotonic = monotonic
        self._sleep = sleep
        self._task: asyncio.Task[None] | None = None
        self._stopping = False
        self.ticks = 0
        self.skipped = 0

    async def tick(self) -> bool:
        """One fetch + callback. False when either of them failed."""
        self.ticks += 1
        match await self._fetch():
            case Ok(orders):
                try:
                    outcome = self._on_orders(orders)
                    if inspect.isawaitable(outcome):
                        await outcome
                except Exception:
                    logger.exception("order poll callback failed")
                    return False
                return True
            case Error(e):
                logger.warning("order poll failed: %s", e.message)
                return False

    async def run(self, max_ticks: int | None = None) -> None:
        next_at = self._monotonic()
        while not self._stopping:
            await self.tick()
            if max_ticks is not None and self.ticks >= max_ticks:
                return

            next_at += self._interval
            now = self._monotonic()
            if now > next_at:
                behind = int((now - next_at) // self._interval)
                if behind:
                    self.skipped += behind
                    next_at += behind * self._interval
                    logger.debug("poller skipped %d tick(s)", behind)
            await self._sleep(max(0.0, next_at - now))

    def start(self) -> asyncio.Task[None]:
        if self._task is None or self._task.done():
            self._stopping = False
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        self._stopping = True
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None


__all__ = ("NewDeliveryTracker", "OrderPoller")
