"""
Storefront entry points.

    ctx = CheckoutContext(store, config, session)
    match await checkout(request, ctx):
        case Ok(order):
            ...
        case Error(e):
            show(e.message)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from orderflow._config import EngineConfig
from orderflow._errors import Errors, OrderflowError
from orderflow._types import Error, Ok, Result
from orderflow.catalog import Coupon, coupon_to_record
from orderflow.checkout._nodes import Quote, QuoteNode
from orderflow.checkout._order import CreateOrderNode
from orderflow.checkout._request import CheckoutContext, CheckoutRequest
from orderflow.checkout._session import ClientSession
from orderflow.orders import Order, load_orders
from orderflow.pricing import PrizeSelector
from orderflow.store import RecordStore, Tables


logger = logging.getLogger(__name__)


async def checkout(request: CheckoutRequest, ctx: CheckoutContext) -> Result[Order, OrderflowError]:
    """Price, validate and persist one order."""
    return await CreateOrderNode.execute(request, ctx)


async def quote(request: CheckoutRequest, ctx: CheckoutContext) -> Result[Quote, OrderflowError]:
    """What ``checkout`` would charge, without writing anything."""
    return await QuoteNode.execute(request, ctx)


async def award_prize(
    store: RecordStore,
    session: ClientSession,
    selector: PrizeSelector,
    config: EngineConfig | None = None,
) -> Result[Coupon, OrderflowError]:
    """Spin the prize wheel once per session and store the won coupon."""
    config = config or EngineConfig()
    if session.has_spun_wheel:
        return Error(Errors.already_spun())

    draw = selector.spin(config.clock(), config.prize_ttl)
    match await store.insert(Tables.COUPONS, coupon_to_record(draw.coupon)):
        case Ok(_):
            session.has_spun_wheel = True
            logger.info("prize wheel landed on %r, coupon %s", draw.prize.label, draw.coupon.code)
            return Ok(draw.coupon)
        case Error(e):
            return Error(e)


@dataclass(frozen=True, slots=True)
class Tracking:
    current: Order | None
    history: list[Order]


async def track_orders(store: RecordStore, session: ClientSession) -> Result[Tracking, OrderflowError]:
    """The session's tracked order plus its order history, newest first."""
    match await load_orders(store):
        case Ok(orders):
            return Ok(Tracking(session.tracked(orders), session.history(orders)))
        case Error(e):
            return Error(e)


__all__ = ("checkout", "quote", "award_prize", "Tracking", "track_orders")
