"""
Order creation — the terminal checkout node and the only one that writes.

Customer first, order second:

1. Settle the customer (points earned on the subtotal, reward points spent,
   coupon marked used) with a compare-and-swap on the values read. A lost
   race re-reads and re-checks, so points spent elsewhere in the meantime
   fail the redemption instead of going negative.
2. Insert the order. If that fails the customer update is reverted.
"""

import logging
import time
import uuid
from dataclasses import replace
from datetime import datetime

from orderflow._errors import Errors, OrderflowError
from orderflow._types import Error, Money, Ok, Record, Result
from orderflow.cart import CartItem
from orderflow.catalog import Coupon
from orderflow.checkout._graph import compose, node
from orderflow.checkout._nodes import (
    CartNode,
    CustomerNode,
    DiscountNode,
    OpeningNode,
    PricingNode,
    RequestNode,
    SettingsNode,
    unwrap,
)
from orderflow.checkout._request import CheckoutContext, CheckoutRequest
from orderflow.loyalty import Customer, LoyaltyLedger, LoyaltyProgram
from orderflow.orders import DeliveryOption, Order, OrderLifecycle, PaymentMethod
from orderflow.pricing import PriceBreakdown
from orderflow.store import Tables


logger = logging.getLogger(__name__)

type CustomerWrite = tuple[str, Record, Record]
"""(customer id, fields before, fields after)"""


async def _settle_customer(
    ctx: CheckoutContext,
    record: Record,
    subtotal: Money,
    program: LoyaltyProgram,
    coupon: Coupon | None,
    *,
    redeem: bool,
) -> CustomerWrite | None:
    customer_id = str(record["id"])
    for _ in range(ctx.config.cas_attempts):
        current = Customer.from_record(record)
        if coupon is not None and current.has_used(coupon.code):
            raise Errors.coupon_already_used(coupon.code)
        match LoyaltyLedger.settle(current.loyalty_points, subtotal, program, redeem=redeem):
            case Ok(points):
                after = current.with_points(points)
            case Error(e):
                raise e
        if coupon is not None:
            after = after.with_used_coupon(coupon.code)

        before_fields: Record = {
            "loyalty_points": record.get("loyalty_points"),
            "used_coupons": record.get("used_coupons"),
        }
        after_fields: Record = {
            "loyalty_points": after.loyalty_points,
            "used_coupons": sorted(after.used_coupons),
        }
        if after == current:
            return None

        match await ctx.store.update_if(Tables.CUSTOMERS, customer_id, before_fields, after_fields):
            case Ok(None):
                logger.info("customer %s changed during checkout, re-reading", customer_id)
                fresh = unwrap(await ctx.store.get(Tables.CUSTOMERS, customer_id))
                if fresh is None:
                    raise Errors.unknown("customer", customer_id)
                record = fresh
            case Ok(_):
                return customer_id, before_fields, after_fields
            case Error(e):
                raise e
    raise Errors.write_conflict(Tables.CUSTOMERS, customer_id)


async def _restore_customer(ctx: CheckoutContext, write: CustomerWrite) -> None:
    customer_id, before_fields, after_fields = write
    match await ctx.store.update_if(Tables.CUSTOMERS, customer_id, after_fields, before_fields):
        case Ok(None):
            logger.error("customer %s changed again, loyalty not restored", customer_id)
        case Ok(_):
            logger.info("customer %s restored after failed order insert", customer_id)
        case Error(e):
            logger.error("customer %s not restored: %s", customer_id, e.message)


def build_order(
    request: CheckoutRequest,
    cart_items: tuple[CartItem, ...],
    breakdown: PriceBreakdown,
    coupon: Coupon | None,
    now: datetime,
) -> Order:
    option = request.delivery_option
    is_delivery = option is DeliveryOption.DELIVERY
    return Order(
        id=uuid.uuid4().hex,
        date=now,
        customer_id=request.customer_id,
        customer_name=request.customer_name.strip(),
        items=tuple(replace(item) for item in cart_items),
        subtotal=breakdown.subtotal,
        delivery_fee=breakdown.delivery_fee,
        discount_amount=breakdown.discount_amount,
        shipping_discount_amount=breakdown.shipping_discount_amount,
        loyalty_discount_amount=breakdown.loyalty_discount_amount,
        loyalty_shipping_discount_amount=breakdown.loyalty_shipping_discount_amount,
        total=breakdown.total,
        payment_method=request.payment_method,
        change_for=request.change_for if request.payment_method is PaymentMethod.CASH else None,
        delivery_option=option,
        delivery_address=request.delivery_address if is_delivery else None,
        neighborhood=request.neighborhood if is_delivery else None,
        coupon_code=coupon.code if coupon else None,
        status=OrderLifecycle.initial_status(option, request.scheduled_time, now),
        scheduled_time=None if option is DeliveryOption.COUNTER else request.scheduled_time,
        is_delivery_broadcasted=False,
    )


@node
class CreateOrderNode:
    """Final node: settle the customer, then persist the order snapshot."""

    def __init__(self, data: Order) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls,
        request: RequestNode,
        settings: SettingsNode,
        customer: CustomerNode,
        cart: CartNode,
        discount: DiscountNode,
        pricing: PricingNode,
        opening: OpeningNode,
        ctx: CheckoutContext,
    ) -> "CreateOrderNode":
        _ = opening  # closed shop stops the graph before any write

        coupon = discount.engine.active_coupon
        order = build_order(
            request.data, cart.data.items, pricing.data, coupon, ctx.config.clock()
        )

        write: CustomerWrite | None = None
        if customer.record is not None:
            write = await _settle_customer(
                ctx,
                customer.record,
                order.subtotal,
                settings.data.loyalty,
                coupon,
                redeem=discount.engine.active_reward is not None,
            )

        match await ctx.store.insert(Tables.ORDERS, order.to_record()):
            case Ok(_):
                pass
            case Error(e):
                if write is not None:
                    await _restore_customer(ctx, write)
                raise e

        if ctx.session is not None:
            ctx.session.record_order(order)
        logger.info(
            "order %s created for %s: %s (%s)",
            order.id, order.customer_name, order.total, order.status.value,
        )
        return cls(order)

    @classmethod
    async def execute(
        cls, request: CheckoutRequest, ctx: CheckoutContext
    ) -> Result[Order, OrderflowError]:
        start = time.perf_counter()
        try:
            result = await compose(cls, request, ctx)
            return Ok(result.data)
        except OrderflowError as e:
            elapsed = (time.perf_counter() - start) * 1000
            logger.info("checkout failed in %.0fms: %s %s", elapsed, e.code, e.message)
            return Error(e)


__all__ = ("build_order", "CreateOrderNode")
