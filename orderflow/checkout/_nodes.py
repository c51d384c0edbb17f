"""
Checkout graph.

    RequestNode ─┬─ CustomerNode ──────────────┐
    SettingsNode ┼─ FeeNode ───────────────────┤
    CatalogNode ─┴─ CartNode ─ DiscountNode ─ PricingNode ─┬─ QuoteNode
                                 OpeningNode ──────────────┴─ CreateOrderNode

Settings, catalog and customer are fetched concurrently. Only
CreateOrderNode writes; every node before it is read-only, so a failed
checkout leaves nothing behind.
"""

import logging
from dataclasses import dataclass

import combinators as C

from orderflow._errors import Errors, OrderflowError, PersistenceError
from orderflow._types import Error, LazyCoroResult, Money, Ok, Record, Result
from orderflow.cart import Cart
from orderflow.catalog import CatalogView
from orderflow.checkout._graph import compose, node
from orderflow.checkout._request import CheckoutContext, CheckoutRequest
from orderflow.loyalty import Customer
from orderflow.orders import DeliveryOption
from orderflow.pricing import DeliveryFeeResolver, DiscountEngine, PriceBreakdown
from orderflow.schedule import ShopStatus, shop_status
from orderflow.shop import ShopSettings, settings_from_record
from orderflow.store import RecordStore, Tables


logger = logging.getLogger(__name__)


def unwrap[T](result: Result[T, PersistenceError]) -> T:
    match result:
        case Ok(value):
            return value
        case Error(e):
            raise e


def _fetch_all(store: RecordStore, table: str) -> LazyCoroResult[list[Record], PersistenceError]:
    async def run() -> Result[list[Record], PersistenceError]:
        return await store.list_all(table)

    return LazyCoroResult(run)


# ═══════════════════════════════════════════════════════════════════════════════
# Inputs
# ═══════════════════════════════════════════════════════════════════════════════


@node
class RequestNode:
    """Entry point: the submitted request, with required fields checked."""

    def __init__(self, data: CheckoutRequest) -> None:
        self.data = data

    @classmethod
    def __compose__(cls, request: CheckoutRequest) -> "RequestNode":
        if not request.items:
            raise Errors.empty_cart()
        if not request.customer_name.strip():
            raise Errors.missing_field("customer_name")
        if request.delivery_option is DeliveryOption.DELIVERY:
            if not (request.delivery_address or "").strip():
                raise Errors.missing_field("delivery_address")
            if not (request.neighborhood or "").strip():
                raise Errors.missing_field("neighborhood")
        if request.coupon_code and request.loyalty_redeem:
            raise Errors.conflicting_discounts()
        return cls(request)


@node
class SettingsNode:
    def __init__(self, data: ShopSettings) -> None:
        self.data = data

    @classmethod
    async def __compose__(cls, ctx: CheckoutContext) -> "SettingsNode":
        records = unwrap(await ctx.store.list_all(Tables.SETTINGS))
        return cls(settings_from_record(records[0] if records else None))


@node
class CatalogNode:
    """Products, addon categories and coupons, fetched in parallel."""

    def __init__(self, data: CatalogView) -> None:
        self.data = data

    @classmethod
    async def __compose__(cls, ctx: CheckoutContext) -> "CatalogNode":
        result = await C.parallel(
            _fetch_all(ctx.store, Tables.PRODUCTS),
            _fetch_all(ctx.store, Tables.ADDON_CATEGORIES),
            _fetch_all(ctx.store, Tables.COUPONS),
        )
        match result:
            case Ok([products, categories, coupons]):
                return cls(CatalogView.from_records(products, categories, coupons))
            case Ok(_):
                raise Errors.store("catalog fetch returned an unexpected shape")
            case Error(e):
                raise e


@node
class CustomerNode:
    """The signed-in customer, if any. ``record`` is kept for the final CAS."""

    def __init__(self, data: Customer | None, record: Record | None) -> None:
        self.data = data
        self.record = record

    @classmethod
    async def __compose__(cls, request: RequestNode, ctx: CheckoutContext) -> "CustomerNode":
        customer_id = request.data.customer_id
        if customer_id is None:
            return cls(None, None)
        record = unwrap(await ctx.store.get(Tables.CUSTOMERS, customer_id))
        if record is None:
            raise Errors.unknown("customer", customer_id)
        return cls(Customer.from_record(record), record)


# ═══════════════════════════════════════════════════════════════════════════════
# Pricing
# ═══════════════════════════════════════════════════════════════════════════════


@node
class CartNode:
    """Lines re-priced from the catalog."""

    def __init__(self, data: Cart) -> None:
        self.data = data

    @classmethod
    async def __compose__(cls, request: RequestNode, catalog: CatalogNode) -> "CartNode":
        cart = Cart(catalog.data)
        for line in request.data.items:
            match cart.add(
                line.product_id,
                size=line.size,
                addons=line.addons,
                quantity=line.quantity,
                notes=line.notes,
            ):
                case Error(e):
                    raise e
                case Ok(_):
                    pass
        return cls(cart)


@node
class FeeNode:
    def __init__(self, fee: Money) -> None:
        self.fee = fee

    @classmethod
    async def __compose__(
        cls,
        request: RequestNode,
        settings: SettingsNode,
        ctx: CheckoutContext,
    ) -> "FeeNode":
        resolver = DeliveryFeeResolver(ctx.config.unmatched_neighborhood)
        match resolver.resolve(
            settings.data.delivery,
            request.data.delivery_option,
            request.data.neighborhood,
        ):
            case Ok(fee):
                return cls(fee)
            case Error(e):
                raise e


@node
class DiscountNode:
    """Re-applies the requested coupon or reward against current data."""

    def __init__(self, engine: DiscountEngine) -> None:
        self.engine = engine

    @classmethod
    async def __compose__(
        cls,
        request: RequestNode,
        catalog: CatalogNode,
        settings: SettingsNode,
        customer: CustomerNode,
        cart: CartNode,
        ctx: CheckoutContext,
    ) -> "DiscountNode":
        engine = DiscountEngine(
            catalog.data,
            settings.data.loyalty,
            customer.data,
            clock=ctx.config.clock,
        )
        if request.data.coupon_code:
            match engine.apply_coupon(request.data.coupon_code, cart.data.subtotal):
                case Error(e):
                    raise e
                case Ok(_):
                    pass
        elif request.data.loyalty_redeem:
            match engine.apply_loyalty_reward():
                case Error(e):
                    raise e
                case Ok(_):
                    pass
        return cls(engine)


@node
class PricingNode:
    def __init__(self, data: PriceBreakdown) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls,
        cart: CartNode,
        fee: FeeNode,
        discount: DiscountNode,
    ) -> "PricingNode":
        return cls(discount.engine.breakdown(cart.data.subtotal, fee.fee))


@node
class OpeningNode:
    """
    Storefront orders need an open shop unless they are scheduled.

    A scheduled time must lie in the future, and a temporary closure
    stops scheduled orders too. Counter sales skip both checks.
    """

    def __init__(self, data: ShopStatus) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls,
        request: RequestNode,
        settings: SettingsNode,
        ctx: CheckoutContext,
    ) -> "OpeningNode":
        now = ctx.config.clock()
        status = shop_status(settings.data, now)
        data = request.data
        if data.delivery_option is DeliveryOption.COUNTER:
            return cls(status)

        if data.scheduled_time is not None:
            if data.scheduled_time <= now:
                raise Errors.invalid_schedule(data.scheduled_time)
            closed = status.is_temporarily_closed
        else:
            closed = not status.is_open

        if ctx.config.enforce_opening_hours and closed:
            logger.info("checkout for %r rejected: shop closed", data.customer_name)
            raise Errors.shop_closed(status.message or None)
        return cls(status)


# ═══════════════════════════════════════════════════════════════════════════════
# Views
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Quote:
    """Checkout preview: what the order would cost right now."""

    breakdown: PriceBreakdown
    item_count: int
    coupon_code: str | None
    remaining_points: int | None


@node
class QuoteNode:
    """Same graph as checkout minus the opening check and the write."""

    def __init__(self, data: Quote) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls,
        cart: CartNode,
        customer: CustomerNode,
        discount: DiscountNode,
        pricing: PricingNode,
    ) -> "QuoteNode":
        coupon = discount.engine.active_coupon
        return cls(
            Quote(
                breakdown=pricing.data,
                item_count=cart.data.item_count,
                coupon_code=coupon.code if coupon else None,
                remaining_points=(
                    discount.engine.remaining_points() if customer.data is not None else None
                ),
            )
        )

    @classmethod
    async def execute(
        cls, request: CheckoutRequest, ctx: CheckoutContext
    ) -> Result[Quote, OrderflowError]:
        try:
            result = await compose(cls, request, ctx)
            return Ok(result.data)
        except OrderflowError as e:
            return Error(e)
