"""
Checkout — from submitted cart to stored order.

Runs as a graph: settings, catalog and customer load concurrently, the cart
is re-priced server-side, the single discount source is re-validated, and
only the last node writes.

    from orderflow import checkout

    ctx = checkout.CheckoutContext(store, session=session)
    result = await checkout.checkout(request, ctx)
"""

from orderflow.checkout._session import ClientSession
from orderflow.checkout._request import CheckoutLine, CheckoutRequest, CheckoutContext
from orderflow.checkout._graph import node, compose
from orderflow.checkout._nodes import (
    Quote,
    RequestNode,
    SettingsNode,
    CatalogNode,
    CustomerNode,
    CartNode,
    FeeNode,
    DiscountNode,
    PricingNode,
    OpeningNode,
    QuoteNode,
)
from orderflow.checkout._order import build_order, CreateOrderNode
from orderflow.checkout._service import (
    checkout,
    quote,
    award_prize,
    Tracking,
    track_orders,
)

__all__ = (
    "ClientSession",
    "CheckoutLine",
    "CheckoutRequest",
    "CheckoutContext",
    "node",
    "compose",
    "Quote",
    "RequestNode",
    "SettingsNode",
    "CatalogNode",
    "CustomerNode",
    "CartNode",
    "FeeNode",
    "DiscountNode",
    "PricingNode",
    "OpeningNode",
    "QuoteNode",
    "build_order",
    "CreateOrderNode",
    "checkout",
    "quote",
    "award_prize",
    "Tracking",
    "track_orders",
)
