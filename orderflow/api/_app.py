"""
HTTP surface — FastAPI routes over the engine.

    app = create_app(MemoryStore(seed), EngineConfig().with_opening_hours(False))

Without a store the app opens ``ORDERFLOW_DATABASE_URL`` (read from the
environment or a ``.env`` file) on startup and closes it on shutdown.
Domain errors become JSON ``{"code", "message"}`` bodies: validation 422,
eligibility 409, persistence 503, unknown ids 404.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import cast

import fastapi
from dotenv import load_dotenv
from fastapi.responses import JSONResponse

from orderflow._config import EngineConfig
from orderflow._errors import EligibilityError, OrderflowError, PersistenceError, ValidationError
from orderflow._types import Error, Ok, Result
from orderflow.api._schemas import (
    CheckoutIn,
    ClaimIn,
    OrderOut,
    OrderUpdateIn,
    QuoteOut,
    SlotsOut,
)
from orderflow.checkout import CheckoutContext, checkout, quote
from orderflow.dispatch import DriverAssignmentBroker
from orderflow.orders import OrderDesk
from orderflow.schedule import ScheduleSlotGenerator, shop_status
from orderflow.shop import settings_from_record
from orderflow.store import RecordStore, SQLAlchemyStore, Tables, create_database


logger = logging.getLogger(__name__)

DATABASE_URL_ENV = "ORDERFLOW_DATABASE_URL"
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///orderflow.db"


def database_url() -> str:
    load_dotenv()
    return os.environ.get(DATABASE_URL_ENV, DEFAULT_DATABASE_URL)


def status_for(error: OrderflowError) -> int:
    if error.code == "NOT_FOUND":
        return 404
    match error:
        case ValidationError():
            return 422
        case EligibilityError():
            return 409
        case PersistenceError():
            return 503
        case _:
            return 500


def unwrap[T](result: Result[T, OrderflowError]) -> T:
    match result:
        case Ok(value):
            return value
        case Error(e):
            raise e


async def _on_domain_error(request: fastapi.Request, exc: Exception) -> JSONResponse:
    error = cast(OrderflowError, exc)
    status = status_for(error)
    if status >= 500:
        logger.warning("%s %s failed: %r", request.method, request.url.path, error)
    return JSONResponse({"code": error.code, "message": error.message}, status_code=status)


def create_app(store: RecordStore | None = None, config: EngineConfig | None = None) -> fastapi.FastAPI:
    config = config or EngineConfig()

    @asynccontextmanager
    async def lifespan(app: fastapi.FastAPI) -> AsyncIterator[None]:
        if store is not None:
            app.state.store = store
            yield
            return
        url = database_url()
        session_factory, engine = await create_database(url)
        app.state.store = SQLAlchemyStore(session_factory, cas_attempts=config.cas_attempts)
        logger.info("opened record store at %s", engine.url.render_as_string(hide_password=True))
        try:
            yield
        finally:
            await engine.dispose()

    app = fastapi.FastAPI(title="orderflow", lifespan=lifespan)
    app.add_exception_handler(OrderflowError, _on_domain_error)
    if store is not None:
        app.state.store = store

    def store_of(request: fastapi.Request) -> RecordStore:
        return request.app.state.store

    # ═══════════════════════════════════════════════════════════════════════════
    # Storefront
    # ═══════════════════════════════════════════════════════════════════════════

    @app.post("/checkout", status_code=201)
    async def create_order(body: CheckoutIn, request: fastapi.Request) -> OrderOut:
        ctx = CheckoutContext(store_of(request), config)
        order = unwrap(await checkout(body.to_domain(), ctx))
        return OrderOut.from_domain(order)

    @app.post("/quote")
    async def price_cart(body: CheckoutIn, request: fastapi.Request) -> QuoteOut:
        ctx = CheckoutContext(store_of(request), config)
        return QuoteOut.from_domain(unwrap(await quote(body.to_domain(), ctx)))

    @app.get("/slots")
    async def schedule_slots(request: fastapi.Request) -> SlotsOut:
        records = unwrap(await store_of(request).list_all(Tables.SETTINGS))
        settings = settings_from_record(records[0] if records else None)
        now = config.clock()
        status = shop_status(settings, now)
        slots = ScheduleSlotGenerator(config).for_status(status, now)
        return SlotsOut(is_open=status.is_open, message=status.message, slots=slots)

    # ═══════════════════════════════════════════════════════════════════════════
    # Staff
    # ═══════════════════════════════════════════════════════════════════════════

    @app.get("/orders/active")
    async def active_orders(request: fastapi.Request) -> list[OrderOut]:
        orders = unwrap(await OrderDesk(store_of(request)).active_orders())
        return [OrderOut.from_domain(o) for o in orders]

    @app.patch("/orders/{order_id}")
    async def update_order(order_id: str, body: OrderUpdateIn, request: fastapi.Request) -> OrderOut:
        order = unwrap(await OrderDesk(store_of(request)).update(body.to_domain(order_id)))
        return OrderOut.from_domain(order)

    # ═══════════════════════════════════════════════════════════════════════════
    # Drivers
    # ═══════════════════════════════════════════════════════════════════════════

    @app.post("/orders/{order_id}/claim")
    async def claim_order(order_id: str, body: ClaimIn, request: fastapi.Request) -> OrderOut:
        broker = DriverAssignmentBroker(store_of(request))
        return OrderOut.from_domain(unwrap(await broker.claim(order_id, body.driver_id)))

    @app.get("/drivers/{driver_id}/queue")
    async def driver_queue(driver_id: str, request: fastapi.Request) -> list[OrderOut]:
        orders = unwrap(await DriverAssignmentBroker(store_of(request)).driver_queue(driver_id))
        return [OrderOut.from_domain(o) for o in orders]

    return app


__all__ = ("create_app", "database_url", "status_for", "DATABASE_URL_ENV")
