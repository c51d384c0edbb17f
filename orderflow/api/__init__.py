"""
HTTP API — FastAPI app and pydantic wire models.

    from orderflow.api import create_app

    app = create_app()  # uvicorn --factory orderflow.api:create_app
"""

from orderflow.api._app import create_app, database_url, status_for, DATABASE_URL_ENV
from orderflow.api._schemas import (
    CheckoutLineIn,
    CheckoutIn,
    OrderUpdateIn,
    ClaimIn,
    CartItemOut,
    OrderOut,
    QuoteOut,
    SlotsOut,
    ErrorOut,
)

__all__ = (
    "create_app",
    "database_url",
    "status_for",
    "DATABASE_URL_ENV",
    "CheckoutLineIn",
    "CheckoutIn",
    "OrderUpdateIn",
    "ClaimIn",
    "CartItemOut",
    "OrderOut",
    "QuoteOut",
    "SlotsOut",
    "ErrorOut",
)
