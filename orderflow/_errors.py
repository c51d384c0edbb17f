"""
Error taxonomy.

Three recoverable families, all carrying a stable ``code``:

    ValidationError:  bad input; nothing was mutated
    EligibilityError: input is fine but the actor may not do it right now
    PersistenceError: the record store failed or a write lost a race

Operations return ``Result[T, OrderflowError]``. Graph nodes raise, and the
graph entry point turns the exception into ``Error(e)``.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from orderflow._types import Money, format_money


class OrderflowError(Exception):
    def __init__(
        self,
        code: str,
        message: str,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = dict(details or {})

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.message!r})"


class ValidationError(OrderflowError):
    pass


class EligibilityError(OrderflowError):
    pass


class PersistenceError(OrderflowError):
    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(code, message)
        self.cause = cause


# ═══════════════════════════════════════════════════════════════════════════════
# Factories
# ═══════════════════════════════════════════════════════════════════════════════


class Errors:
    """Named constructors, one per failure the engine reports."""

    # Validation ───────────────────────────────────────────────────────────────

    @staticmethod
    def invalid_coupon(code: str) -> ValidationError:
        return ValidationError("INVALID_COUPON", f"Invalid coupon: {code}", {"coupon": code})

    @staticmethod
    def coupon_already_used(code: str) -> ValidationError:
        return ValidationError(
            "COUPON_ALREADY_USED", f"Coupon already used: {code}", {"coupon": code}
        )

    @staticmethod
    def minimum_order_not_met(minimum: Money) -> ValidationError:
        return ValidationError(
            "MINIMUM_ORDER_NOT_MET",
            f"Minimum order value for this coupon is {format_money(minimum)}",
            {"minimum_order_value": minimum},
        )

    @staticmethod
    def invalid_selection(category: str, message: str) -> ValidationError:
        return ValidationError("INVALID_ADDON_SELECTION", message, {"category": category})

    @staticmethod
    def max_selection_reached(category: str, limit: int) -> ValidationError:
        return ValidationError(
            "MAX_SELECTION_REACHED",
            f"You can choose at most {limit} option(s) in {category}",
            {"category": category, "limit": limit},
        )

    @staticmethod
    def unavailable(what: str, name: str) -> ValidationError:
        return ValidationError("UNAVAILABLE", f"{what} is unavailable: {name}", {what: name})

    @staticmethod
    def unknown(what: str, ident: str) -> ValidationError:
        return ValidationError("NOT_FOUND", f"Unknown {what}: {ident}", {what: ident})

    @staticmethod
    def invalid_quantity(quantity: int) -> ValidationError:
        return ValidationError(
            "INVALID_QUANTITY", f"Quantity must be at least 1, got {quantity}"
        )

    @staticmethod
    def empty_cart() -> ValidationError:
        return ValidationError("EMPTY_CART", "Cart is empty")

    @staticmethod
    def missing_field(name: str) -> ValidationError:
        return ValidationError("MISSING_FIELD", f"Missing required field: {name}", {"field": name})

    @staticmethod
    def conflicting_discounts() -> ValidationError:
        return ValidationError(
            "CONFLICTING_DISCOUNTS", "Use either a coupon or a loyalty reward, not both"
        )

    @staticmethod
    def unmatched_neighborhood(name: str | None) -> ValidationError:
        return ValidationError(
            "UNKNOWN_NEIGHBORHOOD", f"No delivery to neighborhood: {name}", {"neighborhood": name}
        )

    @staticmethod
    def shop_closed(message: str | None = None) -> ValidationError:
        return ValidationError("SHOP_CLOSED", message or "Shop is closed")

    @staticmethod
    def invalid_schedule(when: datetime) -> ValidationError:
        return ValidationError(
            "INVALID_SCHEDULE",
            f"Scheduled time is not in the future: {when:%Y-%m-%d %H:%M}",
            {"scheduled_time": when.isoformat()},
        )

    @staticmethod
    def closed_order(order_id: str, status: str) -> ValidationError:
        return ValidationError(
            "ORDER_CLOSED",
            f"Order {order_id} is {status} and can no longer change",
            {"order_id": order_id, "status": status},
        )

    @staticmethod
    def invalid_status(status: str) -> ValidationError:
        return ValidationError(
            "INVALID_STATUS", f"Status not allowed here: {status}", {"status": status}
        )

    @staticmethod
    def duplicate_driver(name: str) -> ValidationError:
        return ValidationError("DUPLICATE_DRIVER", f"Driver name already registered: {name}")

    # Eligibility ──────────────────────────────────────────────────────────────

    @staticmethod
    def loyalty_disabled() -> EligibilityError:
        return EligibilityError("LOYALTY_DISABLED", "Loyalty program is disabled")

    @staticmethod
    def insufficient_points(balance: int, required: int) -> EligibilityError:
        return EligibilityError(
            "INSUFFICIENT_POINTS",
            f"Need {required} points, have {balance}",
            {"balance": balance, "required": required},
        )

    @staticmethod
    def driver_not_approved(driver_id: str) -> EligibilityError:
        return EligibilityError(
            "DRIVER_NOT_APPROVED", f"Driver {driver_id} is not approved", {"driver_id": driver_id}
        )

    @staticmethod
    def already_claimed(order_id: str) -> EligibilityError:
        return EligibilityError(
            "ALREADY_CLAIMED",
            f"Order {order_id} was already claimed by another driver",
            {"order_id": order_id},
        )

    @staticmethod
    def order_not_available(order_id: str) -> EligibilityError:
        return EligibilityError(
            "ORDER_NOT_AVAILABLE",
            f"Order {order_id} is not open for drivers",
            {"order_id": order_id},
        )

    @staticmethod
    def not_assigned_to(order_id: str, driver_id: str) -> EligibilityError:
        return EligibilityError(
            "NOT_ASSIGNED",
            f"Order {order_id} is not assigned to driver {driver_id}",
            {"order_id": order_id, "driver_id": driver_id},
        )

    @staticmethod
    def assignment_changed(order_id: str) -> EligibilityError:
        return EligibilityError(
            "ASSIGNMENT_CHANGED",
            f"Order {order_id} changed since it was loaded; refresh and retry",
            {"order_id": order_id},
        )

    @staticmethod
    def already_spun() -> EligibilityError:
        return EligibilityError("ALREADY_SPUN", "Prize wheel was already used this session")

    # Persistence ──────────────────────────────────────────────────────────────

    @staticmethod
    def store(message: str, cause: Exception | None = None) -> PersistenceError:
        return PersistenceError("STORE_ERROR", message, cause)

    @staticmethod
    def write_conflict(table: str, record_id: str) -> PersistenceError:
        return PersistenceError(
            "WRITE_CONFLICT", f"Concurrent write to {table}/{record_id}, retry the operation"
        )

    @staticmethod
    def missing_record(table: str, record_id: str) -> PersistenceError:
        return PersistenceError("NOT_FOUND", f"No record {table}/{record_id}")


__all__ = (
    "OrderflowError",
    "ValidationError",
    "EligibilityError",
    "PersistenceError",
    "Errors",
)
