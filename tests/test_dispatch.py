import asyncio
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from orderflow import Errors
from orderflow._types import Error, Ok
from orderflow.dispatch import (
    DriverAssignmentBroker,
    DriverPayment,
    DriverRoster,
    DriverStatus,
    NewDeliveryTracker,
    OrderPoller,
    Period,
    custom_range,
    delivery_stats,
    driver_balance,
    driver_queue,
    period_range,
)
from orderflow.orders import DeliveryOption, Order, OrderDesk, OrderStatus
from orderflow.store import MemoryStore, Tables

from tests.factories import DRIVERS, NOW, err, make_order, ok


S = OrderStatus


async def store_with(*orders: Order) -> MemoryStore:
    store = MemoryStore({Tables.DRIVERS: DRIVERS})
    for order in orders:
        ok(await store.insert(Tables.ORDERS, order.to_record()))
    return store


# ═══════════════════════════════════════════════════════════════════════════════
# Claims
# ═══════════════════════════════════════════════════════════════════════════════


async def test_concurrent_claims_have_one_winner():
    store = await store_with(make_order("o-1"))
    broker = DriverAssignmentBroker(store)

    results = await asyncio.gather(broker.claim("o-1", "d1"), broker.claim("o-1", "d2"))

    winners = [r for r in results if isinstance(r, Ok)]
    losers = [err(r) for r in results if not isinstance(r, Ok)]
    assert len(winners) == 1
    assert [e.code for e in losers] == ["ALREADY_CLAIMED"]

    record = ok(await store.get(Tables.ORDERS, "o-1"))
    assert record["assigned_driver_id"] in {"d1", "d2"}


class StaleReadStore(MemoryStore):
    """Hands out one outdated copy of a record, as a slow reader would see it."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.stale: dict[str, dict] = {}

    async def get(self, table, record_id):
        if record_id in self.stale:
            return Ok(self.stale.pop(record_id))
        return await super().get(table, record_id)


async def test_claim_that_loses_the_write_race_reports_already_claimed():
    store = StaleReadStore({Tables.DRIVERS: DRIVERS})
    order = make_order("o-1")
    ok(await store.insert(Tables.ORDERS, order.to_record()))
    ok(await store.update(Tables.ORDERS, "o-1", {"assigned_driver_id": "d2"}))
    store.stale["o-1"] = order.to_record()

    result = await DriverAssignmentBroker(store).claim("o-1", "d1")

    assert err(result).code == "ALREADY_CLAIMED"
    assert ok(await store.get(Tables.ORDERS, "o-1"))["assigned_driver_id"] == "d2"


async def test_order_cancelled_after_the_read_cannot_be_claimed_or_assigned():
    store = StaleReadStore({Tables.DRIVERS: DRIVERS})
    order = make_order("o-1")
    ok(await store.insert(Tables.ORDERS, order.to_record()))
    ok(await OrderDesk(store).cancel("o-1"))
    store.stale["o-1"] = order.to_record()
    broker = DriverAssignmentBroker(store)

    assert err(await broker.claim("o-1", "d1")).code == "ORDER_NOT_AVAILABLE"
    assert err(await broker.assign(order, "d2")).code == "ASSIGNMENT_CHANGED"

    record = ok(await store.get(Tables.ORDERS, "o-1"))
    assert record["status"] == "Cancelado"
    assert record["assigned_driver_id"] is None


async def test_claim_rules():
    store = await store_with(
        make_order("hidden", broadcast=False),
        make_order("pickup", option=DeliveryOption.PICKUP),
        make_order("open"),
    )
    broker = DriverAssignmentBroker(store)

    assert err(await broker.claim("open", "d3")).code == "DRIVER_NOT_APPROVED"
    assert err(await broker.claim("open", "ghost")).code == "NOT_FOUND"
    assert err(await broker.claim("hidden", "d1")).code == "ORDER_NOT_AVAILABLE"
    assert err(await broker.claim("pickup", "d1")).code == "ORDER_NOT_AVAILABLE"

    order = ok(await broker.claim("open", "d1"))
    assert order.assigned_driver_id == "d1"
    assert order.assigned_driver_name == "Carlos"


async def test_driver_advances_only_own_order():
    store = await store_with(make_order("o-1", driver="d1"))
    broker = DriverAssignmentBroker(store)

    assert err(await broker.advance("o-1", "d2", S.OUT_FOR_DELIVERY)).code == "NOT_ASSIGNED"
    assert err(await broker.advance("o-1", "d1", S.PREPARING)).code == "INVALID_STATUS"
    assert ok(await broker.advance("o-1", "d1", S.OUT_FOR_DELIVERY)).status is S.OUT_FOR_DELIVERY
    assert ok(await broker.advance("o-1", "d1", S.DELIVERED)).status is S.DELIVERED


# ═══════════════════════════════════════════════════════════════════════════════
# Staff assignment
# ═══════════════════════════════════════════════════════════════════════════════


async def test_assign_and_unassign():
    order = make_order("o-1", broadcast=False)
    store = await store_with(order)
    broker = DriverAssignmentBroker(store)

    assigned = ok(await broker.assign(order, "d2"))
    assert assigned.assigned_driver_name == "Diego"
    assert assigned.is_delivery_broadcasted

    cleared = ok(await broker.unassign(assigned))
    assert cleared.assigned_driver_id is None
    assert not cleared.is_delivery_broadcasted


async def test_assign_from_stale_view_is_refused():
    order = make_order("o-1")
    store = await store_with(order)
    broker = DriverAssignmentBroker(store)
    ok(await broker.claim("o-1", "d1"))

    assert err(await broker.assign(order, "d2")).code == "ASSIGNMENT_CHANGED"
    assert err(await broker.broadcast(order)).code == "ASSIGNMENT_CHANGED"


async def test_only_open_delivery_orders_can_be_assigned():
    pickup = make_order("p", option=DeliveryOption.PICKUP)
    done = make_order("d", status=S.DELIVERED)
    store = await store_with(pickup, done)
    broker = DriverAssignmentBroker(store)

    assert err(await broker.assign(pickup, "d1")).code == "ORDER_NOT_AVAILABLE"
    assert err(await broker.broadcast(done)).code == "ORDER_CLOSED"
    assert err(await broker.assign(done, "d3")).code == "ORDER_CLOSED"


# ═══════════════════════════════════════════════════════════════════════════════
# Queue
# ═══════════════════════════════════════════════════════════════════════════════


def test_driver_queue_order_and_visibility():
    orders = [
        make_order("a", status=S.AWAITING_PICKUP, minute=20),
        make_order("b", status=S.PREPARING, minute=5),
        make_order("c", status=S.OUT_FOR_DELIVERY, minute=1, driver="d1"),
        make_order("d", status=S.PREPARING, minute=2, driver="d1"),
        make_order("e", status=S.PREPARING, driver="d2"),
        make_order("f", status=S.PREPARING, broadcast=False),
        make_order("g", status=S.AWAITING_PICKUP, minute=10),
        make_order("h", status=S.DELIVERED, driver="d1"),
        make_order("i", status=S.PREPARING, option=DeliveryOption.PICKUP),
        make_order("j", status=S.RECEIVED),
    ]
    assert [o.id for o in driver_queue(orders, "d1")] == ["g", "a", "b", "c", "d"]
    assert [o.id for o in driver_queue(orders, "d2")] == ["g", "a", "b", "e"]


async def test_broker_queue_reads_store():
    store = await store_with(make_order("o-1"), make_order("o-2", driver="d2"))
    broker = DriverAssignmentBroker(store)
    assert [o.id for o in ok(await broker.driver_queue("d1"))] == ["o-1"]
    assert [o.id for o in ok(await broker.available_orders())] == ["o-1"]


def test_new_delivery_tracker():
    tracker = NewDeliveryTracker()
    first = [make_order("o-1")]
    assert tracker.observe(first) == []
    assert tracker.observe(first) == []

    second = [*first, make_order("o-2", minute=3), make_order("o-3", driver="d1")]
    assert [o.id for o in tracker.observe(second)] == ["o-2"]


# ═══════════════════════════════════════════════════════════════════════════════
# Roster
# ═══════════════════════════════════════════════════════════════════════════════


async def test_register_and_approve_driver():
    roster = DriverRoster(MemoryStore({Tables.DRIVERS: DRIVERS}))

    driver = ok(await roster.register("  Fábio ", "11988887777"))
    assert driver.name == "Fábio"
    assert driver.status is DriverStatus.PENDING
    assert err(await roster.approved(driver.id)).code == "DRIVER_NOT_APPROVED"

    assert ok(await roster.approve(driver.id)).is_approved
    assert ok(await roster.block(driver.id)).status is DriverStatus.BLOCKED
    assert ok(await roster.unblock(driver.id)).is_approved
    assert ok(await roster.decline("d3")).status is DriverStatus.DECLINED


async def test_register_rejects_duplicates_and_blank_names():
    roster = DriverRoster(MemoryStore({Tables.DRIVERS: DRIVERS}))
    assert err(await roster.register("carlos")).code == "DUPLICATE_DRIVER"
    assert err(await roster.register("   ")).code == "MISSING_FIELD"
    assert err(await roster.approve("ghost")).code == "NOT_FOUND"


# ═══════════════════════════════════════════════════════════════════════════════
# Report
# ═══════════════════════════════════════════════════════════════════════════════


def test_period_ranges():
    assert period_range(Period.DAY, NOW) == (datetime(2026, 10, 14), NOW)
    assert period_range(Period.WEEK, NOW) == (datetime(2026, 10, 11), NOW)
    assert period_range(Period.MONTH, NOW) == (datetime(2026, 10, 1), NOW)
    start, end = custom_range(date(2026, 10, 1), date(2026, 10, 2))
    assert start == datetime(2026, 10, 1)
    assert end.date() == date(2026, 10, 2)


def test_delivery_stats_and_balance():
    orders = [
        make_order("a", status=S.DELIVERED, driver="d1", fee="7.00"),
        make_order("b", status=S.PAID_AND_DELIVERED, driver="d1", fee="3.00"),
        make_order("c", status=S.OUT_FOR_DELIVERY, driver="d1"),
        make_order("d", status=S.DELIVERED, driver="d2"),
    ]
    stats = delivery_stats(orders, "d1", *period_range(Period.DAY, NOW.replace(hour=23)))
    assert (stats.count, stats.total_fee) == (2, Decimal("10.00"))

    payments = [
        DriverPayment("p1", "d1", Decimal("4.00"), NOW),
        DriverPayment("p2", "d2", Decimal("5.00"), NOW),
    ]
    assert driver_balance(orders, payments, "d1").balance == Decimal("6.00")


# ═══════════════════════════════════════════════════════════════════════════════
# Poller
# ═══════════════════════════════════════════════════════════════════════════════


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def monotonic(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.now += seconds


async def test_slow_tick_skips_missed_ticks_instead_of_queueing():
    clock = FakeClock()
    started: list[float] = []

    async def fetch():
        started.append(clock.now)
        if len(started) == 1:
            clock.now += 25
        return Ok([])

    poller = OrderPoller(
        fetch,
        lambda orders: None,
        interval=timedelta(seconds=10),
        monotonic=clock.monotonic,
        sleep=clock.sleep,
    )
    await poller.run(max_ticks=3)

    assert started == [0.0, 25.0, 30.0]
    assert poller.ticks == 3
    assert poller.skipped == 1


async def test_failed_fetch_does_not_stop_the_loop():
    clock = FakeClock()
    seen: list[int] = []
    calls = 0

    async def fetch():
        nonlocal calls
        calls += 1
        if calls == 1:
            return Error(Errors.store("offline"))
        return Ok([make_order(f"o-{calls}")])

    async def on_orders(orders):
        seen.append(len(orders))

    poller = OrderPoller(fetch, on_orders, monotonic=clock.monotonic, sleep=clock.sleep)
    await poller.run(max_ticks=3)
    assert seen == [1, 1]


async def test_failing_callback_does_not_stop_the_loop():
    clock = FakeClock()
    calls: list[int] = []

    async def fetch():
        return Ok([])

    def on_orders(orders):
        calls.append(len(orders))
        if len(calls) == 1:
            raise RuntimeError("screen refresh failed")

    poller = OrderPoller(fetch, on_orders, monotonic=clock.monotonic, sleep=clock.sleep)
    assert await poller.tick() is False
    await poller.run(max_ticks=3)
    assert calls == [0, 0, 0]


def test_poll_interval_must_be_positive():
    async def fetch():
        return Ok([])

    with pytest.raises(ValueError):
        OrderPoller(fetch, lambda orders: None, interval=timedelta(0))
