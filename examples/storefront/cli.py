"""
Interactive CLI — one storefront, its kitchen and its drivers.

┌─────────────────────────────────────────────────────────────────────────┐
│  COMMAND      RUNS                                                      │
├─────────────────────────────────────────────────────────────────────────┤
│  quote        checkout graph without the opening check and the write    │
│  checkout     full checkout graph: price, settle loyalty, store order   │
│  status       OrderDesk.update (one conditional write)                  │
│  claim        DriverAssignmentBroker.claim (compare-and-swap)           │
└─────────────────────────────────────────────────────────────────────────┘
"""

from decimal import Decimal

from kungfu import Error, Ok

from orderflow import EngineConfig, OrderflowError, format_money
from orderflow.catalog import CatalogView, DiscountType
from orderflow.checkout import (
    CheckoutContext,
    CheckoutLine,
    CheckoutRequest,
    ClientSession,
    award_prize,
    checkout,
    quote,
    track_orders,
)
from orderflow.dispatch import DriverAssignmentBroker
from orderflow.orders import (
    DeliveryOption,
    Order,
    OrderDesk,
    OrderStatus,
    OrderUpdate,
    PaymentMethod,
    load_orders,
)
from orderflow.pricing import PriceBreakdown, Prize, PrizeSelector
from orderflow.schedule import ScheduleSlotGenerator, shop_status
from orderflow.shop import settings_from_record
from orderflow.store import RecordStore, Tables

from examples.storefront.seed import open_store


# ═══════════════════════════════════════════════════════════════════════════════
# Help
# ═══════════════════════════════════════════════════════════════════════════════

HELP_TEXT = """
┌─────────────────────────────────────────────────────────────────────────────┐
│                              COMMANDS                                        │
├─────────────────────────────────────────────────────────────────────────────┤
│  menu                                    Products, sizes and addons          │
│  slots                                   Shop status and schedule slots      │
│  quote <cust|-> <bairro|retirada> <items> [CUPOM|pontos]                    │
│  checkout <cust|-> <bairro|retirada> <items> [CUPOM|pontos]                 │
│  spin                                    Prize wheel (once per session)      │
│  track                                   This session's orders               │
├─────────────────────────────────────────────────────────────────────────────┤
│  board                                   Active orders                       │
│  status <order> <status>                 e.g. status 3f2a preparo            │
│  broadcast <order>                       Open a delivery to all drivers      │
│  queue <driver>                          Driver's queue                      │
│  claim <order> <driver>                  Driver takes a delivery             │
├─────────────────────────────────────────────────────────────────────────────┤
│  help                                    Show this help                      │
│  quit                                    Exit                                │
└─────────────────────────────────────────────────────────────────────────────┘

Items format: PRODUCT[/SIZE][+ADDON...][:QTY],...
  acai/500ml+granola+banana:2,juice

Examples:
  quote 1 Centro burger+maionese pontos
  checkout - retirada acai/300ml+nutella
  checkout 1 Centro burger+barbecue:2,juice BEMVINDO
"""

STATUS_ALIASES = {
    "agendado": OrderStatus.SCHEDULED,
    "recebido": OrderStatus.RECEIVED,
    "preparo": OrderStatus.PREPARING,
    "retirada": OrderStatus.AWAITING_PICKUP,
    "saiu": OrderStatus.OUT_FOR_DELIVERY,
    "entregue": OrderStatus.DELIVERED,
    "pago": OrderStatus.PAID_AND_DELIVERED,
    "cancelado": OrderStatus.CANCELLED,
}

PRIZES = (
    Prize("R$ 3 de desconto", DiscountType.FIXED, Decimal("3")),
    Prize("10% off", DiscountType.PERCENTAGE, Decimal("10")),
    Prize("Frete grátis", DiscountType.FREE_SHIPPING, Decimal("0"), Decimal("20")),
)


def print_help() -> None:
    print(HELP_TEXT)


def print_error(e: OrderflowError) -> None:
    print(f"\n  ✗ Failed: [{e.code}] {e.message}")


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing
# ═══════════════════════════════════════════════════════════════════════════════

def parse_items(items_str: str) -> tuple[CheckoutLine, ...]:
    """Parse 'acai/500ml+granola:2,juice' into checkout lines."""
    lines: list[CheckoutLine] = []
    for part in items_str.split(","):
        token, _, qty = part.partition(":")
        head, *addons = token.split("+")
        product_id, _, size = head.partition("/")
        if not product_id:
            raise ValueError(f"Invalid item: {part!r}")
        lines.append(
            CheckoutLine(
                product_id=product_id,
                size=size or None,
                addons=frozenset(addons),
                quantity=int(qty) if qty else 1,
            )
        )
    return tuple(lines)


def make_request(args: list[str], session: ClientSession) -> CheckoutRequest | None:
    if len(args) not in (3, 4):
        print("  Usage: checkout <cust|-> <bairro|retirada> <items> [CUPOM|pontos]")
        return None
    customer, where, items_str, *extra = args
    try:
        items = parse_items(items_str)
    except ValueError as e:
        print(f"  ✗ Error: {e}")
        return None

    pickup = where.lower() == "retirada"
    coupon = extra[0] if extra and extra[0].lower() != "pontos" else None
    return CheckoutRequest(
        items=items,
        customer_name="Cliente" if customer == "-" else f"Cliente {customer}",
        payment_method=PaymentMethod.PIX_ONLINE,
        delivery_option=DeliveryOption.PICKUP if pickup else DeliveryOption.DELIVERY,
        customer_id=None if customer == "-" else customer,
        delivery_address=None if pickup else (session.last_address or "Rua Principal, 100"),
        neighborhood=None if pickup else where,
        coupon_code=coupon,
        loyalty_redeem=bool(extra) and extra[0].lower() == "pontos",
    )


async def resolve_order(store: RecordStore, prefix: str) -> Order | None:
    match await load_orders(store):
        case Ok(orders):
            found = [o for o in orders if o.id.startswith(prefix)]
        case Error(e):
            print_error(e)
            return None
    if len(found) != 1:
        print(f"  ✗ {len(found)} orders match {prefix!r}")
        return None
    return found[0]


# ═══════════════════════════════════════════════════════════════════════════════
# Display
# ═══════════════════════════════════════════════════════════════════════════════

def print_breakdown(b: PriceBreakdown) -> None:
    print(f"│  Subtotal:        R$ {format_money(b.subtotal):>9}                │")
    print(f"│  Entrega:         R$ {format_money(b.delivery_fee):>9}                │")
    if b.total_discount:
        print(f"│  Descontos:      -R$ {format_money(b.total_discount):>9}                │")
    print(f"│  TOTAL:           R$ {format_money(b.total):>9}                │")


def print_order_line(order: Order) -> None:
    driver = f" → {order.assigned_driver_name}" if order.assigned_driver_name else ""
    print(
        f"  {order.id[:6]}  {order.date:%H:%M}  {order.status.value:20} "
        f"{order.delivery_option.value:8} R$ {format_money(order.total):>8}{driver}"
    )


async def print_menu(store: RecordStore) -> None:
    products = await store.list_all(Tables.PRODUCTS)
    categories = await store.list_all(Tables.ADDON_CATEGORIES)
    match products, categories:
        case Ok(p), Ok(c):
            view = CatalogView.from_records(p, c)
        case Error(e), _:
            print_error(e)
            return
        case _, Error(e):
            print_error(e)
            return

    print("\n┌────────────────────────────────────────────────┐")
    print("│                    MENU                         │")
    print("├────────────────────────────────────────────────┤")
    for product in view.products:
        print(f"│  [{product.id:7}] {product.name:36} │")
        for size in product.sellable_sizes:
            print(f"│      {size.name:12} R$ {format_money(size.price):>8}                 │")
        for category in view.categories_for(product):
            names = ", ".join(a.id for a in category.addons)
            print(f"│      + {category.name}: {names:30}  │")
    print("└────────────────────────────────────────────────┘")


# ═══════════════════════════════════════════════════════════════════════════════
# Commands
# ═══════════════════════════════════════════════════════════════════════════════

async def cmd_slots(store: RecordStore, config: EngineConfig) -> None:
    match await store.list_all(Tables.SETTINGS):
        case Ok(records):
            settings = settings_from_record(records[0] if records else None)
        case Error(e):
            print_error(e)
            return
    now = config.clock()
    status = shop_status(settings, now)
    slots = ScheduleSlotGenerator(config).for_status(status, now)
    print(f"\n  {settings.name}: {'aberto' if status.is_open else 'fechado'} {status.message}")
    print(f"  Horários: {', '.join(slots) or '-'}")


async def cmd_quote(args: list[str], ctx: CheckoutContext, session: ClientSession) -> None:
    request = make_request(args, session)
    if request is None:
        return
    match await quote(request, ctx):
        case Ok(preview):
            print("\n┌────────────────────────────────────────────────┐")
            print(f"│  PRÉVIA ({preview.item_count} itens)                               │")
            print("├────────────────────────────────────────────────┤")
            print_breakdown(preview.breakdown)
            if preview.remaining_points is not None:
                print(f"│  Pontos após o pedido: {preview.remaining_points:<6}                  │")
            print("└────────────────────────────────────────────────┘")
        case Error(e):
            print_error(e)


async def cmd_checkout(args: list[str], ctx: CheckoutContext, session: ClientSession) -> None:
    request = make_request(args, session)
    if request is None:
        return
    match await checkout(request, ctx):
        case Ok(order):
            print("\n╔════════════════════════════════════════════════╗")
            print(f"║  PEDIDO {order.id[:6]}  {order.status.value:30} ║")
            print("╠════════════════════════════════════════════════╣")
            for item in order.items:
                addons = "+".join(a.name for a in item.addons)
                print(f"║  {item.quantity}x {item.product_name} {item.size.name} {addons}")
            print_breakdown(
                PriceBreakdown(
                    order.subtotal,
                    order.delivery_fee,
                    order.discount_amount,
                    order.shipping_discount_amount,
                    order.loyalty_discount_amount,
                    order.loyalty_shipping_discount_amount,
                )
            )
            print("╚════════════════════════════════════════════════╝")
        case Error(e):
            print_error(e)


async def cmd_spin(ctx: CheckoutContext, session: ClientSession) -> None:
    match await award_prize(ctx.store, session, PrizeSelector(PRIZES), ctx.config):
        case Ok(coupon):
            print(f"\n  🎉 {coupon.description}! Cupom {coupon.code} válido até {coupon.expires_at:%H:%M}")
        case Error(e):
            print_error(e)


async def cmd_track(ctx: CheckoutContext, session: ClientSession) -> None:
    match await track_orders(ctx.store, session):
        case Ok(tracking):
            if tracking.current is not None:
                print(f"\n  Acompanhando {tracking.current.id[:6]}: {tracking.current.status.value}")
            for order in tracking.history:
                print_order_line(order)
        case Error(e):
            print_error(e)


async def cmd_board(store: RecordStore) -> None:
    match await OrderDesk(store).active_orders():
        case Ok(orders):
            print()
            for order in orders:
                print_order_line(order)
            if not orders:
                print("  (nenhum pedido ativo)")
        case Error(e):
            print_error(e)


async def cmd_status(store: RecordStore, prefix: str, alias: str) -> None:
    status = STATUS_ALIASES.get(alias.lower())
    if status is None:
        print(f"  ✗ Unknown status {alias!r}; one of: {', '.join(STATUS_ALIASES)}")
        return
    order = await resolve_order(store, prefix)
    if order is None:
        return
    match await OrderDesk(store).update(OrderUpdate(order.id, status=status)):
        case Ok(updated):
            print_order_line(updated)
        case Error(e):
            print_error(e)


async def cmd_broadcast(store: RecordStore, prefix: str) -> None:
    order = await resolve_order(store, prefix)
    if order is None:
        return
    match await DriverAssignmentBroker(store).broadcast(order):
        case Ok(updated):
            print_order_line(updated)
        case Error(e):
            print_error(e)


async def cmd_queue(store: RecordStore, driver_id: str) -> None:
    match await DriverAssignmentBroker(store).driver_queue(driver_id):
        case Ok(orders):
            print()
            for order in orders:
                print_order_line(order)
            if not orders:
                print("  (fila vazia)")
        case Error(e):
            print_error(e)


async def cmd_claim(store: RecordStore, prefix: str, driver_id: str) -> None:
    order = await resolve_order(store, prefix)
    if order is None:
        return
    match await DriverAssignmentBroker(store).claim(order.id, driver_id):
        case Ok(claimed):
            print_order_line(claimed)
        case Error(e):
            print_error(e)


# ═══════════════════════════════════════════════════════════════════════════════
# Main Loop
# ═══════════════════════════════════════════════════════════════════════════════

BANNER = """
╔════════════════════════════════════════════════════════════════════════════╗
║                        ORDERFLOW STOREFRONT DEMO                            ║
╠════════════════════════════════════════════════════════════════════════════╣
║                                                                             ║
║  Customers quote and place orders, staff move them across the board and    ║
║  drivers claim deliveries. Prices are always recomputed from the catalog.  ║
║                                                                             ║
╚════════════════════════════════════════════════════════════════════════════╝
"""


async def run_cli() -> None:
    store = await open_store()
    config = EngineConfig()
    session = ClientSession()
    ctx = CheckoutContext(store, config, session)

    print(BANNER)
    print_help()
    await print_menu(store)

    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        if not line:
            continue

        cmd, *args = line.split()

        match cmd.lower(), args:
            case ("quit" | "exit" | "q"), _:
                print("Bye!")
                break
            case ("help" | "h" | "?"), _:
                print_help()
            case "menu", _:
                await print_menu(store)
            case "slots", _:
                await cmd_slots(store, config)
            case "quote", _:
                await cmd_quote(args, ctx, session)
            case "checkout", _:
                await cmd_checkout(args, ctx, session)
            case "spin", _:
                await cmd_spin(ctx, session)
            case "track", _:
                await cmd_track(ctx, session)
            case "board", _:
                await cmd_board(store)
            case "status", [prefix, alias]:
                await cmd_status(store, prefix, alias)
            case "broadcast", [prefix]:
                await cmd_broadcast(store, prefix)
            case "queue", [driver_id]:
                await cmd_queue(store, driver_id)
            case "claim", [prefix, driver_id]:
                await cmd_claim(store, prefix, driver_id)
            case _:
                print(f"  ✗ Unknown command or arguments: {line}")
                print("  Type 'help' for available commands.")
