from decimal import Decimal

from orderflow.cart import AddonSelectionValidator, Cart, CartItem
from orderflow.catalog import SINGLE_SIZE_NAME, Addon, AddonCategory, CatalogView, PricingMode

from tests.factories import err, ok


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog parsing
# ═══════════════════════════════════════════════════════════════════════════════


def test_fixed_price_product_sells_as_single_size(catalog: CatalogView):
    soda = catalog.product("soda")
    assert soda is not None
    assert soda.pricing_mode is PricingMode.FIXED
    assert [(s.name, s.price) for s in soda.sellable_sizes] == [(SINGLE_SIZE_NAME, Decimal("5.00"))]


def test_missing_price_type_is_inferred_from_sizes(catalog: CatalogView):
    acai = catalog.product("acai")
    assert acai is not None
    assert acai.pricing_mode is PricingMode.SIZED
    assert acai.default_size() is not None
    assert acai.default_size().name == "500ml"


def test_selection_rules_pseudo_addon_is_parsed_and_hidden(catalog: CatalogView):
    sauce = catalog.category("sauce")
    assert sauce is not None
    assert [a.id for a in sauce.addons] == ["ketchup", "mustard"]
    assert AddonSelectionValidator.bounds(sauce) == (1, 1)


def test_coupon_lookup_is_case_insensitive(catalog: CatalogView):
    coupon = catalog.coupon("  promo10 ")
    assert coupon is not None
    assert coupon.code == "PROMO10"
    assert catalog.coupon("NOPE") is None


# ═══════════════════════════════════════════════════════════════════════════════
# Addon rules
# ═══════════════════════════════════════════════════════════════════════════════


def _burger_categories(catalog: CatalogView):
    burger = catalog.product("burger")
    assert burger is not None
    return catalog.categories_for(burger)


def test_valid_selection(catalog: CatalogView):
    categories = _burger_categories(catalog)
    assert ok(AddonSelectionValidator.check(categories, {"ketchup"})) is None
    assert ok(AddonSelectionValidator.check(categories, {"ketchup", "bacon", "cheese"})) is None


def test_required_category_needs_a_choice(catalog: CatalogView):
    e = err(AddonSelectionValidator.check(_burger_categories(catalog), set()))
    assert e.code == "INVALID_ADDON_SELECTION"
    assert e.details["category"] == "Molho"


def test_category_maximum_is_enforced(catalog: CatalogView):
    e = err(AddonSelectionValidator.check(_burger_categories(catalog), {"ketchup", "mustard"}))
    assert e.code == "INVALID_ADDON_SELECTION"


def test_unavailable_and_unknown_addons_are_rejected(catalog: CatalogView):
    categories = _burger_categories(catalog)
    assert err(AddonSelectionValidator.check(categories, {"ketchup", "egg"})).code == "UNAVAILABLE"
    assert err(AddonSelectionValidator.check(categories, {"ketchup", "ghost"})).code == "NOT_FOUND"


def test_required_without_min_selection_means_one():
    category = AddonCategory("c", "Base", (Addon("a", "A"),), required=True)
    assert AddonSelectionValidator.bounds(category) == (1, 0)


def test_toggle_adds_and_removes(catalog: CatalogView):
    extras = catalog.category("extras")
    assert extras is not None
    bacon, cheese, egg = extras.addons

    selected = ok(AddonSelectionValidator.toggle(frozenset(), bacon, extras))
    selected = ok(AddonSelectionValidator.toggle(selected, cheese, extras))
    assert selected == {"bacon", "cheese"}
    assert ok(AddonSelectionValidator.toggle(selected, bacon, extras)) == {"cheese"}
    assert err(AddonSelectionValidator.toggle(frozenset(), egg, extras)).code == "UNAVAILABLE"


def test_toggle_refuses_past_maximum(catalog: CatalogView):
    sauce = catalog.category("sauce")
    assert sauce is not None
    ketchup, mustard = sauce.addons
    e = err(AddonSelectionValidator.toggle(frozenset({ketchup.id}), mustard, sauce))
    assert e.code == "MAX_SELECTION_REACHED"
    assert e.details["limit"] == 1


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


def test_add_prices_size_plus_addons_times_quantity(catalog: CatalogView):
    cart = Cart(catalog)
    item = ok(cart.add("burger", size="Grande", addons={"bacon", "ketchup"}, quantity=2))

    assert item.unit_price == Decimal("29.00")
    assert item.total_price == Decimal("58.00")
    assert [a.id for a in item.addons] == ["bacon", "ketchup"]
    assert cart.subtotal == Decimal("58.00")
    assert cart.item_count == 2


def test_add_without_size_uses_first_available(catalog: CatalogView):
    cart = Cart(catalog)
    assert ok(cart.add("acai")).size.name == "500ml"
    assert ok(cart.add("soda", notes="gelado")).size.name == SINGLE_SIZE_NAME
    assert cart.subtotal == Decimal("21.00")
    assert len(cart) == 2


def test_add_rejections_leave_cart_unchanged(catalog: CatalogView):
    cart = Cart(catalog)
    assert err(cart.add("pie")).code == "UNAVAILABLE"
    assert err(cart.add("acai", size="300ml")).code == "UNAVAILABLE"
    assert err(cart.add("acai", size="1L")).code == "NOT_FOUND"
    assert err(cart.add("ghost")).code == "NOT_FOUND"
    assert err(cart.add("soda", quantity=0)).code == "INVALID_QUANTITY"
    assert err(cart.add("burger", size="Grande")).code == "INVALID_ADDON_SELECTION"
    assert len(cart) == 0
    assert cart.subtotal == 0


def test_increment_and_decrement_keep_unit_price(catalog: CatalogView):
    cart = Cart(catalog)
    ok(cart.add("burger", size="Pequeno", addons={"mustard"}))

    item = cart.increment(0)
    assert item is not None
    assert (item.quantity, item.total_price) == (2, Decimal("40.00"))

    cart.decrement(0)
    item = cart.decrement(0)
    assert item is not None
    assert (item.quantity, item.total_price) == (1, Decimal("20.00"))


def test_out_of_range_index_is_ignored(catalog: CatalogView):
    cart = Cart(catalog)
    ok(cart.add("soda"))
    assert cart.remove(3) is None
    assert cart.increment(-1) is None
    assert cart.remove(0) is not None
    assert cart.items == ()


def test_cart_item_record_round_trip(catalog: CatalogView):
    cart = Cart(catalog)
    item = ok(cart.add("burger", size="Grande", addons={"cheese", "ketchup"}, notes="sem cebola"))
    assert CartItem.from_record(item.to_record()) == item
