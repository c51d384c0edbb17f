import random
from datetime import timedelta
from decimal import Decimal

import pytest

from orderflow import UnmatchedNeighborhood
from orderflow.catalog import CatalogView, Coupon, DiscountType
from orderflow.loyalty import Customer, LoyaltyProgram, RewardType
from orderflow.orders import DeliveryOption
from orderflow.pricing import (
    DeliveryFeeResolver,
    DiscountEngine,
    LoyaltyReward,
    PriceBreakdown,
    Prize,
    PrizeSelector,
    compute_total,
    price,
)
from orderflow.shop import DeliverySettings, DeliveryType, ShopSettings

from tests.factories import NOW, err, ok


D = Decimal


def engine_for(
    catalog: CatalogView,
    settings: ShopSettings,
    customer: Customer | None = None,
) -> DiscountEngine:
    return DiscountEngine(catalog, settings.loyalty, customer, clock=lambda: NOW)


# ═══════════════════════════════════════════════════════════════════════════════
# Totals
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    ("parts", "expected"),
    [
        (("50", "5", "10", "0", "0", "0"), "45"),
        (("50", "5", "0", "5", "0", "0"), "50"),
        (("8", "0", "0", "0", "10", "0"), "0"),
        (("0", "0", "0", "0", "0", "0"), "0"),
        (("19.90", "7.00", "1.99", "0", "0", "7.00"), "17.91"),
    ],
)
def test_total_formula(parts, expected):
    amounts = [D(p) for p in parts]
    assert compute_total(*amounts) == D(expected)
    assert PriceBreakdown(*amounts).total == D(expected)


def test_total_discount_sums_all_components():
    b = PriceBreakdown(D("50"), D("5"), D("1"), D("2"), D("3"), D("4"))
    assert b.total_discount == D("10")


# ═══════════════════════════════════════════════════════════════════════════════
# Coupons
# ═══════════════════════════════════════════════════════════════════════════════


def test_fixed_coupon_over_minimum(catalog: CatalogView, settings: ShopSettings):
    engine = engine_for(catalog, settings)
    coupon = ok(engine.apply_coupon("PROMO10", D("50.00")))
    assert coupon.code == "PROMO10"

    breakdown = engine.breakdown(D("50.00"), D("5.00"))
    assert breakdown.discount_amount == D("10")
    assert breakdown.total == D("45.00")


def test_coupon_below_minimum_is_rejected(catalog: CatalogView, settings: ShopSettings):
    engine = engine_for(catalog, settings)
    e = err(engine.apply_coupon("PROMO10", D("15.00")))
    assert e.code == "MINIMUM_ORDER_NOT_MET"
    assert e.details == {"minimum_order_value": D("20")}
    assert engine.active_coupon is None
    assert engine.breakdown(D("15.00"), D("5.00")).discount_amount == 0


def test_percentage_coupon(catalog: CatalogView, settings: ShopSettings):
    engine = engine_for(catalog, settings)
    ok(engine.apply_coupon("dez", D("50")))
    assert engine.breakdown(D("50"), D("5")).total == D("50")


def test_free_shipping_coupon_zeroes_the_fee(catalog: CatalogView, settings: ShopSettings):
    engine = engine_for(catalog, settings)
    ok(engine.apply_coupon("FRETEGRATIS", D("30")))
    breakdown = engine.breakdown(D("30"), D("7"))
    assert breakdown.shipping_discount_amount == D("7")
    assert breakdown.total == D("30")


def test_unknown_and_expired_coupons_are_invalid(catalog: CatalogView, settings: ShopSettings):
    engine = engine_for(catalog, settings)
    assert err(engine.apply_coupon("NOPE", D("50"))).code == "INVALID_COUPON"
    assert err(engine.apply_coupon("VELHO", D("50"))).code == "INVALID_COUPON"


def test_coupon_minimum_is_rechecked_when_subtotal_drops():
    coupon = Coupon("c", "PROMO10", DiscountType.FIXED, D("10"), minimum_order_value=D("20"))
    assert price(D("15"), D("5"), coupon).discount_amount == 0
    assert price(D("25"), D("5"), coupon).discount_amount == D("10")


def test_used_coupon_is_rejected_for_that_customer(catalog: CatalogView, settings: ShopSettings):
    customer = Customer("ana", "Ana", 0, frozenset({"promo10"}))
    e = err(engine_for(catalog, settings, customer).apply_coupon("PROMO10", D("50")))
    assert e.code == "COUPON_ALREADY_USED"


def test_removing_inactive_coupon_is_a_no_op(catalog: CatalogView, settings: ShopSettings):
    engine = engine_for(catalog, settings)
    engine.remove_coupon()
    engine.remove_coupon()
    assert engine.active_coupon is None
    assert engine.breakdown(D("50"), D("5")).total == D("55")


# ═══════════════════════════════════════════════════════════════════════════════
# Loyalty and exclusivity
# ═══════════════════════════════════════════════════════════════════════════════


def test_coupon_and_reward_are_mutually_exclusive(catalog: CatalogView, settings: ShopSettings):
    engine = engine_for(catalog, settings, Customer("ana", "Ana", 120))

    ok(engine.apply_loyalty_reward())
    ok(engine.apply_coupon("PROMO10", D("50")))
    assert engine.active_coupon is not None
    assert engine.active_reward is None

    ok(engine.apply_loyalty_reward())
    assert engine.active_reward is not None
    assert engine.active_coupon is None

    breakdown = engine.breakdown(D("50"), D("5"))
    assert breakdown.discount_amount == 0
    assert breakdown.loyalty_discount_amount == D("10")
    assert engine.remaining_points() == 20


def test_failed_coupon_keeps_active_reward(catalog: CatalogView, settings: ShopSettings):
    engine = engine_for(catalog, settings, Customer("ana", "Ana", 120))
    ok(engine.apply_loyalty_reward())
    err(engine.apply_coupon("PROMO10", D("5")))
    assert engine.active_reward is not None


def test_reward_needs_enough_points(catalog: CatalogView, settings: ShopSettings):
    engine = engine_for(catalog, settings, Customer("bruno", "Bruno", 80))
    e = err(engine.apply_loyalty_reward())
    assert e.code == "INSUFFICIENT_POINTS"
    assert engine.active_reward is None


def test_reward_is_refused_when_program_disabled(catalog: CatalogView):
    engine = DiscountEngine(catalog, LoyaltyProgram(enabled=False), Customer("x", loyalty_points=500))
    assert err(engine.apply_loyalty_reward()).code == "LOYALTY_DISABLED"


def test_fixed_reward_is_capped_at_subtotal():
    reward = LoyaltyReward(RewardType.FIXED, D("10"), 100)
    breakdown = price(D("6"), D("5"), reward=reward)
    assert breakdown.loyalty_discount_amount == D("6")
    assert breakdown.total == D("5")


def test_free_shipping_reward():
    reward = LoyaltyReward(RewardType.FREE_SHIPPING, D("0"), 100)
    breakdown = price(D("30"), D("7"), reward=reward)
    assert breakdown.loyalty_shipping_discount_amount == D("7")
    assert breakdown.total == D("30")


# ═══════════════════════════════════════════════════════════════════════════════
# Delivery fee
# ═══════════════════════════════════════════════════════════════════════════════


def test_neighborhood_fee(settings: ShopSettings):
    resolver = DeliveryFeeResolver()
    assert ok(resolver.resolve(settings.delivery, DeliveryOption.DELIVERY, "BairroX")) == D("7.00")
    assert ok(resolver.resolve(settings.delivery, DeliveryOption.DELIVERY, " centro ")) == D("3.00")


def test_unknown_neighborhood_is_free_by_default(settings: ShopSettings):
    fee = ok(DeliveryFeeResolver().resolve(settings.delivery, DeliveryOption.DELIVERY, "Lugar Nenhum"))
    assert fee == 0


def test_unknown_neighborhood_can_be_rejected(settings: ShopSettings):
    resolver = DeliveryFeeResolver(UnmatchedNeighborhood.REJECT)
    e = err(resolver.resolve(settings.delivery, DeliveryOption.DELIVERY, "Lugar Nenhum"))
    assert e.code == "UNKNOWN_NEIGHBORHOOD"


def test_fixed_fee_and_non_delivery_options(settings: ShopSettings):
    fixed = DeliverySettings(DeliveryType.FIXED, D("5.00"))
    resolver = DeliveryFeeResolver()
    assert ok(resolver.resolve(fixed, DeliveryOption.DELIVERY, "Qualquer")) == D("5.00")
    assert ok(resolver.resolve(settings.delivery, DeliveryOption.PICKUP, "BairroX")) == 0
    assert ok(resolver.resolve(settings.delivery, DeliveryOption.COUNTER)) == 0


# ═══════════════════════════════════════════════════════════════════════════════
# Prize wheel
# ═══════════════════════════════════════════════════════════════════════════════


PRIZES = [
    Prize("R$ 5 off", DiscountType.FIXED, D("5")),
    Prize("Frete grátis", DiscountType.FREE_SHIPPING, D("0"), minimum_order_value=D("30")),
]


def test_spin_mints_short_lived_coupon():
    draw = PrizeSelector(PRIZES, rng=random.Random(7)).spin(NOW, timedelta(minutes=30))
    coupon = draw.coupon

    assert draw.prize is PRIZES[draw.index]
    assert coupon.code.startswith("PREMIO-")
    assert len(coupon.code) == len("PREMIO-") + 6
    assert coupon.id == coupon.code.lower()
    assert coupon.expires_at == NOW + timedelta(minutes=30)
    assert coupon.discount_type is draw.prize.discount_type


def test_prize_coupon_flows_through_discount_engine(catalog: CatalogView, settings: ShopSettings):
    draw = PrizeSelector(PRIZES[:1]).spin(NOW)
    view = catalog.with_coupon(draw.coupon)

    engine = engine_for(view, settings)
    ok(engine.apply_coupon(draw.coupon.code, D("20")))
    assert engine.breakdown(D("20"), D("3")).total == D("18")

    later = DiscountEngine(view, settings.loyalty, clock=lambda: NOW + timedelta(hours=2))
    assert err(later.apply_coupon(draw.coupon.code, D("20"))).code == "INVALID_COUPON"


def test_empty_wheel_is_refused():
    with pytest.raises(ValueError):
        PrizeSelector([])
