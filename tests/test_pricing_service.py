"""Tests del motor de precios por tramos de cantidad."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.core.exceptions import InvalidQuantityError
from app.shared.database.models import SaleItem
from app.shared.services.pricing_service import (
    DISCOUNT_TIERS,
    MAX_QUANTITY_PER_PRODUCT,
    apply_pricing,
    calculate_item_pricing,
    discount_rate_for,
    recalculate_sale_total,
)


@pytest.mark.parametrize("quantity", [1, 2, 3])
def test_no_discount_up_to_three_units(quantity):
    pricing = calculate_item_pricing(Decimal("10.00"), quantity)

    assert pricing.discount == Decimal("0.00")
    assert pricing.total == Decimal("10.00") * quantity


@pytest.mark.parametrize("quantity", [4, 5, 9])
def test_ten_percent_between_four_and_nine(quantity):
    pricing = calculate_item_pricing(Decimal("10.00"), quantity)

    assert pricing.discount == Decimal("10.00") * quantity * Decimal("0.10")
    assert pricing.total == Decimal("10.00") * quantity - pricing.discount


@pytest.mark.parametrize("quantity", [10, 15, 20])
def test_twenty_percent_between_ten_and_twenty(quantity):
    pricing = calculate_item_pricing(Decimal("10.00"), quantity)

    assert pricing.discount == Decimal("10.00") * quantity * Decimal("0.20")
    assert pricing.total == Decimal("10.00") * quantity - pricing.discount


def test_five_units_at_ten():
    pricing = calculate_item_pricing(Decimal("10"), 5)

    assert pricing.gross == Decimal("50.00")
    assert pricing.discount == Decimal("5.00")
    assert pricing.total == Decimal("45.00")


def test_fifteen_units_at_one_hundred():
    pricing = calculate_item_pricing(Decimal("100"), 15)

    assert pricing.discount == Decimal("300.00")
    assert pricing.total == Decimal("1200.00")


def test_discount_is_rounded_to_cents():
    pricing = calculate_item_pricing(Decimal("3.33"), 7)

    # 23.31 * 0.10 = 2.331
    assert pricing.discount == Decimal("2.33")
    assert pricing.total == Decimal("20.98")


@pytest.mark.parametrize("quantity", [0, -1, 21])
def test_quantity_outside_range_is_rejected(quantity):
    with pytest.raises(InvalidQuantityError):
        calculate_item_pricing(Decimal("10.00"), quantity)


def test_limit_is_shared_by_tiers_and_error_message():
    assert DISCOUNT_TIERS[-1][1] == MAX_QUANTITY_PER_PRODUCT

    with pytest.raises(InvalidQuantityError) as exc_info:
        calculate_item_pricing(Decimal("10.00"), MAX_QUANTITY_PER_PRODUCT + 1)

    assert f"between 1 and {MAX_QUANTITY_PER_PRODUCT}" in exc_info.value.message


def test_recomputing_is_deterministic():
    first = calculate_item_pricing(Decimal("19.90"), 12)
    second = calculate_item_pricing(Decimal("19.90"), 12)

    assert first == second


def test_discount_rate_for_tier_boundaries():
    assert discount_rate_for(3) == Decimal("0.00")
    assert discount_rate_for(4) == Decimal("0.10")
    assert discount_rate_for(9) == Decimal("0.10")
    assert discount_rate_for(10) == Decimal("0.20")
    assert discount_rate_for(20) == Decimal("0.20")


def test_apply_pricing_updates_sale_item():
    item = SaleItem(product_id=1)

    apply_pricing(item, Decimal("100"), 15, "Cerveza")

    assert item.product_name == "Cerveza"
    assert item.unit_price == Decimal("100.00")
    assert item.quantity == 15
    assert item.discount == Decimal("300.00")
    assert item.total_value == Decimal("1200.00")


def test_apply_pricing_keeps_name_when_not_given():
    item = SaleItem(product_id=1, product_name="Original")

    apply_pricing(item, Decimal("10"), 2)

    assert item.product_name == "Original"


def test_recalculate_sale_total_sums_items():
    sale = SimpleNamespace(
        items=[
            SimpleNamespace(total_value=Decimal("45.00")),
            SimpleNamespace(total_value=Decimal("1200.00")),
        ],
        total_value=None,
    )

    total = recalculate_sale_total(sale)

    assert total == Decimal("1245.00")
    assert sale.total_value == Decimal("1245.00")


def test_recalculate_sale_total_without_items_is_zero():
    sale = SimpleNamespace(items=[], total_value=Decimal("99"))

    assert recalculate_sale_total(sale) == Decimal("0.00")
