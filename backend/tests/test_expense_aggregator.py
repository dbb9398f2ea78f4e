"""
Unit tests for the expense report financial aggregator.

Pure functions only: no database, no HTTP.
"""

from decimal import Decimal

import pytest

from backend.app.domain.expense_reports.aggregator import (
    compute_totals, price_power, section_total, summarize, to_money,
)
from backend.app.schemas.expense_report import BillLine, InventoryLine, PowerLine, PurchaseLine


def test_to_money_rounds_half_up_to_cents():
    assert to_money("10.005") == Decimal("10.01")
    assert to_money("10.004") == Decimal("10.00")
    assert to_money(None) == Decimal("0.00")


def test_empty_section_is_zero():
    assert section_total([]) == Decimal("0.00")


def test_section_total_is_sum_of_lines():
    assert section_total([Decimal("1.10"), Decimal("2.20"), Decimal("3.30")]) == Decimal("6.60")


def test_single_purchase_against_revenue():
    """50 units at 200 against 190000 revenue."""
    priced = compute_totals(
        purchases=[PurchaseLine(item="Rice", quantity=50, unit_price=200)],
        bills=[],
        inventory=[],
        power=[],
        total_revenue=190000,
    )

    assert priced.purchases[0].total_price == Decimal("10000.00")
    assert priced.totals.total_purchase_amount == Decimal("10000.00")
    assert priced.totals.total_expenses == Decimal("10000.00")
    assert priced.totals.net_profit == Decimal("180000.00")
    assert priced.totals.profit_margin == Decimal("94.74")


def test_client_supplied_totals_are_ignored():
    priced = compute_totals(
        purchases=[PurchaseLine(quantity=2, unit_price="12.50", total_price=999)],
        bills=[],
        inventory=[InventoryLine(quantity=4, unit_cost=3, total_value=1)],
        power=[],
        total_revenue=0,
    )

    assert priced.purchases[0].total_price == Decimal("25.00")
    assert priced.inventory[0].total_value == Decimal("12.00")


def test_inventory_is_not_an_expense():
    priced = compute_totals(
        purchases=[],
        bills=[BillLine(amount=500)],
        inventory=[InventoryLine(quantity=10, unit_cost=100)],
        power=[],
        total_revenue=1000,
    )

    assert priced.totals.total_inventory_value == Decimal("1000.00")
    assert priced.totals.total_expenses == Decimal("500.00")
    assert priced.totals.net_profit == Decimal("500.00")
    assert priced.totals.profit_margin == Decimal("50.00")


def test_power_units_and_cost_are_derived():
    line = price_power(PowerLine(meter_reading=1500, previous_reading=1200, rate_per_unit="7.5"))

    assert line.units_consumed == Decimal("300")
    assert line.total_cost == Decimal("2250.00")


def test_power_units_never_negative():
    line = price_power(PowerLine(meter_reading=100, previous_reading=150, rate_per_unit=10))

    assert line.units_consumed == Decimal("0")
    assert line.total_cost == Decimal("0.00")


def test_margin_is_zero_without_revenue():
    totals = summarize(Decimal("100"), Decimal("0"), Decimal("0"), Decimal("0"), total_revenue=0)

    assert totals.net_profit == Decimal("-100.00")
    assert totals.profit_margin == Decimal("0.00")


@pytest.mark.parametrize("revenue, expenses", [
    (Decimal("0"), Decimal("0")),
    (Decimal("1000"), Decimal("250")),
    (Decimal("333.33"), Decimal("999.99")),
])
def test_profit_formula(revenue, expenses):
    totals = summarize(expenses, Decimal("0"), Decimal("0"), Decimal("0"), total_revenue=revenue)

    assert totals.net_profit == to_money(revenue - expenses)
    if revenue > 0:
        expected = (totals.net_profit / to_money(revenue) * 100).quantize(Decimal("0.01"))
        assert totals.profit_margin == expected
    else:
        assert totals.profit_margin == Decimal("0.00")


def test_recomputation_is_idempotent():
    content = dict(
        purchases=[PurchaseLine(quantity=3, unit_price="19.99")],
        bills=[BillLine(amount="120.50")],
        inventory=[InventoryLine(quantity=7, unit_cost="2.25")],
        power=[PowerLine(meter_reading=50, previous_reading=20, rate_per_unit=8)],
        total_revenue=5000,
    )
    first = compute_totals(**content)
    second = compute_totals(
        purchases=first.purchases,
        bills=first.bills,
        inventory=first.inventory,
        power=first.power,
        total_revenue=first.totals.total_revenue,
    )

    assert first == second


def test_input_lines_are_not_mutated():
    line = PurchaseLine(quantity=2, unit_price=5)
    compute_totals(purchases=[line], bills=[], inventory=[], power=[], total_revenue=0)

    assert line.total_price == Decimal("0")
