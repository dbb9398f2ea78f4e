"""
Financial Aggregator (Domain Logic).

Derives every line total, section total and summary figure of an expense
report from its line items and the client-supplied revenue. Pure: no I/O,
no session, and the input lines are never mutated.

Called by the service immediately before every write that can change
line items or revenue. Stored totals are never trusted.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Sequence

from backend.app.schemas.expense_report import BillLine, InventoryLine, PowerLine, PurchaseLine

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_money(value) -> Decimal:
    """Quantise to cents. ``None`` counts as zero."""
    if value is None:
        return ZERO.quantize(CENT)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def section_total(amounts: Iterable[Decimal]) -> Decimal:
    """Sum of line totals; an empty section is worth 0."""
    return to_money(sum((to_money(a) for a in amounts), ZERO))


@dataclass(frozen=True)
class ReportTotals:
    """Every derived figure of a report."""
    total_purchase_amount: Decimal
    total_bills_amount: Decimal
    total_inventory_value: Decimal
    total_power_cost: Decimal
    total_expenses: Decimal
    total_revenue: Decimal
    net_profit: Decimal
    profit_margin: Decimal


@dataclass(frozen=True)
class PricedContent:
    """Line items with their derived totals filled in, plus the roll-up."""
    purchases: List[PurchaseLine]
    bills: List[BillLine]
    inventory: List[InventoryLine]
    power: List[PowerLine]
    totals: ReportTotals


def price_purchase(line: PurchaseLine) -> PurchaseLine:
    return line.model_copy(update={"total_price": to_money(Decimal(line.quantity) * Decimal(line.unit_price))})


def price_bill(line: BillLine) -> BillLine:
    return line.model_copy(update={"amount": to_money(line.amount)})


def price_inventory(line: InventoryLine) -> InventoryLine:
    return line.model_copy(update={"total_value": to_money(Decimal(line.quantity) * Decimal(line.unit_cost))})


def price_power(line: PowerLine) -> PowerLine:
    """
    Units are the difference between the two meter readings.

    A reading below the previous one is rejected before pricing
    (see ``validation.check_power_readings``); here it is floored at 0.
    """
    units = max(Decimal(line.meter_reading) - Decimal(line.previous_reading), ZERO)
    return line.model_copy(update={
        "units_consumed": units,
        "total_cost": to_money(units * Decimal(line.rate_per_unit)),
    })


def summarize(
    total_purchase_amount: Decimal,
    total_bills_amount: Decimal,
    total_inventory_value: Decimal,
    total_power_cost: Decimal,
    total_revenue,
) -> ReportTotals:
    """
    Roll section totals up into the report summary.

    Inventory is a stock valuation, not a period expense, and is left out of
    ``total_expenses``. Margin is 0 when there is no revenue.
    """
    revenue = to_money(total_revenue)
    expenses = to_money(total_purchase_amount + total_bills_amount + total_power_cost)
    net = revenue - expenses

    if revenue > ZERO:
        margin = (net / revenue * HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)
    else:
        margin = ZERO.quantize(CENT)

    return ReportTotals(
        total_purchase_amount=to_money(total_purchase_amount),
        total_bills_amount=to_money(total_bills_amount),
        total_inventory_value=to_money(total_inventory_value),
        total_power_cost=to_money(total_power_cost),
        total_expenses=expenses,
        total_revenue=revenue,
        net_profit=net,
        profit_margin=margin,
    )


def compute_totals(
    purchases: Sequence[PurchaseLine],
    bills: Sequence[BillLine],
    inventory: Sequence[InventoryLine],
    power: Sequence[PowerLine],
    total_revenue,
) -> PricedContent:
    """
    Price every line and derive all totals.

    Deterministic: running it again on its own output yields the same result.
    """
    priced_purchases = [price_purchase(line) for line in purchases]
    priced_bills = [price_bill(line) for line in bills]
    priced_inventory = [price_inventory(line) for line in inventory]
    priced_power = [price_power(line) for line in power]

    totals = summarize(
        total_purchase_amount=section_total(line.total_price for line in priced_purchases),
        total_bills_amount=section_total(line.amount for line in priced_bills),
        total_inventory_value=section_total(line.total_value for line in priced_inventory),
        total_power_cost=section_total(line.total_cost for line in priced_power),
        total_revenue=total_revenue,
    )

    return PricedContent(
        purchases=priced_purchases,
        bills=priced_bills,
        inventory=priced_inventory,
        power=priced_power,
        totals=totals,
    )
