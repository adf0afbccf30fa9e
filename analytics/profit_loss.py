"""Profit & loss statement for tax preparation.

COGS is computed on an accrual basis: a period is charged for the cost of the
items it sold (plus the matching share of each pallet's sales tax), not for
the pallets it happened to buy.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from datetime import date

from analytics.cogs import get_item_cost
from analytics.date_filter import in_date_range, parse_date
from analytics.labels import get_expense_category_label, get_platform_label
from analytics.models import (
    CategoryTotal,
    CogsSection,
    DateRange,
    Expense,
    Item,
    MileageDeductions,
    MileageTrip,
    OperatingExpenses,
    Pallet,
    PlatformBreakdown,
    ProfitLossSummary,
    RevenueSection,
    SellingExpenses,
)
from analytics.profit import percentage

logger = logging.getLogger(__name__)

# Overhead categories.  Gas, mileage, fees and shipping are tracked through
# mileage trips and per-item selling costs instead.
OPERATING_EXPENSE_CATEGORIES = ("supplies", "storage", "subscriptions", "equipment", "other")


def _item_activity_date(item: Item) -> str | None:
    """Sale date for sold items, creation date for everything else."""
    if item.is_sold:
        return item.sale_date
    return item.created_at


def _earliest_date(
    items: Sequence[Item],
    pallets: Sequence[Pallet],
    expenses: Sequence[Expense],
    trips: Sequence[MileageTrip],
) -> date | None:
    candidates = [
        *(parse_date(p.purchase_date) for p in pallets),
        *(parse_date(i.created_at) for i in items),
        *(parse_date(e.expense_date) for e in expenses),
        *(parse_date(t.trip_date) for t in trips),
    ]
    dates = [d for d in candidates if d is not None]
    return min(dates) if dates else None


def _cogs_section(sold: Sequence[Item], all_items: Sequence[Item], pallets: Sequence[Pallet]) -> CogsSection:
    pallet_sold = [item for item in sold if item.pallet_id is not None]
    pallet_purchases = sum(get_item_cost(item) for item in pallet_sold)

    sold_per_pallet = Counter(item.pallet_id for item in pallet_sold)
    items_per_pallet = Counter(item.pallet_id for item in all_items if item.pallet_id is not None)
    prorated_tax = 0.0
    for pallet in pallets:
        sold_count = sold_per_pallet.get(pallet.id, 0)
        if not sold_count or not pallet.sales_tax:
            continue
        prorated_tax += pallet.sales_tax * sold_count / items_per_pallet[pallet.id]

    individual_sold = [item for item in sold if item.pallet_id is None]
    individual_purchases = sum(item.purchase_cost or 0.0 for item in individual_sold)
    individual_count = sum(1 for item in individual_sold if item.purchase_cost is not None)

    return CogsSection(
        pallet_purchases=pallet_purchases,
        pallet_count=len(sold_per_pallet),
        pallet_item_count=len(pallet_sold),
        individual_item_purchases=individual_purchases,
        individual_item_count=individual_count,
        sales_tax=prorated_tax,
        total_cogs=pallet_purchases + prorated_tax + individual_purchases,
    )


def _platform_breakdown(sold: Sequence[Item]) -> list[PlatformBreakdown]:
    totals: dict[str, PlatformBreakdown] = {}
    for item in sold:
        platform = item.platform or "other"
        row = totals.get(platform)
        if row is None:
            row = totals[platform] = PlatformBreakdown(
                platform=platform, label=get_platform_label(platform), sales=0.0, fees=0.0, count=0
            )
        row.sales += item.sale_price or 0.0
        row.fees += item.platform_fee or 0.0
        row.count += 1
    return sorted(totals.values(), key=lambda row: row.sales, reverse=True)


def _operating_expenses(expenses: Sequence[Expense]) -> OperatingExpenses:
    amounts: dict[str, float] = dict.fromkeys(OPERATING_EXPENSE_CATEGORIES, 0.0)
    counts: Counter[str] = Counter()
    for expense in expenses:
        if expense.category not in amounts:
            continue
        amounts[expense.category] += expense.amount
        counts[expense.category] += 1

    by_category = [
        CategoryTotal(
            category=category,  # type: ignore[arg-type]
            label=get_expense_category_label(category),
            amount=amount,
            count=counts[category],
        )
        for category, amount in amounts.items()
        if amount > 0
    ]
    return OperatingExpenses(
        by_category=by_category,
        total_operating_expenses=sum(row.amount for row in by_category),
    )


def _mileage_deductions(trips: Sequence[MileageTrip]) -> MileageDeductions:
    return MileageDeductions(
        total_miles=sum(trip.miles for trip in trips),
        avg_rate=sum(trip.mileage_rate for trip in trips) / len(trips) if trips else 0.0,
        # Each trip at its own rate; rates change year to year.
        total_deduction=sum(trip.miles * trip.mileage_rate for trip in trips),
        trip_count=len(trips),
    )


def calculate_profit_loss(
    items: Sequence[Item],
    pallets: Sequence[Pallet],
    expenses: Sequence[Expense],
    mileage_trips: Sequence[MileageTrip],
    date_range: DateRange | None = None,
    as_of: date | None = None,
) -> ProfitLossSummary:
    """Compile a full P&L statement for *date_range* (whole history if None).

    Each collection is filtered independently: items by sale date (creation
    date if unsold), pallets by purchase date, expenses by expense date and
    trips by trip date.  *as_of* stands in for "today" when the range has no
    end.
    """
    today = as_of or date.today()
    filtered_items = [i for i in items if in_date_range(_item_activity_date(i), date_range)]
    filtered_pallets = [p for p in pallets if in_date_range(p.purchase_date, date_range)]
    filtered_expenses = [e for e in expenses if in_date_range(e.expense_date, date_range)]
    filtered_trips = [t for t in mileage_trips if in_date_range(t.trip_date, date_range)]

    period_start = date_range.start if date_range and date_range.start else None
    if period_start is None:
        period_start = (
            _earliest_date(filtered_items, filtered_pallets, filtered_expenses, filtered_trips)
            or today
        )
    period_end = date_range.end if date_range and date_range.end else today

    # Revenue
    sold = [item for item in filtered_items if item.is_sold]
    gross_sales = sum(item.sale_price or 0.0 for item in sold)
    revenue = RevenueSection(
        gross_sales=gross_sales,
        items_sold=len(sold),
        avg_sale_price=gross_sales / len(sold) if sold else 0.0,
    )

    # Cost of goods sold; proration counts every item of the pallet.
    cogs = _cogs_section(sold, items, pallets)
    gross_profit = gross_sales - cogs.total_cogs

    # Selling expenses
    platform_fees = sum(item.platform_fee or 0.0 for item in sold)
    shipping_costs = sum(item.shipping_cost or 0.0 for item in sold)
    selling = SellingExpenses(
        platform_fees=platform_fees,
        shipping_costs=shipping_costs,
        total_selling_expenses=platform_fees + shipping_costs,
    )

    operating = _operating_expenses(filtered_expenses)
    mileage = _mileage_deductions(filtered_trips)

    total_expenses = (
        selling.total_selling_expenses
        + operating.total_operating_expenses
        + mileage.total_deduction
    )
    net_profit = gross_profit - total_expenses

    logger.debug(
        "P&L %s..%s: %d sales, gross %.2f, net %.2f",
        period_start,
        period_end,
        len(sold),
        gross_sales,
        net_profit,
    )

    return ProfitLossSummary(
        period_start=period_start,
        period_end=period_end,
        revenue=revenue,
        cogs=cogs,
        gross_profit=gross_profit,
        gross_margin=percentage(gross_profit, gross_sales),
        selling_expenses=selling,
        platform_breakdown=_platform_breakdown(sold),
        operating_expenses=operating,
        mileage_deductions=mileage,
        total_expenses=total_expenses,
        net_profit=net_profit,
        net_margin=percentage(net_profit, gross_sales),
        effective_tax_rate=None,
    )
