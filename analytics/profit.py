"""Per-item and per-pallet profit calculations.

The pallet resolver works on whole-lifetime numbers (full purchase cost, tax
and linked expenses) and is only used by the lifetime view.  Item helpers are
shared by every view.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from analytics.cogs import get_item_cost
from analytics.date_filter import parse_date
from analytics.models import (
    CostAllocation,
    Expense,
    Item,
    ItemAllocation,
    Pallet,
    PalletProfitResult,
)

# ---------------------------------------------------------------------------
# Ratios
# ---------------------------------------------------------------------------


def calculate_roi(profit: float, cost: float) -> float:
    """Return ROI as a percentage.

    With no cost any positive profit counts as 100% and anything else as 0.
    """
    if cost > 0:
        return profit / cost * 100
    return 100.0 if profit > 0 else 0.0


def percentage(part: float, whole: float) -> float:
    """``part / whole * 100``, or 0 when *whole* is zero."""
    return part / whole * 100 if whole else 0.0


# ---------------------------------------------------------------------------
# Item profit
# ---------------------------------------------------------------------------


def calculate_item_profit(item: Item) -> float:
    """Sale price minus item cost (fees excluded); 0 for unsold items."""
    if item.sale_price is None:
        return 0.0
    return item.sale_price - get_item_cost(item)


def calculate_item_roi(item: Item) -> float:
    if item.sale_price is None:
        return 0.0
    return calculate_roi(item.sale_price - get_item_cost(item), get_item_cost(item))


def get_days_to_sell(item: Item) -> int | None:
    """Whole days between listing and sale, or None if either date is missing."""
    if item.status != "sold":
        return None
    listed = parse_date(item.listing_date)
    sold = parse_date(item.sale_date)
    if listed is None or sold is None:
        return None
    return (sold - listed).days


def get_days_since_listed(item: Item, as_of: date | None = None) -> int | None:
    """Whole days the item has been listed as of *as_of* (default: today)."""
    listed = parse_date(item.listing_date)
    if listed is None:
        return None
    return ((as_of or date.today()) - listed).days


def is_item_stale(item: Item, threshold_days: int = 30, as_of: date | None = None) -> bool:
    """True for unsold items listed at least *threshold_days* ago."""
    if item.status == "sold":
        return False
    days = get_days_since_listed(item, as_of)
    return days is not None and days >= threshold_days


def calculate_average_days_to_sell(items: Iterable[Item]) -> float | None:
    """Mean days-to-sell over sold items that have both dates, else None."""
    days = [d for d in (get_days_to_sell(item) for item in items) if d is not None]
    if not days:
        return None
    return sum(days) / len(days)


# ---------------------------------------------------------------------------
# Cost allocation
# ---------------------------------------------------------------------------


def allocate_pallet_costs(
    pallet: Pallet,
    items: Sequence[Item],
    include_unsellable: bool = False,
) -> list[float]:
    """Return the allocated cost for each of *items*, in order.

    Even split of purchase cost plus sales tax across sellable items;
    unsellable items get 0 unless *include_unsellable* is set.  The last
    sellable item absorbs the rounding remainder so the total is
    penny-accurate.
    """
    if not items:
        return []

    total_cost = pallet.purchase_cost + (pallet.sales_tax or 0.0)
    sellable = [
        idx
        for idx, item in enumerate(items)
        if include_unsellable or item.condition != "unsellable"
    ]
    costs = [0.0] * len(items)
    if not sellable:
        return costs

    per_item = round(total_cost / len(sellable), 2)
    for idx in sellable:
        costs[idx] = per_item
    costs[sellable[-1]] = round(total_cost - per_item * (len(sellable) - 1), 2)
    return costs


def estimate_allocated_cost(
    pallet_cost: float,
    pallet_sales_tax: float | None,
    total_items: int,
    include_unsellable: bool = False,
    unsellable_count: int = 0,
) -> float:
    """Preview the per-item allocated cost before items are saved."""
    divisor = total_items if include_unsellable else total_items - unsellable_count
    if divisor <= 0:
        return 0.0
    return (pallet_cost + (pallet_sales_tax or 0.0)) / divisor


def build_cost_allocation(
    pallet: Pallet,
    items: Sequence[Item],
    include_unsellable: bool = False,
) -> CostAllocation:
    """Allocation table for *pallet*'s items, with the pre-save estimate alongside."""
    costs = allocate_pallet_costs(pallet, items, include_unsellable)
    unsellable_count = sum(1 for item in items if item.condition == "unsellable")
    return CostAllocation(
        pallet_id=pallet.id,
        total_cost=pallet.purchase_cost + (pallet.sales_tax or 0.0),
        sellable_count=len(items) if include_unsellable else len(items) - unsellable_count,
        estimated_per_item=estimate_allocated_cost(
            pallet.purchase_cost,
            pallet.sales_tax,
            len(items),
            include_unsellable,
            unsellable_count,
        ),
        items=[
            ItemAllocation(
                item_id=item.id,
                name=item.name,
                condition=item.condition,
                allocated_cost=cost,
            )
            for item, cost in zip(items, costs)
        ],
    )


# ---------------------------------------------------------------------------
# Pallet profit
# ---------------------------------------------------------------------------


def apportion_expenses(pallet_id: str, expenses: Iterable[Expense]) -> list[Expense]:
    """Return the expenses linked to *pallet_id* with amounts split evenly.

    An expense linked to N pallets contributes ``amount / N`` to each.
    """
    shares: list[Expense] = []
    for expense in expenses:
        linked = expense.linked_pallet_ids
        if pallet_id not in linked:
            continue
        shares.append(expense.model_copy(update={"amount": expense.amount / len(linked)}))
    return shares


def calculate_pallet_profit(
    pallet: Pallet | None,
    items: Sequence[Item],
    expenses: Iterable[Expense],
) -> PalletProfitResult:
    """Whole-lifetime profit for one pallet.

    *expenses* must already be apportioned to this pallet (see
    :func:`apportion_expenses`).  Cost is purchase cost plus sales tax plus
    expenses, regardless of how many items have sold.
    """
    if pallet is None:
        return PalletProfitResult(
            total_revenue=0.0,
            total_cost=0.0,
            pallet_cost=0.0,
            sales_tax=0.0,
            expenses=0.0,
            net_profit=0.0,
            roi=0.0,
            sold_items_count=0,
            total_items_count=len(items),
            unsold_items_count=len(items),
            unsold_value=0.0,
        )

    sold = [item for item in items if item.is_sold]
    unsold = [item for item in items if item.status != "sold"]
    total_revenue = sum(item.sale_price or 0.0 for item in sold)

    sales_tax = pallet.sales_tax or 0.0
    expense_total = sum(expense.amount for expense in expenses)
    total_cost = pallet.purchase_cost + sales_tax + expense_total
    net_profit = total_revenue - total_cost

    unsold_value = sum(
        item.listing_price if item.listing_price is not None else (item.retail_price or 0.0)
        for item in unsold
    )

    return PalletProfitResult(
        total_revenue=total_revenue,
        total_cost=total_cost,
        pallet_cost=pallet.purchase_cost,
        sales_tax=sales_tax,
        expenses=expense_total,
        net_profit=net_profit,
        roi=calculate_roi(net_profit, total_cost),
        sold_items_count=len(sold),
        total_items_count=len(items),
        unsold_items_count=len(unsold),
        unsold_value=unsold_value,
    )
