"""Cost of Goods Sold.

Period profitability is always computed from the cost of the specific units
sold in the period, never from the purchase cost of the whole batch they came
from.  Aggregations over a date window go through :func:`calculate_cogs`.
"""

from __future__ import annotations

from collections.abc import Iterable

from analytics.models import CogsResult, Item


def get_item_cost(item: Item) -> float:
    """Return the item's cost: allocated cost, then purchase cost, then 0."""
    if item.allocated_cost is not None:
        return item.allocated_cost
    if item.purchase_cost is not None:
        return item.purchase_cost
    return 0.0


def get_item_fees(item: Item) -> float:
    """Return platform fee plus shipping, treating missing values as 0."""
    return (item.platform_fee or 0.0) + (item.shipping_cost or 0.0)


def calculate_cogs(sold_items: Iterable[Item]) -> CogsResult:
    """Compute revenue, COGS, fees and net profit for a set of sold items.

    Items without a sale price are skipped.  The cost fallback is resolved
    per item, so one call may mix allocated and purchase costs.
    """
    revenue = 0.0
    cogs = 0.0
    fees = 0.0
    for item in sold_items:
        if item.sale_price is None:
            continue
        revenue += item.sale_price
        cogs += get_item_cost(item)
        fees += get_item_fees(item)

    return CogsResult(
        total_revenue=revenue,
        total_cogs=cogs,
        total_fees=fees,
        net_profit=revenue - cogs - fees,
    )
