"""Cost models behind the aggregation views.

Every view asks the same question per group: how much profit, cost and
revenue did these pallets and items produce?  The lifetime model answers with
whole-pallet costs; the period model answers with the cost of the specific
units sold inside the window.  The choice is made once per call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol

from analytics.cogs import calculate_cogs, get_item_fees
from analytics.date_filter import has_date_range
from analytics.models import DateRange, Expense, GroupFinancials, Item, Pallet
from analytics.profit import apportion_expenses, calculate_pallet_profit

logger = logging.getLogger(__name__)


class CostStrategy(Protocol):
    def compute_group_financials(
        self,
        group_pallets: Sequence[Pallet],
        group_items: Sequence[Item],
        group_sold_items: Sequence[Item],
    ) -> GroupFinancials: ...


class PeriodCostStrategy:
    """Item-level COGS over the group's sold items in the window."""

    def compute_group_financials(
        self,
        group_pallets: Sequence[Pallet],
        group_items: Sequence[Item],
        group_sold_items: Sequence[Item],
    ) -> GroupFinancials:
        cogs = calculate_cogs(group_sold_items)
        return GroupFinancials(
            profit=cogs.net_profit,
            cost=cogs.total_cogs + cogs.total_fees,
            revenue=cogs.total_revenue,
            sold_count=len(group_sold_items),
        )


class LifetimeCostStrategy:
    """Whole-pallet costs with apportioned expenses, plus individually sourced items."""

    def __init__(self, expenses: Iterable[Expense]) -> None:
        self._expenses = list(expenses)

    def compute_group_financials(
        self,
        group_pallets: Sequence[Pallet],
        group_items: Sequence[Item],
        group_sold_items: Sequence[Item],
    ) -> GroupFinancials:
        totals = GroupFinancials()
        for pallet in group_pallets:
            pallet_items = [item for item in group_items if item.pallet_id == pallet.id]
            result = calculate_pallet_profit(
                pallet, pallet_items, apportion_expenses(pallet.id, self._expenses)
            )
            totals.profit += result.net_profit
            totals.cost += result.total_cost
            totals.revenue += result.total_revenue
            totals.sold_count += result.sold_items_count

        # Items with no pallet carry their own purchase cost.
        for item in group_items:
            if item.pallet_id is not None or not item.is_sold:
                continue
            cost = (item.purchase_cost or 0.0) + get_item_fees(item)
            totals.profit += (item.sale_price or 0.0) - cost
            totals.cost += cost
            totals.revenue += item.sale_price or 0.0
            totals.sold_count += 1

        return totals


def select_cost_strategy(
    date_range: DateRange | None,
    expenses: Iterable[Expense],
) -> CostStrategy:
    """Return the period strategy when *date_range* has a bound, else lifetime."""
    if has_date_range(date_range):
        logger.debug("Using period (COGS) cost model for %s", date_range)
        return PeriodCostStrategy()
    logger.debug("Using lifetime (pallet cost) cost model")
    return LifetimeCostStrategy(expenses)
