"""Aggregation views: hero metrics, pallet leaderboard and group comparisons.

Every view follows the same recipe:

1. Pick the cost strategy once (period view when the range has a bound).
2. Collect the sold items, date-filtered on ``sale_date`` in period view.
3. For each group, count *all* of its items (for sell-through) but take money
   only from its *filtered* sold items, through the strategy.
4. Derive ROI, sell-through and average days-to-sell, then sort.

A window with no sales therefore reports zero profit and zero ROI instead of
charging the window with the full cost of pallets bought earlier.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from analytics.cogs import get_item_fees
from analytics.date_filter import filter_by_date_range
from analytics.labels import get_source_type_label
from analytics.models import (
    DateRange,
    Expense,
    GroupFinancials,
    HeroMetrics,
    Item,
    Pallet,
    PalletAnalytics,
    PalletTypeComparison,
    PeriodSummary,
    SupplierComparison,
    TypeComparison,
)
from analytics.profit import (
    calculate_average_days_to_sell,
    calculate_item_profit,
    calculate_roi,
    percentage,
)
from analytics.retail import calculate_retail_metrics
from analytics.strategies import CostStrategy, select_cost_strategy
from utils.grouping import UNKNOWN_SUPPLIER, UNSPECIFIED_PALLET_TYPE, normalize_group_key

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _GroupSummary:
    financials: GroupFinancials
    pallet_count: int
    item_count: int
    roi: float
    sell_through_rate: float
    avg_days_to_sell: float | None

    @property
    def avg_profit_per_pallet(self) -> float:
        return self.financials.profit / self.pallet_count if self.pallet_count else 0.0

    @property
    def avg_items_per_pallet(self) -> float:
        return self.item_count / self.pallet_count if self.pallet_count else 0.0


def sold_items_in_range(items: Sequence[Item], date_range: DateRange | None) -> list[Item]:
    """Sold items carrying a sale price and date, filtered on ``sale_date`` when a range is set."""
    sold = [item for item in items if item.is_sold]
    return filter_by_date_range(sold, date_range, "sale_date")


def _summarize_group(
    strategy: CostStrategy,
    group_pallets: Sequence[Pallet],
    items: Sequence[Item],
    filtered_sold: Sequence[Item],
) -> _GroupSummary:
    pallet_ids = {pallet.id for pallet in group_pallets}
    group_items = [item for item in items if item.pallet_id in pallet_ids]
    group_sold = [item for item in filtered_sold if item.pallet_id in pallet_ids]

    financials = strategy.compute_group_financials(group_pallets, group_items, group_sold)
    return _GroupSummary(
        financials=financials,
        pallet_count=len(group_pallets),
        item_count=len(group_items),
        roi=calculate_roi(financials.profit, financials.cost),
        sell_through_rate=percentage(financials.sold_count, len(group_items)),
        avg_days_to_sell=calculate_average_days_to_sell(group_sold),
    )


def _group_pallets(
    pallets: Sequence[Pallet],
    key: Callable[[Pallet], str],
) -> dict[str, list[Pallet]]:
    """Group pallets by *key*, preserving first-seen order of the keys."""
    groups: dict[str, list[Pallet]] = {}
    for pallet in pallets:
        groups.setdefault(key(pallet), []).append(pallet)
    return groups


# ---------------------------------------------------------------------------
# Hero metrics
# ---------------------------------------------------------------------------


def calculate_hero_metrics(
    pallets: Sequence[Pallet],
    items: Sequence[Item],
    expenses: Sequence[Expense],
    date_range: DateRange | None = None,
) -> HeroMetrics:
    """Headline totals for the dashboard.

    Active inventory value ignores the date range: it is what is on the
    shelf right now.
    """
    strategy = select_cost_strategy(date_range, expenses)
    filtered_sold = sold_items_in_range(items, date_range)
    financials = strategy.compute_group_financials(pallets, items, filtered_sold)

    active_inventory_value = 0.0
    for item in items:
        if item.status == "sold":
            continue
        for price in (item.listing_price, item.retail_price, item.purchase_cost):
            if price is not None:
                active_inventory_value += price
                break

    return HeroMetrics(
        total_profit=financials.profit,
        total_items_sold=len(filtered_sold),
        avg_roi=calculate_roi(financials.profit, financials.cost),
        active_inventory_value=active_inventory_value,
    )


# ---------------------------------------------------------------------------
# Pallet leaderboard
# ---------------------------------------------------------------------------


def calculate_pallet_leaderboard(
    pallets: Sequence[Pallet],
    items: Sequence[Item],
    expenses: Sequence[Expense],
    date_range: DateRange | None = None,
) -> list[PalletAnalytics]:
    """Per-pallet performance, most profitable first."""
    strategy = select_cost_strategy(date_range, expenses)
    filtered_sold = sold_items_in_range(items, date_range)

    rows: list[PalletAnalytics] = []
    for pallet in pallets:
        summary = _summarize_group(strategy, [pallet], items, filtered_sold)
        pallet_items = [item for item in items if item.pallet_id == pallet.id]
        rows.append(
            PalletAnalytics(
                id=pallet.id,
                name=pallet.name,
                source_type=pallet.source_type,
                source_name=pallet.source_name,
                profit=summary.financials.profit,
                roi=summary.roi,
                total_cost=summary.financials.cost,
                total_revenue=summary.financials.revenue,
                item_count=summary.item_count,
                sold_count=summary.financials.sold_count,
                avg_days_to_sell=summary.avg_days_to_sell,
                sell_through_rate=summary.sell_through_rate,
                retail_metrics=calculate_retail_metrics(pallet_items, summary.financials.cost),
            )
        )

    return sorted(rows, key=lambda row: row.profit, reverse=True)


# ---------------------------------------------------------------------------
# Group comparisons
# ---------------------------------------------------------------------------


def calculate_type_comparison(
    pallets: Sequence[Pallet],
    items: Sequence[Item],
    expenses: Sequence[Expense],
    date_range: DateRange | None = None,
) -> list[TypeComparison]:
    """Aggregate by source type, best average ROI first."""
    strategy = select_cost_strategy(date_range, expenses)
    filtered_sold = sold_items_in_range(items, date_range)

    rows: list[TypeComparison] = []
    for source_type, group in _group_pallets(pallets, lambda p: p.source_type).items():
        summary = _summarize_group(strategy, group, items, filtered_sold)
        rows.append(
            TypeComparison(
                source_type=group[0].source_type,
                label=get_source_type_label(source_type),
                avg_roi=summary.roi,
                avg_profit_per_pallet=summary.avg_profit_per_pallet,
                avg_items_per_pallet=summary.avg_items_per_pallet,
                avg_days_to_sell=summary.avg_days_to_sell,
                sell_through_rate=summary.sell_through_rate,
                pallet_count=summary.pallet_count,
                total_profit=summary.financials.profit,
                total_cost=summary.financials.cost,
            )
        )

    return sorted(rows, key=lambda row: row.avg_roi, reverse=True)


def calculate_supplier_comparison(
    pallets: Sequence[Pallet],
    items: Sequence[Item],
    expenses: Sequence[Expense],
    date_range: DateRange | None = None,
) -> list[SupplierComparison]:
    """Aggregate by supplier (blank suppliers become "Unknown"), most profitable first."""
    strategy = select_cost_strategy(date_range, expenses)
    filtered_sold = sold_items_in_range(items, date_range)
    groups = _group_pallets(
        pallets, lambda p: normalize_group_key(p.supplier, UNKNOWN_SUPPLIER)
    )

    rows: list[SupplierComparison] = []
    for supplier, group in groups.items():
        summary = _summarize_group(strategy, group, items, filtered_sold)
        rows.append(
            SupplierComparison(
                supplier=supplier,
                total_profit=summary.financials.profit,
                total_cost=summary.financials.cost,
                avg_roi=summary.roi,
                avg_profit_per_pallet=summary.avg_profit_per_pallet,
                pallet_count=summary.pallet_count,
                total_items_sold=summary.financials.sold_count,
                avg_days_to_sell=summary.avg_days_to_sell,
                sell_through_rate=summary.sell_through_rate,
            )
        )

    return sorted(rows, key=lambda row: row.total_profit, reverse=True)


def calculate_pallet_type_comparison(
    pallets: Sequence[Pallet],
    items: Sequence[Item],
    expenses: Sequence[Expense],
    date_range: DateRange | None = None,
) -> list[PalletTypeComparison]:
    """Aggregate by pallet type (``source_name``), most profitable first.

    Blank types become "Unspecified".  A group is flagged as a mystery box
    when any of its pallets is one.
    """
    strategy = select_cost_strategy(date_range, expenses)
    filtered_sold = sold_items_in_range(items, date_range)
    groups = _group_pallets(
        pallets, lambda p: normalize_group_key(p.source_name, UNSPECIFIED_PALLET_TYPE)
    )

    rows: list[PalletTypeComparison] = []
    for pallet_type, group in groups.items():
        summary = _summarize_group(strategy, group, items, filtered_sold)
        rows.append(
            PalletTypeComparison(
                pallet_type=pallet_type,
                is_mystery_box=any(p.source_type == "mystery_box" for p in group),
                total_profit=summary.financials.profit,
                total_cost=summary.financials.cost,
                avg_roi=summary.roi,
                avg_profit_per_pallet=summary.avg_profit_per_pallet,
                pallet_count=summary.pallet_count,
                total_items_sold=summary.financials.sold_count,
                avg_days_to_sell=summary.avg_days_to_sell,
                sell_through_rate=summary.sell_through_rate,
            )
        )

    return sorted(rows, key=lambda row: row.total_profit, reverse=True)


# ---------------------------------------------------------------------------
# Period summary
# ---------------------------------------------------------------------------


def calculate_period_summary(items: Sequence[Item], date_range: DateRange | None) -> PeriodSummary:
    """Quick sales totals for a window, using item-level costs."""
    sold = sold_items_in_range(items, date_range)
    revenue = sum(item.sale_price or 0.0 for item in sold)
    profit = sum(calculate_item_profit(item) - get_item_fees(item) for item in sold)
    return PeriodSummary(
        items_sold=len(sold),
        revenue=revenue,
        profit=profit,
        avg_sale_price=revenue / len(sold) if sold else 0.0,
    )
