"""Analytics package: pure profitability calculations over ledger records."""

from analytics.aggregations import (
    calculate_hero_metrics,
    calculate_pallet_leaderboard,
    calculate_pallet_type_comparison,
    calculate_period_summary,
    calculate_supplier_comparison,
    calculate_type_comparison,
)
from analytics.cogs import calculate_cogs
from analytics.date_filter import filter_by_date_range
from analytics.exports import build_export_data
from analytics.inventory import get_stale_items
from analytics.profit import calculate_pallet_profit
from analytics.profit_loss import calculate_profit_loss
from analytics.retail import calculate_retail_metrics
from analytics.trends import calculate_profit_trend

__all__ = [
    "build_export_data",
    "calculate_cogs",
    "calculate_hero_metrics",
    "calculate_pallet_leaderboard",
    "calculate_pallet_profit",
    "calculate_pallet_type_comparison",
    "calculate_period_summary",
    "calculate_profit_loss",
    "calculate_profit_trend",
    "calculate_retail_metrics",
    "calculate_supplier_comparison",
    "calculate_type_comparison",
    "filter_by_date_range",
    "get_stale_items",
]
