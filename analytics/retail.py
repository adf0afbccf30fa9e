"""Deal-quality metrics based on retail (MSRP) value."""

from __future__ import annotations

from collections.abc import Iterable

from analytics.models import Item, RetailMetrics
from analytics.profit import percentage


def calculate_retail_metrics(items: Iterable[Item], group_cost: float) -> RetailMetrics | None:
    """Return retail recovery and cost-per-retail-dollar for *items*.

    Returns None when no item has a positive retail price.  Recovery is
    measured only over sold items that have a retail price.
    """
    priced = [item for item in items if item.retail_price is not None and item.retail_price > 0]
    if not priced:
        return None

    total_retail_value = sum(item.retail_price or 0.0 for item in priced)

    sold_priced = [item for item in priced if item.is_sold]
    sold_sales = sum(item.sale_price or 0.0 for item in sold_priced)
    sold_retail = sum(item.retail_price or 0.0 for item in sold_priced)

    return RetailMetrics(
        total_retail_value=total_retail_value,
        retail_recovery_rate=percentage(sold_sales, sold_retail),
        cost_per_dollar_retail=group_cost / total_retail_value if total_retail_value else 0.0,
    )
