"""Profit trend series for charting."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta

from analytics.cogs import get_item_fees
from analytics.date_filter import filter_by_date_range, parse_date
from analytics.models import GRANULARITIES, DateRange, Granularity, Item, TrendDataPoint
from analytics.profit import calculate_item_profit


def bucket_start(day: date, granularity: Granularity) -> date:
    """Return the first day of the bucket containing *day*.

    Weekly buckets start on the Monday of the ISO week.

    Raises ValueError for an unknown granularity.
    """
    if granularity == "daily":
        return day
    if granularity == "weekly":
        return day - timedelta(days=day.weekday())
    if granularity == "monthly":
        return day.replace(day=1)
    msg = f"Unknown granularity: {granularity!r} (expected one of {', '.join(GRANULARITIES)})"
    raise ValueError(msg)


def calculate_profit_trend(
    items: Sequence[Item],
    granularity: Granularity = "monthly",
    date_range: DateRange | None = None,
) -> list[TrendDataPoint]:
    """Bucket sold items into a chronological profit/revenue/count series.

    Only buckets with at least one sale appear; gaps are not filled.
    """
    if granularity not in GRANULARITIES:
        msg = f"Unknown granularity: {granularity!r} (expected one of {', '.join(GRANULARITIES)})"
        raise ValueError(msg)

    sold = filter_by_date_range([item for item in items if item.is_sold], date_range, "sale_date")

    buckets: dict[date, dict[str, float]] = {}
    for item in sold:
        sale_day = parse_date(item.sale_date)
        if sale_day is None or item.sale_price is None:
            continue
        totals = buckets.setdefault(
            bucket_start(sale_day, granularity), {"profit": 0.0, "revenue": 0.0, "count": 0}
        )
        totals["profit"] += calculate_item_profit(item) - get_item_fees(item)
        totals["revenue"] += item.sale_price
        totals["count"] += 1

    return [
        TrendDataPoint(
            date=key.isoformat(),
            profit=totals["profit"],
            revenue=totals["revenue"],
            items_sold=int(totals["count"]),
        )
        for key, totals in sorted(buckets.items())
    ]
