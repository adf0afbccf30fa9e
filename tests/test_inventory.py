"""Tests for analytics.inventory and analytics.retail."""

from __future__ import annotations

from datetime import date

import pytest

from analytics.inventory import get_stale_items
from analytics.retail import calculate_retail_metrics
from tests.conftest import make_item, make_pallet

AS_OF = date(2024, 3, 15)


class TestStaleItems:
    def test_threshold(self) -> None:
        items = [
            make_item(id="old", listing_date="2024-02-01"),
            make_item(id="new", listing_date="2024-03-10"),
        ]
        rows = get_stale_items(items, [make_pallet()], 30, as_of=AS_OF)
        assert [row.id for row in rows] == ["old"]
        assert rows[0].days_listed >= 30

    def test_sorted_oldest_first(self) -> None:
        items = [
            make_item(id="b", listing_date="2024-01-20"),
            make_item(id="a", listing_date="2023-12-01"),
        ]
        rows = get_stale_items(items, [], 30, as_of=AS_OF)
        assert [row.id for row in rows] == ["a", "b"]

    def test_exactly_at_threshold(self) -> None:
        rows = get_stale_items([make_item(listing_date="2024-02-14")], [], 30, as_of=AS_OF)
        assert len(rows) == 1
        assert rows[0].days_listed == 30

    def test_skips_sold_and_undated(self) -> None:
        items = [
            make_item(id="sold", status="sold", sale_price=10.0, listing_date="2023-01-01"),
            make_item(id="undated", listing_date=None),
        ]
        assert get_stale_items(items, [], 30, as_of=AS_OF) == []

    def test_resolves_pallet_name(self) -> None:
        items = [
            make_item(id="a", pallet_id="pallet-1", listing_date="2024-01-01"),
            make_item(id="b", pallet_id=None, listing_date="2024-01-01"),
        ]
        rows = get_stale_items(items, [make_pallet(name="Spring Lot")], 30, as_of=AS_OF)
        names = {row.id: row.pallet_name for row in rows}
        assert names == {"a": "Spring Lot", "b": None}


class TestRetailMetrics:
    def test_none_without_retail_prices(self) -> None:
        assert calculate_retail_metrics([make_item(retail_price=None)], 100.0) is None
        assert calculate_retail_metrics([make_item(retail_price=0.0)], 100.0) is None
        assert calculate_retail_metrics([], 100.0) is None

    def test_recovery_over_sold_items(self) -> None:
        items = [
            make_item(id="a", status="sold", sale_price=30.0, retail_price=100.0),
            make_item(id="b", retail_price=300.0),
        ]
        metrics = calculate_retail_metrics(items, 80.0)
        assert metrics is not None
        assert metrics.total_retail_value == pytest.approx(400.0)
        assert metrics.retail_recovery_rate == pytest.approx(30.0)
        assert metrics.cost_per_dollar_retail == pytest.approx(0.2)

    def test_no_sales_means_zero_recovery(self) -> None:
        metrics = calculate_retail_metrics([make_item(retail_price=100.0)], 50.0)
        assert metrics is not None
        assert metrics.retail_recovery_rate == 0.0
