"""Tests for analytics.cogs."""

from __future__ import annotations

from analytics.cogs import calculate_cogs, get_item_cost, get_item_fees
from analytics.models import CogsResult
from tests.conftest import make_item


class TestGetItemCost:
    def test_prefers_allocated_cost(self) -> None:
        assert get_item_cost(make_item(allocated_cost=30.0, purchase_cost=50.0)) == 30.0

    def test_falls_back_to_purchase_cost(self) -> None:
        assert get_item_cost(make_item(allocated_cost=None, purchase_cost=40.0)) == 40.0

    def test_defaults_to_zero(self) -> None:
        assert get_item_cost(make_item(allocated_cost=None, purchase_cost=None)) == 0.0

    def test_zero_allocated_cost_is_not_skipped(self) -> None:
        assert get_item_cost(make_item(allocated_cost=0.0, purchase_cost=40.0)) == 0.0


class TestGetItemFees:
    def test_sums_fee_and_shipping(self) -> None:
        assert get_item_fees(make_item(platform_fee=10.0, shipping_cost=5.0)) == 15.0

    def test_missing_values(self) -> None:
        assert get_item_fees(make_item()) == 0.0


class TestCalculateCogs:
    def test_empty(self) -> None:
        assert calculate_cogs([]) == CogsResult(
            total_revenue=0.0, total_cogs=0.0, total_fees=0.0, net_profit=0.0
        )

    def test_revenue_from_sale_prices(self) -> None:
        items = [
            make_item(id="i1", status="sold", sale_price=100.0),
            make_item(id="i2", status="sold", sale_price=150.0),
        ]
        assert calculate_cogs(items).total_revenue == 250.0

    def test_uses_allocated_cost(self) -> None:
        items = [
            make_item(id="i1", status="sold", sale_price=100.0, allocated_cost=30.0, purchase_cost=50.0),
            make_item(id="i2", status="sold", sale_price=150.0, allocated_cost=45.0, purchase_cost=60.0),
        ]
        assert calculate_cogs(items).total_cogs == 75.0

    def test_fallback_resolved_per_item(self) -> None:
        items = [
            make_item(id="i1", status="sold", sale_price=100.0, allocated_cost=None, purchase_cost=40.0),
            make_item(id="i2", status="sold", sale_price=150.0, allocated_cost=25.0, purchase_cost=50.0),
        ]
        assert calculate_cogs(items).total_cogs == 65.0

    def test_includes_fees_and_shipping(self) -> None:
        items = [
            make_item(id="i1", status="sold", sale_price=100.0, allocated_cost=30.0, platform_fee=10.0, shipping_cost=5.0),
            make_item(id="i2", status="sold", sale_price=150.0, allocated_cost=45.0, platform_fee=15.0, shipping_cost=8.0),
        ]
        assert calculate_cogs(items).total_fees == 38.0

    def test_net_profit(self) -> None:
        items = [
            make_item(status="sold", sale_price=100.0, allocated_cost=30.0, platform_fee=10.0, shipping_cost=5.0),
        ]
        assert calculate_cogs(items).net_profit == 55.0

    def test_skips_items_without_sale_price(self) -> None:
        items = [
            make_item(id="i1", status="sold", sale_price=100.0, allocated_cost=30.0),
            make_item(id="i2", status="listed", sale_price=None, allocated_cost=40.0),
        ]
        result = calculate_cogs(items)
        assert result.total_revenue == 100.0
        assert result.total_cogs == 30.0

    def test_missing_costs_default_to_zero(self) -> None:
        items = [
            make_item(status="sold", sale_price=100.0, allocated_cost=None, purchase_cost=None),
        ]
        result = calculate_cogs(items)
        assert result.total_cogs == 0.0
        assert result.net_profit == 100.0
