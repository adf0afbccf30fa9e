"""Tests for analytics.strategies."""

from __future__ import annotations

from datetime import date

import pytest

from analytics.models import DateRange
from analytics.strategies import LifetimeCostStrategy, PeriodCostStrategy, select_cost_strategy
from tests.conftest import make_expense, make_item, make_pallet


class TestSelectCostStrategy:
    def test_no_range_is_lifetime(self) -> None:
        assert isinstance(select_cost_strategy(None, []), LifetimeCostStrategy)
        assert isinstance(select_cost_strategy(DateRange(), []), LifetimeCostStrategy)

    def test_any_bound_is_period(self) -> None:
        assert isinstance(select_cost_strategy(DateRange(start=date(2024, 1, 1)), []), PeriodCostStrategy)
        assert isinstance(select_cost_strategy(DateRange(end=date(2024, 1, 1)), []), PeriodCostStrategy)


class TestPeriodCostStrategy:
    def test_uses_item_costs_and_fees(self) -> None:
        sold = [
            make_item(id="a", status="sold", sale_price=100.0, allocated_cost=50.0, platform_fee=5.0),
            make_item(id="b", status="sold", sale_price=60.0, allocated_cost=20.0, shipping_cost=3.0),
        ]
        result = PeriodCostStrategy().compute_group_financials([make_pallet()], sold, sold)

        assert result.revenue == 160.0
        assert result.cost == pytest.approx(78.0)
        assert result.profit == pytest.approx(82.0)
        assert result.sold_count == 2

    def test_ignores_pallet_cost(self) -> None:
        pallet = make_pallet(purchase_cost=10_000.0)
        result = PeriodCostStrategy().compute_group_financials([pallet], [make_item()], [])
        assert result.profit == 0.0
        assert result.cost == 0.0


class TestLifetimeCostStrategy:
    def test_charges_whole_pallet(self) -> None:
        pallet = make_pallet(purchase_cost=200.0, sales_tax=None)
        items = [
            make_item(id="a", status="sold", sale_price=100.0),
            make_item(id="b"),
        ]
        result = LifetimeCostStrategy([]).compute_group_financials([pallet], items, items[:1])

        assert result.cost == 200.0
        assert result.profit == -100.0
        assert result.sold_count == 1

    def test_expense_split_across_pallets(self) -> None:
        pallets = [
            make_pallet(id="p1", purchase_cost=100.0, sales_tax=None),
            make_pallet(id="p2", purchase_cost=100.0, sales_tax=None),
        ]
        strategy = LifetimeCostStrategy([make_expense(amount=40.0, pallet_ids=["p1", "p2"])])

        first = strategy.compute_group_financials(pallets[:1], [], [])
        second = strategy.compute_group_financials(pallets[1:], [], [])

        assert first.cost == pytest.approx(120.0)
        assert second.cost == pytest.approx(120.0)

    def test_individual_items_use_purchase_cost(self) -> None:
        item = make_item(
            pallet_id=None,
            status="sold",
            sale_price=30.0,
            purchase_cost=10.0,
            allocated_cost=None,
            platform_fee=2.0,
        )
        result = LifetimeCostStrategy([]).compute_group_financials([], [item], [item])

        assert result.cost == pytest.approx(12.0)
        assert result.profit == pytest.approx(18.0)
        assert result.revenue == 30.0
        assert result.sold_count == 1
