"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Generator
from datetime import date
from typing import Any

import pytest
from flask import Flask
from flask.testing import FlaskClient

from analytics.models import DateRange, Expense, Item, MileageTrip, Pallet


def make_pallet(**overrides: Any) -> Pallet:
    """Build a pallet with sensible defaults."""
    fields: dict[str, Any] = {
        "id": "pallet-1",
        "name": "Test Pallet",
        "supplier": "Test Supplier",
        "source_type": "pallet",
        "source_name": None,
        "purchase_cost": 100.0,
        "sales_tax": 10.0,
        "purchase_date": "2024-01-01",
        "status": "completed",
    }
    fields.update(overrides)
    return Pallet(**fields)


def make_item(**overrides: Any) -> Item:
    """Build a listed pallet item with sensible defaults.

    Sold items get a sale date unless one is passed explicitly.
    """
    fields: dict[str, Any] = {
        "id": "item-1",
        "name": "Test Item",
        "pallet_id": "pallet-1",
        "status": "listed",
        "condition": "new",
        "retail_price": 50.0,
        "listing_price": 40.0,
        "sale_price": None,
        "purchase_cost": None,
        "allocated_cost": 27.5,
        "platform": None,
        "platform_fee": None,
        "shipping_cost": None,
        "listing_date": "2024-01-15",
        "sale_date": None,
        "created_at": "2024-01-01T00:00:00",
    }
    if overrides.get("status") == "sold":
        fields["sale_date"] = "2024-01-20"
    fields.update(overrides)
    return Item(**fields)


def make_expense(**overrides: Any) -> Expense:
    fields: dict[str, Any] = {
        "id": "expense-1",
        "amount": 20.0,
        "category": "supplies",
        "description": "Test expense",
        "expense_date": "2024-01-10",
        "pallet_ids": ["pallet-1"],
    }
    fields.update(overrides)
    return Expense(**fields)


def make_trip(**overrides: Any) -> MileageTrip:
    fields: dict[str, Any] = {
        "id": "trip-1",
        "trip_date": "2024-01-05",
        "miles": 10.0,
        "mileage_rate": 0.67,
        "purpose": "Pallet pickup",
        "pallet_ids": [],
    }
    fields.update(overrides)
    return MileageTrip(**fields)


@pytest.fixture
def january() -> DateRange:
    """Calendar January 2024."""
    return DateRange(start=date(2024, 1, 1), end=date(2024, 1, 31))


@pytest.fixture
def q2() -> DateRange:
    """April through June 2024."""
    return DateRange(start=date(2024, 4, 1), end=date(2024, 6, 30), preset="q2")


@pytest.fixture
def app() -> Flask:
    from api.app import create_app

    app = create_app()
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app: Flask) -> Generator[FlaskClient, None, None]:
    with app.test_client() as c:
        yield c
