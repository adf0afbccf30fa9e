"""Analytics API endpoints.

Every endpoint takes the ledger snapshot in the JSON body together with the
view's options, and returns the engine output as JSON.  Nothing is stored.
"""

from __future__ import annotations

import logging
from datetime import date

from flask import Blueprint, jsonify, request

from analytics import (
    build_export_data,
    calculate_hero_metrics,
    calculate_pallet_leaderboard,
    calculate_pallet_profit,
    calculate_pallet_type_comparison,
    calculate_period_summary,
    calculate_profit_loss,
    calculate_profit_trend,
    calculate_supplier_comparison,
    calculate_type_comparison,
    get_stale_items,
)
from analytics.models import DateRange, Granularity
from analytics.profit import apportion_expenses, build_cost_allocation
from api.errors import handle_errors
from api.exceptions import NotFoundError, ValidationError
from config import settings
from utils.snapshot import Snapshot

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")


class AnalyticsRequest(Snapshot):
    """Request body: the snapshot plus per-view options."""

    date_range: DateRange | None = None
    threshold_days: int | None = None
    as_of: date | None = None
    granularity: Granularity | None = None
    include_unsellable: bool = False


def _parse_body() -> AnalyticsRequest:
    """Validate the JSON body, raising ValidationError when it isn't an object."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        msg = "Request body must be a JSON object"
        raise ValidationError(msg)
    return AnalyticsRequest.model_validate(data)


def _dump(rows: list) -> list[dict]:
    return [row.model_dump(mode="json") for row in rows]


# ===========================================================================
# Dashboard views
# ===========================================================================


@api_bp.route("/analytics/hero", methods=["POST"])
@handle_errors
def hero_metrics() -> tuple:
    """Headline totals for the selected window."""
    body = _parse_body()
    result = calculate_hero_metrics(body.pallets, body.items, body.expenses, body.date_range)
    return jsonify(result.model_dump(mode="json")), 200


@api_bp.route("/analytics/leaderboard", methods=["POST"])
@handle_errors
def pallet_leaderboard() -> tuple:
    """Per-pallet performance, most profitable first."""
    body = _parse_body()
    rows = calculate_pallet_leaderboard(body.pallets, body.items, body.expenses, body.date_range)
    return jsonify(_dump(rows)), 200


@api_bp.route("/analytics/types", methods=["POST"])
@handle_errors
def type_comparison() -> tuple:
    body = _parse_body()
    rows = calculate_type_comparison(body.pallets, body.items, body.expenses, body.date_range)
    return jsonify(_dump(rows)), 200


@api_bp.route("/analytics/suppliers", methods=["POST"])
@handle_errors
def supplier_comparison() -> tuple:
    body = _parse_body()
    rows = calculate_supplier_comparison(body.pallets, body.items, body.expenses, body.date_range)
    return jsonify(_dump(rows)), 200


@api_bp.route("/analytics/pallet-types", methods=["POST"])
@handle_errors
def pallet_type_comparison() -> tuple:
    body = _parse_body()
    rows = calculate_pallet_type_comparison(
        body.pallets, body.items, body.expenses, body.date_range
    )
    return jsonify(_dump(rows)), 200


@api_bp.route("/analytics/stale", methods=["POST"])
@handle_errors
def stale_items() -> tuple:
    """Unsold items listed longer than the threshold."""
    body = _parse_body()
    threshold = (
        body.threshold_days if body.threshold_days is not None else settings.stale_threshold_days
    )
    rows = get_stale_items(body.items, body.pallets, threshold, as_of=body.as_of)
    return jsonify(_dump(rows)), 200


@api_bp.route("/analytics/trend", methods=["POST"])
@handle_errors
def profit_trend() -> tuple:
    """Profit/revenue series bucketed by day, week or month."""
    body = _parse_body()
    granularity = body.granularity or settings.trend_granularity
    rows = calculate_profit_trend(body.items, granularity, body.date_range)
    return jsonify(_dump(rows)), 200


@api_bp.route("/analytics/period-summary", methods=["POST"])
@handle_errors
def period_summary() -> tuple:
    body = _parse_body()
    result = calculate_period_summary(body.items, body.date_range)
    return jsonify(result.model_dump(mode="json")), 200


# ===========================================================================
# Reports
# ===========================================================================


@api_bp.route("/analytics/profit-loss", methods=["POST"])
@handle_errors
def profit_loss() -> tuple:
    """Full P&L statement for the window."""
    body = _parse_body()
    summary = calculate_profit_loss(
        body.items,
        body.pallets,
        body.expenses,
        body.mileage_trips,
        body.date_range,
        as_of=body.as_of,
    )
    logger.info(
        "P&L generated for %s..%s (%d items sold)",
        summary.period_start,
        summary.period_end,
        summary.revenue.items_sold,
    )
    return jsonify(summary.model_dump(mode="json")), 200


@api_bp.route("/analytics/pallets/<pallet_id>/profit", methods=["POST"])
@handle_errors
def pallet_profit(pallet_id: str) -> tuple:
    """Whole-lifetime profit for one pallet, expenses apportioned."""
    body = _parse_body()
    pallet = next((p for p in body.pallets if p.id == pallet_id), None)
    if pallet is None:
        msg = f"Pallet {pallet_id} not found"
        raise NotFoundError(msg)

    items = [item for item in body.items if item.pallet_id == pallet_id]
    result = calculate_pallet_profit(pallet, items, apportion_expenses(pallet_id, body.expenses))
    return jsonify(result.model_dump(mode="json")), 200


@api_bp.route("/analytics/export", methods=["POST"])
@handle_errors
def export_data() -> tuple:
    """Pallet performance, item sales and expense rows for CSV/PDF export."""
    body = _parse_body()
    data = build_export_data(body.pallets, body.items, body.expenses, body.date_range)
    return jsonify(data.model_dump(mode="json")), 200


@api_bp.route("/analytics/pallets/<pallet_id>/allocation", methods=["POST"])
@handle_errors
def pallet_allocation(pallet_id: str) -> tuple:
    """Per-item split of the pallet's purchase cost and sales tax."""
    body = _parse_body()
    pallet = next((p for p in body.pallets if p.id == pallet_id), None)
    if pallet is None:
        msg = f"Pallet {pallet_id} not found"
        raise NotFoundError(msg)

    items = [item for item in body.items if item.pallet_id == pallet_id]
    allocation = build_cost_allocation(pallet, items, body.include_unsellable)
    return jsonify(allocation.model_dump(mode="json")), 200
