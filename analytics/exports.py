"""Plain report rows for the CSV/PDF export layer."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from analytics.aggregations import calculate_pallet_leaderboard, sold_items_in_range
from analytics.cogs import get_item_cost, get_item_fees
from analytics.date_filter import filter_by_date_range, parse_date
from analytics.models import (
    DateRange,
    Expense,
    ExpenseReportRow,
    ExportData,
    Item,
    ItemSaleRow,
    Pallet,
)
from analytics.profit import calculate_item_profit, calculate_item_roi, get_days_to_sell


def build_item_sales(
    items: Sequence[Item],
    pallets: Sequence[Pallet],
    date_range: DateRange | None = None,
) -> list[ItemSaleRow]:
    """One row per sold item in the window, in sale-date order."""
    pallet_names = {pallet.id: pallet.name for pallet in pallets}
    rows = []
    for item in sold_items_in_range(items, date_range):
        fees = get_item_fees(item)
        rows.append(
            ItemSaleRow(
                id=item.id,
                name=item.name,
                pallet_name=pallet_names.get(item.pallet_id) if item.pallet_id else None,
                sale_price=item.sale_price or 0.0,
                cost=get_item_cost(item),
                fees=fees,
                profit=calculate_item_profit(item) - fees,
                roi=calculate_item_roi(item),
                sale_date=item.sale_date,
                days_to_sell=get_days_to_sell(item),
                platform=item.platform,
            )
        )
    return sorted(rows, key=lambda row: parse_date(row.sale_date) or date.min)


def build_expense_report(
    expenses: Sequence[Expense],
    pallets: Sequence[Pallet],
    date_range: DateRange | None = None,
) -> list[ExpenseReportRow]:
    """One row per expense in the window, with linked pallet names resolved."""
    pallet_names = {pallet.id: pallet.name for pallet in pallets}
    return [
        ExpenseReportRow(
            id=expense.id,
            category=expense.category,
            amount=expense.amount,
            description=expense.description,
            date=expense.expense_date,
            pallet_names=[pallet_names.get(pid, pid) for pid in expense.linked_pallet_ids],
        )
        for expense in filter_by_date_range(expenses, date_range, "expense_date")
    ]


def build_export_data(
    pallets: Sequence[Pallet],
    items: Sequence[Item],
    expenses: Sequence[Expense],
    date_range: DateRange | None = None,
) -> ExportData:
    return ExportData(
        pallet_performance=calculate_pallet_leaderboard(pallets, items, expenses, date_range),
        item_sales=build_item_sales(items, pallets, date_range),
        expense_report=build_expense_report(expenses, pallets, date_range),
    )
