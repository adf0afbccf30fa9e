"""CLI entry point for the Reseller Analytics engine."""

from __future__ import annotations

import functools
import logging
from datetime import date, datetime

import click

from analytics.models import GRANULARITIES
from config import settings
from utils.snapshot import Snapshot, SnapshotError, load_snapshot

_DATE = click.DateTime(formats=["%Y-%m-%d"])


@click.group()
def cli() -> None:
    """Reseller Analytics: profitability reports over a ledger snapshot."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def ledger_options(f):
    """Add --snapshot/--start/--end and hand the command a loaded snapshot."""

    @click.option("--snapshot", "snapshot_path", default=None, help="Ledger JSON file.")
    @click.option("--start", type=_DATE, default=None, help="Start date (YYYY-MM-DD).")
    @click.option("--end", type=_DATE, default=None, help="End date (YYYY-MM-DD).")
    @functools.wraps(f)
    def wrapper(
        snapshot_path: str | None,
        start: datetime | None,
        end: datetime | None,
        **kwargs,
    ) -> None:
        from analytics.models import DateRange

        path = snapshot_path or settings.snapshot_path
        try:
            snapshot = load_snapshot(path)
        except SnapshotError as exc:
            print(f"Error loading snapshot: {exc}")
            return
        date_range = DateRange(
            start=start.date() if start else None,
            end=end.date() if end else None,
        )
        return f(snapshot, date_range, **kwargs)

    return wrapper


def _pct(value: float | None) -> str:
    return "-" if value is None else f"{value:.1f}%"


def _days(value: float | None) -> str:
    return "-" if value is None else f"{value:.1f}"


@cli.command()
@ledger_options
def hero(snapshot: Snapshot, date_range) -> None:
    """Show headline profit, items sold, ROI and inventory value."""
    from analytics import calculate_hero_metrics

    metrics = calculate_hero_metrics(
        snapshot.pallets, snapshot.items, snapshot.expenses, date_range
    )
    print(f"  Total Profit:       ${metrics.total_profit:,.2f}")
    print(f"  Items Sold:         {metrics.total_items_sold}")
    print(f"  Average ROI:        {_pct(metrics.avg_roi)}")
    print(f"  Active Inventory:   ${metrics.active_inventory_value:,.2f}")


@cli.command()
@ledger_options
def leaderboard(snapshot: Snapshot, date_range) -> None:
    """Rank pallets by profit."""
    from analytics import calculate_pallet_leaderboard

    rows = calculate_pallet_leaderboard(
        snapshot.pallets, snapshot.items, snapshot.expenses, date_range
    )
    if not rows:
        print("No pallets found.")
        return

    print(f"{'Pallet':<30} {'Profit':>12} {'ROI':>8} {'Sold':>9} {'Sell-Thru':>10} {'Days':>6}")
    print("-" * 80)
    for row in rows:
        print(
            f"{row.name[:30]:<30} "
            f"${row.profit:>11,.2f} "
            f"{_pct(row.roi):>8} "
            f"{row.sold_count:>4}/{row.item_count:<4} "
            f"{_pct(row.sell_through_rate):>10} "
            f"{_days(row.avg_days_to_sell):>6}"
        )


@cli.command()
@ledger_options
def types(snapshot: Snapshot, date_range) -> None:
    """Compare source types by average ROI."""
    from analytics import calculate_type_comparison

    rows = calculate_type_comparison(
        snapshot.pallets, snapshot.items, snapshot.expenses, date_range
    )
    if not rows:
        print("No pallets found.")
        return

    print(f"{'Source Type':<20} {'Pallets':>8} {'Profit':>12} {'Avg ROI':>9} {'Per Pallet':>12}")
    print("-" * 65)
    for row in rows:
        print(
            f"{row.label:<20} "
            f"{row.pallet_count:>8} "
            f"${row.total_profit:>11,.2f} "
            f"{_pct(row.avg_roi):>9} "
            f"${row.avg_profit_per_pallet:>11,.2f}"
        )


@cli.command()
@ledger_options
def suppliers(snapshot: Snapshot, date_range) -> None:
    """Compare suppliers by total profit."""
    from analytics import calculate_supplier_comparison

    rows = calculate_supplier_comparison(
        snapshot.pallets, snapshot.items, snapshot.expenses, date_range
    )
    if not rows:
        print("No pallets found.")
        return

    print(f"{'Supplier':<25} {'Pallets':>8} {'Sold':>6} {'Profit':>12} {'Avg ROI':>9}")
    print("-" * 65)
    for row in rows:
        print(
            f"{row.supplier[:25]:<25} "
            f"{row.pallet_count:>8} "
            f"{row.total_items_sold:>6} "
            f"${row.total_profit:>11,.2f} "
            f"{_pct(row.avg_roi):>9}"
        )


@cli.command("pallet-types")
@ledger_options
def pallet_types(snapshot: Snapshot, date_range) -> None:
    """Compare pallet types (source names) by total profit."""
    from analytics import calculate_pallet_type_comparison

    rows = calculate_pallet_type_comparison(
        snapshot.pallets, snapshot.items, snapshot.expenses, date_range
    )
    if not rows:
        print("No pallets found.")
        return

    print(f"{'Pallet Type':<25} {'Pallets':>8} {'Sold':>6} {'Profit':>12} {'Avg ROI':>9}")
    print("-" * 65)
    for row in rows:
        label = f"{row.pallet_type} (mystery)" if row.is_mystery_box else row.pallet_type
        print(
            f"{label[:25]:<25} "
            f"{row.pallet_count:>8} "
            f"{row.total_items_sold:>6} "
            f"${row.total_profit:>11,.2f} "
            f"{_pct(row.avg_roi):>9}"
        )


@cli.command()
@click.option("--snapshot", "snapshot_path", default=None, help="Ledger JSON file.")
@click.option("--days", type=int, default=None, help="Stale threshold in days.")
@click.option("--as-of", type=_DATE, default=None, help="Reference date (YYYY-MM-DD).")
def stale(snapshot_path: str | None, days: int | None, as_of: datetime | None) -> None:
    """List unsold items that have been listed too long."""
    from analytics import get_stale_items

    try:
        snapshot = load_snapshot(snapshot_path or settings.snapshot_path)
    except SnapshotError as exc:
        print(f"Error loading snapshot: {exc}")
        return

    threshold = days if days is not None else settings.stale_threshold_days
    reference: date | None = as_of.date() if as_of else None
    rows = get_stale_items(snapshot.items, snapshot.pallets, threshold, as_of=reference)
    if not rows:
        print(f"No items listed for {threshold}+ days.")
        return

    print(f"{'Item':<30} {'Pallet':<25} {'Days':>6} {'Price':>10}")
    print("-" * 75)
    for row in rows:
        price = f"${row.listing_price:.2f}" if row.listing_price is not None else "-"
        print(
            f"{row.name[:30]:<30} "
            f"{(row.pallet_name or '-')[:25]:<25} "
            f"{row.days_listed:>6} "
            f"{price:>10}"
        )
    print(f"\nTotal: {len(rows)} stale item(s)")


@cli.command()
@ledger_options
@click.option(
    "--granularity",
    type=click.Choice(GRANULARITIES),
    default=None,
    help="Bucket size (default from config).",
)
def trend(snapshot: Snapshot, date_range, granularity: str | None) -> None:
    """Show the profit trend series."""
    from analytics import calculate_profit_trend

    points = calculate_profit_trend(
        snapshot.items, granularity or settings.trend_granularity, date_range
    )
    if not points:
        print("No sales in this date range.")
        return

    print(f"{'Period':<12} {'Sold':>6} {'Revenue':>12} {'Profit':>12}")
    print("-" * 45)
    for point in points:
        print(
            f"{point.date:<12} "
            f"{point.items_sold:>6} "
            f"${point.revenue:>11,.2f} "
            f"${point.profit:>11,.2f}"
        )


@cli.command()
@ledger_options
def pnl(snapshot: Snapshot, date_range) -> None:
    """Print a profit & loss statement."""
    from analytics import calculate_profit_loss

    s = calculate_profit_loss(
        snapshot.items,
        snapshot.pallets,
        snapshot.expenses,
        snapshot.mileage_trips,
        date_range,
    )

    print(f"Profit & Loss: {s.period_start} to {s.period_end}")
    print("=" * 60)
    print(f"  Gross Sales:           ${s.revenue.gross_sales:,.2f}  ({s.revenue.items_sold} items)")
    print(f"  Cost of Goods Sold:    ${s.cogs.total_cogs:,.2f}")
    print(f"    Pallet items:        ${s.cogs.pallet_purchases:,.2f}  ({s.cogs.pallet_count} pallets)")
    print(f"    Individual items:    ${s.cogs.individual_item_purchases:,.2f}")
    print(f"    Sales tax:           ${s.cogs.sales_tax:,.2f}")
    print(f"  Gross Profit:          ${s.gross_profit:,.2f}  ({_pct(s.gross_margin)})")
    print(f"  Selling Expenses:      ${s.selling_expenses.total_selling_expenses:,.2f}")
    for platform in s.platform_breakdown:
        print(f"    {platform.label:<20} ${platform.sales:,.2f} sales, ${platform.fees:,.2f} fees")
    print(f"  Operating Expenses:    ${s.operating_expenses.total_operating_expenses:,.2f}")
    for category in s.operating_expenses.by_category:
        print(f"    {category.label:<20} ${category.amount:,.2f}")
    print(
        f"  Mileage Deduction:     ${s.mileage_deductions.total_deduction:,.2f}"
        f"  ({s.mileage_deductions.total_miles:,.1f} mi)"
    )
    print("-" * 60)
    print(f"  Net Profit:            ${s.net_profit:,.2f}  ({_pct(s.net_margin)})")


@cli.command()
@click.argument("pallet_id")
@click.option("--snapshot", "snapshot_path", default=None, help="Ledger JSON file.")
@click.option("--include-unsellable", is_flag=True, help="Give unsellable items a share too.")
def allocate(pallet_id: str, snapshot_path: str | None, include_unsellable: bool) -> None:
    """Show how a pallet's cost splits across its items."""
    from analytics.profit import build_cost_allocation

    try:
        snapshot = load_snapshot(snapshot_path or settings.snapshot_path)
    except SnapshotError as exc:
        print(f"Error loading snapshot: {exc}")
        return

    pallet = next((p for p in snapshot.pallets if p.id == pallet_id), None)
    if pallet is None:
        print(f"Pallet {pallet_id} not found.")
        return

    items = [item for item in snapshot.items if item.pallet_id == pallet_id]
    allocation = build_cost_allocation(pallet, items, include_unsellable)
    print(f"{pallet.name}: ${allocation.total_cost:,.2f} over {allocation.sellable_count} item(s)")
    print(f"{'Item':<30} {'Condition':<12} {'Allocated':>10}")
    print("-" * 55)
    for row in allocation.items:
        print(f"{row.name[:30]:<30} {row.condition:<12} ${row.allocated_cost:>9,.2f}")


@cli.command()
def web() -> None:
    """Start the Flask API server."""
    from api.app import create_app

    app = create_app()
    app.run(
        host=settings.flask_host,
        port=settings.flask_port,
        debug=settings.flask_debug,
    )


if __name__ == "__main__":
    cli()
