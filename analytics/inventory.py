"""Stale inventory detection."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from analytics.models import Item, Pallet, StaleItem
from analytics.profit import get_days_since_listed, is_item_stale


def get_stale_items(
    items: Sequence[Item],
    pallets: Sequence[Pallet],
    threshold_days: int = 30,
    as_of: date | None = None,
) -> list[StaleItem]:
    """Return unsold items listed for at least *threshold_days*, oldest first.

    *as_of* is the reference day (defaults to today).  Items without a usable
    listing date are never stale.
    """
    reference = as_of or date.today()
    pallet_names = {pallet.id: pallet.name for pallet in pallets}

    stale: list[StaleItem] = []
    for item in items:
        if not is_item_stale(item, threshold_days, reference):
            continue
        days_listed = get_days_since_listed(item, reference) or 0
        stale.append(
            StaleItem(
                id=item.id,
                name=item.name,
                pallet_id=item.pallet_id,
                pallet_name=pallet_names.get(item.pallet_id) if item.pallet_id else None,
                days_listed=days_listed,
                listing_price=item.listing_price,
            )
        )

    return sorted(stale, key=lambda row: row.days_listed, reverse=True)
