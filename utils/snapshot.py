"""Load a JSON ledger snapshot exported by the storage layer."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from analytics.models import Expense, Item, MileageTrip, Pallet

logger = logging.getLogger(__name__)


class Snapshot(BaseModel):
    """The four ledger collections every analytics call takes."""

    pallets: list[Pallet] = Field(default_factory=list)
    items: list[Item] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    mileage_trips: list[MileageTrip] = Field(default_factory=list)


class SnapshotError(Exception):
    """Raised when a snapshot file is missing or malformed."""


def load_snapshot(path: str | Path) -> Snapshot:
    """Read and validate the snapshot at *path*.

    Raises:
        SnapshotError: If the file does not exist, is not JSON, or fails
            validation.
    """
    path = Path(path)
    if not path.is_file():
        msg = f"Snapshot not found: {path}"
        raise SnapshotError(msg)

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.warning("Snapshot %s is not valid JSON: %s", path, exc)
        msg = f"Snapshot is not valid JSON: {path}"
        raise SnapshotError(msg) from exc

    try:
        snapshot = Snapshot.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Snapshot %s failed validation: %s", path, exc)
        msg = f"Snapshot failed validation: {exc.error_count()} error(s)"
        raise SnapshotError(msg) from exc

    logger.info(
        "Loaded snapshot %s: %d pallets, %d items, %d expenses, %d trips",
        path.name,
        len(snapshot.pallets),
        len(snapshot.items),
        len(snapshot.expenses),
        len(snapshot.mileage_trips),
    )
    return snapshot
