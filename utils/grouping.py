"""Grouping-key normalisation shared by the comparison views."""

from __future__ import annotations

UNKNOWN_SUPPLIER = "Unknown"
UNSPECIFIED_PALLET_TYPE = "Unspecified"


def normalize_group_key(value: str | None, fallback: str) -> str:
    """Return *value* stripped, or *fallback* when it is None or blank."""
    if value is None:
        return fallback
    stripped = value.strip()
    return stripped or fallback
