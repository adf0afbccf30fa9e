"""Date-range filtering shared by every analytics view.

All comparisons happen on calendar dates: timestamps are reduced to their
local calendar day so a sale logged late in the evening is never pushed out
of a range by its time-of-day or UTC offset.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from analytics.models import DateRange

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_date(value: Any) -> date | None:
    """Parse *value* into a calendar date, or return None if it isn't one.

    Accepts ``date``/``datetime`` objects, ``YYYY-MM-DD`` strings and ISO-8601
    timestamps (with or without offset).  Aware timestamps are converted to
    local time before the time-of-day is dropped.
    """
    if isinstance(value, datetime):
        return value.astimezone().date() if value.tzinfo else value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed.astimezone().date() if parsed.tzinfo else parsed.date()


def has_date_range(date_range: DateRange | None) -> bool:
    """True when *date_range* carries at least one bound (period view)."""
    return date_range is not None and (date_range.start is not None or date_range.end is not None)


def in_date_range(value: Any, date_range: DateRange | None) -> bool:
    """Return True if *value* parses to a date inside *date_range* (inclusive).

    Without any bound every value is in range, even an unparseable one.  A
    single missing bound leaves that side open.
    """
    if date_range is None or not has_date_range(date_range):
        return True
    day = parse_date(value)
    if day is None:
        return False
    start = parse_date(date_range.start)
    end = parse_date(date_range.end)
    if start is not None and day < start:
        return False
    return not (end is not None and day > end)


def _field_value(record: Any, field: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def filter_by_date_range(
    records: Iterable[T],
    date_range: DateRange | None,
    date_field: str,
) -> list[T]:
    """Return the records whose *date_field* falls within *date_range*.

    Records may be models or mappings.  With no bounds the input is returned
    unchanged; records with a missing or malformed date are excluded.
    """
    if not has_date_range(date_range):
        return list(records)

    kept: list[T] = []
    for record in records:
        value = _field_value(record, date_field)
        if parse_date(value) is None:
            logger.debug("Excluding record with unparseable %s: %r", date_field, value)
            continue
        if in_date_range(value, date_range):
            kept.append(record)
    return kept
