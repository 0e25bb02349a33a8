"""
Merge & retention for the daily price history.

History is a newest-first list with at most one entry per calendar date.
Merging is an upsert keyed on the date, so re-running a refresh on the same
day replaces that day's entry instead of adding a second one.
"""
from datetime import date, datetime
from typing import Iterable

from app.pricing.models import DailyPriceEntry, LatestPriceSnapshot
from app.pricing.timeutil import as_utc

RETENTION_DAYS = 30


def date_key(moment: datetime | date) -> str:
    if isinstance(moment, datetime):
        return as_utc(moment).date().isoformat()
    return moment.isoformat()


def entry_from_snapshot(snapshot: LatestPriceSnapshot, day: str) -> DailyPriceEntry:
    return DailyPriceEntry(
        date=day,
        unleaded=snapshot.unleaded,
        premium=snapshot.premium,
        diesel=snapshot.diesel,
    )


def merge_entry(
    history: Iterable[DailyPriceEntry] | None,
    entry: DailyPriceEntry,
    retention_days: int = RETENTION_DAYS,
) -> list[DailyPriceEntry]:
    """Upsert ``entry`` by date, sort newest first and keep ``retention_days`` entries."""
    merged = list(history or [])

    for i, existing in enumerate(merged):
        if existing.date == entry.date:
            merged[i] = entry
            break
    else:
        merged.append(entry)

    # ISO dates sort lexically
    merged.sort(key=lambda e: e.date, reverse=True)
    return merged[: max(retention_days, 0)]
