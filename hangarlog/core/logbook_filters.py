"""
Filtering and display helpers for the logbook list.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from hangarlog.models import DateRangeFilter, Entry, EntryMode, ModeFilter, Period
from hangarlog.core.statistics import entries_in_period

SUMMARY_SEPARATOR = " • "


def matches_mode(entry: Entry, mode: ModeFilter) -> bool:
    if mode is ModeFilter.ALL:
        return True
    return entry.mode is EntryMode(mode.value)


def matches_search(entry: Entry, search_text: str) -> bool:
    """Case-insensitive substring match on registration, operator, type and location."""
    term = (search_text or "").strip().lower()
    if not term:
        return True
    haystack = " ".join([
        entry.registration,
        entry.operator,
        entry.aircraft_type,
        entry.location_name,
    ]).lower()
    return term in haystack


def filter_entries(
    entries: Iterable[Entry],
    mode: ModeFilter = ModeFilter.ALL,
    date_range: DateRangeFilter = DateRangeFilter.ALL,
    search_text: str = "",
    now: Optional[datetime] = None,
) -> List[Entry]:
    """
    Apply the logbook list filters.

    Args:
        entries: Snapshot of entries, in display order
        mode: Spotted/flown filter
        date_range: This month, this year or everything
        search_text: Free-text search term
        now: Reference instant for the date range

    Returns:
        Entries passing every filter, order preserved
    """
    selected = [entry for entry in entries if matches_mode(entry, mode)]

    if date_range is DateRangeFilter.THIS_MONTH:
        selected = entries_in_period(selected, Period.MONTH, now)
    elif date_range is DateRangeFilter.THIS_YEAR:
        selected = entries_in_period(selected, Period.YEAR, now)

    return [entry for entry in selected if matches_search(entry, search_text)]


def summary_line(entry: Entry) -> str:
    """One-line description under the registration in the logbook list."""
    parts = [part for part in (entry.operator, entry.aircraft_type, entry.location_name) if part]
    return SUMMARY_SEPARATOR.join(parts) if parts else "No extra details"
