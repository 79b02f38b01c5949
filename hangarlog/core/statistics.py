"""
Statistics over the logbook.

All functions are reducers over a snapshot of entries. Calendar questions
(which day, month or year an entry falls in) are answered in local time.
"""

from collections import Counter
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from hangarlog.models import (
    Entry,
    EntryMode,
    LogbookOverview,
    Period,
    StatsHighlights,
    as_aware,
)
from hangarlog.core.registration import normalize_registration

DEFAULT_TOP_LIMIT = 10


def _local(value: datetime) -> datetime:
    return as_aware(value).astimezone()


def top_counts(values: Iterable[str], limit: int = DEFAULT_TOP_LIMIT) -> List[Tuple[str, int]]:
    """
    Build a leaderboard of the most frequent values.

    Values are trimmed but otherwise compared exactly, so "A" and "a" are
    counted separately. Ties are ordered by the value itself (code point
    order).

    Args:
        values: Raw values, e.g. every entry's aircraft type
        limit: Maximum number of rows returned

    Returns:
        (value, count) pairs, highest count first
    """
    counts = Counter(
        trimmed for trimmed in ((value or "").strip() for value in values) if trimmed
    )
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:limit]


def entry_streak_days(entries: Iterable[Entry], today: Optional[date] = None) -> int:
    """
    Count consecutive days with at least one entry, ending today.

    Returns 0 when there is no entry dated today, however long the run of
    earlier days is.
    """
    logged_days = {_local(entry.date_time).date() for entry in entries}
    day = today or date.today()

    streak = 0
    while day in logged_days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def entries_in_period(
    entries: Iterable[Entry],
    period: Period,
    reference: Optional[datetime] = None,
) -> List[Entry]:
    """
    Select entries in the same calendar month or year as the reference instant.

    Args:
        entries: Snapshot of entries
        period: Period.MONTH or Period.YEAR
        reference: Instant defining the period, defaults to now

    Returns:
        Matching entries in their original order
    """
    ref = _local(reference or datetime.now())

    def in_period(entry: Entry) -> bool:
        when = _local(entry.date_time)
        if when.year != ref.year:
            return False
        return period is Period.YEAR or when.month == ref.month

    return [entry for entry in entries if in_period(entry)]


def top_registration(entries: Iterable[Entry]) -> Optional[Tuple[str, int]]:
    """
    Find the most frequently logged registration.

    When several registrations share the highest count, the
    lexicographically smallest normalized registration wins.
    """
    counts = Counter(
        reg for reg in (normalize_registration(entry.registration) for entry in entries) if reg
    )
    if not counts:
        return None
    return min(counts.items(), key=lambda item: (-item[1], item[0]))


def unique_registrations(entries: Iterable[Entry]) -> int:
    """Number of distinct normalized registrations."""
    return len({
        reg for reg in (normalize_registration(entry.registration) for entry in entries) if reg
    })


def overview(
    entries: List[Entry],
    now: Optional[datetime] = None,
    recent_limit: int = DEFAULT_TOP_LIMIT,
) -> LogbookOverview:
    """Compute the home screen summary."""
    firsts = sorted(
        (entry for entry in entries if entry.is_first_for_registration),
        key=lambda entry: entry.date_time,
        reverse=True,
    )
    return LogbookOverview(
        total_spotted=sum(1 for entry in entries if entry.mode is EntryMode.SPOTTED),
        total_flown=sum(1 for entry in entries if entry.mode is EntryMode.FLOWN),
        unique_registrations=unique_registrations(entries),
        entries_this_month=len(entries_in_period(entries, Period.MONTH, now)),
        recent_firsts=firsts[:recent_limit],
    )


def highlights(
    entries: List[Entry],
    now: Optional[datetime] = None,
    limit: int = DEFAULT_TOP_LIMIT,
) -> StatsHighlights:
    """Compute the stats screen figures."""
    year_entries = entries_in_period(entries, Period.YEAR, now)
    today = _local(now).date() if now else None

    return StatsHighlights(
        entries_this_year=len(year_entries),
        entries_this_month=len(entries_in_period(entries, Period.MONTH, now)),
        unique_registrations_this_year=unique_registrations(year_entries),
        streak_days=entry_streak_days(entries, today),
        top_registration=top_registration(entries),
        top_aircraft_types=top_counts((entry.aircraft_type for entry in entries), limit),
        top_operators=top_counts((entry.operator for entry in entries), limit),
    )
