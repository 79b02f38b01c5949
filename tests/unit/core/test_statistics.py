"""
Tests for logbook statistics.
"""

from datetime import date, datetime, timedelta

from hangarlog.models import Entry, EntryMode, Period
from hangarlog.core.statistics import (
    entries_in_period,
    entry_streak_days,
    highlights,
    overview,
    top_counts,
    top_registration,
    unique_registrations,
)

TODAY = date(2024, 7, 15)
NOON_TODAY = datetime(2024, 7, 15, 12, 0, 0)


def make_entry(registration="G-EBAB", when=NOON_TODAY, mode=EntryMode.SPOTTED,
               aircraft_type="", operator="", first=False):
    return Entry(
        mode=mode,
        registration=registration,
        date_time=when,
        aircraft_type=aircraft_type,
        operator=operator,
        is_first_for_registration=first,
    )


class TestTopCounts:
    """Test leaderboard building."""

    def test_trim_only_case_sensitive(self):
        """Ties sort by code point, so uppercase comes before lowercase."""
        assert top_counts(["A", "a ", "B", "A"]) == [("A", 2), ("B", 1), ("a", 1)]

    def test_discards_blank_values(self):
        assert top_counts(["", "  ", "A320", None]) == [("A320", 1)]

    def test_ties_sorted_by_value(self):
        assert top_counts(["B738", "A320", "E190", "A320", "B738"]) == [
            ("A320", 2),
            ("B738", 2),
            ("E190", 1),
        ]

    def test_limit(self):
        values = [f"T{i:02d}" for i in range(15)]
        result = top_counts(values)
        assert len(result) == 10
        assert result[0] == ("T00", 1)
        assert top_counts(values, limit=3) == [("T00", 1), ("T01", 1), ("T02", 1)]

    def test_empty(self):
        assert top_counts([]) == []


class TestEntryStreakDays:
    """Test consecutive-day streaks."""

    def test_no_entries(self):
        assert entry_streak_days([], today=TODAY) == 0

    def test_counts_back_from_today(self):
        entries = [make_entry(when=NOON_TODAY - timedelta(days=offset)) for offset in range(4)]
        assert entry_streak_days(entries, today=TODAY) == 4

    def test_zero_without_entry_today(self):
        entries = [make_entry(when=NOON_TODAY - timedelta(days=offset)) for offset in range(1, 30)]
        assert entry_streak_days(entries, today=TODAY) == 0

    def test_stops_at_gap(self):
        entries = [
            make_entry(when=NOON_TODAY),
            make_entry(when=NOON_TODAY - timedelta(days=1)),
            make_entry(when=NOON_TODAY - timedelta(days=3)),
        ]
        assert entry_streak_days(entries, today=TODAY) == 2

    def test_several_entries_same_day(self):
        entries = [
            make_entry(when=datetime(2024, 7, 15, 0, 1)),
            make_entry(when=datetime(2024, 7, 15, 23, 59)),
        ]
        assert entry_streak_days(entries, today=TODAY) == 1


class TestEntriesInPeriod:
    """Test calendar period filtering."""

    def setup_method(self):
        self.entries = [
            make_entry(registration="JULY", when=datetime(2024, 7, 1, 9, 0)),
            make_entry(registration="JUNE", when=datetime(2024, 6, 30, 23, 0)),
            make_entry(registration="JAN", when=datetime(2024, 1, 1, 0, 30)),
            make_entry(registration="LASTYEAR", when=datetime(2023, 7, 15, 12, 0)),
        ]

    def test_month(self):
        result = entries_in_period(self.entries, Period.MONTH, NOON_TODAY)
        assert [entry.registration for entry in result] == ["JULY"]

    def test_year(self):
        result = entries_in_period(self.entries, Period.YEAR, NOON_TODAY)
        assert [entry.registration for entry in result] == ["JULY", "JUNE", "JAN"]

    def test_same_month_previous_year_excluded(self):
        result = entries_in_period(self.entries, Period.MONTH, NOON_TODAY)
        assert "LASTYEAR" not in [entry.registration for entry in result]


class TestTopRegistration:
    """Test the most frequent registration."""

    def test_empty(self):
        assert top_registration([]) is None

    def test_counts_normalized(self):
        entries = [make_entry("g-ebab"), make_entry("G-EBAB "), make_entry("G-OTHR")]
        assert top_registration(entries) == ("G-EBAB", 2)

    def test_tie_resolves_lexicographically(self):
        entries = [make_entry("G-ZZZZ"), make_entry("G-AAAA"), make_entry("G-ZZZZ"), make_entry("G-AAAA")]
        assert top_registration(entries) == ("G-AAAA", 2)
        assert top_registration(list(reversed(entries))) == ("G-AAAA", 2)

    def test_blank_registrations_ignored(self):
        assert top_registration([make_entry("  "), make_entry("")]) is None


class TestOverviewAndHighlights:
    """Test the home and stats summaries."""

    def setup_method(self):
        self.entries = [
            make_entry("G-EBAB", NOON_TODAY, EntryMode.SPOTTED, "A320", "BA", first=True),
            make_entry("G-EBAB", NOON_TODAY - timedelta(days=1), EntryMode.FLOWN, "A320", "BA"),
            make_entry("EI-DVM", NOON_TODAY - timedelta(days=20), EntryMode.SPOTTED, "B738", "Ryanair", first=True),
            make_entry("N123AB", datetime(2023, 12, 31, 10, 0), EntryMode.SPOTTED, "B738", "", first=True),
        ]

    def test_overview(self):
        result = overview(self.entries, now=NOON_TODAY)
        assert result.total_spotted == 3
        assert result.total_flown == 1
        assert result.unique_registrations == 3
        assert result.entries_this_month == 2
        assert [entry.registration for entry in result.recent_firsts] == ["G-EBAB", "EI-DVM", "N123AB"]

    def test_overview_recent_limit(self):
        result = overview(self.entries, now=NOON_TODAY, recent_limit=1)
        assert [entry.registration for entry in result.recent_firsts] == ["G-EBAB"]

    def test_highlights(self):
        result = highlights(self.entries, now=NOON_TODAY)
        assert result.entries_this_year == 3
        assert result.entries_this_month == 2
        assert result.unique_registrations_this_year == 2
        assert result.streak_days == 2
        assert result.top_registration == ("G-EBAB", 2)
        assert result.top_aircraft_types == [("A320", 2), ("B738", 2)]
        assert result.top_operators == [("BA", 2), ("Ryanair", 1)]

    def test_unique_registrations(self):
        assert unique_registrations(self.entries) == 3
        assert unique_registrations([]) == 0
