"""
Tests for duplicate detection.
"""

import random
import uuid
from datetime import datetime, timedelta, timezone

from hangarlog.models import Entry, EntryMode
from hangarlog.core.duplicate_detector import (
    DUPLICATE_WINDOW_SECONDS,
    is_duplicate,
    matches_import_signature,
)

BASE_TIME = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_entry(registration="G-EBAB", location="Heathrow", when=BASE_TIME, mode=EntryMode.SPOTTED):
    return Entry(mode=mode, registration=registration, location_name=location, date_time=when)


class TestIsDuplicate:
    """Test the two-hour form heuristic."""

    def test_same_registration_location_and_time(self):
        existing = [make_entry()]
        assert is_duplicate("G-EBAB", BASE_TIME, "Heathrow", existing)

    def test_registration_and_location_are_normalized(self):
        existing = [make_entry(registration="G-EBAB", location="Heathrow")]
        assert is_duplicate(" g-e bab ", BASE_TIME, "  heathrow ", existing)

    def test_window_boundary_inclusive(self):
        existing = [make_entry()]
        at_limit = BASE_TIME + timedelta(seconds=DUPLICATE_WINDOW_SECONDS)
        past_limit = BASE_TIME + timedelta(seconds=DUPLICATE_WINDOW_SECONDS + 1)
        assert DUPLICATE_WINDOW_SECONDS == 7200
        assert is_duplicate("G-EBAB", at_limit, "Heathrow", existing)
        assert not is_duplicate("G-EBAB", past_limit, "Heathrow", existing)

    def test_window_applies_before_and_after(self):
        existing = [make_entry()]
        assert is_duplicate("G-EBAB", BASE_TIME - timedelta(hours=2), "Heathrow", existing)
        assert not is_duplicate("G-EBAB", BASE_TIME - timedelta(hours=2, seconds=1), "Heathrow", existing)

    def test_empty_location_never_matches(self):
        existing = [make_entry(location="")]
        assert not is_duplicate("G-EBAB", BASE_TIME, "", existing)
        assert not is_duplicate("G-EBAB", BASE_TIME, "   ", existing)

    def test_empty_registration_never_matches(self):
        existing = [make_entry(registration="")]
        assert not is_duplicate("  ", BASE_TIME, "Heathrow", existing)

    def test_different_location(self):
        existing = [make_entry(location="Gatwick")]
        assert not is_duplicate("G-EBAB", BASE_TIME, "Heathrow", existing)

    def test_different_registration(self):
        existing = [make_entry(registration="G-EBAC")]
        assert not is_duplicate("G-EBAB", BASE_TIME, "Heathrow", existing)

    def test_excluded_entry_is_ignored(self):
        entry = make_entry()
        assert not is_duplicate("G-EBAB", BASE_TIME, "Heathrow", [entry], exclude_id=entry.id)
        assert is_duplicate("G-EBAB", BASE_TIME, "Heathrow", [entry], exclude_id=uuid.uuid4())

    def test_mode_is_not_part_of_heuristic(self):
        existing = [make_entry(mode=EntryMode.FLOWN)]
        assert is_duplicate("G-EBAB", BASE_TIME, "Heathrow", existing)

    def test_independent_of_order(self):
        existing = [
            make_entry(registration="G-AAAA"),
            make_entry(location="Gatwick"),
            make_entry(when=BASE_TIME + timedelta(hours=5)),
            make_entry(when=BASE_TIME + timedelta(minutes=30)),
        ]
        shuffled = list(existing)
        random.Random(7).shuffle(shuffled)
        assert is_duplicate("G-EBAB", BASE_TIME, "Heathrow", existing)
        assert is_duplicate("G-EBAB", BASE_TIME, "Heathrow", shuffled)
        assert is_duplicate("G-EBAB", BASE_TIME, "Heathrow", list(reversed(existing)))

    def test_naive_candidate_compares_as_local_time(self):
        local_noon = datetime(2024, 6, 1, 12, 0, 0)
        existing = [make_entry(when=local_noon.astimezone())]
        assert is_duplicate("G-EBAB", local_noon, "Heathrow", existing)


class TestMatchesImportSignature:
    """Test the strict import signature."""

    def test_exact_match(self):
        assert matches_import_signature(make_entry(), [make_entry()])

    def test_one_second_tolerance(self):
        existing = [make_entry()]
        assert matches_import_signature(make_entry(when=BASE_TIME + timedelta(seconds=1)), existing)
        assert not matches_import_signature(make_entry(when=BASE_TIME + timedelta(seconds=2)), existing)

    def test_location_must_match_exactly(self):
        existing = [make_entry(location="Heathrow")]
        assert not matches_import_signature(make_entry(location="heathrow"), existing)
        assert not matches_import_signature(make_entry(location="Heathrow "), existing)

    def test_mode_must_match(self):
        existing = [make_entry(mode=EntryMode.SPOTTED)]
        assert not matches_import_signature(make_entry(mode=EntryMode.FLOWN), existing)

    def test_registration_is_normalized(self):
        existing = [make_entry(registration="g-ebab")]
        assert matches_import_signature(make_entry(registration="G-EBAB"), existing)

    def test_stricter_than_form_heuristic(self):
        existing = [make_entry()]
        later = BASE_TIME + timedelta(minutes=30)
        assert is_duplicate("G-EBAB", later, "Heathrow", existing)
        assert not matches_import_signature(make_entry(when=later), existing)
