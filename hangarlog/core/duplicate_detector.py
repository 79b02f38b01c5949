"""
Duplicate detection for logbook entries.

Two distinct checks live here and are deliberately kept apart:

- is_duplicate(): the loose heuristic used when saving from the entry form.
  Same registration, same location (trimmed, case-insensitive) and within
  two hours. A match is a warning the user may override.
- matches_import_signature(): the strict check used by CSV import. Same
  registration, same mode, identical location string and within one second.
  A match silently skips the imported row.
"""

import logging
import uuid
from datetime import datetime
from typing import Iterable, Optional

from hangarlog.models import Entry, as_aware
from hangarlog.core.registration import normalize_registration

logger = logging.getLogger(__name__)

DUPLICATE_WINDOW_SECONDS = 2 * 60 * 60
IMPORT_MATCH_TOLERANCE_SECONDS = 1


def _normalize_location(location_name: str) -> str:
    return (location_name or "").strip().lower()


def _seconds_between(first: datetime, second: datetime) -> float:
    return abs((as_aware(first) - as_aware(second)).total_seconds())


def is_duplicate(
    registration: str,
    date_time: datetime,
    location_name: str,
    existing: Iterable[Entry],
    exclude_id: Optional[uuid.UUID] = None,
) -> bool:
    """
    Check whether a candidate looks like an entry that was already logged.

    Args:
        registration: Candidate registration, raw or normalized
        date_time: Candidate timestamp
        location_name: Candidate location as typed
        existing: Snapshot of stored entries
        exclude_id: Identifier of the entry being edited, if any

    Returns:
        True if an entry with the same registration and location exists
        within DUPLICATE_WINDOW_SECONDS (inclusive) of date_time
    """
    normalized_reg = normalize_registration(registration)
    normalized_location = _normalize_location(location_name)

    # Nothing to compare against
    if not normalized_reg or not normalized_location:
        return False

    for entry in existing:
        if exclude_id is not None and entry.id == exclude_id:
            continue
        if normalize_registration(entry.registration) != normalized_reg:
            continue
        if _normalize_location(entry.location_name) != normalized_location:
            continue
        if _seconds_between(entry.date_time, date_time) <= DUPLICATE_WINDOW_SECONDS:
            logger.debug(
                f"Possible duplicate of {entry.id} for {normalized_reg} at {location_name!r}"
            )
            return True

    return False


def matches_import_signature(candidate: Entry, existing: Iterable[Entry]) -> bool:
    """
    Check whether an imported entry repeats one that is already present.

    The signature is (normalized registration, mode, exact location name,
    timestamp within IMPORT_MATCH_TOLERANCE_SECONDS).

    Args:
        candidate: Entry built from an import row
        existing: Stored entries plus those accepted earlier in the batch

    Returns:
        True if the candidate's signature is already present
    """
    normalized_reg = normalize_registration(candidate.registration)

    return any(
        entry.mode == candidate.mode
        and entry.location_name == candidate.location_name
        and normalize_registration(entry.registration) == normalized_reg
        and _seconds_between(entry.date_time, candidate.date_time) <= IMPORT_MATCH_TOLERANCE_SECONDS
        for entry in existing
    )
