"""
Registration insight: how many times a registration was logged before and
where it was last seen. Shown under the registration field while the user
types, so it is recomputed often and never touches storage.
"""

import uuid
from typing import Iterable, Optional

from hangarlog.models import Entry, RegistrationInsight
from hangarlog.core.registration import normalize_registration


def insight_for(
    registration: str,
    existing: Iterable[Entry],
    exclude_id: Optional[uuid.UUID] = None,
) -> RegistrationInsight:
    """
    Summarize the history of a registration.

    The most recent match is the one with the latest timestamp; equal
    timestamps resolve to the smallest identifier.

    Args:
        registration: Registration as typed
        existing: Snapshot of stored entries
        exclude_id: Identifier of the entry being edited, if any

    Returns:
        RegistrationInsight with the match count and last sighting
    """
    normalized = normalize_registration(registration)
    if not normalized:
        return RegistrationInsight.empty()

    matches = [
        entry for entry in existing
        if (exclude_id is None or entry.id != exclude_id)
        and normalize_registration(entry.registration) == normalized
    ]
    if not matches:
        return RegistrationInsight.empty()

    # Identifier ascending first so the stable timestamp sort keeps ties ordered
    matches.sort(key=lambda entry: str(entry.id))
    matches.sort(key=lambda entry: entry.date_time, reverse=True)
    latest = matches[0]

    return RegistrationInsight(
        count=len(matches),
        last_seen_date=latest.date_time,
        last_seen_location=latest.location_name or None,
    )


def is_first_for_registration(
    registration: str,
    existing: Iterable[Entry],
    exclude_id: Optional[uuid.UUID] = None,
) -> bool:
    """True if no other entry carries this registration."""
    return insight_for(registration, existing, exclude_id).count == 0
