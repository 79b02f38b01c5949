"""
Data models for HangarLog.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple


def _local_now() -> datetime:
    return datetime.now().astimezone()


def as_aware(value: datetime) -> datetime:
    """Attach the local timezone to a naive datetime; aware values pass through."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


class EntryMode(Enum):
    """Whether the aircraft was watched from the ground or flown on."""
    SPOTTED = "spotted"
    FLOWN = "flown"

    @property
    def title(self) -> str:
        return self.value.capitalize()


class ModeFilter(Enum):
    """Logbook list filter on entry mode."""
    ALL = "all"
    SPOTTED = "spotted"
    FLOWN = "flown"

    @property
    def title(self) -> str:
        return self.value.capitalize()


class DateRangeFilter(Enum):
    """Logbook list filter on entry date."""
    THIS_MONTH = "thisMonth"
    THIS_YEAR = "thisYear"
    ALL = "all"

    @property
    def title(self) -> str:
        return {
            DateRangeFilter.THIS_MONTH: "This Month",
            DateRangeFilter.THIS_YEAR: "This Year",
            DateRangeFilter.ALL: "All",
        }[self]


class Period(Enum):
    """Calendar granularity for period-bounded statistics."""
    MONTH = "month"
    YEAR = "year"


@dataclass
class Entry:
    """A single logged sighting or flight."""
    mode: EntryMode
    registration: str
    aircraft_type: str = ""
    operator: str = ""
    date_time: datetime = field(default_factory=_local_now)
    location_name: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    flight_number: str = ""
    origin: str = ""
    destination: str = ""
    notes: str = ""
    is_first_for_registration: bool = False
    photo_filenames: List[str] = field(default_factory=list)
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        self.date_time = as_aware(self.date_time)
        self.photo_filenames = list(self.photo_filenames)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'id': str(self.id),
            'mode': self.mode.value,
            'registration': self.registration,
            'aircraft_type': self.aircraft_type,
            'operator': self.operator,
            'date_time': self.date_time.isoformat(),
            'location_name': self.location_name,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'flight_number': self.flight_number,
            'origin': self.origin,
            'destination': self.destination,
            'notes': self.notes,
            'is_first_for_registration': self.is_first_for_registration,
            'photo_filenames': list(self.photo_filenames),
        }


@dataclass
class EntryDraft:
    """
    Raw form input for a new or edited entry.

    Coordinates arrive as text exactly as typed; they are parsed and
    range-checked by the entry validator before anything is stored.
    """
    mode: EntryMode
    registration: str
    aircraft_type: str = ""
    operator: str = ""
    date_time: datetime = field(default_factory=_local_now)
    location_name: str = ""
    latitude_text: str = ""
    longitude_text: str = ""
    flight_number: str = ""
    origin: str = ""
    destination: str = ""
    notes: str = ""
    photo_filenames: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RegistrationInsight:
    """How often a registration was logged before, and where it was last seen."""
    count: int
    last_seen_date: Optional[datetime] = None
    last_seen_location: Optional[str] = None

    @classmethod
    def empty(cls) -> "RegistrationInsight":
        return cls(count=0)


@dataclass
class ImportResult:
    """Outcome of a CSV import batch."""
    imported: int = 0
    skipped: int = 0
    entries: List[Entry] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.imported + self.skipped


@dataclass
class LogbookOverview:
    """Headline numbers for the home screen."""
    total_spotted: int
    total_flown: int
    unique_registrations: int
    entries_this_month: int
    recent_firsts: List[Entry] = field(default_factory=list)


@dataclass
class StatsHighlights:
    """Figures for the stats screen."""
    entries_this_year: int
    entries_this_month: int
    unique_registrations_this_year: int
    streak_days: int
    top_registration: Optional[Tuple[str, int]] = None
    top_aircraft_types: List[Tuple[str, int]] = field(default_factory=list)
    top_operators: List[Tuple[str, int]] = field(default_factory=list)


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair in decimal degrees."""
    latitude: float
    longitude: float
