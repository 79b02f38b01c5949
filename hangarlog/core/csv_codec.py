"""
CSV export and import for the logbook.

Export writes a header row followed by one fully quoted row per entry.
Import tokenizes the text, maps each row onto the header and turns valid
rows into new entries, skipping rows that are malformed or that repeat an
entry already in the logbook.
"""

import csv
import io
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Set

from hangarlog.models import Entry, EntryMode, ImportResult
from hangarlog.core.registration import normalize_registration
from hangarlog.core.duplicate_detector import matches_import_signature
from hangarlog.utils.geometry import is_valid_latitude, is_valid_longitude, parse_degrees

logger = logging.getLogger(__name__)

CSV_FIELDS = [
    "id",
    "mode",
    "registration",
    "aircraftType",
    "operator",
    "dateTime",
    "locationName",
    "latitude",
    "longitude",
    "flightNumber",
    "origin",
    "destination",
    "notes",
    "isFirstForRegistration",
    "photoFilenames",
]

PHOTO_SEPARATOR = "|"
EXPORT_FILENAME_TEMPLATE = "HangarLog-Export-{epoch}.csv"


class RowRejected(ValueError):
    """Raised when an import row cannot be turned into an entry."""
    pass


def export_filename(now: Optional[datetime] = None) -> str:
    """Name an export file after the current Unix time in seconds."""
    moment = now or datetime.now(timezone.utc)
    return EXPORT_FILENAME_TEMPLATE.format(epoch=int(moment.timestamp()))


def format_timestamp(value: datetime) -> str:
    """Render an instant as an ISO-8601 UTC string, e.g. 2024-05-01T09:30:00Z."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(text: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp.

    A trailing "Z" means UTC; a value without an offset is taken as UTC.

    Returns:
        Timezone-aware datetime, or None if the text is not ISO-8601
    """
    text = (text or "").strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_coordinate(value: Optional[float]) -> str:
    return "" if value is None else str(value)


def _entry_to_row(entry: Entry) -> List[str]:
    return [
        str(entry.id),
        entry.mode.value,
        entry.registration,
        entry.aircraft_type,
        entry.operator,
        format_timestamp(entry.date_time),
        entry.location_name,
        _format_coordinate(entry.latitude),
        _format_coordinate(entry.longitude),
        entry.flight_number,
        entry.origin,
        entry.destination,
        entry.notes,
        "true" if entry.is_first_for_registration else "false",
        PHOTO_SEPARATOR.join(entry.photo_filenames),
    ]


def encode_entries(entries: Iterable[Entry]) -> str:
    """
    Serialize entries to CSV text in the order given.

    Every value is quoted, with embedded quotes doubled. The header row is
    written bare.
    """
    buffer = io.StringIO()
    buffer.write(",".join(CSV_FIELDS) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(_entry_to_row(entry) for entry in entries)
    return buffer.getvalue()


def parse_rows(text: str) -> List[List[str]]:
    """
    Tokenize CSV text into rows of fields.

    Handles quoted fields containing commas, newlines and doubled quotes,
    as well as unquoted fields. Carriage returns are dropped everywhere,
    so CRLF and LF files read the same. Blank lines produce no row.
    Text the tokenizer cannot read ends the row list early.
    """
    cleaned = (text or "").replace("\r", "")
    # A single field may be as long as the whole text
    if csv.field_size_limit() < len(cleaned):
        csv.field_size_limit(len(cleaned))

    rows = []
    reader = csv.reader(io.StringIO(cleaned, newline=""))
    try:
        for row in reader:
            if row:
                rows.append(row)
    except csv.Error as e:
        logger.warning(f"Stopped reading CSV at line {reader.line_num}: {e}")
    return rows


def rows_to_records(rows: List[List[str]]) -> List[Dict[str, str]]:
    """
    Zip each data row with the header row.

    Values beyond the header length are ignored; missing trailing values
    are simply absent from the record.
    """
    if not rows:
        return []
    header = [name.strip().lstrip("\ufeff") for name in rows[0]]
    return [dict(zip(header, row)) for row in rows[1:]]


def _parse_coordinate(text: str, is_valid: Callable[[float], bool]) -> Optional[float]:
    # Bad coordinates leave the field unset rather than rejecting the row
    try:
        value = parse_degrees(text)
    except ValueError:
        return None
    if value is None or not is_valid(value):
        return None
    return value


def _parse_photos(text: str) -> List[str]:
    return [name for name in (text or "").split(PHOTO_SEPARATOR) if name]


def entry_from_record(record: Dict[str, str], used_ids: Set[uuid.UUID]) -> Entry:
    """
    Build an entry from one import record.

    Args:
        record: Field-name keyed values of one row
        used_ids: Identifiers already taken; a clashing or missing id is replaced

    Returns:
        New entry

    Raises:
        RowRejected: If mode, registration or dateTime is unusable
    """
    try:
        mode = EntryMode((record.get("mode") or "").strip())
    except ValueError:
        raise RowRejected(f"unknown mode {record.get('mode')!r}")

    registration = normalize_registration(record.get("registration", ""))
    if not registration:
        raise RowRejected("missing registration")

    date_time = parse_timestamp(record.get("dateTime", ""))
    if date_time is None:
        raise RowRejected(f"invalid dateTime {record.get('dateTime')!r}")

    try:
        entry_id = uuid.UUID(record.get("id") or "")
    except ValueError:
        entry_id = uuid.uuid4()
    if entry_id in used_ids:
        entry_id = uuid.uuid4()

    return Entry(
        id=entry_id,
        mode=mode,
        registration=registration,
        aircraft_type=record.get("aircraftType", ""),
        operator=record.get("operator", ""),
        date_time=date_time,
        location_name=record.get("locationName", ""),
        latitude=_parse_coordinate(record.get("latitude", ""), is_valid_latitude),
        longitude=_parse_coordinate(record.get("longitude", ""), is_valid_longitude),
        flight_number=record.get("flightNumber", ""),
        origin=record.get("origin", ""),
        destination=record.get("destination", ""),
        notes=record.get("notes", ""),
        is_first_for_registration=record.get("isFirstForRegistration") == "true",
        photo_filenames=_parse_photos(record.get("photoFilenames", "")),
    )


def import_entries(text: str, existing: Iterable[Entry]) -> ImportResult:
    """
    Decode CSV text into new entries, suppressing duplicates.

    Each row is handled on its own: a bad row is counted as skipped and the
    batch carries on. A row whose (registration, mode, location, time)
    signature matches an existing entry, or one accepted earlier in the
    same file, is skipped as well. Photo keys already owned by another
    entry are dropped from the imported entry.

    Args:
        text: Full CSV text including the header row
        existing: Snapshot of entries already in the logbook

    Returns:
        ImportResult with accepted entries and the imported/skipped counts
    """
    known = list(existing)
    used_ids = {entry.id for entry in known}
    owned_photos = {key for entry in known for key in entry.photo_filenames}
    result = ImportResult()

    for row_number, record in enumerate(rows_to_records(parse_rows(text)), start=2):
        try:
            entry = entry_from_record(record, used_ids)
        except RowRejected as e:
            logger.warning(f"Skipping CSV row {row_number}: {e}")
            result.skipped += 1
            continue

        if matches_import_signature(entry, known):
            logger.info(f"Skipping CSV row {row_number}: {entry.registration} already logged")
            result.skipped += 1
            continue

        shared = [key for key in entry.photo_filenames if key in owned_photos]
        if shared:
            logger.warning(
                f"CSV row {row_number}: dropping photos owned by another entry: {', '.join(shared)}"
            )
        entry.photo_filenames = list(dict.fromkeys(
            key for key in entry.photo_filenames if key not in owned_photos
        ))
        owned_photos.update(entry.photo_filenames)

        known.append(entry)
        used_ids.add(entry.id)
        result.entries.append(entry)
        result.imported += 1

    logger.info(f"CSV import parsed: {result.imported} imported, {result.skipped} skipped")
    return result
