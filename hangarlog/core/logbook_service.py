"""
Logbook service module for handling logbook-related business logic.

This module sits between the screens of the app and the stores. It takes
form input or import files, runs them through validation, duplicate
detection and registration insight, and only then touches the record store
or the photo blob store. Every computation works on a fresh snapshot of the
stored entries; nothing here caches entries between calls.

Failures are reported, never hidden: validation problems raise
ValidationError before anything is written, a likely duplicate raises
DuplicateEntryWarning so the caller can ask the user, and storage or file
problems raise PersistenceError after being logged once.
"""

import dataclasses
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from hangarlog.config import Config
from hangarlog.models import (
    Entry,
    EntryDraft,
    ImportResult,
    LogbookOverview,
    RegistrationInsight,
    StatsHighlights,
)
from hangarlog.core.csv_codec import encode_entries, export_filename, import_entries
from hangarlog.core.duplicate_detector import is_duplicate
from hangarlog.core.entry_validator import EntryValidator
from hangarlog.core.insights import insight_for, is_first_for_registration
from hangarlog.core import statistics
from hangarlog.database.db import EntryDatabase, PersistenceError
from hangarlog.database.photo_store import PhotoStore

logger = logging.getLogger(__name__)


class DuplicateEntryWarning(Exception):
    """
    Raised when a save looks like a repeat of an existing entry.

    This is a confirmation gate, not a rejection: resubmit the same draft
    with confirm_duplicate=True to save it anyway.
    """

    def __init__(self, draft: EntryDraft):
        super().__init__(
            "An entry with the same registration and location exists within 2 hours"
        )
        self.draft = draft


class LogbookService:
    """
    Service for saving, deleting, importing and exporting logbook entries.

    Attributes:
        database: Record store holding the entries
        photo_store: Blob store holding photo attachments
    """

    def __init__(self, database: EntryDatabase, photo_store: PhotoStore):
        self.database = database
        self.photo_store = photo_store

    @classmethod
    def from_config(cls) -> "LogbookService":
        """Open the stores at the locations named in Config."""
        return cls(EntryDatabase(Config.DATABASE_PATH), PhotoStore(Config.PHOTO_DIR))

    def close(self) -> None:
        self.database.close()

    def entries(self) -> List[Entry]:
        """Snapshot of all entries, newest first."""
        return self.database.query_all(newest_first=True)

    def insight_for(self, registration: str, exclude_id: Optional[uuid.UUID] = None) -> RegistrationInsight:
        """Registration insight against the current snapshot."""
        return insight_for(registration, self.entries(), exclude_id)

    def save_entry(
        self,
        draft: EntryDraft,
        editing: Optional[Entry] = None,
        confirm_duplicate: bool = False,
    ) -> Entry:
        """
        Validate and store a new or edited entry.

        The flow is:
        1. Validate the draft (nothing is written if this fails)
        2. Check for a likely duplicate unless the user already confirmed
        3. Work out whether this is the first entry for the registration
        4. Insert, or overwrite the edited entry keeping its identity

        Args:
            draft: Form input
            editing: Stored entry being edited, None for a new entry
            confirm_duplicate: Skip the duplicate gate

        Returns:
            The stored entry

        Raises:
            ValidationError: If the draft is invalid
            DuplicateEntryWarning: If a likely duplicate exists and was not confirmed
            PersistenceError: If the record store write fails
        """
        fields = EntryValidator.validate_draft(draft)
        snapshot = self.entries()
        exclude_id = editing.id if editing else None

        if not confirm_duplicate and is_duplicate(
            fields["registration"],
            fields["date_time"],
            fields["location_name"],
            snapshot,
            exclude_id,
        ):
            logger.warning(
                f"Possible duplicate for {fields['registration']} at {fields['location_name']!r}"
            )
            raise DuplicateEntryWarning(draft)

        fields["is_first_for_registration"] = is_first_for_registration(
            fields["registration"], snapshot, exclude_id
        )

        if editing is None:
            entry = Entry(**fields)
            self.database.insert(entry)
            logger.info(f"Added {entry.mode.value} entry {entry.registration} ({entry.id})")
            return entry

        entry = dataclasses.replace(editing, **fields)
        self.database.update(entry)
        logger.info(f"Updated entry {entry.registration} ({entry.id})")

        # Photos dropped during the edit belong to nobody now
        for key in set(editing.photo_filenames) - set(entry.photo_filenames):
            self.photo_store.delete(key)

        return entry

    def attach_photo(self, data: bytes) -> str:
        """Store photo bytes and return the key to put in a draft."""
        return self.photo_store.save(data)

    def load_photo(self, key: str) -> Optional[bytes]:
        return self.photo_store.load(key)

    def delete_entry(self, entry: Entry) -> None:
        """Delete an entry and release the photos it owns."""
        self.database.delete(entry)
        for key in entry.photo_filenames:
            self.photo_store.delete(key)
        logger.info(f"Deleted entry {entry.registration} ({entry.id})")

    def delete_all(self) -> int:
        """
        Delete every entry and every photo they own.

        Returns:
            Number of entries removed
        """
        owned_photos = [key for entry in self.entries() for key in entry.photo_filenames]
        removed = self.database.delete_all()
        for key in owned_photos:
            self.photo_store.delete(key)
        logger.info(f"Deleted all {removed} entries and {len(owned_photos)} photos")
        return removed

    def export_csv(self, directory: Optional[str] = None, now: Optional[datetime] = None) -> Path:
        """
        Write all entries, newest first, to a CSV file.

        Args:
            directory: Target folder, defaults to Config.EXPORT_DIR
            now: Instant used in the file name

        Returns:
            Path of the written file

        Raises:
            PersistenceError: If the file cannot be written
        """
        entries = self.entries()
        path = Path(directory or Config.EXPORT_DIR) / export_filename(now)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as handle:
                handle.write(encode_entries(entries))
        except OSError as e:
            logger.error(f"Failed to export CSV to {path}: {e}")
            raise PersistenceError(f"Failed to export CSV to {path}") from e

        logger.info(f"Exported {len(entries)} entries to {path}")
        return path

    def import_csv(self, path: str) -> ImportResult:
        """
        Import entries from a CSV file.

        Bad or duplicate rows are skipped and counted; valid rows are stored
        even when others in the same file are skipped.

        Raises:
            PersistenceError: If the file cannot be read or an insert fails
        """
        try:
            with open(path, "r", encoding="utf-8-sig", newline="") as handle:
                text = handle.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read CSV {path}: {e}")
            raise PersistenceError(f"Failed to read CSV {path}") from e

        result = import_entries(text, self.entries())
        for entry in result.entries:
            self.database.insert(entry)

        logger.info(
            f"Imported {result.imported} entries from {path}, skipped {result.skipped}"
        )
        return result

    def overview(self, now: Optional[datetime] = None) -> LogbookOverview:
        return statistics.overview(self.entries(), now, Config.RECENT_FIRSTS_LIMIT)

    def highlights(self, now: Optional[datetime] = None) -> StatsHighlights:
        return statistics.highlights(self.entries(), now, Config.TOP_COUNTS_LIMIT)
