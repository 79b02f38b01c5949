"""
Database module for the logbook record store.
Manages the SQLite connection and the entries table.
"""

import sqlite3
import json
import logging
import uuid
from datetime import datetime
from typing import Callable, Optional, List
from pathlib import Path

from hangarlog.models import Entry, EntryMode

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised when the record store, blob store or an export file cannot be written or read."""
    pass


class EntryDatabase:
    """Stores logbook entries in SQLite."""

    def __init__(self, db_path: str = "hangarlog.db"):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        self.db_path = db_path
        self.connection = None
        try:
            self._ensure_db_directory()
            self._connect()
            self.create_tables()
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Failed to open database {db_path}: {e}")
            raise PersistenceError(f"Could not open database {db_path}") from e

    def _ensure_db_directory(self) -> None:
        """Ensure the database directory exists."""
        if self.db_path == ":memory:":
            return
        db_dir = Path(self.db_path).parent
        db_dir.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> None:
        """Establish database connection."""
        self.connection = sqlite3.connect(self.db_path, timeout=30.0)
        self.connection.row_factory = sqlite3.Row

    def create_tables(self) -> None:
        """Create the entries table if it doesn't exist."""
        cursor = self.connection.cursor()
        # seq preserves creation order; it never changes on update
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS entries (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT NOT NULL UNIQUE,
                mode TEXT NOT NULL,
                registration TEXT NOT NULL,
                aircraft_type TEXT NOT NULL DEFAULT '',
                operator TEXT NOT NULL DEFAULT '',
                date_time TEXT NOT NULL,
                timestamp REAL NOT NULL,
                location_name TEXT NOT NULL DEFAULT '',
                latitude REAL,
                longitude REAL,
                flight_number TEXT NOT NULL DEFAULT '',
                origin TEXT NOT NULL DEFAULT '',
                destination TEXT NOT NULL DEFAULT '',
                notes TEXT NOT NULL DEFAULT '',
                is_first_for_registration INTEGER NOT NULL DEFAULT 0,
                photo_filenames TEXT NOT NULL DEFAULT '[]'
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_entries_timestamp ON entries(timestamp)"
        )
        self.connection.commit()

    @staticmethod
    def _to_params(entry: Entry) -> dict:
        return {
            'id': str(entry.id),
            'mode': entry.mode.value,
            'registration': entry.registration,
            'aircraft_type': entry.aircraft_type,
            'operator': entry.operator,
            'date_time': entry.date_time.isoformat(),
            'timestamp': entry.date_time.timestamp(),
            'location_name': entry.location_name,
            'latitude': entry.latitude,
            'longitude': entry.longitude,
            'flight_number': entry.flight_number,
            'origin': entry.origin,
            'destination': entry.destination,
            'notes': entry.notes,
            'is_first_for_registration': int(entry.is_first_for_registration),
            'photo_filenames': json.dumps(entry.photo_filenames),
        }

    @staticmethod
    def _from_row(row: sqlite3.Row) -> Entry:
        return Entry(
            id=uuid.UUID(row['id']),
            mode=EntryMode(row['mode']),
            registration=row['registration'],
            aircraft_type=row['aircraft_type'],
            operator=row['operator'],
            date_time=datetime.fromisoformat(row['date_time']),
            location_name=row['location_name'],
            latitude=row['latitude'],
            longitude=row['longitude'],
            flight_number=row['flight_number'],
            origin=row['origin'],
            destination=row['destination'],
            notes=row['notes'],
            is_first_for_registration=bool(row['is_first_for_registration']),
            photo_filenames=json.loads(row['photo_filenames']),
        )

    def _execute(self, sql: str, params=()) -> sqlite3.Cursor:
        """Run a write statement and commit, wrapping SQLite failures."""
        try:
            cursor = self.connection.execute(sql, params)
            self.connection.commit()
            return cursor
        except sqlite3.Error as e:
            self.connection.rollback()
            logger.error(f"Database write failed: {e}")
            raise PersistenceError(str(e)) from e

    def insert(self, entry: Entry) -> None:
        """
        Insert a new entry.

        Args:
            entry: Entry to store; its id must not exist yet
        """
        self._execute("""
            INSERT INTO entries (
                id, mode, registration, aircraft_type, operator, date_time, timestamp,
                location_name, latitude, longitude, flight_number, origin, destination,
                notes, is_first_for_registration, photo_filenames
            ) VALUES (
                :id, :mode, :registration, :aircraft_type, :operator, :date_time, :timestamp,
                :location_name, :latitude, :longitude, :flight_number, :origin, :destination,
                :notes, :is_first_for_registration, :photo_filenames
            )
        """, self._to_params(entry))
        logger.debug(f"Inserted entry {entry.id} ({entry.registration})")

    def update(self, entry: Entry) -> None:
        """
        Overwrite a stored entry's fields in place.

        Raises:
            PersistenceError: If no entry with this id exists
        """
        cursor = self._execute("""
            UPDATE entries SET
                mode = :mode,
                registration = :registration,
                aircraft_type = :aircraft_type,
                operator = :operator,
                date_time = :date_time,
                timestamp = :timestamp,
                location_name = :location_name,
                latitude = :latitude,
                longitude = :longitude,
                flight_number = :flight_number,
                origin = :origin,
                destination = :destination,
                notes = :notes,
                is_first_for_registration = :is_first_for_registration,
                photo_filenames = :photo_filenames
            WHERE id = :id
        """, self._to_params(entry))
        if cursor.rowcount == 0:
            raise PersistenceError(f"Entry {entry.id} does not exist")

    def delete(self, entry: Entry) -> None:
        """Remove a single entry."""
        self._execute("DELETE FROM entries WHERE id = ?", (str(entry.id),))
        logger.debug(f"Deleted entry {entry.id}")

    def delete_all(self) -> int:
        """
        Remove every entry.

        Returns:
            Number of entries removed
        """
        cursor = self._execute("DELETE FROM entries")
        return cursor.rowcount

    def get(self, entry_id: uuid.UUID) -> Optional[Entry]:
        """
        Retrieve an entry by identifier.

        Args:
            entry_id: Entry identifier

        Returns:
            The entry or None if not found
        """
        cursor = self.connection.cursor()
        cursor.execute("SELECT * FROM entries WHERE id = ?", (str(entry_id),))
        row = cursor.fetchone()
        return self._from_row(row) if row else None

    def query_all(self, newest_first: bool = True) -> List[Entry]:
        """
        Retrieve all entries ordered by timestamp.

        Args:
            newest_first: Sort descending by timestamp when True

        Returns:
            List of entries; equal timestamps keep creation order
        """
        direction = "DESC" if newest_first else "ASC"
        try:
            cursor = self.connection.cursor()
            cursor.execute(
                f"SELECT * FROM entries ORDER BY timestamp {direction}, seq ASC"
            )
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"Database read failed: {e}")
            raise PersistenceError(str(e)) from e
        return [self._from_row(row) for row in rows]

    def query(self, predicate: Callable[[Entry], bool], newest_first: bool = True) -> List[Entry]:
        """Retrieve the entries for which predicate returns True."""
        return [entry for entry in self.query_all(newest_first) if predicate(entry)]

    def count(self) -> int:
        """Number of stored entries."""
        cursor = self.connection.cursor()
        cursor.execute("SELECT COUNT(*) FROM entries")
        return cursor.fetchone()[0]

    def close(self) -> None:
        """Close database connection."""
        if self.connection:
            self.connection.close()
            self.connection = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
