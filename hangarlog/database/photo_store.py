"""
Photo blob store backed by a directory on disk.

Entries only ever hold the generated keys; the bytes live here.
"""
import logging
import uuid
from pathlib import Path
from typing import Optional

from hangarlog.database.db import PersistenceError

logger = logging.getLogger(__name__)

PHOTO_EXTENSION = ".jpg"


class PhotoStore:
    """Key-addressed storage for photo attachments."""

    def __init__(self, directory: str = "photos"):
        """
        Args:
            directory: Folder holding the photo files; created if missing
        """
        self.directory = Path(directory)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create photo directory {self.directory}: {e}")
            raise PersistenceError(f"Cannot create photo directory {self.directory}") from e

    def _path_for(self, key: str) -> Path:
        # Keys are bare filenames; anything path-like is refused
        name = Path(key).name
        if not key or name != key:
            raise ValueError(f"Invalid photo key: {key!r}")
        return self.directory / name

    def save(self, data: bytes) -> str:
        """
        Store photo bytes under a new key.

        Returns:
            The generated key (a filename)
        """
        key = f"{uuid.uuid4().hex}{PHOTO_EXTENSION}"
        try:
            self._path_for(key).write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to save photo {key}: {e}")
            raise PersistenceError(f"Failed to save photo {key}") from e
        logger.debug(f"Saved photo {key} ({len(data)} bytes)")
        return key

    def load(self, key: str) -> Optional[bytes]:
        """Return the bytes stored under key, or None if there is no such photo."""
        try:
            path = self._path_for(key)
        except ValueError:
            return None
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read photo {key}: {e}")
            raise PersistenceError(f"Failed to read photo {key}") from e

    def delete(self, key: str) -> None:
        """Remove a photo; unknown keys are ignored."""
        try:
            path = self._path_for(key)
        except ValueError:
            logger.warning(f"Ignoring invalid photo key {key!r}")
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to delete photo {key}: {e}")
            raise PersistenceError(f"Failed to delete photo {key}") from e
