"""
Entry validation module.
Checks form input before any entry is created or changed.
"""

from typing import Dict, Any, Optional

from hangarlog.models import EntryDraft, EntryMode
from hangarlog.core.registration import normalize_registration
from hangarlog.utils.geometry import is_valid_latitude, is_valid_longitude, parse_degrees


class ValidationError(Exception):
    """Raised when form input cannot be saved."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class EntryValidator:
    """Validates entry drafts coming from the entry form."""

    TEXT_FIELDS = (
        "aircraft_type",
        "operator",
        "location_name",
        "flight_number",
        "origin",
        "destination",
        "notes",
    )

    @staticmethod
    def validate_draft(draft: EntryDraft) -> Dict[str, Any]:
        """
        Validate a draft and return cleaned field values.

        Args:
            draft: Raw form input

        Returns:
            Dictionary of entry fields ready to apply to an Entry

        Raises:
            ValidationError: If the registration is empty, the mode is
                unknown or a coordinate is malformed or out of range
        """
        if not isinstance(draft.mode, EntryMode):
            raise ValidationError("mode", f"Unknown entry mode: {draft.mode}")

        registration = normalize_registration(draft.registration)
        if not registration:
            raise ValidationError("registration", "Registration is required")

        latitude = EntryValidator._validate_latitude(draft.latitude_text)
        longitude = EntryValidator._validate_longitude(draft.longitude_text)

        cleaned = {
            "mode": draft.mode,
            "registration": registration,
            "date_time": draft.date_time,
            "latitude": latitude,
            "longitude": longitude,
            "photo_filenames": list(draft.photo_filenames),
        }
        for name in EntryValidator.TEXT_FIELDS:
            cleaned[name] = EntryValidator.clean_text(getattr(draft, name))

        return cleaned

    @staticmethod
    def _validate_latitude(text: str) -> Optional[float]:
        """Validate latitude text; blank means unset."""
        try:
            value = parse_degrees(text)
        except ValueError:
            raise ValidationError("latitude", "Latitude must be a number")
        if value is not None and not is_valid_latitude(value):
            raise ValidationError("latitude", "Latitude must be between -90 and 90")
        return value

    @staticmethod
    def _validate_longitude(text: str) -> Optional[float]:
        """Validate longitude text; blank means unset."""
        try:
            value = parse_degrees(text)
        except ValueError:
            raise ValidationError("longitude", "Longitude must be a number")
        if value is not None and not is_valid_longitude(value):
            raise ValidationError("longitude", "Longitude must be between -180 and 180")
        return value

    @staticmethod
    def clean_text(value: Optional[str]) -> str:
        """Strip surrounding whitespace; None becomes empty."""
        if not isinstance(value, str):
            return ""
        return value.strip()
