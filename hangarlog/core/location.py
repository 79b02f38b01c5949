"""
Location capability.

The entry form can ask for the current position to fill in latitude and
longitude. How the position is obtained is up to the provider handed to
the form; entries only ever see plain numbers.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from hangarlog.config import Config
from hangarlog.models import Coordinates
from hangarlog.utils.geometry import is_valid_latitude, is_valid_longitude

logger = logging.getLogger(__name__)


class LocationUnavailableError(Exception):
    """Raised when no position can be determined."""
    pass


class LocationProvider(ABC):
    """Interface for anything that can report the current position."""

    @abstractmethod
    async def request_location(self) -> Coordinates:
        """
        Determine the current position.

        Raises:
            LocationUnavailableError: If no position can be determined
        """


class StaticLocationProvider(LocationProvider):
    """Reports a fixed position, by default HOME_LAT/HOME_LON from the config."""

    def __init__(self, latitude: Optional[float] = None, longitude: Optional[float] = None):
        self.latitude = Config.HOME_LAT if latitude is None else latitude
        self.longitude = Config.HOME_LON if longitude is None else longitude

    async def request_location(self) -> Coordinates:
        if self.latitude is None or self.longitude is None:
            raise LocationUnavailableError("No home location configured")
        if not is_valid_latitude(self.latitude) or not is_valid_longitude(self.longitude):
            logger.warning(f"Configured home location out of range: {self.latitude}, {self.longitude}")
            raise LocationUnavailableError("Configured home location is out of range")
        return Coordinates(latitude=self.latitude, longitude=self.longitude)
