"""
Centralized configuration module for HangarLog.
All configuration values should be accessed through this module.
"""

import os
import tempfile
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv


# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)


def _optional_float(name: str) -> Optional[float]:
    """Read an optional float setting; blank or missing means unset."""
    value = os.getenv(name, '').strip()
    return float(value) if value else None


class Config:
    """Configuration class with all HangarLog settings."""

    # Environment
    ENV = os.getenv('ENV', 'development')
    DEBUG = ENV == 'development'

    # Fixed location used when device location services are unavailable
    HOME_LAT = _optional_float('HOME_LAT')
    HOME_LON = _optional_float('HOME_LON')

    # Storage
    DATABASE_PATH = os.getenv('DATABASE_PATH', 'hangarlog.db')
    PHOTO_DIR = os.getenv('PHOTO_DIR', 'photos')
    EXPORT_DIR = os.getenv('EXPORT_DIR', tempfile.gettempdir())

    # Logging configuration
    LOG_FILE = os.getenv('LOG_FILE', 'hangarlog.log')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_MAX_SIZE = int(os.getenv('LOG_MAX_SIZE', '10485760'))  # 10MB
    LOG_BACKUP_COUNT = int(os.getenv('LOG_BACKUP_COUNT', '5'))

    # Stats presentation
    TOP_COUNTS_LIMIT = int(os.getenv('TOP_COUNTS_LIMIT', '10'))
    RECENT_FIRSTS_LIMIT = int(os.getenv('RECENT_FIRSTS_LIMIT', '10'))

    @classmethod
    def validate(cls) -> List[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of error messages, empty if valid
        """
        errors = []

        if cls.HOME_LAT is not None and not -90 <= cls.HOME_LAT <= 90:
            errors.append("HOME_LAT must be between -90 and 90")

        if cls.HOME_LON is not None and not -180 <= cls.HOME_LON <= 180:
            errors.append("HOME_LON must be between -180 and 180")

        if not cls.DATABASE_PATH:
            errors.append("DATABASE_PATH must not be empty")

        if not cls.PHOTO_DIR:
            errors.append("PHOTO_DIR must not be empty")

        if cls.TOP_COUNTS_LIMIT <= 0:
            errors.append("TOP_COUNTS_LIMIT must be positive")

        if cls.RECENT_FIRSTS_LIMIT <= 0:
            errors.append("RECENT_FIRSTS_LIMIT must be positive")

        if cls.LOG_LEVEL.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            errors.append(f"Unknown LOG_LEVEL: {cls.LOG_LEVEL}")

        return errors

    @classmethod
    def to_dict(cls) -> dict:
        """
        Export configuration as dictionary.

        Returns:
            Configuration dictionary
        """
        return {
            'ENV': cls.ENV,
            'DEBUG': cls.DEBUG,
            'HOME_LAT': cls.HOME_LAT,
            'HOME_LON': cls.HOME_LON,
            'DATABASE_PATH': cls.DATABASE_PATH,
            'PHOTO_DIR': cls.PHOTO_DIR,
            'EXPORT_DIR': cls.EXPORT_DIR,
            'LOG_FILE': cls.LOG_FILE,
            'LOG_LEVEL': cls.LOG_LEVEL,
            'TOP_COUNTS_LIMIT': cls.TOP_COUNTS_LIMIT,
            'RECENT_FIRSTS_LIMIT': cls.RECENT_FIRSTS_LIMIT,
        }


# Create singleton instance
config = Config()
