"""
Logging setup for HangarLog.
"""

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from hangarlog.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger from Config.

    Args:
        level: Log level name, defaults to Config.LOG_LEVEL
        log_file: Log file path, defaults to Config.LOG_FILE; empty disables it

    Returns:
        The root logger
    """
    level = (level or Config.LOG_LEVEL).upper()
    log_file = Config.LOG_FILE if log_file is None else log_file

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(RotatingFileHandler(
            log_file,
            maxBytes=Config.LOG_MAX_SIZE,
            backupCount=Config.LOG_BACKUP_COUNT,
            encoding='utf-8',
        ))

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    return logging.getLogger()
