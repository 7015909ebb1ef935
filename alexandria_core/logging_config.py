"""Logging configuration with console and rotating file handlers"""
import glob
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

from .config import Settings

LOG_RETENTION = 5
MAX_LOG_BYTES = 10 * 1024 * 1024

# Third-party loggers kept out of the console (still written to file)
QUIET_LOGGERS = ("nltk", "urllib3", "filelock")


def setup_logging(
    log_file: str = "logs/alexandria-core.log",
    console_level: Union[int, str] = logging.INFO,
    file_level: Union[int, str] = logging.DEBUG,
) -> Path:
    """
    Configure logging with two destinations:
    - Console: Brief logs (INFO by default)
    - File: Detailed logs (DEBUG by default) with rotation
    
    Rotation policy:
    - New log file per session (timestamp-based naming)
    - Keep the last 5 session files (older ones removed on startup)
    - Auto-rotate when a file reaches 10MB
    
    Args:
        log_file: Base path of the log file
        console_level: Console logging level (name or number)
        file_level: File logging level (name or number)
    
    Returns:
        Path of this session's log file
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # Drop the oldest session logs so that, with the new one, 5 remain
    log_pattern = str(log_path.parent / f"{log_path.stem}_*.log")
    existing_logs = sorted(glob.glob(log_pattern), reverse=True)  # Newest first
    cleanup_failures: List[str] = []
    for old_log in existing_logs[LOG_RETENTION - 1:]:
        try:
            Path(old_log).unlink()
        except OSError as e:
            cleanup_failures.append(f"{old_log}: {e}")

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    session_log = log_path.parent / f"{log_path.stem}_{timestamp}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything, filter in handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    file_handler = RotatingFileHandler(
        session_log,
        mode='a',
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_RETENTION,
        encoding='utf-8'
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    for failure in cleanup_failures:
        logging.warning(f"Could not remove old log file {failure}")

    logging.info(f"Logging configured: console={logging.getLevelName(console_handler.level)}, file={session_log}")
    return session_log


def setup_logging_from_settings(settings: Settings, log_file: Optional[str] = None) -> Path:
    """setup_logging() with the console level taken from Settings.log_level."""
    if log_file:
        return setup_logging(log_file=log_file, console_level=settings.log_level)
    return setup_logging(console_level=settings.log_level)
