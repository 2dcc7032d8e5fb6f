"""
Logging setup for overlap_wfc.

Usage:
    from overlap_wfc.logging_config import setup_logging
    setup_logging(logging.INFO)  # call once at startup
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5


def setup_logging(console_level=logging.WARNING, log_file=None, log_level=logging.DEBUG):
    """
    Configure the overlap_wfc logger.
    Args:
        console_level: level for stderr output
        log_file: optional path of a rotating DEBUG log
        log_level: level for the log file
    Returns:
        the configured logger
    """
    root_logger = logging.getLogger("overlap_wfc")
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_path, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-25s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        root_logger.addHandler(file_handler)

    return root_logger
