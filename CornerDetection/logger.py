"""
Logging for CornerDetection

Library modules only ask for named children of the ``CornerDetection``
logger. Handlers are attached once by the application through
``configure_logging``; importing the package never touches handlers.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


ROOT_LOGGER_NAME = "CornerDetection"

# [2025-10-31 10:15:30] [INFO] [CornerDetection.cli] Found 12 corners
LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_logger(name: str) -> logging.Logger:
    """Child logger for a package module, e.g. get_logger('kernels')"""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: str = "INFO",
                      log_file: Optional[str] = None,
                      console: bool = True) -> logging.Logger:
    """
    Attach handlers to the package logger, replacing any previous ones

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file that receives the same records
        console: Write records to stdout; False keeps only the file

    Returns:
        The configured ``CornerDetection`` logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, level.upper()))
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = []
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode='a'))

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return root
