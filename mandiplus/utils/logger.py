"""
Centralized logging utility.

Provides a consistent logger across the client.
"""

import logging
import os
import sys
from typing import Optional

LOG_LEVEL = os.getenv("MANDIPLUS_LOG_LEVEL", "INFO").upper()


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Create or retrieve a configured logger instance.

    Args:
        name (Optional[str]): Logger name (usually __name__).

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)

    # NiceGUI re-imports page modules; keep a single handler
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | MANDIPLUS | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def mask_mobile(mobile_number: Optional[str]) -> str:
    """Return a log-safe form of a mobile number (last 4 digits only)."""
    if not mobile_number:
        return ""
    return f"******{mobile_number[-4:]}"
