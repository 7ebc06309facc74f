"""
utils/logger.py
---------------
Logging setup shared by every module: ``logger = get_logger(__name__)``.
The root level comes from LOG_LEVEL; output goes to stdout.
"""

import logging
import sys

from config import LOG_LEVEL

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``, configuring the root logger on first use."""
    global _configured
    if not _configured:
        logging.basicConfig(
            stream=sys.stdout,
            format=_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S",
            level=getattr(logging, LOG_LEVEL, logging.INFO),
        )
        _configured = True
    return logging.getLogger(name)
