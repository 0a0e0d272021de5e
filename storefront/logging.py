"""
Logging for the storefront engine.

Every module takes its logger from here:

    from storefront.logging import get_logger
    logger = get_logger(__name__)

Handlers are attached to the ``storefront`` package logger only, once, on
import. Level comes from LOG_LEVEL; STOREFRONT_DEBUG=1 adds timestamps so
tracked events can be lined up with cart writes.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

PACKAGE_LOGGER = "storefront"

# Transaction ids (ORD-<base36>-<hex>) stay readable at this length
ID_LOG_LENGTH = 12
TEXT_LOG_LENGTH = 50

# CWE-117: user input (search terms, coupons, ids) must not forge log lines
_LOG_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def _configure_package_logger() -> None:
    logger = logging.getLogger(PACKAGE_LOGGER)
    if logger.handlers:
        return

    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    debug = os.environ.get("STOREFRONT_DEBUG") == "1"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT if debug else LOG_FORMAT_SIMPLE))
    logger.addHandler(handler)
    logger.setLevel(level)

    # Catalog fetches and the analytics sink go through httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


_configure_package_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _for_log(value: object, max_length: int, suffix: str) -> str:
    if value is None or value == "":
        return "N/A"
    safe_value = str(value).translate(_LOG_ESCAPES)
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + suffix


def sanitize_id_for_logging(id_value: str | None) -> str:
    """Escaped id prefix for log lines, "N/A" when empty."""
    return _for_log(id_value, ID_LOG_LENGTH, "")


def sanitize_string_for_logging(value: str | None, max_length: int = TEXT_LOG_LENGTH) -> str:
    """Escaped free text, truncated with "..." past ``max_length``."""
    return _for_log(value, max_length, "...")


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
