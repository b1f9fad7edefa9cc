"""
Logging setup for Interval SNTP.

Debug output can be forced with INTERVAL_SNTP_DEBUG=true.
"""

import logging
import os

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def is_debug_enabled() -> bool:
    return os.environ.get('INTERVAL_SNTP_DEBUG', 'false').lower() == 'true'


def configure_logging(level: str = "INFO") -> int:
    """Configure root logging and return the numeric level applied."""
    if is_debug_enabled():
        numeric_level = logging.DEBUG
    else:
        numeric_level = logging.getLevelName(level.upper())
        if not isinstance(numeric_level, int):
            raise ValueError(f"Invalid log level: {level}")

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger('interval_sntp').setLevel(numeric_level)
    return numeric_level
