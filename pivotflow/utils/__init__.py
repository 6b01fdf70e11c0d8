"""Shared helpers: logging and UTC time utilities."""

from .logging import configure_default_logging, get_logger, setup_logging
from .helpers import (
    MS_IN_DAY,
    date_key,
    ms_to_datetime,
    parse_date_key,
)

__all__ = [
    "configure_default_logging",
    "get_logger",
    "setup_logging",
    "MS_IN_DAY",
    "date_key",
    "ms_to_datetime",
    "parse_date_key",
]
