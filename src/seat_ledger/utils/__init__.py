"""Utility functions for money parsing, formatting and logging."""

from .data_helpers import (
    format_currency,
    format_headline,
    money_to_str,
    parse_date,
    parse_money,
)
from .logging_config import get_logger, setup_logging

__all__ = [
    "format_currency",
    "format_headline",
    "money_to_str",
    "parse_date",
    "parse_money",
    "get_logger",
    "setup_logging",
]
