"""Utility helpers for time handling and text cleanup."""

from .text import parse_amount, truncate_text
from .timestamps import ensure_utc, format_timestamp, parse_timestamp, utc_now

__all__ = [
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_timestamp",
    "format_timestamp",
    # Text
    "parse_amount",
    "truncate_text",
]
