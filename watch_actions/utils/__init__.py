"""Utility functions for time handling and structured documents."""

from .documents import DocumentError, dump_json, dump_yaml, load_document, to_plain
from .timestamps import ensure_utc, format_timestamp, parse_iso_datetime, utc_now

__all__ = [
    # Documents
    "DocumentError",
    "load_document",
    "dump_json",
    "dump_yaml",
    "to_plain",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "format_timestamp",
]
