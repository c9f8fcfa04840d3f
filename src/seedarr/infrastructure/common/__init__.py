"""Common infrastructure utilities."""

from __future__ import annotations

from .converters import to_bool, to_count, to_int
from .parsers import find_size_token, normalize_date, parse_size_to_bytes

__all__ = [
    "find_size_token",
    "normalize_date",
    "parse_size_to_bytes",
    "to_bool",
    "to_count",
    "to_int",
]
