"""Parsing utilities for size and date text found on result pages."""

from __future__ import annotations

import re

_SIZE_RE = re.compile(r"(\d+(?:[.,]\d+)?)\s*([KMGTP]?I?B)\b", re.IGNORECASE)

_DATE_PATTERNS: tuple[tuple[re.Pattern[str], tuple[int, int, int]], ...] = (
    # (pattern, (year_group, month_group, day_group))
    (re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b"), (1, 2, 3)),
    (re.compile(r"\b(\d{2})[.\-/](\d{2})[.\-/](\d{4})\b"), (3, 2, 1)),
)

_MULTIPLIERS: dict[str, int] = {
    "B": 1,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
    "PB": 1024**5,
}


def find_size_token(text: str) -> str:
    """Return the first ``number + unit`` token in *text* (e.g. ``"1.2 GB"``).

    Returns an empty string when *text* contains no size token.
    """
    match = _SIZE_RE.search(text)
    if not match:
        return ""
    return match.group(0).strip()


def parse_size_to_bytes(size_str: str) -> int:
    """Parse size string to bytes.

    Supports formats:
        - "1234" (raw bytes)
        - "4.5 GB" / "4,5 GB"
        - "500MB"
        - "1.2 TiB"

    Unparseable input yields 0 so that it orders as smallest.
    """
    if not size_str:
        return 0

    text = size_str.strip()
    if text.isdigit():
        return int(text)

    match = _SIZE_RE.search(text)
    if not match:
        return 0

    value = float(match.group(1).replace(",", "."))
    unit = match.group(2).upper().replace("I", "")

    return int(value * _MULTIPLIERS.get(unit, 1))


def normalize_date(text: str) -> str:
    """Return the first date in *text* as ISO ``YYYY-MM-DD``, or ``""``.

    Accepts ``YYYY-MM-DD``, ``DD.MM.YYYY``, ``DD-MM-YYYY`` and ``DD/MM/YYYY``.
    """
    for pattern, (y, m, d) in _DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            return f"{match.group(y)}-{match.group(m)}-{match.group(d)}"
    return ""
