"""Type conversion utilities."""

from __future__ import annotations


def to_int(raw: str | int | None) -> int | None:
    """Convert string or int to int, return None if invalid.

    Handles various formats:
        - None → None
        - int → int (passthrough)
        - "123" → 123
        - "1,234" / "1 234" → 1234
        - "" or "n/a" → None

    Args:
        raw: Input value (str, int, or None).

    Returns:
        Integer or None if conversion fails.
    """
    if raw is None:
        return None

    if isinstance(raw, bool):
        return None

    if isinstance(raw, int):
        return raw

    if isinstance(raw, str):
        digits = "".join(ch for ch in raw if ch.isdigit())
        return int(digits) if digits else None

    return None


def to_count(raw: str | int | None) -> int:
    """Convert a peer counter (seeders/leechers) to a non-negative int.

    Absent or malformed values count as 0.
    """
    value = to_int(raw)
    if value is None or value < 0:
        return 0
    return value


_TRUE_TOKENS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_TOKENS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def to_bool(raw: str | None) -> bool | None:
    """Parse a query-string boolean, return None if absent or malformed."""
    if raw is None:
        return None
    text = raw.strip()
    if text in _TRUE_TOKENS:
        return True
    if text in _FALSE_TOKENS:
        return False
    return None
