"""Candidate record extraction from torrent search result pages.

The result page format is not contractually stable, so extraction is
deliberately lenient: each table row is decoded on its own, missing fields
fall back to their zero value, and only rows without a title are dropped.
A document that cannot be parsed at all yields an empty list.
"""

from __future__ import annotations

import re

import structlog
from bs4 import Tag

from seedarr.domain.entities.torrent import CandidateRecord
from seedarr.infrastructure.common.converters import to_count
from seedarr.infrastructure.common.html_selectors import (
    extract_attr,
    extract_text,
    first_link,
    innermost_rows,
    parse_html,
)
from seedarr.infrastructure.common.parsers import find_size_token, normalize_date
from seedarr.infrastructure.torrents.release_parser import classify

log = structlog.get_logger(__name__)

_MAGNET_PREFIX = "magnet:"
_DIGITS_RE = re.compile(r"\d+")

_SEEDERS_SELECTOR = '[class^="seed"]'
_LEECHERS_SELECTOR = '[class^="leech"]'
_MAGNET_SELECTOR = 'a[href^="magnet:"]'
_TORRENT_FILE_SELECTOR = 'a[href$=".torrent"]'
_TORRENT_DOWNLOAD_SELECTOR = 'a[href*="download.php"]'


def _is_inside(node: object, ancestor: Tag) -> bool:
    return any(parent is ancestor for parent in getattr(node, "parents", ()))


def _peer_count(row: Tag, selector: str) -> int:
    """Digits inside the first element matched by *selector*, else 0."""
    text = extract_text(row, selector)
    if not text or not _DIGITS_RE.fullmatch(text):
        return 0
    return to_count(text)


def _size_text(row: Tag, title_tag: Tag) -> str:
    """First size token among the row's cells, ignoring the title anchor."""
    for cell in row.find_all(["td", "th"]):
        if _is_inside(title_tag, cell):
            # Title cells may still hold a size next to the anchor.
            texts = [
                s for s in cell.find_all(string=True) if not _is_inside(s, title_tag)
            ]
            token = find_size_token(" ".join(texts))
        else:
            token = find_size_token(cell.get_text(" ", strip=True))
        if token:
            return token
    return ""


def _added_date(row: Tag, title_tag: Tag) -> str:
    for cell in row.find_all(["td", "th"]):
        if _is_inside(title_tag, cell):
            continue
        date = normalize_date(cell.get_text(" ", strip=True))
        if date:
            return date
    return ""


def parse_row(row: Tag, *, base_url: str = "") -> CandidateRecord | None:
    """Decode a single result row.

    Returns None when the row has no title (not a candidate).
    """
    title_tag = first_link(row, skip_prefixes=(_MAGNET_PREFIX,))
    if title_tag is None:
        return None
    title = title_tag.get_text(" ", strip=True)
    if not title:
        return None

    quality, hdr, hevc = classify(title)

    return CandidateRecord(
        title=title,
        size=_size_text(row, title_tag),
        seeders=_peer_count(row, _SEEDERS_SELECTOR),
        leechers=_peer_count(row, _LEECHERS_SELECTOR),
        quality=quality,
        hdr=hdr,
        hevc=hevc,
        magnet_link=extract_attr(row, _MAGNET_SELECTOR, "href"),
        torrent_link=extract_attr(
            row,
            _TORRENT_FILE_SELECTOR,
            "href",
            _TORRENT_DOWNLOAD_SELECTOR,
            base_url=base_url,
        ),
        added_date=_added_date(row, title_tag),
    )


def extract_candidates(document: str, *, base_url: str = "") -> list[CandidateRecord]:
    """Extract all candidate records from a raw search result document.

    Never raises: unparseable input yields an empty list.
    """
    if not document or not document.strip():
        return []

    try:
        soup = parse_html(document)
        rows = innermost_rows(soup)
    except Exception:  # noqa: BLE001
        log.warning("torrent_document_unparseable", exc_info=True)
        return []

    records: list[CandidateRecord] = []
    skipped = 0
    for row in rows:
        try:
            record = parse_row(row, base_url=base_url)
        except Exception:  # noqa: BLE001
            log.debug("torrent_row_unparseable", exc_info=True)
            record = None
        if record is None:
            skipped += 1
            continue
        records.append(record)

    log.debug(
        "torrent_candidates_extracted",
        rows=len(rows),
        records=len(records),
        skipped=skipped,
    )
    return records
