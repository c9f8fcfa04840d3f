"""CSS-selector-based HTML extraction helpers.

Thin wrappers around BeautifulSoup that never raise on missing nodes:
every helper returns a default (``""`` / ``[]`` / ``None``) when nothing
matches, so row parsers can stay lenient against layout drift.
"""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (``lxml`` parser)."""
    return BeautifulSoup(html, "lxml")


def innermost_rows(root: BeautifulSoup | Tag) -> list[Tag]:
    """Return every ``<tr>`` that does not itself contain a ``<tr>``.

    Layout tables often wrap the result table; only leaf rows carry data.
    """
    return [row for row in root.find_all("tr") if row.find("tr") is None]


def extract_text(
    element: Tag,
    selector: str,
    *fallback_selectors: str,
    default: str = "",
    strip: bool = True,
) -> str:
    """Extract text from the first matching child element.

    With ``selector=""`` the element's own text is returned.
    """
    if selector == "":
        text = element.get_text(strip=strip)
        return text if text else default

    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match:
            text = match.get_text(strip=strip)
            if text:
                return text
    return default


def extract_attr(
    element: Tag,
    selector: str,
    attr: str,
    *fallback_selectors: str,
    default: str = "",
    base_url: str = "",
) -> str:
    """Extract an HTML attribute from the first matching child element.

    Relative URLs are joined onto *base_url* when one is given.
    """
    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match is None:
            continue
        val = match.get(attr)
        if val:
            value = str(val)
            return urljoin(base_url, value) if base_url else value
    return default


def first_link(
    element: Tag,
    *,
    skip_prefixes: tuple[str, ...] = (),
) -> Tag | None:
    """Return the first ``<a href>`` with non-empty text.

    Anchors whose ``href`` starts with one of *skip_prefixes* are ignored.
    """
    for tag in element.select("a[href]"):
        href = str(tag.get("href", ""))
        if skip_prefixes and href.startswith(skip_prefixes):
            continue
        if tag.get_text(strip=True):
            return tag
    return None
