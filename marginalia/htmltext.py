"""Plain-text paragraph extraction from (X)HTML documents."""

from __future__ import annotations

from bs4 import BeautifulSoup, NavigableString
from bs4.element import PreformattedString, Tag

MIN_BLOCK_LEN = 15
"""Shortest block kept; drops stray characters, page numbers and dividers."""

_BLOCK_SELECTOR = "p, h1, h2, h3, h4, h5, h6, li, blockquote"


def collapse_whitespace(text: str) -> str:
    """Replace every run of whitespace with one space and trim both ends."""
    return " ".join(text.split())


def _joined_text(element: Tag | BeautifulSoup) -> str:
    """All text nodes below ``element``, joined by spaces; comments excluded."""
    return " ".join(
        str(node)
        for node in element.descendants
        if isinstance(node, NavigableString) and not isinstance(node, PreformattedString)
    )


def _keep(text: str) -> bool:
    return len(text) >= MIN_BLOCK_LEN


def extract_paragraphs(html: str) -> list[str]:
    """Collect the text of block-level prose elements, in document order.

    Falls back to the body text split on newlines when no block element
    yields anything.
    """
    soup = BeautifulSoup(html, "html.parser")

    result = [
        cleaned
        for element in soup.select(_BLOCK_SELECTOR)
        if _keep(cleaned := collapse_whitespace(_joined_text(element).strip()))
    ]
    if result:
        return result

    bodies: list[Tag | BeautifulSoup] = list(soup.find_all("body")) or [soup]
    for body in bodies:
        for line in _joined_text(body).split("\n"):
            cleaned = collapse_whitespace(line.strip())
            if _keep(cleaned):
                result.append(cleaned)
    return result