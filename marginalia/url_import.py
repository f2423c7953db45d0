"""Importer for web articles fetched over HTTP(S)."""

from __future__ import annotations

import codecs
import logging
import re
import time
from dataclasses import dataclass
from email.message import Message
from urllib.parse import urlsplit

import requests
from bs4 import BeautifulSoup
from bs4.element import Tag

from .domain import EmptyContentError, ImportedDocument, ImportedSection, ReadFailedError
from .htmltext import collapse_whitespace, extract_paragraphs

log = logging.getLogger(__name__)

MAX_RESPONSE_BYTES = 10 * 1024 * 1024
"""Largest page accepted; guards against endless streams and binary downloads."""

CONNECT_TIMEOUT = 30.0
READ_TIMEOUT = 30.0
TOTAL_TIMEOUT = 45.0
MAX_REDIRECTS = 5
USER_AGENT = "Marginalia/0.1.0 (reader)"

_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
_STRIP_TAGS = (
    "script", "style", "noscript", "iframe", "form", "nav", "header", "footer",
    "aside", "svg", "button", "template", "object", "embed",
)
_KEEP_TAGS = frozenset({"html", "body", "article", "main"})
_UNLIKELY = re.compile(
    r"banner|breadcrumb|combx|comment|community|cookie|disqus|footer|header|menu|modal"
    r"|nav|popup|related|remark|share|shoutbox|sidebar|social|sponsor|advert|ad-break"
    r"|agegate|pagination|pager|subscribe",
    re.IGNORECASE,
)
_MAYBE_CANDIDATE = re.compile(r"and|article|body|column|content|main|post|text|story", re.IGNORECASE)
_TITLE_SEPARATORS = (" | ", " - ", " \u2013 ", " \u2014 ", " \u00bb ", " / ")
_MIN_SCORED_TEXT = 25


class _BodyTooLarge(Exception):
    def __init__(self, size: int) -> None:
        super().__init__(size)
        self.size = size


@dataclass
class _Article:
    title: str | None
    content: str | None


def _read_failed(url: str, message: str) -> ReadFailedError:
    return ReadFailedError(url, message)


def _clean_title(raw: str) -> str:
    title = collapse_whitespace(raw)
    for separator in _TITLE_SEPARATORS:
        if separator in title:
            head = title.rsplit(separator, 1)[0].strip()
            if len(head.split()) >= 3:
                return head
    return title


def _article_title(soup: BeautifulSoup) -> str | None:
    meta = soup.find("meta", attrs={"property": "og:title"})
    if isinstance(meta, Tag) and str(meta.get("content", "")).strip():
        return _clean_title(str(meta["content"]))
    title = soup.find("title")
    if title is not None and title.get_text().strip():
        return _clean_title(title.get_text())
    return None


def _text_length(element: Tag) -> int:
    return len(collapse_whitespace(element.get_text(" ")))


def _strip_clutter(soup: BeautifulSoup) -> None:
    doomed = list(soup.find_all(_STRIP_TAGS))
    for element in soup.find_all(True):
        if element.name in _KEEP_TAGS:
            continue
        marker = " ".join(element.get("class", [])) + " " + str(element.get("id", ""))
        if _UNLIKELY.search(marker) and not _MAYBE_CANDIDATE.search(marker):
            doomed.append(element)
    for element in doomed:
        element.extract()


def _best_candidate(soup: BeautifulSoup) -> Tag | BeautifulSoup:
    for name in ("article", "main"):
        found = [element for element in soup.find_all(name) if _text_length(element)]
        if found:
            return max(found, key=_text_length)

    scores: dict[int, tuple[Tag, float]] = {}

    def add(element: Tag | None, score: float) -> None:
        if isinstance(element, Tag) and element.name != "[document]":
            _, current = scores.get(id(element), (element, 0.0))
            scores[id(element)] = (element, current + score)

    for paragraph in soup.find_all(["p", "pre", "td"]):
        text = collapse_whitespace(paragraph.get_text(" "))
        if len(text) < _MIN_SCORED_TEXT:
            continue
        score = 1 + text.count(",") + min(len(text) // 100, 3)
        add(paragraph.parent, score)
        add(paragraph.parent.parent if paragraph.parent is not None else None, score / 2)

    if scores:
        return max(scores.values(), key=lambda pair: pair[1])[0]
    return soup.body or soup


def _parse_article(html: str) -> _Article | None:
    """Find the main readable content of a page, dropping navigation and clutter."""
    soup = BeautifulSoup(html, "html.parser")
    title = _article_title(soup)
    _strip_clutter(soup)
    candidate = _best_candidate(soup)
    if not collapse_whitespace(candidate.get_text(" ")):
        return None
    return _Article(title=title, content=str(candidate))


def _charset(response: requests.Response) -> str:
    message = Message()
    message["content-type"] = response.headers.get("Content-Type", "")
    charset = message.get_content_charset() or "utf-8"
    try:
        codecs.lookup(charset)
    except LookupError:
        return "utf-8"
    return charset


def _read_body(response: requests.Response, deadline: float) -> bytes:
    body = bytearray()
    for piece in response.iter_content(chunk_size=64 * 1024):
        body.extend(piece)
        if len(body) > MAX_RESPONSE_BYTES:
            raise _BodyTooLarge(len(body))
        if time.monotonic() > deadline:
            raise TimeoutError("request exceeded the total time limit")
    return bytes(body)


def _check_url(url: str) -> str:
    """Validate ``url`` and return its host, raising for anything but http(s)."""
    try:
        parts = urlsplit(url)
        host = parts.hostname
    except ValueError as error:
        raise _read_failed(url, f"invalid URL: {error}") from error
    if not parts.scheme or not _SCHEME.match(parts.scheme):
        raise _read_failed(url, "invalid URL: relative URL without a base")
    scheme = parts.scheme.lower()
    if scheme not in ("http", "https"):
        raise _read_failed(url, f"unsupported scheme: {scheme} (only http/https)")
    if not host:
        raise _read_failed(url, "invalid URL: empty host")
    return host


class UrlDocumentImporter:
    """Fetches a web page and imports its readable article as one section."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session if session is not None else requests.Session()
        self._session.headers["User-Agent"] = USER_AGENT
        self._session.max_redirects = MAX_REDIRECTS

    def import_url(self, url: str) -> ImportedDocument:
        """Fetch ``url`` and return its article, ready for chunking."""
        host = _check_url(url)

        log.info("url-import: fetching %s", url)
        deadline = time.monotonic() + TOTAL_TIMEOUT
        try:
            response = self._session.get(
                url, timeout=(CONNECT_TIMEOUT, READ_TIMEOUT), stream=True, allow_redirects=True
            )
        except requests.RequestException as error:
            raise _read_failed(url, f"HTTP request failed: {error}") from error

        with response:
            final_url = response.url or url
            if final_url != url:
                log.info("url-import: redirected to %s", final_url)

            status = response.status_code
            if status >= 400:
                raise _read_failed(url, f"HTTP request failed: {final_url}: status code {status}")
            if not 200 <= status < 300:
                raise _read_failed(url, f"HTTP {status} {response.reason or ''}".rstrip())

            try:
                body = _read_body(response, deadline)
            except _BodyTooLarge as error:
                raise _read_failed(
                    url, f"response body too large ({error.size} bytes)"
                ) from error
            except (requests.RequestException, TimeoutError) as error:
                raise _read_failed(url, f"failed to read response body: {error}") from error
            html = body.decode(_charset(response), errors="replace")

        article = _parse_article(html)
        if article is None or article.content is None:
            raise EmptyContentError(final_url)

        paragraphs = extract_paragraphs(article.content)
        if not paragraphs:
            raise EmptyContentError(final_url)

        title = article.title if article.title and article.title.strip() else host
        return ImportedDocument(
            title=title,
            source_path=final_url,
            sections=[
                ImportedSection(
                    title=title or "Article",
                    paragraphs=paragraphs,
                    source_anchor=f"url:{final_url}",
                )
            ],
        )