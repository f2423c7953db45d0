"""Importer for EPUB 2 and EPUB 3 books.

Each spine item becomes one section; section titles come from the table of
contents when it points at the spine item, otherwise ``Chapter N``.
"""

from __future__ import annotations

import logging
import posixpath
import xml.etree.ElementTree as ET
import zipfile
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path, PurePath, PurePosixPath
from typing import Iterator, Union
from urllib.parse import unquote

from bs4 import BeautifulSoup
from bs4.element import Tag

from .domain import EmptyContentError, ImportedDocument, ImportedSection, ReadFailedError
from .htmltext import extract_paragraphs

log = logging.getLogger(__name__)

_CONTAINER_PATH = "META-INF/container.xml"
_NCX_MEDIA_TYPE = "application/x-dtbncx+xml"

PathLikeStr = Union[str, PurePath]


@dataclass
class NavPoint:
    """One entry of an EPUB table of contents."""

    label: str
    content: PurePosixPath
    children: list[NavPoint] = field(default_factory=list)


def flatten_toc(tree: list[NavPoint]) -> list[tuple[PurePosixPath, str]]:
    """Collect ``(content path, label)`` pairs for every nav point at every depth.

    Fragments are stripped from the paths; entries with blank labels are
    dropped but their children are still visited.
    """

    def walk(nodes: list[NavPoint]) -> Iterator[tuple[PurePosixPath, str]]:
        for node in nodes:
            label = node.label.strip()
            if label:
                yield strip_fragment(node.content), label
            yield from walk(node.children)

    return list(walk(tree))


def strip_fragment(path: PathLikeStr) -> PurePosixPath:
    """Remove a ``#fragment`` suffix from a content path."""
    text = str(path)
    index = text.rfind("#")
    if index >= 0:
        text = text[:index]
    return PurePosixPath(text)


def _parent_name(path: PurePosixPath) -> str | None:
    return path.parent.name or None


def paths_match(a: PathLikeStr, b: PathLikeStr) -> bool:
    """Whether two content paths name the same file.

    Paths may be relative to the package document or to the archive root,
    so they match on the file name, and on the parent directory name when
    both have one.
    """
    left, right = PurePosixPath(str(a)), PurePosixPath(str(b))
    if left == right:
        return True
    if not left.name or left.name != right.name:
        return False
    left_parent, right_parent = _parent_name(left), _parent_name(right)
    if left_parent is None or right_parent is None:
        return True
    return left_parent == right_parent


class _EpubFormatError(Exception):
    """The archive is not a well-formed EPUB."""


@dataclass
class _ManifestItem:
    path: PurePosixPath
    media_type: str
    properties: frozenset[str]


@dataclass
class _EpubBook:
    title: str | None
    toc: list[NavPoint]
    spine: list[PurePosixPath | None]


def _local(tag: object) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local(child.tag) == name]


def _find(element: ET.Element, name: str) -> ET.Element | None:
    return next((el for el in element.iter() if _local(el.tag) == name), None)


def _resolve(base_dir: str, href: str) -> PurePosixPath:
    joined = posixpath.normpath(posixpath.join(base_dir, unquote(href)))
    return PurePosixPath(joined.lstrip("/"))


def _parse_xml(archive: zipfile.ZipFile, name: str) -> ET.Element:
    return ET.fromstring(archive.read(name))


def _ncx_points(element: ET.Element, base_dir: str) -> list[NavPoint]:
    points = []
    for nav_point in _children(element, "navPoint"):
        label_el = _find(nav_point, "navLabel")
        text_el = _find(label_el, "text") if label_el is not None else None
        label = (text_el.text or "") if text_el is not None else ""
        content_el = next(iter(_children(nav_point, "content")), None)
        src = content_el.get("src", "") if content_el is not None else ""
        points.append(
            NavPoint(
                label=label,
                content=_resolve(base_dir, src),
                children=_ncx_points(nav_point, base_dir),
            )
        )
    return points


def _read_ncx(archive: zipfile.ZipFile, path: PurePosixPath) -> list[NavPoint]:
    root = _parse_xml(archive, str(path))
    nav_map = _find(root, "navMap")
    if nav_map is None:
        return []
    return _ncx_points(nav_map, posixpath.dirname(str(path)))


def _nav_list_points(ordered_list: Tag, base_dir: str) -> list[NavPoint]:
    points = []
    for item in ordered_list.find_all("li", recursive=False):
        link = item.find(["a", "span"], recursive=False)
        nested = item.find("ol", recursive=False)
        points.append(
            NavPoint(
                label=link.get_text(" ") if link is not None else "",
                content=_resolve(base_dir, str(link.get("href", "")) if link is not None else ""),
                children=_nav_list_points(nested, base_dir) if nested is not None else [],
            )
        )
    return points


def _read_nav_document(archive: zipfile.ZipFile, path: PurePosixPath) -> list[NavPoint]:
    soup = BeautifulSoup(archive.read(str(path)), "html.parser")
    nav = soup.find(
        "nav", attrs={"epub:type": lambda value: bool(value) and "toc" in value.split()}
    ) or soup.find("nav")
    if nav is None:
        return []
    ordered_list = nav.find("ol")
    if ordered_list is None:
        return []
    return _nav_list_points(ordered_list, posixpath.dirname(str(path)))


def _open_book(archive: zipfile.ZipFile) -> _EpubBook:
    rootfile = _find(_parse_xml(archive, _CONTAINER_PATH), "rootfile")
    opf_path = rootfile.get("full-path") if rootfile is not None else None
    if not opf_path:
        raise _EpubFormatError("container has no rootfile")
    opf_dir = posixpath.dirname(opf_path)
    package = _parse_xml(archive, opf_path)

    manifest: dict[str, _ManifestItem] = {}
    manifest_el = _find(package, "manifest")
    for item in _children(manifest_el, "item") if manifest_el is not None else []:
        item_id, href = item.get("id"), item.get("href")
        if item_id and href:
            manifest[item_id] = _ManifestItem(
                path=_resolve(opf_dir, href),
                media_type=item.get("media-type", ""),
                properties=frozenset(item.get("properties", "").split()),
            )

    spine_el = _find(package, "spine")
    if spine_el is None:
        raise _EpubFormatError("package document has no spine")
    spine = [
        manifest[ref].path if (ref := itemref.get("idref", "")) in manifest else None
        for itemref in _children(spine_el, "itemref")
    ]

    metadata = _find(package, "metadata")
    title_el = _find(metadata, "title") if metadata is not None else None
    title = (title_el.text or "").strip() if title_el is not None else ""

    ncx = manifest.get(spine_el.get("toc", "")) or next(
        (item for item in manifest.values() if item.media_type == _NCX_MEDIA_TYPE), None
    )
    if ncx is not None:
        toc = _read_ncx(archive, ncx.path)
    else:
        nav = next((item for item in manifest.values() if "nav" in item.properties), None)
        toc = _read_nav_document(archive, nav.path) if nav is not None else []

    return _EpubBook(title=title or None, toc=toc, spine=spine)


def _read_text(archive: zipfile.ZipFile, path: PurePosixPath) -> str | None:
    try:
        return archive.read(str(path)).decode("utf-8")
    except (KeyError, UnicodeDecodeError):
        return None


class EpubDocumentImporter:
    """Imports EPUB books, one section per spine item."""

    def import_path(self, source_path: Union[str, PathLike]) -> ImportedDocument:
        path = Path(source_path)
        try:
            with zipfile.ZipFile(path) as archive:
                book = _open_book(archive)
                sections = list(self._sections(archive, book))
        except (OSError, zipfile.BadZipFile, KeyError, ET.ParseError, _EpubFormatError) as error:
            raise ReadFailedError(path, f"failed to open EPUB: {error}") from error

        if not sections:
            raise EmptyContentError(path)
        return ImportedDocument(title=book.title, source_path=path, sections=sections)

    @staticmethod
    def _sections(archive: zipfile.ZipFile, book: _EpubBook) -> Iterator[ImportedSection]:
        toc_titles = flatten_toc(book.toc)
        for index, chapter_path in enumerate(book.spine):
            html = _read_text(archive, chapter_path) if chapter_path is not None else None
            if html is None:
                log.warning("EPUB chapter %d: could not read content", index + 1)
                continue
            paragraphs = extract_paragraphs(html)
            if not paragraphs:
                continue
            title = next(
                (label for toc_path, label in toc_titles if paths_match(toc_path, chapter_path)),
                f"Chapter {index + 1}",
            )
            yield ImportedSection(
                title=title,
                paragraphs=paragraphs,
                source_anchor=f"epub:{chapter_path}",
            )