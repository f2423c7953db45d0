"""Importer for plain-text and Markdown documents."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Iterable, Union

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .domain import (
    EmptyContentError,
    ImportedDocument,
    ImportedSection,
    ReadFailedError,
    UnsupportedFormatError,
)

_TRAILING_HEADING_ATTRIBUTES = re.compile(r"\s*\{[^{}]*\}$")


class _Block(enum.Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"


@dataclass
class _SectionCollector:
    sections: list[ImportedSection] = field(default_factory=list)
    title: str | None = None
    paragraphs: list[str] = field(default_factory=list)

    def flush(self) -> None:
        """Close the current section, dropping it if it has no content."""
        paragraphs = [p.strip() for p in self.paragraphs if p.strip()]
        title = self.title
        self.title = None
        self.paragraphs = []
        if (title is None or not title.strip()) and not paragraphs:
            return
        self.sections.append(
            ImportedSection(
                title=title or "",
                paragraphs=paragraphs,
                source_anchor=f"section:{len(self.sections)}",
            )
        )


def _lines(text: str) -> list[str]:
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _normalize_inline_text(text: str) -> str:
    return " ".join(text.split())


def _import_plain_text(source_path: Path, raw_text: str) -> ImportedDocument:
    collector = _SectionCollector()
    for line in _lines(raw_text):
        if line.lstrip().startswith("#"):
            collector.flush()
            collector.title = line.lstrip("#").strip()
            continue

        if not line.strip():
            if not (collector.paragraphs and collector.paragraphs[-1] == ""):
                collector.paragraphs.append("")
            continue

        if collector.paragraphs and collector.paragraphs[-1]:
            collector.paragraphs[-1] += " " + line.strip()
        else:
            collector.paragraphs.append(line.strip())

    collector.flush()
    return ImportedDocument(title=None, source_path=source_path, sections=collector.sections)


def _inline_text(children: Iterable[Token] | None) -> str:
    parts: list[str] = []
    for child in children or ():
        if child.type in ("text", "text_special", "code_inline"):
            parts.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            parts.append(" ")
        elif child.type == "image":
            parts.append(_inline_text(child.children))
    return "".join(parts)


def _import_markdown(source_path: Path, raw_text: str) -> ImportedDocument:
    parser = MarkdownIt("commonmark").enable(["table", "strikethrough"])
    collector = _SectionCollector()
    active: _Block | None = None
    block_text = ""

    for token in parser.parse(raw_text):
        if token.type == "heading_open":
            collector.flush()
            active = _Block.HEADING
            block_text = ""
        elif token.type == "heading_close":
            title = _TRAILING_HEADING_ATTRIBUTES.sub("", _normalize_inline_text(block_text))
            collector.title = title or None
            active = None
            block_text = ""
        elif token.type == "paragraph_open" and not token.hidden:
            active = _Block.PARAGRAPH
            block_text = ""
        elif token.type == "paragraph_close" and not token.hidden:
            paragraph = _normalize_inline_text(block_text)
            if paragraph:
                collector.paragraphs.append(paragraph)
            active = None
            block_text = ""
        elif token.type == "inline" and active is not None:
            block_text += _inline_text(token.children)

    collector.flush()
    return ImportedDocument(title=None, source_path=source_path, sections=collector.sections)


@dataclass(frozen=True)
class TextDocumentImporter:
    """Imports `.txt`, `.md` and `.markdown` files into sections of paragraphs."""

    def import_path(self, source_path: Union[str, PathLike]) -> ImportedDocument:
        path = Path(source_path)
        extension = path.suffix[1:].lower() if path.suffix else None

        try:
            with open(path, encoding="utf-8", newline="") as handle:
                raw_text = handle.read()
        except (OSError, UnicodeDecodeError) as error:
            raise ReadFailedError(path, str(error)) from error

        if not raw_text.strip():
            raise EmptyContentError(path)

        if extension == "txt":
            return _import_plain_text(path, raw_text)
        if extension in ("md", "markdown"):
            return _import_markdown(path, raw_text)
        raise UnsupportedFormatError(path)