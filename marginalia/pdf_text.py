"""Paragraph extraction from raw PDF page text."""

from __future__ import annotations

import string

MIN_PARAGRAPH_LEN = 15
"""Shorter fragments are taken for page numbers, running headers or rules."""

MAX_PARAGRAPH_LEN = 250
"""Longest paragraph handed on, kept well under the speech engine's token limit."""

_SENTENCE_ENDS = ".!?\u2026"


def _byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _lines(block: str) -> list[str]:
    lines = [line[:-1] if line.endswith("\r") else line for line in block.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def extract_paragraphs(raw: str) -> list[str]:
    """Split raw page text into clean paragraphs ready for speech chunking.

    Hyphenated line breaks are re-joined, blank lines separate paragraphs,
    and over-long paragraphs are split at sentence boundaries.
    """
    dehyphenated = raw.replace("-\n", "")
    result: list[str] = []
    for block in dehyphenated.split("\n\n"):
        paragraph = " ".join(line.strip() for line in _lines(block) if line.strip())
        length = _byte_len(paragraph)
        if length <= MIN_PARAGRAPH_LEN:
            continue
        if length <= MAX_PARAGRAPH_LEN:
            result.append(paragraph)
        else:
            result.extend(split_at_sentences(paragraph))
    return result


def split_at_sentences(text: str) -> list[str]:
    """Split text at sentence ends, keeping each piece under the length limit.

    A period between two digits belongs to a number and does not end a
    sentence. Without a boundary in reach, the text is cut at the last space.
    """
    chunks: list[str] = []
    current = ""
    for i, ch in enumerate(text):
        current += ch
        inside_number = (
            ch == "."
            and 0 < i < len(text) - 1
            and text[i - 1] in string.digits
            and text[i + 1] in string.digits
        )
        if ch in _SENTENCE_ENDS and not inside_number and _byte_len(current) >= MIN_PARAGRAPH_LEN:
            trimmed = current.strip()
            if trimmed:
                chunks.append(trimmed)
            current = ""
        elif _byte_len(current) >= MAX_PARAGRAPH_LEN:
            head, separator, tail = current.rpartition(" ")
            if separator:
                head = head.strip()
                if head:
                    chunks.append(head)
                current = tail
            else:
                chunks.append(current.strip())
                current = ""
    if current.strip():
        chunks.append(current.strip())
    return chunks