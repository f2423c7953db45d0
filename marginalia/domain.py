"""Domain records shared by importers, repositories and providers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Union

SourcePath = Union[str, Path]


def _now() -> datetime:
    return datetime.now(timezone.utc)


# --------------------------------------------------------------------------
# Import results and errors
# --------------------------------------------------------------------------


@dataclass
class ImportedSection:
    """One section of an imported document, before chunking."""

    title: str
    paragraphs: list[str] = field(default_factory=list)
    source_anchor: str | None = None


@dataclass
class ImportedDocument:
    """A document as produced by an importer."""

    title: str | None
    source_path: SourcePath
    sections: list[ImportedSection] = field(default_factory=list)


class DocumentImportError(Exception):
    """Base class for failures while importing a document."""

    def __init__(self, source_path: SourcePath, detail: str) -> None:
        super().__init__(detail)
        self.source_path = source_path

    def _key(self) -> tuple[Any, ...]:
        return (type(self), self.source_path, str(self))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DocumentImportError):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


class ReadFailedError(DocumentImportError):
    """The source could not be read or parsed."""

    def __init__(self, source_path: SourcePath, message: str) -> None:
        self.message = message
        super().__init__(source_path, f"failed to read {source_path}: {message}")


class EmptyContentError(DocumentImportError):
    """The source holds no readable content."""

    def __init__(self, source_path: SourcePath) -> None:
        super().__init__(source_path, f"no readable content in {source_path}")


class UnsupportedFormatError(DocumentImportError):
    """The source has a format the importer does not handle."""

    def __init__(self, source_path: SourcePath) -> None:
        super().__init__(source_path, f"unsupported document format: {source_path}")


# --------------------------------------------------------------------------
# Documents and reading state
# --------------------------------------------------------------------------


@dataclass
class DocumentChunk:
    index: int
    text: str
    char_start: int
    char_end: int

    def anchor(self) -> str:
        """Anchor of this chunk within its section."""
        return f"chunk:{self.index}"


@dataclass
class DocumentSection:
    index: int
    title: str
    chunks: list[DocumentChunk] = field(default_factory=list)
    source_anchor: str | None = None


@dataclass
class Document:
    document_id: str
    title: str
    source_path: SourcePath
    sections: list[DocumentSection] = field(default_factory=list)
    imported_at: datetime = field(default_factory=_now)


@dataclass
class ReadingPosition:
    section_index: int = 0
    chunk_index: int = 0
    char_offset: int = 0

    def anchor(self) -> str:
        """Anchor pointing at the section and chunk of this position."""
        return f"section:{self.section_index}/chunk:{self.chunk_index}"


class PlaybackState(enum.Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass
class ReadingSession:
    session_id: str
    document_id: str
    position: ReadingPosition = field(default_factory=ReadingPosition)
    playback_state: PlaybackState = PlaybackState.STOPPED
    is_active: bool = True
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


@dataclass
class VoiceNote:
    note_id: str
    session_id: str
    document_id: str
    position: ReadingPosition
    transcript: str
    transcription_provider: str
    language: str
    raw_audio_path: str | None = None
    created_at: datetime = field(default_factory=_now)

    def anchor(self) -> str:
        """Anchor of the reading position the note was taken at."""
        return self.position.anchor()


@dataclass
class RewriteDraft:
    draft_id: str
    document_id: str
    section_index: int
    source_anchor: str
    rewritten_text: str
    provider_name: str
    note_ids: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_now)


@dataclass
class SearchQuery:
    text: str
    document_id: str | None = None
    limit: int = 10

    def normalized_text(self) -> str:
        """The query text with surrounding and repeated whitespace removed."""
        return " ".join(self.text.split())


@dataclass
class SearchResult:
    entity_kind: str
    entity_id: str
    score: float
    excerpt: str
    anchor: str


@dataclass
class PlaybackSnapshot:
    state: PlaybackState = PlaybackState.STOPPED
    last_action: str = "initialized"
    document_id: str | None = None
    anchor: str | None = None
    progress_units: int = 0
    audio_reference: str | None = None
    provider_name: str | None = None
    process_id: int | None = None


# --------------------------------------------------------------------------
# Providers
# --------------------------------------------------------------------------


class ProviderExecutionMode(enum.Enum):
    LOCAL = "local"
    REMOTE = "remote"


@dataclass
class ProviderCapabilities:
    provider_name: str
    interface_kind: str
    supported_languages: list[str] = field(default_factory=list)
    supports_streaming: bool = False
    supports_partial_results: bool = False
    supports_timestamps: bool = False
    low_latency_suitable: bool = False
    offline_capable: bool = False
    execution_mode: ProviderExecutionMode = ProviderExecutionMode.LOCAL


@dataclass
class SynthesisRequest:
    text: str
    voice: str | None = None
    language: str = "it"


@dataclass
class SynthesisResult:
    provider_name: str
    voice: str
    content_type: str
    audio_reference: str
    byte_length: int
    text_excerpt: str
    metadata: dict[str, str] = field(default_factory=dict)


class SynthesisError(Exception):
    """Speech synthesis failed."""


@dataclass
class CommandRecognition:
    command: str
    provider_name: str
    confidence: float
    is_final: bool
    raw_text: str | None = None


@dataclass
class SpeechInterruptCapture:
    provider_name: str
    speech_detected: bool
    capture_ended_ms: int
    speech_detected_ms: int | None = None
    capture_started_ms: int | None = None
    recognized_command: str | None = None
    raw_text: str | None = None
    timed_out: bool = False
    input_device_index: int | None = None
    input_device_name: str | None = None
    sample_rate: int | None = None


@dataclass
class DictationSegment:
    text: str
    start_ms: int
    end_ms: int


@dataclass
class DictationTranscript:
    text: str
    provider_name: str
    language: str
    is_final: bool
    segments: list[DictationSegment] = field(default_factory=list)
    raw_text: str | None = None


@dataclass
class RewriteInstruction:
    document_title: str
    section_title: str
    source_anchor: str
    section_text: str
    note_texts: list[str] = field(default_factory=list)


@dataclass
class RewriteOutput:
    provider_name: str
    rewritten_text: str
    strategy: str
    note_count: int


@dataclass
class SummaryInstruction:
    topic: str
    matched_document_ids: list[str] = field(default_factory=list)
    context_excerpt: str = ""


@dataclass
class SummaryOutput:
    provider_name: str
    summary_text: str
    highlights: list[str] = field(default_factory=list)
    confidence: float = 0.0


# --------------------------------------------------------------------------
# Events
# --------------------------------------------------------------------------


class EventName(enum.Enum):
    DOCUMENT_INGESTED = "document.ingested"
    READING_STARTED = "reading.started"
    READING_PAUSED = "reading.paused"
    READING_RESUMED = "reading.resumed"
    READING_STOPPED = "reading.stopped"
    NOTE_CREATED = "note.created"
    REWRITE_DRAFTED = "rewrite.drafted"
    TOPIC_SUMMARIZED = "topic.summarized"


@dataclass
class DomainEvent:
    name: EventName
    payload: dict[str, Any] = field(default_factory=dict)
    event_id: str = ""
    occurred_at: datetime = field(default_factory=_now)