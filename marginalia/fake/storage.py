"""In-memory repositories for documents, sessions, notes and drafts."""

from __future__ import annotations

import copy

from ..domain import (
    Document,
    ReadingSession,
    RewriteDraft,
    SearchQuery,
    SearchResult,
    VoiceNote,
)


class InMemoryDocumentRepository:
    """Stores documents by id."""

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}

    def save_document(self, document: Document) -> None:
        self._documents[document.document_id] = copy.deepcopy(document)

    def get_document(self, document_id: str) -> Document | None:
        document = self._documents.get(document_id)
        return copy.deepcopy(document) if document is not None else None

    def list_documents(self) -> list[Document]:
        """All documents, most recently imported first."""
        documents = sorted(
            self._documents.values(), key=lambda document: document.imported_at, reverse=True
        )
        return copy.deepcopy(documents)

    def search_documents(self, query: SearchQuery) -> list[SearchResult]:
        """Chunks whose text contains the query, case-insensitively."""
        needle = query.normalized_text().lower()
        if not needle:
            return []
        results = [
            SearchResult(
                entity_kind="document_chunk",
                entity_id=document.document_id,
                score=1.0,
                excerpt=chunk.text,
                anchor=f"section:{section.index}/{chunk.anchor()}",
            )
            for document in self._documents.values()
            if query.document_id is None or document.document_id == query.document_id
            for section in document.sections
            for chunk in section.chunks
            if needle in chunk.text.lower()
        ]
        return results[: query.limit]


class InMemorySessionRepository:
    """Stores reading sessions by id."""

    def __init__(self) -> None:
        self._sessions: dict[str, ReadingSession] = {}

    def save_session(self, session: ReadingSession) -> None:
        self._sessions[session.session_id] = copy.deepcopy(session)

    def get_active_session(self) -> ReadingSession | None:
        """The most recently updated active session, if any."""
        active = [session for session in self._sessions.values() if session.is_active]
        if not active:
            return None
        return copy.deepcopy(max(active, key=lambda session: session.updated_at))

    def deactivate_stale_sessions(self, max_inactive_hours: int) -> int:
        """Return how many sessions were deactivated.

        In-memory sessions never go stale, so the count is always zero; the
        limit must still be a non-negative whole number of hours.
        """
        if isinstance(max_inactive_hours, bool) or not isinstance(max_inactive_hours, int):
            raise TypeError("max_inactive_hours must be an integer")
        if max_inactive_hours < 0:
            raise ValueError("max_inactive_hours must not be negative")
        return 0


class InMemoryNoteRepository:
    """Stores voice notes in creation order."""

    def __init__(self) -> None:
        self._notes: list[VoiceNote] = []

    def save_note(self, note: VoiceNote) -> None:
        self._notes.append(copy.deepcopy(note))
        self._notes.sort(key=lambda stored: stored.created_at)

    def list_notes_for_document(self, document_id: str) -> list[VoiceNote]:
        return copy.deepcopy([note for note in self._notes if note.document_id == document_id])

    def search_notes(self, query: SearchQuery) -> list[SearchResult]:
        """Notes whose transcript contains the query, case-insensitively."""
        needle = query.normalized_text().lower()
        if not needle:
            return []
        results = [
            SearchResult(
                entity_kind="voice_note",
                entity_id=note.note_id,
                score=1.0,
                excerpt=note.transcript,
                anchor=note.anchor(),
            )
            for note in self._notes
            if query.document_id is None or note.document_id == query.document_id
            if needle in note.transcript.lower()
        ]
        return results[: query.limit]


class InMemoryRewriteDraftRepository:
    """Stores rewrite drafts in the order they were saved."""

    def __init__(self) -> None:
        self._drafts: list[RewriteDraft] = []

    def save_draft(self, draft: RewriteDraft) -> None:
        self._drafts.append(copy.deepcopy(draft))

    def list_drafts_for_document(self, document_id: str) -> list[RewriteDraft]:
        return copy.deepcopy([draft for draft in self._drafts if draft.document_id == document_id])