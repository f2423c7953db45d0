"""Playback engine that only tracks state, without producing sound."""

from __future__ import annotations

import dataclasses

from ..domain import (
    Document,
    PlaybackSnapshot,
    PlaybackState,
    ProviderCapabilities,
    ProviderExecutionMode,
    ReadingPosition,
    SynthesisResult,
)


class FakePlaybackEngine:
    """Records playback controls in a snapshot."""

    def __init__(self) -> None:
        self._snapshot = PlaybackSnapshot(
            state=PlaybackState.STOPPED,
            last_action="initialized",
            provider_name="fake-playback",
        )

    def describe_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            provider_name="fake-playback",
            interface_kind="playback",
            supported_languages=["it", "en"],
            supports_streaming=False,
            supports_partial_results=False,
            supports_timestamps=False,
            low_latency_suitable=True,
            offline_capable=True,
            execution_mode=ProviderExecutionMode.LOCAL,
        )

    def hydrate(self, snapshot: PlaybackSnapshot | None) -> None:
        """Restore a saved snapshot, or reset to an empty stopped state."""
        if snapshot is not None:
            self._snapshot = dataclasses.replace(snapshot)
            return
        self._snapshot.state = PlaybackState.STOPPED
        self._snapshot.last_action = "hydrated-empty"
        self._snapshot.document_id = None
        self._snapshot.anchor = None
        self._snapshot.audio_reference = None
        self._snapshot.process_id = None

    def start(
        self,
        document: Document,
        position: ReadingPosition,
        synthesis: SynthesisResult | None,
    ) -> PlaybackSnapshot:
        self._snapshot.state = PlaybackState.PLAYING
        self._snapshot.last_action = "start"
        self._snapshot.document_id = document.document_id
        self._snapshot.anchor = position.anchor()
        self._snapshot.progress_units = position.chunk_index
        self._snapshot.audio_reference = (
            synthesis.audio_reference if synthesis is not None else None
        )
        return self.snapshot()

    def pause(self) -> PlaybackSnapshot:
        self._snapshot.state = PlaybackState.PAUSED
        self._snapshot.last_action = "pause"
        return self.snapshot()

    def resume(self) -> PlaybackSnapshot:
        self._snapshot.state = PlaybackState.PLAYING
        self._snapshot.last_action = "resume"
        return self.snapshot()

    def stop(self) -> PlaybackSnapshot:
        self._snapshot.state = PlaybackState.STOPPED
        self._snapshot.last_action = "stop"
        return self.snapshot()

    def seek(self, position: ReadingPosition) -> PlaybackSnapshot:
        self._snapshot.anchor = position.anchor()
        self._snapshot.progress_units = position.chunk_index
        self._snapshot.last_action = "seek"
        return self.snapshot()

    def snapshot(self) -> PlaybackSnapshot:
        """A copy of the current playback state."""
        return dataclasses.replace(self._snapshot)