"""Scripted speech-recognition providers for commands, interrupts and dictation."""

from __future__ import annotations

import copy
from collections import deque
from typing import Iterable

from ..domain import (
    CommandRecognition,
    DictationSegment,
    DictationTranscript,
    ProviderCapabilities,
    ProviderExecutionMode,
    SpeechInterruptCapture,
)

_COMMAND_PROVIDER = "fake-command-stt"
_DICTATION_PROVIDER = "fake-dictation"
_DEFAULT_TRANSCRIPT_TEXT = "Deterministic fake transcript."


def _timed_out_capture() -> SpeechInterruptCapture:
    return SpeechInterruptCapture(
        provider_name=_COMMAND_PROVIDER,
        speech_detected=False,
        capture_ended_ms=0,
        speech_detected_ms=None,
        capture_started_ms=0,
        recognized_command=None,
        raw_text=None,
        timed_out=True,
        input_device_index=None,
        input_device_name=None,
        sample_rate=None,
    )


class FakeInterruptMonitor:
    """Replays scripted interrupt captures, then reports time-outs."""

    def __init__(self, captures: Iterable[SpeechInterruptCapture] = ()) -> None:
        self._captures: deque[SpeechInterruptCapture] = deque(captures)
        self.closed = False

    def capture_next_interrupt(self, timeout_seconds: float | None) -> SpeechInterruptCapture:
        """The next scripted capture, or a timed-out capture once none are left."""
        if self._captures:
            return self._captures.popleft()
        return _timed_out_capture()

    def close(self) -> None:
        """Discard any captures not yet replayed; later captures time out."""
        self._captures.clear()
        self.closed = True


class FakeCommandRecognizer:
    """Replays scripted command recognitions and interrupt captures."""

    def __init__(self, commands: Iterable[CommandRecognition] = ()) -> None:
        self._commands: deque[CommandRecognition] = deque(commands)
        self._interrupts: list[SpeechInterruptCapture] = []

    def with_interrupts(
        self, interrupts: Iterable[SpeechInterruptCapture]
    ) -> FakeCommandRecognizer:
        """Set the captures every opened interrupt monitor replays; returns self."""
        self._interrupts = list(interrupts)
        return self

    def describe_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            provider_name=_COMMAND_PROVIDER,
            interface_kind="command_stt",
            supported_languages=["it", "en"],
            supports_streaming=False,
            supports_partial_results=False,
            supports_timestamps=False,
            low_latency_suitable=True,
            offline_capable=True,
            execution_mode=ProviderExecutionMode.LOCAL,
        )

    def listen_for_command(self) -> CommandRecognition | None:
        """The next scripted command, or None once none are left."""
        return self._commands.popleft() if self._commands else None

    def capture_interrupt(self, timeout_seconds: float | None) -> SpeechInterruptCapture:
        """Capture one interrupt through a freshly opened monitor."""
        return self.open_interrupt_monitor().capture_next_interrupt(timeout_seconds)

    def open_interrupt_monitor(self) -> FakeInterruptMonitor:
        """A new monitor replaying the configured interrupts from the start."""
        return FakeInterruptMonitor(copy.deepcopy(self._interrupts))


def _default_transcript() -> DictationTranscript:
    return DictationTranscript(
        text=_DEFAULT_TRANSCRIPT_TEXT,
        provider_name=_DICTATION_PROVIDER,
        language="it",
        is_final=True,
        segments=[DictationSegment(text=_DEFAULT_TRANSCRIPT_TEXT, start_ms=0, end_ms=1200)],
        raw_text=_DEFAULT_TRANSCRIPT_TEXT,
    )


class FakeDictationTranscriber:
    """Returns the same configured transcript for every dictation."""

    def __init__(self, transcript: DictationTranscript | None = None) -> None:
        self._transcript = transcript if transcript is not None else _default_transcript()

    def describe_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            provider_name=_DICTATION_PROVIDER,
            interface_kind="dictation_stt",
            supported_languages=["it", "en"],
            supports_streaming=False,
            supports_partial_results=False,
            supports_timestamps=True,
            low_latency_suitable=False,
            offline_capable=True,
            execution_mode=ProviderExecutionMode.LOCAL,
        )

    def transcribe(self, session_id: str | None, note_id: str | None) -> DictationTranscript:
        """A copy of the configured transcript."""
        return copy.deepcopy(self._transcript)