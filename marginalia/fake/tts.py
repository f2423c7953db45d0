"""Speech synthesizer that writes silent WAV files."""

from __future__ import annotations

import itertools
import os
import struct
import tempfile
import threading
from os import PathLike
from typing import Union

from ..domain import (
    ProviderCapabilities,
    ProviderExecutionMode,
    SynthesisRequest,
    SynthesisResult,
)

_SAMPLE_RATE = 16_000
_CHANNELS = 1
_BITS_PER_SAMPLE = 16
_EXCERPT_CHARS = 80
_FRAGMENT_CHARS = 24
_SAMPLES_PER_CHAR = 700
_MIN_SAMPLES = 4_000
_MAX_SAMPLES = 64_000

_counter = itertools.count(1)
_counter_lock = threading.Lock()


def _next_id() -> int:
    with _counter_lock:
        return next(_counter)


def sanitize_path_fragment(text: str) -> str:
    """Keep ASCII letters and digits, replace the rest with ``_``, trim, cap at 24."""
    rendered = "".join(ch if ch.isascii() and ch.isalnum() else "_" for ch in text)
    return rendered.strip("_")[:_FRAGMENT_CHARS]


def write_silence_wav(path: Union[str, PathLike], sample_count: int) -> None:
    """Write a 16 kHz mono 16-bit PCM WAV file of ``sample_count`` silent samples."""
    bytes_per_sample = _BITS_PER_SAMPLE // 8
    data_size = sample_count * bytes_per_sample
    byte_rate = _SAMPLE_RATE * _CHANNELS * bytes_per_sample
    block_align = _CHANNELS * bytes_per_sample
    header = b"".join(
        [
            b"RIFF",
            struct.pack("<I", 36 + data_size),
            b"WAVE",
            b"fmt ",
            struct.pack(
                "<IHHIIHH",
                16,
                1,
                _CHANNELS,
                _SAMPLE_RATE,
                byte_rate,
                block_align,
                _BITS_PER_SAMPLE,
            ),
            b"data",
            struct.pack("<I", data_size),
        ]
    )
    with open(path, "wb") as handle:
        handle.write(header)
        handle.write(bytes(data_size))


def _write_temp_wav(voice: str, excerpt: str) -> str | None:
    name = (
        f"marginalia-fake-tts-{_next_id()}-"
        f"{sanitize_path_fragment(voice)}-{sanitize_path_fragment(excerpt)}.wav"
    )
    path = os.path.join(tempfile.gettempdir(), name)
    sample_count = min(max(len(excerpt) * _SAMPLES_PER_CHAR, _MIN_SAMPLES), _MAX_SAMPLES)
    try:
        write_silence_wav(path, sample_count)
    except OSError:
        return None
    return path


class FakeSpeechSynthesizer:
    """Produces silent audio whose length follows the text length."""

    def __init__(self) -> None:
        self._provider_name = "fake-tts"
        self._default_voice = "narrator"

    def describe_capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            provider_name=self._provider_name,
            interface_kind="tts",
            supported_languages=["it", "en"],
            supports_streaming=False,
            supports_partial_results=False,
            supports_timestamps=False,
            low_latency_suitable=True,
            offline_capable=True,
            execution_mode=ProviderExecutionMode.LOCAL,
        )

    def synthesize(self, request: SynthesisRequest) -> SynthesisResult:
        """Write a silent WAV for the request; fall back to an in-memory reference."""
        voice = request.voice if request.voice is not None else self._default_voice
        excerpt = request.text[:_EXCERPT_CHARS]
        audio_reference = _write_temp_wav(voice, excerpt) or (
            f"memory://{voice}/{excerpt.replace(' ', '_')}"
        )
        return SynthesisResult(
            provider_name=self._provider_name,
            voice=voice,
            content_type="audio/wav",
            audio_reference=audio_reference,
            byte_length=len(excerpt.encode("utf-8")),
            text_excerpt=excerpt,
            metadata={"language": request.language},
        )