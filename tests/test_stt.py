import pytest

from marginalia.domain import (
    CommandRecognition,
    DictationSegment,
    DictationTranscript,
    SpeechInterruptCapture,
)
from marginalia.fake.stt import (
    FakeCommandRecognizer,
    FakeDictationTranscriber,
    FakeInterruptMonitor,
)


def _stop_capture() -> SpeechInterruptCapture:
    return SpeechInterruptCapture(
        provider_name="fake-command-stt",
        speech_detected=True,
        capture_ended_ms=250,
        speech_detected_ms=100,
        capture_started_ms=0,
        recognized_command="stop",
        raw_text="ferma",
        timed_out=False,
    )


def test_fake_command_recognizer_returns_scripted_commands():
    recognizer = FakeCommandRecognizer(
        [
            CommandRecognition(
                command="pause",
                provider_name="fake-command-stt",
                confidence=1.0,
                is_final=True,
                raw_text="pausa",
            )
        ]
    )
    recognition = recognizer.listen_for_command()
    assert recognition is not None
    assert recognition.command == "pause"
    assert recognizer.listen_for_command() is None


def test_fake_command_recognizer_can_capture_interrupts():
    recognizer = FakeCommandRecognizer().with_interrupts([_stop_capture()])
    capture = recognizer.capture_interrupt(1.0)
    assert capture.recognized_command == "stop"


def test_each_capture_interrupt_opens_a_fresh_monitor():
    recognizer = FakeCommandRecognizer().with_interrupts([_stop_capture()])
    assert recognizer.capture_interrupt(None).recognized_command == "stop"
    assert recognizer.capture_interrupt(None).recognized_command == "stop"


def test_with_interrupts_returns_same_recognizer():
    recognizer = FakeCommandRecognizer()
    assert recognizer.with_interrupts([]) is recognizer


def test_recognizer_without_interrupts_times_out():
    capture = FakeCommandRecognizer().capture_interrupt(0.5)
    assert capture.timed_out is True
    assert capture.speech_detected is False
    assert capture.capture_started_ms == 0
    assert capture.recognized_command is None


def test_interrupt_monitor_replays_in_order_then_times_out():
    first = _stop_capture()
    second = _stop_capture()
    second.recognized_command = "pause"
    monitor = FakeInterruptMonitor([first, second])
    assert monitor.capture_next_interrupt(None).recognized_command == "stop"
    assert monitor.capture_next_interrupt(None).recognized_command == "pause"
    exhausted = monitor.capture_next_interrupt(None)
    assert exhausted.timed_out is True
    assert exhausted.provider_name == "fake-command-stt"
    monitor.close()
    assert monitor.capture_next_interrupt(None).timed_out is True


def test_command_recognizer_capabilities():
    capabilities = FakeCommandRecognizer().describe_capabilities()
    assert capabilities.provider_name == "fake-command-stt"
    assert capabilities.interface_kind == "command_stt"
    assert capabilities.low_latency_suitable is True
    assert capabilities.supported_languages == ["it", "en"]


def test_fake_dictation_transcriber_returns_configured_transcript():
    transcriber = FakeDictationTranscriber()
    transcript = transcriber.transcribe("session-1", "note-1")
    assert transcript.provider_name == "fake-dictation"
    assert transcript.is_final
    assert transcript.text == "Deterministic fake transcript."
    assert transcript.segments[0].end_ms == 1200


def test_dictation_transcriber_uses_given_transcript():
    configured = DictationTranscript(
        text="Nota",
        provider_name="custom",
        language="en",
        is_final=False,
        segments=[DictationSegment(text="Nota", start_ms=0, end_ms=10)],
    )
    transcriber = FakeDictationTranscriber(configured)
    result = transcriber.transcribe(None, None)
    assert result == configured
    result.text = "changed"
    assert transcriber.transcribe(None, None).text == "Nota"


@pytest.mark.parametrize("factory", [FakeDictationTranscriber])
def test_dictation_capabilities(factory):
    capabilities = factory().describe_capabilities()
    assert capabilities.interface_kind == "dictation_stt"
    assert capabilities.supports_timestamps is True
    assert capabilities.low_latency_suitable is False