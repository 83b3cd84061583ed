from types import SimpleNamespace

import httpx
import openai
import pytest
from google.api_core import exceptions as google_exceptions

from app.services.errors import TranscriptionError
from app.services.stt_service import (
    GoogleSTTService,
    WhisperSTTService,
    build_stt_service,
    normalize_transcript,
)

from fakes import fake_transcription_client


def test_normalize_strips_text():
    assert normalize_transcript("  Short answer.\n") == "Short answer."


def test_normalize_accepts_text_attribute():
    assert normalize_transcript(SimpleNamespace(text="hi")) == "hi"


@pytest.mark.parametrize("response", [None, 42, {"text": 1}])
def test_normalize_rejects_malformed(response):
    with pytest.raises(TranscriptionError):
        normalize_transcript(response)


def test_normalize_rejects_silence():
    with pytest.raises(TranscriptionError, match="No speech"):
        normalize_transcript("   ")


def test_whisper_sends_wav_as_plain_text_request():
    client = fake_transcription_client(response="I led a team of five engineers...\n")
    service = WhisperSTTService(model="whisper-1", client=client)

    assert service.transcribe(b"RIFF") == "I led a team of five engineers..."
    kwargs = client.audio.transcriptions.create.kwargs
    assert kwargs["model"] == "whisper-1"
    assert kwargs["response_format"] == "text"
    assert kwargs["file"] == ("audio.wav", b"RIFF", "audio/wav")


def test_whisper_remote_error():
    request = httpx.Request("POST", "https://api.openai.com/v1/audio/transcriptions")
    response = httpx.Response(500, request=request)
    error = openai.InternalServerError("server error", response=response, body=None)
    service = WhisperSTTService(client=fake_transcription_client(error=error))

    with pytest.raises(TranscriptionError):
        service.transcribe(b"RIFF")


def test_whisper_rejects_empty_audio():
    with pytest.raises(TranscriptionError):
        WhisperSTTService(client=fake_transcription_client(response="x")).transcribe(b"")


def _google_client(results=None, error=None):
    def recognize(config, audio, timeout=None):
        recognize.kwargs = {"config": config, "audio": audio, "timeout": timeout}
        if error:
            raise error
        return SimpleNamespace(results=results or [])

    return SimpleNamespace(recognize=recognize)


def test_google_joins_first_alternatives():
    results = [
        SimpleNamespace(alternatives=[SimpleNamespace(transcript="I led a team")]),
        SimpleNamespace(alternatives=[SimpleNamespace(transcript="of five engineers...")]),
    ]
    client = _google_client(results=results)
    service = GoogleSTTService(language="en-US", timeout=15, client=client)

    assert service.transcribe(b"RIFF") == "I led a team of five engineers..."
    kwargs = client.recognize.kwargs
    assert kwargs["timeout"] == 15
    assert kwargs["config"].sample_rate_hertz == 16000
    assert kwargs["config"].language_code == "en-US"


def test_google_remote_error():
    service = GoogleSTTService(client=_google_client(error=google_exceptions.DeadlineExceeded("slow")))
    with pytest.raises(TranscriptionError):
        service.transcribe(b"RIFF")


def test_google_no_results_is_failure():
    with pytest.raises(TranscriptionError):
        GoogleSTTService(client=_google_client(results=[])).transcribe(b"RIFF")


def _settings(**overrides):
    values = dict(
        stt_provider="openai",
        stt_language="en-US",
        stt_timeout_sec=10,
        google_stt_key_path=None,
        openai_api_key="sk-test",
        openai_transcribe_model="whisper-1",
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_build_selects_provider():
    assert isinstance(build_stt_service(_settings()), WhisperSTTService)
    assert isinstance(build_stt_service(_settings(stt_provider="google")), GoogleSTTService)


def test_build_rejects_unknown_provider():
    with pytest.raises(ValueError):
        build_stt_service(_settings(stt_provider="carrier-pigeon"))
