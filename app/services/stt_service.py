# app/services/stt_service.py
import os
import logging
from typing import Protocol

from openai import OpenAI, OpenAIError
from google.api_core import exceptions as google_exceptions
from google.cloud import speech_v1p1beta1 as speech

from app.services.audio_extract import SAMPLE_RATE
from app.services.errors import TranscriptionError

logger = logging.getLogger(__name__)


class STTService(Protocol):
    def transcribe(self, wav_bytes: bytes) -> str: ...


def normalize_transcript(response) -> str:
    """SDK 응답(str 또는 .text 보유 객체)을 공백 제거된 문자열로 정리"""
    text = response if isinstance(response, str) else getattr(response, "text", None)
    if not isinstance(text, str):
        raise TranscriptionError(f"malformed transcription response: {type(response).__name__}")

    text = text.strip()
    if not text:
        raise TranscriptionError("No speech detected in audio")
    return text


class WhisperSTTService:
    """OpenAI Whisper (response_format=text)"""

    def __init__(self, api_key: str | None = None, model: str = "whisper-1",
                 timeout: float | None = None, client: OpenAI | None = None):
        # 재시도 없음: 실패 한 번이면 해당 답변은 failed
        self.client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model

    def transcribe(self, wav_bytes: bytes) -> str:
        if not wav_bytes:
            raise TranscriptionError("Audio bytes cannot be empty")

        try:
            response = self.client.audio.transcriptions.create(
                model=self.model,
                file=("audio.wav", wav_bytes, "audio/wav"),
                response_format="text",
            )
        except OpenAIError as e:
            raise TranscriptionError(f"whisper request failed: {e}") from e

        return normalize_transcript(response)


class GoogleSTTService:
    """Google Cloud Speech-to-Text (LINEAR16, 16kHz mono)"""

    def __init__(self, language: str = "en-US", timeout: float | None = None,
                 key_path: str | None = None, client=None):
        if key_path:
            os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = key_path
        self._client = client
        self.language = language
        self.timeout = timeout

    @property
    def client(self):
        if self._client is None:
            self._client = speech.SpeechClient()
        return self._client

    def transcribe(self, wav_bytes: bytes) -> str:
        if not wav_bytes:
            raise TranscriptionError("Audio bytes cannot be empty")

        audio = speech.RecognitionAudio(content=wav_bytes)
        config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
            sample_rate_hertz=SAMPLE_RATE,
            language_code=self.language,
            enable_automatic_punctuation=True,
        )

        try:
            response = self.client.recognize(config=config, audio=audio, timeout=self.timeout)
        except google_exceptions.GoogleAPIError as e:
            raise TranscriptionError(f"google stt request failed: {e}") from e

        transcript = " ".join(
            [result.alternatives[0].transcript for result in response.results if result.alternatives]
        )
        return normalize_transcript(transcript)


def build_stt_service(settings) -> STTService:
    provider = (settings.stt_provider or "openai").lower()
    if provider == "google":
        return GoogleSTTService(
            language=settings.stt_language,
            timeout=settings.stt_timeout_sec,
            key_path=settings.google_stt_key_path,
        )
    if provider == "openai":
        return WhisperSTTService(
            api_key=settings.openai_api_key,
            model=settings.openai_transcribe_model,
            timeout=settings.stt_timeout_sec,
        )
    raise ValueError(f"unknown STT_PROVIDER: {settings.stt_provider}")
