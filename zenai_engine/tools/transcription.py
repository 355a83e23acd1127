"""
Speech-to-text transcription via OpenAI's Whisper API.

Used by the meeting summarizer. Files are validated before upload
(existence, supported extension, 25 MB API limit); splitting and format
conversion are not performed here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import openai
from openai import AsyncOpenAI

from zenai_engine.config.settings import config
from zenai_engine.utils.exceptions import TranscriptionError
from zenai_engine.utils.logger import logger

SUPPORTED_FORMATS = {".mp3", ".mp4", ".mpeg", ".mpga", ".m4a", ".wav", ".webm"}

# OpenAI upload limit
MAX_FILE_SIZE = 25 * 1024 * 1024


@dataclass
class Transcription:
    """Result of a transcription call."""

    text: str
    segments: List[Dict[str, Any]] = field(default_factory=list)
    duration: Optional[float] = None
    language: Optional[str] = None


class TranscriptionService(ABC):
    """Contract: transcribe(audio_path, ...) -> Transcription."""

    @abstractmethod
    async def transcribe(
        self,
        audio_path: Union[str, Path],
        language: Optional[str] = None,
        temperature: float = 0.0,
    ) -> Transcription:
        """Transcribe an audio file."""


def validate_audio_file(audio_path: Union[str, Path]) -> Path:
    """
    Check that audio_path can be sent to the transcription API.

    Raises:
        TranscriptionError: missing file, unsupported format or too large
    """
    path = Path(audio_path)
    if not path.is_file():
        raise TranscriptionError(f"Audio file not found: {audio_path}")
    if path.suffix.lower() not in SUPPORTED_FORMATS:
        raise TranscriptionError(
            f"Unsupported file format: {path.suffix or '<none>'}",
            details=f"supported={sorted(SUPPORTED_FORMATS)}",
        )
    size = path.stat().st_size
    if size > MAX_FILE_SIZE:
        raise TranscriptionError(
            f"File too large: {size / (1024 * 1024):.1f}MB (max {MAX_FILE_SIZE // (1024 * 1024)}MB)"
        )
    return path


def _segment_dict(segment: Any) -> Dict[str, Any]:
    if isinstance(segment, dict):
        return segment
    if hasattr(segment, "model_dump"):
        return segment.model_dump()
    return {"text": str(segment)}


class WhisperTranscriptionService(TranscriptionService):
    """Whisper transcription through the async OpenAI client."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
        language: Optional[str] = None,
    ) -> None:
        self.client = client if client is not None else AsyncOpenAI(api_key=config.OPENAI_API_KEY or None)
        self.model = model or config.WHISPER_MODEL
        self.language = language or config.WHISPER_LANGUAGE
        self.logger = logger

    async def transcribe(
        self,
        audio_path: Union[str, Path],
        language: Optional[str] = None,
        temperature: float = 0.0,
    ) -> Transcription:
        path = validate_audio_file(audio_path)
        self.logger.info(f"[WhisperTranscriptionService] Transcribing {path.name}")

        try:
            with path.open("rb") as audio_file:
                response = await self.client.audio.transcriptions.create(
                    model=self.model,
                    file=audio_file,
                    language=language or self.language,
                    response_format="verbose_json",
                    temperature=temperature,
                )
        except openai.OpenAIError as e:
            self.logger.error(f"[WhisperTranscriptionService] Transcription failed: {e}")
            raise TranscriptionError(f"Transcription failed for {path.name}: {e}") from e

        transcription = Transcription(
            text=(getattr(response, "text", "") or "").strip(),
            segments=[_segment_dict(s) for s in (getattr(response, "segments", None) or [])],
            duration=getattr(response, "duration", None),
            language=getattr(response, "language", None),
        )
        self.logger.info(
            f"[WhisperTranscriptionService] Transcribed {path.name} ({len(transcription.text)} chars)"
        )
        return transcription
