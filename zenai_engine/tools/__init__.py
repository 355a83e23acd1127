"""
Agent tools module.

- AgentTool: named action invoked by an agent with structured input.
- TranscriptionService / WhisperTranscriptionService: speech-to-text for the
  meeting summarizer.
"""

from zenai_engine.tools.agent_tool import AgentTool, ToolHandler
from zenai_engine.tools.transcription import (
    MAX_FILE_SIZE,
    SUPPORTED_FORMATS,
    Transcription,
    TranscriptionService,
    WhisperTranscriptionService,
    validate_audio_file,
)

__all__ = [
    "AgentTool",
    "ToolHandler",
    "MAX_FILE_SIZE",
    "SUPPORTED_FORMATS",
    "Transcription",
    "TranscriptionService",
    "WhisperTranscriptionService",
    "validate_audio_file",
]
