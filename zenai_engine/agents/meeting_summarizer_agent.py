"""
MeetingSummarizerAgent implementation.

Turns meeting transcripts into structured summaries, action items and a
shareable markdown report. With a transcription service attached it also
accepts audio files (transcribe -> summarize -> extract action items).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from zenai_engine.agents.base_agent import BaseAgent
from zenai_engine.agents.operations import (
    ExtractActionItems,
    GenerateMeetingReport,
    GenerateSummary,
    TranscribeAndSummarize,
)
from zenai_engine.config.constants import AgentType
from zenai_engine.parsing.response_parser import clean_response
from zenai_engine.tools.transcription import TranscriptionService
from zenai_engine.utils.exceptions import AgentError
from zenai_engine.utils.helpers import to_prompt_json, utc_now

SUMMARY_SHAPE = {"executiveSummary": str, "keyPoints": list, "decisions": list}
ACTION_ITEM_SHAPE = {"action": str}


class MeetingSummarizerAgent(BaseAgent):
    """Meeting transcription, summaries and action items."""

    agent_type = AgentType.MEETING_SUMMARIZER

    def __init__(self, *args, transcription_service: Optional[TranscriptionService] = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.transcription_service = transcription_service

    def _operations(self):
        return {
            GenerateSummary: lambda op: self.generate_summary(op.transcript, op.title, op.date, op.participants),
            ExtractActionItems: lambda op: self.extract_action_items(op.transcript),
            GenerateMeetingReport: lambda op: self.generate_meeting_report(op.summary),
            TranscribeAndSummarize: lambda op: self.transcribe_and_summarize(
                op.audio_path, op.title, op.date, op.participants
            ),
        }

    async def generate_summary(
        self,
        transcript: str,
        title: str = "Team Meeting",
        date: Optional[str] = None,
        participants: Sequence[str] = (),
    ) -> Dict[str, Any]:
        if not transcript or not transcript.strip():
            raise AgentError("Cannot summarize an empty transcript")
        prompt = self._renderer.render(
            "analysis.meetingSummary",
            {
                "title": title,
                "date": date or utc_now().date().isoformat(),
                "participants": ", ".join(participants) or "Not specified",
                "transcript": transcript,
            },
        )
        return await self._structured_call("generate_summary", prompt, SUMMARY_SHAPE)

    async def extract_action_items(self, transcript: str) -> List[Dict[str, Any]]:
        if not transcript or not transcript.strip():
            raise AgentError("Cannot extract action items from an empty transcript")
        prompt = self._renderer.render("analysis.actionItems", {"transcript": transcript})
        return await self._structured_call(
            "extract_action_items", prompt, ACTION_ITEM_SHAPE, expect_list=True
        )

    async def generate_meeting_report(self, summary: Mapping[str, Any]) -> str:
        """Free-text markdown report built from a summary structure."""
        prompt = self._renderer.render("analysis.meetingReport", {"summary_data": to_prompt_json(dict(summary))})
        return clean_response(await self._complete(prompt))

    async def transcribe_and_summarize(
        self,
        audio_path: Union[str, Path],
        title: str = "Team Meeting",
        date: Optional[str] = None,
        participants: Sequence[str] = (),
    ) -> Dict[str, Any]:
        if self.transcription_service is None:
            raise AgentError(f"{self.name} has no transcription service configured")

        self.logger.info(f"[{self.name}] Transcribing audio: {Path(audio_path).name}")
        transcription = await self.transcription_service.transcribe(audio_path)

        summary = await self.generate_summary(transcription.text, title, date, participants)
        action_items = await self.extract_action_items(transcription.text)

        return {
            "transcription": {
                "text": transcription.text,
                "segments": transcription.segments,
                "duration": transcription.duration,
                "language": transcription.language,
            },
            "summary": summary,
            "action_items": action_items,
            "metadata": {
                "duration": transcription.duration,
                "participants": list(participants),
                "date": date or utc_now().isoformat(),
            },
        }
