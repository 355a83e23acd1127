"""
Typed operation requests.

Each structured agent operation has a request type; agent.perform(request)
dispatches on the request's type. A request sent to an agent that does not
support it raises AgentError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Mapping, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class OperationRequest:
    """Base class of all operation requests."""

    operation: ClassVar[str] = ""


# ----------------------------------------------------------------------------
# Product manager
# ----------------------------------------------------------------------------

@dataclass(frozen=True)
class CreateTaskFromDescription(OperationRequest):
    operation: ClassVar[str] = "create_task_from_description"

    description: str
    project: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class AnalyzeProjectHealth(OperationRequest):
    operation: ClassVar[str] = "analyze_project_health"

    project: Mapping[str, Any]
    tasks: Sequence[Mapping[str, Any]] = ()


@dataclass(frozen=True)
class SuggestTaskBreakdown(OperationRequest):
    operation: ClassVar[str] = "suggest_task_breakdown"

    title: str
    description: str = ""


@dataclass(frozen=True)
class PrioritizeTasks(OperationRequest):
    operation: ClassVar[str] = "prioritize_tasks"

    tasks: Sequence[Mapping[str, Any]]
    factors: Tuple[str, ...] = ("urgency", "business impact", "dependencies")
    deadline: Optional[str] = None
    team_size: Optional[int] = None
    critical_path: Sequence[str] = ()


# ----------------------------------------------------------------------------
# Task analyzer
# ----------------------------------------------------------------------------

@dataclass(frozen=True)
class AnalyzeComplexity(OperationRequest):
    operation: ClassVar[str] = "analyze_complexity"

    task: Mapping[str, Any]
    project_context: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class EstimateEffort(OperationRequest):
    operation: ClassVar[str] = "estimate_effort"

    tasks: Sequence[Mapping[str, Any]]
    experience: str = "mixed"
    stack: str = "not specified"


# ----------------------------------------------------------------------------
# Code reviewer
# ----------------------------------------------------------------------------

@dataclass(frozen=True)
class ReviewCode(OperationRequest):
    operation: ClassVar[str] = "review_code"

    code: str
    language: str
    purpose: str = "General review"


@dataclass(frozen=True)
class SuggestRefactoring(OperationRequest):
    operation: ClassVar[str] = "suggest_refactoring"

    code: str
    language: str


@dataclass(frozen=True)
class DetectSecurityIssues(OperationRequest):
    operation: ClassVar[str] = "detect_security_issues"

    code: str
    language: str


# ----------------------------------------------------------------------------
# Meeting summarizer
# ----------------------------------------------------------------------------

@dataclass(frozen=True)
class GenerateSummary(OperationRequest):
    operation: ClassVar[str] = "generate_summary"

    transcript: str
    title: str = "Team Meeting"
    date: Optional[str] = None
    participants: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ExtractActionItems(OperationRequest):
    operation: ClassVar[str] = "extract_action_items"

    transcript: str


@dataclass(frozen=True)
class GenerateMeetingReport(OperationRequest):
    operation: ClassVar[str] = "generate_meeting_report"

    summary: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TranscribeAndSummarize(OperationRequest):
    operation: ClassVar[str] = "transcribe_and_summarize"

    audio_path: Union[str, Path]
    title: str = "Team Meeting"
    date: Optional[str] = None
    participants: Tuple[str, ...] = ()


AgentOperation = Union[
    CreateTaskFromDescription,
    AnalyzeProjectHealth,
    SuggestTaskBreakdown,
    PrioritizeTasks,
    AnalyzeComplexity,
    EstimateEffort,
    ReviewCode,
    SuggestRefactoring,
    DetectSecurityIssues,
    GenerateSummary,
    ExtractActionItems,
    GenerateMeetingReport,
    TranscribeAndSummarize,
]
