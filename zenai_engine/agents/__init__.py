"""
Agent architecture module.

This package defines the agent layer that sits on top of the model client,
the conversational memory and the document store. It provides:

- AgentInterface: Minimal contract for all agents.
- BaseAgent: Shared model-client plumbing, structured calls and tool access.
- ProductManagerAgent / TaskAnalyzerAgent / CodeReviewerAgent /
  MeetingSummarizerAgent: the specialists the orchestrator routes to.
- RouterAgent: Classifies requests into a RoutingDecision.
- AgentRegistry: Closed set of specialists available for routing.
- OrchestratorSystem: High-level coordinator (router -> agents -> synthesis).
"""

from zenai_engine.agents.base_agent import AgentInterface, BaseAgent
from zenai_engine.agents.code_reviewer_agent import CodeReviewerAgent
from zenai_engine.agents.meeting_summarizer_agent import MeetingSummarizerAgent
from zenai_engine.agents.operations import (
    AgentOperation,
    AnalyzeComplexity,
    AnalyzeProjectHealth,
    CreateTaskFromDescription,
    DetectSecurityIssues,
    EstimateEffort,
    ExtractActionItems,
    GenerateMeetingReport,
    GenerateSummary,
    OperationRequest,
    PrioritizeTasks,
    ReviewCode,
    SuggestRefactoring,
    SuggestTaskBreakdown,
    TranscribeAndSummarize,
)
from zenai_engine.agents.orchestrator_system import OrchestrationResult, OrchestratorSystem
from zenai_engine.agents.product_manager_agent import ProductManagerAgent
from zenai_engine.agents.registry import AgentRegistry, build_default_agents
from zenai_engine.agents.router_agent import RouterAgent, RoutingDecision
from zenai_engine.agents.task_analyzer_agent import TaskAnalyzerAgent

__all__ = [
    "AgentInterface",
    "BaseAgent",
    "CodeReviewerAgent",
    "MeetingSummarizerAgent",
    "ProductManagerAgent",
    "TaskAnalyzerAgent",
    "RouterAgent",
    "RoutingDecision",
    "AgentRegistry",
    "build_default_agents",
    "OrchestratorSystem",
    "OrchestrationResult",
    "AgentOperation",
    "OperationRequest",
    "CreateTaskFromDescription",
    "AnalyzeProjectHealth",
    "SuggestTaskBreakdown",
    "PrioritizeTasks",
    "AnalyzeComplexity",
    "EstimateEffort",
    "ReviewCode",
    "SuggestRefactoring",
    "DetectSecurityIssues",
    "GenerateSummary",
    "ExtractActionItems",
    "GenerateMeetingReport",
    "TranscribeAndSummarize",
]
