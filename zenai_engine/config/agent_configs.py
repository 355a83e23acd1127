"""
Static per-agent configuration.

Each specialized agent (and the orchestrator itself) is described by an
immutable AgentConfig: model parameters, the key of its system prompt, the
capabilities it advertises to the router and the tools it may invoke.
Configurations are loaded once at import time and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from zenai_engine.config.constants import (
    ANALYTICAL_TEMPERATURE,
    GENERATIVE_TEMPERATURE,
    AgentType,
    ModelProvider,
)
from zenai_engine.utils.exceptions import ConfigurationError


@dataclass(frozen=True)
class AgentConfig:
    """Read-only configuration of one agent type."""

    name: str
    model_type: str
    temperature: float
    max_tokens: int
    max_iterations: int
    system_prompt_key: str
    capabilities: Tuple[str, ...]
    tools: Tuple[str, ...] = ()
    description: str = ""
    model_name: Optional[str] = None
    sub_agents: Tuple[str, ...] = field(default_factory=tuple)


AGENT_CONFIGS: Dict[AgentType, AgentConfig] = {
    AgentType.PRODUCT_MANAGER: AgentConfig(
        name="ProductManagerAgent",
        description="Project planning, task creation and prioritization",
        model_type=ModelProvider.OPENAI.value,
        temperature=GENERATIVE_TEMPERATURE,
        max_tokens=2000,
        max_iterations=5,
        system_prompt_key="productManager",
        capabilities=(
            "task_creation",
            "project_analysis",
            "prioritization",
            "roadmap_planning",
            "risk_assessment",
        ),
        tools=("create_task", "analyze_project", "prioritize_tasks"),
    ),
    AgentType.TASK_ANALYZER: AgentConfig(
        name="TaskAnalyzerAgent",
        description="Task complexity analysis and effort estimation",
        model_type=ModelProvider.OPENAI.value,
        temperature=ANALYTICAL_TEMPERATURE,
        max_tokens=1500,
        max_iterations=3,
        system_prompt_key="taskAnalyzer",
        capabilities=(
            "complexity_estimation",
            "dependency_analysis",
            "effort_estimation",
            "risk_identification",
        ),
        tools=("estimate_complexity", "suggest_dependencies"),
    ),
    AgentType.CODE_REVIEWER: AgentConfig(
        name="CodeReviewerAgent",
        description="Code quality, security and best-practice review",
        model_type=ModelProvider.OPENAI.value,
        temperature=ANALYTICAL_TEMPERATURE,
        max_tokens=3000,
        max_iterations=5,
        system_prompt_key="codeReviewer",
        capabilities=(
            "code_quality_check",
            "security_analysis",
            "performance_review",
            "best_practices",
            "refactoring_suggestions",
        ),
        tools=("analyze_code", "suggest_improvements"),
    ),
    AgentType.MEETING_SUMMARIZER: AgentConfig(
        name="MeetingSummarizerAgent",
        description="Meeting transcription, summaries and action items",
        model_type=ModelProvider.OPENAI.value,
        temperature=ANALYTICAL_TEMPERATURE,
        max_tokens=3000,
        max_iterations=3,
        system_prompt_key="meetingSummarizer",
        capabilities=(
            "transcription_analysis",
            "action_item_extraction",
            "meeting_summary",
            "decision_tracking",
            "participant_analysis",
        ),
        tools=("transcribe_audio", "extract_action_items"),
    ),
    AgentType.ORCHESTRATOR: AgentConfig(
        name="OrchestratorAgent",
        description="Routes requests to specialized agents and synthesizes results",
        model_type=ModelProvider.OPENAI.value,
        temperature=GENERATIVE_TEMPERATURE,
        max_tokens=2000,
        max_iterations=10,
        system_prompt_key="orchestrator",
        capabilities=(
            "agent_routing",
            "workflow_coordination",
            "result_synthesis",
            "multi_agent_collaboration",
        ),
        sub_agents=tuple(agent.value for agent in AgentType.specialists()),
    ),
}


def get_agent_config(agent_type: AgentType) -> AgentConfig:
    """Return the configuration of an agent type."""
    try:
        return AGENT_CONFIGS[agent_type]
    except KeyError:
        raise ConfigurationError(f"No configuration for agent type '{agent_type}'") from None


def list_agents() -> List[str]:
    """Return the identifiers of all configured agents."""
    return [agent_type.value for agent_type in AGENT_CONFIGS]


def validate_agent_config(agent_config: AgentConfig) -> bool:
    """
    Validate an agent configuration.

    Raises:
        ConfigurationError: If a required field is missing or a model
            parameter is out of range
    """
    for field_name in ("name", "model_type", "capabilities", "system_prompt_key"):
        if not getattr(agent_config, field_name):
            raise ConfigurationError(
                f"Missing required field: {field_name}",
                details=f"agent={agent_config.name or '<unnamed>'}",
            )

    supported = {provider.value for provider in ModelProvider}
    if agent_config.model_type not in supported:
        raise ConfigurationError(
            f"Unsupported model type '{agent_config.model_type}' for {agent_config.name}"
        )
    if not 0 <= agent_config.temperature <= 2:
        raise ConfigurationError(
            f"Temperature must be within [0, 2] for {agent_config.name}, got {agent_config.temperature}"
        )
    if agent_config.max_tokens <= 0:
        raise ConfigurationError(
            f"max_tokens must be positive for {agent_config.name}, got {agent_config.max_tokens}"
        )
    return True
