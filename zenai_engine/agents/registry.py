"""
Agent registry.

The closed set of specialist agents the orchestrator can route to, keyed by
AgentType. build_default_agents() wires all four specialists.
"""

from __future__ import annotations

import asyncio
from typing import Dict, Iterator, List, Mapping, Optional

from zenai_engine.agents.base_agent import AgentInterface
from zenai_engine.agents.code_reviewer_agent import CodeReviewerAgent
from zenai_engine.agents.meeting_summarizer_agent import MeetingSummarizerAgent
from zenai_engine.agents.product_manager_agent import ProductManagerAgent
from zenai_engine.agents.task_analyzer_agent import TaskAnalyzerAgent
from zenai_engine.config.agent_configs import get_agent_config
from zenai_engine.config.constants import AgentType
from zenai_engine.llm.model_client import ModelClient, create_model_client
from zenai_engine.prompts.templates import PromptRenderer
from zenai_engine.tools.agent_tool import AgentTool
from zenai_engine.tools.transcription import TranscriptionService
from zenai_engine.utils.exceptions import ConfigurationError


class AgentRegistry:
    """Read-only mapping AgentType -> agent."""

    def __init__(self, agents: Mapping[AgentType, AgentInterface]) -> None:
        specialists = set(AgentType.specialists())
        for agent_type, agent in agents.items():
            if agent_type not in specialists:
                raise ConfigurationError(f"'{agent_type.value}' is not a routable agent type")
            if agent.get_agent_type() is not agent_type:
                raise ConfigurationError(
                    f"Agent registered as '{agent_type.value}' reports type "
                    f"'{agent.get_agent_type().value}'"
                )
        self._agents: Dict[AgentType, AgentInterface] = dict(agents)

    def get(self, agent_type: AgentType) -> Optional[AgentInterface]:
        return self._agents.get(agent_type)

    def __contains__(self, agent_type: object) -> bool:
        return agent_type in self._agents

    def __iter__(self) -> Iterator[AgentType]:
        return iter(self._agents)

    def __len__(self) -> int:
        return len(self._agents)

    def available(self) -> List[AgentType]:
        return list(self._agents)

    async def initialize_all(self) -> None:
        await asyncio.gather(
            *(agent.initialize() for agent in self._agents.values())
        )


_AGENT_CLASSES = {
    AgentType.PRODUCT_MANAGER: ProductManagerAgent,
    AgentType.TASK_ANALYZER: TaskAnalyzerAgent,
    AgentType.CODE_REVIEWER: CodeReviewerAgent,
    AgentType.MEETING_SUMMARIZER: MeetingSummarizerAgent,
}


def build_default_agents(
    model_client: Optional[ModelClient] = None,
    renderer: Optional[PromptRenderer] = None,
    tools: Optional[Mapping[AgentType, Mapping[str, AgentTool]]] = None,
    transcription_service: Optional[TranscriptionService] = None,
) -> AgentRegistry:
    """
    Instantiate every specialist agent.

    With no model_client each agent gets its own client built from its
    AgentConfig (provider, model, temperature, max tokens).
    """
    renderer = renderer or PromptRenderer()
    tools = tools or {}
    agents: Dict[AgentType, AgentInterface] = {}

    for agent_type, agent_class in _AGENT_CLASSES.items():
        agent_config = get_agent_config(agent_type)
        client = model_client or create_model_client(
            provider=agent_config.model_type,
            model_name=agent_config.model_name,
            temperature=agent_config.temperature,
            max_tokens=agent_config.max_tokens,
        )
        kwargs = {}
        if agent_class is MeetingSummarizerAgent:
            kwargs["transcription_service"] = transcription_service
        agents[agent_type] = agent_class(
            client,
            renderer=renderer,
            tools=tools.get(agent_type),
            **kwargs,
        )

    return AgentRegistry(agents)
