"""
RouterAgent implementation.

Responsibilities:
- Classify an incoming request into a RoutingDecision: which specialist
  agents should handle it and whether they run sequentially or in parallel.
- Validate the classifier output: an unknown agent identifier is skipped
  (and recorded on the decision) rather than failing the request; a decision
  naming no usable agent raises RoutingError.

The RouterAgent does not answer requests itself; OrchestratorSystem uses the
decision to drive execution.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from zenai_engine.agents.base_agent import BaseAgent
from zenai_engine.config.agent_configs import get_agent_config
from zenai_engine.config.constants import AgentType, WorkflowType
from zenai_engine.memory.context_builder import ContextBundle
from zenai_engine.parsing.response_parser import parse_structured
from zenai_engine.utils.exceptions import RoutingError, SchemaViolation
from zenai_engine.utils.helpers import preview

ROUTING_SHAPE = {"agents": list}


@dataclass(frozen=True)
class RoutingDecision:
    """Immutable routing decision for one execute() call."""

    agents: Tuple[AgentType, ...]
    workflow: WorkflowType = WorkflowType.SEQUENTIAL
    reasoning: str = ""
    expected_output: str = ""
    skipped_agents: Tuple[str, ...] = ()

    @property
    def agent_names(self) -> List[str]:
        return [agent.value for agent in self.agents]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agents": self.agent_names,
            "workflow": self.workflow.value,
            "reasoning": self.reasoning,
            "expected_output": self.expected_output,
            "skipped_agents": list(self.skipped_agents),
        }


class RouterAgent(BaseAgent):
    """
    Router agent.

    This agent does NOT answer user questions directly. Instead, it returns a
    routing decision describing which specialist agents should handle the
    request.
    """

    agent_type = AgentType.ORCHESTRATOR

    def __init__(self, *args, available_agents: Optional[Iterable[AgentType]] = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.available_agents: Tuple[AgentType, ...] = tuple(
            available_agents if available_agents is not None else AgentType.specialists()
        )

    async def run(
        self,
        input: str,
        context: Optional[ContextBundle] = None,
        previous_results: Optional[Mapping[str, Any]] = None,
    ) -> str:
        decision = await self.route(input, context)
        return json.dumps(decision.to_dict())

    # ------------------------------------------------------------------
    # Routing logic
    # ------------------------------------------------------------------
    def _agent_catalogue(self) -> str:
        lines = []
        for agent_type in self.available_agents:
            agent_config = get_agent_config(agent_type)
            lines.append(
                f"- {agent_type.value}: {agent_config.description} "
                f"(capabilities: {', '.join(agent_config.capabilities)})"
            )
        return "\n".join(lines)

    async def route(self, request: str, context: Optional[ContextBundle] = None) -> RoutingDecision:
        """
        Compute a routing decision for the request (one model call).

        Raises:
            UnparsableResponse / SchemaViolation: classifier output unusable
            RoutingError: no requested agent is available
        """
        if not isinstance(request, str) or not request.strip():
            raise ValueError("RouterAgent received an invalid/empty request")

        self.logger.info(f"[RouterAgent] Routing request: {preview(request)}...")
        context_text = context.to_prompt() if context is not None else ""
        prompt = self._renderer.render(
            "orchestrator.routing",
            {
                "request": request,
                "context": context_text or "None",
                "agents": self._agent_catalogue(),
            },
        )
        raw_output = await self._complete(prompt)
        decision = self.parse_decision(raw_output)

        self.logger.info(
            f"[RouterAgent] Routed to {decision.agent_names} "
            f"(workflow={decision.workflow.value}, skipped={list(decision.skipped_agents)})"
        )
        return decision

    def parse_decision(self, raw_output: str) -> RoutingDecision:
        """Validate classifier output and turn it into a RoutingDecision."""
        data = parse_structured(raw_output, ROUTING_SHAPE)
        if not isinstance(data, dict):
            raise SchemaViolation("Routing output must be a JSON object", raw_text=raw_output)

        requested = data["agents"]
        if not requested:
            raise SchemaViolation("Routing decision names no agents", raw_text=raw_output, field="agents")
        if not all(isinstance(name, str) for name in requested):
            raise SchemaViolation("Agent identifiers must be strings", raw_text=raw_output, field="agents")

        workflow_value = data.get("workflow") or WorkflowType.SEQUENTIAL.value
        try:
            workflow = WorkflowType(str(workflow_value).strip().lower())
        except ValueError:
            raise SchemaViolation(
                f"Invalid workflow: {workflow_value!r}", raw_text=raw_output, field="workflow"
            ) from None

        agents: List[AgentType] = []
        skipped: List[str] = []
        for name in requested:
            agent_type = AgentType.lookup(name.strip())
            if agent_type is None or agent_type not in self.available_agents:
                self.logger.warning(f"[RouterAgent] Skipping unknown agent {name!r}")
                skipped.append(name)
            elif agent_type not in agents:
                agents.append(agent_type)

        if not agents:
            raise RoutingError(
                f"Routing decision names no available agent: {requested}",
                details=f"available={[a.value for a in self.available_agents]}",
            )

        return RoutingDecision(
            agents=tuple(agents),
            workflow=workflow,
            reasoning=str(data.get("reasoning", "")),
            expected_output=str(data.get("expectedOutput", data.get("expected_output", ""))),
            skipped_agents=tuple(skipped),
        )
