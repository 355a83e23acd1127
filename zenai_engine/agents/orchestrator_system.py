"""
OrchestratorSystem implementation.

This component wires the agent architecture together:

1. Routing: the RouterAgent classifies the request into a RoutingDecision
   (agents + sequential/parallel workflow). Unknown agents are skipped and
   reported in the result metadata.
2. Executing:
   - sequential: agents run in decision order; each receives the results
     gathered so far. A failure stops the pipeline and raises
     AgentExecutionError carrying the partial results.
   - parallel: agents run concurrently on the same context and never see
     each other's output. The first failure cancels the others and is
     re-raised unchanged (fail-fast). Results are merged in request order.
3. Synthesizing: one more model call merges the agent results into the
   final response.

State machine: idle -> routing -> executing -> synthesizing -> done, with
failed reachable from every non-idle state; the trace of a successful run is
returned in metadata["states"].

handle_request() adds the conversation layer: build context, execute, and
record the interaction in memory exactly once, only after synthesis
succeeded.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from zenai_engine.agents.registry import AgentRegistry
from zenai_engine.agents.router_agent import RouterAgent, RoutingDecision
from zenai_engine.config.agent_configs import get_agent_config
from zenai_engine.config.constants import AgentType, MessageRole, OrchestratorState, WorkflowType
from zenai_engine.llm.model_client import CompletionOptions, ModelClient
from zenai_engine.memory.context_builder import BuildOptions, ContextBuilder, ContextBundle
from zenai_engine.parsing.response_parser import parse_structured
from zenai_engine.prompts.templates import PromptRenderer
from zenai_engine.utils.exceptions import (
    AgentExecutionError,
    ConfigurationError,
    ModelTimeoutError,
    RoutingError,
    SchemaViolation,
    SynthesisError,
    ZenAIError,
)
from zenai_engine.utils.helpers import preview, to_prompt_json, utc_now
from zenai_engine.utils.logger import logger

WORKFLOW_STEP_SHAPE = {"action": str}


@dataclass
class OrchestrationResult:
    """Outcome of one successful execute() call."""

    routing: RoutingDecision
    agent_results: Dict[str, Any]
    synthesis: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "routing": self.routing.to_dict(),
            "agent_results": dict(self.agent_results),
            "synthesis": self.synthesis,
            "metadata": dict(self.metadata),
        }


class OrchestratorSystem:
    """
    High-level orchestration system for the agents.

    Collaborators are injected: the model client used for synthesis and
    workflow planning, the agent registry, and (for handle_request) the
    context builder.
    """

    def __init__(
        self,
        model_client: ModelClient,
        agents: AgentRegistry,
        context_builder: Optional[ContextBuilder] = None,
        router: Optional[RouterAgent] = None,
        renderer: Optional[PromptRenderer] = None,
    ) -> None:
        self.logger = logger
        self._client = model_client
        self._renderer = renderer or PromptRenderer()
        self.agents = agents
        self.context_builder = context_builder
        self.router = router or RouterAgent(
            model_client,
            renderer=self._renderer,
            available_agents=agents.available(),
        )

        orchestrator_config = get_agent_config(AgentType.ORCHESTRATOR)
        self._system_prompt = self._renderer.system_prompt(orchestrator_config.system_prompt_key)
        self._options = CompletionOptions(
            temperature=orchestrator_config.temperature,
            max_tokens=orchestrator_config.max_tokens,
        )
        self._ready = False

        self.logger.info(
            f"[OrchestratorSystem] Initialized with agents: {[a.value for a in agents.available()]}"
        )

    async def initialize(self) -> None:
        """Initialize the model client, the router and every agent once."""
        if self._ready:
            return
        if not self._client.is_ready:
            await self._client.initialize()
        await self.router.initialize()
        await self.agents.initialize_all()
        self._ready = True
        self.logger.info("[OrchestratorSystem] Ready")

    @property
    def is_ready(self) -> bool:
        return self._ready

    # ------------------------------------------------------------------
    # Core execution
    # ------------------------------------------------------------------
    def _transition(self, states: List[str], state: OrchestratorState) -> None:
        states.append(state.value)
        self.logger.debug(f"[OrchestratorSystem] -> {state.value}")

    async def execute(self, request: str, context: Optional[ContextBundle] = None) -> OrchestrationResult:
        """
        Route the request, run the chosen agents and synthesize one response.

        Raises:
            ValueError: empty request
            RoutingError / UnparsableResponse / SchemaViolation: routing failed
            AgentExecutionError: a sequential agent failed (partial results attached)
            ZenAIError: a parallel agent failed (the agent's own error)
            SynthesisError / ModelTimeoutError: synthesis failed
        """
        if not isinstance(request, str) or not request.strip():
            raise ValueError("Request must be a non-empty string")

        context = context if context is not None else ContextBundle.empty(request)
        states: List[str] = [OrchestratorState.IDLE.value]
        self.logger.info(f"[OrchestratorSystem] Received request: {preview(request)}...")

        try:
            self._transition(states, OrchestratorState.ROUTING)
            decision = await self.router.route(request, context)

            self._transition(states, OrchestratorState.EXECUTING)
            if decision.workflow is WorkflowType.PARALLEL:
                agent_results = await self._execute_parallel(request, context, decision)
            else:
                agent_results = await self._execute_sequential(request, context, decision)

            self._transition(states, OrchestratorState.SYNTHESIZING)
            synthesis = await self.synthesize(request, agent_results)
        except asyncio.CancelledError:
            self.logger.warning(f"[OrchestratorSystem] Cancelled during '{states[-1]}'")
            raise
        except Exception as e:
            failed_in = states[-1]
            self._transition(states, OrchestratorState.FAILED)
            self.logger.error(f"[OrchestratorSystem] Failed during '{failed_in}': {e}")
            raise

        self._transition(states, OrchestratorState.DONE)
        self.logger.info(
            f"[OrchestratorSystem] Request handled by {decision.agent_names} "
            f"(workflow={decision.workflow.value})"
        )
        return OrchestrationResult(
            routing=decision,
            agent_results=agent_results,
            synthesis=synthesis,
            metadata={
                "skipped_agents": list(decision.skipped_agents),
                "workflow": decision.workflow.value,
                "states": states,
            },
        )

    async def _execute_sequential(
        self,
        request: str,
        context: ContextBundle,
        decision: RoutingDecision,
    ) -> Dict[str, Any]:
        results: Dict[str, Any] = {}
        for agent_type in decision.agents:
            agent = self.agents.get(agent_type)
            self.logger.info(f"[OrchestratorSystem] Running {agent_type.value} (sequential)")
            try:
                results[agent_type.value] = await agent.run(
                    request, context, previous_results=dict(results)
                )
            except asyncio.CancelledError:
                raise
            except Exception as e:
                raise AgentExecutionError(agent_type.value, e, results) from e
        return results

    async def _execute_parallel(
        self,
        request: str,
        context: ContextBundle,
        decision: RoutingDecision,
    ) -> Dict[str, Any]:
        self.logger.info(f"[OrchestratorSystem] Running {decision.agent_names} (parallel)")
        tasks = [
            asyncio.create_task(self.agents.get(agent_type).run(request, context))
            for agent_type in decision.agents
        ]
        try:
            outputs = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return {agent_type.value: output for agent_type, output in zip(decision.agents, outputs)}

    async def synthesize(self, request: str, agent_results: Mapping[str, Any]) -> str:
        """
        Merge agent results into a single response (one model call).

        Timeouts propagate as ModelTimeoutError; any other failure is
        wrapped in SynthesisError.
        """
        prompt = self._renderer.render(
            "orchestrator.synthesis",
            {"request": request, "results": to_prompt_json(dict(agent_results))},
        )
        try:
            return await self._complete(prompt)
        except ModelTimeoutError:
            raise
        except ZenAIError as e:
            raise SynthesisError(f"Synthesis failed: {e.message}", details=e.kind) from e

    async def _complete(self, prompt: str) -> str:
        messages = [
            {"role": MessageRole.SYSTEM, "content": self._system_prompt},
            {"role": MessageRole.USER, "content": prompt},
        ]
        return await self._client.complete(messages, self._options)

    # ------------------------------------------------------------------
    # Conversation-aware entry points
    # ------------------------------------------------------------------
    def _require_context_builder(self) -> ContextBuilder:
        if self.context_builder is None:
            raise ConfigurationError("OrchestratorSystem has no context builder configured")
        return self.context_builder

    async def handle_request(
        self,
        request: str,
        user_id: str,
        conversation_id: str,
        context: Optional[Mapping[str, Any]] = None,
        include_history: bool = True,
        include_documents: bool = True,
        index_for_retrieval: bool = False,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Full request cycle: build context -> execute -> save the interaction.

        The interaction is written to memory once, after synthesis; nothing
        is written when any step fails or the timeout expires.

        Raises:
            ModelTimeoutError: timeout elapsed before synthesis completed
        """
        builder = self._require_context_builder()
        options = BuildOptions(
            include_history=include_history,
            include_documents=include_documents,
            additional_context=dict(context or {}),
        )

        async def _build_and_execute() -> OrchestrationResult:
            bundle = await builder.build(request, options, user_id=user_id, conversation_id=conversation_id)
            return await self.execute(request, bundle)

        try:
            if timeout is not None:
                result = await asyncio.wait_for(_build_and_execute(), timeout=timeout)
            else:
                result = await _build_and_execute()
        except ModelTimeoutError:
            raise
        except asyncio.TimeoutError:
            self.logger.error(f"[OrchestratorSystem] Request exceeded {timeout}s; nothing saved")
            raise ModelTimeoutError(timeout, operation="request") from None

        await builder.save_interaction(
            user_id,
            conversation_id,
            request,
            result.synthesis,
            {"routing": result.routing.to_dict(), "index_for_retrieval": index_for_retrieval},
        )

        return {
            "response": result.synthesis,
            "routing": result.routing.to_dict(),
            "agent_results": result.agent_results,
            "metadata": {
                "timestamp": utc_now().isoformat(),
                "user_id": user_id,
                "conversation_id": conversation_id,
                **result.metadata,
            },
        }

    async def handle_complex_workflow(
        self,
        request: str,
        user_id: Optional[str] = None,
        conversation_id: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Break a multi-part request into ordered steps, execute each step
        with the results of the previous ones, then summarize.

        Returns:
            Dict with keys workflow (the steps), results (per step) and summary
        """
        if not isinstance(request, str) or not request.strip():
            raise ValueError("Request must be a non-empty string")

        if self.context_builder is not None:
            bundle = await self.context_builder.build(
                request,
                BuildOptions(additional_context=dict(context or {})),
                user_id=user_id,
                conversation_id=conversation_id,
            )
        else:
            bundle = ContextBundle.empty(request, context)

        steps = await self.breakdown_workflow(request, bundle)
        self.logger.info(f"[OrchestratorSystem] Workflow broken into {len(steps)} step(s)")

        step_results: List[Dict[str, Any]] = []
        for step in steps:
            step_context = bundle.with_metadata(
                step=step["order"],
                previous_steps=[
                    {"step": r["step"], "action": r["action"], "response": r["result"]["synthesis"]}
                    for r in step_results
                ],
            )
            result = await self.execute(step["action"], step_context)
            step_results.append({"step": step["order"], "action": step["action"], "result": result.to_dict()})

        summary = await self.summarize_workflow(request, step_results)
        return {"workflow": steps, "results": step_results, "summary": summary}

    async def breakdown_workflow(self, request: str, context: Optional[ContextBundle] = None) -> List[Dict[str, Any]]:
        """
        Ask the model for the ordered steps of a workflow.

        Raises:
            UnparsableResponse / SchemaViolation: unusable model output
            RoutingError: the breakdown contains no steps
        """
        context_text = context.to_prompt() if context is not None else ""
        prompt = self._renderer.render(
            "orchestrator.workflowBreakdown",
            {"request": request, "context": context_text or "None"},
        )
        raw = await self._complete(prompt)
        steps = parse_structured(raw, WORKFLOW_STEP_SHAPE)
        if not isinstance(steps, list):
            raise SchemaViolation("Workflow breakdown must be a JSON array", raw_text=raw)
        if not steps:
            raise RoutingError("Workflow breakdown produced no steps")

        normalized = []
        for index, step in enumerate(steps, start=1):
            order = step.get("order", step.get("step", index))
            normalized.append({**step, "order": order if isinstance(order, int) else index})
        return sorted(normalized, key=lambda s: s["order"])

    async def summarize_workflow(self, request: str, step_results: List[Dict[str, Any]]) -> str:
        prompt = self._renderer.render(
            "orchestrator.workflowSummary",
            {"request": request, "results": to_prompt_json(step_results)},
        )
        try:
            return await self._complete(prompt)
        except ModelTimeoutError:
            raise
        except ZenAIError as e:
            raise SynthesisError(f"Workflow summary failed: {e.message}", details=e.kind) from e

    async def clear_context(self, user_id: str, conversation_id: str) -> None:
        await self._require_context_builder().clear(user_id, conversation_id)
        self.logger.info(f"[OrchestratorSystem] Cleared context for {user_id}:{conversation_id}")
