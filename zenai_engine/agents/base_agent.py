"""
Base agent definitions.

This module defines:
- AgentInterface: minimal common interface for all agents.
- BaseAgent: shared model-client plumbing for the specialized agents.

Concrete agents (ProductManagerAgent, TaskAnalyzerAgent, CodeReviewerAgent,
MeetingSummarizerAgent) inherit from BaseAgent and:
- Are configured by their static AgentConfig (model parameters, system
  prompt key, declared tools)
- Expose run() for free-form execution by the orchestrator
- Implement structured operations, each issuing exactly one model call and
  parsing a JSON response through the response parser
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, ClassVar, Dict, List, Mapping, Optional, Type

from zenai_engine.agents.operations import OperationRequest
from zenai_engine.config.agent_configs import AgentConfig, get_agent_config, validate_agent_config
from zenai_engine.config.constants import AgentType, MessageRole
from zenai_engine.llm.model_client import CompletionOptions, ModelClient
from zenai_engine.memory.context_builder import ContextBundle
from zenai_engine.parsing.response_parser import ExpectedShape, parse_structured
from zenai_engine.prompts.templates import PromptRenderer
from zenai_engine.tools.agent_tool import AgentTool
from zenai_engine.utils.exceptions import (
    AgentError,
    ConfigurationError,
    MalformedAgentOutput,
    ResponseParsingError,
    ToolError,
)
from zenai_engine.utils.helpers import preview, to_prompt_json
from zenai_engine.utils.logger import logger

OperationHandler = Callable[[Any], Awaitable[Any]]


class AgentInterface(ABC):
    """
    Minimal interface for all agents in the system.

    Agents expose their type and a single run() method used by the
    orchestrator.
    """

    @abstractmethod
    def get_agent_type(self) -> AgentType:
        """Return the AgentType enum value for this agent."""

    async def initialize(self) -> None:
        """Startup work, awaited once before the agent is used."""

    @abstractmethod
    async def run(
        self,
        input: str,
        context: Optional[ContextBundle] = None,
        previous_results: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Execute the agent on a free-form request.

        previous_results holds the outputs of agents that ran earlier in a
        sequential workflow (keyed by agent identifier).
        """


class BaseAgent(AgentInterface, ABC):
    """
    Abstract base class for the specialized agents.

    Responsibilities:
    - Load and validate the agent's AgentConfig
    - Hold the injected ModelClient and the rendered system prompt
    - Provide the single-call helpers used by run() and the structured
      operations, and the tool invocation helper
    """

    agent_type: ClassVar[AgentType]

    def __init__(
        self,
        model_client: ModelClient,
        renderer: Optional[PromptRenderer] = None,
        tools: Optional[Mapping[str, AgentTool]] = None,
        agent_config: Optional[AgentConfig] = None,
    ) -> None:
        self.logger = logger
        self.config = agent_config or get_agent_config(self.agent_type)
        validate_agent_config(self.config)

        self.name = self.config.name
        self._client = model_client
        self._renderer = renderer or PromptRenderer()
        self.system_prompt = self._renderer.system_prompt(self.config.system_prompt_key)
        self._options = CompletionOptions(
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )

        self._tools: Dict[str, AgentTool] = {}
        for tool_name, tool in (tools or {}).items():
            if tool_name not in self.config.tools:
                raise ConfigurationError(
                    f"Tool '{tool_name}' is not declared for {self.name}",
                    details=f"declared={list(self.config.tools)}",
                )
            self._tools[tool_name] = tool

        self.logger.info(
            f"[{self.name}] Initialized (temperature={self.config.temperature}, "
            f"max_tokens={self.config.max_tokens}, tools={sorted(self._tools)})"
        )

    # ------------------------------------------------------------------
    # AgentInterface implementation
    # ------------------------------------------------------------------
    def get_agent_type(self) -> AgentType:
        return self.agent_type

    @property
    def capabilities(self) -> List[str]:
        return list(self.config.capabilities)

    async def initialize(self) -> None:
        if not self._client.is_ready:
            await self._client.initialize()

    @property
    def is_ready(self) -> bool:
        return self._client.is_ready

    async def run(
        self,
        input: str,
        context: Optional[ContextBundle] = None,
        previous_results: Optional[Mapping[str, Any]] = None,
    ) -> str:
        if not isinstance(input, str) or not input.strip():
            raise AgentError(f"{self.name} received an invalid/empty request")

        self.logger.info(f"[{self.name}] Executing with input: {preview(input)}...")
        output = await self._complete(self.build_run_prompt(input, context, previous_results))
        self.logger.info(f"[{self.name}] Completed ({len(output)} chars)")
        return output

    def build_run_prompt(
        self,
        input: str,
        context: Optional[ContextBundle] = None,
        previous_results: Optional[Mapping[str, Any]] = None,
    ) -> str:
        parts = [input.strip()]
        context_text = context.to_prompt() if context is not None else ""
        if context_text:
            parts.append(context_text)
        if previous_results:
            parts.append("Results from previous agents:\n" + to_prompt_json(dict(previous_results)))
        return "\n\n".join(parts)

    # ------------------------------------------------------------------
    # Structured operations
    # ------------------------------------------------------------------
    def _operations(self) -> Dict[Type[OperationRequest], OperationHandler]:
        """Map of request type -> handler; overridden by concrete agents."""
        return {}

    def supports(self, request: OperationRequest) -> bool:
        return type(request) in self._operations()

    async def perform(self, request: OperationRequest) -> Any:
        """Dispatch a typed operation request to its handler."""
        handler = self._operations().get(type(request))
        if handler is None:
            raise AgentError(
                f"{self.name} does not support operation '{request.operation or type(request).__name__}'"
            )
        return await handler(request)

    # ------------------------------------------------------------------
    # Model helpers
    # ------------------------------------------------------------------
    async def _complete(self, prompt: str) -> str:
        messages = [
            {"role": MessageRole.SYSTEM, "content": self.system_prompt},
            {"role": MessageRole.USER, "content": prompt},
        ]
        return await self._client.complete(messages, self._options)

    async def _structured_call(
        self,
        operation: str,
        prompt: str,
        expected_shape: Optional[ExpectedShape] = None,
        expect_list: bool = False,
    ) -> Any:
        """
        Issue one model call and parse its JSON output.

        Raises:
            MalformedAgentOutput: If the output cannot be parsed or does not
                match the expected shape
        """
        raw = await self._complete(prompt)
        try:
            value = parse_structured(raw, expected_shape)
        except ResponseParsingError as e:
            self.logger.error(f"[{self.name}] {operation} returned malformed output: {e.message}")
            raise MalformedAgentOutput(self.name, operation, raw, e.message) from e

        if expect_list != isinstance(value, list):
            expected = "a JSON array" if expect_list else "a JSON object"
            raise MalformedAgentOutput(self.name, operation, raw, f"expected {expected}")
        return value

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------
    @property
    def available_tools(self) -> List[str]:
        return sorted(self._tools)

    async def use_tool(self, name: str, payload: Optional[Mapping[str, Any]] = None) -> str:
        """
        Invoke one of the agent's tools with structured input.

        Raises:
            ToolError: If the tool is not declared or was not supplied
        """
        if name not in self.config.tools:
            raise ToolError(f"{self.name} has no tool named '{name}'")
        tool = self._tools.get(name)
        if tool is None:
            raise ToolError(f"No implementation supplied for tool '{name}' of {self.name}")
        return await tool.invoke(dict(payload or {}))
