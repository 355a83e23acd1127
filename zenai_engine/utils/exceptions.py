"""
Custom exception classes for the ZenAI orchestration engine.

This module defines a hierarchy of custom exceptions:
- Base exception class for the application, carrying an ErrorCode (the
  discriminating kind of the failure), a message and optional details
- Specific exception types for configuration, provider, parsing, agent,
  orchestration, retrieval, cache, tool and transcription failures

Parsing-related failures always keep the raw model text for diagnostics.
"""

from typing import Any, Dict, Optional

from zenai_engine.config.constants import ErrorCode


class ZenAIError(Exception):
    """
    Base exception class for all application-specific errors.

    All custom exceptions in this application inherit from this base class,
    allowing for catching all application errors with a single exception type
    while still maintaining specificity when needed.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def kind(self) -> str:
        return self.code.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly failure description."""
        return {
            "kind": self.kind,
            "message": self.message,
            "details": self.details,
            "raw_text": getattr(self, "raw_text", None),
        }


class ConfigurationError(ZenAIError):
    """
    Raised when there's a configuration error.

    This exception is raised at construction time when:
    - The model provider identifier is unsupported
    - A required agent configuration field is missing or invalid
    - A prompt template key is unknown
    It is never retried.
    """
    code = ErrorCode.CONFIGURATION_ERROR


class ProviderError(ZenAIError):
    """
    Raised when the model provider fails (network, auth, rate limit).

    The engine does not retry; callers decide on retry and backoff.
    """
    code = ErrorCode.PROVIDER_ERROR

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message, details=f"provider={provider}" if provider else None)
        self.provider = provider


class ModelTimeoutError(ZenAIError, TimeoutError):
    """
    Raised when a deadline is exceeded.

    Distinct from ProviderError so callers can apply a different backoff
    policy. Also a builtin TimeoutError.
    """
    code = ErrorCode.TIMEOUT_ERROR

    def __init__(self, timeout_seconds: Optional[float] = None, operation: str = "model call"):
        message = (
            f"{operation} timed out after {timeout_seconds} seconds"
            if timeout_seconds is not None
            else f"{operation} timed out"
        )
        super().__init__(message, details=f"timeout={timeout_seconds}s")
        self.timeout_seconds = timeout_seconds


class ResponseParsingError(ZenAIError):
    """Base class for model text that cannot be coerced into a structure."""

    def __init__(self, message: str, raw_text: str, details: Optional[str] = None):
        super().__init__(message, details=details)
        self.raw_text = raw_text


class UnparsableResponse(ResponseParsingError):
    """Raised when no JSON value can be extracted from the model text."""
    code = ErrorCode.UNPARSABLE_RESPONSE


class SchemaViolation(ResponseParsingError):
    """Raised when parsed JSON lacks a required field or has a wrong type."""
    code = ErrorCode.SCHEMA_VIOLATION

    def __init__(self, message: str, raw_text: str, field: Optional[str] = None):
        super().__init__(message, raw_text=raw_text, details=f"field={field}" if field else None)
        self.field = field


class AgentError(ZenAIError):
    """
    Raised when there's an error in agent processing.

    This exception is raised by agents when:
    - An unsupported operation is requested
    - The agent receives invalid input
    """
    code = ErrorCode.AGENT_ERROR


class MalformedAgentOutput(AgentError):
    """
    Raised when a structured agent operation's output fails parsing or
    validation. The orchestrator treats it as that agent's failure.
    """
    code = ErrorCode.MALFORMED_AGENT_OUTPUT

    def __init__(self, agent_name: str, operation: str, raw_text: str, reason: str):
        super().__init__(
            f"{agent_name}.{operation} produced malformed output: {reason}",
            details=f"agent={agent_name}, operation={operation}",
        )
        self.agent_name = agent_name
        self.operation = operation
        self.raw_text = raw_text


class AgentExecutionError(AgentError):
    """
    Raised when an agent fails during a sequential workflow.

    Remaining agents are not run; results gathered before the failure are
    kept in partial_results. The original failure is the __cause__.
    """

    def __init__(self, agent_name: str, cause: BaseException, partial_results: Dict[str, Any]):
        super().__init__(
            f"Agent '{agent_name}' failed: {cause}",
            details=f"completed={list(partial_results)}",
        )
        self.agent_name = agent_name
        self.cause = cause
        self.partial_results = dict(partial_results)


class RoutingError(ZenAIError):
    """Raised when a routing decision names no agent that can be executed."""
    code = ErrorCode.ROUTING_ERROR


class SynthesisError(ZenAIError):
    """Raised when the final synthesis step fails."""
    code = ErrorCode.SYNTHESIS_ERROR


class RetrievalError(ZenAIError):
    """
    Raised when there's an error with the document store.

    This exception is raised when:
    - Query embedding generation fails
    - Vector similarity search fails
    - Documents cannot be added or deleted
    """
    code = ErrorCode.RETRIEVAL_ERROR


class CacheError(ZenAIError):
    """Raised when the conversation cache cannot be read or written."""
    code = ErrorCode.CACHE_ERROR


class ToolError(ZenAIError):
    """
    Raised when there's an error with an agent tool.

    This exception is raised when:
    - The tool is not declared by the agent
    - No implementation was supplied for the tool
    - Tool execution fails
    """
    code = ErrorCode.TOOL_ERROR


class TranscriptionError(ZenAIError):
    """Raised when an audio file cannot be transcribed."""
    code = ErrorCode.TRANSCRIPTION_ERROR
