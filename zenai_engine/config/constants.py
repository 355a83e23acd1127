"""
Constants and enumerations for the ZenAI orchestration engine.

This module defines all application-wide constants including:
- Agent types
- Workflow shapes and orchestrator states
- Model providers and message roles
- Relevance bands for document retrieval
- Error codes
"""

from enum import Enum


# ============================================================================
# AGENT TYPES
# ============================================================================

class AgentType(Enum):
    """Enumeration for the specialized agents known to the orchestrator."""
    PRODUCT_MANAGER = "productManager"        # Planning, task creation, prioritization
    TASK_ANALYZER = "taskAnalyzer"            # Complexity, estimation, dependencies
    CODE_REVIEWER = "codeReviewer"            # Quality, security, best practices
    MEETING_SUMMARIZER = "meetingSummarizer"  # Transcripts, action items
    ORCHESTRATOR = "orchestrator"             # Routing and synthesis only

    @classmethod
    def specialists(cls):
        """Agent types the orchestrator may route a request to."""
        return [agent for agent in cls if agent is not cls.ORCHESTRATOR]

    @classmethod
    def lookup(cls, value: str):
        """Return the specialist AgentType named by value, or None if unknown."""
        for agent in cls.specialists():
            if agent.value == value:
                return agent
        return None


# ============================================================================
# WORKFLOWS & ORCHESTRATION
# ============================================================================

class WorkflowType(Enum):
    """How the agents of a routing decision are executed."""
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"


class OrchestratorState(Enum):
    """States of a single orchestrator execution."""
    IDLE = "idle"
    ROUTING = "routing"
    EXECUTING = "executing"
    SYNTHESIZING = "synthesizing"
    DONE = "done"
    FAILED = "failed"


# ============================================================================
# MODEL PROVIDERS & MESSAGES
# ============================================================================

class ModelProvider(Enum):
    """Chat-completion providers supported by the model client."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class MessageRole(Enum):
    """Roles of conversation messages."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


# Analytical agents run cold, generative ones warm
ANALYTICAL_TEMPERATURE = 0.3
GENERATIVE_TEMPERATURE = 0.7


# ============================================================================
# RETRIEVAL
# ============================================================================

class RelevanceBand(Enum):
    """Relevance bands computed from similarity scores (higher = more similar)."""
    VERY_HIGH = "very_high"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    MINIMAL = "minimal"


# Lower bound of each band on the similarity scale (1 - cosine distance)
RELEVANCE_THRESHOLDS = (
    (0.9, RelevanceBand.VERY_HIGH),
    (0.8, RelevanceBand.HIGH),
    (0.7, RelevanceBand.MEDIUM),
    (0.6, RelevanceBand.LOW),
)


# ============================================================================
# ERROR CODES
# ============================================================================

class ErrorCode(Enum):
    """Enumeration for error codes (the discriminating kind of a failure)."""
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    UNPARSABLE_RESPONSE = "UNPARSABLE_RESPONSE"
    SCHEMA_VIOLATION = "SCHEMA_VIOLATION"
    MALFORMED_AGENT_OUTPUT = "MALFORMED_AGENT_OUTPUT"
    AGENT_ERROR = "AGENT_ERROR"
    ROUTING_ERROR = "ROUTING_ERROR"
    SYNTHESIS_ERROR = "SYNTHESIS_ERROR"
    RETRIEVAL_ERROR = "RETRIEVAL_ERROR"
    CACHE_ERROR = "CACHE_ERROR"
    TOOL_ERROR = "TOOL_ERROR"
    TRANSCRIPTION_ERROR = "TRANSCRIPTION_ERROR"


# ============================================================================
# KEYS
# ============================================================================

CONVERSATION_KEY_PREFIX = "conversation"

# Metadata keys used by the document store
METADATA_KEYS = {
    "type": "type",
    "user_id": "user_id",
    "conversation_id": "conversation_id",
    "chunk_index": "chunk_index",
    "timestamp": "timestamp",
}
