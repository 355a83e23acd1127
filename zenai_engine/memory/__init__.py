"""
Conversational memory and context assembly.

- ConversationCache: key-value cache contract (Redis / in-memory).
- ConversationStore / ConversationMemory: bounded per-conversation message log.
- ContextBuilder / ContextBundle: request-scoped context for agents.
"""

from zenai_engine.memory.cache import (
    ConversationCache,
    InMemoryConversationCache,
    RedisConversationCache,
)
from zenai_engine.memory.context_builder import (
    BuildOptions,
    ContextBuilder,
    ContextBundle,
    estimate_tokens,
    format_project_context,
    format_task_context,
)
from zenai_engine.memory.conversation_memory import (
    ConversationMemory,
    ConversationStore,
    Message,
    truncate_messages_by_budget,
)

__all__ = [
    "ConversationCache",
    "InMemoryConversationCache",
    "RedisConversationCache",
    "BuildOptions",
    "ContextBuilder",
    "ContextBundle",
    "estimate_tokens",
    "format_project_context",
    "format_task_context",
    "ConversationMemory",
    "ConversationStore",
    "Message",
    "truncate_messages_by_budget",
]
