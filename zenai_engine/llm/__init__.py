"""
Model client layer.

- ModelClient: provider-neutral chat-completion contract.
- LangChainModelClient: OpenAI / Anthropic implementation via LangChain.
- CompletionOptions: per-call overrides (temperature, max tokens, streaming, deadline).
"""

from zenai_engine.llm.model_client import (
    CompletionOptions,
    LangChainModelClient,
    ModelClient,
    create_model_client,
    to_langchain_messages,
)

__all__ = [
    "CompletionOptions",
    "LangChainModelClient",
    "ModelClient",
    "create_model_client",
    "to_langchain_messages",
]
