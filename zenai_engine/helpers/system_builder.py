from __future__ import annotations

from logging import Logger
from typing import Optional

from zenai_engine.agents.orchestrator_system import OrchestratorSystem
from zenai_engine.agents.registry import build_default_agents
from zenai_engine.config.settings import config
from zenai_engine.llm.model_client import ModelClient, create_model_client
from zenai_engine.memory.cache import ConversationCache, RedisConversationCache
from zenai_engine.memory.context_builder import ContextBuilder
from zenai_engine.memory.conversation_memory import ConversationStore
from zenai_engine.prompts.templates import PromptRenderer
from zenai_engine.retrieval.document_store import ChromaDocumentStore, DocumentStore
from zenai_engine.tools.transcription import WhisperTranscriptionService
from zenai_engine.utils.exceptions import (
    AgentError,
    CacheError,
    ConfigurationError,
    RetrievalError,
)
from zenai_engine.utils.logger import logger


async def _init_memory(
    log: Logger,
    cache: Optional[ConversationCache],
    document_store: Optional[DocumentStore],
) -> ContextBuilder:
    cache = cache or RedisConversationCache()
    try:
        await cache.initialize()
        log.info("✓ Conversation cache ready")
    except CacheError as e:
        log.error(f"✗ Conversation cache unavailable: {e}", exc_info=True)
        raise e

    if document_store is None:
        document_store = ChromaDocumentStore()
    try:
        await document_store.initialize()
        log.info("✓ Document store ready")
    except RetrievalError as e:
        log.error(f"✗ Document store unavailable: {e}", exc_info=True)
        raise e

    return ContextBuilder(ConversationStore(cache), document_store)


async def init_system(
    model_client: Optional[ModelClient] = None,
    cache: Optional[ConversationCache] = None,
    document_store: Optional[DocumentStore] = None,
    renderer: Optional[PromptRenderer] = None,
) -> tuple[Logger, OrchestratorSystem]:
    """
    Wire and initialize the full system from Config.

    Every collaborator can be passed in; missing ones are built from
    settings (Redis cache, Chroma store, provider model client).
    """
    log: Logger = logger
    log.info("Starting ZenAI engine")

    missing = config.missing_settings()
    if missing and model_client is None:
        message = f"Missing required settings: {', '.join(missing)}"
        log.error(message)
        raise ConfigurationError(message)

    try:
        context_builder = await _init_memory(log, cache, document_store)
    except (CacheError, RetrievalError, ConfigurationError) as e:
        log.error(f"Failed to initialize memory layer: {e}", exc_info=True)
        raise e
    except Exception as e:
        log.error(f"Unexpected error during memory initialization: {e}", exc_info=True)
        raise e

    # Initialize orchestrator and agents
    renderer = renderer or PromptRenderer()
    try:
        client = model_client or create_model_client()
        agents = build_default_agents(
            model_client=model_client,
            renderer=renderer,
            transcription_service=WhisperTranscriptionService(),
        )
        orchestrator = OrchestratorSystem(
            client,
            agents,
            context_builder=context_builder,
            renderer=renderer,
        )
        await orchestrator.initialize()
    except (AgentError, ConfigurationError) as e:
        log.error(f"Failed to initialize agents: {e}", exc_info=True)
        raise e
    except Exception as e:
        log.error(f"Unexpected error initializing agents: {e}", exc_info=True)
        raise e

    return log, orchestrator
