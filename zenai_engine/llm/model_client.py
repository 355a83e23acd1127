"""
Model client: uniform access to chat-completion providers.

This module defines:
- CompletionOptions: per-call overrides (temperature, max tokens, streaming,
  deadline).
- ModelClient: the abstract contract every component talks to. Given an
  ordered list of role-tagged messages it returns the completion text.
- LangChainModelClient: implementation backed by LangChain chat models
  (ChatOpenAI for "openai", ChatAnthropic for "anthropic").

Errors are mapped at this boundary:
- deadline exceeded            -> ModelTimeoutError
- any provider/SDK failure     -> ProviderError
Nothing is retried here; retry policy belongs to the caller.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import anthropic
import openai
from langchain_anthropic import ChatAnthropic
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from zenai_engine.config.constants import MessageRole, ModelProvider
from zenai_engine.config.settings import config
from zenai_engine.utils.exceptions import (
    ConfigurationError,
    ModelTimeoutError,
    ProviderError,
    ZenAIError,
)
from zenai_engine.utils.logger import logger

TokenCallback = Callable[[str], None]

# SDK timeouts surface as provider exceptions rather than asyncio timeouts
_PROVIDER_TIMEOUTS = (openai.APITimeoutError, anthropic.APITimeoutError)


@dataclass(frozen=True)
class CompletionOptions:
    """Per-call overrides; None falls back to the client's defaults."""

    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    streaming: bool = False
    timeout: Optional[float] = None


def _role_of(message: Any) -> str:
    role = message["role"] if isinstance(message, Mapping) else getattr(message, "role")
    return role.value if isinstance(role, MessageRole) else str(role)


def _content_of(message: Any) -> str:
    if isinstance(message, Mapping):
        return message["content"]
    return getattr(message, "content")


def to_langchain_messages(messages: Sequence[Any]) -> List[BaseMessage]:
    """
    Convert role-tagged messages to LangChain message objects.

    Accepts mappings with "role"/"content" keys or objects exposing
    role/content attributes (e.g. conversation Message records).
    """
    converted: List[BaseMessage] = []
    for message in messages:
        role = _role_of(message)
        content = _content_of(message)
        if role == MessageRole.SYSTEM.value:
            converted.append(SystemMessage(content=content))
        elif role == MessageRole.ASSISTANT.value:
            converted.append(AIMessage(content=content))
        elif role == MessageRole.USER.value:
            converted.append(HumanMessage(content=content))
        else:
            raise ValueError(f"Unsupported message role: {role!r}")
    return converted


def _content_text(content: Any) -> str:
    """Flatten LangChain message content (str or list of blocks) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type", "text") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return "" if content is None else str(content)


class ModelClient(ABC):
    """
    Contract for chat-completion providers.

    Implementations must be safe to share between concurrent callers.
    """

    provider: str = ""
    model_name: str = ""

    def __init__(self) -> None:
        self._ready = False

    async def initialize(self) -> None:
        """Perform any startup work; awaited once before first use."""
        self._ready = True

    @property
    def is_ready(self) -> bool:
        return self._ready

    @abstractmethod
    async def complete(
        self,
        messages: Sequence[Any],
        options: Optional[CompletionOptions] = None,
        on_token: Optional[TokenCallback] = None,
    ) -> str:
        """
        Return the completion text for messages.

        When options.streaming is set, on_token is invoked synchronously for
        every fragment in delivery order and the concatenated text is returned.

        Raises:
            ProviderError: network, auth or rate-limit failure
            ModelTimeoutError: the deadline was exceeded
        """


class LangChainModelClient(ModelClient):
    """
    Model client backed by a LangChain chat model.

    The provider is fixed at construction; an unsupported provider identifier
    fails fast with ConfigurationError.
    """

    def __init__(
        self,
        provider: str,
        model_name: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: Optional[float] = None,
        llm: Optional[BaseChatModel] = None,
    ) -> None:
        super().__init__()
        try:
            self._provider = ModelProvider(provider)
        except ValueError:
            raise ConfigurationError(
                f"Unsupported model provider: {provider!r}",
                details=f"supported={[p.value for p in ModelProvider]}",
            ) from None
        if not 0 <= temperature <= 2:
            raise ConfigurationError(f"temperature must be within [0, 2], got {temperature}")
        if max_tokens <= 0:
            raise ConfigurationError(f"max_tokens must be positive, got {max_tokens}")

        self.provider = self._provider.value
        self.model_name = model_name or ""
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.logger = logger

        self._llm = llm if llm is not None else self._build_llm(api_key)
        self.logger.info(
            f"[LangChainModelClient] Initialized {self.provider} model: {self.model_name or '<default>'}"
        )

    def _build_llm(self, api_key: Optional[str]) -> BaseChatModel:
        try:
            if self._provider is ModelProvider.OPENAI:
                return ChatOpenAI(
                    model=self.model_name or config.LLM_MODEL,
                    api_key=api_key or config.OPENAI_API_KEY or None,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                )
            return ChatAnthropic(
                model=self.model_name or config.ANTHROPIC_MODEL,
                api_key=api_key or config.ANTHROPIC_API_KEY or None,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:  # pragma: no cover - credentials dependent
            raise ConfigurationError(
                f"Failed to initialize {self.provider} chat model: {e}"
            ) from e

    # ------------------------------------------------------------------
    # ModelClient implementation
    # ------------------------------------------------------------------
    async def complete(
        self,
        messages: Sequence[Any],
        options: Optional[CompletionOptions] = None,
        on_token: Optional[TokenCallback] = None,
    ) -> str:
        options = options or CompletionOptions()
        lc_messages = to_langchain_messages(messages)
        runnable = self._bind(options)
        timeout = options.timeout if options.timeout is not None else self.timeout

        if options.streaming:
            call = self._stream(runnable, lc_messages, on_token)
        else:
            call = self._invoke(runnable, lc_messages)

        try:
            if timeout is not None:
                return await asyncio.wait_for(call, timeout=timeout)
            return await call
        except ZenAIError:
            raise
        except asyncio.TimeoutError:
            self.logger.warning(f"[LangChainModelClient] {self.provider} call exceeded {timeout}s")
            raise ModelTimeoutError(timeout) from None
        except _PROVIDER_TIMEOUTS as e:
            raise ModelTimeoutError(timeout, operation=f"{self.provider} request") from e
        except Exception as e:
            self.logger.error(f"[LangChainModelClient] {self.provider} call failed: {e}")
            raise ProviderError(str(e) or type(e).__name__, provider=self.provider) from e

    def _bind(self, options: CompletionOptions):
        overrides: Dict[str, Any] = {}
        if options.temperature is not None and options.temperature != self.temperature:
            overrides["temperature"] = options.temperature
        if options.max_tokens is not None and options.max_tokens != self.max_tokens:
            overrides["max_tokens"] = options.max_tokens
        return self._llm.bind(**overrides) if overrides else self._llm

    async def _invoke(self, runnable, lc_messages: List[BaseMessage]) -> str:
        response = await runnable.ainvoke(lc_messages)
        return _content_text(response.content)

    async def _stream(
        self,
        runnable,
        lc_messages: List[BaseMessage],
        on_token: Optional[TokenCallback],
    ) -> str:
        parts: List[str] = []
        async for chunk in runnable.astream(lc_messages):
            text = _content_text(chunk.content)
            if not text:
                continue
            parts.append(text)
            if on_token is not None:
                on_token(text)
        return "".join(parts)


def create_model_client(
    provider: Optional[str] = None,
    model_name: Optional[str] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    timeout: Optional[float] = None,
) -> LangChainModelClient:
    """
    Build a model client from explicit arguments, falling back to Config.
    """
    provider = provider or config.LLM_PROVIDER
    return LangChainModelClient(
        provider=provider,
        model_name=model_name,
        temperature=config.LLM_TEMPERATURE if temperature is None else temperature,
        max_tokens=max_tokens or config.LLM_MAX_TOKENS,
        timeout=config.LLM_TIMEOUT_SECONDS if timeout is None else timeout,
    )
