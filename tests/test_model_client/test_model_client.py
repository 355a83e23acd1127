"""Tests for the LangChain-backed model client."""

import asyncio

import httpx
import openai
import pytest
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage
from langchain_core.outputs import ChatGeneration, ChatResult

from tests.test_model_client.data import INVALID_CONSTRUCTION_CASES, ROLE_CASES
from zenai_engine.config.constants import MessageRole
from zenai_engine.llm.model_client import (
    CompletionOptions,
    LangChainModelClient,
    to_langchain_messages,
)
from zenai_engine.memory.conversation_memory import Message
from zenai_engine.utils.exceptions import ConfigurationError, ModelTimeoutError, ProviderError

MESSAGES = [
    {"role": MessageRole.SYSTEM, "content": "You are terse."},
    {"role": MessageRole.USER, "content": "Say hello"},
]


class FailingChatModel(BaseChatModel):
    @property
    def _llm_type(self) -> str:
        return "failing"

    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        raise RuntimeError("connection reset")


class TimingOutChatModel(FailingChatModel):
    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        raise openai.APITimeoutError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))


class SlowChatModel(BaseChatModel):
    @property
    def _llm_type(self) -> str:
        return "slow"

    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        raise NotImplementedError

    async def _agenerate(self, messages, stop=None, run_manager=None, **kwargs):
        await asyncio.sleep(5)
        return ChatResult(generations=[ChatGeneration(message=AIMessage(content="late"))])


def _fake(*replies):
    return GenericFakeChatModel(messages=iter([AIMessage(content=r) if isinstance(r, str) else r for r in replies]))


@pytest.mark.asyncio
async def test_complete_returns_text():
    client = LangChainModelClient("openai", llm=_fake("hello world"))
    assert await client.complete(MESSAGES) == "hello world"


@pytest.mark.asyncio
async def test_streaming_delivers_fragments_in_order():
    client = LangChainModelClient("anthropic", llm=_fake("hello brave new world"))
    tokens = []

    text = await client.complete(MESSAGES, CompletionOptions(streaming=True), on_token=tokens.append)

    assert text == "hello brave new world"
    assert len(tokens) > 1
    assert "".join(tokens) == text


@pytest.mark.asyncio
async def test_per_call_overrides_are_accepted():
    client = LangChainModelClient("openai", temperature=0.7, max_tokens=100, llm=_fake("ok"))
    assert await client.complete(MESSAGES, CompletionOptions(temperature=0.1, max_tokens=10)) == "ok"


@pytest.mark.asyncio
async def test_content_blocks_are_flattened():
    blocks = AIMessage(content=[{"type": "text", "text": "Hello"}, {"type": "text", "text": " there"}])
    client = LangChainModelClient("anthropic", llm=_fake(blocks))
    assert await client.complete(MESSAGES) == "Hello there"


@pytest.mark.asyncio
async def test_provider_failures_map_to_provider_error():
    client = LangChainModelClient("openai", llm=FailingChatModel())

    with pytest.raises(ProviderError) as exc_info:
        await client.complete(MESSAGES)

    assert exc_info.value.provider == "openai"
    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.asyncio
async def test_sdk_timeouts_map_to_model_timeout():
    client = LangChainModelClient("openai", llm=TimingOutChatModel())

    with pytest.raises(ModelTimeoutError):
        await client.complete(MESSAGES)


@pytest.mark.asyncio
@pytest.mark.parametrize("construction_timeout, call_timeout", [(0.05, None), (None, 0.05)], ids=["default", "per-call"])
async def test_deadline_raises_model_timeout(construction_timeout, call_timeout):
    client = LangChainModelClient("openai", timeout=construction_timeout, llm=SlowChatModel())

    with pytest.raises(ModelTimeoutError) as exc_info:
        await client.complete(MESSAGES, CompletionOptions(timeout=call_timeout))

    assert isinstance(exc_info.value, TimeoutError)
    assert exc_info.value.timeout_seconds == 0.05


@pytest.mark.asyncio
async def test_initialize_marks_ready():
    client = LangChainModelClient("openai", llm=_fake("x"))
    assert not client.is_ready
    await client.initialize()
    assert client.is_ready


@pytest.mark.parametrize(
    "name, provider, temperature, max_tokens",
    INVALID_CONSTRUCTION_CASES,
    ids=[c[0] for c in INVALID_CONSTRUCTION_CASES],
)
def test_invalid_construction(name, provider, temperature, max_tokens):
    with pytest.raises(ConfigurationError):
        LangChainModelClient(provider, temperature=temperature, max_tokens=max_tokens, llm=_fake("x"))


@pytest.mark.parametrize("role, expected_type", ROLE_CASES, ids=lambda v: str(v))
def test_role_conversion(role, expected_type):
    [message] = to_langchain_messages([{"role": role, "content": "text"}])
    assert message.type == expected_type
    assert message.content == "text"


def test_conversation_messages_convert_directly():
    converted = to_langchain_messages(
        [Message(role=MessageRole.USER, content="q"), Message(role=MessageRole.ASSISTANT, content="a")]
    )
    assert [m.type for m in converted] == ["human", "ai"]


def test_unknown_role_is_rejected():
    with pytest.raises(ValueError):
        to_langchain_messages([{"role": "tool", "content": "x"}])
