"""
Pytest configuration and shared fixtures for tests.

Every collaborator that would reach the network (model providers, Redis,
embeddings) is replaced by an in-process fake defined here.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

import pytest

from zenai_engine.agents.base_agent import AgentInterface
from zenai_engine.agents.registry import AgentRegistry
from zenai_engine.config.constants import AgentType
from zenai_engine.llm.model_client import CompletionOptions, ModelClient
from zenai_engine.memory.cache import InMemoryConversationCache
from zenai_engine.memory.context_builder import ContextBuilder, ContextBundle
from zenai_engine.memory.conversation_memory import ConversationStore
from zenai_engine.retrieval.document_store import DocumentInput, DocumentStore, RetrievedDocument

Reply = Union[str, BaseException]


class ScriptedModelClient(ModelClient):
    """
    Model client returning scripted replies in order.

    A reply that is an exception is raised instead of returned. A callable
    script receives the user prompt and returns the reply.
    """

    provider = "scripted"
    model_name = "scripted"

    def __init__(self, replies: Union[Sequence[Reply], Callable[[str], Reply]] = (), delay: float = 0.0) -> None:
        super().__init__()
        self._script = replies if callable(replies) else list(replies)
        self.delay = delay
        self.calls: List[List[Dict[str, Any]]] = []

    @property
    def prompts(self) -> List[str]:
        """User prompt of every call, in call order."""
        return [messages[-1]["content"] for messages in self.calls]

    async def complete(self, messages, options: Optional[CompletionOptions] = None, on_token=None) -> str:
        self.calls.append([{"role": m["role"], "content": m["content"]} for m in messages])
        if self.delay:
            await asyncio.sleep(self.delay)
        if callable(self._script):
            reply = self._script(messages[-1]["content"])
        else:
            if not self._script:
                raise AssertionError("ScriptedModelClient ran out of replies")
            reply = self._script.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


class StubAgent(AgentInterface):
    """Specialist stand-in recording every run() call."""

    def __init__(
        self,
        agent_type: AgentType,
        output: Reply = "ok",
        delay: float = 0.0,
    ) -> None:
        self.agent_type = agent_type
        self.output = output
        self.delay = delay
        self.calls: List[Dict[str, Any]] = []
        self.cancelled = False

    def get_agent_type(self) -> AgentType:
        return self.agent_type

    async def run(self, input: str, context: Optional[ContextBundle] = None, previous_results=None) -> str:
        self.calls.append({"input": input, "context": context, "previous_results": previous_results})
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if isinstance(self.output, BaseException):
            raise self.output
        return self.output


class FakeDocumentStore(DocumentStore):
    """Returns stored documents in insertion order with fixed scores. add_error makes indexing fail."""

    def __init__(self, documents: Sequence[RetrievedDocument] = (), add_error: Optional[BaseException] = None) -> None:
        self.documents = list(documents)
        self.add_error = add_error
        self.added: List[DocumentInput] = []
        self.queries: List[Dict[str, Any]] = []

    async def similarity_search(self, query: str, k: int = 3, filter: Optional[Mapping[str, Any]] = None):
        self.queries.append({"query": query, "k": k, "filter": filter})
        matches = [
            doc for doc in self.documents
            if not filter or all(doc.metadata.get(key) == value for key, value in filter.items())
        ]
        return matches[:k]

    async def add_documents(self, items: Sequence[DocumentInput]) -> List[str]:
        if self.add_error is not None:
            raise self.add_error
        self.added.extend(items)
        return [item.id or f"doc-{len(self.added)}" for item in items]

    async def delete(self, filter: Mapping[str, Any]) -> None:
        self.documents = [
            doc for doc in self.documents
            if not all(doc.metadata.get(key) == value for key, value in filter.items())
        ]


def routing_reply(agents: Sequence[str], workflow: Optional[str] = "sequential") -> str:
    """A classifier reply as the router expects it."""
    payload: Dict[str, Any] = {"agents": list(agents), "reasoning": "test routing", "expectedOutput": "text"}
    if workflow is not None:
        payload["workflow"] = workflow
    return json.dumps(payload)


@pytest.fixture
def cache() -> InMemoryConversationCache:
    return InMemoryConversationCache()


@pytest.fixture
def conversation_store(cache) -> ConversationStore:
    return ConversationStore(cache, max_messages=10, ttl_seconds=60)


@pytest.fixture
def document_store() -> FakeDocumentStore:
    return FakeDocumentStore(
        [
            RetrievedDocument(content="Sprint 12 release notes", metadata={"type": "doc"}, score=0.92, id="d1"),
            RetrievedDocument(content="Incident post-mortem", metadata={"type": "incident"}, score=0.65, id="d2"),
        ]
    )


@pytest.fixture
def context_builder(conversation_store, document_store) -> ContextBuilder:
    return ContextBuilder(conversation_store, document_store, max_context_chars=1000, default_top_k=3)


@pytest.fixture
def stub_agents() -> Dict[AgentType, StubAgent]:
    return {
        agent_type: StubAgent(agent_type, output=f"{agent_type.value} result")
        for agent_type in AgentType.specialists()
    }


@pytest.fixture
def registry(stub_agents) -> AgentRegistry:
    return AgentRegistry(stub_agents)
