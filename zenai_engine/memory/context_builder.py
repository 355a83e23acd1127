"""
Context builder.

Assembles the request-scoped ContextBundle consumed by agents:
conversation history (truncated to a character budget), similarity-search
results from the document store, and caller-supplied metadata.

build() never mutates memory; save_interaction() is the only write path
into conversational memory and is called by the orchestrator once a request
has fully succeeded.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from zenai_engine.config.constants import MessageRole
from zenai_engine.config.settings import config
from zenai_engine.memory.conversation_memory import ConversationStore, Message
from zenai_engine.retrieval.document_store import DocumentInput, DocumentStore, RetrievedDocument
from zenai_engine.utils.helpers import count_tokens, to_prompt_json
from zenai_engine.utils.logger import logger


@dataclass(frozen=True)
class BuildOptions:
    """Options of ContextBuilder.build()."""

    include_history: bool = True
    include_documents: bool = True
    top_k: Optional[int] = None
    filter: Optional[Dict[str, Any]] = None
    additional_context: Optional[Dict[str, Any]] = None
    max_chars: Optional[int] = None


@dataclass(frozen=True)
class ContextBundle:
    """Everything an agent needs to know about one request. Never persisted."""

    query: str
    conversation_history: Tuple[Message, ...] = ()
    relevant_documents: Tuple[RetrievedDocument, ...] = ()
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def empty(cls, query: str = "", metadata: Optional[Mapping[str, Any]] = None) -> "ContextBundle":
        return cls(query=query, metadata=dict(metadata or {}))

    def with_metadata(self, **extra: Any) -> "ContextBundle":
        """Copy of the bundle with extra metadata merged in."""
        return replace(self, metadata={**self.metadata, **extra})

    @property
    def is_empty(self) -> bool:
        return not (self.conversation_history or self.relevant_documents or self.metadata)

    def to_prompt(self) -> str:
        """Render history, documents and metadata as prompt text."""
        sections: List[str] = []
        if self.conversation_history:
            lines = [f"{m.role.value}: {m.content}" for m in self.conversation_history]
            sections.append("Conversation so far:\n" + "\n".join(lines))
        if self.relevant_documents:
            lines = [
                f"[{i}] ({doc.relevance.value}, score={doc.score:.2f}) {doc.content}"
                for i, doc in enumerate(self.relevant_documents, start=1)
            ]
            sections.append("Relevant documents:\n" + "\n".join(lines))
        if self.metadata:
            sections.append("Additional context:\n" + to_prompt_json(self.metadata))
        return "\n\n".join(sections)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "conversation_history": [m.to_dict() for m in self.conversation_history],
            "relevant_documents": [d.to_dict() for d in self.relevant_documents],
            "metadata": dict(self.metadata),
        }


class ContextBuilder:
    """
    Builds ContextBundles and records finished interactions.

    Collaborators are injected: a ConversationStore for history and an
    optional DocumentStore for retrieval.
    """

    def __init__(
        self,
        conversation_store: ConversationStore,
        document_store: Optional[DocumentStore] = None,
        max_context_chars: Optional[int] = None,
        default_top_k: Optional[int] = None,
    ) -> None:
        self.conversation_store = conversation_store
        self.document_store = document_store
        self.max_context_chars = config.MAX_CONTEXT_CHARS if max_context_chars is None else max_context_chars
        self.default_top_k = config.TOP_K_RESULTS if default_top_k is None else default_top_k
        self.logger = logger

    async def build(
        self,
        query: str,
        options: Optional[BuildOptions] = None,
        user_id: Optional[str] = None,
        conversation_id: Optional[str] = None,
    ) -> ContextBundle:
        """
        Assemble the context for query.

        History is read only when both ids are given; documents only when a
        document store is configured. Both reads run concurrently.
        """
        options = options or BuildOptions()

        async def _history() -> List[Message]:
            if not (options.include_history and user_id and conversation_id):
                return []
            memory = self.conversation_store.memory(user_id, conversation_id)
            return await memory.truncate_by_budget(options.max_chars or self.max_context_chars)

        async def _documents() -> List[RetrievedDocument]:
            if not options.include_documents or self.document_store is None:
                return []
            return await self.document_store.similarity_search(
                query,
                k=options.top_k or self.default_top_k,
                filter=options.filter,
            )

        history, documents = await asyncio.gather(_history(), _documents())

        self.logger.debug(
            f"[ContextBuilder] Built context: {len(history)} message(s), {len(documents)} document(s)"
        )
        return ContextBundle(
            query=query,
            conversation_history=tuple(history),
            relevant_documents=tuple(documents),
            metadata=dict(options.additional_context or {}),
        )

    async def save_interaction(
        self,
        user_id: str,
        conversation_id: str,
        user_message: str,
        assistant_response: str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """
        Append the user message and the assistant response as one write.

        When metadata["index_for_retrieval"] is true the exchange is indexed
        in the document store first; memory is written last, so a failed
        indexing call leaves the conversation untouched.
        """
        metadata = dict(metadata or {})
        memory = self.conversation_store.memory(user_id, conversation_id)

        if metadata.get("index_for_retrieval") and self.document_store is not None:
            await self.document_store.add_documents(
                [
                    DocumentInput(
                        content=f"User: {user_message}\nAssistant: {assistant_response}",
                        metadata={
                            **{k: v for k, v in metadata.items() if k != "index_for_retrieval"},
                            "type": "conversation",
                            "user_id": user_id,
                            "conversation_id": conversation_id,
                        },
                    )
                ]
            )

        await memory.extend(
            [
                (MessageRole.USER, user_message, metadata),
                (MessageRole.ASSISTANT, assistant_response, metadata),
            ]
        )
        self.logger.info(f"[ContextBuilder] Saved interaction for {memory.key}")

    async def summarize_context(self, user_id: str, conversation_id: str) -> Dict[str, Any]:
        memory = self.conversation_store.memory(user_id, conversation_id)
        history = await memory.history()
        return {
            "message_count": len(history),
            "total_tokens": estimate_tokens(history),
            "summary": await memory.summarize(),
        }

    async def clear(self, user_id: str, conversation_id: str) -> None:
        await self.conversation_store.memory(user_id, conversation_id).clear()


def estimate_tokens(messages: Sequence[Message]) -> int:
    """Token count of the messages' content (tiktoken, else ~4 chars per token)."""
    return sum(count_tokens(m.content) for m in messages)


# ============================================================================
# RECORD FORMATTERS
# ============================================================================

def _record_id(record: Mapping[str, Any]) -> Any:
    return record.get("id", record.get("_id"))


def _name_of(value: Any) -> Optional[str]:
    if isinstance(value, Mapping):
        return value.get("name")
    return value


def format_project_context(
    project: Mapping[str, Any],
    tasks: Sequence[Mapping[str, Any]] = (),
    team: Sequence[Mapping[str, Any]] = (),
) -> Dict[str, Any]:
    """Shape a project record, its tasks and team into additional context."""

    def _assigned_to(member_id: Any) -> int:
        return sum(
            1 for t in tasks
            if isinstance(t.get("assignee"), Mapping) and _record_id(t["assignee"]) == member_id
        )

    return {
        "type": "project",
        "project": {
            "id": _record_id(project),
            "name": project.get("name"),
            "description": project.get("description"),
            "status": project.get("status"),
            "priority": project.get("priority"),
            "progress": project.get("progress"),
            "deadline": project.get("deadline"),
            "tags": list(project.get("tags") or []),
        },
        "tasks": {
            "total": len(tasks),
            "completed": sum(1 for t in tasks if t.get("status") == "done"),
            "in_progress": sum(1 for t in tasks if t.get("status") == "in-progress"),
            "todo": sum(1 for t in tasks if t.get("status") == "todo"),
            "list": [
                {
                    "id": _record_id(t),
                    "title": t.get("title"),
                    "status": t.get("status"),
                    "priority": t.get("priority"),
                    "assignee": _name_of(t.get("assignee")),
                }
                for t in tasks
            ],
        },
        "team": {
            "size": len(team),
            "members": [
                {
                    "id": _record_id(m),
                    "name": m.get("name"),
                    "role": m.get("role"),
                    "tasks_assigned": _assigned_to(_record_id(m)),
                }
                for m in team
            ],
        },
    }


def format_task_context(
    task: Mapping[str, Any],
    related_tasks: Sequence[Mapping[str, Any]] = (),
) -> Dict[str, Any]:
    """Shape a task record and its related tasks into additional context."""
    project = task.get("project")
    return {
        "type": "task",
        "task": {
            "id": _record_id(task),
            "title": task.get("title"),
            "description": task.get("description"),
            "status": task.get("status"),
            "priority": task.get("priority"),
            "estimated_time": task.get("estimatedTime", task.get("estimated_time")),
            "due_date": task.get("dueDate", task.get("due_date")),
            "tags": list(task.get("tags") or []),
            "assignee": _name_of(task.get("assignee")),
        },
        "related": [
            {"id": _record_id(t), "title": t.get("title"), "relation": t.get("relation", "dependency")}
            for t in related_tasks
        ],
        "project": (
            {"id": _record_id(project), "name": project.get("name")}
            if isinstance(project, Mapping)
            else None
        ),
    }
