"""
Bounded conversational memory.

A conversation is an ordered log of Message records keyed by
(user_id, conversation_id) and persisted in a ConversationCache under
"conversation:{user_id}:{conversation_id}" with a sliding TTL refreshed on
every write.

Invariants:
- At most max_messages messages are retained; the oldest are evicted first.
- Writes to the same key are serialized by a per-key asyncio.Lock owned by
  the ConversationStore, so concurrent appends neither lose messages nor let
  a reader observe more than max_messages entries.
- A read-miss (expired or never written) is an empty history, not an error.
"""

from __future__ import annotations

import asyncio
import weakref
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from zenai_engine.config.constants import CONVERSATION_KEY_PREFIX, MessageRole
from zenai_engine.config.settings import config
from zenai_engine.memory.cache import ConversationCache
from zenai_engine.utils.exceptions import CacheError
from zenai_engine.utils.helpers import parse_timestamp, utc_now
from zenai_engine.utils.logger import logger

RoleLike = Union[MessageRole, str]


@dataclass(frozen=True)
class Message:
    """One immutable conversation entry."""

    role: MessageRole
    content: str
    timestamp: datetime = field(default_factory=utc_now)
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Message":
        return cls(
            role=MessageRole(data["role"]),
            content=data.get("content", ""),
            timestamp=parse_timestamp(data.get("timestamp")),
            metadata=dict(data.get("metadata") or {}),
        )


def _as_role(role: RoleLike) -> MessageRole:
    if isinstance(role, MessageRole):
        return role
    try:
        return MessageRole(role)
    except ValueError:
        raise ValueError(f"Unsupported message role: {role!r}") from None


def truncate_messages_by_budget(messages: Sequence[Message], max_chars: int) -> List[Message]:
    """
    Keep the most recent messages whose combined content fits max_chars.

    Messages are taken newest-first until the next one would exceed the
    budget, then returned oldest-first. When the newest message alone is
    larger than the budget it is returned on its own, cut to max_chars.
    """
    if max_chars <= 0 or not messages:
        return []

    selected: List[Message] = []
    total = 0
    for message in reversed(messages):
        size = len(message.content)
        if total + size > max_chars:
            break
        selected.append(message)
        total += size

    if not selected:
        newest = messages[-1]
        return [replace(newest, content=newest.content[:max_chars])]

    selected.reverse()
    return selected


class ConversationStore:
    """
    Hands out ConversationMemory views over one cache and owns the per-key
    write locks. A lock lives only while some task holds or awaits it.
    """

    def __init__(
        self,
        cache: ConversationCache,
        max_messages: Optional[int] = None,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        self.cache = cache
        self.max_messages = config.CONVERSATION_MAX_MESSAGES if max_messages is None else max_messages
        self.ttl_seconds = config.CONVERSATION_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        if self.max_messages <= 0:
            raise ValueError("max_messages must be positive")
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()
        self.logger = logger

    @staticmethod
    def key_for(user_id: str, conversation_id: str) -> str:
        return f"{CONVERSATION_KEY_PREFIX}:{user_id}:{conversation_id}"

    def lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def memory(self, user_id: str, conversation_id: str) -> "ConversationMemory":
        return ConversationMemory(self, user_id, conversation_id)

    # ------------------------------------------------------------------
    # Persistence helpers (callers hold the key lock for writes)
    # ------------------------------------------------------------------
    async def load(self, key: str) -> List[Message]:
        stored = await self.cache.get(key)
        if not stored:
            return []
        if not isinstance(stored, list):
            raise CacheError(f"Unexpected value type under '{key}': {type(stored).__name__}")
        return [Message.from_dict(item) for item in stored]

    async def save(self, key: str, messages: Sequence[Message]) -> None:
        await self.cache.set(key, [m.to_dict() for m in messages], self.ttl_seconds)


class ConversationMemory:
    """View over a single (user, conversation) log."""

    def __init__(self, store: ConversationStore, user_id: str, conversation_id: str) -> None:
        if not user_id or not conversation_id:
            raise ValueError("user_id and conversation_id are required")
        self.store = store
        self.user_id = user_id
        self.conversation_id = conversation_id
        self.key = store.key_for(user_id, conversation_id)
        self.logger = logger

    @property
    def max_messages(self) -> int:
        return self.store.max_messages

    async def append(
        self,
        role: RoleLike,
        content: str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Message:
        """Append one message, evicting the oldest beyond max_messages."""
        [message] = await self.extend([(role, content, metadata)])
        return message

    async def extend(
        self,
        entries: Iterable[Tuple[RoleLike, str, Optional[Mapping[str, Any]]]],
    ) -> List[Message]:
        """Append several messages under one lock acquisition and one write."""
        new_messages = [
            Message(role=_as_role(role), content=content, metadata=dict(metadata or {}))
            for role, content, metadata in entries
        ]
        async with self.store.lock_for(self.key):
            history = await self.store.load(self.key)
            history.extend(new_messages)
            evicted = max(0, len(history) - self.max_messages)
            if evicted:
                history = history[evicted:]
            await self.store.save(self.key, history)

        self.logger.debug(
            f"[ConversationMemory] {self.key}: +{len(new_messages)} message(s), "
            f"{len(history)} retained, {evicted} evicted"
        )
        return new_messages

    async def history(self) -> List[Message]:
        """Retained messages, oldest first."""
        return await self.store.load(self.key)

    async def clear(self) -> None:
        async with self.store.lock_for(self.key):
            await self.store.cache.delete(self.key)
        self.logger.info(f"[ConversationMemory] Cleared {self.key}")

    async def truncate_by_budget(self, max_chars: int) -> List[Message]:
        return truncate_messages_by_budget(await self.history(), max_chars)

    async def summarize(self) -> Dict[str, Any]:
        messages = await self.history()
        return {
            "message_count": len(messages),
            "user_messages": sum(1 for m in messages if m.role is MessageRole.USER),
            "assistant_messages": sum(1 for m in messages if m.role is MessageRole.ASSISTANT),
            "first_message": messages[0].content[:100] if messages else None,
            "last_message": messages[-1].content[:100] if messages else None,
        }
