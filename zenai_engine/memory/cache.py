"""
Conversation cache backends.

A conversation cache is a key-value store with per-key TTL:
get(key) -> value | None, set(key, value, ttl_seconds), delete(key).
Values are JSON-serializable structures (lists of message dicts).

- RedisConversationCache: redis.asyncio client, JSON values written with SETEX.
- InMemoryConversationCache: process-local dict with monotonic-clock expiry,
  used for local runs and tests.
"""

from __future__ import annotations

import json
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from zenai_engine.config.settings import config
from zenai_engine.utils.exceptions import CacheError
from zenai_engine.utils.logger import logger


class ConversationCache(ABC):
    """Contract for the external key-value cache holding conversation logs."""

    async def initialize(self) -> None:
        """Connect / warm up; awaited once at startup."""

    async def close(self) -> None:
        """Release connections."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if missing or expired."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store value under key, (re)setting its TTL."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key; missing keys are not an error."""


class RedisConversationCache(ConversationCache):
    """Redis-backed conversation cache."""

    def __init__(self, url: Optional[str] = None, client: Optional[aioredis.Redis] = None) -> None:
        self.url = url or config.REDIS_URL
        self.client = client if client is not None else aioredis.from_url(self.url, decode_responses=True)
        self.logger = logger

    async def initialize(self) -> None:
        try:
            await self.client.ping()
        except RedisError as e:
            raise CacheError(f"Redis is not reachable at {self.url}: {e}") from e
        self.logger.info(f"[RedisConversationCache] Connected to {self.url}")

    async def close(self) -> None:
        await self.client.aclose()

    async def get(self, key: str) -> Optional[Any]:
        try:
            raw = await self.client.get(key)
        except RedisError as e:
            raise CacheError(f"Failed to read cache key '{key}': {e}") from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise CacheError(f"Corrupt cache value under '{key}'", details=str(e)) from e

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        try:
            await self.client.setex(key, ttl_seconds, json.dumps(value, default=str))
        except RedisError as e:
            raise CacheError(f"Failed to write cache key '{key}': {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except RedisError as e:
            raise CacheError(f"Failed to delete cache key '{key}': {e}") from e


class InMemoryConversationCache(ConversationCache):
    """
    Process-local cache with TTL expiry.

    Values are round-tripped through JSON on write so callers never share
    mutable state with the cache.
    """

    def __init__(self) -> None:
        self._data: Dict[str, Tuple[float, str]] = {}

    async def get(self, key: str) -> Optional[Any]:
        entry = self._data.get(key)
        if entry is None:
            return None
        expires_at, raw = entry
        if expires_at <= time.monotonic():
            self._data.pop(key, None)
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        expires_at = time.monotonic() + max(1, int(ttl_seconds))
        self._data[key] = (expires_at, json.dumps(value, default=str))

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def ttl_remaining(self, key: str) -> Optional[float]:
        entry = self._data.get(key)
        if entry is None:
            return None
        return max(0.0, entry[0] - time.monotonic())
