"""
Helper utility functions.

This module contains common utility functions used throughout the engine:
- Text processing utilities
- Timestamp parsing
- Token counting and token-based splitting
- JSON rendering of agent results for prompts
"""

import json
import re
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, List, Optional, Union

import tiktoken
from dateutil import parser as date_parser

from zenai_engine.utils.logger import logger

# Rough estimate used when no tokenizer is available
CHARS_PER_TOKEN = 4


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Union[str, datetime, None]) -> datetime:
    """
    Parse a stored timestamp.

    Accepts ISO strings (as written by Message.to_dict) and datetime objects.
    Naive values are assumed to be UTC; a missing value means "now".

    Example:
        >>> parse_timestamp("2024-12-10T14:30:00+00:00")
        datetime.datetime(2024, 12, 10, 14, 30, tzinfo=tzutc())
    """
    if value is None:
        return utc_now()
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = date_parser.isoparse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date(value: Union[str, datetime]) -> datetime:
    """
    Parse a human-entered date ("Dec 10, 2024", "2024-12-10", "10/12/2024").

    Naive values are assumed to be UTC.

    Raises:
        ValueError: If value is not a recognizable date
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = date_parser.parse(str(value))
        except OverflowError as e:
            raise ValueError(f"Date out of range: {value}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_text(text: str) -> str:
    """
    Normalize text for processing.

    Performs basic text normalization:
    - Removes extra whitespace
    - Trims leading/trailing whitespace

    Example:
        >>> normalize_text("  Hello   world  \\n\\n")
        "Hello world"
    """
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def truncate_text(text: str, max_chars: int, suffix: str = "...") -> str:
    """Shorten text to at most max_chars characters (suffix included)."""
    if len(text) <= max_chars:
        return text
    if max_chars <= len(suffix):
        return text[:max_chars]
    return text[: max_chars - len(suffix)] + suffix


def to_prompt_json(value: Any) -> str:
    """Render a value as indented JSON for inclusion in a prompt."""
    return json.dumps(value, indent=2, default=str, ensure_ascii=False)


@lru_cache(maxsize=1)
def _get_encoding():
    try:
        return tiktoken.get_encoding("cl100k_base")
    except Exception as e:  # pragma: no cover - needs the encoding download
        logger.warning(f"tiktoken encoding unavailable, estimating tokens by length: {e}")
        return None


def count_tokens(text: str) -> int:
    """
    Count the tokens of text with the GPT tokenizer.

    Falls back to ceil(len / 4) when the encoding cannot be loaded.
    """
    if not text:
        return 0
    encoding = _get_encoding()
    if encoding is None:
        return -(-len(text) // CHARS_PER_TOKEN)
    return len(encoding.encode(text))


def split_into_token_chunks(text: str, chunk_tokens: int, overlap: int = 0) -> List[str]:
    """
    Split text into consecutive chunks of at most chunk_tokens tokens.

    Args:
        text: Text to split
        chunk_tokens: Maximum tokens per chunk
        overlap: Tokens shared by adjacent chunks (must be < chunk_tokens)

    Returns:
        List[str]: Chunks in document order ([] for empty text)
    """
    if chunk_tokens <= 0:
        raise ValueError("chunk_tokens must be positive")
    if overlap < 0 or overlap >= chunk_tokens:
        raise ValueError("overlap must be in [0, chunk_tokens)")
    if not text:
        return []

    encoding = _get_encoding()
    if encoding is None:
        size = chunk_tokens * CHARS_PER_TOKEN
        step = size - overlap * CHARS_PER_TOKEN
        return [text[start:start + size] for start in range(0, len(text), step)]

    tokens = encoding.encode(text)
    chunks: List[str] = []
    start = 0
    while start < len(tokens):
        end = min(start + chunk_tokens, len(tokens))
        chunks.append(encoding.decode(tokens[start:end]))
        if end == len(tokens):
            break
        start = end - overlap
    return chunks


def preview(text: Optional[str], limit: int = 100) -> str:
    """Single-line preview of text for log messages."""
    return normalize_text(text or "")[:limit]
