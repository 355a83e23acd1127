"""
Response parsing and repair.

Model output is free-form text that is *supposed* to contain JSON. Every call
site in the engine goes through parse_structured(), which:

1. Strips a single leading/trailing fenced code block marker
   (```json ... ``` or ``` ... ```).
2. Attempts a direct JSON parse.
3. Falls back to the earliest balanced {...} or [...] span that parses, so
   an array wrapped in prose comes back whole.
4. Otherwise raises UnparsableResponse carrying the original text.

An optional expected shape is validated after parsing; a missing field or a
type mismatch raises SchemaViolation naming the field. Nothing here ever
substitutes a default value for unparsable output.

The remaining helpers (lists, markdown sections, code blocks, cleanup) serve
the free-text operations.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type, Union

from zenai_engine.utils.exceptions import (
    ResponseParsingError,
    SchemaViolation,
    UnparsableResponse,
)

# Either a collection of required field names, or field -> expected type(s).
# A None type means "required, any type".
ExpectedShape = Union[Iterable[str], Mapping[str, Union[None, Type, Tuple[Type, ...]]]]

_FENCE_OPEN = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")
_CODE_BLOCK = re.compile(r"```(\w+)?\n([\s\S]*?)```")
_NUMBERED_ITEM = re.compile(r"^\d+[.)]\s+")
_BULLET_ITEM = re.compile(r"^[-*+]\s+")
_HEADER = re.compile(r"^(#{1,6})\s+(.+)$")
_METADATA_LINE = re.compile(r"^([A-Z][a-zA-Z ]+):\s*(.+)$", re.MULTILINE)

_decoder = json.JSONDecoder()
_JSON_OPENER = re.compile(r"[{\[]")


# ============================================================================
# STRUCTURED (JSON) PARSING
# ============================================================================

def strip_code_fence(text: str) -> str:
    """Remove one leading and one trailing ``` marker, with or without a language tag."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
        cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def _first_balanced_value(text: str) -> Tuple[bool, Any]:
    """Scan left to right for the first { or [ where a JSON value decodes."""
    for match in _JSON_OPENER.finditer(text):
        try:
            value, _ = _decoder.raw_decode(text, match.start())
            return True, value
        except json.JSONDecodeError:
            continue
    return False, None


def extract_json(raw_text: str) -> Any:
    """
    Extract the first JSON value from model text.

    Raises:
        UnparsableResponse: If no JSON object or array can be recovered
    """
    if raw_text is None or not str(raw_text).strip():
        raise UnparsableResponse("Empty model response", raw_text=raw_text or "")

    cleaned = strip_code_fence(raw_text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    found, value = _first_balanced_value(cleaned)
    if found:
        return value

    raise UnparsableResponse(
        "No valid JSON found in model response",
        raw_text=raw_text,
        details=f"length={len(raw_text)}",
    )


def _normalize_shape(shape: ExpectedShape) -> Dict[str, Any]:
    if isinstance(shape, Mapping):
        return dict(shape)
    return {field_name: None for field_name in shape}


def _matches_type(value: Any, expected: Union[Type, Tuple[Type, ...]]) -> bool:
    expected_types = expected if isinstance(expected, tuple) else (expected,)
    # bool is an int subclass; JSON true/false must not satisfy a numeric field
    if isinstance(value, bool) and bool not in expected_types:
        return False
    if float in expected_types and isinstance(value, int):
        return True
    return isinstance(value, expected_types)


def _type_name(expected: Union[Type, Tuple[Type, ...]]) -> str:
    if isinstance(expected, tuple):
        return "|".join(t.__name__ for t in expected)
    return expected.__name__


def validate_shape(value: Any, expected_shape: ExpectedShape, raw_text: str = "", prefix: str = "") -> None:
    """
    Validate a parsed object (or every object of a parsed array) against
    expected_shape.

    Raises:
        SchemaViolation: naming the first missing or mistyped field
    """
    shape = _normalize_shape(expected_shape)

    if isinstance(value, list):
        for index, item in enumerate(value):
            validate_shape(item, shape, raw_text=raw_text, prefix=f"{prefix}[{index}].")
        return

    if not isinstance(value, dict):
        raise SchemaViolation(
            f"Expected a JSON object, got {type(value).__name__}",
            raw_text=raw_text,
            field=prefix.rstrip(".") or None,
        )

    for field_name, expected_type in shape.items():
        qualified = f"{prefix}{field_name}"
        if field_name not in value:
            raise SchemaViolation(f"Missing required field: {qualified}", raw_text=raw_text, field=qualified)
        if expected_type is not None and not _matches_type(value[field_name], expected_type):
            raise SchemaViolation(
                f"Invalid type for {qualified}: expected {_type_name(expected_type)}, "
                f"got {type(value[field_name]).__name__}",
                raw_text=raw_text,
                field=qualified,
            )


def parse_structured(raw_text: str, expected_shape: Optional[ExpectedShape] = None) -> Any:
    """
    Parse model text into a JSON value and optionally validate its shape.

    Args:
        raw_text: Model output (may contain fences and surrounding prose)
        expected_shape: Required field names, or a field -> type mapping

    Returns:
        The parsed dict or list

    Raises:
        UnparsableResponse: No JSON could be recovered
        SchemaViolation: The JSON does not match expected_shape
    """
    value = extract_json(raw_text)
    if expected_shape is not None:
        validate_shape(value, expected_shape, raw_text=raw_text)
    return value


@dataclass
class ValidationResult:
    """Non-raising outcome of validate_structure()."""

    valid: bool
    data: Any = None
    error: Optional[str] = None
    field: Optional[str] = None


def validate_structure(raw_text: str, expected_shape: ExpectedShape) -> ValidationResult:
    """Like parse_structured(), but reports failure as a ValidationResult."""
    try:
        return ValidationResult(valid=True, data=parse_structured(raw_text, expected_shape))
    except SchemaViolation as e:
        return ValidationResult(valid=False, error=e.message, field=e.field)
    except ResponseParsingError as e:
        return ValidationResult(valid=False, error=e.message)


# ============================================================================
# FREE-TEXT HELPERS
# ============================================================================

def parse_list(response: str) -> List[str]:
    """
    Extract list items from numbered, bulleted or plain lines.

    Markdown headers and blank lines are skipped.
    """
    items: List[str] = []
    for line in response.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if _NUMBERED_ITEM.match(stripped):
            items.append(_NUMBERED_ITEM.sub("", stripped, count=1))
        elif _BULLET_ITEM.match(stripped):
            items.append(_BULLET_ITEM.sub("", stripped, count=1))
        else:
            items.append(stripped)
    return items


def parse_markdown_sections(response: str) -> Dict[str, str]:
    """
    Split markdown into sections keyed by snake_cased header text.

    Text before the first header is stored under "main".
    """
    sections: Dict[str, str] = {}
    current = "main"
    content: List[str] = []

    for line in response.splitlines():
        header = _HEADER.match(line.strip())
        if header:
            if content:
                sections[current] = "\n".join(content).strip()
            current = re.sub(r"\s+", "_", header.group(2).strip().lower())
            content = []
        else:
            content.append(line)

    if content:
        sections[current] = "\n".join(content).strip()
    return sections


def extract_code_blocks(response: str) -> List[Dict[str, str]]:
    """Return every fenced code block as {"language", "code"} ("text" when untagged)."""
    return [
        {"language": language or "text", "code": code.strip()}
        for language, code in _CODE_BLOCK.findall(response)
    ]


def extract_metadata(response: str) -> Dict[str, str]:
    """Collect "Key: value" lines into a snake_cased mapping."""
    return {
        re.sub(r"\s+", "_", key.strip().lower()): value.strip()
        for key, value in _METADATA_LINE.findall(response)
    }


def clean_response(response: str) -> str:
    """Strip <think> blocks, role prefixes and runs of blank lines."""
    cleaned = response.strip()
    cleaned = re.sub(r"<think>[\s\S]*?</think>", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"^(System|Assistant|AI):\s*", "", cleaned, flags=re.IGNORECASE | re.MULTILINE)
    cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
    return cleaned.strip()
