"""
Response parsing module.

Extracts structured JSON from free-form model text and validates it against
an expected shape; also hosts the free-text helpers (lists, markdown sections,
code blocks, cleanup).
"""

from zenai_engine.parsing.response_parser import (
    ValidationResult,
    clean_response,
    extract_code_blocks,
    extract_json,
    extract_metadata,
    parse_list,
    parse_markdown_sections,
    parse_structured,
    strip_code_fence,
    validate_shape,
    validate_structure,
)

__all__ = [
    "ValidationResult",
    "clean_response",
    "extract_code_blocks",
    "extract_json",
    "extract_metadata",
    "parse_list",
    "parse_markdown_sections",
    "parse_structured",
    "strip_code_fence",
    "validate_shape",
    "validate_structure",
]
