"""Tests for the response parser."""

import pytest

from tests.test_response_parser.data import (
    LIST_CASES,
    PARSE_CASES,
    SCHEMA_CASES,
    SHAPE_OK_CASES,
    UNPARSABLE_CASES,
)
from zenai_engine.parsing.response_parser import (
    clean_response,
    extract_code_blocks,
    extract_metadata,
    parse_list,
    parse_markdown_sections,
    parse_structured,
    strip_code_fence,
    validate_structure,
)
from zenai_engine.utils.exceptions import ResponseParsingError, SchemaViolation


@pytest.mark.parametrize("name, raw, expected", PARSE_CASES, ids=[c[0] for c in PARSE_CASES])
def test_parse_structured_recovers_json(name, raw, expected):
    assert parse_structured(raw) == expected


@pytest.mark.parametrize("name, raw, error", UNPARSABLE_CASES, ids=[c[0] for c in UNPARSABLE_CASES])
def test_unparsable_response_keeps_raw_text(name, raw, error):
    with pytest.raises(error) as exc_info:
        parse_structured(raw)
    assert isinstance(exc_info.value, ResponseParsingError)
    assert exc_info.value.raw_text == raw


@pytest.mark.parametrize("name, raw, shape, field", SCHEMA_CASES, ids=[c[0] for c in SCHEMA_CASES])
def test_schema_violation_names_field(name, raw, shape, field):
    with pytest.raises(SchemaViolation) as exc_info:
        parse_structured(raw, shape)
    assert exc_info.value.field == field
    assert exc_info.value.raw_text == raw


@pytest.mark.parametrize("name, raw, shape", SHAPE_OK_CASES, ids=[c[0] for c in SHAPE_OK_CASES])
def test_valid_shapes_pass(name, raw, shape):
    assert parse_structured(raw, shape) is not None


def test_strip_code_fence_only_touches_outer_markers():
    assert strip_code_fence("```python\nprint('x')\n```") == "print('x')"
    assert strip_code_fence("no fence") == "no fence"


def test_validate_structure_reports_instead_of_raising():
    ok = validate_structure('{"title": "t"}', ["title"])
    assert ok.valid and ok.data == {"title": "t"}

    missing = validate_structure('{"title": "t"}', ["title", "priority"])
    assert not missing.valid
    assert missing.field == "priority"

    garbage = validate_structure("nothing here", ["title"])
    assert not garbage.valid
    assert garbage.field is None


@pytest.mark.parametrize("name, text, expected", LIST_CASES, ids=[c[0] for c in LIST_CASES])
def test_parse_list(name, text, expected):
    assert parse_list(text) == expected


def test_parse_markdown_sections_keeps_preamble_under_main():
    sections = parse_markdown_sections("Intro text\n## Key Points\n- a\n## Next Steps\n- b")
    assert sections == {"main": "Intro text", "key_points": "- a", "next_steps": "- b"}


def test_extract_code_blocks_defaults_language():
    text = "```python\nx = 1\n```\nand\n```\nplain\n```"
    assert extract_code_blocks(text) == [
        {"language": "python", "code": "x = 1"},
        {"language": "text", "code": "plain"},
    ]


def test_extract_metadata():
    assert extract_metadata("Owner: Dana\nDue Date: Friday\nlowercase: ignored") == {
        "owner": "Dana",
        "due_date": "Friday",
    }


def test_clean_response_strips_think_blocks_and_prefixes():
    raw = "<think>hidden reasoning</think>\nAssistant: Hello\n\n\n\nWorld"
    assert clean_response(raw) == "Hello\n\nWorld"
