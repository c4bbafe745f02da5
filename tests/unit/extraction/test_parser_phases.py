"""Unit tests for the escalating recovery phases of the extraction parser."""

import json

import pytest

from ledger_agent.core.exceptions import ExtractionFailure
from ledger_agent.core.types import Failure, Success
from ledger_agent.extraction.parser import (
    ExtractionParser,
    extract_json,
    extract_or_none,
    extract_payload,
    project_envelope,
)

pytestmark = pytest.mark.unit


class TestDirectPhase:
    """Clean JSON passes straight through."""

    @pytest.mark.parametrize(
        "text",
        [
            '{"a": 1, "b": [true, null]}',
            "[1, 2, 3]",
            '  {"padded": "whitespace"}\n',
            '"just a string"',
            "42",
        ],
    )
    def test_valid_json_matches_json_loads(self, text):
        result = extract_json(text)
        assert isinstance(result, Success)
        assert result.value == json.loads(text)

    def test_direct_phase_is_reported(self):
        outcome = ExtractionParser().parse('{"a": 1}')
        assert outcome.ok
        assert outcome.phase == "direct"
        assert outcome.candidate.confidence == 1.0


class TestFencedPhase:
    """Markdown code fences around the payload."""

    def test_fenced_reply_is_unwrapped_from_envelope(self, grocery_reply):
        result = extract_payload(grocery_reply)
        assert isinstance(result, Success)
        assert result.value == {
            "suggested_category": "Groceries",
            "confidence_score": 0.92,
            "alternative_categories": ["Dining Out"],
            "reasoning": "matches grocery keywords",
        }

    def test_fenced_content_equals_parsing_fence_alone(self):
        body = '{"items": [1, 2], "note": "ok"}'
        text = f"Intro prose.\n```\n{body}\n```\nOutro prose."
        outcome = ExtractionParser().parse(text)
        assert outcome.phase == "fenced"
        assert outcome.result.value == json.loads(body)

    def test_first_parseable_fence_wins(self):
        text = "```\nnot json\n```\nthen\n```json\n{\"a\": 2}\n```\n```json\n{\"a\": 3}\n```"
        result = extract_json(text)
        assert isinstance(result, Success)
        assert result.value == {"a": 2}

    def test_fence_takes_precedence_over_earlier_bare_object(self):
        text = 'Example {"x": 0} and the answer:\n```JSON\n{"y": 1}\n```'
        outcome = ExtractionParser().parse(text)
        assert outcome.phase == "fenced"
        assert outcome.result.value == {"y": 1}


class TestBalancedPhase:
    """Balanced-delimiter scan over prose-wrapped payloads."""

    def test_object_between_prose_is_recovered_exactly(self):
        embedded = '{"a": {"b": [1, 2]}, "c": "d"}'
        outcome = ExtractionParser().parse(f"The answer is {embedded} hope that helps")
        assert outcome.phase == "balanced"
        assert outcome.result.value == json.loads(embedded)

    def test_brace_inside_string_value_is_preserved(self):
        result = extract_json('Here: {"note": "a {weird} string"} done')
        assert isinstance(result, Success)
        assert result.value == {"note": "a {weird} string"}

    def test_escaped_quotes_do_not_end_string(self):
        result = extract_json(r'Reply: {"quote": "she said \"}\" twice", "n": 1}.')
        assert isinstance(result, Success)
        assert result.value == {"quote": 'she said "}" twice', "n": 1}

    def test_top_level_array_in_prose(self):
        result = extract_json('Categories: ["Rent", "Other"] as requested')
        assert isinstance(result, Success)
        assert result.value == ["Rent", "Other"]

    def test_unparseable_bracket_in_prose_is_skipped(self):
        result = extract_json("[Bob's list] is below: {\"a\": 1}")
        assert isinstance(result, Success)
        assert result.value == {"a": 1}

    def test_mismatched_closer_resumes_at_next_opener(self):
        result = extract_json('weird {] then {"a": 1}')
        assert isinstance(result, Success)
        assert result.value == {"a": 1}

    @pytest.mark.parametrize(
        "text",
        [
            'Budget tip {see below. Here is the answer: {"result": {"a": 1}}',
            'Oops :-[ anyway: {"result": {"a": 1}}',
        ],
    )
    def test_stray_opener_before_payload(self, text):
        outcome = ExtractionParser().parse(text)
        assert outcome.phase == "balanced"
        assert outcome.payload().value == {"a": 1}

    def test_unicode_text_around_payload(self):
        result = extract_json('結果: {"説明": "食料品"} です')
        assert isinstance(result, Success)
        assert result.value == {"説明": "食料品"}


class TestLenientPhase:
    """Bounded repairs applied after every strict attempt failed."""

    def test_single_quotes_and_trailing_comma(self, single_quoted_summary_reply):
        outcome = ExtractionParser().parse(single_quoted_summary_reply)
        assert outcome.phase == "lenient"
        assert outcome.result.value == {
            "summary": "spent a lot",
            "insights": [],
            "recommendations": [],
            "statistics": {
                "total_spend": 120.5,
                "top_category": "Rent",
                "unusual_patterns": [],
            },
        }

    def test_bare_keys_and_python_literals(self):
        result = extract_json("Answer: {name: 'x', ok: True, missing: None}")
        assert isinstance(result, Success)
        assert result.value == {"name": "x", "ok": True, "missing": None}

    def test_comments_inside_object(self):
        result = extract_json('{"a": 1, /* note */ "b": 2 // end\n}')
        assert isinstance(result, Success)
        assert result.value == {"a": 1, "b": 2}

    def test_lenient_repair_inside_fence(self):
        text = "```json\n{'a': [1, 2,],}\n```"
        outcome = ExtractionParser().parse(text)
        assert outcome.phase == "lenient"
        assert outcome.result.value == {"a": [1, 2]}


class TestFailures:
    """Definitive failure outcomes."""

    @pytest.mark.parametrize(
        "text",
        [
            "{not valid json at all",
            "",
            "   \n\t",
            "no structure here, just words",
            '{"a": NaN}',
            "Infinity",
        ],
    )
    def test_returns_extraction_failure(self, text):
        result = extract_json(text)
        assert isinstance(result, Failure)
        assert isinstance(result.error, ExtractionFailure)

    def test_truncated_object_is_not_partially_returned(self):
        text = (
            '{"result": {"suggested_category": "Groceries", '
            '"confidence_score": 0.92}'
        )
        assert isinstance(extract_json(text), Failure)

    def test_truncated_object_after_prose(self):
        text = 'Here you go: {"a": {"b": 1}, "c": [1, 2'
        assert isinstance(extract_json(text), Failure)

    def test_truncated_fence(self):
        text = '```json\n{"a": {"b": 1}, "c": 2\n'
        assert isinstance(extract_json(text), Failure)

    def test_failure_lists_attempted_phases(self):
        result = extract_json("{not valid json at all")
        assert result.error.phases == ("direct", "fenced", "balanced", "lenient")

    @pytest.mark.parametrize("raw", [None, 42, ["{}"], {"text": "{}"}])
    def test_non_text_input_fails(self, raw):
        result = ExtractionParser().extract_json(raw)
        assert isinstance(result, Failure)
        assert "expected text" in str(result.error)

    def test_bytes_input_is_decoded(self):
        result = ExtractionParser().extract_json('{"café": 1}'.encode())
        assert isinstance(result, Success)
        assert result.value == {"café": 1}


class TestEnvelope:
    """Projection through the ``result`` envelope."""

    def test_envelope_value_is_returned(self):
        assert extract_or_none('{"result": [1, 2]}') == [1, 2]

    def test_bare_payload_is_returned_whole(self):
        assert extract_or_none('{"data": 1}') == {"data": 1}

    def test_null_envelope_is_success_with_none(self):
        result = extract_payload('{"result": null}')
        assert isinstance(result, Success)
        assert result.value is None

    def test_envelope_only_applies_to_objects(self):
        assert project_envelope(["result"]) == ["result"]

    def test_extract_or_none_on_failure(self):
        assert extract_or_none("nothing") is None


class TestParserOptions:
    """Size limits and diagnostics."""

    def test_diagnostics_record_phases(self, grocery_reply):
        outcome = ExtractionParser(enable_diagnostics=True).parse(grocery_reply)
        diagnostics = outcome.diagnostics
        assert diagnostics.attempted_phases == ["direct", "fenced"]
        assert diagnostics.successful_phase == "fenced"
        assert diagnostics.candidate_count == 2
        assert "direct" in diagnostics.phase_errors
        assert diagnostics.extraction_duration_ms is not None

    def test_diagnostics_disabled_by_default(self):
        assert ExtractionParser().parse("{}").diagnostics is None

    def test_oversized_input_is_truncated(self):
        parser = ExtractionParser(max_text_size=5, enable_diagnostics=True)
        outcome = parser.parse('{"a": 1}')
        assert isinstance(outcome.result, Failure)
        assert outcome.diagnostics.to_dict()["flags"] == ["truncated_input"]

    def test_invalid_max_text_size(self):
        with pytest.raises(ValueError, match="max_text_size"):
            ExtractionParser(max_text_size=0)
