"""Recovery of JSON payloads from free-form agent replies."""

from .candidates import find_balanced_candidates, find_fenced_blocks, scan_delimited
from .normalize import normalize_lenient, strip_commentary
from .parser import (
    ExtractionOutcome,
    ExtractionParser,
    decode_strict,
    extract_json,
    extract_or_none,
    extract_payload,
    project_envelope,
)
from .projection import (
    parse_category_suggestion,
    parse_financial_summary,
    parse_record,
    project_record,
)

__all__ = [
    # Parser
    "ExtractionParser",
    "ExtractionOutcome",
    "extract_json",
    "extract_payload",
    "extract_or_none",
    "decode_strict",
    "project_envelope",
    # Candidate discovery and repair
    "find_fenced_blocks",
    "find_balanced_candidates",
    "scan_delimited",
    "normalize_lenient",
    "strip_commentary",
    # Typed projection
    "project_record",
    "parse_record",
    "parse_category_suggestion",
    "parse_financial_summary",
]
