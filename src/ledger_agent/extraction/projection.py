"""Typed projection of extracted payloads onto record models.

Extraction answers "is there JSON in this reply?"; projection answers "does
that JSON have the shape of the record we asked for?". The two failure kinds
stay distinct (`ExtractionFailure` vs `ShapeMismatch`) even though callers
usually degrade the same way for both.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ledger_agent.core.exceptions import ExtractionFailure, ShapeMismatch
from ledger_agent.core.records import CategorySuggestion, FinancialSummary
from ledger_agent.core.types import Failure, Result, Success
from ledger_agent.extraction.parser import ExtractionParser

_default_parser = ExtractionParser()

M = TypeVar("M", bound=BaseModel)


def project_record(
    payload: Any, model: type[M]
) -> Result[M, ShapeMismatch]:
    """Validate `payload` against `model` without raising.

    Args:
        payload: Decoded JSON value, already unwrapped from its envelope.
        model: Pydantic record model describing the expected shape.

    Returns:
        `Success` with the model instance, or `Failure(ShapeMismatch)` listing
        each offending field as ``"path.to.field: message"``.
    """
    try:
        return Success(model.model_validate(payload))
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        ]
        return Failure(ShapeMismatch(model.__name__, errors))


def parse_record(
    text: object,
    model: type[M],
    *,
    parser: ExtractionParser | None = None,
) -> Result[M, ExtractionFailure | ShapeMismatch]:
    """Extract the payload from `text` and project it onto `model`."""
    extracted = (parser or _default_parser).extract_payload(text)
    if isinstance(extracted, Failure):
        return extracted
    return project_record(extracted.value, model)


def parse_category_suggestion(
    text: object, *, parser: ExtractionParser | None = None
) -> Result[CategorySuggestion, ExtractionFailure | ShapeMismatch]:
    return parse_record(text, CategorySuggestion, parser=parser)


def parse_financial_summary(
    text: object, *, parser: ExtractionParser | None = None
) -> Result[FinancialSummary, ExtractionFailure | ShapeMismatch]:
    return parse_record(text, FinancialSummary, parser=parser)
