"""Extraction parser for raw agent replies.

Turns arbitrary reply text into a decoded JSON value using escalating
recovery phases, first success wins:

1. ``direct``: the whole reply parses as JSON.
2. ``fenced``: the body of a triple-backtick code fence parses.
3. ``balanced``: a balanced ``{...}`` or ``[...]`` substring parses.
4. ``lenient``: a fenced, balanced or whole-text candidate parses after one
   pass of `normalize_lenient`.

When nothing parses the result is `Failure(ExtractionFailure)`. The parser
never raises for any input, holds no state between calls and performs no
I/O, so a single instance can be shared freely.
"""

from __future__ import annotations

from collections.abc import Iterator
import dataclasses
import json
import logging
import time
from typing import Any

from ledger_agent.core.exceptions import ExtractionFailure
from ledger_agent.core.types import (
    ExtractionCandidate,
    ExtractionDiagnostics,
    Failure,
    Result,
    Success,
)
from ledger_agent.extraction.candidates import (
    find_balanced_candidates,
    find_fenced_blocks,
)
from ledger_agent.extraction.normalize import normalize_lenient

log = logging.getLogger(__name__)

DEFAULT_MAX_TEXT_SIZE = 1_000_000
ENVELOPE_KEY = "result"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def decode_strict(text: str) -> Any:
    """Decode standard JSON, rejecting NaN and Infinity.

    Raises:
        ValueError: If `text` is not a single, complete JSON value.
    """
    return json.loads(text, parse_constant=_reject_constant)


def project_envelope(value: Any) -> Any:
    """Unwrap the ``{"result": ...}`` envelope when present."""
    if isinstance(value, dict) and ENVELOPE_KEY in value:
        return value[ENVELOPE_KEY]
    return value


@dataclasses.dataclass(frozen=True, slots=True)
class ExtractionOutcome:
    """What one `ExtractionParser.parse` call produced.

    Attributes:
        result: `Success` with the decoded value, or `Failure` with an
            `ExtractionFailure`.
        candidate: The candidate that decoded, if any.
        diagnostics: Populated only when the parser collects diagnostics.
    """

    result: Result[Any, ExtractionFailure]
    candidate: ExtractionCandidate | None = None
    diagnostics: ExtractionDiagnostics | None = None

    @property
    def ok(self) -> bool:
        return isinstance(self.result, Success)

    @property
    def phase(self) -> str | None:
        return self.candidate.phase if self.candidate is not None else None

    def payload(self) -> Result[Any, ExtractionFailure]:
        """The result projected through the ``result`` envelope."""
        if isinstance(self.result, Success):
            return Success(project_envelope(self.result.value))
        return self.result


class ExtractionParser:
    """Recover a JSON value from free-form agent text.

    Attributes:
        max_text_size: Longer inputs are truncated before scanning.
        enable_diagnostics: Whether outcomes carry `ExtractionDiagnostics`.
    """

    def __init__(
        self,
        *,
        max_text_size: int = DEFAULT_MAX_TEXT_SIZE,
        enable_diagnostics: bool = False,
    ) -> None:
        """Initialize the parser.

        Args:
            max_text_size: Maximum number of characters scanned.
            enable_diagnostics: If True, attach diagnostics to each outcome.
        """
        if max_text_size < 1:
            raise ValueError("max_text_size must be positive")
        self.max_text_size = max_text_size
        self.enable_diagnostics = enable_diagnostics

    def parse(self, raw: object) -> ExtractionOutcome:
        """Run the recovery phases over `raw` and report the first success.

        Args:
            raw: Reply body. Bytes are decoded as UTF-8 with replacement;
                any other non-string input fails extraction.

        Returns:
            `ExtractionOutcome` whose `result` is never an exception raised
            to the caller.
        """
        start_time = time.perf_counter()
        diagnostics = ExtractionDiagnostics() if self.enable_diagnostics else None

        text = _coerce_text(raw)
        if text is None:
            return self._fail(
                f"expected text, got {type(raw).__name__}", (), diagnostics, start_time
            )
        if len(text) > self.max_text_size:
            text = text[: self.max_text_size]
            if diagnostics:
                diagnostics.flags.add("truncated_input")
        if not text.strip():
            return self._fail("empty response", (), diagnostics, start_time)

        attempted: list[str] = []
        for phase, candidates in self._phases(text):
            attempted.append(phase)
            if diagnostics:
                diagnostics.attempted_phases.append(phase)
            for candidate in candidates:
                if diagnostics:
                    diagnostics.candidate_count += 1
                try:
                    value = decode_strict(candidate.text)
                except (ValueError, RecursionError) as e:
                    if diagnostics:
                        diagnostics.phase_errors[phase] = str(e)
                    continue

                log.debug(
                    "Extracted JSON via %s phase at [%d, %d)",
                    phase,
                    candidate.start,
                    candidate.end,
                )
                if diagnostics:
                    diagnostics.successful_phase = phase
                    diagnostics.extraction_duration_ms = _elapsed_ms(start_time)
                return ExtractionOutcome(Success(value), candidate, diagnostics)

        return self._fail(
            "no structured payload found", attempted, diagnostics, start_time
        )

    def extract_json(self, raw: object) -> Result[Any, ExtractionFailure]:
        """Decoded JSON value without envelope projection."""
        return self.parse(raw).result

    def extract_payload(self, raw: object) -> Result[Any, ExtractionFailure]:
        """Decoded JSON value with the ``result`` envelope unwrapped."""
        return self.parse(raw).payload()

    def _phases(
        self, text: str
    ) -> Iterator[tuple[str, Iterator[ExtractionCandidate]]]:
        """Yield each phase with its candidates, computed only when reached."""
        yield "direct", iter(
            (ExtractionCandidate(text=text, start=0, end=len(text), phase="direct"),)
        )

        fenced = find_fenced_blocks(text)
        yield "fenced", iter(fenced)

        balanced = find_balanced_candidates(text)
        yield "balanced", iter(balanced)

        yield "lenient", self._lenient_candidates(text, fenced + balanced)

    def _lenient_candidates(
        self, text: str, sources: tuple[ExtractionCandidate, ...]
    ) -> Iterator[ExtractionCandidate]:
        seen: set[str] = set()
        whole = ExtractionCandidate(text=text, start=0, end=len(text), phase="direct")
        for source in (*sources, whole):
            repaired = normalize_lenient(source.text)
            if not repaired or repaired == source.text or repaired in seen:
                continue
            seen.add(repaired)
            yield ExtractionCandidate(
                text=repaired, start=source.start, end=source.end, phase="lenient"
            )

    def _fail(
        self,
        reason: str,
        phases: list[str] | tuple[str, ...],
        diagnostics: ExtractionDiagnostics | None,
        start_time: float,
    ) -> ExtractionOutcome:
        log.debug("Extraction failed: %s (phases: %s)", reason, ", ".join(phases))
        if diagnostics:
            diagnostics.extraction_duration_ms = _elapsed_ms(start_time)
        failure = ExtractionFailure(reason, phases=phases)
        return ExtractionOutcome(Failure(failure), None, diagnostics)


def _coerce_text(raw: object) -> str | None:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bytes | bytearray):
        return bytes(raw).decode("utf-8", errors="replace")
    return None


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * 1000


_default_parser = ExtractionParser()


def extract_json(text: object) -> Result[Any, ExtractionFailure]:
    """Decode the JSON value embedded in `text` with the default parser."""
    return _default_parser.extract_json(text)


def extract_payload(text: object) -> Result[Any, ExtractionFailure]:
    """Decode the JSON value in `text` and unwrap the ``result`` envelope."""
    return _default_parser.extract_payload(text)


def extract_or_none(text: object) -> Any:
    """Payload from `text`, or None when extraction fails.

    Note that a payload which is itself JSON ``null`` is indistinguishable
    from failure here; use `extract_payload` to tell them apart.
    """
    result = extract_payload(text)
    return result.value if isinstance(result, Success) else None
