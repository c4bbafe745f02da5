"""Core data types that flow through the extraction layers.

This module defines the immutable structures shared by the parser, the typed
projection and the agent services: the `Result` monad used for explicit
failure handling, and the `ExtractionCandidate` produced while scanning a raw
agent reply.
"""

from __future__ import annotations

import dataclasses
import typing

# --- Minimal guard helpers (clarity > boilerplate) ---


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


# --- Result Monad for Robust Error Handling ---
# Failures are values, not exceptions. Callers branch on Success / Failure
# instead of receiving an untyped None.

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success(typing.Generic[TSuccess]):
    """A successful result carrying the produced value."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure(typing.Generic[TFailure]):
    """A failed result carrying the error that describes it."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]

# --- Extraction Data Models ---

ExtractionPhase = typing.Literal["direct", "fenced", "balanced", "lenient"]

# Reported rank of each phase. The parser tries phases in this descending
# order, but the order comes from its fixed phase sequence, not from sorting.
PHASE_CONFIDENCE: typing.Mapping[str, float] = {
    "direct": 1.0,
    "fenced": 0.9,
    "balanced": 0.8,
    "lenient": 0.5,
}


@dataclasses.dataclass(frozen=True, slots=True)
class ExtractionCandidate:
    """A contiguous slice of the raw reply hypothesized to hold one JSON value.

    Attributes:
        text: The text handed to the JSON decoder. Equals `raw[start:end]`
            except for lenient candidates, which hold the repaired text.
        start: Offset of the first character in the raw reply.
        end: Offset one past the last character in the raw reply.
        phase: Recovery phase that produced the candidate.
    """

    text: str
    start: int
    end: int
    phase: ExtractionPhase

    def __post_init__(self) -> None:
        """Validate offsets so candidates always describe a real slice."""
        _require(
            condition=0 <= self.start <= self.end,
            message=f"invalid span [{self.start}, {self.end})",
            field_name="start",
        )
        _require(
            condition=self.phase in PHASE_CONFIDENCE,
            message=f"unknown phase {self.phase!r}",
            field_name="phase",
        )

    @property
    def confidence(self) -> float:
        """Rank of the producing phase, for callers weighing a result.

        Informational only: candidates are never sorted by it.
        """
        return PHASE_CONFIDENCE[self.phase]


@dataclasses.dataclass
class ExtractionDiagnostics:
    """Record of what the parser tried while handling one reply."""

    attempted_phases: list[str] = dataclasses.field(default_factory=list)
    successful_phase: str | None = None
    candidate_count: int = 0
    phase_errors: dict[str, str] = dataclasses.field(default_factory=dict)
    flags: set[str] = dataclasses.field(default_factory=set)
    extraction_duration_ms: float | None = None

    def to_dict(self) -> dict[str, typing.Any]:
        """Plain, JSON-serializable view of the diagnostics."""
        data = dataclasses.asdict(self)
        data["flags"] = sorted(self.flags)
        return data
