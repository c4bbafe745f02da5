"""Exceptions for the ledger agent layers.

`ExtractionFailure` and `ShapeMismatch` are carried inside `Failure` values
by the parser and the typed projection; those layers never raise them.
"""

from collections.abc import Sequence


class LedgerAgentError(Exception):
    """Base exception for ledger agent errors"""  # noqa: D415


class ConfigurationError(LedgerAgentError):
    """Raised when configuration values are missing or invalid"""  # noqa: D415


class AgentRequestError(LedgerAgentError):
    """Raised when the agent endpoint cannot be reached or rejects a request"""  # noqa: D415


class ExtractionFailure(LedgerAgentError):
    """No candidate in the reply parsed as JSON after all recovery phases."""

    def __init__(
        self,
        message: str = "no structured payload found",
        *,
        phases: Sequence[str] = (),
    ) -> None:
        """Create the failure with the phases that were attempted."""
        super().__init__(message)
        self.message = message
        self.phases = tuple(phases)


class ShapeMismatch(LedgerAgentError):
    """The reply held valid JSON that does not match the requested record."""

    def __init__(self, record: str, errors: Sequence[str]) -> None:
        """Create the mismatch for `record` with per-field error messages."""
        self.record = record
        self.errors = tuple(errors)
        detail = "; ".join(self.errors) if self.errors else "shape mismatch"
        super().__init__(f"{record}: {detail}")
