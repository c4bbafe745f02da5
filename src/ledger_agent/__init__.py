"""Structured payload extraction for the budget ledger's language-model agents."""

import importlib.metadata
import logging

from ledger_agent.agent import (
    AgentClient,
    CategorizerAgent,
    SummaryAgent,
    apply_suggestion,
    transactions_in_period,
)
from ledger_agent.config import FrozenConfig, ResolvedConfig, resolve_config
from ledger_agent.core.exceptions import (
    AgentRequestError,
    ConfigurationError,
    ExtractionFailure,
    LedgerAgentError,
    ShapeMismatch,
)
from ledger_agent.core.records import (
    DEFAULT_CATEGORIES,
    CategorySuggestion,
    FinancialSummary,
    SpendingStatistics,
    Transaction,
)
from ledger_agent.core.types import (
    ExtractionCandidate,
    ExtractionDiagnostics,
    Failure,
    Result,
    Success,
)
from ledger_agent.extraction import (
    ExtractionOutcome,
    ExtractionParser,
    extract_json,
    extract_or_none,
    extract_payload,
    parse_category_suggestion,
    parse_financial_summary,
    project_record,
)

# Version handling
try:
    __version__ = importlib.metadata.version("ledger-agent")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Set up a null handler for the library's root logger.
# This prevents 'No handler found' errors if the consuming app has no logging configured.
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API
__all__ = [  # noqa: RUF022
    # Extraction
    "ExtractionParser",
    "ExtractionOutcome",
    "extract_json",
    "extract_payload",
    "extract_or_none",
    "project_record",
    "parse_category_suggestion",
    "parse_financial_summary",
    # Core Types
    "Result",
    "Success",
    "Failure",
    "ExtractionCandidate",
    "ExtractionDiagnostics",
    # Records
    "Transaction",
    "CategorySuggestion",
    "FinancialSummary",
    "SpendingStatistics",
    "DEFAULT_CATEGORIES",
    # Agents
    "AgentClient",
    "CategorizerAgent",
    "SummaryAgent",
    "apply_suggestion",
    "transactions_in_period",
    # Configuration
    "resolve_config",
    "ResolvedConfig",
    "FrozenConfig",
    # Exceptions
    "LedgerAgentError",
    "ExtractionFailure",
    "ShapeMismatch",
    "AgentRequestError",
    "ConfigurationError",
]
