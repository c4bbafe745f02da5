"""Network collaborators composed above the extraction parser."""

from .client import AgentClient
from .services import (
    CategorizerAgent,
    SummaryAgent,
    apply_suggestion,
    period_start,
    transactions_in_period,
)

__all__ = [
    "AgentClient",
    "CategorizerAgent",
    "SummaryAgent",
    "apply_suggestion",
    "period_start",
    "transactions_in_period",
]
