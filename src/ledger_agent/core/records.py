"""Typed records exchanged with the ledger agents.

The agent-produced records (`CategorySuggestion`, `FinancialSummary`) check
structure and scalar types only. Value ranges, such as a confidence score
outside [0, 1], are left to the caller.
"""

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictStr

TransactionType = Literal["income", "expense"]
SummaryPeriod = Literal["week", "month"]

DEFAULT_CATEGORIES: tuple[str, ...] = (
    "Groceries",
    "Utilities",
    "Rent",
    "Transportation",
    "Entertainment",
    "Healthcare",
    "Education",
    "Shopping",
    "Dining Out",
    "Insurance",
    "Salary",
    "Freelance",
    "Investment",
    "Other",
)


class Transaction(BaseModel):
    """A single ledger entry as stored by the application."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    description: str
    amount: float
    date: datetime.date
    category: str = ""
    type: TransactionType = "expense"
    notes: str | None = None


class _AgentRecord(BaseModel):
    """Base for records decoded from agent replies."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class CategorySuggestion(_AgentRecord):
    """Category proposed by the categorizer agent for one transaction."""

    suggested_category: StrictStr
    confidence_score: StrictFloat
    alternative_categories: list[StrictStr]
    reasoning: StrictStr


class SpendingStatistics(_AgentRecord):
    total_spend: StrictFloat
    top_category: StrictStr
    unusual_patterns: list[StrictStr]


class FinancialSummary(_AgentRecord):
    """Narrative summary produced by the summary agent for a period."""

    summary: StrictStr
    insights: list[StrictStr]
    recommendations: list[StrictStr]
    statistics: SpendingStatistics = Field(
        description="Aggregate spend figures for the period",
    )
