"""Categorizer and summary agents.

Each service composes the three layers: `AgentClient` fetches the reply text,
`ExtractionParser` recovers the JSON payload, and `project_record` checks it
against the expected record. Every failure comes back as a `Failure` value;
nothing here raises on a bad reply or an unreachable endpoint.
"""

import calendar
from collections.abc import Iterable, Sequence
import datetime
import json
import logging

from ledger_agent.agent.client import AgentClient
from ledger_agent.core.exceptions import AgentRequestError, LedgerAgentError
from ledger_agent.core.records import (
    CategorySuggestion,
    FinancialSummary,
    SummaryPeriod,
    Transaction,
)
from ledger_agent.core.types import Failure, Result, Success
from ledger_agent.extraction.parser import ExtractionParser
from ledger_agent.extraction.projection import parse_record

log = logging.getLogger(__name__)


class CategorizerAgent:
    """Asks the categorizer agent for a transaction's category."""

    session_prefix = "categorizer"

    def __init__(
        self,
        client: AgentClient,
        *,
        agent_id: str | None = None,
        parser: ExtractionParser | None = None,
    ) -> None:
        self.client = client
        self.agent_id = agent_id or client.config.categorizer_agent_id
        self.parser = parser or ExtractionParser(
            max_text_size=client.config.max_text_size
        )

    async def suggest(
        self, transaction: Transaction
    ) -> Result[CategorySuggestion, LedgerAgentError]:
        """Suggest a category from the description, amount and type."""
        message = json.dumps(
            {
                "description": transaction.description,
                "amount": transaction.amount,
                "type": transaction.type,
            }
        )
        try:
            reply = await self.client.send(
                self.agent_id, message, session_prefix=self.session_prefix
            )
        except AgentRequestError as e:
            log.warning("Categorizer request failed: %s", e)
            return Failure(e)

        result = parse_record(reply, CategorySuggestion, parser=self.parser)
        if isinstance(result, Failure):
            log.warning("Categorizer reply unusable: %s", result.error)
        return result


class SummaryAgent:
    """Asks the summary agent for insights over a period of transactions."""

    session_prefix = "summary"

    def __init__(
        self,
        client: AgentClient,
        *,
        agent_id: str | None = None,
        parser: ExtractionParser | None = None,
    ) -> None:
        self.client = client
        self.agent_id = agent_id or client.config.summary_agent_id
        self.parser = parser or ExtractionParser(
            max_text_size=client.config.max_text_size
        )

    async def summarize(
        self, transactions: Sequence[Transaction], period: SummaryPeriod
    ) -> Result[FinancialSummary, LedgerAgentError]:
        """Summarize `transactions` for the given period label."""
        message = json.dumps(
            {
                "transactions": [
                    t.model_dump(mode="json", exclude_none=True) for t in transactions
                ],
                "period": period,
            }
        )
        try:
            reply = await self.client.send(
                self.agent_id, message, session_prefix=self.session_prefix
            )
        except AgentRequestError as e:
            log.warning("Summary request failed: %s", e)
            return Failure(e)

        result = parse_record(reply, FinancialSummary, parser=self.parser)
        if isinstance(result, Failure):
            log.warning("Summary reply unusable: %s", result.error)
        return result


def period_start(period: SummaryPeriod, today: datetime.date) -> datetime.date:
    """First date included in `period` ending on `today`.

    ``week`` reaches back seven days; ``month`` reaches back to the same day
    of the previous month, clamped to that month's last day.
    """
    if period == "week":
        return today - datetime.timedelta(days=7)
    if period == "month":
        if today.month == 1:
            year, month = today.year - 1, 12
        else:
            year, month = today.year, today.month - 1
        day = min(today.day, calendar.monthrange(year, month)[1])
        return datetime.date(year, month, day)
    raise ValueError(f"Invalid period: {period}. Must be one of: week, month")


def transactions_in_period(
    transactions: Iterable[Transaction],
    period: SummaryPeriod,
    *,
    today: datetime.date | None = None,
) -> list[Transaction]:
    """Transactions dated on or after the start of `period`."""
    start = period_start(period, today or datetime.date.today())
    return [t for t in transactions if t.date >= start]


def apply_suggestion(
    transaction: Transaction,
    suggestion: Result[CategorySuggestion, LedgerAgentError],
) -> Transaction:
    """Fill an empty category from a successful suggestion.

    A chosen category is never overwritten. On failure the category stays
    unset; the caller decides whether that degrade is silent.
    """
    if transaction.category or not isinstance(suggestion, Success):
        return transaction
    return transaction.model_copy(
        update={"category": suggestion.value.suggested_category}
    )
