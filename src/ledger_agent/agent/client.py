"""HTTP transport to the inference chat endpoint.

The client only moves text: it posts one message and returns the raw reply
body. Parsing happens above it, in the agent services, so the parser stays a
pure function that never touches the network.
"""

from collections.abc import Callable
import logging
import time

import httpx

from ledger_agent.config.types import FrozenConfig
from ledger_agent.core.exceptions import AgentRequestError, ConfigurationError

log = logging.getLogger(__name__)


class AgentClient:
    """Posts chat messages to an agent and returns the reply text.

    Attributes:
        config: Frozen configuration with endpoint, key and timeout.
    """

    def __init__(
        self,
        config: FrozenConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the client.

        Args:
            config: Resolved configuration; `api_key` must be set.
            transport: Optional httpx transport, e.g. `httpx.MockTransport`.
            clock: Source of epoch seconds used for generated identifiers.

        Raises:
            ConfigurationError: If no API key is configured.
        """
        if not config.api_key:
            raise ConfigurationError(
                "api_key is required to call the agent endpoint. "
                "Set LEDGER_AGENT_API_KEY or pass it programmatically."
            )
        self.config = config
        self._transport = transport
        self._clock = clock

    def session_id(self, prefix: str) -> str:
        """Per-request session identifier, e.g. ``categorizer-1700000000000``."""
        return f"{prefix}-{self._millis()}"

    def user_id(self) -> str:
        return self.config.user_id or f"user{self._millis()}@test.com"

    async def send(self, agent_id: str, message: str, *, session_prefix: str) -> str:
        """Post `message` to `agent_id` and return the full reply body.

        Raises:
            AgentRequestError: On timeout, non-2xx status or transport failure.
        """
        payload = {
            "user_id": self.user_id(),
            "agent_id": agent_id,
            "session_id": self.session_id(session_prefix),
            "message": message,
        }
        headers = {"x-api-key": self.config.api_key or ""}

        try:
            async with self._create_http_client() as client:
                response = await client.post(
                    self.config.endpoint, json=payload, headers=headers
                )
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise AgentRequestError(f"Agent request timeout: {agent_id}") from e
        except httpx.HTTPStatusError as e:
            raise AgentRequestError(
                f"HTTP error {e.response.status_code} from agent {agent_id}"
            ) from e
        except httpx.HTTPError as e:
            raise AgentRequestError(f"Agent request failed for {agent_id}: {e}") from e

        log.debug("Agent %s replied with %d characters", agent_id, len(response.text))
        return response.text

    def _create_http_client(self) -> httpx.AsyncClient:
        """Create a configured HTTP client - centralized configuration"""
        return httpx.AsyncClient(
            timeout=self.config.timeout_seconds, transport=self._transport
        )

    def _millis(self) -> int:
        return int(self._clock() * 1000)
