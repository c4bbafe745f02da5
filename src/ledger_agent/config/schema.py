"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces configuration
values from the environment and programmatic overrides into the correct types
with proper defaults.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT = "https://agent-prod.studio.lyzr.ai/v3/inference/chat/"
DEFAULT_CATEGORIZER_AGENT_ID = "68e0594bbbcaab95f4ed53fe"
DEFAULT_SUMMARY_AGENT_ID = "68e05958f21978807e7e981f"

ENV_PREFIX = "LEDGER_AGENT_"


class LedgerAgentSettings(BaseSettings):
    """Pydantic settings schema for the ledger agents.

    Integrates with environment variables using the LEDGER_AGENT_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=None,  # Only loaded when explicitly requested
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="API key sent as the x-api-key header",
        # Required only when a client is built; see AgentClient
    )

    endpoint: str = Field(
        default=DEFAULT_ENDPOINT,
        description="Inference chat endpoint URL",
        min_length=1,
    )

    categorizer_agent_id: str = Field(
        default=DEFAULT_CATEGORIZER_AGENT_ID,
        description="Agent that suggests a category for one transaction",
        min_length=1,
    )

    summary_agent_id: str = Field(
        default=DEFAULT_SUMMARY_AGENT_ID,
        description="Agent that summarizes a period of transactions",
        min_length=1,
    )

    user_id: str | None = Field(
        default=None,
        description="User identifier; generated per request when unset",
    )

    timeout_seconds: float = Field(
        default=30.0,
        description="Network timeout for one agent request",
        gt=0,
    )

    max_text_size: int = Field(
        default=1_000_000,
        description="Maximum reply length scanned by the parser",
        ge=1,
    )

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Only absolute HTTP(S) URLs are accepted."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid endpoint: {v}. Must start with http:// or https://")
        return v
