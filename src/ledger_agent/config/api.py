"""Public API for the configuration system.

Precedence: Programmatic > Environment (LEDGER_AGENT_*) > Defaults.
"""

import logging
import os
from pathlib import Path
from typing import Any

import dotenv
from pydantic import ValidationError

from ledger_agent.core.exceptions import ConfigurationError

from .schema import ENV_PREFIX, LedgerAgentSettings
from .types import FIELD_ORDER, ConfigOrigin, ResolvedConfig

log = logging.getLogger(__name__)


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    use_env_file: str | Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Args:
        programmatic: Dictionary of programmatic overrides (highest precedence).
                     Only known configuration fields are used.
        use_env_file: Optional path to a .env file loaded before reading
                     environment variables. Existing variables win.

    Returns:
        ResolvedConfig with merged values and source tracking for audit.

    Raises:
        ConfigurationError: If any value fails validation.
        FileNotFoundError: If `use_env_file` does not exist.

    Example:
        config = resolve_config({"api_key": "sk-...", "timeout_seconds": 10})
        client = AgentClient(config.to_frozen())
    """
    if use_env_file:
        load_env_file(use_env_file)

    overrides = {
        key: value
        for key, value in (programmatic or {}).items()
        if key in FIELD_ORDER
    }
    ignored = sorted(set(programmatic or {}) - set(overrides))
    if ignored:
        log.debug("Ignoring unknown configuration keys: %s", ", ".join(ignored))

    try:
        settings = LedgerAgentSettings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    origin: dict[str, ConfigOrigin] = {}
    for name in FIELD_ORDER:
        if name in overrides:
            origin[name] = "programmatic"
        elif f"{ENV_PREFIX}{name.upper()}" in os.environ:
            origin[name] = "env"
        else:
            origin[name] = "default"

    values = settings.model_dump()
    return ResolvedConfig(
        **{name: values[name] for name in FIELD_ORDER},
        origin=origin,
    )


def load_env_file(env_file: str | Path) -> None:
    """Load KEY=VALUE pairs from a .env file without overriding the environment.

    Raises:
        FileNotFoundError: If the .env file doesn't exist.
    """
    env_path = Path(env_file)
    if not env_path.exists():
        raise FileNotFoundError(f"Environment file not found: {env_path}")
    dotenv.load_dotenv(env_path, override=False)


def get_env_summary() -> dict[str, str]:
    """Current LEDGER_AGENT_* variables, with the API key redacted."""
    summary = {}
    for name in FIELD_ORDER:
        env_var = f"{ENV_PREFIX}{name.upper()}"
        if env_var in os.environ:
            summary[env_var] = (
                "<redacted>" if name == "api_key" else os.environ[env_var]
            )
    return summary
