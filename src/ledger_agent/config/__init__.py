"""Configuration management for the ledger agents.

Key components:
- resolve_config: merge programmatic overrides, environment and defaults
- ResolvedConfig: post-resolution configuration with audit metadata
- FrozenConfig: immutable configuration handed to the agent client
"""

from .api import get_env_summary, load_env_file, resolve_config
from .schema import LedgerAgentSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [
    "resolve_config",
    "load_env_file",
    "get_env_summary",
    "LedgerAgentSettings",
    "ResolvedConfig",
    "FrozenConfig",
    "ConfigOrigin",
    "SourceMap",
]
