"""Core configuration data types, following the resolve-once, freeze-then-flow pattern."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

ConfigOrigin = Literal["programmatic", "env", "default"]
SourceMap = Mapping[str, ConfigOrigin]

FIELD_ORDER: tuple[str, ...] = (
    "api_key",
    "endpoint",
    "categorizer_agent_id",
    "summary_agent_id",
    "user_id",
    "timeout_seconds",
    "max_text_size",
)


class ResolvedConfig(NamedTuple):
    """Configuration after resolution, with the origin of each field."""

    api_key: str | None
    endpoint: str
    categorizer_agent_id: str
    summary_agent_id: str
    user_id: str | None
    timeout_seconds: float
    max_text_size: int

    # Audit metadata - tracks where each field value came from
    origin: SourceMap

    def __str__(self) -> str:
        """String representation with redacted API key for safe logging."""
        return f"ResolvedConfig({_render_fields(self)}, origin={dict(self.origin)!r})"

    def __repr__(self) -> str:
        return self.__str__()

    def to_frozen(self) -> "FrozenConfig":
        """Convert to the immutable configuration handed to clients."""
        return FrozenConfig(**{name: getattr(self, name) for name in FIELD_ORDER})

    def audit(self) -> str:
        """Redacted report of where each field value came from."""
        lines = []
        for name in FIELD_ORDER:
            origin = self.origin.get(name, "default")
            value = getattr(self, name)
            if name == "api_key" and value is not None:
                display = f"{origin}:<redacted>"
            else:
                display = f"{origin}:{value}"
            lines.append(f"{name}: {display}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration consumed by the agent client and services.

    Any attempt to modify this object will raise an exception.
    """

    api_key: str | None
    endpoint: str
    categorizer_agent_id: str
    summary_agent_id: str
    user_id: str | None = None
    timeout_seconds: float = 30.0
    max_text_size: int = 1_000_000

    def __str__(self) -> str:
        """String representation with redacted API key for safe logging."""
        return f"FrozenConfig({_render_fields(self)})"

    def __repr__(self) -> str:
        return self.__str__()


def _render_fields(config: "ResolvedConfig | FrozenConfig") -> str:
    parts = []
    for name in FIELD_ORDER:
        value = getattr(config, name)
        if name == "api_key":
            value = "[REDACTED]" if value else None
        parts.append(f"{name}={value!r}")
    return ", ".join(parts)
