"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_GRAPHQL_ENDPOINT = "https://api.fly.io/graphql"


@dataclass(frozen=True)
class ClientConfig:
    """Remote API client configuration.

    Immutable and passed explicitly to every component that talks to the
    remote API; may be shared read-only across resource instances.
    """

    token: str = ""
    endpoint: str = DEFAULT_GRAPHQL_ENDPOINT
    debug_trace: bool = False
    no_op_error_codes: frozenset[str] = frozenset({"NO_CHANGE"})


@dataclass
class APIConfig:
    """Host REST API configuration."""

    port: int = 8080


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class FlyStateConfig:
    """Top-level flystate configuration."""

    client: ClientConfig = field(default_factory=ClientConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
