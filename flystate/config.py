"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from flystate.models.config import (
    DEFAULT_GRAPHQL_ENDPOINT,
    APIConfig,
    ClientConfig,
    FlyStateConfig,
    LogConfig,
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"FLYSTATE_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_codes(key: str, default: str) -> frozenset[str]:
    return frozenset(code.strip().upper() for code in _env(key, default).split(",") if code.strip())


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_endpoint(value: str) -> str:
    if not value.startswith(("https://", "http://")):
        raise ValueError(f"Invalid GraphQL endpoint: {value}")
    return value


def load_config() -> FlyStateConfig:
    """Load configuration from FLYSTATE_* environment variables.

    The API token falls back to ``FLY_API_TOKEN``; debug tracing is also
    enabled when ``DEBUG`` is present in the environment.
    """
    return FlyStateConfig(
        client=ClientConfig(
            token=_env("API_TOKEN") or os.environ.get("FLY_API_TOKEN", ""),
            endpoint=_validate_endpoint(_env("GRAPHQL_ENDPOINT", DEFAULT_GRAPHQL_ENDPOINT)),
            debug_trace=_env_bool("DEBUG_TRACE", False) or "DEBUG" in os.environ,
            no_op_error_codes=_env_codes("NO_OP_ERROR_CODES", "NO_CHANGE"),
        ),
        api=APIConfig(
            port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
