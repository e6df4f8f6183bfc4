"""Async GraphQL transport for the Fly API.

Every call is a single blocking request/response bounded by a fixed
two-minute timeout. No retries are performed here: transport failures are
raised as ``TransportError`` and the caller owns retry policy. Cancelling
the awaiting task aborts the in-flight request.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
import structlog

from flystate.errors import (
    RemoteError,
    RemoteErrorEntry,
    RemoteNoOp,
    RemoteNotFound,
    TransportError,
)
from flystate.models.config import ClientConfig
from flystate.observability.metrics import remote_call_duration_seconds, remote_calls_total

_log = structlog.get_logger(component="client.graphql")

REMOTE_CALL_TIMEOUT_SECONDS = 120.0

_NOT_FOUND_CODES = frozenset({"NOT_FOUND"})
# Last-resort message matching, used only when the API sends no error code.
_NOT_FOUND_MESSAGE_PREFIX = "Could not resolve"
_NO_OP_MESSAGE = "No change detected"


def classify_errors(
    operation: str,
    entries: list[RemoteErrorEntry],
    no_op_codes: frozenset[str] = frozenset({"NO_CHANGE"}),
) -> RemoteError:
    """Map a structured GraphQL error list to the most specific exception.

    A single-entry list is inspected for a machine-readable code first and
    only then for a known message. Multi-entry lists are always generic.
    """
    if len(entries) == 1:
        entry = entries[0]
        code = (entry.code or "").upper()
        if code in _NOT_FOUND_CODES:
            return RemoteNotFound(operation, entries)
        if code in no_op_codes:
            return RemoteNoOp(operation, entries)
        if not code:
            if entry.message.startswith(_NOT_FOUND_MESSAGE_PREFIX):
                return RemoteNotFound(operation, entries)
            if _NO_OP_MESSAGE in entry.message:
                return RemoteNoOp(operation, entries)
    return RemoteError(operation, entries)


class GraphQLClient:
    """Thin GraphQL-over-HTTP client.

    Args:
        config:    Immutable client configuration (token, endpoint, tracing).
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not config.token:
            raise ValueError("token cannot be an empty string")
        self._config = config
        headers = {
            "Authorization": f"Bearer {config.token}",
            "Content-Type": "application/json",
        }
        if config.debug_trace:
            headers["Fly-Force-Trace"] = "true"
        self._http = httpx.AsyncClient(
            headers=headers,
            timeout=REMOTE_CALL_TIMEOUT_SECONDS,
            transport=transport,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def execute(
        self,
        operation: str,
        document: str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run *document* and return its ``data`` object.

        Raises:
            RemoteNotFound, RemoteNoOp, RemoteError: structured GraphQL errors.
            TransportError: timeout, connection failure or unparseable response.
        """
        payload = {"query": document, "operationName": operation, "variables": variables or {}}
        t_start = time.monotonic()
        try:
            response = await self._http.post(self._config.endpoint, json=payload)
        except httpx.TimeoutException as exc:
            remote_calls_total.labels(operation=operation, outcome="timeout").inc()
            _log.warning("remote_call_timeout", operation=operation, timeout=REMOTE_CALL_TIMEOUT_SECONDS)
            raise TransportError(operation, f"timed out after {REMOTE_CALL_TIMEOUT_SECONDS:.0f}s") from exc
        except httpx.HTTPError as exc:
            remote_calls_total.labels(operation=operation, outcome="transport_error").inc()
            _log.warning("remote_call_http_error", operation=operation, error=str(exc))
            raise TransportError(operation, str(exc)) from exc
        finally:
            remote_call_duration_seconds.labels(operation=operation).observe(time.monotonic() - t_start)

        try:
            body = response.json()
        except ValueError as exc:
            remote_calls_total.labels(operation=operation, outcome="transport_error").inc()
            raise TransportError(
                operation, f"HTTP {response.status_code}: non-JSON response {response.text[:200]!r}"
            ) from exc

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            entries = [RemoteErrorEntry.from_payload(e) for e in errors if isinstance(e, dict)]
            error = classify_errors(operation, entries, self._config.no_op_error_codes)
            remote_calls_total.labels(operation=operation, outcome=type(error).__name__).inc()
            _log.debug(
                "remote_call_errors",
                operation=operation,
                classification=type(error).__name__,
                messages=[e.message for e in entries],
            )
            raise error

        if response.status_code >= 400 or not isinstance(body, dict):
            remote_calls_total.labels(operation=operation, outcome="transport_error").inc()
            raise TransportError(operation, f"HTTP {response.status_code}: {response.text[:200]}")

        remote_calls_total.labels(operation=operation, outcome="ok").inc()
        return body.get("data") or {}

    async def close(self) -> None:
        await self._http.aclose()
