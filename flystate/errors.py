"""Error taxonomy for flystate.

The core raises these exceptions; the lifecycle boundary converts them into
diagnostics (see ``flystate.resources.base.diagnostics_from_error``).

    ValidationError -- local contract violation, raised before any remote call.
    RemoteNotFound  -- the remote object does not exist.
    RemoteNoOp      -- a mutation batch reported no effective change.
    RemoteError     -- any other structured remote failure.
    TransportError  -- network, timeout or protocol failure.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RemoteErrorEntry:
    """One entry of a structured remote error list."""

    message: str
    path: str = ""
    code: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> RemoteErrorEntry:
        """Decode a GraphQL error object (``message``, ``path``, ``extensions.code``)."""
        raw_path = payload.get("path") or []
        path = ".".join(str(p) for p in raw_path) if isinstance(raw_path, list) else str(raw_path)
        extensions = payload.get("extensions") or {}
        code = extensions.get("code") if isinstance(extensions, dict) else None
        return cls(
            message=str(payload.get("message", "")),
            path=path,
            code=str(code) if code is not None else None,
        )


class FlyStateError(Exception):
    """Base class for every error raised by flystate."""


class ValidationError(FlyStateError):
    """Locally detected contract violation. Fatal; no remote call was made."""

    def __init__(self, summary: str, detail: str = "") -> None:
        super().__init__(f"{summary}: {detail}" if detail else summary)
        self.summary = summary
        self.detail = detail


class RemoteError(FlyStateError):
    """Structured failure returned by the remote API."""

    def __init__(self, operation: str, entries: list[RemoteErrorEntry]) -> None:
        messages = "; ".join(e.message for e in entries) or "unknown remote error"
        super().__init__(f"{operation} failed: {messages}")
        self.operation = operation
        self.entries = entries


class RemoteNotFound(RemoteError):
    """The requested remote object does not exist."""


class RemoteNoOp(RemoteError):
    """A mutation batch was rejected because it would not change anything.

    Recoverable: the caller performs a compensating read instead.
    """


class TransportError(FlyStateError):
    """Network or timeout failure. The original exception is chained as ``__cause__``."""

    def __init__(self, operation: str, cause: str) -> None:
        super().__init__(f"{operation}: {cause}")
        self.operation = operation
        self.cause = cause
