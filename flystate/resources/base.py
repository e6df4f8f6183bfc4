"""Lifecycle plumbing shared by every resource type.

Resources are plain frozen dataclasses holding the immutable remote client
handle; they satisfy the ``Resource`` protocol structurally rather than by
inheriting from a framework base class. Every entry point returns an
``OperationResult`` instead of raising: classified errors become diagnostics
and whatever progress was confirmed remotely is kept in the returned state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Generic, Protocol, TypeVar

import structlog

from flystate.errors import FlyStateError, RemoteError, TransportError, ValidationError
from flystate.models.diagnostics import Diagnostics
from flystate.observability.metrics import lifecycle_operations_total

_log = structlog.get_logger(component="resources.lifecycle")

S = TypeVar("S")
C = TypeVar("C")
P = TypeVar("P")


class LifecycleState(StrEnum):
    """Resource state machine."""

    ABSENT = "absent"
    CREATED = "created"
    REFRESHING = "refreshing"
    UPDATING = "updating"
    DELETED = "deleted"


_TRANSITIONS: dict[LifecycleState, frozenset[LifecycleState]] = {
    LifecycleState.ABSENT: frozenset({LifecycleState.CREATED, LifecycleState.REFRESHING}),
    LifecycleState.CREATED: frozenset(
        {LifecycleState.REFRESHING, LifecycleState.UPDATING, LifecycleState.DELETED}
    ),
    LifecycleState.REFRESHING: frozenset(
        {LifecycleState.CREATED, LifecycleState.ABSENT, LifecycleState.UPDATING, LifecycleState.DELETED}
    ),
    LifecycleState.UPDATING: frozenset(
        {LifecycleState.CREATED, LifecycleState.UPDATING, LifecycleState.DELETED}
    ),
    LifecycleState.DELETED: frozenset(),
}


def advance(current: LifecycleState, target: LifecycleState) -> LifecycleState:
    """Return *target* if the transition is legal, else raise ValidationError."""
    if target not in _TRANSITIONS[current]:
        raise ValidationError("Illegal lifecycle transition", f"{current} -> {target}")
    return target


@dataclass
class OperationResult(Generic[S]):
    """Outcome of one lifecycle operation.

    ``state is None`` tells the host to drop the resource from tracked state.
    """

    state: S | None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    lifecycle: LifecycleState = LifecycleState.CREATED

    @property
    def removed(self) -> bool:
        return self.state is None

    @property
    def ok(self) -> bool:
        return not self.diagnostics.has_error


def diagnostics_from_error(exc: FlyStateError, summary: str = "") -> Diagnostics:
    """Classify *exc* into user-visible diagnostics.

    Remote error entries are surfaced verbatim, one diagnostic per entry.
    """
    diags = Diagnostics()
    if isinstance(exc, ValidationError):
        diags.add_error(exc.summary, exc.detail)
    elif isinstance(exc, RemoteError):
        for entry in exc.entries:
            diags.add_error(entry.message, entry.path)
        if not exc.entries:
            diags.add_error(summary or exc.operation, str(exc))
    elif isinstance(exc, TransportError):
        diags.add_error(summary or f"{exc.operation} failed", exc.cause)
    else:
        diags.add_error(summary or "Operation failed", str(exc))
    return diags


class Lifecycle:
    """Tracks one operation's walk through the state machine and builds its result."""

    def __init__(self, resource: str, operation: str, current: LifecycleState) -> None:
        self.resource = resource
        self.operation = operation
        self.current = current

    def advance(self, target: LifecycleState) -> None:
        previous = self.current
        self.current = advance(self.current, target)
        _log.debug(
            "lifecycle_transition",
            resource=self.resource,
            operation=self.operation,
            previous=previous.value,
            current=self.current.value,
        )

    def _settle(self, state: object | None) -> LifecycleState:
        if self.current == LifecycleState.DELETED and state is None:
            return LifecycleState.DELETED
        return LifecycleState.ABSENT if state is None else LifecycleState.CREATED

    def result(self, state: S | None, diagnostics: Diagnostics | None = None) -> OperationResult[S]:
        diags = diagnostics or Diagnostics()
        outcome = "error" if diags.has_error else ("removed" if state is None else "ok")
        lifecycle_operations_total.labels(
            resource=self.resource, operation=self.operation, outcome=outcome
        ).inc()
        return OperationResult(state=state, diagnostics=diags, lifecycle=self._settle(state))

    def fail(
        self,
        state: S | None,
        *errors: FlyStateError,
        summary: str = "",
        diagnostics: Diagnostics | None = None,
    ) -> OperationResult[S]:
        """Result for a fatal failure; *state* carries any confirmed partial progress."""
        diags = diagnostics or Diagnostics()
        for exc in errors:
            diags.extend(diagnostics_from_error(exc, summary))
        _log.warning(
            "lifecycle_operation_failed",
            resource=self.resource,
            operation=self.operation,
            errors=[d.summary for d in diags.errors],
        )
        return self.result(state, diags)


def parse_import_id(identifier: str, parts: tuple[str, ...]) -> list[str]:
    """Split a comma separated import identifier into exactly ``len(parts)`` fields."""
    fields = identifier.split(",") if identifier else []
    if len(fields) != len(parts) or any(not f for f in fields):
        raise ValidationError(
            "Unexpected Import Identifier",
            f"Expected import identifier with format: {','.join(parts)}. Got: {identifier!r}",
        )
    return fields


def reject_update(kind: str) -> ValidationError:
    """Error for resource types the remote API cannot update in place."""
    return ValidationError(
        f"The fly api does not allow updating {kind}s once created",
        f"Try deleting and then recreating the {kind} with new options",
    )


class Resource(Protocol[C, S]):
    """Host-facing capability implemented by every resource type."""

    type_name: str

    async def create(self, config: C) -> OperationResult[S]: ...

    async def read(self, state: S) -> OperationResult[S]: ...

    async def update(self, state: S, config: C) -> OperationResult[S]: ...

    async def delete(self, state: S) -> OperationResult[S]: ...

    async def import_state(self, identifier: str) -> OperationResult[S]: ...


class PlanningResource(Resource[C, S], Protocol[C, S, P]):
    """Resource that can also compute a planned state without remote calls."""

    async def plan(self, state: S | None, config: C) -> OperationResult[P]: ...
