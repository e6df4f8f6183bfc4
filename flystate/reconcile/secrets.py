"""Secret reconciler: apply differ output as atomic set/unset batches.

Each batch is one remote call the store applies as a unit. Results are
returned to the caller rather than written into shared state, so an
operation that is cancelled mid-call leaves observed state untouched.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

import structlog

from flystate.errors import RemoteError, RemoteErrorEntry, RemoteNoOp
from flystate.models.diagnostics import Diagnostic, Severity
from flystate.models.remote import RemoteSecret
from flystate.models.secrets import SecretEntry
from flystate.models.values import Known
from flystate.observability.metrics import secret_mutations_total

_log = structlog.get_logger(component="reconcile.secrets")

NO_OP_SUMMARY = "SetSecrets was no-op"
DRIFT_SUMMARY = "State may have drifted"
DRIFT_DETAIL = (
    "Secrets may have been added or changed outside of flystate. "
    "Refreshed secret state from the API; you may need to re-apply your configuration."
)


class SecretStore(Protocol):
    """Remote operations the reconciler needs."""

    async def set_secrets(self, app: str, batch: Mapping[str, str]) -> tuple[RemoteSecret, ...]: ...

    async def unset_secrets(self, app: str, names: Iterable[str]) -> None: ...

    async def get_secrets(self, app: str) -> tuple[RemoteSecret, ...]: ...


@dataclass(frozen=True)
class SetOutcome:
    """Fresh observed entries for the requested names, plus any soft warnings."""

    entries: dict[str, SecretEntry] = field(default_factory=dict)
    warnings: list[Diagnostic] = field(default_factory=list)
    secret_ids: dict[str, str] = field(default_factory=dict)


class SecretReconciler:
    """Issues set/unset batches against a SecretStore for one app."""

    def __init__(self, store: SecretStore) -> None:
        self._store = store

    async def apply_set(self, app: str, batch: Mapping[str, str]) -> SetOutcome:
        """Set every entry of *batch* in one call.

        The store answers with its complete secret list; entries are matched
        by name and only requested names are returned. A "no effective
        change" rejection triggers a compensating GetSecrets instead.

        Raises:
            RemoteError: a requested name is missing from the store's answer,
                or the store rejected the batch.
            TransportError: the call did not complete.
        """
        if not batch:
            return SetOutcome()
        secret_mutations_total.labels(kind="set").inc(len(batch))
        warnings: list[Diagnostic] = []
        try:
            listed = await self._store.set_secrets(app, batch)
        except RemoteNoOp as exc:
            _log.warning("set_secrets_no_op", app=app, secrets=sorted(batch))
            warnings.append(Diagnostic(Severity.WARNING, NO_OP_SUMMARY, str(exc)))
            warnings.append(Diagnostic(Severity.WARNING, DRIFT_SUMMARY, DRIFT_DETAIL))
            listed = await self._store.get_secrets(app)

        by_name = {secret.name: secret for secret in listed}
        missing = sorted(name for name in batch if name not in by_name)
        if missing:
            raise RemoteError(
                "SetSecrets",
                [
                    RemoteErrorEntry(message=f"Secret was not found after setting it: {name!r}", path=name)
                    for name in missing
                ],
            )

        entries = {
            name: SecretEntry(
                name=name,
                value=Known(value),
                digest=by_name[name].digest,
                created_at=by_name[name].created_at,
            )
            for name, value in batch.items()
        }
        _log.info("secrets_set", app=app, secrets=sorted(batch), no_op=bool(warnings))
        return SetOutcome(
            entries=entries,
            warnings=warnings,
            secret_ids={name: by_name[name].id for name in batch},
        )

    async def apply_unset(self, app: str, names: Iterable[str]) -> None:
        """Unset every name in one call. No call is made for an empty batch."""
        keys = sorted(names)
        if not keys:
            return
        secret_mutations_total.labels(kind="unset").inc(len(keys))
        await self._store.unset_secrets(app, keys)
        _log.info("secrets_unset", app=app, secrets=keys)
