"""Drift detector: fold a fresh remote snapshot into observed state."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import structlog

from flystate.models.remote import RemoteSecret
from flystate.models.secrets import SecretEntry
from flystate.models.values import UNRESOLVED
from flystate.observability.metrics import secret_drift_total

_log = structlog.get_logger(component="reconcile.drift")


def refresh(
    observed: Mapping[str, SecretEntry],
    snapshot: Iterable[RemoteSecret],
) -> dict[str, SecretEntry]:
    """Return observed state updated from *snapshot*.

    Only managed keys (those already in *observed*) are considered; snapshot
    entries outside that set are ignored entirely. Per managed key:

    * absent remotely          -> dropped (recreated on the next apply if still desired)
    * digest or timestamp moved -> value becomes UNRESOLVED, digest/timestamp updated
    * unchanged                 -> kept as last known
    """
    remote = {secret.name: secret for secret in snapshot}
    refreshed: dict[str, SecretEntry] = {}
    for name, entry in observed.items():
        current = remote.get(name)
        if current is None:
            secret_drift_total.labels(kind="removed").inc()
            _log.info("secret_removed_remotely", secret=name)
            continue
        if current.digest != entry.digest or current.created_at != entry.created_at:
            secret_drift_total.labels(kind="modified").inc()
            _log.info(
                "secret_drift_detected",
                secret=name,
                old_digest=entry.digest,
                new_digest=current.digest,
            )
            refreshed[name] = SecretEntry(
                name=name,
                value=UNRESOLVED,
                digest=current.digest,
                created_at=current.created_at,
            )
            continue
        refreshed[name] = entry
    return refreshed
