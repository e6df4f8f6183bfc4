"""Secret entry data structures shared by the differ, drift detector and reconciler."""

from __future__ import annotations

from dataclasses import dataclass, field

from flystate.models.values import Value


@dataclass(frozen=True)
class SecretEntry:
    """Observed state of one managed secret.

    ``digest`` and ``created_at`` are assigned by the remote store on write and
    are never predicted locally. ``value`` is the last declared plaintext, or
    ``UNRESOLVED`` when the remote copy changed out-of-band.
    """

    name: str
    value: Value
    digest: str
    created_at: str  # RFC 3339 UTC


@dataclass(frozen=True)
class PlannedSecret:
    """Planned state of one secret; computed attributes may be unresolved."""

    name: str
    value: Value
    digest: Value
    created_at: Value


@dataclass(frozen=True)
class SecretDiff:
    """Minimal mutation set between desired and observed secrets."""

    to_add: frozenset[str] = field(default_factory=frozenset)
    to_remove: frozenset[str] = field(default_factory=frozenset)
    to_change: frozenset[str] = field(default_factory=frozenset)

    @property
    def to_set(self) -> frozenset[str]:
        return self.to_add | self.to_change

    @property
    def is_empty(self) -> bool:
        return not (self.to_add or self.to_remove or self.to_change)
