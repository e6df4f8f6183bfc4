"""Tests for drift refresh of managed secrets."""

from __future__ import annotations

from flystate.models.remote import RemoteSecret
from flystate.models.secrets import SecretEntry
from flystate.models.values import UNRESOLVED, Known
from flystate.reconcile.drift import refresh

_TS1 = "2024-01-01T00:00:00Z"
_TS2 = "2024-02-01T00:00:00Z"


def _observed(**values: str) -> dict[str, SecretEntry]:
    return {name: SecretEntry(name=name, value=Known(v), digest="d1", created_at=_TS1) for name, v in values.items()}


class TestRefresh:
    def test_unchanged_entry_keeps_known_value(self) -> None:
        result = refresh(_observed(A="1"), [RemoteSecret(id="s1", name="A", digest="d1", created_at=_TS1)])
        assert result["A"].value == Known("1")

    def test_changed_digest_makes_value_unresolved(self) -> None:
        result = refresh(_observed(A="1"), [RemoteSecret(id="s1", name="A", digest="d2", created_at=_TS1)])
        assert result["A"].value is UNRESOLVED
        assert result["A"].digest == "d2"

    def test_changed_timestamp_alone_is_drift(self) -> None:
        result = refresh(_observed(A="1"), [RemoteSecret(id="s1", name="A", digest="d1", created_at=_TS2)])
        assert result["A"].value is UNRESOLVED
        assert result["A"].created_at == _TS2

    def test_absent_remotely_is_dropped(self) -> None:
        result = refresh(_observed(A="1", B="2"), [RemoteSecret(id="s1", name="A", digest="d1", created_at=_TS1)])
        assert set(result) == {"A"}

    def test_unmanaged_remote_secrets_are_ignored(self) -> None:
        snapshot = [
            RemoteSecret(id="s1", name="A", digest="d1", created_at=_TS1),
            RemoteSecret(id="s2", name="UNMANAGED", digest="zz", created_at=_TS2),
        ]
        result = refresh(_observed(A="1"), snapshot)
        assert set(result) == {"A"}

    def test_empty_observed_stays_empty(self) -> None:
        snapshot = [RemoteSecret(id="s2", name="X", digest="zz", created_at=_TS2)]
        assert refresh({}, snapshot) == {}
