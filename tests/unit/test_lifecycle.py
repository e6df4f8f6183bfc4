"""Tests for the lifecycle state machine and error-to-diagnostic mapping."""

from __future__ import annotations

import pytest

from flystate.errors import RemoteError, RemoteErrorEntry, TransportError, ValidationError
from flystate.models.diagnostics import Severity
from flystate.resources.base import LifecycleState, advance, diagnostics_from_error, parse_import_id


class TestAdvance:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (LifecycleState.ABSENT, LifecycleState.CREATED),
            (LifecycleState.CREATED, LifecycleState.REFRESHING),
            (LifecycleState.REFRESHING, LifecycleState.ABSENT),
            (LifecycleState.CREATED, LifecycleState.UPDATING),
            (LifecycleState.UPDATING, LifecycleState.DELETED),
        ],
    )
    def test_legal_transitions(self, current: LifecycleState, target: LifecycleState) -> None:
        assert advance(current, target) == target

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (LifecycleState.ABSENT, LifecycleState.UPDATING),
            (LifecycleState.DELETED, LifecycleState.CREATED),
            (LifecycleState.ABSENT, LifecycleState.DELETED),
        ],
    )
    def test_illegal_transitions(self, current: LifecycleState, target: LifecycleState) -> None:
        with pytest.raises(ValidationError, match="Illegal lifecycle transition"):
            advance(current, target)


class TestDiagnosticsFromError:
    def test_remote_entries_surface_verbatim(self) -> None:
        exc = RemoteError(
            "SetSecrets",
            [RemoteErrorEntry("first problem", "a.b"), RemoteErrorEntry("second problem", "c")],
        )
        diags = diagnostics_from_error(exc)
        assert [(d.summary, d.detail) for d in diags] == [("first problem", "a.b"), ("second problem", "c")]
        assert all(d.severity == Severity.ERROR for d in diags)

    def test_transport_cause_is_the_detail(self) -> None:
        diags = diagnostics_from_error(TransportError("GetApp", "connection reset"), "Read: query failed")
        assert diags.errors[0].summary == "Read: query failed"
        assert diags.errors[0].detail == "connection reset"

    def test_validation_error(self) -> None:
        diags = diagnostics_from_error(ValidationError("Missing required attribute", "name"))
        assert diags.errors[0].summary == "Missing required attribute"


class TestParseImportId:
    def test_splits_fields(self) -> None:
        assert parse_import_id("web,example.com", ("app_id", "hostname")) == ["web", "example.com"]

    def test_format_in_detail(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_import_id("web", ("app_id", "hostname"))
        assert "app_id,hostname" in exc_info.value.detail
