"""Tests for log redaction of secret material."""

from __future__ import annotations

from flystate.observability.logging import redact_sensitive


class TestRedaction:
    def test_sensitive_keys_redacted(self) -> None:
        event = {"event": "secrets_set", "value": "hunter2", "token": "fo1_x", "secrets": ["A"]}
        out = redact_sensitive(None, "info", event)
        assert out["value"] == "[REDACTED]"
        assert out["token"] == "[REDACTED]"
        assert out["secrets"] == ["A"]

    def test_other_keys_untouched(self) -> None:
        event = {"event": "app_created", "app": "web"}
        assert redact_sensitive(None, "info", dict(event)) == event
