"""Tests for log event processing."""

from fieldtree.core.logging import domain_logger, engine_logger, redact_field_values


class TestRedaction:
    def test_field_values_are_redacted(self) -> None:
        event = {"event": "validation_rejected", "values": {"password": "hunter2"}, "failing_fields": ["password"]}
        redacted = redact_field_values(None, "info", event)
        assert redacted["values"] == "[REDACTED]"
        assert redacted["failing_fields"] == ["password"]

    def test_nested_secrets(self) -> None:
        redacted = redact_field_values(None, "info", {"event": "x", "context": [{"Token": "abc", "rule": "range"}]})
        assert redacted["context"] == [{"Token": "[REDACTED]", "rule": "range"}]


class TestDomainLoggers:
    def test_loggers_are_cached_per_domain(self) -> None:
        assert engine_logger() is domain_logger("engine")
