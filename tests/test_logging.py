"""Tests for the binding log.

The binder records structured entries for every decision it makes so a
failed start-up can be traced back to the field and variable involved.
"""

from dataclasses import dataclass

import pytest

from py_envbind.binder import Binder
from py_envbind.errors import MandatoryValueMissingError
from py_envbind.logging import LogEntry, Logger, LogLevel
from py_envbind.tags import env_field


@dataclass
class _Service:
    port: int = env_field("PORT;mandatory", default=0)
    token: str = env_field("TOKEN;optional", default="")


class TestLogLevel:
    """Verify log level ordering."""

    def test_levels_are_ordered(self) -> None:
        """DEBUG < INFO < WARNING < ERROR."""
        assert LogLevel.DEBUG < LogLevel.INFO
        assert LogLevel.INFO < LogLevel.WARNING
        assert LogLevel.WARNING < LogLevel.ERROR


class TestLogEntry:
    """Verify log entry structure."""

    def test_entry_has_fields(self) -> None:
        """A log entry should store level, message, source, and field."""
        entry = LogEntry(
            level=LogLevel.INFO,
            message="test message",
            source="binder",
            field="port",
        )
        assert entry.level is LogLevel.INFO
        assert entry.message == "test message"
        assert entry.source == "binder"
        assert entry.field == "port"

    def test_field_defaults_to_empty(self) -> None:
        """Entries not about a field should carry an empty field name."""
        entry = LogEntry(level=LogLevel.DEBUG, message="m", source="binder")
        assert entry.field == ""

    def test_entry_str(self) -> None:
        """String representation should include level and message."""
        entry = LogEntry(level=LogLevel.WARNING, message="odd tag", source="binder")
        assert str(entry) == "[WARNING] binder: odd tag"


class TestLogger:
    """Verify the logger."""

    def test_log_stores_entries(self) -> None:
        """Logged entries should be retrievable."""
        logger = Logger()
        logger.log(LogLevel.INFO, "mapped", source="binder")
        assert len(logger.entries) == 1
        assert logger.entries[0].message == "mapped"

    def test_entries_are_ordered(self) -> None:
        """Entries should be in chronological order."""
        logger = Logger()
        logger.log(LogLevel.INFO, "first", source="test")
        logger.log(LogLevel.INFO, "second", source="test")
        assert [e.message for e in logger.entries] == ["first", "second"]

    def test_entries_returns_a_copy(self) -> None:
        """Mutating the returned list must not change the log."""
        logger = Logger()
        logger.log(LogLevel.INFO, "kept", source="test")
        logger.entries.clear()
        assert len(logger.entries) == 1

    def test_filter_by_level(self) -> None:
        """Filtering should return only entries at or above the level."""
        logger = Logger()
        logger.log(LogLevel.DEBUG, "debug msg", source="test")
        logger.log(LogLevel.INFO, "info msg", source="test")
        logger.log(LogLevel.ERROR, "error msg", source="test")
        warnings_and_above = logger.filter(min_level=LogLevel.WARNING)
        assert len(warnings_and_above) == 1
        assert warnings_and_above[0].level is LogLevel.ERROR

    def test_filter_by_source(self) -> None:
        """Filtering by source should return matching entries."""
        logger = Logger()
        logger.log(LogLevel.INFO, "binder event", source="binder")
        logger.log(LogLevel.INFO, "resolver event", source="resolver")
        resolver_logs = logger.filter(source="resolver")
        assert len(resolver_logs) == 1
        assert resolver_logs[0].source == "resolver"

    def test_filter_by_field(self) -> None:
        """Filtering by field should return only that field's entries."""
        logger = Logger()
        logger.log(LogLevel.INFO, "a", source="binder", field="port")
        logger.log(LogLevel.INFO, "b", source="binder", field="host")
        assert [e.message for e in logger.filter(field="host")] == ["b"]

    def test_clear(self) -> None:
        """Clearing should remove all log entries."""
        logger = Logger()
        logger.log(LogLevel.INFO, "test", source="test")
        logger.clear()
        assert len(logger.entries) == 0


class TestBinderLogging:
    """Verify that the binder logs its decisions."""

    def test_resolution_source_is_logged(self) -> None:
        """Each assigned field should log where its value came from."""
        binder = Binder(environ={"PORT": "80"})
        binder.map(_Service())
        entries = binder.logger.filter(source="resolver", field="port")
        assert len(entries) == 1
        assert "PORT resolved from environment" in entries[0].message

    def test_values_are_never_logged(self) -> None:
        """Secrets in the environment must not end up in the log."""
        binder = Binder(environ={"PORT": "80", "TOKEN": "s3cr3t"})
        binder.map(_Service())
        assert all("s3cr3t" not in e.message for e in binder.logger.entries)

    def test_skipped_optional_is_logged(self) -> None:
        """An optional field with nothing to assign should be logged as skipped."""
        binder = Binder(environ={"PORT": "80"})
        binder.map(_Service())
        entries = binder.logger.filter(field="token")
        assert any("left unchanged" in e.message for e in entries)

    def test_completion_is_logged(self) -> None:
        """A successful call should log how many fields were assigned."""
        binder = Binder(environ={"PORT": "80"})
        binder.map(_Service())
        assert binder.logger.entries[-1].message == "Mapped 1 field(s) onto _Service"

    def test_failure_is_logged_as_error(self) -> None:
        """The error that aborts a call should be logged before it propagates."""
        binder = Binder(environ={})
        with pytest.raises(MandatoryValueMissingError):
            binder.map(_Service())
        errors = binder.logger.filter(min_level=LogLevel.ERROR)
        assert len(errors) == 1
        assert errors[0].field == "port"
        assert "mandatory value missing" in errors[0].message

    def test_shared_logger(self) -> None:
        """A logger passed in should receive the binder's entries."""
        logger = Logger()
        Binder(environ={"PORT": "80"}, logger=logger).map(_Service())
        assert len(logger.entries) > 0
