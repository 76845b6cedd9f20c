"""Tests for the simulation log.

Every component writes structured entries to a shared Logger, giving
an after-the-fact record of starts, steps, resets and failures.
"""

from py_paging.controller import SimulationController
from py_paging.engine import StepEngine
from py_paging.logging import LogEntry, Logger, LogLevel
from py_paging.shell import Shell


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
        """A log entry should store level, message and source."""
        entry = LogEntry(level=LogLevel.INFO, message="test message", source="engine")
        assert entry.level is LogLevel.INFO
        assert entry.message == "test message"
        assert entry.source == "engine"

    def test_entry_str(self) -> None:
        """String representation should include level, source and message."""
        entry = LogEntry(level=LogLevel.WARNING, message="large input", source="shell")
        assert str(entry) == "[WARNING] shell: large input"


class TestLogger:
    """Verify the logger."""

    def test_log_stores_entries(self) -> None:
        """Logged entries should be retrievable."""
        logger = Logger()
        logger.log(LogLevel.INFO, "started", source="engine")
        assert len(logger.entries) == 1
        assert logger.entries[0].message == "started"

    def test_level_helpers(self) -> None:
        """debug/info/warning/error should log at the matching level."""
        logger = Logger()
        logger.debug("d", source="t")
        logger.info("i", source="t")
        logger.warning("w", source="t")
        logger.error("e", source="t")
        levels = [e.level for e in logger.entries]
        assert levels == [LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARNING, LogLevel.ERROR]

    def test_entries_are_ordered(self) -> None:
        """Entries should be in chronological order."""
        logger = Logger()
        logger.info("first", source="test")
        logger.info("second", source="test")
        assert [e.message for e in logger.entries] == ["first", "second"]

    def test_entries_returns_copy(self) -> None:
        """Mutating the returned list should not affect the log."""
        logger = Logger()
        logger.info("kept", source="test")
        logger.entries.clear()
        assert len(logger.entries) == 1

    def test_filter_by_level(self) -> None:
        """Filtering should return only entries at or above the level."""
        logger = Logger()
        logger.debug("debug msg", source="test")
        logger.info("info msg", source="test")
        logger.error("error msg", source="test")
        warnings_and_above = logger.filter(min_level=LogLevel.WARNING)
        assert len(warnings_and_above) == 1
        assert warnings_and_above[0].level is LogLevel.ERROR

    def test_filter_by_source(self) -> None:
        """Filtering by source should return matching entries."""
        logger = Logger()
        logger.info("engine event", source="engine")
        logger.info("shell event", source="shell")
        engine_logs = logger.filter(source="engine")
        assert len(engine_logs) == 1
        assert engine_logs[0].source == "engine"

    def test_clear(self) -> None:
        """Clearing should remove all entries."""
        logger = Logger()
        logger.info("test", source="test")
        logger.clear()
        assert len(logger.entries) == 0


class TestEngineLogging:
    """Verify that the engine logs its lifecycle."""

    def test_start_is_logged(self) -> None:
        """Starting should log the policy and frame count."""
        logger = Logger()
        engine = StepEngine(logger=logger)
        engine.start(["A", "B"], 2, "LRU")
        infos = logger.filter(min_level=LogLevel.INFO, source="engine")
        assert any("LRU" in e.message and "2 frames" in e.message for e in infos)

    def test_each_step_is_logged_at_debug(self) -> None:
        """Every processed step should leave a DEBUG entry."""
        logger = Logger()
        engine = StepEngine(logger=logger)
        engine.start(["A", "A"], 1, "FIFO")
        engine.step()
        engine.step()
        debug = [e for e in logger.entries if e.level is LogLevel.DEBUG]
        assert [e.message for e in debug] == [
            "step 1: Page A loaded into empty Frame 1",
            "step 2: Page A already in Frame 1",
        ]

    def test_completion_is_logged(self) -> None:
        """The final step should log the summary."""
        logger = Logger()
        engine = StepEngine(logger=logger)
        engine.start(["A"], 1, "Optimal")
        engine.step()
        assert any("completed" in e.message for e in logger.entries)

    def test_shared_logger_between_controller_and_engine(self) -> None:
        """A controller without its own logger should use the engine's."""
        engine = StepEngine()
        controller = SimulationController(engine=engine)
        assert controller.logger is engine.logger


class TestShellLogCommand:
    """Verify the shell's log command."""

    def test_log_shows_entries(self) -> None:
        """The log command should display recent log entries."""
        shell = Shell()
        shell.execute("start 3 FIFO A B C")
        result = shell.execute("log")
        assert "[INFO] engine: started FIFO" in result

    def test_log_filters_by_level(self) -> None:
        """``log info`` should hide DEBUG step entries."""
        shell = Shell()
        shell.execute("start 3 FIFO A B C")
        shell.execute("step")
        result = shell.execute("log info")
        assert "DEBUG" not in result
        assert "INFO" in result

    def test_log_empty(self) -> None:
        """A fresh shell should report an empty log."""
        shell = Shell()
        assert shell.execute("log") == "(log is empty)"

    def test_log_unknown_level(self) -> None:
        """An unknown level name should produce an error."""
        shell = Shell()
        assert shell.execute("log loud").startswith("Error:")

    def test_help_includes_log(self) -> None:
        """Help should list the log command."""
        shell = Shell()
        assert "log" in shell.execute("help")
