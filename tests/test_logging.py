"""Tests for the logging framework."""

from __future__ import annotations

import io
import logging

from routeproof.logging import (
    LogEntry,
    LogLevel,
    RouteProofLogger,
    configure_logging,
    get_logger,
    setup_python_logging,
)


def make_logger(level: LogLevel = LogLevel.NORMAL) -> tuple[RouteProofLogger, io.StringIO]:
    stream = io.StringIO()
    return RouteProofLogger(level=level, color=False, stream=stream), stream


class TestLogger:
    """Test leveled logging."""

    def test_levels_filter_output(self) -> None:
        logger, stream = make_logger(LogLevel.NORMAL)
        logger.info("shown")
        logger.verbose("hidden")
        output = stream.getvalue()
        assert "shown" in output
        assert "hidden" not in output
        assert len(logger.get_entries()) == 2

    def test_entries_filtered_by_category(self) -> None:
        logger, _ = make_logger()
        logger.info("a", category="base")
        logger.info("b", category="inductive")
        assert [e.message for e in logger.get_entries(category="base")] == ["a"]
        assert [e.message for e in logger.get_entries(level=LogLevel.NORMAL)] == ["a", "b"]

    def test_error_always_shown(self) -> None:
        logger, stream = make_logger(LogLevel.QUIET)
        logger.error("boom")
        logger.success("fine")
        assert "✗ boom" in stream.getvalue()
        assert "fine" not in stream.getvalue()

    def test_timer_records_elapsed(self) -> None:
        logger, stream = make_logger(LogLevel.VERBOSE)
        with logger.timer("Base checks", category="base"):
            pass
        (entry,) = logger.get_entries(category="base")
        assert entry.message.startswith("Base checks: ")
        assert entry.message.endswith("s")

    def test_header(self) -> None:
        logger, stream = make_logger()
        logger.header("Phase")
        assert "Phase\n─────" in stream.getvalue()

    def test_file_output(self, tmp_path) -> None:
        path = tmp_path / "run.log"
        logger = RouteProofLogger(color=False, stream=io.StringIO(), file_path=path)
        logger.warning("careful")
        logger.close()
        assert "⚠ careful" in path.read_text(encoding="utf-8")

    def test_entry_format(self) -> None:
        entry = LogEntry(level=LogLevel.VERBOSE, message="done", category="safety")
        assert entry.format(color=False, show_time=False) == "→ [safety] done"


class TestGlobalLogger:
    """Test the global logger and the stdlib bridge."""

    def test_configure_replaces_global(self) -> None:
        stream = io.StringIO()
        logger = configure_logging(LogLevel.DEBUG, color=False, stream=stream)
        assert get_logger() is logger
        assert logger.level == LogLevel.DEBUG

    def test_python_logging_bridge(self, log_stream) -> None:
        setup_python_logging()
        std = logging.getLogger("routeproof")
        try:
            std.warning("from stdlib")
        finally:
            std.handlers.clear()
        assert "from stdlib" in log_stream.getvalue()
