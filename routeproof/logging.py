"""Logging framework for RouteProof.
Provides leveled, colored progress logging for verification runs: phase
headers, per-node verdicts, timings and (on request) the SMT queries.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any, TextIO


class LogLevel(IntEnum):
    """Log levels for RouteProof."""

    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3
    TRACE = 4


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    GRAY = "\033[90m"


def supports_color(stream: TextIO) -> bool:
    """Check if the stream supports ANSI colors."""
    if not hasattr(stream, "isatty") or not stream.isatty():
        return False
    if sys.platform == "win32":
        return bool(os.environ.get("TERM")) or "ANSICON" in os.environ
    return True


@dataclass
class LogEntry:
    """A log entry with metadata."""

    level: LogLevel
    message: str
    category: str = "general"
    timestamp: float = field(default_factory=time.time)
    context: dict[str, Any] = field(default_factory=dict)

    def format(self, color: bool = True, show_time: bool = True) -> str:
        """Format the log entry for display."""
        parts = []
        if show_time:
            elapsed = time.strftime("%H:%M:%S", time.localtime(self.timestamp))
            parts.append(f"{Colors.GRAY}{elapsed}{Colors.RESET}" if color else elapsed)
        level_str = self._level_str(color)
        if level_str:
            parts.append(level_str)
        if self.category != "general":
            if color:
                parts.append(f"{Colors.CYAN}[{self.category}]{Colors.RESET}")
            else:
                parts.append(f"[{self.category}]")
        parts.append(self.message)
        return " ".join(parts)

    def _level_str(self, color: bool) -> str:
        """Get level indicator string."""
        if self.level == LogLevel.QUIET:
            return ""
        indicators = {
            LogLevel.NORMAL: ("•", Colors.WHITE),
            LogLevel.VERBOSE: ("→", Colors.BLUE),
            LogLevel.DEBUG: ("⚙", Colors.MAGENTA),
            LogLevel.TRACE: ("⋯", Colors.GRAY),
        }
        char, col = indicators.get(self.level, ("", ""))
        if color:
            return f"{col}{char}{Colors.RESET}"
        return char


class RouteProofLogger:
    """Main logger for RouteProof.
    Checks log from the thread that builds and collects queries, never from
    solver worker threads.
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.NORMAL,
        color: bool = True,
        stream: TextIO | None = None,
        file_path: Path | None = None,
    ):
        self.level = level
        self._stream = stream or sys.stdout
        self._color = color and supports_color(self._stream)
        self._file_handle: TextIO | None = None
        self._entries: list[LogEntry] = []
        if file_path is not None:
            self.open_file(file_path)

    def set_level(self, level: LogLevel) -> None:
        """Set the logging level."""
        self.level = level

    def _should_log(self, level: LogLevel) -> bool:
        return level <= self.level

    def _write(self, text: str, plain: str | None = None) -> None:
        self._stream.write(text + "\n")
        self._stream.flush()
        if self._file_handle:
            self._file_handle.write((plain if plain is not None else text) + "\n")
            self._file_handle.flush()

    def _emit(self, entry: LogEntry) -> None:
        self._entries.append(entry)
        if self._should_log(entry.level):
            self._write(entry.format(color=self._color), entry.format(color=False))

    def log(
        self,
        level: LogLevel,
        message: str,
        category: str = "general",
        **context: Any,
    ) -> None:
        """Log a message at the specified level."""
        self._emit(LogEntry(level=level, message=message, category=category, context=context))

    def info(self, message: str, **context: Any) -> None:
        self.log(LogLevel.NORMAL, message, **context)

    def verbose(self, message: str, **context: Any) -> None:
        self.log(LogLevel.VERBOSE, message, **context)

    def debug(self, message: str, **context: Any) -> None:
        self.log(LogLevel.DEBUG, message, **context)

    def trace(self, message: str, **context: Any) -> None:
        self.log(LogLevel.TRACE, message, **context)

    def success(self, message: str) -> None:
        """Log a success message with green checkmark."""
        if self._should_log(LogLevel.NORMAL):
            if self._color:
                self._write(f"{Colors.GREEN}✓{Colors.RESET} {message}", f"✓ {message}")
            else:
                self._write(f"✓ {message}")

    def warning(self, message: str) -> None:
        if self._color:
            self._write(f"{Colors.YELLOW}⚠{Colors.RESET} {message}", f"⚠ {message}")
        else:
            self._write(f"⚠ {message}")

    def error(self, message: str) -> None:
        """Log an error message (always shown)."""
        if self._color:
            self._write(f"{Colors.RED}✗{Colors.RESET} {message}", f"✗ {message}")
        else:
            self._write(f"✗ {message}")

    def header(self, message: str) -> None:
        if self._should_log(LogLevel.NORMAL):
            rule = "─" * len(message)
            if self._color:
                self._write(f"\n{Colors.BOLD}{Colors.CYAN}{message}{Colors.RESET}", f"\n{message}")
                self._write(f"{Colors.CYAN}{rule}{Colors.RESET}", rule)
            else:
                self._write(f"\n{message}")
                self._write(rule)

    @contextmanager
    def timer(self, name: str, category: str = "timing"):
        """Context manager for timing operations."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.verbose(f"{name}: {elapsed:.3f}s", category=category)

    def get_entries(
        self,
        level: LogLevel | None = None,
        category: str | None = None,
    ) -> list[LogEntry]:
        """Get logged entries, optionally filtered."""
        entries = self._entries
        if level is not None:
            entries = [e for e in entries if e.level == level]
        if category is not None:
            entries = [e for e in entries if e.category == category]
        return entries

    def open_file(self, path: Path) -> None:
        """Open a file for logging."""
        self._file_handle = open(path, "w", encoding="utf-8")

    def close(self) -> None:
        """Close any open file handles."""
        if self._file_handle:
            self._file_handle.close()
            self._file_handle = None


_logger: RouteProofLogger | None = None


def get_logger() -> RouteProofLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = RouteProofLogger()
    return _logger


def set_logger(logger: RouteProofLogger) -> None:
    """Set the global logger instance."""
    global _logger
    _logger = logger


def configure_logging(
    level: LogLevel = LogLevel.NORMAL,
    color: bool = True,
    file_path: Path | None = None,
    stream: TextIO | None = None,
) -> RouteProofLogger:
    """Configure and return the global logger."""
    global _logger
    _logger = RouteProofLogger(level=level, color=color, stream=stream, file_path=file_path)
    return _logger


class PythonLoggingBridge(logging.Handler):
    """Bridge the RouteProof logger to Python's logging module."""

    def __init__(self, route_logger: RouteProofLogger):
        super().__init__()
        self.route_logger = route_logger
        self._level_map = {
            logging.DEBUG: LogLevel.DEBUG,
            logging.INFO: LogLevel.NORMAL,
        }

    def emit(self, record: logging.LogRecord) -> None:
        message = self.format(record)
        if record.levelno >= logging.ERROR:
            self.route_logger.error(message)
        elif record.levelno >= logging.WARNING:
            self.route_logger.warning(message)
        else:
            level = self._level_map.get(record.levelno, LogLevel.NORMAL)
            self.route_logger.log(level, message, category="python")


def setup_python_logging(level: int = logging.INFO) -> None:
    """Route records of the ``routeproof`` stdlib logger through RouteProof."""
    logger = logging.getLogger("routeproof")
    logger.setLevel(level)
    logger.addHandler(PythonLoggingBridge(get_logger()))


__all__ = [
    "LogLevel",
    "LogEntry",
    "Colors",
    "RouteProofLogger",
    "get_logger",
    "set_logger",
    "configure_logging",
    "setup_python_logging",
    "supports_color",
]
