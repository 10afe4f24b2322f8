"""Output formatters for RouteProof results."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any

from routeproof.logging import Colors

if TYPE_CHECKING:
    from routeproof.api import VerificationResult
    from routeproof.config import OutputConfig


class Formatter(ABC):
    """Base class for output formatters."""

    name: str = "base"
    extension: str = ".txt"

    @abstractmethod
    def format(self, result: VerificationResult) -> str:
        """Format the verification result."""

    def save(self, result: VerificationResult, filepath: str) -> None:
        """Save formatted result to file."""
        content = self.format(result)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)


class TextFormatter(Formatter):
    """Plain text formatter."""

    name = "text"
    extension = ".txt"

    def __init__(self, color: bool = False, verbose: bool = False, show_symbolics: bool = True):
        self.color = color
        self.verbose = verbose
        self.show_symbolics = show_symbolics

    def _paint(self, text: str, color: str) -> str:
        if not self.color:
            return text
        return f"{color}{text}{Colors.RESET}"

    def format(self, result: VerificationResult) -> str:
        lines = []
        lines.append("")
        lines.append("RouteProof - Verification Report")
        lines.append("=" * 32)
        lines.append(f"  Mode:     {result.mode}")
        if self.verbose and result.network:
            lines.append(f"  Network:  {result.network}")
        lines.append(f"  Time:     {result.time_seconds:.3f}s")
        lines.append("")
        state = result.counterexample
        if state is None:
            lines.append(self._paint("PROVED", Colors.GREEN) + ": every check passed.")
            return "\n".join(lines)
        lines.append(self._paint("COUNTEREXAMPLE", Colors.RED) + f" ({state.kind.value} check)")
        body = state.format().splitlines()
        if not self.show_symbolics and "symbolics:" in body:
            body = body[: body.index("symbolics:")]
        lines.extend(f"  {line}" for line in body)
        return "\n".join(lines)


class JSONFormatter(Formatter):
    """JSON formatter for machine-readable output."""

    name = "json"
    extension = ".json"

    def __init__(self, indent: int = 2, show_symbolics: bool = True):
        self.indent = indent
        self.show_symbolics = show_symbolics

    def format(self, result: VerificationResult) -> str:
        data: dict[str, Any] = {
            "meta": {
                "tool": "RouteProof",
                "timestamp": datetime.now().isoformat(),
            },
            **result.to_dict(),
        }
        if not self.show_symbolics and data["counterexample"] is not None:
            data["counterexample"].pop("symbolics", None)
        return json.dumps(data, indent=self.indent, default=str)


def format_result(
    result: VerificationResult,
    format_type: str = "text",
    **kwargs,
) -> str:
    """
    Format a verification result.
    Args:
        result: The verification result to format
        format_type: One of "text", "json"
        **kwargs: Additional formatter options
    Returns:
        Formatted string
    """
    formatters = {
        "text": TextFormatter,
        "json": JSONFormatter,
    }
    formatter_class = formatters.get(format_type.lower(), TextFormatter)
    formatter = formatter_class(**kwargs)
    return formatter.format(result)


def format_with_config(result: VerificationResult, output: OutputConfig) -> str:
    """Format a verification result using the ``[output]`` configuration section."""
    if output.format.lower() == "json":
        return JSONFormatter(show_symbolics=output.show_symbolics).format(result)
    return TextFormatter(
        color=output.color,
        verbose=output.verbose,
        show_symbolics=output.show_symbolics,
    ).format(result)


__all__ = [
    "Formatter",
    "TextFormatter",
    "JSONFormatter",
    "format_result",
    "format_with_config",
]
