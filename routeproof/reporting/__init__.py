"""Reporting module for RouteProof."""

from routeproof.reporting.formatters import (
    Formatter,
    JSONFormatter,
    TextFormatter,
    format_result,
    format_with_config,
)

__all__ = [
    "Formatter",
    "TextFormatter",
    "JSONFormatter",
    "format_result",
    "format_with_config",
]
