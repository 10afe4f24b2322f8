"""Error types for RouteProof.
Construction-time problems and oracle failures are raised as exceptions.
A counterexample found by a check is a normal return value and never an
exception.
"""

from __future__ import annotations

from typing import Any


class RouteProofError(Exception):
    """Base class for all RouteProof errors."""


class TopologyError(RouteProofError, ValueError):
    """Raised when a topology is malformed or queried for an unknown node."""


class NetworkDefinitionError(RouteProofError, ValueError):
    """Raised when a network definition is incomplete or inconsistent.
    Attributes:
        missing: Keys (nodes or edges) that the definition lacks.
        extra: Keys that the definition declares but the topology does not.
    """

    def __init__(
        self,
        message: str,
        missing: list[Any] | None = None,
        extra: list[Any] | None = None,
    ):
        self.missing = missing or []
        self.extra = extra or []
        details = []
        if self.missing:
            details.append(f"missing: {self.missing}")
        if self.extra:
            details.append(f"unexpected: {self.extra}")
        if details:
            message = f"{message} ({'; '.join(details)})"
        super().__init__(message)


class SolverError(RouteProofError):
    """Raised when the SMT oracle cannot decide a query.
    This covers timeouts, resource exhaustion and solver crashes. It is
    distinct from both a proof and a counterexample.
    """

    def __init__(self, reason: str, node: str | None = None, check: str | None = None):
        self.reason = reason
        self.node = node
        self.check = check
        where = ""
        if check is not None:
            where = f" during {check} check"
        if node is not None:
            where += f" at node {node}"
        super().__init__(f"solver returned unknown{where}: {reason}")


class ConfigError(RouteProofError):
    """Raised when a configuration file cannot be read."""


class MergeLawViolation(RouteProofError, AssertionError):
    """Raised when a merge function breaks one of its algebraic laws."""

    def __init__(self, law: str, left: Any, right: Any):
        self.law = law
        self.left = left
        self.right = right
        super().__init__(f"merge is not {law}: {left} != {right}")


__all__ = [
    "RouteProofError",
    "TopologyError",
    "NetworkDefinitionError",
    "SolverError",
    "ConfigError",
    "MergeLawViolation",
]
