"""Z3 oracle for RouteProof.
Every proof obligation is a single, independent satisfiability query solved
by a fresh solver: no push/pop and no state shared between queries. An
unsatisfiable query means the obligation holds; a satisfiable one yields a
model from which a counterexample is built; anything else is an error.
"""

from __future__ import annotations

from dataclasses import dataclass

import z3

from routeproof.core.exceptions import SolverError


@dataclass
class SolverResult:
    """Result of a satisfiability check."""

    is_sat: bool
    model: z3.ModelRef | None = None

    @staticmethod
    def sat(model: z3.ModelRef) -> SolverResult:
        return SolverResult(is_sat=True, model=model)

    @staticmethod
    def unsat() -> SolverResult:
        return SolverResult(is_sat=False)

    @property
    def is_unsat(self) -> bool:
        return not self.is_sat


class Oracle:
    """Solves one query at a time, each in a fresh ``z3.Solver``.
    Args:
        timeout_ms: Solver timeout in milliseconds, or ``None`` for none.
    """

    def __init__(self, timeout_ms: int | None = None) -> None:
        self.timeout_ms = timeout_ms

    def solve(self, query: z3.BoolRef, ctx: z3.Context | None = None) -> SolverResult:
        """Check satisfiability of ``query``.
        Args:
            query: The formula to check. It must live in ``ctx``.
            ctx: The z3 context to solve in (default: the main context).
        Returns:
            ``SolverResult.sat`` with a model in ``ctx``, or
            ``SolverResult.unsat()``.
        Raises:
            SolverError: If the solver answers unknown (timeout, resource
                exhaustion, incompleteness).
        """
        solver = z3.Solver(ctx=ctx)
        if self.timeout_ms is not None:
            solver.set("timeout", self.timeout_ms)
        solver.add(query)
        result = solver.check()
        if result == z3.sat:
            return SolverResult.sat(solver.model())
        if result == z3.unsat:
            return SolverResult.unsat()
        raise SolverError(solver.reason_unknown())

    def prove(self, claim: z3.BoolRef) -> bool:
        """Return True if ``claim`` is valid."""
        return self.solve(z3.Not(claim)).is_unsat

    def __repr__(self) -> str:
        return f"Oracle(timeout_ms={self.timeout_ms})"


__all__ = [
    "SolverResult",
    "Oracle",
]
