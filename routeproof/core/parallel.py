"""Parallel discharge of proof obligations.
Whole-network checks fan out over nodes: one obligation per node, each an
independent query. Formulas are built on the calling thread (they apply the
user's transfer, merge and annotation functions), then each query is
translated into its own z3 context and solved on a worker thread. Z3 contexts
are not thread-safe, so a worker never touches the main context; models are
translated back on the calling thread before counterexamples are built.

The reduction keeps the first counterexample to arrive. Which node is
reported when several fail is unspecified. Every dispatched query runs to
completion and an exception from any of them propagates to the caller.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass

import z3

from routeproof.config import SolverConfig
from routeproof.core.exceptions import SolverError
from routeproof.core.solver import Oracle, SolverResult
from routeproof.core.state import SmtCheck, State
from routeproof.logging import get_logger


@dataclass
class Obligation:
    """A single query whose satisfiability refutes a check.
    Attributes:
        node: The node the obligation belongs to (``None`` for whole-network).
        kind: Which check this obligation is part of.
        query: Global constraint, assumptions and the negated claim.
        witness: Builds the counterexample from a model of ``query``.
    """

    node: str | None
    kind: SmtCheck
    query: z3.BoolRef
    witness: Callable[[z3.ModelRef], State]

    def describe(self) -> str:
        if self.node is None:
            return f"{self.kind.value} check"
        return f"{self.kind.value} check at {self.node}"


def first_counterexample(current: State | None, candidate: State | None) -> State | None:
    """Combine two results, keeping the first counterexample."""
    return current if current is not None else candidate


def _solve(oracle: Oracle, obligation: Obligation, query: z3.BoolRef, ctx: z3.Context | None) -> SolverResult:
    try:
        return oracle.solve(query, ctx)
    except SolverError as e:
        raise SolverError(e.reason, node=obligation.node, check=obligation.kind.value) from e


def _conclude(obligation: Obligation, result: SolverResult) -> State | None:
    logger = get_logger()
    if result.is_unsat:
        logger.verbose(f"{obligation.describe()}: passed", category=obligation.kind.value)
        return None
    model = result.model
    if model.ctx != z3.main_ctx():
        model = model.translate(z3.main_ctx())
    logger.verbose(f"{obligation.describe()}: counterexample found", category=obligation.kind.value)
    return obligation.witness(model)


def discharge(obligations: Sequence[Obligation], config: SolverConfig | None = None) -> State | None:
    """Solve every obligation and return the first counterexample, if any.
    Args:
        obligations: Queries built on the calling thread.
        config: Solver settings; ``max_workers`` bounds the thread pool.
    Returns:
        ``None`` if every query is unsatisfiable, otherwise the
        counterexample of the first satisfiable query to finish.
    Raises:
        SolverError: If any query cannot be decided.
    """
    config = config or SolverConfig()
    oracle = Oracle(config.timeout_ms)
    logger = get_logger()
    if config.print_formulas:
        for obligation in obligations:
            logger.info(f"{obligation.describe()}: {obligation.query}", category="formula")
    found: State | None = None
    if config.max_workers <= 1 or len(obligations) <= 1:
        for obligation in obligations:
            result = _solve(oracle, obligation, obligation.query, None)
            found = first_counterexample(found, _conclude(obligation, result))
        return found
    contexts = [z3.Context() for _ in obligations]
    queries = [o.query.translate(ctx) for o, ctx in zip(obligations, contexts)]
    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        futures: dict[Future[SolverResult], Obligation] = {
            executor.submit(_solve, oracle, obligation, query, ctx): obligation
            for obligation, query, ctx in zip(obligations, queries, contexts)
        }
        for future in as_completed(futures):
            found = first_counterexample(found, _conclude(futures[future], future.result()))
    return found


def _solve_chain(
    oracle: Oracle,
    chain: Sequence[Obligation],
    queries: Sequence[z3.BoolRef],
    ctx: z3.Context | None,
) -> tuple[Obligation, SolverResult] | None:
    outcome = None
    for obligation, query in zip(chain, queries):
        outcome = (obligation, _solve(oracle, obligation, query, ctx))
        if not outcome[1].is_unsat:
            break
    return outcome


def discharge_chains(
    chains: Mapping[str, Sequence[Obligation]],
    config: SolverConfig | None = None,
) -> dict[str, State | None]:
    """Solve each chain of obligations in order, stopping at its first failure.
    Chains are independent and run on the worker pool, one chain per task.
    The obligations of a chain share one z3 context and are solved in order
    on the same worker.
    Args:
        chains: Obligations to solve in order, keyed by node.
        config: Solver settings; ``max_workers`` bounds the thread pool.
    Returns:
        The first counterexample of every chain, or ``None`` where every
        obligation of the chain is unsatisfiable.
    Raises:
        SolverError: If any query cannot be decided.
    """
    config = config or SolverConfig()
    oracle = Oracle(config.timeout_ms)
    logger = get_logger()
    if config.print_formulas:
        for chain in chains.values():
            for obligation in chain:
                logger.info(f"{obligation.describe()}: {obligation.query}", category="formula")
    results: dict[str, State | None] = dict.fromkeys(chains)

    def conclude(key: str, outcome: tuple[Obligation, SolverResult] | None) -> None:
        if outcome is not None:
            results[key] = _conclude(*outcome)

    if config.max_workers <= 1 or len(chains) <= 1:
        for key, chain in chains.items():
            conclude(key, _solve_chain(oracle, chain, [o.query for o in chain], None))
        return results
    contexts = {key: z3.Context() for key in chains}
    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        futures = {
            executor.submit(
                _solve_chain,
                oracle,
                chain,
                [o.query.translate(contexts[key]) for o in chain],
                contexts[key],
            ): key
            for key, chain in chains.items()
        }
        for future in as_completed(futures):
            conclude(futures[future], future.result())
    return results


__all__ = [
    "Obligation",
    "discharge",
    "discharge_chains",
    "first_counterexample",
]
