"""Assertion helpers for testing annotated networks."""

from __future__ import annotations

import z3

from routeproof.config import SolverConfig
from routeproof.core.solver import Oracle
from routeproof.core.state import SmtCheck, State
from routeproof.networks.annotated import AnnotatedNetwork


def _describe(state: State) -> str:
    return state.format().replace("\n", "\n    ")


def check_sound(network: AnnotatedNetwork, config: SolverConfig | None = None, monolithic: bool = True) -> None:
    """Assert that the annotations verify and, optionally, the monolithic check too."""
    state = network.check_annotations(config)
    assert state is None, f"expected the annotations to verify:\n    {_describe(state)}"
    if monolithic:
        state = network.check_monolithic(config)
        assert state is None, f"expected the monolithic check to pass:\n    {_describe(state)}"


def check_unsound(network: AnnotatedNetwork, config: SolverConfig | None = None) -> State:
    """Assert that the modular checks find a counterexample and return it."""
    state = network.check_annotations(config)
    assert state is not None, "expected the annotations to be refuted"
    return state


def check_unsound_check(network: AnnotatedNetwork, kind: SmtCheck, config: SolverConfig | None = None) -> State:
    """Assert that the modular checks fail with a counterexample of ``kind``."""
    state = check_unsound(network, config)
    assert state.kind is kind, f"expected a {kind.value} counterexample:\n    {_describe(state)}"
    return state


def assert_simulation_sound(network: AnnotatedNetwork, rounds: int) -> None:
    """Assert that simulated routes satisfy every annotation for ``rounds`` rounds.
    Routes that still mention symbolic values are checked for every
    assignment allowed by the symbolic constraints.
    """
    oracle = Oracle()
    constraints = network.network.symbolic_constraints()
    for time, routes in enumerate(network.network.simulate(rounds)):
        for node, route in routes.items():
            claim = z3.Implies(constraints, network.annotations[node](route, z3.IntVal(time)))
            assert oracle.prove(claim), f"annotation of {node} does not hold at time {time}: {route}"


__all__ = [
    "check_sound",
    "check_unsound",
    "check_unsound_check",
    "assert_simulation_sound",
]
