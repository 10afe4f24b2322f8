"""Shared fixtures for the RouteProof test-suite."""

from __future__ import annotations

import io

import pytest
import z3

from routeproof.lang import (
    equals,
    finally_,
    globally,
    is_none,
    is_some,
    never,
    some,
    until,
)
from routeproof.logging import LogLevel, RouteProofLogger, set_logger
from routeproof.networks import AnnotatedNetwork, FaultTolerantNetwork
from routeproof.networks.protocols import reachability_network, shortest_path_network
from routeproof.topology import complete_topology, path_topology


@pytest.fixture
def log_stream():
    return io.StringIO()


@pytest.fixture(autouse=True)
def quiet_logger(log_stream):
    """Send log output to a buffer so every test can inspect it."""
    logger = RouteProofLogger(level=LogLevel.VERBOSE, color=False, stream=log_stream)
    set_logger(logger)
    yield logger
    set_logger(RouteProofLogger())


@pytest.fixture
def shortest_paths():
    """Hop-count shortest paths to A on the path A - B - C."""
    return shortest_path_network(path_topology(3), "A")


def _shortest_path_annotations():
    return {
        "A": equals(some(0)),
        "B": until(1, is_none, lambda r: r == some(1)),
        "C": until(2, is_none, lambda r: r == some(2)),
    }


@pytest.fixture
def sound_shortest_paths(shortest_paths):
    annotations = _shortest_path_annotations()
    return AnnotatedNetwork.from_stable_safety(
        shortest_paths,
        annotations,
        stable_properties={n: is_some for n in "ABC"},
        safety_properties={n: lambda r: z3.BoolVal(True) for n in "ABC"},
        converge_time=2,
    )


@pytest.fixture
def unsound_shortest_paths(shortest_paths):
    annotations = {
        "A": equals(some(0)),
        "B": never(is_some),
        "C": never(is_some),
    }
    return AnnotatedNetwork(
        shortest_paths,
        annotations,
        modular_properties=annotations,
        monolithic_properties={n: lambda r: z3.BoolVal(True) for n in "ABC"},
    )


def _fault_tolerant_reachability(naive: bool):
    """Reachability to A on a complete 3-node graph with one failed edge."""
    network = FaultTolerantNetwork(reachability_network(complete_topology(3), "A"), max_failures=1)

    def witness(node):
        if naive:
            return 2
        return z3.If(network.is_failed(("A", node)), 2, 1)

    annotations = {
        "A": globally(is_some),
        "B": finally_(witness("B"), is_some),
        "C": finally_(witness("C"), is_some),
    }
    modular = {n: finally_(2, is_some) for n in "ABC"}
    monolithic = {n: is_some for n in "ABC"}
    return network, AnnotatedNetwork(network, annotations, modular, monolithic)


@pytest.fixture
def sound_fault_tolerance():
    return _fault_tolerant_reachability(naive=False)


@pytest.fixture
def naive_fault_tolerance():
    return _fault_tolerant_reachability(naive=True)
