"""Tests for networks, protocols and fault tolerance."""

from __future__ import annotations

import pytest
import z3

from routeproof.core.exceptions import NetworkDefinitionError
from routeproof.core.solver import Oracle
from routeproof.core.state import python_value
from routeproof.core.symbolics import SymbolicValue, symbolic_destination
from routeproof.lang.routes import (
    edge,
    identity,
    incr,
    min_option,
    none,
    option_sort,
    some,
    unit,
)
from routeproof.networks import FaultTolerantNetwork, Network, Origination
from routeproof.networks.protocols import reachability_network, shortest_path_network
from routeproof.topology import Topology, complete_topology, path_topology

INT_OPTION = option_sort(z3.IntSort())


def concrete(routes):
    return {node: python_value(route) for node, route in routes.items()}


def counting_network(origination: Origination = Origination.INITIAL_ONLY) -> Network:
    topology = Topology({"A": [], "B": ["A"], "C": ["B"]})
    return Network(
        topology,
        topology.map_edges(lambda e: incr(1)),
        lambda a, b: z3.If(a <= b, a, b),
        {"A": z3.IntVal(0), "B": z3.IntVal(10), "C": z3.IntVal(10)},
        origination=origination,
    )


class TestNetworkDefinition:
    """Test construction-time validation."""

    def test_missing_transfer(self) -> None:
        topology = path_topology(2)
        with pytest.raises(NetworkDefinitionError) as info:
            Network(topology, {("A", "B"): identity}, min_option, {"A": some(0), "B": some(0)})
        assert info.value.missing == [("B", "A")]

    def test_extra_initial_value(self) -> None:
        topology = Topology({"A": []})
        with pytest.raises(NetworkDefinitionError) as info:
            Network(topology, {}, min_option, {"A": some(0), "Z": some(1)})
        assert info.value.extra == ["Z"]

    def test_mismatched_route_sorts(self) -> None:
        topology = Topology({"A": [], "B": []})
        with pytest.raises(NetworkDefinitionError, match="not of sort"):
            Network(topology, {}, min_option, {"A": some(0), "B": z3.IntVal(0)})

    def test_duplicate_symbolics(self) -> None:
        topology = Topology({"A": []})
        x = SymbolicValue("x", z3.IntSort())
        with pytest.raises(NetworkDefinitionError, match="more than once"):
            Network(topology, {}, min_option, {"A": some(0)}, [x, SymbolicValue("x", z3.IntSort())])

    def test_empty_network_needs_sort(self) -> None:
        with pytest.raises(NetworkDefinitionError, match="empty"):
            Network(Topology({}), {}, min_option, {})
        network = Network(Topology({}), {}, min_option, {}, route_sort=INT_OPTION)
        assert network.route_sort == INT_OPTION

    def test_symbolic_routes(self) -> None:
        network = counting_network()
        routes = network.symbolic_routes()
        assert routes["B"].sort() == z3.IntSort()
        assert routes["B"].decl().name().startswith("B-route")
        assert not routes["B"].eq(z3.Int("B-route"))
        assert not routes["B"].eq(network.symbolic_routes()["B"])


class TestUpdate:
    """Test the update and simulation semantics."""

    def test_source_keeps_initial_route(self) -> None:
        network = counting_network()
        routes = network.symbolic_routes()
        assert network.update("A", routes).eq(z3.IntVal(0))

    def test_initial_only_ignores_initial_route(self) -> None:
        network = counting_network()
        routes = {"A": z3.IntVal(0), "B": z3.IntVal(50), "C": z3.IntVal(0)}
        assert python_value(z3.simplify(network.update("C", routes))) == 51

    def test_persistent_merges_initial_route(self) -> None:
        network = counting_network(Origination.PERSISTENT)
        routes = {"A": z3.IntVal(0), "B": z3.IntVal(50), "C": z3.IntVal(0)}
        assert python_value(z3.simplify(network.update("C", routes))) == 10

    def test_simulate(self) -> None:
        states = counting_network().simulate(2)
        assert [concrete(s) for s in states] == [
            {"A": 0, "B": 10, "C": 10},
            {"A": 0, "B": 1, "C": 11},
            {"A": 0, "B": 1, "C": 2},
        ]

    def test_symbolic_constraints(self) -> None:
        x = SymbolicValue("x", z3.IntSort(), lambda v: v > 1)
        topology = Topology({"A": []})
        network = Network(topology, {}, min_option, {"A": some(x.value)}, [x])
        assert Oracle().prove(z3.Implies(network.symbolic_constraints(), x.value >= 2))


class TestProtocols:
    """Test the ready-made protocol networks."""

    def test_shortest_paths_converge(self) -> None:
        network = shortest_path_network(path_topology(3), "A")
        states = network.simulate(3)
        assert concrete(states[0]) == {"A": 0, "B": None, "C": None}
        assert concrete(states[1]) == {"A": 0, "B": 1, "C": None}
        assert concrete(states[2]) == {"A": 0, "B": 1, "C": 2}
        assert concrete(states[3]) == concrete(states[2])

    def test_reachability(self) -> None:
        network = reachability_network(path_topology(2), "B")
        assert network.route_sort == option_sort(unit().sort())
        assert concrete(network.simulate(1)[1]) == {"A": "unit", "B": "unit"}

    def test_unknown_destination(self) -> None:
        with pytest.raises(NetworkDefinitionError, match="not a node"):
            shortest_path_network(path_topology(2), "Z")

    def test_symbolic_destination_is_declared(self) -> None:
        topology = path_topology(3)
        dest = symbolic_destination(topology)
        network = shortest_path_network(topology, dest)
        assert network.symbolics == (dest,)
        initial = network.initial_values["B"]
        claim = z3.Implies(dest.value == z3.StringVal("B"), initial == some(0))
        assert Oracle().prove(claim)

    def test_symbolic_destination_not_duplicated(self) -> None:
        topology = path_topology(2)
        dest = symbolic_destination(topology)
        network = reachability_network(topology, dest, symbolics=[dest])
        assert network.symbolics == (dest,)


class TestFaultTolerance:
    """Test networks with symbolically failed edges."""

    def test_failure_symbolics(self) -> None:
        base = reachability_network(complete_topology(3), "A")
        network = FaultTolerantNetwork(base, max_failures=2)
        assert [s.name for s in network.failed_edges] == ["failed-edge-0", "failed-edge-1"]
        assert network.symbolics[-2:] == tuple(network.failed_edges)
        assert network.origination is base.origination

    def test_max_failures_bounds(self) -> None:
        base = reachability_network(path_topology(2), "A")
        FaultTolerantNetwork(base, max_failures=2)
        with pytest.raises(NetworkDefinitionError, match="max_failures"):
            FaultTolerantNetwork(base, max_failures=3)
        with pytest.raises(NetworkDefinitionError, match="max_failures"):
            FaultTolerantNetwork(base, max_failures=-1)

    def test_requires_option_routes(self) -> None:
        with pytest.raises(NetworkDefinitionError, match="option sort"):
            FaultTolerantNetwork(counting_network(), max_failures=1)

    def test_failed_edge_drops_route(self) -> None:
        network = FaultTolerantNetwork(reachability_network(path_topology(2), "A"), max_failures=1)
        failed = network.failed_edges[0]
        sent = network.transfer[("A", "B")](some(unit()))
        oracle = Oracle()
        assert oracle.prove(z3.Implies(failed.value == some(edge("A", "B")), sent == none(network.route_sort)))
        assert oracle.prove(z3.Implies(failed.value == none(failed.sort), sent == some(unit())))

    def test_failures_range_over_declared_edges(self) -> None:
        network = FaultTolerantNetwork(reachability_network(path_topology(2), "A"), max_failures=1)
        failed = network.failed_edges[0]
        claim = z3.Implies(
            network.symbolic_constraints(),
            z3.Or(failed.value == none(failed.sort), network.is_failed(("A", "B")), network.is_failed(("B", "A"))),
        )
        assert Oracle().prove(claim)

    def test_no_failures(self) -> None:
        network = FaultTolerantNetwork(reachability_network(path_topology(2), "A"), max_failures=0)
        assert z3.is_false(network.is_failed(("A", "B")))
        assert concrete(network.simulate(1)[1]) == {"A": "unit", "B": "unit"}

    def test_shortest_paths_with_failures(self) -> None:
        base = shortest_path_network(complete_topology(3), "A")
        network = FaultTolerantNetwork(base, max_failures=1)
        routes = network.simulate(2)[2]
        failed = network.failed_edges[0]
        claim = z3.Implies(
            z3.And(network.symbolic_constraints(), failed.value == some(edge("A", "B"))),
            routes["B"] == some(2),
        )
        assert Oracle().prove(claim)
