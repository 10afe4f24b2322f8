"""Route-computation networks.
A network is a topology together with a transfer function per directed
edge, a merge function, an initial route per node and the symbolic values
its definition may mention. Every node repeatedly merges the routes its
predecessors advertise, each sent through the transfer function of the
connecting edge.

The merge function is assumed, not checked, to be associative and
commutative and to select the better of two routes under some route order,
so that the network has a unique least fixed point.
``routeproof.testing.fuzzing.check_merge_laws`` can test this on concrete
routes.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from functools import reduce

import z3

from routeproof.core.exceptions import NetworkDefinitionError
from routeproof.core.symbolics import SymbolicValue, all_constraints
from routeproof.topology import Edge, Topology

Transfer = Callable[[z3.ExprRef], z3.ExprRef]
Merge = Callable[[z3.ExprRef, z3.ExprRef], z3.ExprRef]


class Origination(Enum):
    """How a node's initial route takes part in later rounds.
    ``INITIAL_ONLY``: the initial route is the node's route at time 0 and
    later rounds only merge routes from predecessors.
    ``PERSISTENT``: the node keeps originating its initial route; it is
    merged with the predecessors' routes in every round.
    Nodes without predecessors keep their initial route under both policies.
    """

    INITIAL_ONLY = "initial-only"
    PERSISTENT = "persistent"


def _check_keys(what: str, expected: Sequence, actual: Mapping) -> None:
    missing = [k for k in expected if k not in actual]
    extra = [k for k in actual if k not in set(expected)]
    if missing or extra:
        raise NetworkDefinitionError(f"{what} do not match the topology", missing=missing, extra=extra)


class Network:
    """A route-computation network.
    Attributes:
        topology: The network topology.
        transfer: Transfer function for every ``(predecessor, node)`` edge.
        merge: Binary merge of two routes.
        initial_values: The route every node holds at time 0.
        symbolics: Declared symbolic values; their constraints scope every
            query about this network.
        route_sort: The z3 sort of routes.
        origination: Whether initial routes re-enter later rounds.
    Raises:
        NetworkDefinitionError: If transfer functions or initial values do
            not cover the topology exactly, initial routes disagree on their
            sort, or two symbolic values share a name.
    """

    def __init__(
        self,
        topology: Topology,
        transfer: Mapping[Edge, Transfer],
        merge: Merge,
        initial_values: Mapping[str, z3.ExprRef],
        symbolics: Sequence[SymbolicValue] = (),
        *,
        route_sort: z3.SortRef | None = None,
        origination: Origination = Origination.INITIAL_ONLY,
    ):
        _check_keys("transfer functions", topology.edges, transfer)
        _check_keys("initial values", topology.nodes, initial_values)
        names = [s.name for s in symbolics]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise NetworkDefinitionError(f"symbolic values declared more than once: {duplicates}")
        if route_sort is None:
            if not topology.nodes:
                raise NetworkDefinitionError("cannot infer the route sort of an empty network")
            route_sort = initial_values[topology.nodes[0]].sort()
        mismatched = [n for n in topology.nodes if initial_values[n].sort() != route_sort]
        if mismatched:
            raise NetworkDefinitionError(f"initial routes are not of sort {route_sort}: {mismatched}")
        self.topology = topology
        self.transfer = dict(transfer)
        self.merge = merge
        self.initial_values = dict(initial_values)
        self.symbolics = tuple(symbolics)
        self.route_sort = route_sort
        self.origination = origination

    def symbolic_constraints(self) -> z3.BoolRef:
        """The conjunction of every declared symbolic value's constraint."""
        return all_constraints(self.symbolics)

    def symbolic_routes(self, suffix: str = "route") -> dict[str, z3.ExprRef]:
        """A fresh z3 constant of the route sort for every node."""
        return self.topology.map_nodes(lambda node: z3.FreshConst(self.route_sort, prefix=f"{node}-{suffix}"))

    def update(self, node: str, routes: Mapping[str, z3.ExprRef]) -> z3.ExprRef:
        """Compute the next route of ``node`` from its predecessors' routes.
        Args:
            node: The node to update.
            routes: Current route of (at least) every predecessor.
        Returns:
            The merge of every transferred predecessor route, preceded by the
            node's initial route under ``Origination.PERSISTENT``. A node
            without predecessors keeps its initial route.
        """
        preds = self.topology[node]
        if not preds:
            return self.initial_values[node]
        incoming = [self.transfer[(pred, node)](routes[pred]) for pred in preds]
        if self.origination is Origination.PERSISTENT:
            incoming.insert(0, self.initial_values[node])
        return reduce(self.merge, incoming)

    def step(self, routes: Mapping[str, z3.ExprRef]) -> dict[str, z3.ExprRef]:
        """Synchronously update every node once."""
        return self.topology.map_nodes(lambda node: z3.simplify(self.update(node, routes)))

    def simulate(self, rounds: int) -> list[dict[str, z3.ExprRef]]:
        """Simulate ``rounds`` synchronous rounds from the initial routes.
        Returns:
            The routes at times ``0..rounds``. Routes are simplified z3
            terms; they stay symbolic where the initial routes mention
            symbolic values.
        """
        states = [dict(self.initial_values)]
        for _ in range(rounds):
            states.append(self.step(states[-1]))
        return states

    def __repr__(self) -> str:
        return (
            f"Network(nodes={self.topology.node_count}, edges={self.topology.edge_count}, "
            f"route_sort={self.route_sort}, symbolics={len(self.symbolics)})"
        )


__all__ = [
    "Network",
    "Origination",
    "Transfer",
    "Merge",
]
