"""Networks with a bounded number of symbolically failed edges."""

from __future__ import annotations

import z3

from routeproof.core.exceptions import NetworkDefinitionError
from routeproof.core.symbolics import SymbolicValue
from routeproof.lang.routes import edge, edge_sort, is_none, is_option_sort, none, option_sort, some
from routeproof.networks.network import Network, Transfer
from routeproof.topology import Edge


class FaultTolerantNetwork(Network):
    """Wrap a network so that up to ``max_failures`` edges may be down.
    Each possible failure is a symbolic value ``failed-edge-i`` that is either
    none or one of the topology's edges. A failed edge drops every route sent
    over it, so the route sort must be an option sort. Because the failures
    are symbolic, one proof covers every failure scenario at once.
    Args:
        network: The network to wrap; its symbolics are kept.
        max_failures: How many edges may fail, between 0 and the edge count.
    Raises:
        NetworkDefinitionError: If ``max_failures`` is out of range or routes
            are not options.
    """

    def __init__(self, network: Network, max_failures: int):
        topology = network.topology
        if not 0 <= max_failures <= topology.edge_count:
            raise NetworkDefinitionError(
                f"max_failures must lie in [0, {topology.edge_count}], got {max_failures}"
            )
        if not is_option_sort(network.route_sort):
            raise NetworkDefinitionError(f"failed edges drop routes, which needs an option sort, got {network.route_sort}")
        self.base_network = network
        self.max_failures = max_failures
        self.failed_edges = [
            SymbolicValue(f"failed-edge-{i}", option_sort(edge_sort()), self._is_declared_edge)
            for i in range(max_failures)
        ]
        transfer = topology.map_edges(lambda e: self._drop_if_failed(e, network.transfer[e]))
        super().__init__(
            topology,
            transfer,
            network.merge,
            network.initial_values,
            (*network.symbolics, *self.failed_edges),
            route_sort=network.route_sort,
            origination=network.origination,
        )

    def _is_declared_edge(self, failed: z3.ExprRef) -> z3.BoolRef:
        edges = self.base_network.topology.edges
        return z3.Or(is_none(failed), *[failed == some(edge(*e)) for e in edges])

    def _drop_if_failed(self, e: Edge, transfer: Transfer) -> Transfer:
        route_sort = self.base_network.route_sort
        return lambda r: z3.If(self.is_failed(e), none(route_sort), transfer(r))

    def is_failed(self, e: Edge) -> z3.BoolRef:
        """True exactly when one of the failure symbolics names edge ``e``."""
        if not self.failed_edges:
            return z3.BoolVal(False)
        target = some(edge(*e))
        return z3.Or(*[f.value == target for f in self.failed_edges])

    def __repr__(self) -> str:
        return f"FaultTolerantNetwork({self.base_network!r}, max_failures={self.max_failures})"


__all__ = [
    "FaultTolerantNetwork",
]
