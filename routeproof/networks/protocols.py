"""Ready-made networks for common routing protocols.
Both builders originate a route at a destination node, which may be fixed
or a symbolic value ranging over the node names, and keep originating it
(``Origination.PERSISTENT``).
"""

from __future__ import annotations

from collections.abc import Sequence

import z3

from routeproof.core.exceptions import NetworkDefinitionError
from routeproof.core.symbolics import SymbolicValue
from routeproof.lang.routes import identity, incr, min_option, none, omap, option_sort, prefer_some, some, unit, unit_sort
from routeproof.networks.network import Network, Origination
from routeproof.topology import Topology

Destination = str | SymbolicValue


def _originate(
    topology: Topology,
    destination: Destination,
    route: z3.ExprRef,
) -> dict[str, z3.ExprRef]:
    empty = none(route.sort())
    if isinstance(destination, SymbolicValue):
        return topology.map_nodes(lambda n: z3.If(destination.value == z3.StringVal(n), route, empty))
    if destination not in topology:
        raise NetworkDefinitionError(f"destination {destination!r} is not a node of the topology")
    return topology.map_nodes(lambda n: route if n == destination else empty)


def _symbolics(destination: Destination, symbolics: Sequence[SymbolicValue]) -> tuple[SymbolicValue, ...]:
    if isinstance(destination, SymbolicValue) and destination not in symbolics:
        return (destination, *symbolics)
    return tuple(symbolics)


def shortest_path_network(
    topology: Topology,
    destination: Destination,
    symbolics: Sequence[SymbolicValue] = (),
) -> Network:
    """Hop-count shortest paths towards ``destination``.
    Routes are ``Option[Int]``: the destination originates ``some(0)``, every
    edge adds one hop and the merge keeps the shorter route.
    """
    return Network(
        topology,
        topology.map_edges(lambda e: omap(incr(1))),
        min_option,
        _originate(topology, destination, some(0)),
        _symbolics(destination, symbolics),
        route_sort=option_sort(z3.IntSort()),
        origination=Origination.PERSISTENT,
    )


def reachability_network(
    topology: Topology,
    destination: Destination,
    symbolics: Sequence[SymbolicValue] = (),
) -> Network:
    """Reachability of ``destination``.
    Routes are ``Option[Unit]``: a node holds ``some(unit)`` once it has heard
    of the destination.
    """
    return Network(
        topology,
        topology.map_edges(lambda e: identity),
        prefer_some,
        _originate(topology, destination, some(unit())),
        _symbolics(destination, symbolics),
        route_sort=option_sort(unit_sort()),
        origination=Origination.PERSISTENT,
    )


__all__ = [
    "Destination",
    "shortest_path_network",
    "reachability_network",
]
