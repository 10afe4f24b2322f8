"""Temporal annotation combinators.
An annotation is a function ``(route, time) -> Bool`` over z3 expressions.
These combinators build annotations from time-independent predicates.
Thresholds may be Python integers or z3 integer expressions, so witness
times can depend on symbolic values (a destination, a failed edge, ...).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Union

import z3

from routeproof.core.symbolics import to_z3

if TYPE_CHECKING:
    from routeproof.topology import Topology

Annotation = Callable[[z3.ExprRef, z3.ArithRef], z3.BoolRef]
Predicate = Callable[[z3.ExprRef], z3.BoolRef]
Time = Union[int, z3.ArithRef]


def globally(predicate: Predicate) -> Annotation:
    """``predicate`` holds at every time."""
    return lambda route, time: predicate(route)


def finally_(witness: Time, predicate: Predicate) -> Annotation:
    """``predicate`` holds from time ``witness`` onward; anything goes before."""
    return lambda route, time: z3.Or(time < witness, predicate(route))


def until(witness: Time, before: Predicate, after: Predicate) -> Annotation:
    """``before`` holds strictly before ``witness`` and ``after`` from then on."""
    return lambda route, time: z3.Or(
        z3.And(time < witness, before(route)),
        z3.And(time >= witness, after(route)),
    )


def intersect(*annotations: Annotation) -> Annotation:
    """All of ``annotations`` hold."""
    return lambda route, time: z3.And(*[a(route, time) for a in annotations])


def never(predicate: Predicate) -> Annotation:
    return globally(lambda route: z3.Not(predicate(route)))


def equals(value: Any) -> Annotation:
    """The route is always exactly ``value``."""
    return lambda route, time: route == to_z3(value, route.sort())


def any_route(route: z3.ExprRef, time: z3.ArithRef) -> z3.BoolRef:
    """The trivial annotation."""
    return z3.BoolVal(True)


def finally_by_distance(
    topology: Topology,
    destination: str,
    predicate: Predicate,
    times: Sequence[Time],
) -> dict[str, Annotation]:
    """Annotate every node with ``finally_(times[d], predicate)``.
    ``d`` is the node's hop distance from ``destination``, so routes are
    expected to settle in waves moving outward from the destination.
    Args:
        topology: The network topology.
        destination: The node originating the route.
        predicate: What must eventually hold at every node.
        times: Witness time for each distance; typically ascending
            symbolic times (``SymbolicTime`` instances are unwrapped).
    Raises:
        TopologyError: If a node cannot be reached from ``destination``.
        ValueError: If ``times`` is shorter than the largest distance.
    """
    annotations: dict[str, Annotation] = {}
    for node in topology.nodes:
        dist = topology.distance(destination, node)
        if dist >= len(times):
            raise ValueError(f"no witness time for distance {dist} (node {node!r})")
        annotations[node] = finally_(getattr(times[dist], "value", times[dist]), predicate)
    return annotations


__all__ = [
    "Annotation",
    "Time",
    "globally",
    "finally_",
    "until",
    "intersect",
    "never",
    "equals",
    "any_route",
    "finally_by_distance",
]
