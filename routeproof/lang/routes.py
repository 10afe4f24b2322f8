"""Route sorts and route-function helpers.
Routes are z3 expressions of any sort. This module supplies the common
option, unit and edge sorts and the small functions networks are built from:
predicates (``Route -> Bool``), transfers (``Route -> Route``) and merges
(``(Route, Route) -> Route``).

Option sorts are z3 datatypes with constructors ``none`` (index 0) and
``some(value)`` (index 1). Helpers look the constructors up through the sort
of their argument, so they work on any option route.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache
from typing import Any

import z3

from routeproof.core.symbolics import to_z3

Predicate = Callable[[z3.ExprRef], z3.BoolRef]
Transfer = Callable[[z3.ExprRef], z3.ExprRef]
Merge = Callable[[z3.ExprRef, z3.ExprRef], z3.ExprRef]


@lru_cache(maxsize=None)
def option_sort(element: z3.SortRef) -> z3.DatatypeSortRef:
    """Return the option sort over ``element``, creating it once per sort."""
    datatype = z3.Datatype(f"Option[{element}]")
    datatype.declare("none")
    datatype.declare("some", ("value", element))
    return datatype.create()


@lru_cache(maxsize=None)
def unit_sort() -> z3.DatatypeSortRef:
    """A sort with the single value ``unit``."""
    datatype = z3.Datatype("Unit")
    datatype.declare("unit")
    return datatype.create()


def unit() -> z3.ExprRef:
    return unit_sort().constructor(0)()


@lru_cache(maxsize=None)
def edge_sort() -> z3.DatatypeSortRef:
    """A pair of node names identifying a directed edge."""
    sort, _, _ = z3.TupleSort("Edge", [z3.StringSort(), z3.StringSort()])
    return sort


def edge(pred: str, node: str) -> z3.ExprRef:
    return edge_sort().constructor(0)(z3.StringVal(pred), z3.StringVal(node))


def is_option_sort(sort: z3.SortRef) -> bool:
    if not isinstance(sort, z3.DatatypeSortRef) or sort.num_constructors() != 2:
        return False
    return sort.constructor(0).name() == "none" and sort.constructor(1).name() == "some"


def option_element(sort: z3.DatatypeSortRef) -> z3.SortRef:
    return sort.constructor(1).domain(0)


def none(sort: z3.SortRef) -> z3.ExprRef:
    """The empty route of ``sort``; a non-option sort is wrapped first."""
    if not is_option_sort(sort):
        sort = option_sort(sort)
    return sort.constructor(0)()


def some(value: Any, sort: z3.SortRef | None = None) -> z3.ExprRef:
    """Wrap ``value`` in an option. ``sort`` is the element sort."""
    value = to_z3(value, sort)
    return option_sort(value.sort()).constructor(1)(value)


def is_some(route: z3.ExprRef) -> z3.BoolRef:
    return route.sort().recognizer(1)(route)


def is_none(route: z3.ExprRef) -> z3.BoolRef:
    return route.sort().recognizer(0)(route)


def get_value(route: z3.ExprRef) -> z3.ExprRef:
    """The payload of an option route; unspecified when the route is none."""
    return route.sort().accessor(1, 0)(route)


def if_some(predicate: Predicate) -> Predicate:
    """Lift ``predicate`` to options: it must hold of the payload, if any."""
    return lambda r: z3.Implies(is_some(r), predicate(get_value(r)))


def has_value(predicate: Predicate) -> Predicate:
    """Lift ``predicate`` to options: a payload must exist and satisfy it."""
    return lambda r: z3.And(is_some(r), predicate(get_value(r)))


def omap(f: Transfer) -> Transfer:
    """Apply ``f`` to the payload of an option route, keeping none as none."""

    def transfer(r: z3.ExprRef) -> z3.ExprRef:
        return z3.If(is_some(r), r.sort().constructor(1)(f(get_value(r))), r)

    return transfer


def min_option(r1: z3.ExprRef, r2: z3.ExprRef) -> z3.ExprRef:
    """Merge two option routes, preferring some and then the smaller payload."""
    return z3.If(
        is_none(r1),
        r2,
        z3.If(is_none(r2), r1, z3.If(get_value(r1) <= get_value(r2), r1, r2)),
    )


def prefer_some(r1: z3.ExprRef, r2: z3.ExprRef) -> z3.ExprRef:
    """Merge two option routes, keeping the first one present."""
    return z3.If(is_some(r1), r1, r2)


def incr(amount: int = 1) -> Transfer:
    return lambda r: r + amount


def identity(r: z3.ExprRef) -> z3.ExprRef:
    return r


def const_true(r: z3.ExprRef) -> z3.BoolRef:
    return z3.BoolVal(True)


def negate(predicate: Predicate) -> Predicate:
    return lambda r: z3.Not(predicate(r))


__all__ = [
    "Predicate",
    "Transfer",
    "Merge",
    "option_sort",
    "unit_sort",
    "unit",
    "edge_sort",
    "edge",
    "is_option_sort",
    "option_element",
    "none",
    "some",
    "is_some",
    "is_none",
    "get_value",
    "if_some",
    "has_value",
    "omap",
    "min_option",
    "prefer_some",
    "incr",
    "identity",
    "const_true",
    "negate",
]
