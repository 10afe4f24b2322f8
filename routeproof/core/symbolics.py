"""Symbolic values and the global constraint that scopes every query.
A symbolic value is a named free variable with an optional predicate
restricting its legal values. The conjunction of all declared predicates is
added to every SMT query a network issues, so counterexamples always respect
the declared domains.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

import z3

if TYPE_CHECKING:
    from routeproof.topology import Topology


def to_z3(value: Any, sort: z3.SortRef | None = None) -> z3.ExprRef:
    """Lift a Python constant into a z3 expression.
    Z3 expressions are returned unchanged. ``sort`` disambiguates
    integers that should be bit-vectors.
    """
    if isinstance(value, z3.ExprRef):
        return value
    if isinstance(value, bool):
        return z3.BoolVal(value)
    if isinstance(value, int):
        if sort is not None and z3.is_bv_sort(sort):
            return z3.BitVecVal(value, sort.size())
        return z3.IntVal(value)
    if isinstance(value, str):
        return z3.StringVal(value)
    raise TypeError(f"cannot lift {type(value).__name__} value {value!r} into z3")


class SymbolicValue:
    """A named free variable of a z3 sort.
    Attributes:
        name: Unique name of the variable; also its z3 constant name.
        sort: The z3 sort of the variable.
        value: The z3 constant standing for the variable.
        predicate: Optional domain restriction over ``value``.
    Example:
        >>> d = SymbolicValue("d", z3.IntSort(), lambda v: v >= 0)
        >>> d.constraint()
        d >= 0
    """

    def __init__(
        self,
        name: str,
        sort: z3.SortRef,
        predicate: Callable[[z3.ExprRef], z3.BoolRef] | None = None,
    ):
        self.name = name
        self.sort = sort
        self.value = z3.Const(name, sort)
        self.predicate = predicate

    def constraint(self) -> z3.BoolRef:
        """Return the domain predicate applied to this value (true if none)."""
        if self.predicate is None:
            return z3.BoolVal(True)
        return self.predicate(self.value)

    def equals_value(self, other: Any) -> z3.BoolRef:
        return self.value == to_z3(other, self.sort)

    def does_not_equal_value(self, other: Any) -> z3.BoolRef:
        return self.value != to_z3(other, self.sort)

    def __repr__(self) -> str:
        return f"SymbolicValue({self.name!r}, {self.sort})"


class SymbolicTime(SymbolicValue):
    """A non-negative symbolic time, optionally strictly after another one."""

    def __init__(self, name: str, after: SymbolicTime | None = None):
        self.after = after
        super().__init__(name, z3.IntSort(), self._bound)

    def _bound(self, value: z3.ArithRef) -> z3.BoolRef:
        if self.after is None:
            return value >= 0
        return z3.And(value >= 0, value > self.after.value)


def ascending_symbolic_times(count: int, prefix: str = "tau") -> list[SymbolicTime]:
    """Return ``count`` symbolic times with ``times[i] < times[i + 1]``."""
    times: list[SymbolicTime] = []
    for i in range(count):
        times.append(SymbolicTime(f"{prefix}-{i}", times[-1] if times else None))
    return times


def symbolic_destination(topology: Topology, name: str = "dest") -> SymbolicValue:
    """A string symbolic constrained to be one of the topology's node names."""
    return SymbolicValue(
        name,
        z3.StringSort(),
        lambda s: z3.Or(*[s == z3.StringVal(node) for node in topology.nodes]),
    )


def all_constraints(symbolics: Iterable[SymbolicValue]) -> z3.BoolRef:
    """Conjoin the constraints of every symbolic value."""
    constraints = [s.constraint() for s in symbolics]
    if not constraints:
        return z3.BoolVal(True)
    return z3.And(*constraints)


__all__ = [
    "SymbolicValue",
    "SymbolicTime",
    "ascending_symbolic_times",
    "symbolic_destination",
    "all_constraints",
    "to_z3",
]
