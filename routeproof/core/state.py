"""Counterexample states for RouteProof.
A failed check yields a state describing the falsifying model: which check
failed, at which node, the concrete route values involved and the concrete
assignment of every declared symbolic value. Each check kind has its own
state class carrying exactly the fields relevant to it.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

import z3

from routeproof.core.symbolics import SymbolicValue


class SmtCheck(Enum):
    """The proof obligation a counterexample falsifies."""

    BASE = "base"
    INDUCTIVE = "inductive"
    SAFETY = "safety"
    MONOLITHIC = "monolithic"


def python_value(value: z3.ExprRef) -> Any:
    """Convert a concrete z3 model value into a plain Python value.
    Integers, booleans, strings and bit-vectors map to their Python
    counterparts. Option values map to ``None`` or their payload, tuple
    sorts to tuples, other datatypes to ``{"constructor": ..., fields...}``
    (or the bare constructor name when it has no fields). Anything else is
    rendered with ``str``.
    """
    if z3.is_true(value):
        return True
    if z3.is_false(value):
        return False
    if z3.is_int_value(value) or z3.is_bv_value(value):
        return value.as_long()
    if z3.is_rational_value(value):
        return value.as_fraction()
    if z3.is_string_value(value):
        return value.as_string()
    sort = value.sort()
    if isinstance(sort, z3.DatatypeSortRef) and z3.is_app(value):
        return _datatype_value(sort, value)
    return str(value)


def _datatype_value(sort: z3.DatatypeSortRef, value: z3.ExprRef) -> Any:
    decl = value.decl()
    index = next(
        (i for i in range(sort.num_constructors()) if sort.constructor(i) == decl),
        None,
    )
    if index is None:
        return str(value)
    args = [python_value(child) for child in value.children()]
    name = decl.name()
    if name == "none" and not args:
        return None
    if name == "some" and len(args) == 1:
        return args[0]
    if not args:
        return name
    fields = [sort.accessor(index, j).name() for j in range(len(args))]
    if all(f.startswith("project") for f in fields):
        return tuple(args)
    return {"constructor": name, **dict(zip(fields, args))}


def evaluate(model: z3.ModelRef, expr: z3.ExprRef) -> Any:
    """Evaluate ``expr`` under ``model`` and convert the result."""
    return python_value(model.eval(expr, model_completion=True))


def symbolic_assignment(model: z3.ModelRef, symbolics: Iterable[SymbolicValue]) -> dict[str, Any]:
    return {s.name: evaluate(model, s.value) for s in symbolics}


@dataclass(frozen=True)
class State:
    """A counterexample to one of the network checks.
    Attributes:
        symbolics: Concrete value of every declared symbolic, by name.
    """

    kind: ClassVar[SmtCheck]
    symbolics: Mapping[str, Any]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value}
        for name, value in self.__dict__.items():
            data[name] = dict(value) if isinstance(value, Mapping) else value
        return data

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def _lines(self) -> list[str]:
        return []

    def format(self) -> str:
        """Render the counterexample as a human-readable report."""
        node = getattr(self, "node", None)
        where = f" at node {node}" if node is not None else ""
        lines = [f"{self.kind.value.capitalize()} check failed{where}."]
        lines.extend(self._lines())
        if self.symbolics:
            lines.append("symbolics:")
            for name, value in self.symbolics.items():
                lines.append(f"  {name} = {value!r}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class BaseState(State):
    """The initial route of ``node`` falsifies its annotation at time 0."""

    kind: ClassVar[SmtCheck] = SmtCheck.BASE
    node: str
    route: Any

    def _lines(self) -> list[str]:
        return [f"initial route: {self.route!r}"]


@dataclass(frozen=True)
class InductiveState(State):
    """Neighbor routes satisfying their annotations at ``time - 1`` merge
    into a route that falsifies the annotation of ``node`` at ``time``."""

    kind: ClassVar[SmtCheck] = SmtCheck.INDUCTIVE
    node: str
    route: Any
    neighbor_routes: Mapping[str, Any]
    time: int

    def _lines(self) -> list[str]:
        lines = [f"time: {self.time}"]
        for neighbor, route in self.neighbor_routes.items():
            lines.append(f"neighbor {neighbor} route at time {self.time - 1}: {route!r}")
        lines.append(f"merged route at {self.node}: {self.route!r}")
        return lines


@dataclass(frozen=True)
class SafetyState(State):
    """A route allowed by the annotation of ``node`` falsifies its property."""

    kind: ClassVar[SmtCheck] = SmtCheck.SAFETY
    node: str
    route: Any
    time: int

    def _lines(self) -> list[str]:
        return [f"time: {self.time}", f"route: {self.route!r}"]


@dataclass(frozen=True)
class MonolithicState(State):
    """A stable state of the whole network falsifies some property."""

    kind: ClassVar[SmtCheck] = SmtCheck.MONOLITHIC
    routes: Mapping[str, Any]

    def _lines(self) -> list[str]:
        return [f"{node} route: {route!r}" for node, route in self.routes.items()]


__all__ = [
    "SmtCheck",
    "State",
    "BaseState",
    "InductiveState",
    "SafetyState",
    "MonolithicState",
    "python_value",
    "evaluate",
    "symbolic_assignment",
]
