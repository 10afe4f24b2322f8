"""Property-based testing of merge functions using Hypothesis.
Annotation proofs assume the merge function is commutative, associative and
idempotent. These laws are not checked by the solver; this module generates
concrete routes of a sort and tests the laws on them instead.
"""

from __future__ import annotations

import z3
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from routeproof.core.exceptions import MergeLawViolation
from routeproof.core.state import python_value
from routeproof.lang.routes import Merge


def bool_values() -> st.SearchStrategy:
    return st.booleans().map(z3.BoolVal)


def int_values(min_value: int = -100, max_value: int = 100) -> st.SearchStrategy:
    return st.integers(min_value=min_value, max_value=max_value).map(z3.IntVal)


def bitvec_values(size: int) -> st.SearchStrategy:
    return st.integers(min_value=0, max_value=2**size - 1).map(lambda v: z3.BitVecVal(v, size))


def string_values(max_size: int = 8) -> st.SearchStrategy:
    return st.text(alphabet="abcdefgh", max_size=max_size).map(z3.StringVal)


def route_values(sort: z3.SortRef, max_depth: int = 3) -> st.SearchStrategy:
    """Strategy for concrete z3 values of ``sort``.
    Supports booleans, integers, bit-vectors, strings and datatypes built
    from them. Recursive datatypes are cut off at ``max_depth`` by only
    drawing constructors without recursive fields.
    """
    if sort == z3.BoolSort():
        return bool_values()
    if sort == z3.IntSort():
        return int_values()
    if z3.is_bv_sort(sort):
        return bitvec_values(sort.size())
    if sort == z3.StringSort():
        return string_values()
    if isinstance(sort, z3.DatatypeSortRef):
        return _datatype_values(sort, max_depth)
    raise TypeError(f"no route strategy for sort {sort}")


def _datatype_values(sort: z3.DatatypeSortRef, depth: int) -> st.SearchStrategy:
    options = []
    for i in range(sort.num_constructors()):
        constructor = sort.constructor(i)
        domain = [constructor.domain(j) for j in range(constructor.arity())]
        if any(d == sort for d in domain) and depth <= 0:
            continue
        fields = [route_values(d, depth - 1) for d in domain]
        options.append(st.tuples(*fields).map(lambda args, c=constructor: c(*args)))
    if not options:
        raise TypeError(f"cannot build a finite value of sort {sort}")
    return st.one_of(*options)


def _check_law(law: str, left: z3.ExprRef, right: z3.ExprRef) -> None:
    if not z3.is_true(z3.simplify(left == right)):
        raise MergeLawViolation(law, python_value(z3.simplify(left)), python_value(z3.simplify(right)))


def check_merge_laws(merge: Merge, sort: z3.SortRef, max_examples: int = 100) -> None:
    """Test that ``merge`` is commutative, associative and idempotent.
    Args:
        merge: The merge function to test.
        sort: The route sort ``merge`` operates on.
        max_examples: Number of generated route triples.
    Raises:
        MergeLawViolation: With the shrunk counterexample of the first
            law that fails.
    """
    values = route_values(sort)

    @settings(
        max_examples=max_examples,
        deadline=None,
        database=None,
        suppress_health_check=[HealthCheck.too_slow],
    )
    @given(values, values, values)
    def merge_laws(a, b, c):
        _check_law("idempotent", merge(a, a), a)
        _check_law("commutative", merge(a, b), merge(b, a))
        _check_law("associative", merge(merge(a, b), c), merge(a, merge(b, c)))

    merge_laws()


__all__ = [
    "bool_values",
    "int_values",
    "bitvec_values",
    "string_values",
    "route_values",
    "check_merge_laws",
]
