"""Route-function helpers and temporal annotation combinators."""

from routeproof.lang.routes import (
    const_true,
    edge,
    edge_sort,
    get_value,
    has_value,
    identity,
    if_some,
    incr,
    is_none,
    is_some,
    min_option,
    negate,
    none,
    omap,
    option_sort,
    prefer_some,
    some,
    unit,
    unit_sort,
)
from routeproof.lang.temporal import (
    Annotation,
    any_route,
    equals,
    finally_,
    finally_by_distance,
    globally,
    intersect,
    never,
    until,
)

__all__ = [
    "option_sort",
    "unit_sort",
    "unit",
    "edge_sort",
    "edge",
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
    "Annotation",
    "globally",
    "finally_",
    "until",
    "intersect",
    "never",
    "equals",
    "any_route",
    "finally_by_distance",
]
