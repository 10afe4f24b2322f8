"""Testing utilities for RouteProof networks."""

from routeproof.testing.assertions import (
    assert_simulation_sound,
    check_sound,
    check_unsound,
    check_unsound_check,
)
from routeproof.testing.fuzzing import check_merge_laws, route_values

__all__ = [
    "check_sound",
    "check_unsound",
    "check_unsound_check",
    "assert_simulation_sound",
    "check_merge_laws",
    "route_values",
]
