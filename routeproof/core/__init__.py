"""Core module for RouteProof.
Provides:
- Symbolic values and the global constraint
- Counterexample states
- Z3 oracle
- Exceptions
"""

from routeproof.core.exceptions import (
    ConfigError,
    MergeLawViolation,
    NetworkDefinitionError,
    RouteProofError,
    SolverError,
    TopologyError,
)
from routeproof.core.solver import Oracle, SolverResult
from routeproof.core.state import (
    BaseState,
    InductiveState,
    MonolithicState,
    SafetyState,
    SmtCheck,
    State,
    python_value,
)
from routeproof.core.symbolics import (
    SymbolicTime,
    SymbolicValue,
    all_constraints,
    ascending_symbolic_times,
    symbolic_destination,
    to_z3,
)

__all__ = [
    "RouteProofError",
    "TopologyError",
    "NetworkDefinitionError",
    "SolverError",
    "ConfigError",
    "MergeLawViolation",
    "Oracle",
    "SolverResult",
    "SmtCheck",
    "State",
    "BaseState",
    "InductiveState",
    "SafetyState",
    "MonolithicState",
    "python_value",
    "SymbolicValue",
    "SymbolicTime",
    "ascending_symbolic_times",
    "symbolic_destination",
    "all_constraints",
    "to_z3",
]
