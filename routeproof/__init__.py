"""RouteProof: modular verification of route-computation networks.
RouteProof proves temporal properties of networks in which every node
repeatedly merges routes advertised by its neighbors. Users annotate each
node with an invariant over routes and time; RouteProof checks the
annotations node by node with the Z3 theorem prover and reports a concrete
counterexample when a check fails.
Example:
    >>> from routeproof import AnnotatedNetwork, path_topology, shortest_path_network
    >>> from routeproof.lang import equals, is_none, is_some, some, until
    >>> topology = path_topology(3)
    >>> network = shortest_path_network(topology, "A")
    >>> annotations = {
    ...     "A": equals(some(0)),
    ...     "B": until(1, is_none, lambda r: r == some(1)),
    ...     "C": until(2, is_none, lambda r: r == some(2)),
    ... }
    >>> monolithic = {node: is_some for node in topology}
    >>> annotated = AnnotatedNetwork(network, annotations, annotations, monolithic)
    >>> annotated.check_annotations() is None
    True
"""

from routeproof.api import VerificationResult, verify
from routeproof.config import RouteProofConfig, SolverConfig, load_config
from routeproof.core.exceptions import (
    NetworkDefinitionError,
    RouteProofError,
    SolverError,
    TopologyError,
)
from routeproof.core.state import SmtCheck, State
from routeproof.core.symbolics import SymbolicTime, SymbolicValue, symbolic_destination
from routeproof.logging import LogLevel, configure_logging, get_logger
from routeproof.networks import (
    AnnotatedNetwork,
    FaultTolerantNetwork,
    Network,
    Origination,
    reachability_network,
    shortest_path_network,
)
from routeproof.reporting.formatters import format_result
from routeproof.topology import Topology, complete_topology, path_topology, star_topology

__version__ = "0.1.0"

__all__ = [
    "Topology",
    "path_topology",
    "complete_topology",
    "star_topology",
    "SymbolicValue",
    "SymbolicTime",
    "symbolic_destination",
    "Network",
    "Origination",
    "AnnotatedNetwork",
    "FaultTolerantNetwork",
    "shortest_path_network",
    "reachability_network",
    "SmtCheck",
    "State",
    "verify",
    "VerificationResult",
    "format_result",
    "RouteProofConfig",
    "SolverConfig",
    "load_config",
    "RouteProofError",
    "TopologyError",
    "NetworkDefinitionError",
    "SolverError",
    "LogLevel",
    "configure_logging",
    "get_logger",
]
