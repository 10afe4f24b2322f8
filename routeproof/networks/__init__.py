"""Networks, annotated networks and ready-made protocols."""

from routeproof.networks.annotated import AnnotatedNetwork
from routeproof.networks.fault_tolerance import FaultTolerantNetwork
from routeproof.networks.network import Network, Origination
from routeproof.networks.protocols import reachability_network, shortest_path_network

__all__ = [
    "Network",
    "Origination",
    "AnnotatedNetwork",
    "FaultTolerantNetwork",
    "shortest_path_network",
    "reachability_network",
]
