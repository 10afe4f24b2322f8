"""Network topologies for RouteProof.
A topology maps every node to the list of its predecessors: the nodes whose
transferred routes it merges. Directed edges are ``(predecessor, node)`` pairs.
The graph is stored as a frozen networkx digraph so structural queries
(distances, reachability) come from networkx.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import TypeVar

import networkx as nx

from routeproof.core.exceptions import TopologyError

T = TypeVar("T")
A = TypeVar("A")

Edge = tuple[str, str]


class Topology:
    """An immutable directed graph over named nodes.
    Example:
        >>> topo = Topology({"A": [], "B": ["A"], "C": ["B"]})
        >>> topo["C"]
        ('B',)
        >>> topo.edge_count
        2
    """

    def __init__(self, neighbors: Mapping[str, Sequence[str]]):
        """Build a topology from a predecessor adjacency mapping.
        Args:
            neighbors: Mapping from each node to its predecessors.
        Raises:
            TopologyError: If a predecessor is not a declared node, or a
                node lists the same predecessor twice.
        """
        self._nodes: tuple[str, ...] = tuple(neighbors)
        self._neighbors: dict[str, tuple[str, ...]] = {}
        graph = nx.DiGraph()
        graph.add_nodes_from(self._nodes)
        for node, preds in neighbors.items():
            preds = tuple(preds)
            for pred in preds:
                if pred not in neighbors:
                    raise TopologyError(f"node {node!r} lists undeclared predecessor {pred!r}")
            if len(set(preds)) != len(preds):
                raise TopologyError(f"node {node!r} lists a predecessor more than once: {list(preds)}")
            self._neighbors[node] = preds
            graph.add_edges_from((pred, node) for pred in preds)
        self._graph = nx.freeze(graph)
        self._edge_count = sum(len(preds) for preds in self._neighbors.values())

    @classmethod
    def from_graph(cls, graph: nx.Graph) -> Topology:
        """Build a topology from a networkx graph.
        Undirected graphs yield edges in both directions; digraph edges
        ``(u, v)`` make ``u`` a predecessor of ``v``. Node labels are
        converted to strings.
        """
        directed = graph.to_directed() if not graph.is_directed() else graph
        neighbors: dict[str, list[str]] = {str(node): [] for node in directed.nodes}
        for node in directed.nodes:
            neighbors[str(node)].extend(str(pred) for pred in directed.predecessors(node))
        return cls(neighbors)

    @property
    def nodes(self) -> tuple[str, ...]:
        """The nodes in declaration order."""
        return self._nodes

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return self._edge_count

    @property
    def graph(self) -> nx.DiGraph:
        """The frozen networkx view of this topology."""
        return self._graph

    @property
    def edges(self) -> list[Edge]:
        """All directed ``(predecessor, node)`` edges."""
        return [(pred, node) for node in self._nodes for pred in self._neighbors[node]]

    def neighbors(self, node: str) -> tuple[str, ...]:
        """Return the predecessors of ``node``."""
        try:
            return self._neighbors[node]
        except KeyError:
            raise TopologyError(f"unknown node {node!r}") from None

    def __getitem__(self, node: str) -> tuple[str, ...]:
        return self.neighbors(node)

    def __contains__(self, node: object) -> bool:
        return node in self._neighbors

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def has_node(self, node: str) -> bool:
        return node in self._neighbors

    def has_edge(self, edge: Edge) -> bool:
        return self._graph.has_edge(*edge)

    def map_nodes(self, f: Callable[[str], T]) -> dict[str, T]:
        """Return a dictionary mapping every node to ``f(node)``."""
        return {node: f(node) for node in self._nodes}

    def fold_nodes(self, f: Callable[[A, str], A], initial: A) -> A:
        acc = initial
        for node in self._nodes:
            acc = f(acc, node)
        return acc

    def map_edges(self, f: Callable[[Edge], T]) -> dict[Edge, T]:
        """Return a dictionary mapping every edge to ``f(edge)``."""
        return {edge: f(edge) for edge in self.edges}

    def fold_edges(self, f: Callable[[A, Edge], A], initial: A) -> A:
        acc = initial
        for edge in self.edges:
            acc = f(acc, edge)
        return acc

    def filter_edges(self, predicate: Callable[[Edge], bool]) -> list[Edge]:
        return [edge for edge in self.edges if predicate(edge)]

    def distance(self, source: str, target: str) -> int:
        """Number of hops a route needs to travel from ``source`` to ``target``.
        Raises:
            TopologyError: If either node is unknown or no path exists.
        """
        for node in (source, target):
            if node not in self._neighbors:
                raise TopologyError(f"unknown node {node!r}")
        try:
            return nx.shortest_path_length(self._graph, source=source, target=target)
        except nx.NetworkXNoPath:
            raise TopologyError(f"no path from {source!r} to {target!r}") from None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Topology):
            return NotImplemented
        return self._nodes == other._nodes and self._neighbors == other._neighbors

    def __hash__(self) -> int:
        return hash(tuple(self._neighbors.items()))

    def __repr__(self) -> str:
        return f"Topology(nodes={self.node_count}, edges={self.edge_count})"


def column_name(index: int) -> str:
    """Name the ``index``-th node (1-based) like a spreadsheet column.
    Example:
        >>> [column_name(i) for i in (1, 2, 26, 27)]
        ['A', 'B', 'Z', 'AA']
    """
    if index <= 0:
        return ""
    index -= 1
    return column_name(index // 26) + chr(ord("A") + index % 26)


def _relabel(graph: nx.Graph) -> nx.Graph:
    return nx.relabel_nodes(graph, {i: column_name(i + 1) for i in graph.nodes})


def path_topology(num_nodes: int) -> Topology:
    """A bidirectional path ``A - B - C - ...``."""
    return Topology.from_graph(_relabel(nx.path_graph(num_nodes)))


def complete_topology(num_nodes: int) -> Topology:
    """A complete digraph: every node is a predecessor of every other node."""
    return Topology.from_graph(_relabel(nx.complete_graph(num_nodes)))


def star_topology(num_nodes: int) -> Topology:
    """A hub ``A`` connected in both directions to ``num_nodes - 1`` leaves."""
    return Topology.from_graph(_relabel(nx.star_graph(num_nodes - 1)))


__all__ = [
    "Edge",
    "Topology",
    "column_name",
    "path_topology",
    "complete_topology",
    "star_topology",
]
