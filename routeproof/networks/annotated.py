"""Annotated networks and their modular verification.
An annotated network attaches to every node an annotation: a predicate
over a route and a time describing every route the node may hold at that
time. Annotations are proved by induction over time, node by node:

- Base: the initial route satisfies the annotation at time 0.
- Inductive: if every predecessor's route satisfies its annotation at
  ``t - 1``, the merged route satisfies the node's annotation at ``t``.
- Safety: the annotation implies the node's modular property.

Each obligation is a separate SMT query ``constraints AND NOT(claim)``; an
unsatisfiable query proves it. The monolithic check instead asks whether
any stable state of the whole network violates the time-erased properties.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

import z3

from routeproof.config import SolverConfig
from routeproof.core.exceptions import NetworkDefinitionError
from routeproof.core.parallel import Obligation, discharge, discharge_chains
from routeproof.core.state import (
    BaseState,
    InductiveState,
    MonolithicState,
    SafetyState,
    SmtCheck,
    State,
    evaluate,
    symbolic_assignment,
)
from routeproof.lang.temporal import Annotation, Time, finally_, globally, intersect
from routeproof.logging import get_logger
from routeproof.networks.network import Network

Property = Callable[[z3.ExprRef], z3.BoolRef]


def _check_nodes(network: Network, what: str, mapping: Mapping[str, object]) -> None:
    nodes = network.topology.nodes
    missing = [n for n in nodes if n not in mapping]
    extra = [n for n in mapping if n not in network.topology]
    if missing or extra:
        raise NetworkDefinitionError(f"{what} do not match the topology", missing=missing, extra=extra)


def _both(first: Property, second: Property) -> Property:
    return lambda route: z3.And(first(route), second(route))


class AnnotatedNetwork:
    """A network with per-node annotations and properties to verify.
    Args:
        network: The underlying network.
        annotations: Inductive invariant ``(route, time) -> Bool`` per node.
        modular_properties: Property ``(route, time) -> Bool`` per node,
            proved from the annotations.
        monolithic_properties: Property ``route -> Bool`` per node, checked
            against the network's stable states.
    Raises:
        NetworkDefinitionError: If any of the mappings misses a node or
            names a node outside the topology.
    Example:
        >>> net = AnnotatedNetwork(network, annotations, modular, monolithic)
        >>> counterexample = net.check_annotations()
        >>> if counterexample is not None:
        ...     print(counterexample.format())
    """

    def __init__(
        self,
        network: Network,
        annotations: Mapping[str, Annotation],
        modular_properties: Mapping[str, Annotation],
        monolithic_properties: Mapping[str, Property],
    ):
        _check_nodes(network, "annotations", annotations)
        _check_nodes(network, "modular properties", modular_properties)
        _check_nodes(network, "monolithic properties", monolithic_properties)
        self.network = network
        self.annotations = dict(annotations)
        self.modular_properties = dict(modular_properties)
        self.monolithic_properties = dict(monolithic_properties)

    @classmethod
    def from_stable_safety(
        cls,
        network: Network,
        annotations: Mapping[str, Annotation],
        stable_properties: Mapping[str, Property],
        safety_properties: Mapping[str, Property],
        converge_time: Time,
    ) -> AnnotatedNetwork:
        """Build the properties from a stable and a safety property per node.
        The modular property of ``n`` is
        ``intersect(finally_(converge_time, stable[n]), globally(safety[n]))``
        and its monolithic property is ``stable[n] AND safety[n]``.
        """
        _check_nodes(network, "stable properties", stable_properties)
        _check_nodes(network, "safety properties", safety_properties)
        topology = network.topology
        modular = topology.map_nodes(
            lambda n: intersect(
                finally_(converge_time, stable_properties[n]),
                globally(safety_properties[n]),
            )
        )
        monolithic = topology.map_nodes(lambda n: _both(stable_properties[n], safety_properties[n]))
        return cls(network, annotations, modular, monolithic)

    @property
    def topology(self):
        return self.network.topology

    @property
    def symbolics(self):
        return self.network.symbolics

    def _route(self, node: str) -> z3.ExprRef:
        return z3.FreshConst(self.network.route_sort, prefix=f"{node}-route")

    def _query(self, *assumptions: z3.BoolRef, claim: z3.BoolRef) -> z3.BoolRef:
        return z3.And(self.network.symbolic_constraints(), *assumptions, z3.Not(claim))

    def base_obligation(self, node: str) -> Obligation:
        """The route of ``node`` at time 0 satisfies its annotation."""
        route = self._route(node)
        claim = z3.Implies(
            route == self.network.initial_values[node],
            self.annotations[node](route, z3.IntVal(0)),
        )

        def witness(model: z3.ModelRef) -> State:
            return BaseState(
                symbolics=symbolic_assignment(model, self.symbolics),
                node=node,
                route=evaluate(model, route),
            )

        return Obligation(node, SmtCheck.BASE, self._query(claim=claim), witness)

    def inductive_obligation(
        self,
        node: str,
        routes: Mapping[str, z3.ExprRef] | None = None,
        time: z3.ArithRef | None = None,
    ) -> Obligation:
        """Annotated predecessor routes at ``t - 1`` update into an annotated route at ``t``."""
        if routes is None:
            routes = self.network.symbolic_routes()
        if time is None:
            time = z3.FreshInt("time")
        preds = self.topology[node]
        new_route = self.network.update(node, routes)
        assume = [time > 0]
        assume.extend(self.annotations[pred](routes[pred], time - 1) for pred in preds)
        claim = z3.Implies(z3.And(*assume), self.annotations[node](new_route, time))

        def witness(model: z3.ModelRef) -> State:
            return InductiveState(
                symbolics=symbolic_assignment(model, self.symbolics),
                node=node,
                route=evaluate(model, new_route),
                neighbor_routes={pred: evaluate(model, routes[pred]) for pred in preds},
                time=evaluate(model, time),
            )

        return Obligation(node, SmtCheck.INDUCTIVE, self._query(claim=claim), witness)

    def safety_obligation(self, node: str) -> Obligation:
        """The annotation of ``node`` implies its modular property at every time."""
        route = self._route(node)
        time = z3.FreshInt("time")
        claim = z3.Implies(
            self.annotations[node](route, time),
            self.modular_properties[node](route, time),
        )

        def witness(model: z3.ModelRef) -> State:
            return SafetyState(
                symbolics=symbolic_assignment(model, self.symbolics),
                node=node,
                route=evaluate(model, route),
                time=evaluate(model, time),
            )

        return Obligation(node, SmtCheck.SAFETY, self._query(time >= 0, claim=claim), witness)

    def monolithic_obligation(self) -> Obligation:
        """Every stable state satisfies every monolithic property."""
        routes = self.network.symbolic_routes()
        stable = [routes[n] == self.network.update(n, routes) for n in self.topology.nodes]
        claim = z3.And(*[self.monolithic_properties[n](routes[n]) for n in self.topology.nodes])

        def witness(model: z3.ModelRef) -> State:
            return MonolithicState(
                symbolics=symbolic_assignment(model, self.symbolics),
                routes={n: evaluate(model, routes[n]) for n in self.topology.nodes},
            )

        return Obligation(None, SmtCheck.MONOLITHIC, self._query(*stable, claim=claim), witness)

    def _nodes(self, node: str | None) -> tuple[str, ...]:
        if node is None:
            return self.topology.nodes
        if node not in self.topology:
            raise NetworkDefinitionError(f"unknown node {node!r}")
        return (node,)

    def check_base_case(self, node: str | None = None, config: SolverConfig | None = None) -> State | None:
        """Run the base check at ``node``, or at every node in parallel.
        Returns:
            ``None`` if the check passes, otherwise a ``BaseState``.
        """
        return discharge([self.base_obligation(n) for n in self._nodes(node)], config)

    def check_inductive(self, node: str | None = None, config: SolverConfig | None = None) -> State | None:
        """Run the inductive check at ``node``, or at every node in parallel.
        Returns:
            ``None`` if the check passes, otherwise an ``InductiveState``.
        """
        routes = self.network.symbolic_routes()
        time = z3.FreshInt("time")
        return discharge([self.inductive_obligation(n, routes, time) for n in self._nodes(node)], config)

    def check_assertions(self, node: str | None = None, config: SolverConfig | None = None) -> State | None:
        """Run the safety check at ``node``, or at every node in parallel.
        Returns:
            ``None`` if the check passes, otherwise a ``SafetyState``.
        """
        return discharge([self.safety_obligation(n) for n in self._nodes(node)], config)

    def check_annotations(self, config: SolverConfig | None = None) -> State | None:
        """Check that the annotations are sound and imply the modular properties.
        Runs the base, inductive and safety checks in that order and stops
        at the first phase that finds a counterexample.
        Args:
            config: Solver settings for this run.
        Returns:
            ``None`` if every check passes at every node, otherwise the
            counterexample of the first failing phase.
        Raises:
            SolverError: If the solver cannot decide some obligation.
            MergeLawViolation: If ``config.check_merge_laws`` is set and
                the merge function breaks one of its laws.
        """
        config = config or SolverConfig()
        logger = get_logger()
        if config.check_merge_laws:
            from routeproof.testing.fuzzing import check_merge_laws

            with logger.timer("Merge law fuzzing"):
                check_merge_laws(self.network.merge, self.network.route_sort, config.merge_law_examples)
        phases = [
            ("Base", self.check_base_case),
            ("Inductive", self.check_inductive),
            ("Safety", self.check_assertions),
        ]
        for name, check in phases:
            with logger.timer(f"{name} checks", category=name.lower()):
                state = check(config=config)
            if state is not None:
                logger.error(f"{name} check failed at {state.node}")
                return state
        logger.success("All the modular checks passed!")
        return None

    def check_annotations_per_node(self, config: SolverConfig | None = None) -> dict[str, State | None]:
        """Run the three modular checks node by node.
        For every node the base, inductive and safety checks run in order,
        stopping at the first failure for that node. Nodes are checked in
        parallel.
        Returns:
            The counterexample (or ``None``) found at every node.
        """
        routes = self.network.symbolic_routes()
        time = z3.FreshInt("time")
        chains = {
            node: [
                self.base_obligation(node),
                self.inductive_obligation(node, routes, time),
                self.safety_obligation(node),
            ]
            for node in self.topology.nodes
        }
        return discharge_chains(chains, config)

    def check_monolithic(self, config: SolverConfig | None = None) -> State | None:
        """Check the monolithic properties against every stable state.
        Returns:
            ``None`` if every stable state satisfies the properties,
            otherwise a ``MonolithicState``.
        """
        logger = get_logger()
        with logger.timer("Monolithic check", category="monolithic"):
            state = discharge([self.monolithic_obligation()], config)
        if state is None:
            logger.success("The monolithic checks passed!")
        else:
            logger.error("Monolithic check failed")
        return state

    def __repr__(self) -> str:
        return f"AnnotatedNetwork({self.network!r})"


__all__ = [
    "AnnotatedNetwork",
    "Property",
]
