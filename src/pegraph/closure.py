"""Graph closure: expand an instance graph until every dependency is backed.

The engine walks a work-list seeded with every instance already in the
graph.  For each instance it either connects the instance to existing
instances of each dependency type or, when a dependency type has no
instance yet, places a new one through the placement policy and queues it.
Leaf-type instances are additionally back-filled with edges from every
instance of a type that depends on them.

Every entry on the work-list carries its *creation chain*: the types whose
expansion led to the instance being created.  A dependency on a type that
is already in the chain is a template cycle and raises
``CycleDetectedError``; this bounds the number of creations by the number
of template types.

Usage
-----
::

    import random
    from pegraph.closure import ClosureEngine

    engine = ClosureEngine(template, allowlist, rng=random.Random(7))
    stats = engine.close(graph)
"""
from __future__ import annotations

import logging
import random
from collections import deque
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from pegraph.errors import CycleDetectedError, PegraphError
from pegraph.identity import IdentityGenerator
from pegraph.instantiate import create_instance
from pegraph.model.nodes import Instance, InstanceGraph, Location, PerfData, TemplateGraph
from pegraph.policy.base import PermissivePolicy, PlacementPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClosureStats:
    """What a single ``ClosureEngine.close`` call added to the graph."""

    nodes_added: int = 0
    edges_added: int = 0
    instances_visited: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.nodes_added or self.edges_added)


class ClosureEngine:
    """Expands an instance graph to a fixed point over a template graph.

    Parameters
    ----------
    template:
        The template graph whose dependencies must be realized.
    allowlist:
        Locations at which each type may be created during closure.
    policy:
        Placement policy consulted before any instance is created.
        Defaults to ``PermissivePolicy``.
    rng:
        Random source for location choice.  Pass a seeded
        ``random.Random`` for reproducible runs.
    identity:
        Source of instance IDs.  Defaults to a generator seeded from
        ``rng``.
    perf_data:
        Performance measurements handed to the policy untouched.
    """

    def __init__(
        self,
        template: TemplateGraph,
        allowlist: Mapping[str, Sequence[Location]],
        *,
        policy: PlacementPolicy | None = None,
        rng: random.Random | None = None,
        identity: IdentityGenerator | None = None,
        perf_data: Mapping[str, PerfData] | None = None,
    ) -> None:
        self._template = template
        self._allowlist = allowlist
        self._policy = policy or PermissivePolicy()
        self._rng = rng or random.Random()
        self._identity = identity or IdentityGenerator.seeded(self._rng)
        self._perf_data: Mapping[str, PerfData] = perf_data or {}

    @property
    def policy(self) -> PlacementPolicy:
        return self._policy

    def close(self, graph: InstanceGraph) -> ClosureStats:
        """Expand ``graph`` in place until it reaches a fixed point.

        Returns
        -------
        ClosureStats
            Number of instances and edges added by this call.  Zero for
            both when ``graph`` was already closed.

        Raises
        ------
        AllocationError
            A dependency type has no instance and no permitted location.
        CycleDetectedError
            The template graph is cyclic along a creation chain.
        IdentityCollisionError
            A new instance ID is already present in ``graph``.

        On any of these errors ``graph.complete`` is set to ``False`` and the
        partial graph is attached to the exception as ``exc.graph``.
        """
        nodes_before = len(graph)
        edges_before = graph.edge_count
        worklist: deque[tuple[Instance, tuple[str, ...]]] = deque(
            (instance, ()) for instance in graph.nodes
        )
        visited = 0

        try:
            while worklist:
                instance, chain = worklist.popleft()
                visited += 1
                worklist.extend(self._process(graph, instance, chain))
        except PegraphError as exc:
            graph.complete = False
            exc.graph = graph
            logger.error("Closure aborted: %s", exc)
            raise

        graph.complete = True
        stats = ClosureStats(
            nodes_added=len(graph) - nodes_before,
            edges_added=graph.edge_count - edges_before,
            instances_visited=visited,
        )
        logger.info(
            "Closure reached a fixed point: +%d instance(s), +%d edge(s), %d visited",
            stats.nodes_added,
            stats.edges_added,
            stats.instances_visited,
        )
        return stats

    # ------------------------------------------------------------------
    # Per-instance steps
    # ------------------------------------------------------------------

    def _process(
        self, graph: InstanceGraph, instance: Instance, chain: tuple[str, ...]
    ) -> list[tuple[Instance, tuple[str, ...]]]:
        logger.debug("Checking %s", instance.id)
        if self._template.is_leaf(instance.type_name):
            self._connect_sources(graph, instance)
            return []
        return self._connect_dependencies(graph, instance, chain)

    def _connect_dependencies(
        self, graph: InstanceGraph, instance: Instance, chain: tuple[str, ...]
    ) -> list[tuple[Instance, tuple[str, ...]]]:
        """Forward step: back every dependency of ``instance`` with an edge."""
        expanding = chain + (instance.type_name,)
        created: list[tuple[Instance, tuple[str, ...]]] = []

        for dep_type in self._template.dependencies(instance.type_name):
            if dep_type in expanding:
                raise CycleDetectedError(expanding + (dep_type,))

            existing = graph.instances_of(dep_type)
            if existing:
                for target in existing:
                    if graph.add_edge(instance.id, target.id):
                        logger.debug("  edge %s -> %s", instance.id, target.id)
                continue

            location = self._policy.choose(
                instance.type_name,
                dep_type,
                self._allowlist.get(dep_type, ()),
                self._rng,
                self._perf_data,
            )
            new_instance = create_instance(dep_type, location, self._identity, graph)
            graph.add_edge(instance.id, new_instance.id)
            logger.debug(
                "  created %s at %s for %s", new_instance.id, location.name, instance.id
            )
            created.append((new_instance, expanding))

        return created

    def _connect_sources(self, graph: InstanceGraph, instance: Instance) -> None:
        """Backward step: connect every instance whose type depends on this leaf."""
        for src_type in self._template.dependents(instance.type_name):
            for source in graph.instances_of(src_type):
                if source.id != instance.id and graph.add_edge(source.id, instance.id):
                    logger.debug("  back-filled edge %s -> %s", source.id, instance.id)


def close_graph(
    graph: InstanceGraph,
    template: TemplateGraph,
    allowlist: Mapping[str, Sequence[Location]],
    **kwargs: object,
) -> ClosureStats:
    """Convenience function: close ``graph`` with a one-off ``ClosureEngine``.

    Keyword arguments are forwarded to ``ClosureEngine``.
    """
    return ClosureEngine(template, allowlist, **kwargs).close(graph)  # type: ignore[arg-type]
