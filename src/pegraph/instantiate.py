"""Initial instantiation: required placements and the edges between them.

``create_instances`` materializes one instance per (type, required
location) pair; ``project_edges`` connects those instances wherever the
template graph has a matching type-level edge.  Everything else is left to
the closure engine.
"""
from __future__ import annotations

import logging

from pegraph.identity import IdentityGenerator
from pegraph.model.nodes import Instance, InstanceGraph, Location, TemplateGraph

logger = logging.getLogger(__name__)


def create_instance(
    type_name: str,
    location: Location,
    identity: IdentityGenerator,
    graph: InstanceGraph | None = None,
) -> Instance:
    """Create an instance of ``type_name`` and register it with ``location``.

    When ``graph`` is given the instance is added to it first, so an ID
    rejected by the graph never reaches ``location.instance_ids``.
    """
    instance = Instance(
        id=identity.new_id(type_name, location.name),
        type_name=type_name,
        location=location,
    )
    if graph is not None:
        graph.add_instance(instance)
    location.instance_ids.append(instance.id)
    return instance


def create_instances(
    template: TemplateGraph,
    requirements: dict[str, list[Location]],
    identity: IdentityGenerator,
) -> list[Instance]:
    """Create one instance for every required (type, location) pair.

    Parameters
    ----------
    template:
        The template graph; its node order fixes the output grouping.
    requirements:
        Locations at which each type must exist up front.  Types without
        an entry get no initial instance.
    identity:
        Source of instance IDs.

    Returns
    -------
    list[Instance]
        Instances grouped by type (template order), then by requirement
        order.
    """
    instances: list[Instance] = []
    for type_name in template.nodes:
        for location in requirements.get(type_name, ()):
            instances.append(create_instance(type_name, location, identity))
    logger.debug("Created %d required instance(s)", len(instances))
    return instances


def project_edges(
    template: TemplateGraph, instances: list[Instance]
) -> dict[str, list[str]]:
    """Connect every ordered pair of distinct instances whose types are adjacent.

    Each pair is visited once, so no edge is emitted twice.
    """
    edges: dict[str, list[str]] = {}
    for src in instances:
        for dst in instances:
            if src.id != dst.id and template.has_edge(src.type_name, dst.type_name):
                edges.setdefault(src.id, []).append(dst.id)
    return edges


def generate_initial_graph(
    template: TemplateGraph,
    requirements: dict[str, list[Location]],
    *,
    identity: IdentityGenerator | None = None,
) -> InstanceGraph:
    """Build the initial instance graph from the required placements.

    Parameters
    ----------
    template:
        The template graph.
    requirements:
        The location requirement map.
    identity:
        Source of instance IDs; a fresh ``IdentityGenerator`` by default.

    Returns
    -------
    InstanceGraph
        The required instances and the edges projected between them.
    """
    identity = identity or IdentityGenerator()
    instances = create_instances(template, requirements, identity)
    graph = InstanceGraph(nodes=instances)
    for src, dsts in project_edges(template, instances).items():
        for dst in dsts:
            graph.add_edge(src, dst)
    logger.info(
        "Initial graph: %d instance(s), %d edge(s)", len(graph), graph.edge_count
    )
    return graph
