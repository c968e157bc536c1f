"""Serialization of instance graphs to plain data, JSON and YAML.

The serialized form is a plain dict/list structure that maps naturally to
both formats and is the hand-off point to external tooling.

Usage
-----
::

    from pegraph.model.serializer import GraphSerializer

    serializer = GraphSerializer()
    data = serializer.to_dict(graph)
    json_text = serializer.to_json(graph)
"""
from __future__ import annotations

import json

import yaml

from pegraph.model.nodes import Instance, InstanceGraph


class GraphSerializer:
    """Converts an ``InstanceGraph`` into JSON-compatible dicts."""

    def to_dict(self, graph: InstanceGraph) -> dict[str, object]:
        """Serialize ``graph`` to a JSON-compatible dict.

        Locations are listed in first-seen order with the instance IDs they
        host, so the mapping mirrors ``Location.instance_ids``.
        """
        locations: dict[str, list[str]] = {}
        for instance in graph.nodes:
            locations.setdefault(instance.location.name, [])
            if instance.id in instance.location.instance_ids:
                locations[instance.location.name].append(instance.id)
        return {
            "complete": graph.complete,
            "nodes": [self._instance_to_dict(n) for n in graph.nodes],
            "edges": {src: list(dsts) for src, dsts in graph.edges.items()},
            "locations": locations,
        }

    def to_json(self, graph: InstanceGraph, indent: int = 2) -> str:
        """Serialize ``graph`` to a JSON string."""
        return json.dumps(self.to_dict(graph), indent=indent)

    def to_yaml(self, graph: InstanceGraph) -> str:
        """Serialize ``graph`` to a YAML string."""
        return yaml.safe_dump(self.to_dict(graph), default_flow_style=False, sort_keys=False)

    @staticmethod
    def _instance_to_dict(instance: Instance) -> dict[str, str]:
        return {
            "id": instance.id,
            "type": instance.type_name,
            "location": instance.location.name,
        }
