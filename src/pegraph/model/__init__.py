"""pegraph data model.

Exports the template/instance graph types and the graph serializer.
"""
from __future__ import annotations

from pegraph.model.nodes import (
    Instance,
    InstanceGraph,
    Location,
    PerfData,
    TemplateGraph,
)
from pegraph.model.serializer import GraphSerializer

__all__ = [
    "GraphSerializer",
    "Instance",
    "InstanceGraph",
    "Location",
    "PerfData",
    "TemplateGraph",
]
