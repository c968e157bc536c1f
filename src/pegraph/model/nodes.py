"""Data model for template and instance graphs.

The template side (``TemplateGraph``) describes node *types* and their
dependencies, independent of placement.  The instance side
(``InstanceGraph``) holds concrete, location-bound ``Instance`` objects and
the edges between them.

Instances are frozen dataclasses: once created their ID, type and location
never change.  ``Location`` is deliberately mutable and compared by
identity, because it accumulates the IDs of the instances placed on it and
is shared by reference between the input maps and the instances.
"""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from pegraph.errors import IdentityCollisionError, InvalidEdgeError


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Location:
    """A named placement target.

    Parameters
    ----------
    name:
        Location name, e.g. ``"L1"``.
    instance_ids:
        IDs of the instances currently assigned to this location, in
        placement order.
    """

    name: str
    instance_ids: list[str] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Location({self.name!r}, instances={len(self.instance_ids)})"


@dataclass(frozen=True, slots=True)
class PerfData:
    """Measured link performance between placements.

    Not interpreted by the closure engine; handed to placement policies.

    Parameters
    ----------
    latency:
        Latency in milliseconds.
    bandwidth:
        Bandwidth in MB per second.
    """

    latency: float
    bandwidth: int


# ---------------------------------------------------------------------------
# Template graph
# ---------------------------------------------------------------------------


@dataclass
class TemplateGraph:
    """Abstract application graph of node types and dependency edges.

    Parameters
    ----------
    nodes:
        Node type names in declaration order.
    edges:
        Adjacency map from a type to the ordered types it depends on.
    """

    nodes: list[str] = field(default_factory=list)
    edges: dict[str, list[str]] = field(default_factory=dict)

    def dependencies(self, type_name: str) -> list[str]:
        """Return the types ``type_name`` depends on, in declaration order."""
        return list(self.edges.get(type_name, ()))

    def dependents(self, type_name: str) -> list[str]:
        """Return the types that have an edge into ``type_name``."""
        return [src for src, dsts in self.edges.items() if type_name in dsts]

    def has_edge(self, src: str, dst: str) -> bool:
        return dst in self.edges.get(src, ())

    def is_leaf(self, type_name: str) -> bool:
        """Return True if ``type_name`` has no outgoing template edges."""
        return not self.edges.get(type_name)

    def iter_edges(self) -> Iterator[tuple[str, str]]:
        for src, dsts in self.edges.items():
            for dst in dsts:
                yield src, dst


# ---------------------------------------------------------------------------
# Instance graph
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Instance:
    """A concrete realization of a node type at a location.

    Parameters
    ----------
    id:
        Globally unique instance ID.
    type_name:
        The template node type this instance realizes.
    location:
        The location hosting this instance.
    """

    id: str
    type_name: str
    location: Location = field(compare=False)

    def __repr__(self) -> str:
        return f"Instance({self.id!r}, type={self.type_name!r}, location={self.location.name!r})"


@dataclass
class InstanceGraph:
    """Location-bound instances and the directed edges between them.

    The graph only grows: instances and edges are added, never removed.
    ``add_edge`` refuses self-loops, dangling endpoints and duplicates so
    that every graph built through this API satisfies the edge invariants.

    Parameters
    ----------
    nodes:
        Instances in insertion order.
    edges:
        Outgoing edges keyed by source instance ID.
    complete:
        ``False`` once a closure run over this graph has aborted.
    """

    nodes: list[Instance] = field(default_factory=list)
    edges: dict[str, list[str]] = field(default_factory=dict)
    complete: bool = True
    _index: dict[str, Instance] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        for instance in self.nodes:
            if instance.id in self._index:
                raise IdentityCollisionError(instance.id)
            self._index[instance.id] = instance

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_instance(self, instance: Instance) -> None:
        """Append ``instance`` to the node set.

        Raises
        ------
        IdentityCollisionError
            If an instance with the same ID is already present.
        """
        if instance.id in self._index:
            raise IdentityCollisionError(instance.id)
        self.nodes.append(instance)
        self._index[instance.id] = instance

    def get(self, instance_id: str) -> Instance:
        return self._index[instance_id]

    def instances_of(self, type_name: str) -> list[Instance]:
        """Return every instance of ``type_name`` in insertion order."""
        return [n for n in self.nodes if n.type_name == type_name]

    def __contains__(self, instance_id: object) -> bool:
        return instance_id in self._index

    def __len__(self) -> int:
        return len(self.nodes)

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def has_edge(self, src: str, dst: str) -> bool:
        return dst in self.edges.get(src, ())

    def add_edge(self, src: str, dst: str) -> bool:
        """Add the edge ``src -> dst`` unless it already exists.

        Returns
        -------
        bool
            ``True`` if a new edge was added, ``False`` if it was present.

        Raises
        ------
        InvalidEdgeError
            If ``src == dst`` or either endpoint is not in the graph.
        """
        if src == dst:
            raise InvalidEdgeError(src, dst, "self-loops are not allowed")
        for endpoint in (src, dst):
            if endpoint not in self._index:
                raise InvalidEdgeError(src, dst, f"unknown instance {endpoint!r}")
        if self.has_edge(src, dst):
            return False
        self.edges.setdefault(src, []).append(dst)
        return True

    def iter_edges(self) -> Iterator[tuple[str, str]]:
        for src, dsts in self.edges.items():
            for dst in dsts:
                yield src, dst

    @property
    def edge_count(self) -> int:
        return sum(len(dsts) for dsts in self.edges.values())
