"""Error types raised by pegraph.

Every error derives from ``PegraphError``.  Errors raised while closing a
graph carry the partially built graph on the ``graph`` attribute so callers
can inspect (or discard) it; such a graph is always marked incomplete.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pegraph.model.nodes import InstanceGraph


class PegraphError(Exception):
    """Base class for all pegraph errors."""

    #: Partial graph, set when the error aborted a closure run.
    graph: "InstanceGraph | None" = None


class ClosureError(PegraphError):
    """An error that aborts graph closure.

    Parameters
    ----------
    message:
        Human-readable description.
    graph:
        The partial graph at the point of failure, if known.
    """

    def __init__(self, message: str, graph: "InstanceGraph | None" = None) -> None:
        super().__init__(message)
        self.graph = graph


class AllocationError(ClosureError):
    """Raised when closure needs a new instance but no location is permitted.

    Parameters
    ----------
    type_name:
        The node type that could not be placed.
    reason:
        Why no location was available.
    """

    def __init__(
        self,
        type_name: str,
        reason: str = "allow-list is empty",
        graph: "InstanceGraph | None" = None,
    ) -> None:
        self.type_name = type_name
        self.reason = reason
        super().__init__(
            f"Cannot allocate an instance of {type_name!r}: {reason}",
            graph,
        )


class CycleDetectedError(ClosureError):
    """Raised when closure would re-enter a type already in its creation chain.

    Parameters
    ----------
    chain:
        The types being expanded, ending with the type that would repeat.
    """

    def __init__(
        self,
        chain: tuple[str, ...],
        graph: "InstanceGraph | None" = None,
    ) -> None:
        self.chain = chain
        super().__init__(
            "Cyclic template dependency during closure: " + " -> ".join(chain),
            graph,
        )


class IdentityCollisionError(PegraphError):
    """Raised when an instance ID is issued or inserted twice."""

    def __init__(self, instance_id: str) -> None:
        self.instance_id = instance_id
        super().__init__(f"Instance ID {instance_id!r} is already in use")


class InvalidEdgeError(PegraphError):
    """Raised on an attempt to add a self-loop or a dangling edge."""

    def __init__(self, src: str, dst: str, reason: str) -> None:
        self.src = src
        self.dst = dst
        self.reason = reason
        super().__init__(f"Invalid edge {src!r} -> {dst!r}: {reason}")


class ScenarioError(PegraphError):
    """Raised when a scenario document is malformed.

    Parameters
    ----------
    message:
        What is wrong.
    key:
        Dotted path of the offending entry, e.g. ``"allowlist.db"``.
    """

    def __init__(self, message: str, key: str = "") -> None:
        self.key = key
        super().__init__(f"{key}: {message}" if key else message)


class RenderError(PegraphError):
    """Raised when the external ``dot`` rasterizer fails or is missing."""
