"""pegraph — policy-enriched application graphs: instantiation and closure.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import pegraph

    scenario = pegraph.scenario_from_dict({
        "template": {"nodes": ["web", "db"], "edges": {"web": ["db"]}},
        "requirements": {"web": ["L1"]},
        "allowlist": {"db": ["L1", "L2"]},
    })

    # Place required instances, then close the graph
    graph = pegraph.build(scenario, seed=7)

    # Verify the structural invariants
    diagnostics = pegraph.check(graph, scenario.template)

    # Render for humans
    print(pegraph.to_text(graph))

    pegraph.__version__
    '0.1.0'
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pegraph.errors import (
    AllocationError,
    CycleDetectedError,
    IdentityCollisionError,
    InvalidEdgeError,
    PegraphError,
    RenderError,
    ScenarioError,
)

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from pegraph.checker.diagnostics import Diagnostic
    from pegraph.model.nodes import InstanceGraph, TemplateGraph
    from pegraph.policy.base import PlacementPolicy
    from pegraph.scenario import Scenario


def load_scenario(path: str | Path) -> "Scenario":
    """Load a YAML scenario file.

    Raises
    ------
    pegraph.ScenarioError
        If the document is malformed.
    """
    from pegraph.scenario import load_scenario as _load

    return _load(path)


def scenario_from_dict(data: object) -> "Scenario":
    """Build a scenario from already-parsed data."""
    from pegraph.scenario import scenario_from_dict as _from_dict

    return _from_dict(data)


def build(
    scenario: "Scenario",
    *,
    policy: "PlacementPolicy | str | None" = None,
    seed: int | None = None,
) -> "InstanceGraph":
    """Instantiate required placements and close the graph.

    Parameters
    ----------
    scenario:
        The run inputs.
    policy:
        A placement policy instance or registered name.
    seed:
        Random seed for reproducible placement and IDs.

    Raises
    ------
    pegraph.AllocationError
        A dependency type could not be placed.
    pegraph.CycleDetectedError
        The template is cyclic along a creation chain.
    """
    from pegraph.pipeline import build as _build

    return _build(scenario, policy=policy, seed=seed)


def check(
    graph: "InstanceGraph", template: "TemplateGraph", strict: bool = False
) -> list["Diagnostic"]:
    """Check ``graph`` against the structural invariants.

    Returns
    -------
    list[Diagnostic]
        All findings; empty for a well-formed, complete graph.
    """
    from pegraph.checker.checker import check_graph

    return check_graph(graph, template, strict=strict)


def to_text(graph: "InstanceGraph", width: int = 15) -> str:
    """Render ``graph`` as a console listing."""
    from pegraph.exporters.text import TextExporter

    return TextExporter(width=width).export(graph)


def to_dot(graph: "InstanceGraph", width: int = 15) -> str:
    """Render ``graph`` as a Graphviz DOT document."""
    from pegraph.exporters.dot import DotExporter

    return DotExporter(width=width).export(graph)


__all__ = [
    "__version__",
    "AllocationError",
    "CycleDetectedError",
    "IdentityCollisionError",
    "InvalidEdgeError",
    "PegraphError",
    "RenderError",
    "ScenarioError",
    "build",
    "check",
    "load_scenario",
    "scenario_from_dict",
    "to_dot",
    "to_text",
]
