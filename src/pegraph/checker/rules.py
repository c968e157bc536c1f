"""Individual graph-check rules.

Each rule is a callable that accepts an ``InstanceGraph`` and its
``TemplateGraph`` and returns a list of ``Diagnostic`` objects.  Rules read
the raw ``nodes``/``edges`` collections so that graphs assembled outside
the ``InstanceGraph`` API are checked too.

Rule codes:

    PEG001  Duplicate instance ID
    PEG002  Edge endpoint not in the node set
    PEG003  Self-loop
    PEG004  Parallel duplicate edge
    PEG005  Template dependency without a matching instance edge
    PEG006  Instance not listed by its location
    PEG007  Graph marked incomplete
"""
from __future__ import annotations

from collections import Counter
from typing import Callable

from pegraph.checker.diagnostics import Diagnostic, DiagnosticSeverity
from pegraph.model.nodes import InstanceGraph, TemplateGraph

Rule = Callable[[InstanceGraph, TemplateGraph], list[Diagnostic]]


def rule_unique_ids(graph: InstanceGraph, template: TemplateGraph) -> list[Diagnostic]:
    """PEG001: no two instances share an ID."""
    counts = Counter(n.id for n in graph.nodes)
    return [
        Diagnostic(
            severity=DiagnosticSeverity.ERROR,
            code="PEG001",
            message=f"instance ID used {count} times",
            subject=instance_id,
            rule="rule_unique_ids",
        )
        for instance_id, count in counts.items()
        if count > 1
    ]


def rule_edge_endpoints(graph: InstanceGraph, template: TemplateGraph) -> list[Diagnostic]:
    """PEG002: every edge endpoint refers to an instance in the graph."""
    known = {n.id for n in graph.nodes}
    diagnostics: list[Diagnostic] = []
    for src, dst in graph.iter_edges():
        for endpoint in (src, dst):
            if endpoint not in known:
                diagnostics.append(
                    Diagnostic(
                        severity=DiagnosticSeverity.ERROR,
                        code="PEG002",
                        message=f"edge endpoint {endpoint!r} is not an instance",
                        subject=f"{src} -> {dst}",
                        rule="rule_edge_endpoints",
                    )
                )
    return diagnostics


def rule_no_self_loops(graph: InstanceGraph, template: TemplateGraph) -> list[Diagnostic]:
    """PEG003: no instance has an edge to itself."""
    return [
        Diagnostic(
            severity=DiagnosticSeverity.ERROR,
            code="PEG003",
            message="instance has an edge to itself",
            subject=src,
            rule="rule_no_self_loops",
        )
        for src, dst in graph.iter_edges()
        if src == dst
    ]


def rule_no_parallel_edges(graph: InstanceGraph, template: TemplateGraph) -> list[Diagnostic]:
    """PEG004: at most one edge per ordered instance pair."""
    counts = Counter(graph.iter_edges())
    return [
        Diagnostic(
            severity=DiagnosticSeverity.ERROR,
            code="PEG004",
            message=f"edge appears {count} times",
            subject=f"{src} -> {dst}",
            rule="rule_no_parallel_edges",
        )
        for (src, dst), count in counts.items()
        if count > 1
    ]


def rule_forward_coverage(graph: InstanceGraph, template: TemplateGraph) -> list[Diagnostic]:
    """PEG005: each instance has an edge to some instance of every dependency type."""
    type_of = {n.id: n.type_name for n in graph.nodes}
    diagnostics: list[Diagnostic] = []
    for instance in graph.nodes:
        target_types = {type_of.get(dst) for dst in graph.edges.get(instance.id, ())}
        for dep_type in template.dependencies(instance.type_name):
            if dep_type not in target_types:
                diagnostics.append(
                    Diagnostic(
                        severity=DiagnosticSeverity.ERROR,
                        code="PEG005",
                        message=(
                            f"{instance.type_name!r} depends on {dep_type!r} "
                            f"but no edge leads to a {dep_type!r} instance"
                        ),
                        subject=instance.id,
                        rule="rule_forward_coverage",
                    )
                )
    return diagnostics


def rule_location_membership(graph: InstanceGraph, template: TemplateGraph) -> list[Diagnostic]:
    """PEG006: each instance is listed by the location it names."""
    return [
        Diagnostic(
            severity=DiagnosticSeverity.ERROR,
            code="PEG006",
            message=f"location {n.location.name!r} does not list this instance",
            subject=n.id,
            rule="rule_location_membership",
        )
        for n in graph.nodes
        if n.id not in n.location.instance_ids
    ]


def rule_complete(graph: InstanceGraph, template: TemplateGraph) -> list[Diagnostic]:
    """PEG007: the graph is not the product of an aborted closure."""
    if graph.complete:
        return []
    return [
        Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code="PEG007",
            message="graph is marked incomplete; closure did not finish",
            rule="rule_complete",
        )
    ]


DEFAULT_RULES: list[Rule] = [
    rule_unique_ids,
    rule_edge_endpoints,
    rule_no_self_loops,
    rule_no_parallel_edges,
    rule_forward_coverage,
    rule_location_membership,
    rule_complete,
]
