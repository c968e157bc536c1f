"""Graph checker: verify the structural invariants of an instance graph.

The ``GraphChecker`` runs a configurable set of rules against an
``InstanceGraph`` and returns a list of ``Diagnostic`` objects.  In strict
mode warnings are promoted to errors.

Usage
-----
::

    from pegraph.checker import GraphChecker

    diagnostics = GraphChecker().check(graph, template)
    errors = [d for d in diagnostics if d.is_error]
"""
from __future__ import annotations

from dataclasses import replace

from pegraph.checker.diagnostics import Diagnostic, DiagnosticSeverity
from pegraph.checker.rules import DEFAULT_RULES, Rule
from pegraph.model.nodes import InstanceGraph, TemplateGraph


class GraphChecker:
    """Invariant checker for instance graphs.

    Parameters
    ----------
    rules:
        Rules to run.  Defaults to ``DEFAULT_RULES``.
    strict:
        When ``True``, WARNING-level diagnostics are promoted to ERROR.
    """

    def __init__(self, rules: list[Rule] | None = None, strict: bool = False) -> None:
        self._rules: list[Rule] = rules if rules is not None else list(DEFAULT_RULES)
        self._strict = strict

    def check(self, graph: InstanceGraph, template: TemplateGraph) -> list[Diagnostic]:
        """Run every rule and return the findings ordered by code then subject."""
        diagnostics: list[Diagnostic] = []
        for rule in self._rules:
            try:
                diagnostics.extend(rule(graph, template))
            except Exception as exc:  # noqa: BLE001
                # A broken rule is reported as a finding rather than
                # hiding the results of the other rules.
                diagnostics.append(
                    Diagnostic(
                        severity=DiagnosticSeverity.ERROR,
                        code="PEG999",
                        message=f"Internal checker error in rule {rule.__name__!r}: {exc}",
                        rule=rule.__name__,
                    )
                )

        if self._strict:
            diagnostics = [
                replace(d, severity=DiagnosticSeverity.ERROR)
                if d.severity == DiagnosticSeverity.WARNING
                else d
                for d in diagnostics
            ]

        diagnostics.sort(key=lambda d: (d.code, d.subject))
        return diagnostics

    def add_rule(self, rule: Rule) -> None:
        """Append a custom rule ``(graph, template) -> list[Diagnostic]``."""
        self._rules.append(rule)

    @property
    def rule_count(self) -> int:
        return len(self._rules)


def check_graph(
    graph: InstanceGraph, template: TemplateGraph, strict: bool = False
) -> list[Diagnostic]:
    """Convenience function: check ``graph`` with the default rules."""
    return GraphChecker(strict=strict).check(graph, template)
