"""Graph checker module.

Exports the ``GraphChecker`` class, the ``check_graph`` convenience
function, ``Diagnostic`` types, and all built-in rules.
"""
from __future__ import annotations

from pegraph.checker.checker import GraphChecker, check_graph
from pegraph.checker.diagnostics import Diagnostic, DiagnosticSeverity
from pegraph.checker.rules import DEFAULT_RULES, Rule

__all__ = [
    "DEFAULT_RULES",
    "Diagnostic",
    "DiagnosticSeverity",
    "GraphChecker",
    "Rule",
    "check_graph",
]
