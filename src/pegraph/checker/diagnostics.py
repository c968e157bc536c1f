"""Diagnostic types for the graph checker.

A ``Diagnostic`` is a finding about an instance graph, attached to the
instance (or instance pair) it concerns.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics."""

    ERROR = auto()
    WARNING = auto()


@dataclass(frozen=True)
class Diagnostic:
    """A single graph-check finding.

    Parameters
    ----------
    severity:
        How serious this finding is.
    code:
        A short machine-readable identifier, e.g. ``"PEG003"``.
    message:
        Human-readable description of the problem.
    subject:
        The instance ID (or ``"src -> dst"`` pair) the finding is about.
    rule:
        The rule name that produced this diagnostic.
    """

    severity: DiagnosticSeverity
    code: str
    message: str
    subject: str = ""
    rule: str = field(default="")

    def __str__(self) -> str:
        where = f" at {self.subject}" if self.subject else ""
        return f"[{self.code}] {self.severity.name}{where}: {self.message}"

    @property
    def is_error(self) -> bool:
        return self.severity == DiagnosticSeverity.ERROR
