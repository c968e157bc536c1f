"""Exporters for finished instance graphs.

Provides a console listing and a Graphviz DOT document, plus a helper that
invokes the external ``dot`` rasterizer.  The closure core does not depend
on this package.
"""
from __future__ import annotations

from pegraph.exporters.dot import DotExporter, location_color, render_dot
from pegraph.exporters.text import TextExporter

__all__ = [
    "DotExporter",
    "TextExporter",
    "location_color",
    "render_dot",
]
