"""Graphviz DOT export and rendering.

Nodes are filled with a colour from Graphviz's ``paired12`` scheme chosen
by hashing the location name, so all instances at one location share a
colour.  ``render_dot`` hands a written ``.gv`` file to the external
``dot`` executable.
"""
from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from pegraph.errors import RenderError
from pegraph.exporters.text import DEFAULT_WIDTH, display_labels
from pegraph.model.nodes import InstanceGraph

logger = logging.getLogger(__name__)

COLORSCHEME = "paired12"
_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


def fnv1a_32(text: str) -> int:
    """Return the 32-bit FNV-1a hash of ``text`` encoded as UTF-8."""
    value = _FNV32_OFFSET
    for byte in text.encode("utf-8"):
        value ^= byte
        value = (value * _FNV32_PRIME) & 0xFFFFFFFF
    return value


def location_color(location_name: str) -> str:
    """Map a location name to a ``paired12`` colour index ``"1"``..``"12"``."""
    return str(fnv1a_32(location_name) % 12 + 1)


def _esc(s: str) -> str:
    return s.replace("\\", "\\\\").replace('"', '\\"')


class DotExporter:
    """Renders an instance graph as a DOT ``digraph`` document.

    Parameters
    ----------
    width:
        Number of leading ID characters used for node names.  ``0``
        disables truncation.  IDs that would truncate to the same name
        keep their full ID, so distinct instances never share a vertex.
    name:
        Graph name written after ``digraph``.
    """

    def __init__(self, width: int = DEFAULT_WIDTH, name: str = "pegraph") -> None:
        self.width = width
        self.name = name

    def export(self, graph: InstanceGraph) -> str:
        labels = display_labels((n.id for n in graph.nodes), self.width)
        lines = [f'digraph "{_esc(self.name)}" {{']
        for node in graph.nodes:
            label = _esc(labels[node.id])
            lines.append(
                f'  "{label}" [colorscheme="{COLORSCHEME}", style="filled", '
                f'color="2", fillcolor="{location_color(node.location.name)}"];'
            )
        for src, dst in graph.iter_edges():
            lines.append(
                f'  "{_esc(labels[src])}" -> "{_esc(labels[dst])}";'
            )
        lines.append("}")
        return "\n".join(lines) + "\n"


def render_dot(path: str | Path, fmt: str = "jpg") -> Path:
    """Rasterize a DOT file with Graphviz.

    Runs ``dot -T<fmt> -O <path>``, which writes ``<path>.<fmt>`` next to
    the input.

    Returns
    -------
    Path
        The path of the rendered image.

    Raises
    ------
    RenderError
        If ``dot`` is not installed or exits with a non-zero status.
    """
    source = Path(path)
    executable = shutil.which("dot")
    if executable is None:
        raise RenderError("Graphviz 'dot' executable not found on PATH")

    cmd = [executable, f"-T{fmt}", "-O", str(source)]
    logger.debug("Running %s", " ".join(cmd))
    result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    if result.returncode != 0:
        raise RenderError(
            f"dot exited with status {result.returncode}: {result.stderr.strip()}"
        )
    return source.with_name(f"{source.name}.{fmt}")
