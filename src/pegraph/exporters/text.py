"""Plain-text listing of an instance graph."""
from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from pegraph.model.nodes import InstanceGraph

DEFAULT_WIDTH = 15


def truncate(instance_id: str, width: int) -> str:
    """Shorten ``instance_id`` to ``width`` characters; ``0`` keeps it whole."""
    return instance_id[:width] if width > 0 else instance_id


def display_labels(instance_ids: Iterable[str], width: int) -> dict[str, str]:
    """Map each ID to its truncated label, keeping labels distinct.

    IDs whose truncated forms coincide (long type names, or types sharing
    a long prefix) are shown in full instead.
    """
    ids = list(instance_ids)
    short = {instance_id: truncate(instance_id, width) for instance_id in ids}
    counts = Counter(short.values())
    return {
        instance_id: label if counts[label] == 1 else instance_id
        for instance_id, label in short.items()
    }


class TextExporter:
    """Renders nodes and edges as a console listing.

    Output shape::

        ---- Nodes:
        obj_web_L1_1a2b
        obj_db_L2_9f8e7
        ---- Edges:
        obj_web_L1_1a2b-obj_db_L2_9f8e7

    Parameters
    ----------
    width:
        Number of leading ID characters shown.  ``0`` disables truncation.
        IDs that would truncate to the same label are printed in full.
    """

    def __init__(self, width: int = DEFAULT_WIDTH) -> None:
        self.width = width

    def export(self, graph: InstanceGraph) -> str:
        labels = display_labels((n.id for n in graph.nodes), self.width)
        lines = ["---- Nodes:"]
        lines.extend(labels[n.id] for n in graph.nodes)
        lines.append("---- Edges:")
        lines.extend(f"{labels[src]}-{labels[dst]}" for src, dst in graph.iter_edges())
        return "\n".join(lines) + "\n"
