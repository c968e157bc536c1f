"""Shared test fixtures for pegraph.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from collections.abc import Callable

import pytest

from pegraph.model.nodes import Location, TemplateGraph


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "pegraph"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def locations() -> dict[str, Location]:
    """Three fresh locations, ``L1``..``L3``."""
    return {name: Location(name) for name in ("L1", "L2", "L3")}


@pytest.fixture()
def make_template() -> Callable[..., TemplateGraph]:
    """Build a ``TemplateGraph`` from an edge mapping.

    Node order is the order in which types first appear.
    """

    def _make(edges: dict[str, list[str]], extra_nodes: tuple[str, ...] = ()) -> TemplateGraph:
        nodes: list[str] = []
        for src, dsts in edges.items():
            for name in (src, *dsts):
                if name not in nodes:
                    nodes.append(name)
        for name in extra_nodes:
            if name not in nodes:
                nodes.append(name)
        return TemplateGraph(nodes=nodes, edges={k: list(v) for k, v in edges.items()})

    return _make
