#!/usr/bin/env python3
"""Example: Quickstart — pegraph

Minimal working example: load a scenario, build and close the instance
graph, check its invariants and print it.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install pegraph
"""
from __future__ import annotations

from pathlib import Path

import pegraph

SCENARIO = Path(__file__).parent / "scenarios" / "gateway.yaml"


def main() -> None:
    print(f"pegraph version: {pegraph.__version__}")

    # Step 1: Load the scenario (template, requirements, allow-list)
    scenario = pegraph.load_scenario(SCENARIO)
    print(f"Template types: {', '.join(scenario.template.nodes)}")

    # Step 2: Instantiate required placements and close the graph
    graph = pegraph.build(scenario)
    print(f"Closed graph: {len(graph)} instance(s), {graph.edge_count} edge(s)")

    # Step 3: Check the structural invariants
    diagnostics = pegraph.check(graph, scenario.template)
    print(f"Invariant findings: {len(diagnostics)}")

    # Step 4: Print the listing
    print(pegraph.to_text(graph, width=0))


if __name__ == "__main__":
    main()
