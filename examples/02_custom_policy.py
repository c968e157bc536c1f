#!/usr/bin/env python3
"""Example: Custom placement policy — pegraph

Registers a policy that uses the scenario's performance data to keep new
instances off high-latency locations, then shows what happens when the
policy leaves no permitted location.

Usage:
    python examples/02_custom_policy.py
"""
from __future__ import annotations

import pegraph
from pegraph.policy import PlacementPolicy, policy_registry

SCENARIO = {
    "locations": ["edge-1", "core-1"],
    "template": {"nodes": ["web", "db"], "edges": {"web": ["db"]}},
    "requirements": {"web": ["edge-1"]},
    "allowlist": {"db": ["edge-1", "core-1"]},
    "perf": {
        "edge-1": {"latency": 12.0, "bandwidth": 50},
        "core-1": {"latency": 0.5, "bandwidth": 1000},
    },
}


@policy_registry.register("low-latency")
class LowLatencyPolicy(PlacementPolicy):
    max_latency = 5.0

    def allow(self, source_type, dest_type, candidate, perf_data):
        link = perf_data.get(candidate.name)
        return link is None or link.latency <= self.max_latency


class NothingPolicy(PlacementPolicy):
    def allow(self, source_type, dest_type, candidate, perf_data):
        return False


def main() -> None:
    scenario = pegraph.scenario_from_dict(SCENARIO)
    graph = pegraph.build(scenario, policy="low-latency", seed=1)
    for instance in graph.nodes:
        print(f"{instance.type_name:>4} at {instance.location.name}")

    try:
        pegraph.build(pegraph.scenario_from_dict(SCENARIO), policy=NothingPolicy())
    except pegraph.AllocationError as exc:
        print(f"\nAllocation failed for {exc.type_name!r}: {exc.reason}")
        print(f"Partial graph complete? {exc.graph.complete}")


if __name__ == "__main__":
    main()
