"""Scenario documents: the inputs of one run, loaded from YAML or a dict.

A scenario bundles the template graph, the location requirement map, the
allow-list, optional performance data and run options.  Location names are
resolved to shared ``Location`` objects so that every map refers to the
same instance per name.

Example document::

    locations: [L1, L2]
    template:
      nodes: [web, db]
      edges:
        web: [db]
    requirements:
      web: [L1]
    allowlist:
      db: [L1, L2]
    perf:
      L1-L2: {latency: 1.5, bandwidth: 100}
    policy: permissive
    seed: 7
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pegraph.errors import ScenarioError
from pegraph.model.nodes import Location, PerfData, TemplateGraph

_TOP_LEVEL_KEYS = frozenset(
    {"locations", "template", "requirements", "allowlist", "perf", "policy", "seed"}
)


@dataclass
class Scenario:
    """Typed inputs for one graph build.

    Parameters
    ----------
    template:
        The template application graph.
    locations:
        Every known location by name.
    requirements:
        Locations at which each type must be instantiated up front.
    allowlist:
        Locations at which each type may be created during closure.
    perf_data:
        Opaque performance data for placement policies.
    policy:
        Registered policy name, or ``None`` for the default.
    seed:
        Random seed, or ``None`` for an unseeded run.
    """

    template: TemplateGraph
    locations: dict[str, Location] = field(default_factory=dict)
    requirements: dict[str, list[Location]] = field(default_factory=dict)
    allowlist: dict[str, list[Location]] = field(default_factory=dict)
    perf_data: dict[str, PerfData] = field(default_factory=dict)
    policy: str | None = None
    seed: int | None = None


def load_scenario(path: str | Path) -> Scenario:
    """Read and parse a YAML scenario file.

    Raises
    ------
    ScenarioError
        If the file is not valid YAML or does not describe a scenario.
    OSError
        If the file cannot be read.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ScenarioError(f"invalid YAML in {path}: {exc}") from exc
    return scenario_from_dict(data)


def scenario_from_dict(data: Any) -> Scenario:
    """Build a ``Scenario`` from already-parsed data.

    Raises
    ------
    ScenarioError
        Naming the offending key when the data is malformed.
    """
    if not isinstance(data, dict):
        raise ScenarioError("scenario must be a mapping")
    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ScenarioError(f"unknown key(s): {', '.join(map(str, unknown))}")

    template = _parse_template(data.get("template"))
    declared = data.get("locations")
    locations: dict[str, Location] = {}
    if declared is not None:
        for name in _string_list(declared, "locations"):
            locations.setdefault(name, Location(name))

    scenario = Scenario(template=template, locations=locations)
    scenario.requirements = _parse_placements(
        data.get("requirements"), "requirements", template, locations, strict=declared is not None
    )
    scenario.allowlist = _parse_placements(
        data.get("allowlist"), "allowlist", template, locations, strict=declared is not None
    )
    scenario.perf_data = _parse_perf(data.get("perf"))

    policy = data.get("policy")
    if policy is not None and not isinstance(policy, str):
        raise ScenarioError("must be a string", "policy")
    scenario.policy = policy

    seed = data.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ScenarioError("must be an integer", "seed")
    scenario.seed = seed
    return scenario


# ---------------------------------------------------------------------------
# Section parsers
# ---------------------------------------------------------------------------


def _string_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ScenarioError("must be a list of strings", key)
    return value


def _parse_template(raw: Any) -> TemplateGraph:
    if not isinstance(raw, dict):
        raise ScenarioError("must be a mapping with 'nodes' and 'edges'", "template")
    nodes = _string_list(raw.get("nodes", []), "template.nodes")
    if len(set(nodes)) != len(nodes):
        raise ScenarioError("contains duplicate node types", "template.nodes")

    edges: dict[str, list[str]] = {}
    raw_edges = raw.get("edges") or {}
    if not isinstance(raw_edges, dict):
        raise ScenarioError("must be a mapping", "template.edges")
    for src, dsts in raw_edges.items():
        key = f"template.edges.{src}"
        if src not in nodes:
            raise ScenarioError("source is not a declared node type", key)
        targets = _string_list(dsts, key)
        for dst in targets:
            if dst not in nodes:
                raise ScenarioError(f"target {dst!r} is not a declared node type", key)
        edges[src] = list(dict.fromkeys(targets))
    return TemplateGraph(nodes=list(nodes), edges=edges)


def _parse_placements(
    raw: Any,
    section: str,
    template: TemplateGraph,
    locations: dict[str, Location],
    *,
    strict: bool,
) -> dict[str, list[Location]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ScenarioError("must be a mapping", section)

    placements: dict[str, list[Location]] = {}
    for type_name, names in raw.items():
        key = f"{section}.{type_name}"
        if type_name not in template.nodes:
            raise ScenarioError("is not a declared node type", key)
        resolved: list[Location] = []
        for name in _string_list(names or [], key):
            if name not in locations:
                if strict:
                    raise ScenarioError(f"location {name!r} is not declared", key)
                locations[name] = Location(name)
            resolved.append(locations[name])
        placements[type_name] = resolved
    return placements


def _parse_perf(raw: Any) -> dict[str, PerfData]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ScenarioError("must be a mapping", "perf")

    perf: dict[str, PerfData] = {}
    for name, entry in raw.items():
        key = f"perf.{name}"
        if not isinstance(entry, dict):
            raise ScenarioError("must be a mapping with latency and bandwidth", key)
        latency = entry.get("latency")
        bandwidth = entry.get("bandwidth")
        if isinstance(latency, bool) or not isinstance(latency, (int, float)):
            raise ScenarioError("latency must be a number", key)
        if isinstance(bandwidth, bool) or not isinstance(bandwidth, int):
            raise ScenarioError("bandwidth must be an integer", key)
        perf[str(name)] = PerfData(latency=float(latency), bandwidth=bandwidth)
    return perf
