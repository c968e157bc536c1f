"""End-to-end build: scenario in, closed instance graph out."""
from __future__ import annotations

import logging
import random

from pegraph.closure import ClosureEngine
from pegraph.identity import IdentityGenerator
from pegraph.instantiate import generate_initial_graph
from pegraph.model.nodes import InstanceGraph
from pegraph.policy.base import PlacementPolicy
from pegraph.policy.registry import resolve_policy
from pegraph.scenario import Scenario

logger = logging.getLogger(__name__)


def build(
    scenario: Scenario,
    *,
    policy: PlacementPolicy | str | None = None,
    seed: int | None = None,
) -> InstanceGraph:
    """Instantiate the required placements and close the graph.

    Parameters
    ----------
    scenario:
        The run inputs.
    policy:
        A policy instance or registered name.  Falls back to the
        scenario's policy, then to the permissive default.
    seed:
        Random seed.  Falls back to the scenario's seed; with neither the
        run is not reproducible.

    Returns
    -------
    InstanceGraph
        The closed graph, with ``complete`` set.

    Raises
    ------
    AllocationError, CycleDetectedError
        Propagated from closure; ``exc.graph`` holds the partial graph.
    """
    effective_seed = seed if seed is not None else scenario.seed
    rng = random.Random(effective_seed)
    identity = IdentityGenerator.seeded(rng)
    placement = resolve_policy(policy if policy is not None else scenario.policy)
    logger.info(
        "Building graph: %d type(s), policy=%s, seed=%s",
        len(scenario.template.nodes),
        type(placement).__name__,
        effective_seed,
    )

    graph = generate_initial_graph(
        scenario.template, scenario.requirements, identity=identity
    )
    engine = ClosureEngine(
        scenario.template,
        scenario.allowlist,
        policy=placement,
        rng=rng,
        identity=identity,
        perf_data=scenario.perf_data,
    )
    engine.close(graph)
    return graph
