"""Placement policies consulted by the closure engine.

A policy decides whether a candidate location may host a new instance of a
destination type that a source type depends on.  The closure engine never
creates an instance without first asking its policy; an empty set of
permitted locations is reported as an ``AllocationError``.

Example
-------
A policy that keeps databases out of edge locations::

    class NoEdgeDatabases(PlacementPolicy):
        def allow(self, source_type, dest_type, candidate, perf_data):
            return not (dest_type == "db" and candidate.name.startswith("edge"))
"""
from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from pegraph.errors import AllocationError
from pegraph.model.nodes import Location, PerfData


class PlacementPolicy(ABC):
    """Base class for placement policies."""

    @abstractmethod
    def allow(
        self,
        source_type: str,
        dest_type: str,
        candidate: Location,
        perf_data: Mapping[str, PerfData],
    ) -> bool:
        """Return True if ``candidate`` may host a new ``dest_type`` instance.

        Parameters
        ----------
        source_type:
            Type of the instance whose dependency is being satisfied.
        dest_type:
            Type of the instance to be created.
        candidate:
            An allow-listed location for ``dest_type``.
        perf_data:
            Performance measurements for the run; may be empty.
        """

    def choose(
        self,
        source_type: str,
        dest_type: str,
        allowlist: Sequence[Location],
        rng: random.Random,
        perf_data: Mapping[str, PerfData],
    ) -> Location:
        """Pick a permitted location uniformly at random.

        Raises
        ------
        AllocationError
            If ``allowlist`` is empty or the policy rejects every candidate.
        """
        if not allowlist:
            raise AllocationError(dest_type, "allow-list is empty")
        permitted = [
            loc for loc in allowlist if self.allow(source_type, dest_type, loc, perf_data)
        ]
        if not permitted:
            raise AllocationError(
                dest_type,
                f"policy {type(self).__name__} rejected all "
                f"{len(allowlist)} allow-listed location(s)",
            )
        return rng.choice(permitted)


class PermissivePolicy(PlacementPolicy):
    """Accepts every allow-listed location."""

    def allow(
        self,
        source_type: str,
        dest_type: str,
        candidate: Location,
        perf_data: Mapping[str, PerfData],
    ) -> bool:
        return True
