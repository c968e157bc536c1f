"""Named registry of placement policies.

Policies register under a short name so that scenario files and the CLI
can select them.  Third-party packages contribute policies by declaring
entry-points in the "pegraph.policies" group.

Example
-------
Register a policy with the decorator::

    from pegraph.policy import PlacementPolicy, policy_registry

    @policy_registry.register("low-latency")
    class LowLatencyPolicy(PlacementPolicy):
        def allow(self, source_type, dest_type, candidate, perf_data):
            link = perf_data.get(candidate.name)
            return link is None or link.latency < 5.0

Load installed policies and build one by name::

    policy_registry.load_entrypoints()
    policy = resolve_policy("low-latency")
"""
from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Callable

from pegraph.policy.base import PermissivePolicy, PlacementPolicy

logger = logging.getLogger(__name__)

ENTRYPOINT_GROUP = "pegraph.policies"
DEFAULT_POLICY = "permissive"


class PolicyNotFoundError(KeyError):
    """Raised when a requested policy name is not in the registry."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.policy_name = name
        self.available = available
        super().__init__(
            f"Policy {name!r} is not registered. "
            f"Available policies: {', '.join(available) or '(none)'}."
        )


class PolicyAlreadyRegisteredError(ValueError):
    """Raised when attempting to register a name that already exists."""

    def __init__(self, name: str) -> None:
        self.policy_name = name
        super().__init__(
            f"Policy {name!r} is already registered. "
            "Use a unique name or deregister the existing entry first."
        )


class PolicyRegistry:
    """Registry mapping names to ``PlacementPolicy`` subclasses."""

    def __init__(self) -> None:
        self._policies: dict[str, type[PlacementPolicy]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self, name: str
    ) -> Callable[[type[PlacementPolicy]], type[PlacementPolicy]]:
        """Return a class decorator that registers the decorated policy.

        Raises
        ------
        PolicyAlreadyRegisteredError
            If ``name`` is already in use.
        TypeError
            If the decorated class does not subclass ``PlacementPolicy``.
        """

        def decorator(cls: type[PlacementPolicy]) -> type[PlacementPolicy]:
            self.register_class(name, cls)
            return cls

        return decorator

    def register_class(self, name: str, cls: type[PlacementPolicy]) -> None:
        """Register ``cls`` under ``name`` without decorator syntax."""
        if name in self._policies:
            raise PolicyAlreadyRegisteredError(name)
        if not (isinstance(cls, type) and issubclass(cls, PlacementPolicy)):
            raise TypeError(
                f"Cannot register {cls!r} under {name!r}: "
                "it must be a subclass of PlacementPolicy."
            )
        self._policies[name] = cls
        logger.debug("Registered policy %r -> %s", name, cls.__qualname__)

    def deregister(self, name: str) -> None:
        """Remove ``name`` from the registry.

        Raises
        ------
        PolicyNotFoundError
            If ``name`` is not registered.
        """
        if name not in self._policies:
            raise PolicyNotFoundError(name, self.list_policies())
        del self._policies[name]
        logger.debug("Deregistered policy %r", name)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> type[PlacementPolicy]:
        """Return the policy class registered under ``name``.

        Raises
        ------
        PolicyNotFoundError
            If no policy is registered under ``name``.
        """
        try:
            return self._policies[name]
        except KeyError:
            raise PolicyNotFoundError(name, self.list_policies()) from None

    def create(self, name: str) -> PlacementPolicy:
        """Instantiate the policy registered under ``name``."""
        return self.get(name)()

    def list_policies(self) -> list[str]:
        """Return the registered policy names in alphabetical order."""
        return sorted(self._policies)

    def __contains__(self, name: object) -> bool:
        return name in self._policies

    def __len__(self) -> int:
        return len(self._policies)

    def __repr__(self) -> str:
        return f"PolicyRegistry(policies={self.list_policies()})"

    # ------------------------------------------------------------------
    # Entry-point loading
    # ------------------------------------------------------------------

    def load_entrypoints(self, group: str = ENTRYPOINT_GROUP) -> None:
        """Discover and register policies declared as package entry-points.

        Names that are already registered are skipped, so repeated calls
        are idempotent.  An entry-point that fails to import or does not
        name a ``PlacementPolicy`` subclass is logged and skipped.
        """
        for ep in importlib.metadata.entry_points(group=group):
            if ep.name in self._policies:
                logger.debug("Entry-point %r already registered; skipping.", ep.name)
                continue
            try:
                cls = ep.load()
            except Exception:
                logger.exception(
                    "Failed to load entry-point %r from group %r; skipping.",
                    ep.name,
                    group,
                )
                continue
            try:
                self.register_class(ep.name, cls)
            except (PolicyAlreadyRegisteredError, TypeError):
                logger.warning(
                    "Entry-point %r loaded but could not be registered; skipping.",
                    ep.name,
                )


policy_registry = PolicyRegistry()
policy_registry.register_class(DEFAULT_POLICY, PermissivePolicy)


def resolve_policy(
    policy: PlacementPolicy | str | None,
    registry: PolicyRegistry | None = None,
) -> PlacementPolicy:
    """Turn a policy instance, registered name or ``None`` into a policy.

    ``None`` selects the default permissive policy.  A name that is not
    registered yet triggers entry-point discovery before the lookup.
    """
    if isinstance(policy, PlacementPolicy):
        return policy
    if registry is None:
        registry = policy_registry
    name = policy or DEFAULT_POLICY
    if name not in registry:
        registry.load_entrypoints()
    return registry.create(name)
