"""Placement policy subsystem.

``PlacementPolicy`` is the hook the closure engine consults before creating
an instance; ``PermissivePolicy`` (registered as "permissive") is the
default.  Additional policies register with ``policy_registry`` directly or
through entry-points in the "pegraph.policies" group.

Example
-------
Declare a policy in a downstream pyproject.toml:

.. code-block:: toml

    [project.entry-points."pegraph.policies"]
    low-latency = "my_package.policies:LowLatencyPolicy"
"""
from __future__ import annotations

from pegraph.policy.base import PermissivePolicy, PlacementPolicy
from pegraph.policy.registry import (
    DEFAULT_POLICY,
    PolicyAlreadyRegisteredError,
    PolicyNotFoundError,
    PolicyRegistry,
    policy_registry,
    resolve_policy,
)

__all__ = [
    "DEFAULT_POLICY",
    "PermissivePolicy",
    "PlacementPolicy",
    "PolicyAlreadyRegisteredError",
    "PolicyNotFoundError",
    "PolicyRegistry",
    "policy_registry",
    "resolve_policy",
]
