"""Instance ID generation.

IDs are built from a fixed ``obj`` prefix, the type name, the location name
and a version-4 UUID, e.g. ``obj_web_L1_0b9e4c1e-...``.  The type and
location parts keep IDs traceable in listings; the UUID makes them unique.
"""
from __future__ import annotations

import random
import uuid
from collections.abc import Callable

from pegraph.errors import IdentityCollisionError

UuidFactory = Callable[[], uuid.UUID]


def format_id(type_name: str, location_name: str, suffix: str) -> str:
    """Join the ID parts, skipping empty type or location names."""
    parts = ["obj"]
    if type_name:
        parts.append(type_name)
    if location_name:
        parts.append(location_name)
    parts.append(suffix)
    return "_".join(parts)


class IdentityGenerator:
    """Issues unique instance IDs for one run.

    Parameters
    ----------
    uuid_factory:
        Zero-argument callable returning a fresh ``uuid.UUID``.  Defaults
        to ``uuid.uuid4``.
    """

    def __init__(self, uuid_factory: UuidFactory | None = None) -> None:
        self._uuid_factory: UuidFactory = uuid_factory or uuid.uuid4
        self._issued: set[str] = set()

    @classmethod
    def seeded(cls, rng: random.Random) -> "IdentityGenerator":
        """Return a generator whose UUIDs are drawn from ``rng``.

        Two generators built from equally seeded ``Random`` objects issue
        the same sequence of IDs.
        """
        return cls(lambda: uuid.UUID(int=rng.getrandbits(128), version=4))

    def new_id(self, type_name: str, location_name: str) -> str:
        """Return a fresh ID for an instance of ``type_name`` at ``location_name``.

        Raises
        ------
        IdentityCollisionError
            If the generated ID was already issued by this generator.
        """
        instance_id = format_id(type_name, location_name, str(self._uuid_factory()))
        if instance_id in self._issued:
            raise IdentityCollisionError(instance_id)
        self._issued.add(instance_id)
        return instance_id

    @property
    def issued_count(self) -> int:
        return len(self._issued)
