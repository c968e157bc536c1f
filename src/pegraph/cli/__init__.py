"""CLI package.

The ``cli`` sub-package contains the Click application and all command
implementations.  Commands import lazily so that ``pegraph --help`` stays
fast.
"""
from __future__ import annotations
