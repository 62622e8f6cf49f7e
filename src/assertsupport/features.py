"""Capability probes read by the core.

Each probe runs once per process and is cached.
"""

from __future__ import annotations

import inspect
from functools import lru_cache


class _Probe:
    def ping(self) -> str:
        return "pong"


@lru_cache(maxsize=None)
def supports_rebinding_base_lookup() -> bool:
    """True when object.__getattribute__ can be applied to arbitrary instances."""
    try:
        bound = object.__getattribute__(_Probe(), "ping")
        return bound() == "pong"
    except Exception:
        return False


@lru_cache(maxsize=None)
def supports_signature_introspection() -> bool:
    try:
        return len(inspect.signature(lambda failure, options: None).parameters) == 2
    except (TypeError, ValueError):
        return False
