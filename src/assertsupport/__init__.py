"""Support layer for assertion libraries.

Public helpers:
  - method_handle_for(obj, name)          method handle that survives custom attribute lookup
  - notify_failure(failure, options=None)  report a failure through the current notifier
  - with_failure_notifier(notifier)        scoped notifier override (context manager)
  - Differ                                 failure diff rendering (loaded on first use)
"""

from __future__ import annotations

from assertsupport.failure_notifier import (
    DEFAULT_FAILURE_NOTIFIER,
    call_with_failure_notifier,
    get_failure_notifier,
    notify_failure,
    reraise,
    set_failure_notifier,
    with_failure_notifier,
)
from assertsupport.method_handle import NoSuchMethodError, method_handle_for
from assertsupport.version import __version__

__all__ = [
    "__version__",
    "DEFAULT_FAILURE_NOTIFIER",
    "Differ",
    "NoSuchMethodError",
    "call_with_failure_notifier",
    "get_failure_notifier",
    "method_handle_for",
    "notify_failure",
    "reraise",
    "set_failure_notifier",
    "with_failure_notifier",
]


# Differ pulls in difflib/pprint and inspects pandas objects; most runs never
# render a diff, so it is imported on first access.
def __getattr__(name: str):
    if name == "Differ":
        from assertsupport.differ import Differ
        return Differ
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
