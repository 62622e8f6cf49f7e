"""Context-local failure notifier.

Assertion helpers report failures through `notify_failure` instead of raising
directly. A runner can then swap the notifier for the length of a block (e.g.
to aggregate failures) without the helpers knowing.

The notifier lives in a ContextVar, so every thread and every asyncio task
sees its own value and no locking is needed.

Two calling conventions are supported:
  - notifier(failure)           legacy one-argument notifiers
  - notifier(failure, options)  current interface
"""

from __future__ import annotations

import inspect
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, TypeVar

from assertsupport import features
from assertsupport.logging import get_logger

log = get_logger("assertsupport.failure_notifier")

Notifier = Callable[..., Any]
T = TypeVar("T")

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)

_current_notifier: ContextVar[Optional[Notifier]] = ContextVar("assertsupport_failure_notifier", default=None)


def reraise(failure: Any, message: Optional[str] = None) -> None:
    """Raise `failure`.

    An exception class is instantiated (with `message` when given). A value
    that is not an exception at all is raised as AssertionError(failure).
    """
    if isinstance(failure, type) and issubclass(failure, BaseException):
        raise failure() if message is None else failure(message)
    if isinstance(failure, BaseException):
        raise failure
    raise AssertionError(failure)


def _raise_failure(failure: Any, _options: Mapping[str, Any]) -> None:
    reraise(failure)


DEFAULT_FAILURE_NOTIFIER: Notifier = _raise_failure


def get_failure_notifier() -> Notifier:
    notifier = _current_notifier.get()
    return DEFAULT_FAILURE_NOTIFIER if notifier is None else notifier


def set_failure_notifier(notifier: Optional[Notifier]) -> None:
    """Install `notifier` for the current context; None restores the default."""
    _current_notifier.set(notifier)


def notifier_arity(notifier: Notifier) -> int:
    """Return the number of positional arguments `notifier` expects.

    Fixed arity is the count of required positional parameters. When there are
    optional or variadic positional parameters the result is -(required + 1).
    A notifier with an integer `arity` attribute reports its own.
    """
    arity = getattr(notifier, "arity", None)
    if isinstance(arity, int) and not isinstance(arity, bool):
        return arity
    if not features.supports_signature_introspection():
        return -1
    try:
        sig = inspect.signature(notifier)
    except (TypeError, ValueError):
        return -1

    required = 0
    optional = False
    for p in sig.parameters.values():
        if p.kind in _POSITIONAL:
            if p.default is inspect.Parameter.empty:
                required += 1
            else:
                optional = True
        elif p.kind is inspect.Parameter.VAR_POSITIONAL:
            optional = True
    return -(required + 1) if optional else required


def notify_failure(failure: Any, options: Optional[Dict[str, Any]] = None) -> Any:
    notifier = get_failure_notifier()
    opts: Dict[str, Any] = {} if options is None else options
    arity = notifier_arity(notifier)

    # TODO: drop the one-argument branch once downstream runners have moved to
    # notifier(failure, options).
    if arity == 1:
        log.debug("notify_failure: one-argument notifier %r", notifier)
        return notifier(failure)
    if notifier is reraise:
        # reraise takes (failure, message); options must not become the message.
        return notifier(failure)
    return notifier(failure, opts)


@contextmanager
def with_failure_notifier(notifier: Notifier) -> Iterator[Notifier]:
    """Install `notifier` for the block; the previous one is always restored."""
    previous = _current_notifier.get()
    _current_notifier.set(notifier)
    try:
        yield notifier
    finally:
        _current_notifier.set(previous)


def call_with_failure_notifier(notifier: Notifier, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    with with_failure_notifier(notifier):
        return func(*args, **kwargs)
