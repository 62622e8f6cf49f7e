"""Method handle lookup for objects with unusual attribute lookup.

Includes handling for a few special cases:
  - objects that override __getattribute__ (e.g. a record type serving its
    fields through a custom lookup)
  - proxies that define nothing themselves and forward every attribute to a
    target through __getattr__
  - own lookups that raise or hand back something that is not a method
"""

from __future__ import annotations

import inspect
import types
from typing import Any, Callable, Sequence, Tuple

from assertsupport import features
from assertsupport.logging import get_logger

log = get_logger("assertsupport.method_handle")

MethodHandle = Callable[..., Any]
LookupStrategy = Callable[[Any, str], MethodHandle]

_HANDLE_TYPES = (
    types.MethodType,
    types.BuiltinMethodType,
    types.MethodWrapperType,
    types.FunctionType,
    types.MethodDescriptorType,
    types.ClassMethodDescriptorType,
    types.WrapperDescriptorType,
)

_MISSING = object()

# Attributes that bind to a method without running user code.
_BINDABLE = (
    types.FunctionType,
    classmethod,
    staticmethod,
    types.BuiltinFunctionType,
    types.MethodDescriptorType,
    types.ClassMethodDescriptorType,
    types.WrapperDescriptorType,
)


def _describe(obj: Any) -> str:
    cls = type(obj)
    if issubclass(cls, type):
        return f"class {obj.__qualname__}"
    return f"an instance of {cls.__qualname__}"


class NoSuchMethodError(AttributeError):
    """No lookup strategy produced a method handle for `name` on `obj`."""

    def __init__(self, obj: Any, name: str):
        super().__init__(f"undefined method '{name}' for {_describe(obj)}", name=name, obj=obj)


def is_method_handle(value: Any) -> bool:
    return isinstance(value, _HANDLE_TYPES)


def _binds_without_side_effects(attr: Any) -> bool:
    if isinstance(attr, _BINDABLE):
        return True
    # property, slots, cached_property: binding would run a getter
    return not hasattr(type(attr), "__get__")


def base_lookup(obj: Any, name: str) -> MethodHandle:
    """Look `name` up with the root type's generic primitive.

    The attribute is first found statically; properties and other
    descriptors are never invoked. Classes go through type.__getattribute__
    so inherited methods and classmethods bind the way they do for ordinary
    attribute access.
    """
    try:
        attr = inspect.getattr_static(obj, name)
    except AttributeError:
        raise NoSuchMethodError(obj, name) from None
    if not _binds_without_side_effects(attr):
        raise NoSuchMethodError(obj, name)

    getattribute = type.__getattribute__ if issubclass(type(obj), type) else object.__getattribute__
    try:
        found = getattribute(obj, name)
    except AttributeError:
        raise NoSuchMethodError(obj, name) from None
    if not callable(found):
        raise NoSuchMethodError(obj, name)
    return found


def own_lookup(obj: Any, name: str) -> MethodHandle:
    """Ask the object itself; only genuine method handles are accepted.

    Names that only exist dynamically (__getattr__ proxies) are fetched as is;
    statically visible properties are refused before anything runs.
    """
    attr = inspect.getattr_static(obj, name, _MISSING)
    if attr is not _MISSING and not _binds_without_side_effects(attr):
        raise NoSuchMethodError(obj, name)
    try:
        found = getattr(obj, name)
    except AttributeError:
        raise NoSuchMethodError(obj, name) from None
    if not is_method_handle(found):
        raise NoSuchMethodError(obj, name)
    return found


def takes_part_in_base_lookup(obj: Any) -> bool:
    """True when object.__getattribute__ applies to `obj`'s type.

    Always the case for CPython and PyPy objects.
    """
    return object in type(obj).__mro__


def _strategies(obj: Any) -> Tuple[LookupStrategy, ...]:
    if features.supports_rebinding_base_lookup() or takes_part_in_base_lookup(obj):
        return (base_lookup, own_lookup)
    return (own_lookup,)


def resolve_handle(obj: Any, name: str, strategies: Sequence[LookupStrategy]) -> MethodHandle:
    """Try `strategies` in order; the first strategy's error is the one raised.

    Errors of any kind from later strategies are discarded.
    """
    first, *fallbacks = strategies
    try:
        return first(obj, name)
    except NoSuchMethodError:
        for fallback in fallbacks:
            try:
                return fallback(obj, name)
            except Exception as e:
                log.debug("fallback %s failed for %r on %s: %r", fallback.__name__, name, type(obj).__qualname__, e)
        raise


def method_handle_for(obj: Any, method_name: str) -> MethodHandle:
    return resolve_handle(obj, method_name, _strategies(obj))
