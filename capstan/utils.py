"""
Capstan utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the metadata, parser and kernel layers.

Overview
- UnsetType / Unset
  • Singleton sentinel for "value not provided" (a flag default of None is a real default).
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default while preserving None/0/""/[].

- rename(callable, name) / @rename("name")
  • Stable __name__/__qualname__ for generated accessors.

- mirror("attr")
  • Read-only property over a private backing field (self._attr), frozen for containers.

- dashcase(text)
  • "isAdmin" / "is_admin" → "is-admin", the default exposed name of a flag.

- maybe_await(value)
  • Await hook and handler results only when they are awaitable.
"""
import builtins
import functools
import inspect
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None   # None is preserved, not replaced
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - @rename(name)
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            callable.__qualname__ = name
            callable.__name__ = name
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    # shallow: sequences become tuples, mappings read-only views, sets frozensets
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private backing attribute "_{name}".

    Container values are returned frozen (tuple / mappingproxy / frozenset) so the
    public surface of a definition cannot be mutated after construction.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def dashcase(text, /):
    """
    Convert a property name into its dash-cased command-line spelling.

    - "isAdmin"   -> "is-admin"
    - "is_admin"  -> "is-admin"
    - "HTTPPort"  -> "http-port"
    - "admin"     -> "admin"
    """
    if not isinstance(text, str):
        raise TypeError("dashcase() argument must be a string")
    text = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1-\2", text)
    text = re.sub(r"([a-z\d])([A-Z])", r"\1-\2", text)
    return re.sub(r"[_\s]+", "-", text).strip("-").lower()


async def maybe_await(value, /):
    """
    Return `value`, awaiting it first when it is awaitable.

    Hooks, global flag callbacks and command handlers may be plain functions or
    coroutines; callers pass the call result through here.
    """
    if inspect.isawaitable(value):
        return await value
    return value


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "dashcase",
    "maybe_await",
    "UnsetType",
    "Unset",
)
