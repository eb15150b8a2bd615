"""
Replicant utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the value, parameter, command and repl layers.
- Public-but-internal leaning: importable, but designed to support the higher-level API.

Overview
- UnsetType / Unset
  • Singleton sentinel meaning “value not provided” without conflating it with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but keep legitimate falsey values (None, 0, "").

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables for readable tracebacks.

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr); containers are
    returned as fresh copies so callers cannot mutate builder state through them.

- Introspectable
  • Metaclass deriving __typename__ from the class name, publishing the fields listed in
    __introspectable__ as read-only properties, and emitting stable __repr__/__rich_repr__.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used wherever None is a legitimate user value (a parameter default, a help text
    explicitly cleared) and the API still needs to tell “not provided” apart.

    Characteristics
    - Boolean-false, distinct from None and 0.
    - repr(Unset) -> "Unset".
    - Sealed and process-wide singleton.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when the sentinel appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

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

    Falsey values such as None, 0, "" or [] are returned unchanged; only Unset is
    replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__/__qualname__ on a callable, or return a decorator that will.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name) -> decorator

    Raises
    - TypeError on non-callables, non-string names, or callables whose names
      cannot be updated (some built-ins).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _detach(object):
    """
    Copy containers one level at a time so the caller gets state it may freely mutate.

    - Mapping proxies stay as they are (already read-only).
    - Other mappings become dicts, non-string sequences become tuples, sets become frozensets.
    - Anything else is returned unchanged.
    """
    if isinstance(object, MappingProxyType):
        return object
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_detach, object.values())))
    elif isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(_detach, object))
    elif isinstance(object, Set):
        return frozenset(map(_detach, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Container values are detached (see _detach) on every access.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


class Introspectable(type):
    """
    Metaclass for the public model types (Value, Parameter, Command, Repl).

    Responsibilities
    - __typename__: derived from the class name (camel-case split with hyphens, lowercased),
      used as the subject of validation messages ("parameter 'name' must be a string").
    - Read-only properties for every name in __introspectable__ via mirror().
    - Stable __repr__ and __rich_repr__ driven by __displayable__ (or __introspectable__).

    A class may still define its own property for an introspectable name; explicit
    namespace entries win over generated mirrors.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            {
                field: mirror(field) for field in namespace.get("__introspectable__", ())
            } | namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            },
            **options,
        )

        if "__repr__" not in namespace:
            @rename("__repr__")
            def __repr__(self):
                return f"{type(self).__typename__}({
                    ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
                })"
            self.__repr__ = __repr__

        if "__rich_repr__" not in namespace:
            @rename("__rich_repr__")
            def __rich_repr__(self):
                for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                    yield field, getattr(self, field)
            self.__rich_repr__ = __rich_repr__

        return self


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "mirror",
    "Introspectable",
)
