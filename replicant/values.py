"""
Replicant argument values and conversions.

Overview
- ValueKind: the variants a Value can hold (text, int, float, bool) plus the
  sequence variant produced for variadic parameters.
- Value: immutable tagged union built by the binder from a token (or by a
  parameter from its default) and handed to command handlers.

Conversion contract
- Value.convert(type) re-parses the value's literal (its canonical text) with the
  grammar of the target type. The stored kind never short-circuits the parse:
  Value("42") converts to int even though it is stored as text, and Value(1.5)
  refuses to become an int instead of truncating.
- Supported targets: int (64-bit signed), float, bool (true/false, any case),
  str (always succeeds), list/tuple (sequence values only).
- Failures raise ConversionError with "type" and "literal" options. Asking for an
  unsupported target type is a programming error and raises TypeError.

Quick example:
    >>> Value("42").convert(int)
    42
    >>> Value(True).literal
    'true'
    >>> Value.sequence(["a", "b"]).convert(list)
    ['a', 'b']
"""
import builtins
import enum
import re

from .faults import ConversionError, FaultCode
from .utils import Introspectable

_MIN_INT = -2 ** 63
_MAX_INT = 2 ** 63 - 1

_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)", re.IGNORECASE)


class ValueKind(enum.StrEnum):
    TEXT = "text"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    SEQUENCE = "sequence"


def _fail(literal, type, hint, /):
    return ConversionError(
        f"cannot convert {literal!r} to {type.__name__}",
        title="conversion error",
        code=FaultCode.CONVERSION_FAILED,
        hint=hint,
        type=type.__name__,
        literal=literal,
    )


def _to_int(value, /):
    if not _INTEGER.fullmatch(literal := value.literal):
        raise _fail(literal, int, "use a whole number such as 42 or -7")
    if not _MIN_INT <= (number := int(literal)) <= _MAX_INT:
        raise _fail(literal, int, "use a whole number that fits in 64 bits")
    return number


def _to_float(value, /):
    if not _FLOAT.fullmatch(literal := value.literal):
        raise _fail(literal, float, "use a decimal number such as 3.14 or 1e-3")
    return float(literal)


def _to_bool(value, /):
    match value.literal.lower():
        case "true":
            return True
        case "false":
            return False
    raise _fail(value.literal, bool, "use true or false")


def _to_str(value, /):
    return value.literal


def _to_items(type, /):
    def converter(value, /):
        if value.kind is not ValueKind.SEQUENCE:
            raise _fail(value.literal, type, "only variadic arguments hold several values")
        return type(item.literal for item in value.items)
    return converter


_converters = {
    int: _to_int,
    float: _to_float,
    bool: _to_bool,
    str: _to_str,
    list: _to_items(list),
    tuple: _to_items(tuple),
}


class Value(metaclass=Introspectable):
    """
    Immutable converted argument.

    Construction
    - Value(str | int | float | bool | Value): scalar value; ints outside the
      64-bit signed range are rejected with ValueError.
    - Value.sequence(iterable): sequence value whose items are scalar Values.

    Fields (read-only)
    - kind: ValueKind of the stored variant.
    - literal: canonical text; str(value) returns it.
    - items: tuple of item Values (empty for scalars).
    """
    __introspectable__ = ("kind", "literal", "items")
    __displayable__ = ("kind", "literal")
    __slots__ = ("_kind", "_literal", "_items")

    def __init__(self, object, /):
        match object:
            case Value():
                fields = object._kind, object._literal, object._items
            case bool():
                fields = ValueKind.BOOL, "true" if object else "false", ()
            case int():
                if not _MIN_INT <= object <= _MAX_INT:
                    raise ValueError(f"{type(self).__typename__} integers must fit in 64 bits")
                fields = ValueKind.INT, str(object), ()
            case float():
                fields = ValueKind.FLOAT, repr(object), ()
            case str():
                fields = ValueKind.TEXT, object, ()
            case _:
                raise TypeError(
                    f"{type(self).__typename__} must be built from a string, integer, float or boolean"
                )
        for name, field in zip(self.__slots__, fields):
            super().__setattr__(name, field)

    @classmethod
    def sequence(cls, items, /):
        """
        Build the sequence value a variadic parameter binds.

        Items may be anything Value() accepts except another sequence; the literal
        is the item literals joined by single spaces.
        """
        items = tuple(map(cls, items))
        if any(item.kind is ValueKind.SEQUENCE for item in items):
            raise TypeError(f"{cls.__typename__} sequences cannot be nested")
        self = cls.__new__(cls)
        for name, field in zip(cls.__slots__, (ValueKind.SEQUENCE, " ".join(map(str, items)), items)):
            super(Value, self).__setattr__(name, field)
        return self

    def convert(self, type, /):
        """
        Convert the literal into an instance of 'type'.

        Raises
        - ConversionError when the literal is not valid for 'type'.
        - TypeError when 'type' is not a supported target.
        """
        try:
            converter = _converters[type]
        except (KeyError, TypeError):
            raise TypeError(f"{builtins.type(self).__typename__} cannot be converted to {type!r}") from None
        return converter(self)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__typename__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__typename__} is immutable")

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return (self._kind, self._literal, self._items) == (other._kind, other._literal, other._items)

    def __hash__(self):
        return hash((self._kind, self._literal, self._items))

    def __str__(self):
        return self._literal

    def __bool__(self):
        return self._kind is not ValueKind.SEQUENCE or bool(self._items)

    def __iter__(self):
        if self._kind is not ValueKind.SEQUENCE:
            raise TypeError(f"{type(self).__typename__} of kind {self._kind!r} is not iterable")
        return iter(self._items)

    def __len__(self):
        if self._kind is not ValueKind.SEQUENCE:
            raise TypeError(f"{type(self).__typename__} of kind {self._kind!r} has no length")
        return len(self._items)


__all__ = (
    "ValueKind",
    "Value",
)
