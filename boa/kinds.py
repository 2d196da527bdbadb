"""
Value kinds, arity encodings and the bound-value tagged union.

Kind
- One member per semantic type, in scalar and slice form. Numeric values follow
  the original wire order so JSON tables can carry either the number or the name
  (e.g. 4 or "int-slice").

Arity
- A non-negative integer is a fixed count (0 = presence only).
- -1..-N means "fixed count N, but optional".
- ONE_OR_MORE and ZERO_OR_MORE are the variadic sentinels.

Value
- A (kind, data) pair. Consumers pattern-match on it:

    match item.value:
        case Value(Kind.INT, number): ...
        case Value(Kind.INT_SLICE, numbers): ...
"""
from enum import IntEnum
from typing import Any, NamedTuple

ONE_OR_MORE = -100
ZERO_OR_MORE = -99

VARIADIC = frozenset((ONE_OR_MORE, ZERO_OR_MORE))


class Kind(IntEnum):
    BOOL           = 0
    STRING         = 1
    STRING_SLICE   = 2
    INT            = 3
    INT_SLICE      = 4
    FLOAT          = 5
    FLOAT_SLICE    = 6
    TIME           = 7
    TIME_SLICE     = 8
    DURATION       = 9
    DURATION_SLICE = 10
    DATE           = 11
    DATE_SLICE     = 12
    PATH           = 13
    PATH_SLICE     = 14
    URL            = 15
    URL_SLICE      = 16
    IPV4           = 17
    IPV4_SLICE     = 18
    EMAIL          = 19
    EMAIL_SLICE    = 20
    PHONE          = 21
    PHONE_SLICE    = 22

    @property
    def sliced(self):
        return self.name.endswith("_SLICE")

    @property
    def scalar(self):
        """the scalar form of this kind (itself when already scalar)."""
        return Kind[self.name.removesuffix("_SLICE")]

    def slice(self):
        """
        the slice form of this kind.

        raises LookupError for BOOL, which has no list form.
        """
        if self.sliced:
            return self
        try:
            return Kind[self.name + "_SLICE"]
        except KeyError:
            raise LookupError("kind %r has no slice form" % self.typename) from None

    @property
    def typename(self):
        """wire-friendly name, e.g. 'int-slice'."""
        return self.name.lower().replace("_", "-")

    @property
    def label(self):
        """human label used in printed tables."""
        return _LABELS[self.scalar]

    @classmethod
    def lookup(cls, object, /):
        """
        resolve a kind from its numeric wire value, its typename or its member name.
        """
        if isinstance(object, cls):
            return object
        if isinstance(object, bool):
            raise TypeError("kind cannot be a boolean")
        if isinstance(object, int):
            return cls(object)
        if isinstance(object, str):
            try:
                return cls[object.strip().upper().replace("-", "_")]
            except KeyError:
                raise ValueError("unknown kind %r" % object) from None
        raise TypeError("kind must be an integer or a string")


_LABELS = {
    Kind.BOOL: "Bool",
    Kind.STRING: "String",
    Kind.INT: "Integer",
    Kind.FLOAT: "Float",
    Kind.TIME: "Time",
    Kind.DURATION: "Time Duration",
    Kind.DATE: "Date",
    Kind.PATH: "Path",
    Kind.URL: "URL",
    Kind.IPV4: "IPv4 Address",
    Kind.EMAIL: "Email Address",
    Kind.PHONE: "Phone Number",
}


class Value(NamedTuple):
    kind: Kind
    data: Any

    def __rich_repr__(self):
        yield "kind", self.kind.typename
        yield "data", self.data


PRESENT = Value(Kind.BOOL, True)


def describe_arity(arity, /):
    """short human rendering of an arity, e.g. '1', '[2]', '1..', '0..'."""
    if arity == ONE_OR_MORE:
        return "1.."
    if arity == ZERO_OR_MORE:
        return "0.."
    if arity < 0:
        return "[%d]" % -arity
    return str(arity)


__all__ = (
    "Kind",
    "Value",
    "PRESENT",
    "ONE_OR_MORE",
    "ZERO_OR_MORE",
    "VARIADIC",
    "describe_arity",
)
