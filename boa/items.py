r"""
Boa item model: the declarative description of one command or flag.

Overview
- Item: immutable template describing how a single command-line item is named,
  typed, counted and documented. The engine never mutates an Item; it binds a
  value onto a copy (copy.replace(item, value=..., children=...)).

- ItemType metaclass
  • Provides stable __repr__/__rich_repr__ implementations for diagnostics and
    pretty printing.
  • Exposes every field listed in __introspectable__ as a read-only property
    backed by a private attribute (see utils.mirror).

Metadata (sanitized on construction)
- name: non-empty string, no surrounding whitespace.
- alias: "" (none) or a non-empty string different from name.
- kind: Kind (accepts anything Kind.lookup accepts: member, wire number, typename).
- arity: int; >= 0 fixed, -1..-N optional fixed, ONE_OR_MORE / ZERO_OR_MORE variadic.
  A bool item always has arity 0; a variadic arity or a count above one turns
  kind into its slice form (Kind.INT -> Kind.INT_SLICE).
- default: raw string substituted when a value is absent.
- required / exclusive / flag / optional / has_default: booleans.
- children: ordered, duplicate-free tuple of sub-selector tokens.
- ordinal: declaration (or scan) position.
- value: Unset, or a Value consistent with kind and arity:
  • arity 0 only ever carries PRESENT (Value(Kind.BOOL, True));
  • otherwise the Value tag equals kind.
- short / long: help prose.

Tables
- sanitize_table(table) checks a whole mapping name -> Item: keys equal names,
  aliases never collide with a name or with another alias.

Quick example:
    >>> from boa.items import Item
    >>> from boa.kinds import Kind, ONE_OR_MORE
    >>> Item("--ints", kind=Kind.INT_SLICE, arity=ONE_OR_MORE, short="some numbers")
    item(name='--ints', alias='', kind=<Kind.INT_SLICE: 4>, arity=-100, ...)
"""
import functools
import operator
import re
from collections.abc import Iterable, Mapping

from .kinds import *
from .utils import *


class ItemType(type):
    """
    Metaclass giving items a readable representation and read-only fields.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate and normalize 'name' and 'alias'.

    Raises
    - TypeError: when either is not a string.
    - ValueError: when name is empty after trimming, or alias equals name.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if not isinstance(alias := metadata["alias"], str):
        raise TypeError(f"{cls.__typename__} 'alias' must be a string")
    elif (alias := alias.strip()) == name:
        raise ValueError(f"{cls.__typename__} 'alias' cannot repeat the name {name!r}")
    metadata["alias"] = alias


def _sanitize_shape(cls, metadata, /):
    """
    Internal: validate kind and arity, and the bound value against both.

    Rules
    - kind resolves through Kind.lookup.
    - arity is an int: non-negative, -1..-N, or one of the variadic sentinels.
    - a bool item is presence-only: its arity is forced to 0.
    - a variadic arity, or a count above one, promotes kind to its slice form.
    - value is Unset or a Value; arity 0 only carries PRESENT, anything else
      carries a Value tagged with kind.
    """
    metadata["kind"] = kind = Kind.lookup(metadata["kind"])

    if isinstance(arity := metadata["arity"], bool) or not isinstance(arity, int):
        raise TypeError(f"{cls.__typename__} 'arity' must be an integer")
    if arity < 0 and arity not in VARIADIC and arity < ZERO_OR_MORE:
        raise ValueError(f"{cls.__typename__} 'arity' {arity} is not a valid encoding")

    if kind is Kind.BOOL:
        metadata["arity"] = arity = 0
    elif arity in VARIADIC or abs(arity) > 1:
        metadata["kind"] = kind.slice()

    if (value := metadata["value"]) is Unset:
        return
    if not isinstance(value, Value):
        raise TypeError(f"{cls.__typename__} 'value' must be a tagged Value")
    if arity == 0 and value != PRESENT:
        raise ValueError(f"{cls.__typename__} {metadata['name']!r} only carries presence")
    if arity != 0 and value.kind != metadata["kind"]:
        raise ValueError(f"{cls.__typename__} {metadata['name']!r} cannot carry a {value.kind.typename!r} value")


def _sanitize_extras(cls, metadata, /):
    """
    Internal: normalize children, help prose, default and ordinal.

    - children: iterable of non-empty strings; duplicates rejected, order kept.
    - default/short/long: strings (short/long are trimmed).
    - ordinal: int.
    """
    if isinstance(children := metadata["children"], str) or not isinstance(children, Iterable):
        raise TypeError(f"{cls.__typename__} 'children' must be an iterable of strings")
    sanitized = []
    for child in children:
        if not isinstance(child, str):
            raise TypeError(f"{cls.__typename__} 'children' must be strings")
        elif not child:
            raise ValueError(f"{cls.__typename__} 'children' cannot be empty-strings")
        elif child in sanitized:
            raise ValueError(f"{cls.__typename__} 'children' cannot contain duplicates")
        sanitized.append(child)
    metadata["children"] = tuple(sanitized)

    for field in ("default", "short", "long"):
        if not isinstance(metadata[field], str):
            raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    metadata["short"] = metadata["short"].strip()
    metadata["long"] = metadata["long"].strip("\n")

    if isinstance(ordinal := metadata["ordinal"], bool) or not isinstance(ordinal, int):
        raise TypeError(f"{cls.__typename__} 'ordinal' must be an integer")


class Item(metaclass=ItemType):
    """
    One declared command or flag and its parsing rules.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      mirroring the sanitized metadata.
    - tolerant: a missing value is not an error.
    - present: a value is bound.
    """

    __introspectable__ = (
        "name",
        "alias",
        "kind",
        "arity",
        "optional",
        "default",
        "required",
        "exclusive",
        "flag",
        "has_default",
        "children",
        "ordinal",
        "value",
        "short",
        "long",
    )

    def __new__(
            cls,
            name,
            /,
            alias="",
            kind=Kind.STRING,
            arity=0,
            *,
            optional=False,
            default="",
            required=False,
            exclusive=False,
            flag=False,
            has_default=False,
            children=(),
            ordinal=0,
            value=Unset,
            short="",
            long=""
    ):
        metadata = {
            "name": name,
            "alias": alias,
            "kind": kind,
            "arity": arity,
            "optional": bool(optional),
            "default": default,
            "required": bool(required),
            "exclusive": bool(exclusive),
            "flag": bool(flag),
            "has_default": bool(has_default),
            "children": children,
            "ordinal": ordinal,
            "value": value,
            "short": short,
            "long": long,
        }
        _sanitize_names(cls, metadata)
        _sanitize_shape(cls, metadata)
        _sanitize_extras(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def tolerant(self):
        """true when a missing parameter is not an error."""
        return self._optional or self._arity == ZERO_OR_MORE or (self._arity < 0 and self._arity not in VARIADIC)

    @property
    def present(self):
        return self._value is not Unset

    @property
    def names(self):
        """the name followed by the alias, when one is set."""
        return (self._name, self._alias) if self._alias else (self._name,)

    def __eq__(self, other):
        if not isinstance(other, Item):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in type(self).__introspectable__)

    def __hash__(self):
        return hash((self._name, self._alias, self._ordinal))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        metadata = {name: getattr(self, name) for name in type(self).__introspectable__} | overrides
        return type(self)(metadata.pop("name"), **metadata)


def sanitize_table(table, /):
    """
    Validate a command table (mapping name -> Item) and return it as a plain dict.

    Raises
    - TypeError: when the table is not a mapping of Items.
    - ValueError: when a key differs from its item's name, or an alias collides
      with any name or with another alias.
    """
    if not isinstance(table, Mapping):
        raise TypeError("command table must be a mapping")

    aliases = {}
    for key, item in table.items():
        if not isinstance(item, Item):
            raise TypeError(f"command table entry {key!r} must be an item")
        if key != item.name:
            raise ValueError(f"command table key {key!r} does not match item name {item.name!r}")
        if not item.alias:
            continue
        if item.alias in table:
            raise ValueError(f"alias {item.alias!r} of {item.name!r} collides with an item name")
        if item.alias in aliases:
            raise ValueError(f"alias {item.alias!r} is shared by {aliases[item.alias]!r} and {item.name!r}")
        aliases[item.alias] = item.name

    return dict(table)


__all__ = (
    "Item",
    "ItemType",
    "sanitize_table",
)
