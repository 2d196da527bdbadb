"""
Shared helpers for the item model, the engine and the result set.

- Unset: the "no value bound" marker. It is falsey and prints as "Unset". It is
  never equal to None, False or 0, and there is exactly one per process.
- coalesce(object, default): swap Unset for a default; other falsey values pass.
- rename(function, name) and @rename(name): give generated functions a real
  __name__ and __qualname__.
- mirror(attribute): read-only property over self._attribute. Containers come
  back as fresh copies, so an Item template cannot be edited through them.
- plural(word, count): "1 error", "3 errors".

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(0, "fallback")
    0
    >>> plural("error", 2)
    '2 errors'
"""
import functools
from collections.abc import Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    Instances cannot be told apart: the constructor always hands back the
    same object, copies included. Subclassing is refused.
    """

    def __or__(self, other, /):
        """allows annotations such as `Value | Unset`."""
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
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

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")


def coalesce(object, default=None, /):
    """
    `default` when object is Unset, else object itself.

    - coalesce(Unset, "fallback") -> "fallback"
    - coalesce(None, "fallback")  -> None
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(function, name) renames function in place and returns it;
    rename(name) returns a decorator doing the same.

    ResultSet builds one accessor per kind at import time; renaming them keeps
    tracebacks readable (`integer`, not `_accessor.<locals>.getter`).
    """
    if len(parameters) == 1:
        return functools.partial(_rename, name=parameters[0])
    if len(parameters) == 2:
        return _rename(parameters[0], name=parameters[1])
    raise TypeError("rename() expects (name) or (function, name), got %d arguments" % len(parameters))


def _rename(function, /, name):
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")
    if not callable(function):
        raise TypeError("rename() can only rename callables")
    try:
        function.__name__ = function.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() cannot rename %r" % (function,)) from None
    return function


def _detach(object):
    """
    Copy mutable containers so callers never hold a template's own storage.

    - list: new list, elements detached.
    - Mapping: new dict with detached values.
    - Set: new set.
    - tuples (including NamedTuple values) and scalars are immutable: returned as-is.
    """
    if isinstance(object, list):
        return list(map(_detach, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_detach, object.values())))
    elif isinstance(object, Set) and not isinstance(object, frozenset):
        return set(map(_detach, object))
    return object


def mirror(name, /):
    """read-only property over self._<name>; containers are copied on the way out."""
    if not isinstance(name, str):
        raise TypeError("mirror() expects an attribute name")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def plural(word, count, /):
    """
    Render "<count> <word>" with a naive English plural for count != 1.

    Only the handful of nouns used in fault summaries go through here
    ("error", "item", "value", "entry"), so the rules stay small.
    """
    if not isinstance(word, str):
        raise TypeError("plural() first argument must be a string")
    if count == 1:
        return "%d %s" % (count, word)
    if word.endswith(("s", "sh", "ch", "x", "z")):
        return "%d %ses" % (count, word)
    if word.endswith("y") and word[-2:-1] not in ("a", "e", "i", "o", "u", ""):
        return "%d %sies" % (count, word[:-1])
    return "%d %ss" % (count, word)


Unset = UnsetType()
"""
Internal sentinel for "no value bound".

An Item whose value is Unset was either never seen on the command line, or was
seen but tolerated a missing parameter. Result accessors return Unset as their
"not present" signal.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "plural",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
