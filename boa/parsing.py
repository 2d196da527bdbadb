r"""
Boa argument consumption engine.

Scope
- normalize(tokens): the single rewriting pass applied before consumption.
- consume(table, argv): walk the normalized vector with a cursor and bind every
  recognized item; faults accumulate, nothing is raised.
- parse(table, argv): consume, then run the requirement validator, then attach
  the combined help of every table item.

Normalization (idempotent on well-formed input)
1. a token containing '=' is split at the first '=' into two tokens.
2. a token starting with exactly one dash and holding more than one character
   after it is exploded into one dashed token per character ("-abc" -> "-a -b -c").
   "--long", "--" and plain words pass through unchanged.

Resolution (per cursor position)
- exact name, then "--" + token, then alias (resolved to the canonical name).
- anything else is an unrecognized item; the cursor moves on by one.

Binding
- arity 0: bind presence (Value(Kind.BOOL, True)) and consume the item token only,
  whatever the declared kind and whatever follows.
- scalar kinds: child selectors declared on the item are consumed first; the
  next token is the value. A missing value falls back to the default, then to
  tolerance, else it is a missing-value fault. A literal "--" binds the default.
- slice kinds: greedy until "--" (consumed) or the end of the vector. Coercion is
  atomic: on the first bad token nothing is bound, every token is still consumed.

Every resolved item lands in the result under its canonical name, even when it
carries a fault; the cursor always advances by at least one token.

Quick example:
    >>> from boa.items import Item
    >>> from boa.kinds import Kind, ONE_OR_MORE
    >>> from boa.parsing import consume
    >>> result = consume({"X": Item("X", kind=Kind.INT_SLICE, arity=ONE_OR_MORE)}, ["X", "1", "2", "--"])
    >>> result.integers("X")
    (1, 2)
"""
import copy
import difflib
import shlex

from .coercion import *
from .faults import *
from .formatting import format_help
from .items import *
from .kinds import *
from .results import ResultSet
from .utils import *
from .validation import validate_requirements

SENTINEL = "--"


def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def normalize(tokens, /):
    """
    rewrite a raw argument vector into one token per item or value.

    examples
    - ["-abc"]       -> ["-a", "-b", "-c"]
    - ["--name=joe"] -> ["--name", "joe"]
    - ["-n=5"]       -> ["-n", "5"]
    """
    if isinstance(tokens, str):
        raise TypeError("normalize() argument must be an iterable of strings, not a string")

    split = []
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError("normalize() tokens must be strings")
        if "=" in token:
            split.extend(token.split("=", 1))
        else:
            split.append(token)

    result = []
    for token in split:
        if token.startswith("-") and not token.startswith("--") and len(token) > 2:
            result.extend("-" + character for character in token[1:])
        else:
            result.append(token)
    return result


class Consumer:
    """
    one pass of the consumption engine over one argument vector.

    state
    - _table: the sanitized command table (never mutated)
    - _aliases: alias -> canonical name
    - _tokens: the normalized vector
    - _index: cursor (0-based; messages use 1-based ordinals)
    - _items: canonical name -> bound copy of the table item
    - _faults: accumulated faults, in discovery order
    """

    def __init__(self, table, tokens, /):
        self._table = sanitize_table(table)
        self._aliases = {item.alias: item.name for item in self._table.values() if item.alias}
        self._tokens = normalize(tokens)
        self._index = 0
        self._items = {}
        self._faults = []

    @property
    def items(self):
        return self._items

    @property
    def faults(self):
        return self._faults

    def _resolve(self, token):
        """find the table item a token names, or Unset."""
        try:
            return self._table[token]
        except KeyError:
            pass
        try:
            return self._table[SENTINEL + token]
        except KeyError:
            pass
        try:
            return self._table[self._aliases[token]]
        except KeyError:
            return Unset

    def _peek(self, offset):
        try:
            return self._tokens[self._index + offset]
        except IndexError:
            return Unset

    def _unrecognized(self, token):
        names = [*self._table.keys(), *self._aliases.keys()]
        suggestions = difflib.get_close_matches(token, names, 5)
        try:
            hint = "did you mean %r?" % suggestions[0]
        except IndexError:
            hint = "known items are %s" % ", ".join(map(repr, self._table.keys())) if self._table else "no item is declared"
        self._faults.append(UnrecognizedItemError(
            "%r at %s position: command or flag passed on command line is not recognized" % (token, _ordinal(self._index + 1)),
            title="unrecognized item",
            code=FaultCode.UNRECOGNIZED_ITEM,
            token=token,
            index=self._index,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNRECOGNIZED_ITEM),
        ))

    def _missing(self, item):
        self._faults.append(RequiredValueMissingError(
            MISSING_MESSAGES[item.kind.scalar] % item.name,
            title="missing value",
            code=FaultCode.REQUIRED_VALUE_MISSING,
            item=item.name,
            index=self._index,
            hint="give %s a %s value right after it (%s at %s position)" % (
                item.name, item.kind.label.lower(), item.name, _ordinal(self._index + 1)
            ),
            docs=getdoc(FaultCode.REQUIRED_VALUE_MISSING),
        ))

    def _unsatisfiable(self, item, exception, position):
        self._faults.append(KindNotSatisfiableError(
            UNSATISFIABLE_MESSAGES[item.kind.scalar] % {"token": exception.token, "name": item.name},
            title="value of the wrong kind",
            code=FaultCode.KIND_NOT_SATISFIABLE,
            item=item.name,
            token=exception.token,
            index=position,
            hint="replace %r at %s position with a %s value" % (
                exception.token, _ordinal(position + 1), item.kind.label.lower()
            ),
            docs=getdoc(FaultCode.KIND_NOT_SATISFIABLE),
        ))

    def _fallback(self, item):
        """
        the value of an item whose parameter is absent.

        returns (value, fault) where value is a Value or Unset and fault tells
        whether the absence is an error.
        """
        if item.default:
            tokens = (item.default,)
            if item.kind.sliced:
                try:
                    tokens = shlex.split(item.default)
                except ValueError:  # unbalanced quotes
                    tokens = item.default.split()
            try:
                return coerce(item.kind, tokens), False
            except CoercionError as exception:
                self._unsatisfiable(item, exception, self._index)
                return Unset, False
        return Unset, not item.tolerant

    def _bind_scalar(self, item):
        """
        bind a single value; returns (value, children, consumed).
        """
        consumed = 1
        seen = []
        while (token := self._peek(consumed)) is not Unset and token in item.children:
            seen.append(token)
            consumed += 1
        children = tuple(child for child in item.children if child in seen)

        token = self._peek(consumed)
        if token is Unset:
            value, missing = self._fallback(item)
            if missing:
                self._missing(item)
            return value, children, consumed

        if token == SENTINEL:
            value = Unset
            if item.default:
                value, _ = self._fallback(item)
            return value, children, consumed + 1

        try:
            value = coerce(item.kind, token)
        except CoercionError as exception:
            self._unsatisfiable(item, exception, self._index + consumed)
            value = Unset
        return value, children, consumed + 1

    def _bind_slice(self, item):
        """
        bind a greedy list of values; returns (value, children, consumed).

        selectors are not consumed on this path, so children is always empty.
        """
        tokens = []
        consumed = 1
        while (token := self._peek(consumed)) is not Unset:
            consumed += 1
            if token == SENTINEL:
                break
            tokens.append(token)

        if not tokens:
            value, missing = self._fallback(item)
            if missing:
                self._missing(item)
            return value, (), consumed

        try:
            value = coerce(item.kind, tokens)
        except CoercionError as exception:
            position = self._index + 1 + tokens.index(exception.token)
            self._unsatisfiable(item, exception, position)
            value = Unset
        return value, (), consumed

    def run(self):
        """walk the whole vector; returns self for chaining."""
        while self._index < len(self._tokens):
            token = self._tokens[self._index]
            item = self._resolve(token)

            if item is Unset:
                self._unrecognized(token)
                self._index += 1
                continue

            if item.arity == 0:
                value, children, consumed = PRESENT, (), 1
            elif item.kind.sliced:
                value, children, consumed = self._bind_slice(item)
            else:
                value, children, consumed = self._bind_scalar(item)

            self._items[item.name] = copy.replace(item, value=value, children=children)
            self._index += max(consumed, 1)

        return self


def consume(table, argv, /, *, application=""):
    """
    run the consumption engine only (no requirement validation).

    returns a ResultSet holding the bound items and the accumulated faults.
    """
    consumer = Consumer(table, argv).run()
    return ResultSet(application, consumer.items, consumer.faults)


def parse(table, argv, /, *, application=""):
    """
    consume the vector, validate requirements, and attach combined help.

    faults keep their discovery order: consumption faults first, then
    missing-required and exclusivity faults.
    """
    table = sanitize_table(table)
    consumer = Consumer(table, argv).run()
    faults = consumer.faults + validate_requirements(table, consumer.items)
    help = {name: format_help(item) for name, item in table.items()}
    return ResultSet(application, consumer.items, faults, help)


__all__ = (
    "SENTINEL",
    "Consumer",
    "normalize",
    "consume",
    "parse",
)
