"""
Boa faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain so logs and searches stay predictable.
- BoaException: base type that carries message + options and knows how to render
  itself in a friendly, lowercased, actionable way.
- BoaExit: the group of every fault accumulated during one invocation.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Two families
- argument faults (11xxx) accumulate: the engine records every one of them and
  keeps consuming tokens until the end of the vector.
- help-document faults (21xxx) come from the help-text scanner. Most of them are
  terminal (the scan stops and the fault is the sole one reported); see
  FaultCode.terminal.

Integration
- The engine and scanner only ever *collect* faults; nothing is raised while
  parsing. Callers decide: inspect ResultSet.errors, or call ResultSet.surface()
  which goes through trigger(): raising outside shell mode, printing via rich and
  exiting with status 1 in shell mode.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, plural

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - argument faults (111xx / 112xx), accumulating
      • UNRECOGNIZED_ITEM, REQUIRED_VALUE_MISSING, KIND_NOT_SATISFIABLE
      • MISSING_REQUIRED_ITEM, EXCLUSIVE_CONFLICT (post-parse validation)
    - help-document faults (211xx / 212xx)
      • MALFORMED_USAGE_LINE, BAD_META_LINE, META_NOT_AT_START, NO_COMMAND_NAME,
        DUPLICATED_ITEM (terminal)
      • UNRECOGNIZED_PARAMETER, UNSUPPORTED_TYPE (recorded, scan continues)

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- argument consumption (111xx) ---
    UNRECOGNIZED_ITEM           = 11101
    REQUIRED_VALUE_MISSING      = 11111
    KIND_NOT_SATISFIABLE        = 11112

    # --- requirement validation (112xx) ---
    MISSING_REQUIRED_ITEM       = 11201
    EXCLUSIVE_CONFLICT          = 11202

    # --- help document, terminal (211xx) ---
    MALFORMED_USAGE_LINE        = 21101
    BAD_META_LINE               = 21111
    META_NOT_AT_START           = 21112
    NO_COMMAND_NAME             = 21113
    DUPLICATED_ITEM             = 21114

    # --- help document, recorded (212xx) ---
    UNRECOGNIZED_PARAMETER      = 21201
    UNSUPPORTED_TYPE            = 21202

    @property
    def terminal(self):
        """true when a fault with this code stops the help-text scan."""
        return 21100 <= self.value < 21200

    def normalize(self):
        """the label shown in fault headers: __main__.__codes__[self], else the number."""
        labels = getattr(__import__("__main__"), "__codes__", {})
        return str(labels.get(self, self.value))


_PALETTE = {
    "prog-name": "bold #E6E6F0",
    "code": "bold #00E5FF",
    "title": "bold #FF4DA6",
    "error-title": "bold #FF4DA6",
    "error-message": "#C8C8D0",
    "hint-arrow": "#9CE19C dim",
    "hint": "italic #9CE19C",
}


def _painter(colorful):
    """
    build the fragment -> Text function used by every fault renderer.

    host overrides come from __main__.__styles__; with colorful off every
    fragment is plain text.
    """
    styles = defaultdict(str, _PALETTE | getattr(__import__("__main__"), "__styles__", {}))

    def paint(fragment, style):
        if not fragment:
            return Text("")
        return Text(str(fragment), styles[style] if colorful else "")

    return paint


def _prog(options):
    """program name for fault headers: __main__.__prog__, then the prog option."""
    return getattr(__import__("__main__"), "__prog__", options.get("prog") or "boa")


class BoaException(Exception):
    """
    base fault: a message plus read-only rendering/context options.

    common options
    - code: FaultCode
    - title: short headline (rendered title-cased)
    - hint: one actionable sentence
    - item / token / index: what was being parsed, and where
    - docs: optional host documentation (see getdoc)
    - prog, shell, fancy, colorful: rendering context merged in by trigger()
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        paint = _painter(self.options.get("colorful", True))
        code = self.code.normalize() if self.code is not None else "?"
        title = str(self.options.get("title", "fault")).title()

        header = Text.assemble(
            "[ ", paint(_prog(self.options), "prog-name"),
            " — ", paint(code, "code"),
            " | ", paint(title, "error-title"), " ]",
        )
        message = paint(str(self), "error-message")
        hint = Text("")
        if self.options.get("hint"):
            hint = Text.assemble(paint(" → ", "hint-arrow"), paint(self.options["hint"], "hint"))

        if not self.options.get("fancy", False):
            return Group(header, message, hint)
        width = None
        if "ratio" in self.options:
            width = int((console.width - 4) * self.options["ratio"])
        return Panel(Group(message, hint), title=header, title_align="left", width=width)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


# argument faults
class UnrecognizedItemError(BoaException): ...
class RequiredValueMissingError(BoaException): ...
class KindNotSatisfiableError(BoaException): ...
class MissingRequiredItemError(BoaException): ...
class ExclusiveConflictError(BoaException): ...

# help-document faults
class MalformedUsageError(BoaException): ...
class BadMetaLineError(BoaException): ...
class MetaNotAtStartError(BoaException): ...
class NoCommandNameError(BoaException): ...
class DuplicatedItemError(BoaException): ...
class UnrecognizedParameterError(BoaException): ...
class UnsupportedTypeError(BoaException): ...


class BoaExit(ExceptionGroup[BoaException]):
    """every fault of one invocation, surfaced together."""

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad exit", tuple(exceptions))

    def __init__(self, exceptions, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)
        paint = _painter(colorful)

        title = "%s — %s" % (self.message.title(), plural("error", len(self.exceptions)))
        header = Text.assemble("[ ", paint(_prog(self.options), "prog-name"), " — ", paint(title, "title"), " ]")
        renders = [
            copy.replace(exception, ratio=2/3, colorful=colorful, fancy=fancy, prog=self.options.get("prog"))
            for exception in self.exceptions
        ]

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault (a BoaException or a BoaExit).

    the options (prog, shell, fancy, colorful) are merged into a copy of the
    fault through copy.replace; the copy then raises itself, or in shell mode
    prints itself to stderr and exits with status 1.
    """
    for method in ("__trigger__", "__replace__"):
        if not callable(getattr(fault, method, None)):
            raise TypeError("trigger() expects a fault implementing %s, got %r" % (method, type(fault).__name__))
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """host documentation for a fault code (__main__.__docs__[code]), or None."""
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() expects a FaultCode, got %r" % type(code).__name__)
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "BoaException",
    "UnrecognizedItemError",
    "RequiredValueMissingError",
    "KindNotSatisfiableError",
    "MissingRequiredItemError",
    "ExclusiveConflictError",
    "MalformedUsageError",
    "BadMetaLineError",
    "MetaNotAtStartError",
    "NoCommandNameError",
    "DuplicatedItemError",
    "UnrecognizedParameterError",
    "UnsupportedTypeError",
    "BoaExit",
    "FaultCode",
    "trigger",
    "getdoc",
)
