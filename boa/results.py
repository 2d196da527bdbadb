"""
Boa result set: everything one parse produced.

Overview
- ResultSet(application, items, faults, help)
  • application: the program name (from a usage line or the BOA-APP-DATA record)
  • items: canonical name -> bound Item, in consumption order
  • errors: accumulated faults, in discovery order
  • help: canonical name -> combined help string

Accessors
- value(name, kind) returns the payload of an item bound with that kind, else
  Unset. Absence is never a fault.
- One accessor per kind, generated below: boolean, string, strings, integer,
  integers, real, reals, time, times, duration, durations, date, dates, path,
  paths, url, urls, ipv4, ipv4s, email, emails, phone, phones.
  A presence-only item answers boolean().

Surfacing
- surface(shell=False, fancy=False, colorful=True) hands every fault to trigger()
  as one BoaExit; nothing happens when there is none.
- __rich__ renders the bound items as a table.
"""
import enum
from types import MappingProxyType

from rich.box import ROUNDED
from rich.console import Group
from rich.table import Table
from rich.text import Text

from .faults import *
from .kinds import *
from .utils import *


class HelpKind(enum.IntEnum):
    SHORT = 0
    LONG = 1
    COMBINED = 2


_ACCESSORS = {
    "boolean": Kind.BOOL,
    "string": Kind.STRING,
    "strings": Kind.STRING_SLICE,
    "integer": Kind.INT,
    "integers": Kind.INT_SLICE,
    "real": Kind.FLOAT,
    "reals": Kind.FLOAT_SLICE,
    "time": Kind.TIME,
    "times": Kind.TIME_SLICE,
    "duration": Kind.DURATION,
    "durations": Kind.DURATION_SLICE,
    "date": Kind.DATE,
    "dates": Kind.DATE_SLICE,
    "path": Kind.PATH,
    "paths": Kind.PATH_SLICE,
    "url": Kind.URL,
    "urls": Kind.URL_SLICE,
    "ipv4": Kind.IPV4,
    "ipv4s": Kind.IPV4_SLICE,
    "email": Kind.EMAIL,
    "emails": Kind.EMAIL_SLICE,
    "phone": Kind.PHONE,
    "phones": Kind.PHONE_SLICE,
}


def _accessor(name, kind):
    def getter(self, item, /):
        return self.value(item, kind)

    getter.__doc__ = "payload of an item bound as %s, else Unset." % kind.typename
    return rename(getter, name)


class ResultSet:
    """
    the per-invocation output of the engine.

    instances are created fresh by every parse call and are read-only; the
    mappings handed out by the properties are copies.
    """

    def __init__(self, application="", items=(), errors=(), help=(), /):
        if not isinstance(application, str):
            raise TypeError("result set 'application' must be a string")
        self._application = application
        self._items = dict(items)
        self._errors = list(errors)
        self._help = dict(help)

    application = mirror("application")
    items = mirror("items")
    errors = mirror("errors")

    @property
    def has_errors(self):
        return bool(self._errors)

    @property
    def last_error(self):
        """the most recent fault, or None."""
        return self._errors[-1] if self._errors else None

    def error_report(self):
        """every fault message, one per line."""
        return "\n".join(map(str, self._errors))

    def _canonical(self, topic):
        if topic in self._items or topic in self._help:
            return topic
        for item in self._items.values():
            if item.alias == topic:
                return item.name
        return topic

    def help(self, topic, kind=HelpKind.COMBINED, /):
        """
        help text for an item, looked up by name or alias.

        - SHORT / LONG come from the bound item (only items seen on the command line).
        - COMBINED comes from the help mapping (every table item).
        an unknown topic yields "".
        """
        topic = self._canonical(topic)
        match HelpKind(kind):
            case HelpKind.SHORT:
                return self._items[topic].short if topic in self._items else ""
            case HelpKind.LONG:
                return self._items[topic].long if topic in self._items else ""
            case HelpKind.COMBINED:
                return self._help.get(topic, "")

    @property
    def topics(self):
        """the combined help mapping, name -> help."""
        return MappingProxyType(self._help)

    def value(self, name, kind, /):
        """
        the payload of 'name' when it is bound with 'kind', else Unset.
        """
        try:
            bound = self._items[name].value
        except KeyError:
            return Unset
        match bound:
            case Value(tag, data) if tag == Kind.lookup(kind):
                return data
            case _:
                return Unset

    def __contains__(self, name):
        return name in self._items

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __rich__(self):
        main = __import__("__main__")
        styles = {
            "title": "bold #FF4DA6",
            "name": "bold #00E5FF",
            "unset": "dim italic",
        } | getattr(main, "__styles__", {})

        table = Table(
            "id", "name", "value", "type", "count", "optional", "children",
            title=Text(f"{self._application or 'boa'} — {plural('item', len(self._items))}", styles["title"]),
            box=ROUNDED,
        )
        for item in sorted(self._items.values(), key=lambda item: (item.ordinal, item.name)):
            match item.value:
                case Value(_, data):
                    value = Text(repr(data))
                case _:
                    value = Text("unset", styles["unset"])
            table.add_row(
                str(item.ordinal),
                Text(item.name, styles["name"]),
                value,
                item.kind.label,
                describe_arity(item.arity),
                "yes" if item.tolerant else "no",
                ", ".join(item.children),
            )

        if not self._errors:
            return table
        return Group(table, Text(plural("error", len(self._errors)), styles["title"]))

    def __rich_repr__(self):
        yield "application", self._application
        yield "items", self._items
        yield "errors", [str(error) for error in self._errors]

    def __repr__(self):
        return "result-set(application=%r, items=%r, errors=%r)" % (
            self._application, list(self._items), [str(error) for error in self._errors]
        )

    def surface(self, *, shell=False, fancy=False, colorful=True, prog=Unset):
        """
        hand every accumulated fault to trigger() as a single BoaExit.

        outside shell mode the group is raised; in shell mode it is printed to
        stderr and the process exits with status 1. returns self when there is
        nothing to surface.
        """
        if not self._errors:
            return self
        trigger(
            BoaExit(self._errors),
            shell=shell,
            fancy=fancy,
            colorful=colorful,
            prog=coalesce(prog, self._application),
        )


for _name, _kind in _ACCESSORS.items():
    setattr(ResultSet, _name, _accessor(_name, _kind))
del _name, _kind


__all__ = (
    "HelpKind",
    "ResultSet",
)
