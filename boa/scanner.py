r"""
Boa help-text mini-scanner.

Scope
- Derive a command table from a free-text help document, producing the same
  Item model as a hand-built or JSON table.

Document grammar
    Usage: app [flags] <command>            <- line 0, column 0; app is field 2
                                            <- at least two more lines follow
    Commands:
    *#count | c 1    : short help           <- meta run, name | alias, arity, ':' help
    [name] ...       : more help            <- brackets mean "not required"
    Flags:                                  <- lines below are flags
    +/--output [1]   : where to write
    Long Description:
    count: long help for count, line one    <- block runs until a blank line
    count: line two
    More:
    free text, never scanned

States
- ScanState.USAGE: validate the usage line and record the application name.
- ScanState.COMMANDS_AND_FLAGS: check the section markers, then decode every
  non-blank line between the start marker and the first Long Description/More
  marker (or the end of the document).
- ScanState.DONE: nothing left to do.
Each state has one transition method on HelpScanner; run() loops until DONE.

Meta characters (leading run only)
    *  exclusive     +  has default   #  int       .  float     !  date
    %  time          ^  duration      /  path      \  url       @  email
    &  ipv4

Arity field (text between the name and the first ':')
    ""      -> 0 (a presence-only item; string becomes bool)
    "..."   -> ONE_OR_MORE
    "[N]"   -> N, optional parameter
    "N"     -> N
    other   -> 0, recorded as an unrecognized parameter
An arity other than 0 or 1 promotes the kind to its slice form.

Faults
- Terminal (the scan stops, the fault is the only one reported, no items):
  malformed usage/sections, bad meta line, meta not at start, no command name,
  duplicated item.
- Recorded (the scan goes on): unrecognized parameter, unsupported type.
"""
import enum
import re

from .faults import *
from .items import *
from .kinds import *
from .utils import *

USAGE_PATTERN = re.compile(r"^[Uu]sage: ")
COMMANDS_PATTERN = re.compile(r"^Commands[\t ]*:")
FLAGS_PATTERN = re.compile(r"^Flags[\t ]*:")
LONG_PATTERN = re.compile(r"^Long Description[\t ]*:")
MORE_PATTERN = re.compile(r"^More[\t ]*:")

NAME_PATTERN = re.compile(r"\[?[\w\s|-]+\]?", re.ASCII)
TRAILING_COUNT_PATTERN = re.compile(r"(.*?)\s+(\d+)\s*", re.ASCII | re.DOTALL)
COUNT_PATTERN = re.compile(r"\[?(\d*)\]?", re.ASCII)

META = {
    "*": "exclusive",
    "+": "has_default",
    "#": Kind.INT,
    ".": Kind.FLOAT,
    "!": Kind.DATE,
    "%": Kind.TIME,
    "^": Kind.DURATION,
    "/": Kind.PATH,
    "\\": Kind.URL,
    "@": Kind.EMAIL,
    "&": Kind.IPV4,
}

ELLIPSIS = "..."


class ScanState(enum.Enum):
    USAGE = enum.auto()
    COMMANDS_AND_FLAGS = enum.auto()
    DONE = enum.auto()


class _Stop(Exception):
    """internal: unwinds the scan once a terminal fault is recorded."""


def _last(pattern, lines):
    """index of the last line matching pattern, or -1."""
    found = -1
    for index, line in enumerate(lines):
        if pattern.search(line):
            found = index
    return found


class HelpScanner:
    """
    one scan of one help document.

    usage
        >>> scanner = HelpScanner("Usage: app\n\nCommands:\nfoo : does a foo\n").run()
        >>> scanner.application, list(scanner.table)
        ('app', ['foo'])
    """

    def __init__(self, document, /):
        if not isinstance(document, str):
            raise TypeError("help document must be a string")
        self._lines = [line.removesuffix("\r") for line in document.split("\n")]
        self._state = ScanState.USAGE
        self._application = ""
        self._table = {}
        self._faults = []

        self._commands = _last(COMMANDS_PATTERN, self._lines)
        self._flags = _last(FLAGS_PATTERN, self._lines)
        self._long = _last(LONG_PATTERN, self._lines)
        self._more = _last(MORE_PATTERN, self._lines)

    application = mirror("application")
    table = mirror("table")
    faults = mirror("faults")

    @property
    def state(self):
        return self._state

    @property
    def terminated(self):
        """true when a terminal fault stopped the scan."""
        return any(fault.code.terminal for fault in self._faults)

    def run(self):
        transitions = {
            ScanState.USAGE: self._scan_usage,
            ScanState.COMMANDS_AND_FLAGS: self._scan_commands_and_flags,
        }
        try:
            while self._state is not ScanState.DONE:
                self._state = transitions[self._state]()
        except _Stop:
            self._state = ScanState.DONE
            self._table.clear()
            self._faults[:] = [fault for fault in self._faults if fault.code.terminal][-1:]
        return self

    def _stop(self, exception, code, message, /, **options):
        self._faults.append(exception(message, code=code, docs=getdoc(code), **options))
        raise _Stop

    def _record(self, exception, code, message, /, **options):
        self._faults.append(exception(message, code=code, docs=getdoc(code), **options))

    def _malformed(self, message, hint, line=0):
        self._stop(
            MalformedUsageError, FaultCode.MALFORMED_USAGE_LINE, message,
            title="malformed help document",
            line=line,
            hint=hint,
        )

    def _scan_usage(self):
        hint = "start the document with a line such as 'Usage: app [flags]', then a blank line"
        if not self._lines or not USAGE_PATTERN.match(self._lines[0]):
            self._malformed("first line in input must be Usage: etc. followed by blank line", hint)
        fields = self._lines[0].split()
        if len(fields) < 2:
            self._malformed("usage line does not name the application", hint)
        if len(self._lines) < 3:
            self._malformed("usage line must be followed by a blank line and at least one section", hint)
        self._application = fields[1]
        return ScanState.COMMANDS_AND_FLAGS

    def _scan_commands_and_flags(self):
        if self._commands == -1 and self._flags == -1:
            self._malformed(
                "input has neither a Commands: nor a Flags: section",
                "add a 'Commands:' line or a 'Flags:' line before the items",
            )
        if self._commands != -1 and self._flags != -1 and self._flags < self._commands:
            self._malformed(
                "Flags: section at line %d comes before Commands: section at line %d" % (self._flags + 1, self._commands + 1),
                "move the 'Flags:' section below the 'Commands:' section",
                self._flags,
            )

        start = self._commands if self._commands != -1 else self._flags
        limit = len(self._lines)
        for marker in sorted((self._long, self._more)):
            if marker > start:
                limit = marker
                break

        flag = self._commands == -1
        for index in range(start + 1, limit):
            if index == self._flags:
                flag = True
                continue
            if line := self._lines[index].strip(" \t"):
                self._decode(line, index, flag)

        return ScanState.DONE

    def _decode(self, line, index, flag):
        """turn one stripped section line into a registered item."""
        metadata = {"kind": Kind.STRING, "flag": flag, "ordinal": index}
        where = {"line": index}

        # meta run
        position = 0
        while position < len(line) and line[position] in META:
            match META[line[position]]:
                case Kind() as kind:
                    metadata["kind"] = kind
                case field:
                    metadata[field] = True
            position += 1
        if position == len(line):
            self._stop(
                BadMetaLineError, FaultCode.BAD_META_LINE,
                "line %d only contains meta characters" % (index + 1),
                title="bad meta line",
                hint="follow the meta characters with a command or flag name",
                **where,
            )

        head, colon, short = line[position:].partition(":")
        body = head.rstrip()
        if body.endswith(ELLIPSIS):
            body = body[:-len(ELLIPSIS)]
        if any(character in META for character in body):
            self._stop(
                MetaNotAtStartError, FaultCode.META_NOT_AT_START,
                "meta character string is not at beginning of line %d" % (index + 1),
                title="meta character not at start",
                hint="move every meta character (*+#.!%^/\\@&) in front of the name",
                **where,
            )

        # name | alias
        found = NAME_PATTERN.search(head)
        run = found.group() if found else ""
        rest = head[found.end():] if found else head
        if run.startswith("["):
            metadata["required"] = False
            run = run.removeprefix("[").removesuffix("]")
        else:
            metadata["required"] = True
            if counted := TRAILING_COUNT_PATTERN.fullmatch(run):
                run, rest = counted[1], counted[2] + rest
        name, _, alias = run.partition("|")
        if not (name := name.strip()):
            self._stop(
                NoCommandNameError, FaultCode.NO_COMMAND_NAME,
                "command or flag at line %d cannot be parsed" % (index + 1),
                title="no command name",
                hint="start the line with a name made of letters, digits, '_' or '-'",
                **where,
            )
        metadata["alias"] = alias.strip()

        # arity
        field = rest.strip()
        kind = metadata["kind"]
        if not field:
            metadata["arity"] = 0
        elif field == ELLIPSIS:
            metadata["arity"] = ONE_OR_MORE
        elif (counted := COUNT_PATTERN.fullmatch(field)) and (field.startswith("[") == field.endswith("]")):
            metadata["optional"] = field.startswith("[")
            metadata["arity"] = int(counted[1] or 0)
        else:
            metadata["arity"] = 0
            self._record(
                UnrecognizedParameterError, FaultCode.UNRECOGNIZED_PARAMETER,
                "unrecognized %s parameter %r found after %s at line %d" % (
                    "flag" if flag else "command", field, name, index + 1
                ),
                title="unrecognized parameter",
                hint="write the parameter count as N, [N] or ...",
                item=name,
                **where,
            )

        if metadata["arity"] == 0 and kind is Kind.STRING:
            metadata["kind"] = Kind.BOOL
        elif metadata["arity"] not in (0, 1):
            try:
                metadata["kind"] = kind.slice()
            except LookupError:
                self._record(
                    UnsupportedTypeError, FaultCode.UNSUPPORTED_TYPE,
                    "unsupported argument type %r for %s at line %d" % (kind.typename, name, index + 1),
                    title="unsupported type",
                    hint="give %s a value type that has a list form" % name,
                    item=name,
                    **where,
                )

        if name in self._table or name in self._aliases() or (metadata["alias"] and (
                metadata["alias"] in self._table or metadata["alias"] in self._aliases() or metadata["alias"] == name
        )):
            self._stop(
                DuplicatedItemError, FaultCode.DUPLICATED_ITEM,
                "%s at line %d is declared more than once" % (name, index + 1),
                title="duplicated item",
                hint="give every command, flag and alias a distinct name",
                item=name,
                **where,
            )

        metadata["short"] = short.strip("\t \n") if colon else ""
        metadata["long"] = self._lookup_long(name)
        self._table[name] = Item(name, **metadata)

    def _aliases(self):
        return {item.alias for item in self._table.values() if item.alias}

    def _lookup_long(self, name):
        """
        the long description block of an item, or "".

        the block starts at the first line (after the Long Description marker)
        that reads "name:" and runs until the next blank line; the repeated
        name/colon prefix is stripped from every line.
        """
        if self._long == -1:
            return ""
        limit = self._more if self._more > self._long else len(self._lines)
        pattern = re.compile("^%s[ \t]*:" % re.escape(name))

        for start in range(self._long + 1, limit):
            if pattern.match(self._lines[start]):
                break
        else:
            return ""

        block = []
        for line in self._lines[start:limit]:
            if not line.strip("\t "):
                break
            block.append(line.removeprefix(name).strip(" \t").strip(":").strip(" \t"))
        return "\n".join(block)


def collect_items(document, /):
    """
    scan a help document.

    returns (table, faults, application):
    - table: name -> Item, in document order
    - faults: recorded faults, or the single terminal fault that stopped the scan
    - application: the name from the usage line ("" when it could not be read)
    """
    scanner = HelpScanner(document).run()
    return scanner.table, scanner.faults, scanner.application


__all__ = (
    "ScanState",
    "HelpScanner",
    "collect_items",
)
