"""
Declarative table entry points.

- collect_items_from_json(document): build a command table from a JSON document
  (str, bytes, or an already decoded mapping) holding a "commands" list.
- from_json(document, argv): load, drop the BOA-APP-DATA record (its alias is
  the application name), then parse.
- from_help(document, argv): scan a help document, then parse.

Record keys keep the historical wire names:

    {"commands": [
        {"Id": 0, "Name": "BOA-APP-DATA", "Alias": "myapp"},
        {"Id": 1, "Name": "--count", "Alias": "-c", "ParamType": 3, "ParamCount": 1,
         "ShortHelp": "how many", "DefaultValue": "1", "IsParamOpt": true}
    ]}

ParamType takes the numeric wire value or a kind name ("int", "int-slice").
"""
import json
from collections.abc import Mapping

from .items import *
from .kinds import *
from .parsing import parse
from .results import ResultSet
from .scanner import HelpScanner

APP_DATA_NAME = "BOA-APP-DATA"

_FIELDS = {
    "Name": "name",
    "Alias": "alias",
    "ParamType": "kind",
    "ParamCount": "arity",
    "ShortHelp": "short",
    "LongHelp": "long",
    "DefaultValue": "default",
    "IsDefault": "has_default",
    "IsFlag": "flag",
    "IsExclusive": "exclusive",
    "IsParamOpt": "optional",
    "IsRequired": "required",
    "ChNames": "children",
}

_TEXT = ("Name", "Alias", "ShortHelp", "LongHelp", "DefaultValue")
_SWITCHES = ("IsDefault", "IsFlag", "IsExclusive", "IsParamOpt", "IsRequired")


def _record(position, record):
    """one JSON record -> Item; raises ValueError with the record position."""
    if not isinstance(record, Mapping):
        raise ValueError("command record #%d must be an object" % position)
    if not isinstance(record.get("Name"), str) or not record["Name"].strip():
        raise ValueError("command record #%d must have a non-empty 'Name'" % position)

    metadata = {}
    for key, field in _FIELDS.items():
        if key not in record or record[key] is None:
            continue
        object = record[key]
        if key in _TEXT and not isinstance(object, str):
            raise ValueError("command record #%d field %r must be a string" % (position, key))
        if key in _SWITCHES and not isinstance(object, bool):
            raise ValueError("command record #%d field %r must be a boolean" % (position, key))
        metadata[field] = object

    ordinal = record.get("Id", position)
    try:
        metadata["kind"] = Kind.lookup(metadata.get("kind", Kind.BOOL))
        return Item(metadata.pop("name"), ordinal=ordinal, **metadata)
    except (TypeError, ValueError) as exception:
        raise ValueError("command record #%d is invalid: %s" % (position, exception)) from exception


def collect_items_from_json(document, /):
    """
    decode a JSON command table.

    returns name -> Item in document order, BOA-APP-DATA included.
    raises ValueError for undecodable or malformed documents (duplicate names
    and alias collisions included).
    """
    if isinstance(document, str | bytes | bytearray):
        try:
            document = json.loads(document)
        except json.JSONDecodeError as exception:
            raise ValueError("command table is not valid JSON: %s" % exception) from exception
    if not isinstance(document, Mapping):
        raise ValueError("command table must be a JSON object")
    if not isinstance(records := document.get("commands"), list):
        raise ValueError("command table must hold a 'commands' list")

    table = {}
    for position, record in enumerate(records):
        item = _record(position, record)
        if item.name in table:
            raise ValueError("command record #%d repeats the name %r" % (position, item.name))
        table[item.name] = item

    try:
        return sanitize_table(table)
    except ValueError as exception:
        raise ValueError("command table is invalid: %s" % exception) from exception


def from_json(document, argv, /):
    """
    load a JSON command table and parse argv against it.

    the BOA-APP-DATA record never reaches the engine; its alias becomes the
    result's application name.
    """
    table = collect_items_from_json(document)
    application = ""
    if (appdata := table.pop(APP_DATA_NAME, None)) is not None:
        application = appdata.alias
    return parse(table, argv, application=application)


def from_help(document, argv, /):
    """
    scan a help document and parse argv against the table it describes.

    - a terminal scanner fault is the only fault of the result (argv is not parsed).
    - recorded scanner faults come before the argument faults.
    """
    scanner = HelpScanner(document).run()
    if scanner.terminated:
        return ResultSet(scanner.application, {}, scanner.faults)

    result = parse(scanner.table, argv, application=scanner.application)
    return ResultSet(result.application, result.items, scanner.faults + result.errors, result.topics)


__all__ = (
    "APP_DATA_NAME",
    "collect_items_from_json",
    "from_json",
    "from_help",
)
