"""
Combined help formatting.

format_help(item) renders one display string per item:

    name | alias       short help
    long help line one
    long help line two

The "name | alias" header is padded to column 16, or followed by 4 spaces when
it is longer than 12 characters. Every long-help line loses a repeated
"name:" prefix.
"""
from .items import Item


def _strip_prefix(text, name):
    text = text.strip("\t ").removeprefix(name)
    return text.removeprefix(":").strip("\t ")


def format_help(item, /):
    """render the combined short/long help of an item."""
    if not isinstance(item, Item):
        raise TypeError("format_help() argument must be an item")

    name = item.name.strip(" \t")
    short = item.short.strip("\t\n ").removeprefix(name).removeprefix(":").strip("\t\n ") + "\n"
    header = "%s | %s" % (name, item.alias) if item.alias else name
    padding = 4 if len(header) > 12 else 16 - len(header)

    text = header + " " * padding + short
    if not item.long:
        return text
    return text + "\n".join(_strip_prefix(line, name) for line in item.long.split("\n"))


__all__ = (
    "format_help",
)
