"""
Type coercion table: raw command-line text to typed values.

Contract
- convert(kind, token) turns one raw token into the payload of a scalar kind, or
  raises ValueError when the token is not of that kind.
- coerce(kind, tokens) builds a Value for a scalar kind (exactly one token) or a
  slice kind (every token, in order). Slice coercion is atomic: the first bad
  token raises CoercionError and nothing is bound.

Formats
- time:     12-hour clock with an English meridiem, "3:04PM"
- date:     English month abbreviation, "Jan-02-2006"
- duration: signed decimal+unit runs, units ns/us/µs/ms/s/m/h ("2h45m", "-1.5s")
- phone:    validated against a permissive international pattern, not normalised
- path:     home-expanded and made absolute
- url:      absolute request URI (a scheme, or an absolute path)
- email:    RFC 5322 mailbox ("Joe <joe@example.com>" or bare address)
- ipv4:     dotted quad
"""
import datetime
import ipaddress
import os.path
import re
import urllib.parse
from email.errors import HeaderParseError
from email.headerregistry import Address
from email.utils import parseaddr
from types import MappingProxyType

from .kinds import Kind, Value

# month and meridiem names are English whatever LC_TIME says
TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})([AaPp][Mm])", re.ASCII)
DATE_PATTERN = re.compile(r"([A-Za-z]{3})-(\d{1,2})-(\d{4})", re.ASCII)

MONTHS = MappingProxyType({
    name: number for number, name in enumerate(
        ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"), 1
    )
})

PHONE_PATTERN = re.compile(
    r"^(?:(?:\(?(?:00|\+)([1-4]\d\d|[1-9]\d?)\)?)?[\-\.\ \\\/]?)?"
    r"((?:\(?\d{1,}\)?[\-\.\ \\\/]?){0,})"
    r"(?:[\-\.\ \\\/]?(?:#|ext\.?|extension|x)[\-\.\ \\\/]?(\d+))?$"
)

_DURATION_PATTERN = re.compile(r"[-+]?(?:(?:\d+\.?\d*|\.\d+)(?:ns|us|µs|μs|ms|s|m|h))+")
_DURATION_PART = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

# microseconds per unit (timedelta cannot hold nanoseconds; they are rounded)
_DURATION_UNITS = {
    "ns": 0.001,
    "us": 1,
    "µs": 1,
    "μs": 1,
    "ms": 1_000,
    "s": 1_000_000,
    "m": 60_000_000,
    "h": 3_600_000_000,
}

_TRUTHS = frozenset(("1", "t", "T", "TRUE", "true", "True"))
_FALSITIES = frozenset(("0", "f", "F", "FALSE", "false", "False"))

_URL_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")


class CoercionError(ValueError):
    """
    a token could not be converted to the requested kind.

    carries the offending token and the underlying converter exception.
    """

    def __init__(self, token, cause, /):
        super().__init__("%r cannot be converted: %s" % (token, cause))
        self.token = token
        self.cause = cause


def to_bool(token):
    if token in _TRUTHS:
        return True
    if token in _FALSITIES:
        return False
    raise ValueError("invalid boolean %r" % token)


def to_string(token):
    return token


def to_int(token):
    return int(token, 10)


def to_float(token):
    return float(token)


def to_time(token):
    """12-hour clock with an AM/PM suffix, e.g. "3:04PM"."""
    if not (found := TIME_PATTERN.fullmatch(token)):
        raise ValueError("invalid time %r" % token)
    hour, minute, meridiem = int(found[1]), int(found[2]), found[3].upper()
    if not 1 <= hour <= 12:
        raise ValueError("hour out of range in %r" % token)
    return datetime.time(hour % 12 + (12 if meridiem == "PM" else 0), minute)


def to_date(token):
    """month abbreviation, day and year, e.g. "Jan-02-2006"."""
    if not (found := DATE_PATTERN.fullmatch(token)):
        raise ValueError("invalid date %r" % token)
    try:
        month = MONTHS[found[1].lower()]
    except KeyError:
        raise ValueError("unknown month in %r" % token) from None
    return datetime.date(int(found[3]), month, int(found[2]))


def to_duration(token):
    """
    parse a duration such as "300ms", "-1.5h" or "2h45m".

    a lone "0" (optionally signed) is the zero duration; every other form needs
    a unit after each number.
    """
    if token in ("0", "+0", "-0"):
        return datetime.timedelta()
    if not _DURATION_PATTERN.fullmatch(token):
        raise ValueError("invalid duration %r" % token)
    sign = -1 if token.startswith("-") else 1
    total = 0.0
    for number, unit in _DURATION_PART.findall(token):
        total += float(number) * _DURATION_UNITS[unit]
    return datetime.timedelta(microseconds=sign * total)


def to_path(token):
    if not token.strip():
        raise ValueError("empty path")
    return os.path.abspath(os.path.expanduser(token))


def to_url(token):
    if not token or any(character.isspace() or ord(character) < 0x20 for character in token):
        raise ValueError("invalid request uri %r" % token)
    parts = urllib.parse.urlsplit(token)
    if token.startswith("/"):
        return parts
    if not parts.scheme or not _URL_SCHEME.fullmatch(parts.scheme):
        raise ValueError("request uri %r is not absolute" % token)
    if not (parts.netloc or parts.path):
        raise ValueError("request uri %r has nothing after its scheme" % token)
    # accessing .port validates it
    parts.port
    return parts


def to_email(token):
    name, address = parseaddr(token)
    local, at, domain = address.rpartition("@")
    if not at or not local or not domain:
        raise ValueError("invalid mailbox %r" % token)
    try:
        return Address(display_name=name, addr_spec=address)
    except HeaderParseError as exception:
        raise ValueError("invalid mailbox %r" % token) from exception


def to_phone(token):
    if not PHONE_PATTERN.match(token):
        raise ValueError("invalid phone number %r" % token)
    return token


def to_ipv4(token):
    return ipaddress.IPv4Address(token)


CONVERTERS = MappingProxyType({
    Kind.BOOL: to_bool,
    Kind.STRING: to_string,
    Kind.INT: to_int,
    Kind.FLOAT: to_float,
    Kind.TIME: to_time,
    Kind.DATE: to_date,
    Kind.DURATION: to_duration,
    Kind.PATH: to_path,
    Kind.URL: to_url,
    Kind.EMAIL: to_email,
    Kind.PHONE: to_phone,
    Kind.IPV4: to_ipv4,
})

# "%s" is the item name
MISSING_MESSAGES = MappingProxyType({
    Kind.BOOL: "boolean argument for %s not found",
    Kind.STRING: "argument for %s not found",
    Kind.INT: "integer argument for %s not found",
    Kind.FLOAT: "real number argument for %s not found",
    Kind.TIME: "time argument for %s not found",
    Kind.DATE: "date argument for %s not found",
    Kind.DURATION: "time duration argument for %s not found",
    Kind.PATH: "file path argument for %s not found",
    Kind.URL: "URL argument for %s not found",
    Kind.EMAIL: "email address argument for %s not found",
    Kind.PHONE: "phone number argument for %s not found",
    Kind.IPV4: "IP address argument for %s not found",
})

# "%(token)s" is the raw token, "%(name)s" the item name
UNSATISFIABLE_MESSAGES = MappingProxyType({
    Kind.BOOL: "%(token)s, argument for %(name)s, cannot be interpreted as a boolean",
    Kind.STRING: "%(token)s, argument for %(name)s, cannot be interpreted as a string",
    Kind.INT: "%(token)s, argument for %(name)s, cannot be interpreted as an integer",
    Kind.FLOAT: "%(token)s, argument for %(name)s, cannot be interpreted as a real number",
    Kind.TIME: "argument to %(name)s, %(token)s is not a valid time value such as '3:45PM'",
    Kind.DATE: "argument to %(name)s, %(token)s is not a valid date value such as 'Jan-02-2006'",
    Kind.DURATION: "argument to %(name)s, %(token)s is not a valid duration value such as '1h10m20s'",
    Kind.PATH: "%(token)s, argument for %(name)s, cannot be interpreted as a file path",
    Kind.URL: "%(token)s, argument for %(name)s, cannot be interpreted as a URL",
    Kind.EMAIL: "%(token)s, argument for %(name)s, cannot be interpreted as an email address",
    Kind.PHONE: "%(token)s, argument for %(name)s, cannot be interpreted as a phone number",
    Kind.IPV4: "%(token)s, argument for %(name)s, cannot be interpreted as an IP address of IPv4 format",
})


def convert(kind, token, /):
    """
    convert one raw token to the payload of a kind's scalar form.

    raises ValueError (or a subclass) when the token is not of that kind.
    """
    if not isinstance(token, str):
        raise TypeError("convert() token must be a string")
    return CONVERTERS[Kind(kind).scalar](token)


def coerce(kind, tokens, /):
    """
    build a Value of 'kind' from raw tokens.

    - scalar kinds take exactly one token.
    - slice kinds take every token in order; the first token that fails raises
      CoercionError and no partial value is produced.
    """
    kind = Kind(kind)
    if isinstance(tokens, str):
        tokens = (tokens,)
    tokens = tuple(tokens)
    if not kind.sliced and len(tokens) != 1:
        raise TypeError("scalar kind %r takes exactly one token, got %d" % (kind.typename, len(tokens)))

    converted = []
    for token in tokens:
        try:
            converted.append(convert(kind, token))
        except Exception as exception:
            raise CoercionError(token, exception) from exception

    if kind.sliced:
        return Value(kind, tuple(converted))
    return Value(kind, converted[0])


__all__ = (
    "CoercionError",
    "CONVERTERS",
    "MISSING_MESSAGES",
    "UNSATISFIABLE_MESSAGES",
    "PHONE_PATTERN",
    "TIME_PATTERN",
    "DATE_PATTERN",
    "MONTHS",
    "convert",
    "coerce",
)
