"""
Argot value coercion: how a raw token becomes a typed option value.

Overview
- A Coercion is selected once per option from the `type=` given to add():
  • bool           → BooleanCoercion (presence-only, never reads its token)
  • int            → IntegerCoercion, placeholder "<int>"
  • uint           → UnsignedCoercion, placeholder "<uint>"
  • float          → RealCoercion, placeholder "<real>"
  • str            → StringCoercion, placeholder "<arg>", optional regex pattern
  • enum.Enum      → EnumCoercion, member names only
  • other callable → Coercion, the callable receives the raw token
- Each coercion answers four questions:
  • validator(pattern): a predicate over the raw token, or None when anything goes.
  • convert(token): the typed value (may raise ValueError/TypeError/KeyError).
  • zero(): the value an option holds before anything is assigned.
  • display(value): the "(default ...)" text for help, or "" to omit it.

Notes
- Validators full-match ASCII-only regexes, so "١٢" is not an <int>.
- Patterns are only legal on string options; every other kind brings its own
  validator and a pattern on top of it is a registration error.
"""
import builtins
import enum
import functools
import re

from .faults import InvalidPatternError
from .utils import quote

_SIGNED = re.compile(r"[+-]?\d+", re.ASCII)
_UNSIGNED = re.compile(r"\+?\d+", re.ASCII)
_REAL = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([Ee][+-]?\d+)?", re.ASCII)


def uint(text, /):
    """
    Convert a token to a non-negative integer.

    Pass it as `type=uint` to declare an unsigned option ("<uint>" in help).
    """
    value = int(text)
    if value < 0:
        raise ValueError("unsigned value cannot be negative: %r" % text)
    return value


def _matches(regex, token, /):
    return regex.fullmatch(token) is not None


def _member(enumeration, token, /):
    return token in enumeration.__members__


class Coercion:
    """
    Base coercion: opaque values built by calling `type` on the raw token.
    """
    placeholder = "<arg>"

    def __init__(self, type, /):
        self.type = type

    def validator(self, pattern=None, /):
        if pattern is not None:
            raise InvalidPatternError("pattern is only allowed for string-valued options")
        return None

    def convert(self, token, /):
        return self.type(token)

    def zero(self):
        return None

    def display(self, value, /):
        if value is None or value == self.zero():
            return ""
        return quote(str(value)) if str(value) else ""

    def __eq__(self, other, /):
        return type(self) is type(other) and self.type == other.type

    def __hash__(self):
        return hash((type(self), self.type))

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, getattr(self.type, "__qualname__", repr(self.type)))


class BooleanCoercion(Coercion):
    placeholder = ""

    def convert(self, token, /):
        return True

    def zero(self):
        return False

    def display(self, value, /):
        return ""


class _NumericCoercion(Coercion):
    regex = None

    def validator(self, pattern=None, /):
        super().validator(pattern)
        return functools.partial(_matches, self.regex)

    def zero(self):
        return self.type()

    def display(self, value, /):
        if value is None or value == 0:
            return ""
        return str(value)


class IntegerCoercion(_NumericCoercion):
    placeholder = "<int>"
    regex = _SIGNED


class UnsignedCoercion(_NumericCoercion):
    placeholder = "<uint>"
    regex = _UNSIGNED

    def zero(self):
        return 0


class RealCoercion(_NumericCoercion):
    placeholder = "<real>"
    regex = _REAL


class StringCoercion(Coercion):

    def validator(self, pattern=None, /):
        if pattern is None:
            return None
        if isinstance(pattern, re.Pattern):
            return functools.partial(_matches, pattern)
        if not isinstance(pattern, str):
            raise TypeError("option 'pattern' must be a string or a compiled regex")
        try:
            regex = re.compile(pattern)
        except re.error as exception:
            raise InvalidPatternError("invalid pattern %s: %s" % (quote(pattern), exception)) from exception
        return functools.partial(_matches, regex)

    def convert(self, token, /):
        return token

    def zero(self):
        return ""

    def display(self, value, /):
        return quote(value) if value else ""


class EnumCoercion(Coercion):

    def validator(self, pattern=None, /):
        super().validator(pattern)
        return functools.partial(_member, self.type)

    def convert(self, token, /):
        return self.type[token]

    def zero(self):
        # First declared member.
        return next(iter(self.type), None)

    def display(self, value, /):
        # Enumerations always show their default, zero-like or not.
        return value.name if isinstance(value, self.type) else ""


def coerce(type, /):
    """
    Select the coercion for an option's `type=`.

    Raises
    - TypeError: when `type` is not callable.
    """
    if type is bool:
        return BooleanCoercion(bool)
    if type is uint:
        return UnsignedCoercion(uint)
    if type is int:
        return IntegerCoercion(int)
    if type is float:
        return RealCoercion(float)
    if type is str:
        return StringCoercion(str)
    if isinstance(type, builtins.type) and issubclass(type, enum.Enum):
        return EnumCoercion(type)
    if not callable(type):
        raise TypeError("option 'type' must be callable")
    return Coercion(type)


__all__ = (
    "uint",
    "Coercion",
    "BooleanCoercion",
    "IntegerCoercion",
    "UnsignedCoercion",
    "RealCoercion",
    "StringCoercion",
    "EnumCoercion",
    "coerce",
)
