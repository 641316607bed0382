"""
Argot faults (registration and parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault. Codes are
  grouped by domain so logs and searches stay predictable.
- RegistrationError: programmer errors raised while options are declared
  (bad names, duplicate names/abbreviations, illegal shapes, bad patterns).
  They derive from ValueError and are never caught by the package.
- ParseError: user-input errors raised while tokens are scanned. They carry
  the offending token or option name plus a title and a hint, and know how to
  render themselves through rich.
- report(): print a parse error to stderr the same way every time.

Integration
- Options.add(...) raises RegistrationError subclasses.
- Options.parse(...) raises ParseError subclasses; the engine never prints them.
- Options.run(...) catches ParseError, calls report() and exits with status 1.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - parse errors (111xx)
      • UNCLAIMED_ARGUMENT, UNKNOWN_OPTION, PATTERN_MISMATCH, INVALID_VALUE,
        MISSING_REQUIRED
    - registration errors (211xx)
      • INVALID_NAME, DUPLICATE_NAME, INVALID_ABBREV, DUPLICATE_ABBREV,
        ILLEGAL_BOOLEAN_SHAPE, ANONYMOUS_SLOT_EXHAUSTED, EMPTY_DESCRIPTION,
        INVALID_PATTERN
    """
    # --- parse errors (11xxx) ---
    UNCLAIMED_ARGUMENT          = 11101
    UNKNOWN_OPTION              = 11102
    PATTERN_MISMATCH            = 11103
    INVALID_VALUE               = 11104
    MISSING_REQUIRED            = 11105

    # --- registration errors (21xxx) ---
    INVALID_NAME                = 21101
    DUPLICATE_NAME              = 21102
    INVALID_ABBREV              = 21103
    DUPLICATE_ABBREV            = 21104
    ILLEGAL_BOOLEAN_SHAPE       = 21105
    ANONYMOUS_SLOT_EXHAUSTED    = 21106
    EMPTY_DESCRIPTION           = 21107
    INVALID_PATTERN             = 21108

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class RegistrationError(ValueError):
    """
    An option declaration is malformed.

    These are raised by Options.add() (and by Options.parse() when a user
    option collides with a reserved name) and are meant to be fixed in code,
    not handled at runtime.
    """
    code = Unset

    def __init__(self, message, /, *, name=None):
        super().__init__(message)
        self.message = message
        self.name = name


class InvalidNameError(RegistrationError):
    code = FaultCode.INVALID_NAME
class DuplicateNameError(RegistrationError):
    code = FaultCode.DUPLICATE_NAME
class InvalidAbbrevError(RegistrationError):
    code = FaultCode.INVALID_ABBREV
class DuplicateAbbrevError(RegistrationError):
    code = FaultCode.DUPLICATE_ABBREV
class IllegalBooleanShapeError(RegistrationError):
    code = FaultCode.ILLEGAL_BOOLEAN_SHAPE
class AnonymousSlotExhaustedError(RegistrationError):
    code = FaultCode.ANONYMOUS_SLOT_EXHAUSTED
class EmptyDescriptionError(RegistrationError):
    code = FaultCode.EMPTY_DESCRIPTION
class InvalidPatternError(RegistrationError):
    code = FaultCode.INVALID_PATTERN


class ParseError(Exception):
    """
    A token list could not be associated with the registered options.

    The message is the short, lowercased sentence shown to users; everything
    else (code, title, hint, token, name, app, colorful) lives in `options`.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def title(self):
        return self.options.get("title", "")

    @property
    def hint(self):
        return self.options.get("hint", "")

    @property
    def token(self):
        return self.options.get("token")

    @property
    def name(self):
        return self.options.get("name")

    def __str__(self):
        return str(self.message)

    def __reduce__(self):
        return _restore, (type(self), self.message, dict(self.options))

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(self.options.get("app") or getattr(main, "__prog__", "argot"), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " - ",
            text(self.code.normalize() if self.code else "", styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint")))

        return Group(header, message, hint)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


def _restore(cls, message, options):
    return cls(message, **options)


class UnclaimedArgumentError(ParseError): ...
class UnknownOptionError(ParseError): ...
class PatternMismatchError(ParseError): ...
class InvalidValueError(ParseError): ...
class MissingRequiredError(ParseError): ...


def report(fault, /, **options):
    """
    print a parse error to stderr through rich.

    contract
    - fault must be a ParseError; options are merged into it via copy.replace
      (typically app and colorful coming from the parser configuration).
    """
    if not isinstance(fault, ParseError):
        raise TypeError("report() argument must be a parse error")
    console.print(copy.replace(fault, **options))


__all__ = (
    "FaultCode",
    "RegistrationError",
    "InvalidNameError",
    "DuplicateNameError",
    "InvalidAbbrevError",
    "DuplicateAbbrevError",
    "IllegalBooleanShapeError",
    "AnonymousSlotExhaustedError",
    "EmptyDescriptionError",
    "InvalidPatternError",
    "ParseError",
    "UnclaimedArgumentError",
    "UnknownOptionError",
    "PatternMismatchError",
    "InvalidValueError",
    "MissingRequiredError",
    "report",
)
