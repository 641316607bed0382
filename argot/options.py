"""
Argot options facade: declare options, parse a command line, read values.

Overview
- ParserConfig: immutable application metadata (app, version, description,
  extra) and behaviour switches (auto_help, colorful).
- Options: the public entry point.
  • add(...) registers an option and returns the parser (chainable).
  • parse(prompt, out) scans the tokens and returns True to proceed, or False
    when help/version was written to `out`. ParseError subclasses signal bad
    input; nothing is printed for them.
  • run(prompt, out) is parse() for scripts: a ParseError is reported on
    stderr, followed by the help text, and the process exits with status 1.
  • found(name), values, options[name] and get(name) read the last parse.

Prompt forms
- Unset: sys.argv[1:].
- str: split with shlex.split.
- Iterable[str]: used as-is (items are not trimmed; "" is a value).

Quick example:
    >>> options = Options("greet", "1.0", "Says hello.")
    >>> options.add("name", "n", "Who to greet", default="world")
    ...
    >>> options.parse(["-n", "there"])
    True
    >>> options["name"]
    'there'
"""
import copy
import shlex
import sys
from collections.abc import Iterable
from types import MappingProxyType

from .engine import Engine, Outcome, ParseState
from .faults import ParseError, report
from .help import HelpRenderer
from .registry import Kind, OptionRegistry
from .utils import *


class ParserConfig:
    """
    Immutable parser-wide configuration.

    Fields
    - app: program name shown in help and version output (required).
    - version: free-form version string, may be empty.
    - description: one-paragraph description shown in help (required).
    - extra: trailing text shown after the option rows, may be empty.
    - auto_help: print help and stop when the command line is empty.
    - colorful: True (ANSI on), False (plain), None (on when the output
      stream is a terminal).

    All strings are trimmed.
    """
    __slots__ = ("_app", "_version", "_description", "_extra", "_auto_help", "_colorful")

    app = mirror("app")
    version = mirror("version")
    description = mirror("description")
    extra = mirror("extra")
    auto_help = mirror("auto_help")
    colorful = mirror("colorful")

    def __init__(self, app, version="", description=Unset, extra="", *, auto_help=False, colorful=False):
        for field, value in (("app", app), ("version", version), ("extra", extra)):
            if not isinstance(value, str):
                raise TypeError("parser '%s' must be a string" % field)
        if not isinstance(description, str | Unset):
            raise TypeError("parser 'description' must be a string")

        if not (app := app.strip()):
            raise ValueError("parser 'app' cannot be empty")
        if not (description := coalesce(description, "").strip()):
            raise ValueError("parser 'description' cannot be empty")
        if colorful not in (True, False, None):
            raise TypeError("parser 'colorful' must be True, False or None")

        self._app = app
        self._version = version.strip()
        self._description = description
        self._extra = extra.strip()
        self._auto_help = bool(auto_help)
        self._colorful = colorful

    def resolve_colorful(self, out, /):
        """
        Decide whether output written to `out` gets ANSI colour.
        """
        if self._colorful is None:
            isatty = getattr(out, "isatty", None)
            return bool(isatty and isatty())
        return self._colorful

    def __replace__(self, **overrides):
        fields = {
            "app": self._app,
            "version": self._version,
            "description": self._description,
            "extra": self._extra,
            "auto_help": self._auto_help,
            "colorful": self._colorful,
        }
        if unknown := overrides.keys() - fields.keys():
            raise TypeError("unexpected configuration field(s): %s" % ", ".join(sorted(unknown)))
        return type(self)(**fields | overrides)

    def __eq__(self, other, /):
        if not isinstance(other, ParserConfig):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in self.__slots__))

    def __repr__(self):
        return "ParserConfig(%s)" % ", ".join(
            "%s=%r" % (name[1:], getattr(self, name)) for name in self.__slots__
        )


def _tokenize(prompt, /):
    """
    Normalize a prompt into a list of tokens.

    Raises
    - TypeError: when prompt is not Unset/str/Iterable[str], or when an
      iterable contains a non-string element.
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


def _detach(spec, value, /):
    return spec.container(value) if spec.kind is Kind.MULTIPLE else value


class Options:
    """
    Command-line option parser.

    An Options object owns its registered options and remembers the state of
    its last parse. Parsing never modifies the registered options, so the same
    object can parse any number of command lines; use copy.deepcopy() to get
    an independent parser per thread.
    """

    def __init__(self, app, version="", description=Unset, extra="", *, auto_help=False, colorful=False):
        self._config = ParserConfig(app, version, description, extra, auto_help=auto_help, colorful=colorful)
        self._registry = OptionRegistry()
        self._state = None

    @property
    def config(self):
        return self._config

    @property
    def specs(self):
        """
        Registered options, in registration order (help/version excluded).
        """
        return tuple(self._registry)

    def add(
            self,
            name,
            abbrev=None,
            description=Unset,
            /,
            *,
            type=str,
            default=Unset,
            multiple=False,
            anonymous=False,
            required=False,
            pattern=None,
            callback=None
    ):
        """
        Register an option.

        Parameters
        - name: long name, used as "--name" (surrounding hyphens are trimmed).
        - abbrev: None or a single character, used as "-a".
        - description: text shown in help (required).
        - type: bool (switch), int, uint, float, str, an Enum subclass, or any
          callable that converts a raw token.
        - default: initial value of a single-valued option.
        - multiple: True to collect values into a list, set for a set.
        - anonymous: values without an option name can land here.
        - required: the option must appear on the command line.
        - pattern: regex (str options only) every value must fully match.
        - callback: called with every converted value.

        Returns
        - Options: self, to chain declarations.

        Raises
        - TypeError: arguments of the wrong type.
        - RegistrationError subclasses: malformed or conflicting declaration.
        """
        self._registry.register(
            name,
            abbrev,
            description,
            type=type,
            default=default,
            multiple=multiple,
            anonymous=anonymous,
            required=required,
            pattern=pattern,
            callback=callback,
        )
        return self

    def parse(self, prompt=Unset, out=Unset):
        """
        Scan a command line.

        Returns
        - True: values are ready to be used.
        - False: help or version was written to `out` (sys.stdout by default).

        Raises
        - ParseError subclasses: the command line does not fit the options.
        - DuplicateNameError: a user option is called help or version.
        - TypeError: invalid prompt.
        """
        tokens = _tokenize(prompt)
        out = coalesce(out, sys.stdout)

        registry = self._registry.reserve()
        state = ParseState(registry, tokens)
        self._state = None
        outcome = Engine(registry, self._config).run(state, out)
        self._state = state
        return outcome is Outcome.PROCEED

    def run(self, prompt=Unset, out=Unset):
        """
        Like parse(), but report a ParseError on stderr (followed by the help
        text) and exit with status 1.
        """
        try:
            return self.parse(prompt, out)
        except ParseError as fault:
            colorful = self._config.resolve_colorful(sys.stderr)
            report(fault, app=self._config.app, colorful=colorful)
            sys.stderr.write(self.help_text(colorful=colorful))
            sys.exit(1)

    def found(self, name, /):
        """
        Whether the option appeared in the last parse ("--name", "name" and
        " name " are the same key).
        """
        if self._state is None:
            return False
        registry = self._state.registry
        if (index := registry.find_by_name(name)) is None:
            return False
        return registry[index].name in self._state.found

    @property
    def values(self):
        """
        Read-only mapping of option name to value from the last parse, or to
        the initial values before any parse.
        """
        if self._state is None:
            return MappingProxyType({spec.name: spec.initial() for spec in self._registry})
        return MappingProxyType({
            spec.name: _detach(spec, self._state.sinks[spec.name].value)
            for spec in self._state.registry if not spec.reserved
        })

    def __getitem__(self, name, /):
        return self.values[name]

    def get(self, name, default=None, /):
        return self.values.get(name, default)

    def help_text(self, *, colorful=Unset):
        """
        Return the help screen. Colour follows the configuration unless given;
        automatic colour means plain text here, since there is no stream.
        """
        renderer = HelpRenderer(self._registry.reserve(), self._config)
        return renderer.render(colorful=coalesce(colorful, self._config.colorful is True))

    def version_text(self, *, colorful=Unset):
        renderer = HelpRenderer(self._registry, self._config)
        return renderer.version(colorful=coalesce(colorful, self._config.colorful is True))

    def reset(self):
        """
        Forget the last parse: values go back to their initial values and
        nothing is found.
        """
        self._state = None

    def __copy__(self):
        return self.__replace__()

    def __replace__(self, **overrides):
        """
        Return a parser with the same options and no parse state, and a
        configuration updated with `overrides` (see ParserConfig).
        """
        clone = type(self).__new__(type(self))
        clone._config = copy.replace(self._config, **overrides)
        clone._registry = self._registry.copy()
        clone._state = None
        return clone

    def __repr__(self):
        return "Options(%r, %r, specs=%d)" % (self._config.app, self._config.version, len(self._registry))


__all__ = (
    "ParserConfig",
    "Options",
)
