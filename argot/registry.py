r"""
Argot option specifications and the registry that owns them.

Overview
- Kind: the three shapes an option can take.
  • BOOLEAN: presence-only switch, set to True when seen.
  • SINGLE: takes one value, last write wins.
  • MULTIPLE: accumulates every value into a list or a set.

- OptionSpec: one registered option, immutable once built.
  • Exposes its sanitized metadata through read-only properties declared in
    __introspectable__ (see SpecType).
  • validate()/convert() delegate to the option's Coercion.
  • usage()/summary() produce the two columns of the help row.
  • sink() hands out a fresh per-parse Sink bound to the spec.

- OptionRegistry: ordered collection of OptionSpecs.
  • register(...) sanitizes metadata and appends a spec, or raises a
    RegistrationError subclass.
  • find_by_name()/find_by_abbrev() resolve command-line keys to indices.
  • reserve() returns a new registry with the help/version switches appended.

Metadata (sanitized on registration, in this order)
- type/default/pattern/multiple/callback: the value side of the option.
- name: trimmed of whitespace and hyphens; must not be empty and the raw name
  must not contain whitespace or control characters; unique.
- abbrev: None, or a single printable, non-space ASCII character other than
  "-"; unique.
- boolean shape: a boolean can be neither anonymous nor required.
- anonymous slots: nothing anonymous may follow a multi-valued anonymous
  option.
- description: trimmed; must not be empty.

Quick example:
    >>> registry = OptionRegistry()
    >>> spec = registry.register("count", "c", "How many times", type=int)
    >>> spec.usage(), spec.summary()
    ('--count, -c <int>', 'How many times')
"""
import builtins
import enum
import functools
import operator
import re
import string

from .coercion import coerce, StringCoercion
from .faults import *
from .sinks import FlagSink, ScalarSink, SequenceSink
from .utils import *

_FORBIDDEN = re.compile(r"[\s\x00-\x1f\x7f]")
_TRIMMED = string.whitespace + "-"


class Kind(enum.Enum):
    """
    Shape of an option: how many values it takes and how they are stored.
    """
    BOOLEAN = "boolean"
    SINGLE = "single"
    MULTIPLE = "multiple"


class SpecType(type):
    """
    Metaclass that makes specs introspectable.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.

    Conventions
    - __displayable__ (if set) narrows which properties are shown by
      __rich_repr__; otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option-spec(name='count', abbrev='c', kind=<Kind.SINGLE: 'single'>, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _trim(name, /):
    return name.strip(_TRIMMED)


def _sanitize_value_metadata(metadata, /):
    """
    Internal: resolve the value side of an option (coercion, kind, default,
    container and pattern).

    Responsibilities
    - type: any callable; selects the Coercion (see argot.coercion.coerce).
    - multiple: False, True (list) or set. A boolean cannot be multi-valued.
    - default: Unset resolves to the coercion's zero value. Multi-valued
      options always start empty and reject a default.
    - pattern: compiled through the coercion (string options only). An
      explicit string default must match it.
    - callback: None or a callable invoked with every converted value.

    Raises
    - TypeError: wrong argument types.
    - InvalidPatternError: pattern on a non-string option, uncompilable
      pattern, or a default that the pattern rejects.
    - IllegalBooleanShapeError: a multi-valued boolean.
    """
    coercion = metadata["coercion"] = coerce(metadata.pop("type"))

    match multiple := metadata.pop("multiple"):
        case False:
            container = None
        case True:
            container = list
        case builtins.set:
            container = set
        case _:
            raise TypeError("option 'multiple' must be a boolean or set")
    metadata["container"] = container

    if coercion.type is bool:
        if multiple:
            raise IllegalBooleanShapeError("boolean option cannot take multiple values")
        metadata["kind"] = Kind.BOOLEAN
    else:
        metadata["kind"] = Kind.MULTIPLE if multiple else Kind.SINGLE

    validator = coercion.validator(pattern := metadata["pattern"])
    if pattern is not None:
        metadata["pattern"] = validator.args[0]
    metadata["validator"] = validator

    default = metadata["default"]
    if metadata["kind"] is Kind.MULTIPLE:
        if default is not Unset:
            raise TypeError("multi-valued option cannot have a default; it always starts empty")
    elif default is Unset:
        metadata["default"] = coercion.zero()
    elif validator is not None and isinstance(coercion, StringCoercion):
        if not isinstance(default, str) or not validator(default):
            raise InvalidPatternError("default %r does not match the option pattern" % (default,))

    if (callback := metadata["callback"]) is not None and not callable(callback):
        raise TypeError("option 'callback' must be callable")


def _sanitize_named_metadata(registry, metadata, /):
    """
    Internal: validate the name and the abbreviation against the registry.

    Raises
    - TypeError: name is not a string, abbrev is neither None nor a string.
    - InvalidNameError / DuplicateNameError
    - InvalidAbbrevError / DuplicateAbbrevError
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError("option 'name' must be a string")
    if _FORBIDDEN.search(name) or not (trimmed := _trim(name)):
        raise InvalidNameError("invalid option name %s" % quote(name), name=name)
    if registry.find_by_name(trimmed) is not None:
        raise DuplicateNameError("option %s already exists" % quote(trimmed), name=trimmed)
    metadata["name"] = trimmed

    if (abbrev := metadata["abbrev"]) is not None:
        if not isinstance(abbrev, str):
            raise TypeError("option 'abbrev' must be a string or None")
        if len(abbrev) != 1 or not "!" <= abbrev <= "~" or abbrev == "-":
            raise InvalidAbbrevError("invalid abbreviation %s for option %s" % (quote(abbrev), quote(trimmed)), name=trimmed)
        if registry.find_by_abbrev(abbrev) is not None:
            raise DuplicateAbbrevError("abbreviation %s already exists" % quote(abbrev), name=trimmed)


def _sanitize_shape_metadata(registry, metadata, /):
    """
    Internal: validate how the option fits among its siblings.

    Raises
    - IllegalBooleanShapeError: boolean and anonymous, or boolean and required.
    - AnonymousSlotExhaustedError: anonymous option after a multi-valued
      anonymous one.
    - TypeError / EmptyDescriptionError: description missing or blank.
    """
    name = metadata["name"]
    if metadata["kind"] is Kind.BOOLEAN:
        if metadata["anonymous"]:
            raise IllegalBooleanShapeError("boolean option %s cannot be anonymous" % quote(name), name=name)
        if metadata["required"]:
            raise IllegalBooleanShapeError("boolean option %s cannot be required" % quote(name), name=name)

    if metadata["anonymous"] and registry.exhausted:
        raise AnonymousSlotExhaustedError(
            "anonymous option %s can never receive a value after a multi-valued anonymous option" % quote(name),
            name=name
        )

    if not isinstance(description := metadata["description"], str | Unset):
        raise TypeError("option 'description' must be a string")
    if not (description := coalesce(description, "").strip()):
        raise EmptyDescriptionError("option %s needs a description" % quote(name), name=name)
    metadata["description"] = description


class OptionSpec(metaclass=SpecType):
    """
    Immutable declaration of one command-line option.

    Properties
    - The names listed in __introspectable__ are exposed as read-only
      attributes, mirroring the sanitized metadata; container defaults are
      handed out as copies.
    """

    __introspectable__ = (
        "name",
        "abbrev",
        "kind",
        "anonymous",
        "required",
        "description",
        "placeholder",
        "default_display",
        "coercion",
        "default",
        "container",
        "pattern",
        "callback",
        "reserved",
    )
    __displayable__ = (
        "name",
        "abbrev",
        "kind",
        "anonymous",
        "required",
        "description",
    )

    def __init__(
            self,
            name,
            abbrev,
            description,
            /,
            *,
            coercion,
            kind,
            default=None,
            container=None,
            pattern=None,
            validator=None,
            callback=None,
            anonymous=False,
            required=False,
            reserved=False
    ):
        self._name = name
        self._abbrev = abbrev
        self._description = description
        self._coercion = coercion
        self._kind = kind
        self._default = default
        self._container = container
        self._pattern = pattern
        self._validator = validator
        self._callback = callback
        self._anonymous = bool(anonymous)
        self._required = bool(required)
        self._reserved = bool(reserved)
        self._placeholder = "" if kind is Kind.BOOLEAN else coercion.placeholder
        self._default_display = (
            coercion.display(default) if kind is Kind.SINGLE and not self._required else ""
        )

    def validate(self, token, /):
        """
        Check a raw token against the option's validator (True when it has none).
        """
        return self._validator is None or bool(self._validator(token))

    def convert(self, token, /):
        return self._coercion.convert(token)

    def initial(self):
        """
        Value held by the option before any assignment.
        """
        if self._kind is Kind.MULTIPLE:
            return self._container()
        return self._default

    def sink(self):
        match self._kind:
            case Kind.BOOLEAN:
                return FlagSink(self)
            case Kind.SINGLE:
                return ScalarSink(self)
            case Kind.MULTIPLE:
                return SequenceSink(self)

    def usage(self):
        """
        Left help column, e.g. "[--files, -f] <arg> ...".
        """
        usage = "--" + self._name
        if self._abbrev is not None:
            usage += ", -" + self._abbrev
        if self._anonymous:
            usage = "[%s]" % usage
        if self._kind is not Kind.BOOLEAN:
            usage += " " + self._placeholder
        if self._kind is Kind.MULTIPLE:
            usage += " ..."
        return usage

    def summary(self):
        """
        Right help column: the description plus a "(required)" or
        "(default X)" note, merged into a trailing parenthesis if any.
        """
        if self._required:
            note = "required"
        elif self._default_display:
            note = "default " + self._default_display
        else:
            return self._description
        if self._description.endswith(")"):
            return "%s; %s)" % (self._description[:-1], note)
        return "%s (%s)" % (self._description, note)


class OptionRegistry:
    """
    Ordered collection of registered options.

    Registration order is the order of help rows, of anonymous filling and of
    the missing-required check. Specs are immutable, so copying a registry is
    a shallow list copy.
    """

    def __init__(self, specs=(), /):
        self._specs = list(specs)

    @property
    def exhausted(self):
        """
        True once a multi-valued anonymous option is registered.
        """
        return any(spec.anonymous and spec.kind is Kind.MULTIPLE for spec in self._specs)

    def register(
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
            callback=None,
            reserved=False
    ):
        """
        Validate an option declaration and append it.

        Returns
        - OptionSpec: the registered spec.

        Raises
        - TypeError: arguments of the wrong type.
        - RegistrationError subclasses, in the order documented by the module.
        """
        metadata = {
            "name": name,
            "abbrev": abbrev,
            "description": description,
            "type": type,
            "default": default,
            "multiple": multiple,
            "anonymous": bool(anonymous),
            "required": bool(required),
            "pattern": pattern,
            "callback": callback,
        }
        _sanitize_value_metadata(metadata)
        _sanitize_named_metadata(self, metadata)
        _sanitize_shape_metadata(self, metadata)

        spec = OptionSpec(
            metadata.pop("name"),
            metadata.pop("abbrev"),
            metadata.pop("description"),
            reserved=reserved,
            **metadata
        )
        self._specs.append(spec)
        return spec

    def find_by_name(self, name, /):
        """
        Index of the option called `name` (hyphens and whitespace trimmed), or None.
        """
        name = _trim(name)
        for index, spec in enumerate(self._specs):
            if spec.name == name:
                return index
        return None

    def find_by_abbrev(self, abbrev, /):
        for index, spec in enumerate(self._specs):
            if spec.abbrev is not None and spec.abbrev == abbrev:
                return index
        return None

    def reserve(self):
        """
        Return a new registry holding the user options followed by the
        reserved help and version switches.

        The reserved switches take "h" and "v" only when those abbreviations
        are still free. The receiver is left untouched, so calling this once
        per parse is idempotent.

        Raises
        - DuplicateNameError: a user option is already called help or version.
        """
        registry = OptionRegistry(self._specs)
        registry.register(
            "help", "h" if self.find_by_abbrev("h") is None else None, "Show usage information",
            type=bool,
            reserved=True
        )
        registry.register(
            "version", "v" if self.find_by_abbrev("v") is None else None, "Show version information",
            type=bool,
            reserved=True
        )
        return registry

    def copy(self):
        return OptionRegistry(self._specs)

    def __iter__(self):
        return iter(self._specs)

    def __len__(self):
        return len(self._specs)

    def __getitem__(self, index, /):
        return self._specs[index]

    def __contains__(self, name, /):
        return isinstance(name, str) and self.find_by_name(name) is not None

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self._specs)


__all__ = (
    "Kind",
    "OptionSpec",
    "OptionRegistry",
)

# Keep the metaclass out of star-imports and autocompletion.
del SpecType
