"""
Argot parse engine: one left-to-right scan of a token list.

Phases
- setup
  • build a ParseState: the working deque, the escaped flag, the open sink
    and one fresh sink per option.
  • with auto_help on and no tokens at all, print help and stop right away
    (nothing is marked found).
- loop (scanning)
  • "--" escapes everything after it: those tokens are values.
  • "--name=value" (with "=" at offset 4 or later) is split in two and both
    halves are pushed back to the front of the queue.
  • "--name" opens the named option.
  • "-abc" is expanded in place to "-a -b -c"; "-a" opens the option with
    that abbreviation.
  • anything else (including the empty string) is a value for the open
    option, or for the first anonymous option still able to take one.
- post-scan
  • the first required option that was never seen fails the parse, even when
    help or version was requested.
  • help, then version, is printed and the parse stops.

Quirks kept on purpose
- A boolean switch that was just seen also swallows the next value token
  (the value is ignored): "--verbose yes" leaves no unclaimed "yes".
- A single-valued option left without its value is not an error; the next
  option simply replaces it as the open one.
- The value half of "--name=value" is processed as an ordinary token, so
  "--count=-5" reads "-5" as an abbreviation and fails.

Faults are raised, never printed: see argot.faults.
"""
import difflib
import enum
from collections import deque

from .faults import *
from .help import HelpRenderer
from .registry import Kind
from .utils import quote


class Outcome(enum.Enum):
    """
    Non-failing end states of a parse.
    """
    PROCEED = "proceed"
    STOPPED = "stopped"


class ParseState:
    """
    Everything a single parse mutates. Discarded (or kept as the last state
    by the facade) once the scan is over; the registry is never touched.
    """

    def __init__(self, registry, tokens=(), /):
        self.registry = registry
        self.tokens = deque(tokens)
        self.escaped = False
        self.current = None
        self.found = set()
        self.sinks = {spec.name: spec.sink() for spec in registry}

    @property
    def values(self):
        return {name: sink.value for name, sink in self.sinks.items()}

    def open(self, spec, /):
        """
        Make `spec` the option receiving the next value and mark it found.
        A boolean is assigned on the spot.
        """
        self.current = sink = self.sinks[spec.name]
        self.found.add(spec.name)
        if spec.kind is Kind.BOOLEAN:
            sink.assign("")


class Engine:
    """
    Scans tokens against a reserved registry (user options plus help and
    version) and reports an Outcome.
    """

    def __init__(self, registry, config, /):
        self.registry = registry
        self.config = config

    def run(self, state, out, /):
        """
        Scan `state.tokens` to exhaustion.

        Returns
        - Outcome.PROCEED: the caller can use the values.
        - Outcome.STOPPED: help or version was written to `out`.

        Raises
        - ParseError subclasses on the first offending token (or on the first
          missing required option after the scan).
        """
        renderer = HelpRenderer(self.registry, self.config)
        colorful = self.config.resolve_colorful(out)

        if self.config.auto_help and not state.tokens:
            out.write(renderer.render(colorful=colorful))
            return Outcome.STOPPED

        while state.tokens:
            token = state.tokens.popleft()

            if state.escaped or not token.startswith("-"):
                self._assign(state, token)
            elif token == "--":
                state.escaped = True
            elif token.startswith("--"):
                if (offset := token.find("=")) >= 4:
                    state.tokens.appendleft(token[offset + 1:])
                    state.tokens.appendleft(token[:offset])
                    continue
                if (index := self.registry.find_by_name(token[2:])) is None:
                    raise self._unknown(token, [spec.name for spec in self.registry], prefix="--")
                state.open(self.registry[index])
            elif len(token) > 2:
                state.tokens.extendleft(reversed(["-" + letter for letter in token[1:]]))
            else:
                if (index := self.registry.find_by_abbrev(token[1:])) is None:
                    raise self._unknown(token, [spec.abbrev for spec in self.registry if spec.abbrev], prefix="-")
                state.open(self.registry[index])

        for spec in self.registry:
            if spec.required and spec.name not in state.found:
                raise MissingRequiredError(
                    "missing required option %s" % quote("--" + spec.name),
                    code=FaultCode.MISSING_REQUIRED,
                    title="missing required option",
                    hint="pass %s" % spec.usage(),
                    name=spec.name,
                )

        if "help" in state.found:
            out.write(renderer.render(colorful=colorful))
            return Outcome.STOPPED
        if "version" in state.found:
            out.write(renderer.version(colorful=colorful))
            return Outcome.STOPPED
        return Outcome.PROCEED

    def _assign(self, state, token, /):
        if state.current is None:
            for spec in self.registry:
                if spec.anonymous and (spec.kind is Kind.MULTIPLE or spec.name not in state.found):
                    state.open(spec)
                    break
            else:
                raise UnclaimedArgumentError(
                    "unclaimed argument %s" % quote(token),
                    code=FaultCode.UNCLAIMED_ARGUMENT,
                    title="unclaimed argument",
                    hint="no option is waiting for a value here; remove it or name its option",
                    token=token,
                )

        sink = state.current
        spec = sink.spec
        if not spec.validate(token):
            raise PatternMismatchError(
                "value %s does not match option %s" % (quote(token), quote("--" + spec.name)),
                code=FaultCode.PATTERN_MISMATCH,
                title="pattern mismatch",
                hint="%s expects %s" % ("--" + spec.name, spec.placeholder),
                token=token,
                name=spec.name,
            )
        sink.assign(token)
        if spec.kind is not Kind.MULTIPLE:
            state.current = None

    @staticmethod
    def _unknown(token, candidates, /, *, prefix):
        key = token[len(prefix):]
        if suggestions := difflib.get_close_matches(key, candidates, 1):
            hint = "did you mean %s?" % (prefix + suggestions[0])
        else:
            hint = "run with --help to see the available options"
        return UnknownOptionError(
            "unknown option %s" % quote(token),
            code=FaultCode.UNKNOWN_OPTION,
            title="unknown option",
            hint=hint,
            token=token,
            suggestions=suggestions,
        )


__all__ = (
    "Outcome",
    "ParseState",
    "Engine",
)
