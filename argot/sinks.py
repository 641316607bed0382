"""
Argot sinks: per-parse receivers of option values.

Overview
- A Sink is created for every option at the start of a parse and is bound to
  exactly one OptionSpec. The engine hands it raw tokens through assign().
  • FlagSink: presence-only; always stores True and ignores its token.
  • ScalarSink: converts and stores the value, the last write wins.
  • SequenceSink: converts and accumulates into the spec's container (list
    or set).
- Every assignment converts, stores, then forwards the converted value to the
  spec's callback (if any), which is how values reach caller-owned state.

Notes
- Conversion failures surface as InvalidValueError chained to the original
  exception; callback exceptions propagate untouched.
"""
from .faults import InvalidValueError, FaultCode
from .utils import quote


class Sink:
    """
    Base receiver bound to a single spec for the duration of one parse.
    """
    __slots__ = ("spec", "value")

    def __init__(self, spec, /):
        self.spec = spec
        self.value = spec.initial()

    def assign(self, token, /):
        raise NotImplementedError

    def _convert(self, token, /):
        try:
            return self.spec.convert(token)
        except (ValueError, TypeError, KeyError, ArithmeticError) as exception:
            raise InvalidValueError(
                "cannot convert %s for option %s" % (quote(token), quote("--" + self.spec.name)),
                code=FaultCode.INVALID_VALUE,
                title="invalid value",
                hint="%s expects %s" % ("--" + self.spec.name, self.spec.placeholder or "no value"),
                token=token,
                name=self.spec.name,
            ) from exception

    def _notify(self, value, /):
        if (callback := self.spec.callback) is not None:
            callback(value)

    def __repr__(self):
        return "%s(%s=%r)" % (type(self).__name__, self.spec.name, self.value)


class FlagSink(Sink):
    __slots__ = ()

    def assign(self, token, /):
        self.value = True
        self._notify(True)


class ScalarSink(Sink):
    __slots__ = ()

    def assign(self, token, /):
        self.value = value = self._convert(token)
        self._notify(value)


class SequenceSink(Sink):
    __slots__ = ()

    def assign(self, token, /):
        value = self._convert(token)
        if isinstance(self.value, set):
            self.value.add(value)
        else:
            self.value.append(value)
        self._notify(value)


__all__ = (
    "Sink",
    "FlagSink",
    "ScalarSink",
    "SequenceSink",
)
