# python
"""
Engine module behavioral tests.

Scope
- Validate the scan over a reserved registry: long names, "--name=value",
  abbreviation bundles, "--" escaping and anonymous filling.
- Validate the quirks kept on purpose (boolean absorption, dangling single
  options, value half of "--name=value" re-read as a token).
- Validate post-scan ordering: required check, then help, then version.
- Validate the faults raised for bad input and the payload they carry.

Conventions
- Test method names follow CamelCase per project convention.
- Engines are driven directly through ParseState; the facade is covered in
  the options tests.
"""

from __future__ import annotations

import copy
import io
import unittest
from unittest import TestCase

from argot import (
    ParserConfig,
    FaultCode,
    UnclaimedArgumentError,
    UnknownOptionError,
    PatternMismatchError,
    InvalidValueError,
    MissingRequiredError,
)
from argot.engine import Engine, Outcome, ParseState
from argot.registry import OptionRegistry


def scan(registry, tokens, /, **config):
    reserved = registry.reserve()
    state = ParseState(reserved, tokens)
    out = io.StringIO()
    config = ParserConfig(**{"app": "Hello", "version": "1.0", "description": "Says hello."} | config)
    outcome = Engine(reserved, config).run(state, out)
    return outcome, state, out.getvalue()


class TestScan(TestCase):
    """Token classification and value assignment."""

    def setUp(self):
        self.registry = OptionRegistry()
        self.registry.register("string", "s", "String option", default="Hello")
        self.registry.register("integer", "i", "Integer option", type=int, default=-123)
        self.registry.register("real", "r", "Real option", type=float)
        self.registry.register("boolean", "b", "Boolean option", type=bool)

    def testEmptyInputProceedsWithDefaults(self):
        outcome, state, out = scan(self.registry, [])
        self.assertIs(outcome, Outcome.PROCEED)
        self.assertEqual(out, "")
        self.assertEqual(state.found, set())
        self.assertEqual(state.values["string"], "Hello")
        self.assertEqual(state.values["integer"], -123)
        self.assertIs(state.values["boolean"], False)

    def testLongNames(self):
        outcome, state, _ = scan(self.registry, ["--string", "Goodbye", "--integer", "86", "--real", "42.5", "--boolean"])
        self.assertIs(outcome, Outcome.PROCEED)
        self.assertEqual(state.found, {"string", "integer", "real", "boolean"})
        self.assertEqual(state.values["string"], "Goodbye")
        self.assertEqual(state.values["integer"], 86)
        self.assertEqual(state.values["real"], 42.5)
        self.assertIs(state.values["boolean"], True)

    def testInlineValues(self):
        _, state, _ = scan(self.registry, ["--string=Farewell", "--integer=123", "--real=789"])
        self.assertEqual(state.values["string"], "Farewell")
        self.assertEqual(state.values["integer"], 123)
        self.assertEqual(state.values["real"], 789.0)

    def testInlineValueMayContainEquals(self):
        _, state, _ = scan(self.registry, ["--string=a=b"])
        self.assertEqual(state.values["string"], "a=b")

    def testSpellingsOfAValueAgree(self):
        results = [
            scan(self.registry, prompt)[1].values["integer"]
            for prompt in (["--integer=42"], ["--integer", "42"], ["-i", "42"])
        ]
        self.assertEqual(results, [42, 42, 42])

    def testIndependentCopiesParseIdentically(self):
        first, second = copy.deepcopy(self.registry), copy.deepcopy(self.registry)
        tokens = ["-s", "x", "-b", "-i", "3"]
        _, one, _ = scan(first, tokens)
        _, two, _ = scan(second, tokens)
        self.assertEqual(one.values, two.values)
        self.assertEqual(one.found, two.found)

    def testAbbreviations(self):
        _, state, _ = scan(self.registry, ["-s", "Hello again", "-i", "987", "-r", "321", "-b"])
        self.assertEqual(state.values["string"], "Hello again")
        self.assertEqual(state.values["integer"], 987)
        self.assertEqual(state.values["real"], 321.0)
        self.assertIs(state.values["boolean"], True)

    def testBundledAbbreviationsExpandInPlace(self):
        _, state, _ = scan(self.registry, ["-bi", "5"])
        self.assertIs(state.values["boolean"], True)
        self.assertEqual(state.values["integer"], 5)

    def testLastWriteWins(self):
        _, state, _ = scan(self.registry, ["-i", "1", "-i", "2"])
        self.assertEqual(state.values["integer"], 2)

    def testSurroundingHyphensInLongNamesAreTrimmed(self):
        _, state, _ = scan(self.registry, ["---integer", "7"])
        self.assertEqual(state.values["integer"], 7)

    def testDanglingSingleOptionIsReplacedByNextOption(self):
        outcome, state, _ = scan(self.registry, ["--string", "--integer", "4"])
        self.assertIs(outcome, Outcome.PROCEED)
        self.assertIn("string", state.found)
        self.assertEqual(state.values["string"], "Hello")
        self.assertEqual(state.values["integer"], 4)

    def testBooleanAbsorbsFollowingValue(self):
        outcome, state, _ = scan(self.registry, ["--boolean", "yes"])
        self.assertIs(outcome, Outcome.PROCEED)
        self.assertIs(state.values["boolean"], True)
        with self.assertRaises(UnclaimedArgumentError):
            scan(self.registry, ["--boolean", "yes", "no"])

    def testBooleanAbsorptionStarvesAnonymousOption(self):
        self.registry.register("file", None, "File", anonymous=True)
        _, state, _ = scan(self.registry, ["--boolean", "input.txt"])
        self.assertNotIn("file", state.found)
        self.assertEqual(state.values["file"], "")
        _, state, _ = scan(self.registry, ["input.txt", "--boolean"])
        self.assertEqual(state.values["file"], "input.txt")

    def testInlineValueIsReadAsToken(self):
        with self.assertRaises(UnknownOptionError) as context:
            scan(self.registry, ["--integer=-5"])
        self.assertEqual(context.exception.token, "-5")

    def testShortInlineNameIsUnknown(self):
        registry = OptionRegistry()
        registry.register("n", None, "Number", type=int)
        with self.assertRaises(UnknownOptionError) as context:
            scan(registry, ["--n=5"])
        self.assertEqual(context.exception.token, "--n=5")

    def testEscapedTokensAreValues(self):
        self.registry.register("rest", None, "Rest", multiple=True, anonymous=True)
        _, state, _ = scan(self.registry, ["--", "-x", "--string", ""])
        self.assertEqual(state.values["rest"], ["-x", "--string", ""])
        self.assertEqual(state.values["string"], "Hello")
        self.assertNotIn("string", state.found)


class TestAnonymous(TestCase):
    """Anonymous filling in registration order."""

    def setUp(self):
        self.registry = OptionRegistry()
        self.registry.register("first", "f", "First option", type=int, default=123, anonymous=True)
        self.registry.register("second", "s", "Second option", type=int, default=456, anonymous=True)

    def testFillOrder(self):
        self.registry.register("rest", "r", "Rest of the options", type=int, multiple=True, anonymous=True)
        _, state, _ = scan(self.registry, ["12", "34", "56", "78", "90"])
        self.assertEqual(state.found, {"first", "second", "rest"})
        self.assertEqual(state.values["first"], 12)
        self.assertEqual(state.values["second"], 34)
        self.assertEqual(state.values["rest"], [56, 78, 90])

    def testSetCollectsDistinctValues(self):
        self.registry.register("rest", "r", "Rest of the options", type=int, multiple=set, anonymous=True)
        _, state, _ = scan(self.registry, ["789"] * 5 + ["100"] * 5)
        self.assertEqual(state.values["first"], 789)
        self.assertEqual(state.values["second"], 789)
        self.assertEqual(state.values["rest"], {100, 789})

    def testNamedOptionsAreSkippedWhenFilling(self):
        self.registry.register("rest", "r", "Rest of the options", type=int, multiple=True, anonymous=True)
        _, state, _ = scan(self.registry, ["--second", "9", "1", "2", "3"])
        self.assertEqual(state.values["first"], 1)
        self.assertEqual(state.values["second"], 9)
        self.assertEqual(state.values["rest"], [2, 3])

    def testExtraValueIsUnclaimed(self):
        with self.assertRaises(UnclaimedArgumentError) as context:
            scan(self.registry, ["1", "2", "3"])
        self.assertEqual(context.exception.token, "3")
        self.assertIs(context.exception.code, FaultCode.UNCLAIMED_ARGUMENT)

    def testEmptyTokenIsAValue(self):
        with self.assertRaises(PatternMismatchError):
            scan(self.registry, [""])


class TestFaults(TestCase):
    """First failure aborts the scan."""

    def setUp(self):
        self.registry = OptionRegistry()
        self.registry.register("count", "c", "Count", type=int)
        self.registry.register("hello", None, "Hello option", default="Hello", pattern="He.*")

    def testUnknownLongOptionSuggestsCloseName(self):
        with self.assertRaises(UnknownOptionError) as context:
            scan(self.registry, ["--cont", "1"])
        self.assertEqual(context.exception.token, "--cont")
        self.assertIn("--count", context.exception.hint)

    def testUnknownAbbreviation(self):
        with self.assertRaises(UnknownOptionError):
            scan(self.registry, ["-x"])

    def testBareHyphenIsUnknown(self):
        with self.assertRaises(UnknownOptionError) as context:
            scan(self.registry, ["-"])
        self.assertEqual(context.exception.token, "-")

    def testUnclaimedValue(self):
        with self.assertRaises(UnclaimedArgumentError):
            scan(self.registry, ["stray"])

    def testValidatorMismatch(self):
        with self.assertRaises(PatternMismatchError) as context:
            scan(self.registry, ["--count", "many"])
        self.assertEqual(context.exception.name, "count")
        with self.assertRaises(PatternMismatchError):
            scan(self.registry, ["--hello", "Grinch"])
        _, state, _ = scan(self.registry, ["--hello", "Hellfire"])
        self.assertEqual(state.values["hello"], "Hellfire")

    def testConverterFailureIsInvalidValue(self):
        def even(token):
            if int(token) % 2:
                raise ValueError("odd")
            return int(token)

        self.registry.register("even", "e", "Even number", type=even)
        with self.assertRaises(InvalidValueError) as context:
            scan(self.registry, ["-e", "3"])
        self.assertIsInstance(context.exception.__cause__, ValueError)
        self.assertEqual(context.exception.token, "3")

    def testFirstFailureWins(self):
        with self.assertRaises(UnknownOptionError):
            scan(self.registry, ["--nope", "--count", "x"])


class TestPostScan(TestCase):
    """Required options, help and version."""

    def setUp(self):
        self.registry = OptionRegistry()
        self.registry.register("string", "s", "String option")
        self.registry.register("integer", "i", "Integer option", type=int, required=True)

    def testMissingRequired(self):
        with self.assertRaises(MissingRequiredError) as context:
            scan(self.registry, ["-s", "x"])
        self.assertEqual(context.exception.name, "integer")

    def testRequiredCheckedEvenWithHelp(self):
        with self.assertRaises(MissingRequiredError):
            scan(self.registry, ["--help"])

    def testHelpStops(self):
        outcome, state, out = scan(self.registry, ["-i", "1", "--help"])
        self.assertIs(outcome, Outcome.STOPPED)
        self.assertIn("help", state.found)
        self.assertTrue(out.startswith("\nHello 1.0\n"))

    def testHelpWinsOverVersion(self):
        _, _, out = scan(self.registry, ["-i", "1", "-v", "-h"])
        self.assertIn("Options:", out)

    def testVersion(self):
        outcome, _, out = scan(self.registry, ["-i", "1", "--version"])
        self.assertIs(outcome, Outcome.STOPPED)
        self.assertEqual(out, "Hello 1.0\n")
        _, _, out = scan(self.registry, ["-i", "1", "--version"], version="")
        self.assertEqual(out, "Hello\n")

    def testAutoHelpOnEmptyInput(self):
        outcome, state, out = scan(self.registry, [], auto_help=True)
        self.assertIs(outcome, Outcome.STOPPED)
        self.assertEqual(state.found, set())
        self.assertIn("--help, -h", out)

    def testAutoHelpNeedsEmptyInput(self):
        outcome, _, out = scan(self.registry, ["-i", "1"], auto_help=True)
        self.assertIs(outcome, Outcome.PROCEED)
        self.assertEqual(out, "")


class TestCallbacks(TestCase):

    def testCallbacksReceiveConvertedValues(self):
        received = []
        registry = OptionRegistry()
        registry.register("count", "c", "Count", type=int, callback=received.append)
        registry.register("files", "f", "Files", multiple=True, callback=received.append)
        registry.register("verbose", None, "Verbose", type=bool, callback=received.append)
        scan(registry, ["-c", "3", "--verbose", "-f", "a", "b"])
        self.assertEqual(received, [3, True, "a", "b"])


if __name__ == "__main__":
    unittest.main()
