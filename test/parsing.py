"""
Argument consumption engine tests.

Scope
- Validate normalize() rewriting (equals splitting, single-dash explosion).
- Validate item resolution (name, "--" prefix, alias) and unrecognized tokens.
- Validate binding: presence-only items, scalars (children, default, "--",
  tolerance) and slices (greedy, sentinel, atomic coercion).
- Validate fault accumulation and ordering, and that tables are never mutated.

Conventions
- Test method names follow CamelCase per project convention.
- consume() is used when only the engine is under test; parse() when the
  validator or combined help take part.
"""
import unittest
from unittest import TestCase

from boa import Unset
from boa.faults import *
from boa.formatting import format_help
from boa.items import *
from boa.kinds import *
from boa.parsing import *


class TestNormalize(TestCase):
    """Behavioral tests for the normalization pass."""

    def testExplodesSingleDashClusters(self):
        self.assertEqual(normalize(["-abc"]), ["-a", "-b", "-c"])

    def testSplitsAtFirstEquals(self):
        self.assertEqual(normalize(["--name=joe"]), ["--name", "joe"])
        self.assertEqual(normalize(["-n=5"]), ["-n", "5"])
        self.assertEqual(normalize(["--expr=a=b"]), ["--expr", "a=b"])

    def testLeavesOtherTokensAlone(self):
        tokens = ["--", "--verbose", "-v", "word", "-"]
        self.assertEqual(normalize(tokens), tokens)

    def testIdempotentOnWellFormedInput(self):
        once = normalize(["-xyz", "--size=3", "file"])
        self.assertEqual(normalize(once), once)

    def testRejectsStrings(self):
        with self.assertRaises(TypeError):
            normalize("-abc")
        with self.assertRaises(TypeError):
            normalize(["-a", 1])


class TestResolution(TestCase):
    """Behavioral tests for how tokens find their items."""

    def setUp(self):
        self.table = {
            "--verbose": Item("--verbose", alias="-v", kind=Kind.BOOL),
            "--topping": Item("--topping", kind=Kind.STRING, arity=1, ordinal=1),
        }

    def testAliasLandsUnderCanonicalName(self):
        result = consume(self.table, ["-v"])
        self.assertEqual(list(result), ["--verbose"])
        self.assertIs(result.boolean("--verbose"), True)

    def testDoubleDashPrefixIsImplied(self):
        result = consume(self.table, ["verbose", "topping", "choc"])
        self.assertIs(result.boolean("--verbose"), True)
        self.assertEqual(result.string("--topping"), "choc")
        self.assertFalse(result.has_errors)

    def testUnrecognizedTokenSuggestsCloseName(self):
        result = consume(self.table, ["--toping"])
        self.assertEqual(len(result.errors), 1)
        error = result.errors[0]
        self.assertIsInstance(error, UnrecognizedItemError)
        self.assertIs(error.code, FaultCode.UNRECOGNIZED_ITEM)
        self.assertEqual(
            str(error),
            "'--toping' at first position: command or flag passed on command line is not recognized",
        )
        self.assertEqual(error.options["hint"], "did you mean '--topping'?")
        self.assertEqual(len(result), 0)

    def testUnrecognizedTokensDoNotStopConsumption(self):
        result = consume(self.table, ["x", "y", "-v"])
        self.assertEqual(len(result.errors), 2)
        self.assertEqual(result.errors[1].options["index"], 1)
        self.assertIn("--verbose", result)


class TestBinding(TestCase):
    """Behavioral tests for value binding."""

    def testPresenceOnlyItemConsumesOneToken(self):
        table = {"-v": Item("-v", kind=Kind.INT)}
        result = consume(table, ["-v", "5"])
        self.assertEqual(result.items["-v"].value, PRESENT)
        self.assertIs(result.boolean("-v"), True)
        self.assertIsInstance(result.last_error, UnrecognizedItemError)

    def testScalarCoercion(self):
        table = {"--count": Item("--count", kind=Kind.INT, arity=1)}
        self.assertEqual(consume(table, ["--count", "12"]).integer("--count"), 12)

    def testScalarCoercionFailureNamesTokenAndItem(self):
        table = {"--count": Item("--count", kind=Kind.INT, arity=1)}
        result = consume(table, ["--count", "abc"])
        self.assertEqual(len(result.errors), 1)
        error = result.errors[0]
        self.assertIsInstance(error, KindNotSatisfiableError)
        self.assertEqual(str(error), "abc, argument for --count, cannot be interpreted as an integer")
        self.assertEqual(error.options["index"], 1)
        self.assertIn("--count", result)
        self.assertIs(result.integer("--count"), Unset)

    def testMissingValueIsAFault(self):
        table = {"--topping": Item("--topping", kind=Kind.STRING, arity=1)}
        result = consume(table, ["--topping"])
        self.assertIsInstance(result.last_error, RequiredValueMissingError)
        self.assertEqual(str(result.last_error), "argument for --topping not found")
        self.assertIn("--topping", result)

    def testMissingValueFallsBackToDefault(self):
        table = {"--n": Item("--n", kind=Kind.INT, arity=1, default="7")}
        result = consume(table, ["--n"])
        self.assertEqual(result.integer("--n"), 7)
        self.assertFalse(result.has_errors)

    def testTolerantItemMayGoWithoutValue(self):
        table = {"--n": Item("--n", kind=Kind.INT, arity=1, optional=True)}
        result = consume(table, ["--n"])
        self.assertFalse(result.has_errors)
        self.assertIn("--n", result)
        self.assertIs(result.integer("--n"), Unset)

    def testSentinelBindsDefault(self):
        table = {
            "-c": Item("-c", kind=Kind.INT, arity=-1, default="999"),
            "-d": Item("-d", kind=Kind.INT, arity=-1, ordinal=1),
        }
        result = consume(table, ["-c", "--", "-d", "--"])
        self.assertEqual(result.integer("-c"), 999)
        self.assertIs(result.integer("-d"), Unset)
        self.assertFalse(result.has_errors)

    def testChildSelectorsAreConsumedBeforeTheValue(self):
        table = {"name": Item("name", arity=-1, default="James", children=["--first", "--last"])}
        result = consume(table, ["name", "--last", "Bond"])
        self.assertEqual(result.string("name"), "Bond")
        self.assertEqual(result.items["name"].children, ("--last",))

    def testNoChildSelectorGiven(self):
        table = {"name": Item("name", arity=-1, children=["--first"])}
        result = consume(table, ["name", "Jimmy"])
        self.assertEqual(result.items["name"].children, ())

    def testSliceStopsAtSentinel(self):
        table = {
            "X": Item("X", kind=Kind.INT_SLICE, arity=ONE_OR_MORE),
            "Y": Item("Y", kind=Kind.BOOL, ordinal=1),
        }
        result = consume(table, ["X", "1", "2", "3", "--", "Y"])
        self.assertEqual(result.integers("X"), (1, 2, 3))
        self.assertIs(result.boolean("Y"), True)
        self.assertFalse(result.has_errors)

    def testVariadicScalarKindConsumesGreedily(self):
        table = {
            "X": Item("X", kind=Kind.INT, arity=ONE_OR_MORE),
            "Y": Item("Y", ordinal=1),
        }
        result = consume(table, ["X", "1", "2", "3", "--", "Y"])
        self.assertEqual(result.integers("X"), (1, 2, 3))
        self.assertIs(result.boolean("Y"), True)
        self.assertFalse(result.has_errors)

    def testFixedCountAboveOneConsumesEveryValue(self):
        table = {"X": Item("X", kind=Kind.STRING, arity=2)}
        result = consume(table, ["X", "a", "b"])
        self.assertEqual(result.strings("X"), ("a", "b"))
        self.assertFalse(result.has_errors)

    def testBoolItemNeverTakesAValue(self):
        table = {
            "-v": Item("-v", kind=Kind.BOOL, arity=1),
            "run": Item("run", ordinal=1),
        }
        result = consume(table, ["-v", "run"])
        self.assertIs(result.boolean("-v"), True)
        self.assertIs(result.boolean("run"), True)
        self.assertFalse(result.has_errors)

    def testSliceKeepsNoUnusedChildren(self):
        table = {"X": Item("X", kind=Kind.STRING_SLICE, arity=ONE_OR_MORE, children=["--first"])}
        result = consume(table, ["X", "a"])
        self.assertEqual(result.items["X"].children, ())

    def testPresenceOnlyItemKeepsNoUnusedChildren(self):
        table = {"-v": Item("-v", children=["--first"])}
        self.assertEqual(consume(table, ["-v"]).items["-v"].children, ())

    def testSliceRunsToTheEnd(self):
        table = {"X": Item("X", kind=Kind.STRING_SLICE, arity=ONE_OR_MORE)}
        self.assertEqual(consume(table, ["X", "a", "X"]).strings("X"), ("a", "X"))

    def testOneOrMoreNeedsAValue(self):
        table = {"X": Item("X", kind=Kind.INT_SLICE, arity=ONE_OR_MORE)}
        result = consume(table, ["X", "--"])
        self.assertIsInstance(result.last_error, RequiredValueMissingError)
        self.assertEqual(str(result.last_error), "integer argument for X not found")

    def testZeroOrMoreMayBeEmpty(self):
        table = {"X": Item("X", kind=Kind.INT_SLICE, arity=ZERO_OR_MORE)}
        result = consume(table, ["X"])
        self.assertFalse(result.has_errors)
        self.assertIs(result.integers("X"), Unset)

    def testSliceCoercionIsAtomic(self):
        table = {"X": Item("X", kind=Kind.INT_SLICE, arity=ONE_OR_MORE)}
        result = consume(table, ["X", "1", "x", "2"])
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(str(result.errors[0]), "x, argument for X, cannot be interpreted as an integer")
        self.assertEqual(result.errors[0].options["index"], 2)
        self.assertIs(result.integers("X"), Unset)

    def testSliceDefaultIsShellSplit(self):
        table = {"--files": Item("--files", kind=Kind.STRING_SLICE, arity=ZERO_OR_MORE, default='a "b c"')}
        self.assertEqual(consume(table, ["--files"]).strings("--files"), ("a", "b c"))

    def testTableIsNeverMutated(self):
        item = Item("--count", kind=Kind.INT, arity=1)
        table = {"--count": item}
        consume(table, ["--count", "3"])
        self.assertIs(table["--count"], item)
        self.assertIs(item.value, Unset)


class TestParse(TestCase):
    """Behavioral tests for parse(): engine, validator and help together."""

    def setUp(self):
        self.table = {
            "name": Item("name", kind=Kind.STRING, arity=-1, default="James", children=["--first"]),
            "-a": Item("-a", kind=Kind.BOOL, ordinal=1),
            "-b": Item("-b", kind=Kind.BOOL, ordinal=2),
            "-c": Item("-c", kind=Kind.INT, arity=-1, default="999", ordinal=3),
            "--topping": Item("--topping", kind=Kind.STRING, arity=1, ordinal=4, short="what goes on top"),
        }

    def testMixedVector(self):
        result = parse(self.table, ["name", "--first", "Jimmy", "-abc", "--", "--topping=choc"], application="demo")
        self.assertFalse(result.has_errors)
        self.assertEqual(result.application, "demo")
        self.assertEqual(result.string("name"), "Jimmy")
        self.assertEqual(result.items["name"].children, ("--first",))
        self.assertIs(result.boolean("-a"), True)
        self.assertIs(result.boolean("-b"), True)
        self.assertEqual(result.integer("-c"), 999)
        self.assertEqual(result.string("--topping"), "choc")

    def testFaultsKeepDiscoveryOrder(self):
        table = self.table | {"--id": Item("--id", kind=Kind.INT, arity=1, required=True, ordinal=5)}
        result = parse(table, ["--bogus", "-c", "abc", "--topping"])
        self.assertEqual(
            [type(error) for error in result.errors],
            [UnrecognizedItemError, KindNotSatisfiableError, RequiredValueMissingError, MissingRequiredItemError],
        )

    def testConsumeSkipsValidation(self):
        table = {"--id": Item("--id", kind=Kind.INT, arity=1, required=True)}
        self.assertFalse(consume(table, []).has_errors)
        self.assertTrue(parse(table, []).has_errors)

    def testCombinedHelpCoversEveryItem(self):
        result = parse(self.table, ["-a"])
        self.assertEqual(set(result.topics), set(self.table))
        self.assertEqual(result.help("--topping"), format_help(self.table["--topping"]))


if __name__ == "__main__":
    unittest.main()
