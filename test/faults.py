"""
Fault model tests.

Scope
- Validate FaultCode grouping (terminal help-document faults) and normalization.
- Validate BoaException message/options handling and copy.replace().
- Validate trigger(): raise outside shell mode, print and exit in shell mode.
- Validate rendering through rich.

Conventions
- Test method names follow CamelCase per project convention.
- Console output is captured by patching the module console.
"""
import copy
import io
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from boa.faults import *


class TestFaultCode(TestCase):
    """Behavioral tests for FaultCode."""

    def testTerminalCodes(self):
        terminal = {code for code in FaultCode if code.terminal}
        self.assertEqual(terminal, {
            FaultCode.MALFORMED_USAGE_LINE,
            FaultCode.BAD_META_LINE,
            FaultCode.META_NOT_AT_START,
            FaultCode.NO_COMMAND_NAME,
            FaultCode.DUPLICATED_ITEM,
        })

    def testNormalizeFallsBackToNumber(self):
        self.assertEqual(FaultCode.EXCLUSIVE_CONFLICT.normalize(), "11202")

    def testNormalizeUsesHostCodes(self):
        main = __import__("__main__")
        with patch.object(main, "__codes__", {FaultCode.EXCLUSIVE_CONFLICT: "E-EXCL"}, create=True):
            self.assertEqual(FaultCode.EXCLUSIVE_CONFLICT.normalize(), "E-EXCL")

    def testGetdoc(self):
        main = __import__("__main__")
        self.assertIsNone(getdoc(FaultCode.UNRECOGNIZED_ITEM))
        with patch.object(main, "__docs__", {FaultCode.UNRECOGNIZED_ITEM: "see --help"}, create=True):
            self.assertEqual(getdoc(FaultCode.UNRECOGNIZED_ITEM), "see --help")
        with self.assertRaises(TypeError):
            getdoc(11101)


class TestBoaException(TestCase):
    """Behavioral tests for BoaException and trigger()."""

    def setUp(self):
        self.fault = UnrecognizedItemError(
            "'-x' at first position: command or flag passed on command line is not recognized",
            code=FaultCode.UNRECOGNIZED_ITEM,
            title="unrecognized item",
            hint="did you mean '-v'?",
        )

    def testMessageAndOptions(self):
        self.assertIn("is not recognized", str(self.fault))
        self.assertIs(self.fault.code, FaultCode.UNRECOGNIZED_ITEM)
        with self.assertRaises(TypeError):
            self.fault.options["code"] = None  # type: ignore[index]

    def testEmptyMessage(self):
        self.assertEqual(str(BoaException()), "")
        self.assertIsNone(BoaException().code)

    def testReplaceMergesOptions(self):
        replaced = copy.replace(self.fault, shell=True)
        self.assertIsInstance(replaced, UnrecognizedItemError)
        self.assertEqual(str(replaced), str(self.fault))
        self.assertTrue(replaced.options["shell"])
        self.assertNotIn("shell", self.fault.options)

    def testTriggerRaises(self):
        with self.assertRaises(UnrecognizedItemError) as context:
            trigger(self.fault, prog="app")
        self.assertEqual(context.exception.options["prog"], "app")

    def testTriggerInShellMode(self):
        buffer = io.StringIO()
        with patch("boa.faults.console", Console(file=buffer, color_system=None, width=120)):
            with self.assertRaises(SystemExit) as context:
                trigger(self.fault, shell=True, colorful=False, prog="app")
        self.assertEqual(context.exception.code, 1)
        output = buffer.getvalue()
        self.assertIn("11101", output)
        self.assertIn("Unrecognized Item", output)
        self.assertIn("did you mean '-v'?", output)

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testFancyRendering(self):
        buffer = io.StringIO()
        Console(file=buffer, color_system=None, width=120).print(copy.replace(self.fault, fancy=True, colorful=False))
        self.assertIn("is not recognized", buffer.getvalue())


class TestBoaExit(TestCase):
    """Behavioral tests for the fault group."""

    def testGroupsFaults(self):
        faults = [BoaException("one"), BoaException("two")]
        group = BoaExit(faults, prog="app")
        self.assertEqual(len(group.exceptions), 2)
        self.assertEqual(group.options["prog"], "app")
        self.assertEqual(copy.replace(group, shell=True).options, {"prog": "app", "shell": True})

    def testRendersEveryFault(self):
        buffer = io.StringIO()
        group = BoaExit([BoaException("first fault"), BoaException("second fault")], colorful=False)
        Console(file=buffer, color_system=None, width=120).print(group)
        output = buffer.getvalue()
        self.assertIn("first fault", output)
        self.assertIn("second fault", output)
        self.assertIn("2 errors", output)


if __name__ == "__main__":
    unittest.main()
