"""
Tests for the Unset sentinel and the small shared helpers.

This module verifies:
- Unset identity, falsy semantics, representation, copying and pickling.
- Finality (UnsetType cannot be subclassed).
- coalesce(), rename(), mirror() and plural().
"""
import copy
import pickle
import unittest
from unittest import TestCase

from boa.utils import *
from boa.utils import _detach


class TestUnset(TestCase):
    """Behavioral tests for the Unset singleton."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, 0)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopyAndPickleKeepIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self):
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testUnionWithTypes(self):
        self.assertIsInstance(Unset, int | UnsetType)


class TestHelpers(TestCase):
    """Behavioral tests for coalesce, rename, mirror and plural."""

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertEqual(coalesce(0, "fallback"), 0)
        self.assertIsNone(coalesce(Unset))

    def testRename(self):
        def function():
            pass

        self.assertEqual(rename(function, "other").__name__, "other")
        self.assertEqual(rename("decorated")(function).__qualname__, "decorated")
        with self.assertRaises(TypeError):
            rename(1, "name")

    def testMirrorHandsOutCopies(self):
        class Holder:
            values = mirror("values")

            def __init__(self):
                self._values = {"key": [1, 2]}

        holder = Holder()
        holder.values["key"].append(3)
        self.assertEqual(holder.values, {"key": [1, 2]})
        with self.assertRaises(AttributeError):
            holder.values = {}

    def testDetachKeepsTuples(self):
        payload = (1, 2)
        self.assertIs(_detach(payload), payload)

    def testPlural(self):
        self.assertEqual(plural("error", 1), "1 error")
        self.assertEqual(plural("error", 3), "3 errors")
        self.assertEqual(plural("entry", 2), "2 entries")


if __name__ == "__main__":
    unittest.main()
