"""
Tests for the internal utilities.

This module verifies:
- The Unset sentinel (singleton, falsy, printable, final, usable in unions).
- coalesce() only replaces Unset.
- ordinal() labels used by fault messages.
- rename() and mirror() helpers.
- IntrospectableType-generated properties and representations.
"""
import unittest
from unittest import TestCase

from argline.utils import *


class SampleRecord(metaclass=IntrospectableType):
    __introspectable__ = ("alpha", "beta")
    __displayable__ = ("alpha",)
    __slots__ = ("_alpha", "_beta")

    def __init__(self, alpha, beta):
        self._alpha = alpha
        self._beta = beta


class UnsetTest(TestCase):
    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testUnion(self) -> None:
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("name", str | Unset)
        self.assertNotIsInstance(1, str | Unset)


class HelpersTest(TestCase):
    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)

    def testOrdinal(self) -> None:
        cases = {
            1: "first",
            2: "second",
            10: "tenth",
            11: "11th",
            12: "12th",
            13: "13th",
            21: "21st",
            22: "22nd",
            23: "23rd",
            24: "24th",
            101: "101st",
            111: "111th",
        }
        for number, label in cases.items():
            with self.subTest(number=number):
                self.assertEqual(ordinal(number), label)

    def testRename(self) -> None:
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")
        with self.assertRaises(TypeError):
            rename(1, "renamed")
        with self.assertRaises(TypeError):
            rename(function, 1)
        with self.assertRaises(TypeError):
            rename()

    def testMirror(self) -> None:
        prop = mirror("alpha")
        self.assertIsInstance(prop, property)
        self.assertEqual(prop.fget.__name__, "alpha")
        with self.assertRaises(TypeError):
            mirror(1)


class IntrospectableTypeTest(TestCase):
    def testDisplayableDefaultsToUnset(self) -> None:
        self.assertIs(IntrospectableType.__displayable__, Unset)

    def testTypename(self) -> None:
        self.assertEqual(SampleRecord.__typename__, "sample-record")

    def testProperties(self) -> None:
        record = SampleRecord(1, 2)
        self.assertEqual((record.alpha, record.beta), (1, 2))
        with self.assertRaises(AttributeError):
            record.alpha = 3

    def testDisplayableFields(self) -> None:
        record = SampleRecord(1, 2)
        self.assertEqual(list(record.__rich_repr__()), [("alpha", 1)])
        self.assertEqual(repr(record), "sample-record(alpha=1)")


if __name__ == "__main__":
    unittest.main()
