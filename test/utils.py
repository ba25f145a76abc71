"""
Utils module behavioral tests (sentinel, coalescing, renaming, mirroring).

Scope
- Validate the Unset sentinel: singleton, falsey, sealed, union-friendly.
- Validate coalesce() only replaces Unset.
- Validate rename() in direct and decorator forms.
- Validate mirror() exposes read-only copies of container state.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argtrellis.utils import Unset, UnsetType, coalesce, mirror, rename


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testUnsetIsSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testUnsetIsFalsey(self):
        self.assertFalse(Unset)

    def testUnsetRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testUnsetSupportsUnions(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", str | Unset)


class TestCoalesce(TestCase):
    """Behavioral tests for coalesce()."""

    def testCoalesceReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testCoalesceDefaultsToNone(self):
        self.assertIsNone(coalesce(Unset))

    def testCoalescePreservesFalseyValues(self):
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "x"), "")
        self.assertIsNone(coalesce(None, "x"))


class TestRename(TestCase):
    """Behavioral tests for rename()."""

    def testRenameDirect(self):
        def original():
            pass

        renamed = rename(original, "other")
        self.assertIs(renamed, original)
        self.assertEqual(original.__name__, "other")
        self.assertEqual(original.__qualname__, "other")

    def testRenameDecorator(self):
        @rename("step")
        def original():
            pass

        self.assertEqual(original.__name__, "step")

    def testRenameRejectsBuiltins(self):
        with self.assertRaises(TypeError):
            rename(len, "size")

    def testRenameArity(self):
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):
    """Behavioral tests for mirror()."""

    def testMirrorReturnsCopies(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ["a", {"b": ["c"]}]

        holder = Holder()
        items = holder.items
        items.append("d")
        items[1]["b"].append("e")
        self.assertEqual(holder._items, ["a", {"b": ["c"]}])

    def testMirrorIsReadOnly(self):
        class Holder:
            value = mirror("value")

            def __init__(self):
                self._value = 1

        with self.assertRaises(AttributeError):
            Holder().value = 2

    def testMirrorRejectsNonString(self):
        with self.assertRaises(TypeError):
            mirror(1)


if __name__ == "__main__":
    unittest.main()
