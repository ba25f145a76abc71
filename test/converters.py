"""
Converters module behavioral tests (built-in first steps and constraints).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import os
import pathlib
import tempfile
import unittest
from unittest import TestCase

from argtrellis import ConversionError, chain, existing, integer, number, string, unsigned, within


class TestConverters(TestCase):
    """Behavioral tests for the built-in conversion steps."""

    def testStringIsIdentity(self):
        self.assertEqual(string("abc"), "abc")

    def testInteger(self):
        self.assertEqual(integer("-12"), -12)

    def testIntegerRejectsText(self):
        with self.assertRaises(ConversionError) as context:
            integer("ten")
        self.assertEqual(context.exception.message, "Could not interpret argument as integer.")

    def testUnsigned(self):
        self.assertEqual(unsigned("0"), 0)
        with self.assertRaises(ConversionError) as context:
            unsigned("-1")
        self.assertEqual(
            context.exception.message,
            "Could not interpret argument as integer greater or equal to 0.",
        )

    def testNumber(self):
        self.assertEqual(number("1.5"), 1.5)
        with self.assertRaises(ConversionError):
            number("fast")

    def testExistingAcceptsFiles(self):
        with tempfile.NamedTemporaryFile(delete=False) as handle:
            name = handle.name
        try:
            self.assertEqual(existing(name), pathlib.Path(name))
        finally:
            os.unlink(name)

    def testExistingRejectsMissingFiles(self):
        with tempfile.TemporaryDirectory() as directory:
            missing = os.path.join(directory, "absent.txt")
            with self.assertRaises(ConversionError) as context:
                existing(missing)
        self.assertEqual(context.exception.message, "File %s does not exist." % missing)


class TestWithin(TestCase):
    """Behavioral tests for the within() range constraint."""

    def testInclusiveBounds(self):
        constraint = within(0, 50)
        self.assertEqual(constraint(0), 0)
        self.assertEqual(constraint(50), 50)

    def testOutOfRange(self):
        with self.assertRaises(ConversionError) as context:
            within(0, 50)(51)
        self.assertEqual(
            context.exception.message,
            "Expected value to be between 0(inclusive) and 50(inclusive).",
        )

    def testExclusiveBounds(self):
        constraint = within(0, 10, inclusive=(False, True))
        with self.assertRaises(ConversionError) as context:
            constraint(0)
        self.assertEqual(
            context.exception.message,
            "Expected value to be between 0(exclusive) and 10(inclusive).",
        )
        self.assertEqual(constraint(10), 10)

    def testInvertedBoundsRejected(self):
        with self.assertRaises(ValueError):
            within(5, 1)

    def testChainedWithInteger(self):
        watts = chain(integer, within(0, 50))
        self.assertEqual(watts("10"), 10)
        with self.assertRaises(ConversionError):
            watts("80")


if __name__ == "__main__":
    unittest.main()
