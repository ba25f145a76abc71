"""
Faults module behavioral tests (messages, options, rendering, surfacing).

Scope
- Validate ParseException carries a message and read-only options.
- Validate copy.replace/trigger merge runtime options into a fresh fault.
- Validate __rich__ rendering with and without the style palette.
- Validate shell surfacing prints to stderr and exits with status 1.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from argtrellis import faults
from argtrellis.faults import (
    FaultCode,
    ParseException,
    RepeatedFlagError,
    trigger,
)


class TestParseException(TestCase):
    """Behavioral tests for ParseException and its subclasses."""

    def testMessageAndOptions(self):
        fault = RepeatedFlagError("Repeated flag: -v", code=FaultCode.REPEATED_FLAG, key="-v")
        self.assertEqual(str(fault), "Repeated flag: -v")
        self.assertEqual(fault.options["key"], "-v")
        self.assertIsInstance(fault, ParseException)

    def testOptionsAreReadOnly(self):
        fault = ParseException("boom")
        with self.assertRaises(TypeError):
            fault.options["shell"] = True

    def testMessageMayBeOmitted(self):
        self.assertEqual(str(ParseException()), "")

    def testReplaceMergesOptions(self):
        fault = RepeatedFlagError("Repeated flag: -v", key="-v")
        replaced = copy.replace(fault, shell=False, echo="prog -v")
        self.assertIsNot(replaced, fault)
        self.assertIsInstance(replaced, RepeatedFlagError)
        self.assertEqual(replaced.options["key"], "-v")
        self.assertEqual(replaced.options["echo"], "prog -v")
        self.assertNotIn("echo", fault.options)

    def testCodesAreStable(self):
        self.assertEqual(FaultCode.MISSING_MANDATORY_FLAG, 21101)
        self.assertEqual(FaultCode.CONVERSION_FAILURE, 21202)


class TestRendering(TestCase):
    """Behavioral tests for ParseException.__rich__."""

    def testPlainRendering(self):
        group = ParseException("boom", echo="prog -v", usage="Usage: prog [-v]").__rich__()
        lines = [text.plain for text in group.renderables]
        self.assertEqual(lines, ["Error: boom", "Successfully parsed: prog -v", "", "Usage: prog [-v]"])
        self.assertFalse(group.renderables[0].spans)

    def testRenderingWithoutContext(self):
        group = ParseException("boom").__rich__()
        self.assertEqual([text.plain for text in group.renderables], ["Error: boom"])

    def testColorfulRendering(self):
        group = ParseException("boom", colorful=True, styles={"error-label": "bold red"}).__rich__()
        spans = group.renderables[0].spans
        self.assertTrue(spans)
        self.assertEqual(str(spans[0].style), "bold red")


class TestTrigger(TestCase):
    """Behavioral tests for trigger()."""

    def testTriggerRaisesWithoutShell(self):
        fault = RepeatedFlagError("Repeated flag: -v")
        with self.assertRaises(RepeatedFlagError) as context:
            trigger(fault, echo="prog -v")
        self.assertEqual(context.exception.options["echo"], "prog -v")

    def testTriggerRequiresFaultProtocol(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testShellPrintsAndExits(self):
        buffer = io.StringIO()
        with mock.patch.object(faults, "console", Console(file=buffer, width=120)):
            with self.assertRaises(SystemExit) as context:
                trigger(
                    RepeatedFlagError("Repeated flag: -v"),
                    shell=True,
                    echo="prog -v",
                    usage="Usage: prog [-v]\n\nArguments:\n",
                )
        self.assertEqual(context.exception.code, 1)
        output = buffer.getvalue()
        self.assertIn("Error: Repeated flag: -v\n", output)
        self.assertIn("Successfully parsed: prog -v\n\nUsage: prog [-v]", output)


if __name__ == "__main__":
    unittest.main()
