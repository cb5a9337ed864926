# python
"""
Faults module behavioral tests (codes, options, trigger, rendering).

Scope
- Validate fault construction: message, read-only options, code/title defaults.
- Validate trigger(): raise outside the shell, render (and exit) inside it,
  warnings through the warnings module.
- Validate host hooks in __main__ (__codes__, __docs__).

Conventions
- Test method names follow CamelCase per project convention.
- Console output is captured with a plain, colorless rich Console.
"""

from __future__ import annotations

import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console, Group
from rich.panel import Panel

from argstep import (
    FaultCode,
    CommandException,
    DefinitionError,
    ParseError,
    UnknownFlagError,
    MissingPositionalError,
    DuplicateLongNameError,
    EmptyOptionValueWarning,
    trigger,
    getdoc,
)


def _capture():
    return Console(file=io.StringIO(), width=200, color_system=None, force_terminal=False)


class TestFaultObjects(TestCase):
    """Construction and read-only context."""

    def testMessageAndOptions(self):
        fault = UnknownFlagError("unknown flag '--x'", input="--x", index=1, hint="did you mean '--y'?")
        self.assertEqual(fault.message, "unknown flag '--x'")
        self.assertEqual(str(fault), "unknown flag '--x'")
        self.assertEqual(fault.options["index"], 1)

    def testOptionsAreReadOnly(self):
        fault = UnknownFlagError("m", input="--x")
        with self.assertRaises(TypeError):
            fault.options["input"] = "--y"

    def testClassDefaults(self):
        fault = MissingPositionalError("m")
        self.assertIs(fault.code, FaultCode.MISSING_POSITIONAL)
        self.assertEqual(fault.title, "missing positional")

    def testTitleOverride(self):
        self.assertEqual(UnknownFlagError("m", title="bad flag").title, "bad flag")

    def testHierarchy(self):
        self.assertTrue(issubclass(UnknownFlagError, ParseError))
        self.assertTrue(issubclass(ParseError, CommandException))
        self.assertTrue(issubclass(DuplicateLongNameError, DefinitionError))
        self.assertTrue(issubclass(DefinitionError, ValueError))
        self.assertFalse(issubclass(ParseError, ValueError))

    def testReplaceKeepsTypeAndMessage(self):
        fault = UnknownFlagError("m", input="--x")
        replaced = copy.replace(fault, shell=True)
        self.assertIsInstance(replaced, UnknownFlagError)
        self.assertEqual(replaced.message, "m")
        self.assertEqual(replaced.options["input"], "--x")
        self.assertTrue(replaced.options["shell"])
        self.assertNotIn("shell", fault.options)

    def testCodesAreStable(self):
        self.assertEqual(FaultCode.UNKNOWN_FLAG, 11101)
        self.assertEqual(FaultCode.DUPLICATE_LONG_NAME, 21001)
        self.assertEqual(FaultCode.EMPTY_INLINE_VALUE, 12101)


class TestTrigger(TestCase):
    """Surfacing faults."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnknownFlagError) as context:
            trigger(UnknownFlagError("unknown flag '--x'", input="--x"))
        self.assertEqual(context.exception.options["input"], "--x")

    def testShellDeferredRendersOnly(self):
        capture = _capture()
        with mock.patch("argstep.faults.console", capture):
            trigger(UnknownFlagError("unknown flag '--x'", hint="did you mean '--y'?"), shell=True, deferred=True)
        output = capture.file.getvalue()
        self.assertIn("11101", output)
        self.assertIn("Unknown Flag", output)
        self.assertIn("unknown flag '--x'", output)
        self.assertIn("did you mean '--y'?", output)

    def testShellExits(self):
        with mock.patch("argstep.faults.console", _capture()):
            with self.assertRaises(SystemExit) as context:
                trigger(UnknownFlagError("m"), shell=True)
        self.assertEqual(context.exception.code, 1)

    def testWarningGoesThroughWarnings(self):
        with self.assertWarns(EmptyOptionValueWarning):
            trigger(EmptyOptionValueWarning("empty inline value"))

    def testWarningInShellRenders(self):
        capture = _capture()
        with mock.patch("argstep.faults.console", capture):
            trigger(EmptyOptionValueWarning("empty inline value"), shell=True)
        self.assertIn("empty inline value", capture.file.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(object())


class TestRendering(TestCase):
    """Rich renderables and host hooks."""

    def testPlainRenderIsGroup(self):
        self.assertIsInstance(UnknownFlagError("m").__rich__(), Group)

    def testFancyRenderIsPanel(self):
        self.assertIsInstance(UnknownFlagError("m", fancy=True).__rich__(), Panel)

    def testBaseClassesRender(self):
        capture = _capture()
        capture.print(ParseError("parse went wrong"))
        capture.print(CommandException("something went wrong"))
        output = capture.file.getvalue()
        self.assertIn("Parse Failed", output)
        self.assertIn("parse went wrong", output)
        self.assertIn("| Error ]", output)
        self.assertIn("something went wrong", output)
        self.assertNotIn("—", output)

    def testCodeShownWhenPresent(self):
        capture = _capture()
        capture.print(DuplicateLongNameError("m"))
        self.assertIn("— 21001 |", capture.file.getvalue())

    def testProgFromMain(self):
        capture = _capture()
        with mock.patch.object(sys.modules["__main__"], "__prog__", "tool", create=True):
            capture.print(UnknownFlagError("m"))
        self.assertIn("tool", capture.file.getvalue())

    def testHostCodes(self):
        codes = {FaultCode.UNKNOWN_FLAG: "E-FLAG"}
        with mock.patch.object(sys.modules["__main__"], "__codes__", codes, create=True):
            self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "E-FLAG")
            self.assertEqual(FaultCode.MISSING_TRAIL.normalize(), "11203")

    def testGetdoc(self):
        docs = {FaultCode.UNKNOWN_FLAG: "the flag is not declared"}
        with mock.patch.object(sys.modules["__main__"], "__docs__", docs, create=True):
            self.assertEqual(getdoc(FaultCode.UNKNOWN_FLAG), "the flag is not declared")
            self.assertIsNone(getdoc(FaultCode.MISSING_TRAIL))
        with self.assertRaises(TypeError):
            getdoc(11101)


if __name__ == "__main__":
    unittest.main()
