"""
Faults module tests (taxonomy, options, rendering, trigger).

Scope
- Validate the exception hierarchy hosts can catch broadly.
- Validate that copy.replace merges options without mutating the original.
- Validate plain and fancy rendering through rich.
- Validate trigger() raising, warning and shell rendering.

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import io
import unittest
from types import MappingProxyType
from unittest import TestCase, mock

from rich.console import Console

from replicant import faults
from replicant.faults import (
    FaultCode,
    ReplException,
    ValidationError,
    DispatchError,
    EmptyNameError,
    OrderingError,
    ParseError,
    ConversionError,
    UnknownCommandError,
    HandlerError,
    MissingArgumentError,
    LateRegistrationWarning,
    ReplWarning,
    trigger,
)


def render(renderable):
    console = Console(file=io.StringIO(), width=80)
    console.print(renderable)
    return console.file.getvalue()


class TestTaxonomy(TestCase):
    """Catchable families."""

    def testValidationFamily(self):
        for fault in (EmptyNameError, OrderingError):
            with self.subTest(fault=fault):
                self.assertTrue(issubclass(fault, ValidationError))
                self.assertTrue(issubclass(fault, ReplException))

    def testDispatchFamily(self):
        for fault in (ParseError, ConversionError, UnknownCommandError, HandlerError, MissingArgumentError):
            with self.subTest(fault=fault):
                self.assertTrue(issubclass(fault, DispatchError))

    def testWarningsAreWarnings(self):
        self.assertTrue(issubclass(LateRegistrationWarning, ReplWarning))
        self.assertTrue(issubclass(LateRegistrationWarning, Warning))


class TestFaultOptions(TestCase):
    """Messages, options and copy.replace."""

    def testMessageAndOptions(self):
        fault = UnknownCommandError("unknown command 'x'", title="unknown command", command="x")
        self.assertEqual(str(fault), "unknown command 'x'")
        self.assertIsInstance(fault.options, MappingProxyType)
        self.assertEqual(fault.options["command"], "x")

    def testReplaceMergesOptions(self):
        fault = UnknownCommandError("unknown command 'x'", title="unknown command")
        replaced = copy.replace(fault, app="MyApp")
        self.assertIsInstance(replaced, UnknownCommandError)
        self.assertEqual(replaced.options["app"], "MyApp")
        self.assertEqual(replaced.options["title"], "unknown command")
        self.assertNotIn("app", fault.options)

    def testReplaceKeepsCause(self):
        try:
            try:
                raise ValueError("boom")
            except ValueError as exception:
                raise HandlerError("command 'x' failed: boom") from exception
        except HandlerError as fault:
            self.assertIsInstance(copy.replace(fault, colorful=True).__cause__, ValueError)

    def testNormalizeWithoutOverrides(self):
        self.assertEqual(FaultCode.UNKNOWN_COMMAND.normalize(), "11101")

    def testNormalizeWithHostLabels(self):
        main = __import__("__main__")
        with mock.patch.object(main, "__codes__", {FaultCode.UNKNOWN_COMMAND: "E-UNKNOWN"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_COMMAND.normalize(), "E-UNKNOWN")


class TestRendering(TestCase):
    """Rich rendering of faults."""

    def testPlainRendering(self):
        fault = UnknownCommandError(
            "unknown command 'x'",
            title="unknown command",
            code=FaultCode.UNKNOWN_COMMAND,
            hint="type 'help' to list the available commands",
            app="MyApp",
        )
        self.assertEqual(render(fault), "\n".join([
            "[ MyApp — 11101 | Unknown Command ]",
            "unknown command 'x'",
            " → type 'help' to list the available commands",
            "",
        ]))

    def testFancyRenderingUsesAPanel(self):
        fault = UnknownCommandError("unknown command 'x'", title="unknown command", app="MyApp", fancy=True)
        rendered = render(fault)
        self.assertIn("Unknown Command", rendered)
        self.assertIn("╭", rendered)

    def testColorfulRenderingKeepsTheText(self):
        fault = ParseError("unterminated quote", title="parse error", app="MyApp", colorful=True)
        self.assertIn("unterminated quote", render(fault))


class TestTrigger(TestCase):
    """Surfacing faults."""

    def testTriggerRaisesErrors(self):
        with self.assertRaises(OrderingError) as context:
            trigger(OrderingError("bad order", title="ordering error"), parameter="p")
        self.assertEqual(context.exception.options["parameter"], "p")

    def testTriggerWarns(self):
        with self.assertWarns(LateRegistrationWarning):
            trigger(LateRegistrationWarning("late", title="late registration"))

    def testTriggerInShellModePrints(self):
        console = Console(file=io.StringIO(), width=80)
        with mock.patch.object(faults, "console", console):
            trigger(UnknownCommandError("unknown command 'x'", title="unknown command", app="MyApp"), shell=True)
        self.assertIn("unknown command 'x'", console.file.getvalue())

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))


if __name__ == '__main__':
    unittest.main()
