"""
Binder behavioral tests (positional matching, defaults, variadics, faults).

Scope
- Validate the add example with one, two and three tokens.
- Validate defaults and absent optional parameters.
- Validate variadic parameters in their required and optional forms.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from replicant import bind, Command, Parameter, Value
from replicant.faults import MissingArgumentError, TooManyArgumentsError, BindingError


def noop(arguments, context):
    pass


ADD = Command("add", noop, Parameter("first", required=True), Parameter("second", required=True))


class TestBind(TestCase):
    """Behavioral tests for bind()."""

    def testExactArguments(self):
        self.assertEqual(bind(ADD, ["1", "2"]), {"first": Value("1"), "second": Value("2")})

    def testMissingArgumentRaises(self):
        with self.assertRaises(MissingArgumentError) as context:
            bind(ADD, ["1"])
        self.assertEqual(context.exception.options["parameter"], "second")
        self.assertEqual(context.exception.options["command"], "add")

    def testTooManyArgumentsRaises(self):
        with self.assertRaises(TooManyArgumentsError) as context:
            bind(ADD, ["1", "2", "3"])
        self.assertEqual(context.exception.options["maximum"], 2)
        self.assertEqual(context.exception.options["given"], 3)
        self.assertIn("add first second", context.exception.options["hint"])

    def testBindingFaultsShareABase(self):
        self.assertTrue(issubclass(MissingArgumentError, BindingError))
        self.assertTrue(issubclass(TooManyArgumentsError, BindingError))

    def testDefaultFillsMissingToken(self):
        greet = Command("greet", noop, Parameter("who", default="World"))
        self.assertEqual(bind(greet, []), {"who": Value("World")})
        self.assertEqual(bind(greet, ["Bob"]), {"who": Value("Bob")})

    def testOptionalWithoutDefaultIsAbsent(self):
        greet = Command("greet", noop, Parameter("who"))
        self.assertEqual(bind(greet, []), {})

    def testNoParameters(self):
        ping = Command("ping", noop)
        self.assertEqual(bind(ping, []), {})
        with self.assertRaises(TooManyArgumentsError):
            bind(ping, ["x"])

    def testArgumentOrderFollowsParameters(self):
        self.assertEqual(list(bind(ADD, ["2", "1"])), ["first", "second"])


class TestBindVariadic(TestCase):
    """Variadic parameters absorb the remaining tokens."""

    def testVariadicTakesTheRest(self):
        tool = Command("append", noop, Parameter("first", required=True), Parameter("rest", variadic=True))
        arguments = bind(tool, ["a", "b", "c"])
        self.assertEqual(arguments["first"], Value("a"))
        self.assertEqual(arguments["rest"], Value.sequence(["b", "c"]))

    def testRequiredVariadicNeedsOneToken(self):
        tool = Command("append", noop, Parameter("names", required=True, variadic=True))
        with self.assertRaises(MissingArgumentError):
            bind(tool, [])
        self.assertEqual(len(bind(tool, ["a"])["names"]), 1)

    def testOptionalVariadicBindsEmptySequence(self):
        tool = Command("append", noop, Parameter("names", variadic=True))
        self.assertEqual(bind(tool, [])["names"], Value.sequence([]))

    def testOptionalVariadicBindsDefault(self):
        tool = Command("append", noop, Parameter("names", default="x", variadic=True))
        self.assertEqual(bind(tool, [])["names"], Value.sequence(["x"]))
        self.assertEqual(bind(tool, ["a", "b"])["names"].convert(list), ["a", "b"])


if __name__ == '__main__':
    unittest.main()
