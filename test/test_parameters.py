"""
Parameters module behavioral tests (builder validation and freezing).

Scope
- Validate name checks and the required/default exclusivity in both orders.
- Validate that constructor keywords go through the same checks as the setters.
- Validate chaining, usage fragments and freezing once owned by a command.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from replicant import Parameter, Command, Value
from replicant.faults import EmptyNameError, RequiredWithDefaultError, OrderingError, FaultCode


def noop(arguments, context):
    pass


class TestParameterBuilder(TestCase):
    """Behavioral tests for Parameter construction and setters."""

    def testDefaultsOfAFreshParameter(self):
        parameter = Parameter("who")
        self.assertEqual(parameter.name, "who")
        self.assertFalse(parameter.required)
        self.assertIsNone(parameter.default)
        self.assertFalse(parameter.variadic)
        self.assertIsNone(parameter.help)

    def testEmptyNameRaises(self):
        with self.assertRaises(EmptyNameError) as context:
            Parameter("")
        self.assertEqual(context.exception.options["code"], FaultCode.EMPTY_NAME)

    def testBlankNameRaises(self):
        with self.assertRaises(EmptyNameError):
            Parameter("   ")

    def testNonStringNameRaises(self):
        with self.assertRaises(TypeError):
            Parameter(42)

    def testSurroundingWhitespaceInNameRaises(self):
        for name in (" who", "who ", "\twho\n"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Parameter(name)

    def testSettersChain(self):
        parameter = Parameter("who").set_required(True).set_help("who to greet")
        self.assertTrue(parameter.required)
        self.assertEqual(parameter.help, "who to greet")

    def testDefaultIsStoredAsValue(self):
        parameter = Parameter("count").set_default(1)
        self.assertEqual(parameter.default, Value(1))

    def testRequiredThenDefaultRaises(self):
        parameter = Parameter("p").set_required(True)
        with self.assertRaises(RequiredWithDefaultError) as context:
            parameter.set_default("x")
        self.assertEqual(context.exception.options["parameter"], "p")
        self.assertIsNone(parameter.default)

    def testDefaultThenRequiredRaises(self):
        parameter = Parameter("p").set_default("x")
        with self.assertRaises(RequiredWithDefaultError):
            parameter.set_required(True)
        self.assertFalse(parameter.required)

    def testConstructorKeywordsAreValidated(self):
        with self.assertRaises(RequiredWithDefaultError):
            Parameter("p", required=True, default="x")

    def testOptionalParameterKeepsItsDefault(self):
        parameter = Parameter("p", default="x").set_required(False)
        self.assertEqual(parameter.default, Value("x"))

    def testInvalidFlagTypesRaise(self):
        with self.assertRaises(TypeError):
            Parameter("p").set_required("yes")
        with self.assertRaises(TypeError):
            Parameter("p").set_variadic(1)

    def testHelpValidation(self):
        with self.assertRaises(TypeError):
            Parameter("p").set_help(3)
        with self.assertRaises(ValueError):
            Parameter("p").set_help("  ")
        self.assertIsNone(Parameter("p", help="text").set_help(None).help)

    def testUsageFragments(self):
        self.assertEqual(Parameter("a", required=True).usage, "a")
        self.assertEqual(Parameter("b").usage, "[b]")
        self.assertEqual(Parameter("c", required=True, variadic=True).usage, "c...")
        self.assertEqual(Parameter("d", variadic=True).usage, "[d...]")


class TestParameterFreezing(TestCase):
    """Parameters owned by a command reject further changes."""

    def testAddedParameterIsFrozen(self):
        parameter = Parameter("p")
        Command("tool", noop, parameter)
        self.assertTrue(parameter.frozen)
        with self.assertRaises(TypeError):
            parameter.set_required(True)
        with self.assertRaises(TypeError):
            parameter.set_default("x")

    def testRejectedParameterStaysMutable(self):
        parameter = Parameter("p", required=True)
        tool = Command("tool", noop, Parameter("q"))
        with self.assertRaises(OrderingError):
            tool.add_parameter(parameter)
        self.assertFalse(parameter.frozen)
        parameter.set_help("still editable")


if __name__ == '__main__':
    unittest.main()
