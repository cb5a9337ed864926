# python
"""
DefinitionSet behavioral tests (validation and indexes).

Scope
- Validate that every logically inconsistent set raises the matching
  DefinitionError subclass, with the first violation winning.
- Validate the read-only indexes (flags, aliases, positionals, trail,
  subcommands) and the terminator detection.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argstep import (
    ArgDef,
    ArgumentKind,
    DefinitionSet,
    DefinitionError,
    DuplicateLongNameError,
    DuplicateShortAliasError,
    MultipleTrailsError,
    MultipleTerminatorsError,
    InvalidLongNameError,
    InvalidShortAliasError,
    MixedSubcommandError,
    IncompleteDefinitionError,
    FaultCode,
)


class TestValidation(TestCase):
    """Inconsistent definitions are rejected on build."""

    def testDuplicateLongNameAcrossFlags(self):
        with self.assertRaises(DuplicateLongNameError) as context:
            DefinitionSet([ArgDef.named("name").switch(), ArgDef.named("name").option()])
        self.assertEqual(context.exception.options["name"], "name")
        self.assertEqual(context.exception.options["index"], 2)
        self.assertEqual(context.exception.options["previous"], 1)

    def testDuplicateLongNameAcrossKinds(self):
        with self.assertRaises(DuplicateLongNameError):
            DefinitionSet([ArgDef.positional("target"), ArgDef.named("target").option()])

    def testDuplicateShortAlias(self):
        with self.assertRaises(DuplicateShortAliasError):
            DefinitionSet([ArgDef.named_and_short("verbose", "v").switch(), ArgDef.short("v").option()])

    def testShortOnlyAliasClashesWithLongName(self):
        with self.assertRaises(DuplicateLongNameError) as context:
            DefinitionSet([ArgDef.named("x").option(), ArgDef.short("x").option()])
        self.assertEqual(context.exception.options["name"], "x")
        with self.assertRaises(DuplicateLongNameError):
            DefinitionSet([ArgDef.short("x").switch(), ArgDef.named("x").switch()])
        with self.assertRaises(DuplicateLongNameError):
            DefinitionSet([ArgDef.positional("x"), ArgDef.short("x").switch()])

    def testFlagMayUseItsNameAsAlias(self):
        definitions = DefinitionSet([ArgDef.named_and_short("x", "x").switch()])
        self.assertIs(definitions.long("x"), definitions.short("x"))

    def testMultipleTrails(self):
        with self.assertRaises(MultipleTrailsError):
            DefinitionSet([ArgDef.required_trail(), ArgDef.optional_trail()])

    def testMultipleTerminators(self):
        with self.assertRaises(MultipleTerminatorsError):
            DefinitionSet([ArgDef.named("").switch(), ArgDef.named("").switch()])

    def testDashedLongNameRejected(self):
        with self.assertRaises(InvalidLongNameError):
            DefinitionSet([ArgDef.named("--verbose").switch()])

    def testLongNameWithEqualsRejected(self):
        with self.assertRaises(InvalidLongNameError):
            DefinitionSet([ArgDef.named("a=b").option()])

    def testEmptyNameReservedForTerminatorSwitch(self):
        with self.assertRaises(InvalidLongNameError):
            DefinitionSet([ArgDef.named("").option()])
        with self.assertRaises(InvalidLongNameError):
            DefinitionSet([ArgDef.positional("")])

    def testTerminatorCannotHaveAlias(self):
        with self.assertRaises(InvalidLongNameError):
            DefinitionSet([ArgDef.named_and_short("", "t").switch()])

    def testInvalidShortAliases(self):
        for alias in ("vv", "-", "=", " "):
            with self.subTest(alias=alias), self.assertRaises(InvalidShortAliasError):
                DefinitionSet([ArgDef.short(alias).switch()])

    def testSubcommandsCannotMixWithPositionals(self):
        with self.assertRaises(MixedSubcommandError):
            DefinitionSet([ArgDef.positional("file"), ArgDef.subcommand("build")])
        with self.assertRaises(MixedSubcommandError):
            DefinitionSet([ArgDef.subcommand("build"), ArgDef.optional_trail()])

    def testNonDefinitionEntry(self):
        with self.assertRaises(IncompleteDefinitionError) as context:
            DefinitionSet([ArgDef.positional("a"), "b"])
        self.assertIsInstance(context.exception, TypeError)
        self.assertEqual(context.exception.options["index"], 2)

    def testFirstViolationWins(self):
        with self.assertRaises(DuplicateLongNameError):
            DefinitionSet([
                ArgDef.named("a").switch(),
                ArgDef.named("a").switch(),
                ArgDef.required_trail(),
                ArgDef.required_trail(),
            ])

    def testDefinitionErrorsAreValueErrors(self):
        with self.assertRaises(ValueError):
            DefinitionSet([ArgDef.required_trail(), ArgDef.required_trail()])

    def testErrorCarriesCodeAndPositionFirstMessage(self):
        with self.assertRaises(DefinitionError) as context:
            DefinitionSet([ArgDef.named("x").switch(), ArgDef.named("x").switch()])
        self.assertEqual(context.exception.code, FaultCode.DUPLICATE_LONG_NAME)
        self.assertTrue(context.exception.message.startswith("second definition"))

    def testStringArgumentRejected(self):
        with self.assertRaises(TypeError):
            DefinitionSet("verbose")

    def testNonIterableArgumentRejected(self):
        with self.assertRaises(TypeError):
            DefinitionSet(42)


class TestIndexes(TestCase):
    """Lookup tables built from a valid set."""

    def setUp(self):
        self.definitions = DefinitionSet.build([
            ArgDef.positional("src"),
            ArgDef.positional("dst"),
            ArgDef.optional_trail("rest"),
            ArgDef.named_and_short("verbose", "v").switch(),
            ArgDef.short("q").switch(),
            ArgDef.named("exclude").option(),
            ArgDef.named(""),
        ])

    def testPositionalsKeepDeclarationOrder(self):
        self.assertEqual([definition.name for definition in self.definitions.positionals], ["src", "dst"])

    def testTrail(self):
        self.assertEqual(self.definitions.trail.kind, ArgumentKind.OPTIONAL_TRAIL)
        self.assertEqual(self.definitions.trail.name, "rest")

    def testFlagsByLongName(self):
        self.assertEqual(set(self.definitions.flags), {"verbose", "exclude", ""})
        self.assertIs(self.definitions.long("verbose"), self.definitions.short("v"))
        self.assertIsNone(self.definitions.long("q"))

    def testAliases(self):
        self.assertEqual(set(self.definitions.aliases), {"v", "q"})
        self.assertEqual(self.definitions.short("q").label, "q")

    def testUnfinishedFlagBecomesTerminatorSwitch(self):
        self.assertTrue(self.definitions.terminator)
        self.assertIs(self.definitions.long("").kind, ArgumentKind.SWITCH)

    def testIndexesAreReadOnly(self):
        with self.assertRaises(TypeError):
            self.definitions.flags["new"] = ArgDef.named("new").switch()
        with self.assertRaises(AttributeError):
            self.definitions.positionals.append(ArgDef.positional("x"))
        with self.assertRaises(AttributeError):
            self.definitions.trail = None

    def testIterationAndLength(self):
        self.assertEqual(len(self.definitions), 7)
        self.assertTrue(all(isinstance(definition, ArgDef) for definition in self.definitions))

    def testNoTerminatorByDefault(self):
        self.assertFalse(DefinitionSet([ArgDef.positional("a")]).terminator)

    def testEmptySet(self):
        definitions = DefinitionSet()
        self.assertEqual(len(definitions), 0)
        self.assertIsNone(definitions.trail)
        self.assertEqual(definitions.subcommands, {})

    def testSubcommands(self):
        definitions = DefinitionSet([ArgDef.subcommand("build"), ArgDef.named("verbose").switch()])
        self.assertEqual(list(definitions.subcommands), ["build"])

    def testRepr(self):
        self.assertTrue(repr(self.definitions).startswith("definition-set(arg-def("))


if __name__ == "__main__":
    unittest.main()
