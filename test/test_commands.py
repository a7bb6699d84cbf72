"""
Commands module behavioral tests (collection, validation, description).

Scope
- Validate argument/flag collection in declaration order, across inheritance.
- Validate registration checks and their messages.
- Validate the manifest-shaped description of a command.
- Validate the raw/interactive wiring of a command instance.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (BaseCommand, validate, describe, args, flags).
"""
import unittest
from unittest import TestCase

from capstan import BaseCommand, args, describe, flags, validate
from capstan.faults import InvalidArgumentOrderError, MissingCommandNameError


class TestCommandCollection(TestCase):
    """Class-level args/flags collected by the command metaclass."""

    def testDeclarationOrder(self):
        class Greet(BaseCommand):
            command_name = "greet"

            name = args.string()
            admin = flags.boolean()
            age = args.string(required=False)
            env = flags.string()

        self.assertEqual([argument.property_name for argument in Greet.args], ["name", "age"])
        self.assertEqual([flag.property_name for flag in Greet.flags], ["admin", "env"])

    def testDashCasedFlagName(self):
        class Greet(BaseCommand):
            command_name = "greet"

            isAdmin = flags.boolean()

        self.assertEqual(Greet.flags[0].name, "is-admin")

    def testInheritedDefinitionsComeFirst(self):
        class Base(BaseCommand):
            verbose = flags.boolean()
            name = args.string()

        class Greet(Base):
            command_name = "greet"

            admin = flags.boolean()
            files = args.spread(required=False)

        self.assertEqual([flag.name for flag in Greet.flags], ["verbose", "admin"])
        self.assertEqual([argument.name for argument in Greet.args], ["name", "files"])
        self.assertEqual([flag.name for flag in Base.flags], ["verbose"])

    def testShadowedDefinitionIsDropped(self):
        class Base(BaseCommand):
            verbose = flags.boolean()

        class Quiet(Base):
            command_name = "quiet"
            verbose = False

        self.assertEqual(Quiet.flags, ())

    def testClassPropertiesAreReadOnly(self):
        class Greet(BaseCommand):
            command_name = "greet"

        with self.assertRaises(AttributeError):
            Greet.flags = ()

    def testRepr(self):
        class Greet(BaseCommand):
            command_name = "greet"

        self.assertEqual(repr(Greet), "command<greet>")

    def testHandleMustBeImplemented(self):
        class Greet(BaseCommand):
            command_name = "greet"

        with self.assertRaises(NotImplementedError):
            Greet().handle()


class TestCommandInstance(TestCase):
    """Per-instance capabilities created by the constructor."""

    def testRawInstance(self):
        class Greet(BaseCommand):
            command_name = "greet"

        command = Greet(True)
        self.assertTrue(command.raw)
        self.assertTrue(command.logger.raw)
        self.assertTrue(command.prompt.raw)
        self.assertIsNone(command.parsed)

    def testInteractiveByDefault(self):
        class Greet(BaseCommand):
            command_name = "greet"

        command = Greet()
        self.assertFalse(command.raw)
        self.assertFalse(command.logger.raw)


class TestValidate(TestCase):
    """Registration checks."""

    def testMissingCommandName(self):
        class Greet(BaseCommand):
            pass

        with self.assertRaises(MissingCommandNameError) as context:
            validate(Greet)
        self.assertEqual(
            str(context.exception),
            "E_MISSING_COMMAND_NAME: missing command name for 'Greet' class",
        )

    def testOptionalBeforeRequired(self):
        class Greet(BaseCommand):
            command_name = "greet"

            name = args.string(required=False)
            age = args.string()

        with self.assertRaises(InvalidArgumentOrderError) as context:
            validate(Greet)
        self.assertEqual(
            str(context.exception),
            "E_INVALID_ARGUMENT_ORDER: optional argument 'name' must be after required argument 'age'",
        )

    def testSpreadNotLast(self):
        class Greet(BaseCommand):
            command_name = "greet"

            files = args.spread()
            name = args.string()

        with self.assertRaises(InvalidArgumentOrderError) as context:
            validate(Greet)
        self.assertEqual(
            str(context.exception),
            "E_INVALID_ARGUMENT_ORDER: spread argument 'files' must be at last position",
        )

    def testValidShapes(self):
        class Greet(BaseCommand):
            command_name = "greet"

            name = args.string()
            age = args.string(required=False)
            files = args.spread(required=False)

        validate(Greet)


class TestDescribe(TestCase):

    def testDescribe(self):
        class Greet(BaseCommand):
            command_name = "greet"
            description = "greet someone"

            name = args.string()
            admin = flags.boolean(alias="a")

        self.assertEqual(describe(Greet), {
            "commandName": "greet",
            "description": "greet someone",
            "args": [{
                "propertyName": "name",
                "name": "name",
                "type": "string",
                "required": True,
                "description": None,
            }],
            "flags": [{
                "propertyName": "admin",
                "name": "admin",
                "type": "boolean",
                "description": None,
                "alias": "a",
            }],
        })


if __name__ == '__main__':
    unittest.main()
