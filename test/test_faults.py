"""
Fault tests: codes, options and rich rendering.
"""
import io
import unittest
from unittest import TestCase

from rich.console import Console

from capstan.faults import *


class TestFaults(TestCase):

    def testMessageIsPrefixedWithCode(self):
        fault = MissingArgumentError("missing required argument 'name'", argument_name="name")
        self.assertEqual(str(fault), "E_MISSING_ARGUMENT: missing required argument 'name'")
        self.assertEqual(fault.code, FaultCode.MISSING_ARGUMENT)

    def testOptionsAreReadOnlyAttributes(self):
        fault = UnknownCommandError("'gret' is not a registered command", command_name="gret", suggestions=["greet"])
        self.assertEqual(fault.command_name, "gret")
        self.assertEqual(fault.suggestions, ["greet"])
        with self.assertRaises(TypeError):
            fault.options["command_name"] = "other"
        with self.assertRaises(AttributeError):
            fault.missing

    def testEveryCodeHasAnError(self):
        codes = {
            error.code for error in (
                MissingCommandNameError,
                InvalidArgumentOrderError,
                InvalidManifestError,
                CommandLoadError,
                UnknownCommandError,
                MissingArgumentError,
                InvalidFlagError,
            )
        }
        self.assertEqual(codes, set(FaultCode))

    def testReport(self):
        console = Console(file=io.StringIO(), color_system=None, width=100)
        report(UnknownCommandError("'gret' is not a registered command", hint="did you mean 'greet'?"), console=console)
        output = console.file.getvalue()
        self.assertIn("E_INVALID_COMMAND", output)
        self.assertIn("Unknown Command", output)
        self.assertIn("did you mean 'greet'?", output)

    def testReportReraisesForeignErrors(self):
        with self.assertRaises(KeyError):
            report(KeyError("name"), console=Console(file=io.StringIO()))


if __name__ == '__main__':
    unittest.main()
