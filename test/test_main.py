"""
Demo entry point tests: exit statuses and the help global flag.

Conventions
- Test method names follow CamelCase per project convention.
- Standard streams are redirected; rich consoles follow sys.stdout/sys.stderr.
"""
import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import TestCase

import main


class TestMain(TestCase):

    def run_main(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            try:
                status = main.main(list(argv))
            except SystemExit as stop:
                status = stop.code
        return status, stdout.getvalue(), stderr.getvalue()

    def testCommandHelp(self):
        status, output, _ = self.run_main("greet", "-h")
        self.assertEqual(status, 0)
        self.assertIn("Usage: greet [name] [flags]", output)

    def testOverviewHelp(self):
        status, output, _ = self.run_main("--help")
        self.assertEqual(status, 0)
        self.assertIn("Available commands", output)
        self.assertIn("inspect", output)

    def testGreet(self):
        status, output, _ = self.run_main("greet", "virk", "-a")
        self.assertEqual(status, 0)
        self.assertIn("hello virk (admin)", output)

    def testUnknownCommandIsReported(self):
        status, _, errors = self.run_main("gret")
        self.assertEqual(status, 1)
        self.assertIn("E_INVALID_COMMAND", errors)


if __name__ == '__main__':
    unittest.main()
