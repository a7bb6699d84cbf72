"""
Help rendering tests against a captured console without colors.
"""
import io
import unittest
from unittest import TestCase

from rich.console import Console

from capstan import BaseCommand, Kernel, ManifestEntry, args, flags


def _console():
    return Console(file=io.StringIO(), color_system=None, width=100)


class Greet(BaseCommand):
    command_name = "greet"
    description = "Greet someone"

    name = args.string(description="who to greet")
    files = args.spread(required=False)
    admin = flags.boolean(alias="a", description="greet as an administrator")
    retries = flags.number(default=3)

    def handle(self):
        pass


class MakeModel(BaseCommand):
    command_name = "make:model"
    description = "Create a model"

    def handle(self):
        pass


class TestHelp(TestCase):

    def render(self, kernel, command=None):
        console = _console()
        kernel.print_help(command, console=console)
        return console.file.getvalue()

    def testCommandListing(self):
        kernel = Kernel().register([Greet, MakeModel])
        kernel.flag("ansi", lambda *values: None, description="force colors")
        output = self.render(kernel)

        self.assertIn("Available commands", output)
        self.assertIn("greet", output)
        self.assertIn("Greet someone", output)
        self.assertIn("make:model", output)
        self.assertIn("Global flags", output)
        self.assertIn("--ansi", output)
        self.assertIn("force colors", output)
        lines = [line.strip() for line in output.splitlines()]
        model = next(index for index, line in enumerate(lines) if line.startswith("make:model"))
        self.assertLess(lines.index("make"), model)

    def testManifestEntriesAreListed(self):
        kernel = Kernel().register([Greet])
        kernel.manifest_commands = {
            "serve": ManifestEntry("serve", "commands/serve.py", "Start the server"),
            "greet": ManifestEntry("greet", "commands/greet.py", "Shadowed by the local command"),
        }
        output = self.render(kernel)

        self.assertIn("Start the server", output)
        self.assertNotIn("Shadowed by the local command", output)

    def testCommandUsage(self):
        output = self.render(Kernel(), Greet)

        self.assertIn("Usage: greet <name> [...files] [flags]", output)
        self.assertIn("who to greet", output)
        self.assertIn("-a, --admin", output)
        self.assertIn("--retries <number>", output)
        self.assertIn("(default: 3)", output)

    def testManifestEntryUsage(self):
        entry = ManifestEntry(
            "serve",
            "commands/serve.py",
            "Start the server",
            args=({"name": "port", "type": "string", "required": True},),
            flags=({"name": "watch", "type": "boolean", "alias": "w"},),
        )
        output = self.render(Kernel(), entry)

        self.assertIn("Usage: serve <port> [flags]", output)
        self.assertIn("-w, --watch", output)


if __name__ == '__main__':
    unittest.main()
