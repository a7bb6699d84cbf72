"""
Capstan kernel: register commands, resolve an argument vector and run the match.

Pipeline of handle(argv)
1. no command name (empty argv or a leading "-token"): parse global flags, fire their
   callbacks with command=None and stop.
2. find([name]): local registry first, then the attached manifest; before/after "find"
   hooks observe the result.
3. unknown name: UnknownCommandError carrying suggestions (nothing is printed).
4. instantiate the command and run_command(argv, instance):
   parse → bind arguments → bind flags → global flags → before "run" →
   handle() → after "run".

The kernel never prints nor exits: every failure is raised to the caller, which maps
it to diagnostics and exit codes (see faults.report and main.py).
"""
from .arguments import FLAG_TYPES
from .commands import validate
from .faults import MissingArgumentError, UnknownCommandError
from .help import print_help
from .hooks import Hooks
from .parser import GlobalFlag, Parser
from .suggestions import THRESHOLD, suggest
from .utils import Unset, maybe_await


class Kernel:
    """
    Command registry, global flags, hooks and manifest, for one process.

    Attributes
    - commands: command name -> command class registered with register().
    - flags: flag name -> GlobalFlag registered with flag().
    - manifest: the attached Manifest, or None.
    - manifest_commands: command name -> ManifestEntry, None until the manifest is loaded.

    Setup methods (register, flag, before, after, use_manifest) return the kernel so
    they can be chained.
    """

    def __init__(self):
        self.commands = {}
        self.flags = {}
        self.manifest = None
        self.manifest_commands = None
        self._resolved = {}
        self._hooks = Hooks()

    def register(self, commands):
        """
        Validate and register command classes; the last registration of a name wins.

        Validation fails fast per class: a failing class raises before it is stored,
        classes earlier in the same batch stay registered.
        """
        for command in commands:
            validate(command)
            self.commands[command.command_name] = command
        return self

    def flag(self, name, callback, *, type="boolean", alias=None, default=Unset, description=None):
        """
        Register a global flag; `callback(value, parsed, command)` runs on every invocation
        where the flag is present with a value shaped like `type`.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValueError("global flag name must be a non-empty string")
        if type not in FLAG_TYPES:
            raise ValueError("global flag type must be one of %s" % ", ".join(map(repr, FLAG_TYPES)))
        if not callable(callback):
            raise TypeError("global flag callback must be callable")
        self.flags[name] = GlobalFlag(name, callback, type, alias, default, description)
        return self

    def before(self, event, callback):
        self._hooks.add("before", event, callback)
        return self

    def after(self, event, callback):
        self._hooks.add("after", event, callback)
        return self

    def use_manifest(self, manifest):
        self.manifest = manifest
        return self

    async def preload_manifest(self):
        """
        Load the attached manifest once; returns the entries (empty without a manifest).
        """
        if self.manifest is not None and self.manifest_commands is None:
            self.manifest_commands = await self.manifest.load()
        return self.manifest_commands or {}

    async def _lookup(self, name):
        if name in self.commands:
            return self.commands[name]
        if name in self._resolved:
            return self._resolved[name]
        if self.manifest is None:
            return None
        entry = (await self.preload_manifest()).get(name)
        if entry is None:
            return None
        command = self._resolved[name] = await self.manifest.resolve(entry)
        return command

    async def find(self, argv):
        """
        Resolve the command named by argv[0]; returns the class or None.

        Both "find" hooks receive the final result (None when nothing matched).
        """
        name = next(iter(argv), None)
        command = await self._lookup(name) if name else None
        await self._hooks.execute("before", "find", command)
        await self._hooks.execute("after", "find", command)
        return command

    def get_suggestions(self, name, threshold=THRESHOLD):
        """
        Close matches for `name` among local and manifest command names.
        """
        return suggest(name, [*self.commands, *(self.manifest_commands or ())], threshold)

    def _unknown(self, name):
        suggestions = self.get_suggestions(name)
        options = {"hint": "did you mean %r?" % suggestions[0]} if suggestions else {}
        return UnknownCommandError(
            "%r is not a registered command" % name,
            command_name=name,
            suggestions=suggestions,
            **options,
        )

    async def handle(self, argv):
        """
        Run the command named by argv[0] with the remaining tokens; returns its result.
        """
        argv = list(argv)
        if not argv or argv[0].startswith("-"):
            parser = Parser(self.flags)
            parser.apply_global_flags(parser.parse(argv), None)
            return None

        command = await self.find(argv)
        if command is None:
            raise self._unknown(argv[0])
        return await self.run_command(argv, command())

    async def exec(self, command_name, args=()):
        """
        Run a command programmatically, as if invoked with [command_name, *args].
        """
        command = await self.find([command_name])
        if command is None:
            raise self._unknown(command_name)
        return await self.run_command([command_name, *args], command())

    async def run_command(self, argv, instance):
        """
        Parse argv[1:] for `instance`, bind values onto it and run it between the "run" hooks.
        """
        command = type(instance)
        parser = Parser(self.flags)
        parsed = parser.parse(argv[1:], command)

        # computed before any assignment so a missing argument leaves the instance untouched
        values = self._argument_values(command, parsed)
        for flag in getattr(command, "flags", ()):
            if flag.name in parsed:
                values[flag.property_name] = parsed[flag.name]

        instance.parsed = parsed
        for name, value in values.items():
            setattr(instance, name, value)

        parser.apply_global_flags(parsed, command)

        await self._hooks.execute("before", "run", instance)
        result = await maybe_await(instance.handle())
        await self._hooks.execute("after", "run", instance)
        return result

    def _argument_values(self, command, parsed):
        positionals = parsed["_"]
        values = {}
        for index, argument in enumerate(getattr(command, "args", ())):
            if argument.type == "spread":
                value = list(positionals[index:])
                present = bool(value)
            else:
                present = index < len(positionals)
                value = positionals[index] if present else None

            if not present and argument.required:
                raise MissingArgumentError(
                    "missing required argument %r" % argument.name,
                    argument_name=argument.name,
                    command=command,
                )
            if present or argument.type == "spread":
                values[argument.property_name] = value
        return values

    def print_help(self, command=None, *, console=None):
        """
        Print the command overview, or the usage of one command (class or manifest entry).

        Manifest commands are listed only once loaded (see preload_manifest).
        """
        listing = list(self.commands.values())
        listing += [
            entry for name, entry in (self.manifest_commands or {}).items()
            if name not in self.commands
        ]
        print_help(listing, tuple(self.flags.values()), command, console=console)


__all__ = ("Kernel",)
