"""
Capstan command layer: declare commands as classes and validate their shape.

What this module provides
- BaseCommand: base class for application commands.
  • command_name / description class attributes.
  • Argument and Flag definitions declared as class attributes (see capstan.arguments),
    collected in declaration order into the read-only class properties `args` / `flags`.
  • A constructor taking a single `raw` flag that wires the logger and prompt
    capabilities in raw (recording) or interactive mode.
  • handle(): the entry point, sync or async, invoked by the kernel after binding.

- validate(command): registration-time structural checks.
- describe(command): plain mapping of a command's metadata, the shape cached in manifests.

Quick start
    from capstan import BaseCommand, Kernel, args, flags

    class Greet(BaseCommand):
        command_name = "greet"
        description = "greet someone"

        name = args.string()
        admin = flags.boolean(alias="a")

        async def handle(self):
            self.logger.info("hello %s" % self.name)

    kernel = Kernel().register([Greet])
"""
from .arguments import Argument, Flag
from .faults import InvalidArgumentOrderError, MissingCommandNameError
from .logger import Logger
from .prompts import Prompt


def _collect(cls, kind, /):
    # base classes first; a subclass redefining a name keeps the base position,
    # shadowing it with anything else drops the definition
    collected = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, kind):
                collected[name] = value
            elif name in collected:
                del collected[name]
    return tuple(collected.values())


class CommandType(type):
    """
    Metaclass that gathers a command's argument and flag definitions.

    Responsibilities
    - Collect Argument and Flag descriptors across the class hierarchy once, at
      class-definition time (no runtime type inspection afterwards).
    - Expose them as read-only `args` and `flags` properties of the class.
    - Provide a readable __repr__ for diagnostics ("command<greet>").
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(cls, name, bases, namespace, **options)
        self._args = _collect(self, Argument)
        self._flags = _collect(self, Flag)
        return self

    @property
    def args(self):
        return self._args

    @property
    def flags(self):
        return self._flags

    def __repr__(self):
        if name := getattr(self, "command_name", None):
            return "command<%s>" % name
        return super().__repr__()


class BaseCommand(metaclass=CommandType):
    """
    Base class for commands dispatched by the kernel.

    Attributes set by the kernel
    - parsed: the mapping produced by the parser ({"_": [...], flag: value, ...}).
    - one attribute per declared argument/flag (property name), when bound.
    """
    command_name = None
    description = None

    def __init__(self, raw=False):
        self.raw = raw
        self.logger = Logger(raw=raw)
        self.prompt = Prompt(raw=raw)
        self.parsed = None

    def handle(self):
        raise NotImplementedError(f"{type(self).__name__} must implement handle()")


def validate(command, /):
    """
    Check that a command class can be registered.

    rules
    - command_name must be a non-empty string.
    - required arguments come before optional ones.
    - a spread argument, if any, is the last declared argument.

    raises
    - MissingCommandNameError (E_MISSING_COMMAND_NAME)
    - InvalidArgumentOrderError (E_INVALID_ARGUMENT_ORDER)
    """
    name = getattr(command, "command_name", None)
    if not isinstance(name, str) or not name.strip():
        raise MissingCommandNameError(
            "missing command name for %r class" % getattr(command, "__name__", command),
            command=command,
        )

    arguments = tuple(getattr(command, "args", ()))
    optional = None

    for index, argument in enumerate(arguments):
        if argument.type == "spread" and index != len(arguments) - 1:
            raise InvalidArgumentOrderError(
                "spread argument %r must be at last position" % argument.name,
                command=command,
                argument=argument,
            )
        if argument.required and optional is not None:
            raise InvalidArgumentOrderError(
                "optional argument %r must be after required argument %r" % (optional.name, argument.name),
                command=command,
                argument=optional,
            )
        if not argument.required and optional is None:
            optional = argument


def describe(command, /):
    """
    Plain metadata of a command: the same shape a manifest entry caches.
    """
    return {
        "commandName": command.command_name,
        "description": getattr(command, "description", None),
        "args": [argument.serialize() for argument in getattr(command, "args", ())],
        "flags": [flag.serialize() for flag in getattr(command, "flags", ())],
    }


__all__ = (
    "BaseCommand",
    "validate",
    "describe",
)
