"""
Capstan faults (errors) and rendering.

Scope
- FaultCode: canonical, stable string identifiers for every failure the kernel raises.
- CapstanException: base type that carries a code, a message and read-only options,
  and knows how to render itself with rich.
- report(): print a fault on a console; intended for thin entry points, the kernel
  itself never prints nor exits.

Taxonomy
- registration: E_MISSING_COMMAND_NAME, E_INVALID_ARGUMENT_ORDER
- manifest: E_INVALID_MANIFEST, E_COMMAND_LOAD_FAILURE
- execution: E_INVALID_COMMAND, E_MISSING_ARGUMENT, E_INVALID_FLAG

Options
- every keyword given at construction is kept in `options` (read-only) and is also
  readable as an attribute: MissingArgumentError(...).argument_name.
"""
from enum import StrEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(StrEnum):
    """
    canonical fault codes raised by the kernel (stable identifiers).

    the string value prefixes every message ("E_MISSING_ARGUMENT: ...") so callers
    can grep logs and map codes to exit statuses without parsing prose.
    """
    # --- registration ---
    MISSING_COMMAND_NAME    = "E_MISSING_COMMAND_NAME"
    INVALID_ARGUMENT_ORDER  = "E_INVALID_ARGUMENT_ORDER"

    # --- manifest ---
    INVALID_MANIFEST        = "E_INVALID_MANIFEST"
    COMMAND_LOAD_FAILURE    = "E_COMMAND_LOAD_FAILURE"

    # --- execution ---
    INVALID_COMMAND         = "E_INVALID_COMMAND"
    MISSING_ARGUMENT        = "E_MISSING_ARGUMENT"
    INVALID_FLAG            = "E_INVALID_FLAG"


class CapstanException(Exception):
    code = None
    title = "error"

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        self.message = "%s: %s" % (self.code, message) if self.code else message
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    def __getattr__(self, name):
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError("%r object has no attribute %r" % (type(self).__name__, name)) from None

    def __rich__(self):
        colorful = console.color_system is not None

        def text(fragment, style=""):
            return Text(str(fragment), style if colorful else "")

        header = Text.assemble(
            "[ ",
            text(self.code or type(self).__name__, "bold #00E5FF"),
            " | ",
            text(self.title.title(), "bold #FF4DA6"),
            " ]"
        )
        body = [text(self.message, "#C8C8D0")]
        if hint := self.options.get("hint"):
            body.append(Text.assemble(text(" → ", "#9CE19C dim"), text(hint, "italic #9CE19C")))
        return Panel(Group(*body), title=header, title_align="left")


class MissingCommandNameError(CapstanException):
    code = FaultCode.MISSING_COMMAND_NAME
    title = "missing command name"


class InvalidArgumentOrderError(CapstanException):
    code = FaultCode.INVALID_ARGUMENT_ORDER
    title = "invalid argument order"


class InvalidManifestError(CapstanException):
    code = FaultCode.INVALID_MANIFEST
    title = "invalid manifest"


class CommandLoadError(CapstanException):
    code = FaultCode.COMMAND_LOAD_FAILURE
    title = "unable to load command"


class UnknownCommandError(CapstanException):
    code = FaultCode.INVALID_COMMAND
    title = "unknown command"


class MissingArgumentError(CapstanException):
    code = FaultCode.MISSING_ARGUMENT
    title = "missing argument"


class InvalidFlagError(CapstanException):
    code = FaultCode.INVALID_FLAG
    title = "invalid flag"


def report(fault, /, *, console=console):
    """
    print a fault on the given console (stderr by default).

    contract
    - fault must be a CapstanException; anything else is re-raised untouched so
      programming errors are not disguised as diagnostics.
    """
    if not isinstance(fault, CapstanException):
        raise fault
    console.print(fault)


__all__ = (
    "FaultCode",
    "CapstanException",
    "MissingCommandNameError",
    "InvalidArgumentOrderError",
    "InvalidManifestError",
    "CommandLoadError",
    "UnknownCommandError",
    "MissingArgumentError",
    "InvalidFlagError",
    "report",
)
