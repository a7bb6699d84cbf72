"""
Help listing for a kernel's commands, rendered with rich tables.

Both registered command classes and manifest entries are listed from plain metadata
(commands.describe() and the cached manifest fields), so manifest commands are listed
without importing their code. Styling degrades to plain text when the console has no
color system.
"""
from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .commands import describe
from .manifest import ManifestEntry


def _metadata(command):
    if isinstance(command, ManifestEntry):
        return {
            "commandName": command.command_name,
            "description": command.description,
            "args": list(command.args),
            "flags": list(command.flags),
        }
    return describe(command)


def _usage_token(argument):
    name = argument.get("name") or argument.get("propertyName")
    if argument.get("type") == "spread":
        name = "..." + name
    return "<%s>" % name if argument.get("required", True) else "[%s]" % name


def _flag_label(flag):
    label = "--" + flag["name"]
    if alias := flag.get("alias"):
        label = "-%s, %s" % (alias, label)
    if (type := flag.get("type", "boolean")) != "boolean":
        label += " <%s>" % type
    return label


def _flags_table(title, flags):
    table = Table(title=title, title_justify="left", show_header=False, box=None, padding=(0, 2))
    table.add_column(style="green", no_wrap=True)
    table.add_column()
    for flag in flags:
        description = flag.get("description") or ""
        if "default" in flag:
            description = ("%s (default: %r)" % (description, flag["default"])).strip()
        table.add_row(_flag_label(flag), description)
    return table


def render_command(command):
    """
    Usage line, arguments and flags of a single command (class or manifest entry).
    """
    metadata = _metadata(command)
    usage = " ".join([metadata["commandName"], *map(_usage_token, metadata["args"])])
    if metadata["flags"]:
        usage += " [flags]"

    parts = [Text.assemble(("Usage: ", "bold yellow"), usage)]
    if metadata["description"]:
        parts.append(Text(metadata["description"]))

    if metadata["args"]:
        table = Table(title="Arguments", title_justify="left", show_header=False, box=None, padding=(0, 2))
        table.add_column(style="green", no_wrap=True)
        table.add_column()
        for argument in metadata["args"]:
            table.add_row(_usage_token(argument), argument.get("description") or "")
        parts.append(table)

    if metadata["flags"]:
        parts.append(_flags_table("Flags", metadata["flags"]))
    return Group(*parts)


def render_commands(commands, global_flags=()):
    """
    Overview of every command, grouped by the prefix before ":" ("make:model" -> "make").
    """
    metadata = sorted(map(_metadata, commands), key=lambda item: item["commandName"])
    parts = [Text.assemble(("Usage: ", "bold yellow"), "command [arguments] [flags]")]

    if global_flags:
        parts.append(_flags_table("Global flags", [
            {"name": flag.name, "alias": flag.alias, "type": flag.type, "description": flag.description}
            for flag in global_flags
        ]))

    table = Table(title="Available commands", title_justify="left", show_header=False, box=None, padding=(0, 2))
    table.add_column(style="green", no_wrap=True)
    table.add_column()
    group = None
    for item in metadata:
        name = item["commandName"]
        prefix = name.split(":", 1)[0] if ":" in name else None
        if prefix != group and prefix is not None:
            table.add_row(Text(prefix, style="bold"), "")
        group = prefix
        table.add_row(("  " if prefix else "") + name, item["description"] or "")
    parts.append(table)
    return Group(*parts)


def print_help(commands, global_flags=(), command=None, *, console=None):
    console = console if console is not None else Console()
    if command is not None:
        console.print(render_command(command))
    else:
        console.print(render_commands(commands, global_flags))


__all__ = (
    "render_command",
    "render_commands",
    "print_help",
)
