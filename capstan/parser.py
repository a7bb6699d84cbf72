r"""
Raw option parsing: turn a token vector into positionals and typed flags.

Output shape
- a plain dict: {"_": [positional, ...], "<flag>": value, ...}
  • positionals keep their input order.
  • a flag used through its alias is stored under both the primary name and the alias.
  • absent flags are absent from the mapping unless a default was declared.

Token grammar
- "--"              every following token is positional.
- "--name=value"    inline value (value may be empty).
- "--name value"    spaced value; the next token is consumed when it is not itself a
                    flag and the flag is declared with a value-bearing type.
- "--name"          presence (True for booleans and undeclared flags, "" for strings).
- "--no-name"       negation, always False.
- "-abc"            cluster of short flags; a value-bearing letter takes the rest of the
                    cluster ("-n5") or the next token.
- "-a=value"        inline value for the last letter of the cluster.
- "-5", "-1.5"      negative numbers are positionals, not flags.

Coercion per declared type
- boolean   always bool; "false", "0", "no" and "off" (any case) are False.
- string    always str.
- number    int when possible, else float; anything else raises InvalidFlagError.
- array     list of str, repeated flags accumulate.
- numArray  list of numbers, repeated flags accumulate.
- undeclared flags keep the parsed shape (True/False or the raw string).
"""
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Callable

from .faults import InvalidFlagError
from .utils import Unset

FALSY = frozenset(("false", "0", "no", "off"))
NUMBER = re.compile(r"-\d+(\.\d+)?([eE][-+]?\d+)?")
# plain decimal notation only: no "_" separators, padding, "nan" or "inf"
INTEGER = re.compile(r"[-+]?\d+", re.ASCII)
NUMERIC = re.compile(r"[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class GlobalFlag:
    """A flag observed across every invocation, independent of any command."""

    name: str
    callback: Callable[..., Any]
    type: str = "boolean"
    alias: str | None = None
    default: Any = Unset
    description: str | None = None


def _is_flag(token):
    return token.startswith("-") and token != "-" and not NUMBER.fullmatch(token)


def _number(name, raw):
    if INTEGER.fullmatch(raw):
        return int(raw)
    if NUMERIC.fullmatch(raw):
        return float(raw)
    raise InvalidFlagError(
        "expected numeric value for %r flag, got %r" % (name, raw),
        flag_name=name,
        expected="number",
    )


def matches(type, value, /):
    """
    Whether a parsed value has the shape a flag of `type` expects.
    """
    match type:
        case "string":
            return isinstance(value, str)
        case "boolean":
            return isinstance(value, bool)
        case "number":
            return isinstance(value, int | float) and not isinstance(value, bool)
        case "array" | "numArray":
            return isinstance(value, list)
    return False


class Parser:
    """
    Getopts-like parser configured with global flags and, per call, a command's flags.

    parse(argv, command) never looks at positionals: it does not know about the
    command's arguments, binding them is the kernel's job.
    """

    def __init__(self, global_flags=()):
        if isinstance(global_flags, dict):
            global_flags = global_flags.values()
        self.global_flags = tuple(global_flags)

    def _declarations(self, command):
        # name -> (type, alias, default); command flags override same-named globals
        declared = {}
        for flag in self.global_flags:
            declared[flag.name] = (flag.type, flag.alias, flag.default)
        for flag in getattr(command, "flags", ()) if command is not None else ():
            declared[flag.name] = (flag.type, flag.alias, flag.default)
        return declared

    def parse(self, argv, command=None):
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")

        declared = self._declarations(command)
        aliases = {alias: name for name, (_, alias, _) in declared.items() if alias}
        parsed = {"_": []}
        tokens = list(argv)
        index = 0

        def kind(key):
            entry = declared.get(aliases.get(key, key))
            return entry[0] if entry else None

        def takes_value(key):
            return kind(key) not in (None, "boolean")

        def following():
            # consume the next token as a value when it is not a flag
            nonlocal index
            if index < len(tokens) and not _is_flag(tokens[index]):
                index += 1
                return tokens[index - 1]
            return True

        while index < len(tokens):
            token = tokens[index]
            index += 1

            if token == "--":
                parsed["_"].extend(tokens[index:])
                break

            if not _is_flag(token):
                parsed["_"].append(token)
                continue

            if token.startswith("--"):
                name, separator, value = token[2:].partition("=")
                if separator:
                    self._assign(parsed, name, value, declared, aliases)
                elif name.startswith("no-") and name not in declared and name not in aliases:
                    self._assign(parsed, name[3:], False, declared, aliases)
                else:
                    self._assign(parsed, name, following() if takes_value(name) else True, declared, aliases)
                continue

            body, separator, value = token[1:].partition("=")
            if separator:
                for letter in body[:-1]:
                    self._assign(parsed, letter, True, declared, aliases)
                self._assign(parsed, body[-1], value, declared, aliases)
                continue

            for position, letter in enumerate(body):
                rest = body[position + 1:]
                if takes_value(letter) and rest:
                    self._assign(parsed, letter, rest, declared, aliases)
                    break
                if not rest and takes_value(letter):
                    self._assign(parsed, letter, following(), declared, aliases)
                else:
                    self._assign(parsed, letter, True, declared, aliases)

        for name, (type, alias, default) in declared.items():
            if default is Unset or name in parsed:
                continue
            if type in ("array", "numArray") and not isinstance(default, str):
                default = list(default)
            parsed[name] = default
            if alias:
                parsed[alias] = default

        return parsed

    def _assign(self, parsed, key, raw, declared, aliases):
        name = aliases.get(key, key)
        type, alias, _ = declared.get(name, (None, None, Unset))
        value = self._coerce(name, type, raw)

        if type in ("array", "numArray") and isinstance(value, list):
            previous = parsed.get(name)
            if isinstance(previous, list):
                value = previous + value

        parsed[name] = value
        if alias:
            parsed[alias] = value

    def _coerce(self, name, type, raw):
        if raw is False:
            return False
        match type:
            case None:
                return raw
            case "boolean":
                return raw if isinstance(raw, bool) else raw.strip().lower() not in FALSY
            case "string":
                return "" if raw is True else raw
        if raw is True:
            raise InvalidFlagError(
                "missing value for %r flag" % name,
                flag_name=name,
                expected="number" if type in ("number", "numArray") else "value",
            )
        match type:
            case "number":
                return _number(name, raw)
            case "array":
                return [raw]
            case "numArray":
                return [_number(name, raw)]
        raise ValueError("unknown flag type %r" % type)

    def apply_global_flags(self, parsed, command=None):
        """
        Invoke the callback of every global flag present in `parsed` with a matching shape.

        Callbacks run synchronously, in registration order, with (value, parsed, command).
        """
        for flag in self.global_flags:
            if flag.name not in parsed:
                continue
            value = parsed[flag.name]
            if matches(flag.type, value):
                flag.callback(value, parsed, command)


__all__ = (
    "Parser",
    "GlobalFlag",
    "matches",
)
