"""
Manifest-backed lazy command loading.

A manifest is a JSON object stored as `capstan-manifest.json` in a base directory. Keys
are command names; each value describes where the command lives and, optionally, the
metadata needed to list it without importing its code:

    {
        "greet": {
            "commandName": "greet",
            "commandPath": "commands/greet.py:Greet",
            "description": "greet someone",
            "args": [{"name": "name", "type": "string", "required": true}],
            "flags": [{"name": "admin", "type": "boolean", "alias": "a"}]
        }
    }

commandPath forms (default loader)
- "path/to/file.py[:Attr]"  file relative to the base directory (".py" may be omitted
                             when the path contains a "/").
- "dotted.module[:Attr]"    importable module.
- without ":Attr", the module must define exactly one class carrying a command_name.

The loader is injectable: Manifest(base, loader=callable) where the callable, plain or
async, receives (command_path, base_path) and returns the command class. The default
loader imports in a worker thread.
"""
import asyncio
import importlib
import importlib.util
import json
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .faults import CommandLoadError, InvalidManifestError
from .utils import maybe_await

MANIFEST_FILENAME = "capstan-manifest.json"


@dataclass(frozen=True)
class ManifestEntry:
    command_name: str
    command_path: str
    description: str | None = None
    args: tuple[dict[str, Any], ...] = field(default=())
    flags: tuple[dict[str, Any], ...] = field(default=())

    @classmethod
    def from_json(cls, key, payload):
        if not isinstance(payload, dict):
            raise InvalidManifestError("manifest entry %r must be an object" % key, entry=key)
        for required in ("commandName", "commandPath"):
            if not isinstance(payload.get(required), str) or not payload[required]:
                raise InvalidManifestError("manifest entry %r is missing %r" % (key, required), entry=key)
        return cls(
            command_name=payload["commandName"],
            command_path=payload["commandPath"],
            description=payload.get("description"),
            args=tuple(payload.get("args") or ()),
            flags=tuple(payload.get("flags") or ()),
        )


def _import_file(path):
    name = "_capstan_command_%s" % re.sub(r"\W", "_", str(path.resolve().with_suffix("")))
    if name in sys.modules:
        return sys.modules[name]
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError("cannot import %s" % path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[name]
        raise
    return module


def load_command(command_path, base_path):
    """
    Default loader: import the module behind `command_path` and pick its command class.
    """
    reference, _, attribute = command_path.partition(":")
    if reference.endswith(".py") or "/" in reference:
        path = Path(base_path, reference)
        if path.suffix != ".py":
            path = path.with_name(path.name + ".py")
        module = _import_file(path)
    else:
        module = importlib.import_module(reference)

    if attribute:
        return getattr(module, attribute)

    candidates = [
        object for object in vars(module).values()
        if isinstance(object, type)
        and object.__module__ == module.__name__
        and getattr(object, "command_name", None)
    ]
    if len(candidates) != 1:
        raise LookupError("%s defines %d command classes, expected exactly one" % (reference, len(candidates)))
    return candidates[0]


class Manifest:
    """
    Persisted index of command name -> ManifestEntry.

    - load() reads the file once per instance; a missing file is an empty manifest.
    - resolve(entry) materializes the command class of one entry.
    """

    def __init__(self, base_path, loader=None):
        self.base_path = Path(base_path)
        self.loader = loader if loader is not None else load_command
        self._entries = None

    @property
    def path(self):
        return self.base_path / MANIFEST_FILENAME

    def _read(self):
        if not self.path.is_file():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as error:
            raise InvalidManifestError("%s is not valid JSON: %s" % (self.path, error), path=self.path) from error
        if not isinstance(payload, dict):
            raise InvalidManifestError("%s must contain a JSON object" % self.path, path=self.path)
        return {key: ManifestEntry.from_json(key, value) for key, value in payload.items()}

    async def load(self):
        if self._entries is None:
            self._entries = await asyncio.to_thread(self._read)
        return dict(self._entries)

    async def resolve(self, entry):
        try:
            if self.loader is load_command:
                command = await asyncio.to_thread(load_command, entry.command_path, self.base_path)
            else:
                command = await maybe_await(self.loader(entry.command_path, self.base_path))
        except Exception as error:
            raise CommandLoadError(
                "unable to load command %r from %r" % (entry.command_name, entry.command_path),
                command_name=entry.command_name,
                command_path=entry.command_path,
            ) from error

        name = getattr(command, "command_name", None)
        if not isinstance(command, type) or not isinstance(name, str) or not name:
            raise CommandLoadError(
                "%r does not export a command class" % entry.command_path,
                command_name=entry.command_name,
                command_path=entry.command_path,
            )
        return command


__all__ = (
    "Manifest",
    "ManifestEntry",
    "MANIFEST_FILENAME",
    "load_command",
)
