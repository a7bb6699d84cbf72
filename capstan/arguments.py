r"""
Capstan argument and flag definitions.

Overview
- Definitions
  • Argument: positional parameter, either a single "string" token or a trailing "spread"
    that consumes every remaining positional token.
  • Flag: named option typed as "string", "boolean", "number", "array" or "numArray",
    with an optional single alias and an optional default.

- Builders
  • args.string(...), args.spread(...)
  • flags.string(...), flags.boolean(...), flags.number(...), flags.array(...),
    flags.num_array(...)
  Each builder returns a definition meant to be assigned as a class attribute of a
  command; the attribute name becomes the definition's property name.

    class Greet(BaseCommand):
        command_name = "greet"

        name = args.string(description="who to greet")
        files = args.spread(required=False)
        is_admin = flags.boolean(alias="a")        # exposed as --is-admin / -a

- Binding
  • Definitions are non-data descriptors: reading them on the class returns the
    definition itself, reading them on an instance returns the bound value, or None
    when the kernel left the property unset.

Metadata (sanitized on construction)
- name: exposed name; arguments default to the property name, flags to its dash-case.
- description: optional non-empty string.
- required (arguments): True by default.
- alias (flags): optional non-empty string, usually a single letter.
- default (flags): any value, Unset when not declared.

Immutability
- Fields live in private backing attributes and are published through read-only
  properties (see utils.mirror); the exposed name is fixed once __set_name__ ran.
"""
import functools
import operator
import re
from types import SimpleNamespace

from .utils import *

ARGUMENT_TYPES = ("string", "spread")
FLAG_TYPES = ("string", "boolean", "number", "array", "numArray")


class DefinitionType(type):
    """
    Metaclass that makes definitions introspectable.

    Responsibilities
    - Derive __typename__ from the class name ("Argument" -> "argument") for messages.
    - Expose each name in __introspectable__ as a read-only property over "_<name>".
    - Provide a stable __repr__ and a __rich_repr__ for pretty printers.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: mirror(field) for field in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in type(self).__introspectable__:
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_text(cls, field, value, /):
    # Unset stays Unset; strings must not be blank
    if not isinstance(value, str | UnsetType):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    if isinstance(value, str) and not (value := value.strip()):
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
    return value


class Definition(metaclass=DefinitionType):
    """
    Shared descriptor plumbing for arguments and flags.

    __set_name__ fixes the property name and, unless one was given, the exposed name
    (subclasses choose it through _default_name). Until then both read as Unset.
    """

    def _default_name(self, property_name):
        return property_name

    def __set_name__(self, owner, name):
        if self._property_name is not Unset:
            raise TypeError(
                f"{type(self).__typename__} {self._property_name!r} cannot be reused for {name!r}"
            )
        self._property_name = name
        self._name = coalesce(self._name, self._default_name(name))

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        # instance attributes shadow this non-data descriptor once bound
        return None


class Argument(Definition):
    """
    Positional argument definition.

    Properties
    - property_name: attribute that receives the value on the command instance.
    - name: exposed name used in help and in error messages.
    - type: "string" (one token) or "spread" (all remaining tokens, as a list).
    - required: whether a missing token aborts the invocation.
    - description: short help text or None.
    """
    __introspectable__ = (
        "property_name",
        "name",
        "type",
        "required",
        "description",
    )

    def __init__(self, type="string", /, name=Unset, *, required=True, description=Unset):
        if type not in ARGUMENT_TYPES:
            raise ValueError(f"argument 'type' must be one of {', '.join(map(repr, ARGUMENT_TYPES))}")
        if not isinstance(required, bool):
            raise TypeError("argument 'required' must be a boolean")
        self._type = type
        self._name = _sanitize_text(Argument, "name", name)
        self._required = required
        self._description = coalesce(_sanitize_text(Argument, "description", description))
        self._property_name = Unset

    @property
    def spread(self):
        return self._type == "spread"

    def serialize(self):
        """
        Describe the argument as the plain mapping cached in manifest files.
        """
        return {
            "propertyName": self._property_name,
            "name": self._name,
            "type": self._type,
            "required": self._required,
            "description": self._description,
        }


class Flag(Definition):
    """
    Named flag definition.

    Properties
    - property_name: attribute that receives the value on the command instance.
    - name: exposed name (dash-cased property name unless given explicitly).
    - type: "string" | "boolean" | "number" | "array" | "numArray".
    - alias: alternative (usually one-letter) name or None.
    - default: value applied when the flag is absent, Unset when not declared.
    - description: short help text or None.
    """
    __introspectable__ = (
        "property_name",
        "name",
        "type",
        "alias",
        "default",
        "description",
    )

    def __init__(self, type="boolean", /, name=Unset, *, alias=Unset, default=Unset, description=Unset):
        if type not in FLAG_TYPES:
            raise ValueError(f"flag 'type' must be one of {', '.join(map(repr, FLAG_TYPES))}")
        self._type = type
        self._name = _sanitize_text(Flag, "name", name)
        self._alias = coalesce(_sanitize_text(Flag, "alias", alias))
        self._default = default
        self._description = coalesce(_sanitize_text(Flag, "description", description))
        self._property_name = Unset

    def _default_name(self, property_name):
        return dashcase(property_name)

    def serialize(self):
        """
        Describe the flag as the plain mapping cached in manifest files.
        """
        serialized = {
            "propertyName": self._property_name,
            "name": self._name,
            "type": self._type,
            "description": self._description,
        }
        if self._alias is not None:
            serialized["alias"] = self._alias
        if self._default is not Unset:
            serialized["default"] = self._default
        return serialized


def _argument(type, /):
    @rename(type)
    def builder(*, name=Unset, required=True, description=Unset):
        return Argument(type, name, required=required, description=description)
    return builder


def _flag(type, label, /):
    @rename(label)
    def builder(*, name=Unset, alias=Unset, default=Unset, description=Unset):
        return Flag(type, name, alias=alias, default=default, description=description)
    return builder


args = SimpleNamespace(
    string=_argument("string"),
    spread=_argument("spread"),
)

flags = SimpleNamespace(
    string=_flag("string", "string"),
    boolean=_flag("boolean", "boolean"),
    number=_flag("number", "number"),
    array=_flag("array", "array"),
    num_array=_flag("numArray", "num_array"),
)


__all__ = (
    "Argument",
    "Flag",
    "args",
    "flags",
    "ARGUMENT_TYPES",
    "FLAG_TYPES",
)
