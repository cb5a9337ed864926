r"""
Argstep argument definitions and their fluent builder.

Overview
- ArgumentKind: the fixed kind of a definition (positional, trails, switch,
  option, collect, subcommand).
- ArgDef: a fully formed, immutable definition (name, short alias, kind,
  description). Only ArgDef objects are ever stored in a DefinitionSet.
- FlagIdentity: the half-built identity of a flag (long name and/or short
  alias) returned by ArgDef.named/short/named_and_short. It becomes a
  definition through .switch(), .option() or .collect(); handing it to a
  DefinitionSet as-is finishes it with its default kind, a switch.

Builder
    >>> ArgDef.positional("foo")
    >>> ArgDef.required_trail()
    >>> ArgDef.named_and_short("verbose", "v").switch()
    >>> ArgDef.named_and_short("exclude", "x").option()
    >>> ArgDef.named("include").collect()
    >>> ArgDef.named("").switch()              # the '--' terminator
    >>> ArgDef.subcommand("build")

Introspection hooks
- Anything exposing __definition__() can be passed where a definition is
  expected: ArgDef returns itself, FlagIdentity returns its default switch.

Metadata checks on construction are type-level only (TypeError); the
shape of names and aliases is validated when a DefinitionSet is built, where
violations become DefinitionError faults.
"""
import functools
import operator
import re
from enum import Enum

from rich.text import Text

from .utils import *


class ArgumentKind(Enum):
    """
    Kind of an argument definition, fixed once the definition is built.

    - POSITIONAL: one value, matched by position among non-flag tokens.
    - REQUIRED_TRAIL / OPTIONAL_TRAIL: every non-flag token left after the
      positionals; the required variant needs at least one.
    - SWITCH: presence-only flag.
    - OPTION: flag with exactly one value, given at most once.
    - COLLECT: flag with exactly one value, may be given repeatedly.
    - SUBCOMMAND: routing word; the rest of the input belongs to it.
    """
    POSITIONAL = "positional"
    REQUIRED_TRAIL = "required-trail"
    OPTIONAL_TRAIL = "optional-trail"
    SWITCH = "switch"
    OPTION = "option"
    COLLECT = "collect"
    SUBCOMMAND = "subcommand"

    @property
    def flag(self):
        return self in (ArgumentKind.SWITCH, ArgumentKind.OPTION, ArgumentKind.COLLECT)

    @property
    def valued(self):
        return self in (ArgumentKind.OPTION, ArgumentKind.COLLECT)

    @property
    def trail(self):
        return self in (ArgumentKind.REQUIRED_TRAIL, ArgumentKind.OPTIONAL_TRAIL)


class ArgumentType(type):
    """
    Metaclass giving definition classes read-only fields and stable reprs.

    Responsibilities
    - Expose every name in __introspectable__ as a read-only property backed
      by "_<name>" (see mirror()).
    - Derive __typename__ from the class name (camel-case split with hyphens)
      for messages.
    - Provide __repr__/__rich_repr__ listing the introspectable fields.
    - Seal the class against subclassing.
    """

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
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in type(self).__introspectable__:
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        @rename("__init_subclass__")
        def __init_subclass__(cls, **options):  # NOQA: F-841
            raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
        self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_descr(cls, descr, /):
    """
    Internal: validate an optional description (help text kept for callers).

    - Unset → None
    - str → trimmed, must not be empty
    - rich Text → kept as-is
    """
    if not isinstance(descr, str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    if isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    return coalesce(descr)


class ArgDef(metaclass=ArgumentType):
    """
    A fully formed, immutable argument definition.

    Fields (read-only)
    - name: str | None
      long name; '' only for the terminator switch; None for trails and for
      flags declared with a short alias only.
    - alias: str | None
      one-character short alias, flags only.
    - kind: ArgumentKind
    - descr: str | Text | None
      free-form description, never interpreted by the parser.

    Prefer the builder classmethods over calling ArgDef(...) directly.
    """

    __introspectable__ = (
        "name",
        "alias",
        "kind",
        "descr",
    )

    __slots__ = ("_name", "_alias", "_kind", "_descr")

    def __new__(cls, name, kind, /, alias=None, descr=Unset):
        if not isinstance(kind, ArgumentKind):
            raise TypeError(f"{cls.__typename__} 'kind' must be an argument kind")
        if not isinstance(name, str | None):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        if not isinstance(alias, str | None):
            raise TypeError(f"{cls.__typename__} 'alias' must be a string")
        if alias is not None and not kind.flag:
            raise TypeError(f"{kind.value} {cls.__typename__} cannot have a short alias")
        if name is None and not kind.trail and alias is None:
            raise TypeError(f"{kind.value} {cls.__typename__} must have a name")

        self = super().__new__(cls)
        self._name = name
        self._alias = alias
        self._kind = kind
        self._descr = _sanitize_descr(cls, descr)
        return self

    @property
    def label(self):
        """
        Name reported in parse items: the long name, or the alias for
        short-only flags.
        """
        return self.alias if self.name is None else self.name

    @property
    def terminator(self):
        """
        True for the reserved empty-named switch ('--').
        """
        return self.name == "" and self.kind is ArgumentKind.SWITCH

    def describe(self, descr, /):
        """
        Return a copy of this definition carrying a description.
        """
        return type(self)(self.name, self.kind, alias=self.alias, descr=descr)

    def __definition__(self):
        """
        Introspection hook: identify this object as a complete definition.
        """
        return self

    @classmethod
    def positional(cls, name, /, descr=Unset):
        """
        Declare a required positional; filled in declaration order.
        """
        return cls(name, ArgumentKind.POSITIONAL, descr=descr)

    @classmethod
    def required_trail(cls, name=None, /, descr=Unset):
        """
        Declare the trail (remaining positional values); at least one is required.
        """
        return cls(name, ArgumentKind.REQUIRED_TRAIL, descr=descr)

    @classmethod
    def optional_trail(cls, name=None, /, descr=Unset):
        """
        Declare the trail (remaining positional values); it may stay empty.
        """
        return cls(name, ArgumentKind.OPTIONAL_TRAIL, descr=descr)

    @classmethod
    def subcommand(cls, name, /, descr=Unset):
        """
        Declare a subcommand word; the tokens after it are left for the
        subcommand (see Parse.delegate).
        """
        return cls(name, ArgumentKind.SUBCOMMAND, descr=descr)

    @classmethod
    def named(cls, name, /, descr=Unset):
        """
        Start a flag known by its long name ('--name'). named('') is the
        reserved terminator switch.
        """
        return FlagIdentity(name, None, descr=descr)

    @classmethod
    def short(cls, alias, /, descr=Unset):
        """
        Start a flag known only by its short alias ('-x').
        """
        return FlagIdentity(None, alias, descr=descr)

    @classmethod
    def named_and_short(cls, name, alias, /, descr=Unset):
        """
        Start a flag known both as '--name' and '-x'.
        """
        return FlagIdentity(name, alias, descr=descr)


class FlagIdentity(metaclass=ArgumentType):
    """
    The identity of a flag before its kind is chosen.

    Not a definition by itself: finish it with switch(), option() or
    collect(). When passed to a DefinitionSet unfinished, switch() is applied.
    """

    __introspectable__ = (
        "name",
        "alias",
        "descr",
    )

    __slots__ = ("_name", "_alias", "_descr")

    def __new__(cls, name, alias, /, descr=Unset):
        if name is None and alias is None:
            raise TypeError(f"{cls.__typename__} needs a long name or a short alias")
        if not isinstance(name, str | None):
            raise TypeError(f"{cls.__typename__} 'name' must be a string")
        if not isinstance(alias, str | None):
            raise TypeError(f"{cls.__typename__} 'alias' must be a string")
        self = super().__new__(cls)
        self._name = name
        self._alias = alias
        self._descr = _sanitize_descr(cls, descr)
        return self

    def _finish(self, kind):
        return ArgDef(self.name, kind, alias=self.alias, descr=Unset if self.descr is None else self.descr)

    def switch(self):
        """
        Presence-only flag.
        """
        return self._finish(ArgumentKind.SWITCH)

    def option(self):
        """
        Flag with exactly one value, given at most once.
        """
        return self._finish(ArgumentKind.OPTION)

    def collect(self):
        """
        Flag with exactly one value per occurrence, may be repeated.
        """
        return self._finish(ArgumentKind.COLLECT)

    def __definition__(self):
        """
        Introspection hook: the default kind of an unfinished flag is a switch.
        """
        return self.switch()


__all__ = (
    "ArgumentKind",
    "ArgDef",
    "FlagIdentity",
)

# Keep the metaclass out of star-imports and docs.
del ArgumentType
