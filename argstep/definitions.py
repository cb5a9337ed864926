"""
Validated, indexed argument definitions.

A DefinitionSet is built once from a sequence of definitions and is read-only
afterwards, so it can be shared by any number of parses. Building it is the
only place where definition errors are raised; a parse never starts from an
inconsistent set.

Validation (first violation wins, in declaration order)
- names: positional and subcommand names must be non-empty; flag long names
  must not start with '-' nor contain '=' or whitespace; only a switch may be
  named '' (the terminator) and it takes no short alias → InvalidLongNameError
- aliases: exactly one character, neither '-', '=' nor whitespace
  → InvalidShortAliasError
- a second terminator → MultipleTerminatorsError
- a long name used twice (flags, positionals and subcommands share one
  namespace; a short-only flag takes part under its alias, the name its
  items carry) → DuplicateLongNameError
- a short alias used twice → DuplicateShortAliasError
- a second trail → MultipleTrailsError
- positionals or a trail together with subcommands → MixedSubcommandError
- anything that is not a definition → IncompleteDefinitionError

Indexes
- flags: long name → definition (the terminator is indexed under '')
- aliases: short alias → definition
- positionals: positional definitions in declaration order
- trail: the trail definition or None
- subcommands: name → definition
"""
import re
from collections.abc import Iterable

from .arguments import ArgumentKind
from .faults import *
from .utils import mirror, ordinal


def _definition(source, index, /):
    """
    Internal: resolve one entry through its __definition__ hook.
    """
    hook = getattr(source, "__definition__", None)
    if not callable(hook):
        raise IncompleteDefinitionError(
            "%s definition is not an argument definition (got %s)" % (ordinal(index), type(source).__name__),
            index=index,
            hint="build definitions with ArgDef.positional(), ArgDef.named(...).option() and friends",
        )
    return hook()


def _check_name(definition, index, /):
    """
    Internal: validate the shape of a long name (or positional/subcommand name).
    """
    name = definition.name
    if name is None:
        return
    if name == "":
        if definition.kind is not ArgumentKind.SWITCH:
            raise InvalidLongNameError(
                "%s definition has an empty name but is a %s" % (ordinal(index), definition.kind.value),
                name=name,
                index=index,
                hint="the empty name is reserved for the '--' terminator switch: ArgDef.named('').switch()",
            )
        if definition.alias is not None:
            raise InvalidLongNameError(
                "%s definition is the terminator and cannot have a short alias" % ordinal(index),
                name=name,
                index=index,
                hint="declare the terminator as ArgDef.named('').switch()",
            )
        return
    if definition.kind.flag or definition.kind is ArgumentKind.SUBCOMMAND:
        if not re.fullmatch(r"[^\s=\-][^\s=]*", name):
            raise InvalidLongNameError(
                "%s definition has an invalid name %r" % (ordinal(index), name),
                name=name,
                index=index,
                hint="names cannot start with '-' nor contain '=' or whitespace (write 'verbose', not '--verbose')",
            )


def _check_alias(definition, index, /):
    """
    Internal: validate the shape of a short alias.
    """
    alias = definition.alias
    if alias is None:
        return
    if len(alias) != 1 or alias in "-=" or alias.isspace():
        raise InvalidShortAliasError(
            "%s definition has an invalid short alias %r" % (ordinal(index), alias),
            alias=alias,
            index=index,
            hint="short aliases are a single character other than '-' and '=' (write 'v', not '-v')",
        )


class DefinitionSet:
    """
    Read-only, validated collection of argument definitions.

    Construction
    - DefinitionSet(definitions) or DefinitionSet.build(definitions); entries
      may be ArgDef objects or anything exposing __definition__ (an unfinished
      FlagIdentity becomes a switch).

    Raises
    - DefinitionError subclasses (see module docstring); TypeError when the
      argument is not iterable.
    """

    definitions = mirror("definitions")
    flags = mirror("flags")
    aliases = mirror("aliases")
    positionals = mirror("positionals")
    trail = mirror("trail")
    subcommands = mirror("subcommands")

    def __init__(self, definitions=(), /):
        if isinstance(definitions, str) or not isinstance(definitions, Iterable):
            raise TypeError("DefinitionSet() argument must be an iterable of definitions")

        self._definitions = []
        self._flags = {}
        self._aliases = {}
        self._positionals = []
        self._trail = None
        self._subcommands = {}

        names = {}  # every long name → declaring position, across kinds
        terminator = None

        for index, source in enumerate(definitions, 1):
            definition = _definition(source, index)
            _check_name(definition, index)

            if definition.terminator:
                if terminator is not None:
                    raise MultipleTerminatorsError(
                        "%s definition is a second terminator (first at %s definition)" % (ordinal(index), ordinal(terminator)),
                        index=index,
                        previous=terminator,
                        hint="keep a single ArgDef.named('').switch()",
                    )
                terminator = index
            elif (label := definition.label) is not None:
                # short-only flags are reported by their alias
                if (previous := names.setdefault(label, index)) != index:
                    raise DuplicateLongNameError(
                        "%s definition reuses the name %r of the %s definition" % (ordinal(index), label, ordinal(previous)),
                        name=label,
                        index=index,
                        previous=previous,
                        hint="give every positional, subcommand and flag a distinct name (short-only flags count by their alias)",
                    )

            _check_alias(definition, index)
            if definition.alias is not None:
                if (previous := self._aliases.get(definition.alias)) is not None:
                    raise DuplicateShortAliasError(
                        "%s definition reuses the short alias %r of %r" % (ordinal(index), definition.alias, previous.label),
                        alias=definition.alias,
                        index=index,
                        hint="give every flag a distinct short alias",
                    )
                self._aliases[definition.alias] = definition

            match definition.kind:
                case ArgumentKind.POSITIONAL:
                    self._positionals.append(definition)
                case ArgumentKind.REQUIRED_TRAIL | ArgumentKind.OPTIONAL_TRAIL:
                    if self._trail is not None:
                        raise MultipleTrailsError(
                            "%s definition is a second trail" % ordinal(index),
                            index=index,
                            hint="keep a single required_trail() or optional_trail()",
                        )
                    self._trail = definition
                case ArgumentKind.SUBCOMMAND:
                    self._subcommands[definition.name] = definition
                case _:
                    if definition.name is not None:
                        self._flags[definition.name] = definition

            if self._subcommands and (self._positionals or self._trail is not None):
                raise MixedSubcommandError(
                    "%s definition mixes positionals (or a trail) with subcommands" % ordinal(index),
                    index=index,
                    hint="declare positionals inside the subcommand's own definitions",
                )

            self._definitions.append(definition)

    @classmethod
    def build(cls, definitions, /):
        """
        Validate and index the given definitions (alias of the constructor).
        """
        return cls(definitions)

    @property
    def terminator(self):
        """
        True when the '--' terminator switch is declared.
        """
        return "" in self._flags

    def long(self, name, /):
        """
        Return the flag declared with this long name, or None.
        """
        return self._flags.get(name)

    def short(self, alias, /):
        """
        Return the flag declared with this short alias, or None.
        """
        return self._aliases.get(alias)

    def __iter__(self):
        return iter(self._definitions)

    def __len__(self):
        return len(self._definitions)

    def __repr__(self):
        return "definition-set(%s)" % ", ".join(map(repr, self._definitions))

    def __rich_repr__(self):
        yield from self._definitions


__all__ = (
    "DefinitionSet",
)
