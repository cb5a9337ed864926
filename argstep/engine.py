"""
The parse engine: a resumable, step-wise matcher over raw arguments.

A Parse holds a validated DefinitionSet (read-only) and a cursor over the
caller's tokens. Every step (next(parse)) consumes input and returns one
result: an item from argstep.items, or a ParseError instance. Errors are
returned as values, never raised; the caller decides whether to stop.

Matching, per step and in priority order
- exhausted: StopIteration, unless a required positional, required trail or
  subcommand is still missing; that fault is returned exactly once and the
  parse becomes terminal.
- '--' with a terminator declared: Switch(''). The following tokens are
  matched normally unless the caller takes them with remainder().
- '--name', '--name=value': long flags.
- '-x', '-xyz', '-xVALUE', '-x=VALUE': short flags and clusters; a cluster
  yields one Switch per step. An option alias takes the rest of its token as
  value unless that rest reads as more aliases (an option inside a cluster,
  ClusteredOptionError); as the last character it takes the next token.
- '-' alone and '-<digit>...' (when no digit alias is declared) are values.
- anything else is a value: next positional, then the trail, then a
  subcommand word, otherwise UnexpectedValueError.

Positionals are filled strictly in declaration order by the non-flag tokens;
flags may appear anywhere in between. A value-bearing flag without inline
value takes the next token verbatim, even when it starts with '-'.

Errors and resumption
- Missing positional/trail/subcommand faults are terminal.
- Other faults are resumable by default: the cursor has already moved past
  the offending token, so iteration always terminates. Pass
  halt_on_error=True to make every fault terminal.

Example
    >>> parse = Parse([ArgDef.positional("foo"), ArgDef.named("").switch()], ["a", "--", "x", "-z"])
    >>> next(parse), next(parse)
    (Positional(name='foo', value='a'), Switch(name=''))
    >>> parse.remainder()
    ('x', '-z')
"""
import difflib
import shlex
import sys
from collections import deque
from collections.abc import Iterable

from .arguments import ArgumentKind
from .definitions import DefinitionSet
from .faults import *
from .items import *
from .utils import Unset, ordinal


def _suggest(input, candidates, /):
    """
    Internal: a "did you mean" hint for a misspelled name, or None.
    """
    if suggestions := difflib.get_close_matches(input, candidates, 1):
        return "did you mean %r?" % suggestions[0]
    return None


class Parse:
    """
    Cursor over raw arguments yielding parse items or faults.

    Parameters
    - definitions: DefinitionSet | Iterable of definitions
      built on the spot when not already a DefinitionSet (definition errors
      propagate from here).
    - args: Iterable[str] | str
      the raw tokens, program name excluded; a single string is split with
      shlex.split. Tokens are kept as given (no trimming, no copies).
    - halt_on_error: bool (keyword-only)
      make every fault terminal, not only the missing-argument ones.

    Protocol
    - iterator: next(parse) returns the next item or fault; StopIteration
      once finished. Not restartable.
    - remainder() / finish(): take the unconsumed tokens and end the parse.
    - delegate(definitions): continue with the unconsumed tokens under other
      definitions (subcommands).
    """

    def __init__(self, definitions, args, /, *, halt_on_error=False):
        if not isinstance(definitions, DefinitionSet):
            definitions = DefinitionSet(definitions)

        if isinstance(args, str):
            args = shlex.split(args)
        elif not isinstance(args, Iterable):
            raise TypeError("Parse() argument must be a string or an iterable of strings")
        args = tuple(args)
        for arg in args:
            if not isinstance(arg, str):
                raise TypeError("Parse() argument must be a string or an iterable of strings")

        self._definitions = definitions
        self._args = args
        self._halt_on_error = bool(halt_on_error)

        self._position = 0
        self._offset = 0  # next character of a short cluster, 0 outside clusters
        self._positionals = deque(definitions.positionals)
        self._trailing = False
        self._given = set()
        self._routed = None
        self._done = False
        self._numeric = any(alias.isdigit() for alias in definitions.aliases)

    @classmethod
    def from_env(cls, definitions, /, **options):
        """
        Parse the current process arguments (sys.argv without the program name).
        """
        return cls(definitions, sys.argv[1:], **options)

    @property
    def definitions(self):
        return self._definitions

    @property
    def args(self):
        return self._args

    @property
    def position(self):
        """
        Index of the next unconsumed token.
        """
        return self._position

    @property
    def exhausted(self):
        """
        True once the parse returns no further results.
        """
        return self._done

    @property
    def routed(self):
        """
        The matched subcommand definition, or None.
        """
        return self._routed

    def __iter__(self):
        return self

    def __next__(self):
        if self._done:
            raise StopIteration
        result = self._step()
        if self._halt_on_error and isinstance(result, ParseError):
            self._done = True
        return result

    def remainder(self):
        """
        Take the unconsumed tokens verbatim and end the parse.

        Meant to be called right after the terminator Switch('') (or a
        Subcommand) was returned, but valid at any time. A short cluster in
        progress counts as consumed. A second call returns ().
        """
        if self._offset:
            self._offset = 0
            self._position += 1
        rest = self._args[self._position:]
        self._position = len(self._args)
        self._done = True
        return rest

    finish = remainder

    def delegate(self, definitions, /, **options):
        """
        Continue with the unconsumed tokens under other definitions.

        Typical after a Subcommand item: the returned Parse sees exactly the
        tokens that followed the subcommand word. Options default to this
        parse's own.
        """
        options.setdefault("halt_on_error", self._halt_on_error)
        return type(self)(definitions, self.remainder(), **options)

    def _step(self):
        if self._offset:
            return self._short()
        if self._position >= len(self._args):
            return self._exhaust()

        token = self._args[self._position]
        if token == "--" and self._definitions.terminator:
            self._position += 1
            return Switch("")
        if token.startswith("--"):
            return self._long()
        if token.startswith("-") and len(token) > 1 and not (token[1].isdigit() and not self._numeric):
            self._offset = 1
            return self._short()
        return self._value()

    def _exhaust(self):
        """
        End of input: report the first missing requirement, once.
        """
        self._done = True
        if self._positionals:
            missing = self._positionals[0]
            return MissingPositionalError(
                "missing positional %r (%s positional)" % (
                    missing.label,
                    ordinal(len(self._definitions.positionals) - len(self._positionals) + 1)
                ),
                name=missing.label,
                hint="add a value for %r; positionals are filled in declaration order" % missing.label,
            )
        trail = self._definitions.trail
        if trail is not None and trail.kind is ArgumentKind.REQUIRED_TRAIL and not self._trailing:
            return MissingTrailError(
                "expected at least one trailing value%s" % ("" if trail.name is None else " for %r" % trail.name),
                name=trail.name,
                hint="add one or more values after the positionals",
            )
        if self._definitions.subcommands and self._routed is None:
            return MissingSubcommandError(
                "no subcommand specified",
                hint="add one of: %s" % ", ".join(self._definitions.subcommands),
            )
        raise StopIteration

    def _long(self):
        token = self._args[self._position]
        index = self._position + 1
        self._position += 1

        name, separator, value = token[2:].partition("=")
        definition = self._definitions.long(name) if name else None
        if definition is None:
            input = "--" + name
            return UnknownFlagError(
                "unknown flag %r at %s position" % (input, ordinal(index)),
                input=input,
                index=index,
                hint=_suggest(name, [flag for flag in self._definitions.flags if flag]),
            )
        return self._flag(definition, "--" + name, value if separator else None, index)

    def _short(self):
        token = self._args[self._position]
        index = self._position + 1
        offset = self._offset
        char, rest = token[offset], token[offset + 1:]
        input = "-" + char

        # the token is consumed unless the cluster continues
        self._offset = 0
        self._position += 1

        definition = self._definitions.short(char)
        if definition is None:
            return UnknownFlagError(
                "unknown flag %r at %s position" % (input, ordinal(index)),
                input=input,
                index=index,
                hint=_suggest(char, list(self._definitions.aliases)),
            )

        if not definition.kind.valued:
            if rest.startswith("="):
                return self._flag(definition, input, rest[1:], index)
            if rest:
                self._offset = offset + 1
                self._position -= 1
            return Switch(definition.label)

        if rest.startswith("="):
            return self._flag(definition, input, rest[1:], index)
        if rest and all(self._definitions.short(other) is not None for other in rest):
            return ClusteredOptionError(
                "option %r at %s position is followed by more flags in %r" % (input, ordinal(index), token),
                input=input,
                index=index,
                hint="give %s on its own (for example: %s VALUE or %s=VALUE)" % (input, input, input),
            )
        return self._flag(definition, input, rest or None, index)

    def _flag(self, definition, input, inline, index):
        """
        Finish a resolved flag: switches take no value, options take one.

        The empty-inline-value warning goes out once the step is recorded, so
        a warnings-as-errors filter raising it from next() leaves the parse
        ready to resume.
        """
        if not definition.kind.valued:
            if inline is not None:
                return SwitchAssignmentError(
                    "switch %r at %s position cannot have a value" % (input, ordinal(index)),
                    input=input,
                    index=index,
                    hint="remove everything from '=' (for example: %s)" % input,
                )
            return Switch(definition.label)

        if inline is None:
            if self._position >= len(self._args):
                return MissingOptionValueError(
                    "option %r at %s position is missing its value" % (input, ordinal(index)),
                    input=input,
                    index=index,
                    hint="pass a value after it (for example: %s VALUE)" % input,
                )
            value = self._args[self._position]
            self._position += 1
        else:
            value = inline

        if definition.kind is ArgumentKind.OPTION:
            if definition in self._given:
                return DuplicateOptionError(
                    "option %r at %s position was already provided" % (input, ordinal(index)),
                    input=input,
                    index=index,
                    hint="keep a single %s; it can be specified only once" % input,
                )
            self._given.add(definition)

        if inline is not None and not value:
            trigger(EmptyOptionValueWarning(
                "empty inline value for option %r at %s position" % (input, ordinal(index)),
                input=input,
                index=index,
                hint="add a value after '=' or pass it after a space (for example: %s VALUE)" % input,
                stacklevel=7,
            ))
        return Option(definition.label, value)

    def _value(self):
        token = self._args[self._position]
        index = self._position + 1
        self._position += 1

        if self._positionals:
            return Positional(self._positionals.popleft().label, token)

        if self._definitions.trail is not None:
            self._trailing = True
            return Trail(token)

        if subcommands := self._definitions.subcommands:
            try:
                self._routed = subcommands[token]
            except KeyError:
                return UnknownSubcommandError(
                    "unknown subcommand %r at %s position" % (token, ordinal(index)),
                    input=token,
                    index=index,
                    hint=_suggest(token, list(subcommands)) or "use one of: %s" % ", ".join(subcommands),
                )
            self._done = True
            return Subcommand(self._routed.name)

        return UnexpectedValueError(
            "unexpected value %r at %s position" % (token, ordinal(index)),
            input=token,
            index=index,
            hint="remove this extra value",
        )

    def __repr__(self):
        return "parse(position=%d, args=%r, exhausted=%r)" % (self._position, self._args, self._done)


def parse(definitions, args=Unset, /, **options):
    """
    Convenience constructor: Parse over args, or over sys.argv[1:] when omitted.
    """
    if args is Unset:
        return Parse.from_env(definitions, **options)
    return Parse(definitions, args, **options)


__all__ = (
    "Parse",
    "parse",
)
