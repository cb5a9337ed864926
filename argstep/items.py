"""
Parse items yielded by the engine.

Each successful step of a Parse produces exactly one of these immutable
records. Values are never converted: they are the caller's own strings (the
very same objects when a whole token is the value, or slices of the token for
inline and concatenated forms such as '--name=value' and '-xVALUE').

Items
- Positional(name, value): a declared positional received a value.
- Trail(value): one trailing value after all positionals were filled.
- Switch(name): a presence-only flag was given ('' is the '--' terminator).
- Option(name, value): a value-bearing flag was given with its value.
- Subcommand(name): a declared subcommand word was matched; the remaining
  tokens belong to it (see Parse.remainder / Parse.delegate).

Items compare by type and value, so Option("x", "1") != Positional("x", "1"),
and pattern-match naturally:

    match item:
        case Option(name="exclude", value=value): ...
        case Switch(name="verbose"): ...
"""
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Positional:
    name: str
    value: str


@dataclass(frozen=True, slots=True)
class Trail:
    value: str


@dataclass(frozen=True, slots=True)
class Switch:
    name: str

    @property
    def terminator(self):
        """
        True for the reserved empty-named switch produced by '--'.
        """
        return self.name == ""


@dataclass(frozen=True, slots=True)
class Option:
    name: str
    value: str


@dataclass(frozen=True, slots=True)
class Subcommand:
    name: str


__all__ = (
    "Positional",
    "Trail",
    "Switch",
    "Option",
    "Subcommand",
)
