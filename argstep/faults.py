"""
Argstep faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
  Codes are grouped by domain (definitions, flags, positionals, routing,
  warnings) to keep logs and searches predictable.
- DefinitionError: raised once, when a DefinitionSet is built. These are
  mistakes of the program declaring its arguments and always stop parsing
  before it starts.
- ParseError: produced per step by the parse engine. They are yielded as
  values and never raised by the engine; callers decide whether to keep
  iterating, raise them, or render them.
- CommandWarning: soft notices (e.g., empty inline values) emitted through the
  warnings module.
- trigger(): central entry point to surface any fault (respecting shell/deferred/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: parse faults name the ordinal position of the
  offending token (“at third position”).
- Short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
import copy
import os
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - definitions (210xx)
      • DUPLICATE_LONG_NAME, DUPLICATE_SHORT_ALIAS, MULTIPLE_TRAILS,
        MULTIPLE_TERMINATORS, INVALID_LONG_NAME, INVALID_SHORT_ALIAS,
        MIXED_SUBCOMMAND, INCOMPLETE_DEFINITION
    - flags (111xx)
      • UNKNOWN_FLAG, MISSING_OPTION_VALUE, DUPLICATE_OPTION,
        SWITCH_ASSIGNMENT, CLUSTERED_OPTION
    - positionals (112xx)
      • UNEXPECTED_VALUE, MISSING_POSITIONAL, MISSING_TRAIL
    - routing (113xx)
      • UNKNOWN_SUBCOMMAND, MISSING_SUBCOMMAND
    - warnings (12xxx)
      • EMPTY_INLINE_VALUE

    hosts can remap codes to friendlier labels through a __codes__ mapping in
    __main__ (see normalize()).
    """
    # --- definition errors (21xxx) ---
    DUPLICATE_LONG_NAME         = 21001
    DUPLICATE_SHORT_ALIAS       = 21002
    MULTIPLE_TRAILS             = 21003
    MULTIPLE_TERMINATORS        = 21004
    INVALID_LONG_NAME           = 21005
    INVALID_SHORT_ALIAS         = 21006
    MIXED_SUBCOMMAND            = 21007
    INCOMPLETE_DEFINITION       = 21008

    # --- flag errors (111xx) ---
    UNKNOWN_FLAG                = 11101
    MISSING_OPTION_VALUE        = 11102
    DUPLICATE_OPTION            = 11103
    SWITCH_ASSIGNMENT           = 11104
    CLUSTERED_OPTION            = 11105

    # --- positional errors (112xx) ---
    UNEXPECTED_VALUE            = 11201
    MISSING_POSITIONAL          = 11202
    MISSING_TRAIL               = 11203

    # --- routing errors (113xx) ---
    UNKNOWN_SUBCOMMAND          = 11301
    MISSING_SUBCOMMAND          = 11302

    # --- warnings (12xxx) ---
    EMPTY_INLINE_VALUE          = 12101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    build the rich renderable shared by errors and warnings.

    layout
    - header: "[ prog — code | Title ]" (no code part for the base classes)
    - body: the message
    - hint: " → hint" (omitted when the fault carries no hint)
    - fancy mode wraps everything in a Panel titled with the header.
    """
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", True)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style] if colorful else "")

    prog = getattr(main, "__prog__", None) or os.path.basename(sys.argv[0]) or "argstep"

    # base classes carry no code and may carry no title
    title = coalesce(fault.title, "warning" if isinstance(fault, Warning) else "error")
    header = ["[ ", text(prog, "prog-name")]
    if fault.code is not Unset:
        code = fault.code.normalize() if isinstance(fault.code, FaultCode) else fault.code
        header += [" — ", text(code, "code")]
    header += [" | ", text(title.title(), "title"), " ]"]
    header = Text.assemble(*header)
    parts = [text(fault.message, "message")]
    if hint := fault.options.get("hint"):
        parts.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fault.options.get("fancy", False):
        return Panel(Group(*parts), title=header, title_align="left")
    return Group(header, *parts)


class CommandException(Exception):
    """
    base type for every argstep error.

    carries a message plus keyword options (read-only). the options always
    include 'code' and 'title' (class defaults unless overridden) and may
    include 'hint', 'input', 'index' and any other context a reporter may want.
    """
    code = Unset
    title = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)
        self.code = options.get("code", type(self).code)
        self.title = options.get("title", type(self).title)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title

            # body
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DefinitionError(CommandException, ValueError):
    """
    the argument definitions are logically inconsistent (raised on build).
    """
    title = "invalid definitions"


class DuplicateLongNameError(DefinitionError):
    code = FaultCode.DUPLICATE_LONG_NAME
    title = "duplicate long name"
class DuplicateShortAliasError(DefinitionError):
    code = FaultCode.DUPLICATE_SHORT_ALIAS
    title = "duplicate short alias"
class MultipleTrailsError(DefinitionError):
    code = FaultCode.MULTIPLE_TRAILS
    title = "multiple trails"
class MultipleTerminatorsError(DefinitionError):
    code = FaultCode.MULTIPLE_TERMINATORS
    title = "multiple terminators"
class InvalidLongNameError(DefinitionError):
    code = FaultCode.INVALID_LONG_NAME
    title = "invalid long name"
class InvalidShortAliasError(DefinitionError):
    code = FaultCode.INVALID_SHORT_ALIAS
    title = "invalid short alias"
class MixedSubcommandError(DefinitionError):
    code = FaultCode.MIXED_SUBCOMMAND
    title = "positionals mixed with subcommands"
class IncompleteDefinitionError(DefinitionError, TypeError):
    code = FaultCode.INCOMPLETE_DEFINITION
    title = "incomplete definition"


class ParseError(CommandException):
    """
    a raw argument did not match the definitions.

    instances are yielded by the parse engine instead of being raised; use
    trigger() (or a plain raise) to surface one.
    """
    title = "parse failed"


class UnknownFlagError(ParseError):
    code = FaultCode.UNKNOWN_FLAG
    title = "unknown flag"
class MissingOptionValueError(ParseError):
    code = FaultCode.MISSING_OPTION_VALUE
    title = "missing option value"
class DuplicateOptionError(ParseError):
    code = FaultCode.DUPLICATE_OPTION
    title = "duplicated option"
class SwitchAssignmentError(ParseError):
    code = FaultCode.SWITCH_ASSIGNMENT
    title = "switch cannot take a value"
class ClusteredOptionError(ParseError):
    code = FaultCode.CLUSTERED_OPTION
    title = "option inside a short cluster"
class UnexpectedValueError(ParseError):
    code = FaultCode.UNEXPECTED_VALUE
    title = "unexpected value"
class MissingPositionalError(ParseError):
    code = FaultCode.MISSING_POSITIONAL
    title = "missing positional"
class MissingTrailError(ParseError):
    code = FaultCode.MISSING_TRAIL
    title = "missing trailing values"
class UnknownSubcommandError(ParseError):
    code = FaultCode.UNKNOWN_SUBCOMMAND
    title = "unknown subcommand"
class MissingSubcommandError(ParseError):
    code = FaultCode.MISSING_SUBCOMMAND
    title = "missing subcommand"


class CommandWarning(Warning):
    """
    base type for soft notices; emitted through the warnings module.
    """
    code = Unset
    title = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)
        self.code = options.get("code", type(self).code)
        self.title = options.get("title", type(self).title)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", 2))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyOptionValueWarning(CommandWarning):
    code = FaultCode.EMPTY_INLINE_VALUE
    title = "empty inline value"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via the rich stderr console (errors then
      exit with status 1 unless deferred); otherwise errors are raised and
      warnings go through warnings.warn.

    typical options
    - shell, fancy, colorful, deferred, hint, and any other context the
      reporter may want to show (e.g., input/index).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    returns None when not found.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "CommandException",
    "DefinitionError",
    "DuplicateLongNameError",
    "DuplicateShortAliasError",
    "MultipleTrailsError",
    "MultipleTerminatorsError",
    "InvalidLongNameError",
    "InvalidShortAliasError",
    "MixedSubcommandError",
    "IncompleteDefinitionError",
    "ParseError",
    "UnknownFlagError",
    "MissingOptionValueError",
    "DuplicateOptionError",
    "SwitchAssignmentError",
    "ClusteredOptionError",
    "UnexpectedValueError",
    "MissingPositionalError",
    "MissingTrailError",
    "UnknownSubcommandError",
    "MissingSubcommandError",
    "CommandWarning",
    "EmptyOptionValueWarning",
    "trigger",
    "getdoc",
)
