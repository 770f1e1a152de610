"""flagset.py – Typed flag registry consumed by the tokenizer.

A :class:`FlagSet` is a name-indexed store of :class:`Flag` definitions.
Each flag owns a :class:`Value` that knows how to parse text into its own
type and whether it behaves as a boolean switch.  The tokenizer in
:mod:`gnuflags.tokenizer` only ever calls :meth:`FlagSet.lookup`,
:meth:`Flag.is_boolean` and :meth:`Flag.set`; everything else here is for the
program that defines the flags and reads them back.

Usage::

    from gnuflags import FlagSet, Parser

    fs = FlagSet("tool")
    verbose = fs.add_bool("v", False, "verbose output")
    out = fs.add_string("output", "-", "where to write")
    Parser(fs).parse(["-v", "--output=report.txt"])
    verbose.get(), out.get()   # (True, "report.txt")
"""

from __future__ import annotations

import enum
import re
import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Protocol, TextIO

from gnuflags.errors import FlagRedefinedError, InvalidValueError, OptionNotFoundError


class ErrorHandling(enum.Enum):
    """What :meth:`gnuflags.tokenizer.Parser.parse` does when parsing fails."""

    CONTINUE_ON_ERROR = "continue"  # raise the ParseError to the caller
    EXIT_ON_ERROR = "exit"  # sys.exit(0) on help, sys.exit(2) otherwise
    PANIC_ON_ERROR = "panic"  # raise ParsePanic


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


class Value:
    """Capability interface for anything a flag can hold.

    Subclasses implement :meth:`set` (raising ``ValueError`` on bad input),
    :meth:`get` and ``__str__``.  A value opts into boolean-switch semantics
    (``-v`` with no argument means ``true``) by returning ``True`` from
    :meth:`is_bool_flag`.
    """

    type_name = "value"
    zero_text = ""

    def set(self, text: str) -> None:
        raise NotImplementedError

    def get(self) -> Any:
        raise NotImplementedError

    def is_bool_flag(self) -> bool:
        return False

    def __str__(self) -> str:
        return str(self.get())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"


_TRUE_WORDS = frozenset({"1", "t", "T", "true", "TRUE", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "false", "FALSE", "False"})


def parse_bool(text: str) -> bool:
    """Parse *text* the way boolean flags accept it."""
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"invalid boolean {text!r}")


class BoolValue(Value):
    type_name = ""
    zero_text = "false"

    def __init__(self, default: bool = False) -> None:
        self._value = bool(default)

    def set(self, text: str) -> None:
        self._value = parse_bool(text)

    def get(self) -> bool:
        return self._value

    def is_bool_flag(self) -> bool:
        return True

    def __str__(self) -> str:
        return "true" if self._value else "false"


class StringValue(Value):
    type_name = "string"
    zero_text = ""

    def __init__(self, default: str = "") -> None:
        self._value = default

    def set(self, text: str) -> None:
        self._value = text

    def get(self) -> str:
        return self._value


class IntValue(Value):
    """Integer flag; ``0x``/``0o``/``0b`` prefixes select the base."""

    type_name = "int"
    zero_text = "0"

    def __init__(self, default: int = 0) -> None:
        self._value = int(default)

    def set(self, text: str) -> None:
        try:
            self._value = int(text, 0)
        except ValueError:
            raise ValueError(f"invalid syntax {text!r}") from None

    def get(self) -> int:
        return self._value


class FloatValue(Value):
    type_name = "float"
    zero_text = "0.0"

    def __init__(self, default: float = 0.0) -> None:
        self._value = float(default)

    def set(self, text: str) -> None:
        try:
            self._value = float(text)
        except ValueError:
            raise ValueError(f"invalid syntax {text!r}") from None

    def get(self) -> float:
        return self._value

    def __str__(self) -> str:
        return repr(self._value)


# Microseconds per unit; timedelta cannot represent anything finer.
_DURATION_UNITS: dict[str, float] = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,  # U+00B5 micro sign
    "μs": 1.0,  # U+03BC greek mu
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}
_DURATION_PART = re.compile(r"(\d*\.?\d*)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``"1h30m"``, ``"250ms"`` or ``"-1.5s"``.

    A sequence of decimal numbers, each with a unit suffix.  Valid units
    are ``ns``, ``us`` (or ``µs``), ``ms``, ``s``, ``m`` and ``h``.  The bare
    string ``"0"`` is also accepted.
    """
    body = text
    negative = False
    if body[:1] in ("-", "+"):
        negative = body[0] == "-"
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration {text!r}")

    total = 0.0
    pos = 0
    while pos < len(body):
        m = _DURATION_PART.match(body, pos)
        if m is None or m.group(1) in ("", "."):
            raise ValueError(f"invalid duration {text!r}")
        total += float(m.group(1)) * _DURATION_UNITS[m.group(2)]
        pos = m.end()

    micros = round(total)
    return timedelta(microseconds=-micros if negative else micros)


def _trim_number(x: float) -> str:
    return format(x, ".6f").rstrip("0").rstrip(".")


def format_duration(td: timedelta) -> str:
    """Render *td* in the compact ``1h2m3.5s`` form accepted by :func:`parse_duration`."""
    micros = td // timedelta(microseconds=1)
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)
    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_trim_number(micros / 1_000)}ms"
    hours, rem = divmod(micros, 3_600_000_000)
    minutes, rem = divmod(rem, 60_000_000)
    text = ""
    if hours:
        text += f"{hours}h"
    if hours or minutes:
        text += f"{minutes}m"
    return f"{sign}{text}{_trim_number(rem / 1_000_000)}s"


class DurationValue(Value):
    type_name = "duration"
    zero_text = "0s"

    def __init__(self, default: timedelta = timedelta(0)) -> None:
        self._value = default

    def set(self, text: str) -> None:
        self._value = parse_duration(text)

    def get(self) -> timedelta:
        return self._value

    def __str__(self) -> str:
        return format_duration(self._value)


class FuncValue(Value):
    """Hands every occurrence's text to a callback; holds no state of its own."""

    def __init__(self, fn: Callable[[str], None]) -> None:
        self._fn = fn

    def set(self, text: str) -> None:
        self._fn(text)

    def get(self) -> None:
        return None

    def __str__(self) -> str:
        return ""


# ---------------------------------------------------------------------------
# Flags and the registry
# ---------------------------------------------------------------------------


@dataclass
class Flag:
    """A single registered option, as returned by :meth:`FlagSet.lookup`."""

    name: str
    usage: str
    value: Value
    default: str  # str(value) at definition time
    changed: bool = False

    def is_boolean(self) -> bool:
        return self.value.is_bool_flag()

    def set(self, text: str) -> None:
        """Push *text* into the value, raising ``ValueError`` if it is rejected."""
        self.value.set(text)
        self.changed = True


class Registry(Protocol):
    """The one query the tokenizer needs from a flag store."""

    def lookup(self, name: str) -> Flag | None: ...


class FlagSet:
    """Name-indexed collection of flags with usage rendering.

    *name* appears in the usage header; *error_handling* tells the parser
    what to do after a failed parse.
    """

    def __init__(
        self,
        name: str = "",
        error_handling: ErrorHandling = ErrorHandling.CONTINUE_ON_ERROR,
    ) -> None:
        self._name = name
        self._error_handling = error_handling
        self._formal: dict[str, Flag] = {}
        self._output: TextIO | None = None
        self.usage: Callable[[], None] | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def error_handling(self) -> ErrorHandling:
        return self._error_handling

    @property
    def output(self) -> TextIO:
        """Destination for usage text; ``sys.stderr`` unless overridden."""
        return self._output if self._output is not None else sys.stderr

    def set_output(self, output: TextIO | None) -> None:
        self._output = output

    def __contains__(self, name: object) -> bool:
        return name in self._formal

    def __len__(self) -> int:
        return len(self._formal)

    # --- definition --------------------------------------------------------

    def add_var(self, value: Value, name: str, usage: str) -> Value:
        """Register *value* under *name*.  Redefinition is an error."""
        if name in self._formal:
            raise FlagRedefinedError(self._name, name)
        self._formal[name] = Flag(name=name, usage=usage, value=value, default=str(value))
        return value

    def add_bool(self, name: str, default: bool, usage: str) -> BoolValue:
        value = BoolValue(default)
        self.add_var(value, name, usage)
        return value

    def add_string(self, name: str, default: str, usage: str) -> StringValue:
        value = StringValue(default)
        self.add_var(value, name, usage)
        return value

    def add_int(self, name: str, default: int, usage: str) -> IntValue:
        value = IntValue(default)
        self.add_var(value, name, usage)
        return value

    def add_float(self, name: str, default: float, usage: str) -> FloatValue:
        value = FloatValue(default)
        self.add_var(value, name, usage)
        return value

    def add_duration(self, name: str, default: timedelta, usage: str) -> DurationValue:
        value = DurationValue(default)
        self.add_var(value, name, usage)
        return value

    def add_func(self, name: str, usage: str, fn: Callable[[str], None]) -> FuncValue:
        value = FuncValue(fn)
        self.add_var(value, name, usage)
        return value

    # --- queries -----------------------------------------------------------

    def lookup(self, name: str) -> Flag | None:
        return self._formal.get(name)

    def set(self, name: str, text: str) -> None:
        """Set flag *name* from *text*, as if it appeared on the command line."""
        flag = self._formal.get(name)
        if flag is None:
            raise OptionNotFoundError(name)
        try:
            flag.set(text)
        except ValueError as exc:
            raise InvalidValueError(name, text, exc) from exc

    def _sorted(self) -> Iterator[Flag]:
        for name in sorted(self._formal):
            yield self._formal[name]

    def visit_all(self, fn: Callable[[Flag], None]) -> None:
        """Call *fn* for every defined flag in lexical order."""
        for flag in self._sorted():
            fn(flag)

    def visit(self, fn: Callable[[Flag], None]) -> None:
        """Call *fn* for every flag that has been set, in lexical order."""
        for flag in self._sorted():
            if flag.changed:
                fn(flag)

    # --- usage -------------------------------------------------------------

    def format_defaults(self) -> str:
        """Return the flag listing written by :meth:`print_defaults`.

        One entry per flag, sorted by name.  Single-letter names get one
        dash, longer names two.  Short entries keep the usage on the same
        line after a tab; longer ones wrap it onto an indented line.
        """
        lines: list[str] = []
        for flag in self._sorted():
            dashes = "-" if len(flag.name) == 1 else "--"
            line = f"  {dashes}{flag.name}"
            if flag.value.type_name:
                line += f" {flag.value.type_name}"
            # "  -x" still fits before the first tab stop
            line += "\t" if len(line) <= 4 else "\n    \t"
            line += flag.usage.replace("\n", "\n    \t")
            if flag.default != flag.value.zero_text:
                if isinstance(flag.value, StringValue):
                    line += f' (default "{flag.default}")'
                else:
                    line += f" (default {flag.default})"
            lines.append(line + "\n")
        return "".join(lines)

    def print_defaults(self) -> None:
        print(self.format_defaults(), end="", file=self.output)

    def default_usage(self) -> None:
        if self._name:
            print(f"Usage of {self._name}:", file=self.output)
        else:
            print("Usage:", file=self.output)
        self.print_defaults()

    def render_usage(self) -> None:
        """Write usage text via the custom :attr:`usage` hook if set."""
        if self.usage is None:
            self.default_usage()
        else:
            self.usage()
