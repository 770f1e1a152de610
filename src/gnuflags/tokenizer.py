"""tokenizer.py – GNU-style argument tokenizer driven by a flag registry.

Walks the argument list one code point at a time through a small state
machine and classifies what it sees as positional arguments, option names
or option values.  Name resolution, boolean detection and value coercion
are delegated to the registry (see :mod:`gnuflags.flagset`).

Accepted syntax::

    -t -h -a  /  -tha          short booleans, separately or combined
    -o value  -o=v             short option with a value
    --name    --name=v  --name v
    -to value                  booleans may lead a cluster ending in a valued option
    -                          literal positional argument
    --                         everything after is positional

There is no backtracking: the first illegal transition raises, and any
values already pushed into the registry stay set.
"""

from __future__ import annotations

import enum
import sys
from collections.abc import Sequence

from gnuflags.errors import (
    HelpRequested,
    InvalidValueError,
    OptionNotFlagError,
    OptionNotFoundError,
    ParseError,
    ParsePanic,
)
from gnuflags.flagset import ErrorHandling, Flag, FlagSet, Registry

_HELP_LONG = "help"
_HELP_SHORT = "h"


class State(enum.Enum):
    """Scanner states.  Scanning starts in DEFAULT and ends with the input."""

    DEFAULT = enum.auto()
    BUFFERING_ARGUMENT = enum.auto()
    OPTION_START = enum.auto()
    DOUBLE_DASH = enum.auto()
    LONG_OPTION = enum.auto()
    SHORT_OPTIONS = enum.auto()
    VALUE_EXPECTED = enum.auto()
    ARGUMENT_ONLY = enum.auto()


class _Scanner:
    """One pass over an argument list.  Positionals are appended to *positionals*."""

    def __init__(self, registry: Registry, positionals: list[str]) -> None:
        self.registry = registry
        self.positionals = positionals
        self.state = State.DEFAULT
        self.option = ""
        self._buffer: list[str] = []

    def run(self, arguments: Sequence[str]) -> None:
        for argument in arguments:
            for focus in argument:
                self.step(focus)
            # End of this argument: one synthetic separator event.
            self.step(None)

    def _take(self) -> str:
        text = "".join(self._buffer)
        self._buffer.clear()
        return text

    def _resolve(self, name: str, help_name: str) -> Flag:
        flag = self.registry.lookup(name)
        if flag is None:
            if name == help_name:
                raise HelpRequested(name)
            raise OptionNotFoundError(name)
        return flag

    def _set(self, flag: Flag, text: str) -> None:
        try:
            flag.set(text)
        except ValueError as exc:
            raise InvalidValueError(flag.name, text, exc) from exc

    def _try_set_bool(self, flag: Flag) -> bool:
        if flag.is_boolean():
            self._set(flag, "true")
            return True
        return False

    def step(self, focus: str | None) -> None:
        """Advance on one code point, or on the separator when *focus* is ``None``."""
        separator = focus is None
        state = self.state

        if state is State.DEFAULT:
            if focus == "-":
                self.state = State.OPTION_START
            elif not separator:
                self._buffer.append(focus)
                self.state = State.BUFFERING_ARGUMENT

        elif state is State.BUFFERING_ARGUMENT:
            if separator:
                self.positionals.append(self._take())
                self.state = State.DEFAULT
            else:
                self._buffer.append(focus)

        elif state is State.OPTION_START:
            if separator:
                self.positionals.append("-")
                self.state = State.DEFAULT
            elif focus == "-":
                self.state = State.DOUBLE_DASH
            else:
                self._buffer.append(focus)
                self.state = State.SHORT_OPTIONS

        elif state is State.DOUBLE_DASH:
            if separator:
                self.state = State.ARGUMENT_ONLY
            else:
                self._buffer.append(focus)
                self.state = State.LONG_OPTION

        elif state is State.LONG_OPTION:
            if separator:
                self.option = self._take()
                flag = self._resolve(self.option, _HELP_LONG)
                if self._try_set_bool(flag):
                    self.state = State.DEFAULT
                else:
                    self.state = State.VALUE_EXPECTED
            elif focus == "=":
                self.option = self._take()
                self.state = State.VALUE_EXPECTED
            else:
                self._buffer.append(focus)

        elif state is State.SHORT_OPTIONS:
            # The buffer holds exactly one letter here.
            self.option = self._take()
            if focus == "=":
                self.state = State.VALUE_EXPECTED
            else:
                flag = self._resolve(self.option, _HELP_SHORT)
                if not self._try_set_bool(flag):
                    if not separator:
                        raise OptionNotFlagError(self.option)
                    self.state = State.VALUE_EXPECTED
                elif separator:
                    self.state = State.DEFAULT
                else:
                    self._buffer.append(focus)

        elif state is State.VALUE_EXPECTED:
            if separator:
                flag = self.registry.lookup(self.option)
                if flag is None:
                    raise OptionNotFoundError(self.option)
                self._set(flag, self._take())
                self.state = State.DEFAULT
            else:
                self._buffer.append(focus)

        elif state is State.ARGUMENT_ONLY:
            if separator:
                self.positionals.append(self._take())
            else:
                self._buffer.append(focus)

        else:
            raise AssertionError(f"unhandled scanner state {state!r}")


def tokenize(arguments: Sequence[str], registry: Registry) -> list[str]:
    """Scan *arguments* against *registry* and return the positional arguments.

    Raises a :class:`~gnuflags.errors.ParseError` subclass on the first
    malformed option.  No error-handling policy is applied.
    """
    positionals: list[str] = []
    _Scanner(registry, positionals).run(arguments)
    return positionals


class Parser:
    """Binds a :class:`FlagSet` to the tokenizer and keeps the leftover arguments.

    Usage::

        fs = FlagSet("tool")
        name = fs.add_string("name", "", "who to greet")
        p = Parser(fs)
        p.parse(["--name", "world", "extra"])
        name.get(), p.args()   # ("world", ("extra",))
    """

    def __init__(self, flagset: FlagSet) -> None:
        self.flagset = flagset
        self._parsed = False
        self._args: list[str] = []

    def parse(self, arguments: Sequence[str]) -> None:
        """Parse *arguments* (without the program name) into the flag set.

        Any previous positionals are discarded.  On ``-h``/``--help`` with no
        such flag defined, usage is rendered through the flag set first.
        What happens next is decided by ``flagset.error_handling``:
        ``CONTINUE_ON_ERROR`` re-raises the :class:`ParseError`,
        ``EXIT_ON_ERROR`` calls ``sys.exit`` (0 for help, 2 otherwise), and
        ``PANIC_ON_ERROR`` raises :class:`ParsePanic`.
        """
        self._parsed = True
        self._args = []
        try:
            _Scanner(self.flagset, self._args).run(arguments)
        except ParseError as err:
            is_help = isinstance(err, HelpRequested)
            if is_help:
                self.flagset.render_usage()

            handling = self.flagset.error_handling
            if handling is ErrorHandling.EXIT_ON_ERROR:
                sys.exit(0 if is_help else 2)
            if handling is ErrorHandling.PANIC_ON_ERROR:
                raise ParsePanic(str(err)) from err
            raise

    def parsed(self) -> bool:
        """Report whether :meth:`parse` has been called, successful or not."""
        return self._parsed

    def arg(self, i: int) -> str:
        """Return the i'th positional argument, or ``""`` if there is none."""
        if i < 0 or i >= len(self._args):
            return ""
        return self._args[i]

    def nargs(self) -> int:
        return len(self._args)

    def args(self) -> tuple[str, ...]:
        return tuple(self._args)
