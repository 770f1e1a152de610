"""commandline.py – Process-wide flag set bound to ``sys.argv``.

For small programs that just want global flags::

    from gnuflags import commandline

    verbose = commandline.command_line.add_bool("v", False, "verbose")
    commandline.parse()
    for path in commandline.args():
        ...

Libraries should construct their own :class:`~gnuflags.flagset.FlagSet` and
:class:`~gnuflags.tokenizer.Parser` instead of touching this module.
"""

from __future__ import annotations

import os
import sys

from gnuflags.flagset import ErrorHandling, FlagSet
from gnuflags.tokenizer import Parser

command_line = FlagSet(
    os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "",
    ErrorHandling.EXIT_ON_ERROR,
)
_parser = Parser(command_line)


def parse() -> None:
    """Parse ``sys.argv[1:]`` into :data:`command_line`.

    Call after all flags are defined and before any are read.
    """
    _parser.parse(sys.argv[1:])


def parsed() -> bool:
    return _parser.parsed()


def arg(i: int) -> str:
    """Return the i'th remaining argument, or ``""`` if it does not exist."""
    return _parser.arg(i)


def nargs() -> int:
    return _parser.nargs()


def args() -> tuple[str, ...]:
    return _parser.args()
