"""gnuflags — GNU-style command-line flag tokenizer.

Adds combined short booleans (``-tha``), inline and separate option values
(``-o value``, ``-o=value``, ``--name=value``), the ``--`` terminator and the
bare ``-`` positional on top of a small typed flag registry.
"""

from gnuflags.errors import (
    FlagRedefinedError,
    HelpRequested,
    InvalidValueError,
    OptionNotFlagError,
    OptionNotFoundError,
    ParseError,
    ParsePanic,
)
from gnuflags.flagset import ErrorHandling, Flag, FlagSet, Value
from gnuflags.tokenizer import Parser, State, tokenize

__version__ = "0.1.0"

__all__ = [
    "ErrorHandling",
    "Flag",
    "FlagRedefinedError",
    "FlagSet",
    "HelpRequested",
    "InvalidValueError",
    "OptionNotFlagError",
    "OptionNotFoundError",
    "ParseError",
    "ParsePanic",
    "Parser",
    "State",
    "Value",
    "tokenize",
]
