"""errors.py – Exception taxonomy for flag parsing.

Every error the tokenizer can report derives from :class:`ParseError` and
carries the offending option name in ``.option``.  :class:`HelpRequested` is
not a real failure: it signals that ``-h`` / ``--help`` was given without a
registered flag of that name, so the caller can render usage text.
"""

from __future__ import annotations


class ParseError(Exception):
    """Base class for errors raised while tokenizing an argument list."""

    reason = "parse error"

    def __init__(self, option: str = "") -> None:
        self.option = option
        super().__init__(self._message())

    def _message(self) -> str:
        return f'option "{self.option}": {self.reason}'


class OptionNotFoundError(ParseError):
    """A buffered option name has no entry in the flag registry."""

    reason = "option not found"


class OptionNotFlagError(ParseError):
    """A valued short option was combined with trailing letters (``-ox``)."""

    reason = "used as a flag when it expects a value"


class HelpRequested(ParseError):
    """``-h`` or ``--help`` was given and no such flag is registered."""

    reason = "help requested"

    def _message(self) -> str:
        return "flag: help requested"


class InvalidValueError(ParseError):
    """The registry rejected the text supplied for an option."""

    def __init__(self, option: str, value: str, cause: Exception | str) -> None:
        self.value = value
        self.cause = cause
        self.reason = str(cause)
        super().__init__(option)

    def _message(self) -> str:
        return f'invalid value "{self.value}" for option "{self.option}": {self.reason}'


class ParsePanic(RuntimeError):
    """Raised instead of the parse error under ``ErrorHandling.PANIC_ON_ERROR``."""


class FlagRedefinedError(ValueError):
    """A flag name was defined twice on the same :class:`~gnuflags.flagset.FlagSet`."""

    def __init__(self, flagset_name: str, name: str) -> None:
        self.name = name
        where = f"{flagset_name} " if flagset_name else ""
        super().__init__(f"{where}flag redefined: {name}")
