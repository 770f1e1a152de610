"""Shared CLI utilities for the gnuflags command.

Provides the common ``--flags`` option, flag-set loading, and standardised
output / error helpers so every subcommand reports problems the same way.

Usage in a command::

    from gnuflags.cli import FlagsOption, error_exit, get_flagset

    @app.command()
    def main(flags: Path | None = FlagsOption) -> None:
        fs = get_flagset(flags)
        ...
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from gnuflags.config import build_flagset, load_flag_config
from gnuflags.flagset import ErrorHandling, FlagSet

# Re-usable Typer option for --flags
FlagsOption: Path | None = typer.Option(
    None,
    "--flags",
    "-f",
    help="Flag definition file (default: nearest gnuflags.toml).",
)


def get_flagset(path: Path | None = None, *, json_mode: bool = False) -> FlagSet:
    """Load flag definitions and build a flag set, exiting on config errors.

    The configured ``error_handling`` is replaced by ``CONTINUE_ON_ERROR`` so
    that parse errors always reach the command's own reporting.
    """
    try:
        cfg = load_flag_config(path)
    except (FileNotFoundError, ValueError) as exc:
        error_exit(str(exc), json_mode=json_mode)
    return build_flagset(dataclasses.replace(cfg, error_handling=ErrorHandling.CONTINUE_ON_ERROR))


# ---------------------------------------------------------------------------
# Standardised output helpers
# ---------------------------------------------------------------------------

_err_console = Console(stderr=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {escape(msg)}", highlight=False)
    raise typer.Exit(code=code)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2, ensure_ascii=False))
