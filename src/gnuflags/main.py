"""main.py – ``gnuflags`` CLI entry point.

Loads a flag definition file and shows how an argument list is tokenized
against it: final flag values, which flags were set, and the positional
arguments left over.  Everything after ``--`` is handed to the tokenizer
untouched (a second ``--`` in that list is the tokenizer's own terminator).
"""

from __future__ import annotations

import io
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gnuflags.cli import FlagsOption, error_exit, get_flagset, json_print
from gnuflags.errors import HelpRequested, ParseError
from gnuflags.flagset import Flag
from gnuflags.tokenizer import Parser

console = Console()

app = typer.Typer(
    help="GNU-style flag tokenizer: try argument lists against a flag set.",
    rich_markup_mode="rich",
    no_args_is_help=True,
    epilog="""\
[bold]Typical workflow:[/bold]
  gnuflags usage                         Show the flags in gnuflags.toml
  gnuflags parse -- -tha --story of x    Tokenize an argument list
  gnuflags parse --json -- -o=out.txt    Same, as JSON

[dim]Flags are read from the nearest gnuflags.toml unless --flags is given.
Put the arguments to tokenize after '--' so they are not read as options
of this command.[/dim]""",
)


@app.command("parse")
def parse_cmd(
    arguments: list[str] | None = typer.Argument(
        None, help="Argument list to tokenize (after '--')."
    ),
    flags: Path | None = FlagsOption,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """Tokenize ARGUMENTS and report flag values and positionals."""
    fs = get_flagset(flags, json_mode=json_output)
    usage_buf = io.StringIO()
    fs.set_output(usage_buf if json_output else sys.stdout)
    parser = Parser(fs)

    try:
        parser.parse(arguments or [])
    except HelpRequested as exc:
        # Plain mode: usage text has already been written to stdout.
        if json_output:
            json_print({"usage": usage_buf.getvalue()})
        raise typer.Exit(code=0) from exc
    except ParseError as exc:
        error_exit(str(exc), json_mode=json_output, code=2)

    all_flags: list[Flag] = []
    fs.visit_all(all_flags.append)

    if json_output:
        json_print(
            {
                "flags": {f.name: str(f.value) for f in all_flags},
                "set": [f.name for f in all_flags if f.changed],
                "args": list(parser.args()),
            }
        )
        return

    table = Table(title=fs.name or None)
    table.add_column("Flag", style="cyan")
    table.add_column("Value")
    table.add_column("Set", justify="center")
    for f in all_flags:
        table.add_row(escape(f.name), escape(str(f.value)), "✓" if f.changed else "")
    console.print(table)

    if parser.nargs():
        console.print(f"[bold]Arguments ({parser.nargs()}):[/bold]")
        for i, value in enumerate(parser.args()):
            console.print(f"  {i}: {value!r}", markup=False, highlight=False)
    else:
        console.print("[dim]No positional arguments.[/dim]")


@app.command("usage")
def usage_cmd(flags: Path | None = FlagsOption) -> None:
    """Print the usage text generated for the flag set."""
    fs = get_flagset(flags)
    fs.set_output(sys.stdout)
    fs.render_usage()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
