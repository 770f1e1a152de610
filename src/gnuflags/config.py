"""Declarative flag definitions loaded from TOML.

Lets a flag set be described in a file instead of code, which is what the
``gnuflags`` CLI uses to try out argument lists against a set of flags.

Example ``gnuflags.toml``::

    [flagset]
    name = "story"
    error_handling = "continue"   # continue | exit | panic

    [flags.story]
    type = "string"
    default = "for"
    usage = "the purpose of the story"

    [flags.t]
    type = "bool"
    usage = "what about the story"

Usage::

    from gnuflags.config import build_flagset, load_flag_config

    cfg = load_flag_config(Path("gnuflags.toml"))
    fs = build_flagset(cfg)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gnuflags.flagset import ErrorHandling, FlagSet, parse_duration

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib  # type: ignore[import]
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[import,no-redef]

CONFIG_FILENAME = "gnuflags.toml"

# type name -> (accepted TOML python types, default when omitted)
_FLAG_TYPES: dict[str, tuple[tuple[type, ...], Any]] = {
    "bool": ((bool,), False),
    "string": ((str,), ""),
    "int": ((int,), 0),
    "float": ((int, float), 0.0),
    "duration": ((str,), "0s"),
}

_POLICIES: dict[str, ErrorHandling] = {h.value: h for h in ErrorHandling}


@dataclass
class FlagSpec:
    """One ``[flags.<name>]`` table."""

    name: str
    type: str = "string"
    default: Any = None
    usage: str = ""


@dataclass
class FlagSetConfig:
    """Parsed flag configuration file."""

    path: Path | None = None
    name: str = ""
    error_handling: ErrorHandling = ErrorHandling.CONTINUE_ON_ERROR
    flags: list[FlagSpec] = field(default_factory=list)


def find_config(start: Path | None = None) -> Path:
    """Walk up from *start* (or cwd) to the nearest ``gnuflags.toml``."""
    candidate = (start or Path.cwd()).resolve()
    while True:
        if (candidate / CONFIG_FILENAME).exists():
            return candidate / CONFIG_FILENAME
        if candidate == candidate.parent:
            break
        candidate = candidate.parent
    raise FileNotFoundError(
        f"Could not find {CONFIG_FILENAME} in any parent of the current directory. "
        "Pass --flags to point at a flag definition file."
    )


def _parse_flag(name: str, table: Any, path: Path | None) -> FlagSpec:
    where = f"{path}: " if path else ""
    if not isinstance(table, dict):
        raise ValueError(f"{where}[flags.{name}] must be a table")

    type_name = table.get("type", "string")
    if type_name not in _FLAG_TYPES:
        raise ValueError(
            f"{where}flag '{name}' has unknown type {type_name!r}. "
            f"Valid types: {sorted(_FLAG_TYPES)}"
        )
    accepted, fallback = _FLAG_TYPES[type_name]
    default = table.get("default", fallback)
    # bool is an int subclass; don't let `default = true` through for int flags
    if not isinstance(default, accepted) or (
        isinstance(default, bool) and bool not in accepted
    ):
        raise ValueError(
            f"{where}flag '{name}' default {default!r} is not a valid {type_name}"
        )
    if type_name == "duration":
        parse_duration(default)

    return FlagSpec(name=name, type=type_name, default=default, usage=str(table.get("usage", "")))


def parse_flag_config(raw: dict[str, Any], path: Path | None = None) -> FlagSetConfig:
    """Build a :class:`FlagSetConfig` from an already-decoded TOML document."""
    where = f"{path}: " if path else ""
    header = raw.get("flagset", {})
    if not isinstance(header, dict):
        raise ValueError(f"{where}[flagset] must be a table")
    policy_name = header.get("error_handling", "continue")
    if policy_name not in _POLICIES:
        raise ValueError(
            f"{where}unknown error_handling {policy_name!r}. "
            f"Valid values: {sorted(_POLICIES)}"
        )

    flags_table = raw.get("flags", {})
    if not isinstance(flags_table, dict):
        raise ValueError(f"{where}[flags] must be a table")

    return FlagSetConfig(
        path=path,
        name=str(header.get("name", "")),
        error_handling=_POLICIES[policy_name],
        flags=[_parse_flag(name, table, path) for name, table in flags_table.items()],
    )


def load_flag_config(path: Path | None = None) -> FlagSetConfig:
    """Load flag definitions from *path*, or from the nearest ``gnuflags.toml``."""
    if path is None:
        path = find_config()
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    return parse_flag_config(raw, path)


def build_flagset(cfg: FlagSetConfig) -> FlagSet:
    """Define every configured flag on a fresh :class:`FlagSet`."""
    fs = FlagSet(cfg.name, cfg.error_handling)
    for spec in cfg.flags:
        if spec.type == "bool":
            fs.add_bool(spec.name, spec.default, spec.usage)
        elif spec.type == "int":
            fs.add_int(spec.name, spec.default, spec.usage)
        elif spec.type == "float":
            fs.add_float(spec.name, spec.default, spec.usage)
        elif spec.type == "duration":
            fs.add_duration(spec.name, parse_duration(spec.default), spec.usage)
        else:
            fs.add_string(spec.name, spec.default, spec.usage)
    return fs
