"""Tests for loading flag definitions from gnuflags.toml."""

import os
from datetime import timedelta
from pathlib import Path

import pytest

from gnuflags.config import (
    CONFIG_FILENAME,
    FlagSetConfig,
    build_flagset,
    find_config,
    load_flag_config,
    parse_flag_config,
)
from gnuflags.flagset import ErrorHandling

STORY_TOML = """\
[flagset]
name = "story"
error_handling = "exit"

[flags.story]
type = "string"
default = "for"
usage = "the purpose of the story"

[flags.t]
type = "bool"
usage = "what about the story"

[flags.jobs]
type = "int"
default = 4

[flags.ratio]
type = "float"
default = 2

[flags.timeout]
type = "duration"
default = "1m30s"
"""


def _write(tmp_path: Path, content: str = STORY_TOML) -> Path:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# load_flag_config()
# ---------------------------------------------------------------------------


class TestLoadFlagConfig:
    def test_header(self, tmp_path: Path) -> None:
        cfg = load_flag_config(_write(tmp_path))
        assert cfg.name == "story"
        assert cfg.error_handling is ErrorHandling.EXIT_ON_ERROR
        assert cfg.path == tmp_path / CONFIG_FILENAME

    def test_flags_in_file_order(self, tmp_path: Path) -> None:
        cfg = load_flag_config(_write(tmp_path))
        assert [f.name for f in cfg.flags] == ["story", "t", "jobs", "ratio", "timeout"]
        t = cfg.flags[1]
        assert t.type == "bool"
        assert t.default is False
        assert t.usage == "what about the story"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_flag_config(tmp_path / "nope.toml")

    def test_defaults_when_sections_absent(self) -> None:
        cfg = parse_flag_config({})
        assert cfg == FlagSetConfig()

    def test_type_defaults_to_string(self) -> None:
        cfg = parse_flag_config({"flags": {"name": {}}})
        assert cfg.flags[0].type == "string"
        assert cfg.flags[0].default == ""

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="unknown type 'list'"):
            parse_flag_config({"flags": {"x": {"type": "list"}}})

    def test_unknown_policy(self) -> None:
        with pytest.raises(ValueError, match="unknown error_handling"):
            parse_flag_config({"flagset": {"error_handling": "ignore"}})

    def test_default_type_mismatch(self) -> None:
        with pytest.raises(ValueError, match="not a valid int"):
            parse_flag_config({"flags": {"n": {"type": "int", "default": "four"}}})

    def test_bool_default_rejected_for_int(self) -> None:
        with pytest.raises(ValueError):
            parse_flag_config({"flags": {"n": {"type": "int", "default": True}}})

    def test_bad_duration_default(self) -> None:
        with pytest.raises(ValueError):
            parse_flag_config({"flags": {"d": {"type": "duration", "default": "soon"}}})

    def test_flag_must_be_table(self) -> None:
        with pytest.raises(ValueError, match="must be a table"):
            parse_flag_config({"flags": {"x": 3}})

    def test_flagset_header_must_be_table(self) -> None:
        with pytest.raises(ValueError, match=r"\[flagset\] must be a table"):
            parse_flag_config({"flagset": 1})


# ---------------------------------------------------------------------------
# find_config()
# ---------------------------------------------------------------------------


class TestFindConfig:
    def test_found_in_start_dir(self, tmp_path: Path) -> None:
        path = _write(tmp_path)
        assert find_config(tmp_path) == path.resolve()

    def test_found_in_parent(self, tmp_path: Path) -> None:
        path = _write(tmp_path)
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == path.resolve()

    def test_from_cwd(self, tmp_path: Path) -> None:
        _write(tmp_path)
        old_cwd = os.getcwd()
        try:
            os.chdir(tmp_path)
            assert find_config().name == CONFIG_FILENAME
        finally:
            os.chdir(old_cwd)


# ---------------------------------------------------------------------------
# build_flagset()
# ---------------------------------------------------------------------------


class TestBuildFlagset:
    def test_values_and_policy(self, tmp_path: Path) -> None:
        fs = build_flagset(load_flag_config(_write(tmp_path)))
        assert fs.name == "story"
        assert fs.error_handling is ErrorHandling.EXIT_ON_ERROR
        assert fs.lookup("story").value.get() == "for"
        assert fs.lookup("t").is_boolean()
        assert fs.lookup("jobs").value.get() == 4
        assert fs.lookup("ratio").value.get() == 2.0
        assert fs.lookup("timeout").value.get() == timedelta(seconds=90)

    def test_usage_from_config(self, tmp_path: Path) -> None:
        fs = build_flagset(load_flag_config(_write(tmp_path)))
        assert '  --story string\n    \tthe purpose of the story (default "for")\n' in (
            fs.format_defaults()
        )
