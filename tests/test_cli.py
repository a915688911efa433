"""CLI parser and command behaviour tests."""

from __future__ import annotations

import logging

import pytest

from doclinks.cli import _build_parser, main
from tests._fixtures.doc_builder import LessonBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "check"])
    assert args.verbose is True
    assert args.command == "check"
    assert args.paths == ["."]


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["check", "--verbose"])
    assert args.verbose is True


def test_cli_collects_ignore_and_strict_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["check", "docs", "--ignore", "descriptive", "--ignore", "link_length", "--strict"]
    )
    assert args.paths == ["docs"]
    assert args.ignore == ["descriptive", "link_length"]
    assert args.strict is True


def test_cli_rejects_unknown_rule_names() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["check", "--ignore", "spelling"])


def test_check_prints_issues(lesson: LessonBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    lesson.write({"index.md": "[here](http://example.com)\n"})
    main(["check", str(lesson.path())])
    out = capsys.readouterr().out
    assert "[needs HTTPS]: [here](http://example.com)" in out
    assert "[uninformative link text]: [here](http://example.com)" in out


def test_check_strict_exits_non_zero(lesson: LessonBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    lesson.write({"index.md": "[x](missing.md)\n"})
    with pytest.raises(SystemExit) as excinfo:
        main(["check", "--strict", str(lesson.path())])
    assert excinfo.value.code == 1
    assert "[missing file]: [x](missing.md)" in capsys.readouterr().out


def test_check_missing_path_exits_non_zero(tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(tmp_path / "missing")])
    assert excinfo.value.code == 1
    assert "Path not found" in capsys.readouterr().err


def test_check_reports_clean_lessons(lesson: LessonBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    lesson.write({"index.md": "# Home\n\n[Setup instructions](setup.md)\n", "setup.md": "# Setup\n"})
    main(["check", "--strict", str(lesson.path())])
    assert "All links passed validation" in capsys.readouterr().out


def test_rules_command_lists_every_rule(capsys: pytest.CaptureFixture[str]) -> None:
    main(["rules"])
    out = capsys.readouterr().out
    assert "known_protocol" in out
    assert "link_length" in out
    assert "all_reachable" in out


def test_check_reports_invalid_rot_pattern(lesson: LessonBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    lesson.write({"index.md": "# Home\n", ".doclinks.yml": 'known_rot:\n  "(": "x"\n'})
    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(lesson.path())])
    assert excinfo.value.code == 1
    assert "Invalid configuration" in capsys.readouterr().err


def test_cli_accepts_quiet_before_or_after_command() -> None:
    parser = _build_parser()
    assert parser.parse_args(["--quiet", "check"]).quiet is True
    assert parser.parse_args(["check", "-q"]).quiet is True
    assert parser.parse_args(["check"]).quiet is False


def test_quiet_flag_raises_log_level(capsys: pytest.CaptureFixture[str]) -> None:
    main(["rules", "--quiet"])
    assert logging.getLogger("doclinks").level == logging.WARNING
    main(["rules"])
    assert logging.getLogger("doclinks").level == logging.INFO
