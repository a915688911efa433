"""Tests for the validation pipeline and orchestrator."""

from __future__ import annotations

from pathlib import Path

import pytest

from doclinks.config import LinkCheckConfig
from doclinks.models import RULE_COLUMNS, Document, LinkRecord, LinkTable
from doclinks.orchestrator import Orchestrator, validate_links
from doclinks.validators import LinkValidationError
from tests._fixtures.doc_builder import LessonBuilder

EPISODE = """
---
title: Introduction
---

# Introduction

## My Heading

## My Heading

See [the second heading](#my-heading-1) and [a missing anchor](#nowhere).

Jump to [the span target](#span-id) or [the setup guide](../learners/setup.md).

A [missing page](missing.html) and an [insecure site](http://example.com).

[here](https://example.com/info)

![A cat](fig/cat.png){alt='A tabby cat'}

![Decorative](fig/line.png)

Some [marked text]{#span-id} with a span.

[Key usage](setup-key)

[setup-key]: https://example.com/setup
"""


def _row(table: LinkTable, text: str) -> LinkRecord:
    return next(record for record in table if record.text == text)


@pytest.fixture
def episode(lesson: LessonBuilder) -> Document:
    lesson.write({"episodes/intro.md": EPISODE, "learners/setup.md": "# Setup\n"})
    lesson.touch("episodes/fig/cat.png", "episodes/fig/line.png")
    return lesson.load("episodes/intro.md")


def test_validate_links_returns_none_for_empty_tables() -> None:
    document = Document(path=Path("empty.md"))
    assert validate_links(document) is None


def test_validate_links_declares_every_rule_column(episode: Document) -> None:
    table = validate_links(episode)
    assert table is not None
    assert table.columns == RULE_COLUMNS
    assert set(table.to_dicts()[0]) >= set(RULE_COLUMNS)


def test_validate_links_end_to_end(episode: Document) -> None:
    table = validate_links(episode)
    assert table is not None

    assert _row(table, "the second heading").get("internal_anchor") is True
    assert _row(table, "a missing anchor").get("internal_anchor") is False
    assert _row(table, "the span target").get("internal_anchor") is True
    assert _row(table, "the setup guide").get("internal_file") is True
    assert _row(table, "missing page").get("internal_file") is False

    insecure = _row(table, "insecure site")
    assert insecure.get("known_protocol") is True
    assert insecure.get("enforce_https") is False
    assert insecure.get("internal_file") is None

    assert _row(table, "here").get("descriptive") is False
    assert _row(table, "A cat").get("img_alt_text") is True
    assert _row(table, "A cat").get("internal_file") is True
    assert _row(table, "Decorative").get("img_alt_text") is False

    usage = _row(table, "Key usage")
    assert usage.get("internal_well_formed") is False
    assert usage.get("internal_file") is None

    definition = _row(table, "setup-key")
    assert definition.anchor is True
    assert definition.get("descriptive") is None
    assert definition.get("link_length") is None

    assert table.column("all_reachable") == [None] * len(table)


def test_validate_links_is_idempotent(episode: Document) -> None:
    first = validate_links(episode)
    assert first is not None
    snapshot = {name: first.column(name) for name in RULE_COLUMNS}

    second = validate_links(episode)
    assert second is not None
    assert {name: second.column(name) for name in RULE_COLUMNS} == snapshot


def test_orchestrator_reports_issues_and_rot(lesson: LessonBuilder) -> None:
    lesson.write(
        {
            "episodes/intro.md": """
            # Intro

            [click here](http://www.ggplot2-exts.org/gallery)
            """
        }
    )
    outcome = Orchestrator().run_check([lesson.path()])

    assert len(outcome.documents) == 1
    result = outcome.documents[0]
    rules = [issue.rule for issue in result.issues]
    assert rules == ["enforce_https", "descriptive"]
    assert result.rot.matched is True
    assert outcome.ok is False


def test_orchestrator_honours_ignored_rules(lesson: LessonBuilder) -> None:
    lesson.write({"index.md": "[here](https://example.com)\n"})
    config = LinkCheckConfig(root=lesson.path(), ignore=["descriptive"])
    outcome = Orchestrator(config=config).run_check([lesson.path("index.md")])
    assert outcome.issues == []


def test_orchestrator_strict_mode_raises(lesson: LessonBuilder) -> None:
    lesson.write({"index.md": "[x](missing.md)\n"})
    with pytest.raises(LinkValidationError) as excinfo:
        Orchestrator().run_check([lesson.path()], strict=True)
    rules = {issue.rule for issue in excinfo.value.issues}
    assert rules == {"internal_file", "link_length"}


def test_orchestrator_uses_extra_content_folders(lesson: LessonBuilder) -> None:
    lesson.write(
        {
            "episodes/intro.md": "[The appendix](appendix.md)\n",
            "appendices/appendix.md": "# Appendix\n",
        }
    )
    plain = Orchestrator().run_check([lesson.path("episodes/intro.md")])
    assert [issue.rule for issue in plain.issues] == ["internal_file"]

    config = LinkCheckConfig(root=lesson.path(), content_folders=["appendices"])
    extended = Orchestrator(config=config).run_check([lesson.path("episodes/intro.md")])
    assert extended.issues == []


def test_validate_markdown_without_links() -> None:
    result = Orchestrator().validate_markdown("# Just a heading\n")
    assert result.table is None
    assert result.issues == []


def test_run_check_skips_undecodable_documents(
    lesson: LessonBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    lesson.write({"index.md": "[Setup guide](https://example.com/setup)\n"})
    broken = lesson.path("latin1.md")
    broken.write_bytes("[caf\xe9](https://example.com)\n".encode("latin-1"))

    with caplog.at_level("ERROR", logger="doclinks"):
        outcome = Orchestrator().run_check([lesson.path()])

    assert [result.path.name for result in outcome.documents] == ["index.md"]
    assert [path.name for path in outcome.skipped] == [broken.name]
    assert "not valid UTF-8" in caplog.text


def test_run_check_loads_root_config_once(
    lesson: LessonBuilder, monkeypatch: pytest.MonkeyPatch
) -> None:
    lesson.write(
        {
            ".doclinks.yml": "ignore: [descriptive]\n",
            "index.md": "[here](https://example.com)\n",
            "episodes/intro.md": "[here](https://example.com)\n",
            "episodes/outro.md": "[here](https://example.com)\n",
        }
    )
    import doclinks.orchestrator as orchestrator_module

    calls = []
    real_load = orchestrator_module.load_config

    def counting_load(path):
        calls.append(path)
        return real_load(path)

    monkeypatch.setattr(orchestrator_module, "load_config", counting_load)
    outcome = Orchestrator().run_check([lesson.path()])

    assert len(outcome.documents) == 3
    assert outcome.issues == []
    assert len(calls) == 1
