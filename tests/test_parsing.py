"""Tests for building documents from markdown."""

from __future__ import annotations

from pathlib import Path

from doclinks.orchestrator import validate_links
from doclinks.parsing import load_document, parse_document
from doclinks.validators import find_anchor_spans


def _by_text(document, text):
    return next(record for record in document.links if record.text == text)


def test_parse_document_collects_headings_verbatim() -> None:
    doc = parse_document("# Title\n\n## Setup {#custom}\n\nBody text.\n")
    assert doc.headings == ["Title", "Setup {#custom}"]


def test_parse_document_skips_front_matter() -> None:
    markdown = "---\ntitle: Lesson\n---\n\n# Real heading\n\n[link text](https://example.com)\n"
    doc = parse_document(markdown)
    assert doc.headings == ["Real heading"]
    record = _by_text(doc, "link text")
    assert record.line == 7


def test_parse_document_extracts_links_and_components() -> None:
    doc = parse_document(
        "See [the guide](https://example.com:8443/docs?q=1#part) and [top](#top).\n",
        Path("episodes/intro.md"),
    )
    guide = _by_text(doc, "the guide")
    assert guide.type == "link"
    assert guide.scheme == "https"
    assert guide.server == "example.com"
    assert guide.port == 8443
    assert guide.path == "/docs"
    assert guide.query == "q=1"
    assert guide.fragment == "part"

    top = _by_text(doc, "top")
    assert top.path == ""
    assert top.fragment == "top"
    assert doc.home == Path("episodes")


def test_parse_document_reads_pandoc_alt_text() -> None:
    doc = parse_document(
        "![A cat](fig/cat.png){alt='A tabby cat'}\n\n"
        "![Line](fig/line.png){alt=\"\"}\n\n"
        "![Plain](fig/plain.png)\n"
    )
    images = [record for record in doc.links if record.type == "image"]
    assert [image.alt for image in images] == ["A tabby cat", "", None]
    assert [image.text for image in images] == ["A cat", "Line", "Plain"]


def test_parse_document_reads_html_images() -> None:
    doc = parse_document(
        'Inline <img src="fig/a.png"> and <img src="fig/b.png" alt=""> images.\n'
    )
    images = [record for record in doc.links if record.type == "img"]
    assert [image.path for image in images] == ["fig/a.png", "fig/b.png"]
    assert [image.alt for image in images] == [None, ""]


def test_parse_document_records_reference_definitions() -> None:
    doc = parse_document(
        "Use [the key][Setup Key] here.\n\n[Setup Key]: https://example.com/setup\n"
    )
    definition = next(record for record in doc.links if record.anchor)
    assert definition.rel == "setup key"
    assert definition.server == "example.com"
    usage = _by_text(doc, "the key")
    assert usage.anchor is False
    assert usage.server == "example.com"


def test_parse_document_splits_brackets_for_anchor_spans() -> None:
    doc = parse_document("Some [marked text]{#span-id} in a paragraph.\n")
    spans = find_anchor_spans(doc.body)
    assert len(spans) == 1
    assert spans[0].text.startswith("{#span-id}")


def test_load_document_reads_from_disk(tmp_path: Path) -> None:
    source = tmp_path / "episodes" / "intro.md"
    source.parent.mkdir()
    source.write_text("# Intro\n\n[next](next.md)\n", encoding="utf-8")
    doc = load_document(source)
    assert doc.path == source
    assert doc.home == source.parent
    assert len(doc.links) == 1


def test_parse_document_uses_rendered_heading_text() -> None:
    doc = parse_document(
        "## See [the docs](https://x.org/a)\n\n"
        "## Q &amp; A with `code`\n\n"
        "## Setup {#custom}\n"
    )
    assert doc.headings == ["See the docs", "Q & A with code", "Setup {#custom}"]


def test_heading_with_link_is_a_valid_anchor_target() -> None:
    doc = parse_document("## See [the docs](https://x.org/a)\n\n[jump](#see-the-docs)\n")
    table = validate_links(doc)
    assert _by_text(doc, "jump").get("internal_anchor") is True
    assert table is not None


def test_parse_document_keeps_line_breaks_in_link_text() -> None:
    doc = parse_document("Please [click\nhere](https://example.com) now.\n")
    record = doc.links[0]
    assert record.text == "click here"
    validate_links(doc)
    assert record.get("descriptive") is False
