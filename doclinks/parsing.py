"""Build :class:`Document` objects from markdown source with markdown-it-py."""

from __future__ import annotations

import re
from html.parser import HTMLParser
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .logging import get_logger
from .models import Document, LinkRecord, LinkTable, Node

_BRACKETS = re.compile(r"(\[|\])")
_PANDOC_ALT = re.compile(r"^\{[^}]*?\balt\s*=\s*(['\"])(.*?)\1[^}]*\}")
_FRONT_MATTER = re.compile(r"\A---[ \t]*\n.*?\n---[ \t]*(?:\n|\Z)", re.DOTALL)

logger = get_logger("parsing")


class _ImageTagParser(HTMLParser):
    """Collects the attributes of raw ``<img>`` tags."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.images: List[Dict[str, Optional[str]]] = []

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        if tag == "img":
            self.images.append(dict(attrs))

    handle_startendtag = handle_starttag


def _html_images(html: str) -> List[Dict[str, Optional[str]]]:
    parser = _ImageTagParser()
    parser.feed(html)
    parser.close()
    return parser.images


def _blank_front_matter(text: str) -> str:
    # Blank out YAML front matter but keep its lines so reported line numbers stay right.
    match = _FRONT_MATTER.match(text)
    if not match:
        return text
    return "\n" * match.group(0).count("\n") + text[match.end():]


def _split_text(content: str) -> List[Node]:
    return [
        Node(kind="text", text=piece, asis=piece in ("[", "]"))
        for piece in _BRACKETS.split(content)
        if piece
    ]


def _line_of(token: Token) -> Optional[int]:
    return token.map[0] + 1 if token.map else None


def _token_text(token: Token) -> str:
    if token.type in ("text", "code_inline", "image"):
        return token.content
    if token.type in ("softbreak", "hardbreak"):
        return " "
    return ""


def _inline_text(children: Sequence[Token]) -> str:
    """Plain text of inline tokens; markup, URLs and raw HTML are dropped."""
    return "".join(_token_text(child) for child in children)


class MarkdownDocumentParser:
    """Extracts headings, a node tree and the link table from markdown text."""

    def __init__(self, md: Optional[MarkdownIt] = None) -> None:
        self.md = md or MarkdownIt("commonmark").enable("table")

    def parse(self, text: str, path: Path) -> Document:
        env: Dict[str, Any] = {}
        tokens = self.md.parse(_blank_front_matter(text), env)

        headings: List[str] = []
        body = Node(kind="document")
        records: List[LinkRecord] = []

        for index, token in enumerate(tokens):
            if token.type == "heading_open" and index + 1 < len(tokens):
                headings.append(_inline_text(tokens[index + 1].children or []))
            elif token.type == "inline":
                line = _line_of(token)
                body.children.append(self._inline_tree(token.children or []))
                records.extend(self._inline_links(token.children or [], line))
            elif token.type == "html_block":
                line = _line_of(token)
                records.extend(self._html_links(token.content, line))

        records.extend(self._reference_definitions(env))
        records.sort(key=lambda record: record.line or 0)
        logger.debug("Parsed %s: %d heading(s), %d link(s)", path, len(headings), len(records))
        return Document(path=path, headings=headings, body=body, links=LinkTable(records))

    @staticmethod
    def _inline_tree(children: Sequence[Token]) -> Node:
        root = Node(kind="inline")
        stack = [root]
        for child in children:
            if child.nesting == 1:
                node = Node(kind=child.type[: -len("_open")])
                stack[-1].children.append(node)
                stack.append(node)
            elif child.nesting == -1:
                if len(stack) > 1:
                    stack.pop()
            elif child.type == "text":
                stack[-1].children.extend(_split_text(child.content))
            else:
                stack[-1].children.append(Node(kind=child.type, text=child.content))
        return root

    def _inline_links(self, children: Sequence[Token], line: Optional[int]) -> List[LinkRecord]:
        records: List[LinkRecord] = []
        open_link: Optional[Token] = None
        depth = 0
        text_parts: List[str] = []

        for index, child in enumerate(children):
            if child.type == "link_open":
                if depth == 0:
                    open_link = child
                    text_parts = []
                depth += 1
                continue
            if child.type == "link_close":
                depth -= 1
                if depth == 0 and open_link is not None:
                    records.append(
                        LinkRecord.from_url(
                            str(open_link.attrGet("href") or ""),
                            type="link",
                            text="".join(text_parts),
                            title=str(open_link.attrGet("title") or ""),
                            line=line,
                        )
                    )
                    open_link = None
                continue
            if depth > 0:
                text_parts.append(_token_text(child))

            if child.type == "image":
                following = children[index + 1] if index + 1 < len(children) else None
                records.append(self._image_record(child, following, line))
            elif child.type == "html_inline":
                records.extend(self._html_links(child.content, line))
        return records

    @staticmethod
    def _image_record(token: Token, following: Optional[Token], line: Optional[int]) -> LinkRecord:
        alt: Optional[str] = None
        if following is not None and following.type == "text":
            match = _PANDOC_ALT.match(following.content)
            if match:
                alt = match.group(2)
        return LinkRecord.from_url(
            str(token.attrGet("src") or ""),
            type="image",
            text=token.content,
            alt=alt,
            title=str(token.attrGet("title") or ""),
            line=line,
        )

    @staticmethod
    def _html_links(html: str, line: Optional[int]) -> List[LinkRecord]:
        records = []
        for attrs in _html_images(html):
            # A bare ``alt`` attribute arrives as None but still marks a decorative image.
            alt = (attrs["alt"] or "") if "alt" in attrs else None
            records.append(
                LinkRecord.from_url(
                    attrs.get("src") or "",
                    type="img",
                    text=attrs.get("title") or "",
                    alt=alt,
                    line=line,
                )
            )
        return records

    @staticmethod
    def _reference_definitions(env: Dict[str, Any]) -> List[LinkRecord]:
        records = []
        for label, reference in (env.get("references") or {}).items():
            mapping = reference.get("map")
            key = label.lower()
            records.append(
                LinkRecord.from_url(
                    str(reference.get("href") or ""),
                    type="link",
                    text=key,
                    rel=key,
                    anchor=True,
                    title=str(reference.get("title") or ""),
                    line=mapping[0] + 1 if mapping else None,
                )
            )
        return records


def parse_document(text: str, path: Path | str = "index.md") -> Document:
    """Parse markdown ``text`` as though it were stored at ``path``."""
    return MarkdownDocumentParser().parse(text, Path(path))


def load_document(path: Path | str) -> Document:
    """Read and parse a markdown file from disk."""
    source = Path(path)
    return parse_document(source.read_text(encoding="utf-8"), source)


__all__ = ["MarkdownDocumentParser", "load_document", "parse_document"]
