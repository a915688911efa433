"""Collect the fragment identifiers a document defines."""

from __future__ import annotations

from typing import FrozenSet, List, Sequence

from ..models import Node
from .slugs import clean_headings


def find_anchor_spans(body: Node) -> List[Node]:
    """Return the ``{#id}`` text nodes that close a ``[text]{#id}`` span.

    A span is a literal ``]`` text node immediately followed by a sibling
    text node that starts with ``{#``.
    """
    spans: List[Node] = []
    for node in body.walk():
        children = node.children
        for index, child in enumerate(children[:-1]):
            if child.kind != "text" or not child.asis or child.text != "]":
                continue
            following = children[index + 1]
            if following.kind == "text" and following.text.startswith("{#"):
                spans.append(following)
    return spans


def fetch_anchor_span_ids(body: Node) -> List[str]:
    """Slugify the ids of every inline anchor span in ``body``."""
    payloads = []
    for span in find_anchor_spans(body):
        text = span.text
        close = text.find("}")
        if close != -1:
            text = text[: close + 1]
        payloads.append(f"h1 {text}")
    return clean_headings(payloads)


def build_anchor_set(headings: Sequence[str], body: Node) -> FrozenSet[str]:
    """Return every fragment that resolves inside the document."""
    return frozenset(clean_headings(headings)) | frozenset(fetch_anchor_span_ids(body))


__all__ = ["build_anchor_set", "fetch_anchor_span_ids", "find_anchor_spans"]
