"""Classify where each link in a table points."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..models import LinkTable


@dataclass(frozen=True)
class SourceClassification:
    """Per-row flags describing the source of each link."""

    external: Tuple[bool, ...]
    internal: Tuple[bool, ...]
    in_page: Tuple[bool, ...]
    cross_page: Tuple[bool, ...]
    is_anchor: Tuple[bool, ...]

    def __len__(self) -> int:
        return len(self.internal)


def classify_sources(table: LinkTable) -> SourceClassification:
    """Derive source flags from URL component emptiness.

    ``is_anchor`` marks rows whose path is really a reference-definition key,
    i.e. ``[text](key)`` written where ``[text][key]`` was meant.
    """
    keys = {record.rel for record in table if record.rel is not None}
    internal = []
    in_page = []
    cross_page = []
    is_anchor = []
    for record in table:
        local = (
            not record.server
            and not record.scheme
            and record.port is None
            and not record.user
        )
        path = record.path or ""
        internal.append(local)
        in_page.append(local and path == "" and bool(record.fragment))
        cross_page.append(local and path != "")
        is_anchor.append(path in keys)
    return SourceClassification(
        external=tuple(not flag for flag in internal),
        internal=tuple(internal),
        in_page=tuple(in_page),
        cross_page=tuple(cross_page),
        is_anchor=tuple(is_anchor),
    )


__all__ = ["SourceClassification", "classify_sources"]
