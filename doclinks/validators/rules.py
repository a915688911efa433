"""Individual link rules.

Every rule writes a single column of the table, and only for the rows it
applies to. Rows outside a rule's scope keep ``None`` so that "not
applicable" can be told apart from "failed". Rules read the raw link columns
and the source classification, never another rule's column.
"""

from __future__ import annotations

import re
import string
from typing import AbstractSet, Optional, Sequence

from ..models import LinkTable
from .base import ALLOWED_URI_PROTOCOLS
from .files import CONTENT_FOLDERS, FileResolver
from .reachability import Reachability, ReachabilityChecker
from .sources import SourceClassification

IMAGE_TYPES = frozenset({"image", "img"})

_PUNCT = "[" + re.escape(string.punctuation) + "]*"
_HERE = r"(?:here|click here|over here)"
_MORE = r"(?:(?:for )?more(?: info(?:rmation)?)?|read more|read on)(?: about)?"
UNINFORMATIVE_PATTERN = re.compile(
    _PUNCT
    + r"(?:link|this|this link|a link|link to|"
    + _HERE
    + r"(?: for)?(?: "
    + _MORE
    + r")?|"
    + _MORE
    + r")"
    + _PUNCT,
    re.IGNORECASE,
)


def is_uninformative(text: Optional[str]) -> bool:
    """Return True if the whole link text is a generic phrase such as "click here"."""
    return UNINFORMATIVE_PATTERN.fullmatch((text or "").strip()) is not None


def link_known_protocol(table: LinkTable) -> LinkTable:
    allowed = set(ALLOWED_URI_PROTOCOLS)
    mask = [True] * len(table)
    table.write("known_protocol", mask, [record.scheme in allowed for record in table])
    return table


def link_enforce_https(table: LinkTable) -> LinkTable:
    # Valid when the scheme is known and is not plain http.
    allowed = set(ALLOWED_URI_PROTOCOLS)
    mask = [True] * len(table)
    values = [record.scheme in allowed and record.scheme != "http" for record in table]
    table.write("enforce_https", mask, values)
    return table


def link_internal_anchor(
    table: LinkTable, sources: SourceClassification, anchors: AbstractSet[str]
) -> LinkTable:
    mask = list(sources.in_page)
    values = [record.fragment in anchors for record, keep in zip(table, mask) if keep]
    table.write("internal_anchor", mask, values)
    return table


def link_internal_file(
    table: LinkTable,
    sources: SourceClassification,
    home: str,
    *,
    folders: Sequence[str] = CONTENT_FOLDERS,
    max_workers: Optional[int] = None,
) -> LinkTable:
    mask = [cross and not anchor for cross, anchor in zip(sources.cross_page, sources.is_anchor)]
    if not any(mask):
        return table
    paths = [record.path for record, keep in zip(table, mask) if keep]
    resolver = FileResolver(home, folders=folders, max_workers=max_workers)
    table.write("internal_file", mask, resolver.exists_many(paths))
    return table


def link_internal_well_formed(table: LinkTable, sources: SourceClassification) -> LinkTable:
    # A relative path that is also a reference key means [text](key) was written for [text][key].
    mask = [cross and anchor for cross, anchor in zip(sources.cross_page, sources.is_anchor)]
    table.write("internal_well_formed", mask, [False] * sum(mask))
    return table


def link_all_reachable(
    table: LinkTable,
    sources: Optional[SourceClassification] = None,
    checker: Optional[ReachabilityChecker] = None,
) -> LinkTable:
    if checker is None or sources is None:
        return table
    mask = []
    values = []
    for record, external in zip(table, sources.external):
        verdict = checker.check(record.orig) if external else Reachability.UNKNOWN
        mask.append(verdict is not Reachability.UNKNOWN)
        if verdict is not Reachability.UNKNOWN:
            values.append(verdict is Reachability.REACHABLE)
    table.write("all_reachable", mask, values)
    return table


def link_img_alt_text(table: LinkTable) -> LinkTable:
    # alt="" marks a decorative image and passes.
    mask = [record.type in IMAGE_TYPES for record in table]
    values = [record.alt is not None for record, keep in zip(table, mask) if keep]
    table.write("img_alt_text", mask, values)
    return table


def link_descriptive(table: LinkTable) -> LinkTable:
    mask = [not record.anchor for record in table]
    values = [not is_uninformative(record.text) for record, keep in zip(table, mask) if keep]
    table.write("descriptive", mask, values)
    return table


def link_length(table: LinkTable) -> LinkTable:
    mask = [record.type == "link" and not record.anchor for record in table]
    values = [len((record.text or "").strip()) >= 2 for record, keep in zip(table, mask) if keep]
    table.write("link_length", mask, values)
    return table


__all__ = [
    "IMAGE_TYPES",
    "UNINFORMATIVE_PATTERN",
    "is_uninformative",
    "link_all_reachable",
    "link_descriptive",
    "link_enforce_https",
    "link_img_alt_text",
    "link_internal_anchor",
    "link_internal_file",
    "link_internal_well_formed",
    "link_known_protocol",
    "link_length",
]
