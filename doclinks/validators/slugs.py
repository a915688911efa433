"""Heading and anchor-span slug generation.

The rules follow the auto-identifier convention of pandoc-style renderers so
that fragments written by hand (``[see below](#my-heading)``) can be matched
against the headings of a document:

1. ``Heading {#custom-id}`` is replaced by ``custom-id``; any other trailing
   ``{...}`` attribute block is dropped.
2. Emoji shortcodes such as ``:smile:`` are removed.
3. Text is lowercased and every run of punctuation (Unicode included) or
   whitespace becomes ``-``.
4. A single leading and trailing ``-`` is trimmed.
5. Repeated slugs in one list are numbered ``slug``, ``slug-1``, ``slug-2``...
"""

from __future__ import annotations

import re
import string
import unicodedata
from collections import Counter
from typing import Iterable, List

_EXPLICIT_ID = re.compile(r".*\s\{.*<?#(\S+).*\}")
_TRAILING_ATTRIBUTES = re.compile(r"(\{.+?\}) ?$")
_EMOJI = re.compile(r"<?:[_a-z0-9]+(?=:) ?")
_DASH_RUN = re.compile(r"-{2,}")


def _is_separator(char: str) -> bool:
    if char.isspace() or char in string.punctuation:
        return True
    return unicodedata.category(char).startswith("P")


def _dash_separators(text: str) -> str:
    dashed = "".join("-" if _is_separator(char) else char for char in text)
    return _DASH_RUN.sub("-", dashed)


def slugify(text: str) -> str:
    """Return the slug for a single heading, without disambiguation."""
    swapped = _EXPLICIT_ID.sub(r"\1", text)
    no_curlies = _TRAILING_ATTRIBUTES.sub("", swapped)
    no_emoji = _EMOJI.sub("", no_curlies)
    dashed = _dash_separators(no_emoji.lower())
    if dashed.startswith("-"):
        dashed = dashed[1:]
    if dashed.endswith("-"):
        dashed = dashed[:-1]
    return dashed


class SlugCounter:
    """Numbers repeated slugs the way renderers number duplicate headings."""

    def __init__(self) -> None:
        self._seen: Counter[str] = Counter()

    def unique(self, slug: str) -> str:
        count = self._seen[slug]
        self._seen[slug] += 1
        if count == 0:
            return slug
        return f"{slug}-{count}"


def clean_headings(headings: Iterable[str]) -> List[str]:
    """Slugify an ordered list of headings, numbering repeats."""
    counter = SlugCounter()
    return [counter.unique(slugify(heading)) for heading in headings]


__all__ = ["SlugCounter", "clean_headings", "slugify"]
