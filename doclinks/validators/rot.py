"""Advisory check for hosts that are known to have moved or died."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping

from ..logging import get_logger
from ..models import LinkTable

# Dead host pattern -> suggested replacement. Add new entries here.
ROTTEN_HOSTS: Mapping[str, str] = MappingProxyType(
    {
        r"(www.)?ggplot2-exts.org": "exts.ggplot2.tidyverse.org/",
    }
)

logger = get_logger("validators.rot")


@dataclass
class RotMatch:
    """A link whose host matches a known dead pattern."""

    row: int
    server: str
    pattern: str
    replacement: str
    orig: str


@dataclass
class RotReport:
    matched: bool = False
    rows: List[RotMatch] = field(default_factory=list)


def check_known_rot(
    table: LinkTable, rotten: Mapping[str, str] = ROTTEN_HOSTS
) -> RotReport:
    """Report rows whose host matches a dead-host pattern.

    Only the first matching pattern is reported per row. The pass/fail
    columns of ``table`` are not touched.
    """
    compiled = [(re.compile(pattern), pattern, replacement) for pattern, replacement in rotten.items()]
    report = RotReport()
    for index, record in enumerate(table):
        if not record.server:
            continue
        for regex, pattern, replacement in compiled:
            if regex.search(record.server):
                report.rows.append(
                    RotMatch(
                        row=index,
                        server=record.server,
                        pattern=pattern,
                        replacement=replacement,
                        orig=record.orig,
                    )
                )
                logger.warning("Known link rot: %s (try %s)", record.orig, replacement)
                break
    report.matched = bool(report.rows)
    return report


__all__ = ["ROTTEN_HOSTS", "RotMatch", "RotReport", "check_known_rot"]
