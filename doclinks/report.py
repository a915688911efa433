"""Turn a validated link table into readable issues."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from .models import LinkRecord, LinkTable
from .validators.base import LINK_INFO, LINK_TESTS, LinkIssue


class _Blank(dict):
    def __missing__(self, key: str) -> str:
        return ""


def _format(template: str, record: LinkRecord) -> str:
    fields = _Blank(scheme=record.scheme, text=record.text, orig=record.orig)
    return template.format_map(fields)


def collect_link_issues(
    table: Optional[LinkTable],
    *,
    path: Optional[str] = None,
    ignore: Iterable[str] = (),
) -> List[LinkIssue]:
    """Return one issue per failed cell, in row order then rule order.

    Rules without a message template (``all_reachable``) never produce issues.
    """
    if table is None:
        return []
    skipped = set(ignore)
    issues: List[LinkIssue] = []
    for record in table:
        for rule in table.columns:
            if rule in skipped or record.get(rule) is not False:
                continue
            template = LINK_TESTS.get(rule, "")
            if not template:
                continue
            issues.append(
                LinkIssue(
                    rule=rule,
                    message=_format(template, record),
                    info=LINK_INFO.get(rule, ""),
                    line=record.line,
                    path=path,
                )
            )
    return issues


def format_report(issues: Sequence[LinkIssue]) -> str:
    """Render issues grouped by file, followed by one explanation per failing rule."""
    if not issues:
        return "All links passed validation"
    by_path: Dict[str, List[LinkIssue]] = defaultdict(list)
    for issue in issues:
        by_path[issue.path or "<document>"].append(issue)

    lines: List[str] = []
    for path, entries in by_path.items():
        lines.append(path)
        for issue in entries:
            prefix = f"  {issue.line}: " if issue.line else "  "
            lines.append(f"{prefix}{issue.message}")

    seen: List[str] = []
    for issue in issues:
        if issue.rule not in seen and issue.info:
            seen.append(issue.rule)
    if seen:
        lines.append("")
        lines.extend(f"- {LINK_INFO[rule]}" for rule in seen)
    return "\n".join(lines)


__all__ = ["collect_link_issues", "format_report"]
