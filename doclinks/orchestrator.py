"""Pipeline orchestration for link validation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import LinkCheckConfig, load_config
from .logging import get_logger
from .models import RULE_COLUMNS, Document, LinkTable
from .parsing import MarkdownDocumentParser
from .report import collect_link_issues
from .repo_scanner import DocScanner
from .validators import (
    CONTENT_FOLDERS,
    LinkIssue,
    LinkValidationError,
    ReachabilityChecker,
    RotReport,
    build_anchor_set,
    check_known_rot,
    classify_sources,
    link_all_reachable,
    link_descriptive,
    link_enforce_https,
    link_img_alt_text,
    link_internal_anchor,
    link_internal_file,
    link_internal_well_formed,
    link_known_protocol,
    link_length,
)

logger = get_logger("orchestrator")


def validate_links(
    document: Document,
    *,
    folders: Sequence[str] = CONTENT_FOLDERS,
    checker: Optional[ReachabilityChecker] = None,
    max_workers: Optional[int] = None,
) -> Optional[LinkTable]:
    """Run every link rule over ``document`` and return its augmented link table.

    Returns ``None`` when the document has no links, meaning there is nothing
    to validate. Each rule fills one column of the table; rows a rule does not
    apply to are left as ``None``.
    """
    table = document.links
    if table is None or len(table) == 0:
        return None

    table.declare(RULE_COLUMNS)
    sources = classify_sources(table)
    logger.debug(
        "Validating %d link(s) in %s (%d in-page, %d cross-page)",
        len(table),
        document.path,
        sum(sources.in_page),
        sum(sources.cross_page),
    )

    table = link_known_protocol(table)
    table = link_enforce_https(table)
    if any(sources.in_page):
        anchors = build_anchor_set(document.headings, document.body)
        table = link_internal_anchor(table, sources, anchors)
    table = link_internal_file(
        table, sources, str(document.home), folders=folders, max_workers=max_workers
    )
    table = link_internal_well_formed(table, sources)
    table = link_all_reachable(table, sources, checker)
    table = link_img_alt_text(table)
    table = link_descriptive(table)
    table = link_length(table)
    return table


@dataclass
class DocumentResult:
    """Validation outcome for a single document."""

    path: Path
    table: Optional[LinkTable]
    issues: List[LinkIssue] = field(default_factory=list)
    rot: RotReport = field(default_factory=RotReport)


@dataclass
class CheckOutcome:
    """Aggregated result of checking one or more documents."""

    documents: List[DocumentResult] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)

    @property
    def issues(self) -> List[LinkIssue]:
        return [issue for result in self.documents for issue in result.issues]

    @property
    def ok(self) -> bool:
        return not self.issues


class Orchestrator:
    """Coordinates scanning, parsing and validating markdown documents."""

    def __init__(
        self,
        config: LinkCheckConfig | None = None,
        scanner: DocScanner | None = None,
        parser: MarkdownDocumentParser | None = None,
        checker: ReachabilityChecker | None = None,
    ) -> None:
        self.config = config
        self.scanner = scanner
        self.parser = parser or MarkdownDocumentParser()
        self.checker = checker
        self.logger = logger

    def validate_document(
        self,
        document: Document,
        *,
        ignore: Iterable[str] = (),
        config: LinkCheckConfig | None = None,
    ) -> DocumentResult:
        config = config or self._config_for(document.path)
        table = validate_links(
            document,
            folders=config.folders,
            checker=self.checker,
            max_workers=config.max_workers,
        )
        skipped = set(config.ignore) | set(ignore)
        issues = collect_link_issues(table, path=str(document.path), ignore=skipped)
        rot = check_known_rot(table, config.rotten_hosts) if table is not None else RotReport()
        if table is None:
            self.logger.debug("No links found in %s", document.path)
        else:
            self.logger.info("%s: %d link(s), %d issue(s)", document.path, len(table), len(issues))
        return DocumentResult(path=document.path, table=table, issues=issues, rot=rot)

    def validate_markdown(
        self,
        text: str,
        path: str | Path = "index.md",
        *,
        ignore: Iterable[str] = (),
        config: LinkCheckConfig | None = None,
    ) -> DocumentResult:
        document = self.parser.parse(text, Path(path))
        return self.validate_document(document, ignore=ignore, config=config)

    def run_check(
        self,
        paths: Sequence[str | Path],
        *,
        ignore: Iterable[str] = (),
        strict: bool = False,
    ) -> CheckOutcome:
        """Validate every markdown document found under ``paths``."""
        ignore = list(ignore)
        outcome = CheckOutcome()
        for target in paths:
            root = Path(target).expanduser().resolve()
            config = self._config_for(root)
            scanner = self.scanner or DocScanner(exclude_paths=config.exclude_paths)
            documents = scanner.scan(root)
            self.logger.debug("Discovered %d document(s) under %s", len(documents), root)
            for doc_path in documents:
                try:
                    text = doc_path.read_text(encoding="utf-8")
                except UnicodeDecodeError as exc:
                    self.logger.error("Skipping %s: not valid UTF-8 (%s)", doc_path, exc.reason)
                    outcome.skipped.append(doc_path)
                    continue
                document = self.parser.parse(text, doc_path)
                outcome.documents.append(
                    self.validate_document(document, ignore=ignore, config=config)
                )

        if strict and not outcome.ok:
            issues = outcome.issues
            for issue in issues:
                self.logger.error("%s %s", issue.location(), issue.message)
                if self.logger.isEnabledFor(logging.DEBUG):
                    self.logger.debug("%s", issue.info)
            raise LinkValidationError(f"{len(issues)} link issue(s) found", issues)
        return outcome

    def _config_for(self, path: Path) -> LinkCheckConfig:
        if self.config is not None:
            return self.config
        start = path if path.is_dir() else path.parent
        for directory in (start, *start.parents):
            candidate = directory / ".doclinks.yml"
            if candidate.exists():
                return load_config(candidate)
        return LinkCheckConfig(root=start)


__all__ = ["CheckOutcome", "DocumentResult", "Orchestrator", "validate_links"]
