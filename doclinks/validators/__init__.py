"""Link validation rules, slug generation and their shared types."""

from .anchors import build_anchor_set, fetch_anchor_span_ids, find_anchor_spans
from .base import (
    ALLOWED_URI_PROTOCOLS,
    LINK_INFO,
    LINK_TESTS,
    LinkIssue,
    LinkValidationError,
)
from .files import CONTENT_FOLDERS, FileResolver, candidate_directories, exists_at_all, test_file_existence
from .reachability import Reachability, ReachabilityChecker
from .rot import ROTTEN_HOSTS, RotMatch, RotReport, check_known_rot
from .rules import (
    is_uninformative,
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
from .slugs import SlugCounter, clean_headings, slugify
from .sources import SourceClassification, classify_sources

__all__ = [
    "ALLOWED_URI_PROTOCOLS",
    "CONTENT_FOLDERS",
    "FileResolver",
    "LINK_INFO",
    "LINK_TESTS",
    "LinkIssue",
    "LinkValidationError",
    "ROTTEN_HOSTS",
    "Reachability",
    "ReachabilityChecker",
    "RotMatch",
    "RotReport",
    "SlugCounter",
    "SourceClassification",
    "build_anchor_set",
    "candidate_directories",
    "check_known_rot",
    "classify_sources",
    "clean_headings",
    "exists_at_all",
    "fetch_anchor_span_ids",
    "find_anchor_spans",
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
    "slugify",
    "test_file_existence",
]
