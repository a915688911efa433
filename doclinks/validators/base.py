"""Shared constants, message templates and issue types for link validation."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

# http is allowed here and rejected separately by enforce_https.
ALLOWED_URI_PROTOCOLS: tuple[str, ...] = (
    "",
    "http",
    "https",
    "ftp",
    "ftps",
    "mailto",
    "news",
    "irc",
    "irc6",
    "ircs",
    "gopher",
    "nntp",
    "feed",
    "telnet",
    "mms",
    "rtsp",
    "sms",
    "svn",
    "tel",
    "fax",
    "xmpp",
    "webcal",
    "urn",
)

LINK_TESTS: Mapping[str, str] = MappingProxyType(
    {
        "known_protocol": "[invalid protocol]: {scheme}",
        "enforce_https": "[needs HTTPS]: [{text}]({orig})",
        "internal_anchor": "[missing anchor]: [{text}]({orig})",
        "internal_file": "[missing file]: [{text}]({orig})",
        "internal_well_formed": "[incorrect formatting]: [{text}][{orig}] -> [{text}]({orig})",
        "all_reachable": "",
        "img_alt_text": "[image missing alt-text]: {orig}",
        "descriptive": "[uninformative link text]: [{text}]({orig})",
        "link_length": "[link text too short]: [{text}]({orig})",
    }
)

LINK_INFO: Mapping[str, str] = MappingProxyType(
    {
        "known_protocol": (
            "Links must have a known URL protocol (e.g. https, ftp, mailto). See "
            "<https://developer.wordpress.org/reference/functions/wp_allowed_protocols/#return> "
            "for a list of acceptable protocols."
        ),
        "enforce_https": "Links must use HTTPS <https://https.cio.gov/everything/>",
        "internal_anchor": "Some link anchors for relative links (e.g. [anchor]: link) are missing",
        "internal_file": "Some linked internal files do not exist",
        "internal_well_formed": "Some links were incorrectly formatted",
        "all_reachable": "",
        "img_alt_text": "Images need alt-text <https://webaim.org/techniques/hypertext/link_text#alt_link>",
        "descriptive": (
            "Avoid uninformative link phrases "
            "<https://webaim.org/techniques/hypertext/link_text#uninformative>"
        ),
        "link_length": (
            "Avoid single-letter or missing link text "
            "<https://webaim.org/techniques/hypertext/link_text#link_length>"
        ),
    }
)


@dataclass
class LinkIssue:
    """A single failed rule for one link, formatted for display."""

    rule: str
    message: str
    info: str
    line: Optional[int] = None
    path: Optional[str] = None

    def location(self) -> str:
        if self.path and self.line:
            return f"{self.path}:{self.line}"
        return self.path or ""


class LinkValidationError(RuntimeError):
    """Raised when a strict check finds failing links."""

    def __init__(self, message: str, issues: Sequence[LinkIssue]) -> None:
        super().__init__(message)
        self.issues = list(issues)


__all__ = [
    "ALLOWED_URI_PROTOCOLS",
    "LINK_INFO",
    "LINK_TESTS",
    "LinkIssue",
    "LinkValidationError",
]
