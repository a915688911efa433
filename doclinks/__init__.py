"""Link and image validation for markdown lessons."""

from .models import RULE_COLUMNS, Document, LinkRecord, LinkTable, Node
from .orchestrator import Orchestrator, validate_links
from .parsing import load_document, parse_document

__all__ = [
    "RULE_COLUMNS",
    "Document",
    "LinkRecord",
    "LinkTable",
    "Node",
    "Orchestrator",
    "load_document",
    "parse_document",
    "validate_links",
]

__version__ = "0.1.0"
