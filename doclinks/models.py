"""Core data models shared across doclinks components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence
from urllib.parse import urlsplit

RULE_COLUMNS = (
    "known_protocol",
    "enforce_https",
    "internal_anchor",
    "internal_file",
    "internal_well_formed",
    "all_reachable",
    "img_alt_text",
    "descriptive",
    "link_length",
)


@dataclass
class LinkRecord:
    """A single link or image reference found in a document."""

    orig: str
    type: str = "link"
    text: str = ""
    alt: Optional[str] = None
    scheme: str = ""
    user: str = ""
    server: str = ""
    port: Optional[int] = None
    path: str = ""
    query: str = ""
    fragment: str = ""
    rel: Optional[str] = None
    anchor: bool = False
    title: str = ""
    line: Optional[int] = None
    results: Dict[str, Optional[bool]] = field(default_factory=dict)

    @classmethod
    def from_url(cls, orig: str, **fields: Any) -> "LinkRecord":
        """Build a record from a raw reference, splitting it into URL components."""
        parts = urlsplit(orig.strip())
        try:
            port = parts.port
        except ValueError:
            port = None
        return cls(
            orig=orig,
            scheme=parts.scheme.lower(),
            user=parts.username or "",
            server=parts.hostname or "",
            port=port,
            path=parts.path,
            query=parts.query,
            fragment=parts.fragment,
            **fields,
        )

    def get(self, column: str) -> Optional[bool]:
        return self.results.get(column)

    def set(self, column: str, value: bool) -> None:
        self.results[column] = bool(value)


class LinkTable:
    """Ordered collection of link records with a fixed set of result columns."""

    def __init__(self, records: Iterable[LinkRecord] = ()) -> None:
        self._records: List[LinkRecord] = list(records)
        self._columns: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[LinkRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> LinkRecord:
        return self._records[index]

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    def declare(self, columns: Sequence[str] = RULE_COLUMNS) -> None:
        """Declare result columns; every row starts unset and previous results are dropped."""
        self._columns = tuple(columns)
        for record in self._records:
            record.results = {name: None for name in self._columns}

    def column(self, name: str) -> List[Optional[bool]]:
        return [record.results.get(name) for record in self._records]

    def write(self, name: str, mask: Sequence[bool], values: Sequence[bool]) -> None:
        """Write ``values`` into column ``name`` for the rows selected by ``mask``.

        ``values`` holds one entry per selected row, in row order.
        """
        if name not in self._columns:
            self._columns += (name,)
            for record in self._records:
                record.results.setdefault(name, None)
        selected = [record for record, keep in zip(self._records, mask) if keep]
        if len(selected) != len(values):
            raise ValueError(f"Expected {len(selected)} values for {name!r}, got {len(values)}")
        for record, value in zip(selected, values):
            record.set(name, value)

    def to_dicts(self) -> List[Dict[str, Any]]:
        rows: List[Dict[str, Any]] = []
        for record in self._records:
            row = asdict(record)
            results = row.pop("results")
            for name in self._columns:
                row[name] = results.get(name)
            rows.append(row)
        return rows


@dataclass
class Node:
    """Minimal document tree node used to locate inline anchor spans."""

    kind: str
    text: str = ""
    asis: bool = False
    children: List["Node"] = field(default_factory=list)

    def walk(self) -> Iterator["Node"]:
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class Document:
    """A parsed markdown document ready for link validation."""

    path: Path
    headings: List[str] = field(default_factory=list)
    body: Node = field(default_factory=lambda: Node(kind="document"))
    links: LinkTable = field(default_factory=LinkTable)

    @property
    def home(self) -> Path:
        return self.path.parent
