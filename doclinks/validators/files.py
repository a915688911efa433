"""Existence checks for links that point at other files in a lesson."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..logging import get_logger

# Folders searched one level above a document: "." plus the sandpaper and
# styles lesson layouts.
CONTENT_FOLDERS: tuple[str, ...] = (
    ".",
    "episodes",
    "learners",
    "instructors",
    "profiles",
    "_episodes",
    "_episodes_rmd",
    "_extras",
    "_includes",
)

_SUBSTITUTE_EXTENSIONS = ("md", "Rmd")

PathLike = Union[str, Path]

logger = get_logger("validators.files")


def _join(base: PathLike, path: str) -> str:
    # String join keeps an absolute link path ("/setup.md") under base.
    return os.path.normpath(f"{base}/{path}")


def _with_extension(path: str, extension: str) -> str:
    stem, _ = os.path.splitext(path)
    return f"{stem}.{extension}"


def exists_at_all(path: str) -> bool:
    """Return True if ``path`` exists as-is or as a markdown/R markdown source."""
    if os.path.exists(path):
        return True
    return any(os.path.exists(_with_extension(path, ext)) for ext in _SUBSTITUTE_EXTENSIONS)


def candidate_directories(
    home: PathLike, folders: Sequence[str] = CONTENT_FOLDERS
) -> List[str]:
    """Return the base directories searched for a document living in ``home``."""
    bases = [os.path.normpath(str(home))]
    for folder in folders:
        base = _join(home, f"../{folder}")
        if os.path.isdir(base) and base not in bases:
            bases.append(base)
    return bases


def test_file_existence(
    path: str, home: PathLike, folders: Sequence[str] = CONTENT_FOLDERS
) -> bool:
    """Return True if ``path`` resolves from ``home`` or a sibling content folder."""
    return FileResolver(home, folders=folders).exists(path)


# Keep pytest from collecting the helper above when it is imported into a test module.
test_file_existence.__test__ = False  # type: ignore[attr-defined]


class FileResolver:
    """Resolves cross-page paths against the candidate directories of one document."""

    def __init__(
        self,
        home: PathLike,
        *,
        folders: Sequence[str] = CONTENT_FOLDERS,
        max_workers: Optional[int] = None,
    ) -> None:
        self.home = home
        self.bases = candidate_directories(home, folders)
        self.max_workers = max_workers
        logger.debug("Resolving links from %s against %d base(s)", home, len(self.bases))

    def exists(self, path: str) -> bool:
        return any(exists_at_all(_join(base, path)) for base in self.bases)

    def exists_many(self, paths: Sequence[str]) -> List[bool]:
        """Resolve ``paths`` in order, optionally probing them on a thread pool."""
        if not self.max_workers or self.max_workers < 2 or len(paths) < 2:
            return [self.exists(path) for path in paths]
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(self.exists, paths))


__all__ = [
    "CONTENT_FOLDERS",
    "FileResolver",
    "candidate_directories",
    "exists_at_all",
    "test_file_existence",
]
