from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.doc_builder import LessonBuilder


@pytest.fixture
def lesson(tmp_path: Path) -> LessonBuilder:
    """Provide a reusable lesson builder rooted at the pytest tmp_path."""
    return LessonBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_doclinks_logger() -> Iterator[None]:
    """Undo configure_logging() so caplog keeps seeing doclinks records."""
    yield
    logger = logging.getLogger("doclinks")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
