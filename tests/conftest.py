from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.library_builder import LibraryBuilder


@pytest.fixture
def library_builder(tmp_path: Path) -> LibraryBuilder:
    """Provide a reusable pattern library builder rooted at the pytest tmp_path."""
    return LibraryBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    """Drop handlers the CLI attached so later tests do not write to closed capture streams."""
    yield
    logger = logging.getLogger("patternlibrary")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
