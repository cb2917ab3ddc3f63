from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.snapshot_builder import SnapshotBuilder


@pytest.fixture
def snapshot_builder(tmp_path: Path) -> SnapshotBuilder:
    """Provide a reusable snapshot builder rooted at the pytest tmp_path."""
    return SnapshotBuilder(tmp_path)


@pytest.fixture(autouse=True)
def reset_declexport_logger():
    """Drop handlers installed by configure_logging so tests stay isolated."""
    yield
    logger = logging.getLogger("declexport")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
