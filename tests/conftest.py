import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from dungeongen import logging_utils  # noqa: E402
from dungeongen.layout import DungeonGrid  # noqa: E402


@pytest.fixture(autouse=True)
def _quiet_logging():
    """Keep generation chatter out of captured output; tests that inspect logs reconfigure."""
    logging_utils.configure(level="error", json_mode=False)
    try:
        yield
    finally:
        logging_utils.configure(level="error", json_mode=False)


@pytest.fixture
def make_grid():
    """Factory for seeded grids: make_grid(height, width, seed=1, **kwargs)."""

    def _make(height=20, width=20, seed=1, **kwargs):
        return DungeonGrid(height, width, seed=seed, **kwargs)

    return _make


@pytest.fixture
def empty_grid(make_grid):
    return make_grid(12, 12, seed=1234)
