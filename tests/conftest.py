"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from symbolwalk.settings import reset_settings
from symbolwalk.syntax import TreeSitterManager


@pytest.fixture(autouse=True)
def fresh_state() -> Iterator[None]:
    """Start every test with default settings and a new parser manager."""
    reset_settings()
    TreeSitterManager.reset()
    yield
    reset_settings()
    TreeSitterManager.reset()
