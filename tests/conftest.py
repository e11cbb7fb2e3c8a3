"""
Shared pytest fixtures and configuration for safecall tests.

This module provides:
- Settings cache and environment cleanup for test isolation
- structlog reset between tests
- A recording sink fixture that captures diagnostics in a list
"""

import os
import sys
from pathlib import Path

import pytest
import structlog

# Ensure safecall package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from safecall.settings import get_settings
from safecall.sink import list_sink


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        if "json_store" in Path(item.fspath).name:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_safecall_state(monkeypatch):
    """Drop SAFECALL_* variables and cached settings around every test."""
    for key in list(os.environ):
        if key.startswith("SAFECALL_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    structlog.contextvars.clear_contextvars()
    yield
    get_settings.cache_clear()
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


# =============================================================================
# Sink Fixtures
# =============================================================================


@pytest.fixture
def recorded():
    """A (sink, lines) pair; every diagnostic the sink receives lands in lines."""
    return list_sink("test")


@pytest.fixture
def sink(recorded):
    return recorded[0]


@pytest.fixture
def lines(recorded):
    return recorded[1]
