"""Shared test fixtures and configuration."""

import io
import logging

import pytest

from fixture_fetcher.console import Console

pytest_plugins = [
    "tests.fixtures.data_fixtures",
    "tests.fixtures.env_fixtures",
    "tests.fixtures.mock_fixtures",
]


@pytest.fixture
def console_output():
    """A Console writing into a StringIO, returned as (console, buffer)."""
    buffer = io.StringIO()
    return Console(stream=buffer), buffer


@pytest.fixture
def restore_logging():
    """Restore root logger handlers and level after a test reconfigures logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
