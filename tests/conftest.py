"""Pytest configuration and fixtures."""

import io
import logging

import pytest

from utest.registry import ContextRegistry, reset_registry
from utest.reporting.console import ConsoleReporter
from utest.runner import Runner


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Reset utest loggers after each test so CLI runs do not leak handlers."""
    yield

    names = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name == "utest" or name.startswith("utest.")
    ]

    for name in names:
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def fresh_global_registry():
    """Never let the process-wide registry leak between tests."""
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def registry() -> ContextRegistry:
    return ContextRegistry()


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def runner(registry, stream) -> Runner:
    return Runner(registry=registry, reporter=ConsoleReporter(stream=stream))
