"""
Global pytest configuration for robin_chunking tests.

Keeps library logging off the console during test runs; tests that check
console output configure it themselves.
"""

import pytest

from robin_chunking.logging_config import LogLevel, configure_logging


@pytest.fixture(scope="session", autouse=True)
def configure_test_logging():
    """Log at debug level without console output for the whole session."""
    configure_logging(
        level=LogLevel.DEBUG,
        console_output=False,
        collect_performance=False,
        collect_metrics=False
    )
    yield
    configure_logging(level=LogLevel.NORMAL, console_output=True)
