"""
Pytest configuration and fixtures for http-client-adapter tests.
"""

import pytest
import responses as responses_lib

from http_adapter.core.adapter import HTTPClientAdapter
from http_adapter.core.env import Env, RequestOptions, SSLOptions
from http_adapter.core.logging.config import LoggingConfig
from http_adapter.core.logging.filters import clear_correlation_id

@pytest.fixture
def url():
    """Base URL for testing."""
    return "https://example.com"


@pytest.fixture
def request_options():
    """Empty request options, mutated by tests."""
    return RequestOptions()


@pytest.fixture
def env(url, request_options):
    """Environment sharing the ``request_options`` fixture."""
    return Env(url=url, request=request_options, ssl=SSLOptions())


@pytest.fixture
def adapter():
    """Adapter with default configuration."""
    adapter = HTTPClientAdapter()
    yield adapter
    adapter.close()


@pytest.fixture
def client(adapter, env):
    """Client handle for ``env``."""
    return adapter.connection(env)


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def logging_config():
    """Console logging at DEBUG level."""
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(tmp_path / "adapter.log")
    )


@pytest.fixture(autouse=True)
def _reset_correlation_id():
    yield
    clear_correlation_id()
