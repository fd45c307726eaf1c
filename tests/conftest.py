"""Pytest configuration for async testing.

This configuration ensures:
1. Async tests are marked for pytest-asyncio
2. Every adapter test gets a fresh in-memory relationship store
3. Logger assertions work through bound loggers
"""

import asyncio
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from relauthz.domain import policy
from relauthz.domain.value_objects import AuthzContext, bind_bootstrap, bind_user
from relauthz.infrastructure.authorization.spicedb_adapter import SpiceDBAdapter
from tests.utils.fake_spicedb import FakeSpiceDB

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)


@pytest.fixture
def mock_logger():
    """Create mock LoggerProtocol.

    bind() returns the same mock so calls made through a bound logger can
    be asserted on the fixture directly.
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.bind = MagicMock(return_value=logger)
    return logger


@pytest.fixture
def fake_spicedb():
    """Empty in-memory relationship store."""
    return FakeSpiceDB()


@pytest.fixture
def adapter(fake_spicedb, mock_logger):
    """SpiceDBAdapter wired to the in-memory store."""
    return SpiceDBAdapter(client=fake_spicedb, logger=mock_logger)


@pytest.fixture
def bootstrap_ctx():
    return bind_bootstrap(AuthzContext())


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def user_ctx(user_id):
    return bind_user(AuthzContext(), user_id)


@pytest.fixture
def org_id():
    return uuid4()


@pytest.fixture
def org(org_id):
    return policy.organization(org_id)


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests against a real SpiceDB"
    )
    config.addinivalue_line("markers", "asyncio: Async test that requires event loop")


# Test execution configuration
def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions.

    This ensures all async tests are properly marked even if
    the developer forgets to add @pytest.mark.asyncio.
    """
    for item in items:
        if asyncio.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)
