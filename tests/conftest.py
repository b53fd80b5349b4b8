"""Shared fixtures for testingbot-mcp-server tests."""

from unittest.mock import AsyncMock

import pytest

from testingbot_mcp.client.testingbot_api import TestingBotClient
from testingbot_mcp.registry.dispatcher import OperationDispatcher
from testingbot_mcp.registry.operations import build_registry


@pytest.fixture
def client():
    """Fake TestingBot client; every API method is an AsyncMock."""
    return AsyncMock(spec=TestingBotClient)


@pytest.fixture(scope="session")
def registry():
    """Registry with every operation group."""
    return build_registry()


@pytest.fixture
def dispatcher(registry, client):
    """Dispatcher wired to the fake client."""
    return OperationDispatcher(registry, client)
