"""TestingBot REST API client."""

from .testingbot_api import (
    DEFAULT_BASE_URL,
    APIError,
    AuthenticationError,
    TestingBotClient,
    TestingBotMCPError,
)

__all__ = [
    'DEFAULT_BASE_URL',
    'APIError',
    'AuthenticationError',
    'TestingBotClient',
    'TestingBotMCPError',
]
