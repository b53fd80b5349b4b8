"""
Operation registrations for testingbot-mcp-server.

Each module contributes one list of descriptors; ``OPERATION_GROUPS`` fixes
the order in which they are composed into the registry.
"""

from ..operation_registry import OperationRegistry
from .browser_operations import BROWSER_OPERATIONS
from .build_operations import BUILD_OPERATIONS
from .cdp_operations import CDP_OPERATIONS
from .live_operations import LIVE_OPERATIONS
from .screenshot_operations import SCREENSHOT_OPERATIONS
from .session_operations import TEST_OPERATIONS
from .storage_operations import STORAGE_OPERATIONS
from .team_operations import TEAM_OPERATIONS
from .tunnel_operations import TUNNEL_OPERATIONS
from .user_operations import USER_OPERATIONS

OPERATION_GROUPS = (
    BROWSER_OPERATIONS,
    TEST_OPERATIONS,
    BUILD_OPERATIONS,
    STORAGE_OPERATIONS,
    SCREENSHOT_OPERATIONS,
    USER_OPERATIONS,
    LIVE_OPERATIONS,
    TEAM_OPERATIONS,
    CDP_OPERATIONS,
    TUNNEL_OPERATIONS,
)


def build_registry() -> OperationRegistry:
    """Compose the registry from every operation group."""
    return OperationRegistry(OPERATION_GROUPS)


__all__ = [
    'OPERATION_GROUPS',
    'build_registry',
    'BROWSER_OPERATIONS',
    'TEST_OPERATIONS',
    'BUILD_OPERATIONS',
    'STORAGE_OPERATIONS',
    'SCREENSHOT_OPERATIONS',
    'USER_OPERATIONS',
    'LIVE_OPERATIONS',
    'TEAM_OPERATIONS',
    'CDP_OPERATIONS',
    'TUNNEL_OPERATIONS',
]
