"""
Configuration for the TestingBot MCP server.

All settings come from environment variables; a ``.env`` file in the working
directory is loaded first so local development does not need exported
variables. Values are read on every call, so tests can patch the environment.

Usage:
    from testingbot_mcp.config.settings import get_credentials

    api_key, api_secret = get_credentials()

Environment Variables:
    TESTINGBOT_KEY / TB_KEY / TESTINGBOT_USERNAME        - API key
    TESTINGBOT_SECRET / TB_SECRET / TESTINGBOT_ACCESS_KEY - API secret
    TESTINGBOT_API_URL   - API root (default: https://api.testingbot.com/v1)
    TESTINGBOT_TIMEOUT   - HTTP timeout in seconds (default: 30)
    TESTINGBOT_DEBUG     - true to also log to logs/debug.log
    LOG_LEVEL            - explicit log level (default: ERROR, INFO in debug)
    NODE_ENV / MCP_ENV   - "development" raises the default level to INFO
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv

from ..client.testingbot_api import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, AuthenticationError

logger = logging.getLogger(__name__)

KEY_VARIABLES = ("TESTINGBOT_KEY", "TB_KEY", "TESTINGBOT_USERNAME")
SECRET_VARIABLES = ("TESTINGBOT_SECRET", "TB_SECRET", "TESTINGBOT_ACCESS_KEY")

DEFAULT_LOG_FILE = Path("logs") / "debug.log"


def load_environment(dotenv_path: Optional[str] = None) -> bool:
    """
    Load a ``.env`` file into the process environment.

    Existing variables are never overridden.

    Returns:
        True if a file was found and loaded
    """
    return load_dotenv(dotenv_path=dotenv_path, override=False)


def _first_set(names: Tuple[str, ...]) -> str:
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return ""


def get_credentials() -> Tuple[str, str]:
    """
    Resolve the TestingBot API key and secret.

    Returns:
        (api_key, api_secret)

    Raises:
        AuthenticationError: If either value is missing
    """
    key = _first_set(KEY_VARIABLES)
    secret = _first_set(SECRET_VARIABLES)

    if not key or not secret:
        raise AuthenticationError(
            "TestingBot credentials not found. Please set TESTINGBOT_KEY and "
            "TESTINGBOT_SECRET environment variables."
        )

    return key, secret


def get_api_url() -> str:
    """API root URL."""
    return os.getenv("TESTINGBOT_API_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL


def get_timeout() -> float:
    """HTTP timeout in seconds; invalid values fall back to the default."""
    raw = os.getenv("TESTINGBOT_TIMEOUT", "")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid TESTINGBOT_TIMEOUT={raw!r}")
        return DEFAULT_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_TIMEOUT


def is_debug_enabled() -> bool:
    """True when ``TESTINGBOT_DEBUG=true``."""
    return os.getenv("TESTINGBOT_DEBUG", "false").lower() == "true"


def is_dev_mode() -> bool:
    """True when running in a development environment."""
    env = os.getenv("MCP_ENV") or os.getenv("NODE_ENV") or ""
    return env.lower() == "development"


def get_log_level() -> int:
    """
    Effective log level.

    ``LOG_LEVEL`` wins; otherwise INFO in debug/dev mode and ERROR in normal
    operation, keeping stderr quiet under MCP clients.
    """
    explicit = os.getenv("LOG_LEVEL", "").strip().upper()
    if explicit:
        level = logging.getLevelName(explicit)
        if isinstance(level, int):
            return level
        logger.warning(f"Ignoring unknown LOG_LEVEL={explicit!r}")

    return logging.INFO if (is_debug_enabled() or is_dev_mode()) else logging.ERROR


def get_log_file() -> Optional[Path]:
    """Debug log file path, or None when file logging is off."""
    return DEFAULT_LOG_FILE if is_debug_enabled() else None


def get_all_settings() -> Dict[str, object]:
    """
    Snapshot of non-secret settings, for startup logging.

    Example:
        >>> get_all_settings()
        {'api_url': 'https://api.testingbot.com/v1', 'timeout': 30.0, ...}
    """
    return {
        "api_url": get_api_url(),
        "timeout": get_timeout(),
        "debug": is_debug_enabled(),
        "log_level": logging.getLevelName(get_log_level()),
    }
