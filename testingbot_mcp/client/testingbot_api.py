"""
TestingBot REST API client.

Thin async wrapper over https://api.testingbot.com/v1 used by operation
handlers. Each method maps to one API call and returns the decoded JSON body.
Failures surface as ``APIError`` (or ``AuthenticationError`` for rejected
credentials); nothing is retried or cached here.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.testingbot.com/v1"
DEFAULT_TIMEOUT = 30.0


# ============================================================================
# Exceptions
# ============================================================================

class TestingBotMCPError(Exception):
    """Base exception for TestingBot errors."""

    __test__ = False  # not a pytest test class


class AuthenticationError(TestingBotMCPError):
    """Credentials missing or rejected."""

    def __init__(self, message: str = "Authentication failed. Please check your credentials."):
        super().__init__(message)


class APIError(TestingBotMCPError):
    """TestingBot API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


# ============================================================================
# Client
# ============================================================================

def _prefixed(data: Dict[str, Any], prefix: str) -> Dict[str, Any]:
    """Nest form fields under ``prefix[...]`` unless already nested."""
    return {
        key if "[" in key else f"{prefix}[{key}]": value
        for key, value in data.items()
    }


class TestingBotClient:
    """Async client for the TestingBot REST API."""

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize TestingBot client.

        Args:
            api_key: TestingBot API key
            api_secret: TestingBot API secret
            base_url: API root
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=(api_key, api_secret),
            timeout=timeout,
            headers={"Accept": "application/json", "User-Agent": "testingbot-mcp-server"},
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    # ========================================================================
    # Transport
    # ========================================================================

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """
        Perform one API call and decode the response.

        Raises:
            AuthenticationError: On 401/403
            APIError: On any other failure
        """
        logger.debug(f"TestingBot API {method} {path}")

        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise APIError(f"Request to TestingBot failed: {e}") from e

        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"TestingBot rejected the credentials (HTTP {response.status_code})"
            )

        if response.is_error:
            raise APIError(self._error_detail(response), status_code=response.status_code)

        if not response.content:
            return {}

        try:
            return response.json()
        except ValueError:
            return {"body": response.text}

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        detail = ""
        try:
            body = response.json()
            if isinstance(body, dict):
                detail = str(body.get("error") or body.get("message") or "")
        except ValueError:
            detail = response.text.strip()
        detail = detail or response.reason_phrase or "request failed"
        return f"{detail} (HTTP {response.status_code})"

    # ========================================================================
    # Browsers & devices
    # ========================================================================

    async def get_browsers(self, type: Optional[str] = None) -> Any:
        params = {"type": type} if type else None
        return await self._request("GET", "/browsers", params=params)

    async def get_devices(self) -> Any:
        return await self._request("GET", "/devices")

    # ========================================================================
    # Tests
    # ========================================================================

    async def get_tests(self, offset: int = 0, limit: int = 10) -> Any:
        return await self._request("GET", "/tests", params={"offset": offset, "count": limit})

    async def get_test_details(self, session_id: str) -> Any:
        return await self._request("GET", f"/tests/{session_id}")

    async def update_test(self, data: Dict[str, Any], session_id: str) -> Any:
        return await self._request("PUT", f"/tests/{session_id}", data=_prefixed(data, "test"))

    async def delete_test(self, session_id: str) -> Any:
        return await self._request("DELETE", f"/tests/{session_id}")

    async def stop_test(self, session_id: str) -> Any:
        return await self._request("PUT", f"/tests/{session_id}/stop")

    # ========================================================================
    # Builds
    # ========================================================================

    async def get_builds(self, offset: int = 0, limit: int = 10) -> Any:
        return await self._request("GET", "/builds", params={"offset": offset, "count": limit})

    async def get_tests_for_build(self, build_id: int) -> Any:
        return await self._request("GET", f"/builds/{build_id}")

    async def delete_build(self, build_id: int) -> Any:
        return await self._request("DELETE", f"/builds/{build_id}")

    # ========================================================================
    # Storage
    # ========================================================================

    async def upload_file(self, local_file_path: Union[str, Path]) -> Any:
        path = Path(local_file_path).expanduser()
        if not path.is_file():
            raise APIError(f"File not found: {path}")

        with path.open("rb") as handle:
            files = {"file": (path.name, handle.read())}
        return await self._request("POST", "/storage", files=files)

    async def upload_remote_file(self, remote_url: str) -> Any:
        return await self._request("POST", "/storage", data={"url": remote_url})

    async def get_storage_files(self, offset: int = 0, limit: int = 10) -> Any:
        return await self._request("GET", "/storage", params={"offset": offset, "count": limit})

    async def delete_storage_file(self, app_url: str) -> Any:
        file_id = app_url.replace("tb://", "", 1)
        return await self._request("DELETE", f"/storage/{file_id}")

    # ========================================================================
    # Screenshots
    # ========================================================================

    async def take_screenshot(
        self,
        url: str,
        browsers: List[Dict[str, Any]],
        resolution: str = "1920x1080",
        wait_time: float = 5,
        full_page: bool = False
    ) -> Any:
        payload = {
            "url": url,
            "browsers": browsers,
            "resolution": resolution,
            "waitTime": wait_time,
            "fullPage": full_page,
        }
        return await self._request("POST", "/screenshots", json=payload)

    async def retrieve_screenshots(self, screenshot_id: str) -> Any:
        return await self._request("GET", f"/screenshots/{screenshot_id}")

    async def get_screenshot_list(self, offset: int = 0, limit: int = 10) -> Any:
        return await self._request("GET", "/screenshots", params={"offset": offset, "count": limit})

    # ========================================================================
    # User & team
    # ========================================================================

    async def get_user_info(self) -> Any:
        return await self._request("GET", "/user")

    async def update_user_info(self, data: Dict[str, Any]) -> Any:
        return await self._request("PUT", "/user", data=_prefixed(data, "user"))

    async def get_team(self) -> Any:
        return await self._request("GET", "/team-management")

    async def get_users_in_team(self) -> Any:
        return await self._request("GET", "/team-management/users")

    async def get_user_from_team(self, user_id: int) -> Any:
        return await self._request("GET", f"/team-management/users/{user_id}")

    # ========================================================================
    # Sessions & tunnels
    # ========================================================================

    async def create_session(self, options: Dict[str, Any]) -> Any:
        return await self._request("POST", "/session", json=options)

    async def get_tunnel_list(self) -> Any:
        return await self._request("GET", "/tunnel/list")

    async def delete_tunnel(self, tunnel_id: Union[int, str]) -> Any:
        return await self._request("DELETE", f"/tunnel/{tunnel_id}")
