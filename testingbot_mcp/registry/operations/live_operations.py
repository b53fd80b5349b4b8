"""
Live testing session registrations.

A live session opens a real browser or device on TestingBot for manual
testing. Nothing is requested from the API: the handlers derive an
environment identifier from the chosen target and compose the launch URL.

Targets are a two-variant union selected by ``platformType``:
- desktop: browser and version on an operating system
- mobile: device on a mobile platform
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Union

from ...utils.urls import encode_uri_component, is_valid_url
from ..operation_registry import OperationCategory, OperationDescriptor, OperationResult
from ..schema import ArgumentSchema, ParamKind, ParamSpec, VariantSchema

logger = logging.getLogger(__name__)

LIVE_START_URL = "https://testingbot.com/members/manual/start"

DESKTOP = "desktop"
MOBILE = "mobile"

DESKTOP_OS_CHOICES = ("Windows", "Mac", "Linux")
DESKTOP_BROWSER_CHOICES = ("chrome", "firefox", "safari", "edge", "ie")
MOBILE_OS_CHOICES = ("android", "ios")

_WHITESPACE = re.compile(r"\s+")


# ============================================================================
# Targets
# ============================================================================

@dataclass(frozen=True)
class DesktopTarget:
    """Desktop browser on an operating system."""
    browser: str
    os: str
    os_version: str
    browser_version: str = "latest"

    @property
    def environment_id(self) -> str:
        # e.g. chrome_120_windows_11
        os_version = _WHITESPACE.sub("_", self.os_version)
        return f"{self.browser.lower()}_{self.browser_version}_{self.os.lower()}_{os_version}"


@dataclass(frozen=True)
class MobileTarget:
    """Device on a mobile platform."""
    platform: str
    platform_version: str
    device: str

    @property
    def environment_id(self) -> str:
        # e.g. ios_16.0_iPhone_14
        device = _WHITESPACE.sub("_", self.device)
        return f"{self.platform.lower()}_{self.platform_version}_{device}"


LiveTarget = Union[DesktopTarget, MobileTarget]


def target_from_arguments(platform_type: str, params: Dict[str, Any]) -> LiveTarget:
    """Build the target for validated live-session arguments."""
    if platform_type == DESKTOP:
        return DesktopTarget(
            browser=params["desiredBrowser"],
            browser_version=params.get("desiredBrowserVersion") or "latest",
            os=params["desiredOS"],
            os_version=params["desiredOSVersion"],
        )
    if platform_type == MOBILE:
        return MobileTarget(
            platform=params["desiredOS"],
            platform_version=params["desiredOSVersion"],
            device=params["desiredDevice"],
        )
    raise ValueError(f"Unknown platform type {platform_type!r}")


def build_session_url(target: LiveTarget, url: str) -> str:
    """
    Compose the live session launch URL.

    Raises:
        ValueError: If ``url`` is not an absolute URL
    """
    if not is_valid_url(url):
        raise ValueError("Invalid URL provided")
    return f"{LIVE_START_URL}?browser={target.environment_id}&url={encode_uri_component(url)}"


def _configuration_lines(target: LiveTarget, params: Dict[str, Any]) -> list:
    if isinstance(target, DesktopTarget):
        return [
            f"- Browser: {target.browser} {target.browser_version}",
            f"- OS: {target.os} {target.os_version}",
            f"- URL: {params['desiredURL']}",
        ]
    return [
        f"- Device: {target.device}",
        f"- OS: {target.platform} {target.platform_version}",
        f"- URL: {params['desiredURL']}",
    ]


def _start(platform_type: str, params: Dict[str, Any]):
    target = target_from_arguments(platform_type, params)
    session_url = build_session_url(target, params["desiredURL"])
    logger.info(
        f"Starting live session (platformType={platform_type}, "
        f"environment={target.environment_id})"
    )
    return target, session_url


# ============================================================================
# Operation Handlers
# ============================================================================

async def start_live_session_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for startLiveSession operation."""
    platform_type = params["platformType"]
    target, session_url = _start(platform_type, params)

    lines = [
        "## Live Session Ready",
        "",
        "Your interactive testing session is ready to start!",
        "",
        f"**Session URL**: {session_url}",
        "",
        "**Configuration:**",
        f"- Platform: {platform_type.capitalize()}",
        *_configuration_lines(target, params),
        "",
        "**Instructions:**",
        "1. Click the URL above or copy it to your browser",
        "2. Log in to TestingBot if prompted",
        "3. The live session will start automatically",
        "4. Interact with the browser/device in real-time",
    ]

    return OperationResult(
        message="\n".join(lines),
        data={"sessionUrl": session_url, "environmentId": target.environment_id},
    )


async def start_desktop_live_session_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for startDesktopLiveSession operation."""
    target, session_url = _start(DESKTOP, params)

    lines = [
        "## Desktop Live Session Ready",
        "",
        f"**Session URL**: {session_url}",
        "",
        "**Configuration:**",
        *_configuration_lines(target, params),
        "",
        "Click the URL above to start your interactive testing session.",
    ]

    return OperationResult(
        message="\n".join(lines),
        data={"sessionUrl": session_url, "environmentId": target.environment_id},
    )


async def start_mobile_live_session_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for startMobileLiveSession operation."""
    target, session_url = _start(MOBILE, params)

    lines = [
        "## Mobile Live Session Ready",
        "",
        f"**Session URL**: {session_url}",
        "",
        "**Configuration:**",
        *_configuration_lines(target, params),
        "",
        "Click the URL above to start your interactive mobile testing session.",
    ]

    return OperationResult(
        message="\n".join(lines),
        data={"sessionUrl": session_url, "environmentId": target.environment_id},
    )


# ============================================================================
# Argument Schemas
# ============================================================================

def desktop_arguments() -> ArgumentSchema:
    return ArgumentSchema(
        ParamSpec("desiredURL", ParamKind.URL, required=True,
                  description="The URL to open in the browser"),
        ParamSpec("desiredOS", ParamKind.ENUM, required=True, choices=DESKTOP_OS_CHOICES,
                  description="Operating system (Windows, Mac, or Linux)"),
        ParamSpec("desiredOSVersion", ParamKind.STRING, required=True,
                  description="OS version (e.g., '11', '13', 'Monterey')"),
        ParamSpec("desiredBrowser", ParamKind.ENUM, required=True,
                  choices=DESKTOP_BROWSER_CHOICES, description="Browser name"),
        ParamSpec("desiredBrowserVersion", ParamKind.STRING, default="latest",
                  description="Browser version or 'latest' (default: latest)"),
        title="DesktopLiveArguments",
    )


def mobile_arguments() -> ArgumentSchema:
    return ArgumentSchema(
        ParamSpec("desiredURL", ParamKind.URL, required=True,
                  description="The URL to open in the mobile browser"),
        ParamSpec("desiredOS", ParamKind.ENUM, required=True, choices=MOBILE_OS_CHOICES,
                  description="Mobile platform (android or ios)"),
        ParamSpec("desiredOSVersion", ParamKind.STRING, required=True,
                  description="OS version (e.g., '13.0', '16.0')"),
        ParamSpec("desiredDevice", ParamKind.STRING, required=True, non_empty=True,
                  description="Device name (e.g., 'iPhone 14', 'Galaxy S23')"),
        title="MobileLiveArguments",
    )


LIVE_SESSION_ARGUMENTS = VariantSchema(
    discriminator="platformType",
    variants={DESKTOP: desktop_arguments(), MOBILE: mobile_arguments()},
    label="platform type",
    description="Platform type: 'desktop' for desktop browsers or 'mobile' for mobile devices",
)


# ============================================================================
# Operation Descriptors
# ============================================================================

START_LIVE_SESSION = OperationDescriptor(
    name="startLiveSession",
    category=OperationCategory.LIVE,
    description=(
        "Start an interactive live testing session on TestingBot. Opens a real browser or "
        "mobile device for manual testing. Supports both desktop browsers (Chrome, Firefox, "
        "Safari, Edge, IE) and mobile devices (iOS, Android)."
    ),
    input_schema=LIVE_SESSION_ARGUMENTS,
    handler=start_live_session_handler,
)

START_DESKTOP_LIVE_SESSION = OperationDescriptor(
    name="startDesktopLiveSession",
    category=OperationCategory.LIVE,
    description=(
        "Convenience tool to start a desktop browser live testing session. Automatically "
        "sets platformType to 'desktop'."
    ),
    input_schema=desktop_arguments(),
    handler=start_desktop_live_session_handler,
)

START_MOBILE_LIVE_SESSION = OperationDescriptor(
    name="startMobileLiveSession",
    category=OperationCategory.LIVE,
    description=(
        "Convenience tool to start a mobile device live testing session. Automatically "
        "sets platformType to 'mobile'."
    ),
    input_schema=mobile_arguments(),
    handler=start_mobile_live_session_handler,
)

LIVE_OPERATIONS = [
    START_LIVE_SESSION,
    START_DESKTOP_LIVE_SESSION,
    START_MOBILE_LIVE_SESSION,
]
