"""
Browser and device operation registrations.

Lists the browser/platform combinations and mobile devices TestingBot offers.
"""

import json
import logging
from typing import Any, Dict

from ..operation_registry import OperationCategory, OperationDescriptor, OperationResult
from ..schema import ArgumentSchema, ParamKind, ParamSpec

logger = logging.getLogger(__name__)


# ============================================================================
# Operation Handlers
# ============================================================================

async def get_browsers_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for getBrowsers operation."""
    browser_type = params.get("type")
    logger.info(f"Fetching browsers (type={browser_type})")

    browsers = await client.get_browsers(browser_type)

    if not isinstance(browsers, list):
        return OperationResult(message=json.dumps(browsers, indent=2), data=browsers)

    lines = ["## Available Browsers", ""]
    for browser in browsers:
        lines.append(f"### {browser.get('name') or browser.get('browserName')}")
        lines.append(f"- **Platform**: {browser.get('platform') or browser.get('os')}")
        lines.append(f"- **Version**: {browser.get('version') or browser.get('browserVersion')}")
        if browser.get("device"):
            lines.append(f"- **Device**: {browser['device']}")
        lines.append("")

    return OperationResult(message="\n".join(lines), data=browsers)


async def get_devices_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for getDevices operation."""
    logger.info("Fetching devices")

    devices = await client.get_devices()

    if not isinstance(devices, list):
        return OperationResult(message=json.dumps(devices, indent=2), data=devices)

    lines = ["## Available Devices", ""]
    for device in devices:
        lines.append(f"### {device.get('name')}")
        lines.append(f"- **ID**: {device.get('id')}")
        lines.append(f"- **Platform**: {device.get('platform')}")
        lines.append(f"- **Version**: {device.get('version')}")
        lines.append(f"- **Available**: {'Yes' if device.get('available') else 'No'}")
        lines.append("")

    return OperationResult(message="\n".join(lines), data=devices)


# ============================================================================
# Operation Descriptors
# ============================================================================

GET_BROWSERS = OperationDescriptor(
    name="getBrowsers",
    category=OperationCategory.BROWSERS,
    description=(
        "Get list of available browsers and platforms for testing. "
        "Optionally filter by type (web or mobile)."
    ),
    input_schema=ArgumentSchema(
        ParamSpec("type", ParamKind.ENUM, choices=("web", "mobile"),
                  description="Filter browsers by type"),
        title="GetBrowsersArguments",
    ),
    handler=get_browsers_handler,
)

GET_DEVICES = OperationDescriptor(
    name="getDevices",
    category=OperationCategory.BROWSERS,
    description="Get list of available mobile devices for testing (real devices and simulators).",
    input_schema=ArgumentSchema(title="GetDevicesArguments"),
    handler=get_devices_handler,
)

BROWSER_OPERATIONS = [
    GET_BROWSERS,
    GET_DEVICES,
]
