"""Chrome DevTools Protocol session registrations."""

import logging
from typing import Any, Dict

from ..operation_registry import OperationCategory, OperationDescriptor, OperationResult
from ..schema import ArgumentSchema, ParamKind, ParamSpec

logger = logging.getLogger(__name__)

# Optional capabilities copied through when supplied
OPTIONAL_CAPABILITIES = ("screenResolution", "timeZone", "name", "build")


def build_capabilities(params: Dict[str, Any]) -> Dict[str, Any]:
    """Session capabilities from validated arguments; extras win on conflict."""
    capabilities: Dict[str, Any] = {
        "browserName": params["browserName"],
        "browserVersion": params.get("browserVersion") or "latest",
        "platform": params["platform"],
    }
    for key in OPTIONAL_CAPABILITIES:
        if params.get(key):
            capabilities[key] = params[key]

    capabilities.update(params.get("extraCapabilities") or {})
    return capabilities


async def create_cdp_session_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for createCdpSession operation."""
    capabilities = build_capabilities(params)
    logger.info(
        f"Creating CDP session ({capabilities['browserName']} on {capabilities['platform']})"
    )

    session = await client.create_session({"capabilities": capabilities})
    session = session if isinstance(session, dict) else {}
    cdp_url = session.get("cdp_url")

    lines = [
        "## CDP Session Created",
        "",
        f"- **Session ID**: {session.get('session_id')}",
        f"- **CDP URL**: {cdp_url}",
        f"- **Browser**: {capabilities['browserName']} {capabilities['browserVersion']}",
        f"- **Platform**: {capabilities['platform']}",
        "",
        "### Connect with Puppeteer",
        "```javascript",
        "const puppeteer = require('puppeteer-core');",
        "const browser = await puppeteer.connect({",
        f"  browserWSEndpoint: '{cdp_url}'",
        "});",
        "```",
        "",
        "### Connect with Playwright",
        "```javascript",
        "const { chromium } = require('playwright');",
        f"const browser = await chromium.connectOverCDP('{cdp_url}');",
        "```",
    ]

    return OperationResult(message="\n".join(lines), data=session)


CREATE_CDP_SESSION = OperationDescriptor(
    name="createCdpSession",
    category=OperationCategory.CDP,
    description=(
        "Create a remote browser session on TestingBot and get its CDP (Chrome DevTools "
        "Protocol) URL for direct browser control. Use this to automate browsers via CDP "
        "clients like Puppeteer or Playwright."
    ),
    input_schema=ArgumentSchema(
        ParamSpec("browserName", ParamKind.STRING, required=True, non_empty=True,
                  description="Browser name (chrome, firefox, edge, safari)"),
        ParamSpec("browserVersion", ParamKind.STRING, default="latest",
                  description="Browser version (default: 'latest')"),
        ParamSpec("platform", ParamKind.STRING, required=True, non_empty=True,
                  description="Platform/OS (WIN11, WIN10, MONTEREY, BIGSUR, etc.)"),
        ParamSpec("screenResolution", ParamKind.STRING,
                  description="Screen resolution (e.g., '1920x1080')"),
        ParamSpec("timeZone", ParamKind.STRING, description="Time zone (e.g., 'America/New_York')"),
        ParamSpec("name", ParamKind.STRING, description="Session name for identification"),
        ParamSpec("build", ParamKind.STRING, description="Build identifier"),
        ParamSpec("extraCapabilities", ParamKind.OBJECT,
                  description="Additional capabilities as key-value pairs"),
        title="CreateCdpSessionArguments",
    ),
    handler=create_cdp_session_handler,
)

CDP_OPERATIONS = [
    CREATE_CDP_SESSION,
]
