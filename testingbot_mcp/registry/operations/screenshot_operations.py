"""
Screenshot operation registrations.

Screenshot jobs render one URL across many browsers; results are fetched
separately once the job finishes.
"""

import logging
from typing import Any, Dict

from ...utils.urls import is_valid_url
from ..operation_registry import OperationCategory, OperationDescriptor, OperationResult
from ..schema import ArgumentSchema, ParamKind, ParamSpec
from .common import page_heading, pagination_params, response_items

logger = logging.getLogger(__name__)

MAX_WAIT_SECONDS = 60

SCREENSHOT_BROWSER = ArgumentSchema(
    ParamSpec("browserName", ParamKind.STRING, required=True, non_empty=True,
              description="Browser name (chrome, firefox, safari, etc.)"),
    ParamSpec("version", ParamKind.STRING, description="Browser version (or 'latest')"),
    ParamSpec("os", ParamKind.STRING, required=True, non_empty=True,
              description="Operating system (WIN11, MAC, etc.)"),
    title="ScreenshotBrowser",
)


# ============================================================================
# Operation Handlers
# ============================================================================

async def take_screenshot_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for takeScreenshot operation."""
    url = params["url"]
    if not is_valid_url(url):
        raise ValueError("Invalid URL provided")

    browsers = params["browsers"]
    logger.info(f"Taking screenshots of {url} on {len(browsers)} browsers")

    result = await client.take_screenshot(
        url,
        browsers,
        params["resolution"],
        params["waitTime"],
        params["fullPage"],
    )
    screenshot_id = result.get("id") if isinstance(result, dict) else None

    return OperationResult(
        message=(
            "Screenshot job created successfully!\n\n"
            f"**Screenshot ID**: {screenshot_id}\n\n"
            "Use the `retrieveScreenshots` tool with this ID to get the results once "
            "processing is complete."
        ),
        data=result,
    )


async def retrieve_screenshots_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for retrieveScreenshots operation."""
    screenshot_id = params["screenshotId"]
    logger.info(f"Retrieving screenshots {screenshot_id}")

    result = await client.retrieve_screenshots(screenshot_id)
    result = result if isinstance(result, dict) else {}

    lines = [
        f"## Screenshots for {result.get('url')}",
        "",
        f"**Status**: {result.get('state') or 'processing'}",
        "",
    ]

    screenshots = result.get("screenshots")
    if isinstance(screenshots, list):
        for shot in screenshots:
            lines.append(f"### {shot.get('browser')} {shot.get('version')} on {shot.get('os')}")
            lines.append(f"- **Screenshot**: {shot.get('image_url')}")
            lines.append(f"- **Thumbnail**: {shot.get('thumb_url')}")
            lines.append("")
    else:
        lines.append("Screenshots are still processing. Please try again in a moment.")

    return OperationResult(message="\n".join(lines), data=result)


async def get_screenshot_list_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for getScreenshotList operation."""
    offset, limit = params["offset"], params["limit"]
    logger.info(f"Fetching screenshot list (offset={offset}, limit={limit})")

    response = await client.get_screenshot_list(offset, limit)
    jobs = response_items(response)

    lines = [page_heading("Screenshot Jobs", limit, offset)]
    if not jobs:
        lines.append("No screenshot jobs found.")

    for job in jobs:
        lines.append(f"### {job.get('url')}")
        lines.append(f"- **ID**: {job.get('id')}")
        lines.append(f"- **Status**: {job.get('state') or 'processing'}")
        lines.append(f"- **Created**: {job.get('created_at')}")
        lines.append("")

    return OperationResult(message="\n".join(lines), data=response)


# ============================================================================
# Operation Descriptors
# ============================================================================

TAKE_SCREENSHOT = OperationDescriptor(
    name="takeScreenshot",
    category=OperationCategory.SCREENSHOTS,
    description=(
        "Take screenshots of a URL across multiple browsers and platforms. Returns a "
        "screenshot ID to retrieve results."
    ),
    input_schema=ArgumentSchema(
        ParamSpec("url", ParamKind.URL, required=True, description="The URL to screenshot"),
        ParamSpec("browsers", ParamKind.ARRAY, required=True, items=SCREENSHOT_BROWSER,
                  description="Array of browser configurations"),
        ParamSpec("resolution", ParamKind.STRING, default="1920x1080",
                  description="Screen resolution (e.g., '1920x1080')"),
        ParamSpec("waitTime", ParamKind.NUMBER, minimum=0, maximum=MAX_WAIT_SECONDS, default=5,
                  description="Time to wait before taking screenshot (in seconds, max 60)"),
        ParamSpec("fullPage", ParamKind.BOOLEAN, default=False,
                  description="Capture full page or just viewport"),
        title="TakeScreenshotArguments",
    ),
    handler=take_screenshot_handler,
)

RETRIEVE_SCREENSHOTS = OperationDescriptor(
    name="retrieveScreenshots",
    category=OperationCategory.SCREENSHOTS,
    description=(
        "Retrieve screenshot results by screenshot ID. Returns URLs to the generated "
        "screenshots."
    ),
    input_schema=ArgumentSchema(
        ParamSpec("screenshotId", ParamKind.STRING, required=True, non_empty=True,
                  description="The screenshot ID from takeScreenshot"),
        title="RetrieveScreenshotsArguments",
    ),
    handler=retrieve_screenshots_handler,
)

GET_SCREENSHOT_LIST = OperationDescriptor(
    name="getScreenshotList",
    category=OperationCategory.SCREENSHOTS,
    description="Get a list of all screenshot jobs with pagination.",
    input_schema=ArgumentSchema(
        *pagination_params("screenshot jobs"),
        title="GetScreenshotListArguments",
    ),
    handler=get_screenshot_list_handler,
)

SCREENSHOT_OPERATIONS = [
    TAKE_SCREENSHOT,
    RETRIEVE_SCREENSHOTS,
    GET_SCREENSHOT_LIST,
]
