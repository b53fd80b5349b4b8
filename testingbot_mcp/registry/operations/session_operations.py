"""
Test session operation registrations.

List, inspect, update, stop and delete automated test sessions.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ...utils.sanitize import sanitize_session_id
from ..operation_registry import OperationCategory, OperationDescriptor, OperationResult
from ..schema import ArgumentSchema, ParamKind, ParamSpec
from .common import page_heading, pagination_params, response_items, session_id_param

logger = logging.getLogger(__name__)

TEST_URL = "https://testingbot.com/members/tests/{session_id}"

STATUS_LABELS = {1: "Passed", 0: "Failed", 2: "Unknown"}

MAX_STEP_RESPONSE = 100


def status_label(status_id: Any) -> Optional[str]:
    """Label for a numeric ``status_id``."""
    return STATUS_LABELS.get(status_id)


def session_url(test: Dict[str, Any]) -> str:
    return TEST_URL.format(session_id=test.get("session_id", ""))


def _summary_lines(test: Dict[str, Any]) -> List[str]:
    """Status, browser and platform lines shared by list and detail views."""
    lines = []
    if test.get("status_id") is not None:
        lines.append(f"- **Status**: {status_label(test['status_id'])}")
    elif test.get("success") is not None:
        lines.append(f"- **Success**: {'Yes' if test['success'] else 'No'}")

    if test.get("state"):
        lines.append(f"- **State**: {test['state']}")
    if test.get("status_message"):
        lines.append(f"- **Status Message**: {test['status_message']}")

    version = test.get("browser_version") or test.get("version") or ""
    browser = f"{test.get('browser') or ''}{version}".strip()
    if browser:
        lines.append(f"- **Browser**: {browser}")

    platform = test.get("os") or test.get("platform") or test.get("platform_name")
    if platform:
        lines.append(f"- **Platform**: {platform}")
    return lines


def _format_step_time(value: Any) -> str:
    if isinstance(value, (int, float)):
        # API reports milliseconds since epoch
        moment = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        return moment.isoformat().replace("+00:00", "Z")
    return str(value)


# ============================================================================
# Operation Handlers
# ============================================================================

async def get_tests_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for getTests operation."""
    offset, limit = params["offset"], params["limit"]
    logger.info(f"Fetching tests (offset={offset}, limit={limit})")

    response = await client.get_tests(offset, limit)
    tests = response_items(response)

    lines = [page_heading("Recent Tests", limit, offset)]
    if not tests:
        lines.append("No tests found.")

    for test in tests:
        lines.append(f"### Test {test.get('session_id')}")
        if test.get("name"):
            lines.append(f"- **Name**: {test['name']}")
        lines.extend(_summary_lines(test))
        if test.get("duration"):
            lines.append(f"- **Duration**: {test['duration']}s")
        if test.get("created_at"):
            lines.append(f"- **Created**: {test['created_at']}")
        if test.get("completed_at"):
            lines.append(f"- **Completed**: {test['completed_at']}")
        if test.get("video"):
            lines.append(f"- **Video**: {test['video']}")
        if test.get("build"):
            lines.append(f"- **Build**: {test['build']}")
        if test.get("extra"):
            lines.append(f"- **Extra**: {test['extra']}")
        lines.append(f"- **URL**: {session_url(test)}")
        lines.append("")

    return OperationResult(message="\n".join(lines), data=response)


async def get_test_details_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for getTestDetails operation."""
    session_id = sanitize_session_id(params["sessionId"])
    logger.info(f"Fetching test details for {session_id}")

    test = await client.get_test_details(session_id)
    test = test if isinstance(test, dict) else {}

    lines = [f"## Test Details: {session_id}", ""]
    if test.get("name"):
        lines.append(f"- **Name**: {test['name']}")
    lines.extend(_summary_lines(test))
    if test.get("device_name"):
        lines.append(f"- **Device**: {test['device_name']}")
    if test.get("type"):
        lines.append(f"- **Type**: {test['type']}")
    if test.get("duration"):
        lines.append(f"- **Duration**: {test['duration']}s")
    if test.get("created_at"):
        lines.append(f"- **Created**: {test['created_at']}")
    if test.get("completed_at"):
        lines.append(f"- **Completed**: {test['completed_at']}")
    if test.get("video"):
        lines.append(f"- **Video**: {test['video']}")
    thumbs = test.get("thumbs")
    if isinstance(thumbs, list) and thumbs:
        lines.append(f"- **Screenshots**: {len(thumbs)} available")

    logs = test.get("logs")
    if isinstance(logs, dict) and logs:
        lines.extend(["", "### Logs"])
        for key, label in (("selenium", "Selenium Log"), ("browser", "Browser Log"),
                           ("chrome", "Chrome Log"), ("vm", "VM Log")):
            if logs.get(key):
                lines.append(f"- **{label}**: {logs[key]}")

    if test.get("build"):
        lines.extend(["", f"- **Build**: {test['build']}"])
    if test.get("extra"):
        lines.append(f"- **Extra**: {test['extra']}")

    steps = test.get("steps")
    if isinstance(steps, list) and steps:
        lines.extend(["", f"### Test Steps ({len(steps)} steps)"])
        for index, step in enumerate(steps, start=1):
            lines.extend(["", f"**Step {index}**: {step.get('command')}"])
            if step.get("arguments"):
                lines.append(f"- Arguments: {step['arguments']}")
            if step.get("response"):
                text = str(step["response"])
                suffix = "..." if len(text) > MAX_STEP_RESPONSE else ""
                lines.append(f"- Response: {text[:MAX_STEP_RESPONSE]}{suffix}")
            if step.get("time"):
                lines.append(f"- Time: {_format_step_time(step['time'])}")

    lines.extend(["", f"- **Test URL**: {TEST_URL.format(session_id=session_id)}"])
    if test.get("assets_available"):
        lines.append("- **Assets**: Available")

    return OperationResult(message="\n".join(lines), data=test)


async def update_test_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for updateTest operation."""
    session_id = sanitize_session_id(params["sessionId"])

    update_data: Dict[str, Any] = {}
    if params.get("name"):
        update_data["name"] = params["name"]
    if params.get("status"):
        update_data["test[success]"] = "1" if params["status"] == "passed" else "0"
    if params.get("build"):
        update_data["build"] = params["build"]
    if params.get("extra"):
        update_data["extra"] = params["extra"]

    logger.info(f"Updating test {session_id}: {sorted(update_data)}")
    response = await client.update_test(update_data, session_id)

    return OperationResult(message=f"Test {session_id} updated successfully.", data=response)


async def delete_test_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for deleteTest operation."""
    session_id = sanitize_session_id(params["sessionId"])
    logger.info(f"Deleting test {session_id}")

    response = await client.delete_test(session_id)
    return OperationResult(message=f"Test {session_id} deleted successfully.", data=response)


async def stop_test_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for stopTest operation."""
    session_id = sanitize_session_id(params["sessionId"])
    logger.info(f"Stopping test {session_id}")

    response = await client.stop_test(session_id)
    return OperationResult(message=f"Test {session_id} stopped successfully.", data=response)


# ============================================================================
# Operation Descriptors
# ============================================================================

GET_TESTS = OperationDescriptor(
    name="getTests",
    category=OperationCategory.TESTS,
    description=(
        "Retrieve a list of recent tests with optional pagination. Returns test details "
        "including status, browser, platform, video and duration."
    ),
    input_schema=ArgumentSchema(*pagination_params("tests"), title="GetTestsArguments"),
    handler=get_tests_handler,
)

GET_TEST_DETAILS = OperationDescriptor(
    name="getTestDetails",
    category=OperationCategory.TESTS,
    description=(
        "Get detailed information about a specific test by session ID. Includes logs, "
        "screenshots, video URLs, and execution metadata."
    ),
    input_schema=ArgumentSchema(session_id_param(), title="GetTestDetailsArguments"),
    handler=get_test_details_handler,
)

UPDATE_TEST = OperationDescriptor(
    name="updateTest",
    category=OperationCategory.TESTS,
    description=(
        "Update test metadata such as name, status (passed/failed), and other attributes. "
        "Useful for marking tests after execution."
    ),
    input_schema=ArgumentSchema(
        session_id_param("The session ID of the test to update"),
        ParamSpec("name", ParamKind.STRING, description="New name for the test"),
        ParamSpec("status", ParamKind.ENUM, choices=("passed", "failed"),
                  description="Mark test as passed or failed"),
        ParamSpec("build", ParamKind.STRING, description="Build identifier"),
        ParamSpec("extra", ParamKind.STRING, description="Additional metadata (JSON string)"),
        title="UpdateTestArguments",
    ),
    handler=update_test_handler,
)

DELETE_TEST = OperationDescriptor(
    name="deleteTest",
    category=OperationCategory.TESTS,
    description=(
        "Delete a test by session ID. This permanently removes the test and its "
        "associated data."
    ),
    input_schema=ArgumentSchema(
        session_id_param("The session ID of the test to delete"),
        title="DeleteTestArguments",
    ),
    handler=delete_test_handler,
)

STOP_TEST = OperationDescriptor(
    name="stopTest",
    category=OperationCategory.TESTS,
    description="Stop a running test by session ID. This terminates the test execution immediately.",
    input_schema=ArgumentSchema(
        session_id_param("The session ID of the test to stop"),
        title="StopTestArguments",
    ),
    handler=stop_test_handler,
)

TEST_OPERATIONS = [
    GET_TESTS,
    GET_TEST_DETAILS,
    UPDATE_TEST,
    DELETE_TEST,
    STOP_TEST,
]
