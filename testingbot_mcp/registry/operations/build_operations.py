"""
Build operation registrations.

Builds group related tests together.
"""

import logging
from typing import Any, Dict

from ..operation_registry import OperationCategory, OperationDescriptor, OperationResult
from ..schema import ArgumentSchema, ParamKind, ParamSpec
from .common import page_heading, pagination_params, response_items

logger = logging.getLogger(__name__)


def build_id_param(description: str) -> ParamSpec:
    return ParamSpec("buildId", ParamKind.INTEGER, description=description, required=True)


# ============================================================================
# Operation Handlers
# ============================================================================

async def get_builds_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for getBuilds operation."""
    offset, limit = params["offset"], params["limit"]
    logger.info(f"Fetching builds (offset={offset}, limit={limit})")

    response = await client.get_builds(offset, limit)
    builds = response_items(response)

    lines = [page_heading("Recent Builds", limit, offset)]
    if not builds:
        lines.append("No builds found.")

    for build in builds:
        lines.append(f"### Build: {build.get('name') or build.get('id')}")
        lines.append(f"- **ID**: {build.get('id')}")
        lines.append(f"- **Tests**: {build.get('tests') or 0}")
        lines.append(f"- **Created**: {build.get('created_at')}")
        lines.append("")

    return OperationResult(message="\n".join(lines), data=response)


async def get_tests_for_build_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for getTestsForBuild operation."""
    build_id = params["buildId"]
    logger.info(f"Fetching tests for build {build_id}")

    response = await client.get_tests_for_build(build_id)
    tests = response_items(response)

    lines = [f"## Tests for Build {build_id}", ""]
    if not tests:
        lines.append("No tests found for this build.")

    for test in tests:
        lines.append(f"### Test {test.get('session_id')}")
        lines.append(f"- **Status**: {test.get('status')}")
        lines.append(f"- **Browser**: {test.get('browser')} {test.get('version')}")
        lines.append(f"- **Platform**: {test.get('platform')}")
        lines.append(f"- **Duration**: {test.get('duration')}s")
        lines.append("")

    return OperationResult(message="\n".join(lines), data=response)


async def delete_build_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for deleteBuild operation."""
    build_id = params["buildId"]
    logger.info(f"Deleting build {build_id}")

    response = await client.delete_build(build_id)
    return OperationResult(message=f"Build {build_id} deleted successfully.", data=response)


# ============================================================================
# Operation Descriptors
# ============================================================================

GET_BUILDS = OperationDescriptor(
    name="getBuilds",
    category=OperationCategory.BUILDS,
    description="Get a list of builds with optional pagination. Builds group related tests together.",
    input_schema=ArgumentSchema(*pagination_params("builds"), title="GetBuildsArguments"),
    handler=get_builds_handler,
)

GET_TESTS_FOR_BUILD = OperationDescriptor(
    name="getTestsForBuild",
    category=OperationCategory.BUILDS,
    description="Get all tests associated with a specific build ID.",
    input_schema=ArgumentSchema(build_id_param("The build ID"), title="GetTestsForBuildArguments"),
    handler=get_tests_for_build_handler,
)

DELETE_BUILD = OperationDescriptor(
    name="deleteBuild",
    category=OperationCategory.BUILDS,
    description="Delete a build and all its associated tests by build ID.",
    input_schema=ArgumentSchema(
        build_id_param("The build ID to delete"),
        title="DeleteBuildArguments",
    ),
    handler=delete_build_handler,
)

BUILD_OPERATIONS = [
    GET_BUILDS,
    GET_TESTS_FOR_BUILD,
    DELETE_BUILD,
]
