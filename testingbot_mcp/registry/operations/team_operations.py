"""
Team management operation registrations.

Team settings, concurrency and member details.
"""

import logging
from typing import Any, Dict, List

from ..operation_registry import OperationCategory, OperationDescriptor, OperationResult
from ..schema import ArgumentSchema, ParamKind, ParamSpec
from .common import response_items, response_object

logger = logging.getLogger(__name__)


def _yes_no(value: Any) -> str:
    return "Yes" if value else "No"


def _concurrency_lines(concurrency: Dict[str, Any]) -> List[str]:
    lines = ["", "### Concurrency"]
    for key, label in (("allowed", "Allowed"), ("current", "Current")):
        section = concurrency.get(key)
        if not isinstance(section, dict):
            continue
        lines.append(f"**{label}**:")
        if section.get("vms") is not None:
            lines.append(f"- VMs: {section['vms']}")
        if section.get("physical") is not None:
            lines.append(f"- Physical: {section['physical']}")
    return lines


# ============================================================================
# Operation Handlers
# ============================================================================

async def get_team_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for getTeam operation."""
    logger.info("Fetching team settings")

    team = response_object(await client.get_team())

    lines = ["## Team Settings", ""]
    if team.get("name"):
        lines.append(f"- **Team Name**: {team['name']}")
    if team.get("plan"):
        lines.append(f"- **Plan**: {team['plan']}")
    for key, label in (("users", "Users"), ("parallel_tests", "Parallel Tests"),
                       ("max_parallel", "Max Parallel")):
        if team.get(key) is not None:
            lines.append(f"- **{label}**: {team[key]}")

    if isinstance(team.get("concurrency"), dict):
        lines.extend(_concurrency_lines(team["concurrency"]))

    if team.get("created_at"):
        lines.extend(["", f"- **Created**: {team['created_at']}"])

    return OperationResult(message="\n".join(lines), data=team)


async def get_users_in_team_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for getUsersInTeam operation."""
    logger.info("Fetching team users")

    response = await client.get_users_in_team()
    users = response_items(response)

    lines = ["## Team Users", ""]
    if not users:
        lines.append("No users found in team.")

    for user in users:
        full_name = f"{user.get('first_name') or ''} {user.get('last_name') or ''}".strip()
        lines.append(f"### {full_name or 'User ' + str(user.get('id'))}")
        lines.append(f"- **User ID**: {user.get('id')}")
        if user.get("email"):
            lines.append(f"- **Email**: {user['email']}")
        if user.get("plan"):
            lines.append(f"- **Plan**: {user['plan']}")
        if isinstance(user.get("roles"), list) and user["roles"]:
            lines.append(f"- **Roles**: {', '.join(str(role) for role in user['roles'])}")
        if user.get("read_only") is not None:
            lines.append(f"- **Read Only**: {_yes_no(user['read_only'])}")
        for key, label in (
            ("max_concurrent", "Max Concurrent"),
            ("max_concurrent_mobile", "Max Concurrent Mobile"),
            ("seconds", "Seconds"),
            ("last_login", "Last Login"),
            ("current_vm_concurrency", "Current VM Concurrency"),
            ("current_physical_concurrency", "Current Physical Concurrency"),
        ):
            if user.get(key) is not None:
                lines.append(f"- **{label}**: {user[key]}")
        lines.append("")

    return OperationResult(message="\n".join(lines), data=response)


async def get_user_from_team_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for getUserFromTeam operation."""
    user_id = params["userId"]
    logger.info(f"Fetching team user {user_id}")

    user = response_object(await client.get_user_from_team(user_id))

    lines = [
        f"## User Details: {user.get('first_name') or ''} {user.get('last_name') or ''}".rstrip(),
        "",
        f"- **User ID**: {user.get('id')}",
        f"- **Email**: {user.get('email')}",
    ]
    if user.get("first_name"):
        lines.append(f"- **First Name**: {user['first_name']}")
    if user.get("last_name"):
        lines.append(f"- **Last Name**: {user['last_name']}")
    if user.get("role"):
        lines.append(f"- **Role**: {user['role']}")
    if user.get("active") is not None:
        lines.append(f"- **Active**: {_yes_no(user['active'])}")
    if user.get("created_at"):
        lines.append(f"- **Joined**: {user['created_at']}")
    if user.get("last_login"):
        lines.append(f"- **Last Login**: {user['last_login']}")

    return OperationResult(message="\n".join(lines), data=user)


# ============================================================================
# Operation Descriptors
# ============================================================================

GET_TEAM = OperationDescriptor(
    name="getTeam",
    category=OperationCategory.TEAM,
    description=(
        "Retrieve team settings and information including plan details, team size, "
        "and configuration."
    ),
    input_schema=ArgumentSchema(title="GetTeamArguments"),
    handler=get_team_handler,
)

GET_USERS_IN_TEAM = OperationDescriptor(
    name="getUsersInTeam",
    category=OperationCategory.TEAM,
    description="Get a list of all users in your team with their roles and permissions.",
    input_schema=ArgumentSchema(title="GetUsersInTeamArguments"),
    handler=get_users_in_team_handler,
)

GET_USER_FROM_TEAM = OperationDescriptor(
    name="getUserFromTeam",
    category=OperationCategory.TEAM,
    description="Retrieve detailed information about a specific user in your team by their user ID.",
    input_schema=ArgumentSchema(
        ParamSpec("userId", ParamKind.INTEGER, required=True, description="The user ID"),
        title="GetUserFromTeamArguments",
    ),
    handler=get_user_from_team_handler,
)

TEAM_OPERATIONS = [
    GET_TEAM,
    GET_USERS_IN_TEAM,
    GET_USER_FROM_TEAM,
]
