"""User account operation registrations."""

import logging
from typing import Any, Dict

from ..operation_registry import OperationCategory, OperationDescriptor, OperationResult
from ..schema import ArgumentSchema, ParamKind, ParamSpec
from .common import response_object

logger = logging.getLogger(__name__)

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


async def get_user_info_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for getUserInfo operation."""
    logger.info("Fetching user info")

    user = response_object(await client.get_user_info())

    lines = [
        "## User Information",
        "",
        f"- **Name**: {user.get('first_name')} {user.get('last_name')}",
        f"- **Email**: {user.get('email')}",
    ]
    if user.get("minutes_used") is not None:
        lines.append(f"- **Minutes Used**: {user['minutes_used']}")
    if user.get("minutes_limit") is not None:
        lines.append(f"- **Minutes Limit**: {user['minutes_limit']}")
    if user.get("plan") is not None:
        lines.append(f"- **Plan**: {user['plan']}")

    return OperationResult(message="\n".join(lines), data=user)


async def update_user_info_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for updateUserInfo operation."""
    update_data = {}
    if params.get("firstName"):
        update_data["first_name"] = params["firstName"]
    if params.get("lastName"):
        update_data["last_name"] = params["lastName"]
    if params.get("email"):
        update_data["email"] = params["email"]

    if not update_data:
        raise ValueError("Provide at least one of firstName, lastName or email")

    logger.info(f"Updating user info: {sorted(update_data)}")
    response = await client.update_user_info(update_data)

    return OperationResult(message="User information updated successfully.", data=response)


GET_USER_INFO = OperationDescriptor(
    name="getUserInfo",
    category=OperationCategory.USER,
    description=(
        "Get current user account information including minutes used, plan details, "
        "and account status."
    ),
    input_schema=ArgumentSchema(title="GetUserInfoArguments"),
    handler=get_user_info_handler,
)

UPDATE_USER_INFO = OperationDescriptor(
    name="updateUserInfo",
    category=OperationCategory.USER,
    description="Update user account information such as name, email, or other profile details.",
    input_schema=ArgumentSchema(
        ParamSpec("firstName", ParamKind.STRING, description="First name"),
        ParamSpec("lastName", ParamKind.STRING, description="Last name"),
        ParamSpec("email", ParamKind.STRING, pattern=EMAIL_PATTERN, description="Email address"),
        title="UpdateUserInfoArguments",
    ),
    handler=update_user_info_handler,
)

USER_OPERATIONS = [
    GET_USER_INFO,
    UPDATE_USER_INFO,
]
