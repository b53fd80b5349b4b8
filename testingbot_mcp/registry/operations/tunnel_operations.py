"""Tunnel operation registrations."""

import logging
from typing import Any, Dict

from ..operation_registry import OperationCategory, OperationDescriptor, OperationResult
from ..schema import ArgumentSchema, ParamKind, ParamSpec

logger = logging.getLogger(__name__)

TUNNEL_DOCS_URL = "https://testingbot.com/support/other/tunnel"


async def get_tunnel_list_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for getTunnelList operation."""
    logger.info("Fetching tunnel list")

    tunnels = await client.get_tunnel_list()

    lines = ["## Active Tunnels", ""]
    if isinstance(tunnels, list) and tunnels:
        for tunnel in tunnels:
            lines.append(f"### Tunnel {tunnel.get('id')}")
            lines.append(f"- **ID**: {tunnel.get('id')}")
            for key, label in (("status", "Status"), ("version", "Version"),
                               ("created_at", "Created"), ("ip", "IP Address"),
                               ("last_heartbeat", "Last Heartbeat")):
                if tunnel.get(key):
                    lines.append(f"- **{label}**: {tunnel[key]}")
            lines.append("")

        plural = "" if len(tunnels) == 1 else "s"
        lines.append(f"**Total**: {len(tunnels)} active tunnel{plural}")
    else:
        lines.extend([
            "No active tunnels found.",
            "",
            "To start a tunnel, download and run the TestingBot Tunnel:",
            TUNNEL_DOCS_URL,
        ])

    return OperationResult(message="\n".join(lines), data=tunnels)


async def delete_tunnel_handler(client: Any, params: Dict[str, Any]) -> OperationResult:
    """Handler for deleteTunnel operation."""
    tunnel_id = params["tunnelId"]
    logger.info(f"Deleting tunnel {tunnel_id}")

    response = await client.delete_tunnel(tunnel_id)
    return OperationResult(message=f"Tunnel {tunnel_id} deleted successfully.", data=response)


GET_TUNNEL_LIST = OperationDescriptor(
    name="getTunnelList",
    category=OperationCategory.TUNNELS,
    description=(
        "Get a list of all active TestingBot tunnels. Tunnels allow you to test websites "
        "behind firewalls or on your local machine."
    ),
    input_schema=ArgumentSchema(title="GetTunnelListArguments"),
    handler=get_tunnel_list_handler,
)

DELETE_TUNNEL = OperationDescriptor(
    name="deleteTunnel",
    category=OperationCategory.TUNNELS,
    description=(
        "Delete an active TestingBot tunnel by its ID. This will terminate the tunnel "
        "connection."
    ),
    input_schema=ArgumentSchema(
        # Numeric IDs are coerced to strings
        ParamSpec("tunnelId", ParamKind.STRING, required=True, non_empty=True,
                  description="The tunnel ID to delete"),
        title="DeleteTunnelArguments",
    ),
    handler=delete_tunnel_handler,
)

TUNNEL_OPERATIONS = [
    GET_TUNNEL_LIST,
    DELETE_TUNNEL,
]
