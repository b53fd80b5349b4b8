"""Main MCP server implementation for TestingBot."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from mcp import Tool
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.types import TextContent

from . import __version__
from .client.testingbot_api import TestingBotClient, TestingBotMCPError
from .config.settings import (
    get_all_settings,
    get_api_url,
    get_credentials,
    get_log_file,
    get_log_level,
    get_timeout,
    load_environment,
)
from .registry.dispatcher import OperationDispatcher
from .registry.operation_registry import OperationRegistry
from .registry.operations import build_registry

logger = logging.getLogger(__name__)

SERVER_NAME = "testingbot-mcp-server"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ToolInvocationError(Exception):
    """Carries a failure envelope's text out of a tool call.

    The MCP server turns an exception raised by the call handler into a
    result with ``isError`` set and the exception text as content.
    """


def configure_logging(level: int = logging.ERROR, log_file: Optional[Path] = None) -> None:
    """
    Route log records to stderr, and optionally to a debug file.

    stdout carries the protocol stream, so nothing may be logged there.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


class TestingBotMCPServer:
    """MCP Server exposing TestingBot operations as tools."""

    __test__ = False  # not a pytest test class

    def __init__(self, client: Any, registry: Optional[OperationRegistry] = None):
        """
        Args:
            client: TestingBot API client handed to every handler
            registry: Operation registry (all operation groups by default)
        """
        self.registry = registry if registry is not None else build_registry()
        self.dispatcher = OperationDispatcher(self.registry, client)

        # Create MCP server instance
        self.server = Server(SERVER_NAME)

        # Register handlers
        self._register_handlers()

    def list_tools(self) -> List[Tool]:
        """Tool catalog in registration order."""
        return [
            Tool(
                name=entry["name"],
                description=entry["description"],
                inputSchema={
                    "type": "object",
                    "properties": entry["parameters"],
                    "required": entry["required"],
                },
            )
            for entry in self.registry.list_operations()
        ]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        """
        Dispatch one tool call.

        Raises:
            ToolInvocationError: If the invocation failed; the message is the
                failure envelope text
        """
        envelope = await self.dispatcher.dispatch(name, arguments)
        if envelope.is_error:
            raise ToolInvocationError(envelope.text)
        return envelope.to_text_content()

    def _register_handlers(self):
        """Register all MCP handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List all available tools."""
            return self.list_tools()

        # Arguments are coerced and validated by the operation schemas
        @self.server.call_tool(validate_input=False)
        async def handle_call_tool(name: str, arguments: dict) -> list[TextContent]:
            """Route tool calls through the dispatcher."""
            return await self.call_tool(name, arguments)

    async def run(self):
        """Run the MCP server over stdio."""
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            logger.info(f"{SERVER_NAME} {__version__} running on stdio")
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=__version__,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={}
                    )
                )
            )


async def serve() -> None:
    """Build the client and serve until the input stream closes."""
    api_key, api_secret = get_credentials()
    async with TestingBotClient(
        api_key,
        api_secret,
        base_url=get_api_url(),
        timeout=get_timeout(),
    ) as client:
        server = TestingBotMCPServer(client)
        await server.run()


def main():
    """Main entry point for the MCP server."""
    load_environment()
    configure_logging(get_log_level(), get_log_file())
    logger.info(f"Starting {SERVER_NAME} with settings {get_all_settings()}")

    try:
        asyncio.run(serve())
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except TestingBotMCPError as e:
        logger.critical(f"Failed to start server: {e}")
        print(f"Failed to start server: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception:
        logger.critical("Server terminated unexpectedly", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
