"""
Sheets Wizard MCP server.

Exposes the spreadsheet tools (create_sheet, get_data, update_cells,
add_formula, create_chart, export_csv) over MCP. Each call authenticates with
the OAuth2 credentials passed in its own ``credentials`` argument.

Usage:
    uv run sheets_mcp.py
"""

import logging
import sys

from fastmcp import FastMCP
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools import Tool, ToolResult
from mcp.types import TextContent
from pydantic import PrivateAttr

from sheets_auth import SheetsClientFactory
from sheets_config import Settings, load_settings
from sheets_dispatch import ToolDispatcher
from sheets_errors import ConfigurationError
from sheets_tools import ToolDescriptor

SERVER_NAME = "sheets-wizard"
SERVER_VERSION = "1.0.0"

logger = logging.getLogger(SERVER_NAME)


def _tool_result(envelope: dict) -> ToolResult:
    return ToolResult(
        content=[
            TextContent(type="text", text=block["text"])
            for block in envelope["content"]
        ]
    )


class SheetsTool(Tool):
    """MCP tool that hands its raw arguments to the dispatcher.

    The advertised input schema is the descriptor's own, and argument
    validation happens in the dispatcher so that bad arguments come back as
    ``Error: ...`` text rather than protocol errors.
    """

    _dispatcher: ToolDispatcher | None = PrivateAttr(default=None)

    @classmethod
    def from_descriptor(cls, descriptor: ToolDescriptor, dispatcher: ToolDispatcher) -> "SheetsTool":
        tool = cls(
            name=descriptor.name,
            description=descriptor.description,
            parameters=descriptor.input_schema,
        )
        tool._dispatcher = dispatcher
        return tool

    async def run(self, arguments: dict) -> ToolResult:
        return _tool_result(await self._dispatcher.call_tool(self.name, arguments))


class UnregisteredToolMiddleware(Middleware):
    """Answer calls to names outside the registry through the dispatcher.

    FastMCP would otherwise reject them itself with an error result, before
    any tool runs.
    """

    def __init__(self, dispatcher: ToolDispatcher):
        self.dispatcher = dispatcher

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        name = context.message.name
        if name in self.dispatcher.registry:
            return await call_next(context)

        logger.debug("Call to unregistered tool %r", name)
        return _tool_result(
            await self.dispatcher.call_tool(name, context.message.arguments)
        )


def create_server(dispatcher: ToolDispatcher | None = None) -> FastMCP:
    """Build the FastMCP server with every registered tool"""
    dispatcher = dispatcher or ToolDispatcher()
    server = FastMCP(SERVER_NAME, version=SERVER_VERSION)
    server.add_middleware(UnregisteredToolMiddleware(dispatcher))
    for descriptor in dispatcher.registry.list_tools():
        server.add_tool(SheetsTool.from_descriptor(descriptor, dispatcher))
    return server


def configure_logging(level: int) -> None:
    # stdout carries the stdio transport, so logs go to stderr
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def run(settings: Settings) -> None:
    dispatcher = ToolDispatcher(
        client_factory=SheetsClientFactory(cache_size=settings.client_cache_size)
    )
    server = create_server(dispatcher)

    if settings.transport == "http":
        logger.info(
            "Sheets Wizard MCP Server running on http://%s:%s", settings.host, settings.port
        )
        server.run(transport="http", host=settings.host, port=settings.port, show_banner=False)
    else:
        logger.info("Sheets Wizard MCP Server running on stdio")
        server.run(transport="stdio", show_banner=False)


def main() -> int:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        sys.stderr.write(f"Invalid configuration: {e}\n")
        return 2

    configure_logging(settings.log_level)

    try:
        run(settings)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    except Exception as e:
        logger.error("[MCP Error] %s", e, exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
