#!/usr/bin/env python3
"""
Dropbox tools MCP Server

Every Dropbox endpoint in the catalog is exposed as one MCP tool with a
JSON-schema input. Tools are declared as data (tools/catalog/), so the
server registers them from the registry instead of one decorated function
per tool.

Documentation is provided via MCP Resources, not a tool.

Architecture:
- models.py / validation.py: Types and pure argument helpers
- adapters/: Dropbox HTTP transport and credentials
- tools/: Catalog, executor, composite tools, registry
- resources/: Markdown docs generated from the registry
- server.py: Thin MCP wrapper (this file)
"""

import asyncio
import json
import os
import signal
from typing import Any

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.models import InitializationOptions

from config import LOG_LEVEL
from logging_config import configure_logging, logger
from resources.tools import list_resources, read_resource
from tools import call_tool, get_registry

SERVER_NAME = "dbx-tools"
SERVER_VERSION = "0.1.0"

server = Server(SERVER_NAME)


# ============================================================================
# TOOLS
# ============================================================================

def tool_list() -> list[types.Tool]:
    """Every registered tool as an MCP Tool."""
    return [
        types.Tool(name=tool.name, description=tool.description, inputSchema=tool.parameters)
        for tool in get_registry()
    ]


def result_content(result: dict[str, Any]) -> list[types.TextContent]:
    return [types.TextContent(type="text", text=json.dumps(result, indent=2))]


@server.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    return tool_list()


@server.call_tool()
async def handle_call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
    """Run a tool off the event loop; failures come back as error JSON."""
    logger.info(f"Tool call: {name}")
    # Tools block on HTTP, keep the protocol loop responsive
    result = await asyncio.to_thread(call_tool, name, arguments or {})
    return result_content(result)


# ============================================================================
# RESOURCES: self-documenting MCP capabilities
# ============================================================================

@server.list_resources()
async def handle_list_resources() -> list[types.Resource]:
    return [
        types.Resource(
            uri=resource["uri"],
            name=resource["name"],
            description=resource["description"],
            mimeType="text/markdown",
        )
        for resource in list_resources()
    ]


@server.read_resource()
async def handle_read_resource(uri: Any) -> list[ReadResourceContents]:
    try:
        text = read_resource(str(uri))
    except KeyError as e:
        raise ValueError(f"Unknown resource: {uri}") from e
    return [ReadResourceContents(content=text, mime_type="text/markdown")]


# ============================================================================
# SERVER ENTRY POINT
# ============================================================================

def _shutdown_handler(signum: int, frame: object) -> None:
    """Handle termination signals by exiting immediately.

    os._exit() is required because sys.exit() raises SystemExit,
    which asyncio's event loop catches and ignores.
    """
    os._exit(0)


async def run() -> None:
    async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name=SERVER_NAME,
                server_version=SERVER_VERSION,
                capabilities=server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def main() -> None:
    configure_logging(LOG_LEVEL)
    signal.signal(signal.SIGTERM, _shutdown_handler)
    signal.signal(signal.SIGINT, _shutdown_handler)
    logger.info(f"Starting {SERVER_NAME} with {len(get_registry())} tools")
    asyncio.run(run())


if __name__ == "__main__":
    main()
