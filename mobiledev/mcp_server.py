import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

import mcp.types as types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from .constants import APP_NAME, APP_VERSION
from .container import Container
from .domains.tools.result import ToolResult

logger = logging.getLogger("mobiledev.mcp")

Content = Union[types.TextContent, types.ImageContent]


def to_mcp_content(result: ToolResult) -> List[Content]:
    content: List[Content] = []
    for item in result.content:
        if item.type == "image":
            content.append(
                types.ImageContent(
                    type="image", data=item.data or "", mimeType=item.mime_type or "image/png"
                )
            )
        else:
            content.append(types.TextContent(type="text", text=item.text or ""))
    return content


class ToolCallError(Exception):
    pass


def build_server(container: Container) -> Server:
    server = Server(APP_NAME)
    dispatcher = container.dispatcher

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        specs = await asyncio.to_thread(dispatcher.list_tools)
        return [
            types.Tool(
                name=spec.name,
                description=spec.description,
                inputSchema=spec.input_schema(),
            )
            for spec in specs
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[Content]:
        result = await asyncio.to_thread(dispatcher.call, name, arguments or {})
        if result.is_error:
            # the server turns raised errors into isError results
            raise ToolCallError(result.first_text)
        return to_mcp_content(result)

    return server


async def serve_stdio(container: Container) -> None:
    server = build_server(container)
    info = await asyncio.to_thread(container.license.resolve)
    logger.info(
        "%s v%s ready (license: %s, %d tools)",
        APP_NAME,
        APP_VERSION,
        info.tier.value.upper(),
        len(container.policy.tools_for(info.tier)),
    )
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
