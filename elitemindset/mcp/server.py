"""MCP Server implementation for the coaching tools.

A fresh ``Server`` is built for every SSE session. Both variants register the
same tool-call dispatch; elite-mindset additionally serves the widget HTML as
a resource and resource template.
"""

from collections.abc import Callable
from functools import partial

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import (
    INVALID_PARAMS,
    CallToolRequest,
    ErrorData,
    ReadResourceRequest,
    ReadResourceResult,
    Resource,
    ResourceTemplate,
    ServerResult,
    Tool,
)

from .. import __version__
from ..config import Variant, get_settings
from .handlers import handle_tool_call
from .resources import load_widget_html, widget_contents, widget_resource_templates, widget_resources
from .tools import COACH_TOOLS, ELITE_MINDSET_TOOLS, TEMPLATE_URI

SERVER_NAMES = {
    Variant.COACH: "elite-mindset-coach",
    Variant.ELITE_MINDSET: "elite-mindset",
}

ServerFactory = Callable[[], Server]


def get_all_tools(variant: Variant) -> list[Tool]:
    """Get all tools advertised by a variant."""
    if variant == Variant.COACH:
        return list(COACH_TOOLS)
    return list(ELITE_MINDSET_TOOLS)


def create_mcp_server(variant: Variant, widget_html: str | None = None) -> Server:
    """Create an MCP server for one session.

    ``widget_html`` is required for the elite-mindset variant and ignored by
    the coach variant.
    """
    if variant == Variant.ELITE_MINDSET and widget_html is None:
        raise ValueError("widget_html is required for the elite-mindset server")

    server = Server(SERVER_NAMES[variant], version=__version__)
    tools = get_all_tools(variant)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return tools

    # Registered directly so the result keeps structuredContent and _meta as built.
    async def call_tool(request: CallToolRequest) -> ServerResult:
        result = await handle_tool_call(variant, request.params.name, request.params.arguments)
        return ServerResult(result)

    server.request_handlers[CallToolRequest] = call_tool

    if variant == Variant.ELITE_MINDSET:
        _register_widget_resources(server, widget_html)

    return server


def _register_widget_resources(server: Server, widget_html: str) -> None:
    resources = widget_resources()
    resource_templates = widget_resource_templates()

    @server.list_resources()
    async def list_resources() -> list[Resource]:
        return resources

    @server.list_resource_templates()
    async def list_resource_templates() -> list[ResourceTemplate]:
        return resource_templates

    async def read_resource(request: ReadResourceRequest) -> ServerResult:
        uri = str(request.params.uri)
        if uri != TEMPLATE_URI:
            raise McpError(ErrorData(code=INVALID_PARAMS, message=f"Unknown resource: {uri}"))
        return ServerResult(ReadResourceResult(contents=[widget_contents(widget_html)]))

    server.request_handlers[ReadResourceRequest] = read_resource


def server_factory(variant: Variant, widget_html: str | None = None) -> ServerFactory:
    """Bind a variant (and its widget) into a zero-argument server factory."""
    return partial(create_mcp_server, variant, widget_html)


async def run_mcp_server(variant: Variant) -> None:
    """Run a single MCP server over stdio."""
    widget_html = None
    if variant == Variant.ELITE_MINDSET:
        widget_html = load_widget_html(get_settings().assets_dir)

    server = create_mcp_server(variant, widget_html)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )
